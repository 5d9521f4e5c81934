"""HTTP layer: routes, envelopes and the FastAPI app."""
