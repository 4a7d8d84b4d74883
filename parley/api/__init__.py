"""HTTP surface: FastAPI app, webhook route, health and metrics."""
