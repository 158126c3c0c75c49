"""HTTP layer: the FastAPI app (``api.main``) and its server lifecycle (``api.server``)."""
