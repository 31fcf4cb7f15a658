"""QwikSale HTTP server: FastAPI application, routes and request-scoped services."""
