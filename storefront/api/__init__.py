"""HTTP layer: routers, schemas, middleware and exception handlers."""
