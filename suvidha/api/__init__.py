"""HTTP API layer: routers, schemas and error handling."""
