"""HTTP layer: routes, middleware and error handling."""
