"""HTTP primitives: request, response, headers, query and form data."""
