"""Request pipeline: dispatch, page rendering and ASGI response sending."""
