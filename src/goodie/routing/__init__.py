"""Routing: exact-match path table from page path to handler factory."""

from goodie.routing.registry import HandlerFactory, Registration, Registry, page_path

__all__ = ["HandlerFactory", "Registration", "Registry", "page_path"]
