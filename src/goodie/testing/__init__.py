"""Test utilities for goodie servers.

::

    from goodie.testing import TestClient
"""

from goodie.testing.client import TestClient

__all__ = ["TestClient"]
