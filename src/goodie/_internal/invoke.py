"""Call lifecycle methods that may be ``def`` or ``async def``.

Page methods (``init``, ``action``, ``display``...) are written either
way. The render engine awaits them through this single helper so the
sync/async check lives in one place.
"""

import inspect
from typing import Any


async def invoke(method: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *method* and await the result if it is awaitable."""
    result = method(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
