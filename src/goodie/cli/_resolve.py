"""Server import resolution: ``"module:attribute"`` strings to Server instances."""

import importlib

from goodie.app import Server


def resolve_server(import_string: str) -> Server:
    """Resolve an import string to a goodie Server instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"server"`` (``"myapp"`` resolves to ``myapp.server``).
    A callable that is not a Server is treated as a factory and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a goodie ``Server``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "server"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Server):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Server):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a goodie.Server instance"
        raise TypeError(msg)

    return obj
