__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path
from typing import Any

from .filesystem import RealFileSystem
from .messaging import MessageBus, MessageStore

# --- Composition root for the shared feedback bus ---
# Packages register their own catalogs with `natives_store.add_root(...)`;
# the built-in catalogs shipped with 'common' are the lowest priority.
natives_store = MessageStore()

_assets_path = Path(__file__).parent / "assets" / "messages"
if _assets_path.is_dir():
    natives_store.add_root(_assets_path)

bus = MessageBus(store=natives_store)


def natives_operator(msg_id: str, **kwargs: Any) -> str:
    """Render a message id to its final string without emitting it."""
    return bus.render_to_string(msg_id, **kwargs)


__all__ = ["bus", "natives_store", "natives_operator", "RealFileSystem"]
