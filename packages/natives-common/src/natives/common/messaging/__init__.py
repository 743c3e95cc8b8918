from .bus import MessageBus
from .store import MessageStore
from .protocols import Renderer

__all__ = ["MessageBus", "MessageStore", "Renderer"]
