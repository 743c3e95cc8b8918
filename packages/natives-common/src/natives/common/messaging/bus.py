from typing import Any, Optional

from .protocols import Renderer
from .store import MessageStore


class MessageBus:
    """
    User-facing feedback channel.

    Components report by message id; the bus renders the id through its
    store and forwards the text to the installed renderer. Without a
    renderer every message is dropped, which keeps library use quiet.
    """

    def __init__(self, store: Optional[MessageStore] = None):
        self._store = store or MessageStore()
        self._renderer: Optional[Renderer] = None

    @property
    def store(self) -> MessageStore:
        return self._store

    def set_renderer(self, renderer: Optional[Renderer]) -> None:
        self._renderer = renderer

    def _render(self, level: str, msg_id: str, **kwargs: Any) -> None:
        if not self._renderer:
            return
        message = self._store.get(msg_id, **kwargs)
        self._renderer.render(message, level)

    def debug(self, msg_id: str, **kwargs: Any) -> None:
        self._render("debug", msg_id, **kwargs)

    def info(self, msg_id: str, **kwargs: Any) -> None:
        self._render("info", msg_id, **kwargs)

    def success(self, msg_id: str, **kwargs: Any) -> None:
        self._render("success", msg_id, **kwargs)

    def warning(self, msg_id: str, **kwargs: Any) -> None:
        self._render("warning", msg_id, **kwargs)

    def error(self, msg_id: str, **kwargs: Any) -> None:
        self._render("error", msg_id, **kwargs)

    def render_to_string(self, msg_id: str, **kwargs: Any) -> str:
        return self._store.get(msg_id, **kwargs)
