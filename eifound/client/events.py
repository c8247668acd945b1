from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar, Union
import inspect
import logging

logger = logging.getLogger(__name__)


# --- Events ---
@dataclass(frozen=True)
class TweetPosted:
    tweet: dict


@dataclass(frozen=True)
class TweetDeleted:
    tweet_id: str


@dataclass(frozen=True)
class CommentPosted:
    tweet_id: str
    comment: dict


@dataclass(frozen=True)
class SignedOut:
    user_id: str


# Navigation signals, published by the navbar
@dataclass(frozen=True)
class OpenComposer:
    pass


@dataclass(frozen=True)
class ToggleSidebar:
    pass


E = TypeVar("E")
Handler = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    """Explicit publish/subscribe between views; subscribers hold the unsubscribe handle."""

    def __init__(self):
        self._handlers: Dict[type, List[Handler]] = {}

    def subscribe(self, event_type: Type[E], handler: Callable[[E], Any]) -> Callable[[], None]:
        self._handlers.setdefault(event_type, []).append(handler)

        def unsubscribe():
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: Any) -> None:
        # Copy so a handler may unsubscribe while being called
        for handler in list(self._handlers.get(type(event), [])):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Handler for {type(event).__name__} failed: {str(e)}", exc_info=True)
