from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A transient, dismissible message for the user (a toast)."""
    title: str
    description: str
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class Notifier:
    def __init__(self, sink: Optional[Callable[[Notification], None]] = None):
        self.history: List[Notification] = []
        self._sink = sink

    def notify(self, notification: Notification) -> None:
        self.history.append(notification)
        if self._sink is not None:
            self._sink(notification)

    def success(self, title: str, description: str) -> None:
        self.notify(Notification(title, description))

    def error(self, description: str, title: str = "Error") -> None:
        logger.warning(f"{title}: {description}")
        self.notify(Notification(title, description, variant="destructive"))

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
