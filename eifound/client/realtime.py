"""Realtime change feed: subscription wiring and merging of row changes into view state.

Each notification is patched into the in-memory lists in place. Nothing is
re-fetched wholesale and nothing is re-sorted; a late INSERT simply lands at
the head (feed) or tail (thread).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Set
import asyncio
import logging

from eifound.client.state import FeedState, ThreadState
from eifound.errors import EIFoundError
from eifound.schemas.comment import Comment
from eifound.schemas.profile import DisplayProfile
from eifound.schemas.tweet import Tweet

logger = logging.getLogger(__name__)

AuthorLoader = Callable[[str], Awaitable[Optional[DisplayProfile]]]


@dataclass(frozen=True)
class ChangeEvent:
    type: str
    table: str
    record: Dict = field(default_factory=dict)
    old_record: Dict = field(default_factory=dict)


def parse_change(payload: Dict) -> ChangeEvent:
    """Normalize a postgres_changes payload from the realtime client."""
    data = payload.get("data", payload)
    return ChangeEvent(
        type=(data.get("type") or data.get("eventType") or "").upper(),
        table=data.get("table", ""),
        record=data.get("record") or data.get("new") or {},
        old_record=data.get("old_record") or data.get("old") or {},
    )


@dataclass
class _Binding:
    table: str
    event: str
    handler: Callable[[ChangeEvent], Awaitable[None]]
    filter: Optional[str] = None


class RealtimeSubscription:
    """One realtime channel with its postgres_changes bindings."""

    def __init__(self, supabase, name: str):
        self._supabase = supabase
        self.name = name
        self._bindings: List[_Binding] = []
        self._channel = None
        self._tasks: Set[asyncio.Task] = set()
        self.status: Optional[str] = None

    def on(self, table: str, event: str, handler: Callable[[ChangeEvent], Awaitable[None]],
           filter: Optional[str] = None) -> "RealtimeSubscription":
        self._bindings.append(_Binding(table, event, handler, filter))
        return self

    @property
    def is_open(self) -> bool:
        return self._channel is not None

    def _dispatcher(self, handler):
        # The realtime client calls back synchronously; merging may await a profile lookup
        def callback(payload):
            task = asyncio.create_task(handler(parse_change(payload)))
            self._tasks.add(task)
            task.add_done_callback(self._on_merge_done)
        return callback

    def _on_merge_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Realtime change on {self.name} could not be applied: {exc}", exc_info=exc)

    def _on_status(self, status, err=None):
        self.status = str(status)
        if err:
            logger.error(f"Realtime channel {self.name} error: {err}")
        else:
            logger.info(f"Realtime subscription {self.name} status: {status}")

    async def open(self) -> None:
        channel = self._supabase.channel(self.name)
        for binding in self._bindings:
            channel.on_postgres_changes(
                binding.event,
                callback=self._dispatcher(binding.handler),
                table=binding.table,
                schema="public",
                filter=binding.filter,
            )
        await channel.subscribe(self._on_status)
        self._channel = channel

    async def drain(self) -> None:
        """Wait for merges already scheduled by incoming notifications."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        if self._channel is not None:
            channel, self._channel = self._channel, None
            await self._supabase.remove_channel(channel)
        for task in list(self._tasks):
            task.cancel()


class RealtimePatchApplier(ABC):
    def __init__(self, load_author: AuthorLoader):
        self._load_author = load_author

    async def author_for(self, user_id: Optional[str]) -> Optional[DisplayProfile]:
        # A failed lookup still shows the item, with a placeholder author
        if not user_id:
            return None
        try:
            return await self._load_author(user_id)
        except EIFoundError as e:
            logger.error(f"Error fetching profile for {user_id}: {e.message}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error fetching profile for {user_id}: {str(e)}", exc_info=True)
            return None

    @abstractmethod
    async def apply(self, change: ChangeEvent) -> bool:
        ...


class FeedPatchApplier(RealtimePatchApplier):
    def __init__(self, state: FeedState, load_author: AuthorLoader):
        super().__init__(load_author)
        self.state = state

    async def apply(self, change: ChangeEvent) -> bool:
        if change.type == "INSERT":
            if self.state.find(change.record.get("id")) is not None:
                return False
            author = await self.author_for(change.record.get("user_id"))
            tweet = Tweet.model_validate({**change.record, "profiles": author, "user_liked": False})
            logger.info(f"New tweet received: {tweet.id}")
            return self.state.prepend(tweet)
        if change.type == "UPDATE":
            return self.state.update(change.record)
        if change.type == "DELETE":
            return self.state.remove(change.old_record.get("id"))
        return False


class ThreadPatchApplier(RealtimePatchApplier):
    def __init__(self, state: ThreadState, load_author: AuthorLoader):
        super().__init__(load_author)
        self.state = state

    async def apply(self, change: ChangeEvent) -> bool:
        if change.table == "tweets":
            return change.type == "UPDATE" and self.state.update_tweet(change.record)

        if change.type == "INSERT":
            if self.state.find_comment(change.record.get("id")) is not None:
                return False
            author = await self.author_for(change.record.get("user_id"))
            comment = Comment.model_validate({**change.record, "profiles": author})
            logger.info(f"New comment received: {comment.id}")
            return self.state.append(comment)
        if change.type == "UPDATE":
            return self.state.update_comment(change.record)
        if change.type == "DELETE":
            return self.state.remove(change.old_record.get("id"))
        return False
