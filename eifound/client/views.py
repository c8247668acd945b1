from typing import Optional
import logging

from eifound.client.context import SessionContext
from eifound.client.events import (
    CommentPosted,
    EventBus,
    OpenComposer,
    ToggleSidebar,
    TweetDeleted,
    TweetPosted,
)
from eifound.client.notifications import Notifier
from eifound.client.optimistic import OptimisticMutator
from eifound.client.realtime import FeedPatchApplier, RealtimeSubscription, ThreadPatchApplier
from eifound.client.state import FeedState, LikeSnapshot, ThreadState, flip_like, restore_like
from eifound.errors import EIFoundError, InputValidationError
from eifound.schemas.comment import Comment
from eifound.schemas.profile import DisplayProfile
from eifound.schemas.tweet import Tweet
from eifound.services import comments as comment_service
from eifound.services import likes as like_service
from eifound.services import tweets as tweet_service
from eifound.services.profiles import fetch_display_profile

logger = logging.getLogger(__name__)


class _View:
    def __init__(self, supabase, session: SessionContext, notifier: Notifier,
                 mutator: Optional[OptimisticMutator] = None, bus: Optional[EventBus] = None):
        self.supabase = supabase
        self.session = session
        self.notifier = notifier
        self.mutator = mutator or OptimisticMutator()
        self.bus = bus or session.bus
        self.loading = True
        self.closed = False

    async def load_author(self, user_id: str) -> Optional[DisplayProfile]:
        return await fetch_display_profile(self.supabase, user_id)

    def own_author(self) -> Optional[DisplayProfile]:
        user = self.session.user
        if user is None:
            return None
        return DisplayProfile(user_id=user.id, display_name=user.name, avatar_url=user.avatar)

    def report(self, description: str) -> None:
        # Errors for a view that has been closed have nobody to show them to
        if not self.closed:
            self.notifier.error(description)

    async def toggle_like(self, tweet: Optional[Tweet]) -> bool:
        """Optimistically like or unlike; on failure the tweet is put back exactly as it was."""
        user_id = self.session.user_id
        if tweet is None or user_id is None:
            return False

        async def commit(snapshot: LikeSnapshot):
            if snapshot.liked:
                await like_service.unlike_tweet(self.supabase, tweet.id, user_id)
            else:
                await like_service.like_tweet(self.supabase, tweet.id, user_id)

        try:
            await self.mutator.run(
                tweet.id,
                apply=lambda: flip_like(tweet),
                revert=lambda snapshot: restore_like(tweet, snapshot),
                commit=commit,
            )
        except EIFoundError:
            # Rolled back, so the flag now shows what the failed write tried to change
            self.report("Failed to unlike tweet" if tweet.user_liked else "Failed to like tweet")
            return False
        return True


class FeedView(_View):
    """The home feed: all tweets, newest first, kept live by the tweets change feed."""

    def __init__(self, supabase, session: SessionContext, notifier: Notifier,
                 mutator: Optional[OptimisticMutator] = None, bus: Optional[EventBus] = None):
        super().__init__(supabase, session, notifier, mutator, bus)
        self.state = FeedState()
        self.applier = FeedPatchApplier(self.state, self.load_author)
        self.subscription = RealtimeSubscription(supabase, "tweets-changes")
        for event in ("INSERT", "UPDATE", "DELETE"):
            self.subscription.on("tweets", event, self.applier.apply)
        self.composer_open = False
        self.sidebar_open = False
        self._unsubscribers = []

    @property
    def tweets(self):
        return self.state.tweets

    async def open(self) -> None:
        await self.load()
        await self.subscription.open()
        self._unsubscribers = [
            self.bus.subscribe(TweetPosted, self._on_tweet_posted),
            self.bus.subscribe(OpenComposer, self._on_open_composer),
            self.bus.subscribe(ToggleSidebar, self._on_toggle_sidebar),
        ]

    async def load(self) -> None:
        try:
            tweets = await tweet_service.list_feed(self.supabase, self.session.user_id)
        except EIFoundError as e:
            logger.error(f"Error fetching tweets: {e.message}")
            self.report("Failed to load tweets")
            return
        finally:
            self.loading = False
        self.state.load(tweets)

    async def _on_tweet_posted(self, event: TweetPosted) -> None:
        self.composer_open = False
        if self.closed or self.state.find(event.tweet["id"]) is not None:
            return
        self.state.prepend(Tweet.model_validate({**event.tweet, "profiles": self.own_author()}))

    def _on_open_composer(self, event: OpenComposer) -> None:
        self.composer_open = True

    def _on_toggle_sidebar(self, event: ToggleSidebar) -> None:
        self.sidebar_open = not self.sidebar_open

    async def like(self, tweet_id: str) -> bool:
        return await self.toggle_like(self.state.find(tweet_id))

    async def delete_tweet(self, tweet_id: str) -> bool:
        try:
            await tweet_service.delete_tweet(self.supabase, tweet_id, self.session.user_id)
        except EIFoundError:
            self.report("Failed to delete tweet")
            return False
        self.state.remove(tweet_id)
        self.notifier.success("Success", "Tweet deleted successfully")
        await self.bus.publish(TweetDeleted(tweet_id))
        return True

    async def close(self) -> None:
        self.closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        await self.subscription.close()


class ThreadView(_View):
    """A single tweet with its comments, kept live by a per-tweet channel."""

    def __init__(self, supabase, session: SessionContext, notifier: Notifier, tweet_id: str,
                 mutator: Optional[OptimisticMutator] = None, bus: Optional[EventBus] = None):
        super().__init__(supabase, session, notifier, mutator, bus)
        self.tweet_id = tweet_id
        self.state = ThreadState()
        self.applier = ThreadPatchApplier(self.state, self.load_author)
        self.subscription = RealtimeSubscription(supabase, f"comments_{tweet_id}")
        comment_filter = f"tweet_id=eq.{tweet_id}"
        for event in ("INSERT", "UPDATE"):
            self.subscription.on("comments", event, self.applier.apply, filter=comment_filter)
        # Delete payloads carry only the primary key, so they cannot be filtered by tweet;
        # ids not in this thread are ignored
        self.subscription.on("comments", "DELETE", self.applier.apply)
        self.subscription.on("tweets", "UPDATE", self.applier.apply, filter=f"id=eq.{tweet_id}")

    @property
    def tweet(self) -> Optional[Tweet]:
        return self.state.tweet

    @property
    def comments(self):
        return self.state.comments

    async def open(self) -> None:
        await self.load()
        await self.subscription.open()

    async def load(self) -> None:
        try:
            self.state.tweet = await tweet_service.get_tweet(
                self.supabase, self.tweet_id, self.session.user_id,
            )
            self.state.comments[:] = await comment_service.list_comments(self.supabase, self.tweet_id)
        except EIFoundError as e:
            logger.error(f"Error fetching thread {self.tweet_id}: {e.message}")
            self.report("Failed to load comments")
        finally:
            self.loading = False

    async def like(self) -> bool:
        return await self.toggle_like(self.state.tweet)

    async def post_comment(self, content: str) -> Optional[dict]:
        try:
            comment_service.validate_comment_content(content)
        except InputValidationError as e:
            self.report(e.message)
            return None

        try:
            row = await comment_service.create_comment(
                self.supabase, self.tweet_id, self.session.user_id, content,
            )
        except EIFoundError:
            self.report("Failed to send comment")
            return None

        if not self.closed:
            self.state.append(Comment.model_validate({**row, "profiles": self.own_author()}))
        await self.bus.publish(CommentPosted(self.tweet_id, row))
        return row

    async def delete_comment(self, comment_id: str) -> bool:
        try:
            await comment_service.delete_comment(self.supabase, comment_id, self.session.user_id)
        except EIFoundError:
            self.report("Failed to delete comment")
            return False
        self.state.remove(comment_id)
        return True

    async def close(self) -> None:
        self.closed = True
        await self.subscription.close()


class Composer:
    """Tweet composer; announces each posted tweet on the bus."""

    def __init__(self, supabase, session: SessionContext, notifier: Notifier,
                 bus: Optional[EventBus] = None):
        self.supabase = supabase
        self.session = session
        self.notifier = notifier
        self.bus = bus or session.bus

    async def submit(self, content: str) -> Optional[dict]:
        # Length and emptiness are checked before anything is sent
        try:
            tweet_service.validate_tweet_content(content)
        except InputValidationError as e:
            self.notifier.error(e.message)
            return None

        try:
            row = await tweet_service.create_tweet(self.supabase, self.session.user_id, content)
        except EIFoundError:
            self.notifier.error("Failed to send tweet")
            return None

        self.notifier.success("Success", "Tweet posted successfully!")
        await self.bus.publish(TweetPosted(row))
        return row
