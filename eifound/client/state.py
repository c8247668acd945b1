from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel

from eifound.schemas.comment import Comment
from eifound.schemas.tweet import Tweet

# Fields that exist only in local view state; server rows never overwrite them
LOCAL_ONLY_FIELDS = frozenset({"id", "profiles", "user_liked"})


@dataclass(frozen=True)
class LikeSnapshot:
    liked: bool
    likes_count: int


def flip_like(tweet: Tweet) -> LikeSnapshot:
    """Flip the liked flag and move the counter by one. Returns the state it replaced."""
    snapshot = LikeSnapshot(tweet.user_liked, tweet.likes_count)
    tweet.likes_count = snapshot.likes_count - 1 if snapshot.liked else snapshot.likes_count + 1
    tweet.user_liked = not snapshot.liked
    return snapshot


def restore_like(tweet: Tweet, snapshot: LikeSnapshot) -> None:
    tweet.user_liked = snapshot.liked
    tweet.likes_count = snapshot.likes_count


def merge_row(item: BaseModel, row: dict) -> List[str]:
    """Copy server columns from a change payload onto an existing item, in place."""
    fields = type(item).model_fields
    changes = {k: v for k, v in row.items() if k in fields and k not in LOCAL_ONLY_FIELDS}
    if not changes:
        return []
    validated = type(item).model_validate({**item.model_dump(), **changes})
    for name in changes:
        setattr(item, name, getattr(validated, name))
    return sorted(changes)


class FeedState:
    """Tweets in display order, newest first."""

    def __init__(self, tweets: Optional[List[Tweet]] = None):
        self.tweets: List[Tweet] = list(tweets or [])

    def load(self, tweets: List[Tweet]) -> None:
        self.tweets[:] = tweets

    def find(self, tweet_id: str) -> Optional[Tweet]:
        return next((t for t in self.tweets if t.id == tweet_id), None)

    def ids(self) -> List[str]:
        return [t.id for t in self.tweets]

    def prepend(self, tweet: Tweet) -> bool:
        if self.find(tweet.id) is not None:
            return False
        self.tweets.insert(0, tweet)
        return True

    def update(self, row: dict) -> bool:
        tweet = self.find(row.get("id"))
        if tweet is None:
            return False
        merge_row(tweet, row)
        return True

    def remove(self, tweet_id: str) -> bool:
        for index, tweet in enumerate(self.tweets):
            if tweet.id == tweet_id:
                del self.tweets[index]
                return True
        return False


class ThreadState:
    """One tweet and its comments, oldest comment first."""

    def __init__(self, tweet: Optional[Tweet] = None, comments: Optional[List[Comment]] = None):
        self.tweet = tweet
        self.comments: List[Comment] = list(comments or [])

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        return next((c for c in self.comments if c.id == comment_id), None)

    def append(self, comment: Comment) -> bool:
        if self.find_comment(comment.id) is not None:
            return False
        self.comments.append(comment)
        return True

    def update_tweet(self, row: dict) -> bool:
        if self.tweet is None or self.tweet.id != row.get("id"):
            return False
        merge_row(self.tweet, row)
        return True

    def update_comment(self, row: dict) -> bool:
        comment = self.find_comment(row.get("id"))
        if comment is None:
            return False
        merge_row(comment, row)
        return True

    def remove(self, comment_id: str) -> bool:
        for index, comment in enumerate(self.comments):
            if comment.id == comment_id:
                del self.comments[index]
                return True
        return False
