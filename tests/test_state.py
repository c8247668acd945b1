"""View state transitions: like flipping, row merging, feed and thread list edits."""

from eifound.client.state import FeedState, ThreadState, flip_like, merge_row, restore_like
from eifound.schemas.comment import Comment
from eifound.schemas.profile import DisplayProfile
from eifound.schemas.tweet import Tweet


def make_tweet(tweet_id="t1", likes=5, liked=False, **extra):
    return Tweet(id=tweet_id, user_id="user-2", content="hi", likes_count=likes, user_liked=liked, **extra)


def test_flip_like_from_not_liked():
    tweet = make_tweet(likes=5, liked=False)
    snapshot = flip_like(tweet)
    assert (tweet.likes_count, tweet.user_liked) == (6, True)
    assert (snapshot.likes_count, snapshot.liked) == (5, False)


def test_flip_like_from_liked():
    tweet = make_tweet(likes=3, liked=True)
    flip_like(tweet)
    assert (tweet.likes_count, tweet.user_liked) == (2, False)


def test_like_unlike_like_nets_one_like():
    tweet = make_tweet(likes=5, liked=False)
    flip_like(tweet)
    flip_like(tweet)
    flip_like(tweet)
    assert (tweet.likes_count, tweet.user_liked) == (6, True)


def test_restore_like_is_exact():
    tweet = make_tweet(likes=5, liked=False)
    snapshot = flip_like(tweet)
    restore_like(tweet, snapshot)
    assert (tweet.likes_count, tweet.user_liked) == (5, False)


def test_merge_row_replaces_counters_and_keeps_local_fields():
    author = DisplayProfile(user_id="user-2", display_name="Grace")
    tweet = make_tweet(likes=6, liked=True, profiles=author, comments_count=2)

    changed = merge_row(tweet, {"id": "t1", "likes_count": 9})

    assert changed == ["likes_count"]
    assert tweet.likes_count == 9
    assert tweet.user_liked is True
    assert tweet.comments_count == 2
    assert tweet.profiles == author
    assert tweet.content == "hi"


def test_merge_row_ignores_unknown_columns():
    tweet = make_tweet()
    assert merge_row(tweet, {"id": "t1", "not_a_column": 1}) == []


def test_merge_row_parses_timestamps():
    tweet = make_tweet()
    merge_row(tweet, {"updated_at": "2025-07-16T12:00:00+00:00"})
    assert tweet.updated_at.year == 2025


def test_feed_prepend_puts_new_tweets_on_top():
    feed = FeedState()
    feed.prepend(make_tweet("p1"))
    feed.prepend(make_tweet("p2"))
    assert feed.ids() == ["p2", "p1"]


def test_feed_prepend_ignores_duplicates():
    feed = FeedState([make_tweet("p1")])
    assert feed.prepend(make_tweet("p1")) is False
    assert feed.ids() == ["p1"]


def test_feed_update_keeps_item_identity():
    original = make_tweet("p1", likes=1)
    feed = FeedState([original, make_tweet("p2")])

    assert feed.update({"id": "p1", "likes_count": 4, "comments_count": 1})

    assert feed.tweets[0] is original
    assert original.likes_count == 4
    assert original.comments_count == 1


def test_feed_update_for_unknown_tweet_is_a_no_op():
    feed = FeedState([make_tweet("p1")])
    assert feed.update({"id": "nope", "likes_count": 4}) is False


def test_feed_remove():
    feed = FeedState([make_tweet("p1"), make_tweet("p2")])
    assert feed.remove("p1")
    assert feed.ids() == ["p2"]
    assert feed.remove("p1") is False


def test_feed_load_replaces_contents_in_place():
    feed = FeedState()
    tweets_list = feed.tweets
    feed.load([make_tweet("p1")])
    assert feed.tweets is tweets_list
    assert feed.ids() == ["p1"]


def test_thread_append_and_remove():
    thread = ThreadState(make_tweet("t1"))
    first = Comment(id="c1", user_id="user-1", tweet_id="t1", content="one")
    second = Comment(id="c2", user_id="user-2", tweet_id="t1", content="two")

    assert thread.append(first)
    assert thread.append(second)
    assert thread.append(first) is False
    assert [c.id for c in thread.comments] == ["c1", "c2"]

    assert thread.remove("c1")
    assert [c.id for c in thread.comments] == ["c2"]


def test_thread_update_tweet_only_for_its_own_tweet():
    thread = ThreadState(make_tweet("t1", likes=2))
    assert thread.update_tweet({"id": "other", "likes_count": 50}) is False
    assert thread.update_tweet({"id": "t1", "likes_count": 3, "comments_count": 4})
    assert (thread.tweet.likes_count, thread.tweet.comments_count) == (3, 4)
