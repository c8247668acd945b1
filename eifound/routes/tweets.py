from fastapi import APIRouter, Depends
from typing import List
from eifound.schemas.tweet import Tweet, TweetCreate
from eifound.schemas.comment import Comment, CommentCreate
from eifound.dependencies.auth import user_supabase_client
from eifound.services import comments as comment_service
from eifound.services import likes as like_service
from eifound.services import tweets as tweet_service

router = APIRouter()

# Feed, newest first
@router.get("", response_model=List[Tweet])
async def get_feed(context=Depends(user_supabase_client)):
    return await tweet_service.list_feed(context["supabase"], context["user_id"])

# Create tweet
@router.post("", status_code=201)
async def create_tweet(tweet: TweetCreate, context=Depends(user_supabase_client)):
    return await tweet_service.create_tweet(context["supabase"], context["user_id"], tweet.content)

# Single tweet
@router.get("/{tweet_id}", response_model=Tweet)
async def get_tweet(tweet_id: str, context=Depends(user_supabase_client)):
    return await tweet_service.get_tweet(context["supabase"], tweet_id, context["user_id"])

# Delete own tweet
@router.delete("/{tweet_id}")
async def delete_tweet(tweet_id: str, context=Depends(user_supabase_client)):
    await tweet_service.delete_tweet(context["supabase"], tweet_id, context["user_id"])
    return {"message": "Tweet deleted successfully"}

# Like / unlike
@router.post("/{tweet_id}/like")
async def like_tweet(tweet_id: str, context=Depends(user_supabase_client)):
    await like_service.like_tweet(context["supabase"], tweet_id, context["user_id"])
    return {"liked": True}

@router.delete("/{tweet_id}/like")
async def unlike_tweet(tweet_id: str, context=Depends(user_supabase_client)):
    await like_service.unlike_tweet(context["supabase"], tweet_id, context["user_id"])
    return {"liked": False}

# Thread comments, oldest first
@router.get("/{tweet_id}/comments", response_model=List[Comment])
async def get_comments(tweet_id: str, context=Depends(user_supabase_client)):
    return await comment_service.list_comments(context["supabase"], tweet_id)

@router.post("/{tweet_id}/comments", status_code=201)
async def create_comment(tweet_id: str, comment: CommentCreate, context=Depends(user_supabase_client)):
    return await comment_service.create_comment(
        context["supabase"], tweet_id, context["user_id"], comment.content,
    )
