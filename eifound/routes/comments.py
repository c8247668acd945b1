from fastapi import APIRouter, Depends
from eifound.schemas.comment import CommentCreate
from eifound.dependencies.auth import user_supabase_client
from eifound.services import comments as comment_service

router = APIRouter()

# Edit own comment
@router.put("/{comment_id}")
async def update_comment(comment_id: str, comment: CommentCreate, context=Depends(user_supabase_client)):
    return await comment_service.update_comment(
        context["supabase"], comment_id, context["user_id"], comment.content,
    )

# Delete own comment
@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, context=Depends(user_supabase_client)):
    await comment_service.delete_comment(context["supabase"], comment_id, context["user_id"])
    return {"message": "Comment deleted successfully"}
