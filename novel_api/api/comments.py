"""
Comment API router
"""

from fastapi import APIRouter, Depends, Query, Response, status
from pymongo.database import Database
from typing import Optional

from novel_api.core.database import get_db
from novel_api.core.sanitize import Sanitizer, get_sanitizer
from novel_api.core.security import get_bearer_token, get_token_claims
from novel_api.schemas import CommentCreate, CommentCreated, CommentListResponse
from novel_api.schemas.comment import NOVEL_LEVEL_CHAPTER
from novel_api.services import comment_service

# Handlers are plain def: pymongo is blocking, so FastAPI runs them in its threadpool
router = APIRouter()


@router.post("", response_model=CommentCreated)
def create_comment(
    comment_data: CommentCreate,
    claims: dict = Depends(get_token_claims),
    sanitizer: Sanitizer = Depends(get_sanitizer),
    db: Database = Depends(get_db),
):
    """Post a comment on a chapter"""
    comment_id = comment_service.create_comment(
        db,
        username=comment_data.username,
        comment=comment_data.comment,
        novel_id=comment_data.novel_id,
        chapter_number=comment_data.chapter_number,
        claims=claims,
        sanitizer=sanitizer,
    )
    return CommentCreated(id=comment_id)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: str,
    token: Optional[str] = Depends(get_bearer_token),
    db: Database = Depends(get_db),
):
    """Delete one of your own comments"""
    comment_service.delete_comment(db, comment_id, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=CommentListResponse)
def list_comments(
    novel_id: Optional[str] = Query(None, alias="novelId"),
    chapter_number: int = Query(NOVEL_LEVEL_CHAPTER, alias="chapterNumber"),
    db: Database = Depends(get_db),
):
    """Comments of a chapter"""
    return CommentListResponse(comments=comment_service.list_comments(db, novel_id, chapter_number))
