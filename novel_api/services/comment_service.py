"""
Comment service
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database

from novel_api.core.database import comments_collection
from novel_api.core.exceptions import NotFound, Unauthorized, ValidationError
from novel_api.core.sanitize import Sanitizer, strip_markup
from novel_api.core.security import TOKEN_ERROR_MESSAGE, verify_token
from novel_api.schemas.comment import NOVEL_LEVEL_CHAPTER, CommentResponse

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


def _to_object_id(comment_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(comment_id)
    except (InvalidId, TypeError):
        return None


def to_response(doc: Dict[str, Any]) -> CommentResponse:
    return CommentResponse(
        id=str(doc["_id"]),
        username=doc["username"],
        comment=doc["comment"],
        novel_id=doc["novelId"],
        chapter_number=doc["chapterNumber"],
        created_at=doc["createdAt"],
    )


def create_comment(
    db: Database,
    username: str,
    comment: str,
    novel_id: str,
    chapter_number: int,
    claims: Dict[str, Any],
    sanitizer: Sanitizer = strip_markup,
) -> str:
    """Store a comment written by the token holder"""
    if claims.get("username") != username:
        logger.warning(f"Comment rejected: token does not belong to {username!r}")
        raise Unauthorized(TOKEN_ERROR_MESSAGE)

    text = sanitizer(comment)
    if not text:
        raise ValidationError("Invalid comment", {"comment": "Comment must not be empty"})
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(
            "Invalid comment",
            {"comment": f"Comment must be at most {MAX_COMMENT_LENGTH} characters"},
        )

    result = comments_collection(db).insert_one({
        "username": username,
        "comment": text,
        "novelId": novel_id,
        "chapterNumber": chapter_number,
        "createdAt": datetime.now(timezone.utc),
    })
    return str(result.inserted_id)


def delete_comment(db: Database, comment_id: str, token: Optional[str]) -> None:
    """Delete a comment; only its author may do so"""
    if not token:
        raise Unauthorized(TOKEN_ERROR_MESSAGE)

    oid = _to_object_id(comment_id)
    collection = comments_collection(db)
    target = collection.find_one({"_id": oid}) if oid is not None else None
    if target is None:
        raise NotFound("Comment does not exist.")

    payload = verify_token(token, "access")
    if payload is None or payload.get("username") != target.get("username"):
        raise Unauthorized(TOKEN_ERROR_MESSAGE)

    collection.delete_one({"_id": oid})


def list_comments(
    db: Database,
    novel_id: Optional[str],
    chapter_number: int = NOVEL_LEVEL_CHAPTER,
) -> List[CommentResponse]:
    """All comments of one chapter of a novel"""
    if not novel_id:
        raise NotFound("Novel does not exist.")
    cursor = comments_collection(db).find({"novelId": novel_id, "chapterNumber": chapter_number})
    return [to_response(doc) for doc in cursor]
