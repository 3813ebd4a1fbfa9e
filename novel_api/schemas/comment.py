"""
Comment Pydantic schemas
"""

from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import List

NOVEL_LEVEL_CHAPTER = -1


class CommentCreate(BaseModel):
    """Comment creation request"""
    username: str = Field(..., min_length=1)
    comment: str = Field(..., min_length=1)
    novel_id: str = Field(..., min_length=1, validation_alias=AliasChoices("novelId", "novel_id"))
    chapter_number: int = Field(
        NOVEL_LEVEL_CHAPTER,
        validation_alias=AliasChoices("chapterNumber", "chapterNum", "chapter_number"),
    )


class CommentCreated(BaseModel):
    message: str = "Successfully created comment"
    id: str


class CommentResponse(BaseModel):
    """Stored comment"""
    id: str = Field(..., serialization_alias="_id")
    username: str
    comment: str
    novel_id: str = Field(..., serialization_alias="novelId")
    chapter_number: int = Field(..., serialization_alias="chapterNumber")
    created_at: datetime = Field(..., serialization_alias="createdAt")


class CommentListResponse(BaseModel):
    message: str = "Comments retrieved successfully"
    comments: List[CommentResponse]
