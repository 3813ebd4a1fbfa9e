"""
Novel Pydantic schemas
"""

from pydantic import BaseModel
from typing import Any, Dict, List


class NovelSearchResponse(BaseModel):
    """One page of ranked search results"""
    results: List[Dict[str, Any]]
    totalCount: int
    currentPage: int
    totalPages: int


class FolderListResponse(BaseModel):
    folders: List[str]


class ChapterListResponse(BaseModel):
    chapters: List[str]


class ChapterContentResponse(BaseModel):
    content: str
