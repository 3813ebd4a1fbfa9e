"""
Pydantic schema package
"""

from .auth import Token, RefreshTokenRequest, AccessTokenResponse
from .user import UserCreate, UserLogin, RegisterResponse, AvailabilityResponse
from .comment import (
    CommentCreate,
    CommentCreated,
    CommentResponse,
    CommentListResponse,
)
from .novel import (
    NovelSearchResponse,
    FolderListResponse,
    ChapterListResponse,
    ChapterContentResponse,
)
