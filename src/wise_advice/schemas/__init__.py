"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import LoginRequest, RegisterRequest, TokenResponse
from .category import CategoryCreate, CategoryResponse, CategoryUpdate
from .comment import CommentCreate, CommentResponse, CommentUpdate
from .common import MessageResponse
from .notification import NotificationListResponse, NotificationResponse
from .post import PostCreate, PostListResponse, PostResponse, PostUpdate
from .reaction import ReactionResponse
from .user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "CategoryCreate", "CategoryResponse", "CategoryUpdate",
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "LoginRequest", "RegisterRequest", "TokenResponse",
    "MessageResponse",
    "NotificationListResponse", "NotificationResponse",
    "PostCreate", "PostListResponse", "PostResponse", "PostUpdate",
    "ReactionResponse",
    "UserCreate", "UserResponse", "UserUpdate",
]
