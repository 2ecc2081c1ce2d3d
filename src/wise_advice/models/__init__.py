"""SQLAlchemy models for the Wise Advice application."""

from .category import Category
from .comment import Comment
from .notification import Notification
from .post import Favorite, Post, Subscription, posts_categories, posts_comments
from .reaction import Reaction
from .user import User

__all__ = [
    "Category",
    "Comment",
    "Favorite",
    "Notification",
    "Post",
    "Reaction",
    "Subscription",
    "User",
    "posts_categories",
    "posts_comments",
]
