"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    categories_router,
    comments_router,
    notifications_router,
    posts_router,
    users_router,
)

__all__ = [
    "auth_router",
    "categories_router",
    "comments_router",
    "notifications_router",
    "posts_router",
    "users_router",
]
