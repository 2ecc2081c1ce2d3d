"""Notification inbox endpoints for the Wise Advice API."""

from fastapi import APIRouter

from wise_advice.core.settings import settings
from wise_advice.schemas.notification import NotificationListResponse, NotificationResponse
from wise_advice.services import notifications as notification_service
from wise_advice.services.post_query import parse_page_number

from ..dependencies import CurrentUserDep, SessionDep
from .posts import PageQuery

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    db: SessionDep,
    current_user: CurrentUserDep,
    page: PageQuery = None,
) -> NotificationListResponse:
    """Return the caller's notifications, newest first.

    Read notifications drop out of the listing once the grace window after
    reading has passed.
    """
    messages, total = notification_service.list_notifications(
        db,
        current_user.id,
        parse_page_number(page),
        settings.notifications_page_size,
    )
    return NotificationListResponse(
        messages=[NotificationResponse.model_validate(message) for message in messages],
        total=total,
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> NotificationResponse:
    notification = notification_service.mark_as_read(db, current_user.id, notification_id)
    db.commit()
    db.refresh(notification)
    return NotificationResponse.model_validate(notification)
