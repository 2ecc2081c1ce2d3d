"""Category endpoints for the Wise Advice API."""

from fastapi import APIRouter, status

from wise_advice.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from wise_advice.schemas.common import MessageResponse
from wise_advice.schemas.post import PostListResponse
from wise_advice.services import category_service, post_service
from wise_advice.services.post_query import VisibleTo

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from .posts import DateIntervalQuery, PageQuery, SortQuery, StatusQuery

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: SessionDep) -> list[CategoryResponse]:
    return [
        CategoryResponse.model_validate(category)
        for category in category_service.list_categories(db)
    ]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CategoryResponse:
    category = category_service.create_category(db, current_user, category_data)
    return CategoryResponse.model_validate(category)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: SessionDep) -> CategoryResponse:
    return CategoryResponse.model_validate(category_service.get_category(db, category_id))


@router.get("/{category_id}/posts", response_model=PostListResponse)
async def list_category_posts(
    category_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
    page: PageQuery = None,
    sort: SortQuery = None,
    status_filter: StatusQuery = None,
    date_interval: DateIntervalQuery = None,
) -> PostListResponse:
    """List visible posts filed under one category."""
    category = category_service.get_category(db, category_id)
    visibility = VisibleTo(
        viewer_id=viewer.id if viewer else None,
        is_admin=viewer.is_admin if viewer else False,
    )
    result = post_service.list_posts(
        db,
        [visibility],
        sort=sort,
        page=page,
        categories=category.title,
        date_interval=date_interval,
        status=status_filter,
    )
    return PostListResponse(
        posts=[post_service.to_response(row) for row in result.rows],
        total=result.total,
    )


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CategoryResponse:
    category = category_service.update_category(db, current_user, category_id, category_data)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    category_service.delete_category(db, current_user, category_id)
    return MessageResponse(message="Category deleted")
