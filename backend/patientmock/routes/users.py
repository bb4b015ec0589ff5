"""Legacy users resource: flat CRUD over an auto-increment table."""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from patientmock.constants import USERS_DEFAULT_LIMIT, USERS_MAX_LIMIT
from patientmock.database import get_db
from patientmock.exceptions import NotFoundError, ValidationError
from patientmock.models.user import User
from patientmock.repositories.user import UserRepository
from patientmock.schemas.user import UserBody, UserListResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def parse_user_id(user_id: str) -> int:
    """Parse a path id.

    Raises:
        ValidationError: If the id is not a positive integer.
    """
    try:
        parsed = int(user_id.strip())
    except ValueError:
        raise ValidationError(message="Invalid id") from None
    if parsed < 1:
        raise ValidationError(message="Invalid id")
    return parsed


async def load_user(repo: UserRepository, user_id: str) -> User:
    user = await repo.get(parse_user_id(user_id))
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserBody,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Create a user. Both name and email are required."""
    if not body.name or not body.email:
        raise ValidationError(message="Name and email required")

    user = await UserRepository(db).create(body.name, body.email)
    await db.commit()
    logger.info("Created user %d", user.id)

    response.headers["Location"] = str(request.url_for("get_user", user_id=str(user.id)))
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    limit: int = Query(USERS_DEFAULT_LIMIT),
    offset: int = Query(0),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    """List users; ``limit`` is clamped to 1..100 and ``offset`` to >= 0."""
    limit = max(1, min(USERS_MAX_LIMIT, limit))
    offset = max(0, offset)
    users = await UserRepository(db).list(limit, offset)
    return UserListResponse(
        count=len(users),
        limit=limit,
        offset=offset,
        data=[UserResponse.model_validate(user) for user in users],
    )


@router.head("")
async def head_users() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{user_id}", response_model=UserResponse, name="get_user")
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)) -> UserResponse:
    """Get a user by id."""
    return UserResponse.model_validate(await load_user(UserRepository(db), user_id))


@router.head("/{user_id}")
async def head_user(user_id: str, db: AsyncSession = Depends(get_db)) -> Response:
    await load_user(UserRepository(db), user_id)
    return Response(status_code=status.HTTP_200_OK)


@router.put("/{user_id}", response_model=UserResponse)
async def replace_user(user_id: str, body: UserBody, db: AsyncSession = Depends(get_db)) -> UserResponse:
    """Replace a user. Both name and email are required."""
    if not body.name or not body.email:
        raise ValidationError(message="Name and email required for full update")
    repo = UserRepository(db)
    user = await load_user(repo, user_id)

    await repo.update(user, body.name, body.email)
    await db.commit()
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def patch_user(user_id: str, body: UserBody, db: AsyncSession = Depends(get_db)) -> UserResponse:
    """Update name and/or email."""
    if not body.name and not body.email:
        raise ValidationError(message="No updatable fields provided")
    repo = UserRepository(db)
    user = await load_user(repo, user_id)

    await repo.update(user, body.name or user.name, body.email or user.email)
    await db.commit()
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete a user."""
    repo = UserRepository(db)
    await repo.delete(await load_user(repo, user_id))
    await db.commit()
    logger.info("Deleted user %s", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
