"""Pydantic schemas for the legacy users resource."""

from pydantic import BaseModel, ConfigDict


class UserBody(BaseModel):
    """Create/replace/patch body. Presence rules are enforced by the route."""

    name: str | None = None
    email: str | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserListResponse(BaseModel):
    count: int
    limit: int
    offset: int
    data: list[UserResponse]
