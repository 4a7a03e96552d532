# This file defines the users endpoints.
# It exists so HTTP binding stays separate from the user service rules.
# Path identifiers are parsed before the service is called, so malformed ids return 400.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_user_service
from src.api.error_handlers import NotFoundError
from src.api.object_ids import ObjectIdPath
from src.api.openapi_docs import error_responses
from src.api.schemas.user_schemas import UserCreate, UserResponse, UserUpdate
from src.api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    responses=error_responses("user", 400, 409),
)
def create_user(payload: UserCreate, service: UserServiceDep) -> dict[str, object]:
    return service.create(payload)


@router.get("", response_model=list[UserResponse], summary="Get all users")
def list_users(service: UserServiceDep) -> list[dict[str, object]]:
    return service.find_all()


@router.get("/active", response_model=list[UserResponse], summary="Get active users")
def list_active_users(service: UserServiceDep) -> list[dict[str, object]]:
    return service.find_active()


@router.get(
    "/email/{email}",
    response_model=UserResponse,
    summary="Get a user by email",
    responses=error_responses("user", 404),
)
def get_user_by_email(email: str, service: UserServiceDep) -> dict[str, object]:
    user = service.find_by_email(email)
    if user is None:
        raise NotFoundError(f"User with email {email.strip().lower()} not found")
    return user


@router.get(
    "/{id}",
    response_model=UserResponse,
    summary="Get a user by ID",
    responses=error_responses("user", 400, 404),
)
def get_user(user_id: ObjectIdPath, service: UserServiceDep) -> dict[str, object]:
    return service.find_one(user_id)


@router.patch(
    "/{id}",
    response_model=UserResponse,
    summary="Update a user",
    responses=error_responses("user", 400, 404, 409),
)
def update_user(
    user_id: ObjectIdPath,
    payload: UserUpdate,
    service: UserServiceDep,
) -> dict[str, object]:
    return service.update(user_id, payload)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a user",
    responses=error_responses("user", 400, 404),
)
def delete_user(user_id: ObjectIdPath, service: UserServiceDep) -> Response:
    service.remove(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
