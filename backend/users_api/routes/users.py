"""
Users API — User Route Handlers
=================================

What:  The eight user endpoints (list, get, create, replace, delete, and
       PATCH name / email / password).
How:   Each handler unpacks the path and body, calls one UserService
       operation, and renders the returned Outcome.

Response format:
    Success → JSON {"message": ..., "data": ...}
    Failure → text/plain body containing only the message
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from users_api.config import settings
from users_api.database import get_db_session
from users_api.schemas.user import (
    UserCreateRequest,
    UserEmailRequest,
    UserEnvelope,
    UserNameRequest,
    UserPasswordRequest,
    UserUpdateRequest,
)
from users_api.services.user_repository import UserRepository
from users_api.services.user_service import Outcome, UserService

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix=settings.api_prefix, tags=["Users"])

_FAILURE_RESPONSES = {
    401: {"description": "Missing or invalid field", "content": {"text/plain": {}}},
    404: {"description": "User not found", "content": {"text/plain": {}}},
    500: {"description": "Internal server error", "content": {"text/plain": {}}},
}


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    """Build a UserService bound to this request's session."""
    return UserService(UserRepository(db))


def render(outcome: Outcome) -> Response:
    """Turn an Outcome into JSON (success) or plain text (failure)."""
    if isinstance(outcome.body, str):
        return PlainTextResponse(outcome.body, status_code=outcome.status_code)
    return JSONResponse(
        content=outcome.body.model_dump(mode="json"),
        status_code=outcome.status_code,
    )


@router.get("/", include_in_schema=False)
@router.get(
    "",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="List all users",
)
async def fetch_all_users(service: UserService = Depends(get_user_service)) -> Response:
    return render(await service.list_users())


@router.get(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Get a user by ID",
)
async def fetch_user_by_id(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    """
    user_id is taken as a string: an invalid id must produce the
    service's 401 message rather than FastAPI's 422.
    """
    return render(await service.get_user(user_id))


@router.post("/", status_code=201, include_in_schema=False)
@router.post(
    "",
    status_code=201,
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Create a user",
)
async def add_new_user(
    payload: Optional[UserCreateRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Response:
    fields = payload.model_dump() if payload else {}
    return render(await service.create_user(**fields))


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Replace a user's name, email, age and date of birth",
)
async def update_user_details(
    user_id: str,
    payload: Optional[UserUpdateRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Response:
    fields = payload.model_dump() if payload else {}
    return render(await service.update_user(user_id, **fields))


@router.delete(
    "/{user_id}",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Delete a user",
)
async def delete_user_details(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> Response:
    return render(await service.delete_user(user_id))


@router.patch(
    "/{user_id}/name",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Change a user's name",
)
async def update_users_name(
    user_id: str,
    payload: Optional[UserNameRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Response:
    fields = payload.model_dump() if payload else {}
    return render(await service.update_name(user_id, **fields))


@router.patch(
    "/{user_id}/email",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Change a user's email",
)
async def update_users_email(
    user_id: str,
    payload: Optional[UserEmailRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Response:
    fields = payload.model_dump() if payload else {}
    return render(await service.update_email(user_id, **fields))


@router.patch(
    "/{user_id}/password",
    response_model=UserEnvelope,
    responses=_FAILURE_RESPONSES,
    summary="Change a user's password",
)
async def update_users_password(
    user_id: str,
    payload: Optional[UserPasswordRequest] = None,
    service: UserService = Depends(get_user_service),
) -> Response:
    fields = payload.model_dump() if payload else {}
    return render(await service.update_password(user_id, **fields))
