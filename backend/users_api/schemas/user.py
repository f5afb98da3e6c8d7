"""
Users API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract.
Why:   Automatic serialization and OpenAPI doc generation.
How:   FastAPI parses request bodies into the request models and the routes
       serialize records through UserResponse.

Request models are loose (`Any` fields, all optional):
    A missing or wrongly-typed field must reach UserService so the client
    gets its plain-text message ("All fields are required", ...) and status
    code, not FastAPI's generic 422 validation payload.
"""

from datetime import datetime, timezone
from typing import Any, List, Union

from pydantic import BaseModel, Field, field_serializer


def format_timestamp(value: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC with milliseconds: 1990-01-01T00:00:00.000Z

    Naive values are taken to be UTC (SQLite drops the offset on read).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class UserCreateRequest(BaseModel):
    """Body of POST /."""
    name: Any = Field(default=None, description="Display name")
    email: Any = Field(default=None, description="Unique email address")
    age: Any = Field(default=None, description="Age in years, greater than 0")
    dob: Any = Field(default=None, description="Date of birth (ISO 8601)")
    password: Any = Field(default=None, description="Plaintext password, stored hashed")


class UserUpdateRequest(BaseModel):
    """Body of PUT /{id}. Password changes go through PATCH /{id}/password."""
    name: Any = None
    email: Any = None
    age: Any = None
    dob: Any = None


class UserNameRequest(BaseModel):
    name: Any = None


class UserEmailRequest(BaseModel):
    email: Any = None


class UserPasswordRequest(BaseModel):
    """
    Body of PATCH /{id}/password.

    The wire format is camelCase (newPassword, oldPassword); attributes are
    snake_case so `model_dump()` lines up with UserService.update_password.
    """
    new_password: Any = Field(default=None, alias="newPassword")
    old_password: Any = Field(default=None, alias="oldPassword")

    model_config = {"populate_by_name": True}


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    What:  Full representation of a stored user.

    Note: password is the stored hash. It is part of the payload on
    purpose; existing clients assert on it.
    """
    id: int = Field(description="Database-assigned identifier")
    name: str
    email: str
    age: int
    dob: datetime = Field(description="Date of birth (UTC ISO 8601, millisecond precision)")
    password: str = Field(description="Stored password hash")

    model_config = {"from_attributes": True}

    @field_serializer("dob")
    def serialize_dob(self, value: datetime) -> str:
        return format_timestamp(value)


class UserEnvelope(BaseModel):
    """Success body shared by every user endpoint: {message, data}."""
    message: str
    data: Union[UserResponse, List[UserResponse]]


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
