"""
Users API — User Service (Request Orchestrator)
=================================================

What:  Validation, business rules, and coordination for every user operation.
Why:   Keeps all decision logic in one place, independent of HTTP concerns.
How:   Composes UserRepository, PasswordHasher, and the email predicate.
Who:   Called by route handlers; calls the repository and credential helpers.

Operation shape:
    ┌───────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Parse &  │───▶│  Existence / │───▶│  Hash / Write│───▶│ Outcome  │
    │  validate │    │  uniqueness  │    │  (Repository)│    │ (status, │
    │  (local)  │    │  (DB reads)  │    │              │    │  body)   │
    └───────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Local checks always run first: a malformed request never costs a
    database round-trip.

Error Handling Strategy:
    Steps raise UsersApiError subclasses carrying status and message.
    The @operation boundary turns them into an Outcome; any other exception
    becomes a 500 "Internal server error" Outcome with the cause logged.
    Nothing raised inside an operation reaches the caller.

Concurrency note:
    The email uniqueness check and the write are separate round-trips.
    Two concurrent requests can both pass the check; the UNIQUE constraint
    on users.email rejects the second write, which surfaces here as a 500.
    Password hashing and verification run in a worker thread
    (anyio.to_thread) so bcrypt never blocks the event loop.
"""

import functools
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, List, Optional, Union

import anyio

from users_api.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    OperationFailedError,
    UsersApiError,
)
from users_api.models.user import User
from users_api.schemas.user import UserEnvelope, UserResponse
from users_api.services.credentials import PasswordHasher, password_hasher
from users_api.services.email_validation import is_valid_email
from users_api.services.user_repository import UserRepository

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

INVALID_ID_MESSAGE = "User ID Required & Required as a number"
ALL_FIELDS_REQUIRED_MESSAGE = "All fields are required"
INVALID_AGE_MESSAGE = "Age is required and must be a positive number greater than 0"
INVALID_EMAIL_MESSAGE = "Invalid email format"
INVALID_DOB_MESSAGE = "Invalid date of birth"
EMAIL_EXISTS_MESSAGE = "Email already exists"
USER_NOT_FOUND_MESSAGE = "User not found"

# PostgreSQL INTEGER upper bound (users.age)
MAX_AGE = 2**31 - 1

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Outcome:
    """
    Result of a user operation: an HTTP status and a body.

    body is a UserEnvelope on success and the plain-text message on failure.
    """
    status_code: int
    body: Union[UserEnvelope, str]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def operation(action: str) -> Callable:
    """
    Wrap a UserService coroutine so it always returns an Outcome.

    `action` names the operation in log lines ("adding new user").
    """
    def decorator(func: Callable[..., Awaitable[Outcome]]) -> Callable[..., Awaitable[Outcome]]:
        @functools.wraps(func)
        async def wrapper(self: "UserService", *args: Any, **kwargs: Any) -> Outcome:
            try:
                return await func(self, *args, **kwargs)
            except UsersApiError as e:
                logger.info(
                    "Rejected %s: %d %s %s", action, e.status_code, e.message, e.context or ""
                )
                return Outcome(status_code=e.status_code, body=e.message)
            except Exception as e:
                logger.error("Error %s: %s", action, str(e), exc_info=True)
                return Outcome(status_code=500, body=INTERNAL_ERROR_MESSAGE)
        return wrapper
    return decorator


# ══════════════════════════════════════════════════════════════════════════
# Field Parsing
# ══════════════════════════════════════════════════════════════════════════


def parse_user_id(raw: Any) -> int:
    """
    Parse a path identifier into a positive integer.

    Accepts an int or a string of decimal digits. Missing, empty, non-numeric,
    zero and negative values all fail the same way.
    """
    value: Optional[int] = None
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw.strip()):
        value = int(raw.strip())

    if value is None or value <= 0:
        raise InvalidInputError(INVALID_ID_MESSAGE, field="id", context={"raw": repr(raw)})
    return value


def parse_age(raw: Any) -> int:
    """
    Parse an age: a finite number (or numeric string) greater than 0.

    The column is an integer, so fractional ages and values beyond its
    range are rejected too.
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidInputError(INVALID_AGE_MESSAGE, field="age")
    try:
        number = Decimal(raw.strip() if isinstance(raw, str) else str(raw))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(INVALID_AGE_MESSAGE, field="age")

    if (not number.is_finite() or number <= 0 or number > MAX_AGE
            or number != number.to_integral_value()):
        raise InvalidInputError(INVALID_AGE_MESSAGE, field="age")
    return int(number)


def parse_dob(raw: Any) -> datetime:
    """Parse an ISO-8601 date or datetime into an aware UTC datetime."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, time.min)
    elif isinstance(raw, str):
        try:
            value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInputError(INVALID_DOB_MESSAGE, field="dob")
    else:
        raise InvalidInputError(INVALID_DOB_MESSAGE, field="dob")

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_present(value: Any) -> bool:
    """A text field is present when it is a non-empty string."""
    return isinstance(value, str) and value != ""


def _envelope(message: str, data: Union[User, List[User]]) -> UserEnvelope:
    if isinstance(data, list):
        return UserEnvelope(
            message=message,
            data=[UserResponse.model_validate(user) for user in data],
        )
    return UserEnvelope(message=message, data=UserResponse.model_validate(data))


# ══════════════════════════════════════════════════════════════════════════
# Service
# ══════════════════════════════════════════════════════════════════════════


class UserService:
    """
    Business logic layer for user operations.

    Dependencies are passed in: one UserRepository bound to the request's
    session, plus the hasher and email predicate (replaceable in tests).
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher = password_hasher,
        email_validator: Callable[[Any], bool] = is_valid_email,
    ):
        self.repository = repository
        self.hasher = hasher
        self.email_validator = email_validator

    # ── Reads ─────────────────────────────────────────────────────────────

    @operation("fetching all users")
    async def list_users(self) -> Outcome:
        users = await self.repository.find_all()
        if not users:
            raise NotFoundError("No users found")
        return Outcome(status_code=200, body=_envelope("User Data Found", users))

    @operation("fetching user by ID")
    async def get_user(self, user_id: Any) -> Outcome:
        uid = parse_user_id(user_id)
        user = await self._require_user(uid)
        return Outcome(status_code=200, body=_envelope(f"User Found for {uid}", user))

    # ── Create / full update / delete ─────────────────────────────────────

    @operation("adding new user")
    async def create_user(
        self,
        name: Any = None,
        email: Any = None,
        age: Any = None,
        dob: Any = None,
        password: Any = None,
    ) -> Outcome:
        """
        Create a user.

        Order: required text fields → age → email format → dob, then the
        email uniqueness read, hashing, and the insert.
        """
        if not all(is_present(v) for v in (name, email, dob, password)):
            raise InvalidInputError(ALL_FIELDS_REQUIRED_MESSAGE)
        parsed_age = parse_age(age)
        if not self.email_validator(email):
            raise InvalidInputError(INVALID_EMAIL_MESSAGE, field="email")
        parsed_dob = parse_dob(dob)

        if await self.repository.find_by_email(email):
            raise ConflictError(EMAIL_EXISTS_MESSAGE, context={"email": email})

        hashed = await anyio.to_thread.run_sync(self.hasher.hash, password)
        if not hashed:
            raise OperationFailedError("Error hashing password")

        user = await self.repository.create(
            name=name, email=email, age=parsed_age, dob=parsed_dob, password=hashed
        )
        if user is None:
            raise OperationFailedError("Error creating user")

        logger.info("Created user %s", user.id)
        return Outcome(status_code=201, body=_envelope("User created successfully", user))

    @operation("updating user details")
    async def update_user(
        self,
        user_id: Any,
        name: Any = None,
        email: Any = None,
        age: Any = None,
        dob: Any = None,
    ) -> Outcome:
        """
        Replace name, email, age and dob of an existing user.

        Email uniqueness is not re-checked here; the UNIQUE constraint still
        rejects a collision at write time.
        """
        uid = parse_user_id(user_id)
        if not all(is_present(v) for v in (name, email, dob)):
            raise InvalidInputError(ALL_FIELDS_REQUIRED_MESSAGE)
        parsed_age = parse_age(age)
        if not self.email_validator(email):
            raise InvalidInputError(INVALID_EMAIL_MESSAGE, field="email", status_code=400)
        parsed_dob = parse_dob(dob)

        await self._require_user(uid)

        updated = await self.repository.update(
            uid, name=name, email=email, age=parsed_age, dob=parsed_dob
        )
        if updated is None:
            raise OperationFailedError("User Update Failed")
        return Outcome(status_code=200, body=_envelope("User updated successfully", updated))

    @operation("deleting user")
    async def delete_user(self, user_id: Any) -> Outcome:
        uid = parse_user_id(user_id)
        await self._require_user(uid)

        deleted = await self.repository.delete(uid)
        if deleted is None:
            raise OperationFailedError("User deletion failed")

        logger.info("Deleted user %s", uid)
        return Outcome(
            status_code=200,
            body=_envelope(f"User with ID {uid} deleted successfully", deleted),
        )

    # ── Single-field updates ──────────────────────────────────────────────

    @operation("updating user name")
    async def update_name(self, user_id: Any, name: Any = None) -> Outcome:
        uid = parse_user_id(user_id)
        if not is_present(name):
            raise InvalidInputError("Name is required", field="name")

        await self._require_user(uid)

        updated = await self.repository.update_name(uid, name)
        if updated is None:
            raise OperationFailedError("User Name Update Failed")
        return Outcome(status_code=200, body=_envelope("User name updated successfully", updated))

    @operation("updating user email")
    async def update_email(self, user_id: Any, email: Any = None) -> Outcome:
        """
        Change a user's email.

        Any existing owner of the new address is a conflict, including the
        target user itself (re-submitting the current email is rejected).
        """
        uid = parse_user_id(user_id)
        if not is_present(email):
            raise InvalidInputError("Email is required", field="email")
        if not self.email_validator(email):
            raise InvalidInputError(INVALID_EMAIL_MESSAGE, field="email", status_code=400)

        await self._require_user(uid)

        if await self.repository.find_by_email(email):
            raise ConflictError(EMAIL_EXISTS_MESSAGE, context={"email": email})

        updated = await self.repository.update_email(uid, email)
        if updated is None:
            raise OperationFailedError("User Email Update Failed")
        return Outcome(status_code=200, body=_envelope("User Email updated successfully", updated))

    @operation("updating user password")
    async def update_password(
        self,
        user_id: Any,
        new_password: Any = None,
        old_password: Any = None,
    ) -> Outcome:
        """Change a password after verifying the old one. Stores the new hash."""
        uid = parse_user_id(user_id)
        if not (is_present(new_password) and is_present(old_password)):
            raise InvalidInputError("New & Old Passwords Required")

        user = await self._require_user(uid)

        if not await anyio.to_thread.run_sync(self.hasher.verify, old_password, user.password):
            raise OperationFailedError("Old password, entered is incorrect")

        hashed = await anyio.to_thread.run_sync(self.hasher.hash, new_password)
        if not hashed:
            raise OperationFailedError("Error hashing new password")

        updated = await self.repository.update_password(uid, hashed)
        if updated is None:
            raise OperationFailedError("User Password Update Failed")
        return Outcome(
            status_code=200, body=_envelope("User Password updated successfully", updated)
        )

    # ── Internals ─────────────────────────────────────────────────────────

    async def _require_user(self, user_id: int) -> User:
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND_MESSAGE, resource_id=user_id)
        return user
