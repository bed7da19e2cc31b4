"""
Authorization gateway shared by every restricted route.

    bearer token → identity → role → capability

authorize(auth_header, required_role, provider, db)  → AuthContext
require(capability)                                  → FastAPI dependency
validated_body(model)                                → FastAPI dependency

Each step has exactly one failure exit:

    header missing / malformed     → Unauthorized (401)
    token does not resolve         → Unauthorized (401)
    identity without a role row    → RoleNotFound (403)
    role below requirement         → Forbidden    (403)

The gateway reads roles through the request-scoped session only; the
elevated session is opened by the route afterwards.

Restricted routes take their body through validated_body(), declared after
require(), so a malformed body from an anonymous caller is still a 401.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from fastapi import Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy import String, cast
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import DataStoreError, Forbidden, RoleNotFound, Unauthorized
from vine_portal.core.result import Err, Ok, Result
from vine_portal.db.base import get_db
from vine_portal.models.user import User, UserRole
from vine_portal.services.identity import AuthProvider, Identity, get_auth_provider
from vine_portal.services.permissions import Capability, has_capability, role_satisfies

logger = logging.getLogger("vine_portal.gateway")

_BEARER_PREFIX = "bearer "

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class AuthContext:
    identity: Identity
    role: UserRole


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Return the token of a `Bearer <token>` header, or None."""
    if not auth_header:
        return None
    if not auth_header.lower().startswith(_BEARER_PREFIX):
        return None
    token = auth_header[len(_BEARER_PREFIX):].strip()
    return token or None


def lookup_role(db: Session, identity_id: str) -> Result[UserRole]:
    # read as text: an out-of-set value must map to "no role", not fail the Enum load
    try:
        value = db.query(cast(User.role, String)).filter(User.id == identity_id).scalar()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to resolve user role", exc) from exc
    if value is None:
        return Err("role_not_found")
    try:
        return Ok(UserRole(value))
    except ValueError:
        return Err("unknown_role")


def authorize(
    auth_header: Optional[str],
    required_role: Optional[UserRole] = None,
    *,
    provider: AuthProvider,
    db: Session,
) -> AuthContext:
    token = extract_bearer_token(auth_header)
    if token is None:
        raise Unauthorized("No authorization token provided", code="NO_TOKEN")

    resolved = provider.get_user(token)
    if isinstance(resolved, Err):
        logger.info("Token rejected: %s", resolved.reason)
        raise Unauthorized("Invalid or expired token", code="INVALID_TOKEN")
    identity = resolved.value

    role_result = lookup_role(db, identity.id)
    if isinstance(role_result, Err):
        logger.info("No role for identity …%s (%s)", identity.id[-6:], role_result.reason)
        raise RoleNotFound()
    role = role_result.value

    if not role_satisfies(role, UserRole(required_role) if required_role else None):
        raise Forbidden(
            "Insufficient permissions",
            details={"requiredRole": UserRole(required_role).value, "role": role.value},
        )
    return AuthContext(identity=identity, role=role)


def require(capability: Optional[Capability] = None) -> Callable[..., AuthContext]:
    """Dependency factory: authorize the caller and check one capability."""

    def dependency(
        authorization: Optional[str] = Header(default=None),
        provider: AuthProvider = Depends(get_auth_provider),
        db: Session = Depends(get_db),
    ) -> AuthContext:
        ctx = authorize(authorization, provider=provider, db=db)
        if capability is not None and not has_capability(ctx.role, capability):
            logger.info(
                "Capability %s denied for role %s", capability.value, ctx.role.value
            )
            raise Forbidden(
                "Insufficient permissions",
                details={"capability": capability.value, "role": ctx.role.value},
            )
        return ctx

    return dependency


def validated_body(model: type[M]) -> Callable[..., Awaitable[M]]:
    """Dependency factory: parse the JSON body into `model`, reporting like FastAPI."""

    async def dependency(request: Request) -> M:
        raw = await request.body()
        try:
            data: Any = json.loads(raw) if raw else {}
        except ValueError as exc:
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body", 0),
                "msg": "JSON decode error",
                "input": {},
                "ctx": {"error": str(exc)},
            }])
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError([
                {**error, "loc": ("body", *error["loc"])}
                for error in exc.errors(include_url=False)
            ])

    return dependency
