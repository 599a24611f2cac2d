"""Per-request call object handed to every action handler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from fastapi import Request, Response
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.auth import AuthContext, ClientInfo
from app.core.errors import Unauthenticated, ValidationError
from app.schemas.asset import SQL_INT_MAX
from app.services.session_service import SessionManager

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ActionCall:
    request: Request
    response: Response
    db: Session
    sessions: SessionManager
    auth: AuthContext | None
    params: Mapping[str, str]
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def client(self) -> ClientInfo:
        return self.auth.client if self.auth is not None else ClientInfo.from_request(self.request)

    def require_auth(self) -> AuthContext:
        if self.auth is None:
            raise Unauthenticated()
        return self.auth

    def int_param(self, name: str, default: int | None = None, *, required_message: str | None = None) -> int:
        raw = self.params.get(name)
        if raw is None or raw == "":
            if default is None:
                raise ValidationError(required_message or f"{name} is required")
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValidationError(f"{name} must be an integer") from exc
        if not -SQL_INT_MAX <= value <= SQL_INT_MAX:
            raise ValidationError(f"{name} is out of range")
        return value

    def parse(self, model: type[ModelT], message: str) -> ModelT:
        """Validate the JSON body against ``model``; failures become ``ValidationError(message)``."""
        try:
            return model.model_validate(self.payload)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            detail = f"{location}: {first['msg']}" if location else first["msg"]
            raise ValidationError(f"{message} ({detail})") from exc
