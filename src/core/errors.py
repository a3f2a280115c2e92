from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class AppError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class InvalidPlanError(AppError):
    """A goal definition that cannot be normalized into a plan.

    ``field`` names the offending input so the editing form can point at it.
    """

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        super().__init__(
            code="invalid_plan",
            message=message or f"Invalid value for {field}",
            status_code=422,
            details={"field": field},
        )
        self.field = field


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details)
    )
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(
            code="validation_error",
            message="Validation error",
            details={"errors": jsonable_errors(exc)},
        )
    )
    return JSONResponse(status_code=422, content=envelope.model_dump())


def jsonable_errors(exc: RequestValidationError) -> list[Dict[str, Any]]:
    # pydantic may attach the raised exception object under ctx.
    errors = []
    for error in exc.errors():
        cleaned = {key: value for key, value in error.items() if key != "ctx"}
        errors.append(cleaned)
    return errors
