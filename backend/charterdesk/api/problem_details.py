"""RFC 7807 responses for every error the pricing service returns."""

import uuid
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from charterdesk.domain.errors import PROBLEM_BASE, DomainError

PROBLEM_TYPE_VALIDATION = f"{PROBLEM_BASE}/validation-error"
PROBLEM_TYPE_DOMAIN = f"{PROBLEM_BASE}/domain-error"
PROBLEM_TYPE_SERVER = f"{PROBLEM_BASE}/server-error"

MEDIA_TYPE = "application/problem+json"


def request_id_for(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    if not request_id:
        request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    return request_id


def problem_details(
    request: Request,
    *,
    status: int,
    detail: str,
    title: str | None = None,
    errors: list[dict[str, Any]] | None = None,
    type_: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = request_id_for(request)
    if type_ is None:
        type_ = PROBLEM_TYPE_SERVER if status >= 500 else PROBLEM_TYPE_DOMAIN
    content = {
        "type": type_,
        "title": title or HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "request_id": request_id,
        "errors": jsonable_encoder(errors or []),
    }
    response = JSONResponse(status_code=status, content=content, headers=headers, media_type=MEDIA_TYPE)
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def from_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    return problem_details(
        request,
        status=exc.status,
        title=exc.title,
        detail=exc.detail,
        errors=exc.errors,
        type_=exc.type or PROBLEM_TYPE_DOMAIN,
    )


def from_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field = ".".join(str(part) for part in loc if part not in {"body", "query", "path"}) or "body"
        errors.append({"field": field, "message": error.get("msg", "Invalid value")})
    return problem_details(
        request,
        status=422,
        title="Validation Error",
        detail="Request validation failed",
        errors=errors,
        type_=PROBLEM_TYPE_VALIDATION,
    )
