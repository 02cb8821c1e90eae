from __future__ import annotations

"""Typed handler results and their translation into HTTP responses.

Endpoint handlers return one of the result values below instead of raising;
``to_response`` looks the result type up in ``RESPONSE_BUILDERS`` and builds
the matching FastAPI response.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from leaderboard.web.headers import create_failure_alert

PROBLEM_TYPE_BAD_REQUEST = "https://www.jhipster.tech/problem/problem-with-message"


@dataclass(frozen=True, slots=True)
class Ok:
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = status.HTTP_200_OK


@dataclass(frozen=True, slots=True)
class Created:
    body: Any
    location: str
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class InvalidRequest:
    message: str
    entity_name: str
    error_key: str

    def problem(self) -> dict[str, Any]:
        return {
            "type": PROBLEM_TYPE_BAD_REQUEST,
            "title": self.message,
            "status": status.HTTP_400_BAD_REQUEST,
            "message": f"error.{self.error_key}",
            "params": self.entity_name,
            "entityName": self.entity_name,
            "errorKey": self.error_key,
        }


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


EndpointResult = Union[Ok, Created, InvalidRequest, NotFound]


def _ok_response(result: Ok) -> Response:
    if result.body is None:
        return Response(status_code=result.status_code, headers=dict(result.headers))
    return JSONResponse(
        status_code=result.status_code,
        content=jsonable_encoder(result.body),
        headers=dict(result.headers),
    )


def _created_response(result: Created) -> Response:
    headers = {"Location": result.location, **result.headers}
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(result.body),
        headers=headers,
    )


def _invalid_request_response(result: InvalidRequest) -> Response:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=result.problem(),
        headers=create_failure_alert(result.entity_name, result.error_key),
        media_type="application/problem+json",
    )


def _not_found_response(result: NotFound) -> Response:
    return Response(status_code=status.HTTP_404_NOT_FOUND)


RESPONSE_BUILDERS: dict[type, Callable[[Any], Response]] = {
    Ok: _ok_response,
    Created: _created_response,
    InvalidRequest: _invalid_request_response,
    NotFound: _not_found_response,
}


def to_response(result: EndpointResult) -> Response:
    try:
        builder = RESPONSE_BUILDERS[type(result)]
    except KeyError:
        raise TypeError(f"No response builder for {type(result).__name__}") from None
    return builder(result)


__all__ = [
    "Ok",
    "Created",
    "InvalidRequest",
    "NotFound",
    "EndpointResult",
    "RESPONSE_BUILDERS",
    "to_response",
]
