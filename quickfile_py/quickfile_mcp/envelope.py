"""Request envelopes and response unwrapping.

QuickFile responses are not uniformly shaped. Normally the body sits under
the called method's name (``{"Client_Search": {"Header": ..., "Body": ...}}``),
but some endpoints answer under a different key, and application errors come
back as a top-level ``Errors`` list inside a 200 response.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Union

from .exceptions import ClientError, ParseError
from .models import RequestHeader, VendorError

API_BASE_URL = "https://api.quickfile.co.uk"
API_VERSION = "1_2"

ERRORS_KEY = "Errors"


def build_url(method_name: str, base_url: str = API_BASE_URL, version: str = API_VERSION) -> str:
    """``System_GetAccountDetails`` -> ``{base}/{version}/system/getaccountdetails``."""
    category, *parts = method_name.split("_")
    action = "".join(parts).lower()
    return f"{base_url.rstrip('/')}/{version}/{category.lower()}/{action}"


def build_request(header: RequestHeader, body: Any = None, no_body: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"Header": header.to_wire()}
    # Some endpoints reject a Body element outright, even an empty one.
    if not no_body:
        payload["Body"] = body if body is not None else {}
    return {"payload": payload}


@dataclass(frozen=True)
class Found:
    body: Any


@dataclass(frozen=True)
class AltFound:
    key: str
    body: Any


@dataclass(frozen=True)
class AppErrors:
    errors: List[VendorError]


@dataclass(frozen=True)
class Malformed:
    reason: str


ResponseShape = Union[Found, AltFound, AppErrors, Malformed]


def inspect_response(data: Any, method_name: str) -> ResponseShape:
    if not isinstance(data, Mapping):
        return Malformed(f"expected a JSON object, got {type(data).__name__}")

    errors = data.get(ERRORS_KEY)
    if isinstance(errors, list) and errors:
        return AppErrors(
            [
                VendorError.model_validate(e) if isinstance(e, Mapping) else VendorError(error_message=str(e))
                for e in errors
            ]
        )

    method_response = data.get(method_name)
    if isinstance(method_response, Mapping):
        return Found(method_response.get("Body"))

    for key, value in data.items():
        if key == ERRORS_KEY or key == method_name:
            continue
        if isinstance(value, Mapping):
            return AltFound(key, value.get("Body"))

    return Malformed(f"no response object for {method_name}")


def extract_body(data: Any, method_name: str) -> Any:
    shape = inspect_response(data, method_name)
    if isinstance(shape, (Found, AltFound)):
        return shape.body
    if isinstance(shape, AppErrors):
        message = "; ".join(e.error_message for e in shape.errors)
        raise ClientError(message, shape.errors[0].error_code)
    raise ParseError()
