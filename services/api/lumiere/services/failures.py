from __future__ import annotations

import re
from enum import Enum
from typing import Any

from lumiere.services.gateway import GatewayError

QUOTA_STATUS = "RESOURCE_EXHAUSTED"
QUOTA_HTTP_CODE = 429

_QUOTA_TEXT_RE = re.compile(r"429|RESOURCE_EXHAUSTED")


class ErrorKind(str, Enum):
    QUOTA_EXHAUSTED = "quota_exhausted"
    OTHER = "other"


class StylingError(RuntimeError):
    pass


class StylingQuotaExceeded(StylingError):
    """The describe/converse call hit a rate or credit limit."""


class AnalysisFailed(StylingError):
    """The mandatory describe call failed for any reason other than quota."""


def classify(error: BaseException) -> ErrorKind:
    """
    Map a caught failure onto ErrorKind.

    Rules, checked in order:
      1. GatewayError.status_code == 429
      2. GatewayError.status == "RESOURCE_EXHAUSTED"
      3. a `code` / `status_code` / `status` attribute equal to 429 or "RESOURCE_EXHAUSTED"
      4. a nested `error` attribute or dict whose `code` is 429
      5. message text mentioning 429 or RESOURCE_EXHAUSTED
    Anything else is OTHER.
    """
    if isinstance(error, GatewayError):
        if error.status_code == QUOTA_HTTP_CODE:
            return ErrorKind.QUOTA_EXHAUSTED
        if error.status == QUOTA_STATUS:
            return ErrorKind.QUOTA_EXHAUSTED

    for attr in ("code", "status_code", "status"):
        if _is_quota_marker(getattr(error, attr, None)):
            return ErrorKind.QUOTA_EXHAUSTED

    nested = getattr(error, "error", None)
    if _nested_code(nested) == QUOTA_HTTP_CODE:
        return ErrorKind.QUOTA_EXHAUSTED

    if _QUOTA_TEXT_RE.search(_message_of(error)):
        return ErrorKind.QUOTA_EXHAUSTED
    return ErrorKind.OTHER


def is_quota_error(error: BaseException) -> bool:
    return classify(error) is ErrorKind.QUOTA_EXHAUSTED


def _is_quota_marker(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value == QUOTA_HTTP_CODE
    if isinstance(value, str):
        return value.strip().upper() == QUOTA_STATUS or value.strip() == str(QUOTA_HTTP_CODE)
    return False


def _nested_code(nested: Any) -> Any:
    if nested is None:
        return None
    if isinstance(nested, dict):
        code = nested.get("code")
    else:
        code = getattr(nested, "code", None)
    try:
        return int(code) if code is not None and not isinstance(code, bool) else None
    except (TypeError, ValueError):
        return None


def _message_of(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return f"{message} {error}"
    return str(error)
