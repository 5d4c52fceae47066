from __future__ import annotations

from types import SimpleNamespace

import pytest

from lumiere.services.failures import ErrorKind, classify, is_quota_error
from lumiere.services.gateway import GatewayError


class _SdkStyleError(Exception):
    def __init__(self, message: str, **attrs) -> None:
        super().__init__(message)
        for key, value in attrs.items():
            setattr(self, key, value)


@pytest.mark.parametrize(
    "error",
    [
        GatewayError("Too many requests", status_code=429),
        GatewayError("quota", status="RESOURCE_EXHAUSTED"),
        RuntimeError("got status 429 from upstream"),
        RuntimeError("HTTP429 Too Many Requests"),
        RuntimeError("RESOURCE_EXHAUSTED: image quota used up"),
        _SdkStyleError("failed", status="RESOURCE_EXHAUSTED"),
        _SdkStyleError("failed", code=429),
        _SdkStyleError("failed", error={"code": 429, "message": "slow down"}),
        _SdkStyleError("failed", error=SimpleNamespace(code="429")),
    ],
)
def test_quota_shapes_are_classified_as_quota(error):
    assert classify(error) is ErrorKind.QUOTA_EXHAUSTED
    assert is_quota_error(error)


@pytest.mark.parametrize(
    "error",
    [
        ValueError("boom"),
        GatewayError("Internal error", status_code=500, status="INTERNAL"),
        GatewayError("GEMINI_API_KEY is required", status="UNAUTHENTICATED"),
        _SdkStyleError("failed", code=503, error={"code": 500}),
        _SdkStyleError("failed", code=True),
    ],
)
def test_other_failures_are_not_quota(error):
    assert classify(error) is ErrorKind.OTHER
    assert not is_quota_error(error)
