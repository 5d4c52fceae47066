from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from lumiere.core.config import settings

DEFAULT_UPLOAD_MIME = "image/jpeg"
DEFAULT_GENERATED_MIME = "image/png"


class GatewayError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = status

    def __repr__(self) -> str:
        return f"GatewayError(status_code={self.status_code!r}, status={self.status!r}, message={self.message!r})"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"


@dataclass(slots=True, frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str = DEFAULT_UPLOAD_MIME

    @classmethod
    def from_reference(cls, reference: str) -> "ImagePayload":
        """
        Decode a `data:<mime>;base64,<payload>` reference or a bare base64 string.
        Raises ValueError when the payload is not valid base64.
        """
        mime_type = DEFAULT_UPLOAD_MIME
        encoded = reference.strip()
        if encoded.startswith("data:") and "," in encoded:
            header, encoded = encoded.split(",", 1)
            declared = header[len("data:"):].split(";", 1)[0].strip()
            if declared:
                mime_type = declared
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("image reference is not valid base64") from exc
        if not data:
            raise ValueError("image reference is empty")
        return cls(data=data, mime_type=mime_type)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


@dataclass(slots=True)
class GatewayContent:
    role: str
    parts: Sequence[str | ImagePayload] = field(default_factory=list)


class StylingGateway(Protocol):
    async def generate(
        self,
        model_id: str,
        contents: Sequence[GatewayContent],
        response_schema: dict[str, Any],
        system_instruction: str | None = None,
        web_search: bool = False,
    ) -> dict[str, Any]:
        ...

    async def generate_image(self, model_id: str, prompt: str, aspect_ratio: AspectRatio) -> ImagePayload:
        ...


class GeminiGateway:
    def __init__(self, api_key: str | None = None, client: genai.Client | None = None) -> None:
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise GatewayError("GEMINI_API_KEY is required", status="UNAUTHENTICATED")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(
        self,
        model_id: str,
        contents: Sequence[GatewayContent],
        response_schema: dict[str, Any],
        system_instruction: str | None = None,
        web_search: bool = False,
    ) -> dict[str, Any]:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=response_schema,
            tools=[types.Tool(google_search=types.GoogleSearch())] if web_search else None,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=model_id,
                contents=[_to_content(c) for c in contents],
                config=config,
            )
        except GatewayError:
            raise
        except genai_errors.APIError as exc:
            raise GatewayError(exc.message or str(exc), status_code=exc.code, status=exc.status) from exc
        except Exception as exc:
            raise GatewayError(f"{type(exc).__name__}: {exc}") from exc

        raw = response.text or "{}"
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise GatewayError(f"model returned non-JSON payload: {raw[:200]}") from exc
        if not isinstance(parsed, dict):
            raise GatewayError("model returned a JSON value that is not an object")
        return parsed

    async def generate_image(self, model_id: str, prompt: str, aspect_ratio: AspectRatio) -> ImagePayload:
        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio.value),
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=model_id,
                contents=[types.Content(role="user", parts=[types.Part.from_text(text=prompt)])],
                config=config,
            )
        except GatewayError:
            raise
        except genai_errors.APIError as exc:
            raise GatewayError(exc.message or str(exc), status_code=exc.code, status=exc.status) from exc
        except Exception as exc:
            raise GatewayError(f"{type(exc).__name__}: {exc}") from exc

        for candidate in response.candidates or []:
            content = candidate.content
            for part in (content.parts if content else None) or []:
                if part.inline_data and part.inline_data.data:
                    return ImagePayload(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type or DEFAULT_GENERATED_MIME,
                    )
        raise GatewayError("image model returned no inline image")


def _to_content(content: GatewayContent) -> types.Content:
    parts: list[types.Part] = []
    for part in content.parts:
        if isinstance(part, ImagePayload):
            parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
        else:
            parts.append(types.Part.from_text(text=part))
    return types.Content(role=content.role, parts=parts)
