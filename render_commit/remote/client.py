"""
Render Client

Thin HTTP client for the remote manifest render service.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Iterable

import httpx
from pydantic import ValidationError

from ..core.durations import parse_duration
from ..core.errors import (
    MalformedResponseError,
    ResponseTooLargeError,
    TransportError,
    UpstreamStatusError,
)
from ..core.models import Header, RenderRequest, RenderResult, RendererConfig
from ..core.settings import Settings

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"
_LOGGED_BODY_CHARS = 2048


class RenderClient:
    """HTTP client for the render service.

    One POST per :meth:`send` call; failures are reported, never retried.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        insecure_skip_tls_verify: bool = False,
        headers: Iterable[Header] = (),
        max_response_bytes: int = 10 << 20,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the render client.

        Args:
            timeout: Overall request deadline in seconds
            insecure_skip_tls_verify: Disable TLS certificate verification
            headers: Extra request headers, applied after the JSON defaults
            max_response_bytes: Largest response body that will be read
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.max_response_bytes = max_response_bytes
        self.insecure_skip_tls_verify = insecure_skip_tls_verify

        self.headers = httpx.Headers(
            {"Content-Type": CONTENT_TYPE_JSON, "Accept": CONTENT_TYPE_JSON}
        )
        for header in headers:
            self.headers[header.name] = header.value

        self._client = httpx.Client(
            timeout=timeout,
            verify=not insecure_skip_tls_verify,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: RendererConfig,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> RenderClient:
        settings = settings or Settings()
        timeout = parse_duration(config.timeout) if config.timeout else settings.default_timeout
        return cls(
            timeout=timeout,
            insecure_skip_tls_verify=config.insecure_skip_tls_verify,
            headers=config.headers,
            max_response_bytes=settings.max_response_bytes,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RenderClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def send(self, endpoint: str, request: RenderRequest) -> RenderResult:
        """
        POST ``request`` to ``endpoint`` and decode the render result.

        Args:
            endpoint: Render service URL
            request: Render request payload

        Returns:
            Parsed render result

        Raises:
            TransportError: On network, TLS or timeout failures
            UpstreamStatusError: On a non-2xx response
            ResponseTooLargeError: If the body exceeds ``max_response_bytes``
            MalformedResponseError: If the body is not a valid render result
        """
        body = json.dumps(request.to_payload()).encode("utf-8")
        deadline = time.monotonic() + self.timeout

        logger.debug(
            "Sending render request to %s for %d deployment(s)",
            endpoint,
            len(request.deployments),
        )

        try:
            with self._client.stream(
                "POST", endpoint, content=body, headers=self.headers
            ) as response:
                if not response.is_success:
                    raise UpstreamStatusError(response.status_code)
                raw = self._read_limited(response, deadline)
        except httpx.TimeoutException as exc:
            raise TransportError(f"request timed out after {self.timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"error sending HTTP request: {exc}") from exc

        logger.debug(
            "Received %d byte(s) from render service: %s",
            len(raw),
            raw[:_LOGGED_BODY_CHARS].decode("utf-8", errors="replace"),
        )
        result = self._decode(raw)
        logger.info(f"Render service returned {len(result)} target(s)")
        return result

    def _read_limited(self, response: httpx.Response, deadline: float) -> bytes:
        limit = self.max_response_bytes
        declared = response.headers.get("Content-Length", "")
        if declared.isdigit() and int(declared) > limit:
            raise ResponseTooLargeError(limit)

        buffer = bytearray()
        for chunk in response.iter_bytes():
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise ResponseTooLargeError(limit)
            if time.monotonic() > deadline:
                raise TransportError(f"request timed out after {self.timeout:g}s")
        return bytes(buffer)

    @staticmethod
    def _decode(raw: bytes) -> RenderResult:
        try:
            return RenderResult.model_validate_json(raw)
        except ValidationError as exc:
            errors = exc.errors()
            if errors and errors[0]["type"] == "json_invalid":
                message = f"error unmarshaling response: invalid JSON ({errors[0]['msg']})"
            else:
                problems = ", ".join(
                    f"{'.'.join(str(part) for part in error['loc']) or '(root)'}: {error['msg']}"
                    for error in errors[:5]
                )
                message = f"error unmarshaling response: unexpected shape ({problems})"
            raise MalformedResponseError(message) from exc
