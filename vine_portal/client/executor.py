"""
Request executor: one outbound API call with a deadline, bounded retries and
normalized errors.

    executor = RequestExecutor(base_url="https://vinechurch.ca")
    result = await executor.call("/api/visitors", "POST", json=payload)
    if result.error:
        show(result.error.message)

Retry policy
------------
  network / timeout          → retried
  HTTP 429 / 503             → retried
  anything else              → surfaced immediately (incl. 207 partial failure)

Delay before retry n (0-based) is retry_delay_ms * 2**n; no jitter. Retries
resend the original request unchanged.

Observable state
----------------
`loading / error / data` live in one ExecutorState snapshot held by the
executor. Every transition replaces the snapshot and notifies subscribers.
Concurrent calls on the same executor share that snapshot (last writer wins);
use one executor per independent caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional

import httpx

from vine_portal.core.taxonomy import ErrorType, error_type_for_status, parse_error_type

logger = logging.getLogger("vine_portal.client")

RETRYABLE_STATUSES = frozenset({429, 503})

TIMEOUT_MESSAGE = "Request timeout. Please check your connection."
NETWORK_MESSAGE = "Network error. Please check your connection."
UNEXPECTED_MESSAGE = "An unexpected error occurred."


# ---------------------------------------------------------------------------
# Result and state types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ApiError:
    message: str
    type: ErrorType
    code: Optional[str] = None
    request_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    retry_count: int = 0
    status: Optional[int] = None


@dataclass(frozen=True)
class CallResult:
    """Terminal outcome of `call`: exactly one of data / error is set."""
    data: Any = None
    error: Optional[ApiError] = None


@dataclass(frozen=True)
class ExecutorState:
    loading: bool = False
    error: Optional[ApiError] = None
    data: Any = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_success(self) -> bool:
        return self.data is not None and self.error is None


Subscriber = Callable[[ExecutorState], None]


# ---------------------------------------------------------------------------
# Envelope parsing
# ---------------------------------------------------------------------------

def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _from_envelope(body: dict, status: int, retry_count: int, default_type: ErrorType) -> ApiError:
    error = body["error"]
    return ApiError(
        message=error.get("message") or "An error occurred",
        type=parse_error_type(error.get("type"), default_type),
        code=error.get("code"),
        request_id=error.get("requestId"),
        details=error.get("details"),
        retry_count=retry_count,
        status=status,
    )


def parse_error_response(response: httpx.Response, retry_count: int = 0) -> ApiError:
    """
    Normalize a non-2xx response, in priority order:

    1. structured envelope      {"error": {"message", "type", ...}}
    2. generic error field      {"error": "..."} then {"message": "..."}
    3. HTTP status text
    """
    status = response.status_code
    fallback_type = error_type_for_status(status)
    body = _json_or_none(response)

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return _from_envelope(body, status, retry_count, fallback_type)
        if isinstance(error, str) and error:
            return ApiError(message=error, type=fallback_type, retry_count=retry_count, status=status)
        message = body.get("message")
        if isinstance(message, str) and message:
            return ApiError(message=message, type=fallback_type, retry_count=retry_count, status=status)

    text = response.reason_phrase or f"HTTP {status}"
    return ApiError(message=text, type=fallback_type, retry_count=retry_count, status=status)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class RequestExecutor:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str = "",
        max_retries: int = 3,
        retry_delay_ms: int = 1000,
        timeout_ms: int = 30000,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._owns_client = client is None
        # timeout_ms is the only deadline, so the owned client gets no httpx timeout
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=None)
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.timeout_ms = timeout_ms
        self._sleep = sleep
        self._state = ExecutorState()
        self._subscribers: list[Subscriber] = []

    async def __aenter__(self) -> "RequestExecutor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # -- state --------------------------------------------------------------

    @property
    def state(self) -> ExecutorState:
        return self._state

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a listener for state transitions; returns an unsubscribe function."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for subscriber in list(self._subscribers):
            subscriber(self._state)

    def reset(self) -> None:
        self._set_state(loading=False, error=None, data=None)

    # -- calls --------------------------------------------------------------

    def backoff_delay_ms(self, retry_count: int) -> int:
        return self.retry_delay_ms * 2 ** retry_count

    async def call(self, target: str, method: str = "GET", **request_options: Any) -> CallResult:
        """
        Issue `method target` and resolve with data or a normalized error.

        `request_options` (headers, json, content, params, ...) are passed to
        httpx unchanged on every attempt.
        """
        self._set_state(loading=True, error=None, data=None)
        retry_count = 0

        while True:
            data, error, retryable = await self._attempt(target, method, request_options, retry_count)
            if error is None:
                self._set_state(loading=False, data=data)
                return CallResult(data=data)

            if retryable and retry_count < self.max_retries:
                delay_ms = self.backoff_delay_ms(retry_count)
                logger.info(
                    "%s %s failed (%s), retry %d/%d in %dms",
                    method, target, error.type.value, retry_count + 1, self.max_retries, delay_ms,
                )
                await self._sleep(delay_ms / 1000)
                retry_count += 1
                continue

            logger.debug("%s %s finished with %s", method, target, error.type.value)
            self._set_state(loading=False, error=error)
            return CallResult(error=error)

    async def _attempt(
        self,
        target: str,
        method: str,
        request_options: dict[str, Any],
        retry_count: int,
    ) -> tuple[Any, Optional[ApiError], bool]:
        """One attempt → (data, error, retryable)."""
        logger.debug("%s %s attempt %d", method, target, retry_count + 1)
        # an injected client's own (shorter) timeout must not preempt timeout_ms
        options = {"timeout": self.timeout_ms / 1000, **request_options}
        try:
            response = await asyncio.wait_for(
                self._client.request(method, target, **options),
                timeout=self.timeout_ms / 1000,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return None, ApiError(TIMEOUT_MESSAGE, ErrorType.timeout, retry_count=retry_count), True
        except httpx.TransportError as exc:
            logger.debug("Transport failure: %s", exc.__class__.__name__)
            return None, ApiError(NETWORK_MESSAGE, ErrorType.network, retry_count=retry_count), True
        except Exception:
            logger.exception("Unexpected failure calling %s %s", method, target)
            return None, ApiError(UNEXPECTED_MESSAGE, ErrorType.server_error, retry_count=retry_count), False

        if not response.is_success:
            error = parse_error_response(response, retry_count)
            return None, error, response.status_code in RETRYABLE_STATUSES

        try:
            body = response.json()
        except ValueError:
            error = ApiError(
                UNEXPECTED_MESSAGE,
                ErrorType.server_error,
                retry_count=retry_count,
                status=response.status_code,
            )
            return None, error, False

        # The envelope's own flag wins over a 2xx status (e.g. 207 partial failure).
        if isinstance(body, dict) and "success" in body and not body["success"]:
            if isinstance(body.get("error"), dict):
                default_type = error_type_for_status(response.status_code)
                return None, _from_envelope(body, response.status_code, retry_count, default_type), False
            error = ApiError(
                message="An error occurred",
                type=ErrorType.server_error,
                retry_count=retry_count,
                status=response.status_code,
            )
            return None, error, False

        # exactly one of data / error is set, so a `null` payload is an error
        if body is None:
            error = ApiError(
                UNEXPECTED_MESSAGE,
                ErrorType.server_error,
                retry_count=retry_count,
                status=response.status_code,
            )
            return None, error, False

        return body, None, False
