"""Resilient HTTP client for the DigiClick backend.

Every call goes through the same pipeline: optional read-through cache,
per-endpoint fixed-window rate limit, timeout-bounded attempts retried with
exponential backoff, and normalization into ``ApiSuccess`` / ``ApiFailure``.
Expected failures never raise past ``request()``.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from digiclick_client.config import RELATED_ENDPOINTS, Settings, get_settings
from digiclick_client.errors import (
    ClientError,
    NetworkError,
    RequestCancelled,
    RequestTimeout,
)
from digiclick_client.messages import get_error_message
from digiclick_client.schemas.result import (
    ApiFailure,
    ApiResult,
    ApiSuccess,
    JsonBody,
    TextBody,
)
from digiclick_client.services.rate_limit import FixedWindowRateLimiter
from digiclick_client.services.response_cache import ResponseCache, base_path
from digiclick_client.services.retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = "Invalid response from server."
REQUEST_FAILED_MESSAGE = "Request failed"

DEFAULT_HEADERS = {"Content-Type": "application/json"}


def _is_json(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == "application/json" or mime.endswith("+json")


def _error_from_body(body: JsonBody | TextBody) -> str:
    """Pull the backend's error message out of a non-2xx body."""
    if isinstance(body, JsonBody) and isinstance(body.value, Mapping):
        payload = body.value
        for field in ("error", "message", "errors"):
            value = payload.get(field)
            if value:
                return get_error_message(value)
    return REQUEST_FAILED_MESSAGE


def normalize_response(response: httpx.Response) -> ApiResult:
    """Parse the body by declared content type and classify by status code."""
    body: JsonBody | TextBody
    if _is_json(response.headers.get("content-type", "")):
        if not response.content:
            body = JsonBody(value=None)
        else:
            try:
                body = JsonBody(value=response.json())
            except ValueError:
                logger.warning(
                    "Malformed JSON from %s (status %d)",
                    response.request.url,
                    response.status_code,
                )
                return ApiFailure(error=INVALID_RESPONSE_MESSAGE, status=response.status_code)
    else:
        body = TextBody(value=response.text)

    if response.is_success:
        return ApiSuccess(body=body, status=response.status_code, headers=dict(response.headers))

    logger.info("%s returned %d", response.request.url, response.status_code)
    return ApiFailure(error=_error_from_body(body), status=response.status_code)


class ResilientFetchClient:
    """One instance per application; holds the rate-limit ledger and cache.

    Args:
        settings: Defaults for base URL, retries, timeout, cache and rate limit.
        transport: Optional httpx transport (tests, proxies).
        rate_limiter: Shared limiter; built from settings when omitted.
        cache: Shared response cache; built from settings when omitted.
        sleep: Backoff sleep, injectable for deterministic tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limiter: FixedWindowRateLimiter | None = None,
        cache: ResponseCache | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.settings.validate_limits()

        if rate_limiter is None:
            rate_limiter = FixedWindowRateLimiter(
                self.settings.rate_limit_max_requests,
                self.settings.rate_limit_window_seconds,
            )
        if cache is None:
            cache = ResponseCache(self.settings.cache_duration_seconds)
        self.rate_limiter = rate_limiter
        self.cache = cache
        self._sleep = sleep
        self._http = httpx.AsyncClient(
            base_url=self.settings.api_url,
            headers=DEFAULT_HEADERS,
            transport=transport,
        )

    async def __aenter__(self) -> "ResilientFetchClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        endpoint: str,
        *,
        method: str | None = None,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        content: str | bytes | None = None,
        params: Mapping[str, Any] | None = None,
        retries: int | None = None,
        retry_delay: float | None = None,
        timeout: float | None = None,
        cache: bool = False,
        cache_ttl: float | None = None,
        skip_rate_limit: bool = False,
        cancel: asyncio.Event | None = None,
    ) -> ApiResult:
        """Send one logical request and return ApiSuccess or ApiFailure.

        Cache hits are served before the rate limit is consulted, so they
        never use a slot. Only GET requests are read from or written to
        the cache, and each caller gets its own copy of a cached result.
        A successful mutating request invalidates cached entries under its
        base path (e.g. ``/api/newsletter``) and under the endpoints listed
        for it in ``RELATED_ENDPOINTS``. ``cancel`` aborts the in-flight
        attempt and any remaining retries.
        """
        http_method = (method or "GET").upper()
        is_get = http_method == "GET"
        body = json if json is not None else content
        target = endpoint
        if params:
            separator = "&" if "?" in endpoint else "?"
            target = f"{endpoint}{separator}{httpx.QueryParams(params)}"

        cache_key = None
        ttl = None
        if cache and is_get:
            ttl = cache_ttl if cache_ttl is not None else self.settings.cache_duration_for(endpoint)
            if ttl > 0:
                cache_key = self.cache.make_key(http_method, target, body)
                cached = self.cache.get(cache_key)
                if cached is not None:
                    logger.debug("Cache hit for %s %s", http_method, target)
                    return cached.model_copy(deep=True)

        policy = RetryPolicy(
            retries=max(0, self.settings.request_retries if retries is None else retries),
            base_delay=self.settings.retry_delay_seconds if retry_delay is None else retry_delay,
        )
        attempt_timeout = self.settings.request_timeout_seconds if timeout is None else timeout

        async def attempt(number: int) -> ApiResult:
            if cancel is not None and cancel.is_set():
                raise RequestCancelled()
            logger.debug("%s %s attempt %d", http_method, target, number + 1)
            return await self._send(
                http_method,
                endpoint,
                headers=headers,
                json=json,
                content=content,
                params=params,
                timeout=attempt_timeout,
                cancel=cancel,
            )

        async def backoff(delay: float) -> None:
            await self._wait_or_cancel(self._sleep(delay), cancel)

        try:
            if not skip_rate_limit:
                self.rate_limiter.check(endpoint)
            result = await retry_async(
                attempt,
                policy,
                sleep=backoff,
                label=f"{http_method} {target}",
            )
        except ClientError as exc:
            return exc.to_result()

        if result.success:
            if cache_key is not None:
                self.cache.set(cache_key, result.model_copy(deep=True), ttl=ttl, endpoint=target)
            elif not is_get:
                self._invalidate_for_write(endpoint)
        return result

    def _invalidate_for_write(self, endpoint: str) -> None:
        base = base_path(endpoint)
        dropped = self.cache.invalidate(base)
        for related in RELATED_ENDPOINTS.get(base, ()):
            dropped += self.cache.invalidate(related)
        if dropped:
            logger.debug("Invalidated %d cached entries after write to %s", dropped, endpoint)

    async def get(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request(endpoint, method="GET", **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request(endpoint, method="POST", **kwargs)

    async def put(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request(endpoint, method="PUT", **kwargs)

    async def patch(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request(endpoint, method="PATCH", **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> ApiResult:
        return await self.request(endpoint, method="DELETE", **kwargs)

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        headers: Mapping[str, str] | None,
        json: Any,
        content: str | bytes | None,
        params: Mapping[str, Any] | None,
        timeout: float,
        cancel: asyncio.Event | None,
    ) -> ApiResult:
        """One attempt, abandoned at ``timeout`` seconds or when cancel fires."""
        request_task = asyncio.ensure_future(
            self._http.request(
                method,
                endpoint,
                headers=headers,
                json=json,
                content=content,
                params=params,
                timeout=timeout,
            )
        )
        cancel_task = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
        waiters = {request_task} if cancel_task is None else {request_task, cancel_task}

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if cancel_task is not None:
                cancel_task.cancel()
            if not request_task.done():
                request_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await request_task

        if request_task not in done:
            if cancel is not None and cancel.is_set():
                raise RequestCancelled()
            raise RequestTimeout()

        try:
            response = request_task.result()
        except httpx.TimeoutException as exc:
            raise RequestTimeout() from exc
        except httpx.RequestError as exc:
            logger.debug("%s %s failed: %s", method, endpoint, exc)
            raise NetworkError(exc) from exc

        return normalize_response(response)

    @staticmethod
    async def _wait_or_cancel(sleep: Awaitable[None], cancel: asyncio.Event | None) -> None:
        """Await a backoff delay, cut short by the cancel signal."""
        if cancel is None:
            await sleep
            return
        sleep_task = asyncio.ensure_future(sleep)
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleep_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleep_task, cancel_task):
                task.cancel()
        if cancel.is_set():
            raise RequestCancelled()
