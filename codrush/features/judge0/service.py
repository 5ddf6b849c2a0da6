import httpx
import asyncio
import time
import logging
from typing import Optional, Dict, Any, List, Callable, Tuple
from urllib.parse import urlparse

from pydantic import ValidationError

from codrush.core.config import Settings, get_settings
from codrush.common.cache import TTLCache
from .exceptions import NetworkError, RateLimitError, PollTimeoutError, PollCancelledError
from .schemas import (
    Judge0SubmissionRequest,
    Judge0SubmissionResponse,
    Judge0ExecutionResult,
    LanguageInfo,
    Judge0Status,
)

# Every call asks for base64 payloads and the full field set.
_QUERY = {"base64_encoded": "true", "fields": "*"}

_SECRET_HEADERS = ("x-rapidapi-key",)


def _mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: ("[REDACTED]" if k.lower() in _SECRET_HEADERS else v) for k, v in (headers or {}).items()}


class Judge0Service:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        base = (self.settings.rapid_api_url or "").strip()
        if base and not base.startswith("http://") and not base.startswith("https://"):
            # RapidAPI endpoints are always served over TLS
            base = "https://" + base
        self.base_url = base.rstrip("/")
        self.headers = {"Content-Type": "application/json"}
        if self.settings.rapid_api_host:
            self.headers["X-RapidAPI-Host"] = self.settings.rapid_api_host
        if self.settings.rapid_api_key:
            self.headers["X-RapidAPI-Key"] = self.settings.rapid_api_key
        self._cache = TTLCache(default_ttl=self.settings.metadata_cache_ttl_s)
        self._logger = logging.getLogger(__name__)
        self.poll_interval_s: float = self.settings.poll_interval_s
        self.poll_max_attempts: int = self.settings.poll_max_attempts
        self.poll_timeout_s: float = self.settings.poll_timeout_s

    @property
    def api_root(self) -> str:
        """Base URL without the trailing ``/submissions`` segment."""
        parsed = urlparse(self.base_url)
        path = parsed.path.rstrip("/")
        if path.endswith("/submissions"):
            path = path[: -len("/submissions")]
        return parsed._replace(path=path).geturl()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Perform one HTTP request against Judge0.

        Transport failures (connect, timeout, protocol) are raised as
        :class:`NetworkError`; the caller decides what a status code means.
        """
        if not self.base_url:
            raise NetworkError("Judge0 base URL is not configured (RAPID_API_URL).")
        self._logger.debug("Judge0 request: %s %s headers=%s", method, url, _mask_headers(self.headers))
        timeout = httpx.Timeout(connect=3.0, read=self.settings.judge0_timeout_s, write=5.0, pool=5.0)
        limits = httpx.Limits(max_connections=10, max_keepalive_connections=5)
        try:
            async with httpx.AsyncClient(timeout=timeout, limits=limits) as client:
                return await client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to reach Judge0 at {self.base_url}: {e}") from e

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(
                f"Judge0 returned a non-JSON body: {resp.text[:200]}", status_code=resp.status_code
            ) from e

    @staticmethod
    def _ensure_status(payload: Dict[str, Any]) -> Dict[str, Any]:
        """Normalise the ``status`` object so the result model always validates.

        Judge0 sometimes sends ``status_id``/``status_description`` flat; a
        payload without any status is treated as terminal with id -1.
        """
        payload = dict(payload)
        status_val = payload.get("status")
        if isinstance(status_val, dict) and status_val.get("id") is not None:
            status_val = dict(status_val)
            status_val.setdefault("description", payload.get("status_description") or "")
            if status_val["description"] is None:
                status_val["description"] = ""
            payload["status"] = status_val
            return payload
        status_id = payload.get("status_id")
        payload["status"] = {
            "id": status_id if status_id is not None else -1,
            "description": payload.get("status_description") or "unknown",
        }
        return payload

    async def submit(self, source_code: str, language_id: int) -> str:
        """Submit source code and return the Judge0 token."""
        request = Judge0SubmissionRequest.from_source(source_code, language_id)
        response = await self._request(
            "POST",
            self.base_url,
            params=_QUERY,
            json=request.model_dump(exclude_none=True),
        )
        if response.status_code == 429:
            self._logger.warning("Judge0 quota exceeded (429) for language_id=%s", language_id)
            raise RateLimitError("Judge0 request quota exceeded", status_code=429)
        if not response.is_success:
            raise NetworkError(
                f"Failed to submit code: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )
        data = self._json(response)
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise NetworkError("Judge0 returned an empty token", status_code=response.status_code)
        try:
            token = Judge0SubmissionResponse(token=token).token
        except ValidationError as e:
            raise NetworkError(f"Judge0 returned a malformed token: {token!r}", status_code=response.status_code) from e
        self._logger.info("Judge0 submission accepted: token=%s language_id=%s", token, language_id)
        return token

    async def fetch_status(self, token: str) -> Judge0ExecutionResult:
        """One status request for ``token``; does not wait or retry."""
        response = await self._request("GET", f"{self.base_url}/{token}", params=_QUERY)
        if not response.is_success:
            raise NetworkError(
                f"Failed to fetch submission result: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise NetworkError(f"Unexpected status payload for {token}: {str(payload)[:200]}")
        try:
            result = Judge0ExecutionResult(**self._ensure_status(payload))
        except ValidationError as e:
            raise NetworkError(
                f"Malformed status payload for {token}: {str(payload)[:200]}", status_code=response.status_code
            ) from e
        if not result.token:
            result = result.model_copy(update={"token": token})
        return result

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def poll(
        self,
        token: str,
        *,
        should_continue: Optional[Callable[[], bool]] = None,
        interval_s: Optional[float] = None,
        max_attempts: Optional[int] = None,
        timeout_s: Optional[float] = None,
    ) -> Judge0ExecutionResult:
        """Fetch the status of ``token`` until it leaves queued/processing.

        Each non-terminal response schedules exactly one follow-up request
        after ``interval_s``. ``max_attempts`` and ``timeout_s`` bound the
        loop (0 disables a bound). ``should_continue`` is checked before every
        follow-up; once it returns False the loop raises PollCancelledError.
        """
        interval = self.poll_interval_s if interval_s is None else interval_s
        limit = self.poll_max_attempts if max_attempts is None else max_attempts
        budget = self.poll_timeout_s if timeout_s is None else timeout_s

        start = time.monotonic()
        attempt = 0
        while True:
            result = await self.fetch_status(token)
            attempt += 1
            if result.is_terminal:
                self._logger.info(
                    "Judge0 submission %s finished: status=%s (%s) after %d poll(s)",
                    token, result.status_id, result.status_description, attempt,
                )
                return result

            self._logger.debug("Judge0 submission %s still %s", token, result.status_description or result.status_id)
            if limit and attempt >= limit:
                raise PollTimeoutError(
                    f"Submission {token} not finished after {attempt} polls", token=token, attempts=attempt
                )
            if budget and (time.monotonic() - start) >= budget:
                raise PollTimeoutError(
                    f"Submission {token} not finished after {budget:g}s", token=token, attempts=attempt
                )

            await self._sleep(interval)
            if should_continue is not None and not should_continue():
                self._logger.debug("Judge0 poll for %s abandoned", token)
                raise PollCancelledError(token)

    async def execute(self, source_code: str, language_id: int) -> Tuple[str, Judge0ExecutionResult]:
        """Submit then poll; returns ``(token, terminal result)``."""
        token = await self.submit(source_code, language_id)
        return token, await self.poll(token)

    async def get_languages(self) -> List[LanguageInfo]:
        key = "judge0:languages"
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        resp = await self._request("GET", f"{self.api_root}/languages")
        if resp.status_code != 200:
            raise NetworkError(f"Failed to fetch languages: {resp.status_code} body={resp.text[:300]}",
                               status_code=resp.status_code)
        try:
            value = [LanguageInfo(id=lang.get("id"), name=lang.get("name")) for lang in self._json(resp)]
        except (ValidationError, AttributeError, TypeError) as e:
            raise NetworkError(f"Malformed languages payload: {resp.text[:200]}", status_code=resp.status_code) from e
        self._cache.set(key, value)
        return value

    async def get_statuses(self) -> List[Judge0Status]:
        key = "judge0:statuses"
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        resp = await self._request("GET", f"{self.api_root}/statuses")
        if resp.status_code != 200:
            raise NetworkError(f"Failed to fetch statuses: {resp.status_code} body={resp.text[:300]}",
                               status_code=resp.status_code)
        try:
            value = [Judge0Status(id=s.get("id"), description=s.get("description") or "") for s in self._json(resp)]
        except (ValidationError, AttributeError, TypeError) as e:
            raise NetworkError(f"Malformed statuses payload: {resp.text[:200]}", status_code=resp.status_code) from e
        self._cache.set(key, value)
        return value


judge0_service = Judge0Service()
