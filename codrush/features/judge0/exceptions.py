from __future__ import annotations

from typing import Optional


class CodeExecutionError(Exception):
    """Base class for failures talking to the Judge0 backend."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(CodeExecutionError):
    """Transport failure or non-2xx response (other than 429 on submit)."""


class RateLimitError(CodeExecutionError):
    """HTTP 429 on submit: the daily RapidAPI quota is used up."""


class PollTimeoutError(CodeExecutionError):
    """Polling exceeded the configured attempt count or wall-clock budget."""

    def __init__(self, message: str, *, token: str, attempts: int) -> None:
        super().__init__(message)
        self.token = token
        self.attempts = attempts


class PollCancelledError(CodeExecutionError):
    """The poll loop was abandoned because a newer submission superseded it."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Polling for {token} was superseded")
        self.token = token


__all__ = [
    "CodeExecutionError",
    "NetworkError",
    "RateLimitError",
    "PollTimeoutError",
    "PollCancelledError",
]
