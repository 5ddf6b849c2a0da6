from __future__ import annotations

import base64
import binascii
from typing import Optional

from pydantic import BaseModel, Field

# Judge0 status ids the client cares about; the rest of the space is backend-owned.
STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3
STATUS_TIME_LIMIT_EXCEEDED = 5
STATUS_COMPILATION_ERROR = 6

IN_PROGRESS_STATUSES = frozenset({STATUS_IN_QUEUE, STATUS_PROCESSING})


def encode_source(source_code: str) -> str:
    return base64.b64encode(source_code.encode("utf-8")).decode("ascii")


def decode_field(value: Optional[str]) -> Optional[str]:
    """Decode a base64 text field returned with ``base64_encoded=true``.

    Values that are not valid base64 are returned unchanged.
    """
    if value is None:
        return None
    # Judge0 wraps base64 output every 60 characters
    compact = "".join(value.split())
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return value
    return raw.decode("utf-8", errors="replace")


class Judge0SubmissionRequest(BaseModel):
    language_id: int
    source_code: str = Field(..., description="Base64 encoded source code")
    stdin: Optional[str] = None

    @classmethod
    def from_source(cls, source_code: str, language_id: int, stdin: Optional[str] = None) -> "Judge0SubmissionRequest":
        return cls(
            language_id=language_id,
            source_code=encode_source(source_code),
            stdin=encode_source(stdin) if stdin is not None else None,
        )


class Judge0SubmissionResponse(BaseModel):
    token: str


class Judge0Status(BaseModel):
    id: int
    description: str = ""


class Judge0ExecutionResult(BaseModel):
    token: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    time: Optional[str] = None
    memory: Optional[float] = None
    status: Judge0Status

    @property
    def status_id(self) -> int:
        return self.status.id

    @property
    def status_description(self) -> str:
        return self.status.description

    @property
    def is_terminal(self) -> bool:
        return self.status.id not in IN_PROGRESS_STATUSES


class LanguageInfo(BaseModel):
    id: int
    name: str
