from __future__ import annotations

SOURCE_MAX_BYTES = 128 * 1024


class QuotaError(ValueError):
    pass


def enforce_source_size(source: str, limit: int = SOURCE_MAX_BYTES) -> None:
    size = len(source.encode("utf-8"))
    if size > limit:
        raise QuotaError(f"payload_too_large: source code is {size} bytes, limit is {limit // 1024}KiB")


__all__ = ["enforce_source_size", "QuotaError", "SOURCE_MAX_BYTES"]
