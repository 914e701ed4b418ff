from __future__ import annotations


class ApiError(Exception):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        error_class: str,
        retryable: bool,
        http_status: int,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.error_class = error_class
        self.retryable = retryable
        self.http_status = http_status


class StorageUnavailable(ApiError):
    """Raised when a durable state backend cannot be read or written."""

    def __init__(self, message: str = "state storage unavailable") -> None:
        super().__init__(
            code="STATE_STORAGE_UNAVAILABLE",
            message=message,
            error_class="transient",
            retryable=True,
            http_status=503,
        )


class StateVersionConflict(ApiError):
    def __init__(self, *, expected_version: int, current_version: int) -> None:
        super().__init__(
            code="STATE_VERSION_CONFLICT",
            message=f"state version mismatch: expected {expected_version}, current {current_version}",
            error_class="business_rule",
            retryable=False,
            http_status=409,
        )
        self.expected_version = expected_version
        self.current_version = current_version
