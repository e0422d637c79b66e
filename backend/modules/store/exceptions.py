"""
Record store module exceptions.
"""

from typing import Optional

from shared.exceptions import StorageError


class StorageFailureError(StorageError):
    """Raised when a write to the record store cannot be completed."""

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(
            message or f"Failed to write record store key: {key}",
            code="STORAGE_FAILURE",
            details={"key": key},
        )


class StorageQuotaExceededError(StorageFailureError):
    """Raised when a write would push the store past its quota."""

    def __init__(self, key: str, required: int, quota: int):
        super().__init__(
            key,
            f"Storage quota exceeded writing {key}: {required} > {quota} bytes",
        )
        self.code = "STORAGE_QUOTA_EXCEEDED"
        self.details.update({"required_bytes": required, "quota_bytes": quota})
