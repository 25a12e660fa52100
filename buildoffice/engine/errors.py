"""
BuildOffice Error Hierarchy — Structured exceptions for the back-office services.

Every error carries a human-readable message (the string surfaced to the UI)
plus keyword context that serializes to JSON for the audit log.

Hierarchy:
    BuildOfficeError
    ├── NotFoundError          — Record id does not exist
    ├── FolderNotEmptyError    — Folder still holds documents or subfolders
    ├── ValidationError        — Input rejected (names, colors, cycles, sizes)
    ├── RecordError            — Persistence operation failed
    └── ConfigError            — Invalid buildoffice.yaml
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class BuildOfficeError(Exception):
    """
    Base error for all BuildOffice failures.
    All context is serializable to JSON.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.object_ref: Optional[str] = context.get("object_ref")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "object_ref": self.object_ref,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k != "object_ref"
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.object_ref:
            parts.append(f"object_ref={self.object_ref}")
        return " | ".join(parts)


class NotFoundError(BuildOfficeError):
    """
    A record id did not resolve.
    Message follows the "<Record> not found" convention, e.g. "Document not found".
    """

    def __init__(self, message: str, **context: Any):
        self.record_type: Optional[str] = context.get("record_type")
        self.record_id: Optional[int] = context.get("record_id")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["record_type"] = self.record_type
        d["record_id"] = self.record_id
        return d


class FolderNotEmptyError(BuildOfficeError):
    """Folder delete refused: reason is "documents" or "subfolders"."""

    def __init__(self, message: str, **context: Any):
        self.folder_id: Optional[int] = context.get("folder_id")
        self.reason: Optional[str] = context.get("reason")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["folder_id"] = self.folder_id
        d["reason"] = self.reason
        return d


class ValidationError(BuildOfficeError):
    """
    Input validation failed.
    Includes field-level error details when available.
    """

    def __init__(self, message: str, **context: Any):
        self.validation_errors: Optional[List[Dict[str, Any]]] = context.get("validation_errors")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["validation_errors"] = self.validation_errors
        return d


class RecordError(BuildOfficeError):
    """Persistence operation failed (create, update, delete, query)."""

    def __init__(self, message: str, **context: Any):
        self.record_type: Optional[str] = context.get("record_type")
        self.operation: Optional[str] = context.get("operation")
        super().__init__(message, **context)


class ConfigError(BuildOfficeError):
    """Configuration error — invalid buildoffice.yaml."""
    pass
