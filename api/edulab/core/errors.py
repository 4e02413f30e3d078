from __future__ import annotations

from typing import Any, Dict, Optional


class ApiError(Exception):
    """
    Error surfaced to the caller as ``{error, details?, hint?}``.
    ``error`` is the stable machine-readable tag; ``details`` is free text.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details
        self.hint = hint

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details:
            body["details"] = self.details
        if self.hint:
            body["hint"] = self.hint
        return body


def bad_request(error: str, details: Optional[str] = None, hint: Optional[str] = None) -> ApiError:
    return ApiError(400, error, details=details, hint=hint)


class UpstreamError(Exception):
    """The generation service failed, timed out, or answered with garbage."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(Exception):
    """A document of a supported type could not be read."""

    def __init__(self, extension: str, message: str) -> None:
        super().__init__(f"could not extract .{extension}: {message}")
        self.extension = extension


class UnsupportedType(Exception):
    def __init__(self, extension: str) -> None:
        super().__init__(f"unsupported file type: {extension or '(none)'}")
        self.extension = extension
