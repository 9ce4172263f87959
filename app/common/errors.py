"""Tagged failures raised by the workflow services.

Services never deal with HTTP. Each error carries a ``code`` tag and the
status the request layer should answer with; ``app.main`` renders them as
``ErrorResponse`` bodies.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """Base for every expected failure of a core operation."""

    code = "workflow_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidInputError(WorkflowError):
    """Malformed, missing or out-of-enum input. Always client-correctable."""

    code = "invalid_input"
    status_code = 400


class PreconditionFailedError(WorkflowError):
    """A business gate is not met (quota, exclusivity, wrong stage...)."""

    code = "precondition_failed"
    status_code = 422


class NotFoundError(WorkflowError):
    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, identifier: Any = None, details: Optional[Dict[str, Any]] = None) -> None:
        message = f"{resource} {identifier} not found" if identifier is not None else f"{resource} not found"
        super().__init__(message, details)
        self.resource = resource
        self.identifier = identifier


class ForbiddenError(WorkflowError):
    """The caller is authenticated but may not see or touch this resource."""

    code = "forbidden"
    status_code = 403


class ConflictError(WorkflowError):
    """A concurrent writer invalidated an assumption of this operation."""

    code = "conflict"
    status_code = 409


class StorageFailureError(WorkflowError):
    """The transaction could not be committed. Details stay in the logs."""

    code = "storage_failure"
    status_code = 500

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message)


__all__ = [
    "WorkflowError",
    "InvalidInputError",
    "PreconditionFailedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "StorageFailureError",
]
