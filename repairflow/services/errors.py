"""Domain errors raised by the workflow services.

Each carries the HTTP status the API answers with; ``main.py`` installs the
handler that turns them into ``{"detail": ...}`` responses.
"""

from __future__ import annotations


class WorkflowError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WorkflowError):
    status_code = 404


class ConflictError(WorkflowError):
    status_code = 409


class ValidationError(WorkflowError):
    status_code = 400


class PermissionDeniedError(WorkflowError):
    status_code = 403


class DeliveryError(WorkflowError):
    status_code = 502
