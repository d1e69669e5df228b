"""
Order Desk Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure paths of each action.
How:   Each exception carries a user-facing message and an optional context
       dict. The action router catches them at a single boundary and turns
       them into `{status: "error", message}` envelopes.
Who:   Raised by services and the sheet store; caught by ActionRouter.

Exception Hierarchy:
    OrderDeskError (base)
    ├── ValidationError           → malformed request body
    ├── NotFoundError             → entity lookup found nothing ("Client not found")
    ├── ConfigurationError        → credentials / settings missing
    ├── NotificationServiceError  → OneSignal non-200 or transport failure
    └── SheetStoreError           → spreadsheet could not be read

    The message is returned to the caller; the context is logged only.
"""

from typing import Any, Dict, Optional


class OrderDeskError(Exception):
    """
    Base exception for all Order Desk application errors.

    Attributes:
        message:  User-facing error description (safe to return in an envelope)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OrderDeskError):
    """
    Raised when the inbound request cannot be understood.

    When:  Body is not UTF-8, not valid JSON, or not a JSON object.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(OrderDeskError):
    """
    Raised when a requested entity does not exist in the sheet store.

    The message is `"<resource> not found"`, which the client app shows
    verbatim (e.g. "Client not found").
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ConfigurationError(OrderDeskError):
    """Raised when a required setting or secret is absent."""

    def __init__(
        self,
        message: str = "Required configuration is missing",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotificationServiceError(OrderDeskError):
    """
    Raised when the push-notification provider call fails.

    What:    OneSignal answered with a non-200 status, returned an unreadable
             body, or could not be reached at all.
    Retries: None. Each failure is reported once, in the response to the
             request that caused it.

    Attributes:
        status_code: Provider HTTP status, or None for transport failures.
    """

    def __init__(
        self,
        message: str = "Push notification service is unavailable",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class SheetStoreError(OrderDeskError):
    """
    Raised when the spreadsheet backing the data store cannot be read.

    The message stays generic; the underlying API error goes to the log
    through `context`.
    """

    def __init__(
        self,
        message: str = "The data store could not be read. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
