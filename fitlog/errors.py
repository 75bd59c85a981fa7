# backend/fitlog/errors.py
"""
Store failures and the channel that reports them.

Data-access functions never raise store failures at their caller (with a few
documented exceptions); they roll back, publish a :class:`FailureEvent` on the
application's :class:`ErrorReporter` and hand back a safe empty result.
"""
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional

from blinker import Signal
from flask import current_app

OPERATIONS = ("get", "list", "create", "update", "delete", "write")

KIND_PERMISSION_DENIED = "permission-denied"
KIND_NOT_FOUND = "not-found"
KIND_DECODE = "decode"
KIND_ABORTED = "aborted"

REPORTER_EXTENSION_KEY = "fitlog.reporter"


class StoreError(Exception):
    kind = KIND_ABORTED


class PermissionDenied(StoreError):
    kind = KIND_PERMISSION_DENIED


class DocumentNotFound(StoreError):
    kind = KIND_NOT_FOUND


class DecodeError(StoreError):
    """A stored document does not match its declared shape."""

    kind = KIND_DECODE


@dataclass(frozen=True)
class FailureEvent:
    path: str
    operation: str
    request_resource_data: Optional[Any] = None
    kind: str = KIND_ABORTED
    message: str = ""

    def __post_init__(self):
        if self.operation not in OPERATIONS:
            raise ValueError(f"unknown operation: {self.operation!r}")

    @classmethod
    def from_exception(cls, exc, path, operation, request_resource_data=None):
        return cls(
            path=path,
            operation=operation,
            request_resource_data=request_resource_data,
            kind=getattr(exc, "kind", KIND_ABORTED),
            message=(
                f"Insufficient permissions or failed transaction for "
                f"{operation} on {path}"
            ),
        )

    def to_dict(self):
        return asdict(self)


class ErrorReporter:
    """
    Publish/subscribe sink for :class:`FailureEvent`.

    Each app owns one reporter (see ``create_app``); tests and services can
    pass their own instead of reaching for the app's.
    """

    def __init__(self):
        self.failed = Signal("store failure")

    def emit(self, event: FailureEvent) -> None:
        self.failed.send(self, event=event)

    def subscribe(self, listener: Callable[[FailureEvent], None]) -> Callable:
        def receiver(sender, event):
            listener(event)

        self.failed.connect(receiver, weak=False)
        return receiver

    def unsubscribe(self, receiver: Callable) -> None:
        self.failed.disconnect(receiver)


def get_reporter(reporter: Optional[ErrorReporter] = None) -> ErrorReporter:
    if reporter is not None:
        return reporter
    return current_app.extensions[REPORTER_EXTENSION_KEY]
