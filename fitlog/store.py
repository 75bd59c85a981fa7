# backend/fitlog/store.py
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import db
from .errors import ErrorReporter, FailureEvent, StoreError, get_reporter

logger = logging.getLogger(__name__)


@dataclass
class Outcome:
    ok: bool
    value: Any = None
    failure: Optional[FailureEvent] = None


def run_atomic(
    work: Callable[[], Any],
    *,
    path: str,
    operation: str,
    request_resource_data: Any = None,
    reporter: Optional[ErrorReporter] = None,
    reraise: bool = False,
) -> Outcome:
    """
    Run ``work`` as one unit of work on the session and commit it.

    ``work`` reads what it needs and stages every change on ``db.session``;
    nothing is visible to other sessions until the commit here. Store
    failures roll everything back and are reported exactly once. Other
    exceptions are bugs: rolled back and propagated unreported.
    """
    try:
        value = work()
        db.session.commit()
    except (SQLAlchemyError, StoreError) as e:
        db.session.rollback()
        logger.exception("Transaction on %s failed (%s)", path, operation)
        event = FailureEvent.from_exception(
            e, path, operation, request_resource_data=request_resource_data
        )
        get_reporter(reporter).emit(event)
        if reraise:
            raise
        return Outcome(ok=False, failure=event)
    except Exception:
        db.session.rollback()
        raise

    return Outcome(ok=True, value=value)
