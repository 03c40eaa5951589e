"""Command dispatch: the single entry point for every state change.

Protean runs each command handler inside a ``UnitOfWork``: all repository
writes a handler makes are committed together when it returns, and none are
applied if it raises. That unit of work is the batched write every workflow
is built on. There is no compare-and-swap against what the handler read;
workflows that need one re-read inside the handler.
"""

import structlog
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.errors import AuthorizationError, BatchCommitError

logger = structlog.get_logger(__name__)

# Failures that describe the request itself; they reach the caller unchanged
_REQUEST_ERRORS = (
    ValidationError,
    ObjectNotFoundError,
    InvalidOperationError,
    AuthorizationError,
)


def execute(command):
    """Process ``command`` synchronously and return the handler's result.

    Anything other than a request error means the batch did not commit and
    is raised as ``BatchCommitError``.
    """
    operation = command.__class__.__name__
    try:
        return current_domain.process(command, asynchronous=False)
    except _REQUEST_ERRORS:
        raise
    except Exception as exc:
        logger.error("Batched write failed", operation=operation, error=str(exc), exc_info=True)
        raise BatchCommitError(operation, str(exc)) from exc
