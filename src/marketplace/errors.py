"""Error kinds surfaced by marketplace workflows.

Validation and not-found failures reuse Protean's exceptions so that the
FastAPI integration maps them without extra wiring. The kinds below add the
checkout- and status-specific validation failures, plus the two errors
Protean has no equivalent for.
"""

from protean.exceptions import ValidationError


class InvalidCartError(ValidationError):
    """The cart snapshot cannot be turned into an order."""


class NoActiveShopError(ValidationError):
    """No shop the customer may order from could be determined."""


class InvalidStatusError(ValidationError):
    """The requested order or payment status is not a known value."""


class AuthorizationError(Exception):
    """The principal's role or shop does not permit the operation.

    The message is logged but never returned to callers; the HTTP layer
    answers with a generic denial.
    """


class BatchCommitError(Exception):
    """The batched write backing an operation failed to commit.

    Nothing from the batch was applied. Status changes may be resubmitted
    as-is; a checkout should be re-read before resubmitting.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} could not be committed: {reason}")
