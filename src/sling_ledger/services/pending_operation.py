"""Deferred mutations for confirm/cancel flows."""

import logging
from typing import Any, Callable, Optional

from sling_ledger.core.exceptions import AppError, ValidationError
from sling_ledger.domain.models import OperationState

logger = logging.getLogger(__name__)


class PendingOperation:
    """
    A mutation prepared by a confirmation screen but not yet applied.

    Nothing changes until ``commit()``. Cancelling (or simply never
    committing) leaves the account untouched.
    """

    def __init__(self, description: str, action: Callable[..., Any], *args: Any, **kwargs: Any):
        self.description = description
        self._action = action
        self._args = args
        self._kwargs = kwargs
        self._state = OperationState.PENDING
        self._result: Any = None
        self._error: Optional[AppError] = None

    @property
    def state(self) -> OperationState:
        return self._state

    @property
    def result(self) -> Any:
        return self._result

    @property
    def error(self) -> Optional[AppError]:
        return self._error

    def commit(self) -> Any:
        """
        Apply the mutation once.

        On an AppError the operation moves to FAILED, keeps the error and
        re-raises it.
        """
        if self._state != OperationState.PENDING:
            raise ValidationError(f"Operation '{self.description}' is already {self._state.value.lower()}")
        try:
            self._result = self._action(*self._args, **self._kwargs)
        except AppError as exc:
            self._state = OperationState.FAILED
            self._error = exc
            logger.info("Operation '%s' failed: %s", self.description, exc.message)
            raise
        self._state = OperationState.COMMITTED
        return self._result

    def cancel(self) -> None:
        if self._state != OperationState.PENDING:
            raise ValidationError(f"Operation '{self.description}' is already {self._state.value.lower()}")
        self._state = OperationState.CANCELLED
        logger.debug("Operation '%s' cancelled", self.description)
