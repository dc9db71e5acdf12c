"""Single submission attempt: validate, then dispatch"""
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

from investor_intake.exceptions import IntakeError
from investor_intake.services.form_validator import validate_submission
from investor_intake.services.telegram_service import SubmissionDispatcher

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    DISPATCHING = "dispatching"
    DELIVERED = "delivered"
    FAILED = "failed"


TRANSITIONS = {
    SubmissionState.IDLE: {SubmissionState.VALIDATING},
    SubmissionState.VALIDATING: {SubmissionState.INVALID, SubmissionState.DISPATCHING},
    SubmissionState.DISPATCHING: {SubmissionState.DELIVERED, SubmissionState.FAILED},
    SubmissionState.INVALID: set(),
    SubmissionState.DELIVERED: set(),
    SubmissionState.FAILED: set(),
}

TERMINAL_STATES = frozenset(state for state, targets in TRANSITIONS.items() if not targets)


class InvalidTransition(IntakeError):
    """Attempted a state change the attempt lifecycle does not allow"""


class SubmissionOutcome(BaseModel):
    """Final result of one attempt"""
    state: SubmissionState
    investor_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    errors: Dict[str, str] = Field(default_factory=dict)


class SubmissionAttempt:
    """
    Drives one attempt through Idle -> Validating -> {Invalid, Dispatching}
    -> {Delivered, Failed}. Attempts are single use; resubmitting means a new
    attempt (and a new investor ID).
    """

    def __init__(self, dispatcher: SubmissionDispatcher, require_phone_number: bool = False):
        self.dispatcher = dispatcher
        self.require_phone_number = require_phone_number
        self.state = SubmissionState.IDLE

    def _transition(self, target: SubmissionState):
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"Cannot move from {self.state.value} to {target.value}")
        self.state = target

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    async def run(self, raw: Mapping[str, Any]) -> SubmissionOutcome:
        self._transition(SubmissionState.VALIDATING)
        result = validate_submission(raw, require_phone_number=self.require_phone_number)

        if not result.is_valid:
            self._transition(SubmissionState.INVALID)
            logger.info(f"Submission rejected, invalid fields: {sorted(result.errors)}")
            return SubmissionOutcome(
                state=self.state,
                error="Please correct the highlighted fields",
                errors=result.errors
            )

        self._transition(SubmissionState.DISPATCHING)
        dispatch = await self.dispatcher.dispatch(result.record)

        if dispatch.success:
            self._transition(SubmissionState.DELIVERED)
            return SubmissionOutcome(
                state=self.state,
                investor_id=dispatch.investor_id,
                message=dispatch.message
            )

        self._transition(SubmissionState.FAILED)
        return SubmissionOutcome(state=self.state, error=dispatch.error)
