"""Intake error taxonomy"""
from typing import Iterable, List, Dict, Optional


class IntakeError(Exception):
    """Base class for submission errors"""


class ValidationError(IntakeError):
    """User-correctable problem with a single form field"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class FormInvalid(IntakeError):
    """One or more fields failed validation"""

    def __init__(self, errors: Iterable[ValidationError]):
        self.errors: List[ValidationError] = list(errors)
        fields = ", ".join(e.field for e in self.errors)
        super().__init__(f"Invalid fields: {fields}")

    def as_dict(self) -> Dict[str, str]:
        return {e.field: e.message for e in self.errors}


class ConfigurationError(IntakeError):
    """Required secrets are missing from the environment"""


class DeliveryError(IntakeError):
    """The messaging service rejected the notification or was unreachable"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
