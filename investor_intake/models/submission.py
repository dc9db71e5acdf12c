"""Investment form Pydantic models"""
import re
from typing import Any, Dict, List, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from investor_intake.services.form_rules import COUNTRIES

PHONE_PATTERN = re.compile(r"^\+\d{1,4}\d{6,14}$")
# Keeps the relayed message well under the Bot API 4096 character limit
MAX_DETAIL_LENGTH = 128

Country = Literal["india", "other"]
PaymentMethod = Literal["bank_transfer", "upi", "crypto"]
ReturnMethod = Literal["bank_transfer", "upi", "crypto", "same"]


class CamelModel(BaseModel):
    """Base model accepting camelCase (wire) or snake_case (Python) names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvestmentFormInput(CamelModel):
    """
    Raw form values with the base (per-field) rules applied.

    Every field has a default so that missing fields surface as field-level
    messages instead of a generic "Field required".
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_default=True,
        extra="ignore",
    )

    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    country: Optional[str] = None
    payment_method: Optional[str] = None
    bank_account_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    upi_id: Optional[str] = None
    crypto_wallet: Optional[str] = None
    investment_return_method: Optional[str] = None
    agreed_to_terms: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        v = v or ""
        if len(v) < 2:
            raise PydanticCustomError("name_too_short", "Name must be at least 2 characters")
        if len(v) > 100:
            raise PydanticCustomError("name_too_long", "Name must be at most 100 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: Optional[str]) -> str:
        v = v or ""
        if not v or len(v) > 255:
            raise PydanticCustomError("email", "Invalid email address")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email", "Invalid email address")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        required = bool((info.context or {}).get("require_phone_number"))
        if not v:
            if required:
                raise PydanticCustomError("phone_required", "Please provide your phone number")
            return None
        compact = re.sub(r"[\s-]", "", v)
        if not PHONE_PATTERN.match(compact):
            raise PydanticCustomError(
                "phone_format", "Please enter a valid phone number with country code"
            )
        return v

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: Optional[str]) -> str:
        if not v:
            raise PydanticCustomError("country_required", "Please select a country")
        if v not in COUNTRIES:
            raise PydanticCustomError("country_invalid", "Please select a valid country")
        return v

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v: Optional[str]) -> str:
        if not v:
            raise PydanticCustomError("payment_method_required", "Please select a payment method")
        return v

    @field_validator(
        "bank_account_name", "bank_account_number", "ifsc_code", "upi_id", "crypto_wallet"
    )
    @classmethod
    def validate_detail_length(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) > MAX_DETAIL_LENGTH:
            raise PydanticCustomError(
                "detail_too_long", f"Must be at most {MAX_DETAIL_LENGTH} characters"
            )
        return v

    @field_validator("agreed_to_terms", mode="before")
    @classmethod
    def validate_terms(cls, v: Any) -> bool:
        # Only a literal boolean true counts as consent, not "yes" or 1
        if v is not True:
            raise PydanticCustomError(
                "terms_required", "You must agree to the terms and conditions"
            )
        return v


class SubmissionRecord(CamelModel):
    """Accepted submission; only the validator builds these"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone_number: Optional[str] = None
    country: Country
    payment_method: PaymentMethod
    bank_account_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    upi_id: Optional[str] = None
    crypto_wallet: Optional[str] = None
    investment_return_method: Optional[ReturnMethod] = None
    agreed_to_terms: Literal[True] = True


class FormValidationResult(BaseModel):
    """Outcome of validating one set of form values"""
    record: Optional[SubmissionRecord] = None
    errors: Dict[str, str] = Field(default_factory=dict)
    required_fields: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class DispatchResult(CamelModel):
    """Outcome of relaying a record to the messaging channel"""
    success: bool
    investor_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


class SubmissionResponse(CamelModel):
    """Response for POST /api/submissions"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    investor_id: Optional[str] = None
    errors: Optional[Dict[str, str]] = None


class ValidationResponse(CamelModel):
    """Response for live validation"""
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    required_fields: List[str] = Field(default_factory=list)


class FormOption(BaseModel):
    """Selectable option with its display label"""
    value: str
    label: str


class FormOptionsResponse(CamelModel):
    """Options and field visibility for the current selection"""
    countries: List[FormOption]
    payment_methods: List[FormOption]
    return_methods: List[FormOption]
    visible_fields: List[str]
    required_fields: List[str]
