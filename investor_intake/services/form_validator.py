"""
Investment form validation.

Pure functions: no network, no persistence. Safe to call on every field change
for live feedback and again server-side before dispatch.
"""
from typing import Any, Dict, Mapping

from pydantic import ValidationError as PydanticValidationError

from investor_intake.exceptions import FormInvalid, ValidationError
from investor_intake.models.submission import (
    FormValidationResult,
    InvestmentFormInput,
    SubmissionRecord,
)
from investor_intake.services.form_rules import (
    COUNTRIES,
    PAYMENT_DETAIL_FIELDS,
    payment_methods_for,
    required_fields,
    required_groups,
    return_methods_for,
)

# python attribute name -> wire (camelCase) name
_WIRE_NAMES = {name: field.alias or name for name, field in InvestmentFormInput.model_fields.items()}
_PYTHON_NAMES = {alias: name for name, alias in _WIRE_NAMES.items()}


def _wire_name(loc) -> str:
    if not loc:
        return "form"
    key = str(loc[0])
    return _WIRE_NAMES.get(key, key)


def _text(raw: Mapping[str, Any], wire_name: str) -> str:
    """Trimmed string value for a field, accepting either naming style"""
    value = raw.get(wire_name)
    if value is None:
        value = raw.get(_PYTHON_NAMES.get(wire_name, wire_name))
    if isinstance(value, str):
        return value.strip()
    return ""


def _option_errors(country: str, payment_method: str, return_method: str) -> Dict[str, str]:
    """Selections the chosen country does not offer (values may arrive out of band)"""
    errors: Dict[str, str] = {}
    if country not in COUNTRIES:
        return errors
    if payment_method and payment_method not in payment_methods_for(country):
        errors["paymentMethod"] = "Payment method not available for the selected country"
    if return_method and return_method not in return_methods_for(country):
        errors["investmentReturnMethod"] = "Return method not available for the selected country"
    return errors


def _build_record(form: InvestmentFormInput) -> SubmissionRecord:
    """Accepted record carrying only the payment details that apply"""
    data = form.model_dump()
    active = set()
    for group in required_groups(form.country, form.payment_method):
        active.update(group.fields)
    for wire_name in PAYMENT_DETAIL_FIELDS:
        if wire_name not in active:
            data[_PYTHON_NAMES[wire_name]] = None
    data["investment_return_method"] = data.get("investment_return_method") or None
    return SubmissionRecord(**data)


def validate_submission(
    raw: Mapping[str, Any],
    require_phone_number: bool = False
) -> FormValidationResult:
    """
    Validate raw form values.

    Base rules, option rules and each conditional group are checked
    independently; the first message found for a field is kept.

    Args:
        raw: Field name -> raw value (camelCase or snake_case keys)
        require_phone_number: Whether phoneNumber is mandatory

    Returns:
        FormValidationResult with either a record or per-field errors
    """
    if not isinstance(raw, Mapping):
        raise TypeError("Form values must be a mapping")

    errors: Dict[str, str] = {}
    form = None

    try:
        form = InvestmentFormInput.model_validate(
            raw, context={"require_phone_number": require_phone_number}
        )
    except PydanticValidationError as exc:
        for error in exc.errors():
            errors.setdefault(_wire_name(error.get("loc")), error["msg"])

    country = _text(raw, "country")
    payment_method = _text(raw, "paymentMethod")
    return_method = _text(raw, "investmentReturnMethod")

    for field, message in _option_errors(country, payment_method, return_method).items():
        errors.setdefault(field, message)

    for group in required_groups(country, payment_method):
        if not all(_text(raw, field) for field in group.fields):
            errors.setdefault(group.anchor, group.message)

    required = sorted(required_fields(country, payment_method, require_phone_number))

    if errors:
        return FormValidationResult(errors=errors, required_fields=required)

    return FormValidationResult(record=_build_record(form), required_fields=required)


def validate_or_raise(
    raw: Mapping[str, Any],
    require_phone_number: bool = False
) -> SubmissionRecord:
    """Validate and return the record, raising FormInvalid on any field error"""
    result = validate_submission(raw, require_phone_number=require_phone_number)
    if not result.is_valid:
        raise FormInvalid(ValidationError(field, message) for field, message in result.errors.items())
    return result.record
