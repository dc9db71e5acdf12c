"""Investment form submission endpoints"""
from fastapi import APIRouter, Body, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

from investor_intake.config import Settings, get_settings
from investor_intake.models.submission import (
    FormOption,
    FormOptionsResponse,
    SubmissionResponse,
    ValidationResponse,
)
from investor_intake.services.form_rules import (
    COUNTRIES,
    LABELS,
    payment_methods_for,
    required_fields,
    return_methods_for,
    visible_fields,
)
from investor_intake.services.form_validator import validate_submission
from investor_intake.services.submission_flow import SubmissionAttempt, SubmissionState
from investor_intake.services.telegram_service import SubmissionDispatcher

logger = logging.getLogger(__name__)
router = APIRouter()

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def get_dispatcher(settings: Settings = Depends(get_settings)) -> SubmissionDispatcher:
    """Dispatcher bound to the current settings"""
    return SubmissionDispatcher(settings)


def _respond(status_code: int, body: SubmissionResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True)
    )


@router.options("")
async def submission_preflight():
    """CORS preflight without Access-Control-Request-* headers"""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("", response_model=SubmissionResponse, response_model_exclude_none=True)
async def submit_investment_form(
    form: Dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
    dispatcher: SubmissionDispatcher = Depends(get_dispatcher)
):
    """Validate and relay an investment form (PUBLIC endpoint)"""
    attempt = SubmissionAttempt(dispatcher, require_phone_number=settings.require_phone_number)

    try:
        outcome = await attempt.run(form)
    except Exception as e:
        logger.exception(f"Submission error: {e}")
        return _respond(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            SubmissionResponse(success=False, error=UNEXPECTED_ERROR_MESSAGE)
        )

    if outcome.state == SubmissionState.INVALID:
        return _respond(
            422,
            SubmissionResponse(success=False, error=outcome.error, errors=outcome.errors)
        )

    if outcome.state == SubmissionState.FAILED:
        return _respond(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            SubmissionResponse(success=False, error=outcome.error)
        )

    return _respond(
        status.HTTP_200_OK,
        SubmissionResponse(success=True, message=outcome.message, investor_id=outcome.investor_id)
    )


@router.post("/validate", response_model=ValidationResponse)
async def validate_investment_form(
    form: Dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings)
):
    """Live validation for the form; never dispatches"""
    result = validate_submission(form, require_phone_number=settings.require_phone_number)

    return ValidationResponse(
        valid=result.is_valid,
        errors=result.errors,
        required_fields=result.required_fields
    )


@router.get("/options", response_model=FormOptionsResponse)
async def get_form_options(
    country: Optional[str] = Query(None),
    payment_method: Optional[str] = Query(None, alias="paymentMethod"),
    settings: Settings = Depends(get_settings)
):
    """Selectable options and visible/required fields for the current selection"""
    def options(values):
        return [FormOption(value=v, label=LABELS[v]) for v in values]

    return FormOptionsResponse(
        countries=options(COUNTRIES),
        payment_methods=options(payment_methods_for(country)),
        return_methods=options(return_methods_for(country)) if payment_method else [],
        visible_fields=list(visible_fields(country, payment_method, include_phone_number=True)),
        required_fields=sorted(required_fields(country, payment_method, settings.require_phone_number))
    )
