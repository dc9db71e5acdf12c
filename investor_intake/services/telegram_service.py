"""Telegram relay for accepted submissions"""
import html
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from investor_intake.config import Settings
from investor_intake.exceptions import ConfigurationError, DeliveryError
from investor_intake.models.submission import DispatchResult, SubmissionRecord
from investor_intake.services.form_rules import LABELS
from investor_intake.utils.investor_id import generate_investor_id
from investor_intake.utils.retry import retry_async

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Form submitted successfully"
MISSING_CONFIG_MESSAGE = "Missing Telegram configuration"
DELIVERY_FAILED_MESSAGE = "Failed to submit the form. Please try again."


def format_submission_message(
    record: SubmissionRecord,
    investor_id: str,
    submitted_at: datetime,
    escape: bool = True
) -> str:
    """
    Build the human-readable notification for a submission.

    Args:
        record: Accepted submission
        investor_id: ID issued for this submission
        submitted_at: Submission time
        escape: HTML-escape user values (needed for parse_mode=HTML)

    Returns:
        Multi-line message text
    """
    def value(text: Optional[str]) -> str:
        text = text or ""
        return html.escape(text) if escape else text

    lines = [
        "New Investment Form Submission",
        "",
        f"Investor ID: {value(investor_id)}",
        f"Name: {value(record.name)}",
        f"Email: {value(record.email)}",
    ]
    if record.phone_number:
        lines.append(f"Phone: {value(record.phone_number)}")

    lines.append(f"Country: {LABELS[record.country]}")
    lines.append(f"Payment Method: {LABELS[record.payment_method]}")

    if record.bank_account_name:
        lines.append(f"Account Holder: {value(record.bank_account_name)}")
    if record.bank_account_number:
        lines.append(f"Account Number: {value(record.bank_account_number)}")
    if record.ifsc_code:
        lines.append(f"IFSC Code: {value(record.ifsc_code)}")
    if record.upi_id:
        lines.append(f"UPI ID: {value(record.upi_id)}")
    if record.crypto_wallet:
        lines.append(f"Crypto Wallet: {value(record.crypto_wallet)}")

    return_method = record.investment_return_method or "same"
    lines.append(f"Investment Return Method: {LABELS[return_method]}")
    lines.append(f"Terms Accepted: {'Yes' if record.agreed_to_terms else 'No'}")
    lines.append("")
    lines.append(f"Submitted at: {submitted_at.astimezone(timezone.utc):%Y-%m-%d %H:%M:%S} UTC")
    return "\n".join(lines)


class SubmissionDispatcher:
    """Relays accepted submissions to a Telegram chat"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        # Tests swap in httpx.MockTransport
        self.transport = transport

    def _check_configuration(self):
        if not self.settings.telegram_configured:
            raise ConfigurationError(MISSING_CONFIG_MESSAGE)

    async def send_message(self, text: str) -> None:
        """
        POST one message to the Bot API sendMessage method.

        Raises:
            DeliveryError: On a non-2xx response or a transport failure
        """
        url = f"{self.settings.telegram_api_base}/bot{self.settings.telegram_bot_token}/sendMessage"
        payload = {
            "chat_id": self.settings.telegram_chat_id,
            "text": text,
            "parse_mode": self.settings.telegram_parse_mode,
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await retry_async(
                    lambda: client.post(url, json=payload),
                    max_retries=self.settings.telegram_max_retries
                )
        except httpx.HTTPError as e:
            # Exception text can embed the request URL, which carries the token
            raise DeliveryError(f"Telegram API unreachable: {type(e).__name__}") from e

        if not response.is_success:
            raise DeliveryError(
                f"Telegram API error: {response.status_code} - {response.text}",
                status_code=response.status_code
            )

    async def dispatch(self, record: SubmissionRecord) -> DispatchResult:
        """
        Issue an investor ID and deliver the submission summary.

        Never raises for expected failures; the result carries a generic
        user-facing error while the cause goes to the log.
        """
        try:
            self._check_configuration()
        except ConfigurationError as e:
            logger.error(f"Submission dispatch aborted: {e} (TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID)")
            return DispatchResult(success=False, error=MISSING_CONFIG_MESSAGE)

        investor_id = generate_investor_id()
        submitted_at = datetime.now(timezone.utc)
        text = format_submission_message(
            record,
            investor_id,
            submitted_at,
            escape=self.settings.telegram_parse_mode.upper() == "HTML"
        )

        try:
            await self.send_message(text)
        except DeliveryError as e:
            logger.error(f"Telegram delivery failed for {investor_id}: {e}")
            return DispatchResult(success=False, error=DELIVERY_FAILED_MESSAGE)

        logger.info(f"Submission {investor_id} delivered to Telegram")
        return DispatchResult(success=True, investor_id=investor_id, message=SUCCESS_MESSAGE)
