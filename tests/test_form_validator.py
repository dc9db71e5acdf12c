import pytest

from investor_intake.exceptions import FormInvalid
from investor_intake.services.form_validator import validate_or_raise, validate_submission


def form(**overrides):
    data = {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "country": "india",
        "paymentMethod": "upi",
        "upiId": "jane@upi",
        "agreedToTerms": True,
    }
    data.update(overrides)
    return data


def test_upi_scenario_is_accepted(jane_upi):
    result = validate_submission(jane_upi)

    assert result.is_valid
    assert result.record.upi_id == "jane@upi"
    assert result.record.country == "india"
    assert result.record.investment_return_method is None


def test_empty_upi_id_fails_on_upi_id():
    result = validate_submission(form(upiId=""))

    assert not result.is_valid
    assert result.record is None
    assert result.errors == {"upiId": "Please provide your UPI ID"}


@pytest.mark.parametrize("method", ["bank_transfer", "upi"])
def test_other_country_cannot_pick_indian_methods(method):
    result = validate_submission(form(
        country="other",
        paymentMethod=method,
        bankAccountName="Jane",
        bankAccountNumber="1234",
        ifscCode="SBIN0001",
    ))

    assert "paymentMethod" in result.errors


def test_other_country_with_crypto_is_accepted():
    result = validate_submission(form(country="other", paymentMethod="crypto", cryptoWallet="0xabc"))
    assert result.is_valid


@pytest.mark.parametrize("missing", ["bankAccountName", "bankAccountNumber", "ifscCode"])
def test_bank_transfer_needs_every_bank_field(missing):
    values = form(
        paymentMethod="bank_transfer",
        bankAccountName="Jane Doe",
        bankAccountNumber="0011223344",
        ifscCode="HDFC0000123",
    )
    values[missing] = "   "

    result = validate_submission(values)

    # Reported once, on the first field of the group
    assert result.errors == {"bankAccountName": "Please provide all bank account details"}


def test_bank_transfer_with_all_fields_is_accepted():
    result = validate_submission(form(
        paymentMethod="bank_transfer",
        bankAccountName="Jane Doe",
        bankAccountNumber="0011223344",
        ifscCode="HDFC0000123",
    ))

    assert result.is_valid
    assert result.record.ifsc_code == "HDFC0000123"
    assert result.record.upi_id is None


@pytest.mark.parametrize("country", ["india", "other"])
def test_crypto_needs_wallet_regardless_of_country(country):
    missing = validate_submission(form(country=country, paymentMethod="crypto"))
    present = validate_submission(form(country=country, paymentMethod="crypto", cryptoWallet="bc1qxyz"))

    assert missing.errors == {"cryptoWallet": "Please provide your crypto wallet address"}
    assert present.is_valid


@pytest.mark.parametrize("agreed", [False, None, "false", "true", "yes", "on", "t", "1", 1])
def test_terms_must_be_accepted(agreed):
    result = validate_submission(form(agreedToTerms=agreed))
    assert result.errors["agreedToTerms"] == "You must agree to the terms and conditions"


def test_missing_terms_fails():
    values = form()
    del values["agreedToTerms"]
    assert "agreedToTerms" in validate_submission(values).errors


def test_base_rules_report_each_field():
    result = validate_submission({"name": "J", "email": "not-an-email", "agreedToTerms": True})

    assert result.errors["name"] == "Name must be at least 2 characters"
    assert result.errors["email"] == "Invalid email address"
    assert result.errors["country"] == "Please select a country"
    assert result.errors["paymentMethod"] == "Please select a payment method"


def test_long_values_are_rejected():
    result = validate_submission(form(name="x" * 101, email=("a" * 250) + "@x.com"))

    assert result.errors["name"] == "Name must be at most 100 characters"
    assert result.errors["email"] == "Invalid email address"


def test_name_is_trimmed():
    result = validate_submission(form(name="  Jane Doe  "))
    assert result.record.name == "Jane Doe"


def test_unknown_country_is_rejected():
    result = validate_submission(form(country="atlantis"))
    assert result.errors["country"] == "Please select a valid country"


def test_conditional_rules_run_even_when_base_rules_fail():
    result = validate_submission(form(name="", upiId=""))
    assert set(result.errors) == {"name", "upiId"}


def test_return_method_is_scoped_by_country():
    rejected = validate_submission(form(
        country="other", paymentMethod="crypto", cryptoWallet="0xabc", investmentReturnMethod="upi"
    ))
    accepted = validate_submission(form(investmentReturnMethod="bank_transfer"))

    assert "investmentReturnMethod" in rejected.errors
    assert accepted.record.investment_return_method == "bank_transfer"


def test_details_for_other_methods_are_dropped():
    result = validate_submission(form(cryptoWallet="0xabc", bankAccountNumber="999"))

    assert result.record.crypto_wallet is None
    assert result.record.bank_account_number is None


def test_phone_number_is_optional_but_checked():
    assert validate_submission(form()).is_valid
    assert validate_submission(form(phoneNumber="+91 98765 43210")).is_valid
    assert "phoneNumber" in validate_submission(form(phoneNumber="98765")).errors


def test_phone_number_can_be_required():
    result = validate_submission(form(), require_phone_number=True)
    assert result.errors == {"phoneNumber": "Please provide your phone number"}


def test_snake_case_keys_are_accepted():
    result = validate_submission({
        "name": "Jane Doe",
        "email": "jane@x.com",
        "country": "other",
        "payment_method": "crypto",
        "crypto_wallet": "0xabc",
        "agreed_to_terms": True,
    })
    assert result.is_valid


def test_validation_is_repeatable(jane_upi):
    first = validate_submission(jane_upi)
    second = validate_submission(jane_upi)
    assert first == second


def test_validate_or_raise(jane_upi):
    assert validate_or_raise(jane_upi).name == "Jane Doe"

    with pytest.raises(FormInvalid) as exc_info:
        validate_or_raise(form(upiId=""))

    assert exc_info.value.as_dict() == {"upiId": "Please provide your UPI ID"}
    assert exc_info.value.errors[0].field == "upiId"


def test_non_mapping_input_is_rejected():
    with pytest.raises(TypeError):
        validate_submission(["not", "a", "form"])


def test_required_fields_follow_normalised_selection():
    result = validate_submission({"country": " india ", "payment_method": "bank_transfer"})

    assert result.errors["bankAccountName"] == "Please provide all bank account details"
    assert {"bankAccountName", "bankAccountNumber", "ifscCode"} <= set(result.required_fields)


@pytest.mark.parametrize("field", ["cryptoWallet", "crypto_wallet"])
def test_overlong_payment_details_are_rejected(field):
    result = validate_submission(form(country="other", paymentMethod="crypto", **{field: "0x" + "a" * 200}))

    assert result.errors == {"cryptoWallet": "Must be at most 128 characters"}


def test_payment_detail_at_limit_is_accepted():
    result = validate_submission(form(upiId="u" * 124 + "@upi"))
    assert result.is_valid
