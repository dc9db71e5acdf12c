"""
Conditional field rules for the investment form.

Everything that depends on the (country, paymentMethod) pair lives here so the
validator and the options endpoint read from the same tables.
"""
from typing import FrozenSet, NamedTuple, Optional, Tuple

INDIA = "india"
OTHER = "other"

BANK_TRANSFER = "bank_transfer"
UPI = "upi"
CRYPTO = "crypto"
SAME = "same"

COUNTRIES: Tuple[str, ...] = (INDIA, OTHER)

PAYMENT_METHODS_BY_COUNTRY = {
    INDIA: (BANK_TRANSFER, UPI, CRYPTO),
    OTHER: (CRYPTO,),
}

RETURN_METHODS_BY_COUNTRY = {
    INDIA: (BANK_TRANSFER, UPI, CRYPTO, SAME),
    OTHER: (CRYPTO, SAME),
}

LABELS = {
    INDIA: "India",
    OTHER: "Other Country",
    BANK_TRANSFER: "Bank Transfer (IMPS)",
    UPI: "UPI",
    CRYPTO: "Cryptocurrency",
    SAME: "Same as Payment Method",
}

BASE_REQUIRED_FIELDS: Tuple[str, ...] = (
    "name",
    "email",
    "country",
    "paymentMethod",
    "agreedToTerms",
)

BANK_FIELDS: Tuple[str, ...] = ("bankAccountName", "bankAccountNumber", "ifscCode")
UPI_FIELDS: Tuple[str, ...] = ("upiId",)
CRYPTO_FIELDS: Tuple[str, ...] = ("cryptoWallet",)

# Every field that only matters for some payment methods
PAYMENT_DETAIL_FIELDS: Tuple[str, ...] = BANK_FIELDS + UPI_FIELDS + CRYPTO_FIELDS


class RequiredGroup(NamedTuple):
    """Fields checked together; a failure is reported on the anchor only"""
    anchor: str
    fields: Tuple[str, ...]
    message: str


BANK_GROUP = RequiredGroup("bankAccountName", BANK_FIELDS, "Please provide all bank account details")
UPI_GROUP = RequiredGroup("upiId", UPI_FIELDS, "Please provide your UPI ID")
CRYPTO_GROUP = RequiredGroup("cryptoWallet", CRYPTO_FIELDS, "Please provide your crypto wallet address")


def payment_methods_for(country: Optional[str]) -> Tuple[str, ...]:
    """Payment methods a country may select (empty for unknown countries)"""
    return PAYMENT_METHODS_BY_COUNTRY.get(country or "", ())


def return_methods_for(country: Optional[str]) -> Tuple[str, ...]:
    """Investment return methods a country may select"""
    return RETURN_METHODS_BY_COUNTRY.get(country or "", ())


def required_groups(country: Optional[str], payment_method: Optional[str]) -> Tuple[RequiredGroup, ...]:
    """Conditional field groups that must be filled for this selection"""
    groups = []
    if country == INDIA and payment_method == BANK_TRANSFER:
        groups.append(BANK_GROUP)
    if country == INDIA and payment_method == UPI:
        groups.append(UPI_GROUP)
    if payment_method == CRYPTO:
        groups.append(CRYPTO_GROUP)
    return tuple(groups)


def required_fields(
    country: Optional[str],
    payment_method: Optional[str],
    require_phone_number: bool = False
) -> FrozenSet[str]:
    """
    Full set of required field names for a (country, paymentMethod) pair.

    Args:
        country: Selected country value
        payment_method: Selected payment method value
        require_phone_number: Whether phoneNumber is mandatory

    Returns:
        Frozen set of camelCase field names
    """
    fields = set(BASE_REQUIRED_FIELDS)
    if require_phone_number:
        fields.add("phoneNumber")
    for group in required_groups(country, payment_method):
        fields.update(group.fields)
    return frozenset(fields)


def visible_fields(
    country: Optional[str],
    payment_method: Optional[str],
    include_phone_number: bool = False
) -> Tuple[str, ...]:
    """Fields the form shows, in display order, for the current selection"""
    fields = ["name", "email"]
    if include_phone_number:
        fields.append("phoneNumber")
    fields.append("country")

    if country in PAYMENT_METHODS_BY_COUNTRY:
        fields.append("paymentMethod")
        if payment_method in payment_methods_for(country):
            for group in required_groups(country, payment_method):
                fields.extend(group.fields)
            fields.append("investmentReturnMethod")

    fields.append("agreedToTerms")
    return tuple(fields)
