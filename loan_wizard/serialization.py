"""Serialization between application dataclasses and JSON-compatible dicts.

Encoded records use the dataclass field names (snake_case) and enum wire
strings, which is also the layout of the persisted registry slot.
"""

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, TypeVar

from loan_wizard.models import (
    Application,
    ApplicationStatus,
    CreditScoreRange,
    Customer,
    Draft,
    EligibilityStatus,
    EmploymentType,
    Financial,
    IdType,
    LoanOffer,
    LoanPreferences,
    Submission,
    Vehicle,
    VehicleType,
)

E = TypeVar("E", bound=Enum)


def to_dict(obj: Any) -> dict[str, Any]:
    """Encode a domain dataclass; mappings pass through unchanged.

    Raises
    ------
    TypeError
        If ``obj`` is neither a dataclass instance nor a mapping.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return obj
    raise TypeError(f"Cannot encode {type(obj).__name__}")


def serialize_value(value: Any) -> Any:
    """Encode one field value: nested records, enums and containers."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _enum_or_raw(enum_cls: type[E], value: Any) -> E | str:
    """Map a stored string onto ``enum_cls``; unknown values are kept as-is."""
    if value is None:
        return ""
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def customer_from_dict(data: dict[str, Any]) -> Customer:
    """Decode a stored customer."""
    return Customer(
        name=_text(data.get("name")),
        phone=_text(data.get("phone")),
        email=_text(data.get("email")),
        address=_text(data.get("address")),
        id_type=_enum_or_raw(IdType, data.get("id_type", "")),
    )


def vehicle_from_dict(data: dict[str, Any]) -> Vehicle:
    """Decode a stored vehicle."""
    return Vehicle(
        vehicle_type=_enum_or_raw(VehicleType, data.get("vehicle_type", VehicleType.NEW.value)),
        make=data.get("make", ""),
        model=data.get("model", ""),
        year=str(data.get("year", "")),
        dealer_name=data.get("dealer_name", ""),
        vehicle_value=data.get("vehicle_value", 0),
    )


def financial_from_dict(data: dict[str, Any]) -> Financial:
    """Decode stored financial details."""
    return Financial(
        monthly_income=data.get("monthly_income", 0),
        existing_emis=data.get("existing_emis", 0),
        credit_score_range=_enum_or_raw(CreditScoreRange, data.get("credit_score_range", "")),
        employment_type=_enum_or_raw(EmploymentType, data.get("employment_type", "")),
    )


def _tenure(value: Any) -> int:
    """Tenure in months; unparseable input decodes as 0."""
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def preferences_from_dict(data: dict[str, Any]) -> LoanPreferences:
    """Decode stored loan preferences."""
    return LoanPreferences(
        desired_loan_amount=data.get("desired_loan_amount", 0),
        preferred_tenure=_tenure(data.get("preferred_tenure")),
    )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key)
    return section if isinstance(section, dict) else {}


def draft_from_dict(data: dict[str, Any]) -> Draft:
    """Decode a draft; missing or malformed sections start empty."""
    return Draft(
        customer=customer_from_dict(_section(data, "customer")),
        vehicle=vehicle_from_dict(_section(data, "vehicle")),
        financial=financial_from_dict(_section(data, "financial")),
        loan_preferences=preferences_from_dict(_section(data, "loan_preferences")),
    )


def loan_offer_from_dict(data: dict[str, Any]) -> LoanOffer:
    """Decode a stored loan offer.

    Every field must be present; this is the strict counterpart of the
    tolerant collaborator decoder in ``loan_wizard.collaborators.payloads``.
    """
    return LoanOffer(
        customer_name=data["customer_name"],
        vehicle_description=data["vehicle_description"],
        vehicle_value=data["vehicle_value"],
        down_payment=data["down_payment"],
        down_payment_percentage=data["down_payment_percentage"],
        eligible_loan_amount=data["eligible_loan_amount"],
        desired_loan_amount=data["desired_loan_amount"],
        approved_loan_amount=data["approved_loan_amount"],
        interest_rate=data["interest_rate"],
        tenure_months=data["tenure_months"],
        monthly_emi=data["monthly_emi"],
        total_interest=data["total_interest"],
        total_payable=data["total_payable"],
        eligibility_status=_enum_or_raw(EligibilityStatus, data["eligibility_status"]),
        eligibility_reason=data["eligibility_reason"],
        income_to_emi_ratio=data["income_to_emi_ratio"],
        summary=data["summary"],
    )


def submission_from_dict(data: dict[str, Any]) -> Submission:
    """Decode a stored submission receipt."""
    return Submission(
        application_reference_id=data["application_reference_id"],
        submission_timestamp=data["submission_timestamp"],
        status=data["status"],
        customer_name=data["customer_name"],
        vehicle_description=data["vehicle_description"],
        approved_loan_amount=data["approved_loan_amount"],
        monthly_emi=data["monthly_emi"],
        tenure_months=data["tenure_months"],
        confirmation_message=data["confirmation_message"],
    )


def application_from_dict(data: dict[str, Any]) -> Application:
    """Decode a stored application.

    Raises
    ------
    KeyError, TypeError, ValueError
        If the record is structurally invalid.
    """
    loan_offer = data.get("loan_offer")
    submission = data.get("submission")
    return Application(
        id=data["id"],
        customer=customer_from_dict(data["customer"]),
        vehicle=vehicle_from_dict(data["vehicle"]),
        financial=financial_from_dict(data["financial"]),
        loan_preferences=preferences_from_dict(data["loan_preferences"]),
        status=ApplicationStatus(data["status"]),
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        loan_offer=loan_offer_from_dict(loan_offer) if loan_offer else None,
        submission=submission_from_dict(submission) if submission else None,
    )
