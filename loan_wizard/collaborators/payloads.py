"""Request shaping and tolerant response decoding for the decisioning agents.

Agent responses are loosely structured: the result may be a JSON object or a
string holding one, and any field may be missing.  The builders here turn a
partial result into a fully populated :class:`LoanOffer` or
:class:`Submission`, falling back to the draft (or the offer) field by field.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from loan_wizard.models import (
    Customer,
    Draft,
    EligibilityStatus,
    Financial,
    LoanOffer,
    Submission,
    Vehicle,
    utc_now_iso,
)
from loan_wizard.serialization import serialize_value, to_dict

CALCULATE_FAILED_MESSAGE = "Failed to calculate loan offer. Please try again."
SUBMIT_FAILED_MESSAGE = "Failed to submit application. Please try again."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
DEFAULT_CONFIRMATION_MESSAGE = "Application submitted successfully."
DEFAULT_SUBMISSION_STATUS = "Submitted"
MISSING_REFERENCE_ID = "-"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def _applicant_fields(customer: Customer, vehicle: Vehicle, financial: Financial) -> dict[str, Any]:
    return {
        "customer_name": customer.name,
        "phone": customer.phone,
        "email": customer.email,
        "address": customer.address,
        "id_type": serialize_value(customer.id_type),
        "vehicle_type": serialize_value(vehicle.vehicle_type),
        "vehicle_make": vehicle.make,
        "vehicle_model": vehicle.model,
        "vehicle_year": vehicle.year,
        "dealer_name": vehicle.dealer_name,
        "vehicle_value": vehicle.vehicle_value,
        "monthly_income": financial.monthly_income,
        "existing_emis": financial.existing_emis,
        "credit_score_range": serialize_value(financial.credit_score_range),
        "employment_type": serialize_value(financial.employment_type),
    }


def build_calculation_request(draft: Draft) -> dict[str, Any]:
    """Flatten a draft into the calculator's request object."""
    payload = _applicant_fields(draft.customer, draft.vehicle, draft.financial)
    payload["desired_loan_amount"] = draft.loan_preferences.desired_loan_amount
    payload["preferred_tenure_months"] = draft.loan_preferences.preferred_tenure
    return payload


def build_submission_request(draft: Draft, offer: LoanOffer) -> dict[str, Any]:
    """Build the processor's request: applicant fields plus the nested offer."""
    payload = _applicant_fields(draft.customer, draft.vehicle, draft.financial)
    payload["loan_offer"] = to_dict(offer)
    return payload


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def extract_result_data(response: Any) -> dict[str, Any] | None:
    """Pull the result object out of an agent response envelope.

    Returns None unless the envelope reports success and carries a result
    that is an object, or a string that decodes to one.
    """
    if not isinstance(response, Mapping) or not response.get("success"):
        return None

    inner = response.get("response")
    if not isinstance(inner, Mapping):
        return None

    result = inner.get("result")
    if isinstance(result, str):
        try:
            result = json.loads(result)
        except ValueError:
            return None
    if isinstance(result, Mapping):
        return dict(result)
    return None


def failure_message(response: Any, default: str) -> str:
    """Pick the user-facing message for an unsuccessful response."""
    if isinstance(response, Mapping):
        error = response.get("error")
        if error:
            return str(error)
        inner = response.get("response")
        if isinstance(inner, Mapping) and inner.get("message"):
            return str(inner["message"])
    return default


def _number(value: Any, default: float = 0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _integer(value: Any, default: int = 0) -> int:
    number = _number(value, default)
    try:
        return int(number)
    except (OverflowError, ValueError):
        return default


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _eligibility(value: Any) -> EligibilityStatus | str:
    if value is None:
        return EligibilityStatus.UNKNOWN
    try:
        return EligibilityStatus(value)
    except ValueError:
        return str(value)


def build_loan_offer(data: Mapping[str, Any], draft: Draft) -> LoanOffer:
    """Build a complete loan offer from a possibly partial calculator result."""
    return LoanOffer(
        customer_name=_text(data.get("customer_name"), draft.customer.name),
        vehicle_description=_text(data.get("vehicle_description"), draft.vehicle.description),
        vehicle_value=_number(data.get("vehicle_value"), draft.vehicle.vehicle_value),
        down_payment=_number(data.get("down_payment")),
        down_payment_percentage=_number(data.get("down_payment_percentage")),
        eligible_loan_amount=_number(data.get("eligible_loan_amount")),
        desired_loan_amount=_number(
            data.get("desired_loan_amount"), draft.loan_preferences.desired_loan_amount
        ),
        approved_loan_amount=_number(data.get("approved_loan_amount")),
        interest_rate=_number(data.get("interest_rate")),
        tenure_months=_integer(data.get("tenure_months"), draft.loan_preferences.preferred_tenure),
        monthly_emi=_number(data.get("monthly_emi")),
        total_interest=_number(data.get("total_interest")),
        total_payable=_number(data.get("total_payable")),
        eligibility_status=_eligibility(data.get("eligibility_status")),
        eligibility_reason=_text(data.get("eligibility_reason")),
        income_to_emi_ratio=_number(data.get("income_to_emi_ratio")),
        summary=_text(data.get("summary")),
    )


def build_submission(data: Mapping[str, Any], draft: Draft, offer: LoanOffer) -> Submission:
    """Build a complete submission receipt, falling back to the offer's terms."""
    return Submission(
        application_reference_id=_text(data.get("application_reference_id"), MISSING_REFERENCE_ID),
        submission_timestamp=_text(data.get("submission_timestamp"), utc_now_iso()),
        status=_text(data.get("status"), DEFAULT_SUBMISSION_STATUS),
        customer_name=_text(data.get("customer_name"), draft.customer.name),
        vehicle_description=_text(data.get("vehicle_description"), offer.vehicle_description),
        approved_loan_amount=_number(data.get("approved_loan_amount"), offer.approved_loan_amount),
        monthly_emi=_number(data.get("monthly_emi"), offer.monthly_emi),
        tenure_months=_integer(data.get("tenure_months"), offer.tenure_months),
        confirmation_message=_text(data.get("confirmation_message"), DEFAULT_CONFIRMATION_MESSAGE),
    )
