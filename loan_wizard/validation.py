"""Per-step validation for the application wizard.

Validation never raises: each function returns a mapping of field key to
message, and an empty mapping means the step passes.  Field keys are the
camelCase names the form layer binds errors to (``vehicleValue``,
``desiredLoanAmount`` ...).  Each step only inspects its own entity so a
step can be re-validated on its own when the user navigates back to it.
"""

from __future__ import annotations

import math
import re

from loan_wizard.models import Customer, Draft, Financial, LoanPreferences, Vehicle

MAX_LOAN_AMOUNT = 1_000_000
TENURE_OPTIONS = (12, 24, 36, 48, 60)
REVIEW_STEP = 5

_PHONE_RE = re.compile(r"^[0-9]{10}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _blank(value: object) -> bool:
    if value is None:
        return True
    return not str(value).strip()


def _amount(value: object) -> float:
    """Coerce a form amount to a number; unparseable or non-finite input counts as zero."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def validate_customer(customer: Customer) -> dict[str, str]:
    """Validate step 1 (customer details)."""
    errors: dict[str, str] = {}

    if _blank(customer.name):
        errors["name"] = "Name is required"

    if _blank(customer.phone):
        errors["phone"] = "Phone is required"
    elif not _PHONE_RE.match(str(customer.phone).strip()):
        errors["phone"] = "Enter a valid 10-digit phone number"

    if _blank(customer.email):
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.match(str(customer.email).strip()):
        errors["email"] = "Enter a valid email address"

    if _blank(customer.address):
        errors["address"] = "Address is required"

    if _blank(customer.id_type):
        errors["idType"] = "Please select an ID type"

    return errors


def validate_vehicle(vehicle: Vehicle) -> dict[str, str]:
    """Validate step 2 (vehicle information)."""
    errors: dict[str, str] = {}

    if _blank(vehicle.make):
        errors["make"] = "Please select a vehicle make"
    if _blank(vehicle.model):
        errors["model"] = "Model is required"
    if _blank(vehicle.year):
        errors["year"] = "Please select a year"
    if _blank(vehicle.dealer_name):
        errors["dealerName"] = "Dealer name is required"
    if _amount(vehicle.vehicle_value) <= 0:
        errors["vehicleValue"] = "Enter a valid vehicle value"

    return errors


def validate_financial(financial: Financial) -> dict[str, str]:
    """Validate step 3 (financial details)."""
    errors: dict[str, str] = {}

    if _amount(financial.monthly_income) <= 0:
        errors["monthlyIncome"] = "Enter a valid monthly income"
    if _amount(financial.existing_emis) < 0:
        errors["existingEmis"] = "Cannot be negative"
    if _blank(financial.credit_score_range):
        errors["creditScoreRange"] = "Please select a credit score range"
    if _blank(financial.employment_type):
        errors["employmentType"] = "Please select an employment type"

    return errors


def validate_preferences(preferences: LoanPreferences) -> dict[str, str]:
    """Validate step 4 (loan preferences)."""
    errors: dict[str, str] = {}

    amount = _amount(preferences.desired_loan_amount)
    if amount <= 0:
        errors["desiredLoanAmount"] = "Enter a valid loan amount"
    elif amount > MAX_LOAN_AMOUNT:
        errors["desiredLoanAmount"] = "Maximum loan amount is 10,00,000"

    if preferences.preferred_tenure not in TENURE_OPTIONS:
        errors["preferredTenure"] = "Please select a tenure"

    return errors


def validate_step(
    step: int,
    customer: Customer,
    vehicle: Vehicle,
    financial: Financial,
    preferences: LoanPreferences,
) -> dict[str, str]:
    """Validate the fields owned by a single wizard step.

    Parameters
    ----------
    step : int
        Wizard step, 1 to 5.  Step 5 (review) has no field validation.
    customer, vehicle, financial, preferences
        Current draft entities.  Only the one owned by ``step`` is read.

    Returns
    -------
    dict[str, str]
        Field key to error message; empty when the step passes.
    """
    if step == 1:
        return validate_customer(customer)
    if step == 2:
        return validate_vehicle(vehicle)
    if step == 3:
        return validate_financial(financial)
    if step == 4:
        return validate_preferences(preferences)
    return {}


def validate_draft(draft: Draft) -> dict[str, str]:
    """Validate every data-collection step of a draft and merge the errors."""
    errors: dict[str, str] = {}
    for step in range(1, REVIEW_STEP):
        errors.update(
            validate_step(
                step,
                draft.customer,
                draft.vehicle,
                draft.financial,
                draft.loan_preferences,
            )
        )
    return errors
