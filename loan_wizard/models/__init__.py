"""Domain models for vehicle loan applications."""

from loan_wizard.models.applicant import Customer, Draft, Financial, LoanPreferences, Vehicle
from loan_wizard.models.application import Application, utc_now_iso
from loan_wizard.models.decision import LoanOffer, Submission
from loan_wizard.models.enums import (
    VEHICLE_MAKES,
    VEHICLE_YEARS,
    ApplicationStatus,
    CreditScoreRange,
    EligibilityStatus,
    EmploymentType,
    IdType,
    VehicleType,
)

__all__ = [
    "VEHICLE_MAKES",
    "VEHICLE_YEARS",
    "Application",
    "ApplicationStatus",
    "CreditScoreRange",
    "Customer",
    "Draft",
    "EligibilityStatus",
    "EmploymentType",
    "Financial",
    "IdType",
    "LoanOffer",
    "LoanPreferences",
    "Submission",
    "Vehicle",
    "VehicleType",
    "utc_now_iso",
]
