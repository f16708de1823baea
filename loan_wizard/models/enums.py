"""Enumeration types for loan application entities."""

from enum import Enum


class IdType(str, Enum):
    AADHAAR = "Aadhaar"
    PAN_CARD = "PAN Card"
    VOTER_ID = "Voter ID"
    DRIVING_LICENSE = "Driving License"
    PASSPORT = "Passport"


class VehicleType(str, Enum):
    NEW = "New"
    SECOND_HAND = "Second-hand"


class CreditScoreRange(str, Enum):
    """Credit score bands, lowest first."""

    BELOW_600 = "Below 600"
    FROM_600_TO_650 = "600-650"
    FROM_650_TO_700 = "650-700"
    FROM_700_TO_750 = "700-750"
    FROM_750_TO_800 = "750-800"
    ABOVE_800 = "Above 800"


class EmploymentType(str, Enum):
    SALARIED = "Salaried"
    SELF_EMPLOYED = "Self-employed"
    BUSINESS_OWNER = "Business Owner"
    PROFESSIONAL = "Professional"
    GOVERNMENT_EMPLOYEE = "Government Employee"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "Eligible"
    ADJUSTED = "Adjusted"
    INELIGIBLE = "Ineligible"
    UNKNOWN = "Unknown"


class ApplicationStatus(str, Enum):
    """Application lifecycle status.

    ``Approved`` and ``Rejected`` are both terminal and share a rank.
    """

    DRAFT = "Draft"
    CALCULATED = "Calculated"
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def rank(self) -> int:
        """Position of this status in the lifecycle."""
        return _STATUS_RANK[self]


_STATUS_RANK = {
    ApplicationStatus.DRAFT: 0,
    ApplicationStatus.CALCULATED: 1,
    ApplicationStatus.SUBMITTED: 2,
    ApplicationStatus.UNDER_REVIEW: 3,
    ApplicationStatus.APPROVED: 4,
    ApplicationStatus.REJECTED: 4,
}


VEHICLE_MAKES = (
    "Maruti Suzuki",
    "Hyundai",
    "Tata",
    "Mahindra",
    "Honda",
    "Toyota",
    "Kia",
    "MG",
    "Skoda",
    "Volkswagen",
)

VEHICLE_YEARS = ("2026", "2025", "2024", "2023", "2022", "2021", "2020")
