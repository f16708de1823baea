"""Input entities collected by the application wizard."""

import copy
from dataclasses import dataclass, field

from loan_wizard.models.enums import (
    CreditScoreRange,
    EmploymentType,
    IdType,
    VehicleType,
)


@dataclass
class Customer:
    """Applicant contact and identity details."""

    name: str = ""
    phone: str = ""  # 10 digits, no country code
    email: str = ""
    address: str = ""
    id_type: IdType | str = ""


@dataclass
class Vehicle:
    """Vehicle being financed."""

    vehicle_type: VehicleType | str = VehicleType.NEW
    make: str = ""
    model: str = ""
    year: str = ""
    dealer_name: str = ""
    vehicle_value: float = 0

    @property
    def description(self) -> str:
        """Human-readable description, e.g. ``New Hyundai Creta 2025``."""
        vehicle_type = getattr(self.vehicle_type, "value", self.vehicle_type)
        return f"{vehicle_type} {self.make} {self.model} {self.year}"


@dataclass
class Financial:
    """Applicant income and credit profile."""

    monthly_income: float = 0
    existing_emis: float = 0  # Existing monthly debt obligations
    credit_score_range: CreditScoreRange | str = ""
    employment_type: EmploymentType | str = ""


@dataclass
class LoanPreferences:
    """Requested loan terms."""

    desired_loan_amount: float = 0
    preferred_tenure: int = 0  # Months; 0 means not selected


@dataclass
class Draft:
    """Editable, uncommitted application data."""

    customer: Customer = field(default_factory=Customer)
    vehicle: Vehicle = field(default_factory=Vehicle)
    financial: Financial = field(default_factory=Financial)
    loan_preferences: LoanPreferences = field(default_factory=LoanPreferences)

    def copy(self) -> "Draft":
        """Return a deep copy that shares no mutable state with this draft."""
        return copy.deepcopy(self)
