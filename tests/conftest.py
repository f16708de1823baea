"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from loan_wizard.models import (
    CreditScoreRange,
    Customer,
    Draft,
    EmploymentType,
    Financial,
    IdType,
    LoanPreferences,
    Vehicle,
    VehicleType,
)
from loan_wizard.store import ApplicationRegistry, MemoryStore


class FakeCollaborator:
    """Scripted collaborator returning queued responses or raising queued errors."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.payloads: list[dict[str, Any]] = []

    async def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


def agent_success(result: Any) -> dict[str, Any]:
    """Successful agent envelope around ``result``."""
    return {"success": True, "response": {"result": result}}


def agent_failure(error: str | None = None, message: str | None = None) -> dict[str, Any]:
    """Unsuccessful agent envelope."""
    envelope: dict[str, Any] = {"success": False, "response": {}}
    if error is not None:
        envelope["error"] = error
    if message is not None:
        envelope["response"]["message"] = message
    return envelope


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def valid_draft() -> Draft:
    """Draft that passes every step."""
    return Draft(
        customer=Customer(
            name="Priya Sharma",
            phone="9123456789",
            email="priya@example.com",
            address="15, Park Street, Kolkata",
            id_type=IdType.PAN_CARD,
        ),
        vehicle=Vehicle(
            vehicle_type=VehicleType.NEW,
            make="Hyundai",
            model="Creta",
            year="2025",
            dealer_name="Hyundai Hub",
            vehicle_value=1450000,
        ),
        financial=Financial(
            monthly_income=120000,
            existing_emis=10000,
            credit_score_range=CreditScoreRange.ABOVE_800,
            employment_type=EmploymentType.BUSINESS_OWNER,
        ),
        loan_preferences=LoanPreferences(desired_loan_amount=1000000, preferred_tenure=48),
    )


@pytest.fixture
def offer_result() -> dict[str, Any]:
    """Complete calculator result."""
    return {
        "customer_name": "Priya Sharma",
        "vehicle_description": "New Hyundai Creta 2025",
        "vehicle_value": 1450000,
        "down_payment": 435000,
        "down_payment_percentage": 30,
        "eligible_loan_amount": 1015000,
        "desired_loan_amount": 1000000,
        "approved_loan_amount": 1000000,
        "interest_rate": 7.5,
        "tenure_months": 48,
        "monthly_emi": 24178,
        "total_interest": 160544,
        "total_payable": 1160544,
        "eligibility_status": "Eligible",
        "eligibility_reason": "Excellent credit score and strong income",
        "income_to_emi_ratio": 20.15,
        "summary": "Loan approved for Priya Sharma.",
    }


@pytest.fixture
def submission_result() -> dict[str, Any]:
    """Complete processor result."""
    return {
        "application_reference_id": "VL-2025-0042",
        "submission_timestamp": "2025-12-14T09:30:00Z",
        "status": "Submitted",
        "customer_name": "Priya Sharma",
        "vehicle_description": "New Hyundai Creta 2025",
        "approved_loan_amount": 1000000,
        "monthly_emi": 24178,
        "tenure_months": 48,
        "confirmation_message": "Your application is with our credit team.",
    }


@pytest.fixture
def storage() -> MemoryStore:
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def registry(storage: MemoryStore) -> ApplicationRegistry:
    """Empty registry backed by the in-memory store."""
    return ApplicationRegistry(storage)
