"""Demonstration applications shown while the registry is still empty."""

from loan_wizard.models import (
    Application,
    ApplicationStatus,
    CreditScoreRange,
    Customer,
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


def sample_applications() -> list[Application]:
    """Build the demonstration applications, newest first.

    A new list of new objects is returned on every call so callers may not
    mutate a shared copy.
    """
    return [
        Application(
            id="APP-DEMO001",
            customer=Customer(
                name="Rajesh Kumar",
                phone="9876543210",
                email="rajesh@example.com",
                address="42, MG Road, Bengaluru",
                id_type=IdType.AADHAAR,
            ),
            vehicle=Vehicle(
                vehicle_type=VehicleType.NEW,
                make="Maruti Suzuki",
                model="Swift",
                year="2025",
                dealer_name="Nexa Showroom",
                vehicle_value=850000,
            ),
            financial=Financial(
                monthly_income=75000,
                existing_emis=5000,
                credit_score_range=CreditScoreRange.FROM_750_TO_800,
                employment_type=EmploymentType.SALARIED,
            ),
            loan_preferences=LoanPreferences(desired_loan_amount=600000, preferred_tenure=60),
            loan_offer=LoanOffer(
                customer_name="Rajesh Kumar",
                vehicle_description="New Maruti Suzuki Swift 2025",
                vehicle_value=850000,
                down_payment=255000,
                down_payment_percentage=30,
                eligible_loan_amount=595000,
                desired_loan_amount=600000,
                approved_loan_amount=595000,
                interest_rate=8.5,
                tenure_months=60,
                monthly_emi=12197,
                total_interest=136820,
                total_payable=731820,
                eligibility_status=EligibilityStatus.ELIGIBLE,
                eligibility_reason="Good income-to-EMI ratio and credit score",
                income_to_emi_ratio=22.93,
                summary="Loan approved for Rajesh Kumar for New Maruti Suzuki Swift 2025.",
            ),
            submission=Submission(
                application_reference_id="VL-2025-0001",
                submission_timestamp="2025-12-15T11:00:00Z",
                status="Submitted",
                customer_name="Rajesh Kumar",
                vehicle_description="New Maruti Suzuki Swift 2025",
                approved_loan_amount=595000,
                monthly_emi=12197,
                tenure_months=60,
                confirmation_message="Application submitted successfully.",
            ),
            status=ApplicationStatus.SUBMITTED,
            created_at="2025-12-15T10:30:00Z",
            updated_at="2025-12-15T11:00:00Z",
        ),
        Application(
            id="APP-DEMO002",
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
            loan_offer=LoanOffer(
                customer_name="Priya Sharma",
                vehicle_description="New Hyundai Creta 2025",
                vehicle_value=1450000,
                down_payment=435000,
                down_payment_percentage=30,
                eligible_loan_amount=1015000,
                desired_loan_amount=1000000,
                approved_loan_amount=1000000,
                interest_rate=7.5,
                tenure_months=48,
                monthly_emi=24178,
                total_interest=160544,
                total_payable=1160544,
                eligibility_status=EligibilityStatus.ELIGIBLE,
                eligibility_reason="Excellent credit score and strong income",
                income_to_emi_ratio=20.15,
                summary="Loan approved for Priya Sharma for New Hyundai Creta 2025.",
            ),
            status=ApplicationStatus.CALCULATED,
            created_at="2025-12-14T08:00:00Z",
            updated_at="2025-12-14T09:00:00Z",
        ),
        Application(
            id="APP-DEMO003",
            customer=Customer(
                name="Amit Patel",
                phone="9988776655",
                email="amit@example.com",
                address="7, SG Highway, Ahmedabad",
                id_type=IdType.DRIVING_LICENSE,
            ),
            vehicle=Vehicle(
                vehicle_type=VehicleType.SECOND_HAND,
                make="Honda",
                model="City",
                year="2022",
                dealer_name="TruValue Motors",
                vehicle_value=750000,
            ),
            financial=Financial(
                monthly_income=55000,
                existing_emis=8000,
                credit_score_range=CreditScoreRange.FROM_650_TO_700,
                employment_type=EmploymentType.SALARIED,
            ),
            loan_preferences=LoanPreferences(desired_loan_amount=500000, preferred_tenure=36),
            status=ApplicationStatus.DRAFT,
            created_at="2025-12-13T14:00:00Z",
            updated_at="2025-12-13T14:00:00Z",
        ),
    ]
