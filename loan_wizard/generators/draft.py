"""Synthetic loan application drafts for demos and seeding."""

from __future__ import annotations

import random
from typing import Iterator

from faker import Faker

from loan_wizard.models import (
    VEHICLE_MAKES,
    VEHICLE_YEARS,
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
from loan_wizard.validation import MAX_LOAN_AMOUNT, TENURE_OPTIONS


class DraftGenerator:
    """Generate complete drafts that pass every wizard step.

    Names, addresses and dealer names come from Faker; every other choice
    is drawn from a private ``random.Random`` so a seed reproduces the whole
    batch.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale for names and addresses.
    """

    MODELS_BY_MAKE = {
        "Maruti Suzuki": ("Swift", "Baleno", "Brezza", "Dzire"),
        "Hyundai": ("Creta", "i20", "Venue", "Verna"),
        "Tata": ("Nexon", "Punch", "Harrier", "Altroz"),
        "Mahindra": ("XUV700", "Thar", "Scorpio-N"),
        "Honda": ("City", "Amaze", "Elevate"),
        "Toyota": ("Innova Crysta", "Glanza", "Hyryder"),
        "Kia": ("Seltos", "Sonet", "Carens"),
        "MG": ("Hector", "Astor", "ZS EV"),
        "Skoda": ("Kushaq", "Slavia"),
        "Volkswagen": ("Taigun", "Virtus"),
    }

    # Vehicle price ranges by type (INR)
    VALUE_RANGES = {
        VehicleType.NEW: (500_000, 2_500_000),
        VehicleType.SECOND_HAND: (200_000, 1_200_000),
    }
    NEW_VEHICLE_WEIGHT = 0.7

    DEALER_SUFFIXES = ("Motors", "Auto", "Showroom", "Cars", "Wheels")

    def __init__(self, seed: int | None = None, locale: str = "en_IN") -> None:
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate(self) -> Draft:
        """Generate a single draft.

        Returns
        -------
        Draft
            Generated draft.
        """
        return self._generate_one()

    def generate_batch(self, count: int) -> Iterator[Draft]:
        """Generate multiple drafts.

        Parameters
        ----------
        count : int
            Number of drafts to generate.

        Yields
        ------
        Draft
            Generated drafts.
        """
        for _ in range(count):
            yield self._generate_one()

    def _generate_one(self) -> Draft:
        vehicle = self._generate_vehicle()
        financial = self._generate_financial()

        # Finance 50-90% of the vehicle, capped at the product limit
        share = self.rng.uniform(0.5, 0.9)
        desired = min(MAX_LOAN_AMOUNT, round(vehicle.vehicle_value * share, -3))

        return Draft(
            customer=self._generate_customer(),
            vehicle=vehicle,
            financial=financial,
            loan_preferences=LoanPreferences(
                desired_loan_amount=desired,
                preferred_tenure=self.rng.choice(TENURE_OPTIONS),
            ),
        )

    def _generate_customer(self) -> Customer:
        name = self.fake.name()
        local_part = "".join(ch for ch in name.lower() if ch.isalnum()) or "applicant"
        return Customer(
            name=name,
            # Indian mobile numbers start with 6-9
            phone=f"{self.rng.choice('6789')}{self.rng.randint(0, 999_999_999):09d}",
            email=f"{local_part}{self.rng.randint(1, 999)}@{self.fake.free_email_domain()}",
            address=self.fake.address().replace("\n", ", "),
            id_type=self.rng.choice(list(IdType)),
        )

    def _generate_vehicle(self) -> Vehicle:
        vehicle_type = (
            VehicleType.NEW if self.rng.random() < self.NEW_VEHICLE_WEIGHT else VehicleType.SECOND_HAND
        )
        make = self.rng.choice(VEHICLE_MAKES)
        low, high = self.VALUE_RANGES[vehicle_type]
        year = VEHICLE_YEARS[0] if vehicle_type == VehicleType.NEW else self.rng.choice(VEHICLE_YEARS[2:])
        return Vehicle(
            vehicle_type=vehicle_type,
            make=make,
            model=self.rng.choice(self.MODELS_BY_MAKE[make]),
            year=year,
            dealer_name=f"{self.fake.last_name()} {self.rng.choice(self.DEALER_SUFFIXES)}",
            vehicle_value=round(self.rng.uniform(low, high), -3),
        )

    def _generate_financial(self) -> Financial:
        employment = self.rng.choice(list(EmploymentType))
        # Log-normal monthly income, median around 60,000 INR
        income = round(min(1_000_000, max(15_000, self.rng.lognormvariate(11.0, 0.6))), -2)
        existing = round(income * self.rng.uniform(0.0, 0.3), -2)
        return Financial(
            monthly_income=income,
            existing_emis=existing,
            credit_score_range=self.rng.choice(list(CreditScoreRange)),
            employment_type=employment,
        )
