"""Search, lookup and status statistics over registered applications.

All functions are pure and take the collection to read (normally
``ApplicationRegistry.list()``), so every call sees a fresh snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from loan_wizard.models import Application, ApplicationStatus
from loan_wizard.samples import sample_applications

ALL_STATUSES = "all"

PENDING_STATUSES = frozenset({ApplicationStatus.DRAFT, ApplicationStatus.CALCULATED})
SUBMITTED_STATUSES = frozenset({ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW})
RESOLVED_STATUSES = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})


@dataclass(frozen=True)
class ApplicationStats:
    """Application counts by lifecycle group."""

    total: int = 0
    pending: int = 0
    submitted: int = 0
    resolved: int = 0


def matches_query(application: Application, query: str) -> bool:
    """Case-insensitive substring match on customer name, vehicle model and id."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in application.customer.name.lower()
        or needle in application.vehicle.model.lower()
        or needle in application.id.lower()
    )


def matches_status(application: Application, status_filter: str) -> bool:
    """Exact status match; ``"all"`` matches everything."""
    if status_filter == ALL_STATUSES:
        return True
    return application.status == status_filter


def search(
    applications: Iterable[Application],
    query: str = "",
    status_filter: str = ALL_STATUSES,
) -> list[Application]:
    """Filter applications by text query and status, preserving order."""
    return [
        application
        for application in applications
        if matches_query(application, query) and matches_status(application, status_filter)
    ]


def stats(applications: Iterable[Application]) -> ApplicationStats:
    """Count applications per lifecycle group."""
    total = pending = submitted = resolved = 0
    for application in applications:
        total += 1
        if application.status in PENDING_STATUSES:
            pending += 1
        elif application.status in SUBMITTED_STATUSES:
            submitted += 1
        elif application.status in RESOLVED_STATUSES:
            resolved += 1
    return ApplicationStats(total=total, pending=pending, submitted=submitted, resolved=resolved)


def find_application(applications: Iterable[Application], app_id: str) -> Application | None:
    """Return the application with ``app_id``, or None."""
    return next((application for application in applications if application.id == app_id), None)


def display_applications(
    applications: Sequence[Application],
    show_samples: bool = False,
) -> Sequence[Application]:
    """Return the collection to display.

    When ``show_samples`` is set and nothing has been registered yet, the
    built-in demonstration applications are shown instead.
    """
    if show_samples and not applications:
        return sample_applications()
    return applications
