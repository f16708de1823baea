"""Boundary to the external loan calculation and processing agents."""

from loan_wizard.collaborators.base import Collaborator
from loan_wizard.collaborators.http import HttpAgentCollaborator
from loan_wizard.collaborators.payloads import (
    build_calculation_request,
    build_loan_offer,
    build_submission,
    build_submission_request,
    extract_result_data,
    failure_message,
)

__all__ = [
    "Collaborator",
    "HttpAgentCollaborator",
    "build_calculation_request",
    "build_loan_offer",
    "build_submission",
    "build_submission_request",
    "extract_result_data",
    "failure_message",
]
