"""Custom exception hierarchy for loan-wizard."""


class LoanWizardError(Exception):
    """Base exception for all loan-wizard errors."""


class ApplicationNotFoundError(LoanWizardError):
    """Raised when a referenced application does not exist."""


class InvalidEntityStateError(LoanWizardError):
    """Raised when an application is in an invalid state for the operation."""


class InvalidTransitionError(LoanWizardError):
    """Raised when a workflow operation is not allowed from the current state."""


class WorkflowBusyError(LoanWizardError):
    """Raised when a collaborator call is requested while another is in flight."""


class CollaboratorError(LoanWizardError):
    """Raised when a collaborator call cannot complete."""


class PersistenceError(LoanWizardError):
    """Raised when the application store cannot be written."""


class ConfigurationError(LoanWizardError):
    """Raised when configuration is invalid or missing."""
