"""Multi-step application wizard and its calls to the decisioning agents."""

from __future__ import annotations

import logging
from enum import Enum

from loan_wizard.collaborators import (
    Collaborator,
    build_calculation_request,
    build_loan_offer,
    build_submission,
    build_submission_request,
    extract_result_data,
    failure_message,
)
from loan_wizard.collaborators.payloads import (
    CALCULATE_FAILED_MESSAGE,
    SUBMIT_FAILED_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
)
from loan_wizard.exceptions import (
    ApplicationNotFoundError,
    InvalidEntityStateError,
    InvalidTransitionError,
    WorkflowBusyError,
)
from loan_wizard.models import (
    Application,
    ApplicationStatus,
    Draft,
    LoanOffer,
    Submission,
    utc_now_iso,
)
from loan_wizard.store import ApplicationRegistry, generate_application_id
from loan_wizard.validation import validate_draft, validate_step

logger = logging.getLogger(__name__)

INCOMPLETE_DRAFT_MESSAGE = "Please complete all required fields before calculating."
MISSING_APPLICATION_MESSAGE = "This application is no longer available. Please start a new application."


class WizardState(str, Enum):
    STEP_1 = "step_1"  # Customer details
    STEP_2 = "step_2"  # Vehicle information
    STEP_3 = "step_3"  # Financial details
    STEP_4 = "step_4"  # Loan preferences
    REVIEW = "review"  # Step 5, before calculation
    OFFERED = "offered"
    SUBMITTED = "submitted"
    LISTING = "listing"
    DETAIL = "detail"


class Operation(str, Enum):
    ADVANCE = "advance"
    RETREAT = "retreat"
    CALCULATE = "calculate"
    SUBMIT = "submit"


STEP_STATES = (
    WizardState.STEP_1,
    WizardState.STEP_2,
    WizardState.STEP_3,
    WizardState.STEP_4,
    WizardState.REVIEW,
)

NAVIGATION_STATES = frozenset({WizardState.LISTING, WizardState.DETAIL})

# (operation, from state) -> to state.  Pairs not listed are rejected.
# reset_draft, edit_application and the navigation screens are reachable
# from every state and are not part of the table.
TRANSITIONS: dict[tuple[Operation, WizardState], WizardState] = {
    (Operation.ADVANCE, WizardState.STEP_1): WizardState.STEP_2,
    (Operation.ADVANCE, WizardState.STEP_2): WizardState.STEP_3,
    (Operation.ADVANCE, WizardState.STEP_3): WizardState.STEP_4,
    (Operation.ADVANCE, WizardState.STEP_4): WizardState.REVIEW,
    (Operation.ADVANCE, WizardState.REVIEW): WizardState.REVIEW,
    (Operation.RETREAT, WizardState.STEP_1): WizardState.STEP_1,
    (Operation.RETREAT, WizardState.STEP_2): WizardState.STEP_1,
    (Operation.RETREAT, WizardState.STEP_3): WizardState.STEP_2,
    (Operation.RETREAT, WizardState.STEP_4): WizardState.STEP_3,
    (Operation.RETREAT, WizardState.REVIEW): WizardState.STEP_4,
    (Operation.CALCULATE, WizardState.REVIEW): WizardState.OFFERED,
    (Operation.SUBMIT, WizardState.OFFERED): WizardState.SUBMITTED,
}


class WorkflowEngine:
    """Drive one draft through collection, calculation and submission.

    The engine owns exactly one editable draft.  ``advance`` gates each step
    on validation; ``calculate`` and ``submit`` await the collaborators, and
    at most one such call may be in flight at a time.  Collaborator failures
    never raise: they leave the engine where it was and set :attr:`error`.

    Parameters
    ----------
    registry : ApplicationRegistry
        Store of committed applications.
    calculator : Collaborator
        Loan calculation agent.
    processor : Collaborator
        Loan processing agent.
    """

    def __init__(
        self,
        registry: ApplicationRegistry,
        calculator: Collaborator,
        processor: Collaborator,
    ) -> None:
        self.registry = registry
        self.calculator = calculator
        self.processor = processor

        self.state = WizardState.STEP_1
        self.draft = Draft()
        self.errors: dict[str, str] = {}
        self.error: str | None = None
        self.loan_offer: LoanOffer | None = None
        self.submission: Submission | None = None
        self.application_id: str | None = None
        self.selected_id: str | None = None

        self._active_call: Operation | None = None
        self._resume_state = WizardState.STEP_1

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------

    @property
    def step(self) -> int | None:
        """Current wizard step (1-5), or None outside the collection steps."""
        if self.state in STEP_STATES:
            return STEP_STATES.index(self.state) + 1
        return None

    @property
    def busy(self) -> bool:
        """Whether a collaborator call is in flight."""
        return self._active_call is not None

    @property
    def active_call(self) -> str | None:
        """Kind of the in-flight call: ``"calculate"``, ``"submit"`` or None."""
        return self._active_call.value if self._active_call else None

    @property
    def application(self) -> Application | None:
        """Committed application the draft belongs to, if any."""
        if self.application_id is None:
            return None
        return self.registry.get(self.application_id)

    @property
    def selected_application(self) -> Application | None:
        """Application shown on the detail screen, if it still exists."""
        if self.selected_id is None:
            return None
        return self.registry.get(self.selected_id)

    # ------------------------------------------------------------------
    # Step navigation
    # ------------------------------------------------------------------

    def advance(self) -> dict[str, str]:
        """Validate the current step and move forward if it passes.

        Returns
        -------
        dict[str, str]
            Validation errors; empty when the engine moved on.
        """
        self._ensure_idle()
        target = self._target(Operation.ADVANCE)
        errors = validate_step(
            self.step,
            self.draft.customer,
            self.draft.vehicle,
            self.draft.financial,
            self.draft.loan_preferences,
        )
        if errors:
            self.errors = errors
            logger.debug("Step %s blocked: %s", self.step, sorted(errors))
            return errors

        self.errors = {}
        self._move(target)
        return {}

    def retreat(self) -> None:
        """Move back one step without re-validating."""
        self._ensure_idle()
        target = self._target(Operation.RETREAT)
        self.errors = {}
        self._move(target)

    def reset_draft(self) -> None:
        """Discard the draft and start a new application at step 1."""
        self._ensure_idle()
        self.draft = Draft()
        self.errors = {}
        self.error = None
        self.loan_offer = None
        self.submission = None
        self.application_id = None
        self.selected_id = None
        self._move(WizardState.STEP_1)

    def edit_application(self, app_id: str | None = None) -> None:
        """Reopen a committed application as a fresh draft at step 1.

        The draft is a copy of the application's inputs; the application
        itself is left untouched until the next successful calculation.

        Parameters
        ----------
        app_id : str | None
            Application to edit.  Defaults to the one the draft belongs to.

        Raises
        ------
        ApplicationNotFoundError
            If no such application is in the registry.
        """
        self._ensure_idle()
        app_id = app_id or self.application_id
        application = self.registry.get(app_id) if app_id else None
        if application is None:
            raise ApplicationNotFoundError(f"Application {app_id} not found")

        self.draft = application.to_draft()
        self.errors = {}
        self.error = None
        self.loan_offer = None
        self.submission = None
        self.application_id = application.id
        self._move(WizardState.STEP_1)

    def open_listing(self) -> None:
        """Show the application list, keeping the draft for later."""
        self._enter_navigation(WizardState.LISTING)

    def open_detail(self, app_id: str) -> None:
        """Show one application's details, keeping the draft for later."""
        self.selected_id = app_id
        self._enter_navigation(WizardState.DETAIL)

    def resume(self) -> None:
        """Return from a navigation screen to where the wizard was left."""
        if self.state in NAVIGATION_STATES:
            self._move(self._resume_state)

    # ------------------------------------------------------------------
    # Collaborator calls
    # ------------------------------------------------------------------

    async def calculate(self) -> Application | None:
        """Request a loan offer for the draft and commit it.

        Returns
        -------
        Application | None
            The committed ``Calculated`` application, or None when the call
            failed (see :attr:`error`).
        """
        self._ensure_idle()
        target = self._target(Operation.CALCULATE)

        errors = validate_draft(self.draft)
        if errors:
            self.errors = errors
            self.error = INCOMPLETE_DRAFT_MESSAGE
            return None

        draft = self.draft.copy()
        self._active_call = Operation.CALCULATE
        self.error = None
        try:
            try:
                response = await self.calculator.call(build_calculation_request(draft))
            except Exception as exc:
                logger.exception("Loan calculation call failed", extra={"operation": Operation.CALCULATE})
                self.error = str(exc) or UNEXPECTED_ERROR_MESSAGE
                return None

            data = extract_result_data(response)
            if data is None:
                self.error = failure_message(response, CALCULATE_FAILED_MESSAGE)
                logger.warning(
                    "Loan calculation unsuccessful: %s", self.error, extra={"operation": Operation.CALCULATE}
                )
                return None

            offer = build_loan_offer(data, draft)
            application = self._commit_offer(draft, offer)
        finally:
            self._active_call = None

        self.loan_offer = offer
        self.submission = None
        self.application_id = application.id
        self.selected_id = application.id
        self._move(target)
        return application

    async def submit(self) -> Application | None:
        """Send the offered application to processing.

        Returns
        -------
        Application | None
            The ``Submitted`` application, or None when the call failed or
            the application has left the registry in the meantime.

        Raises
        ------
        InvalidEntityStateError
            If no loan offer is attached to the draft.
        """
        self._ensure_idle()
        target = self._target(Operation.SUBMIT)
        if self.loan_offer is None:
            raise InvalidEntityStateError("Cannot submit without a loan offer")

        draft = self.draft.copy()
        offer = self.loan_offer
        self._active_call = Operation.SUBMIT
        self.error = None
        try:
            try:
                response = await self.processor.call(build_submission_request(draft, offer))
            except Exception as exc:
                logger.exception(
                    "Loan submission call failed",
                    extra={"operation": Operation.SUBMIT, "application_id": self.application_id},
                )
                self.error = str(exc) or UNEXPECTED_ERROR_MESSAGE
                return None

            data = extract_result_data(response)
            if data is None:
                self.error = failure_message(response, SUBMIT_FAILED_MESSAGE)
                logger.warning(
                    "Loan submission unsuccessful: %s",
                    self.error,
                    extra={"operation": Operation.SUBMIT, "application_id": self.application_id},
                )
                return None

            submission = build_submission(data, draft, offer)
            application = self.registry.update(
                self.application_id,
                submission=submission,
                status=ApplicationStatus.SUBMITTED,
                updated_at=utc_now_iso(),
            )
        finally:
            self._active_call = None

        if application is None:
            self.error = MISSING_APPLICATION_MESSAGE
            logger.warning(
                "Submitted application %s is no longer in the registry",
                self.application_id,
                extra={"operation": Operation.SUBMIT, "application_id": self.application_id},
            )
            return None
        self.submission = submission
        self._move(target)
        return application

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit_offer(self, draft: Draft, offer: LoanOffer) -> Application:
        """Attach ``offer`` to the edited application, or commit a new one."""
        existing = self.application
        if existing is not None and existing.can_transition_to(ApplicationStatus.CALCULATED):
            snapshot = draft.copy()
            updated = self.registry.update(
                existing.id,
                customer=snapshot.customer,
                vehicle=snapshot.vehicle,
                financial=snapshot.financial,
                loan_preferences=snapshot.loan_preferences,
                loan_offer=offer,
                status=ApplicationStatus.CALCULATED,
            )
            if updated is not None:
                return updated

        application = Application.from_draft(
            generate_application_id(),
            draft,
            status=ApplicationStatus.CALCULATED,
            loan_offer=offer,
        )
        return self.registry.add(application)

    def _target(self, operation: Operation) -> WizardState:
        try:
            return TRANSITIONS[(operation, self.state)]
        except KeyError:
            raise InvalidTransitionError(
                f"Cannot {operation.value} from {self.state.value}"
            ) from None

    def _ensure_idle(self) -> None:
        if self._active_call is not None:
            raise WorkflowBusyError(f"A {self._active_call.value} call is already in progress")

    def _enter_navigation(self, state: WizardState) -> None:
        if self.state not in NAVIGATION_STATES:
            self._resume_state = self.state
        self.error = None
        self._move(state)

    def _move(self, state: WizardState) -> None:
        if state != self.state:
            logger.debug(
                "Wizard %s -> %s",
                self.state.value,
                state.value,
                extra={"state": state, "application_id": self.application_id},
            )
        self.state = state
