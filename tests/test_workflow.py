"""Tests for the wizard state machine and its collaborator calls."""

import asyncio
from typing import Any

import pytest

from conftest import FakeCollaborator, agent_failure, agent_success
from loan_wizard.collaborators.payloads import CALCULATE_FAILED_MESSAGE, SUBMIT_FAILED_MESSAGE
from loan_wizard.exceptions import (
    ApplicationNotFoundError,
    CollaboratorError,
    InvalidEntityStateError,
    InvalidTransitionError,
    WorkflowBusyError,
)
from loan_wizard.models import Application, ApplicationStatus, Draft
from loan_wizard.queries import stats
from loan_wizard.store import ApplicationRegistry
from loan_wizard.workflow import (
    INCOMPLETE_DRAFT_MESSAGE,
    MISSING_APPLICATION_MESSAGE,
    TRANSITIONS,
    Operation,
    WizardState,
    WorkflowEngine,
)


def make_engine(
    registry: ApplicationRegistry,
    calculator: FakeCollaborator | None = None,
    processor: FakeCollaborator | None = None,
) -> WorkflowEngine:
    return WorkflowEngine(registry, calculator or FakeCollaborator(), processor or FakeCollaborator())


def walk_to_review(engine: WorkflowEngine, draft: Draft) -> None:
    engine.draft = draft
    for _ in range(4):
        assert engine.advance() == {}
    assert engine.state == WizardState.REVIEW


class BlockingCollaborator:
    """Collaborator that waits for a release signal before answering."""

    def __init__(self, response: dict[str, Any]) -> None:
        self.response = response
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.started.set()
        await self.release.wait()
        return self.response


class TestStepNavigation:
    """Tests for advance and retreat."""

    def test_starts_at_step_one(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        assert engine.state == WizardState.STEP_1
        assert engine.step == 1
        assert engine.draft == Draft()
        assert not engine.busy
        assert engine.active_call is None

    def test_advance_blocked_by_errors(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        errors = engine.advance()
        assert set(errors) == {"name", "phone", "email", "address", "idType"}
        assert engine.errors == errors
        assert engine.step == 1

    def test_invalid_vehicle_value_blocks_step_two(
        self, registry: ApplicationRegistry, valid_draft: Draft
    ) -> None:
        valid_draft.vehicle.vehicle_value = 0
        engine = make_engine(registry)
        engine.draft = valid_draft
        assert engine.advance() == {}

        errors = engine.advance()

        assert errors == {"vehicleValue": "Enter a valid vehicle value"}
        assert engine.step == 2

    def test_advance_clears_errors_once_valid(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        engine = make_engine(registry)
        engine.advance()
        engine.draft = valid_draft
        assert engine.advance() == {}
        assert engine.errors == {}
        assert engine.step == 2

    def test_advance_caps_at_review(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        engine = make_engine(registry)
        walk_to_review(engine, valid_draft)
        assert engine.advance() == {}
        assert engine.step == 5

    def test_retreat_floors_at_step_one(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        engine.retreat()
        assert engine.step == 1

    def test_retreat_skips_validation_and_clears_errors(
        self, registry: ApplicationRegistry, valid_draft: Draft
    ) -> None:
        engine = make_engine(registry)
        walk_to_review(engine, valid_draft)
        engine.draft.customer.name = ""
        engine.errors = {"name": "Name is required"}

        engine.retreat()

        assert engine.step == 4
        assert engine.errors == {}

    def test_advance_outside_steps_is_rejected(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        engine.open_listing()
        with pytest.raises(InvalidTransitionError):
            engine.advance()

    def test_transition_table_has_no_shortcuts(self) -> None:
        assert (Operation.SUBMIT, WizardState.REVIEW) not in TRANSITIONS
        assert (Operation.CALCULATE, WizardState.STEP_4) not in TRANSITIONS
        assert TRANSITIONS[(Operation.CALCULATE, WizardState.REVIEW)] == WizardState.OFFERED


class TestCalculate:
    """Tests for requesting a loan offer."""

    @pytest.mark.asyncio
    async def test_success_commits_calculated_application(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        calculator = FakeCollaborator(agent_success(offer_result))
        engine = make_engine(registry, calculator)
        walk_to_review(engine, valid_draft)
        before = stats(registry.list())

        application = await engine.calculate()

        assert application is not None
        assert application.status is ApplicationStatus.CALCULATED
        assert application.loan_offer == engine.loan_offer
        assert application.customer == valid_draft.customer
        assert len(registry) == 1
        assert registry.list()[0] is application
        assert stats(registry.list()).pending == before.pending + 1
        assert engine.state == WizardState.OFFERED
        assert engine.application_id == application.id
        assert engine.application is application
        assert engine.error is None
        assert calculator.payloads[0]["preferred_tenure_months"] == 48

    @pytest.mark.asyncio
    async def test_string_result_is_decoded(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        import json

        engine = make_engine(registry, FakeCollaborator(agent_success(json.dumps(offer_result))))
        walk_to_review(engine, valid_draft)

        application = await engine.calculate()

        assert application is not None
        assert application.loan_offer is not None
        assert application.loan_offer.monthly_emi == 24178

    @pytest.mark.asyncio
    async def test_unsuccessful_response(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        engine = make_engine(registry, FakeCollaborator(agent_failure()))
        walk_to_review(engine, valid_draft)

        assert await engine.calculate() is None

        assert engine.error == CALCULATE_FAILED_MESSAGE
        assert engine.state == WizardState.REVIEW
        assert engine.loan_offer is None
        assert len(registry) == 0
        assert not engine.busy

    @pytest.mark.asyncio
    async def test_agent_error_message_is_surfaced(
        self, registry: ApplicationRegistry, valid_draft: Draft
    ) -> None:
        engine = make_engine(registry, FakeCollaborator(agent_failure("Credit bureau offline")))
        walk_to_review(engine, valid_draft)
        await engine.calculate()
        assert engine.error == "Credit bureau offline"

    @pytest.mark.asyncio
    async def test_transport_error(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        engine = make_engine(registry, FakeCollaborator(CollaboratorError("Agent calc unreachable")))
        walk_to_review(engine, valid_draft)

        assert await engine.calculate() is None

        assert engine.error == "Agent calc unreachable"
        assert engine.state == WizardState.REVIEW
        assert not engine.busy

    @pytest.mark.asyncio
    async def test_retry_after_failure(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        engine = make_engine(
            registry, FakeCollaborator(CollaboratorError("timeout"), agent_success(offer_result))
        )
        walk_to_review(engine, valid_draft)

        assert await engine.calculate() is None
        assert await engine.calculate() is not None
        assert engine.error is None
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_incomplete_draft_is_not_sent(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        calculator = FakeCollaborator()
        engine = make_engine(registry, calculator)
        walk_to_review(engine, valid_draft)
        engine.draft.customer.email = "broken"

        assert await engine.calculate() is None

        assert engine.error == INCOMPLETE_DRAFT_MESSAGE
        assert engine.errors == {"email": "Enter a valid email address"}
        assert calculator.payloads == []

    @pytest.mark.asyncio
    async def test_calculate_before_review_is_rejected(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        with pytest.raises(InvalidTransitionError):
            await engine.calculate()

    @pytest.mark.asyncio
    async def test_sends_draft_snapshot(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        calculator = BlockingCollaborator(agent_success(offer_result))
        engine = WorkflowEngine(registry, calculator, FakeCollaborator())
        walk_to_review(engine, valid_draft)

        task = asyncio.create_task(engine.calculate())
        await calculator.started.wait()
        engine.draft.customer.name = "Changed While Waiting"
        calculator.release.set()
        application = await task

        assert application is not None
        assert application.customer.name == "Priya Sharma"


class TestBusyGuard:
    """Tests for the single in-flight call rule."""

    @pytest.mark.asyncio
    async def test_operations_rejected_while_calculating(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        calculator = BlockingCollaborator(agent_success(offer_result))
        engine = WorkflowEngine(registry, calculator, FakeCollaborator())
        walk_to_review(engine, valid_draft)

        task = asyncio.create_task(engine.calculate())
        await calculator.started.wait()

        assert engine.busy
        assert engine.active_call == "calculate"
        with pytest.raises(WorkflowBusyError):
            await engine.calculate()
        with pytest.raises(WorkflowBusyError):
            engine.retreat()
        with pytest.raises(WorkflowBusyError):
            engine.reset_draft()
        with pytest.raises(WorkflowBusyError):
            await engine.submit()

        calculator.release.set()
        assert await task is not None
        assert not engine.busy
        assert engine.active_call is None
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_navigation_allowed_while_busy(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        calculator = BlockingCollaborator(agent_success(offer_result))
        engine = WorkflowEngine(registry, calculator, FakeCollaborator())
        walk_to_review(engine, valid_draft)

        task = asyncio.create_task(engine.calculate())
        await calculator.started.wait()
        engine.open_listing()
        assert engine.state == WizardState.LISTING
        engine.resume()
        calculator.release.set()
        await task

        assert engine.state == WizardState.OFFERED


class TestSubmit:
    """Tests for sending an offered application to processing."""

    async def _offered(
        self, registry: ApplicationRegistry, draft: Draft, offer_result: dict, *processor_responses: Any
    ) -> WorkflowEngine:
        engine = make_engine(
            registry, FakeCollaborator(agent_success(offer_result)), FakeCollaborator(*processor_responses)
        )
        walk_to_review(engine, draft)
        assert await engine.calculate() is not None
        return engine

    @pytest.mark.asyncio
    async def test_success_marks_submitted(
        self,
        registry: ApplicationRegistry,
        valid_draft: Draft,
        offer_result: dict,
        submission_result: dict,
    ) -> None:
        engine = await self._offered(registry, valid_draft, offer_result, agent_success(submission_result))
        before = stats(registry.list())

        application = await engine.submit()

        after = stats(registry.list())
        assert application is not None
        assert application.status is ApplicationStatus.SUBMITTED
        assert application.submission == engine.submission
        assert application.submission.application_reference_id == "VL-2025-0042"
        assert application.id == engine.application_id
        assert len(registry) == 1
        assert after.submitted == before.submitted + 1
        assert after.pending == before.pending - 1
        assert engine.state == WizardState.SUBMITTED

    @pytest.mark.asyncio
    async def test_request_carries_offer(
        self,
        registry: ApplicationRegistry,
        valid_draft: Draft,
        offer_result: dict,
        submission_result: dict,
    ) -> None:
        engine = await self._offered(registry, valid_draft, offer_result, agent_success(submission_result))
        await engine.submit()
        payload = engine.processor.payloads[0]
        assert payload["loan_offer"]["approved_loan_amount"] == 1000000
        assert payload["customer_name"] == "Priya Sharma"

    @pytest.mark.asyncio
    async def test_failure_stays_offered(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        engine = await self._offered(registry, valid_draft, offer_result, agent_failure())

        assert await engine.submit() is None

        assert engine.error == SUBMIT_FAILED_MESSAGE
        assert engine.state == WizardState.OFFERED
        assert engine.loan_offer is not None
        assert registry.list()[0].status is ApplicationStatus.CALCULATED

    @pytest.mark.asyncio
    async def test_application_removed_before_submission_completes(
        self,
        registry: ApplicationRegistry,
        valid_draft: Draft,
        offer_result: dict,
        submission_result: dict,
    ) -> None:
        engine = await self._offered(registry, valid_draft, offer_result, agent_success(submission_result))
        registry.clear()

        assert await engine.submit() is None

        assert engine.error == MISSING_APPLICATION_MESSAGE
        assert engine.state == WizardState.OFFERED
        assert engine.submission is None
        assert len(registry) == 0
        assert not engine.busy

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_reported(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        engine = await self._offered(registry, valid_draft, offer_result, RuntimeError())

        assert await engine.submit() is None

        assert engine.error == "An unexpected error occurred."
        assert not engine.busy

    @pytest.mark.asyncio
    async def test_submit_before_offer_is_rejected(
        self, registry: ApplicationRegistry, valid_draft: Draft
    ) -> None:
        engine = make_engine(registry)
        walk_to_review(engine, valid_draft)
        with pytest.raises(InvalidTransitionError):
            await engine.submit()

    @pytest.mark.asyncio
    async def test_submit_without_offer_is_rejected(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        engine.state = WizardState.OFFERED
        with pytest.raises(InvalidEntityStateError):
            await engine.submit()


class TestResetAndEdit:
    """Tests for starting over and reopening applications."""

    @pytest.mark.asyncio
    async def test_reset_draft(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        engine = make_engine(registry, FakeCollaborator(agent_success(offer_result)))
        walk_to_review(engine, valid_draft)
        await engine.calculate()

        engine.reset_draft()

        assert engine.state == WizardState.STEP_1
        assert engine.draft == Draft()
        assert engine.loan_offer is None
        assert engine.application_id is None
        assert len(registry) == 1

    def test_edit_seeds_draft_from_application(
        self, registry: ApplicationRegistry, valid_draft: Draft
    ) -> None:
        registry.add(Application.from_draft("APP-EDIT0001", valid_draft))
        engine = make_engine(registry)

        engine.edit_application("APP-EDIT0001")
        engine.draft.customer.name = "Edited"

        assert engine.state == WizardState.STEP_1
        assert engine.application_id == "APP-EDIT0001"
        assert registry.get("APP-EDIT0001").customer.name == "Priya Sharma"

    def test_edit_unknown_application(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        with pytest.raises(ApplicationNotFoundError):
            engine.edit_application("APP-MISSING1")
        with pytest.raises(ApplicationNotFoundError):
            engine.edit_application()

    @pytest.mark.asyncio
    async def test_recalculating_an_edited_draft_updates_in_place(
        self, registry: ApplicationRegistry, valid_draft: Draft, offer_result: dict
    ) -> None:
        registry.add(Application.from_draft("APP-EDIT0001", valid_draft))
        engine = make_engine(registry, FakeCollaborator(agent_success(offer_result)))
        engine.edit_application("APP-EDIT0001")
        engine.draft.loan_preferences.preferred_tenure = 60
        walk_to_review(engine, engine.draft)

        application = await engine.calculate()

        assert application is not None
        assert application.id == "APP-EDIT0001"
        assert application.status is ApplicationStatus.CALCULATED
        assert application.loan_preferences.preferred_tenure == 60
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_recalculating_a_submitted_application_creates_new_entry(
        self,
        registry: ApplicationRegistry,
        valid_draft: Draft,
        offer_result: dict,
        submission_result: dict,
    ) -> None:
        engine = make_engine(
            registry,
            FakeCollaborator(agent_success(offer_result), agent_success(offer_result)),
            FakeCollaborator(agent_success(submission_result)),
        )
        walk_to_review(engine, valid_draft)
        first = await engine.calculate()
        await engine.submit()

        engine.edit_application(first.id)
        walk_to_review(engine, engine.draft)
        second = await engine.calculate()

        assert second is not None
        assert second.id != first.id
        assert len(registry) == 2
        assert registry.get(first.id).status is ApplicationStatus.SUBMITTED


class TestNavigation:
    """Tests for the listing and detail screens."""

    def test_listing_preserves_draft_position(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        engine = make_engine(registry)
        engine.draft = valid_draft
        engine.advance()
        engine.advance()

        engine.open_listing()
        engine.open_detail("APP-ANY00001")
        engine.resume()

        assert engine.step == 3
        assert engine.draft is valid_draft

    def test_detail_selects_application(self, registry: ApplicationRegistry, valid_draft: Draft) -> None:
        registry.add(Application.from_draft("APP-VIEW0001", valid_draft))
        engine = make_engine(registry)

        engine.open_detail("APP-VIEW0001")

        assert engine.state == WizardState.DETAIL
        assert engine.selected_application is registry.get("APP-VIEW0001")

    def test_detail_for_missing_application(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        engine.open_detail("APP-GONE0001")
        assert engine.selected_application is None

    def test_resume_outside_navigation_is_noop(self, registry: ApplicationRegistry) -> None:
        engine = make_engine(registry)
        engine.resume()
        assert engine.state == WizardState.STEP_1
