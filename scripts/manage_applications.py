#!/usr/bin/env python3
"""Inspect and manage locally stored loan applications.

Usage:
    python scripts/manage_applications.py list
    python scripts/manage_applications.py search priya --status Calculated
    python scripts/manage_applications.py stats
    python scripts/manage_applications.py show APP-K3Z9Q0LM
    python scripts/manage_applications.py seed --count 5 --seed 42
    python scripts/manage_applications.py apply draft.json --submit

Storage location, agent endpoints and logging are read from the environment
(see ``LoanWizardConfig.from_env``).
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from loan_wizard.collaborators import HttpAgentCollaborator
from loan_wizard.config import LoanWizardConfig
from loan_wizard.exceptions import LoanWizardError
from loan_wizard.generators import DraftGenerator
from loan_wizard.logging import setup_logging
from loan_wizard.models import Application, ApplicationStatus
from loan_wizard.queries import ALL_STATUSES, display_applications, find_application, search, stats
from loan_wizard.serialization import draft_from_dict, to_dict
from loan_wizard.store import ApplicationRegistry, JsonFileStore, generate_application_id
from loan_wizard.workflow import WizardState, WorkflowEngine

logger = logging.getLogger(__name__)


def emit(data: Any) -> None:
    """Print JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def summarize(application: Application) -> dict[str, Any]:
    """One-line view of an application for listings."""
    offer = application.loan_offer
    return {
        "id": application.id,
        "customer": application.customer.name,
        "vehicle": f"{application.vehicle.make} {application.vehicle.model}".strip(),
        "status": application.status.value,
        "approved_loan_amount": offer.approved_loan_amount if offer else None,
        "monthly_emi": offer.monthly_emi if offer else None,
        "updated_at": application.updated_at,
    }


def cmd_list(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    applications = display_applications(registry.list(), config.show_sample_data)
    emit([summarize(application) for application in applications])
    return 0


def cmd_search(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    applications = display_applications(registry.list(), config.show_sample_data)
    emit([summarize(application) for application in search(applications, args.query, args.status)])
    return 0


def cmd_stats(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    applications = display_applications(registry.list(), config.show_sample_data)
    emit(asdict(stats(applications)))
    return 0


def cmd_show(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    applications = display_applications(registry.list(), config.show_sample_data)
    application = find_application(applications, args.app_id)
    if application is None:
        print(f"Application {args.app_id} not found.", file=sys.stderr)
        return 1
    emit(to_dict(application))
    return 0


def cmd_seed(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    generator = DraftGenerator(seed=args.seed)
    created = []
    for draft in generator.generate_batch(args.count):
        application = Application.from_draft(generate_application_id(), draft)
        registry.add(application)
        created.append(application.id)
    logger.info("Seeded %d draft applications", len(created))
    emit(created)
    return 0


async def run_application(
    engine: WorkflowEngine,
    submit: bool,
) -> int:
    """Walk a prepared draft through every step, calculate and optionally submit."""
    while engine.state != WizardState.REVIEW:
        errors = engine.advance()
        if errors:
            emit({"step": engine.step, "errors": errors})
            return 1

    application = await engine.calculate()
    if application is None:
        emit({"error": engine.error, "errors": engine.errors})
        return 1

    if submit:
        application = await engine.submit()
        if application is None:
            emit({"error": engine.error})
            return 1

    emit(to_dict(application))
    return 0


def cmd_apply(registry: ApplicationRegistry, config: LoanWizardConfig, args: argparse.Namespace) -> int:
    try:
        with open(args.draft_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read draft file %s: %s", args.draft_file, exc)
        return 1
    if not isinstance(data, dict):
        logger.error("Draft file %s does not contain a JSON object", args.draft_file)
        return 1
    draft = draft_from_dict(data)

    engine = WorkflowEngine(
        registry,
        calculator=HttpAgentCollaborator.calculator(config.collaborators),
        processor=HttpAgentCollaborator.processor(config.collaborators),
    )
    engine.draft = draft
    return asyncio.run(run_application(engine, args.submit))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage vehicle loan applications")
    parser.add_argument("--storage", type=Path, help="Override LOAN_STORAGE_PATH")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List applications, newest first").set_defaults(handler=cmd_list)

    search_parser = sub.add_parser("search", help="Search by customer, model or id")
    search_parser.add_argument("query")
    search_parser.add_argument(
        "--status",
        default=ALL_STATUSES,
        choices=[ALL_STATUSES, *(status.value for status in ApplicationStatus)],
    )
    search_parser.set_defaults(handler=cmd_search)

    sub.add_parser("stats", help="Count applications by status group").set_defaults(handler=cmd_stats)

    show_parser = sub.add_parser("show", help="Show one application")
    show_parser.add_argument("app_id")
    show_parser.set_defaults(handler=cmd_show)

    seed_parser = sub.add_parser("seed", help="Add synthetic draft applications")
    seed_parser.add_argument("--count", type=int, default=5)
    seed_parser.add_argument("--seed", type=int, default=None)
    seed_parser.set_defaults(handler=cmd_seed)

    apply_parser = sub.add_parser("apply", help="Calculate (and submit) a draft from a JSON file")
    apply_parser.add_argument("draft_file", type=Path)
    apply_parser.add_argument("--submit", action="store_true")
    apply_parser.set_defaults(handler=cmd_apply)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = LoanWizardConfig.from_env()
    except LoanWizardError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    if args.storage is not None:
        config.storage.path = args.storage

    setup_logging(config.log_level, config.log_format)
    registry = ApplicationRegistry(JsonFileStore(config.storage.path), slot=config.storage.slot)

    try:
        return args.handler(registry, config, args)
    except LoanWizardError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
