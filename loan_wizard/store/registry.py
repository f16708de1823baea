"""Persisted registry of committed loan applications."""

from __future__ import annotations

import dataclasses
import json
import logging
import secrets
import string

from loan_wizard.config import DEFAULT_STORAGE_SLOT
from loan_wizard.exceptions import InvalidEntityStateError, PersistenceError
from loan_wizard.models import Application, ApplicationStatus, utc_now_iso
from loan_wizard.serialization import application_from_dict, to_dict
from loan_wizard.store.backends import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_uppercase
_ID_PREFIX = "APP-"
_ID_LENGTH = 8


def generate_application_id() -> str:
    """Generate a short opaque application id, e.g. ``APP-K3Z9Q0LM``."""
    return _ID_PREFIX + "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def check_application(application: Application) -> None:
    """Enforce the status / result-record invariants.

    Raises
    ------
    InvalidEntityStateError
        If a calculated application lacks a loan offer, or a submitted one
        lacks a submission.
    """
    status = ApplicationStatus(application.status)
    if status.rank >= ApplicationStatus.CALCULATED.rank and application.loan_offer is None:
        raise InvalidEntityStateError(
            f"Application {application.id} is {status.value} without a loan offer"
        )
    if status.rank >= ApplicationStatus.SUBMITTED.rank and application.submission is None:
        raise InvalidEntityStateError(
            f"Application {application.id} is {status.value} without a submission"
        )


class ApplicationRegistry:
    """Ordered, most-recent-first collection of applications.

    The collection is an immutable tuple that is replaced wholesale on every
    mutation, so a value returned by :meth:`list` is a stable snapshot.  Each
    mutation is followed by a synchronous write of the whole collection to
    the backing store.

    Parameters
    ----------
    storage : KeyValueStore | None
        Backing store.  Defaults to an in-memory store.
    slot : str
        Name of the slot holding the serialized collection.
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        slot: str = DEFAULT_STORAGE_SLOT,
    ) -> None:
        self._storage = storage if storage is not None else MemoryStore()
        self._slot = slot
        self._applications: tuple[Application, ...] = self._load()

    def __len__(self) -> int:
        return len(self._applications)

    def list(self) -> tuple[Application, ...]:
        """Return the applications, newest first."""
        return self._applications

    def get(self, app_id: str) -> Application | None:
        """Return the application with ``app_id``, or None."""
        for application in self._applications:
            if application.id == app_id:
                return application
        return None

    def add(self, application: Application) -> Application:
        """Insert an application at the head of the collection."""
        check_application(application)
        self._applications = (application, *self._applications)
        logger.info(
            "Added application %s (%s)",
            application.id,
            ApplicationStatus(application.status).value,
            extra={"application_id": application.id},
        )
        self._persist()
        return application

    def update(self, app_id: str, **patch: object) -> Application | None:
        """Replace the application matching ``app_id`` with a patched copy.

        ``updated_at`` is refreshed unless the patch sets it.  Unknown ids
        are ignored.

        Returns
        -------
        Application | None
            The stored copy, or None when ``app_id`` is absent.

        Raises
        ------
        InvalidEntityStateError
            If the patch would regress the status or break the result-record
            invariants.
        """
        current = self.get(app_id)
        if current is None:
            logger.debug("Ignoring update for unknown application %s", app_id)
            return None

        patch.setdefault("updated_at", utc_now_iso())
        patch.pop("id", None)
        if "status" in patch:
            patch["status"] = ApplicationStatus(patch["status"])
        updated = dataclasses.replace(current, **patch)

        if not current.can_transition_to(updated.status):
            raise InvalidEntityStateError(
                f"Application {app_id} cannot move from {current.status.value} "
                f"to {updated.status.value}"
            )
        check_application(updated)

        self._applications = tuple(
            updated if application.id == app_id else application
            for application in self._applications
        )
        logger.info(
            "Updated application %s (%s)", app_id, updated.status.value, extra={"application_id": app_id}
        )
        self._persist()
        return updated

    def clear(self) -> None:
        """Remove every application."""
        self._applications = ()
        self._persist()

    def dumps(self) -> str:
        """Serialize the collection to a JSON array."""
        return json.dumps([to_dict(application) for application in self._applications])

    def reload(self) -> None:
        """Discard in-memory state and re-read the backing store."""
        self._applications = self._load()

    def _load(self) -> tuple[Application, ...]:
        try:
            raw = self._storage.get(self._slot)
            if raw is None:
                return ()
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("stored applications are not a JSON array")
            applications = tuple(application_from_dict(record) for record in records)
        except (PersistenceError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable application store slot %r: %s", self._slot, exc)
            return ()
        logger.debug("Loaded %d applications from slot %r", len(applications), self._slot)
        return applications

    def _persist(self) -> None:
        try:
            self._storage.set(self._slot, self.dumps())
        except PersistenceError:
            # In-memory state stays authoritative; the next mutation retries the write
            logger.exception("Failed to persist %d applications", len(self._applications))
