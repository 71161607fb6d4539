"""JSON-file repository holding the whole task board document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from taskboard.domain.handlers import ActionRegistry
from taskboard.domain.models import AppData, User, UserRole

logger = logging.getLogger(__name__)

SEED_PASSWORD = "123456"


class JsonFileRepository:
    """Read-modify-write store over a single JSON file.

    There is no locking: two overlapping dispatches each read the file,
    mutate their own copy and overwrite it, so the later writer wins.
    """

    def __init__(self, path: Path | str, registry: ActionRegistry | None = None) -> None:
        self.path = Path(path)
        self.registry = registry or ActionRegistry()

    def load(self) -> AppData:
        """Return the current document, seeding a default one if none exists.

        An unreadable or corrupt file yields an empty document instead of an
        error. Only a failure to create the data directory propagates.
        """
        self._ensure_data_dir()

        if not self.path.exists():
            data = create_default_document()
            self._write(data)
            logger.info("Seeded new data file at %s", self.path)
            return data

        try:
            return AppData.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            logger.error("Error reading data file %s: %s", self.path, exc)
            return AppData()

    def dispatch(self, action: str | None, payload: Any) -> AppData:
        """Apply one named action, persist the document and return all of it.

        Raises :class:`~taskboard.domain.handlers.ActionRejected` without
        writing anything when the action is refused.
        """
        data = self.load()
        self.registry.apply(data, action, payload)
        # Written even when the action changed nothing (e.g. unknown id).
        self._write(data)
        return data

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _ensure_data_dir(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _write(self, data: AppData) -> None:
        try:
            self.path.write_text(
                data.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
            )
        except OSError as exc:
            logger.error("Error writing data file %s: %s", self.path, exc)


# ---------------------------------------------------------------------------
# Seed data – the accounts a fresh board starts with
# ---------------------------------------------------------------------------


def _seed_users() -> list[User]:
    return [
        User(
            name="Manager Wang",
            email="manager@example.com",
            password=SEED_PASSWORD,
            role=UserRole.ADMIN,
        ),
        User(name="Sales Zhang", email="sales@example.com", password=SEED_PASSWORD),
        User(name="Finance Li", email="finance@example.com", password=SEED_PASSWORD),
        User(name="Service Zhao", email="service@example.com", password=SEED_PASSWORD),
    ]


def create_default_document() -> AppData:
    """Return the document a missing data file is replaced with."""
    return AppData(events=[], users=_seed_users(), comments=[])
