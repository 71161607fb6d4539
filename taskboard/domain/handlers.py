"""Dispatch actions: one named mutation of the document per handler."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError

from taskboard.domain.models import (
    Action,
    AppData,
    Comment,
    CommentCreate,
    Event,
    EventCreate,
    EventUpdateRequest,
    IdPayload,
    User,
    UserCreate,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)
_R = TypeVar("_R", bound=BaseModel)


class ActionRejected(Exception):
    """A dispatch that must not be applied. The message is shown to users."""


class InvalidAction(ActionRejected):
    pass


class DuplicateEmail(ActionRejected):
    pass


class InvalidPayload(ActionRejected):
    pass


def _parse(model: type[_M], payload: Any) -> _M:
    try:
        return model.model_validate(payload or {})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidPayload(f"Invalid payload: {problems}") from exc


def _merge(record: _R, changes: dict[str, Any]) -> _R:
    """Shallow-merge already validated *changes* onto *record*."""
    nulls = sorted(name for name, value in changes.items() if value is None)
    if nulls:
        raise InvalidPayload(f"Invalid payload: {', '.join(nulls)} cannot be null")
    return record.model_copy(update=changes)


class ActionRegistry:
    """Maps action names to handlers that mutate an :class:`AppData` in place.

    Every handler validates its payload before touching the document, so a
    rejected action leaves the document exactly as it was.
    """

    def __init__(self) -> None:
        self._handlers: dict[Action, Callable[[AppData, Any], None]] = {}
        self._register()

    def _register(self) -> None:
        self._handlers[Action.ADD_EVENT] = self.add_event
        self._handlers[Action.UPDATE_EVENT] = self.update_event
        self._handlers[Action.DELETE_EVENT] = self.delete_event
        self._handlers[Action.ADD_COMMENT] = self.add_comment
        self._handlers[Action.ADD_USER] = self.add_user
        self._handlers[Action.UPDATE_USER] = self.update_user
        self._handlers[Action.DELETE_USER] = self.delete_user

    def apply(self, data: AppData, action: str | None, payload: Any) -> None:
        try:
            handler = self._handlers[Action(action)]
        except ValueError:
            raise InvalidAction("Invalid action") from None
        handler(data, payload)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_event(self, data: AppData, payload: Any) -> None:
        request = _parse(EventCreate, payload)
        event = Event(**request.model_dump(), comments=[])
        data.events.append(event)
        logger.info("Added event %s (%s)", event.id, event.title)

    def update_event(self, data: AppData, payload: Any) -> None:
        request = _parse(EventUpdateRequest, payload)
        changes = request.updates.model_dump(exclude_unset=True)
        data.events = [
            _merge(event, changes) if event.id == request.id else event
            for event in data.events
        ]

    def delete_event(self, data: AppData, payload: Any) -> None:
        request = _parse(IdPayload, payload)
        data.events = [e for e in data.events if e.id != request.id]
        # Cascade: comments never outlive their event.
        data.comments = [c for c in data.comments if c.event_id != request.id]

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, data: AppData, payload: Any) -> None:
        request = _parse(CommentCreate, payload)
        data.comments.append(Comment(**request.model_dump()))

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def add_user(self, data: AppData, payload: Any) -> None:
        request = _parse(UserCreate, payload)
        if any(u.email == request.email for u in data.users):
            raise DuplicateEmail("User already exists")
        user = User(**request.model_dump())
        data.users.append(user)
        logger.info("Added user %s (%s)", user.id, user.email)

    def update_user(self, data: AppData, payload: Any) -> None:
        request = _parse(UserUpdateRequest, payload)
        changes = request.updates.model_dump(exclude_unset=True)
        email = changes.get("email")
        if email is not None and any(u.email == email and u.id != request.id for u in data.users):
            raise DuplicateEmail("Email already exists")
        data.users = [
            _merge(user, changes) if user.id == request.id else user
            for user in data.users
        ]

    def delete_user(self, data: AppData, payload: Any) -> None:
        # No cascade: events and comments may keep pointing at this id.
        request = _parse(IdPayload, payload)
        data.users = [u for u in data.users if u.id != request.id]
