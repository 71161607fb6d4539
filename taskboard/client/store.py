"""Client-side mirror of the task board document plus the login session.

Every mutation is a round trip: the backend applies the action and answers
with the full document, and the affected local collections are replaced
wholesale with what came back. Nothing is changed locally ahead of the
response.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ValidationError

from taskboard.config import Settings, get_settings
from taskboard.domain.bus import EventBus
from taskboard.domain.events import CollectionsReplaced, ReminderRaised, SessionChanged
from taskboard.domain.models import (
    Action,
    AppData,
    Comment,
    Event,
    EventCreate,
    EventStatus,
    EventUpdate,
    User,
    UserCreate,
    UserUpdate,
)
from taskboard.services.reminders import assignee_name, scan_events

logger = logging.getLogger(__name__)

DATA_ENDPOINT = "/api/data"


class StoreClientError(Exception):
    """A round trip failed; the message is the backend's reason when it gave one."""


def _wire(model: type[BaseModel], data: BaseModel | Mapping[str, Any], partial: bool = False) -> dict:
    """Validate *data* against *model* and dump it with the on-disk field names.

    Raises :class:`StoreClientError` when *data* would be rejected anyway.
    """
    try:
        validated = model.model_validate(data)
    except ValidationError as exc:
        raise StoreClientError(str(exc)) from exc
    return validated.model_dump(mode="json", by_alias=True, exclude_unset=partial)


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return detail if isinstance(detail, str) and detail else "API call failed"


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    settings = settings or get_settings()
    return httpx.AsyncClient(base_url=settings.api_base_url, timeout=settings.request_timeout)


class StoreClient:
    """Application state object handed to every view.

    Views read ``events``, ``users``, ``comments``, ``current_user``,
    ``is_authenticated`` and ``loading`` directly and follow changes by
    subscribing to :attr:`bus`.
    """

    def __init__(self, http: httpx.AsyncClient, bus: EventBus | None = None) -> None:
        self._http = http
        self.bus = bus or EventBus()

        self.events: list[Event] = []
        self.users: list[User] = []
        self.comments: list[Comment] = []
        self.current_user: User | None = None
        self.is_authenticated = False
        self.loading = False

    # ------------------------------------------------------------------
    # Backend round trips
    # ------------------------------------------------------------------

    async def _call(self, action: Action, payload: dict[str, Any] | None = None) -> AppData:
        try:
            response = await self._http.post(
                DATA_ENDPOINT, json={"action": action.value, "payload": payload}
            )
        except httpx.HTTPError as exc:
            raise StoreClientError("API call failed") from exc
        if response.is_error:
            raise StoreClientError(_error_detail(response))
        try:
            return AppData.model_validate(response.json())
        except ValueError as exc:
            raise StoreClientError("API call failed") from exc

    def _replace(self, data: AppData, *collections: str) -> None:
        for name in collections:
            setattr(self, name, getattr(data, name))
        self.bus.publish(CollectionsReplaced(collections=list(collections)))

    async def load(self) -> None:
        """Fetch the whole document. Failures are logged, never raised."""
        self.loading = True
        try:
            response = await self._http.get(DATA_ENDPOINT)
            response.raise_for_status()
            data = AppData.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to fetch data: %s", exc)
        else:
            self._replace(data, "events", "users", "comments")
        finally:
            self.loading = False

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def login(self, identifier: str, password: str) -> bool:
        """Match *identifier* against email or name in the cached users.

        Works on the local copy only; call :meth:`load` first.
        """
        user = next(
            (
                u
                for u in self.users
                if (u.email == identifier or u.name == identifier) and u.password == password
            ),
            None,
        )
        if user is None:
            return False
        self.current_user = user
        self.is_authenticated = True
        self.bus.publish(SessionChanged(user_id=user.id))
        return True

    def logout(self) -> None:
        self.current_user = None
        self.is_authenticated = False
        self.bus.publish(SessionChanged(user_id=None))

    async def register(self, user_data: UserCreate | Mapping[str, Any]) -> bool:
        """Create an account. The new user is not logged in."""
        try:
            data = await self._call(Action.ADD_USER, _wire(UserCreate, user_data))
        except StoreClientError as exc:
            logger.error("Registration failed: %s", exc)
            return False
        self._replace(data, "users")
        return True

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def add_event(self, event: EventCreate | Mapping[str, Any]) -> None:
        try:
            data = await self._call(Action.ADD_EVENT, _wire(EventCreate, event))
        except StoreClientError as exc:
            logger.error("Failed to add event: %s", exc)
            raise
        self._replace(data, "events")

    async def update_event(self, event_id: str, updates: EventUpdate | Mapping[str, Any]) -> None:
        try:
            payload = {"id": event_id, "updates": _wire(EventUpdate, updates, partial=True)}
            data = await self._call(Action.UPDATE_EVENT, payload)
        except StoreClientError as exc:
            logger.error("Failed to update event %s: %s", event_id, exc)
            raise
        self._replace(data, "events")

    async def delete_event(self, event_id: str) -> None:
        try:
            data = await self._call(Action.DELETE_EVENT, {"id": event_id})
        except StoreClientError as exc:
            logger.error("Failed to delete event %s: %s", event_id, exc)
            raise
        self._replace(data, "events", "comments")

    async def update_event_status(self, event_id: str, status: EventStatus) -> None:
        try:
            payload = {"id": event_id, "updates": _wire(EventUpdate, {"status": status}, partial=True)}
            data = await self._call(Action.UPDATE_EVENT, payload)
        except StoreClientError as exc:
            logger.error("Failed to update status of event %s: %s", event_id, exc)
            raise
        self._replace(data, "events")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def add_comment(self, event_id: str, content: str) -> None:
        """Post a comment as the current user; does nothing when logged out."""
        if self.current_user is None:
            return
        payload = {"eventId": event_id, "content": content, "userId": self.current_user.id}
        try:
            data = await self._call(Action.ADD_COMMENT, payload)
        except StoreClientError as exc:
            logger.error("Failed to add comment to event %s: %s", event_id, exc)
            raise
        self._replace(data, "comments")

    def get_event_comments(self, event_id: str) -> list[Comment]:
        return [c for c in self.comments if c.event_id == event_id]

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def add_user(self, user: UserCreate | Mapping[str, Any]) -> bool:
        try:
            data = await self._call(Action.ADD_USER, _wire(UserCreate, user))
        except StoreClientError as exc:
            logger.error("Failed to add user: %s", exc)
            return False
        self._replace(data, "users")
        return True

    async def update_user(self, user_id: str, updates: UserUpdate | Mapping[str, Any]) -> bool:
        try:
            payload = {"id": user_id, "updates": _wire(UserUpdate, updates, partial=True)}
            data = await self._call(Action.UPDATE_USER, payload)
        except StoreClientError as exc:
            logger.error("Failed to update user %s: %s", user_id, exc)
            return False
        self._replace(data, "users")

        # Role or name changes to the logged-in account apply without re-login.
        if self.current_user is not None and self.current_user.id == user_id:
            updated = self.get_user_by_id(user_id)
            if updated is not None:
                self.current_user = updated
                self.bus.publish(SessionChanged(user_id=user_id))
        return True

    async def delete_user(self, user_id: str) -> None:
        try:
            data = await self._call(Action.DELETE_USER, {"id": user_id})
        except StoreClientError as exc:
            logger.error("Failed to delete user %s: %s", user_id, exc)
            raise
        self._replace(data, "users")

    def get_user_by_id(self, user_id: str) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)

    def user_name(self, user_id: str) -> str:
        """Display name for a possibly deleted user."""
        return assignee_name(self.get_user_by_id(user_id))

    # ------------------------------------------------------------------
    # Reminders
    # ------------------------------------------------------------------

    def check_reminders(self, now: datetime | None = None) -> list[ReminderRaised]:
        """Scan the cached events and publish a :class:`ReminderRaised` for each hit."""
        reminders = scan_events(self.events, self.get_user_by_id, now or datetime.now())
        for reminder in reminders:
            logger.info(
                "Reminder (%s): %s assigned to %s, %d minutes left",
                reminder.kind,
                reminder.title,
                reminder.assignee_name,
                reminder.minutes_left,
            )
            self.bus.publish(reminder)
        return reminders
