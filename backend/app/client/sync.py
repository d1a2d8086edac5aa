# app/client/sync.py
"""
In-memory todo list kept consistent with one backing store.

The store is chosen by the session:
  - RemoteSource(session_token): the todo API, authenticated with the token
  - LocalSource(): the on-device LocalStorage, never touching the network

Changing the session swaps the source and reloads the list from the new
source. The two lists are never merged; local todos stay on the device.

Mutations only touch the in-memory list after the backing store has accepted
them. Failures are surfaced through `error` (and the optional `on_error`
callback) and must be retried by the caller.
"""
import datetime as dt
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Union

import httpx

from app.client.storage import LocalStorage
from app.config import settings

logger = logging.getLogger(__name__)

LOCAL_USER_ID = "local"

LOAD_FAILED = "Erreur lors du chargement des todos"
ADD_FAILED = "Erreur lors de l'ajout du todo"
UPDATE_FAILED = "Erreur lors de la mise à jour du todo"
DELETE_FAILED = "Erreur lors de la suppression du todo"
LOGIN_FAILED = "Email ou mot de passe incorrect"
EMPTY_TEXT = "Le texte ne peut pas être vide"
NOT_FOUND = "Todo non trouvé"
TEXT_TOO_LONG = "Texte trop long"


@dataclass(frozen=True)
class RemoteSource:
    session_token: str


@dataclass(frozen=True)
class LocalSource:
    pass


Source = Union[RemoteSource, LocalSource]


class SyncError(Exception):
    """An operation failed; the message is meant for the user."""


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _check_length(text: str) -> None:
    if len(text) > settings.todo_text_max_length:
        raise SyncError(TEXT_TOO_LONG)


class TodoSync:
    """
    Client-side todo list.

    Args:
        http: AsyncClient whose base_url points at the server
        storage: on-device storage used in local mode
        on_error: called with the message of every failed operation
        api_prefix: mount point of the API on the server
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        storage: LocalStorage,
        on_error: Optional[Callable[[str], None]] = None,
        api_prefix: str = settings.API_PREFIX,
    ):
        self.http = http
        self.storage = storage
        self.on_error = on_error
        self.api_prefix = api_prefix.rstrip("/")
        self.source: Source = LocalSource()
        self.todos: list[dict] = []
        self.is_loading = False
        self.error: str | None = None

    # -------- session / source --------
    @property
    def is_remote(self) -> bool:
        return isinstance(self.source, RemoteSource)

    async def set_session(self, session_token: str | None) -> None:
        """Pick the source matching the session and reload if it changed."""
        source = RemoteSource(session_token) if session_token else LocalSource()
        if source == self.source:
            return
        self.source = source
        await self.refresh()

    async def login(self, email: str, password: str) -> bool:
        """Open a session on the server and switch to the remote list."""
        self.error = None
        try:
            resp = await self.http.post(
                self._url("/auth/login"), json={"email": email, "password": password}
            )
        except httpx.HTTPError as e:
            self._fail(self._network_message(e))
            return False
        token = resp.cookies.get(settings.session_cookie_name)
        if not resp.is_success or not token:
            self._fail(self._error_message(resp, LOGIN_FAILED))
            return False
        await self.set_session(token)
        return True

    async def logout(self) -> None:
        """Drop the session token and fall back to the on-device list."""
        if self.is_remote:
            try:
                await self.http.post(self._url("/auth/logout"))
            except httpx.HTTPError as e:
                # The server keeps no session state; discarding the token is enough
                logger.info("[sync] logout request failed: %s", e)
        self.http.cookies.clear()
        await self.set_session(None)

    async def reload(self, source: Source) -> list[dict]:
        """Fetch the full list from `source`."""
        if isinstance(source, RemoteSource):
            body = await self._request(source, "GET", "/todos", LOAD_FAILED)
            data = body.get("data")
            return data if isinstance(data, list) else []
        return self.storage.load_todos()

    # -------- operations --------
    async def refresh(self) -> None:
        self.error = None
        try:
            self.todos = await self.reload(self.source)
        except SyncError as e:
            self.todos = []
            self._fail(str(e))

    async def add(self, text: str) -> None:
        text = (text or "").strip()
        if not text or self.is_loading:
            return
        self.is_loading = True
        self.error = None
        try:
            _check_length(text)
            if isinstance(self.source, RemoteSource):
                body = await self._request(
                    self.source, "POST", "/todos", ADD_FAILED, json={"text": text}
                )
                created = body.get("data")
                if not isinstance(created, dict):
                    raise SyncError(ADD_FAILED)
                self.todos = [created, *self.todos]
            else:
                now = _now_iso()
                created = {
                    "id": uuid.uuid4().hex,
                    "text": text,
                    "completed": False,
                    "createdAt": now,
                    "updatedAt": now,
                    "userId": LOCAL_USER_ID,
                }
                self._commit_local([created, *self.todos])
        except SyncError as e:
            self._fail(str(e))
        finally:
            self.is_loading = False

    async def update(self, todo_id: str, changes: dict) -> None:
        self.error = None
        changes = {k: v for k, v in changes.items() if k in ("text", "completed") and v is not None}
        try:
            if isinstance(self.source, RemoteSource):
                body = await self._request(
                    self.source, "PATCH", f"/todos/{todo_id}", UPDATE_FAILED, json=changes
                )
                updated = body.get("data")
                if not isinstance(updated, dict):
                    raise SyncError(UPDATE_FAILED)
                self.todos = [updated if t["id"] == todo_id else t for t in self.todos]
            else:
                if "text" in changes:
                    changes["text"] = str(changes["text"]).strip()
                    if not changes["text"]:
                        raise SyncError(EMPTY_TEXT)
                    _check_length(changes["text"])
                if not any(t["id"] == todo_id for t in self.todos):
                    raise SyncError(NOT_FOUND)
                self._commit_local([
                    {**t, **changes, "updatedAt": _now_iso()} if t["id"] == todo_id else t
                    for t in self.todos
                ])
        except SyncError as e:
            self._fail(str(e))

    async def toggle(self, todo_id: str, completed: bool) -> None:
        await self.update(todo_id, {"completed": completed})

    async def delete(self, todo_id: str) -> None:
        self.error = None
        try:
            if isinstance(self.source, RemoteSource):
                await self._request(self.source, "DELETE", f"/todos/{todo_id}", DELETE_FAILED)
                self.todos = [t for t in self.todos if t["id"] != todo_id]
            else:
                self._commit_local([t for t in self.todos if t["id"] != todo_id])
        except SyncError as e:
            self._fail(str(e))

    # -------- helpers --------
    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    async def _request(self, source: RemoteSource, method: str, path: str,
                       failure_message: str, **kwargs) -> dict:
        """Send an authenticated request and return the decoded JSON object."""
        headers = {"Authorization": f"Bearer {source.session_token}"}
        try:
            resp = await self.http.request(method, self._url(path), headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise SyncError(self._network_message(e))
        if not resp.is_success:
            raise SyncError(self._error_message(resp, failure_message))
        try:
            body = resp.json()
        except ValueError:
            logger.warning("[sync] non-JSON reply to %s %s", method, path)
            raise SyncError(failure_message)
        if not isinstance(body, dict):
            raise SyncError(failure_message)
        return body

    def _commit_local(self, todos: list[dict]) -> None:
        try:
            self.storage.save_todos(todos)
        except OSError as e:
            logger.warning("[sync] local save failed: %s", e)
            raise SyncError("Erreur lors de la sauvegarde locale")
        self.todos = todos

    @staticmethod
    def _error_message(resp: httpx.Response, fallback: str) -> str:
        try:
            body = resp.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return fallback

    @staticmethod
    def _network_message(exc: Exception) -> str:
        return str(exc) or "Erreur inconnue"

    def _fail(self, message: str) -> None:
        self.error = message
        logger.warning("[sync] %s", message)
        if self.on_error:
            self.on_error(message)
