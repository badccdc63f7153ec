"""Supabase adapter - PostgREST client for the job_applications table."""

import logging
import time

import requests

from applytrack.config import Config, Session, load_config
from applytrack.core.applications import ApplicationRecord
from applytrack.ports.application_store import Scope, StoreError

logger = logging.getLogger(__name__)

TABLE = "job_applications"
NOTIFICATIONS_TABLE = "notifications"


class AuthenticationError(StoreError):
    """Raised when authentication fails. A StoreError, since no store call can proceed."""


class SupabaseStore:
    """
    Supabase REST adapter.

    Implements ApplicationStore protocol. Handles the session token, token
    refresh and API calls. No business logic - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: Session | None = None,
        timeout: int = 30,
    ):
        self.config = config or load_config()
        self.session = session or Session.load()
        self.timeout = timeout
        self._http = requests.Session()

    @property
    def scope(self) -> Scope:
        """Scope of the signed-in user."""
        return Scope(user_id=self.session.user_id, is_admin=self.session.is_admin)

    def _ensure_valid_token(self) -> None:
        """Refresh token if expired or expiring soon."""
        if not self.config.supabase_url or not self.config.supabase_anon_key:
            raise AuthenticationError(
                "Missing Supabase settings. Add SUPABASE_URL and SUPABASE_ANON_KEY to applytrack.conf"
            )
        if not self.session.access_token:
            raise AuthenticationError("Not signed in. Run 'applytrack auth' first.")

        if self.session.expires_soon():
            self._refresh_token()

    def _refresh_token(self) -> None:
        """Refresh the access token."""
        if not self.session.refresh_token:
            raise AuthenticationError("No refresh token. Run 'applytrack auth' first.")

        try:
            resp = self._http.post(
                f"{self.config.supabase_url}/auth/v1/token",
                params={"grant_type": "refresh_token"},
                headers={"apikey": self.config.supabase_anon_key},
                json={"refresh_token": self.session.refresh_token},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Token refresh failed: {e}")
            raise AuthenticationError(f"Token refresh failed: {e}") from e

        if resp.status_code != 200:
            raise AuthenticationError(f"Token refresh failed: {resp.text}")

        _apply_token_response(self.session, resp.json())
        self.session.save()

    def _headers(self) -> dict:
        return {
            "apikey": self.config.supabase_anon_key,
            "Authorization": f"Bearer {self.session.access_token}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _request(
        self,
        method: str,
        table: str,
        params: dict | None = None,
        payload: dict | list | None = None,
    ) -> list:
        """Make authenticated REST request. Every failure raises StoreError (AuthenticationError for token problems)."""
        self._ensure_valid_token()
        try:
            resp = self._http.request(
                method,
                f"{self.config.supabase_url}/rest/v1/{table}",
                params=params,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise StoreError(f"{method} {table} failed: {e}") from e

        if not resp.content:
            return []
        return resp.json()

    def _single(self, rows: list, action: str) -> ApplicationRecord:
        if not rows:
            raise StoreError(f"{action} returned no record")
        return ApplicationRecord.from_api(rows[0])

    def list(self, scope: Scope | None = None) -> list[ApplicationRecord]:
        """Fetch records visible to the scope, newest first."""
        scope = scope or self.scope
        params = {"select": "*", "order": "applied_date.desc"}
        if not scope.is_admin:
            params["user_id"] = f"eq.{scope.user_id}"
        rows = self._request("GET", TABLE, params=params)
        return [ApplicationRecord.from_api(row) for row in rows]

    def create(self, fields: dict) -> ApplicationRecord:
        """Insert a record owned by the signed-in user."""
        payload = {**fields, "user_id": fields.get("user_id") or self.session.user_id}
        record = self._single(self._request("POST", TABLE, payload=[payload]), "Insert")
        logger.info(f"Created application {record.id}: {record.company} - {record.role}")
        return record

    def update(self, record_id: str, fields: dict) -> ApplicationRecord:
        rows = self._request("PATCH", TABLE, params={"id": f"eq.{record_id}"}, payload=fields)
        record = self._single(rows, "Update")
        logger.info(f"Updated application {record_id}: {', '.join(sorted(fields))}")
        return record

    def delete(self, record_id: str) -> None:
        self._request("DELETE", TABLE, params={"id": f"eq.{record_id}"})
        logger.info(f"Deleted application {record_id}")

    def add_notification(self, user_id: str, title: str, message: str, kind: str = "info") -> None:
        """Insert an in-app notification row."""
        self._request(
            "POST",
            NOTIFICATIONS_TABLE,
            payload=[{"user_id": user_id, "title": title, "message": message, "type": kind}],
        )


def _apply_token_response(session: Session, data: dict) -> None:
    session.access_token = data["access_token"]
    if data.get("refresh_token"):
        session.refresh_token = data["refresh_token"]
    session.expires_at = int(time.time()) + data.get("expires_in", 3600)
    user = data.get("user") or {}
    if user.get("id"):
        session.user_id = user["id"]
    if user.get("email"):
        session.email = user["email"]


def fetch_role(config: Config, session: Session, http: requests.Session | None = None) -> str:
    """Resolve the user's app role via the get_user_role RPC."""
    http = http or requests.Session()
    try:
        resp = http.post(
            f"{config.supabase_url}/rest/v1/rpc/get_user_role",
            headers={
                "apikey": config.supabase_anon_key,
                "Authorization": f"Bearer {session.access_token}",
                "Content-Type": "application/json",
            },
            json={"user_id": session.user_id},
            timeout=30,
        )
    except requests.RequestException as e:
        logger.warning(f"Could not resolve role, assuming applicant: {e}")
        return "applicant"
    if resp.status_code != 200:
        logger.warning(f"Could not resolve role, assuming applicant: {resp.text}")
        return "applicant"
    return resp.json() or "applicant"


def authenticate(email: str, password: str, config: Config | None = None) -> Session:
    """Sign in with email and password and save the session."""
    config = config or load_config()

    if not config.supabase_url or not config.supabase_anon_key:
        raise AuthenticationError(
            "Missing Supabase settings. Add SUPABASE_URL and SUPABASE_ANON_KEY to applytrack.conf"
        )

    http = requests.Session()
    try:
        resp = http.post(
            f"{config.supabase_url}/auth/v1/token",
            params={"grant_type": "password"},
            headers={"apikey": config.supabase_anon_key},
            json={"email": email, "password": password},
            timeout=30,
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Sign-in failed: {e}") from e

    if resp.status_code != 200:
        raise AuthenticationError(f"Sign-in failed: {resp.text}")

    session = Session(email=email)
    _apply_token_response(session, resp.json())
    session.role = fetch_role(config, session, http)
    session.save()

    logger.info(f"Signed in as {session.email} ({session.role})")
    return session
