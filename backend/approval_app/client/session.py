"""Client session context: tokens, the signed-in profile and change events."""
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel

from approval_app.client.errors import RemoteError
from approval_app.schemas.profile import ProfileResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    PROFILE_LOADED = "PROFILE_LOADED"


class Session(BaseModel):
    profile_id: str
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 1800


Listener = Callable[[AuthEvent, Session | None], None]


class SessionProvider:
    """Holds the signed-in session and notifies listeners when it changes.

    One instance lives for the lifetime of the application and is handed to
    every component that talks to the API.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._session: Session | None = None
        self._listeners: list[Listener] = []
        self.profile: ProfileResponse | None = None

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    @property
    def is_admin(self) -> bool:
        return bool(self.profile and self.profile.is_admin)

    async def get_current_session(self) -> Session | None:
        return self._session

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to auth events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent) -> None:
        logger.debug("Auth event %s", event.value)
        for listener in list(self._listeners):
            listener(event, self._session)

    # ── Transport ──

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Issue an API call with the bearer token and unwrap the envelope."""
        headers = kwargs.pop("headers", {})
        if self._session:
            headers["Authorization"] = f"Bearer {self._session.access_token}"
        resp = await self._client.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)
        if resp.is_error:
            error = RemoteError.from_response(resp)
            logger.warning("%s %s failed: %s %s", method, path, error.status_code, error.detail)
            raise error
        return resp.json()

    # ── Identity operations ──

    async def sign_in(self, email: str, password: str, recaptcha_token: str) -> Session:
        body = await self.request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "recaptcha_token": recaptcha_token},
        )
        session = Session.model_validate(body["data"])
        self._session = session
        try:
            profile = await self._get_profile(session.profile_id)
        except RemoteError:
            # no half-signed-in state: a session always comes with its profile
            self._session = None
            raise
        self.profile = profile
        self._emit(AuthEvent.SIGNED_IN)
        self._emit(AuthEvent.PROFILE_LOADED)
        return session

    async def refresh(self) -> Session:
        if not self._session:
            raise RemoteError(401, "Not signed in")
        body = await self.request("POST", "/auth/refresh", json={"refresh_token": self._session.refresh_token})
        self._session = Session.model_validate(body["data"])
        self._emit(AuthEvent.TOKEN_REFRESHED)
        return self._session

    async def sign_out(self) -> None:
        """Revoke the session remotely, then clear local state and notify.

        A failed logout call (typically an expired access token) is logged;
        local state is cleared regardless.
        """
        try:
            if self._session:
                await self.request("POST", "/auth/logout")
        except RemoteError as e:
            logger.warning("Remote logout failed, signing out locally: %s", e.detail)
        finally:
            self._session = None
            self.profile = None
            self._emit(AuthEvent.SIGNED_OUT)

    async def _get_profile(self, profile_id: str) -> ProfileResponse:
        body = await self.request("GET", f"/profiles/{profile_id}")
        return ProfileResponse.model_validate(body["data"])

    async def fetch_profile(self, profile_id: str) -> ProfileResponse:
        profile = await self._get_profile(profile_id)
        if self._session and str(profile.id) == self._session.profile_id:
            self.profile = profile
            self._emit(AuthEvent.PROFILE_LOADED)
        return profile
