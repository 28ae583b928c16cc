"""reCAPTCHA v3 token verification for sign-in."""
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from approval_app.config import settings

logger = logging.getLogger(__name__)


class RecaptchaError(Exception):
    """The sign-in attempt did not pass bot verification."""

    def __init__(self, detail: str = "reCAPTCHA verification failed. Please try again."):
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class RecaptchaResult:
    success: bool
    score: float | None = None
    action: str | None = None
    error_codes: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RecaptchaResult":
        score = payload.get("score")
        return cls(
            success=bool(payload.get("success")),
            score=float(score) if score is not None else None,
            action=payload.get("action"),
            error_codes=tuple(payload.get("error-codes", ())),
        )


class RecaptchaVerifier:
    """Verifies client proof tokens against the siteverify endpoint.

    A token passes when the service reports success, the score is at least
    ``min_score`` and the reported action matches ``expected_action``.
    """

    def __init__(
        self,
        secret_key: str,
        verify_url: str = settings.RECAPTCHA_VERIFY_URL,
        min_score: float = settings.RECAPTCHA_MIN_SCORE,
        expected_action: str = settings.RECAPTCHA_ACTION,
        timeout: float = settings.RECAPTCHA_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.min_score = min_score
        self.expected_action = expected_action
        self.timeout = timeout
        self._transport = transport

    async def _post(self, token: str, remote_ip: str | None) -> dict[str, Any]:
        data = {"secret": self.secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(self.verify_url, data=data)
            resp.raise_for_status()
            return resp.json()

    async def verify(self, token: str, remote_ip: str | None = None) -> RecaptchaResult:
        if not token:
            raise RecaptchaError("reCAPTCHA token is missing.")

        try:
            payload = await self._post(token, remote_ip)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("reCAPTCHA verification request failed: %s", e)
            raise RecaptchaError() from e

        result = RecaptchaResult.from_payload(payload)
        if not result.success:
            logger.info("reCAPTCHA rejected token: %s", ", ".join(result.error_codes) or "no error codes")
            raise RecaptchaError()
        if result.score is not None and result.score < self.min_score:
            logger.info("reCAPTCHA score %.2f below threshold %.2f", result.score, self.min_score)
            raise RecaptchaError()
        if self.expected_action and result.action and result.action != self.expected_action:
            logger.info("reCAPTCHA action mismatch: %s != %s", result.action, self.expected_action)
            raise RecaptchaError()
        return result


def get_recaptcha_verifier() -> RecaptchaVerifier | None:
    """FastAPI dependency; None when verification is switched off."""
    if not settings.RECAPTCHA_ENABLED:
        return None
    return RecaptchaVerifier(secret_key=settings.RECAPTCHA_SECRET_KEY)
