# app/core/verifiers.py
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from app.core.errors import ServiceUnavailable
from app.core.settings import Settings, settings as default_settings

log = logging.getLogger("uvicorn.error")


class VerificationOutcome(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class VerifierConfig:
    api_key: str
    base_url: str
    timeout: float = 10.0


# -----------------------
# HTTP-backed verifiers
# -----------------------
class RemoteVerifier(ABC):
    """
    Wraps one third-party validation endpoint.
    Subclasses build the query and classify the JSON body; anything that goes
    wrong on the wire (transport error, non-2xx, malformed payload) becomes
    UNAVAILABLE instead of an exception.
    """

    service = "remote"
    path = ""

    def __init__(self, config: VerifierConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @abstractmethod
    def _params(self, value: str) -> Dict[str, str]:
        ...

    @abstractmethod
    def _classify(self, body: Any) -> bool:
        ...

    async def _fetch(self, value: str) -> Any:
        url = self.config.base_url.rstrip("/") + self.path
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                resp = await client.get(url, params=self._params(value))
        except httpx.HTTPError as exc:
            raise ServiceUnavailable(self.service, f"request failed: {exc.__class__.__name__}") from exc

        if not resp.is_success:
            raise ServiceUnavailable(self.service, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ServiceUnavailable(self.service, "response is not JSON") from exc

    async def verify(self, value: str) -> VerificationOutcome:
        try:
            body = await self._fetch(value)
            ok = self._classify(body)
        except ServiceUnavailable as exc:
            log.warning(f"[verify] {exc}")
            return VerificationOutcome.UNAVAILABLE
        return VerificationOutcome.VALID if ok else VerificationOutcome.INVALID


class HunterEmailVerifier(RemoteVerifier):
    service = "hunter"
    path = "/email-verifier"

    def _params(self, value: str) -> Dict[str, str]:
        return {"email": value, "api_key": self.config.api_key}

    def _classify(self, body: Any) -> bool:
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or "result" not in data:
            raise ServiceUnavailable(self.service, "malformed payload")
        return data["result"] == "deliverable"


class NumverifyPhoneVerifier(RemoteVerifier):
    service = "numverify"
    path = "/validate"

    def _params(self, value: str) -> Dict[str, str]:
        return {"access_key": self.config.api_key, "number": value}

    def _classify(self, body: Any) -> bool:
        if not isinstance(body, dict):
            raise ServiceUnavailable(self.service, "malformed payload")
        # apilayer reports quota/key problems as 200 + {"success": false, "error": {...}}
        if body.get("success") is False:
            info = (body.get("error") or {}).get("info", "unknown error")
            raise ServiceUnavailable(self.service, str(info))
        valid = body.get("valid")
        if not isinstance(valid, bool):
            raise ServiceUnavailable(self.service, "malformed payload")
        return valid


# -----------------------
# Offline verifiers (dev / tests)
# -----------------------
class FakeVerifier:
    def __init__(self, predicate: Callable[[str], bool]):
        self._predicate = predicate

    async def verify(self, value: str) -> VerificationOutcome:
        return VerificationOutcome.VALID if self._predicate(value) else VerificationOutcome.INVALID


def _fake_email(value: str) -> bool:
    local, _, domain = value.strip().partition("@")
    return bool(local) and "." in domain and not domain.startswith(".")


def _fake_phone(value: str) -> bool:
    digits = [c for c in value if c.isdigit()]
    return 7 <= len(digits) <= 15


# -----------------------
# Factories
# -----------------------
def get_email_verifier(cfg: Settings = default_settings):
    provider = cfg.email_verifier_provider.lower()
    if provider == "hunter":
        if not cfg.hunter_api_key:
            raise RuntimeError(
                "HUNTER_API_KEY is not set. Put it in your environment or .env file (do NOT hardcode it)."
            )
        return HunterEmailVerifier(
            VerifierConfig(cfg.hunter_api_key, cfg.hunter_base_url, cfg.http_timeout_seconds)
        )
    return FakeVerifier(_fake_email)


def get_phone_verifier(cfg: Settings = default_settings):
    provider = cfg.phone_verifier_provider.lower()
    if provider == "numverify":
        if not cfg.numverify_access_key:
            raise RuntimeError(
                "NUMVERIFY_ACCESS_KEY is not set. Put it in your environment or .env file (do NOT hardcode it)."
            )
        return NumverifyPhoneVerifier(
            VerifierConfig(cfg.numverify_access_key, cfg.numverify_base_url, cfg.http_timeout_seconds)
        )
    return FakeVerifier(_fake_phone)


__all__ = [
    "VerificationOutcome",
    "VerifierConfig",
    "HunterEmailVerifier",
    "NumverifyPhoneVerifier",
    "FakeVerifier",
    "get_email_verifier",
    "get_phone_verifier",
]
