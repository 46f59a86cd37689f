# app/core/mailer.py
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from app.core.errors import SendFailed
from app.core.settings import Settings, settings as default_settings

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class EmailJSConfig:
    service_id: str
    template_id: str
    public_key: str
    private_key: Optional[str] = None
    base_url: str = "https://api.emailjs.com"
    timeout: float = 10.0


class EmailJSMailer:
    """Sends the contact payload through the EmailJS REST API."""

    def __init__(self, config: EmailJSConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def _body(self, params: Dict[str, str]) -> Dict[str, object]:
        body: Dict[str, object] = {
            "service_id": self.config.service_id,
            "template_id": self.config.template_id,
            "user_id": self.config.public_key,
            "template_params": params,
        }
        if self.config.private_key:
            body["accessToken"] = self.config.private_key
        return body

    async def send(self, params: Dict[str, str]) -> None:
        url = self.config.base_url.rstrip("/") + "/api/v1.0/email/send"
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=self._body(params))
        except httpx.HTTPError as exc:
            raise SendFailed(f"request failed: {exc.__class__.__name__}") from exc

        if not resp.is_success:
            # EmailJS answers errors with a plain-text reason
            raise SendFailed(f"HTTP {resp.status_code}: {resp.text[:200]}")
        log.info("[mailer] contact message sent via EmailJS")


class LogMailer:
    """Dev mailer: logs instead of sending."""

    async def send(self, params: Dict[str, str]) -> None:
        log.info(f"[mailer] (fake) contact message from {params.get('email')}")


def get_mailer(cfg: Settings = default_settings):
    if cfg.mail_provider.lower() == "emailjs":
        missing = [
            name
            for name, value in (
                ("EMAILJS_SERVICE_ID", cfg.emailjs_service_id),
                ("EMAILJS_TEMPLATE_ID", cfg.emailjs_template_id),
                ("EMAILJS_PUBLIC_KEY", cfg.emailjs_public_key),
            )
            if not value
        ]
        if missing:
            raise RuntimeError(f"{', '.join(missing)} not set for MAIL_PROVIDER=emailjs.")
        return EmailJSMailer(
            EmailJSConfig(
                service_id=cfg.emailjs_service_id,
                template_id=cfg.emailjs_template_id,
                public_key=cfg.emailjs_public_key,
                private_key=cfg.emailjs_private_key,
                base_url=cfg.emailjs_base_url,
                timeout=cfg.http_timeout_seconds,
            )
        )
    return LogMailer()


__all__ = ["EmailJSConfig", "EmailJSMailer", "LogMailer", "get_mailer"]
