# app/routers/health.py
from fastapi import APIRouter
from app.core.settings import settings

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/providers")
async def health_providers():
    email = settings.email_verifier_provider.lower()
    phone = settings.phone_verifier_provider.lower()
    mail = settings.mail_provider.lower()
    return {
        "ok": True,
        "email_verifier": {
            "provider": email,
            "configured": email != "hunter" or bool(settings.hunter_api_key),
        },
        "phone_verifier": {
            "provider": phone,
            "configured": phone != "numverify" or bool(settings.numverify_access_key),
        },
        "mailer": {
            "provider": mail,
            "configured": mail != "emailjs" or all(
                (settings.emailjs_service_id, settings.emailjs_template_id, settings.emailjs_public_key)
            ),
        },
        "debounce_ms": settings.validation_debounce_ms,
    }
