# app/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
import logging

from app.core.settings import settings
from app.routers.contact import router as contact_router, close_all_sessions
from app.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        f"[main] providers email={settings.email_verifier_provider} "
        f"phone={settings.phone_verifier_provider} mail={settings.mail_provider}"
    )
    yield
    # drop pending validations so no task outlives the loop
    close_all_sessions()


app = FastAPI(title=settings.api_title, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(contact_router)
app.include_router(health_router)

@app.get("/__routes")
async def __routes():
    return [
        {"methods": sorted(list(r.methods)), "path": r.path}
        for r in app.routes
        if isinstance(r, APIRoute)
    ]
