import httpx
import pytest

from app.core.settings import Settings
from app.core.verifiers import (
    FakeVerifier,
    HunterEmailVerifier,
    NumverifyPhoneVerifier,
    RemoteVerifier,
    VerificationOutcome,
    VerifierConfig,
    get_email_verifier,
    get_phone_verifier,
)


def _transport(status=200, json_body=None, text=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if json_body is not None:
            return httpx.Response(status, json=json_body)
        return httpx.Response(status, text=text or "")
    return httpx.MockTransport(handler)


def _hunter(**kw):
    return HunterEmailVerifier(VerifierConfig("hunter-key", "https://hunter.test/v2"), transport=_transport(**kw))


def _numverify(**kw):
    return NumverifyPhoneVerifier(VerifierConfig("nv-key", "https://numverify.test/api"), transport=_transport(**kw))


@pytest.mark.asyncio
async def test_hunter_deliverable_is_valid_and_sends_key():
    seen = []
    verifier = _hunter(json_body={"data": {"result": "deliverable"}}, seen=seen)
    assert await verifier.verify("ada@example.com") is VerificationOutcome.VALID

    req = seen[0]
    assert req.url.path == "/v2/email-verifier"
    assert req.url.params["email"] == "ada@example.com"
    assert req.url.params["api_key"] == "hunter-key"


@pytest.mark.asyncio
async def test_hunter_undeliverable_is_invalid():
    verifier = _hunter(json_body={"data": {"result": "undeliverable"}})
    assert await verifier.verify("nobody@example.com") is VerificationOutcome.INVALID


@pytest.mark.asyncio
async def test_hunter_server_error_is_unavailable():
    verifier = _hunter(status=503, json_body={"errors": []})
    assert await verifier.verify("ada@example.com") is VerificationOutcome.UNAVAILABLE


@pytest.mark.asyncio
async def test_hunter_malformed_payload_is_unavailable():
    assert await _hunter(json_body={"unexpected": True}).verify("a@b.com") is VerificationOutcome.UNAVAILABLE
    assert await _hunter(text="<html>oops</html>").verify("a@b.com") is VerificationOutcome.UNAVAILABLE


@pytest.mark.asyncio
async def test_network_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    verifier = HunterEmailVerifier(
        VerifierConfig("k", "https://hunter.test/v2"), transport=httpx.MockTransport(handler)
    )
    assert await verifier.verify("ada@example.com") is VerificationOutcome.UNAVAILABLE


@pytest.mark.asyncio
async def test_numverify_valid_and_invalid():
    seen = []
    assert await _numverify(json_body={"valid": True}, seen=seen).verify("15551234567") is VerificationOutcome.VALID
    assert seen[0].url.params["number"] == "15551234567"
    assert seen[0].url.params["access_key"] == "nv-key"

    assert await _numverify(json_body={"valid": False}).verify("123") is VerificationOutcome.INVALID


@pytest.mark.asyncio
async def test_numverify_error_body_is_unavailable():
    body = {"success": False, "error": {"code": 104, "info": "monthly usage limit reached"}}
    assert await _numverify(json_body=body).verify("15551234567") is VerificationOutcome.UNAVAILABLE
    assert await _numverify(json_body={"number": "1"}).verify("1") is VerificationOutcome.UNAVAILABLE


@pytest.mark.asyncio
async def test_fake_verifiers_from_factories():
    cfg = Settings()
    email = get_email_verifier(cfg)
    phone = get_phone_verifier(cfg)
    assert isinstance(email, FakeVerifier)
    assert await email.verify("ada@example.com") is VerificationOutcome.VALID
    assert await email.verify("not-an-email") is VerificationOutcome.INVALID
    assert await phone.verify("+1 555 123 4567") is VerificationOutcome.VALID
    assert await phone.verify("12") is VerificationOutcome.INVALID


def test_real_provider_without_key_refuses_to_start():
    cfg = Settings(EMAIL_VERIFIER_PROVIDER="hunter", HUNTER_API_KEY=None)
    with pytest.raises(RuntimeError):
        get_email_verifier(cfg)

    cfg = Settings(PHONE_VERIFIER_PROVIDER="numverify", NUMVERIFY_ACCESS_KEY=None)
    with pytest.raises(RuntimeError):
        get_phone_verifier(cfg)


def test_real_provider_gets_explicit_config():
    cfg = Settings(
        EMAIL_VERIFIER_PROVIDER="hunter",
        HUNTER_API_KEY="abc",
        HTTP_TIMEOUT_SECONDS=3,
    )
    verifier = get_email_verifier(cfg)
    assert isinstance(verifier, HunterEmailVerifier)
    assert verifier.config == VerifierConfig("abc", "https://api.hunter.io/v2", 3.0)


def test_remote_verifier_base_cannot_be_built_directly():
    with pytest.raises(TypeError):
        RemoteVerifier(VerifierConfig("k", "https://example.test"))
