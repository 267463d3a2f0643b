import json

import httpx
import pytest

from cybershield.core.config import Settings
from cybershield.core.errors import ScenarioParseError, ScenarioSourceError
from cybershield.schemas.scenario import (
    EmailContent,
    IncidentResponseScenario,
    PasswordSecurityScenario,
    PhishingScenario,
    SocialEngineeringScenario,
)
from cybershield.schemas.training import Difficulty, ModuleType
from cybershield.services.ai_client import AIClient
from cybershield.services.scenario_source import ScenarioSource, fallback_scenario, parse_scenario_payload

PHISHING_PAYLOAD = {
    "type": "email",
    "isPhishing": True,
    "difficulty": "beginner",
    "content": {
        "from": "PayPal Support",
        "fromEmail": "service@paypa1-billing.com",
        "subject": "Your account has been limited",
        "body": "Click here to restore access.",
    },
    "redFlags": ["Lookalike sender domain"],
    "explanation": "The sender domain imitates PayPal.",
}


def _reply(text: str) -> dict:
    return {"content": [{"type": "text", "text": text}], "usage": {"input_tokens": 10, "output_tokens": 20}}


def _source(handler, requests: list | None = None) -> ScenarioSource:
    def record(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    settings = Settings(anthropic_api_key="test-key", ai_base_url="https://ai.test")
    return ScenarioSource(AIClient(settings, transport=httpx.MockTransport(record)), max_tokens=2048)


def test_parse_strips_code_fences() -> None:
    raw = "```json\n" + json.dumps(PHISHING_PAYLOAD) + "\n```"
    scenario = parse_scenario_payload(raw, ModuleType.PHISHING)
    assert isinstance(scenario, PhishingScenario)
    assert isinstance(scenario.content, EmailContent)
    assert scenario.content.from_ == "PayPal Support"
    assert scenario.expected_answer is True
    assert scenario.id.startswith("scenario-")


def test_parse_uses_requested_module_type() -> None:
    raw = json.dumps({"password": "correct horse battery staple", "context": "Home Wi-Fi", "isWeak": False})
    scenario = parse_scenario_payload(raw, ModuleType.PASSWORD_SECURITY, scenario_id="s-1")
    assert isinstance(scenario, PasswordSecurityScenario)
    assert scenario.id == "s-1"
    assert scenario.expected_answer is False


@pytest.mark.parametrize("raw", ["not json at all", "[1, 2, 3]", json.dumps({"type": "email"})])
def test_parse_rejects_unusable_replies(raw: str) -> None:
    with pytest.raises(ScenarioParseError):
        parse_scenario_payload(raw, ModuleType.PHISHING)


@pytest.mark.asyncio
async def test_generate_scenario_sends_messages_request() -> None:
    requests: list[httpx.Request] = []
    source = _source(lambda request: httpx.Response(200, json=_reply(json.dumps(PHISHING_PAYLOAD))), requests)

    scenario = await source.generate_scenario(ModuleType.PHISHING, Difficulty.ADVANCED, ["scenario-old"])

    assert isinstance(scenario, PhishingScenario)
    request = requests[0]
    assert request.url.path == "/v1/messages"
    assert request.headers["x-api-key"] == "test-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(request.content)
    assert body["max_tokens"] == 2048
    prompt = body["messages"][0]["content"]
    assert "Difficulty Level: advanced" in prompt
    assert "scenario-old" in prompt


@pytest.mark.asyncio
async def test_generate_scenario_http_error() -> None:
    source = _source(lambda request: httpx.Response(500, json={"error": "overloaded"}))
    with pytest.raises(ScenarioSourceError) as exc_info:
        await source.generate_scenario(ModuleType.PHISHING)
    assert not isinstance(exc_info.value, ScenarioParseError)
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_generate_scenario_transport_error() -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ScenarioSourceError):
        await _source(fail).generate_scenario(ModuleType.SOCIAL_ENGINEERING)


@pytest.mark.asyncio
async def test_generate_scenario_bad_json_reply() -> None:
    source = _source(lambda request: httpx.Response(200, json=_reply("Sorry, I can't help with that.")))
    with pytest.raises(ScenarioParseError):
        await source.generate_scenario(ModuleType.PHISHING)


def test_fallbacks_cover_every_module_type() -> None:
    expected = {
        ModuleType.PHISHING: PhishingScenario,
        ModuleType.SOCIAL_ENGINEERING: SocialEngineeringScenario,
        ModuleType.INCIDENT_RESPONSE: IncidentResponseScenario,
        ModuleType.PASSWORD_SECURITY: PasswordSecurityScenario,
    }
    for module_type, cls in expected.items():
        scenario = fallback_scenario(module_type)
        assert isinstance(scenario, cls)
        assert scenario.kind == module_type.value
        assert scenario.red_flags
        assert scenario.expected_answer is True


def test_fallbacks_get_fresh_ids() -> None:
    assert fallback_scenario(ModuleType.PHISHING).id != fallback_scenario(ModuleType.PHISHING).id
