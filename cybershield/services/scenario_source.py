"""Scenario generation through the AI service, with static fallbacks.

``ScenarioSource.generate_scenario`` raises ``ScenarioSourceError`` for
transport/HTTP failures and ``ScenarioParseError`` when the model's reply is
not a usable scenario. Callers that must not fail (the training runner)
substitute ``fallback_scenario`` instead.
"""
import json
import logging
import re
import uuid
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from cybershield.core.errors import ScenarioParseError, ScenarioSourceError
from cybershield.schemas.scenario import (
    AttackerPersona,
    EmailContent,
    IncidentAction,
    IncidentEvent,
    IncidentResponseScenario,
    PasswordSecurityScenario,
    PhishingScenario,
    Scenario,
    SocialEngineeringScenario,
    scenario_adapter,
)
from cybershield.schemas.training import Difficulty, ModuleType
from cybershield.services.ai_client import AIClient
from cybershield.services.prompts import build_scenario_prompt

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"```(?:json)?\s*\n?")


def new_scenario_id() -> str:
    return f"scenario-{uuid.uuid4().hex[:12]}"


def parse_scenario_payload(raw: str, module_type: ModuleType, scenario_id: str | None = None) -> Scenario:
    """Turn the model's text reply into a typed scenario of ``module_type``."""
    clean = FENCE_RE.sub("", raw).strip()
    try:
        data = json.loads(clean)
    except json.JSONDecodeError as e:
        logger.error(f"[Scenario] reply is not JSON: {e}\nRaw: {raw[:200]}")
        raise ScenarioParseError("Failed to generate valid scenario") from e
    if not isinstance(data, dict):
        logger.error(f"[Scenario] reply is not a JSON object\nRaw: {raw[:200]}")
        raise ScenarioParseError("Failed to generate valid scenario")

    data["kind"] = module_type.value
    data["id"] = scenario_id or new_scenario_id()
    try:
        return scenario_adapter.validate_python(data)
    except ValidationError as e:
        logger.error(f"[Scenario] reply does not match {module_type.value} shape: {e.error_count()} errors")
        raise ScenarioParseError("Failed to generate valid scenario") from e


class ScenarioSource:
    def __init__(self, client: AIClient, max_tokens: int = 2048) -> None:
        self._client = client
        self._max_tokens = max_tokens

    async def generate_scenario(
        self,
        module_type: ModuleType,
        difficulty: Difficulty = Difficulty.BEGINNER,
        exclude_ids: list[str] | None = None,
    ) -> Scenario:
        prompt = build_scenario_prompt(module_type, difficulty, exclude_ids)
        logger.info(f"[Scenario] generate type={module_type.value} difficulty={difficulty.value}")
        try:
            reply = await self._client.create_message(
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
            )
        except (httpx.HTTPError, ValueError) as e:
            raise ScenarioSourceError(f"Scenario generation failed: {e}") from e
        return parse_scenario_payload(reply.text, module_type)


# ---------- static fallbacks ----------

def _phishing_fallback() -> PhishingScenario:
    return PhishingScenario(
        id=new_scenario_id(),
        type="email",
        is_phishing=True,
        difficulty=Difficulty.BEGINNER,
        content=EmailContent(
            from_="IT Security Team",
            from_email="security@company-support.net",
            to="you@company.com",
            subject="URGENT: Your Password Expires in 24 Hours",
            body=(
                "Dear Employee,\n\n"
                "Your network password will expire in 24 hours. To avoid losing access to your account, "
                "please click the link below to verify your credentials immediately:\n\n"
                "https://company-secure-login.net/verify\n\n"
                "This is an automated message. Please do not reply.\n\n"
                "Best regards,\nIT Security Department"
            ),
            timestamp=datetime.now(timezone.utc).isoformat(),
        ),
        red_flags=[
            'Urgency tactics ("URGENT", "24 hours")',
            "Suspicious sender domain (company-support.net instead of actual company domain)",
            'Generic greeting ("Dear Employee")',
            "Suspicious link domain (company-secure-login.net)",
            "Pressure to act immediately",
        ],
        explanation=(
            "This is a classic phishing attempt using urgency and impersonation. The sender domain doesn't "
            "match the real company, and the link leads to a suspicious external site. Legitimate IT "
            "departments typically don't ask you to verify credentials via email links."
        ),
    )


def _social_engineering_fallback() -> SocialEngineeringScenario:
    return SocialEngineeringScenario(
        id=new_scenario_id(),
        attack_type="vishing",
        setting="A phone call to your desk line late on a Friday afternoon",
        attacker_persona=AttackerPersona(
            name="Mark Davies",
            role="IT Helpdesk Technician",
            company="Your company (claimed)",
            backstory="Claims a mailbox migration failed and your account will be locked over the weekend",
        ),
        objective="Obtain your password and a one-time MFA code",
        opening_message=(
            "Hi, this is Mark from the helpdesk. Your mailbox migration just failed and I need to fix it "
            "before 5pm or you'll be locked out all weekend. Can you read me the code we just texted you?"
        ),
        red_flags=[
            "Unsolicited call asking for credentials",
            "Request for an MFA code",
            "Artificial deadline",
            "Caller identity cannot be verified",
        ],
        correct_response="Decline, hang up, and call the helpdesk back on the number from the intranet.",
        explanation="Real helpdesk staff never need your password or MFA codes.",
    )


def _incident_response_fallback() -> IncidentResponseScenario:
    return IncidentResponseScenario(
        id=new_scenario_id(),
        incident_type="ransomware",
        title="Files encrypted on a shared drive",
        initial_alert="Several users report that documents on the finance share now end in .locked",
        severity="critical",
        timeline=[
            IncidentEvent(time="T+0", event="EDR alert: mass file rename on FIN-FS01"),
            IncidentEvent(time="T+5", event="Ransom note README_RESTORE.txt appears in every folder"),
        ],
        available_actions=[
            IncidentAction(id="isolate", label="Isolate the file server", is_correct=True,
                           consequences="Encryption stops spreading", points=30),
            IncidentAction(id="escalate", label="Escalate to the incident response team", is_correct=True,
                           consequences="Responders take over coordination", points=20),
            IncidentAction(id="pay", label="Pay the ransom", is_correct=False,
                           consequences="Funds criminals with no guarantee of recovery", points=-20),
        ],
        correct_sequence=["isolate", "escalate"],
        red_flags=["Mass file renames", "Ransom note files", "Unknown process writing to the share"],
        explanation="Contain first by isolating the host, then escalate and preserve evidence.",
    )


def _password_security_fallback() -> PasswordSecurityScenario:
    return PasswordSecurityScenario(
        id=new_scenario_id(),
        password="Summer2024!",
        context="New password for your corporate VPN account",
        is_weak=True,
        red_flags=["Season and year pattern", "Common dictionary word", "Easily guessed by spraying attacks"],
        explanation="Season+year passwords are among the first guesses in password-spraying attacks.",
    )


FALLBACKS = {
    ModuleType.PHISHING: _phishing_fallback,
    ModuleType.SOCIAL_ENGINEERING: _social_engineering_fallback,
    ModuleType.INCIDENT_RESPONSE: _incident_response_fallback,
    ModuleType.PASSWORD_SECURITY: _password_security_fallback,
}


def fallback_scenario(module_type: ModuleType) -> Scenario:
    """A fresh copy of the static scenario for ``module_type``."""
    return FALLBACKS.get(module_type, _phishing_fallback)()
