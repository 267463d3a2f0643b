"""Pydantic schemas for generated training scenarios.

Scenarios form a closed union tagged by ``kind`` (one arm per module type).
Every arm exposes ``expected_answer``: the yes/no ground truth a trainee's
"is this an attack?" judgement is compared against.
"""
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from cybershield.schemas.common import CamelModel
from cybershield.schemas.training import Difficulty, ModuleType, SessionState


class EmailContent(CamelModel):
    from_: str = Field(alias="from")
    from_email: str
    to: str = "you@company.com"
    subject: str
    body: str
    attachments: list[str] = Field(default_factory=list)
    timestamp: str | None = None


class SMSContent(CamelModel):
    sender: str
    message: str
    timestamp: str | None = None
    contains_link: bool | None = None


class URLContent(CamelModel):
    url: str
    display_url: str | None = None
    context: str


class ScenarioBase(CamelModel):
    id: str = ""
    difficulty: Difficulty = Difficulty.BEGINNER
    red_flags: list[str] = Field(default_factory=list)
    explanation: str = ""


class PhishingScenario(ScenarioBase):
    kind: Literal["phishing"] = "phishing"
    type: Literal["email", "sms", "url"]
    content: Union[EmailContent, SMSContent, URLContent]
    is_phishing: bool

    @property
    def expected_answer(self) -> bool:
        return self.is_phishing


class AttackerPersona(CamelModel):
    name: str
    role: str
    company: str | None = None
    backstory: str = ""


class SocialEngineeringScenario(ScenarioBase):
    kind: Literal["social-engineering"] = "social-engineering"
    attack_type: str
    setting: str
    attacker_persona: AttackerPersona
    objective: str
    opening_message: str
    correct_response: str = ""
    is_attack: bool = True

    @property
    def expected_answer(self) -> bool:
        return self.is_attack


class IncidentEvent(CamelModel):
    time: str
    event: str


class IncidentAction(CamelModel):
    id: str
    label: str
    description: str = ""
    is_correct: bool
    consequences: str = ""
    points: int = 0


class IncidentArtifacts(CamelModel):
    logs: list[str] = Field(default_factory=list)
    alerts: list[str] = Field(default_factory=list)
    reports: list[str] = Field(default_factory=list)


class IncidentResponseScenario(ScenarioBase):
    kind: Literal["incident-response"] = "incident-response"
    incident_type: str
    title: str
    initial_alert: str
    severity: Literal["critical", "high", "medium", "low", "info"] = "medium"
    timeline: list[IncidentEvent] = Field(default_factory=list)
    available_actions: list[IncidentAction] = Field(default_factory=list)
    artifacts: IncidentArtifacts = Field(default_factory=IncidentArtifacts)
    correct_sequence: list[str] = Field(default_factory=list)
    is_incident: bool = True

    @property
    def expected_answer(self) -> bool:
        return self.is_incident


class PasswordSecurityScenario(ScenarioBase):
    kind: Literal["password-security"] = "password-security"
    password: str
    context: str
    is_weak: bool

    @property
    def expected_answer(self) -> bool:
        return self.is_weak


Scenario = Annotated[
    Union[PhishingScenario, SocialEngineeringScenario, IncidentResponseScenario, PasswordSecurityScenario],
    Field(discriminator="kind"),
]

scenario_adapter: TypeAdapter[Scenario] = TypeAdapter(Scenario)


class ScenarioRequestSchema(CamelModel):
    module_type: ModuleType
    difficulty: Difficulty = Difficulty.BEGINNER
    previous_scenario_ids: list[str] = Field(default_factory=list)


class ScenarioOutSchema(CamelModel):
    success: bool = True
    scenario: Scenario


class LoadedScenarioSchema(CamelModel):
    scenario: Scenario
    scenario_index: int
    fallback: bool


class AnswerResultSchema(CamelModel):
    correct: bool
    expected: bool
    score: int
    red_flags: list[str]
    explanation: str
    url_warnings: list[str] = Field(default_factory=list)


class SessionOutSchema(SessionState):
    loading: bool = False
    current_scenario: Scenario | None = None
