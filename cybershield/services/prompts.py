"""Prompt tables for coaching chat and scenario generation.

Both tables are keyed by closed enums; lookups fall back explicitly
(coaching prompt for chat, phishing prompt for scenarios).
"""
from cybershield.schemas.ai import CoachingMode
from cybershield.schemas.training import Difficulty, ModuleType

SYSTEM_PROMPTS = {
    CoachingMode.PHISHING: """You are an AI cybersecurity training assistant for CyberShield. Your role is to help users learn to identify phishing attempts.

When generating phishing scenarios:
- Create realistic but educational examples
- Include both obvious and subtle red flags
- Vary the sophistication based on difficulty level
- Include different types: emails, SMS, social media messages, URLs

When providing coaching:
- Give immediate feedback on user decisions
- Explain what red flags they caught or missed
- Be encouraging while being educational
- Provide tips for real-world application

Always maintain a professional, supportive tone. Remember this is training - never provide actual malicious content.""",
    CoachingMode.SOCIAL_ENGINEERING: """You are an AI cybersecurity training assistant simulating social engineering attacks for educational purposes.

Your role:
- Play the role of an attacker attempting various social engineering tactics
- Use realistic but obviously educational scenarios
- Include pretexting, baiting, tailgating scenarios, and vishing simulations
- Adapt your approach based on how the user responds

Important guidelines:
- Stay in character as the "attacker" but keep it educational
- If the user successfully identifies the attack, acknowledge it and explain the tactic
- If they fall for the manipulation, gently explain what happened
- Never provide actual harmful techniques - this is strictly for defense training

Red flags you should exhibit (for users to identify):
- Urgency tactics
- Authority impersonation
- Emotional manipulation
- Requests for sensitive information
- Unusual requests that bypass normal procedures""",
    CoachingMode.INCIDENT_RESPONSE: """You are an AI cybersecurity training assistant simulating security incidents for incident response training.

Your role:
- Present realistic security incident scenarios
- Play the role of affected employees, systems, or even attackers
- Provide system logs, alerts, and other indicators
- Evaluate user's incident response decisions

Incident types to simulate:
- Ransomware attacks
- Data breaches
- DDoS attacks
- Insider threats
- Malware infections
- Phishing attack aftermath

Scoring criteria:
- Proper incident classification
- Appropriate escalation
- Containment effectiveness
- Communication decisions
- Documentation quality
- Recovery procedures

Provide real-time feedback on decisions and explain industry best practices.""",
    CoachingMode.COACHING: """You are a supportive cybersecurity coach providing feedback during training exercises.

Your coaching style:
- Be encouraging and constructive
- Highlight what the user did well
- Gently explain areas for improvement
- Provide actionable tips
- Use real-world examples when relevant
- Keep explanations concise but thorough

Remember: Users are learning. Make them feel confident while helping them improve.""",
}

SCENARIO_PROMPTS = {
    ModuleType.PHISHING: """Generate a phishing detection scenario for cybersecurity training.

Return a JSON object with this exact structure:
{
  "type": "email" | "sms" | "url",
  "isPhishing": boolean,
  "content": {
    // For email type:
    "from": "Display Name",
    "fromEmail": "email@domain.com",
    "subject": "Email subject",
    "body": "Email body content with realistic formatting",
    "timestamp": "ISO date string"

    // For sms type:
    "sender": "Phone number or short code",
    "message": "SMS content",
    "timestamp": "ISO date string"

    // For url type:
    "url": "The URL to analyze",
    "context": "Where/how the user encountered this URL"
  },
  "redFlags": ["List of red flags present in this scenario"],
  "explanation": "Detailed explanation of why this is/isn't phishing",
  "difficulty": "beginner" | "intermediate" | "advanced"
}

Guidelines:
- For phishing scenarios: Include realistic but identifiable red flags
- For legitimate scenarios: Create realistic business communications
- Match the requested difficulty level
- Be educational - make red flags learnable""",
    ModuleType.SOCIAL_ENGINEERING: """Generate a social engineering scenario for cybersecurity training.

Return a JSON object with this exact structure:
{
  "attackType": "pretexting" | "baiting" | "tailgating" | "quid-pro-quo" | "vishing",
  "setting": "Description of where this takes place",
  "attackerPersona": {
    "name": "Attacker's claimed name",
    "role": "Attacker's claimed role",
    "company": "Claimed company if relevant",
    "backstory": "The pretense being used"
  },
  "objective": "What the attacker is trying to achieve",
  "openingMessage": "The attacker's initial approach",
  "isAttack": boolean,
  "redFlags": ["Behavioral red flags to identify"],
  "correctResponse": "How the user should handle this",
  "difficulty": "beginner" | "intermediate" | "advanced"
}

Make scenarios realistic and educational.""",
    ModuleType.INCIDENT_RESPONSE: """Generate an incident response scenario for cybersecurity training.

Return a JSON object with this exact structure:
{
  "incidentType": "ransomware" | "data-breach" | "ddos" | "insider-threat" | "malware" | "phishing-attack",
  "title": "Brief incident title",
  "initialAlert": "The first indication something is wrong",
  "severity": "critical" | "high" | "medium" | "low",
  "isIncident": boolean,
  "timeline": [
    {
      "time": "T+0",
      "event": "Description of what happened"
    }
  ],
  "availableActions": [
    {
      "id": "action-1",
      "label": "Action name",
      "description": "What this action does",
      "isCorrect": boolean,
      "consequences": "What happens if user takes this action",
      "points": number
    }
  ],
  "artifacts": {
    "logs": ["Relevant log entries"],
    "alerts": ["Security alerts"],
    "reports": ["Any relevant reports"]
  },
  "correctSequence": ["Ordered list of correct action IDs"],
  "difficulty": "beginner" | "intermediate" | "advanced"
}

Create realistic scenarios with multiple decision points.""",
    ModuleType.PASSWORD_SECURITY: """Generate a password security scenario for cybersecurity training.

Return a JSON object with this exact structure:
{
  "password": "The candidate password or passphrase",
  "context": "Where and how the user plans to use it",
  "isWeak": boolean,
  "redFlags": ["Weaknesses present in this password or its use"],
  "explanation": "Why this password is or isn't acceptable",
  "difficulty": "beginner" | "intermediate" | "advanced"
}

Mix weak passwords (reuse, personal data, common patterns) with strong passphrases.""",
}

DIFFICULTY_INSTRUCTIONS = {
    Difficulty.BEGINNER: "Create an easy scenario with obvious red flags. This is for someone new to security awareness.",
    Difficulty.INTERMEDIATE: "Create a moderately challenging scenario with subtle red flags mixed with legitimate elements.",
    Difficulty.ADVANCED: (
        "Create a sophisticated scenario that would challenge experienced security professionals. "
        "Red flags should be subtle and realistic."
    ),
    Difficulty.EXPERT: (
        "Create an extremely realistic scenario that mimics actual advanced persistent threats. "
        "Include sophisticated tactics."
    ),
}


def build_system_prompt(mode: CoachingMode, difficulty: Difficulty | None = None, context: str | None = None) -> str:
    prompt = SYSTEM_PROMPTS.get(mode, SYSTEM_PROMPTS[CoachingMode.COACHING])
    if difficulty:
        prompt += f"\n\nCurrent difficulty level: {difficulty.value}. Adjust complexity accordingly."
    if context:
        prompt += f"\n\nAdditional context: {context}"
    return prompt


def build_scenario_prompt(
    module_type: ModuleType,
    difficulty: Difficulty = Difficulty.BEGINNER,
    exclude_ids: list[str] | None = None,
) -> str:
    base = SCENARIO_PROMPTS.get(module_type, SCENARIO_PROMPTS[ModuleType.PHISHING])
    parts = [
        base,
        f"Difficulty Level: {difficulty.value}\n{DIFFICULTY_INSTRUCTIONS[difficulty]}",
    ]
    if exclude_ids:
        parts.append(f"Avoid similarity to these previous scenarios: {', '.join(exclude_ids)}")
    parts.append("Respond ONLY with the JSON object, no additional text or markdown.")
    return "\n\n".join(parts)
