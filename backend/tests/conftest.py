import asyncio
import json
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("ANALYSIS_USE_MOCK", "true")


QUALITY_JSON = {
    "correctness": {"score": 90, "details": "Returns the expected value."},
    "style": {"score": 70, "details": "Terse naming."},
    "complexity": {"score": 95, "details": "Constant time."},
    "edgeCases": {"score": 60, "details": "No inputs to validate."},
    "score": 82,
    "summary": "Correct and minimal.",
    "strengths": ["Correct output", "Minimal code"],
    "weaknesses": ["Non-descriptive function name"],
    "hiringRecommendation": "Hire",
}

PLAGIARISM_JSON = {
    "score": 91,
    "issues": [
        {"line": 1, "endLine": 1, "description": "Trivial one-liner", "severity": "info", "possibleSource": ""},
    ],
    "summary": "Original.",
    "recommendations": [],
}

FEEDBACK_JSON = {
    "subject": "Your interview results",
    "body": "Thanks for completing the exercise.",
    "followUpSuggestion": "Book the next round.",
}

REPORT_JSON = {
    "overallAssessment": "Solid performance.\nWould fit the team.",
    "technicalSkillsSummary": "Writes correct code.",
    "communicationSkillsSummary": "Clear.",
    "problemSolvingAbility": "Methodical.",
    "culturalFitNotes": "Collaborative.",
    "strengthsHighlights": ["Correctness"],
    "areasForImprovement": ["Naming"],
    "hiringRecommendation": "Recommend to hire.",
    "nextSteps": ["Team interview"],
    "additionalNotes": "",
}


class ScriptedAdapter:
    """Completion adapter double: answers per stage, optionally held open by a gate."""

    def __init__(self, responses: dict | None = None, gate: asyncio.Event | None = None):
        self.responses = dict(responses or {})
        self.gate = gate
        self.calls: list[dict] = []

    async def complete(self, prompt: str, temperature: float, stage: str = "") -> str:
        self.calls.append({"stage": stage, "prompt": prompt, "temperature": temperature})
        if self.gate is not None:
            await self.gate.wait()
        value = self.responses.get(stage, "{}")
        if isinstance(value, Exception):
            raise value
        if isinstance(value, dict):
            return json.dumps(value)
        return value


@pytest.fixture
def scripted_adapter():
    return ScriptedAdapter({
        "quality": QUALITY_JSON,
        "plagiarism": PLAGIARISM_JSON,
        "feedback": FEEDBACK_JSON,
        "recruiter_report": REPORT_JSON,
    })
