import asyncio
import json
import logging
from collections import deque

logger = logging.getLogger("app.analysis.mock")


MOCK_RESPONSES = {
    "quality": {
        "correctness": {"score": 85, "details": "Handles the main cases correctly."},
        "style": {"score": 78, "details": "Readable, naming could be more descriptive."},
        "complexity": {"score": 80, "details": "Linear time, constant extra space."},
        "edgeCases": {"score": 65, "details": "Empty input is not handled explicitly."},
        "score": 78,
        "summary": "A working, reasonably efficient solution with gaps in edge case handling.",
        "strengths": ["Efficient algorithm choice", "Clear control flow"],
        "weaknesses": ["Limited edge case handling", "No inline documentation"],
        "hiringRecommendation": "Hire",
    },
    "plagiarism": {
        "score": 78,
        "issues": [
            {
                "line": 15,
                "endLine": 22,
                "description": "This sorting implementation is very similar to common textbook examples",
                "severity": "minor",
                "possibleSource": "Common algorithm implementations",
            },
            {
                "line": 34,
                "endLine": 42,
                "description": "This helper function closely resembles a LeetCode solution",
                "severity": "major",
                "possibleSource": "LeetCode Problem #217 (Contains Duplicate)",
            },
        ],
        "summary": "The code shows some similarities to common implementations but has unique elements. Overall originality is moderate.",
        "recommendations": [
            "Add comments explaining your thought process to demonstrate understanding",
            "Refactor helper functions with your own implementation style",
        ],
    },
    "feedback": {
        "subject": "Your technical interview results",
        "body": "Thank you for taking the time to complete the coding exercise. "
                "Your solution was efficient and easy to follow. "
                "We would encourage you to spend more time on edge cases and documentation.",
        "followUpSuggestion": "Schedule a short call to walk through the next interview round.",
    },
    "recruiter_report": {
        "overallAssessment": "The candidate demonstrated solid technical foundations and a methodical approach.",
        "technicalSkillsSummary": "Writes clean, efficient code that would work well in production.",
        "communicationSkillsSummary": "Explained their approach clearly and asked relevant questions.",
        "problemSolvingAbility": "Broke the problem into manageable parts before coding.",
        "culturalFitNotes": "Collaborative and receptive to feedback.",
        "strengthsHighlights": [
            "Writes efficient, well-structured code",
            "Takes a methodical approach to complex problems",
        ],
        "areasForImprovement": [
            "Could be more thorough in considering unexpected inputs",
        ],
        "hiringRecommendation": "Recommend to hire; minor development areas can be addressed through mentorship.",
        "nextSteps": [
            "Schedule a team fit interview",
            "Check references with focus on teamwork",
        ],
        "additionalNotes": "",
    },
}

RECENT_CALLS_LIMIT = 50


class MockCompletionAdapter:
    """Drop-in for CompletionAdapter that answers from canned payloads without network access."""

    def __init__(self, responses: dict | None = None, delay_sec: float = 0.0):
        self.responses = dict(MOCK_RESPONSES if responses is None else responses)
        self.delay_sec = max(0.0, float(delay_sec))
        # Stage and temperature only; prompts carry candidate code.
        self.calls: deque = deque(maxlen=RECENT_CALLS_LIMIT)

    async def complete(self, prompt: str, temperature: float, stage: str = "") -> str:
        self.calls.append({"stage": stage, "temperature": temperature})
        logger.info("mock completion | stage=%s", stage)
        if self.delay_sec:
            await asyncio.sleep(self.delay_sec)
        return json.dumps(self.responses.get(stage, {}))
