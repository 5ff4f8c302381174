from __future__ import annotations

from copy import deepcopy
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class StageKind(str, Enum):
    QUALITY = "quality"
    PLAGIARISM = "plagiarism"
    FEEDBACK = "feedback"
    RECRUITER_REPORT = "recruiter_report"


# Dependent stage -> stage whose result must exist before it can be triggered.
PREREQUISITES = {
    StageKind.FEEDBACK: StageKind.QUALITY,
    StageKind.RECRUITER_REPORT: StageKind.QUALITY,
}

SEVERITIES = ("critical", "major", "minor", "info")
HIRING_DECISIONS = ("offer", "reject", "continue")
FEEDBACK_TONES = ("encouraging", "direct", "constructive")


@dataclass(frozen=True)
class AnalysisRequest:
    code: str
    language: str
    problem_statement: str = ""
    role_level: str = "mid"


@dataclass
class SubScore:
    score: int = 0
    details: str = ""


@dataclass
class StageResult:
    score: int = 0
    summary: str = ""
    is_fallback: bool = False
    # Developer diagnostics only; never serialized for views.
    raw_response: Optional[str] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload.pop("raw_response", None)
        return payload


@dataclass
class QualityResult(StageResult):
    correctness: SubScore = field(default_factory=SubScore)
    style: SubScore = field(default_factory=SubScore)
    complexity: SubScore = field(default_factory=SubScore)
    edge_cases: SubScore = field(default_factory=SubScore)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    hiring_recommendation: str = ""


@dataclass
class PlagiarismIssue:
    description: str
    severity: str = "info"
    line_range: Tuple[Optional[int], Optional[int]] = (None, None)
    possible_source: str = ""


@dataclass
class PlagiarismResult(StageResult):
    issues: List[PlagiarismIssue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["issues"] = [
            {
                "line_range": list(issue.line_range),
                "description": issue.description,
                "severity": issue.severity,
                "possible_source": issue.possible_source,
            }
            for issue in self.issues
        ]
        return payload


@dataclass
class FeedbackResult(StageResult):
    subject: str = ""
    body: str = ""
    follow_up_suggestion: Optional[str] = None


@dataclass
class RecruiterReportResult(StageResult):
    candidate_name: str = ""
    position: str = ""
    interview_date: str = ""
    technical_score: int = 0
    overall_assessment: str = ""
    technical_skills_summary: str = ""
    communication_skills_summary: str = ""
    problem_solving_ability: str = ""
    cultural_fit_notes: str = ""
    strengths_highlights: List[str] = field(default_factory=list)
    areas_for_improvement: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    hiring_recommendation: str = ""
    additional_notes: str = ""


@dataclass(frozen=True)
class FeedbackRequest:
    quality: QualityResult
    candidate_name: str = ""
    position: str = "Software Developer"
    hiring_decision: str = "continue"
    tone: str = "constructive"
    include_specifics: bool = True
    plagiarism: Optional[PlagiarismResult] = None


@dataclass(frozen=True)
class RecruiterReportRequest:
    quality: QualityResult
    candidate_name: str = "the candidate"
    position: str = "the position"
    interview_date: str = ""
    plagiarism: Optional[PlagiarismResult] = None


@dataclass
class StageState:
    result: Optional[StageResult] = None
    in_flight: bool = False
    last_updated: Optional[float] = None

    def copy(self) -> "StageState":
        # Readers get their own result object; the stored one is never shared.
        return deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "result": self.result.to_dict() if self.result is not None else None,
            "in_flight": self.in_flight,
            "last_updated": self.last_updated,
        }
