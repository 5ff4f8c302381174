from typing import Literal

from pydantic import BaseModel


class StageTriggerRequest(BaseModel):
    # quality / plagiarism
    code: str | None = None
    language: str | None = None
    problem_statement: str | None = None
    role_level: str | None = None

    # feedback / recruiter_report
    candidate_name: str | None = None
    position: str | None = None
    interview_date: str | None = None
    hiring_decision: Literal["offer", "reject", "continue"] | None = None
    tone: Literal["encouraging", "direct", "constructive"] | None = None
    include_specifics: bool | None = None
    include_plagiarism: bool = False

    def to_params(self) -> dict:
        return self.model_dump(exclude_none=True)


class StageStateResponse(BaseModel):
    stage: str
    result: dict | None = None
    in_flight: bool
    last_updated: float | None = None
    badge: str | None = None
