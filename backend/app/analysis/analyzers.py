from __future__ import annotations

import logging
import time

from app.analysis.llm import CompletionFailure
from app.analysis.models import (
    AnalysisRequest,
    FeedbackRequest,
    FeedbackResult,
    PlagiarismResult,
    QualityResult,
    RecruiterReportRequest,
    RecruiterReportResult,
    StageKind,
    StageResult,
)
from app.analysis.normalizer import (
    PARSE_ERROR_MESSAGE,
    as_issues,
    as_sub_score,
    as_text,
    as_text_list,
    clamp_score,
    extract_json_dict,
    pick,
)
from app.analysis.prompts.feedback import build_feedback_prompt
from app.analysis.prompts.plagiarism import build_plagiarism_prompt
from app.analysis.prompts.quality import build_quality_prompt
from app.analysis.prompts.recruiter_report import build_recruiter_report_prompt
from core.logger import log_event

logger = logging.getLogger("app.analysis.analyzers")


SCORING_TEMPERATURE = 0.2
FEEDBACK_TEMPERATURE = 0.5
REPORT_TEMPERATURE = 0.4

NO_PROBLEM_STATEMENT = "No problem statement provided."


def recommendation_for_score(score: int) -> str:
    if score >= 80:
        return "Strong Hire"
    if score >= 65:
        return "Hire"
    if score >= 50:
        return "Consider"
    return "Do Not Hire"


def _average(*values: int) -> int:
    return int(round(sum(values) / len(values))) if values else 0


class StageAnalyzer:
    """
    Prompt builder + completion adapter + result normalizer behind one entry point.
    run() is total: every failure becomes a schema-valid fallback result.
    """

    stage: StageKind
    temperature: float = SCORING_TEMPERATURE

    def __init__(self, adapter):
        self.adapter = adapter

    def validate(self, request) -> str | None:
        return None

    def build_prompt(self, request) -> str:
        raise NotImplementedError

    def parse(self, data: dict, request) -> StageResult:
        raise NotImplementedError

    def fallback(self, request, message: str) -> StageResult:
        raise NotImplementedError

    def _fallback(self, request, message: str, raw: str | None = None) -> StageResult:
        result = self.fallback(request, message)
        result.is_fallback = True
        result.summary = message
        result.raw_response = raw
        return result

    async def run(self, request) -> StageResult:
        stage = self.stage.value
        started = time.monotonic()

        problem = self.validate(request)
        if problem:
            log_event("analyzer", "rejected_input", stage, reason=problem)
            return self._fallback(request, problem)

        raw = None
        try:
            prompt = self.build_prompt(request)
            raw = await self.adapter.complete(prompt, self.temperature, stage=stage)
            data = extract_json_dict(raw)
            if data is None:
                logger.warning("unparsable completion | stage=%s length=%s", stage, len(raw or ""))
                logger.debug("unparsable completion raw | stage=%s raw=%r", stage, raw)
                return self._fallback(request, PARSE_ERROR_MESSAGE, raw)
            result = self.parse(data, request)
            result.raw_response = raw
        except CompletionFailure as failure:
            log_event("analyzer", "completion_failed", stage, kind=failure.kind, detail=failure.detail)
            return self._fallback(request, failure.message, raw)
        except Exception:
            logger.exception("analyzer crashed | stage=%s", stage)
            return self._fallback(request, f"Unexpected error while running {stage} analysis.", raw)

        log_event(
            "analyzer",
            "completed",
            stage,
            score=result.score,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
        return result


class QualityAnalyzer(StageAnalyzer):
    stage = StageKind.QUALITY
    temperature = SCORING_TEMPERATURE

    def validate(self, request: AnalysisRequest) -> str | None:
        if not str(request.code or "").strip() or not str(request.language or "").strip():
            return "Missing input: code and language are required for quality analysis."
        return None

    def build_prompt(self, request: AnalysisRequest) -> str:
        return build_quality_prompt(
            code=request.code,
            language=request.language,
            problem_statement=as_text(request.problem_statement, NO_PROBLEM_STATEMENT),
            role_level=as_text(request.role_level, "mid"),
        )

    def parse(self, data: dict, request: AnalysisRequest) -> QualityResult:
        # Older prompt revisions nested the totals under "overallSummary".
        overall = data.get("overallSummary") if isinstance(data.get("overallSummary"), dict) else data

        correctness = as_sub_score(data.get("correctness"))
        style = as_sub_score(data.get("style"))
        complexity = as_sub_score(pick(data, "complexity"))
        edge_cases = as_sub_score(pick(data, "edgeCases", "edge_cases"))

        raw_score = overall.get("score")
        if raw_score is None:
            score = _average(correctness.score, style.score, complexity.score, edge_cases.score)
        else:
            score = clamp_score(raw_score)

        return QualityResult(
            score=score,
            summary=as_text(overall.get("summary"), "No summary provided."),
            correctness=correctness,
            style=style,
            complexity=complexity,
            edge_cases=edge_cases,
            strengths=as_text_list(overall.get("strengths")),
            weaknesses=as_text_list(overall.get("weaknesses")),
            hiring_recommendation=as_text(
                pick(overall, "hiringRecommendation", "hiring_recommendation"),
                recommendation_for_score(score),
            ),
        )

    def fallback(self, request, message: str) -> QualityResult:
        return QualityResult(score=0, hiring_recommendation="Unable to assess")


class PlagiarismAnalyzer(StageAnalyzer):
    stage = StageKind.PLAGIARISM
    temperature = SCORING_TEMPERATURE

    def validate(self, request: AnalysisRequest) -> str | None:
        if not str(request.code or "").strip() or not str(request.language or "").strip():
            return "Missing input: code and language are required for plagiarism analysis."
        return None

    def build_prompt(self, request: AnalysisRequest) -> str:
        return build_plagiarism_prompt(
            code=request.code,
            language=request.language,
            problem_statement=as_text(request.problem_statement, NO_PROBLEM_STATEMENT),
        )

    def parse(self, data: dict, request: AnalysisRequest) -> PlagiarismResult:
        return PlagiarismResult(
            score=clamp_score(pick(data, "score", "originality")),
            summary=as_text(data.get("summary"), "No summary provided."),
            issues=as_issues(data.get("issues")),
            recommendations=as_text_list(data.get("recommendations")),
        )

    def fallback(self, request, message: str) -> PlagiarismResult:
        return PlagiarismResult(score=0, recommendations=[])


def _quality_score(request) -> int:
    quality = getattr(request, "quality", None)
    return quality.score if quality is not None else 0


class FeedbackAnalyzer(StageAnalyzer):
    stage = StageKind.FEEDBACK
    temperature = FEEDBACK_TEMPERATURE

    def validate(self, request: FeedbackRequest) -> str | None:
        if request.quality is None:
            return "Missing input: a quality result is required to draft feedback."
        return None

    def assessment(self, request: FeedbackRequest) -> dict:
        quality = request.quality
        payload = {
            "technicalScore": quality.score,
            "codeQualityScore": _average(quality.correctness.score, quality.style.score),
            "problemSolvingScore": _average(quality.complexity.score, quality.edge_cases.score),
            "strengths": list(quality.strengths),
            "weaknesses": list(quality.weaknesses),
            "hiringRecommendation": quality.hiring_recommendation,
            "summary": quality.summary,
        }
        if request.plagiarism is not None:
            payload["originalityScore"] = request.plagiarism.score
            payload["originalitySummary"] = request.plagiarism.summary
        return payload

    def build_prompt(self, request: FeedbackRequest) -> str:
        return build_feedback_prompt({
            "candidate_name": request.candidate_name,
            "position": request.position,
            "hiring_decision": request.hiring_decision,
            "tone": request.tone,
            "include_specifics": request.include_specifics,
            "assessment": self.assessment(request),
        })

    def parse(self, data: dict, request: FeedbackRequest) -> FeedbackResult:
        subject = as_text(data.get("subject"))
        body = as_text(data.get("body"))
        if not subject or not body:
            # An email without subject or body is unusable; treat as a schema failure.
            return self._fallback(request, "Parsing error: the feedback email was missing its subject or body.")
        return FeedbackResult(
            score=_quality_score(request),
            summary=f"Feedback email drafted ({request.hiring_decision}, {request.tone} tone).",
            subject=subject,
            body=body,
            follow_up_suggestion=as_text(pick(data, "followUpSuggestion", "follow_up_suggestion")) or None,
        )

    def fallback(self, request, message: str) -> FeedbackResult:
        return FeedbackResult(score=_quality_score(request))


class RecruiterReportAnalyzer(StageAnalyzer):
    stage = StageKind.RECRUITER_REPORT
    temperature = REPORT_TEMPERATURE

    def validate(self, request: RecruiterReportRequest) -> str | None:
        if request.quality is None:
            return "Missing input: a quality result is required to build the recruiter report."
        return None

    def candidate_report(self, request: RecruiterReportRequest) -> dict:
        quality = request.quality
        report = {
            "overallScore": quality.score,
            "technicalAssessment": {
                "score": quality.score,
                "correctness": quality.correctness.score,
                "style": quality.style.score,
                "complexity": quality.complexity.score,
                "edgeCases": quality.edge_cases.score,
                "strengths": list(quality.strengths),
                "weaknesses": list(quality.weaknesses),
            },
            "hiringRecommendation": quality.hiring_recommendation,
            "summary": quality.summary,
        }
        if request.plagiarism is not None:
            report["originalityAssessment"] = {
                "score": request.plagiarism.score,
                "summary": request.plagiarism.summary,
                "flaggedSections": len(request.plagiarism.issues),
            }
        return report

    def build_prompt(self, request: RecruiterReportRequest) -> str:
        return build_recruiter_report_prompt(
            candidate_report=self.candidate_report(request),
            candidate_name=request.candidate_name,
            position=request.position,
            interview_date=request.interview_date,
        )

    def _hiring_recommendation(self, request: RecruiterReportRequest, value=None) -> str:
        quality = request.quality
        if quality is None:
            return as_text(value, "Unable to assess")
        default = as_text(quality.hiring_recommendation)
        if quality.is_fallback or default == "Unable to assess":
            # A fallback quality result carries no verdict.
            default = "Unable to assess"
        elif not default:
            default = recommendation_for_score(_quality_score(request))
        return as_text(value, default)

    def _identity(self, request) -> dict:
        return {
            "candidate_name": as_text(getattr(request, "candidate_name", ""), "the candidate"),
            "position": as_text(getattr(request, "position", ""), "the position"),
            "interview_date": as_text(getattr(request, "interview_date", "")),
        }

    def parse(self, data: dict, request: RecruiterReportRequest) -> RecruiterReportResult:
        score = _quality_score(request)
        overall = as_text(pick(data, "overallAssessment", "overall_assessment"))
        return RecruiterReportResult(
            score=score,
            summary=overall.split("\n")[0] if overall else "Recruiter report generated.",
            technical_score=score,
            overall_assessment=overall,
            technical_skills_summary=as_text(pick(data, "technicalSkillsSummary", "technical_skills_summary")),
            communication_skills_summary=as_text(pick(data, "communicationSkillsSummary", "communication_skills_summary")),
            problem_solving_ability=as_text(pick(data, "problemSolvingAbility", "problem_solving_ability")),
            cultural_fit_notes=as_text(pick(data, "culturalFitNotes", "cultural_fit_notes")),
            strengths_highlights=as_text_list(pick(data, "strengthsHighlights", "strengths_highlights")),
            areas_for_improvement=as_text_list(pick(data, "areasForImprovement", "areas_for_improvement")),
            next_steps=as_text_list(pick(data, "nextSteps", "next_steps")),
            hiring_recommendation=self._hiring_recommendation(
                request, pick(data, "hiringRecommendation", "hiring_recommendation")
            ),
            additional_notes=as_text(pick(data, "additionalNotes", "additional_notes")),
            **self._identity(request),
        )

    def fallback(self, request, message: str) -> RecruiterReportResult:
        score = _quality_score(request)
        return RecruiterReportResult(
            score=score,
            technical_score=score,
            hiring_recommendation=self._hiring_recommendation(request),
            **self._identity(request),
        )


def build_analyzers(adapter) -> dict[StageKind, StageAnalyzer]:
    return {
        StageKind.QUALITY: QualityAnalyzer(adapter),
        StageKind.PLAGIARISM: PlagiarismAnalyzer(adapter),
        StageKind.FEEDBACK: FeedbackAnalyzer(adapter),
        StageKind.RECRUITER_REPORT: RecruiterReportAnalyzer(adapter),
    }
