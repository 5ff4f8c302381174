from app.analysis.models import FeedbackResult, RecruiterReportResult


def recommendation_badge(recommendation: str) -> str:
    text = str(recommendation or "").lower()
    if "strong hire" in text:
        return "strong_hire"
    # "do not hire" contains "hire", so it has to be checked first.
    if "do not hire" in text or "no hire" in text:
        return "do_not_hire"
    if "hire" in text:
        return "hire"
    if "consider" in text:
        return "consider"
    return "unknown"


def render_feedback_email(result: FeedbackResult) -> str:
    text = f"Subject: {result.subject}\n\n{result.body}"
    if result.follow_up_suggestion:
        text += f"\n\nSuggested follow-up: {result.follow_up_suggestion}"
    return text


def _bullets(items: list[str]) -> str:
    if not items:
        return "- None noted"
    return "\n".join(f"- {item}" for item in items)


def render_recruiter_report(result: RecruiterReportResult) -> str:
    sections = [
        "RECRUITER REPORT",
        f"Candidate: {result.candidate_name}",
        f"Position: {result.position}",
        f"Interview Date: {result.interview_date}",
        f"Technical Score: {result.technical_score}/100",
        f"Recommendation: {result.hiring_recommendation}",
        "",
        "Overall Assessment",
        result.overall_assessment or result.summary,
        "",
        "Technical Skills",
        result.technical_skills_summary,
        "",
        "Communication Skills",
        result.communication_skills_summary,
        "",
        "Problem Solving",
        result.problem_solving_ability,
        "",
        "Cultural Fit",
        result.cultural_fit_notes,
        "",
        "Strengths",
        _bullets(result.strengths_highlights),
        "",
        "Areas for Improvement",
        _bullets(result.areas_for_improvement),
        "",
        "Next Steps",
        _bullets(result.next_steps),
    ]
    if result.additional_notes:
        sections.extend(["", "Additional Notes", result.additional_notes])
    return "\n".join(sections).rstrip() + "\n"
