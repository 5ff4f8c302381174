import json


_DECISION_GUIDANCE = {
    "offer": "The candidate is moving forward with an offer. Congratulate them and outline what happens next.",
    "reject": "The candidate is not moving forward. Be respectful and leave them with actionable takeaways.",
    "continue": "The candidate is moving to the next interview round. Set expectations for it.",
}

_TONE_GUIDANCE = {
    "encouraging": "warm and encouraging, emphasizing growth",
    "direct": "concise and direct, without filler",
    "constructive": "balanced and constructive, pairing each concern with a suggestion",
}


def build_feedback_prompt(payload: dict) -> str:
    """
    Build the candidate-facing feedback email prompt.
    payload carries candidate metadata, the scores derived from the quality
    stage and, optionally, an originality summary from the plagiarism stage.
    """
    decision = payload.get("hiring_decision", "continue")
    tone = payload.get("tone", "constructive")
    specifics = (
        "Reference specific strengths and weaknesses from the assessment."
        if payload.get("include_specifics", True)
        else "Keep the feedback general; do not cite individual findings."
    )

    return f"""
You are a Technical Hiring Communication Agent writing a feedback email to a candidate
after a coding interview.

Rules:
- Tone: {_TONE_GUIDANCE.get(tone, _TONE_GUIDANCE["constructive"])}
- {_DECISION_GUIDANCE.get(decision, _DECISION_GUIDANCE["continue"])}
- {specifics}
- Do NOT mention AI, models, plagiarism tooling, or internal score numbers
- Address the candidate by name when provided

Candidate Name: {payload.get("candidate_name") or "the candidate"}
Position: {payload.get("position") or "Software Developer"}

Assessment:
{json.dumps(payload.get("assessment", {}), indent=2)}

Return STRICT JSON only in this format:
{{
  "subject": "string",
  "body": "string",
  "followUpSuggestion": "string or null"
}}
"""
