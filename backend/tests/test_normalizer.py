from app.analysis.normalizer import (
    as_issues,
    as_sub_score,
    as_text_list,
    clamp_score,
    extract_json_dict,
)


def test_clamp_score_bounds_and_defaults():
    assert clamp_score(140) == 100
    assert clamp_score(-5) == 0
    assert clamp_score("77.6") == 78
    assert clamp_score(None, 0) == 0
    assert clamp_score("high", 0) == 0
    assert clamp_score(float("nan"), 0) == 0
    assert clamp_score(True, 0) == 0


def test_extract_json_dict_handles_fenced_and_embedded_objects():
    assert extract_json_dict('{"score": 1}') == {"score": 1}
    assert extract_json_dict('```json\n{"score": 2}\n```') == {"score": 2}
    assert extract_json_dict('Here you go: {"score": 3} thanks') == {"score": 3}


def test_extract_json_dict_rejects_non_objects():
    assert extract_json_dict("") is None
    assert extract_json_dict("not json at all") is None
    assert extract_json_dict("[1, 2, 3]") is None


def test_as_text_list_drops_blank_and_nested_items():
    assert as_text_list(["a", " ", None, {"x": 1}, 3]) == ["a", "3"]
    assert as_text_list("single") == ["single"]
    assert as_text_list({"not": "a list"}) == []


def test_as_sub_score_accepts_object_or_number():
    assert as_sub_score({"score": 120, "details": "x"}).score == 100
    assert as_sub_score(55).score == 55
    assert as_sub_score("junk").score == 0


def test_as_issues_coerces_severity_and_line_range():
    issues = as_issues([
        {"line": 3, "endLine": 9, "description": "copied loop", "severity": "MAJOR", "possibleSource": "SO"},
        {"lineRange": [4], "description": "helper", "severity": "catastrophic"},
        {"description": ""},
        "garbage",
    ])

    assert len(issues) == 2
    assert issues[0].severity == "major"
    assert issues[0].line_range == (3, 9)
    assert issues[0].possible_source == "SO"
    assert issues[1].severity == "info"
    assert issues[1].line_range == (4, 4)


def test_as_issues_drops_unrepresentable_line_numbers():
    issues = as_issues([{"line": float("inf"), "endLine": float("nan"), "description": "copied helper"}])

    assert len(issues) == 1
    assert issues[0].line_range == (None, None)
