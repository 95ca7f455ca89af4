import json
import pytest

from resume_analyzer.services.normalizer import normalize_analysis, normalize_job_match
from resume_analyzer.utils.exceptions import MalformedModelOutput


class TestNormalizeAnalysis:

    def test_partial_reply_gets_defaults(self):
        analysis = normalize_analysis('{"skills":["Go","SQL"],"score":72}')

        assert analysis.skills == ["Go", "SQL"]
        assert analysis.summary == ""
        assert analysis.experience == ""
        assert analysis.education == ""
        assert analysis.improvements == ""
        assert analysis.score == 72

    def test_missing_score_and_skills(self):
        analysis = normalize_analysis(json.dumps({"summary": "Backend engineer."}))
        assert analysis.score == 0
        assert analysis.skills == []
        assert analysis.summary == "Backend engineer."

    def test_full_reply(self):
        reply = {
            "skills": ["Python", "FastAPI"],
            "summary": "Engineer.",
            "experience": "Built things.",
            "education": "BSc CS.",
            "score": 88,
            "improvements": "Add metrics\nShorten summary",
        }
        analysis = normalize_analysis(json.dumps(reply))
        assert analysis.to_response() == reply

    def test_wrong_shapes_fall_back(self):
        reply = {
            "skills": "Python, Go",
            "summary": {"text": "nested"},
            "experience": 42,
            "education": None,
            "score": "not a number",
        }
        analysis = normalize_analysis(json.dumps(reply))
        assert analysis.skills == []
        assert analysis.summary == ""
        assert analysis.experience == ""
        assert analysis.education == ""
        assert analysis.score == 0

    def test_non_string_skills_dropped(self):
        analysis = normalize_analysis('{"skills": ["Python", 3, null, "SQL"]}')
        assert analysis.skills == ["Python", "SQL"]

    def test_duplicate_skills_kept(self):
        analysis = normalize_analysis('{"skills": ["SQL", "SQL"]}')
        assert analysis.skills == ["SQL", "SQL"]

    def test_improvements_list_joined_with_newlines(self):
        analysis = normalize_analysis('{"improvements": ["Add metrics", "Fix typos"]}')
        assert analysis.improvements == "Add metrics\nFix typos"

    @pytest.mark.parametrize("raw_score, expected", [
        ("85", 85),
        (72.6, 73),
        ("64%", 64),
        (True, 0),
    ])
    def test_score_coercion(self, raw_score, expected):
        analysis = normalize_analysis(json.dumps({"score": raw_score}))
        assert analysis.score == expected

    def test_out_of_range_score_is_not_clamped(self):
        assert normalize_analysis('{"score": 150}').score == 150
        assert normalize_analysis('{"score": -5}').score == -5

    def test_invalid_json_is_an_error(self):
        with pytest.raises(MalformedModelOutput) as exc_info:
            normalize_analysis("Sure! Here is the analysis: {skills: ...")
        assert exc_info.value.details["stage"] == "analysis"

    def test_non_object_json_is_an_error(self):
        with pytest.raises(MalformedModelOutput):
            normalize_analysis('["Python"]')


class TestNormalizeJobMatch:

    def test_maps_camel_case_keys(self):
        match = normalize_job_match(json.dumps({
            "matchPercentage": 64,
            "missingSkills": ["Kubernetes"],
            "suggestions": "Mention Kubernetes",
        }))
        assert match.match_percentage == 64
        assert match.missing_skills == ["Kubernetes"]
        assert match.suggestions == "Mention Kubernetes"
        assert match.to_response() == {
            "matchPercentage": 64,
            "missingSkills": ["Kubernetes"],
            "suggestions": "Mention Kubernetes",
        }

    def test_defaults(self):
        match = normalize_job_match("{}")
        assert match.match_percentage == 0
        assert match.missing_skills == []
        assert match.suggestions == ""

    def test_snake_case_keys_are_not_read(self):
        match = normalize_job_match('{"match_percentage": 90}')
        assert match.match_percentage == 0

    def test_invalid_json_is_an_error(self):
        with pytest.raises(MalformedModelOutput) as exc_info:
            normalize_job_match("")
        assert exc_info.value.details["stage"] == "job_match"
