"""
Projection of untrusted model replies onto the fixed analysis schemas.

Every field is treated as optional and possibly wrong-shaped; a bad field
falls back to its default, a reply that is not a JSON object is an error.
"""
import json
import math
from typing import Any, Dict, List

from resume_analyzer.models.models import ResumeAnalysis, JobMatchResult
from resume_analyzer.utils.exceptions import MalformedModelOutput
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

RAW_PREVIEW_LIMIT = 300


def parse_reply(raw: str, stage: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error(f"Unparseable {stage} reply: {str(raw)[:RAW_PREVIEW_LIMIT]!r}")
        raise MalformedModelOutput(f"AI returned invalid JSON: {e}", stage=stage, cause=e) from e
    if not isinstance(data, dict):
        logger.error(f"Non-object {stage} reply: {str(raw)[:RAW_PREVIEW_LIMIT]!r}")
        raise MalformedModelOutput(
            f"AI returned a JSON {type(data).__name__}, expected an object", stage=stage
        )
    return data


def _as_text(x: Any, sep: str = " ") -> str:
    if isinstance(x, str):
        return x
    if isinstance(x, list):
        # some models return bullet points as an array
        return sep.join([t.strip() for t in x if isinstance(t, str) and t.strip()])
    return ""


def _as_list(x: Any) -> List[str]:
    if not isinstance(x, list):
        return []
    return [t for t in x if isinstance(t, str)]


def _as_int(x: Any) -> int:
    if isinstance(x, bool):
        return 0
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        return int(round(x)) if math.isfinite(x) else 0
    if isinstance(x, str):
        try:
            return _as_int(float(x.strip().rstrip("%")))
        except ValueError:
            return 0
    return 0


def normalize_analysis(raw: str) -> ResumeAnalysis:
    data = parse_reply(raw, stage="analysis")
    analysis = ResumeAnalysis(
        skills=_as_list(data.get("skills")),
        summary=_as_text(data.get("summary")),
        experience=_as_text(data.get("experience")),
        education=_as_text(data.get("education")),
        score=_as_int(data.get("score")),
        improvements=_as_text(data.get("improvements"), sep="\n"),
    )
    if not 0 <= analysis.score <= 100:
        logger.warning(f"Model returned out-of-range score {analysis.score}; keeping it as-is")
    return analysis


def normalize_job_match(raw: str) -> JobMatchResult:
    data = parse_reply(raw, stage="job_match")
    match = JobMatchResult(
        match_percentage=_as_int(data.get("matchPercentage")),
        missing_skills=_as_list(data.get("missingSkills")),
        suggestions=_as_text(data.get("suggestions"), sep="\n"),
    )
    if not 0 <= match.match_percentage <= 100:
        logger.warning(f"Model returned out-of-range match percentage {match.match_percentage}; keeping it as-is")
    return match
