import base64
import binascii

from fastapi import APIRouter, Depends

from resume_analyzer.models.response import AnalyzeResumeResponse, MatchJobResponse
from resume_analyzer.models.schemas import AnalyzeResumeRequest, AnalyzeDocumentRequest, MatchJobRequest
from resume_analyzer.routers.dependencies import get_current_owner, get_pipeline
from resume_analyzer.services.pipeline import ResumePipeline
from resume_analyzer.utils.exceptions import ValidationError
from resume_analyzer.utils.logging_config import get_logger, log_api_call

router = APIRouter()
logger = get_logger(__name__)


def decode_base64_document(b64_string: str) -> bytes:
    try:
        return base64.b64decode(b64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 document: {e}", field="base64Content", cause=e) from e


@router.post("/analyze-resume", response_model=AnalyzeResumeResponse)
@log_api_call("analyze_resume")
async def analyze_resume(
    body: AnalyzeResumeRequest,
    owner: str = Depends(get_current_owner),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    """Analyze already-extracted resume text and store a new report"""
    report_id, analysis = await pipeline.analyze_resume(owner, body.filename, body.resumeText)
    return {"reportId": report_id, "analysis": analysis.to_response()}


@router.post("/analyze-document", response_model=AnalyzeResumeResponse)
@log_api_call("analyze_document")
async def analyze_document(
    body: AnalyzeDocumentRequest,
    owner: str = Depends(get_current_owner),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    """Extract text from an uploaded document, then analyze it like /analyze-resume"""
    data = decode_base64_document(body.base64Content)
    report_id, analysis = await pipeline.analyze_document(owner, body.filename, data, body.contentType)
    return {"reportId": report_id, "analysis": analysis.to_response()}


@router.post("/job-match", response_model=MatchJobResponse)
@log_api_call("job_match")
async def job_match(
    body: MatchJobRequest,
    owner: str = Depends(get_current_owner),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    """Score a stored resume against a job description and merge the result into its report"""
    if body.resumeText is not None:
        logger.debug("Ignoring client-supplied resume text; the stored copy is used")
    match = await pipeline.match_job(owner, body.reportId, body.jobDescription)
    return {"success": True, "analysis": match.to_response()}
