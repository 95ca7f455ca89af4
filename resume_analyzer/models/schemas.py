from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime

ReportStatus = Literal["pending", "completed", "failed"]

# -------- Reports --------
class ReportModel(BaseModel):
    report_id: str
    owner: str
    resume_filename: str
    resume_text: str
    skills: List[str] = []
    summary: str = ""
    experience: str = ""
    education: str = ""
    score: int = 0
    improvements: str = ""
    job_description: Optional[str] = None
    match_percentage: Optional[int] = None
    missing_skills: List[str] = []
    suggestions: Optional[str] = None
    status: ReportStatus = "completed"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ReportSummary(BaseModel):
    """Row shown on the dashboard"""
    report_id: str
    resume_filename: str
    score: int = 0
    status: ReportStatus = "completed"
    created_at: datetime


# -------- Request bodies --------
class AnalyzeResumeRequest(BaseModel):
    resumeText: str = ""
    filename: str = ""


class AnalyzeDocumentRequest(BaseModel):
    """Raw document upload, base64 encoded"""
    filename: str
    contentType: str = "application/octet-stream"
    base64Content: str


class MatchJobRequest(BaseModel):
    # accepted for compatibility; the stored resume text is authoritative
    resumeText: Optional[str] = None
    jobDescription: str = ""
    reportId: str = ""
