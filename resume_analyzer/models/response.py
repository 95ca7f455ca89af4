# models/response.py
from pydantic import BaseModel
from typing import List


class AnalysisPayload(BaseModel):
    skills: List[str]
    summary: str
    experience: str
    education: str
    score: int
    improvements: str


class JobMatchPayload(BaseModel):
    matchPercentage: int
    missingSkills: List[str]
    suggestions: str


class AnalyzeResumeResponse(BaseModel):
    reportId: str
    analysis: AnalysisPayload


class MatchJobResponse(BaseModel):
    success: bool = True
    analysis: JobMatchPayload
