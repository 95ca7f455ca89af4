from pydantic import BaseModel, Field
from typing import List, Dict, Any


class ResumeAnalysis(BaseModel):
    skills: List[str] = Field(default_factory=list)
    summary: str = ""
    experience: str = ""
    education: str = ""
    score: int = 0
    improvements: str = ""

    def to_response(self) -> Dict[str, Any]:
        return {
            "skills": list(self.skills),
            "summary": self.summary,
            "experience": self.experience,
            "education": self.education,
            "score": self.score,
            "improvements": self.improvements,
        }


class JobMatchResult(BaseModel):
    match_percentage: int = 0
    missing_skills: List[str] = Field(default_factory=list)
    suggestions: str = ""

    def to_response(self) -> Dict[str, Any]:
        # wire names follow the model's camelCase keys
        return {
            "matchPercentage": self.match_percentage,
            "missingSkills": list(self.missing_skills),
            "suggestions": self.suggestions,
        }
