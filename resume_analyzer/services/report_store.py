"""
Report persistence on top of a motor collection.

Every read and write that addresses an existing report carries the owner in
its filter, so a caller can never see or touch someone else's report.
"""
import uuid
from datetime import datetime
from typing import List

from pymongo import DESCENDING

from resume_analyzer.models.models import ResumeAnalysis, JobMatchResult
from resume_analyzer.models.schemas import ReportModel, ReportSummary
from resume_analyzer.services.db import to_dict
from resume_analyzer.utils.exceptions import NotFoundOrForbidden, PersistenceError, ExceptionContext
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_COMPLETED = "completed"

SUMMARY_FIELDS = {"_id": 0, "report_id": 1, "resume_filename": 1, "score": 1, "status": 1, "created_at": 1}


class ReportStore:
    def __init__(self, reports_coll):
        self.reports_coll = reports_coll

    def _context(self, operation: str, **context):
        return ExceptionContext(operation, logger, wrap_as=PersistenceError, collection="reports", **context)

    async def create_report(self, owner: str, filename: str, resume_text: str, analysis: ResumeAnalysis) -> str:
        report_id = str(uuid.uuid4())
        now = datetime.utcnow()
        report = ReportModel(
            report_id=report_id,
            owner=owner,
            resume_filename=filename,
            resume_text=resume_text,
            skills=analysis.skills,
            summary=analysis.summary,
            experience=analysis.experience,
            education=analysis.education,
            score=analysis.score,
            improvements=analysis.improvements,
            status=STATUS_COMPLETED,
            created_at=now,
            updated_at=now,
        )
        with self._context("create_report", owner=owner):
            await self.reports_coll.insert_one(report.dict())

        logger.info(f"Report saved: {report_id}")
        return report_id

    async def apply_job_match(self, report_id: str, owner: str, job_description: str, match: JobMatchResult) -> None:
        update = {
            "job_description": job_description,
            "match_percentage": match.match_percentage,
            "missing_skills": list(match.missing_skills),
            "suggestions": match.suggestions,
            "updated_at": datetime.utcnow(),
        }
        with self._context("apply_job_match", report_id=report_id, owner=owner):
            # single $set so concurrent writers replace the whole match block
            result = await self.reports_coll.update_one(
                {"report_id": report_id, "owner": owner},
                {"$set": update},
            )

        if result.matched_count == 0:
            logger.warning(f"Job match update matched no report {report_id} for owner {owner}")
            raise NotFoundOrForbidden(report_id=report_id)
        logger.info(f"Report {report_id} updated with job match data")

    async def read_resume_text(self, report_id: str, owner: str) -> str:
        with self._context("read_resume_text", report_id=report_id, owner=owner):
            doc = await self.reports_coll.find_one(
                {"report_id": report_id, "owner": owner},
                {"_id": 0, "resume_text": 1},
            )
        if not doc:
            raise NotFoundOrForbidden(report_id=report_id)
        return doc.get("resume_text") or ""

    async def get_report(self, report_id: str, owner: str) -> ReportModel:
        with self._context("get_report", report_id=report_id, owner=owner):
            doc = await self.reports_coll.find_one({"report_id": report_id, "owner": owner})
        if not doc:
            raise NotFoundOrForbidden(report_id=report_id)
        return ReportModel(**to_dict(doc))

    async def list_reports(self, owner: str) -> List[ReportSummary]:
        with self._context("list_reports", owner=owner):
            cursor = self.reports_coll.find({"owner": owner}, SUMMARY_FIELDS).sort("created_at", DESCENDING)
            docs = await cursor.to_list(length=None)
        return [ReportSummary(**doc) for doc in docs]
