# routers/reports.py
from typing import List

from fastapi import APIRouter, Depends

from resume_analyzer.models.schemas import ReportModel, ReportSummary
from resume_analyzer.routers.dependencies import get_current_owner, get_report_store
from resume_analyzer.services.report_store import ReportStore

router = APIRouter()


@router.get("", response_model=List[ReportSummary])
async def list_reports(
    owner: str = Depends(get_current_owner),
    store: ReportStore = Depends(get_report_store),
):
    """Get the caller's reports, newest first"""
    return await store.list_reports(owner)


@router.get("/{report_id}", response_model=ReportModel)
async def get_report(
    report_id: str,
    owner: str = Depends(get_current_owner),
    store: ReportStore = Depends(get_report_store),
):
    """Get one of the caller's reports"""
    return await store.get_report(report_id, owner)
