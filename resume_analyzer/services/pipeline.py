"""
Resume analysis and job-match pipelines.

Both are short linear graphs with no persisted intermediate state: the only
write is the final node, so a failure anywhere earlier leaves the store
untouched.
"""
import asyncio
import functools
from typing import Tuple, TypedDict

from langgraph.graph import StateGraph, END

from resume_analyzer.helpers.parsing import extract_text, ensure_sufficient_content
from resume_analyzer.helpers.prompts import (
    ANALYZE_SYSTEM_PROMPT, ANALYZE_USER_PROMPT, MATCH_SYSTEM_PROMPT, MATCH_USER_PROMPT
)
from resume_analyzer.models.models import ResumeAnalysis, JobMatchResult
from resume_analyzer.models.settings import AppSettings
from resume_analyzer.services.normalizer import normalize_analysis, normalize_job_match
from resume_analyzer.utils.exceptions import ValidationError
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)


class AnalysisState(TypedDict, total=False):
    owner: str
    filename: str
    resume_text: str
    raw_reply: str
    analysis: ResumeAnalysis
    report_id: str


class MatchState(TypedDict, total=False):
    owner: str
    report_id: str
    job_description: str
    resume_text: str
    raw_reply: str
    match: JobMatchResult


class ResumePipeline:
    """Runs stage 1 (analysis) and stage 2 (job match) against one store and one model."""

    def __init__(self, settings: AppSettings, invoker, store):
        self.settings = settings
        self.invoker = invoker
        self.store = store
        self.analysis_graph = self._build_analysis_graph()
        self.match_graph = self._build_match_graph()

    async def _complete(self, system_prompt: str, user_content: str) -> str:
        # the HTTP client blocks; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(self.invoker.complete, system_prompt, user_content)
        )

    # ---------------- stage 1 ----------------

    async def node_received(self, state: AnalysisState):
        if not state.get("resume_text") or not state.get("filename"):
            raise ValidationError("Resume text and filename are required")
        logger.info(f"Analyzing resume for user: {state['owner']}")
        return {}

    async def node_extracted(self, state: AnalysisState):
        ensure_sufficient_content(state["resume_text"], self.settings.min_content_chars)
        return {}

    async def node_invoked(self, state: AnalysisState):
        user_content = ANALYZE_USER_PROMPT.format(resume_text=state["resume_text"])
        return {"raw_reply": await self._complete(ANALYZE_SYSTEM_PROMPT, user_content)}

    async def node_normalized(self, state: AnalysisState):
        analysis = normalize_analysis(state["raw_reply"])
        logger.info(f"Analysis completed: score={analysis.score}, skills={len(analysis.skills)}")
        return {"analysis": analysis}

    async def node_stored(self, state: AnalysisState):
        report_id = await self.store.create_report(
            state["owner"], state["filename"], state["resume_text"], state["analysis"]
        )
        return {"report_id": report_id}

    def _build_analysis_graph(self):
        g = StateGraph(AnalysisState)
        g.add_node("received", self.node_received)
        g.add_node("extracted", self.node_extracted)
        g.add_node("invoked", self.node_invoked)
        g.add_node("normalized", self.node_normalized)
        g.add_node("stored", self.node_stored)
        g.set_entry_point("received")
        g.add_edge("received", "extracted")
        g.add_edge("extracted", "invoked")
        g.add_edge("invoked", "normalized")
        g.add_edge("normalized", "stored")
        g.add_edge("stored", END)
        return g.compile()

    async def analyze_resume(self, owner: str, filename: str, resume_text: str) -> Tuple[str, ResumeAnalysis]:
        state = await self.analysis_graph.ainvoke(
            {"owner": owner, "filename": filename, "resume_text": resume_text}
        )
        return state["report_id"], state["analysis"]

    async def analyze_document(self, owner: str, filename: str, data: bytes, media_type: str) -> Tuple[str, ResumeAnalysis]:
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, extract_text, data, media_type, filename)
        return await self.analyze_resume(owner, filename, text)

    # ---------------- stage 2 ----------------

    async def node_match_received(self, state: MatchState):
        if not (state.get("job_description") or "").strip() or not state.get("report_id"):
            raise ValidationError("Job description and report ID are required")
        logger.info(f"Analyzing job match for user: {state['owner']} report: {state['report_id']}")
        return {}

    async def node_resume_text_loaded(self, state: MatchState):
        text = await self.store.read_resume_text(state["report_id"], state["owner"])
        return {"resume_text": text}

    async def node_match_invoked(self, state: MatchState):
        user_content = MATCH_USER_PROMPT.format(
            resume_text=state["resume_text"], job_description=state["job_description"]
        )
        return {"raw_reply": await self._complete(MATCH_SYSTEM_PROMPT, user_content)}

    async def node_match_normalized(self, state: MatchState):
        match = normalize_job_match(state["raw_reply"])
        logger.info(f"Job match analysis completed: {match.match_percentage}%")
        return {"match": match}

    async def node_merged(self, state: MatchState):
        await self.store.apply_job_match(
            state["report_id"], state["owner"], state["job_description"], state["match"]
        )
        return {}

    def _build_match_graph(self):
        g = StateGraph(MatchState)
        g.add_node("received", self.node_match_received)
        g.add_node("resume_text_loaded", self.node_resume_text_loaded)
        g.add_node("invoked", self.node_match_invoked)
        g.add_node("normalized", self.node_match_normalized)
        g.add_node("merged", self.node_merged)
        g.set_entry_point("received")
        g.add_edge("received", "resume_text_loaded")
        g.add_edge("resume_text_loaded", "invoked")
        g.add_edge("invoked", "normalized")
        g.add_edge("normalized", "merged")
        g.add_edge("merged", END)
        return g.compile()

    async def match_job(self, owner: str, report_id: str, job_description: str) -> JobMatchResult:
        state = await self.match_graph.ainvoke(
            {"owner": owner, "report_id": report_id, "job_description": job_description}
        )
        return state["match"]
