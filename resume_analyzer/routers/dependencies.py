"""
FastAPI dependency wiring for settings, authentication and the pipeline

The HTTP clients and the compiled pipeline are built once per process and
released by ``close_shared_clients`` on shutdown.
"""
import functools
from typing import Optional

from fastapi import Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from resume_analyzer.models.settings import AppSettings, load_settings
from resume_analyzer.services.auth import TokenVerifier, bearer_token
from resume_analyzer.services.db import get_reports_collection
from resume_analyzer.services.llm import ModelInvoker
from resume_analyzer.services.pipeline import ResumePipeline
from resume_analyzer.services.report_store import ReportStore


@functools.lru_cache()
def get_settings() -> AppSettings:
    return load_settings()


@functools.lru_cache()
def get_model_invoker() -> ModelInvoker:
    return ModelInvoker(get_settings().llm)


@functools.lru_cache()
def get_token_verifier() -> TokenVerifier:
    return TokenVerifier(get_settings().auth)


async def get_current_owner(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> str:
    token = bearer_token(authorization)
    owner = await run_in_threadpool(verifier.verify, token)
    request.state.owner = owner
    return owner


def get_report_store(settings: AppSettings = Depends(get_settings)) -> ReportStore:
    return ReportStore(get_reports_collection(settings.store))


@functools.lru_cache()
def get_pipeline() -> ResumePipeline:
    settings = get_settings()
    store = ReportStore(get_reports_collection(settings.store))
    return ResumePipeline(settings, get_model_invoker(), store)


def close_shared_clients():
    """Close the cached HTTP sessions and forget the cached pipeline."""
    if get_model_invoker.cache_info().currsize:
        get_model_invoker().close()
    if get_token_verifier.cache_info().currsize:
        get_token_verifier().close()
    get_pipeline.cache_clear()
    get_model_invoker.cache_clear()
    get_token_verifier.cache_clear()
