"""
Runtime settings for the model service, record store and identity provider
"""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator

from resume_analyzer.utils.exceptions import ConfigurationError

DEFAULT_LLM_BASE_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_LLM_MODEL = "google/gemini-2.5-flash"


class LLMSettings(BaseModel):
    """Chat-completion service configuration"""
    model_name: str = Field(default=DEFAULT_LLM_MODEL, description="Model identifier sent with every request")
    base_url: str = Field(default=DEFAULT_LLM_BASE_URL, description="OpenAI-compatible API base URL")
    api_key: Optional[str] = Field(default=None, description="Bearer credential for the model service")
    timeout: int = Field(default=120, ge=1, le=600, description="Transport timeout in seconds")

    @validator('base_url')
    def strip_trailing_slash(cls, v):
        if not v or not v.strip():
            raise ValueError('base_url cannot be empty')
        return v.strip().rstrip('/')


class StoreSettings(BaseModel):
    """MongoDB connection configuration"""
    mongo_details: Optional[str] = Field(default=None, description="MongoDB connection string")
    db_name: str = Field(default="resume_analyzer", description="Database name")
    reports_collection: str = Field(default="reports", description="Collection holding Report documents")

    def require_connection(self) -> str:
        if not self.mongo_details:
            raise ConfigurationError("MONGO_DETAILS is not configured", config_key="MONGO_DETAILS")
        return self.mongo_details


class AuthSettings(BaseModel):
    """Identity provider configuration"""
    auth_url: Optional[str] = Field(default=None, description="Identity provider base URL, e.g. https://<project>.supabase.co/auth/v1")
    api_key: Optional[str] = Field(default=None, description="Public API key sent alongside the caller token")
    timeout: int = Field(default=10, ge=1, le=120, description="Transport timeout in seconds")


class AppSettings(BaseModel):
    """Complete service configuration, resolved once and passed to the pipeline"""
    llm: LLMSettings = Field(default_factory=LLMSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    min_content_chars: int = Field(default=50, ge=1, description="Minimum non-whitespace characters before a model call")


def load_settings() -> AppSettings:
    """Build settings from the process environment (and .env, when present)"""
    load_dotenv()

    llm = LLMSettings(
        model_name=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
        base_url=os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
        api_key=os.getenv("LLM_API_KEY") or None,
        timeout=int(os.getenv("LLM_TIMEOUT", "120")),
    )
    store = StoreSettings(
        mongo_details=os.getenv("MONGO_DETAILS") or None,
        db_name=os.getenv("DB_NAME", "resume_analyzer"),
    )
    auth = AuthSettings(
        auth_url=os.getenv("AUTH_URL") or None,
        api_key=os.getenv("AUTH_API_KEY") or None,
    )
    return AppSettings(llm=llm, store=store, auth=auth)
