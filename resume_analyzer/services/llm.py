"""
Chat-completion client for the external model service
"""
import requests

from resume_analyzer.models.settings import LLMSettings
from resume_analyzer.utils.exceptions import ModelInvocationError
from resume_analyzer.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)

# how much of an upstream error body is kept in messages and logs
ERROR_BODY_LIMIT = 500


class ModelInvoker:
    """Sends one role-structured prompt per call and returns the raw reply text.

    No retries happen here; the caller decides what to do with a failure.
    """

    def __init__(self, settings: LLMSettings, session: requests.Session = None):
        self.settings = settings
        self.session = session or requests.Session()

    def close(self):
        self.session.close()

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url}/chat/completions"

    def build_payload(self, system_prompt: str, user_content: str, response_format: str = "json_object") -> dict:
        return {
            "model": self.settings.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "response_format": {"type": response_format},
        }

    def complete(self, system_prompt: str, user_content: str, response_format: str = "json_object") -> str:
        model = self.settings.model_name
        if not self.settings.api_key:
            raise ModelInvocationError("LLM_API_KEY is not configured", model_name=model)

        payload = self.build_payload(system_prompt, user_content, response_format)
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"Calling model {model} ({len(user_content)} chars of user content)")
        with PerformanceMonitor(f"model call {model}", logger, threshold_ms=30000):
            try:
                resp = self.session.post(
                    self.endpoint,
                    json=payload,
                    headers=headers,
                    timeout=self.settings.timeout,
                )
            except requests.RequestException as e:
                raise ModelInvocationError(f"AI request failed: {e}", model_name=model, cause=e) from e

        if not resp.ok:
            body = (resp.text or "")[:ERROR_BODY_LIMIT]
            logger.error(f"AI API error: {resp.status_code} {body}")
            raise ModelInvocationError(
                f"AI analysis failed: {resp.status_code}",
                model_name=model,
                upstream_status=resp.status_code,
                details={"upstream_body": body},
            )

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ModelInvocationError(
                "AI response did not contain a completion message",
                model_name=model,
                upstream_status=resp.status_code,
                cause=e,
            ) from e

        if not isinstance(content, str):
            raise ModelInvocationError(
                "AI completion content was not text",
                model_name=model,
                upstream_status=resp.status_code,
            )
        return content
