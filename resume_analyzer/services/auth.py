"""
Bearer credential verification against the external identity provider
"""
from typing import Optional

import requests

from resume_analyzer.models.settings import AuthSettings
from resume_analyzer.utils.exceptions import Unauthorized, ConfigurationError
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)


def bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header"""
    if not authorization:
        raise Unauthorized("Missing authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Authorization header must be a bearer token")
    return token.strip()


class TokenVerifier:
    """Resolves a caller token to the owner id by asking the provider's /user endpoint."""

    def __init__(self, settings: AuthSettings, session: requests.Session = None):
        self.settings = settings
        self.session = session or requests.Session()

    def close(self):
        self.session.close()

    def verify(self, token: str) -> str:
        if not self.settings.auth_url:
            raise ConfigurationError("AUTH_URL is not configured", config_key="AUTH_URL")

        headers = {"Authorization": f"Bearer {token}"}
        if self.settings.api_key:
            headers["apikey"] = self.settings.api_key

        try:
            resp = self.session.get(
                f"{self.settings.auth_url.rstrip('/')}/user",
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise Unauthorized("Unauthorized", cause=e) from e

        if not resp.ok:
            logger.warning(f"Identity provider rejected token: {resp.status_code}")
            raise Unauthorized()

        try:
            data = resp.json()
        except ValueError as e:
            raise Unauthorized(cause=e) from e
        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            raise Unauthorized()
        return str(user_id)
