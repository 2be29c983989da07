"""Settings read from the environment, optionally seeded from a .env file."""

import logging
import os

from dotenv import load_dotenv

__all__ = ["ConfigService"]

_log = logging.getLogger(__name__)


class ConfigService:
    """Access to the environment variables the catalog uses."""

    def __init__(self) -> None:
        if not load_dotenv():
            _log.info(".env file not found, defaulting to environment variables")

    def get(self, env_var: str) -> str:
        return os.environ.get(env_var, "")

    def github_org(self) -> str:
        return self.get("GITHUB_ORG") or "motain"

    def github_token(self) -> str:
        return self.get("GITHUB_TOKEN")

    def github_user(self) -> str:
        return self.get("GITHUB_USER")

    def compass_token(self) -> str:
        return self.get("COMPASS_TOKEN")

    def compass_host(self) -> str:
        return self.get("COMPASS_HOST")

    def compass_cloud_id(self) -> str:
        return self.get("COMPASS_CLOUD_ID")

    def prometheus_url(self) -> str:
        return self.get("PROMETHEUS_URL")

    def aws_region(self) -> str:
        return self.get("AWS_REGION") or "eu-west-1"

    def aws_role(self) -> str:
        return self.get("AWS_ROLE")