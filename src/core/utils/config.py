"""Process configuration for the GitHub-backed content store."""

import os

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities import parameters
from pydantic import BaseModel, Field, SecretStr

from core.utils.constants import (
    DEFAULT_BRANCH,
    DEFAULT_METADATA_FETCH_DEADLINE,
    DEFAULT_METADATA_FETCH_TIMEOUT,
    DEFAULT_METADATA_FETCH_WORKERS,
    ENV_GITHUB_API_URL,
    ENV_GITHUB_BRANCH,
    ENV_GITHUB_OWNER,
    ENV_GITHUB_RAW_URL,
    ENV_GITHUB_REPO,
    ENV_GITHUB_TOKEN,
    ENV_GITHUB_TOKEN_SECRET_NAME,
    ENV_METADATA_FETCH_DEADLINE,
    ENV_METADATA_FETCH_TIMEOUT,
    ENV_METADATA_FETCH_WORKERS,
    GITHUB_API_URL,
    GITHUB_RAW_URL,
)

logger = Logger(utc=True)


class GitHubSettings(BaseModel):
    """Owner/repository/branch triple plus transport tuning."""

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    branch: str = Field(DEFAULT_BRANCH, min_length=1)
    token: SecretStr | None = None

    api_url: str = GITHUB_API_URL
    raw_url: str = GITHUB_RAW_URL

    metadata_fetch_timeout: float = Field(DEFAULT_METADATA_FETCH_TIMEOUT, gt=0)
    metadata_fetch_workers: int = Field(DEFAULT_METADATA_FETCH_WORKERS, ge=1)
    metadata_fetch_deadline: float = Field(DEFAULT_METADATA_FETCH_DEADLINE, gt=0)

    @classmethod
    def from_env(cls) -> "GitHubSettings":
        """Build settings from environment variables.

        Raises:
            RuntimeError: If the owner or repository is not configured
        """
        owner = os.getenv(ENV_GITHUB_OWNER)
        repo = os.getenv(ENV_GITHUB_REPO)

        if not owner:
            raise RuntimeError(f"{ENV_GITHUB_OWNER} environment variable is not set")
        if not repo:
            raise RuntimeError(f"{ENV_GITHUB_REPO} environment variable is not set")

        token = resolve_github_token()

        return cls(
            owner=owner,
            repo=repo,
            branch=os.getenv(ENV_GITHUB_BRANCH) or DEFAULT_BRANCH,
            token=SecretStr(token) if token else None,
            api_url=(os.getenv(ENV_GITHUB_API_URL) or GITHUB_API_URL).rstrip("/"),
            raw_url=(os.getenv(ENV_GITHUB_RAW_URL) or GITHUB_RAW_URL).rstrip("/"),
            metadata_fetch_timeout=float(
                os.getenv(ENV_METADATA_FETCH_TIMEOUT) or DEFAULT_METADATA_FETCH_TIMEOUT
            ),
            metadata_fetch_workers=int(
                os.getenv(ENV_METADATA_FETCH_WORKERS) or DEFAULT_METADATA_FETCH_WORKERS
            ),
            metadata_fetch_deadline=float(
                os.getenv(ENV_METADATA_FETCH_DEADLINE) or DEFAULT_METADATA_FETCH_DEADLINE
            ),
        )

    def raw_file_url(self, path: str) -> str:
        """Public URL serving ``path`` from the configured branch."""
        return f"{self.raw_url}/{self.owner}/{self.repo}/{self.branch}/{path}"


def resolve_github_token() -> str | None:
    """Return the GitHub API token.

    ``GITHUB_TOKEN`` wins when set. Otherwise, if ``GITHUB_TOKEN_SECRET_NAME``
    names a Secrets Manager secret, its value is fetched (and cached) through
    the powertools parameters utility. Public repositories work without one.
    """
    token = os.getenv(ENV_GITHUB_TOKEN)
    if token:
        return token

    secret_name = os.getenv(ENV_GITHUB_TOKEN_SECRET_NAME)
    if not secret_name:
        logger.debug("No GitHub token configured; using unauthenticated requests")
        return None

    logger.debug("Fetching GitHub token from Secrets Manager", extra={"secret_name": secret_name})
    secret = parameters.get_secret(secret_name)
    if isinstance(secret, bytes):
        return secret.decode("utf-8")
    return str(secret)
