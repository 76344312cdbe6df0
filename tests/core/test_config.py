import boto3
import pytest
from moto import mock_aws

from core.utils.config import GitHubSettings, resolve_github_token


class TestGitHubSettings:
    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_BRANCH", "gallery")
        monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3/")
        monkeypatch.setenv("METADATA_FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("METADATA_FETCH_WORKERS", "3")
        monkeypatch.setenv("METADATA_FETCH_DEADLINE", "12")

        settings = GitHubSettings.from_env()

        assert settings.owner == "gallery-owner"
        assert settings.repo == "gallery-repo"
        assert settings.branch == "gallery"
        assert settings.api_url == "https://github.example.com/api/v3"
        assert settings.metadata_fetch_timeout == 2.5
        assert settings.metadata_fetch_workers == 3
        assert settings.metadata_fetch_deadline == 12.0
        assert settings.token is None

    def test_branch_defaults_to_main(self, monkeypatch) -> None:
        monkeypatch.delenv("GITHUB_BRANCH")

        assert GitHubSettings.from_env().branch == "main"

    @pytest.mark.parametrize("missing", ["GITHUB_OWNER", "GITHUB_REPO"])
    def test_missing_required_variable(self, monkeypatch, missing) -> None:
        monkeypatch.delenv(missing)

        with pytest.raises(RuntimeError, match=missing):
            GitHubSettings.from_env()

    def test_token_is_secret(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_plain")

        settings = GitHubSettings.from_env()

        assert settings.token is not None
        assert settings.token.get_secret_value() == "ghp_plain"
        assert "ghp_plain" not in repr(settings)

    def test_raw_file_url(self, github_settings) -> None:
        assert github_settings.raw_file_url("images/a.png") == (
            "https://raw.githubusercontent.com/gallery-owner/gallery-repo/main/images/a.png"
        )


class TestResolveGitHubToken:
    def test_no_token_configured(self) -> None:
        assert resolve_github_token() is None

    def test_env_token_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        monkeypatch.setenv("GITHUB_TOKEN_SECRET_NAME", "gallery/github-token")

        assert resolve_github_token() == "ghp_env"

    def test_token_from_secrets_manager(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN_SECRET_NAME", "gallery/github-token")

        with mock_aws():
            client = boto3.client("secretsmanager", region_name="us-east-1")
            client.create_secret(Name="gallery/github-token", SecretString="ghp_from_secret")

            assert resolve_github_token() == "ghp_from_secret"
