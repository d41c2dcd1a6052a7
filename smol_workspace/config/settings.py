from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smol_workspace.constants import ASSISTANT_INSTRUCTIONS, ASSISTANT_NAME, DEFAULT_MODEL

# Load .env once at module import — all BaseSettings subclasses will see the env vars
load_dotenv()


class OpenAISettings(BaseSettings):
    """OpenAI API settings. Env vars prefixed with OPENAI_."""

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    api_key: str  # required — fail fast if missing
    model: str = DEFAULT_MODEL
    base_url: str | None = None


class AssistantSettings(BaseSettings):
    """Remote assistant settings. Env vars prefixed with ASSISTANT_."""

    model_config = SettingsConfigDict(env_prefix="ASSISTANT_")

    name: str = ASSISTANT_NAME
    instructions: str = ASSISTANT_INSTRUCTIONS
    code_interpreter: bool = True
    poll_interval_ms: int = Field(1000, gt=0)
    max_retries: int = Field(3, ge=0)
    tool_mode: str = "read_write"

    @field_validator("tool_mode")
    @classmethod
    def _validate_tool_mode(cls, v: str) -> str:
        allowed = {"read_only", "read_write"}
        if v not in allowed:
            msg = f"ASSISTANT_TOOL_MODE must be one of {allowed} (got '{v}')"
            raise ValueError(msg)
        return v


class GitHubSettings(BaseSettings):
    """GitHub settings. Env vars prefixed with GITHUB_ (GITHUB_REPOSITORY, GITHUB_TOKEN)."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_")

    repository: str = ""  # "<owner>/<name>"; empty = must come from the CLI
    token: str = ""  # empty = unauthenticated requests
    api_url: str = "https://api.github.com"
    timeout_s: float = Field(30.0, gt=0)

    @field_validator("repository")
    @classmethod
    def _validate_repository(cls, v: str) -> str:
        if v and (v.count("/") != 1 or not all(v.split("/"))):
            msg = f"GITHUB_REPOSITORY must look like '<owner>/<name>' (got '{v}')"
            raise ValueError(msg)
        return v


class RunSettings(BaseSettings):
    """Run driver settings. Env vars prefixed with RUN_."""

    model_config = SettingsConfigDict(env_prefix="RUN_")

    max_cycles: int = Field(25, ge=1, le=1000)


class WorkspaceSettings(BaseSettings):
    """Local file tree settings. Env vars prefixed with WORKSPACE_."""

    model_config = SettingsConfigDict(env_prefix="WORKSPACE_")

    root: Path = Path(".")
    listing: str = "live"
    static_listing: str = "index.html"  # comma-separated, used when listing=static

    @field_validator("listing")
    @classmethod
    def _validate_listing(cls, v: str) -> str:
        allowed = {"live", "static"}
        if v not in allowed:
            msg = f"WORKSPACE_LISTING must be one of {allowed} (got '{v}')"
            raise ValueError(msg)
        return v

    @property
    def static_paths(self) -> list[str]:
        return [p.strip() for p in self.static_listing.split(",") if p.strip()]


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    run: RunSettings = Field(default_factory=RunSettings)
    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on missing required fields."""
    return Settings()
