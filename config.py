"""Configuration settings for the CAPS starter-kit generator."""

# Load .env into os.environ so provider fallbacks (e.g. OPENAI_API_KEY) work
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    """Global settings for the generator.

    Settings can be overridden via environment variables with CAPS_ prefix.
    Example: CAPS_MAX_CONCURRENCY=5
    """

    # API keys (env: CAPS_<KEY> or the provider's standard env var)
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (env: CAPS_OPENAI_API_KEY or OPENAI_API_KEY)",
    )
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (env: CAPS_ANTHROPIC_API_KEY or ANTHROPIC_API_KEY)",
    )
    google_api_key: str = Field(
        default="",
        description="Google/Gemini API key (env: CAPS_GOOGLE_API_KEY or GOOGLE_API_KEY)",
    )

    # Model config
    openai_model: str = Field(default="gpt-4o-mini", description="Primary OpenAI model")
    openai_simple_model: str = Field(
        default="",
        description="Cheaper OpenAI model for rules/checklist; empty means use the primary",
    )
    anthropic_model: str = Field(default="claude-sonnet-4-20250514", description="Primary Anthropic model")
    anthropic_simple_model: str = Field(
        default="",
        description="Cheaper Anthropic model for rules/checklist; empty means use the primary",
    )
    gemini_model: str = Field(default="gemini-2.0-flash", description="Primary Gemini model")
    gemini_simple_model: str = Field(
        default="",
        description="Cheaper Gemini model for rules/checklist; empty means use the primary",
    )
    max_tokens_per_call: int = Field(
        default=4096,
        description="Maximum tokens per individual model call"
    )

    # Orchestration
    max_concurrency: int = Field(
        default=3,
        ge=1,
        description="Maximum number of model calls in flight per request"
    )
    cache_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="How long a generated document stays cached"
    )

    # Paths
    templates_dir: str = Field(
        default="./templates",
        description="Directory holding the static rule files (rules/*.mdc)"
    )
    output_dir: str = Field(
        default="./outputs",
        description="Where the CLI writes generated archives"
    )
    archive_prefix: str = Field(
        default="cursor-starter-kit",
        description="Filename prefix for downloaded archives"
    )

    # Server
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=8000, description="HTTP port")
    log_level: str = Field(default="INFO", description="Root log level")

    model_config = {
        "env_prefix": "CAPS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. OPENAI_API_KEY) not in schema
    }

    def get_templates_path(self) -> Path:
        """Get templates path as Path object."""
        return Path(self.templates_dir)

    def get_output_path(self) -> Path:
        """Get output path as Path object."""
        return Path(self.output_dir)


# Create singleton instance
settings = Settings()
