"""
Centralized configuration for the NicheScope analysis server.

Loads all environment variables and provides typed configuration objects.
API credentials are NOT read from the environment - the model and
platform keys are supplied per session by the client.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class LLMConfig:
    """LLM provider configuration - supports Gemini (default) and Azure OpenAI."""

    provider: str = field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "gemini"))
    max_tokens: int = field(default_factory=lambda: int(
        os.getenv("LLM_MAX_TOKENS", "8192")))
    timeout: int = field(default_factory=lambda: int(
        os.getenv("LLM_TIMEOUT", "120")))

    # Gemini configuration
    gemini_model: str = field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))

    # Azure OpenAI configuration (the API key comes from the session)
    azure_openai_endpoint: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT"))
    azure_openai_api_version: str = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_API_VERSION", "2024-08-01-preview"))
    azure_openai_deployment_name: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_DEPLOYMENT"))


@dataclass
class YouTubeConfig:
    """YouTube Data API v3 configuration for ground-truth enrichment."""

    base_url: str = field(default_factory=lambda: os.getenv(
        "YOUTUBE_API_BASE_URL", "https://www.googleapis.com/youtube/v3"))
    timeout: float = field(default_factory=lambda: float(
        os.getenv("YOUTUBE_TIMEOUT", "15")))
    # playlistItems.list caps maxResults at 50
    max_uploads: int = field(default_factory=lambda: min(int(
        os.getenv("YOUTUBE_MAX_UPLOADS", "50")), 50))


@dataclass
class AnalysisConfig:
    """Knobs for prompt construction and enrichment eligibility."""

    # Number of recent videos embedded verbatim as ground truth
    ground_truth_excerpt_size: int = field(default_factory=lambda: int(
        os.getenv("GROUND_TRUTH_EXCERPT_SIZE", "15")))
    # Number of z-score outliers sent with their thumbnails
    top_outlier_count: int = field(default_factory=lambda: int(
        os.getenv("TOP_OUTLIER_COUNT", "5")))
    # Queries longer than this are treated as channel names, not topics
    channel_name_min_length: int = field(default_factory=lambda: int(
        os.getenv("CHANNEL_NAME_MIN_LENGTH", "20")))


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("SERVER_PORT", "8001")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )
    # In-memory sessions kept before the least recently used is evicted
    max_sessions: int = field(default_factory=lambda: int(
        os.getenv("MAX_SESSIONS", "1000")))


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        model_name = config.llm.gemini_model
        uploads = config.youtube.max_uploads
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings/errors.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if self.llm.provider not in ("gemini", "azure_openai"):
            warnings.append(
                f"Unknown LLM_PROVIDER '{self.llm.provider}' - analyses will fail")

        if self.llm.provider == "azure_openai":
            if not self.llm.azure_openai_endpoint:
                warnings.append("AZURE_OPENAI_ENDPOINT not set - LLM calls will fail")
            if not self.llm.azure_openai_deployment_name:
                warnings.append("AZURE_OPENAI_DEPLOYMENT not set - LLM calls will fail")

        if "*" in self.server.cors_origins and not self.server.debug:
            warnings.append("CORS_ORIGINS is '*' in production mode")

        return warnings


# Global config instance - import and use this
config = Config()
