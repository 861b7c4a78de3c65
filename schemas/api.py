"""
Pydantic schemas for the HTTP surface.

Defines the request/response bodies exchanged with the dashboard.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schemas.analysis import AnalysisResult, DeepVideoReport
from services.query_classifier import QueryKind


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class CredentialsRequest(_ApiModel):
    """
    Request schema for PUT /sessions/{session_id}/credentials.

    Keys are held in process memory for the lifetime of the session only.
    """

    model_api_key: str = Field(
        ...,
        description="API key for the generative model",
        min_length=1,
        max_length=512,
    )

    platform_api_key: Optional[str] = Field(
        default=None,
        description="Optional YouTube Data API key enabling ground-truth enrichment",
        max_length=512,
    )


class CredentialsResponse(_ApiModel):
    session_id: str
    has_platform_key: bool


class AnalyzeRequest(_ApiModel):
    """Request schema for POST /sessions/{session_id}/analyze."""

    query: str = Field(
        ...,
        description="Channel name, handle, channel URL, topic keyword or video URL",
        min_length=1,
        max_length=2000,
        examples=["@ExampleChannel", "Stoicism", "https://youtu.be/abc123"],
    )


class AnalyzeResponse(_ApiModel):
    """
    Response schema for POST /sessions/{session_id}/analyze.

    Exactly one of analysis / video_report is set, matching kind.
    """

    kind: QueryKind
    analysis: Optional[AnalysisResult] = None
    video_report: Optional[DeepVideoReport] = None


class DrillDownRequest(_ApiModel):
    """Request schema for POST /sessions/{session_id}/channels/drill-down."""

    channel_name: str = Field(
        ...,
        description="Display name of the channel to investigate",
        min_length=1,
        max_length=500,
    )


class HealthResponse(_ApiModel):
    status: str
    version: str
    llm_provider: str
