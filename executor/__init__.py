"""
Executor module initialization.

This module contains the core orchestration logic: request building,
model invocation and response sanitization.
"""

from executor.execute import (
    AnalysisFailedError,
    AnalysisOrchestrator,
    MissingCredentialsError,
    SessionContext,
    run_channel_drill_down,
    run_general_or_niche_analysis,
    run_query,
    run_video_forensics,
)
from executor.request_builder import ModelRequest, ModelRequestBuilder

__all__ = [
    "AnalysisFailedError",
    "AnalysisOrchestrator",
    "MissingCredentialsError",
    "SessionContext",
    "run_channel_drill_down",
    "run_general_or_niche_analysis",
    "run_query",
    "run_video_forensics",
    "ModelRequest",
    "ModelRequestBuilder",
]
