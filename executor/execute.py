"""
Main orchestration entry point for analysis requests.

This module coordinates, per request:
- Query classification (video URL vs. general query)
- Optional ground-truth enrichment from the YouTube Data API
- Model request construction and invocation
- Sanitization of the model output

Every request is independent: the orchestrator keeps no state after it
reports DONE or FAILED.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from clients.youtube_data import PlatformStatsClient
from executor.request_builder import ModelRequest, ModelRequestBuilder
from executor.sanitizer import (
    sanitize_analysis,
    sanitize_channel_drill_down,
    sanitize_video_report,
)
from llm import get_model_client
from schemas.analysis import AnalysisResult, ChannelDrillDown, DataSource, DeepVideoReport
from schemas.platform import PlatformChannelSnapshot
from services.query_classifier import QueryKind, classify_query, is_channel_reference

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Analysis failed. Check your API credentials and retry."


class AnalysisFailedError(Exception):
    """
    Opaque failure of an analysis request.

    Carries the same message whatever the cause. The underlying exception
    is chained and logged only.
    """

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)


class MissingCredentialsError(AnalysisFailedError):
    """Raised before any I/O when the session has no model key."""

    def __init__(self) -> None:
        super().__init__("A model API key is required to run an analysis.")


class OrchestrationState(str, Enum):
    """Per-request lifecycle."""
    IDLE = "idle"
    CLASSIFYING = "classifying"
    ENRICHING = "enriching"
    INVOKING = "invoking"
    SANITIZING = "sanitizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionContext:
    """
    Credentials for one session, passed explicitly into every request.

    Held in process memory only; never written to durable storage.
    """

    model_api_key: str
    platform_api_key: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"SessionContext(model_api_key=***, "
            f"platform_api_key={'***' if self.platform_api_key else None})"
        )


class AnalysisOrchestrator:
    """
    Core orchestrator for a single analysis request.

    Pipeline (strictly sequential, each stage awaited):
    1. Classify the query
    2. (general variant only) try platform enrichment, never fatal
    3. Build and invoke the model request
    4. Sanitize the model output
    """

    def __init__(
        self,
        context: SessionContext,
        builder: Optional[ModelRequestBuilder] = None,
    ) -> None:
        if not context.model_api_key:
            raise MissingCredentialsError()
        self.context = context
        self.builder = builder or ModelRequestBuilder()
        self.state = OrchestrationState.IDLE

    def _transition(self, state: OrchestrationState) -> None:
        logger.debug(f"Orchestration state: {self.state.value} -> {state.value}")
        self.state = state

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def classify(self, query: str) -> QueryKind:
        """Decide the analysis variant for a submitted query."""
        self._transition(OrchestrationState.CLASSIFYING)
        kind = classify_query(query)
        logger.debug(f"Query classified as {kind.value}")
        return kind

    async def _enrich(self, query: str) -> Optional[PlatformChannelSnapshot]:
        """
        Fetch a ground-truth snapshot for a channel-like query.

        Any failure is logged and swallowed: the analysis continues as a
        full simulation.
        """
        if not self.context.platform_api_key:
            logger.debug("No platform key in session, skipping enrichment")
            return None
        if not is_channel_reference(query):
            logger.debug(f"Query looks like a topic, skipping enrichment: {query!r}")
            return None

        self._transition(OrchestrationState.ENRICHING)
        try:
            async with PlatformStatsClient(self.context.platform_api_key) as client:
                channel_id = await client.resolve_channel_id(query)
                if not channel_id:
                    logger.info(f"No channel found for {query!r}, using simulation")
                    return None
                return await client.fetch_snapshot(channel_id)
        except Exception as e:
            logger.warning(f"YouTube API fetch failed, falling back to simulation: {e}")
            return None

    async def _invoke(self, request: ModelRequest) -> Any:
        """
        Call the model and parse its JSON.

        Raises:
            AnalysisFailedError: On client failure, empty text or bad JSON.
        """
        self._transition(OrchestrationState.INVOKING)
        try:
            client = get_model_client(self.context.model_api_key)
            text = await client.generate(request)
            if not text or not text.strip():
                raise ValueError("No data returned from model")
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError(f"Model returned {type(data).__name__}, expected object")
        except Exception as e:
            self._transition(OrchestrationState.FAILED)
            logger.error(f"{request.variant.value} analysis failed: {e}")
            raise AnalysisFailedError() from e

        return data

    # -------------------------------------------------------------------------
    # Variants
    # -------------------------------------------------------------------------

    async def run_general(self, query: str) -> AnalysisResult:
        """General or niche analysis, optionally grounded on platform data."""
        snapshot = await self._enrich(query)
        request = self.builder.build_general(query, snapshot)
        raw = await self._invoke(request)

        self._transition(OrchestrationState.SANITIZING)
        data_source = DataSource.PLATFORM if snapshot is not None else DataSource.SIMULATED
        result = sanitize_analysis(raw, snapshot, data_source=data_source)
        self._transition(OrchestrationState.DONE)
        return result

    async def run_video_forensics(self, video_reference: str) -> DeepVideoReport:
        """Forensic originality report for one video."""
        request = self.builder.build_video_forensics(video_reference)
        raw = await self._invoke(request)

        self._transition(OrchestrationState.SANITIZING)
        report = sanitize_video_report(raw, video_reference)
        self._transition(OrchestrationState.DONE)
        return report

    async def run_channel_drill_down(self, channel_name: str) -> ChannelDrillDown:
        """Competitive deep-dive on one channel."""
        request = self.builder.build_channel_drill_down(channel_name)
        raw = await self._invoke(request)

        self._transition(OrchestrationState.SANITIZING)
        drill_down = sanitize_channel_drill_down(raw)
        self._transition(OrchestrationState.DONE)
        return drill_down


# =============================================================================
# Public request functions
# =============================================================================

def _log_dispatch(kind: QueryKind, query: str, context: SessionContext) -> None:
    """Single log line for every analysis entry point."""
    if kind is QueryKind.VIDEO_REFERENCE:
        logger.info(f"Video forensics: reference={query}")
    else:
        logger.info(
            f"General analysis: query_length={len(query)}, "
            f"platform_key={'yes' if context.platform_api_key else 'no'}"
        )


async def run_general_or_niche_analysis(
    query: str,
    context: SessionContext,
) -> AnalysisResult:
    """
    Run a general/niche analysis.

    Resolves with a sanitized AnalysisResult even when enrichment fails;
    raises AnalysisFailedError only if the model call fails.
    """
    _log_dispatch(QueryKind.GENERAL, query, context)
    return await AnalysisOrchestrator(context).run_general(query)


async def run_video_forensics(
    video_reference: str,
    context: SessionContext,
) -> DeepVideoReport:
    """Run a single-video forensic analysis."""
    _log_dispatch(QueryKind.VIDEO_REFERENCE, video_reference, context)
    return await AnalysisOrchestrator(context).run_video_forensics(video_reference)


async def run_channel_drill_down(
    channel_name: str,
    context: SessionContext,
) -> ChannelDrillDown:
    """Run a competitive drill-down for one channel."""
    logger.info(f"Channel drill-down: channel={channel_name!r}")
    return await AnalysisOrchestrator(context).run_channel_drill_down(channel_name)


async def run_query(
    query: str,
    context: SessionContext,
) -> Tuple[QueryKind, Union[AnalysisResult, DeepVideoReport]]:
    """
    Classify a submitted query once and dispatch it.

    Video URLs go to forensics; everything else to the general analysis.

    Returns:
        Tuple of (query kind, sanitized result)
    """
    orchestrator = AnalysisOrchestrator(context)
    kind = orchestrator.classify(query)
    _log_dispatch(kind, query, context)

    if kind is QueryKind.VIDEO_REFERENCE:
        return kind, await orchestrator.run_video_forensics(query)
    return kind, await orchestrator.run_general(query)
