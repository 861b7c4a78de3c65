"""
NicheScope Server - FastAPI Application

This is the main entry point for the analysis server consumed by the
dashboard. Business logic is delegated to the executor module - this file
only handles:
- API routing
- Request/response handling
- Session state (credentials and last results)
- Middleware configuration
- Health checks
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from config import config
from executor.execute import (
    GENERIC_FAILURE_MESSAGE,
    AnalysisFailedError,
    MissingCredentialsError,
    SessionContext,
    run_channel_drill_down,
    run_query,
)
from memory.session_store import SessionState, SessionStore
from schemas.analysis import AnalysisResult, ChannelDrillDown
from schemas.api import (
    AnalyzeRequest,
    AnalyzeResponse,
    CredentialsRequest,
    CredentialsResponse,
    DrillDownRequest,
    HealthResponse,
)
from services.query_classifier import QueryKind

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.server.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Process-wide session store, lifecycle = app start to app close
session_store = SessionStore()


def get_session_store() -> SessionStore:
    return session_store


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler for startup/shutdown events.

    Validates configuration on startup and forgets all sessions on shutdown.
    """
    # Startup
    logger.info("Starting NicheScope Server...")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(f"Config warning: {warning}")

    logger.info(f"Server configured for {config.llm.provider} LLM provider")
    logger.info(f"Debug mode: {config.server.debug}")

    yield

    # Shutdown
    logger.info("Shutting down NicheScope Server...")
    session_store.clear()


# Initialize FastAPI application
app = FastAPI(
    title="NicheScope Server",
    description="YouTube niche, outlier and copy-detection analysis backed by a generative model",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if config.server.debug else None,
    redoc_url="/redoc" if config.server.debug else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


def _require_session(store: SessionStore, session_id: str) -> SessionState:
    state = store.get(session_id)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No credentials stored for this session"
        )
    return state


def _failure_to_http(e: AnalysisFailedError) -> HTTPException:
    if isinstance(e, MissingCredentialsError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=GENERIC_FAILURE_MESSAGE
    )


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns:
        HealthResponse with server status
    """
    return HealthResponse(
        status="healthy",
        version=VERSION,
        llm_provider=config.llm.provider
    )


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "service": "NicheScope Server",
        "version": VERSION,
        "docs": "/docs" if config.server.debug else "Disabled in production"
    }


# =============================================================================
# Session Credentials
# =============================================================================

@app.put(
    "/sessions/{session_id}/credentials",
    response_model=CredentialsResponse,
    tags=["Session"]
)
async def put_credentials(
    session_id: str,
    request: CredentialsRequest,
    store: SessionStore = Depends(get_session_store),
) -> CredentialsResponse:
    """
    Store the model key (and optional platform key) for a session.

    Keys are held in process memory only.
    """
    context = SessionContext(
        model_api_key=request.model_api_key,
        platform_api_key=request.platform_api_key or None,
    )
    store.set_credentials(session_id, context)
    return CredentialsResponse(
        session_id=session_id,
        has_platform_key=context.platform_api_key is not None
    )


@app.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Session"]
)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> None:
    """Forget a session's credentials and results."""
    if not store.delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown session"
        )


# =============================================================================
# Analysis
# =============================================================================

@app.post(
    "/sessions/{session_id}/analyze",
    response_model=AnalyzeResponse,
    tags=["Analysis"]
)
async def analyze(
    session_id: str,
    request: AnalyzeRequest,
    store: SessionStore = Depends(get_session_store),
) -> AnalyzeResponse:
    """
    Main analysis endpoint.

    Video URLs produce a forensic video report; any other query produces a
    general/niche analysis, grounded on platform data when possible.

    Raises:
        HTTPException: 401 without credentials, 502 if the analysis failed
    """
    state = _require_session(store, session_id)
    logger.info(
        f"Analyze request: session={session_id}, "
        f"query_length={len(request.query)}"
    )

    try:
        kind, result = await run_query(request.query.strip(), state.context)
    except AnalysisFailedError as e:
        logger.warning(f"Analysis failed for session={session_id}: {e}")
        raise _failure_to_http(e)

    if kind is QueryKind.VIDEO_REFERENCE:
        store.store_video_report(session_id, result)
        return AnalyzeResponse(kind=kind, video_report=result)

    store.store_analysis(session_id, result)
    logger.info(
        f"Analyze completed: session={session_id}, "
        f"source={result.data_source.value}, videos={len(result.videos)}"
    )
    return AnalyzeResponse(kind=kind, analysis=result)


@app.post(
    "/sessions/{session_id}/channels/drill-down",
    response_model=ChannelDrillDown,
    tags=["Analysis"]
)
async def channel_drill_down(
    session_id: str,
    request: DrillDownRequest,
    store: SessionStore = Depends(get_session_store),
) -> ChannelDrillDown:
    """Competitive drill-down on one channel from an analysis."""
    state = _require_session(store, session_id)
    channel_name = request.channel_name.strip()

    try:
        result = await run_channel_drill_down(channel_name, state.context)
    except AnalysisFailedError as e:
        logger.warning(f"Drill-down failed for session={session_id}: {e}")
        raise _failure_to_http(e)

    store.store_drill_down(session_id, channel_name, result)
    return result


@app.get(
    "/sessions/{session_id}/result",
    response_model=AnalysisResult,
    tags=["Analysis"]
)
async def get_last_result(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> AnalysisResult:
    """Return the last successful general analysis of a session."""
    state = store.get(session_id)
    if state is None or state.last_analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No analysis stored for this session"
        )
    return state.last_analysis


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower()
    )
