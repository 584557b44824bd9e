"""
Prometheus Metrics Endpoint.

Exposes /metrics for Prometheus scraping:
- tool_executions_total, tool_execution_duration_seconds
- tool_approval_requests_total
- chat_turns_total, agent_loop_duration_seconds
"""

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics():
    """Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
