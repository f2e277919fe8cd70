from typing import Optional

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from fleetwatch.models.report import CycleReport
from fleetwatch.services import fleet_monitor

router = APIRouter()

CHECK_COMPLETED_MESSAGE = "Health check completed. Check logs for details."


@router.get(
    "/checkhealth",
    response_class=PlainTextResponse,
    summary="Run a health check now",
)
def check_health() -> str:
    """
    Run one health probe pass over all configured hosts before answering.

    Findings are reported the same way as in the background loop (local log
    or Telegram); the response body only confirms that the pass finished.
    """
    fleet_monitor.get_fleet_monitor().run_health_check()
    return CHECK_COMPLETED_MESSAGE


@router.get(
    "/status",
    response_model=Optional[CycleReport],
    summary="Last health check result",
)
def last_status() -> Optional[CycleReport]:
    """Return the report of the most recent health pass, or null before the first one."""
    return fleet_monitor.get_fleet_monitor().last_report
