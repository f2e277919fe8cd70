import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .api import health
from .config import ConfigError, get_settings
from .services import fleet_monitor
from .services.scheduler import PollingScheduler

logger = logging.getLogger("fleetwatch")

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    monitor = fleet_monitor.get_fleet_monitor()
    scheduler = PollingScheduler(monitor, settings.poll_interval)
    scheduler.start()
    try:
        yield
    finally:
        scheduler.stop(timeout=settings.command_timeout)
        monitor.notifier.close()


app = FastAPI(title="Fleetwatch", lifespan=lifespan)

app.include_router(health.router, tags=["health"])


def run() -> None:
    configure_logging()
    try:
        settings = get_settings()
    except ConfigError as exc:
        logger.critical("%s", exc)
        sys.exit(1)

    # uvicorn exits the process if the port cannot be bound
    uvicorn.run(app, host="0.0.0.0", port=settings.http_port, log_level="info")


if __name__ == "__main__":
    run()
