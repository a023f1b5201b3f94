import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from planner.errors import PlannerError
from planner.logging_setup import setup_logging
from planner.routes_planner import register_planner_routes
from planner.schemas import ErrorSchema
from planner.services.planner_config_service import PlannerSettings, load_planner_settings
from planner.services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)


def create_service(settings: PlannerSettings) -> ScheduleService:
    return ScheduleService(settings.algorithm, settings.generator_settings())


def create_app(settings: PlannerSettings | None = None) -> tuple[FastAPI, ScheduleService]:
    meta = {"source": "argument", "error": None}
    if settings is None:
        settings, meta = load_planner_settings()
    setup_logging(settings.log_level)
    if meta.get("error"):
        logger.warning("Planner config %s ignored: %s", meta.get("path"), meta.get("error"))

    app = FastAPI(title="Schedule Planner")
    service = create_service(settings)

    @app.exception_handler(PlannerError)
    async def planner_error_handler(request: Request, exc: PlannerError):
        logger.error("Validation error: %s", exc)
        body = ErrorSchema(error=str(exc), type=type(exc).__name__, timestamp=int(time.time() * 1000))
        return JSONResponse(status_code=400, content=body.model_dump())

    register_planner_routes(app, service, Path(settings.export_dir))
    logger.info("Planner ready (algorithm=%s)", settings.algorithm.value)
    return app, service
