import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from planner.config import API_PREFIX, EXPORT_MEDIA_TYPE
from planner.errors import PlannerError
from planner.schemas import (
    PairingSchema,
    PairRoundsRequestSchema,
    PairRoundsSchema,
    PlanSchema,
    ScheduleConfigSchema,
    ScheduleStatsSchema,
)
from planner.services.export_service import export_plan_csv
from planner.services.schedule_mapper import (
    pairing_to_schema,
    plan_to_schema,
    schema_to_config,
    stats_to_schema,
)
from planner.services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)


def register_planner_routes(app: FastAPI, service: ScheduleService, export_dir: Path) -> None:
    @app.get(f"{API_PREFIX}/health")
    async def health():
        return {"status": "OK"}

    @app.post(f"{API_PREFIX}/generate", response_model=PlanSchema)
    async def generate(config: ScheduleConfigSchema):
        """
        Generates a schedule with minimal repetition of player groups.
        Invalid configurations surface as 400 through the PlannerError handler.
        """
        logger.info(
            "Received schedule generation request with %d players and %d rounds",
            len(config.playerNames),
            config.numberOfRounds,
        )
        try:
            plan = service.generate_schedule(schema_to_config(config))
        except PlannerError:
            raise
        except Exception as exc:
            logger.exception("Error generating schedule")
            raise HTTPException(status_code=500, detail=f"Error generating schedule: {exc}")
        return plan_to_schema(plan)

    @app.get(f"{API_PREFIX}/statistics", response_model=ScheduleStatsSchema)
    async def statistics():
        return stats_to_schema(service.statistics())

    @app.get(f"{API_PREFIX}/pairings", response_model=list[PairingSchema])
    async def pairings():
        return [pairing_to_schema(e) for e in service.all_pairings_sorted_by_frequency()]

    @app.get(f"{API_PREFIX}/player-usage")
    async def player_usage() -> dict[str, int]:
        return service.per_player_usage_counts()

    @app.get(f"{API_PREFIX}/plan", response_model=PlanSchema)
    async def last_plan():
        if service.last_plan is None:
            raise HTTPException(status_code=404, detail="No generated plan available")
        return plan_to_schema(service.last_plan)

    @app.get(f"{API_PREFIX}/download")
    async def download():
        """
        Returns the last plan as Excel-compatible CSV and keeps a copy in the export dir.
        """
        plan = service.last_plan
        if plan is None:
            raise HTTPException(status_code=404, detail="No generated plan available for download")
        try:
            file_path, content = export_plan_csv(plan, export_dir)
        except OSError as exc:
            logger.exception("Error writing CSV to export directory")
            raise HTTPException(status_code=500, detail=f"Could not write CSV file: {exc}")
        return PlainTextResponse(
            content,
            media_type=EXPORT_MEDIA_TYPE,
            headers={
                "Content-Disposition": f"attachment; filename={file_path.name}",
                "X-Server-File": str(file_path.resolve()),
            },
        )

    @app.post(f"{API_PREFIX}/pair-rounds", response_model=PairRoundsSchema)
    async def pair_rounds(request: PairRoundsRequestSchema):
        rounds = service.generate_pair_rounds(request.playerNames, request.numberOfRounds)
        return PairRoundsSchema(rounds=[[tuple(p) for p in r] for r in rounds])
