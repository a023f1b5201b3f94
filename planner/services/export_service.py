import logging
import time
from pathlib import Path

import pandas as pd

from planner.models import Plan
from planner.repositories.file_store import atomic_write_text

logger = logging.getLogger(__name__)


def plan_to_frame(plan: Plan) -> pd.DataFrame:
    width = max((r.size for r in plan.rounds), default=0)
    columns = ["RoundNo", "Date"] + [f"Player{i}" for i in range(1, width + 1)]
    rows = []
    for r in plan.rounds:
        names = [p.name for p in r.selected_players]
        names += [""] * (width - len(names))
        rows.append([r.round_no, r.round_date.isoformat()] + names)
    return pd.DataFrame(rows, columns=columns)


def plan_to_csv(plan: Plan) -> str:
    return plan_to_frame(plan).to_csv(index=False, lineterminator="\n")


def export_plan_csv(plan: Plan, export_dir: Path) -> tuple[Path, str]:
    """Writes the plan as CSV under export_dir and returns (file path, content)."""
    content = plan_to_csv(plan)
    file_path = Path(export_dir) / f"plan-{int(time.time() * 1000)}.csv"
    atomic_write_text(file_path, content)
    logger.info("Exported plan %s to %s", plan.id, file_path)
    return file_path, content
