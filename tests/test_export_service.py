import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from planner.models import Plan, Player, Round
from planner.services.export_service import export_plan_csv, plan_to_csv


def sample_plan() -> Plan:
    players = [Player(id=str(i), name=n) for i, n in enumerate(["Alice", "Bob", "Smith, Jr.", "Dora", "Eve"])]
    rounds = [
        Round(1, date(2026, 1, 5), tuple(players[:4])),
        Round(2, date(2026, 1, 12), tuple(players[1:])),
    ]
    return Plan(id="plan-1", players=players, rounds=rounds, number_of_rounds=2, created_at=datetime(2026, 1, 1))


class ExportServiceTests(unittest.TestCase):
    def test_csv_layout(self):
        lines = plan_to_csv(sample_plan()).splitlines()

        self.assertEqual(lines[0], "RoundNo,Date,Player1,Player2,Player3,Player4")
        self.assertEqual(lines[1], '1,2026-01-05,Alice,Bob,"Smith, Jr.",Dora')
        self.assertEqual(lines[2], '2,2026-01-12,Bob,"Smith, Jr.",Dora,Eve')
        self.assertEqual(len(lines), 3)

    def test_export_writes_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            export_dir = Path(tmp) / "build" / "tmp"
            file_path, content = export_plan_csv(sample_plan(), export_dir)

            self.assertTrue(file_path.exists())
            self.assertEqual(file_path.parent, export_dir)
            self.assertTrue(file_path.name.startswith("plan-"))
            self.assertEqual(file_path.read_text(encoding="utf-8"), content)
            self.assertEqual(list(export_dir.glob("*.tmp")), [])


if __name__ == "__main__":
    unittest.main()
