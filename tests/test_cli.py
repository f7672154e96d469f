"""Tests for the schedule inspection CLI."""

from booking_engine.cli import main
from tests.conftest import make_schedule


class TestSlotsCommand:
    def test_default_schedule_weekday(self, capsys):
        assert main(["slots", "--date", "2026-10-19"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "09:00"
        assert lines[-1] == "17:30"
        assert len(lines) == 18

    def test_default_schedule_sunday_closed(self, capsys):
        assert main(["slots", "--date", "2026-10-18"]) == 0
        assert capsys.readouterr().out.strip() == "Closed on 2026-10-18"

    def test_duration_shows_end(self, capsys):
        assert main(["slots", "--date", "2026-10-24", "--duration", "45"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "09:00-09:45"
        assert lines[-1] == "13:30-14:15"

    def test_schedule_file(self, tmp_path, capsys):
        path = tmp_path / "schedule.json"
        path.write_text(make_schedule("22:00", "23:59", slot=60).model_dump_json())
        assert main(["slots", "--schedule", str(path), "--date", "2026-10-19",
                     "--duration", "180"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "22:00-(past midnight)", "23:00-(past midnight)",
        ]

    def test_missing_file(self, tmp_path):
        assert main(["slots", "--schedule", str(tmp_path / "nope.json"),
                     "--date", "2026-10-19"]) == 1

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text('{"slot_duration_minutes": 0}')
        assert main(["slots", "--schedule", str(path), "--date", "2026-10-19"]) == 1
