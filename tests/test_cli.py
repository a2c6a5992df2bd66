from datetime import date

import pandas as pd
from typer.testing import CliRunner

from medsched.cli import _moment_for, app

runner = CliRunner()


class TestPlan:
    def test_resolves_against_taken_slots(self):
        result = runner.invoke(
            app, ["plan", "--doses", "1", "--day", "Monday", "--time", "09:00", "--taken", "Monday-09:00"]
        )
        assert result.exit_code == 0, result.output
        assert "Adjusted to: 09:10" in result.output
        assert "09:10" in result.output

    def test_invalid_time_exits_with_error(self):
        result = runner.invoke(app, ["plan", "--doses", "1", "--day", "Monday", "--time", "9-30"])
        assert result.exit_code == 1
        assert "Invalid time format" in result.output

    def test_csv_out(self, tmp_path):
        out = tmp_path / "schedule.csv"
        result = runner.invoke(
            app,
            ["plan", "--doses", "2", "--day", "Friday", "--time", "08:00", "--time", "08:00", "--csv-out", str(out)],
        )
        assert result.exit_code == 0, result.output
        df = pd.read_csv(out)
        assert list(df["time"]) == ["08:00", "08:10"]


class TestCheck:
    def test_due_dose_prints_reminder(self):
        result = runner.invoke(
            app,
            ["check", "--doses", "1", "--day", "Wednesday", "--time", "14:30", "--on", "WEDNESDAY", "--at", "14:30",
             "--name", "aspirin"],
        )
        assert result.exit_code == 0, result.output
        assert "time to take your medicine: aspirin at 14:30" in result.output

    def test_no_due_dose(self):
        result = runner.invoke(
            app, ["check", "--doses", "1", "--day", "Wednesday", "--time", "14:30", "--on", "Thursday", "--at", "14:30"]
        )
        assert result.exit_code == 0, result.output
        assert "No doses due" in result.output

    def test_moment_for_picks_matching_weekday(self):
        # 2026-10-18 is a Sunday
        moment = _moment_for("wednesday", "7:05", today=date(2026, 10, 18))
        assert (moment.year, moment.month, moment.day, moment.hour, moment.minute) == (2026, 10, 21, 7, 5)


class TestRun:
    def test_exit_immediately(self):
        result = runner.invoke(app, ["run"], input="8\n")
        assert result.exit_code == 0, result.output
        assert "Goodbye" in result.output

    def test_add_then_view(self):
        keys = "\n".join(["1", "1", "Aspirin", "1", "1", "Monday", "09:00", "2", "7", "aspirin", "8"]) + "\n"
        result = runner.invoke(app, ["run"], input=keys)
        assert result.exit_code == 0, result.output
        assert "- aspirin" in result.output
        assert "(added " in result.output
        assert "09:00" in result.output

    def test_unknown_medicine_is_reported(self):
        result = runner.invoke(app, ["run"], input="4\nibuprofen\n8\n")
        assert result.exit_code == 0, result.output
        assert "ibuprofen" in result.output
