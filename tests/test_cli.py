"""Tests for CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from tradepnl.cli import app

runner = CliRunner()


@pytest.fixture
def export_file(tmp_path, sample_export_text):
    path = tmp_path / "history.csv"
    path.write_bytes(sample_export_text.encode("cp932"))
    return path


@pytest.fixture
def sell_only_file(tmp_path, csv_header):
    path = tmp_path / "sell_only.csv"
    lines = [csv_header, "2024/03/01,テスト銘柄,1234,東証,現物売,当日,特定,課税,100,1200,0,0,,"]
    path.write_bytes("\n".join(lines).encode("cp932"))
    return path


class TestCLI:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Realized P&L" in result.output

    @pytest.mark.parametrize("command", ["parse", "summary", "trades", "missing", "report"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    def test_bad_environment_setting(self, export_file):
        result = runner.invoke(app, ["parse", str(export_file)], env={"TRADEPNL_DISTRIBUTION_BUCKETS": "none"})
        assert result.exit_code == 1
        assert "TRADEPNL_DISTRIBUTION_BUCKETS" in result.output


class TestParseCommand:
    def test_counts(self, export_file):
        result = runner.invoke(app, ["parse", str(export_file)])
        assert result.exit_code == 0
        assert "Parse results" in result.output

    def test_no_header_fails(self, tmp_path):
        path = tmp_path / "notes.csv"
        path.write_text("hello\nworld", encoding="utf-8")
        result = runner.invoke(app, ["parse", str(path)])
        assert result.exit_code == 1
        assert "header row not found" in result.output


class TestTradesCommand:
    def test_json_output(self, export_file):
        result = runner.invoke(app, ["trades", str(export_file), "--format", "json"])
        assert result.exit_code == 0

        payload = json.loads(result.stdout)
        assert payload["missing_cost_symbols"] == []
        first, second = payload["trades"]
        assert first["symbol_code"] == "1234"
        assert first["realized_pnl"] == "19880"
        assert first["fees_estimated"] is False
        assert second["symbol_code"] == "5678"
        assert second["realized_pnl"] == "5000"
        assert second["fees_estimated"] is True

    def test_account_filter(self, export_file):
        result = runner.invoke(app, ["trades", str(export_file), "-f", "json", "--account", "NISA"])
        payload = json.loads(result.stdout)
        assert [t["symbol_code"] for t in payload["trades"]] == ["5678"]

    def test_positions_resolve_shortfall(self, sell_only_file, tmp_path):
        positions = tmp_path / "positions.json"
        positions.write_text(
            json.dumps([{"symbol_code": "1234", "quantity": 100, "avg_cost": 1000, "account_type": "特定"}]),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["trades", str(sell_only_file), "-f", "json", "-p", str(positions)])
        payload = json.loads(result.stdout)
        assert payload["trades"][0]["realized_pnl"] == "20000"
        assert payload["missing_cost_symbols"] == []

    def test_invalid_positions_file(self, sell_only_file, tmp_path):
        positions = tmp_path / "positions.json"
        positions.write_text('[{"symbol_code": "1234", "quantity": 0, "avg_cost": 1000}]', encoding="utf-8")
        result = runner.invoke(app, ["trades", str(sell_only_file), "-p", str(positions)])
        assert result.exit_code == 1

    def test_bad_date_option(self, export_file):
        result = runner.invoke(app, ["trades", str(export_file), "--from", "yesterday"])
        assert result.exit_code == 2

    def test_table_output(self, export_file):
        result = runner.invoke(app, ["trades", str(export_file)])
        assert result.exit_code == 0
        assert "Realized trades" in result.output


class TestMissingCommand:
    def test_template(self, sell_only_file):
        result = runner.invoke(app, ["missing", str(sell_only_file)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {
                "symbol_code": "1234",
                "symbol_name": "テスト銘柄",
                "account_type": "特定",
                "quantity": "100",
                "avg_cost": None,
            }
        ]


class TestSummaryAndReport:
    def test_summary(self, export_file):
        result = runner.invoke(app, ["summary", str(export_file)])
        assert result.exit_code == 0
        assert "Total P&L" in result.output
        assert "By symbol" in result.output

    def test_report_to_file(self, export_file, tmp_path):
        output = tmp_path / "out" / "report.txt"
        result = runner.invoke(app, ["report", str(export_file), "-o", str(output)])
        assert result.exit_code == 0
        assert "Report written to" in result.output

        text = output.read_text(encoding="utf-8")
        assert "REALIZED P&L REPORT" in text
        assert "¥24,880" in text

    def test_report_to_stdout_lists_shortfall(self, sell_only_file):
        result = runner.invoke(app, ["report", str(sell_only_file)])
        assert result.exit_code == 0
        assert "Missing cost basis" in result.output
