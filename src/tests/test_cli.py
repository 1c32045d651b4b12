from typer.testing import CliRunner

from home_inventory.cli.main import app

runner = CliRunner()


def test_help_lists_command_groups():
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "users" in result.output
    assert "reports" in result.output
    assert "test-db-connection" in result.output


def test_export_rejects_bad_dates_before_connecting():
    result = runner.invoke(
        app,
        ["reports", "export", "alice", "--from-date", "2026-03-01", "--to-date", "2026-01-01"],
    )

    assert result.exit_code == 2
    assert "to_date must not be earlier than from_date" in result.output


def test_export_rejects_unknown_format():
    result = runner.invoke(app, ["reports", "export", "alice", "--format", "xml"])

    assert result.exit_code == 2
    assert "format" in result.output
