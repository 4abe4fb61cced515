"""CLI smoke tests via Typer's CliRunner."""
from typer.testing import CliRunner

from dropvault.cli import app
from dropvault.config import settings

runner = CliRunner()


def test_simulate_reports_ready_and_rejected(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_COMPLETION_DELAY", 0.0)
    small = tmp_path / "a.png"
    small.write_bytes(b"x" * 100)
    big = tmp_path / "b.pdf"
    with big.open("wb") as fh:
        fh.truncate(11_000_000)

    result = runner.invoke(app, ["simulate", str(small), str(big), "--tick", "0.001"])

    assert result.exit_code == 0, result.output
    assert "b.pdf: File exceeds 10MB limit" in result.output
    assert "1 file(s) ready: a.png" in result.output


def test_simulate_missing_file_exits_nonzero(tmp_path):
    result = runner.invoke(app, ["simulate", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert "Not a file" in result.output
