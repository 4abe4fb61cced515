import asyncio
import mimetypes
import os
import sys
from pathlib import Path

import typer

from dropvault.config import settings
from dropvault.logging import logger, get_run_id

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main():
    """
    DropVault CLI.
    """
    pass


@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 DropVault Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Upload settings ────────────────────────────────────────────
    print("\n[Configuration]")
    print(f"  MAX_UPLOAD_BYTES:         {settings.MAX_UPLOAD_BYTES}")
    print(f"  UPLOAD_TICK_INTERVAL:     {settings.UPLOAD_TICK_INTERVAL}")
    print(f"  UPLOAD_COMPLETION_DELAY:  {settings.UPLOAD_COMPLETION_DELAY}")
    print(f"  API_BASE_URL:             {settings.API_BASE_URL}")
    if settings.UPLOAD_COMPLETION_DELAY < settings.UPLOAD_TICK_INTERVAL * 10:
        print("  Timing:                   ✅ OK")
        passed += 1
    else:
        print("  Timing:                   ❌ Completion delay dwarfs the tick interval")
        failures.append("UPLOAD_COMPLETION_DELAY should be well under 10 ticks")

    # ── Check 3: Data directory ─────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.exists() and data_dir.is_dir() and os.access(data_dir, os.W_OK):
        print(f"  {data_dir}/  ✅ Found and writable: {data_dir.absolute()}")
        passed += 1
    else:
        print(f"  {data_dir}/  ❌ Missing or not writable: {data_dir.absolute()}")
        failures.append(f"{data_dir} must exist and be writable")

    # ── Check 4: Database ───────────────────────────────────────────────────
    print("\n[Database]")
    print(f"  URL: {settings.database_url}")
    try:
        from sqlalchemy import text
        from dropvault.infra.db.engine import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("  Connection:  ✅ OK")
        passed += 1
    except Exception as e:
        print(f"  Connection:  ❌ {e}")
        failures.append(f"Database not reachable: {e}")

    # ── Summary ─────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")


@db_app.command("init")
def init():
    """Initialize the database tables."""
    from dropvault.db import init_db
    try:
        init_db()
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


@app.command("simulate")
def simulate(
    paths: list[Path] = typer.Argument(..., help="Local files to run through the upload tracker"),
    tick: float | None = typer.Option(None, help="Tick interval in seconds (default from settings)"),
):
    """Run local files through the size gate and simulated upload progress."""
    from dropvault.uploads import AsyncioScheduler, CandidateFile, UploadSession

    candidates = []
    for path in paths:
        if not path.is_file():
            print(f"❌ Not a file: {path}")
            raise typer.Exit(code=1)
        mime, _ = mimetypes.guess_type(path.name)
        candidates.append(CandidateFile(
            name=path.name,
            size_bytes=path.stat().st_size,
            mime_type=mime or "application/octet-stream",
        ))

    async def _run() -> list[str]:
        ready: list[str] = []
        session = UploadSession(
            AsyncioScheduler(),
            tick_interval=tick or settings.UPLOAD_TICK_INTERVAL,
            completion_delay=settings.UPLOAD_COMPLETION_DELAY,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
        session.on_file_ready(lambda event: ready.append(event.name))

        def _show(name: str) -> None:
            entry = session.get(name)
            if entry is not None and entry.error_message is None:
                print(f"  {name}: {entry.progress:5.1f}% {entry.status.value}")

        session.on_change(_show)
        result = session.ingest(candidates)
        for rejection in result.rejected:
            print(f"❌ {rejection.name}: {rejection.message}")
        while session.has_pending():
            await asyncio.sleep(0.05)
        return ready

    ready = asyncio.run(_run())
    print(f"✅ {len(ready)} file(s) ready: {', '.join(ready) if ready else '-'}")


if __name__ == "__main__":
    app()
