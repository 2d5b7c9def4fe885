"""HTTP trigger for scheduled runs (cron services call these endpoints)."""

from __future__ import annotations

import hmac
import logging
import os
from collections.abc import Callable

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse

from config import PipelineConfig, load_config
from main import run_digest
from models import RunSummary

Runner = Callable[[], RunSummary]

LOGGER = logging.getLogger(__name__)


def create_app(
    config: PipelineConfig | None = None,
    secret: str | None = None,
    runner: Runner | None = None,
) -> FastAPI:
    """Build the trigger app.

    Args:
        config: Pipeline config; loaded from the environment when omitted.
        secret: Bearer secret callers must present; defaults to CRON_SECRET.
            With no secret configured every request is rejected.
        runner: Zero-argument run-now callable; defaults to run_digest(config).
    """
    cron_secret = secret if secret is not None else os.getenv("CRON_SECRET", "")
    if runner is None:
        pipeline_config = config or load_config()

        def runner() -> RunSummary:
            return run_digest(pipeline_config)

    app = FastAPI(
        title="Daily Brief Trigger",
        description="Starts the feed-to-digest pipeline on behalf of a scheduler",
        version="1.0.0",
    )

    def _authorized(request: Request) -> bool:
        if not cron_secret:
            return False
        presented = request.headers.get("authorization", "")
        return hmac.compare_digest(presented.encode(), f"Bearer {cron_secret}".encode())

    def _run_logged() -> None:
        summary = runner()
        LOGGER.info("Background brief finished: %s", summary.to_dict())

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/cron/daily-brief")
    def start_brief(request: Request, background_tasks: BackgroundTasks):
        """Authorize, then run the pipeline after the response is sent."""
        if not _authorized(request):
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        background_tasks.add_task(_run_logged)
        return {"status": "started", "message": "Brief generation started"}

    @app.post("/api/cron/daily-brief/sync")
    def run_brief(request: Request):
        """Authorize, run the pipeline inline, and return its summary."""
        if not _authorized(request):
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        summary = runner()
        return JSONResponse(summary.to_dict(), status_code=200 if summary.ok else 500)

    return app


def main():
    """Run the trigger server."""
    import uvicorn

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    uvicorn.run(
        create_app(),
        host=os.getenv("TRIGGER_HOST", "0.0.0.0"),
        port=int(os.getenv("TRIGGER_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
