"""CLI entrypoint for the dexterous-hand tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from config import Settings
from refresh import build_orchestrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Discover, merge and serve dexterous hand hardware and papers")
    parser.add_argument(
        "--mode",
        choices=["serve", "once"],
        default="serve",
        help=(
            "'serve' (default): HTTP API with a startup refresh and an interval refresh. "
            "'once': run a single refresh cycle and exit non-zero if any write failed."
        ),
    )
    parser.add_argument("--host", default=None, help="Bind address for serve mode (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port for serve mode (default: PORT or 3001)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulated sources")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def run_once(settings: Settings) -> int:
    """Run one standalone cycle; returns the process exit status."""
    orchestrator = build_orchestrator(settings)
    report = orchestrator.on_startup()
    if not report.ok:
        logging.error("Data update failed: %s", report.as_dict())
        return 1

    totals = {name: result.total for name, result in report.results.items()}
    logging.info("Data update completed successfully: totals=%s", totals)
    return 0


def serve(settings: Settings) -> None:
    import uvicorn  # noqa: PLC0415

    from scheduler import IntervalScheduler  # noqa: PLC0415
    from server import create_app  # noqa: PLC0415

    orchestrator = build_orchestrator(settings)
    scheduler = IntervalScheduler(
        lambda: orchestrator.run_cycle(trigger="scheduled"),
        settings.refresh_interval_seconds,
    )
    app = create_app(orchestrator, scheduler=scheduler)
    uvicorn.run(app, host=settings.host, port=settings.port)


def main(argv: list[str] | None = None) -> int:
    """Initialize config and run the selected mode."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    settings = Settings.from_env()
    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("seed", args.seed))
        if value is not None
    }
    if overrides:
        settings = replace(settings, **overrides)

    if args.mode == "once":
        return run_once(settings)
    serve(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
