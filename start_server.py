"""Simple CLI for running the Lamport clock HTTP service.

Usage:
    python start_server.py [--host HOST] [--port P] [--threads N] \
        [--log-level LEVEL] [--event-log PATH] [--max-events N]

Values default to environment variables API_HOST, API_PORT, API_THREADS,
LOG_LEVEL, EVENT_LOG and MAX_EVENTS when set. The service always runs in
a single process so that every request shares one clock.
"""

import argparse
import os
from typing import List

import uvicorn

from api.main import app

LOG_LEVELS = ["critical", "error", "warning", "info", "debug", "trace"]


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    env = os.environ
    parser = argparse.ArgumentParser(description="Start the Lamport clock service")
    parser.add_argument("--host", default=env.get("API_HOST", "0.0.0.0"))
    # string defaults are converted by type=, so bad env values become usage errors
    parser.add_argument("--port", type=int, default=env.get("API_PORT", "8080"))
    parser.add_argument(
        "--threads",
        type=_positive_int,
        default=env.get("API_THREADS", "4"),
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=env.get("LOG_LEVEL", "info"),
    )
    parser.add_argument("--event-log", dest="event_log", default=env.get("EVENT_LOG"))
    parser.add_argument(
        "--max-events",
        dest="max_events",
        type=_positive_int,
        default=env.get("MAX_EVENTS", "1000"),
    )
    args = parser.parse_args(argv)
    # argparse does not check defaults against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(
            f"argument --log-level: invalid choice: {args.log_level!r} "
            f"(choose from {', '.join(LOG_LEVELS)})"
        )
    return args


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    app.state.worker_threads = args.threads
    app.state.event_log_path = args.event_log
    app.state.max_events = args.max_events
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
