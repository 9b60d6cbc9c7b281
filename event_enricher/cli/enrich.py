# =============================================================================
# event_enricher/cli/enrich.py -- CLI Enrich Command
# =============================================================================
#
# Enriches a batch of events read from a JSON file without any server in
# front: every event gets coordinates (venue first, city as fallback) and
# genre tags (genre text first, artist lookup as fallback).
#
# Typical usage:
#   python -m event_enricher.cli.enrich events.json            # text summary
#   python -m event_enricher.cli.enrich events.json --json     # BatchResult JSON
#   python -m event_enricher.cli.enrich events.json -o out.json
#
# Input: a JSON array of event objects (camelCase keys such as
# ``genresText`` are accepted).  Configuration comes from the environment
# and ``.env`` through Settings.
#
# Log lines always go to stderr so stdout carries only the results.
# =============================================================================

"""Standalone CLI for enriching a batch of events.

Usage::

    python -m event_enricher.cli.enrich events.json
    python -m event_enricher.cli.enrich events.json --json
    python -m event_enricher.cli.enrich events.json --output enriched.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from event_enricher.config.settings import Settings
from event_enricher.models.event import BatchResult, Event
from event_enricher.utils.logging import configure_logging

_EVENTS_ADAPTER = TypeAdapter(list[Event])


# ---------------------------------------------------------------------------
# Input / output helpers
# ---------------------------------------------------------------------------


def load_events(path: Path) -> list[Event]:
    """Read and validate a JSON array of events.

    Raises
    ------
    ValueError
        If the file is not valid JSON or an event fails validation.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise ValueError(f"{path.name} must contain a JSON array of events")

    try:
        return _EVENTS_ADAPTER.validate_python(payload)
    except PydanticValidationError as exc:
        raise ValueError(f"invalid event in {path.name}: {exc}") from exc


def format_text_output(result: BatchResult) -> str:
    """Render one line per event followed by the failures, if any."""
    lines: list[str] = []
    for index, item in enumerate(result.enriched):
        if item.geolocation is not None:
            where = f"{item.geolocation.latitude:.5f},{item.geolocation.longitude:.5f}"
            if item.address is None:
                where += " (city)"
        else:
            where = "-"
        genres = ", ".join(item.genres) or "-"
        lines.append(f"[{index}] {item.event.title}")
        lines.append(f"    location: {where}")
        lines.append(f"    genres:   {genres}")

    if result.failures:
        lines.append("")
        lines.append(f"Failures ({len(result.failures)}):")
        for failure in result.failures:
            lines.append(f"  [{failure.index}] {failure.stage}: {failure.error}")

    return "\n".join(lines)


def format_json_output(result: BatchResult) -> str:
    """Serialize the batch result with the wire (camelCase) field names."""
    return json.dumps(result.model_dump(mode="json", by_alias=True), indent=2)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


async def _run(events_path: Path, json_output: bool, output_file: str | None) -> int:
    """Load the events, enrich them and write the results.

    Returns 0 on success, 1 on an input error.
    """
    # Deferred import: wiring pulls in httpx, aiosqlite and every provider.
    from event_enricher.main import open_runtime

    if not events_path.exists():
        print(f"Error: File not found: {events_path}", file=sys.stderr)
        return 1

    try:
        events = load_events(events_path)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Enriching {len(events)} event(s) from {events_path.name}", file=sys.stderr)
    start = time.monotonic()

    async with open_runtime(Settings()) as runtime:
        result = await runtime.enricher.enrich_batch(events)

    elapsed = time.monotonic() - start
    print(
        f"Done in {elapsed:.1f}s: {len(result.enriched)} enriched, "
        f"{len(result.failures)} failure(s)",
        file=sys.stderr,
    )

    text = format_json_output(result) if json_output else format_text_output(result)
    if output_file:
        Path(output_file).write_text(text, encoding="utf-8")
        print(f"Results written to: {output_file}", file=sys.stderr)
    else:
        print(text)

    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m event_enricher.cli.enrich",
        description="Add coordinates and genre tags to a JSON batch of events.",
    )
    parser.add_argument("events", type=str, help="Path to a JSON array of events.")
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the batch result as JSON instead of a text summary.",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write results to a file instead of stdout.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point; exits with the code returned by the runner."""
    args = _build_parser().parse_args(argv)

    settings = Settings()
    configure_logging(
        log_level="WARNING" if args.quiet else settings.log_level,
        json_output=settings.app_env == "production",
        stream=sys.stderr,
    )

    events_path = Path(args.events).resolve()
    sys.exit(asyncio.run(_run(events_path, args.json_output, args.output)))


if __name__ == "__main__":
    main()
