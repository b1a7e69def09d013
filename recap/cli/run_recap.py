from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TypeAlias

from dotenv import load_dotenv

from recap.config import AppConfig, load_config
from recap.contracts.artifacts import DEFAULT_MIME_TYPE, AudioArtifact, SummaryStyle
from recap.contracts.run_state import ProgressEvent
from recap.logging import setup_logging
from recap.pipeline.orchestrator import PipelineOrchestrator, describe_run
from recap.pipeline.services import PipelineServices, build_services


Argv: TypeAlias = Sequence[str]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CliRunResult:
    transcript: str
    summary: str
    style: str


def _nonnegative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid float value: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Transcribe an audio file and summarize it.")
    parser.add_argument("--input", dest="input_path", type=Path, required=True, help="Input audio file path.")
    parser.add_argument(
        "--mime-type",
        default=None,
        help="Audio MIME type (guessed from the file name when omitted).",
    )
    parser.add_argument(
        "--style",
        choices=[style.value for style in SummaryStyle],
        default=SummaryStyle.MEDIUM.value,
        help="Summary length style.",
    )
    parser.add_argument(
        "--poll-interval",
        type=_nonnegative_float,
        default=None,
        help="Seconds between transcription status reads (defaults to POLL_INTERVAL_S).",
    )
    parser.add_argument(
        "--max-poll-attempts",
        type=_nonnegative_int,
        default=None,
        help="Maximum status reads before giving up; 0 waits indefinitely (defaults to POLL_MAX_ATTEMPTS).",
    )
    return parser


def parse_args(argv: Argv | None = None) -> argparse.Namespace:
    return build_parser().parse_args(list(argv) if argv is not None else None)


def resolve_mime_type(path: Path, explicit: str | None) -> str:
    if explicit:
        return explicit
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed and guessed.startswith("audio/"):
        return guessed
    return DEFAULT_MIME_TYPE


def read_artifact(path: Path, mime_type: str | None = None) -> AudioArtifact:
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"input audio not found: {path}")
    return AudioArtifact(data=path.read_bytes(), mime_type=resolve_mime_type(path, mime_type))


def build_orchestrator(args: argparse.Namespace, config: AppConfig, services: PipelineServices) -> PipelineOrchestrator:
    poll_interval_s = args.poll_interval if args.poll_interval is not None else config.polling.interval_s
    if args.max_poll_attempts is None:
        max_poll_attempts = config.polling.max_attempts
    else:
        max_poll_attempts = args.max_poll_attempts or None
    return PipelineOrchestrator(
        services,
        observer=_print_progress,
        poll_interval_s=poll_interval_s,
        max_poll_attempts=max_poll_attempts,
    )


def _print_progress(event: ProgressEvent) -> None:
    prefix = "error" if event.is_error else event.stage.value
    print(f"[{prefix}] {event.message}", file=sys.stderr)


def run_from_args(
    args: argparse.Namespace,
    *,
    config: AppConfig | None = None,
    services: PipelineServices | None = None,
) -> CliRunResult:
    config = config if config is not None else load_config()
    services = services if services is not None else build_services(config)
    artifact = read_artifact(Path(args.input_path), args.mime_type)

    orchestrator = build_orchestrator(args, config, services)
    try:
        result = orchestrator.run(artifact, style=args.style)
    finally:
        logger.info("Pipeline run summary", extra={"run": describe_run(orchestrator)})
    return CliRunResult(
        transcript=orchestrator.transcript or "",
        summary=result.text,
        style=result.style_used.value,
    )


def main(argv: Argv | None = None) -> int:
    args = parse_args(argv)
    load_dotenv()
    try:
        config = load_config()
        setup_logging(config.log_level, stream=sys.stderr)
        result = run_from_args(args, config=config)
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"transcript={result.transcript}")
    print(f"summary={result.summary}")
    print(f"style={result.style}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
