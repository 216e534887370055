from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import IO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.traceback import Traceback

from .audio import write_wav
from .config import RenderConfig
from .logging_utils import configure_logging, debug_enabled, get_log_path, log_exception
from .pitch import frequency, parse_pitch, pitch_symbol
from .renderer import render_score, render_score_parallel
from .score import Note, default_score, dump_score, load_score

_LOGGER = logging.getLogger("notesynth.cli")
_CONSOLE = Console()


def render_error(context: str, exc: BaseException, *, stream: IO[str] | None = None) -> None:
    target = stream or sys.stderr
    log_path = get_log_path()
    if target.isatty():
        console = Console(file=target)
        body = Text.assemble(
            ("notesynth error while ", "bold"),
            (context, "bold"),
            (":\n\n", "bold"),
            (type(exc).__name__, "bold red"),
            (": ", "bold"),
            str(exc),
            (f"\nLogs: {log_path}", "dim"),
            ("\n\nSet NOTESYNTH_DEBUG=1 for console trace.", "dim"),
        )
        console.print(Panel(body, title="Error", border_style="red"))
        if debug_enabled():
            console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    else:
        target.write(f"{context} failed: {type(exc).__name__}: {exc} (logs: {log_path})\n")
        if debug_enabled():
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=target)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notesynth")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a score to a 16-bit mono WAV file.")
    render.add_argument("--score", type=str, default=None, help="Score JSON (default melody if omitted).")
    render.add_argument("--output", type=str, default=None)
    render.add_argument("--sample-rate", type=int, default=None)
    render.add_argument("--duration", type=float, default=None, help="Total length in seconds.")
    render.add_argument("--workers", type=int, default=None)

    pitch = sub.add_parser("pitch", help="Print the frequency of pitch symbols like Eb3.")
    pitch.add_argument("symbols", nargs="+", type=str)

    score = sub.add_parser("score", help="Dump the default score as JSON.")
    score.add_argument("--output", type=str, default=None)
    return parser


def _run_render(args: argparse.Namespace) -> int:
    config = RenderConfig.from_env(
        sample_rate=args.sample_rate,
        output=args.output,
        max_workers=args.workers,
    )
    score = load_score(args.score) if args.score else default_score()
    with _CONSOLE.status(f"Rendering {len(score)} notes"):
        if config.max_workers > 1:
            waveform = render_score_parallel(
                score,
                sample_rate=config.sample_rate,
                total_duration=args.duration,
                max_workers=config.max_workers,
            )
        else:
            waveform = render_score(
                score,
                sample_rate=config.sample_rate,
                total_duration=args.duration,
            )
    path = write_wav(config.output, waveform)
    _CONSOLE.print(f"Wrote {len(waveform)} samples to {path} (sr={config.sample_rate})")
    return 0


def _run_pitch(args: argparse.Namespace) -> int:
    table = Table("Pitch", "Hz")
    for symbol in args.symbols:
        letter, accidental, octave = parse_pitch(symbol)
        note = Note(letter=letter, accidental=accidental, octave=octave, begin=0.0, duration=1.0)
        table.add_row(pitch_symbol(letter, accidental, octave), f"{frequency(note):.3f}")
    _CONSOLE.print(table)
    return 0


def _run_score(args: argparse.Namespace) -> int:
    score = default_score()
    if args.output:
        path = dump_score(score, args.output)
        _CONSOLE.print(f"Wrote {len(score)} notes to {path}")
    else:
        _CONSOLE.print_json(data=score.to_dict())
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.command == "render":
            return _run_render(args)
        if args.command == "pitch":
            return _run_pitch(args)
        if args.command == "score":
            return _run_score(args)

        parser.print_help()
        return 1
    except Exception as exc:
        _LOGGER.warning("notesynth CLI failed: %s", exc, exc_info=debug_enabled())
        log_exception("notesynth CLI", exc)
        render_error("notesynth CLI", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
