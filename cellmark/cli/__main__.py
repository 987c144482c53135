from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from cellmark.config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from cellmark.excel.reader import WorkbookDecodeError
from cellmark.excel.writer import WorkbookEncodeError
from cellmark.logging.error_log import AnomalyLogBuffer
from cellmark.logging.init import log_summary, set_debug, setup_logging
from cellmark.models.highlight import CellCoord, FilterMode
from cellmark.services.orchestrator import default_output_path, open_workbook, save_workbook, summarize
from cellmark.services.session import AnnotationSession
from cellmark.services.summary import render_summary_line

"""CLI entrypoint.

Opens a workbook, applies the requested annotation edits in order
(highlight toggles, notes, header mark, resizes), optionally filters and
searches, and writes the annotated workbook next to the input.

Coordinates are zero-based data coordinates ("R:C"; row 0 is the first row
below the header).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ANOMALIES = 2

INSPECT_ROWS = 10


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _coord(text: str) -> CellCoord:
    try:
        row, col = text.split(":", 1)
        return CellCoord(int(row), int(col))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected R:C, got {text!r}") from e


def _note(text: str) -> tuple[CellCoord, str]:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected R:C=TEXT, got {text!r}")
    where, note = text.split("=", 1)
    return _coord(where), note


def _resize(text: str) -> tuple[int, float]:
    try:
        col, px = text.split(":", 1)
        return int(col), float(px)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected C:PX, got {text!r}") from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="cellmark", description="Annotate spreadsheet cells with highlights and notes")
    p.add_argument("input", type=Path, help="Workbook to open (.xlsx)")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--toggle", type=_coord, action="append", default=[], metavar="R:C",
                   help="Cycle a cell highlight none -> green -> red -> none (repeatable)")
    p.add_argument("--note", type=_note, action="append", default=[], metavar="R:C=TEXT",
                   help="Set a cell note; empty text removes it (repeatable)")
    p.add_argument("--clear-highlights", action="store_true", help="Remove every highlight before other edits")
    p.add_argument("--header-mark", type=int, default=None, metavar="C", help="Toggle the mark on the section column header")
    p.add_argument("--resize", type=_resize, action="append", default=[], metavar="C:PX", help="Set a column width in pixels")
    p.add_argument("--filter", choices=[m.value for m in FilterMode], default=FilterMode.ALL.value)
    p.add_argument("--search", default=None, help="Report rows matching this text within the filtered view")
    out = p.add_mutually_exclusive_group()
    out.add_argument("--output", type=Path, default=None, help="Output path (default: prefixed input name)")
    out.add_argument("--no-save", action="store_true", help="Do not write an output workbook")
    p.add_argument("--inspect-data", action="store_true", help="Print headers and first rows of the view")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(session: AnnotationSession) -> None:
    state = session.state
    view = session.view()
    df = pd.DataFrame(
        [list(v.values) for v in view[:INSPECT_ROWS]],
        columns=state.headers,
        index=pd.Index([v.original_index for v in view[:INSPECT_ROWS]], name="row"),
    )
    print(f"SHEET: {state.file_name} cols={state.headers} view_rows={len(view)} filter={session.filter.value}")
    if not df.empty:
        print(df.to_string())


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only fall back to sys.argv for None; an explicit [] stays empty
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        if args.config is not None:
            cfg = load_config(args.config)
        elif DEFAULT_CONFIG_PATH.exists():
            cfg = load_config(DEFAULT_CONFIG_PATH)
        else:
            cfg = default_config()
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    started = time.perf_counter()
    session = AnnotationSession(cfg)
    anomaly_log = AnomalyLogBuffer()
    try:
        try:
            anomalies = open_workbook(args.input, session, anomaly_log)
        except WorkbookDecodeError as e:
            logger.error(f"open: {e}")
            return EXIT_FATAL

        if args.clear_highlights:
            logger.info(f"cleared {session.clear_all_highlights()} highlights")
        for coord in args.toggle:
            change = session.set_highlight(coord)
            if change is None:
                logger.warning(f"toggle ignored: {coord.key}")
            else:
                logger.info(f"toggle {coord.key}: {change.previous.value} -> {change.current.value}")
        for coord, text in args.note:
            if not session.store.in_bounds(coord):
                logger.warning(f"note ignored: {coord.key}")
                continue
            session.set_note(coord, text)
        if args.header_mark is not None:
            marked = session.toggle_header_highlight(args.header_mark)
            logger.info(f"header {args.header_mark} marked={marked}")
        for col, px in args.resize:
            if session.resize_column(col, px) is None:
                logger.warning(f"resize ignored: column {col}")

        view = session.set_filter(FilterMode(args.filter))
        logger.info(f"filter={args.filter} view_rows={len(view)}")
        if args.search is not None:
            session.set_query(args.search)
            session.flush_search()
            for i, row in enumerate(session.matches, start=1):
                logger.info(f"match {i}/{len(session.matches)} row={row}")
            if not session.matches:
                logger.info(f"no matches for {args.search!r}")

        if args.inspect_data:
            _inspect_data(session)

        encoded = None
        if not args.no_save:
            out_path = args.output or default_output_path(args.input, cfg.output_prefix)
            try:
                encoded = save_workbook(session, out_path)
            except WorkbookEncodeError as e:
                logger.error(f"save: {e}")
                return EXIT_FATAL

        log_path = anomaly_log.flush()
        if log_path is not None:
            logger.warning(f"{anomalies} cell anomalies recorded in {log_path}")

        result = summarize(session, encoded=encoded, anomalies=anomalies, started=started)
        # log_summary adds the "SUMMARY " prefix itself
        log_summary(render_summary_line(result)[len("SUMMARY "):])
        return EXIT_ANOMALIES if anomalies else EXIT_SUCCESS
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
