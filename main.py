import argparse
import sys

from config_paths import HISTORY_PATH, ensure_config_dirs, load_config
from editor_session import EditorSession
from history_manager import HistoryManager
from search_orchestrator import SearchOptions

try:
    from _version import __version__
except ImportError:
    __version__ = "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridsift",
        description="Search and replace across every cell of a CSV/TSV file.",
    )
    parser.add_argument("path", nargs="?")
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("--find", dest="query", default="")
    parser.add_argument("--replace", dest="replacement", default=None)
    parser.add_argument("--fuzzy", action="store_true", default=None)
    parser.add_argument("--threshold", type=float, default=None)
    parser.add_argument("--case-sensitive", action="store_true", default=None)
    parser.add_argument("--columns", default="")
    parser.add_argument("-o", "--output", default=None)
    parser.add_argument("--quiet", action="store_true")
    return parser


def _options_from_args(args, cfg) -> SearchOptions:
    columns = tuple(c.strip() for c in args.columns.split(",") if c.strip())
    return SearchOptions(
        query=args.query,
        replacement=args.replacement or "",
        case_sensitive=cfg["CASE_SENSITIVE"] if args.case_sensitive is None else True,
        fuzzy=cfg["FUZZY"] if args.fuzzy is None else True,
        fuzzy_threshold=cfg["FUZZY_THRESHOLD"] if args.threshold is None else args.threshold,
        column_scope=columns,
    )


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if not args.path:
        parser.print_usage(sys.stderr)
        return 2
    if not args.query:
        print("--find needs a non-empty query", file=sys.stderr)
        return 2

    def set_status(msg, _seconds=0):
        if msg and not args.quiet:
            print(msg, file=sys.stderr)

    ensure_config_dirs()
    cfg = load_config()
    history = HistoryManager(HISTORY_PATH)
    history.load()
    session = EditorSession(set_status, config=cfg, history=history)
    if not session.load_file(args.path):
        return 1

    options = _options_from_args(args, cfg)
    session.find(options)
    last = -1
    while session.pump():
        progress = session.search.progress
        if not args.quiet and progress // 10 != last // 10:
            print(f"\r{progress}%", end="", file=sys.stderr, flush=True)
        last = progress
    if not args.quiet and last >= 0:
        print("\r", end="", file=sys.stderr)

    for hit in session.search.results:
        print(f"{hit.row_index}\t{hit.column_id}\t{hit.score:.3f}\t{hit.matched_text}")

    if args.replacement is not None:
        session.replace_all(options)
        if not session.save_file(args.output):
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
