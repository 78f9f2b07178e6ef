"""CLI entrypoints for codecounter commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, load_config
from .counter import CodeCounter
from .logging import configure_logging
from .service import run_service


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "List classes and methods per file and log debug details.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codecounter",
        description="Walk directories of .cs or .cpp sources and compile line statistics.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    count_parser = subparsers.add_parser(
        "count",
        help="Count lines, types and methods below one or more directories.",
    )
    _add_verbose_option(count_parser, suppress_default=True)
    count_parser.add_argument(
        "paths",
        nargs="*",
        help="Directories to read (defaults to the current directory).",
    )
    count_parser.add_argument(
        "-t",
        "--tree",
        action="store_true",
        default=None,
        help="Display dir/file/class/method entries as a tree.",
    )
    count_parser.add_argument(
        "-g",
        "--graph",
        type=int,
        choices=(1, 2),
        default=None,
        help="Append GraphViz markup: 1 = projects, 2 = projects and packages.",
    )
    count_parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        metavar="REGEX",
        help="Skip directories whose name matches this pattern (repeatable).",
    )
    count_parser.add_argument(
        "-u",
        "--unprefix",
        default=None,
        help="Strip this prefix from graph node names.",
    )
    count_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    count_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .codecounter.yml (defaults to the first directory).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codecounter commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)

    if args.command == "count":
        paths = args.paths or ["."]
        try:
            config = load_config(args.config or Path(paths[0]))
            output = config.output
            config.ignore.extend(args.ignore)
            if args.unprefix is not None:
                config.unprefix = args.unprefix
            if args.tree is not None:
                output.tree = args.tree
            if args.graph is not None:
                output.graph_level = args.graph
            if args.verbose:
                output.verbose = True
            result = CodeCounter(config).run(paths)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"codecounter count failed: {exc}\n")

        report = result.render()
        if args.output is not None:
            args.output.write_text(report, encoding="utf-8")
            print(f"Report written to {_relativize(args.output)}")
        else:
            sys.stdout.write(report)
    elif args.command == "serve":
        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
