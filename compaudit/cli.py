"""CLI entrypoints for compaudit commands."""

from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path

from .logging import configure_logging, skipped_components
from .orchestrator import Orchestrator
from .stores.artifacts import MissingArtifactError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        help="Directory for audit artifacts (defaults to output.dir from .compaudit.yml).",
    )


def _add_root_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root-dir",
        help="Component directory, absolute or relative to the project root (defaults to src/components).",
    )


def _split_names(value: str | None) -> list[str] | None:
    if not value:
        return None
    names = [name.strip() for name in value.split(",") if name.strip()]
    return names or None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compaudit",
        description="Audit React components for design, performance, accessibility and testing conventions.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Run discovery, every analyzer and report synthesis.",
    )
    _add_verbose_option(run_parser, suppress_default=True)
    _add_path_argument(run_parser)
    _add_output_option(run_parser)
    _add_root_option(run_parser)
    run_parser.add_argument(
        "--analyzers",
        help="Comma-separated analyzer domains to run (defaults to all enabled analyzers).",
    )

    discover_parser = subparsers.add_parser(
        "discover",
        help="Write the component inventory.",
    )
    _add_verbose_option(discover_parser, suppress_default=True)
    _add_path_argument(discover_parser)
    _add_output_option(discover_parser)
    _add_root_option(discover_parser)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Run a single analyzer against an existing inventory.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument("domain", help="Analyzer domain, for example 'motion' or 'checklist'.")
    _add_path_argument(analyze_parser)
    _add_output_option(analyze_parser)
    _add_root_option(analyze_parser)

    report_parser = subparsers.add_parser(
        "report",
        help="Synthesize the audit report from existing artifacts.",
    )
    _add_verbose_option(report_parser, suppress_default=True)
    _add_path_argument(report_parser)
    _add_output_option(report_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compaudit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    verbose = bool(args.verbose)
    configure_logging(verbose=verbose, log_file=args.log_file)

    orchestrator = Orchestrator()

    try:
        if args.command == "run":
            outcome = orchestrator.run_audit(
                args.path,
                output_dir=args.output_dir,
                root_dir=args.root_dir,
                analyzers=_split_names(args.analyzers),
            )
            paths = outcome.report.paths
            print(f"Audited {len(outcome.components)} component(s); overall score {outcome.overall_score}/100")
            print(f"Report written to {_relativize(paths['markdown'])}")
            print(f"Structured report at {_relativize(paths['json'])}")
            if outcome.schedule.failed:
                print(f"Analyzers failed: {', '.join(outcome.schedule.failed)}")
        elif args.command == "discover":
            discovered = orchestrator.run_discovery(
                args.path, output_dir=args.output_dir, root_dir=args.root_dir
            )
            print(f"Discovered {len(discovered.components)} component(s); inventory at {_relativize(discovered.artifact)}")
        elif args.command == "analyze":
            result = orchestrator.run_analyzer(
                args.domain, args.path, output_dir=args.output_dir, root_dir=args.root_dir
            )
            artifact = _relativize(result.artifact) if result.artifact else "(none)"
            print(f"{result.domain}: {result.result_count} result(s) written to {artifact}")
        elif args.command == "report":
            report = orchestrator.run_report(args.path, output_dir=args.output_dir)
            print(f"Overall score {report.report.executive_summary.overall_score}/100")
            print(f"Report written to {_relativize(report.paths['markdown'])}")
        elif args.command == "serve":
            from .service import run_service

            run_service(host=args.host, port=args.port)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
        _report_skipped()
    except MissingArtifactError as exc:
        _fail(parser, args.command, exc, verbose, hint="Run `compaudit discover` or the prerequisite analyzer first.")
    except (FileNotFoundError, NotADirectoryError) as exc:
        _fail(parser, args.command, exc, verbose)
    except (RuntimeError, ValueError) as exc:
        _fail(parser, args.command, exc, verbose)


def _fail(
    parser: argparse.ArgumentParser,
    command: str,
    exc: Exception,
    verbose: bool,
    *,
    hint: str | None = None,
) -> None:
    if verbose:
        traceback.print_exception(exc, file=sys.stderr)
    message = f"compaudit {command} failed: {exc}\n"
    if hint:
        message += f"{hint}\n"
    if not verbose:
        message += "Run with --verbose for more details.\n"
    parser.exit(1, message)


def _report_skipped() -> None:
    skipped = skipped_components()
    if skipped:
        print(
            f"{len(skipped)} component(s) skipped with warnings: {', '.join(skipped)}",
            file=sys.stderr,
        )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
