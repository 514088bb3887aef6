"""benchheuristics CLI - Extract structural metrics from benchmarked test methods."""

import argparse
import logging
import signal
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from benchheuristics.benchmarks.runner import BenchmarkRunner
from benchheuristics.engine import MethodParser, ParseState
from benchheuristics.errors import BenchmarkListError, ConfigurationError

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _exit_on_sigterm(signum, frame) -> None:
    # SystemExit unwinds through the runner, so the result sink still flushes
    raise SystemExit(128 + signum)


def cmd_method(args: argparse.Namespace) -> int:
    """Parse one method of one file and show its metrics."""
    source_path = Path(args.file).resolve()
    parser = MethodParser(fallback_package=args.fallback_package)

    with console.status("[bold green]Parsing method..."):
        outcome = parser.parse(source_path, args.method)

    if outcome.state is ParseState.PARSE_ERROR:
        console.print(f"[red]Error:[/red] {outcome.error}")
        return 1
    if outcome.state is ParseState.NOT_FOUND:
        console.print(f"[yellow]Method {args.method!r} not found in {source_path}[/yellow]")
        return 1

    parsed = outcome.parsed_method
    table = Table(title=f"{parsed.method_name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Lines of Code", str(parsed.lines_of_code))
    table.add_row("Conditionals", str(parsed.num_conditionals))
    table.add_row("Loops", str(parsed.num_loops))
    table.add_row("Nested Loops", str(parsed.num_nested_loops))
    table.add_row("Method Calls", str(parsed.num_method_calls))
    console.print(table)

    packages = Table(title="Package Accesses")
    packages.add_column("Package", style="cyan")
    packages.add_column("Count", justify="right", style="green")
    for package, count in sorted(parsed.package_accesses.items(), key=lambda kv: (-kv[1], kv[0])):
        packages.add_row(package or "(default package)", str(count))
    console.print(packages)

    return 0


def cmd_benchmarks(args: argparse.Namespace) -> int:
    """Parse every benchmark of a benchmark list and write a JSON result file."""
    try:
        runner = BenchmarkRunner.from_json(
            args.base_test_path,
            args.benchmarks,
            extension=args.extension,
            marker=args.marker,
        )
    except BenchmarkListError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    parser = MethodParser(fallback_package=args.fallback_package)
    previous_handler = signal.signal(signal.SIGTERM, _exit_on_sigterm)

    try:
        summary = runner.run(parser, args.output, first=args.first, last=args.last)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 2
    except KeyboardInterrupt:
        console.print(f"[yellow]Interrupted.[/yellow] Partial results written to {args.output}")
        return 130
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)

    table = Table(title="Parsing Complete")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Benchmarks Attempted", str(summary.attempted))
    table.add_row("Successful", str(summary.successful))
    table.add_row("Skipped", str(len(summary.skipped)))
    table.add_row("Success Rate", f"{summary.success_rate:.2f}%")
    table.add_row("Output", str(args.output))
    console.print(table)

    if summary.skipped:
        console.print(Panel(
            "\n".join(summary.skipped[:10]),
            title="Skipped (first 10)",
            border_style="yellow",
        ))

    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="benchheuristics",
        description="Extract structural static-analysis metrics from benchmarked test methods",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging",
    )
    parser.add_argument(
        "--fallback-package",
        default="java.lang",
        help="Package for symbols nothing else resolves (default: java.lang)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Method command
    method_parser = subparsers.add_parser("method", help="Parse a single method")
    method_parser.add_argument("file", help="Path to the source file")
    method_parser.add_argument("method", help="Name of the method")
    method_parser.set_defaults(func=cmd_method)

    # Benchmarks command
    bench_parser = subparsers.add_parser("benchmarks", help="Parse a list of benchmarks")
    bench_parser.add_argument(
        "--base-test-path",
        required=True,
        help="Root directory of the test sources (e.g. src/test/java)",
    )
    bench_parser.add_argument(
        "--benchmarks",
        required=True,
        help="JSON file with [benchmark name, stability value] pairs",
    )
    bench_parser.add_argument(
        "-o", "--output",
        default="parsed_benchmarks.json",
        help="Where to write the results (default: parsed_benchmarks.json)",
    )
    bench_parser.add_argument("--first", type=int, default=None, help="First index to parse")
    bench_parser.add_argument("--last", type=int, default=None, help="Last index to parse (inclusive)")
    bench_parser.add_argument(
        "--extension",
        default=".java",
        help="Source file extension (default: .java)",
    )
    bench_parser.add_argument(
        "--marker",
        default="_Benchmark.benchmark_",
        help="Text preceding the method name in benchmark names",
    )
    bench_parser.set_defaults(func=cmd_benchmarks)

    args = parser.parse_args()
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
