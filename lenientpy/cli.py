"""Command line interface: dump tokens, report parse errors, pretty print, benchmark."""

from __future__ import annotations

import argparse
import logging
import statistics
import sys
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from tqdm import tqdm

from lenientpy.diagnostics import format_errors
from lenientpy.format import PrettyPrinterPrefs
from lenientpy.grammar import LATEST_GRAMMAR_VERSION, GrammarVersion, grammar_for, grammar_version_from_str
from lenientpy.lexer import Lexer, dump_tokens
from lenientpy.parser import ParseOptions, ParseSession

_LINE_ENDINGS = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


def _read_source(path: Path) -> str:
    with open(path, encoding="utf-8", errors="replace", newline="") as handle:
        return handle.read()


def _session(args: argparse.Namespace) -> ParseSession:
    base = ParseOptions.from_environ()
    options = ParseOptions(
        trace_recovery=base.trace_recovery or args.trace,
        fast_token_stream=base.fast_token_stream and not args.naive_stream,
        dedent_search_budget=base.dedent_search_budget,
    )
    return ParseSession(_grammar_version(args), options)


def _grammar_version(args: argparse.Namespace) -> GrammarVersion:
    if args.grammar is None:
        return LATEST_GRAMMAR_VERSION
    return grammar_version_from_str(args.grammar)


def _cmd_tokens(args: argparse.Namespace) -> int:
    source = _read_source(args.file)
    lexer = Lexer(source, grammar_for(_grammar_version(args)))
    print(dump_tokens(lexer))
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    result = _session(args).parse(_read_source(args.file))
    if result.has_errors:
        print(format_errors(result.errors, path=str(args.file)))
        return 1
    print(f"{args.file}: ok ({len(result.tree.body)} statements, grammar {result.grammar_version.label})")
    return 0


def _cmd_format(args: argparse.Namespace) -> int:
    source = _read_source(args.file)
    result = _session(args).parse(source)
    prefs = PrettyPrinterPrefs(
        spaces_after_comma=args.spaces_after_comma,
        spaces_before_comment=args.spaces_before_comment,
        line_ending=_LINE_ENDINGS[args.line_ending] if args.line_ending else None,
    )
    formatted = result.pretty_print(prefs)
    if result.has_errors:
        print(format_errors(result.errors, path=str(args.file)), file=sys.stderr)
    if args.check:
        return 1 if formatted != source else 0
    sys.stdout.write(formatted)
    return 0


def _collect_sources(root: Path) -> list[Path]:
    if root.is_file():
        return [root]
    return [path for path in sorted(root.rglob("*.py")) if path.is_file()]


def _run_once(
    session: ParseSession,
    sources: list[tuple[Path, str]],
    *,
    label: str,
    show_progress: bool,
    threads: int,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_statements = 0
    total_errors = 0
    texts = [text for _, text in sources]
    if threads > 1:
        with ThreadPoolExecutor(max_workers=threads) as executor:
            results = executor.map(session.parse, texts)
            iterator = tqdm(results, total=len(texts), desc=label, unit="file") if show_progress else results
            for parsed in iterator:
                total_statements += len(parsed.tree.body)
                total_errors += len(parsed.errors)
    else:
        iterator = tqdm(texts, desc=label, unit="file") if show_progress else texts
        for text in iterator:
            parsed = session.parse(text)
            total_statements += len(parsed.tree.body)
            total_errors += len(parsed.errors)
    return time.perf_counter() - start, total_statements, total_errors


def _cmd_bench(args: argparse.Namespace) -> int:
    root: Path = args.root
    if not root.exists():
        raise SystemExit(f"Invalid path: {root}")
    files = _collect_sources(root)
    if not files:
        raise SystemExit(f"No .py files found under {root}")
    if args.limit_files > 0:
        files = files[: args.limit_files]

    sources = [(path, _read_source(path)) for path in files]
    session = _session(args)
    show_progress = not args.no_progress
    threads = max(args.threads, 1)

    for warmup_idx in range(max(args.warmups, 0)):
        _run_once(
            session,
            sources,
            label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
            show_progress=show_progress,
            threads=threads,
        )

    timings: list[float] = []
    statements_count = 0
    errors_count = 0
    for run_idx in range(max(args.runs, 1)):
        duration, statements_count, errors_count = _run_once(
            session,
            sources,
            label=f"run {run_idx + 1}/{max(args.runs, 1)}",
            show_progress=show_progress,
            threads=threads,
        )
        timings.append(duration)

    mean = statistics.mean(timings)
    print(f"Dataset: {root}")
    print(f"Grammar: {session.grammar_version.label}")
    print(f"Files: {len(files)}")
    print(f"Statements: {statements_count}")
    print(f"Errors: {errors_count}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)}, threads={threads})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Files/s (mean): {len(files) / mean:.1f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lenientpy", description="Error-tolerant Python 2.4-3.0 parser")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--grammar",
        default=None,
        help="Grammar version such as 2.4, 2.5, 2.6 or 3.0 (default: latest)",
    )
    common.add_argument("--trace", action="store_true", help="Log every recovery decision")
    common.add_argument(
        "--naive-stream",
        action="store_true",
        help="Pull tokens from the lexer on demand instead of lexing up front",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tokens = subparsers.add_parser("tokens", parents=[common], help="Dump the token stream of a file")
    tokens.add_argument("file", type=Path)
    tokens.set_defaults(handler=_cmd_tokens)

    parse = subparsers.add_parser("parse", parents=[common], help="Parse a file and report errors")
    parse.add_argument("file", type=Path)
    parse.set_defaults(handler=_cmd_parse)

    fmt = subparsers.add_parser("format", parents=[common], help="Pretty print a file to stdout")
    fmt.add_argument("file", type=Path)
    fmt.add_argument("--spaces-after-comma", type=int, default=None)
    fmt.add_argument("--spaces-before-comment", type=int, default=None)
    fmt.add_argument("--line-ending", choices=sorted(_LINE_ENDINGS), default=None)
    fmt.add_argument("--check", action="store_true", help="Exit 1 if formatting would change the file")
    fmt.set_defaults(handler=_cmd_format)

    bench = subparsers.add_parser("bench", parents=[common], help="Benchmark parsing throughput")
    bench.add_argument("root", type=Path, help="File or directory of .py files")
    bench.add_argument("--runs", type=int, default=5, help="Measured runs")
    bench.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    bench.add_argument("--threads", type=int, default=1, help="Parse files concurrently with N threads")
    bench.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    bench.add_argument(
        "--limit-files",
        type=int,
        default=0,
        help="Optional file limit for quick smoke tests (0 = all files)",
    )
    bench.set_defaults(handler=_cmd_bench)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.trace:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
