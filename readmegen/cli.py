"""Command line entry point.

    readmegen serve [--host HOST] [--port PORT]
    readmegen generate [PATH ...] [--github URL] [--prefetch] [--exclude GLOB]
                       [--output FILE] [--copy] [--relay-url URL] [--verbose]

``generate`` prints the README on stdout; diagnostics and validation messages
go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from readmegen.collector import (
    CandidateFile,
    build_generation_request,
    collect_paths,
    exclude_files,
    group_by_directory,
    read_file_set,
    validate_files,
)
from readmegen.errors import ReadmeGenError
from readmegen.github_client import GitHubClient
from readmegen.logging_config import setup_logging
from readmegen.output import copy_to_clipboard, save_markdown
from readmegen.relay_client import RelayClient
from readmegen.settings import Settings
from readmegen.url_parser import parse_github_url

logger = logging.getLogger("readmegen.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readmegen",
        description="Generate a project README from source files with an LLM.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the prompt relay HTTP server.")
    serve.add_argument("--host", help="Listen address (default: HOST or 0.0.0.0).")
    serve.add_argument("--port", type=int, help="Listen port (default: PORT or 3001).")

    gen = sub.add_parser("generate", help="Send files or a GitHub repo to the relay.")
    gen.add_argument(
        "paths", nargs="*", type=Path,
        help="Files and/or folders to include. Folders are walked recursively.",
    )
    gen.add_argument("--github", metavar="URL", help="GitHub repository URL.")
    gen.add_argument(
        "--prefetch", action="store_true",
        help="Fetch repository metadata from the GitHub API and send it as a file.",
    )
    gen.add_argument(
        "--exclude", action="append", default=[], metavar="GLOB",
        help="Drop files whose path or name matches GLOB (repeatable).",
    )
    gen.add_argument("-o", "--output", type=Path, help="Save the README to this file.")
    gen.add_argument("--copy", action="store_true", help="Copy the README to the clipboard.")
    gen.add_argument("--relay-url", help="Relay base URL (default: RELAY_URL).")
    gen.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    return parser


def _print_selection(files: list[CandidateFile]) -> None:
    print(f"Uploaded files ({len(files)}):", file=sys.stderr)
    for directory, group in group_by_directory(files).items():
        if directory:
            print(f"  {directory}/", file=sys.stderr)
        for f in group:
            print(f"    {f.name}" if directory else f"  {f.name}", file=sys.stderr)


async def run_generate(args: argparse.Namespace, settings: Settings) -> str:
    """Collect input, send exactly one generation request, return the README."""
    # parse before any network call so a bad URL never leaves the process
    ref = parse_github_url(args.github) if args.github else None
    files: dict[str, str] | None = None

    if args.paths:
        candidates = exclude_files(collect_paths(args.paths), args.exclude)
        accepted, problems = validate_files(
            candidates, settings.allowed_extensions, settings.max_file_bytes
        )
        for problem in problems:
            print(problem, file=sys.stderr)
        if accepted:
            _print_selection(accepted)
            files = read_file_set(accepted)
    elif ref is not None and args.prefetch:
        github = GitHubClient(settings)
        try:
            files = await github.fetch_repository_bundle(ref)
        finally:
            await github.aclose()

    request = build_generation_request(files, ref)
    logger.info("Sending %s generation request to %s", request.kind, settings.relay_url)
    relay = RelayClient(settings)
    try:
        return await relay.generate(request)
    finally:
        await relay.aclose()


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from readmegen.main import create_app

    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "serve":
        setup_logging(settings.log_level)
        try:
            return _serve(args, settings)
        except ReadmeGenError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    setup_logging("INFO" if args.verbose else "WARNING", stream=sys.stderr, json_lines=False)
    if args.relay_url:
        settings = settings.model_copy(update={"relay_url": args.relay_url})
    if args.prefetch and not args.github:
        parser.error("--prefetch requires --github.")
    if args.prefetch and args.paths:
        parser.error("--prefetch cannot be combined with PATH arguments.")

    try:
        readme = asyncio.run(run_generate(args, settings))
    except ReadmeGenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(readme)
    if args.output and save_markdown(readme, args.output) is None:
        print(f"Could not save README to {args.output}", file=sys.stderr)
    if args.copy and not copy_to_clipboard(readme):
        print("Could not copy README to the clipboard", file=sys.stderr)
    return 0
