"""
Client-side file collection.

Turns user-supplied paths into a FileSet:

    collect_paths → exclude_files → validate_files → read_file_set

Directories are flattened with an explicit worklist so arbitrarily deep trees
never hit the recursion limit. Relative paths keep the dropped folder's own
name as their first segment: dropping ``src`` yields ``src/a.js`` and
``src/sub/b.py``.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from readmegen.errors import FileReadError, InputValidationError
from readmegen.models import (
    FilesGeneration,
    GenerationRequest,
    GithubGeneration,
    GithubRef,
)
from readmegen.settings import ALLOWED_EXTENSIONS

logger = logging.getLogger("readmegen.collector")

MAX_FILE_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class CandidateFile:
    path: str      # relative, slash-separated
    source: Path   # location on disk
    size: int

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


def _candidate(source: Path, rel: str) -> CandidateFile:
    try:
        size = source.stat().st_size
    except OSError as exc:
        raise FileReadError(f"Failed to read file {rel}", path=rel) from exc
    return CandidateFile(path=rel, source=source, size=size)


# ── Directory flattening ───────────────────────────────────────
def flatten_directory(root: Path) -> list[CandidateFile]:
    """Enumerate every file under ``root`` as a flat, sorted list.

    Symlinked directories are listed as nothing (not followed) to avoid
    cycles. Raises ``FileReadError`` if any directory cannot be listed.
    """
    root = Path(root)
    files: list[CandidateFile] = []
    # resolve so "." and ".." are labeled with the real folder name
    stack: list[tuple[Path, str]] = [(root, root.resolve().name)]

    while stack:
        directory, rel_dir = stack.pop()
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as exc:
            raise FileReadError(f"Failed to read directory {rel_dir}", path=rel_dir) from exc

        subdirs: list[tuple[Path, str]] = []
        for entry in entries:
            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            if entry.is_dir(follow_symlinks=False):
                subdirs.append((Path(entry.path), rel))
            elif entry.is_file():
                files.append(_candidate(Path(entry.path), rel))

        # reversed so subdirectories pop in name order
        stack.extend(reversed(subdirs))

    return sorted(files, key=lambda f: f.path)


def collect_paths(paths: Iterable[Path | str]) -> list[CandidateFile]:
    """Collect dropped files and folders; the first duplicate path wins."""
    collected: list[CandidateFile] = []
    seen: set[str] = set()

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found = flatten_directory(path)
        elif path.is_file():
            found = [_candidate(path, path.name)]
        else:
            raise FileReadError(f"Failed to read file {raw}: no such file or directory", path=str(raw))

        for candidate in found:
            if candidate.path in seen:
                logger.debug("Skipping duplicate path %s", candidate.path)
                continue
            seen.add(candidate.path)
            collected.append(candidate)

    return collected


# ── Selection editing ──────────────────────────────────────────
def exclude_files(files: Sequence[CandidateFile], patterns: Iterable[str]) -> list[CandidateFile]:
    """Drop candidates whose relative path or name matches any glob pattern."""
    patterns = list(patterns)
    if not patterns:
        return list(files)
    return [
        f for f in files
        if not any(
            fnmatch.fnmatch(f.path, p) or fnmatch.fnmatch(f.name, p) for p in patterns
        )
    ]


def group_by_directory(files: Iterable[CandidateFile]) -> dict[str, list[CandidateFile]]:
    """Group candidates by parent directory ("" for top-level files)."""
    groups: dict[str, list[CandidateFile]] = {}
    for f in files:
        parent = f.path.rsplit("/", 1)[0] if "/" in f.path else ""
        groups.setdefault(parent, []).append(f)
    return groups


# ── Validation ─────────────────────────────────────────────────
def _extension(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:].lower() if dot > 0 else ""


def validate_files(
    files: Iterable[CandidateFile],
    allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS,
    max_bytes: int = MAX_FILE_BYTES,
) -> tuple[list[CandidateFile], list[str]]:
    """Split candidates into (accepted, error messages).

    Each file is judged on its own: extension first, then size.
    """
    allowed = {ext.lower() for ext in allowed_extensions}
    accepted: list[CandidateFile] = []
    errors: list[str] = []

    for f in files:
        if _extension(f.name) not in allowed:
            errors.append(
                f"File {f.path} has an invalid extension. "
                f"Allowed extensions: {', '.join(allowed_extensions)}"
            )
            continue
        if f.size > max_bytes:
            limit_mb = max_bytes / (1024 * 1024)
            errors.append(f"File {f.path} is too large. Maximum size is {limit_mb:g}MB")
            continue
        accepted.append(f)

    return accepted, errors


# ── Reading + request assembly ─────────────────────────────────
def read_file_set(files: Iterable[CandidateFile]) -> dict[str, str]:
    """Read every file as UTF-8 text, in order.

    The first unreadable file aborts the whole read with ``FileReadError``.
    """
    contents: dict[str, str] = {}
    for f in files:
        try:
            contents[f.path] = f.source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(f"Failed to read file {f.path}", path=f.path) from exc
        logger.debug("Read %s (%d bytes)", f.path, f.size)
    return contents


def build_generation_request(
    files: dict[str, str] | None, ref: GithubRef | None
) -> GenerationRequest:
    """Pick the request variant to send. A non-empty FileSet wins over a ref."""
    if files:
        return FilesGeneration(files=files)
    if ref is not None:
        return GithubGeneration(ref=ref)
    raise InputValidationError("No files or GitHub URL provided")
