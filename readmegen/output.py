"""Local output actions for a generated README: save to disk, copy to clipboard.

Both are best-effort. Failures are logged and reported through the return
value, never raised.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger("readmegen.output")

# first available wins
_CLIPBOARD_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


def save_markdown(text: str, path: Path | str = "README.md") -> Path | None:
    """Write ``text`` as UTF-8 markdown. Returns the path, or None on failure."""
    target = Path(path)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save README to %s: %s", target, exc)
        return None
    logger.info("Saved README to %s", target)
    return target


def _clipboard_command() -> list[str] | None:
    for cmd in _CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str) -> bool:
    """Copy ``text`` to the system clipboard. Returns True on success."""
    cmd = _clipboard_command()
    if cmd is None:
        logger.warning("No clipboard tool found on %s", sys.platform)
        return False
    try:
        subprocess.run(cmd, input=text, text=True, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("Failed to copy README to clipboard: %s", exc)
        return False
    return True
