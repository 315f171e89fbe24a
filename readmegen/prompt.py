"""
Prompt assembly for README generation.

Every (path, content) pair becomes a labeled code block; the blocks are
embedded into a fixed instruction template. Order follows the mapping's
iteration order.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from readmegen.models import GithubRef

GITHUB_REF_FILENAME = "repository.json"

_PROMPT_TEMPLATE = """\
You are an expert open-source developer and technical writer.

Generate a professional, markdown-formatted README.md file based on the following project files.

README must include:
- Project title
- description of 200 words
- Features
- Tech stack
- Setup & Installation
- Usage
- License
- (Optional) Contribution guidelines

Here is the code:

{code}
"""


def format_file_block(path: str, content: str) -> str:
    """Label one file's content with its path."""
    return f"### File: {path}\n```\n{content}\n```"


def build_prompt(files: Mapping[str, str]) -> str:
    """Assemble the full completion prompt for a FileSet."""
    code = "\n\n".join(
        format_file_block(path, content) for path, content in files.items()
    )
    return _PROMPT_TEMPLATE.format(code=code)


def github_ref_file_set(ref: GithubRef) -> dict[str, str]:
    """Wrap a GitHub ref as a one-file FileSet holding ``{owner, repo}`` JSON."""
    document = json.dumps({"owner": ref.owner, "repo": ref.repo}, indent=2)
    return {GITHUB_REF_FILENAME: document}
