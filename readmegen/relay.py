"""
The two relay operations: README from a FileSet, README from a GitHub ref.

Both build one prompt and make exactly one completion call. The relay holds
no state besides its LLM client.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from readmegen.errors import InputValidationError
from readmegen.llm_client import LLMClient
from readmegen.models import GithubRef
from readmegen.prompt import build_prompt, github_ref_file_set

logger = logging.getLogger("readmegen.relay")


class ReadmeRelay:
    def __init__(self, llm_client: LLMClient) -> None:
        self._llm = llm_client

    async def generate_from_files(self, files: Mapping[str, str]) -> str:
        if not files:
            raise InputValidationError("No files provided")

        logger.info("Files received (%d): %s", len(files), list(files))
        prompt = build_prompt(files)

        logger.info("Sending prompt to completion provider (%d chars)", len(prompt))
        readme = await self._llm.complete(prompt)
        logger.info("Received README from completion provider (%d chars)", len(readme))
        return readme

    async def generate_from_github(self, ref: GithubRef) -> str:
        if not ref.owner or not ref.repo:
            raise InputValidationError("Owner and repository name are required.")

        logger.info("Generating README for GitHub repository %s", ref.full_name)
        return await self.generate_from_files(github_ref_file_set(ref))

    async def aclose(self) -> None:
        await self._llm.aclose()
