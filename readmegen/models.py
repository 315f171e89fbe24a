"""
Pydantic models for request / response / error payloads.

Wire shapes:
  Files request:  {"files": {"path": "content", ...}}
  GitHub request: {"owner": "...", "repo": "..."}
  Response:       {"readme": "..."}
  Error:          {"error": "...", "details": "..."}

Request models forbid unknown fields, so a body mixing the files shape with
the GitHub shape is rejected instead of silently picking one.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

FileSet = dict[str, str]


class GenerateFromFilesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    files: FileSet = Field(
        ..., min_length=1, description="Relative path → text content of each file"
    )


class GithubRef(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    owner: str = Field(..., min_length=1, description="Repository owner (user or org)")
    repo: str = Field(..., min_length=1, description="Repository name")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class GenerateResponse(BaseModel):
    readme: str = Field(..., description="Generated README in markdown")


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


# ── Client-side tagged union ──────────────────────────────────
class FilesGeneration(BaseModel):
    kind: Literal["files"] = "files"
    files: FileSet = Field(..., min_length=1)


class GithubGeneration(BaseModel):
    kind: Literal["github"] = "github"
    ref: GithubRef


GenerationRequest = Annotated[
    Union[FilesGeneration, GithubGeneration], Field(discriminator="kind")
]
