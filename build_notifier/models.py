from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Project:
    name: str


@dataclass(frozen=True)
class Build:
    project: Project
    label: int
    failed: bool = False
    output: str = ""

    @staticmethod
    def from_log_file(project: Project, label: int, path: Union[str, Path], failed: bool = False) -> "Build":
        output = Path(path).read_text(encoding="utf-8", errors="replace")
        return Build(project=project, label=label, failed=failed, output=output)


@dataclass(frozen=True)
class BuildFinished:
    build: Build


@dataclass(frozen=True)
class BuildFixed:
    build: Build
    previous_build: Optional[Build] = None


BuildEvent = Union[BuildFinished, BuildFixed]


@dataclass(frozen=True)
class ComposedMessage:
    subject: str
    body: str
    recipients: Tuple[str, ...]
    from_email: str
    html_body: Optional[str] = None
