"""
Turn a source location and a language list into translation jobs.

One job per (source file, target language):

    source  locales/en/common.json          (single file)
    source  locales/en/ + nested/menu.json  (directory, walked recursively)

    target  <target_root>/<lang>/<path relative to the source root>

Nothing is written here; build_jobs() only reads the directory tree.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import config

logger = logging.getLogger(__name__)


class JobBuildError(Exception):
    """The job list could not be built; the run must not start."""


class SourceNotFoundError(JobBuildError):
    """The source path does not exist."""


class InvalidSourceError(JobBuildError):
    """The source is a single file without the recognised extension."""


@dataclass(frozen=True)
class Job:
    source_path: Path
    target_path: Path
    relative_path: Path
    language_code: str


def parse_languages(languages: str) -> list[str]:
    """
    Split a comma-separated list of language codes.

    "es, fr ,de"  →  ["es", "fr", "de"]
    "es, ,fr"     →  ["es", "fr"]
    """
    codes = []
    for code in languages.split(","):
        code = code.strip()
        if code:
            codes.append(code)
    return codes


def _walk(directory: Path) -> Iterator[Path]:
    """Yield every non-directory entry below `directory`, in lexical order.

    Subdirectories are descended into at their sorted position, so
    ["a.json", "b/x.json", "c.json"] comes out in exactly that order.
    Symlinks to directories are not followed.
    """
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(Path(entry.path))
        else:
            yield Path(entry.path)


def _has_extension(path: Path, extension: str) -> bool:
    return path.name.endswith(extension)


def build_jobs(
    source: str | os.PathLike,
    target_root: str | os.PathLike,
    languages: str,
    extension: str = config.JSON_EXTENSION,
) -> list[Job]:
    """
    Build the ordered job list for one run.

    Args:
        source:      a directory (walked recursively) or a single file
        target_root: output root; created later by the workers if missing
        languages:   comma-separated target language codes
        extension:   only files ending in this suffix become jobs

    Returns:
        Jobs in traversal order, then language-list order.

    Raises:
        SourceNotFoundError: `source` does not exist.
        InvalidSourceError:  `source` is a file without `extension`.
        JobBuildError:       the directory tree could not be read.
    """
    source = Path(source)
    target_root = Path(target_root)
    codes = parse_languages(languages)

    if not source.exists():
        raise SourceNotFoundError(f"source path does not exist: {source}")

    if not source.is_dir():
        if not _has_extension(source, extension):
            raise InvalidSourceError(f"source file must be a {extension} file: {source}")
        relative = Path(source.name)
        return [
            Job(
                source_path=source,
                target_path=target_root / code / relative,
                relative_path=relative,
                language_code=code,
            )
            for code in codes
        ]

    jobs: list[Job] = []
    try:
        for path in _walk(source):
            if not _has_extension(path, extension):
                logger.debug("Skipping %s", path)
                continue
            relative = path.relative_to(source)
            for code in codes:
                jobs.append(Job(
                    source_path=path,
                    target_path=target_root / code / relative,
                    relative_path=relative,
                    language_code=code,
                ))
    except FileNotFoundError as exc:
        raise SourceNotFoundError(f"source path vanished while scanning: {exc}") from exc
    except OSError as exc:
        raise JobBuildError(f"failed to scan {source}: {exc}") from exc

    return jobs
