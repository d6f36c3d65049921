"""
Corpus access - the samples directory on disk.

Identifiers are paths relative to the corpus root with forward slashes
(e.g. "v10/BusinessClass.cs"), so samples with the same file name in
different folders do not collide. A leading "v<digits>" folder tags a
sample with a framework version; everything else is common.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath

from sample_search.core.errors import (
    CorpusNotFoundError,
    InvalidSampleNameError,
    SampleNotFoundError,
)

logger = logging.getLogger(__name__)

SAMPLE_EXTENSIONS = (".cs", ".md")

_VERSION_FOLDER = re.compile(r"^v(\d+)$")


def read_sample(path: Path) -> str:
    """
    Text of a sample file.

    UTF-8 with an optional BOM; bytes that do not decode (Latin-1 or cp1252
    samples) become U+FFFD instead of failing the read.
    """
    return path.read_text(encoding="utf-8-sig", errors="replace")


def detect_version(identifier: str) -> int | None:
    """Version tag from the first folder of an identifier, or None."""
    parts = identifier.split("/")
    if len(parts) < 2:
        return None
    match = _VERSION_FOLDER.match(parts[0])
    return int(match.group(1)) if match else None


def document_identifier(path: Path | str, root: Path | str | None = None) -> str:
    """Identifier for a file: root-relative POSIX path, or the bare file name."""
    path = Path(path)
    if root is not None:
        try:
            return path.resolve().relative_to(Path(root).resolve()).as_posix()
        except ValueError:
            pass
    return path.name


@dataclass
class Corpus:
    """A directory of code samples and guides."""

    root: Path
    extensions: tuple[str, ...] = SAMPLE_EXTENSIONS

    def __post_init__(self):
        self.root = Path(self.root)

    def exists(self) -> bool:
        return self.root.is_dir()

    def discover(self) -> list[Path]:
        """All sample files under the root, sorted by path."""
        if not self.exists():
            raise CorpusNotFoundError(f"Code samples path does not exist: {self.root}")
        return sorted(
            p for p in self.root.rglob("*")
            if p.is_file() and p.suffix.lower() in self.extensions
        )

    def has_samples(self) -> bool:
        return self.exists() and any(
            p.is_file() and p.suffix.lower() in self.extensions
            for p in self.root.rglob("*")
        )

    def identifier_for(self, path: Path) -> str:
        return document_identifier(path, self.root)

    def iter_documents(self) -> Iterator[tuple[str, str]]:
        """Yield (identifier, content) for every readable sample."""
        for path in self.discover():
            try:
                content = read_sample(path)
            except OSError as e:
                logger.warning(f"Error reading file {path}: {e}")
                continue
            yield self.identifier_for(path), content

    def fetch(self, name: str) -> str:
        """
        Return the content of one sample by identifier.

        Raises:
            InvalidSampleNameError: empty, absolute, or contains ".."
            CorpusNotFoundError: the root directory is missing
            SampleNotFoundError: no such file
        """
        if not name or not name.strip():
            raise InvalidSampleNameError("File name cannot be empty")
        if (
            ".." in name
            or PurePosixPath(name).is_absolute()
            or PureWindowsPath(name).is_absolute()
        ):
            raise InvalidSampleNameError(
                f"Invalid file name: {name}. Only relative file names are allowed."
            )
        if not self.exists():
            raise CorpusNotFoundError(f"Code samples path does not exist: {self.root}")

        path = (self.root / name).resolve()
        if not path.is_relative_to(self.root.resolve()) or not path.is_file():
            raise SampleNotFoundError(f"File '{name}' not found in code samples directory")
        return read_sample(path)
