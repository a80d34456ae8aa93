"""Procedure discovery: which procedures to check and where they live.

The locator walks the source tree once, honoring .gitignore, and indexes
every `CREATE PROCEDURE` declaration by name. Lookups then return a typed
result instead of failing, so unknown or duplicated procedures can simply be
skipped.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator

import pathspec

from ..errors import IgnoreFileError
from .scanner import declared_procedure, source_lines

logger = logging.getLogger(__name__)

CALL_PROCEDURE = re.compile(r"CALL +([^\s(]+)\s*\(")


class LookupStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not found"
    AMBIGUOUS = "ambiguous"


@dataclass
class LookupResult:
    """Outcome of resolving a procedure name to its source file."""
    name: str
    status: LookupStatus
    path: Path | None = None
    candidates: list[Path] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass
class ProcedureLocator:
    """Index of procedure name to the source files that declare it."""
    root: Path
    declarations: dict[str, list[Path]] = field(default_factory=dict)
    declared_names: list[str] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        root: Path | str,
        patterns: Iterable[str] = ("*.sql",),
        ignore_file: str = ".gitignore"
    ) -> ProcedureLocator:
        """Scan a source tree and index its procedure declarations.

        Args:
            root: Directory holding the procedure source files
            patterns: Filename globs of files to read
            ignore_file: Name of the gitignore-style file at the root

        Returns:
            ProcedureLocator covering every matching file under root

        Raises:
            FileNotFoundError: If root doesn't exist
            NotADirectoryError: If root isn't a directory
        """
        root = Path(root).resolve()

        if not root.exists():
            raise FileNotFoundError(f"Source root not found: {root}")

        if not root.is_dir():
            raise NotADirectoryError(f"Source root is not a directory: {root}")

        spec = None
        gitignore_path = root / ignore_file
        if gitignore_path.exists():
            with open(gitignore_path, "r", encoding="utf-8") as f:
                spec = pathspec.PathSpec.from_lines("gitwildmatch", f.read().splitlines())

        locator = cls(root=root)
        patterns = list(patterns)

        for file_path in _walk_directory(root, spec, root):
            if not any(file_path.match(pattern) for pattern in patterns):
                continue
            locator.add_file(file_path)

        logger.info(
            f"Indexed {len(locator.declarations)} procedures under {root}"
        )
        return locator

    def add_file(self, path: Path) -> None:
        """Record every procedure declared in path."""
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable source file {path}: {e}")
            return

        for line in source_lines(source):
            name = declared_procedure(line)
            if name is None:
                continue
            key = name.lower()
            if key not in self.declarations:
                self.declared_names.append(name)
            paths = self.declarations.setdefault(key, [])
            if path not in paths:
                paths.append(path)

    def lookup(self, name: str) -> LookupResult:
        """Resolve a procedure name to the single file declaring it."""
        paths = self.declarations.get(name.lower(), [])

        if not paths:
            return LookupResult(name=name, status=LookupStatus.NOT_FOUND)

        if len(paths) > 1:
            return LookupResult(
                name=name,
                status=LookupStatus.AMBIGUOUS,
                candidates=list(paths)
            )

        return LookupResult(
            name=name,
            status=LookupStatus.FOUND,
            path=paths[0],
            candidates=list(paths)
        )

    def names(self) -> list[str]:
        """Names of all declared procedures, as declared, in discovery order."""
        return list(self.declared_names)


def _walk_directory(
    directory: Path,
    spec: pathspec.PathSpec | None,
    root: Path
) -> Iterator[Path]:
    """Recursively walk directory, skipping hidden and gitignored entries."""
    try:
        entries = sorted(directory.iterdir())
    except PermissionError:
        return

    for entry in entries:
        if entry.name.startswith("."):
            continue

        rel_path = entry.relative_to(root)
        if spec and spec.match_file(str(rel_path)):
            continue

        if entry.is_file():
            yield entry
        elif entry.is_dir():
            yield from _walk_directory(entry, spec, root)


def discover_procedure_names(caller_path: Path | str) -> list[str]:
    """Find the procedures invoked with `CALL name(` in a caller source file.

    Returns:
        Procedure names in first-seen order, without duplicates
    """
    source = Path(caller_path).read_text(encoding="utf-8")
    names: list[str] = []
    for match in CALL_PROCEDURE.finditer(source):
        name = match.group(1).strip("`")
        if name and name not in names:
            names.append(name)
    return names


def load_ignore_list(path: Path | str) -> set[str]:
    """Read the names of procedures to skip, one per line.

    Raises:
        IgnoreFileError: If the file can't be read
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise IgnoreFileError(f"Failed to read ignore file {path}: {e}") from e

    return {line.strip() for line in content.split("\n") if line.strip()}
