"""CLI utilities."""

from collections.abc import Iterable
from pathlib import Path


def collect_sources(paths: Iterable[Path], extensions: Iterable[str]) -> list[Path]:
    """Expand CLI path arguments into the list of files to outline.

    Files given explicitly are always included. Directories are walked
    recursively for files whose suffix is one of ``extensions``; hidden
    directories are skipped. Order follows the arguments, directory
    contents are sorted, and duplicates are dropped.
    """
    suffixes = {ext.lower() for ext in extensions}
    seen: set[Path] = set()
    sources: list[Path] = []

    def add(path: Path) -> None:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            sources.append(path)

    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                relative = candidate.relative_to(path)
                if any(part.startswith(".") for part in relative.parts[:-1]):
                    continue
                if candidate.is_file() and candidate.suffix.lower() in suffixes:
                    add(candidate)
        else:
            add(path)

    return sources
