"""
Candidate file discovery.

Delegates the directory scan to ripgrep: any file under the root whose
text contains one of the type identifiers is a candidate. The match is
purely textual, so false positives are expected and are weeded out by
the item extractor.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from orgdrill.core.errors import LocatorUnavailable

# ripgrep exits 1 when nothing matched
RG_NO_MATCH = 1


class FileLocator:
    """Find candidate outline files with an external text-search tool."""

    def __init__(self, command: str = "rg", file_glob: str = "*.org"):
        self.command = command
        self.file_glob = file_glob

    def ensure_available(self) -> str:
        """Return the resolved executable path or raise LocatorUnavailable."""
        executable = shutil.which(self.command)
        if executable is None:
            raise LocatorUnavailable(
                f"Search tool '{self.command}' not found on PATH; install ripgrep or set ORGDRILL_LOCATOR_COMMAND"
            )
        return executable

    def locate(self, root: Path | str, patterns: Iterable[str]) -> list[Path]:
        """
        Return the deduplicated, sorted paths under ``root`` containing any pattern.

        Args:
            root: Directory to search.
            patterns: Literal substrings (the type identifiers).
        """
        executable = self.ensure_available()
        root = Path(root).expanduser()
        if not root.is_dir():
            raise LocatorUnavailable(f"Search root {root} is not a directory")
        patterns = [p for p in dict.fromkeys(patterns) if p]
        if not patterns:
            return []

        args = [
            executable,
            "--files-with-matches",
            "--fixed-strings",
            "--no-messages",
            "--glob",
            self.file_glob,
        ]
        for pattern in patterns:
            args.extend(["-e", pattern])
        args.append(str(root))

        logger.debug(f"Locating candidates: {' '.join(args)}")
        try:
            result = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as e:
            raise LocatorUnavailable(f"Could not run '{self.command}': {e}") from e

        if result.returncode == RG_NO_MATCH:
            return []
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            if not result.stdout.strip():
                raise LocatorUnavailable(f"'{self.command}' failed searching {root}: {detail}")
            # Partial results: some paths could not be searched
            logger.warning(f"'{self.command}' reported errors under {root}: {detail}")

        found = {Path(line) for line in result.stdout.splitlines() if line.strip()}
        logger.info(f"Found {len(found)} candidate files under {root}")
        return sorted(found)
