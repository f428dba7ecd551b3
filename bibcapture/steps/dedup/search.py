import asyncio
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from bibcapture.logging import get_logger
from bibcapture.model.capture import MatchReference
from bibcapture.utils import iter_files, read_lines


class CorpusSearch:
    """in-process search over the persisted corpus.

    1. on first use, read every corpus file into a line index.
    2. scan the index with the compiled pattern.
    """

    def __init__(self, paths: Sequence[Path], suffixes: Sequence[str] = (".org", ".bib")):
        self.paths = [Path(p) for p in paths]
        self.suffixes = list(suffixes)
        self.logger = get_logger(self.__class__.__name__)
        self._index: Optional[Dict[Path, List[str]]] = None

    async def _build_index(self) -> Dict[Path, List[str]]:
        index = {}
        async for file_path in iter_files(self.paths, self.suffixes):
            index[file_path] = await read_lines(file_path)
        self.logger.debug(f"Indexed {len(index)} corpus files")
        return index

    def refresh(self) -> None:
        """Forget the index; the next search re-reads the corpus."""
        self._index = None

    async def search(self, pattern: str) -> List[MatchReference]:
        if self._index is None:
            self._index = await self._build_index()

        regex = re.compile(pattern)
        matches = []
        for file_path, lines in self._index.items():
            for line_number, line in enumerate(lines, 1):
                if regex.search(line):
                    matches.append(MatchReference(path=str(file_path), line=line_number, text=line.strip()))
        return matches


class RipgrepSearch:
    """search the corpus with an external ripgrep process."""

    def __init__(self, paths: Sequence[Path], suffixes: Sequence[str] = (".org", ".bib"), executable: str = "rg"):
        self.paths = [str(p) for p in paths]
        self.suffixes = list(suffixes)
        self.executable = executable
        self.logger = get_logger(self.__class__.__name__)

    def _command(self, pattern: str) -> List[str]:
        command = [self.executable, "--no-heading", "--line-number", "--with-filename", "--color", "never"]
        for suffix in self.suffixes:
            command.extend(["--glob", f"*{suffix}"])
        command.extend(["-e", pattern, "--"])
        return command + self.paths

    @staticmethod
    def _parse(output: str) -> List[MatchReference]:
        matches = []
        for line in output.splitlines():
            parts = line.split(":", 2)
            if len(parts) == 3 and parts[1].isdigit():
                matches.append(MatchReference(path=parts[0], line=int(parts[1]), text=parts[2].strip()))
        return matches

    async def search(self, pattern: str) -> List[MatchReference]:
        if not self.paths:
            return []
        process = await asyncio.create_subprocess_exec(
            *self._command(pattern),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode == 1:  # no match
            return []
        if process.returncode != 0:
            raise RuntimeError(f"{self.executable} failed: {stderr.decode(errors='replace').strip()}")
        return self._parse(stdout.decode("utf-8", errors="replace"))
