import aiofiles
from typing import Optional, AsyncGenerator, List, Union
from pathlib import Path


async def read_file(file_path: Path, mode: str, encodings=None) -> Optional[Union[str, bytes]]:
    if "b" in mode: # binary mode doesnt take encoding
        async with aiofiles.open(file_path, mode) as f:
            return await f.read()
    if encodings is None:
        encodings = ['utf-8', 'latin-1', 'cp1252', 'iso-8859-1']

    for encoding in encodings:
        try:
            async with aiofiles.open(file_path, mode, encoding=encoding) as f:
                return await f.read()
        except UnicodeDecodeError:
            continue
    return None


async def read_lines(file_path: Path) -> List[str]:
    """
    read a text file into a list of lines, trying the usual encodings.
    """
    content = await read_file(file_path, 'r')
    if content is None:
        return []
    return content.splitlines()


async def iter_files(paths: List[Path], suffixes: List[str]) -> AsyncGenerator[Path, None]:
    """
    yield files under `paths` (files or directories) with one of `suffixes`.
    """
    suffixes = {s.lower() for s in suffixes}
    for p in paths:
        if p.is_file():
            yield p
        elif p.is_dir():
            for f in sorted(p.rglob("*")): # recursive search across multiple levels
                if f.is_file() and f.suffix.lower() in suffixes:
                    yield f
