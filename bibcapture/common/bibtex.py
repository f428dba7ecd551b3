"""Helpers for BibTeX records returned by external services."""

import re
from typing import Dict, Optional

import bibtexparser
from bibtexparser.bparser import BibTexParser

ENTRY_HEAD_PATTERN = re.compile(r'^(\s*@\s*\w+\s*\{)\s*[^,\s]*\s*,')


def parse_bibtex_entry(text: str) -> Optional[Dict[str, str]]:
    """
    Parse the first entry of a BibTeX string.

    Returns:
        Mapping of lowercase field names to values, with the entry type under
        ``type`` and the original key under ``key``, or None if no entry parses
    """
    # a parser instance accumulates entries, so never reuse one
    parser = BibTexParser(common_strings=True, ignore_nonstandard_types=False)
    try:
        database = bibtexparser.loads(text, parser=parser)
    except Exception:
        return None
    if not database.entries:
        return None

    entry = dict(database.entries[0])
    fields = {"type": entry.pop("ENTRYTYPE", "misc").lower(), "key": entry.pop("ID", "")}
    for name, value in entry.items():
        fields[name.lower()] = value
    return fields


def replace_bibtex_key(text: str, key: str) -> str:
    """Replace the key of the first entry in ``text``."""
    return ENTRY_HEAD_PATTERN.sub(lambda m: f"{m.group(1)}{key},", text, count=1)
