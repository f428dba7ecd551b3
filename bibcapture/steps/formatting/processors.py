"""
Cleanup processors applied to a formatted record.

Every processor is idempotent and the default chain as a whole is a fixed
point: running it over its own output changes nothing.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from bibcapture.logging import get_logger

FIELD_ORDER = [
    "author", "title", "journal", "volume", "number", "pages", "year",
    "doi", "url", "howpublished", "keywords", "note",
]

FIELD_LINE_PATTERN = re.compile(r'^\s*([A-Za-z][\w-]*)\s*=\s*(.*?)\s*,?\s*$')
UNESCAPED_PERCENT_PATTERN = re.compile(r'(?<!\\)%')
INDENT = "  "


def is_header(line: str) -> bool:
    return line.lstrip().startswith("@")


def is_closing(line: str) -> bool:
    return line.strip() == "}"


class CleanupProcessor(ABC):
    """Abstract base class for record cleanup processors."""

    def __init__(self, debug: bool = False):
        """Initialize the processor.

        Args:
            debug: Enable debug output.
        """
        self.debug = debug
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def process(self, text: str) -> str:
        """Return the cleaned record text."""
        pass

    def __call__(self, text: str) -> str:
        cleaned = self.process(text)
        if self.debug and cleaned != text:
            self.logger.debug(f"{self.__class__.__name__} changed the record")
        return cleaned


class BlankLineRemover(CleanupProcessor):
    """Drop blank lines, e.g. those left behind by omitted fields."""

    def process(self, text: str) -> str:
        return "\n".join(line for line in text.split("\n") if line.strip())


class WhitespaceCollapser(CleanupProcessor):
    """Collapse whitespace runs and indent field lines."""

    def process(self, text: str) -> str:
        lines = []
        for line in text.split("\n"):
            collapsed = " ".join(line.split())
            if collapsed and not is_header(collapsed) and not is_closing(collapsed):
                collapsed = INDENT + collapsed
            lines.append(collapsed)
        return "\n".join(lines)


class FieldOrderCanonicalizer(CleanupProcessor):
    """Sort field lines into the canonical order, unknown fields last."""

    def __init__(self, order: Optional[Sequence[str]] = None, debug: bool = False):
        super().__init__(debug)
        self.order = list(order or FIELD_ORDER)

    def _rank(self, group: List[str]) -> int:
        match = FIELD_LINE_PATTERN.match(group[0])
        name = match.group(1).lower() if match else ""
        return self.order.index(name) if name in self.order else len(self.order)

    def process(self, text: str) -> str:
        head, groups, tail = [], [], []
        for line in text.split("\n"):
            if is_header(line) and not groups:
                head.append(line)
            elif is_closing(line):
                tail.append(line)
            elif FIELD_LINE_PATTERN.match(line) or not groups:
                groups.append([line])
            else:
                # continuation of a multi-line value
                groups[-1].append(line)

        groups.sort(key=self._rank)
        return "\n".join(head + [line for group in groups for line in group] + tail)


class SeparatorNormalizer(CleanupProcessor):
    """``name = value`` spacing, lowercase names, commas after all but the last field."""

    def process(self, text: str) -> str:
        lines = text.split("\n")
        field_indexes = [i for i, line in enumerate(lines)
                         if not is_header(line) and not is_closing(line) and FIELD_LINE_PATTERN.match(line)]
        last = field_indexes[-1] if field_indexes else -1

        for i in field_indexes:
            match = FIELD_LINE_PATTERN.match(lines[i])
            name, value = match.group(1).lower(), match.group(2)
            lines[i] = f"{INDENT}{name} = {value}" + ("" if i == last else ",")
        return "\n".join(lines)


class TemplateEscaper(CleanupProcessor):
    """Escape ``%``, which the capture template engine would expand."""

    def process(self, text: str) -> str:
        return UNESCAPED_PERCENT_PATTERN.sub(r'\\%', text)


def default_processors(debug: bool = False) -> List[CleanupProcessor]:
    return [
        BlankLineRemover(debug=debug),
        WhitespaceCollapser(debug=debug),
        FieldOrderCanonicalizer(debug=debug),
        SeparatorNormalizer(debug=debug),
        TemplateEscaper(debug=debug),
    ]
