"""Turn a field store into the final BibTeX record."""

from string import Template
from typing import Dict, List, Optional

from bibcapture.common.bibtex import replace_bibtex_key
from bibcapture.logging import get_logger
from bibcapture.model.capture import FieldStore
from bibcapture.steps.formatting.processors import CleanupProcessor, TemplateEscaper, default_processors

DEFAULT_TEMPLATE = """@${type}{${key},
author = {${author}},
title = {${title}},
journal = {${journal}},
volume = {${volume}},
number = {${number}},
pages = {${pages}},
year = {${year}},
doi = {${doi}},
url = {${url}},
howpublished = {${howpublished}},
keywords = {${keywords}},
note = {Online; accessed ${urldate}}
}"""


def template_slots(line: str) -> List[str]:
    """Names of the ``${field}`` slots in a template line."""
    names = []
    for match in Template.pattern.finditer(line):
        name = match.group("named") or match.group("braced")
        if name:
            names.append(name)
    return names


class BibFormatter:
    """
    Template substitution followed by an ordered cleanup chain.

    Unset and placeholder fields render as empty, and a template line whose
    slots are all empty is dropped instead of producing e.g. ``title = {},``.
    """

    def __init__(self, template: str = DEFAULT_TEMPLATE,
                 processors: Optional[List[CleanupProcessor]] = None, debug: bool = False):
        self.template = template
        self.processors = processors if processors is not None else default_processors(debug)
        self.debug = debug
        self.escaper = TemplateEscaper(debug=debug)
        self.logger = get_logger(self.__class__.__name__)

    @staticmethod
    def _values(fields: FieldStore) -> Dict[str, str]:
        # placeholders are dropped by as_dict()
        return {name: " ".join(value.split()) for name, value in fields.as_dict().items()}

    def render(self, fields: FieldStore) -> str:
        """Substitute the template, dropping lines that would be empty."""
        values = self._values(fields)
        lines = []
        for line in self.template.split("\n"):
            slots = template_slots(line)
            if slots and not any(values.get(slot) for slot in slots):
                continue
            lines.append(Template(line).safe_substitute({slot: values.get(slot, "") for slot in slots}))
        return "\n".join(lines)

    def clean(self, text: str) -> str:
        """Run the cleanup chain over ``text``."""
        for processor in self.processors:
            text = processor(text)
        return text

    def format(self, fields: FieldStore) -> str:
        return self.clean(self.render(fields))

    def format_verbatim(self, record: str, key: str) -> str:
        """Use an externally produced record as-is, only replacing its key and escaping ``%``."""
        return self.escaper(replace_bibtex_key(record.strip(), key))
