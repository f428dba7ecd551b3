"""Tests for record formatting and cleanup."""

from bibcapture.model.capture import FieldStore
from bibcapture.steps.formatting.formatter import BibFormatter, template_slots
from bibcapture.steps.formatting.processors import (
    BlankLineRemover,
    FieldOrderCanonicalizer,
    SeparatorNormalizer,
    TemplateEscaper,
    WhitespaceCollapser,
    default_processors,
)

EXPECTED = """@misc{abc,
  author = {acme},
  title = {acme/foo: A tool},
  url = {https://github.com/acme/foo},
  howpublished = {Github},
  keywords = {python, cli},
  note = {Online; accessed 2024-03-01}
}"""


def repository_fields() -> FieldStore:
    fields = FieldStore({
        "type": "misc",
        "key": "abc",
        "author": "acme",
        "title": "acme/foo:   A tool",
        "url": "https://github.com/acme/foo",
        "howpublished": "Github",
        "keywords": "python, cli",
        "urldate": "2024-03-01",
    })
    fields.set_placeholder("doi")
    fields.set_placeholder("year")
    return fields


def clean(text: str) -> str:
    for processor in default_processors():
        text = processor(text)
    return text


def test_template_slots():
    assert template_slots("@${type}{${key},") == ["type", "key"]
    assert template_slots("note = {Online; accessed ${urldate}}") == ["urldate"]
    assert template_slots("}") == []


class TestBibFormatter:
    """Test cases for BibFormatter."""

    def test_format(self):
        assert BibFormatter().format(repository_fields()) == EXPECTED

    def test_placeholders_render_empty(self):
        text = BibFormatter().render(repository_fields())

        assert "year" not in text
        assert "doi" not in text
        assert "journal" not in text

    def test_multiline_values_are_flattened(self):
        fields = repository_fields()
        fields.set("title", "acme/foo:\n  A tool")

        assert BibFormatter().format(fields) == EXPECTED

    def test_percent_is_escaped(self):
        fields = repository_fields()
        fields.set("title", "100% coverage")

        assert "title = {100\\% coverage}," in BibFormatter().format(fields)

    def test_format_verbatim(self):
        record = "\n@article{Smith_2020,\n  title = {A Study},\n  year = {2020}\n}\n"

        text = BibFormatter().format_verbatim(record, "abc")

        assert text == "@article{abc,\n  title = {A Study},\n  year = {2020}\n}"

    def test_format_verbatim_escapes_percent(self):
        record = "@article{Smith_2020,\n  url = {https://example.com/a%2Fb},\n  note = {already 10\\%}\n}"

        text = BibFormatter().format_verbatim(record, "abc")

        assert text == "@article{abc,\n  url = {https://example.com/a\\%2Fb},\n  note = {already 10\\%}\n}"

    def test_custom_template(self):
        formatter = BibFormatter(template="@${type}{${key},\nurl = {${url}}\n}")

        assert formatter.format(repository_fields()) == "@misc{abc,\n  url = {https://github.com/acme/foo}\n}"


class TestProcessors:
    """Test cases for the cleanup processors."""

    def test_blank_lines_removed(self):
        assert BlankLineRemover().process("a\n\n   \nb") == "a\nb"

    def test_whitespace_collapsed(self):
        text = "@misc{abc,\n   title   =  {A    B},\n}"

        assert WhitespaceCollapser().process(text) == "@misc{abc,\n  title = {A B},\n}"

    def test_field_order(self):
        text = "@misc{abc,\n  url = {u},\n  extra = {e},\n  author = {a},\n  title = {t}\n}"

        result = FieldOrderCanonicalizer().process(text)

        assert result == "@misc{abc,\n  author = {a},\n  title = {t}\n  url = {u},\n  extra = {e},\n}"

    def test_field_order_keeps_continuations(self):
        text = "@misc{abc,\n  url = {u},\n  title = {first\nsecond},\n}"

        result = FieldOrderCanonicalizer().process(text)

        assert result == "@misc{abc,\n  title = {first\nsecond},\n  url = {u},\n}"

    def test_separators(self):
        text = "@misc{abc,\n  Author={a}\n  title = {t},\n}"

        assert SeparatorNormalizer().process(text) == "@misc{abc,\n  author = {a},\n  title = {t}\n}"

    def test_escaper_is_idempotent(self):
        escaper = TemplateEscaper()

        once = escaper.process("50% and 10\\%")

        assert once == "50\\% and 10\\%"
        assert escaper.process(once) == once

    def test_chain_is_a_fixed_point(self):
        assert clean(EXPECTED) == EXPECTED
        messy = "@misc{abc,\n\n  url={u}\n   author  =  {a},\n}"
        assert clean(clean(messy)) == clean(messy)
