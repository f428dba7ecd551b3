"""Tests for the command line interface."""

from unittest.mock import AsyncMock, patch

import pytest

from bibcapture.cli import cli, read_links
from bibcapture.errors import DuplicateFound, FetchError
from bibcapture.model.capture import BibRecord, MatchReference


@pytest.fixture
def pipeline():
    with patch("bibcapture.cli.CapturePipeline") as pipeline_class:
        instance = pipeline_class.return_value
        instance.process_capture = AsyncMock()
        yield instance


def test_read_links(tmp_path):
    links_file = tmp_path / "links.txt"
    links_file.write_text("# reading list\nhttps://example.com/a\n\n  https://example.com/b  \n")

    assert read_links(links_file) == ["https://example.com/a", "https://example.com/b"]


def test_capture(pipeline, capsys):
    pipeline.process_capture.return_value = BibRecord(key="abc", text="@misc{abc,\n}")

    exit_code = cli(["capture", "https://example.com/a", "--title", "A", "--html-path", "/tmp/a.html"])

    assert exit_code == 0
    assert "@misc{abc," in capsys.readouterr().out
    context = pipeline.process_capture.await_args[0][0]
    assert context.link == "https://example.com/a"
    assert context.title == "A"
    assert context.html_path == "/tmp/a.html"
    assert context.silent is False


def test_capture_failure(pipeline, capsys):
    pipeline.process_capture.side_effect = DuplicateFound([MatchReference("refs.org", 3, "@misc{abc,")], check="key")

    exit_code = cli(["capture", "https://example.com/a", "--silent"])

    assert exit_code == 1
    assert "refs.org:3" in capsys.readouterr().err
    assert pipeline.process_capture.await_args[0][0].silent is True


def test_batch(pipeline, tmp_path):
    links_file = tmp_path / "links.txt"
    links_file.write_text("https://example.com/a\nhttps://example.com/b\n")
    pipeline.process_capture.side_effect = [BibRecord(key="abc", text="@misc{abc,\n}"), FetchError("offline")]

    exit_code = cli(["batch", str(links_file)])

    assert exit_code == 1
    assert pipeline.process_capture.await_count == 2
    assert all(call[0][0].silent for call in pipeline.process_capture.await_args_list)


def test_no_command(capsys):
    assert cli([]) == 0
    assert "usage" in capsys.readouterr().out
