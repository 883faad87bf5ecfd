"""Tests for the command line interface."""

import pytest
import typer
from typer.testing import CliRunner

from anyfetch import __version__
from anyfetch.cli import app, parse_header

runner = CliRunner()


class TestParseHeader:
    def test_splits_name_and_value(self):
        assert parse_header("Content-Type: text/plain") == ("Content-Type", "text/plain")

    def test_value_may_contain_colon(self):
        assert parse_header("Referer: http://example.com/") == ("Referer", "http://example.com/")

    def test_rejects_missing_colon(self):
        with pytest.raises(typer.BadParameter):
            parse_header("no-colon")


class TestFetchCommand:
    def test_prints_body(self):
        result = runner.invoke(app, ["fetch", "data:text/plain,hello"])
        assert result.exit_code == 0
        assert result.output == "hello"

    def test_include_headers(self):
        result = runner.invoke(app, ["fetch", "-i", "data:text/plain;base64,aGVsbG8="])
        assert result.exit_code == 0
        assert result.output.startswith("200 OK\n")
        assert "content-type: text/plain" in result.output
        assert result.output.endswith("hello")

    def test_output_file(self, tmp_path):
        output = tmp_path / "out.bin"
        result = runner.invoke(app, ["fetch", "-o", str(output), "data:text/plain,saved"])
        assert result.exit_code == 0
        assert output.read_bytes() == b"saved"

    def test_failure_exits_nonzero(self):
        result = runner.invoke(app, ["fetch", "ftp://example.com/file"])
        assert result.exit_code == 1

    def test_http_fetch(self, httpx_mock):
        httpx_mock.add_response(url="http://example.com/", method="POST", text="created", status_code=201)
        result = runner.invoke(app, ["fetch", "-X", "POST", "-H", "X-Test: 1", "-d", "body", "http://example.com/"])

        assert result.exit_code == 0
        assert result.output == "created"
        sent = httpx_mock.get_request()
        assert sent.headers["x-test"] == "1"
        assert sent.content == b"body"


class TestVersionCommand:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
