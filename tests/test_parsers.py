"""Unit tests for cvetl.parsers — format dispatch and parsing."""

import csv
import json
from pathlib import Path

import pytest
import soupsieve
from bs4 import BeautifulSoup
from lxml import etree

from cvetl.parsers import (
    CONTENT_PARSERS,
    DEFAULT_PARSER,
    PARSE_ERRORS,
    ContentParser,
    content,
)
from cvetl.paths import ContentType

# ── Dispatch table ───────────────────────────────────────────────────────────


class TestContentParsers:
    """Tests for the CONTENT_PARSERS mapping."""

    def test_covers_every_content_type(self):
        assert set(CONTENT_PARSERS) == {t.value for t in ContentType}

    def test_plain_has_no_parser(self):
        assert CONTENT_PARSERS["plain"] is None

    def test_read_only(self):
        with pytest.raises(TypeError):
            CONTENT_PARSERS["yaml"] = None  # type: ignore[index]

    def test_parse_errors_are_exceptions(self):
        assert all(issubclass(e, Exception) for e in PARSE_ERRORS)


# ── ContentParser.parse ──────────────────────────────────────────────────────


class TestContentParser:
    """Tests for ContentParser.parse()."""

    def test_json(self):
        assert DEFAULT_PARSER.parse(b'{"id": "GHSA-1", "fixed": ["1.2"]}', "json") == {
            "id": "GHSA-1",
            "fixed": ["1.2"],
        }

    def test_json_malformed(self):
        with pytest.raises(json.JSONDecodeError):
            DEFAULT_PARSER.parse(b'{"id": ', ContentType.JSON)

    def test_csv(self):
        raw = b'cve,product\r\nCVE-2024-1,"openssl, libssl"\r\n'
        assert DEFAULT_PARSER.parse(raw, ContentType.CSV) == [
            ["cve", "product"],
            ["CVE-2024-1", "openssl, libssl"],
        ]

    def test_csv_malformed(self):
        with pytest.raises(csv.Error):
            DEFAULT_PARSER.parse(b'a,"b"c\n', "csv")

    def test_xml(self):
        root = DEFAULT_PARSER.parse(b"<advisories><advisory id='1'/></advisories>", "xml")
        assert root.tag == "advisories"
        assert root[0].get("id") == "1"

    def test_xml_with_declaration(self):
        raw = b'<?xml version="1.0" encoding="UTF-8"?><feed><entry/></feed>'
        assert DEFAULT_PARSER.parse(raw, "xml").tag == "feed"

    def test_xml_entities_not_substituted(self):
        raw = b'<!DOCTYPE r [<!ENTITY boom "expanded">]><r>&boom;</r>'
        root = DEFAULT_PARSER.parse(raw, "xml")
        assert "expanded" not in "".join(root.itertext())

    def test_xml_external_entity_not_loaded(self, tmp_path: Path):
        secret = tmp_path / "secret.txt"
        secret.write_text("top-secret", encoding="utf-8")
        raw = f'<!DOCTYPE r [<!ENTITY ext SYSTEM "{secret.as_uri()}">]><r>&ext;</r>'.encode()
        root = DEFAULT_PARSER.parse(raw, "xml")
        assert "top-secret" not in "".join(root.itertext())

    def test_xml_malformed(self):
        with pytest.raises(etree.XMLSyntaxError):
            DEFAULT_PARSER.parse(b"<a><b></a>", "xml")

    def test_html(self):
        doc = DEFAULT_PARSER.parse(b"<html><head><title>ESA-2024-17</title></head></html>", "html")
        assert isinstance(doc, BeautifulSoup)
        assert doc.title.get_text() == "ESA-2024-17"

    def test_css(self):
        selector = DEFAULT_PARSER.parse(b"table.versions td.fixed", "css")
        assert isinstance(selector, soupsieve.SoupSieve)
        soup = BeautifulSoup(
            "<table class='versions'><tr><td class='fixed'>1.3</td><td>1.0</td></tr></table>",
            "lxml",
        )
        assert [td.get_text() for td in selector.select(soup)] == ["1.3"]

    def test_css_malformed(self):
        with pytest.raises(soupsieve.SelectorSyntaxError):
            DEFAULT_PARSER.parse(b"td[", "css")

    def test_plain_returns_input_unchanged(self):
        raw = b"  raw advisory text \n"
        assert DEFAULT_PARSER.parse(raw, ContentType.PLAIN) is raw

    def test_unknown_tag_returns_input_unchanged(self):
        raw = b"key: value"
        assert DEFAULT_PARSER.parse(raw, "yaml") is raw

    def test_tag_case_insensitive(self):
        assert DEFAULT_PARSER.parse(b"[1, 2]", "JSON") == [1, 2]

    def test_accepts_text(self):
        assert DEFAULT_PARSER.parse('{"a": 1}', "json") == {"a": 1}


class TestInjectedParsers:
    """Tests for ContentParser with a caller-supplied table."""

    def test_custom_parser_used(self):
        parser = ContentParser({"json": lambda raw: "custom"})
        assert parser.parse(b"{}", "json") == "custom"

    def test_missing_tag_passes_through(self):
        parser = ContentParser({"json": json.loads})
        assert parser.parse(b"<a/>", "xml") == b"<a/>"

    def test_table_copied_and_frozen(self):
        table = {"json": json.loads}
        parser = ContentParser(table)
        table["json"] = None
        assert parser.parse(b"1", "json") == 1
        with pytest.raises(TypeError):
            parser.parsers["json"] = None  # type: ignore[index]

    def test_default_shares_module_table(self):
        assert ContentParser().parsers is CONTENT_PARSERS


# ── content ──────────────────────────────────────────────────────────────────


class TestContent:
    """Tests for content()."""

    def test_reads_and_parses(self, tmp_path: Path):
        f = tmp_path / "feed.json"
        f.write_text('{"count": 2}', encoding="utf-8")
        assert content(f, "json") == {"count": 2}

    def test_plain_returns_bytes(self, tmp_path: Path):
        f = tmp_path / "notes.txt"
        f.write_bytes(b"hello")
        assert content(f, ContentType.PLAIN) == b"hello"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            content(tmp_path / "nope.json", "json")

    def test_custom_parser(self, tmp_path: Path):
        f = tmp_path / "x.csv"
        f.write_bytes(b"a,b\n")
        parser = ContentParser({"csv": lambda raw: raw.upper()})
        assert content(f, "csv", parser) == b"A,B\n"
