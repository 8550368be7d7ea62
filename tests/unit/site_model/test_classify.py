"""Tests for link-file and MIME classification of source files."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from statik.config import build_config
from statik.errors import ClassificationError, InvalidLinkTargetError, LinkReadError
from statik.site_model import LINK_MIME, classify, detect_mime, read_link_target
from statik.site_model.classify import OCTET_STREAM, TEXT_PLAIN

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00"


class DetectMimeTests(unittest.TestCase):
    def test_detects_by_content_then_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            image = root / "picture.dat"
            image.write_bytes(PNG_HEADER)
            blob = root / "blob.bin"
            blob.write_bytes(b"abc\x00def")
            notes = root / "notes.txt"
            notes.write_text("hello\n", encoding="utf-8")
            page = root / "page.html"
            page.write_text("<p>hi</p>\n", encoding="utf-8")
            unknown = root / "README"
            unknown.write_text("plain words\n", encoding="utf-8")

            self.assertEqual(detect_mime(image), "image/png")
            self.assertEqual(detect_mime(blob), OCTET_STREAM)
            self.assertEqual(detect_mime(notes), TEXT_PLAIN)
            self.assertEqual(detect_mime(page), "text/html")
            self.assertEqual(detect_mime(unknown), TEXT_PLAIN)

    def test_unreadable_file_raises_classification_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "gone.txt"
            with self.assertRaises(ClassificationError) as ctx:
                detect_mime(missing)
            self.assertEqual(ctx.exception.path, missing)


class LinkTargetTests(unittest.TestCase):
    def test_reads_trimmed_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            link = Path(tmp) / "external.link"
            link.write_text("  https://example.com/page\n", encoding="utf-8")
            self.assertEqual(read_link_target(link), "https://example.com/page")

    def test_accepts_url_without_host(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            link = Path(tmp) / "mail.link"
            link.write_text("mailto:a@b.c\n", encoding="utf-8")
            self.assertEqual(read_link_target(link), "mailto:a@b.c")

    def test_rejects_non_url_content(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            link = Path(tmp) / "broken.link"
            link.write_text("just some words\n", encoding="utf-8")
            with self.assertRaises(InvalidLinkTargetError):
                read_link_target(link)

    def test_missing_link_file_raises_link_read_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(LinkReadError):
                read_link_target(Path(tmp) / "nope.link")


class ClassifyTests(unittest.TestCase):
    def test_link_entry_strips_suffix_and_has_no_destination(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "src"
            (source / "docs").mkdir(parents=True)
            link = source / "docs" / "external.link"
            link.write_text("https://example.com/page\n", encoding="utf-8")
            config = build_config(source, root / "site")

            entry = classify(link, "docs/external.link", link.stat(), config)

            self.assertTrue(entry.is_link)
            self.assertEqual(entry.mime, LINK_MIME)
            self.assertEqual(entry.name, "external")
            self.assertEqual(entry.relative_path, "docs/external")
            self.assertEqual(entry.url, "https://example.com/page")
            self.assertEqual(entry.size, 0)
            self.assertIsNone(entry.destination_path)

    def test_regular_entry_gets_base_url_and_destination(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "src"
            source.mkdir()
            target = source / "notes.txt"
            target.write_text("hello\n", encoding="utf-8")
            target.chmod(0o640)
            config = build_config(source, root / "site", base_url="https://files.example.org/pub")

            entry = classify(target, "notes.txt", target.stat(), config)

            self.assertFalse(entry.is_link)
            self.assertEqual(entry.url, "https://files.example.org/pub/notes.txt")
            self.assertEqual(entry.destination_path, (root / "site" / "notes.txt"))
            self.assertEqual(entry.size, 6)
            self.assertEqual(entry.mode, 0o640)
            self.assertIsNotNone(entry.modified.tzinfo)

    def test_link_suffix_is_plain_file_when_conversion_disabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "src"
            source.mkdir()
            link = source / "external.link"
            link.write_text("https://example.com/page\n", encoding="utf-8")
            config = build_config(source, root / "site", convert_links=False)

            entry = classify(link, "external.link", link.stat(), config)

            self.assertFalse(entry.is_link)
            self.assertEqual(entry.name, "external.link")
            self.assertEqual(entry.url, "http://localhost/external.link")


if __name__ == "__main__":
    unittest.main()
