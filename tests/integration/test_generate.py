"""End-to-end generation tests over real temporary trees."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from statik.config import build_config
from statik.errors import InvalidDirectoryError
from statik.generator import generate, prepare_destination
from statik.metadata import FUZZY_FILENAME, METADATA_FILENAME, load_directory_metadata
from statik.render import INDEX_FILENAME, load_templates

GENERATED_AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {path.relative_to(root).as_posix(): path.read_bytes() for path in sorted(root.rglob("*")) if path.is_file()}


def _make_source(tmp: str) -> Path:
    source = Path(tmp) / "src"
    (source / "docs" / "guide").mkdir(parents=True)
    (source / "docs" / "guide" / "intro.txt").write_text("intro\n", encoding="utf-8")
    (source / "docs" / "notes.txt").write_text("notes\n", encoding="utf-8")
    (source / "images").mkdir()
    (source / "images" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 16)
    (source / "empty").mkdir()
    (source / "external.link").write_text("https://example.com/page\n", encoding="utf-8")
    (source / "index.txt").write_text("top\n", encoding="utf-8")
    return source


class GenerateTests(unittest.TestCase):
    def test_produces_pages_metadata_and_copies(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = Path(tmp) / "site"
            config = build_config(source, destination)

            result = generate(config, load_templates(), GENERATED_AT)

            self.assertEqual(result.directories, 4)
            self.assertEqual(result.links, 1)
            self.assertEqual(result.copied, 4)
            self.assertEqual(result.pages, 4)
            for relative in (".", "docs", "docs/guide", "images"):
                self.assertTrue((destination / relative / INDEX_FILENAME).is_file())
                self.assertTrue((destination / relative / METADATA_FILENAME).is_file())
            self.assertFalse((destination / "empty").exists())
            self.assertFalse((destination / "external.link").exists())
            self.assertTrue((destination / FUZZY_FILENAME).is_file())
            self.assertFalse((destination / "docs" / FUZZY_FILENAME).exists())
            self.assertEqual((destination / "images" / "logo.png").read_bytes(), (source / "images" / "logo.png").read_bytes())

            fuzzy = json.loads((destination / FUZZY_FILENAME).read_text(encoding="utf-8"))
            by_path = {item["path"]: item for item in fuzzy}
            self.assertEqual(by_path["external"]["url"], "https://example.com/page")
            self.assertEqual(by_path["images/logo.png"]["mime"], "image/png")

            root_html = (destination / INDEX_FILENAME).read_text(encoding="utf-8")
            self.assertIn("https://example.com/page", root_html)

    def test_undecodable_file_name_is_generated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "src"
            source.mkdir()
            name = os.fsdecode(b"caf\xe9.txt")
            try:
                (source / name).write_text("menu\n", encoding="utf-8")
            except OSError:
                self.skipTest("filesystem rejects non-UTF-8 file names")
            destination = Path(tmp) / "site"

            result = generate(build_config(source, destination), load_templates(), GENERATED_AT)

            self.assertEqual(result.copied, 1)
            self.assertEqual((destination / name).read_text(encoding="utf-8"), "menu\n")
            fuzzy = json.loads((destination / FUZZY_FILENAME).read_text(encoding="utf-8"))
            self.assertEqual(fuzzy[0]["path"], name)
            self.assertEqual(fuzzy[0]["url"], "http://localhost/caf%E9.txt")
            root_html = (destination / INDEX_FILENAME).read_text(encoding="utf-8")
            self.assertIn("/caf%E9.txt", root_html)
            self.assertIn("caf\ufffd.txt", root_html)

    def test_read_only_source_page_and_metadata_are_replaced(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "src"
            source.mkdir()
            (source / "notes.txt").write_text("notes\n", encoding="utf-8")
            for reserved in (INDEX_FILENAME, METADATA_FILENAME):
                (source / reserved).write_text("from the source tree\n", encoding="utf-8")
                (source / reserved).chmod(0o444)
            destination = Path(tmp) / "site"

            result = generate(build_config(source, destination), load_templates(), GENERATED_AT)

            self.assertEqual(result.copied, 1)
            self.assertNotIn("from the source tree", (destination / INDEX_FILENAME).read_text(encoding="utf-8"))
            record = load_directory_metadata(destination / METADATA_FILENAME)
            self.assertIn("notes.txt", [entry.name for entry in record.files])

    def test_include_empty_produces_empty_folder_with_page(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = Path(tmp) / "site"
            config = build_config(source, destination, include_empty=True)

            generate(config, load_templates(), GENERATED_AT)

            self.assertTrue((destination / "empty" / INDEX_FILENAME).is_file())
            record = load_directory_metadata(destination / "empty" / METADATA_FILENAME)
            self.assertEqual((record.directories, record.files), ((), ()))

    def test_repeated_runs_are_byte_identical(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = Path(tmp) / "site"
            config = build_config(source, destination)

            generate(config, load_templates(), GENERATED_AT)
            first = _snapshot(destination)
            (destination / "stray.txt").write_text("left over", encoding="utf-8")
            generate(config, load_templates(), GENERATED_AT)
            second = _snapshot(destination)

            self.assertEqual(first, second)

    def test_destination_nested_in_source_is_not_mirrored_into_itself(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = source / "out"
            config = build_config(source, destination, include_empty=True)

            generate(config, load_templates(), GENERATED_AT)
            generate(config, load_templates(), GENERATED_AT)

            self.assertFalse((destination / "out").exists())
            record = load_directory_metadata(destination / METADATA_FILENAME)
            self.assertNotIn("out", [child.name for child in record.directories])


class PrepareDestinationTests(unittest.TestCase):
    def test_rejects_destination_equal_to_or_above_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            for destination in (source, Path(tmp)):
                with self.subTest(destination=destination):
                    with self.assertRaises(InvalidDirectoryError):
                        prepare_destination(build_config(source, destination))
            self.assertTrue((source / "index.txt").is_file())

    def test_rejects_file_destination_without_touching_it(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = Path(tmp) / "site.txt"
            destination.write_text("keep me", encoding="utf-8")

            with self.assertRaises(InvalidDirectoryError):
                prepare_destination(build_config(source, destination))
            self.assertEqual(destination.read_text(encoding="utf-8"), "keep me")

    def test_rejects_missing_source_before_clearing_destination(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            destination = Path(tmp) / "site"
            destination.mkdir()
            (destination / "previous.html").write_text("old", encoding="utf-8")

            with self.assertRaises(InvalidDirectoryError):
                prepare_destination(build_config(Path(tmp) / "missing", destination))
            self.assertTrue((destination / "previous.html").is_file())

    def test_clears_previous_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = _make_source(tmp)
            destination = Path(tmp) / "site"
            (destination / "old").mkdir(parents=True)
            (destination / "old" / "stale.html").write_text("old", encoding="utf-8")

            prepare_destination(build_config(source, destination))

            self.assertTrue(destination.is_dir())
            self.assertEqual(list(destination.iterdir()), [])


if __name__ == "__main__":
    unittest.main()
