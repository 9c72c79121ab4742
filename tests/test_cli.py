import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from md2png.cli import build_parser, main

from tests.test_support import has_color, write_png


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = Path(self.tmp.name)

    def run_cli(self, *argv: str) -> tuple[int, str]:
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            code = main(list(argv))
        return code, stderr.getvalue()

    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        self.assertEqual(args.input, "")
        self.assertEqual(args.out, "out.png")
        self.assertFalse(args.no_link_footnotes)
        self.assertFalse(args.image_footnotes)

    def test_writes_png(self) -> None:
        src = self.root / "doc.md"
        src.write_text("# Hello\n\nSome text.\n", encoding="utf-8")
        out = self.root / "out" / "doc.png"
        code, _ = self.run_cli("--in", str(src), "--out", str(out), "--width", "300")
        self.assertEqual(code, 0)
        with Image.open(out) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.width, 300)

    def test_writes_jpeg(self) -> None:
        src = self.root / "doc.md"
        src.write_text("text\n", encoding="utf-8")
        out = self.root / "doc.jpg"
        code, _ = self.run_cli("--in", str(src), "--out", str(out))
        self.assertEqual(code, 0)
        with Image.open(out) as img:
            self.assertEqual(img.format, "JPEG")

    def test_images_resolve_next_to_input(self) -> None:
        docs = self.root / "docs"
        docs.mkdir()
        write_png(docs / "pic.png", (20, 20), (0x20, 0x40, 0xA0))
        src = docs / "doc.md"
        src.write_text("![pic](pic.png)\n", encoding="utf-8")
        out = self.root / "doc.png"
        code, _ = self.run_cli("--in", str(src), "--out", str(out))
        self.assertEqual(code, 0)
        with Image.open(out) as img:
            self.assertTrue(has_color(img, (0x20, 0x40, 0xA0)))

    def test_bad_extension(self) -> None:
        src = self.root / "doc.md"
        src.write_text("text\n", encoding="utf-8")
        code, err = self.run_cli("--in", str(src), "--out", str(self.root / "doc.gif"))
        self.assertEqual(code, 1)
        self.assertIn("unsupported output extension", err)
        self.assertFalse((self.root / "doc.gif").exists())

    def test_unknown_theme(self) -> None:
        src = self.root / "doc.md"
        src.write_text("text\n", encoding="utf-8")
        code, err = self.run_cli("--in", str(src), "--out", str(self.root / "doc.png"), "--theme", "neon")
        self.assertEqual(code, 1)
        self.assertIn("unknown theme", err)

    def test_missing_input(self) -> None:
        code, err = self.run_cli("--in", str(self.root / "nope.md"), "--out", str(self.root / "doc.png"))
        self.assertEqual(code, 1)
        self.assertTrue(err.startswith("md2png:"))

    def test_missing_font(self) -> None:
        src = self.root / "doc.md"
        src.write_text("text\n", encoding="utf-8")
        code, err = self.run_cli(
            "--in", str(src), "--out", str(self.root / "doc.png"), "--font", str(self.root / "none.ttf")
        )
        self.assertEqual(code, 1)
        self.assertIn("Font file not found", err)


if __name__ == "__main__":
    unittest.main()
