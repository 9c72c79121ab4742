import tempfile
import unittest
from pathlib import Path

from md2png.document import parse_markdown
from md2png.footnotes import FootnoteRegistry
from md2png.images import ImageResolver
from md2png.theme import LIGHT_THEME
from md2png.tokens import FOOTNOTE_MARKER_SCALE, LINE_BREAK, ImageToken, TextToken, TokenCollector

from tests.test_support import BASE_PX, default_fonts, static_transport, write_png


class TokenCollectorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.fonts = default_fonts()
        self.theme = LIGHT_THEME
        self.registry = FootnoteRegistry()
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.resolver = ImageResolver(base_dir=Path(self.tmp.name), transport=static_transport(404))
        self.addCleanup(self.resolver.close)

    def collector(self, **kwargs) -> TokenCollector:
        return TokenCollector(self.fonts, self.theme, registry=self.registry, resolver=self.resolver, **kwargs)

    def collect(self, markdown: str, **kwargs):
        paragraph = parse_markdown(markdown).children[0]
        return self.collector(**kwargs).collect(paragraph, self.fonts.regular, BASE_PX, self.theme.foreground)

    def text(self, text: str, **kwargs) -> TextToken:
        values = {"face": self.fonts.regular, "size": BASE_PX, "color": self.theme.foreground}
        values.update(kwargs)
        return TextToken(text, **values)


class TestInlineTokens(TokenCollectorTestCase):
    def test_soft_break_becomes_line_break(self) -> None:
        self.assertEqual(self.collect("first\nsecond"), [self.text("first"), LINE_BREAK, self.text("second")])

    def test_strong_selects_bold_face(self) -> None:
        tokens = self.collect("plain **bold** *em*")
        self.assertEqual(tokens[1], self.text("bold", face=self.fonts.bold))
        self.assertEqual(tokens[3], self.text("em"))

    def test_code_span_uses_mono(self) -> None:
        tokens = self.collect("run `make`")
        self.assertEqual(tokens[-1], self.text("make", face=self.fonts.mono, size=BASE_PX * 0.95))

    def test_unknown_inline_wrapper_is_transparent(self) -> None:
        self.assertEqual(self.collect("~~gone~~"), [self.text("gone")])

    def test_link_is_underlined_and_numbered(self) -> None:
        tokens = self.collect("[site](https://example.com)")
        self.assertEqual(
            tokens,
            [
                self.text("site", color=self.theme.link, underline=True),
                self.text("[1]", size=BASE_PX * FOOTNOTE_MARKER_SCALE),
            ],
        )
        self.assertEqual(self.registry.entries(), [(1, "https://example.com")])

    def test_autolink_uses_destination_text(self) -> None:
        tokens = self.collect("<https://example.com>")
        self.assertEqual(tokens[0], self.text("https://example.com", color=self.theme.link, underline=True))
        self.assertEqual(len(self.registry), 1)

    def test_repeated_destination_shares_index(self) -> None:
        tokens = self.collect("[a](https://x.example) [b](https://x.example)")
        markers = [t.text for t in tokens if isinstance(t, TextToken) and t.text.startswith("[")]
        self.assertEqual(markers, ["[1]", "[1]"])

    def test_destination_registered_as_written(self) -> None:
        tokens = self.collect("[x](https://example.com/café) [y](<https://example.com/a b>)")
        self.assertEqual(
            self.registry.entries(),
            [(1, "https://example.com/café"), (2, "https://example.com/a b")],
        )
        self.assertEqual(tokens[1], self.text("[1]", size=BASE_PX * FOOTNOTE_MARKER_SCALE))

    def test_link_footnotes_disabled(self) -> None:
        tokens = self.collect("[site](https://example.com)", link_footnotes=False)
        self.assertEqual(tokens, [self.text("site", color=self.theme.link, underline=True)])
        self.assertEqual(len(self.registry), 0)


class TestImageTokens(TokenCollectorTestCase):
    def test_resolved_image(self) -> None:
        write_png(Path(self.tmp.name) / "dot.png", (4, 4), (0x10, 0x20, 0x30))
        tokens = self.collect("![dot](dot.png)")
        self.assertEqual(len(tokens), 1)
        self.assertIsInstance(tokens[0], ImageToken)
        self.assertEqual(tokens[0].image.size, (4, 4))

    def test_missing_image_falls_back_to_alt(self) -> None:
        self.assertEqual(self.collect("![a chart](missing.png)"), [self.text("a chart")])

    def test_alt_text_drops_inline_markup(self) -> None:
        self.assertEqual(self.collect("![*a* `b` c](missing.png)"), [self.text("a b c")])

    def test_missing_image_without_alt_shows_source(self) -> None:
        self.assertEqual(self.collect("![](missing.png)"), [self.text("missing.png", color=self.theme.warning)])

    def test_footnote_toggles_are_independent(self) -> None:
        self.collect(
            "[link](https://example.com) ![img](https://example.com/image.png)",
            link_footnotes=False,
            image_footnotes=True,
        )
        self.assertEqual(self.registry.entries(), [(1, "https://example.com/image.png")])


if __name__ == "__main__":
    unittest.main()
