import unittest

from md2png.config import PX_PER_PT, RenderConfigError
from md2png.fonts import FontConfig, FontError, FontSet, complete_fonts, load_fonts
from md2png.theme import DARK_THEME, LIGHT_THEME, Theme, ThemeError, resolve_theme, theme_by_name


class TestThemes(unittest.TestCase):
    def test_lookup(self) -> None:
        self.assertIs(theme_by_name(""), LIGHT_THEME)
        self.assertIs(theme_by_name(None), LIGHT_THEME)
        self.assertIs(theme_by_name("Light"), LIGHT_THEME)
        self.assertIs(theme_by_name(" DARK "), DARK_THEME)

    def test_unknown(self) -> None:
        with self.assertRaises(ThemeError) as cm:
            theme_by_name("solarized")
        self.assertIsInstance(cm.exception, RenderConfigError)

    def test_resolve_passes_through_theme(self) -> None:
        custom = Theme(*(tuple([i, i, i]) for i in range(7)))
        self.assertIs(resolve_theme(custom), custom)


class TestFonts(unittest.TestCase):
    def test_defaults_fill_every_role(self) -> None:
        fonts = complete_fonts(None, 12)
        self.assertTrue(fonts.is_complete())
        self.assertAlmostEqual(fonts.regular.base_size, 12 * PX_PER_PT)

    def test_partial_set_keeps_given_faces(self) -> None:
        regular = complete_fonts(None, 12).regular
        fonts = complete_fonts(FontSet(regular=regular), 12)
        self.assertIs(fonts.regular, regular)
        self.assertIsNotNone(fonts.mono)

    def test_missing_explicit_path(self) -> None:
        with self.assertRaises(FontError):
            load_fonts(FontConfig(mono_path="/nonexistent/mono.ttf"))


if __name__ == "__main__":
    unittest.main()
