import unittest

from md2png.footnotes import FootnoteRegistry


class TestFootnoteRegistry(unittest.TestCase):
    def test_indices_follow_first_appearance(self) -> None:
        reg = FootnoteRegistry()
        self.assertEqual(reg.register("https://a.example"), 1)
        self.assertEqual(reg.register("https://b.example"), 2)
        self.assertEqual(reg.register("https://a.example"), 1)
        self.assertEqual(reg.entries(), [(1, "https://a.example"), (2, "https://b.example")])
        self.assertEqual(len(reg), 2)

    def test_destinations_are_trimmed(self) -> None:
        reg = FootnoteRegistry()
        self.assertEqual(reg.register("  https://a.example "), 1)
        self.assertEqual(reg.register("https://a.example"), 1)
        self.assertIn("https://a.example", reg)
        self.assertEqual(reg.index_of(" https://a.example"), 1)

    def test_unknown_destination(self) -> None:
        reg = FootnoteRegistry()
        self.assertIsNone(reg.index_of("nowhere"))
        self.assertNotIn("nowhere", reg)
        self.assertEqual(reg.entries(), [])


if __name__ == "__main__":
    unittest.main()
