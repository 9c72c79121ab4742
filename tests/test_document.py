import unittest

from md2png.document import NodeKind, describe_node, heading_level, is_tight_list, node_kind, parse_markdown


class TestParse(unittest.TestCase):
    def test_block_kinds(self) -> None:
        md = "# T\n\npara\n\n- a\n\n> q\n\n```\nx\n```\n\n    indented\n\n| a |\n|---|\n| 1 |\n\n---\n\n::: note\nbody\n:::\n"
        kinds = [node_kind(n) for n in parse_markdown(md).children]
        self.assertEqual(
            kinds,
            [
                NodeKind.HEADING,
                NodeKind.PARAGRAPH,
                NodeKind.LIST,
                NodeKind.QUOTE,
                NodeKind.CODE_BLOCK,
                NodeKind.CODE_BLOCK,
                NodeKind.TABLE,
                NodeKind.THEMATIC_BREAK,
                NodeKind.UNSUPPORTED,
            ],
        )

    def test_directive_description(self) -> None:
        node = parse_markdown("::: custom\nx\n:::\n").children[0]
        self.assertEqual(describe_node(node), "directive custom")

    def test_raw_html_is_text(self) -> None:
        node = parse_markdown("<div>hi</div>\n").children[0]
        self.assertEqual(node_kind(node), NodeKind.PARAGRAPH)

    def test_heading_level(self) -> None:
        self.assertEqual(heading_level(parse_markdown("### three").children[0]), 3)

    def test_tight_lists(self) -> None:
        self.assertTrue(is_tight_list(parse_markdown("- a\n- b\n").children[0]))
        self.assertFalse(is_tight_list(parse_markdown("- a\n\n- b\n").children[0]))


if __name__ == "__main__":
    unittest.main()
