import unittest

from mdtodo.errors import RenderError
from mdtodo.preview import EMPTY_DOCUMENT, PreviewState, convert_style, render_markdown
from mdtodo.theme import DEFAULT_THEME, PLAIN, line_text, text_line


class CountingRenderer:
    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def __call__(self, text, theme, width):
        self.calls.append((text, width))
        if self.fail:
            raise RenderError("boom")
        return [text_line(f"R:{line}") for line in text.split("\n")]


class TestRenderMarkdown(unittest.TestCase):
    def test_renders_heading_and_list_text(self) -> None:
        lines = render_markdown("# Groceries\n\n- milk\n- eggs\n", DEFAULT_THEME, 40)
        text = "\n".join(line_text(line) for line in lines)
        self.assertIn("Groceries", text)
        self.assertIn("milk", text)
        self.assertIn("eggs", text)
        self.assertNotIn("# Groceries", text)
        self.assertNotIn("\x1b", text)

    def test_lines_fit_width(self) -> None:
        lines = render_markdown("word " * 100, DEFAULT_THEME, 30)
        self.assertGreater(len(lines), 1)
        for line in lines:
            self.assertLessEqual(len(line_text(line)), 30)

    def test_bold_text_gets_bold_style(self) -> None:
        lines = render_markdown("some **loud** words", DEFAULT_THEME, 40)
        spans = [s for line in lines for s in line if "loud" in s.text]
        self.assertTrue(spans)
        self.assertTrue(spans[0].style.bold)

    def test_convert_style_none_is_plain(self) -> None:
        self.assertEqual(convert_style(None), PLAIN)


class TestPreviewState(unittest.TestCase):
    def test_enter_renders_once_and_starts_at_top(self) -> None:
        renderer = CountingRenderer()
        p = PreviewState.enter("a\nb\nc", "note", width=20, height=2, renderer=renderer)
        self.assertEqual(len(renderer.calls), 1)
        self.assertEqual(renderer.calls[0], ("a\nb\nc", 20))
        self.assertEqual(p.offset, 0)
        self.assertFalse(p.raw)
        for key in ["j", "k", "G", "g", "ctrl+d"]:
            p.handle(key)
        p.resize(30, 3)
        self.assertEqual(len(renderer.calls), 1)

    def test_empty_buffer_uses_placeholder_document(self) -> None:
        renderer = CountingRenderer()
        PreviewState.enter("", "note", renderer=renderer)
        self.assertEqual(renderer.calls[0][0], EMPTY_DOCUMENT)

    def test_render_failure_falls_back_to_raw_text(self) -> None:
        p = PreviewState.enter("# raw\ntext", "note", renderer=CountingRenderer(fail=True))
        self.assertTrue(p.raw)
        self.assertEqual([line_text(l) for l in p.lines], ["# raw", "text"])

    def test_paging_keys(self) -> None:
        p = PreviewState.enter("\n".join("x" * 20), "n", height=4, renderer=CountingRenderer())
        p.handle("f")
        self.assertEqual(p.offset, 4)
        p.handle("ctrl+f")
        self.assertEqual(p.offset, 6)
        p.handle("ctrl+d")
        self.assertEqual(p.offset, 8)
        p.handle("ctrl+u")
        self.assertEqual(p.offset, 6)
        p.handle("b")
        self.assertEqual(p.offset, 2)
        p.page_up()
        self.assertEqual(p.offset, 0)
        p.half_page_down()
        self.assertEqual(p.offset, 2)

    def test_scroll_is_clamped(self) -> None:
        p = PreviewState.enter("\n".join("x" * 10), "n", height=4, renderer=CountingRenderer())
        self.assertEqual(p.content_height, 10)
        p.scroll(-5)
        self.assertEqual(p.offset, 0)
        p.scroll(100)
        self.assertEqual(p.offset, 6)
        self.assertEqual(p.scroll_percent(), 1.0)
        p.handle("ctrl+u")
        self.assertEqual(p.offset, 4)
        p.handle("home")
        self.assertEqual(p.scroll_percent(), 0.0)

    def test_short_content_never_scrolls(self) -> None:
        p = PreviewState.enter("one", "n", height=10, renderer=CountingRenderer())
        p.scroll(3)
        self.assertEqual(p.offset, 0)
        self.assertEqual(p.scroll_percent(), 1.0)

    def test_resize_clamps_offset(self) -> None:
        p = PreviewState.enter("\n".join("x" * 10), "n", height=2, renderer=CountingRenderer())
        p.bottom()
        self.assertEqual(p.offset, 8)
        p.resize(20, 8)
        self.assertEqual(p.offset, 2)
        self.assertEqual(len(p.visible()), 8)

    def test_exit_discards_render(self) -> None:
        p = PreviewState.enter("x", "n", renderer=CountingRenderer())
        p.exit()
        self.assertEqual(p.lines, ())


if __name__ == "__main__":
    unittest.main()
