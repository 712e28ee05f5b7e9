"""Screen composition: turn the state machine's state into a Frame.

compose() only reads state. Calling it twice on the same state gives equal
frames, and it never moves a cursor or scroll offset.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rich.cells import cell_len, get_character_cell_size

from .models import NOTE_EXT, Origin, Screen
from .theme import PLAIN, Line, Span, Style, Theme, text_line
from .widgets import SelectList

MARGIN_Y = 1
MARGIN_X = 2
HEADER_ROWS = 2  # title line and spacer
FOOTER_ROWS = 2  # status line and help line
EDITOR_CHROME_ROWS = 2  # "Editing: ..." and spacer
PREVIEW_CHROME_ROWS = 2  # pager header and footer

APP_TITLE = "Todo App"
PROMPT_LABEL = "Enter file name:"
PROMPT_MARKER = "> "
EDITOR_PLACEHOLDER = "Start typing your todo..."

MAIN_MENU_HELP = "↑/↓: navigate | enter: select | ctrl+c: quit"
PROMPT_HELP = "(enter to continue, esc to cancel)"
EDITOR_HELP = "ctrl+p: preview | esc: cancel | ctrl+d: save & exit | ctrl+s: save"
PREVIEW_HELP = "↑/↓: scroll | g/G: top/bottom | ctrl+u/d: half page | ctrl+p/q/esc: back to editor"
NOTE_LIST_HELP = "↑/↓: navigate | enter: open | ctrl+p: preview | x: delete | esc: back"


@dataclass(frozen=True)
class Frame:
    """Styled regions for one render cycle.

    cursor is (row, col) relative to the top-left of the body, or None when
    the terminal cursor should be hidden.
    """

    title: Line
    body: Tuple[Line, ...]
    status: Line = ()
    help: Line = ()
    cursor: Optional[Tuple[int, int]] = None


def body_size(width: int, height: int) -> Tuple[int, int]:
    """Columns and rows available between the title and the footer."""
    w = width - 2 * MARGIN_X
    h = height - 2 * MARGIN_Y - HEADER_ROWS - FOOTER_ROWS
    return max(1, w), max(1, h)


def editor_size(width: int, height: int) -> Tuple[int, int]:
    w, h = body_size(width, height)
    return w, max(1, h - EDITOR_CHROME_ROWS)


def preview_size(width: int, height: int) -> Tuple[int, int]:
    w, h = body_size(width, height)
    return w, max(1, h - PREVIEW_CHROME_ROWS)


def printable(text: str) -> str:
    """Replace control characters with spaces."""
    return "".join(c if c.isprintable() else " " for c in text)


def crop_cells(text: str, width: int) -> str:
    """Longest prefix of text that fits in width terminal cells."""
    if cell_len(text) <= width:
        return text
    used = 0
    for i, c in enumerate(text):
        used += get_character_cell_size(c)
        if used > width:
            return text[:i]
    return text


def pad_cells(text: str, width: int) -> str:
    return text + " " * max(0, width - cell_len(text))


def clip(line: Line, width: int) -> Line:
    """Crop a line to width cells; wide characters count as two."""
    out: List[Span] = []
    remaining = width
    for span in line:
        if remaining <= 0:
            break
        text = crop_cells(span.text, remaining)
        out.append(Span(text, span.style))
        remaining -= cell_len(text)
    return tuple(out)


def _title(text: str, style: Style) -> Line:
    return (Span(f" {text} ", style),)


def _status(machine, theme: Theme, fallback: str = "") -> Line:
    msg = machine.status
    if msg is None:
        return text_line(fallback, theme.help)
    return text_line(msg.text, theme.status_error if msg.error else theme.status_info)


def _list_rows(lst: SelectList, theme: Theme, width: int, empty_text: str) -> Tuple[Line, ...]:
    if not lst.items:
        return (text_line(empty_text, theme.item_desc),)
    rows: List[Line] = []
    for index, item in lst.visible():
        selected = index == lst.cursor
        marker = "│ " if selected else "  "
        title_style = theme.selected_title if selected else theme.item_title
        desc_style = theme.selected_desc if selected else theme.item_desc
        rows.append(clip((Span(marker, title_style), Span(printable(item.display_label()), title_style)), width))
        rows.append(clip((Span(marker, desc_style), Span(printable(item.description()), desc_style)), width))
        rows.append(())
    return tuple(rows)


def compose_main_menu(machine, theme: Theme) -> Frame:
    width, _ = body_size(machine.width, machine.height)
    return Frame(
        title=_title(APP_TITLE, theme.app_title),
        body=_list_rows(machine.main_menu, theme, width, ""),
        status=_status(machine, theme),
        help=text_line(MAIN_MENU_HELP, theme.help),
    )


def compose_create_prompt(machine, theme: Theme) -> Frame:
    prompt = machine.prompt
    visible, col = prompt.visible()
    if prompt.value:
        field = text_line(printable(visible), theme.label)
    else:
        field = text_line(prompt.placeholder, theme.placeholder)
    body = (
        text_line(PROMPT_LABEL, theme.label),
        (),
        (Span(PROMPT_MARKER, theme.selected_title),) + field,
    )
    return Frame(
        title=_title(APP_TITLE, theme.app_title),
        body=body,
        status=_status(machine, theme),
        help=text_line(PROMPT_HELP, theme.help),
        cursor=(2, len(PROMPT_MARKER) + cell_len(printable(visible[:col]))),
    )


def compose_editor(machine, theme: Theme) -> Frame:
    session = machine.session
    editor = session.editor
    width, _ = body_size(machine.width, machine.height)

    verb = "New" if session.origin is Origin.NEW else "Editing"
    header: Line = (Span(printable(f"{verb}: {session.target_name}{NOTE_EXT}"), theme.label),)
    if session.dirty:
        header += (Span("  [modified]", theme.modified),)

    rows: List[Line] = [clip(header, width), ()]
    gutter = editor.gutter_width
    empty = session.buffer == ""
    for number, text in editor.visible():
        num = Span(f"{number:>{gutter - 1}} ", theme.line_number)
        if empty:
            rows.append(clip((num, Span(EDITOR_PLACEHOLDER, theme.placeholder)), width))
        elif number - 1 == editor.cy:
            rows.append(clip((num, Span(pad_cells(printable(text), editor.text_width), theme.cursor_line)), width))
        else:
            rows.append(clip((num, Span(printable(text), PLAIN)), width))
    while len(rows) < EDITOR_CHROME_ROWS + editor.height:
        rows.append((Span("~", theme.end_of_buffer),))

    row, _ = editor.cursor_position()
    before = editor.lines[editor.cy][editor.view_left: editor.cx] if editor.lines else ""
    col = gutter + cell_len(printable(before))
    return Frame(
        title=_title(APP_TITLE, theme.app_title),
        body=tuple(rows),
        status=_status(machine, theme),
        help=text_line(EDITOR_HELP, theme.help),
        cursor=(EDITOR_CHROME_ROWS + row, col),
    )


def compose_preview(machine, theme: Theme) -> Frame:
    preview = machine.preview
    width = preview.width

    name = f"{preview.title}{NOTE_EXT}" + (" (raw)" if preview.raw else "")
    label = f"╭ {printable(name)} ├"
    header = (Span(label, theme.preview_border), Span("─" * max(0, width - len(label)), theme.preview_border))
    info = f"┤ {preview.scroll_percent() * 100:3.0f}% ╮"
    footer = (Span("─" * max(0, width - len(info)), theme.preview_border), Span(info, theme.preview_border))

    rows: List[Line] = [clip(header, width)]
    visible = preview.visible()
    rows.extend(clip(line, width) for line in visible)
    rows.extend(() for _ in range(preview.height - len(visible)))
    rows.append(clip(footer, width))
    return Frame(
        title=_title(APP_TITLE, theme.app_title),
        body=tuple(rows),
        status=_status(machine, theme),
        help=text_line(PREVIEW_HELP, theme.help),
    )


def compose_note_list(machine, theme: Theme) -> Frame:
    lst = machine.note_list
    width, _ = body_size(machine.width, machine.height)
    count = len(lst.items)
    fallback = f"{count} todo" + ("" if count == 1 else "s")
    return Frame(
        title=_title(lst.title, theme.list_title),
        body=_list_rows(lst, theme, width, "No todos."),
        status=_status(machine, theme, fallback),
        help=text_line(NOTE_LIST_HELP, theme.help),
    )


COMPOSERS = {
    Screen.MAIN_MENU: compose_main_menu,
    Screen.CREATE_PROMPT: compose_create_prompt,
    Screen.EDITOR: compose_editor,
    Screen.PREVIEW: compose_preview,
    Screen.NOTE_LIST: compose_note_list,
}


def compose(machine, theme: Theme) -> Frame:
    """Build the Frame for the machine's active screen."""
    return COMPOSERS[machine.screen](machine, theme)
