"""UI rendering module"""
import sys

from .config import *
from .state import AddingCode
from .utils import get_terminal_size, text_width, fit, center, format_percent

MIN_COLS = 40
MIN_ROWS = 8


def scroll_to(offset, selected, total, height):
    """Smallest scroll change that keeps ``selected`` on screen."""
    if height <= 0:
        return 0
    if selected is not None:
        if selected < offset:
            offset = selected
        elif selected >= offset + height:
            offset = selected - height + 1
    return max(0, min(offset, max(0, total - height)))


def title_bar(snap, cols):
    left = f"Stock v{VERSION}"
    if snap.last_error:
        right, color = snap.last_error, C_RED
    else:
        stamp = snap.last_refresh.strftime("%H:%M:%S") if snap.last_refresh else "--:--:--"
        right, color = f"LAST UPDATE {stamp}", C_WHITE
    gap = max(0, cols - text_width(left) - text_width(right))
    right = fit(right, max(0, cols - text_width(left) - gap))
    return f"{C_BG_HEADER}{C_BOLD}{left}{' ' * gap}{color}{right}{C_RESET}"


def box_edge(title, width, top):
    """One border row of a box, ``title`` set into the top edge."""
    if width < 2:
        return " " * width
    if top:
        label = fit(title, min(text_width(title), width - 2))
        return "┌" + label + "─" * (width - 2 - text_width(label)) + "┐"
    return "└" + "─" * (width - 2) + "┘"


def list_row(stock, inner, highlighted):
    pct = format_percent(stock.percent) + " "
    plain = fit(pct + stock.title, inner)
    if highlighted:
        return f"{C_BG_YELLOW}{C_BLACK}{C_BOLD}{plain}{C_RESET}"
    # red for rises, green for falls
    color = C_GREEN if stock.percent < 0 else C_RED
    cut = min(len(pct), len(plain))
    return f"{color}{plain[:cut]}{C_RESET}{plain[cut:]}"


def detail_lines(snap):
    if snap.selected is None:
        return []
    s = snap.stocks[snap.selected]
    return [
        f"CODE:{s.code}",
        f"UP_DOWN:{format_percent(s.percent)}",
        f"CURRENT:{s.price}",
        f"OPEN:{s.open}",
        f"YESTERDAY_CLOSE:{s.yestclose}",
        f"HIGH:{s.high}",
        f"LOW:{s.low}",
    ]


def status_bar(snap, cols):
    help_text = HELP_ADDING if isinstance(snap.mode, AddingCode) else HELP_NORMAL
    if snap.status_message:
        help_text = f"{help_text} | {snap.status_message}"
    return f"{C_DIM}{fit(help_text, cols)}{C_RESET}"


def build_frame(snap, cols, rows, offset):
    """Full-screen frame as a list of ``rows`` lines."""
    body = rows - 4
    list_w = max(10, cols * LIST_WIDTH_PERCENT // 100)
    detail_w = cols - list_w
    list_inner = list_w - 2
    detail_inner = max(0, detail_w - 2)

    lines = [title_bar(snap, cols)]
    lines.append(box_edge("LIST", list_w, True) + box_edge("DETAIL", detail_w, True))

    visible = snap.stocks[offset:offset + body]
    info = detail_lines(snap)
    for i in range(body):
        if i < len(visible):
            left = list_row(visible[i], list_inner, offset + i == snap.selected)
        else:
            left = " " * list_inner
        right = center(info[i], detail_inner) if i < len(info) else " " * detail_inner
        lines.append(f"│{left}││{right}│" if detail_w >= 2 else f"│{left}│")

    lines.append(box_edge("", list_w, False) + box_edge("", detail_w, False))
    lines.append(status_bar(snap, cols))
    return lines


def input_popup(snap, cols, rows):
    """Centred input box: ([(row, col, text)], (cursor_row, cursor_col)), 0-based."""
    width = max(10, cols * 80 // 100)
    left = (cols - width) // 2
    top = rows * 40 // 100
    inner = width - 2
    shown = snap.input_buffer
    # keep the tail visible when the buffer outgrows the box
    while text_width(shown) > inner - 1:
        shown = shown[1:]
    segments = [
        (top, left, box_edge("ENTER STOCK CODE", width, True)),
        (top + 1, left, f"│{C_YELLOW}{fit(shown, inner)}{C_RESET}│"),
        (top + 2, left, box_edge("", width, False)),
    ]
    return segments, (top + 1, left + 1 + text_width(shown))


def render(state):
    """Draw one frame for ``state`` and record the list viewport on it."""
    cols, rows = get_terminal_size()
    if cols < MIN_COLS or rows < MIN_ROWS:
        sys.stdout.write("\033[H\033[2J")
        sys.stdout.flush()
        return

    snap = state.snapshot()
    body = rows - 4
    state.list_offset = scroll_to(state.list_offset, snap.selected, len(snap.stocks), body)
    state.list_rows = body

    out = ["\033[H", "\r\n".join(f"{line}\033[K" for line in build_frame(snap, cols, rows, state.list_offset))]

    if isinstance(snap.mode, AddingCode):
        segments, (cur_row, cur_col) = input_popup(snap, cols, rows)
        for row, col, text in segments:
            out.append(f"\033[{row + 1};{col + 1}H{text}")
        out.append(f"\033[{cur_row + 1};{cur_col + 1}H\033[?25h")
    else:
        out.append("\033[?25l")

    sys.stdout.write("".join(out))
    sys.stdout.flush()
