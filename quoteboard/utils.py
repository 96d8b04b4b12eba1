"""Utility functions module"""
import os
import unicodedata


def get_terminal_size():
    """Get terminal dimensions."""
    try:
        size = os.get_terminal_size()
        return size.columns, size.lines
    except OSError:
        return 100, 30


def char_width(ch):
    """Columns a character occupies: 2 for East Asian wide, 0 for combining."""
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def text_width(text):
    return sum(char_width(ch) for ch in text)


def fit(text, width):
    """Truncate or pad ``text`` to exactly ``width`` columns."""
    out, used = [], 0
    for ch in text:
        w = char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out) + " " * (width - used)


def center(text, width):
    pad = max(0, width - text_width(text))
    left = pad // 2
    return fit(" " * left + text, width)


def format_percent(fraction):
    """0.0123 -> '+1.23%'"""
    return f"{fraction * 100:+.2f}%"
