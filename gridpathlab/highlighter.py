"""Syntax highlighting for the code editor and line-number gutter sizing."""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass

NORMAL_STATE = 0
IN_COMMENT_STATE = 1

_KEYWORDS = (
    # C++
    "class", "const", "enum", "explicit", "friend", "inline", "namespace",
    "operator", "private", "protected", "public", "signals", "signed", "slots",
    "static", "struct", "template", "typedef", "typename", "union", "unsigned",
    "virtual", "volatile", "bool", "break", "case", "catch", "char", "continue",
    "default", "delete", "do", "double", "else", "float", "for", "goto", "if",
    "int", "long", "new", "return", "short", "switch", "throw", "try", "void",
    "while",
    # Python
    "def", "pass", "raise", "from", "import", "as", "global", "assert",
    "except", "in",
    # Java
    "abstract", "extends", "implements", "throws", "synchronized", "transient",
)

_CLASS_PATTERN = re.compile(r"\bQ[A-Za-z]+\b")
_LINE_COMMENT_PATTERN = re.compile(r"//[^\n]*")
_HASH_COMMENT_PATTERN = re.compile(r"#[^\n]*")
_STRING_PATTERN = re.compile(r'".*"')
_FUNCTION_PATTERN = re.compile(r"\b[A-Za-z0-9_]+(?=\()")
_NUMBER_PATTERN = re.compile(r"\b\d+\b")
_COMMENT_START = re.compile(r"/\*")
_COMMENT_END = re.compile(r"\*/")

_THEME_COLOURS: dict[str, dict[str, str]] = {
    "dark": {
        "keyword": "#00FFFF",
        "class": "#4EC9B0",
        "single_line_comment": "#6A9955",
        "multi_line_comment": "#6A9955",
        "quotation": "#CE9178",
        "function": "#DCDCAA",
        "number": "#B5CEA8",
    },
    "light": {
        "keyword": "#0000FF",
        "class": "#267F99",
        "single_line_comment": "#008000",
        "multi_line_comment": "#008000",
        "quotation": "#A31515",
        "function": "#795E26",
        "number": "#098658",
    },
}

_BOLD_CATEGORIES = frozenset({"keyword", "class"})


@dataclass(frozen=True)
class TextFormat:
    """How a run of characters is drawn."""

    foreground: str | None = None
    bold: bool = False


@dataclass(frozen=True)
class Span:
    """A run of characters in one line that share a format."""

    start: int
    length: int
    format: TextFormat

    @property
    def end(self) -> int:
        return self.start + self.length


class CodeHighlighter:
    """Highlights C++, Java and Python source line by line.

    Keywords, Qt-style class names, comments, strings, function names and
    numbers each get a colour from the current theme; ``/* ... */`` comments
    may span several lines.
    """

    def __init__(self, theme: str = "light") -> None:
        self.formats: dict[str, TextFormat] = {
            name: TextFormat(bold=name in _BOLD_CATEGORIES)
            for name in _THEME_COLOURS["light"]
        }
        self.theme = "light"
        self._rules: list[tuple[re.Pattern[str], str]] = self._build_rules()
        self.set_theme(theme)

    @staticmethod
    def _build_rules() -> list[tuple[re.Pattern[str], str]]:
        rules = [(re.compile(rf"\b{word}\b"), "keyword") for word in _KEYWORDS]
        rules += [
            (_CLASS_PATTERN, "class"),
            (_LINE_COMMENT_PATTERN, "single_line_comment"),
            (_HASH_COMMENT_PATTERN, "single_line_comment"),
            (_STRING_PATTERN, "quotation"),
            (_FUNCTION_PATTERN, "function"),
            (_NUMBER_PATTERN, "number"),
        ]
        return rules

    def set_theme(self, theme: str) -> None:
        """Switch colours; an unknown theme keeps the colours already in use."""
        colours = _THEME_COLOURS.get(theme)
        if colours is not None:
            self.formats = {
                name: TextFormat(foreground=colour, bold=name in _BOLD_CATEGORIES)
                for name, colour in colours.items()
            }
        self.theme = theme

    def highlight_block(self, text: str, previous_state: int = NORMAL_STATE) -> tuple[list[Span], int]:
        """Highlight one line.

        ``previous_state`` is the state returned for the line before; the
        returned state is IN_COMMENT_STATE when a block comment stays open.
        Spans are sorted, do not overlap and leave plain text uncovered.
        """
        chars: list[TextFormat | None] = [None] * len(text)

        def apply(start: int, length: int, fmt: TextFormat) -> None:
            end = min(start + length, len(text))
            if end > start:
                chars[start:end] = [fmt] * (end - start)

        for pattern, category in self._rules:
            fmt = self.formats[category]
            for match in pattern.finditer(text):
                apply(match.start(), match.end() - match.start(), fmt)

        state = NORMAL_STATE
        comment_format = self.formats["multi_line_comment"]
        if previous_state == IN_COMMENT_STATE:
            start: int | None = 0
        else:
            found = _COMMENT_START.search(text)
            start = found.start() if found else None

        while start is not None:
            closing = _COMMENT_END.search(text, start)
            if closing is None:
                state = IN_COMMENT_STATE
                length = len(text) - start
            else:
                length = closing.end() - start
            apply(start, length, comment_format)
            found = _COMMENT_START.search(text, start + length)
            start = found.start() if found else None

        spans: list[Span] = []
        position = 0
        for fmt, group in itertools.groupby(chars):
            size = sum(1 for _ in group)
            if fmt is not None:
                spans.append(Span(position, size, fmt))
            position += size
        return spans, state

    def highlight(self, text: str) -> list[list[Span]]:
        """Highlight a whole document, one list of spans per line."""
        state = NORMAL_STATE
        result: list[list[Span]] = []
        for line in text.split("\n"):
            spans, state = self.highlight_block(line, state)
            result.append(spans)
        return result


def line_number_digits(block_count: int) -> int:
    """Number of digits the line-number gutter needs for this many lines."""
    return len(str(max(1, block_count)))