"""
Syntax Highlighting

Single-pass lexer that turns source text into HTML-safe markup, wrapping
strings, comments and keywords in styling spans. Nothing else is altered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

KEYWORDS = frozenset(
    {
        "const", "let", "var", "function", "return", "if", "else", "for", "while",
        "import", "export", "from", "class", "extends", "interface", "type",
        "default", "async", "await", "true", "false", "null", "undefined",
    }
)

WORD_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")
QUOTES = frozenset("\"'`")
LINE_ENDS = "\n\r"


class TokenKind(Enum):
    TEXT = "text"
    STRING = "string"
    COMMENT = "comment"
    KEYWORD = "keyword"


STYLES = {
    TokenKind.KEYWORD: "color:#c586c0",
    TokenKind.COMMENT: "color:#6a9955; font-style:italic",
    TokenKind.STRING: "color:#ce9178",
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


def escape_html(text: str) -> str:
    """Escape the three characters that are unsafe inside <pre>."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _scan_string(source: str, start: int) -> int:
    """End offset of the string opened at ``start``; runs to EOF if unterminated."""
    quote = source[start]
    i = start + 1
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
        elif ch == quote:
            return i + 1
        else:
            i += 1
    return n


def _scan_line_comment(source: str, start: int) -> int:
    ends = [i for i in (source.find(c, start) for c in LINE_ENDS) if i != -1]
    return min(ends) if ends else len(source)


def _scan_block_comment(source: str, start: int) -> int:
    close = source.find("*/", start + 2)
    return len(source) if close == -1 else close + 2


def _scan_word(source: str, start: int) -> int:
    i = start
    n = len(source)
    while i < n and source[i] in WORD_CHARS:
        i += 1
    return i


def tokenize(source: str) -> List[Token]:
    """
    Split text into classified tokens, left to right.

    At each position the first matching rule wins: double, single and back
    quoted strings, line comments, block comments, then whole-word keywords.
    Concatenating the token texts always gives back ``source``.
    """
    tokens: List[Token] = []
    n = len(source)
    pos = 0
    plain_start = 0

    while pos < n:
        ch = source[pos]
        if ch in QUOTES:
            kind, end = TokenKind.STRING, _scan_string(source, pos)
        elif source.startswith("//", pos):
            kind, end = TokenKind.COMMENT, _scan_line_comment(source, pos)
        elif source.startswith("/*", pos):
            kind, end = TokenKind.COMMENT, _scan_block_comment(source, pos)
        elif ch in WORD_CHARS:
            end = _scan_word(source, pos)
            if source[pos:end] not in KEYWORDS:
                pos = end
                continue
            kind = TokenKind.KEYWORD
        else:
            pos += 1
            continue

        if plain_start < pos:
            tokens.append(Token(TokenKind.TEXT, source[plain_start:pos]))
        tokens.append(Token(kind, source[pos:end]))
        pos = plain_start = end

    if plain_start < n:
        tokens.append(Token(TokenKind.TEXT, source[plain_start:]))
    return tokens


def highlight_code(code: str) -> str:
    """
    Render source as HTML-safe markup with styling spans.

    The whole input is escaped before lexing, so text inside tokens is
    escaped exactly once.
    """
    if not code:
        return ""
    out: List[str] = []
    for token in tokenize(escape_html(code)):
        style = STYLES.get(token.kind)
        if style is None:
            out.append(token.text)
        else:
            out.append(f'<span style="{style}">{token.text}</span>')
    return "".join(out)


def line_numbers(code: str) -> List[int]:
    """Gutter numbers for the rendered source, one per line."""
    return list(range(1, code.count("\n") + 2))
