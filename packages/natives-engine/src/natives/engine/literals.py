"""Constant evaluation of JavaScript string expressions.

Only string literals ('...', "...", `...` without substitutions) and `+`
concatenations of them are understood. Anything else is reported as "not a
literal" and the surrounding idiom is left alone.
"""

import re
from typing import List, Optional

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_HEX2 = re.compile(r"[0-9a-fA-F]{2}")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_HEX_BRACED = re.compile(r"\{([0-9a-fA-F]{1,6})\}")

# A single string literal, usable inside larger patterns.
STRING_LITERAL = r"""(?:'(?:[^'\\\n]|\\[\s\S])*'|"(?:[^"\\\n]|\\[\s\S])*"|`(?:[^`\\$]|\\[\s\S]|\$(?!\{))*`)"""

# One or more string literals joined with '+'.
LITERAL_EXPRESSION = rf"{STRING_LITERAL}(?:\s*\+\s*{STRING_LITERAL})*"


class LiteralError(ValueError):
    pass


class _Reader:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""


def _read_escape(reader: _Reader) -> str:
    text = reader.text
    if reader.at_end():
        raise LiteralError("dangling backslash")
    ch = text[reader.pos]
    reader.pos += 1

    if ch in _SIMPLE_ESCAPES:
        # \0 followed by a digit is a legacy octal escape; refuse it.
        if ch == "0" and reader.peek().isdigit():
            raise LiteralError("octal escapes are not supported")
        return _SIMPLE_ESCAPES[ch]
    if ch == "x":
        m = _HEX2.match(text, reader.pos)
        if not m:
            raise LiteralError("malformed \\x escape")
        reader.pos = m.end()
        return chr(int(m.group(0), 16))
    if ch == "u":
        m = _HEX_BRACED.match(text, reader.pos)
        if m:
            reader.pos = m.end()
            code = int(m.group(1), 16)
            if code > 0x10FFFF:
                raise LiteralError("code point out of range")
            return chr(code)
        m = _HEX4.match(text, reader.pos)
        if not m:
            raise LiteralError("malformed \\u escape")
        reader.pos = m.end()
        return chr(int(m.group(0), 16))
    if ch == "\r":
        if reader.peek() == "\n":
            reader.pos += 1
        return ""
    if ch in ("\n", "\u2028", "\u2029"):
        return ""
    if ch.isdigit():
        raise LiteralError("octal escapes are not supported")
    return ch


def _read_string(reader: _Reader) -> str:
    quote = reader.peek()
    if quote not in ("'", '"', "`"):
        raise LiteralError(f"expected a string literal at offset {reader.pos}")
    reader.pos += 1

    chunks: List[str] = []
    text = reader.text
    while True:
        if reader.at_end():
            raise LiteralError("unterminated string literal")
        ch = text[reader.pos]
        if ch == quote:
            reader.pos += 1
            return "".join(chunks)
        if ch == "\\":
            reader.pos += 1
            chunks.append(_read_escape(reader))
            continue
        if quote == "`" and ch == "$" and text.startswith("${", reader.pos):
            raise LiteralError("template substitutions are not constant")
        if quote != "`" and ch == "\n":
            raise LiteralError("line break inside string literal")
        chunks.append(ch)
        reader.pos += 1


def parse_literal_expression(expression: str) -> str:
    """
    Evaluates `expression` to a string.

    Raises LiteralError for anything but literals and their concatenation.
    Surrounding parentheses are not accepted.
    """
    reader = _Reader(expression)
    reader.skip_ws()
    parts = [_read_string(reader)]
    reader.skip_ws()
    while not reader.at_end():
        if reader.peek() != "+":
            raise LiteralError(f"unexpected {reader.peek()!r} at offset {reader.pos}")
        reader.pos += 1
        reader.skip_ws()
        parts.append(_read_string(reader))
        reader.skip_ws()
    return "".join(parts)


def evaluate_literal(expression: Optional[str]) -> Optional[str]:
    """Like parse_literal_expression, but returns None instead of raising."""
    if expression is None:
        return None
    try:
        return parse_literal_expression(expression)
    except LiteralError:
        return None
