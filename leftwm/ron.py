"""Reading and writing RON (Rusty Object Notation) documents as plain Python data.

Structs become dicts, lists and tuples stay lists and tuples, unit enum variants
become their name as a string and ``Some(x)`` reads as ``x``.  A variant carrying
data, ``Name(x)``, becomes ``{"Name": x}``.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any

__all__ = ["RonError", "loads", "dumps"]

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_DECIMAL = re.compile(
    r"(?:[0-9][0-9_]*(?:\.[0-9_]*)?|\.[0-9][0-9_]*)(?:[eE][+-]?[0-9][0-9_]*)?"
)
_RADIX = (
    ("0x", 16, re.compile(r"[0-9A-Fa-f_]+")),
    ("0b", 2, re.compile(r"[01_]+")),
    ("0o", 8, re.compile(r"[0-7_]+")),
)
_RAW_START = re.compile(r'r(#*)"')
_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "'": "'",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}
_INDENT = "    "


class RonError(ValueError):
    """A RON document that cannot be read."""

    def __init__(self, message: str, text: str = "", position: int | None = None):
        self.position = position
        if position is not None:
            line = text.count("\n", 0, position) + 1
            column = position - (text.rfind("\n", 0, position) + 1) + 1
            message = f"{message} at line {line}, column {column}"
        super().__init__(message)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str, position: int | None = None) -> RonError:
        return RonError(message, self.text, self.pos if position is None else position)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def expect(self, char: str) -> None:
        if self.peek() != char:
            found = repr(self.peek()) if self.peek() else "end of input"
            raise self.error(f"expected {char!r}, found {found}")
        self.pos += 1

    def skip_ws(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos].isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                self.skip_block_comment()
            else:
                break

    def skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        raise self.error("unterminated block comment", start)

    def document(self) -> Any:
        self.skip_ws()
        while self.text.startswith("#![", self.pos):
            end = self.text.find("]", self.pos)
            if end == -1:
                raise self.error("unterminated attribute")
            self.pos = end + 1
            self.skip_ws()
        if self.at_end():
            raise self.error("expected a value, found end of input")
        value = self.value()
        self.skip_ws()
        if not self.at_end():
            raise self.error("trailing characters")
        return value

    def value(self) -> Any:
        self.skip_ws()
        char = self.peek()
        if not char:
            raise self.error("expected a value, found end of input")
        if char == '"':
            return self.string()
        if _RAW_START.match(self.text, self.pos):
            return self.raw_string()
        if char == "'":
            return self.char()
        if char == "[":
            return self.sequence()
        if char == "{":
            return self.mapping()
        if char == "(":
            return self.parens(None)
        if char.isdigit() or char in "+-.":
            return self.number()
        match = _IDENT.match(self.text, self.pos)
        if match:
            return self.identifier(match)
        raise self.error(f"unexpected character {char!r}")

    def identifier(self, match: re.Match[str]) -> Any:
        name = match.group()
        self.pos = match.end()
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if name == "inf":
            return math.inf
        if name == "NaN":
            return math.nan
        save = self.pos
        self.skip_ws()
        if self.peek() == "(":
            return self.parens(name)
        self.pos = save
        return name

    def is_struct_start(self) -> bool:
        match = _IDENT.match(self.text, self.pos)
        if not match:
            return False
        save = self.pos
        self.pos = match.end()
        self.skip_ws()
        found = self.text.startswith(":", self.pos) and not self.text.startswith(
            "::", self.pos
        )
        self.pos = save
        return found

    def parens(self, name: str | None) -> Any:
        self.expect("(")
        self.skip_ws()
        if self.peek() == ")":
            self.pos += 1
            return {}
        if self.is_struct_start():
            return self.struct_fields()
        values = self.items(")")
        if name is None:
            return tuple(values)
        if name == "Some":
            if len(values) != 1:
                raise self.error("Some takes exactly one value")
            return values[0]
        if len(values) == 1:
            return {name: values[0]}
        return {name: values}

    def struct_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        while True:
            self.skip_ws()
            if self.peek() == ")":
                self.pos += 1
                return fields
            start = self.pos
            match = _IDENT.match(self.text, self.pos)
            if not match:
                raise self.error("expected a field name")
            key = match.group()
            self.pos = match.end()
            self.skip_ws()
            self.expect(":")
            if key in fields:
                raise self.error(f"duplicate field {key!r}", start)
            fields[key] = self.value()
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != ")":
                raise self.error("expected ',' or ')'")

    def items(self, closing: str) -> list[Any]:
        values: list[Any] = []
        while True:
            self.skip_ws()
            if self.peek() == closing:
                self.pos += 1
                return values
            values.append(self.value())
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != closing:
                raise self.error(f"expected ',' or {closing!r}")

    def sequence(self) -> list[Any]:
        self.expect("[")
        return self.items("]")

    def mapping(self) -> dict[Any, Any]:
        self.expect("{")
        result: dict[Any, Any] = {}
        while True:
            self.skip_ws()
            if self.peek() == "}":
                self.pos += 1
                return result
            start = self.pos
            key = self.value()
            self.skip_ws()
            self.expect(":")
            try:
                result[key] = self.value()
            except TypeError as err:
                raise self.error("map key is not hashable", start) from err
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise self.error("expected ',' or '}'")

    def escape(self) -> str:
        start = self.pos - 1
        char = self.peek()
        if not char:
            raise self.error("unterminated escape sequence", start)
        self.pos += 1
        if char in _ESCAPES:
            return _ESCAPES[char]
        if char == "u":
            if self.peek() == "{":
                end = self.text.find("}", self.pos)
                if end == -1:
                    raise self.error("unterminated unicode escape", start)
                digits = self.text[self.pos + 1 : end]
                self.pos = end + 1
            else:
                digits = self.text[self.pos : self.pos + 4]
                self.pos += 4
            return self.code_point(digits, start)
        if char == "x":
            digits = self.text[self.pos : self.pos + 2]
            self.pos += 2
            return self.code_point(digits, start)
        raise self.error(f"unknown escape sequence \\{char}", start)

    def code_point(self, digits: str, start: int) -> str:
        try:
            return chr(int(digits, 16))
        except (ValueError, OverflowError) as err:
            raise self.error("invalid escape sequence", start) from err

    def string(self) -> str:
        start = self.pos
        self.expect('"')
        parts: list[str] = []
        while True:
            char = self.peek()
            if not char:
                raise self.error("unterminated string", start)
            self.pos += 1
            if char == '"':
                return "".join(parts)
            parts.append(self.escape() if char == "\\" else char)

    def raw_string(self) -> str:
        start = self.pos
        match = _RAW_START.match(self.text, self.pos)
        assert match is not None
        closing = '"' + match.group(1)
        self.pos = match.end()
        end = self.text.find(closing, self.pos)
        if end == -1:
            raise self.error("unterminated raw string", start)
        content = self.text[self.pos : end]
        self.pos = end + len(closing)
        return content

    def char(self) -> str:
        start = self.pos
        self.expect("'")
        char = self.peek()
        if not char:
            raise self.error("unterminated character", start)
        self.pos += 1
        value = self.escape() if char == "\\" else char
        if self.peek() != "'":
            raise self.error("unterminated character", start)
        self.pos += 1
        return value

    def number(self) -> int | float:
        start = self.pos
        negative = False
        if self.peek() in "+-":
            negative = self.peek() == "-"
            self.pos += 1
        sign = -1 if negative else 1
        for keyword, special in (("inf", math.inf), ("NaN", math.nan)):
            if self.text.startswith(keyword, self.pos):
                end = self.pos + len(keyword)
                if not _IDENT.match(self.text, end) or self.text[end].isdigit():
                    self.pos = end
                    return sign * special
        for prefix, base, digits in _RADIX:
            if self.text.startswith(prefix, self.pos):
                match = digits.match(self.text, self.pos + len(prefix))
                cleaned = match.group().replace("_", "") if match else ""
                if not cleaned:
                    raise self.error("invalid number", start)
                self.pos = match.end()
                return sign * int(cleaned, base)
        match = _DECIMAL.match(self.text, self.pos)
        if not match:
            raise self.error("invalid number", start)
        self.pos = match.end()
        lexeme = match.group().replace("_", "")
        if any(marker in lexeme for marker in ".eE"):
            return sign * float(lexeme)
        return sign * int(lexeme)


def loads(text: str) -> Any:
    """Parse a RON document into Python data."""
    return _Parser(text).document()


def _quote(text: str) -> str:
    parts = ['"']
    for char in text:
        if char == '"':
            parts.append('\\"')
        elif char == "\\":
            parts.append("\\\\")
        elif char == "\n":
            parts.append("\\n")
        elif char == "\r":
            parts.append("\\r")
        elif char == "\t":
            parts.append("\\t")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _block(open_: str, close: str, lines: list[str], level: int) -> str:
    if not lines:
        return open_ + close
    inner = _INDENT * (level + 1)
    body = "".join(f"{inner}{line},\n" for line in lines)
    return f"{open_}\n{body}{_INDENT * level}{close}"


def _dump(value: Any, level: int) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, dict):
        if all(isinstance(k, str) and _IDENT.fullmatch(k) for k in value):
            lines = [f"{k}: {_dump(v, level + 1)}" for k, v in value.items()]
            return _block("(", ")", lines, level)
        lines = [
            f"{_dump(k, level + 1)}: {_dump(v, level + 1)}" for k, v in value.items()
        ]
        return _block("{", "}", lines, level)
    if isinstance(value, list):
        return _block("[", "]", [_dump(v, level + 1) for v in value], level)
    if isinstance(value, tuple):
        return _block("(", ")", [_dump(v, level + 1) for v in value], level)
    raise TypeError(f"cannot write {type(value).__name__} as RON")


def dumps(value: Any) -> str:
    """Write Python data as a pretty-printed RON document."""
    return _dump(value, 0)