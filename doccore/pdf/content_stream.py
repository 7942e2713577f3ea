"""Reader for the text-related subset of a PDF page content stream.

Only the operators needed to recover reading order are reported:
``Tj``, ``TJ``, ``'`` and ``"`` (text), ``T*`` (next line), ``Td``/``TD``
(text positioning) and ``BT`` (text block start). Everything else is
tokenized and discarded. The reader never raises on bad input; a truncated
or corrupt stream yields whatever operators were complete before the damage.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

WHITESPACE = frozenset("\x00\t\n\x0c\r ")
DELIMITERS = frozenset("()<>[]{}/%")
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")

LITERAL_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "(": "(",
    ")": ")",
    "\\": "\\",
}


class OperatorKind(Enum):
    SHOW_TEXT = "show_text"
    NEW_LINE = "new_line"
    MOVE_TEXT = "move_text"
    BEGIN_TEXT = "begin_text"


@dataclass(frozen=True)
class ContentOperator:
    """One decoded operator.

    ``offset`` is the byte offset of the operator's first operand (or of the
    operator itself when it takes none). ``text`` is set for SHOW_TEXT and
    ``dy`` (vertical displacement) for MOVE_TEXT.
    """

    offset: int
    kind: OperatorKind
    text: str = ""
    dy: float = 0.0


@dataclass(frozen=True)
class _Operand:
    offset: int
    value: object


class _Truncated(Exception):
    """Internal signal: the stream ended inside a token."""


def decode_literal_string(raw: str) -> str:
    """Unescape the body of a literal string (without outer parentheses).

    Only ``\\n \\r \\t \\( \\) \\\\`` are translated; any other backslash
    sequence is kept as written.
    """
    out: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw):
            nxt = raw[i + 1]
            out.append(LITERAL_ESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _parse_number(token: str) -> float | None:
    if not NUMBER_RE.fullmatch(token):
        return None
    return float(token)


class _Lexer:
    def __init__(self, content: str) -> None:
        self._s = content
        self._n = len(content)
        self.pos = 0

    def skip_whitespace_and_comments(self) -> None:
        s, n = self._s, self._n
        while self.pos < n:
            ch = s[self.pos]
            if ch in WHITESPACE:
                self.pos += 1
            elif ch == "%":
                while self.pos < n and s[self.pos] not in "\r\n":
                    self.pos += 1
            else:
                return

    def at_end(self) -> bool:
        return self.pos >= self._n

    def peek(self, length: int = 1) -> str:
        return self._s[self.pos : self.pos + length]

    def read_literal_string(self) -> str:
        # Called with pos on the opening parenthesis.
        s, n = self._s, self._n
        start = self.pos + 1
        i = start
        depth = 1
        while i < n:
            ch = s[i]
            if ch == "\\":
                i += 2
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    self.pos = i + 1
                    return decode_literal_string(s[start:i])
            i += 1
        raise _Truncated

    def read_hex_string(self) -> str:
        end = self._s.find(">", self.pos + 1)
        if end < 0:
            raise _Truncated
        digits = "".join(
            ch for ch in self._s[self.pos + 1 : end] if ch not in WHITESPACE
        )
        self.pos = end + 1
        if len(digits) % 2:
            digits += "0"
        try:
            return bytes.fromhex(digits).decode("latin-1")
        except ValueError:
            return ""

    def read_regular(self) -> str:
        s, n = self._s, self._n
        start = self.pos
        while self.pos < n and s[self.pos] not in WHITESPACE and s[self.pos] not in DELIMITERS:
            self.pos += 1
        return s[start : self.pos]

    def skip_inline_image(self) -> None:
        # Binary image data runs until whitespace + "EI" + whitespace/end.
        s, n = self._s, self._n
        i = self.pos
        while i < n:
            j = s.find("EI", i)
            if j < 0:
                break
            before_ok = j > 0 and s[j - 1] in WHITESPACE
            after_ok = j + 2 >= n or s[j + 2] in WHITESPACE
            if before_ok and after_ok:
                self.pos = j + 2
                return
            i = j + 1
        raise _Truncated


def _strings_of(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(v for v in value if isinstance(v, str))
    return ""


def _emit(operator: str, operands: list[_Operand], offset: int) -> Iterator[ContentOperator]:
    first = operands[0].offset if operands else offset
    if operator == "BT":
        yield ContentOperator(offset, OperatorKind.BEGIN_TEXT)
    elif operator == "T*":
        yield ContentOperator(offset, OperatorKind.NEW_LINE)
    elif operator in ("Td", "TD"):
        if len(operands) >= 2 and isinstance(operands[-1].value, float):
            yield ContentOperator(operands[-2].offset, OperatorKind.MOVE_TEXT, dy=operands[-1].value)
    elif operator == "Tj":
        if operands and isinstance(operands[-1].value, str):
            yield ContentOperator(operands[-1].offset, OperatorKind.SHOW_TEXT, text=operands[-1].value)
    elif operator == "TJ":
        if operands and isinstance(operands[-1].value, list):
            text = _strings_of(operands[-1].value)
            if text:
                yield ContentOperator(operands[-1].offset, OperatorKind.SHOW_TEXT, text=text)
    elif operator in ("'", '"'):
        yield ContentOperator(first, OperatorKind.NEW_LINE)
        if operands and isinstance(operands[-1].value, str):
            yield ContentOperator(first, OperatorKind.SHOW_TEXT, text=operands[-1].value)


def iter_operators(data: bytes) -> Iterator[ContentOperator]:
    """Lazily decode ``data`` into text-relevant operators in stream order."""
    lexer = _Lexer(data.decode("latin-1"))
    operands: list[_Operand] = []
    # Open arrays: list of (offset, items) frames.
    arrays: list[tuple[int, list[object]]] = []

    def push(offset: int, value: object) -> None:
        if arrays:
            arrays[-1][1].append(value)
        else:
            operands.append(_Operand(offset, value))

    try:
        while True:
            lexer.skip_whitespace_and_comments()
            if lexer.at_end():
                return
            offset = lexer.pos
            ch = lexer.peek()

            if ch == "(":
                push(offset, lexer.read_literal_string())
            elif ch == "<":
                if lexer.peek(2) == "<<":
                    lexer.pos += 2
                    push(offset, None)
                else:
                    push(offset, lexer.read_hex_string())
            elif ch == ">":
                lexer.pos += 2 if lexer.peek(2) == ">>" else 1
            elif ch == "[":
                lexer.pos += 1
                arrays.append((offset, []))
            elif ch == "]":
                lexer.pos += 1
                if arrays:
                    start, items = arrays.pop()
                    push(start, items)
            elif ch in "{}":
                lexer.pos += 1
            elif ch == "/":
                # Names (fonts, resources) carry no text.
                lexer.pos += 1
                lexer.read_regular()
                push(offset, None)
            else:
                token = lexer.read_regular()
                if not token:
                    # Stray delimiter we do not model.
                    lexer.pos += 1
                    continue
                number = _parse_number(token)
                if number is not None:
                    push(offset, number)
                    continue
                if token in ("true", "false", "null"):
                    push(offset, None)
                    continue
                # An operator terminates any unbalanced array.
                arrays.clear()
                yield from _emit(token, operands, offset)
                operands.clear()
                if token == "ID":
                    lexer.skip_inline_image()
    except _Truncated:
        return


def decode_content_stream(data: bytes) -> list[ContentOperator]:
    """Decode ``data`` eagerly; see ``iter_operators``."""
    return list(iter_operators(data))
