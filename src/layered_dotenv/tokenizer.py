from __future__ import annotations

from dataclasses import dataclass
import enum
import sys
from typing import Any, Callable

from layered_dotenv.config import debug_enabled
from layered_dotenv.normalize import (
    TRIPLE_QUOTE,
    coerce_value,
    normalize_value,
    unescape,
)


def _log(msg: str) -> None:
    if not debug_enabled():
        return
    sys.stderr.write(f"[tokenizer] {msg}\n")
    sys.stderr.flush()


class ParserState(enum.Enum):
    EXPECT_KEY = "expect_key"
    IN_VALUE = "in_value"
    IN_BLOCK = "in_block"


@dataclass(frozen=True)
class Entry:
    key: str
    raw_value: str
    was_multiline_block: bool
    line: int

    @property
    def value(self) -> str:
        """The finalized string value.

        Block payloads keep their content and line breaks and only have \\"
        unescaped; everything else goes through quote stripping.
        """
        if self.was_multiline_block:
            return unescape(self.raw_value)
        return normalize_value(self.raw_value)


def _find_assignment(line: str) -> int:
    """Return the index of the first unescaped '=' in line, or -1."""
    index = line.find("=")
    while index > 0 and line[index - 1] == "\\":
        index = line.find("=", index + 1)
    return index


def _closes_block(line: str) -> bool:
    return line.strip().endswith(TRIPLE_QUOTE)


def _strip_closing_marker(line: str) -> str:
    return line.rstrip()[: -len(TRIPLE_QUOTE)]


class _Tokenizer:
    """Single forward pass over the lines of one file.

    Each state has one handler; a handler consumes one line and decides the
    next state. Pending entries are emitted on the next key, on a closing
    block marker, or by finish().
    """

    def __init__(self) -> None:
        self.state = ParserState.EXPECT_KEY
        self.entries: list[Entry] = []
        self._key: str | None = None
        self._lines: list[str] = []
        self._block = False
        self._start = 0
        self._handlers: dict[ParserState, Callable[[int, str], None]] = {
            ParserState.EXPECT_KEY: self._on_expect_key,
            ParserState.IN_VALUE: self._on_value,
            ParserState.IN_BLOCK: self._on_block,
        }

    def feed(self, index: int, line: str) -> None:
        self._handlers[self.state](index, line)

    def finish(self) -> list[Entry]:
        if self.state is ParserState.IN_BLOCK:
            _log(f"unterminated block for key={self._key} opened at line {self._start}")
            if not self._lines:
                # nothing collected: the key is dropped
                self._key = None
                self._block = False
        self._emit()
        self.state = ParserState.EXPECT_KEY
        return self.entries

    def _emit(self) -> None:
        if self._key is None:
            return
        self.entries.append(
            Entry(
                key=self._key,
                raw_value="\n".join(self._lines),
                was_multiline_block=self._block,
                line=self._start,
            )
        )
        self._key = None
        self._lines = []
        self._block = False

    def _skippable(self, line: str) -> bool:
        stripped = line.strip()
        return not stripped or stripped.startswith("#")

    def _start_entry(self, index: int, line: str) -> bool:
        """Open a new entry if line is an assignment. Returns False otherwise."""
        eq = _find_assignment(line)
        if eq == -1:
            return False

        key = line[:eq].strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        if not key:
            _log(f"line {index}: empty key, dropped")
            return True
        if "=" in key:
            _log(f"line {index}: '=' inside key {key!r}, dropped")
            return True

        self._emit()
        self._key = key
        self._start = index

        value_start = line[eq + 1 :]
        opener = value_start.lstrip()
        if opener.startswith(TRIPLE_QUOTE):
            self._block = True
            rest = opener[len(TRIPLE_QUOTE) :]
            if rest and _closes_block(rest):
                self._lines = [_strip_closing_marker(rest)]
                self._emit()
                self.state = ParserState.EXPECT_KEY
                return True
            self._lines = [rest] if rest else []
            self.state = ParserState.IN_BLOCK
            return True

        # A lone '"' without a closing quote is still a single-line value.
        self._lines = [value_start]
        self.state = ParserState.IN_VALUE
        return True

    def _on_expect_key(self, index: int, line: str) -> None:
        if self._skippable(line):
            return
        if not self._start_entry(index, line):
            _log(f"line {index}: no assignment, dropped")

    def _on_value(self, index: int, line: str) -> None:
        if self._skippable(line):
            return
        if self._start_entry(index, line):
            return
        self._lines.append(line)

    def _on_block(self, index: int, line: str) -> None:
        if not _closes_block(line):
            self._lines.append(line)
            return

        remainder = _strip_closing_marker(line)
        if remainder.strip():
            self._lines.append(remainder)
        self._emit()
        self.state = ParserState.EXPECT_KEY


def split_lines(content: str) -> list[str]:
    lines = content.split("\n")
    # a final newline terminates the last line, it does not start a new one
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def tokenize(content: str) -> list[Entry]:
    """Split env-file content into entries, in file order.

    Never raises: lines without an assignment outside a value are dropped and
    unquoted follow-up lines are absorbed into the preceding value.
    """
    tokenizer = _Tokenizer()
    for index, line in enumerate(split_lines(content)):
        tokenizer.feed(index, line)
    return tokenizer.finish()


def parse(content: str, *, coerce: bool = False) -> dict[str, Any]:
    """Parse env-file content into key -> value.

    A key repeated within the same content keeps its last value.
    """
    result: dict[str, Any] = {}
    for entry in tokenize(content):
        value = entry.value
        result[entry.key] = coerce_value(value) if coerce else value
    return result
