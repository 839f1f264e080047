"""Build environment parsing and variable expansion"""

import os
import string
from typing import Dict, Mapping, Optional, List


class PropertiesSyntaxError(ValueError):
    """Build environment text is not valid properties syntax"""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"Line {line_number}: {message}")
        self.line_number = line_number


_ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}


def _logical_lines(text: str) -> List[tuple]:
    """Join backslash-continued lines; returns (line_number, text) pairs"""
    lines = []
    buffer = None
    start = 0

    for number, raw in enumerate(text.splitlines(), 1):
        line = raw.lstrip() if buffer is not None else raw
        if buffer is None:
            stripped = line.lstrip()
            if not stripped or stripped[0] in '#!':
                continue
            start = number
            line = stripped

        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip('\\'))
        if trailing % 2 == 1:
            buffer = (buffer or '') + line[:-1]
            continue

        lines.append((start, (buffer or '') + line))
        buffer = None

    if buffer is not None:
        lines.append((start, buffer))

    return lines


def _unescape(value: str, line_number: int) -> str:
    out = []
    i = 0
    while i < len(value):
        c = value[i]
        if c != '\\':
            out.append(c)
            i += 1
            continue

        i += 1
        if i >= len(value):
            break
        c = value[i]
        if c == 'u':
            code = value[i + 1:i + 5]
            if len(code) != 4 or any(ch not in string.hexdigits for ch in code):
                raise PropertiesSyntaxError(line_number, f"malformed \\uxxxx encoding: \\u{code}")
            out.append(chr(int(code, 16)))
            i += 5
            continue
        out.append(_ESCAPES.get(c, c))
        i += 1
    return ''.join(out)


def parse_properties(text: Optional[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE lines using Java properties file syntax

    Keys end at the first unescaped '=', ':' or whitespace. Lines starting
    with '#' or '!' are comments; a trailing backslash continues the line.
    Later keys override earlier ones; insertion order is preserved.

    Args:
        text: Properties text (None or empty gives an empty mapping)

    Returns:
        Ordered mapping of keys to (unexpanded) values

    Raises:
        PropertiesSyntaxError: On malformed escapes or an empty key
    """
    result: Dict[str, str] = {}
    if not text:
        return result

    for line_number, line in _logical_lines(text):
        key_end = len(line)
        i = 0
        while i < len(line):
            c = line[i]
            if c == '\\':
                i += 2
                continue
            if c in '=: \t\f':
                key_end = i
                break
            i += 1

        key = line[:key_end]
        rest = line[key_end:].lstrip(' \t\f')
        if rest[:1] in ('=', ':'):
            rest = rest[1:].lstrip(' \t\f')

        key = _unescape(key, line_number)
        if not key:
            raise PropertiesSyntaxError(line_number, "missing key")
        result[key] = _unescape(rest, line_number)

    return result


class EnvExpander:
    """Expands ${VAR} and $VAR references from a CI job environment

    Unknown variables are left untouched; '$$' yields a literal '$'.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = dict(os.environ if environ is None else environ)

    def expand(self, template: str) -> str:
        """Expand variable references in a single string"""
        return string.Template(template).safe_substitute(self.environ)

    def expand_all(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Expand every value of a mapping, keeping key order"""
        return {key: self.expand(value) for key, value in values.items()}
