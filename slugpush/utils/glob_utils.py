"""Glob based workspace scanning

Patterns follow the Ant/Jenkins convention used by CI file masks:

    *       any characters within one path segment
    ?       one character within one path segment
    **      any number of path segments (including none)
    [abc]   character class
    dir/    shorthand for dir/**

Pattern lists are comma-separated; surrounding whitespace is ignored.
"""

import os
import re
from pathlib import Path
from typing import Iterator, List, Optional, Pattern

# Version control and local state directories never deployed
DEFAULT_EXCLUDES = [
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/CVS/**",
    "**/.DS_Store",
    "**/.slugpush/**",
    "**/.slugpush-cache/**",
]


class GlobPatternError(ValueError):
    """Malformed glob pattern"""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


def split_patterns(patterns: Optional[str]) -> List[str]:
    """Split a comma-separated pattern list"""
    if not patterns:
        return []
    return [p.strip() for p in patterns.split(',') if p.strip()]


def _translate_segment(pattern: str, segment: str) -> str:
    """Translate one path segment to a regular expression"""
    out = []
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        if c == '*':
            # Collapse runs like '**' inside a segment
            while i + 1 < n and segment[i + 1] == '*':
                i += 1
            out.append('[^/]*')
        elif c == '?':
            out.append('[^/]')
        elif c == '[':
            end = segment.find(']', i + 1)
            if end == i + 1:
                end = segment.find(']', i + 2)
            if end == -1:
                raise GlobPatternError(pattern, "unclosed '['")
            body = segment[i + 1:end]
            negate = body.startswith('!')
            if negate:
                body = body[1:]
            body = body.replace('\\', '\\\\').replace('[', '\\[').replace('^', '\\^')
            out.append('[' + ('^' if negate else '') + body + ']')
            i = end
        elif c == ']':
            raise GlobPatternError(pattern, "unmatched ']'")
        else:
            out.append(re.escape(c))
        i += 1
    return ''.join(out)


def compile_glob(pattern: str) -> Pattern:
    """
    Compile a single glob pattern

    Args:
        pattern: Glob pattern relative to the scan root

    Returns:
        Compiled regular expression matching relative paths

    Raises:
        GlobPatternError: If the pattern is malformed
    """
    normalized = pattern.strip().replace('\\', '/')
    if not normalized:
        raise GlobPatternError(pattern, "empty pattern")
    if normalized.startswith('/') or re.match(r'^[A-Za-z]:/', normalized):
        raise GlobPatternError(pattern, "must be relative to the base directory")
    if normalized.endswith('/'):
        normalized += '**'

    segments = normalized.split('/')
    if any(seg == '..' for seg in segments):
        raise GlobPatternError(pattern, "must not contain '..'")
    if any(seg == '' for seg in segments):
        raise GlobPatternError(pattern, "empty path segment")

    regex = ''
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == '**':
            regex += '.*' if last else '(?:[^/]*/)*'
        elif segment == '.':
            continue
        else:
            regex += _translate_segment(pattern, segment)
            if not last:
                regex += '/'

    try:
        return re.compile(f"^{regex}$")
    except re.error as e:
        raise GlobPatternError(pattern, str(e)) from e


class GlobScanner:
    """Enumerates regular files below a directory using include/exclude globs"""

    def __init__(self,
                 includes: Optional[str] = "**",
                 excludes: Optional[str] = "",
                 use_default_excludes: bool = True):
        """
        Initialize scanner

        Args:
            includes: Comma-separated include patterns (empty means '**')
            excludes: Comma-separated exclude patterns
            use_default_excludes: Skip version control directories

        Raises:
            GlobPatternError: If any pattern is malformed
        """
        include_patterns = split_patterns(includes) or ["**"]
        exclude_patterns = split_patterns(excludes)
        if use_default_excludes:
            exclude_patterns = exclude_patterns + DEFAULT_EXCLUDES

        self.include_patterns = include_patterns
        self.exclude_patterns = exclude_patterns
        self._includes = [compile_glob(p) for p in include_patterns]
        self._excludes = [compile_glob(p) for p in exclude_patterns]

    def matches(self, relative_path: str) -> bool:
        """Check whether a relative path is selected"""
        if not any(p.match(relative_path) for p in self._includes):
            return False
        return not any(p.match(relative_path) for p in self._excludes)

    def iter_files(self, base_dir: Path) -> Iterator[str]:
        """
        Walk base_dir and yield selected relative file paths

        Symlinks and anything that is not a regular file are skipped.

        Raises:
            OSError: If a directory cannot be read
        """
        def _raise(error: OSError) -> None:
            raise error

        for root, dirs, files in os.walk(base_dir, onerror=_raise, followlinks=False):
            dirs.sort()
            rel_root = os.path.relpath(root, base_dir)
            for name in sorted(files):
                full_path = os.path.join(root, name)
                if os.path.islink(full_path) or not os.path.isfile(full_path):
                    continue
                relative = name if rel_root == '.' else f"{rel_root}/{name}"
                relative = relative.replace(os.sep, '/')
                if self.matches(relative):
                    yield relative

    def scan(self, base_dir: Path) -> List[str]:
        """Scan base_dir and return sorted relative paths of selected files"""
        return sorted(self.iter_files(base_dir))
