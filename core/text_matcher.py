"""
Text Matcher Module
Exact whole-word search over text buffers, plus offset-preserving comment masking.
"""

import bisect
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from .models import FileKind

# Identifier characters: anything matched by \w (Unicode letters, digits, underscore) plus '-'.
_BOUNDARY_TEMPLATE = r'(?<![\w-]){token}(?![\w-])'
# A word made only of identifier characters matches exactly where a maximal run equals it.
_TOKEN_RE = re.compile(r'[\w-]+')


@dataclass(frozen=True)
class TextMatch:
    line: int
    column: int
    offset: int


class TextIndex:
    """
    Lookup structures for one text, built lazily and at most once.

    `tokens` maps every maximal run of identifier characters to its start
    offsets; `newlines` holds the offset of every '\\n' for position lookups.
    """

    def __init__(self, text: str):
        self.text = text
        self._tokens: Optional[Dict[str, List[int]]] = None
        self._newlines: Optional[List[int]] = None

    @property
    def tokens(self) -> Dict[str, List[int]]:
        if self._tokens is None:
            tokens: Dict[str, List[int]] = {}
            for match in _TOKEN_RE.finditer(self.text):
                tokens.setdefault(match.group(), []).append(match.start())
            self._tokens = tokens
        return self._tokens

    @property
    def newlines(self) -> List[int]:
        if self._newlines is None:
            self._newlines = [m.start() for m in re.finditer('\n', self.text)]
        return self._newlines

    def position(self, offset: int) -> Tuple[int, int]:
        """1-based (line, column) of an offset."""
        newlines = self.newlines
        line_index = bisect.bisect_left(newlines, offset)
        line_start = newlines[line_index - 1] + 1 if line_index else 0
        return line_index + 1, offset - line_start + 1


class WordMatcher:
    """Whole-word, case-sensitive matcher. Compiled patterns are cached per instance."""

    def __init__(self):
        self._patterns: Dict[str, Pattern] = {}

    def pattern(self, word: str) -> Pattern:
        compiled = self._patterns.get(word)
        if compiled is None:
            compiled = re.compile(_BOUNDARY_TEMPLATE.format(token=re.escape(word)))
            compiled = self._patterns.setdefault(word, compiled)
        return compiled

    def offsets(self, index: TextIndex, word: str) -> List[int]:
        """Start offsets of every whole-word match of `word` in the indexed text."""
        if not word or not index.text:
            return []
        if _TOKEN_RE.fullmatch(word):
            return index.tokens.get(word, [])
        if word not in index.text:
            return []
        return [m.start() for m in self.pattern(word).finditer(index.text)]

    def matches_in(self, index: TextIndex, word: str) -> List[TextMatch]:
        results = []
        for offset in self.offsets(index, word):
            line, column = index.position(offset)
            results.append(TextMatch(line=line, column=column, offset=offset))
        return results

    def matches(self, haystack: str, word: str) -> List[TextMatch]:
        """Return every whole-word match of `word` with 1-based line and column."""
        if not word or not haystack or word not in haystack:
            return []
        return self.matches_in(TextIndex(haystack), word)


@dataclass(frozen=True)
class LexicalRules:
    """Markers used while masking non-code text."""
    line_comments: Tuple[str, ...] = ()
    block_comments: Tuple[Tuple[str, str], ...] = ()
    string_delimiters: Tuple[str, ...] = ()
    mask_strings: bool = False
    # Spans copied through untouched unless a string opens them, e.g. url(//cdn/x.png).
    raw_spans: Tuple[Tuple[str, str], ...] = ()


STYLESHEET_RULES = LexicalRules(
    line_comments=('//',),
    block_comments=(('/*', '*/'),),
    string_delimiters=('"', "'"),
    mask_strings=True,
    raw_spans=(('url(', ')'),)
)
SCRIPT_RULES = LexicalRules(
    line_comments=('//',),
    block_comments=(('/*', '*/'),),
    string_delimiters=('"', "'", '`')
)
MARKUP_RULES = LexicalRules(block_comments=(('<!--', '-->'),))
HASH_RULES = LexicalRules(line_comments=('#',), string_delimiters=('"', "'"))

MARKUP_EXTENSIONS = {'.html', '.htm', '.xhtml', '.vue', '.svelte', '.xml', '.svg', '.md'}
HASH_EXTENSIONS = {'.py', '.rb', '.sh', '.yml', '.yaml', '.toml', '.cfg', '.ini'}


def rules_for_path(path: str, kind: FileKind) -> LexicalRules:
    """Pick the masking rules for a file from its kind and extension."""
    if kind is FileKind.STYLESHEET:
        return STYLESHEET_RULES
    ext = os.path.splitext(path)[1].lower()
    if ext in MARKUP_EXTENSIONS:
        return MARKUP_RULES
    if ext in HASH_EXTENSIONS:
        return HASH_RULES
    return SCRIPT_RULES


def _match_prefix(text: str, index: int, prefixes) -> Optional[str]:
    for prefix in prefixes:
        if text.startswith(prefix, index):
            return prefix
    return None


def _match_pair(text: str, index: int, pairs) -> Optional[Tuple[str, str]]:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _blank(chars: List[str], start: int, stop: int) -> None:
    for i in range(start, stop):
        if chars[i] != '\n':
            chars[i] = ' '


def _opens_string(text: str, index: int, rules: LexicalRules) -> bool:
    """True when the next non-whitespace character at or after `index` starts a string."""
    while index < len(text) and text[index] in ' \t\n':
        index += 1
    return index < len(text) and text[index] in rules.string_delimiters


def _string_end(text: str, index: int) -> int:
    """Index just past the string literal opening at `index`."""
    quote = text[index]
    i = index + 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == '\n' and quote != '`':
            # Unterminated; the literal ends with the line.
            return i
        i += 1
    return length


def mask_comments(text: str, rules: LexicalRules = STYLESHEET_RULES) -> str:
    """Blank out comments (and strings, if the rules say so) keeping every offset and newline."""
    chars = list(text)
    length = len(text)
    index = 0
    while index < length:
        block = _match_pair(text, index, rules.block_comments)
        if block:
            end = text.find(block[1], index + len(block[0]))
            stop = length if end == -1 else end + len(block[1])
            _blank(chars, index, stop)
            index = stop
            continue
        if _match_prefix(text, index, rules.line_comments):
            end = text.find('\n', index)
            stop = length if end == -1 else end
            _blank(chars, index, stop)
            index = stop
            continue
        raw = _match_pair(text, index, rules.raw_spans)
        if raw and not _opens_string(text, index + len(raw[0]), rules):
            end = text.find(raw[1], index + len(raw[0]))
            index = length if end == -1 else end + len(raw[1])
            continue
        if text[index] in rules.string_delimiters:
            stop = _string_end(text, index)
            if rules.mask_strings:
                _blank(chars, index, stop)
            index = stop
            continue
        index += 1
    return ''.join(chars)
