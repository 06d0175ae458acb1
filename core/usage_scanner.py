"""
Usage Scanner Module
Looks up a word across the project corpus and classifies where it occurs.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .models import FileBuffer, FileWarning, Occurrence, UsageResult
from .text_matcher import TextIndex, WordMatcher, mask_comments, rules_for_path
from utils.config import ScanConfig, load_config
from utils.file_utils import load_project

logger = logging.getLogger(__name__)

# (file, line, column) of a class name inside its own selector.
DefinitionSite = Tuple[str, int, int]


class InvalidSearchWordError(ValueError):
    """Raised for a search word that cannot be looked up."""


def validate_search_word(word: Optional[str]) -> str:
    if word is None or not word.strip():
        raise InvalidSearchWordError("Search word must not be empty")
    return word


class UsageScanner:
    """
    Whole-word usage lookup over a list of file buffers.

    With `mask_comments` on, comments in every buffer (and string literals in
    stylesheets) are blanked before matching, so commented-out code is not
    counted. Each buffer is indexed once per path for the lifetime of the
    scanner, so repeated lookups over the same corpus stay cheap.
    """

    def __init__(self, matcher: Optional[WordMatcher] = None, mask_comments: bool = False):
        self.matcher = matcher or WordMatcher()
        self.mask_comments = mask_comments
        self._indexes: Dict[str, TextIndex] = {}

    def _index_for(self, buffer: FileBuffer) -> TextIndex:
        index = self._indexes.get(buffer.path)
        if index is None:
            text = buffer.content
            if self.mask_comments:
                text = mask_comments(text, rules_for_path(buffer.path, buffer.kind))
            index = self._indexes.setdefault(buffer.path, TextIndex(text))
        return index

    def scan(self, word: str, corpus: Sequence[FileBuffer],
             exclude: Iterable[DefinitionSite] = frozenset()) -> UsageResult:
        """Collect every occurrence of `word` in `corpus`, skipping the given definition sites."""
        excluded = _as_set(exclude)
        occurrences = []
        for buffer in corpus:
            for match in self.matcher.matches_in(self._index_for(buffer), word):
                if (buffer.path, match.line, match.column) in excluded:
                    continue
                occurrences.append(Occurrence(
                    file=buffer.path,
                    kind=buffer.kind,
                    line=match.line,
                    column=match.column
                ))
        return UsageResult(word=word, occurrences=occurrences)

    def is_used(self, word: str, corpus: Sequence[FileBuffer],
                exclude: Iterable[DefinitionSite] = frozenset()) -> bool:
        """
        Same verdict as `scan(...).found`, stopping at the first counted occurrence.

        Positions are only computed for hits in files that hold one of the
        excluded sites.
        """
        excluded = _as_set(exclude)
        excluded_paths = {site[0] for site in excluded}
        for buffer in corpus:
            index = self._index_for(buffer)
            offsets = self.matcher.offsets(index, word)
            if not offsets:
                continue
            if buffer.path not in excluded_paths:
                return True
            for offset in offsets:
                line, column = index.position(offset)
                if (buffer.path, line, column) not in excluded:
                    return True
        return False


def _as_set(sites: Iterable[DefinitionSite]) -> Set[DefinitionSite]:
    return sites if isinstance(sites, (set, frozenset)) else set(sites)


def find_word(word: str, corpus: Sequence[FileBuffer], scanner: Optional[UsageScanner] = None) -> UsageResult:
    """Validate `word` and report where it occurs across the corpus."""
    validate_search_word(word)
    scanner = scanner or UsageScanner()
    result = scanner.scan(word, corpus)
    logger.info(
        f"'{word}': {len(result.stylesheet_files)} stylesheet file(s), "
        f"{len(result.other_files)} other file(s)"
    )
    return result


def find_word_in_directory(word: str, directory: str | Path,
                           config: Optional[ScanConfig] = None) -> Tuple[UsageResult, List[FileWarning]]:
    """Validate `word`, load the project tree and search it."""
    validate_search_word(word)
    config = config or load_config(directory)
    buffers, warnings = load_project(directory, config)
    result = find_word(word, buffers, UsageScanner(mask_comments=config.mask_comments))
    return result, warnings
