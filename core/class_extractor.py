"""
Class Extractor Module
Finds class selector definitions in CSS/SCSS sources.
"""

import logging
import re
from typing import Iterable, List, Optional

import tinycss2

from .models import ClassDefinition, FileBuffer
from .text_matcher import STYLESHEET_RULES, mask_comments

logger = logging.getLogger(__name__)

CLASS_NAME_RE = re.compile(r'[A-Za-z_-][A-Za-z0-9_-]*')

_NUMERIC_TYPES = ('number', 'dimension', 'percentage')


def is_valid_class_name(name: str) -> bool:
    return CLASS_NAME_RE.fullmatch(name) is not None


def deduplicate_definitions(definitions: Iterable[ClassDefinition]) -> List[ClassDefinition]:
    """Keep the first record per (name, file), preserving insertion order."""
    seen = set()
    unique = []
    for definition in definitions:
        key = (definition.name, definition.file)
        if key in seen:
            continue
        seen.add(key)
        unique.append(definition)
    return unique


class ClassExtractor:
    """
    Extracts class definitions from a stylesheet buffer.

    Comments and string literals are masked first (offsets preserved), then the
    text is tokenized with tinycss2 and every `.` literal immediately followed by
    an ident token is a candidate. Candidates are dropped when:
    - the `.` follows another `.`, a `:` or a number;
    - the ident is followed by SCSS interpolation (`#{`);
    - they sit inside `[...]` (attribute selectors);
    - the ident does not fully match the class-name grammar.
    Function tokens (`.foo(`) and numbers (`.5em`) never produce an ident after
    a `.`, so they are excluded by the tokenizer itself.
    """

    def find_sites(self, buffer: FileBuffer) -> List[ClassDefinition]:
        """Return every definition site in document order, duplicates included."""
        if not buffer.is_stylesheet:
            raise ValueError(f"Not a stylesheet buffer: {buffer.path}")
        # Same-length substitutions keep tinycss2 positions aligned with the buffer.
        text = buffer.content.replace('\r', ' ').replace('\f', ' ')
        masked = mask_comments(text, STYLESHEET_RULES)
        nodes = tinycss2.parse_component_value_list(masked, skip_comments=True)
        sites: List[ClassDefinition] = []
        self._walk(nodes, buffer.path, sites)
        logger.debug(f"{buffer.path}: {len(sites)} class selector sites")
        return sites

    def extract(self, buffer: FileBuffer) -> List[ClassDefinition]:
        """Return one definition per class name in this file, earliest occurrence first."""
        return deduplicate_definitions(self.find_sites(buffer))

    def _walk(self, nodes: List, path: str, sites: List[ClassDefinition]) -> None:
        previous = None
        for index, node in enumerate(nodes):
            if node.type == 'literal' and node.value == '.':
                candidate = self._candidate(nodes, index, previous)
                if candidate is not None:
                    sites.append(ClassDefinition(
                        name=candidate.value,
                        file=path,
                        line=candidate.source_line,
                        column=candidate.source_column
                    ))
            elif node.type in ('{} block', '() block'):
                self._walk(node.content, path, sites)
            elif node.type == 'function':
                self._walk(node.arguments, path, sites)
            # '[] block' is never entered: attribute selectors are not definitions.
            previous = node

    def _candidate(self, nodes: List, dot_index: int, previous) -> Optional[object]:
        if previous is not None:
            if previous.type == 'literal' and previous.value in ('.', ':'):
                return None
            if previous.type in _NUMERIC_TYPES:
                return None
        following = nodes[dot_index + 1:dot_index + 4]
        if not following or following[0].type != 'ident':
            return None
        ident = following[0]
        if (len(following) >= 3 and following[1].type == 'literal' and following[1].value == '#'
                and following[2].type == '{} block'):
            logger.debug(f"Skipping interpolated selector fragment '.{ident.value}#{{...}}'")
            return None
        if not is_valid_class_name(ident.value):
            return None
        return ident
