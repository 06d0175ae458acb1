"""
Analysis Models
Value types shared by the extractor, scanner and analyzer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class FileKind(Enum):
    STYLESHEET = 'stylesheet'
    OTHER = 'other'


@dataclass(frozen=True)
class FileBuffer:
    path: str
    content: str
    kind: FileKind

    @property
    def is_stylesheet(self) -> bool:
        return self.kind is FileKind.STYLESHEET


@dataclass(frozen=True)
class ClassDefinition:
    """A class selector found in a stylesheet. `name` has no leading dot."""
    name: str
    file: str
    line: int
    column: int = 0

    @property
    def site(self) -> Tuple[str, int, int]:
        return (self.file, self.line, self.column)

    def to_dict(self) -> Dict:
        return {'name': self.name, 'file': self.file, 'line': self.line, 'column': self.column}


@dataclass(frozen=True)
class Occurrence:
    file: str
    kind: FileKind
    line: int
    column: int

    def to_dict(self) -> Dict:
        return {'file': self.file, 'kind': self.kind.value, 'line': self.line, 'column': self.column}


@dataclass(frozen=True)
class FileWarning:
    """A file that was skipped during loading."""
    path: str
    reason: str

    def to_dict(self) -> Dict:
        return {'path': self.path, 'reason': self.reason}


def _unique(items) -> List[str]:
    seen = set()
    ordered = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


@dataclass
class UsageResult:
    word: str
    occurrences: List[Occurrence] = field(default_factory=list)

    @property
    def stylesheet_files(self) -> List[str]:
        return _unique(o.file for o in self.occurrences if o.kind is FileKind.STYLESHEET)

    @property
    def other_files(self) -> List[str]:
        return _unique(o.file for o in self.occurrences if o.kind is FileKind.OTHER)

    @property
    def found(self) -> bool:
        return bool(self.occurrences)

    @property
    def used_elsewhere(self) -> bool:
        return any(o.kind is FileKind.OTHER for o in self.occurrences)

    @property
    def is_css_only(self) -> bool:
        # Zero occurrences also counts as CSS-only; callers check `found` first.
        return not self.used_elsewhere

    def to_dict(self) -> Dict:
        return {
            'word': self.word,
            'css_files': self.stylesheet_files,
            'other_files': self.other_files,
            'is_css_only': self.is_css_only,
            'found': self.found,
            'occurrences': [o.to_dict() for o in self.occurrences]
        }


@dataclass
class ClassUsage:
    definition: ClassDefinition
    is_unused: bool


@dataclass
class FileBreakdown:
    used_count: int = 0
    unused_count: int = 0

    @property
    def total(self) -> int:
        return self.used_count + self.unused_count


@dataclass
class ClassificationReport:
    total_classes: int = 0
    unused: List[ClassDefinition] = field(default_factory=list)
    used: List[ClassDefinition] = field(default_factory=list)
    per_file_breakdown: Dict[str, FileBreakdown] = field(default_factory=dict)
    by_file: Dict[str, List[ClassUsage]] = field(default_factory=dict)
    warnings: List[FileWarning] = field(default_factory=list)

    @property
    def unused_names(self) -> List[str]:
        return [d.name for d in self.unused]

    @property
    def used_names(self) -> List[str]:
        return [d.name for d in self.used]

    @property
    def unused_percentage(self) -> float:
        if not self.total_classes:
            return 0.0
        return len(self.unused) / self.total_classes * 100.0

    def unused_in_file(self, file: str) -> List[ClassDefinition]:
        return [u.definition for u in self.by_file.get(file, []) if u.is_unused]

    def to_dict(self) -> Dict:
        """Convert the report into plain JSON-serialisable data."""
        return {
            'total_classes': self.total_classes,
            'unused_count': len(self.unused),
            'used_count': len(self.used),
            'unused_percentage': round(self.unused_percentage, 1),
            'unused_classes': [d.to_dict() for d in self.unused],
            'used_classes': [d.to_dict() for d in self.used],
            'by_file': {
                file: {
                    'used_count': self.per_file_breakdown[file].used_count,
                    'unused_count': self.per_file_breakdown[file].unused_count,
                    'classes': [
                        {**u.definition.to_dict(), 'is_unused': u.is_unused}
                        for u in self.by_file[file]
                    ]
                }
                for file in sorted(self.by_file)
            },
            'warnings': [w.to_dict() for w in self.warnings]
        }
