"""
Unused Class Analyzer
Cross-references every extracted class name against the whole project corpus.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set

from .class_extractor import ClassExtractor, deduplicate_definitions
from .models import ClassDefinition, ClassificationReport, ClassUsage, FileBreakdown, FileBuffer
from .text_matcher import WordMatcher
from .usage_scanner import DefinitionSite, UsageScanner
from utils.config import ScanConfig, load_config
from utils.file_utils import load_project

logger = logging.getLogger(__name__)


class ProgressCounter:
    """Logs progress roughly every 5% of a fixed number of steps."""

    def __init__(self, total: int, message: str):
        self.total = total
        self.message = message
        self.current = 0
        self.step_size = max(1, total // 20)
        self._lock = threading.Lock()

    def tick(self) -> None:
        with self._lock:
            self.current += 1
            current = self.current
        if current % self.step_size == 0 or current == self.total:
            logger.info(f"   {self.message} {current}/{self.total}")


def build_report(definitions: Sequence[ClassDefinition], used_by_name: Dict[str, bool]) -> ClassificationReport:
    """Partition per-file definitions by the name-level used flag and aggregate counts."""
    first_by_name: Dict[str, ClassDefinition] = {}
    for definition in definitions:
        first_by_name.setdefault(definition.name, definition)

    report = ClassificationReport(total_classes=len(first_by_name))
    for name, definition in first_by_name.items():
        if used_by_name[name]:
            report.used.append(definition)
        else:
            report.unused.append(definition)

    for definition in definitions:
        is_unused = not used_by_name[definition.name]
        report.by_file.setdefault(definition.file, []).append(ClassUsage(definition, is_unused))
        breakdown = report.per_file_breakdown.setdefault(definition.file, FileBreakdown())
        if is_unused:
            breakdown.unused_count += 1
        else:
            breakdown.used_count += 1
    return report


class UnusedClassAnalyzer:
    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self.extractor = ClassExtractor()

    def _map(self, func: Callable, items: Sequence) -> List:
        """Fan out over items and fan back in, keeping input order."""
        if self.config.max_workers == 1 or len(items) < 2:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            return list(executor.map(func, items))

    def analyze(self, stylesheet_files: Sequence[FileBuffer], all_files: Sequence[FileBuffer]) -> ClassificationReport:
        """
        Classify every class defined in `stylesheet_files` as used or unused.

        A name is used when any occurrence in `all_files` is not one of that
        name's own definition sites. Usage is decided per name, so a class
        defined in several partials has a single status.
        """
        logger.info(f"Extracting classes from {len(stylesheet_files)} stylesheet(s)...")
        site_lists = self._map(self.extractor.find_sites, list(stylesheet_files))

        definitions: List[ClassDefinition] = []
        sites_by_name: Dict[str, Set[DefinitionSite]] = {}
        for sites in site_lists:
            definitions.extend(deduplicate_definitions(sites))
            for site in sites:
                sites_by_name.setdefault(site.name, set()).add(site.site)

        names = list(dict.fromkeys(d.name for d in definitions))
        logger.info(f"Found {len(names)} distinct classes. Checking usage against {len(all_files)} files...")

        scanner = UsageScanner(WordMatcher(), mask_comments=self.config.mask_comments)
        progress = ProgressCounter(len(names), 'Checked')
        corpus = list(all_files)

        def is_used(name: str) -> bool:
            used = scanner.is_used(name, corpus, exclude=sites_by_name[name])
            progress.tick()
            return used

        used_by_name = dict(zip(names, self._map(is_used, names)))
        report = build_report(definitions, used_by_name)
        logger.info(f"Analysis complete: {len(report.unused)} unused of {report.total_classes}")
        return report

    def generate_report(self, directory: str | Path) -> ClassificationReport:
        """Load a project tree and analyze it; skipped files become report warnings."""
        buffers, warnings = load_project(directory, self.config)
        stylesheets = [b for b in buffers if b.is_stylesheet]
        report = self.analyze(stylesheets, buffers)
        report.warnings.extend(warnings)
        return report


def analyze_directory(directory: str | Path, config: Optional[ScanConfig] = None) -> ClassificationReport:
    config = config or load_config(directory)
    return UnusedClassAnalyzer(config).generate_report(directory)
