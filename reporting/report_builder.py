"""
Report Builder Module
Renders classification reports and word searches as text, JSON and HTML (Jinja2).
"""

import json
from pathlib import Path
from typing import Dict, List, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.models import ClassificationReport, UsageResult

TEMPLATE_DIR = Path(__file__).parent / 'templates'


def header_line(width: int = 50) -> str:
    return '=' * width


def section_line(width: int = 30) -> str:
    return '-' * width


class ReportBuilder:
    def __init__(self, preview_limit: int = 10):
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(['html'])
        )
        self.preview_limit = preview_limit

    def summary_lines(self, report: ClassificationReport) -> List[str]:
        lines = [
            "📋 UNUSED CSS CLASSES REPORT",
            header_line(50),
            f"Total classes analyzed: {report.total_classes}",
            f"Unused classes: {len(report.unused)}",
            f"Used classes: {len(report.used)}"
        ]
        if report.total_classes:
            lines.append(f"Unused percentage: {report.unused_percentage:.1f}%")
        if report.warnings:
            lines.append(f"Skipped files: {len(report.warnings)}")
        return lines

    def render_summary(self, report: ClassificationReport) -> str:
        """Summary plus a short preview of unused classes."""
        lines = self.summary_lines(report)
        if report.unused:
            lines.append("")
            lines.append(f"🗑️  UNUSED CLASSES (first {self.preview_limit}):")
            for definition in report.unused[:self.preview_limit]:
                lines.append(f"  .{definition.name} in {definition.file} (line {definition.line})")
            remaining = len(report.unused) - self.preview_limit
            if remaining > 0:
                lines.append(f"  ... and {remaining} more")
                lines.append("")
                lines.append("Use --detailed for full list or --by-file for file breakdown")
        return "\n".join(lines)

    def render_by_file(self, report: ClassificationReport) -> str:
        lines = self.summary_lines(report)
        lines += ["", "📁 BY FILE BREAKDOWN:", section_line(40)]
        for file in sorted(report.by_file):
            breakdown = report.per_file_breakdown[file]
            lines.append("")
            lines.append(file)
            lines.append(f"  Total: {breakdown.total}, Unused: {breakdown.unused_count}, Used: {breakdown.used_count}")
            if breakdown.unused_count:
                lines.append("  Unused classes:")
                for definition in report.unused_in_file(file):
                    lines.append(f"    .{definition.name} (line {definition.line})")
        return "\n".join(lines)

    def render_detailed(self, report: ClassificationReport) -> str:
        lines = self.summary_lines(report)
        if report.unused:
            lines += ["", "🗑️  UNUSED CLASSES:", section_line(30)]
            for file in sorted(report.by_file):
                unused = report.unused_in_file(file)
                if not unused:
                    continue
                lines.append("")
                lines.append(f"📁 {file}:")
                for definition in unused:
                    lines.append(f"   .{definition.name} (line {definition.line})")
            lines.append("")
            lines.append("💡 TIP: Review these unused classes and consider removing them to clean up your CSS.")
        if report.warnings:
            lines += ["", "⚠️  SKIPPED FILES:"]
            for warning in report.warnings:
                lines.append(f"   {warning.path}: {warning.reason}")
        return "\n".join(lines)

    def render_word_result(self, result: UsageResult, show_all: bool = False) -> str:
        """Render a find-word lookup the way the command line prints it."""
        word = result.word
        if not result.found:
            return f"Word '{word}' not found in any files."
        if not (show_all or result.is_css_only):
            return f"Word '{word}' found but not CSS-only. Use --all to see details."

        lines = [f"Search results for word: '{word}'", header_line(50)]
        if result.stylesheet_files:
            lines.append("Found in CSS/SCSS files:")
            lines += [f"  ✓ {file}" for file in result.stylesheet_files]
        if result.other_files:
            lines.append("Found in other files:")
            lines += [f"  • {file}" for file in result.other_files]
        lines.append("")
        if result.is_css_only:
            lines.append(f"🎯 SUCCESS: '{word}' appears ONLY in CSS/SCSS files!")
            lines.append("This code might be extraneous and safe to remove.")
        else:
            lines.append(f"⚠️  Word '{word}' appears in non-CSS files too.")
        return "\n".join(lines)

    def collect_metrics(self, report: ClassificationReport) -> Dict:
        """Collect and organize report data for the HTML template."""
        files = []
        for file in sorted(report.by_file):
            breakdown = report.per_file_breakdown[file]
            files.append({
                'path': file,
                'total': breakdown.total,
                'used_count': breakdown.used_count,
                'unused_count': breakdown.unused_count,
                'unused': report.unused_in_file(file)
            })
        return {
            'total_classes': report.total_classes,
            'unused_count': len(report.unused),
            'used_count': len(report.used),
            'unused_percentage': round(report.unused_percentage, 1),
            'files': files,
            'warnings': report.warnings
        }

    def generate_html_report(self, report: ClassificationReport, output_path: Union[str, Path]) -> str:
        """Render the HTML report, write it to output_path and return it."""
        template = self.env.get_template('report.html')
        html = template.render(**self.collect_metrics(report))
        Path(output_path).write_text(html, encoding='utf-8')
        return html

    def generate_json_report(self, report: ClassificationReport, output_path: Union[str, Path]) -> None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(report.to_dict(), f, indent=2)
