#!/usr/bin/env python3
"""
Tag Finder
Find CSS/SCSS classes that are never used outside their own stylesheets.
"""

import argparse
import logging
import sys
from pathlib import Path

from core.unused_analyzer import UnusedClassAnalyzer
from core.usage_scanner import InvalidSearchWordError, find_word_in_directory, validate_search_word
from reporting.report_builder import ReportBuilder, header_line
from utils.config import ConfigError, load_config

DEFAULT_BANNER = """
╔════════════════════════════════════════════════════════╗
║                    🎯 TAG FINDER 🎯                    ║
║                                                        ║
║            Find unused CSS classes and tags            ║
║              Clean up your codebase! 🧹               ║
╚════════════════════════════════════════════════════════╝"""


def print_banner(banner_file: str = 'banner.txt') -> None:
    path = Path(banner_file)
    if path.is_file():
        content = path.read_text(encoding='utf-8').rstrip()
        print(content)
        print(header_line(max((len(line) for line in content.splitlines()), default=60)))
    else:
        print(DEFAULT_BANNER)
        print('-' * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tag-finder', description='Find unused classes in CSS/SCSS files')
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-d', '--directory', default='.', help='Directory to search in')
    common.add_argument('--config', help='Path to a tag-finder.toml file')
    common.add_argument('--workers', type=int, help='Number of worker threads')
    common.add_argument('--mask-comments', action='store_true', default=None,
                        help='Ignore occurrences inside comments')
    common.add_argument('--no-banner', action='store_true', help='Do not print the banner')
    common.add_argument('-v', '--verbose', action='store_true', help='Log progress details')

    subparsers = parser.add_subparsers(dest='command', required=True)

    find_word = subparsers.add_parser('find-word', parents=[common],
                                      help='Find a specific word that appears only in CSS/SCSS files')
    find_word.add_argument('-w', '--word', required=True, help='The word to search for (exact match)')
    find_word.add_argument('-a', '--all', action='store_true', help='Show all matches, not just CSS-only ones')

    unused = subparsers.add_parser('unused-classes', parents=[common],
                                   help='Analyze all CSS classes and find unused ones')
    unused.add_argument('-b', '--by-file', action='store_true', help='Show detailed breakdown by file')
    unused.add_argument('--detailed', action='store_true', help='Show full detailed report')
    unused.add_argument('--json', dest='json_path', help='Also write the report as JSON')
    unused.add_argument('--html', dest='html_path', help='Also write the report as HTML')
    return parser


def handle_find_word(args, config, builder: ReportBuilder) -> int:
    result, warnings = find_word_in_directory(args.word, args.directory, config)
    print(builder.render_word_result(result, show_all=args.all))
    for warning in warnings:
        print(f"Skipped {warning.path}: {warning.reason}", file=sys.stderr)
    return 0


def handle_unused_classes(args, config, builder: ReportBuilder) -> int:
    report = UnusedClassAnalyzer(config).generate_report(args.directory)
    if args.detailed:
        print(builder.render_detailed(report))
    elif args.by_file:
        print(builder.render_by_file(report))
    else:
        print(builder.render_summary(report))
    if args.json_path:
        builder.generate_json_report(report, args.json_path)
        print(f"JSON report written to {args.json_path}")
    if args.html_path:
        builder.generate_html_report(report, args.html_path)
        print(f"HTML report written to {args.html_path}")
    return 0


def main(argv=None) -> int:
    """Main execution function."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.command == 'find-word':
        try:
            validate_search_word(args.word)
        except InvalidSearchWordError as e:
            parser.error(str(e))
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be a positive integer")

    if not args.no_banner:
        print_banner()

    try:
        config = load_config(args.directory, args.config).with_overrides(
            max_workers=args.workers,
            mask_comments=args.mask_comments
        )
        if args.command == 'find-word':
            return handle_find_word(args, config, ReportBuilder())
        return handle_unused_classes(args, config, ReportBuilder())
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
