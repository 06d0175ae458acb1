import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.models import FileBuffer, FileKind
from core.usage_scanner import (
    InvalidSearchWordError, UsageScanner, find_word, find_word_in_directory, validate_search_word
)
from utils.config import ScanConfig


def css(path, content):
    return FileBuffer(path=path, content=content, kind=FileKind.STYLESHEET)


def other(path, content):
    return FileBuffer(path=path, content=content, kind=FileKind.OTHER)


def test_word_only_in_stylesheets_is_css_only():
    corpus = [css('style.scss', '.hero { padding: 0; }'), other('app.js', 'render()')]
    result = find_word('hero', corpus)
    assert result.found
    assert result.is_css_only
    assert result.stylesheet_files == ['style.scss']
    assert result.other_files == []


def test_word_also_in_other_files_is_not_css_only():
    corpus = [css('style.scss', '.hero {}'), other('app.js', "el.classList.add('hero')")]
    result = find_word('hero', corpus)
    assert result.found
    assert not result.is_css_only
    assert result.used_elsewhere
    assert result.other_files == ['app.js']


def test_missing_word_is_not_found():
    result = find_word('ghost', [css('a.css', '.hero {}')])
    assert not result.found
    assert result.occurrences == []


def test_files_are_listed_once_in_corpus_order():
    corpus = [
        other('b.html', '<p class="hero hero">'),
        css('a.css', '.hero {} .hero:hover {}'),
        other('c.js', 'hero')
    ]
    result = find_word('hero', corpus)
    assert result.other_files == ['b.html', 'c.js']
    assert result.stylesheet_files == ['a.css']
    assert len(result.occurrences) == 5


def test_occurrence_positions():
    result = find_word('hero', [other('index.html', '<main>\n  <div class="hero">')])
    occurrence = result.occurrences[0]
    assert (occurrence.file, occurrence.kind, occurrence.line, occurrence.column) == \
        ('index.html', FileKind.OTHER, 2, 15)


def test_excluded_sites_are_skipped():
    scanner = UsageScanner()
    corpus = [css('a.css', '.card {}\n.card:hover {}')]
    result = scanner.scan('card', corpus, exclude={('a.css', 1, 2)})
    assert [(o.line, o.column) for o in result.occurrences] == [(2, 2)]
    result = scanner.scan('card', corpus, exclude=[('a.css', 1, 2), ('a.css', 2, 2)])
    assert not result.found


def test_exclusion_is_per_file():
    scanner = UsageScanner()
    corpus = [css('a.css', '.card {}'), css('b.css', '.card {}')]
    result = scanner.scan('card', corpus, exclude={('a.css', 1, 2)})
    assert result.stylesheet_files == ['b.css']


def test_comment_occurrences_count_without_masking():
    corpus = [other('index.html', '<!-- <div class="legacy"> -->'), css('a.css', '/* .legacy */')]
    result = UsageScanner(mask_comments=False).scan('legacy', corpus)
    assert result.other_files == ['index.html']
    assert result.stylesheet_files == ['a.css']


def test_comment_occurrences_are_ignored_with_masking():
    corpus = [
        other('index.html', '<!-- <div class="legacy"> -->\n<div class="live">'),
        other('app.js', '// legacy\nconst x = 1; /* legacy */'),
        other('tool.py', 'x = 1  # legacy'),
        css('a.css', '/* .legacy */ .x::after { content: "legacy"; }')
    ]
    scanner = UsageScanner(mask_comments=True)
    assert not scanner.scan('legacy', corpus).found
    assert scanner.scan('live', corpus).other_files == ['index.html']


def test_script_strings_still_count_with_masking():
    corpus = [other('app.js', "el.classList.toggle('open'); // open")]
    result = UsageScanner(mask_comments=True).scan('open', corpus)
    assert [(o.line, o.column) for o in result.occurrences] == [(1, 22)]


def test_index_is_built_once_per_path():
    scanner = UsageScanner(mask_comments=True)
    buffer = other('app.js', '// a\nb')
    scanner.scan('b', [buffer])
    index = scanner._index_for(buffer)
    assert index is scanner._index_for(buffer)
    assert index.text == '    \nb'


def test_is_used_agrees_with_scan():
    corpus = [
        css('a.css', '.card {}\n.card:hover {}\n.ghost {}'),
        css('b.css', '.x { --icon: card; }'),
        other('index.html', '<p class="ghost-text">')
    ]
    scanner = UsageScanner()
    cases = [
        ('card', {('a.css', 1, 2), ('a.css', 2, 2)}),
        ('card', {('a.css', 1, 2)}),
        ('ghost', {('a.css', 3, 2)}),
        ('x', {('b.css', 1, 2)}),
        ('ghost-text', set()),
        ('missing', set()),
    ]
    for word, exclude in cases:
        assert scanner.is_used(word, corpus, exclude) == scanner.scan(word, corpus, exclude).found


def test_is_used_skips_positions_without_excluded_sites():
    markup = other('index.html', '<div>\n  <p class="card">')
    scanner = UsageScanner()
    assert scanner.is_used('card', [css('a.css', '.card {}'), markup], {('a.css', 1, 2)})
    assert scanner._index_for(markup)._newlines is None


@pytest.mark.parametrize('word', ['', '   ', None])
def test_empty_search_word_is_rejected(word):
    with pytest.raises(InvalidSearchWordError):
        validate_search_word(word)
    with pytest.raises(ValueError):
        find_word(word, [])


def test_find_word_in_directory(tmp_path):
    (tmp_path / 'style.scss').write_text('.hero { margin: 0; }', encoding='utf-8')
    (tmp_path / 'index.html').write_text('<div class="hero"></div>', encoding='utf-8')
    (tmp_path / 'node_modules').mkdir()
    (tmp_path / 'node_modules' / 'lib.js').write_text('hero', encoding='utf-8')

    result, warnings = find_word_in_directory('hero', tmp_path, ScanConfig())
    assert warnings == []
    assert result.stylesheet_files == [str(tmp_path / 'style.scss')]
    assert result.other_files == [str(tmp_path / 'index.html')]
    assert not result.is_css_only


def test_find_word_in_directory_css_only(tmp_path):
    (tmp_path / 'style.scss').write_text('.hero { margin: 0; }', encoding='utf-8')
    (tmp_path / 'app.js').write_text('const heroes = [];', encoding='utf-8')
    result, _ = find_word_in_directory('hero', tmp_path, ScanConfig())
    assert result.found and result.is_css_only
