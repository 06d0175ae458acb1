"""
Configuration Module
Loads scan settings from tag-finder.toml with defaults for everything.
"""

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ('tag-finder.toml', '.tag-finder.toml', 'config/tag-finder.toml')

DEFAULT_EXCLUDE_DIRS = ('node_modules', 'dist', 'build', '.git', '.vscode', '.idea', 'target')
DEFAULT_CSS_EXTENSIONS = ('.css', '.scss')


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed or has invalid values."""


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith('.') else f'.{ext}'


@dataclass(frozen=True)
class ScanConfig:
    exclude_dirs: Tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    # Empty means every non-binary text file is part of the corpus.
    include_extensions: Tuple[str, ...] = ()
    css_extensions: Tuple[str, ...] = DEFAULT_CSS_EXTENSIONS
    mask_comments: bool = False
    max_workers: Optional[int] = None

    def should_exclude_dir(self, rel_dir: str) -> bool:
        """Check a directory (relative to the scan root, '/'-separated) against exclude_dirs."""
        rel_dir = rel_dir.replace('\\', '/').strip('/')
        name = rel_dir.rsplit('/', 1)[-1]
        for excluded in self.exclude_dirs:
            excluded = excluded.strip('/')
            if name == excluded or rel_dir == excluded or rel_dir.startswith(f'{excluded}/'):
                return True
        return False

    def is_css_file(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self.css_extensions

    def should_include_file(self, path: str | Path) -> bool:
        if self.is_css_file(path) or not self.include_extensions:
            return True
        return Path(path).suffix.lower() in self.include_extensions

    def with_overrides(self, **overrides: Any) -> 'ScanConfig':
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **values) if values else self


def _string_list(section: Dict[str, Any], key: str) -> Optional[List[str]]:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"scan.{key} must be a list of strings")
    return value


def config_from_dict(payload: Dict[str, Any]) -> ScanConfig:
    """Build a ScanConfig from parsed TOML data."""
    section = payload.get('scan', {})
    if not isinstance(section, dict):
        raise ConfigError("Config section 'scan' must be a table")
    config = ScanConfig()

    exclude_dirs = _string_list(section, 'exclude_dirs')
    include_extensions = _string_list(section, 'include_extensions')
    css_extensions = _string_list(section, 'css_extensions')

    mask = section.get('mask_comments')
    if mask is not None and not isinstance(mask, bool):
        raise ConfigError("scan.mask_comments must be a boolean")
    workers = section.get('max_workers')
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        raise ConfigError("scan.max_workers must be a positive integer")

    return config.with_overrides(
        exclude_dirs=tuple(exclude_dirs) if exclude_dirs is not None else None,
        include_extensions=tuple(normalize_extension(e) for e in include_extensions)
        if include_extensions is not None else None,
        css_extensions=tuple(normalize_extension(e) for e in css_extensions)
        if css_extensions is not None else None,
        mask_comments=mask,
        max_workers=workers
    )


def load_config_file(path: str | Path) -> ScanConfig:
    path = Path(path)
    try:
        with path.open('rb') as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    logger.info(f"Loaded configuration from {path}")
    return config_from_dict(payload)


def find_config_file(search_dirs: Iterable[str | Path]) -> Optional[Path]:
    """Return the first known config file name found in any of the search dirs."""
    for directory in search_dirs:
        for name in CONFIG_FILE_NAMES:
            candidate = Path(directory) / name
            if candidate.is_file():
                return candidate
    return None


def load_config(directory: str | Path = '.', config_path: str | Path | None = None) -> ScanConfig:
    """
    Resolve the scan configuration.

    An explicit `config_path` must exist. Otherwise the scanned directory and
    then the working directory are searched; without a file the defaults apply.
    """
    if config_path is not None:
        if not Path(config_path).is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        return load_config_file(config_path)
    found = find_config_file([directory, Path.cwd()])
    if found is None:
        logger.info("No config file found, using defaults")
        return ScanConfig()
    return load_config_file(found)
