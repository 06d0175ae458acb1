"""
File Utilities Module
Project discovery, file loading and path handling for the analysis core.
"""

import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from core.models import FileBuffer, FileKind, FileWarning
from utils.config import ScanConfig

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 8192


@dataclass(frozen=True)
class FileEntry:
    path: str
    kind: FileKind


class BinaryFileError(Exception):
    """Raised by read_file_content for files that look binary."""


def is_hidden(path: Path) -> bool:
    """Check if a file or directory is hidden."""
    # Check for hidden files/directories in Unix-like systems
    if path.name.startswith('.'):
        return True

    # Check for hidden files/directories in Windows
    try:
        import ctypes
        attrs = ctypes.windll.kernel32.GetFileAttributesW(str(path))
        return attrs & 2 != 0
    except (AttributeError, ImportError):
        return False


def classify_file(path: str | Path, config: ScanConfig) -> FileKind:
    return FileKind.STYLESHEET if config.is_css_file(path) else FileKind.OTHER


def collect_files(base_path: str | Path, config: Optional[ScanConfig] = None,
                  warnings: Optional[List[FileWarning]] = None) -> List[FileEntry]:
    """
    Walk a project directory and classify every candidate file.

    Args:
        base_path: Directory to scan
        config: Exclusion and extension settings (defaults if omitted)
        warnings: Receives a FileWarning for every directory that can't be listed

    Returns:
        FileEntry list in a stable, sorted walk order

    Raises:
        FileNotFoundError: If base_path is not a directory
    """
    config = config or ScanConfig()
    base = Path(base_path)
    if not base.is_dir():
        raise FileNotFoundError(f"Directory not found: {base_path}")

    def on_walk_error(error: OSError) -> None:
        logger.warning(f"Skipping directory {error.filename}: {error.strerror or error}")
        if warnings is not None:
            warnings.append(FileWarning(str(error.filename), f"unreadable directory ({error.strerror or error})"))

    entries = []
    for root, dirs, files in os.walk(base, onerror=on_walk_error):
        root_path = Path(root)
        # Prune in place so os.walk never descends into excluded directories
        dirs[:] = sorted(
            d for d in dirs
            if not is_hidden(root_path / d)
            and not config.should_exclude_dir(Path(os.path.relpath(root_path / d, base)).as_posix())
        )
        for file in sorted(files):
            file_path = root_path / file
            if is_hidden(file_path) or not config.should_include_file(file_path):
                continue
            entries.append(FileEntry(path=str(file_path), kind=classify_file(file_path, config)))
    logger.info(f"Discovered {len(entries)} files under {base_path}")
    return entries


def read_file_content(file_path: str | Path) -> str:
    """
    Read a text file as UTF-8 with newlines normalized to '\\n'.

    Raises:
        BinaryFileError: If the file contains NUL bytes near the start
        UnicodeDecodeError: If the file is not valid UTF-8
        OSError: If the file can't be read
    """
    with open(file_path, 'rb') as f:
        raw = f.read()
    if b'\0' in raw[:BINARY_SNIFF_BYTES]:
        raise BinaryFileError(str(file_path))
    text = raw.decode('utf-8')
    return text.replace('\r\n', '\n').replace('\r', '\n')


def load_buffers(entries: List[FileEntry]) -> Tuple[List[FileBuffer], List[FileWarning]]:
    """Load every entry, skipping binary files and collecting a warning for unreadable ones."""
    buffers = []
    warnings = []
    for entry in entries:
        try:
            content = read_file_content(entry.path)
        except BinaryFileError:
            logger.debug(f"Skipping binary file {entry.path}")
            continue
        except UnicodeDecodeError as e:
            logger.warning(f"Skipping {entry.path}: not valid UTF-8")
            warnings.append(FileWarning(entry.path, f"not valid UTF-8 ({e.reason})"))
            continue
        except OSError as e:
            logger.warning(f"Skipping {entry.path}: {e.strerror or e}")
            warnings.append(FileWarning(entry.path, str(e.strerror or e)))
            continue
        buffers.append(FileBuffer(path=entry.path, content=content, kind=entry.kind))
    return buffers, warnings


def load_project(base_path: str | Path,
                 config: Optional[ScanConfig] = None) -> Tuple[List[FileBuffer], List[FileWarning]]:
    """Discover and load a whole project tree."""
    warnings: List[FileWarning] = []
    entries = collect_files(base_path, config, warnings)
    buffers, load_warnings = load_buffers(entries)
    return buffers, warnings + load_warnings


def unzip_to_tempdir(zip_path: str) -> str:
    """Unzips a zip file to a temporary directory and returns the path."""
    temp_dir = tempfile.mkdtemp()
    with zipfile.ZipFile(zip_path, 'r') as zip_ref:
        zip_ref.extractall(temp_dir)
    return temp_dir


def ensure_directory(directory: Path) -> None:
    """Ensure directory exists, create if necessary."""
    directory.mkdir(parents=True, exist_ok=True)
