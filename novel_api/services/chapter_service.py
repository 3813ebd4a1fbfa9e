"""
Chapter and cover files
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from novel_api.core.exceptions import AppError, NotFound
from novel_api.core.paths import get_novel_root, markdown_dir, novel_dir, resolve_in_tree

logger = logging.getLogger(__name__)

COVER_FILENAME = "Cover.png"
CHAPTER_SUFFIX = ".md"
_CHAPTER_RE = re.compile(r"Chapter\s+(\d+)", re.IGNORECASE)


def _is_file(path: Path) -> bool:
    # names the filesystem rejects (too long, bad bytes) simply do not exist
    try:
        return path.is_file()
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return False


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as e:
        logger.debug(f"Cannot stat {path}: {e}")
        return False


def list_novel_folders() -> List[str]:
    """Names of the novel directories in the file tree"""
    root = get_novel_root()
    if not _is_dir(root):
        raise NotFound("Novel directory not found")
    return sorted(p.name for p in root.iterdir() if _is_dir(p))


def get_cover_path(novel_name: str) -> Path:
    """Path of the cover image of a novel"""
    path = novel_dir(novel_name) / COVER_FILENAME
    if not _is_file(path):
        raise NotFound(f"Cover image for {novel_name} not found")
    return path


def chapter_number_of(novel_name: str, stem: str) -> Optional[int]:
    """Chapter number in a file stem, ignoring the novel name prefix"""
    prefix = f"{novel_name} "
    if stem.startswith(prefix):
        stem = stem[len(prefix):]
    numbers = _CHAPTER_RE.findall(stem)
    return int(numbers[-1]) if numbers else None


def list_chapters(novel_name: str) -> List[str]:
    """Chapter names of a novel in numeric order ("Chapter 2" before "Chapter 10")"""
    directory = markdown_dir(novel_name)
    if not _is_dir(directory):
        raise NotFound("Chapters not found")

    numbered: List[Tuple[int, str]] = []
    for entry in directory.iterdir():
        if entry.suffix != CHAPTER_SUFFIX or not _is_file(entry):
            continue
        number = chapter_number_of(novel_name, entry.stem)
        if number is None:
            logger.debug(f"Skipping non-chapter file {entry.name}")
            continue
        numbered.append((number, f"Chapter {number}"))

    numbered.sort(key=lambda item: item[0])
    return [name for _, name in numbered]


def chapter_path(novel_name: str, chapter_number: str) -> Path:
    return resolve_in_tree(novel_name, "Markdown", f"{novel_name} Chapter {chapter_number}{CHAPTER_SUFFIX}")


def get_chapter(novel_name: str, chapter_number: str) -> str:
    """Markdown text of one chapter"""
    path = chapter_path(novel_name, chapter_number)
    if not _is_file(path):
        raise NotFound(f"Chapter {chapter_number} of {novel_name} not found")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.error(f"Chapter file {path} is not valid UTF-8: {e}")
        raise AppError("Chapter could not be read")
    except OSError as e:
        logger.warning(f"Chapter file {path} could not be opened: {e}")
        raise NotFound(f"Chapter {chapter_number} of {novel_name} not found")
