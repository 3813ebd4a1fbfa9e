import os
from pathlib import Path

from novel_api.core.config import settings
from novel_api.core.exceptions import NotFound


def get_novel_root() -> Path:
    """Absolute path of the novel file tree.
    Uses NOVEL_PATH from the settings; the directory is not created here
    because the tree is treated as read-only.
    """
    return Path(os.path.abspath(settings.NOVEL_PATH))


def resolve_in_tree(*parts: str) -> Path:
    """Join parts under the novel root.
    Anything that would land outside the root (``..``, absolute parts)
    is reported as not found.
    """
    root = get_novel_root()
    candidate = Path(os.path.abspath(os.path.join(root, *parts)))
    try:
        candidate.relative_to(root)
    except ValueError:
        raise NotFound("Not found")
    if candidate == root:
        raise NotFound("Not found")
    return candidate


def novel_dir(novel_name: str) -> Path:
    return resolve_in_tree(novel_name)


def markdown_dir(novel_name: str) -> Path:
    """Directory holding the chapter markdown files of a novel"""
    return resolve_in_tree(novel_name, "Markdown")
