"""Initialization logic for plugdex directory structure."""

from pathlib import Path

from plugdex.artifacts.base import ArtifactKind
from plugdex.registry.loader import get_global_pack_path, get_local_pack_path


def scaffold_pack(local: bool = True) -> list[str]:
    """Create an empty pack with one directory per artifact kind.

    Args:
        local: If True, create ./.plugdex/pack/ (project-local).
               If False, create ~/.plugdex/pack/ (global).

    Returns:
        List of directories that were created.
    """
    target = get_local_pack_path() if local else get_global_pack_path()

    created: list[str] = []
    for kind in ArtifactKind:
        kind_dir = target / kind.dirname
        if not kind_dir.exists():
            kind_dir.mkdir(parents=True)
            created.append(str(kind_dir))

    return created


def ensure_plugdex_dir() -> Path:
    """Create .plugdex directory in the current working directory.

    Returns the path to the directory.
    """
    plugdex_dir = Path.cwd() / ".plugdex"
    plugdex_dir.mkdir(parents=True, exist_ok=True)
    return plugdex_dir
