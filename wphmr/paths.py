"""Path resolution utilities for wphmr configuration."""

import os
from pathlib import Path


def resolve_path(path: str | Path, base_dir: Path | None) -> Path:
    """Resolve a path, making it relative to base_dir if it's relative."""
    path_obj = Path(os.path.expanduser(str(path)))

    if path_obj.is_absolute() or base_dir is None:
        return path_obj

    return base_dir / path_obj
