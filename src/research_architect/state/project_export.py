"""
Project export and loading

The whole document is written as indented JSON; loading exists so the CLI can
continue working on an exported project.
"""

import json
from pathlib import Path
from typing import Union

from ..utils.debug_logger import DebugLogger
from .project_document import ProjectDocument


DEFAULT_EXPORT_FILENAME = "arch-scaffold.json"


def export_project(document: ProjectDocument, path: Union[str, Path] = DEFAULT_EXPORT_FILENAME,
                   logger: DebugLogger = None) -> Path:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)

    if logger:
        logger.record_export(path)
    return path


def load_project(path: Union[str, Path]) -> ProjectDocument:
    """
    Read a previously exported project

    Raises:
        FileNotFoundError: path does not exist
        ValueError: file is not a valid project document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Project file {path} is not valid JSON: {e}") from e

    return ProjectDocument.from_dict(data)
