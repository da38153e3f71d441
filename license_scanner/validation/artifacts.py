"""Persistence of accepted validation artifacts."""

import json
from pathlib import Path
from typing import Iterable, Union

from license_scanner.templates import StaticBlock

from .exceptions import ArtifactWriteError


def write_precheck_file(blocks: Iterable[StaticBlock], path: Union[str, Path]) -> Path:
    """Write static blocks as a JSON pre-check file.

    The file holds ``{"staticBlocks": [{"text": ..., "optional": ...}, ...]}``.

    Raises:
        ArtifactWriteError: If the file cannot be written
    """
    target = Path(path)
    payload = {"staticBlocks": [block.to_dict() for block in blocks]}
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as e:
        raise ArtifactWriteError(f"error writing pre-checks to {target}: {e}", str(target)) from e
    return target


def read_precheck_file(path: Union[str, Path]) -> list:
    """Load static blocks written by :func:`write_precheck_file`."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [
        StaticBlock(text=item["text"], optional=bool(item.get("optional", False)))
        for item in data.get("staticBlocks", [])
    ]


def copy_artifact(content: bytes, path: Union[str, Path]) -> Path:
    """Write accepted template or example bytes unchanged.

    Raises:
        ArtifactWriteError: If the file cannot be written
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as e:
        raise ArtifactWriteError(f"error writing {target}: {e}", str(target)) from e
    return target
