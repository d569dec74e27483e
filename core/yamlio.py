"""YAML document helpers (PyYAML, imported on first use)."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

__all__ = ["load_config", "dump_config", "read_document"]

PathLike = Union[str, Path]


def _require_yaml():
    try:
        import yaml  # type: ignore
    except ImportError as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("PyYAML not installed. Run: pip install pyyaml") from exc
    return yaml


def read_document(path: PathLike) -> Any:
    """Parse a YAML file and return its root node unchanged.

    Missing files raise FileNotFoundError and malformed text raises
    ``yaml.YAMLError``. A blank file gives None.
    """
    yaml = _require_yaml()
    text = Path(path).read_text(encoding="utf-8")
    if not text.strip():
        return None
    return yaml.safe_load(text)


def load_config(path: Optional[PathLike]) -> Dict[str, Any]:
    """Like read_document, but a missing path or empty document gives {}."""
    if not path or not Path(path).exists():
        return {}
    return read_document(path) or {}


def dump_config(path: PathLike, data: Dict[str, Any]) -> None:
    """Write ``data`` as block YAML, keeping key order and non-ASCII text."""
    yaml = _require_yaml()
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    target.write_text(text, encoding="utf-8")
