"""Formatted command output: text, JSON, YAML or a plain table."""
from __future__ import annotations

import datetime as _dt
import json
import sys
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


@dataclass
class OutputConfig:
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False
    file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        # resolved per call so redirected stdout is honored
        return self.file or sys.stdout


def to_plain(data: Any) -> Any:
    """Turn dataclasses, enums, sets and datetimes into JSON-safe values."""
    if is_dataclass(data) and not isinstance(data, type):
        return to_plain(asdict(data))
    if isinstance(data, dict):
        return {k: to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [to_plain(v) for v in data]
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, (_dt.datetime, _dt.date)):
        return data.isoformat()
    return data


class OutputWriter:
    """Writes producer output in the format chosen with --output."""

    def __init__(self, config: Optional[OutputConfig] = None) -> None:
        self.config = config or OutputConfig()

    @property
    def structured(self) -> bool:
        """True for json/yaml/table, where producers emit rows instead of prose."""
        return self.config.format is not OutputFormat.TEXT

    def print(self, *args: Any, **kwargs: Any) -> None:
        if self.config.quiet:
            return
        kwargs.setdefault("file", self.config.stream)
        print(*args, **kwargs)

    def print_verbose(self, message: str) -> None:
        if self.config.verbose:
            self.print(message)

    def print_dry_run(self, message: str) -> None:
        self.print(f"[dry-run] {message}")

    def print_data(self, data: Any, headers: Optional[List[str]] = None) -> None:
        """Emit a mapping or a list of row mappings."""
        plain = to_plain(data)
        fmt = self.config.format
        if fmt is OutputFormat.JSON:
            self.print(json.dumps(plain, indent=2, ensure_ascii=False))
        elif fmt is OutputFormat.YAML:
            import yaml

            self.print(yaml.safe_dump(plain, sort_keys=False, allow_unicode=True), end="")
        elif fmt is OutputFormat.TABLE:
            rows = plain if isinstance(plain, list) else [plain]
            self._print_table(rows, headers)
        elif isinstance(plain, dict):
            for key, value in plain.items():
                self.print(f"{key}: {value}")
        else:
            for item in plain if isinstance(plain, list) else [plain]:
                self.print("  ".join(map(str, item.values())) if isinstance(item, dict) else item)

    def _print_table(self, rows: List[Dict[str, Any]], headers: Optional[List[str]]) -> None:
        if not rows:
            return
        cols = headers or list(rows[0].keys())
        cells = [[str(row.get(c, "")) for c in cols] for row in rows]
        widths = [max(len(c), *(len(r[i]) for r in cells)) for i, c in enumerate(cols)]
        header = " | ".join(c.ljust(w) for c, w in zip(cols, widths))
        self.print(header)
        self.print("-" * len(header))
        for r in cells:
            self.print(" | ".join(v.ljust(w) for v, w in zip(r, widths)))
