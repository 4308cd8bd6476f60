from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from ..core.domain.exceptions import ManifestError


class ManifestReader:
    """Reads package.json from a project root."""

    def __init__(self, *, manifest_name: str = "package.json") -> None:
        self._manifest_name = manifest_name

    def read(self, root: Path) -> Optional[Mapping[str, Any]]:
        fp = root / self._manifest_name
        if not fp.is_file():
            return None
        try:
            data = json.loads(fp.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ManifestError(fp, str(e)) from e
        if not isinstance(data, dict):
            raise ManifestError(fp, "top-level value is not an object")
        return data
