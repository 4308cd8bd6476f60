from __future__ import annotations

import json
from pathlib import Path

from ..core.domain.exceptions import WriteError
from ..core.domain.models import ReportBundle


class ReportStore:
    """Writes bundles to local JSON files and reads them back."""

    def persist(self, bundle: ReportBundle, path: Path) -> None:
        try:
            data = json.dumps(bundle, ensure_ascii=False, indent=2).encode("utf-8")
        except UnicodeEncodeError as e:
            raise WriteError(path, f"bundle is not valid UTF-8: {e.reason}") from e
        try:
            path.write_bytes(data)
        except OSError as e:
            raise WriteError(path, e.strerror or str(e)) from e

    def load(self, path: Path) -> ReportBundle:
        return json.loads(path.read_text(encoding="utf-8"))
