from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..domain.models import AttributionEntry, BlameRecord, DependencyDescriptor


class BlameCorrelator:
    """Attributes each dependency declaration to the manifest line that mentions it.

    Matching is a plain substring test of the dependency name against each
    line's text, and the first line in file order wins. A name that is a
    substring of another declaration (``react`` inside ``"react-dom": ...``)
    can therefore pick the wrong line when that line comes first. This is a
    known limitation of the heuristic.
    """

    def correlate(
        self,
        blame: Optional[Iterable[BlameRecord]],
        deps: Sequence[DependencyDescriptor],
    ) -> list[AttributionEntry]:
        records = sorted(blame or (), key=lambda r: r.line_number)
        return [
            AttributionEntry(dependency=dep, blame=self._first_match(dep.name, records))
            for dep in deps
        ]

    @staticmethod
    def _first_match(name: str, records: Sequence[BlameRecord]) -> BlameRecord | None:
        for record in records:
            if name in record.line_text:
                return record
        return None
