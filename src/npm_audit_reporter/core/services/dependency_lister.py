from __future__ import annotations

from typing import Any, Mapping

from ..domain.models import DependencyDescriptor


DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


class DependencyLister:
    """Turns a parsed package.json into an ordered list of declared dependencies."""

    def __init__(self, *, sections: tuple[str, ...] = DEPENDENCY_SECTIONS) -> None:
        self._sections = sections

    def list_dependencies(self, manifest: Mapping[str, Any]) -> list[DependencyDescriptor]:
        """Return dependencies in declaration order, section by section.

        A name that already appeared in an earlier section is not repeated.
        Sections that are missing or not a mapping are ignored.
        """
        deps: list[DependencyDescriptor] = []
        seen: set[str] = set()
        for section in self._sections:
            entries = manifest.get(section)
            if not isinstance(entries, Mapping):
                continue
            for name, declared in entries.items():
                if name in seen:
                    continue
                seen.add(name)
                deps.append(DependencyDescriptor(name=str(name), declared_range=str(declared)))
        return deps
