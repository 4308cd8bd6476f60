from __future__ import annotations

import copy
import json
from typing import Optional, Sequence

from ..domain.exceptions import NoAuditDataError, UncommittedChangesError
from ..domain.models import (
    UNCOMMITTED_MARKER,
    AttributionEntry,
    AuditResult,
    DependencyDescriptor,
    FileInventory,
    ReportBundle,
    VcsFacts,
)


# No failure classification exists yet; consumers always receive success.
EXIT_CODE_OK = 0


class ReportAssembler:
    """Sole constructor of the report bundle.

    Inputs are copied into a fresh structure and never mutated. A bundle
    either leaves ``assemble`` fully populated (with ``Date.End`` still unset
    for the caller to stamp) or does not leave it at all.
    """

    def assemble(
        self,
        *,
        audit: Optional[AuditResult],
        start: str,
        vcs_present: bool,
        vcs_facts: Optional[VcsFacts],
        deps: Sequence[DependencyDescriptor],
        attributions: Sequence[AttributionEntry],
        file_inventory: FileInventory,
        root_path: str,
        host_name: str,
    ) -> ReportBundle:
        """Build the bundle and run the dirty-working-tree guard.

        Raises:
            NoAuditDataError: If there is no audit result to embed
            UncommittedChangesError: If the serialized bundle mentions the
                uncommitted-change marker anywhere
        """
        if audit is None:
            raise NoAuditDataError()

        use_vcs = vcs_present and vcs_facts is not None
        vcs_info = {
            "Git Url": vcs_facts.remote_url if use_vcs else None,
            "Git Hash": vcs_facts.commit_hash if use_vcs else None,
            "blm_lists": [a.to_dict() for a in attributions] if use_vcs else [],
        }

        bundle: ReportBundle = {
            "Date": {"Start": start, "End": None},
            "Machine Name": host_name,
            "Project": {
                "Dependency Report": copy.deepcopy(audit),
                "Project Meta": {
                    "Project Name": vcs_facts.project_name if use_vcs else None,
                    "Dependencies": [d.to_dict() for d in deps],
                    "Absolute Path": root_path,
                    "Exit Code": EXIT_CODE_OK,
                    "VCS Info": vcs_info,
                    "File Info": copy.deepcopy(file_inventory),
                    "Root": ".",
                },
            },
        }

        # Scans the whole bundle text, not only the blame fields.
        if UNCOMMITTED_MARKER in json.dumps(bundle, ensure_ascii=False):
            raise UncommittedChangesError()

        return bundle
