"""Human-readable formatters for CLI output."""

from __future__ import annotations

from ..core.domain.models import AttributionEntry, Failed, Ok, ReportOutcome, Skipped


def _count_vulnerabilities(bundle: dict) -> int | None:
    report = bundle.get("Project", {}).get("Dependency Report")
    if not isinstance(report, dict):
        return None
    meta = report.get("metadata")
    if isinstance(meta, dict) and isinstance(meta.get("vulnerabilities"), dict):
        counts = meta["vulnerabilities"]
        if "total" in counts and isinstance(counts["total"], int):
            return counts["total"]
        return sum(v for v in counts.values() if isinstance(v, int))
    vulns = report.get("vulnerabilities") or report.get("advisories")
    if isinstance(vulns, dict):
        return len(vulns)
    return None


def format_outcome(outcome: ReportOutcome) -> str:
    """Format a run outcome as the single message shown to the operator."""
    if isinstance(outcome, Skipped):
        return f"INFO - {outcome.message}"
    if isinstance(outcome, Failed):
        return f"ERROR - {outcome.message}"

    if not isinstance(outcome, Ok):
        raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    meta = outcome.bundle["Project"]["Project Meta"]
    lines = ["INFO - Dependency report created."]
    lines.append(f"Project:      {meta['Project Name'] or meta['Absolute Path']}")
    lines.append(f"Dependencies: {len(meta['Dependencies'])}")
    total = _count_vulnerabilities(outcome.bundle)
    if total is not None:
        lines.append(f"Vulnerabilities: {total}")
    if outcome.output_path is not None:
        lines.append(f"Saved to:     {outcome.output_path}")
    if outcome.delivery is not None:
        lines.append(f"Sent to:      {outcome.delivery.url} (HTTP {outcome.delivery.status_code})")
    return "\n".join(lines)


def format_attributions(entries: list[AttributionEntry]) -> str:
    if not entries:
        return "No dependencies declared."

    rows = []
    for e in entries:
        if e.blame is None:
            rows.append((e.dependency.name, e.dependency.declared_range, "-", "-", "-"))
        else:
            rows.append((
                e.dependency.name,
                e.dependency.declared_range,
                e.blame.author,
                e.blame.commit_hash[:12],
                str(e.blame.line_number),
            ))

    headers = ("Dependency", "Range", "Author", "Commit", "Line")
    widths = [max(len(h), max(len(r[i]) for r in rows)) for i, h in enumerate(headers)]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()]
    for r in rows:
        lines.append("  ".join(c.ljust(w) for c, w in zip(r, widths)).rstrip())
    return "\n".join(lines)
