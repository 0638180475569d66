"""
Plain text rendering of plans and materialization reports.

Output is always sorted by destination path, then by source path.
"""

from typing import Dict, List

from takein.schemas import IntakePlan, MaterializationReport, SourceEntry


def _source_line(src: SourceEntry) -> str:
    if not src.is_dir:
        return src.path
    plural = "s" if src.capped or src.file_count > 1 else ""
    return f"{src.path} (directory, containing {src.file_count_label} file{plural})"


def render_plan(plan: IntakePlan) -> str:
    lines: List[str] = []
    if plan.not_found:
        lines.append("Not Exists")
        lines.extend(sorted(plan.not_found))
        lines.append("")
    if plan.invalid:
        lines.append("Invalids")
        lines.extend(str(inv) for inv in sorted(plan.invalid, key=lambda i: i.path))
        lines.append("")
    for group in plan.sorted_groups():
        title = f"To: {group.dest_dir}"
        if not group.exists:
            title += " (to be created)"
        lines.append(title)
        lines.extend(_source_line(src) for src in group.sources)
        lines.append("")
    return "\n".join(lines)


def render_materialization(report: MaterializationReport) -> str:
    lines = [f"{report.method.capitalize()} completed", ""]
    for dest_dir in sorted(report.files):
        lines.append(f"Taken into: {dest_dir}")
        for item in sorted(report.files[dest_dir], key=lambda f: f.dest):
            suffix = " (already exists, skipped)" if item.status == "skipped" else ""
            lines.append(f"{item.dest}{suffix}")
        lines.append("")
    lines.append(f"{report.created} created, {report.skipped} skipped")
    return "\n".join(lines)


def plan_summary(plan: IntakePlan) -> Dict[str, int]:
    return {
        "not_found": len(plan.not_found),
        "invalid": len(plan.invalid),
        "destinations": len(plan.groups),
        "sources": sum(len(g.sources) for g in plan.groups.values()),
        "new_destinations": sum(1 for g in plan.groups.values() if not g.exists),
    }
