"""Render validation reports as text, JSON or HTML."""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel

from schemas.report import ValidationEntry, ValidationLevel, ValidationReport

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "resources" / "templates"

FORMATS = ("text", "json", "html")


class ReportSummary(BaseModel):
    """Serializable view of a report for one package.

    Attributes:
        package_id: Primary id of the package the report is about
        valid: True when the report holds no ERROR entry
        counts: Number of entries per level
        entries: All entries, in recording order
    """

    package_id: str | None = None
    valid: bool
    counts: dict[str, int]
    entries: list[ValidationEntry]

    @classmethod
    def from_report(cls, report: ValidationReport, package_id: str | None = None) -> "ReportSummary":
        entries = list(report.entries())
        counts = {level.value: 0 for level in ValidationLevel}
        for entry in entries:
            counts[entry.level.value] += 1
        return cls(
            package_id=package_id,
            valid=report.is_valid(),
            counts=counts,
            entries=entries,
        )


def render_text(report: ValidationReport, package_id: str | None = None) -> str:
    summary = ReportSummary.from_report(report, package_id)
    lines = [
        f"Package: {package_id or '-'}",
        f"Valid: {'yes' if summary.valid else 'no'}",
        "Entries: " + ", ".join(f"{level} {count}" for level, count in summary.counts.items()),
    ]
    lines.extend(str(entry) for entry in summary.entries)
    return "\n".join(lines) + "\n"


def render_json(report: ValidationReport, package_id: str | None = None) -> str:
    return ReportSummary.from_report(report, package_id).model_dump_json(indent=2, exclude_none=True)


def render_html(
    report: ValidationReport,
    package_id: str | None = None,
    templates_dir: Path | None = None,
    template_name: str = "report.html.j2",
) -> str:
    """Render a report through a Jinja2 template.

    Args:
        report: Report to render
        package_id: Package the report is about
        templates_dir: Directory containing templates (default: bundled templates)
        template_name: Name of the Jinja2 template file
    """
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=True,
    )
    template = env.get_template(template_name)
    return template.render(summary=ReportSummary.from_report(report, package_id))


_RENDERERS = {
    "text": render_text,
    "json": render_json,
    "html": render_html,
}

_SUFFIXES = {".txt": "text", ".json": "json", ".html": "html", ".htm": "html"}


def format_for(path: Path) -> str:
    """Output format implied by a file suffix.

    Raises:
        ValueError: If the suffix is not one of .txt, .json, .html
    """
    try:
        return _SUFFIXES[Path(path).suffix.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported report format {Path(path).suffix!r} (expected .txt, .json or .html)"
        ) from None


def render(report: ValidationReport, fmt: str = "text", package_id: str | None = None) -> str:
    if fmt not in _RENDERERS:
        raise ValueError(f"Unknown report format {fmt!r}")
    return _RENDERERS[fmt](report, package_id)


def write_report(report: ValidationReport, path: Path, package_id: str | None = None) -> Path:
    """Write a report; the format follows the file suffix."""
    path = Path(path)
    content = render(report, format_for(path), package_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote report to {path}")
    return path
