"""Render a project's structure and briefs as JSON, CSV or Markdown text."""
import csv
import io
import re
from datetime import date, datetime
from typing import Literal

from app.models import ExportData

ExportFormat = Literal["json", "csv", "markdown"]

CSV_HEADERS = ["URL", "Full URL", "Type", "Title", "Category", "Priority"]

EXPORT_EXTENSIONS: dict[str, str] = {"json": "json", "csv": "csv", "markdown": "md"}
EXPORT_MEDIA_TYPES: dict[str, str] = {
    "json": "application/json",
    "csv": "text/csv",
    "markdown": "text/markdown",
}


def resolve_title(title_pattern: str, brand_name: str) -> str:
    return title_pattern.replace("{brand}", brand_name)


def export_as_json(data: ExportData) -> str:
    return data.model_dump_json(indent=2)


def export_as_csv(data: ExportData) -> str:
    project = data.project
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for page in data.pages:
        writer.writerow(
            [
                page.url_path,
                f"https://{project.domain}{page.url_path}",
                page.page_type,
                resolve_title(page.title_pattern, project.brand_name),
                page.category or "general",
                page.priority or "-",
            ]
        )
    return buffer.getvalue().rstrip("\n")


def _table_cell(value: str) -> str:
    return value.replace("|", "\\|")


def export_as_markdown(data: ExportData, generated_on: date | None = None) -> str:
    project = data.project
    created = (generated_on or date.today()).isoformat()

    lines: list[str] = [
        f"# Content Briefs: {project.domain}",
        "",
        f"**Brand:** {project.brand_name}",
        f"**Focus:** {project.focus_type}",
        f"**Created:** {created}",
        "",
        "---",
        "",
        "## Web Structure Overview",
        "",
        "| URL | Type | Title |",
        "|-----|------|-------|",
    ]
    for page in data.pages:
        required = " (Required)" if page.is_required else ""
        title = resolve_title(page.title_pattern, project.brand_name)
        lines.append(f"| {_table_cell(page.url_path)}{required} | {page.page_type} | {_table_cell(title)} |")
    lines += ["", "---", ""]

    if data.briefs:
        lines += ["## Content Briefs", ""]
        for index, brief in enumerate(data.briefs, start=1):
            lines += [
                f"### {index}. {brief.page_url or brief.page_id}",
                "",
                f"**Page Type:** {brief.page_type or 'N/A'}",
                "",
                f"**Meta Title:** {brief.meta_title or 'N/A'}",
                "",
                f"**Meta Description:** {brief.meta_description or 'N/A'}",
                "",
                f"**H1:** {brief.h1 or 'N/A'}",
                "",
            ]

            if brief.content_structure:
                lines += ["**Content Structure:**", ""]
                for i, section in enumerate(brief.content_structure, start=1):
                    lines.append(f"{i}. **{section.get('h2', '')}**")
                    lines.extend(f"   - {h3}" for h3 in section.get("h3s") or [])
                    lines.append("")

            if brief.keywords:
                lines += [f"**Keywords:** {', '.join(brief.keywords)}", ""]

            if brief.word_count_min and brief.word_count_max:
                lines += [f"**Word Count:** {brief.word_count_min}-{brief.word_count_max}", ""]

            if brief.internal_links:
                lines.append("**Internal Links:**")
                lines.extend(
                    f"- {link.get('target', '')} ({link.get('type', 'support')})"
                    for link in brief.internal_links
                )
                lines.append("")

            lines += ["---", ""]

    return "\n".join(lines)


def render_export(data: ExportData, fmt: ExportFormat) -> str:
    if fmt == "json":
        return export_as_json(data)
    if fmt == "csv":
        return export_as_csv(data)
    return export_as_markdown(data)


def export_filename(brand_name: str, fmt: ExportFormat, now: datetime | None = None) -> str:
    """`My Brand` -> `my-brand-20240131-235959.csv`"""
    now = now or datetime.now()
    brand = re.sub(r"\s+", "-", brand_name.strip()).lower() or "export"
    return f"{brand}-{now:%Y%m%d}-{now:%H%M%S}.{EXPORT_EXTENSIONS[fmt]}"
