"""Markdown export of the publication list."""

from datetime import date
from pathlib import Path

from folio.models.paper import Paper
from folio.utils.text import parse_tags


class MarkdownExporter:
    """Service for exporting published papers to Markdown format."""

    def __init__(self, export_dir: Path):
        """Initialize exporter.

        Args:
            export_dir: Directory to save exported markdown files
        """
        self.export_dir = export_dir
        self.export_dir.mkdir(parents=True, exist_ok=True)

    def render(self, papers: list[Paper], title: str = "Publications") -> str:
        """Render papers grouped by year (newest first) as Markdown.

        Papers without a year are listed last under "Undated".
        """
        year_groups: dict[str, list[Paper]] = {}
        for paper in papers:
            key = str(paper.year) if paper.year else "Undated"
            year_groups.setdefault(key, []).append(paper)

        ordered = sorted((k for k in year_groups if k != "Undated"), reverse=True)
        if "Undated" in year_groups:
            ordered.append("Undated")

        lines = [f"# {title}", ""]
        for year in ordered:
            lines.append(f"## {year}\n")
            for paper in year_groups[year]:
                marker = " ★" if paper.featured else ""
                lines.append(f"### {paper.title}{marker}")
                lines.append(f"- Authors: {paper.authors}")
                venue = _venue(paper)
                if venue:
                    lines.append(f"- Venue: {venue}")
                if paper.doi:
                    lines.append(f"- DOI: [{paper.doi}](https://doi.org/{paper.doi})")
                if paper.pdf_url:
                    lines.append(f"- PDF: {paper.pdf_url}")
                tags = parse_tags(paper.tags)
                if tags:
                    lines.append(f"- Keywords: {', '.join(tags)}")
                if paper.citations:
                    lines.append(f"- Citations: {paper.citations}")
                lines.append("")
        return "\n".join(lines)

    def export(self, papers: list[Paper], title: str = "Publications") -> Path:
        """Export papers to a markdown file named by today's date.

        Args:
            papers: List of papers to export
            title: Document heading

        Returns:
            Path to the created markdown file
        """
        filepath = self.export_dir / f"publications-{date.today().isoformat()}.md"
        # Write to file (overwrites if exists)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.render(papers, title))
        return filepath


def _venue(paper: Paper) -> str:
    """'Journal 12(3), 123-145' with whatever parts are present."""
    venue = paper.journal or ""
    if paper.volume:
        venue += f" {paper.volume}"
        if paper.issue:
            venue += f"({paper.issue})"
    if paper.pages:
        venue += f", {paper.pages}"
    return venue.strip(" ,")
