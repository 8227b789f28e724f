"""Command-line interface handlers."""

import argparse
import asyncio
from pathlib import Path
from typing import Any, Optional

import requests
from rich.prompt import Confirm

from folio.config import Settings
from folio.console import ConsoleUI
from folio.controllers.crud import PAPER_SPEC, SPECS, CrudController
from folio.models.paper import Paper, PaperDraft
from folio.services.crossref_service import CrossrefService
from folio.services.export_service import MarkdownExporter
from folio.services.query_cache import QueryCache
from folio.services.rpc import RpcError, open_collection


class FolioCLI:
    """CLI application for Folio."""

    def __init__(self, settings: Optional[Settings] = None, ui: Optional[ConsoleUI] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loads from disk if not provided)
            ui: Console UI (a fresh rich console if not provided)
        """
        self.settings = settings or Settings.load()
        self.ui = ui or ConsoleUI()
        self.papers = CrudController(
            open_collection("papers", self.settings),
            QueryCache(),
            self.ui,
            PAPER_SPEC,
        )

    # ── Papers ────────────────────────────────────────────────────────

    def cmd_papers_list(self, published_only: bool = False) -> None:
        """List papers (everything, or only the published ones)."""
        try:
            papers = asyncio.run(self.papers.refresh())
        except RpcError as e:
            self.ui.error(e.message)
            return
        if published_only:
            papers = [p for p in papers if p.published]
        self.ui.display_papers(papers)

    def cmd_papers_add(self, values: dict[str, Any], doi_lookup: bool = False) -> bool:
        """Create a paper from CLI values, optionally prefilled from Crossref."""
        draft = PaperDraft()
        if doi_lookup and values.get("doi"):
            crossref = CrossrefService(self.settings.contact_email)
            try:
                meta = crossref.lookup(values["doi"])
            except (ValueError, requests.RequestException) as e:
                self.ui.warning(f"DOI lookup failed: {e}")
            else:
                for key, value in crossref.draft_fields(meta).items():
                    setattr(draft, key, value)
        for key, value in values.items():
            if value is not None and hasattr(draft, key):
                setattr(draft, key, value)
        return asyncio.run(self.papers.create(draft.to_fields()))

    def cmd_papers_publish(self, paper_id: int, publish: bool = True) -> bool:
        """Publish or unpublish a paper."""
        paper = self._find_paper(paper_id)
        if paper is None:
            return False
        if paper.published == publish:
            self.ui.warning(f"Paper {paper_id} is already {'published' if publish else 'a draft'}")
            return False
        return asyncio.run(self.papers.toggle_published(paper))

    def cmd_papers_delete(self, paper_id: int, assume_yes: bool = False) -> bool:
        """Delete a paper after confirmation."""
        paper = self._find_paper(paper_id)
        if paper is None:
            return False
        self.papers.request_delete(paper_id)
        if not assume_yes and not Confirm.ask(
            f"Delete \"{paper.title}\"? This cannot be undone", console=self.ui.console
        ):
            self.papers.cancel_delete()
            self.ui.info("Cancelled.")
            return False
        return asyncio.run(self.papers.confirm_delete())

    def cmd_papers_export(self) -> Optional[Path]:
        """Export published papers to a markdown publication list."""
        try:
            papers = asyncio.run(self.papers.refresh())
        except RpcError as e:
            self.ui.error(e.message)
            return None
        published = [p for p in papers if p.published]
        if not published:
            self.ui.warning("No published papers to export.")
            return None
        exporter = MarkdownExporter(self.settings.export_dir)
        title = f"Publications of {self.settings.owner}" if self.settings.owner else "Publications"
        filepath = exporter.export(published, title=title)
        self.ui.exported(len(published), filepath)
        return filepath

    # ── Photos / essays ───────────────────────────────────────────────

    def cmd_list(self, entity: str) -> None:
        """List photos or essays (including unpublished)."""
        collection = open_collection(entity, self.settings)
        try:
            items = asyncio.run(collection.list_all())
        except RpcError as e:
            self.ui.error(e.message)
            return
        if entity == "photos":
            self.ui.display_photos(items)
        else:
            self.ui.display_essays(items)

    def cmd_add(self, entity: str, values: dict[str, Any]) -> bool:
        """Create a photo or essay."""
        controller = CrudController(
            open_collection(entity, self.settings),
            QueryCache(),
            self.ui,
            SPECS[entity],
        )
        fields = {k: v for k, v in values.items() if v is not None}
        return asyncio.run(controller.create(fields))

    def _find_paper(self, paper_id: int) -> Optional[Paper]:
        try:
            papers = asyncio.run(self.papers.refresh())
        except RpcError as e:
            self.ui.error(e.message)
            return None
        paper = next((p for p in papers if p.id == paper_id), None)
        if paper is None:
            self.ui.error(f"Paper {paper_id} not found")
        return paper


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Portfolio site: photography, essays and papers",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the web application")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    # papers command group
    papers_parser = subparsers.add_parser("papers", help="Manage academic papers")
    papers_sub = papers_parser.add_subparsers(dest="action", required=True)

    list_parser = papers_sub.add_parser("list", help="List papers")
    list_parser.add_argument("--published", action="store_true", help="Only published papers")

    add_parser = papers_sub.add_parser("add", help="Add a paper")
    add_parser.add_argument("--title")
    add_parser.add_argument("--authors")
    add_parser.add_argument("--abstract")
    add_parser.add_argument("--journal")
    add_parser.add_argument("--year", type=int)
    add_parser.add_argument("--volume")
    add_parser.add_argument("--issue")
    add_parser.add_argument("--pages")
    add_parser.add_argument("--doi")
    add_parser.add_argument("--pdf-url", dest="pdf_url")
    add_parser.add_argument("--category")
    add_parser.add_argument("--tags", help="Comma-separated keywords")
    add_parser.add_argument("--citations", type=int)
    add_parser.add_argument("--featured", action="store_true", default=None)
    add_parser.add_argument("--publish", action="store_true", dest="published", default=None)
    add_parser.add_argument(
        "--lookup",
        action="store_true",
        help="Prefill missing fields from Crossref using --doi",
    )

    for name, help_text in (("publish", "Publish a paper"), ("unpublish", "Unpublish a paper")):
        p = papers_sub.add_parser(name, help=help_text)
        p.add_argument("id", type=int)

    delete_parser = papers_sub.add_parser("delete", help="Delete a paper")
    delete_parser.add_argument("id", type=int)
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    papers_sub.add_parser("export", help="Export published papers to markdown")

    # photos command group
    photos_parser = subparsers.add_parser("photos", help="Manage gallery photos")
    photos_sub = photos_parser.add_subparsers(dest="action", required=True)
    photos_sub.add_parser("list", help="List photos")
    photo_add = photos_sub.add_parser("add", help="Add a photo")
    photo_add.add_argument("--title", required=True)
    photo_add.add_argument("--image-url", dest="image_url", required=True)
    photo_add.add_argument("--location")
    photo_add.add_argument("--description")
    photo_add.add_argument("--camera")
    photo_add.add_argument("--lens")
    photo_add.add_argument("--settings")
    photo_add.add_argument("--draft", action="store_true", help="Add unpublished")

    # essays command group
    essays_parser = subparsers.add_parser("essays", help="Manage magazine essays")
    essays_sub = essays_parser.add_subparsers(dest="action", required=True)
    essays_sub.add_parser("list", help="List essays")
    essay_add = essays_sub.add_parser("add", help="Add an essay")
    essay_add.add_argument("--title", required=True)
    essay_add.add_argument("--subtitle")
    essay_add.add_argument("--excerpt")
    essay_add.add_argument("--content-file", dest="content_file", type=Path, help="Body text file")
    essay_add.add_argument("--category")
    essay_add.add_argument("--cover-image-url", dest="cover_image_url")
    essay_add.add_argument("--draft", action="store_true", help="Add unpublished")

    return parser


def _paper_values(args: argparse.Namespace) -> dict[str, Any]:
    names = (
        "title", "authors", "abstract", "journal", "year", "volume", "issue",
        "pages", "doi", "pdf_url", "category", "tags", "citations", "featured",
        "published",
    )
    return {name: getattr(args, name) for name in names}


def run_cli(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI. Returns a process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    from folio.__main__ import configure_logging, serve

    configure_logging(verbose=args.verbose)

    if args.command == "serve":
        serve(host=args.host, port=args.port, reload=args.reload)
        return 0

    cli = FolioCLI()
    ok: Any = True

    if args.command == "papers":
        if args.action == "list":
            cli.cmd_papers_list(published_only=args.published)
        elif args.action == "add":
            ok = cli.cmd_papers_add(_paper_values(args), doi_lookup=args.lookup)
        elif args.action in ("publish", "unpublish"):
            ok = cli.cmd_papers_publish(args.id, publish=args.action == "publish")
        elif args.action == "delete":
            ok = cli.cmd_papers_delete(args.id, assume_yes=args.yes)
        elif args.action == "export":
            ok = cli.cmd_papers_export() is not None
    elif args.command in ("photos", "essays"):
        if args.action == "list":
            cli.cmd_list(args.command)
        else:
            values = {k: v for k, v in vars(args).items() if k not in ("command", "action", "verbose", "draft", "content_file")}
            values["published"] = not args.draft
            if args.command == "essays" and args.content_file:
                try:
                    values["content"] = args.content_file.read_text(encoding="utf-8")
                except OSError as e:
                    cli.ui.error(f"Cannot read {args.content_file}: {e.strerror or e}")
                    return 1
            ok = cli.cmd_add(args.command, values)

    return 0 if ok else 1
