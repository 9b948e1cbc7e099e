"""CLI command implementations"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from streampub.config import Settings, load_config
from streampub.core.anchors import extract_anchors
from streampub.core.driver import RenderDriver
from streampub.core.export import write_frame
from streampub.core.models import BoundImage, ImageStatus
from streampub.core.utils.slug import slugify
from streampub.crud.database import init_db, make_engine
from streampub.crud.documents import commit_doc, list_documents
from streampub.errors import StreamPubError
from streampub.sources import DirectoryImageFetcher, EnvCredential, stream_file


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _driver(settings: Settings) -> RenderDriver:
    fetcher = DirectoryImageFetcher(Path(settings.image_dir)) if settings.image_dir else None
    credentials = EnvCredential(settings.credential_env) if settings.credential_env else None
    return RenderDriver(
        fetcher,
        credentials=credentials,
        visual_slots=settings.visual_slots,
        render_interval=settings.render_interval,
        fetch_timeout=settings.fetch_timeout,
    )


def render_cmd(
    path: Annotated[str, typer.Argument(help="Text file to stream through the renderer")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="json, md or html")] = None,
    chunk_size: Annotated[Optional[int], typer.Option("--chunk-size", help="Characters per streamed chunk")] = None,
    images: Annotated[Optional[str], typer.Option("--images", help="Directory of images named by anchor slug")] = None,
    commit: Annotated[bool, typer.Option("--commit", help="Archive the finished run in the database")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Stream a file through the renderer and write the final frame."""
    settings = _settings(overrides={
        "output_dir": out, "output_format": fmt, "chunk_size": chunk_size,
        "image_dir": images, "log_level": "DEBUG" if verbose else None,
    })
    source = Path(path)
    driver = _driver(settings)

    try:
        frame = asyncio.run(driver.run(stream_file(source, settings.chunk_size, settings.chunk_delay)))
    except StreamPubError as e:
        _fail("Render failed", e)

    slug = slugify(source.stem, fallback="document")
    out_path = write_frame(frame, Path(settings.output_dir), slug, settings.output_format)
    images_bound = [e for e in frame.entries if isinstance(e, BoundImage)]
    ready = sum(1 for e in images_bound if e.status == ImageStatus.ready)
    typer.echo(f"  {source} -> {out_path}")
    typer.echo(f"Rendered {len(frame.entries)} block(s), {ready}/{len(images_bound)} image(s) ready")

    if commit:
        engine = make_engine(settings.db_url)
        init_db(engine)
        try:
            with Session(engine) as session:
                _, status = commit_doc(session, slug, driver.raw, driver.parsed)
                session.commit()
        except Exception as e:
            _fail("Commit failed", e)
        typer.echo(f"  {status}: {slug}")


def anchors_cmd(
    path: Annotated[str, typer.Argument(help="Text file to scan for anchor directives")],
    ):
    """Print the cover and visual anchors found in a file as JSON."""
    try:
        text = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)
    anchors, _ = extract_anchors(text)
    typer.echo(json.dumps(anchors.as_dict(), indent=2, ensure_ascii=False))


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the archive schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def list_cmd():
    """List archived documents by slug."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        rows = [(d.slug, d.title) for d in list_documents(session)]
    if not rows:
        typer.echo("No documents found in database.")
        raise typer.Exit(1)
    for slug, title in rows:
        typer.echo(f"{slug}\t{title or ''}")
