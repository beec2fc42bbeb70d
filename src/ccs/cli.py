"""Typer CLI for CCS — scan, search and browse transcripts."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from result import Err

from ccs.config import Config
from ccs.models.search import DateRange, SortOrder

if TYPE_CHECKING:
    from ccs.models.conversations import Conversation
    from ccs.models.search import SearchResult
    from ccs.services.container import ServiceContainer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="ccs",
    help="Code Conversation Search — full-text search over coding assistant transcripts.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    claude_dir: Annotated[
        Path | None,
        typer.Option("--claude-dir", help="Path to Claude data directory"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress")] = False,
) -> None:
    """Configure logging and the data directory for all commands."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Config(claude_dir=claude_dir or Path.home() / ".claude")


@app.command()
def scan(ctx: typer.Context) -> None:
    """Scan all transcripts and build the search index."""
    config: Config = ctx.obj
    asyncio.run(_do_scan(config))


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Search text; empty lists recent sessions")] = "",
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Maximum results")] = None,
    project: Annotated[
        str | None, typer.Option("--project", "-p", help="Project name substring")
    ] = None,
    sort_by: Annotated[
        SortOrder | None, typer.Option("--sort", help="Reorder hits (default: relevance)")
    ] = None,
    since: Annotated[
        DateRange, typer.Option("--since", help="Only hits active within this range")
    ] = DateRange.ALL,
    as_json: Annotated[bool, typer.Option("--json", help="Print results as JSON")] = False,
) -> None:
    """Search conversations."""
    config: Config = ctx.obj
    asyncio.run(_do_search(config, query, limit, project, sort_by, since, as_json))


@app.command()
def show(
    ctx: typer.Context,
    conversation_id: Annotated[str, typer.Argument(help="Conversation id (file path)")],
    as_json: Annotated[bool, typer.Option("--json", help="Print as JSON")] = False,
) -> None:
    """Print one conversation."""
    config: Config = ctx.obj
    asyncio.run(_do_show(config, conversation_id, as_json))


@app.command()
def projects(ctx: typer.Context) -> None:
    """List distinct project paths."""
    config: Config = ctx.obj
    asyncio.run(_do_projects(config))


@app.command()
def stats(ctx: typer.Context) -> None:
    """Print conversation and project counts."""
    config: Config = ctx.obj
    asyncio.run(_do_stats(config))


async def _build_services(config: Config) -> ServiceContainer:
    from ccs.services.container import ServiceContainer

    services = ServiceContainer.create(config)
    logger.info("Indexing sessions from %s", config.projects_dir)
    result = await services.rebuild()
    if isinstance(result, Err):
        await services.close()
        typer.echo(result.err_value, err=True)
        raise typer.Exit(code=1)
    return services


async def _do_scan(config: Config) -> None:
    services = await _build_services(config)
    try:
        typer.echo(f"Done! {services.scanner.last_result}")
    finally:
        await services.close()


async def _do_search(
    config: Config,
    query: str,
    limit: int | None,
    project: str | None,
    sort_by: SortOrder | None,
    since: DateRange,
    as_json: bool,
) -> None:
    services = await _build_services(config)
    try:
        result = await services.search(
            query,
            limit=limit,
            project_filter=project,
            sort_by=sort_by,
            date_range=since,
        )
    finally:
        await services.close()

    if isinstance(result, Err):
        typer.echo(result.err_value, err=True)
        raise typer.Exit(code=1)

    results = result.ok_value
    if as_json:
        typer.echo(json.dumps([r.model_dump() for r in results], indent=2))
        return
    if not results:
        typer.echo("No results.")
        return
    for item in results:
        typer.echo(_format_result(item))


async def _do_show(config: Config, conversation_id: str, as_json: bool) -> None:
    services = await _build_services(config)
    try:
        conversation = services.get_conversation(conversation_id)
    finally:
        await services.close()

    if conversation is None:
        typer.echo(f"Conversation {conversation_id} not found", err=True)
        raise typer.Exit(code=1)
    if as_json:
        typer.echo(conversation.model_dump_json(indent=2, exclude_none=True))
        return
    typer.echo(_format_conversation(conversation))


async def _do_projects(config: Config) -> None:
    services = await _build_services(config)
    try:
        for project_path in services.get_projects():
            typer.echo(project_path)
    finally:
        await services.close()


async def _do_stats(config: Config) -> None:
    services = await _build_services(config)
    try:
        corpus = services.get_stats()
    finally:
        await services.close()
    typer.echo(f"Conversations: {corpus.conversation_count}")
    typer.echo(f"Projects: {corpus.project_count}")


def _format_result(item: SearchResult) -> str:
    title = item.session_name or item.session_id
    header = f"{item.timestamp}  {item.project_name}  {title}  ({item.message_count} messages)"
    return f"{header}\n  {item.id}\n  {item.preview}\n"


def _format_conversation(conversation: Conversation) -> str:
    lines = [
        f"# {conversation.session_name or conversation.session_id}",
        f"Project: {conversation.project_path}",
        f"File: {conversation.file_path}",
        f"Messages: {conversation.message_count}",
        "",
    ]
    for message in conversation.messages:
        location = f" (line {message.line_number})" if message.line_number else ""
        lines.append(f"[{message.type}] {message.timestamp}{location}")
        if message.content:
            lines.append(message.content)
        if message.metadata and message.metadata.tool_uses:
            lines.append(f"Tools: {', '.join(message.metadata.tool_uses)}")
        lines.append("")
    return "\n".join(lines)
