"""
Checklist progress CLI.

Usage:
    checklist-progress recompute graph.json
    checklist-progress recompute graph.json --dry-run
    checklist-progress status graph.json
"""

import asyncio
import json
from pathlib import Path

import typer

from checklist_progress.adapters.memory_store import InMemoryNodeStore
from checklist_progress.domain.models import QueryKind, StoreQuery
from checklist_progress.infra.config.settings import Settings
from checklist_progress.infra.exceptions import SnapshotFormatError
from checklist_progress.infra.observability import setup_logging
from checklist_progress.progress.annotation import AnnotationFormatter
from checklist_progress.service import build_orchestrator

app = typer.Typer(help="Checklist (checked/total) progress tools")


def _load_store(snapshot: Path) -> InMemoryNodeStore:
    try:
        data = json.loads(snapshot.read_text(encoding="utf-8"))
        return InMemoryNodeStore.from_snapshot(data)
    except (OSError, json.JSONDecodeError, SnapshotFormatError) as e:
        typer.echo(f"❌ Cannot load {snapshot}: {e}", err=True)
        raise typer.Exit(code=1) from e


def _settings(checklist_tag: str | None, checkbox_tag: str | None) -> Settings:
    overrides = {}
    if checklist_tag:
        overrides["checklist_tag"] = checklist_tag
    if checkbox_tag:
        overrides["checkbox_tag"] = checkbox_tag
    return Settings(**overrides)


def _setup(settings: Settings) -> None:
    observability = settings.observability
    setup_logging(level=observability.log_level, format=observability.log_format)


@app.command()
def recompute(
    snapshot: Path = typer.Argument(..., help="JSON document snapshot"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report changes without writing the snapshot"),
    checklist_tag: str = typer.Option(None, help="Aggregate (checklist) tag"),
    checkbox_tag: str = typer.Option(None, help="Item (checkbox) tag"),
):
    """Recompute every checklist annotation in a snapshot."""
    settings = _settings(checklist_tag, checkbox_tag)
    _setup(settings)
    store = _load_store(snapshot)
    orchestrator = build_orchestrator(store, settings)

    recomputed = asyncio.run(orchestrator.recompute_all())

    for node_id, content in store.writes:
        typer.echo(f"✏️  {node_id}: {content}")
    typer.echo(f"\n📋 {recomputed} checklist(s) recomputed, {len(store.writes)} updated")

    if dry_run or not store.writes:
        return
    snapshot.write_text(json.dumps(store.to_snapshot(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    typer.echo(f"💾 Saved {snapshot}")


@app.command()
def status(
    snapshot: Path = typer.Argument(..., help="JSON document snapshot"),
    checklist_tag: str = typer.Option(None, help="Aggregate (checklist) tag"),
    checkbox_tag: str = typer.Option(None, help="Item (checkbox) tag"),
):
    """Show each checklist's current annotation against freshly computed counts."""
    settings = _settings(checklist_tag, checkbox_tag)
    _setup(settings)
    store = _load_store(snapshot)
    orchestrator = build_orchestrator(store, settings)
    aggregator = orchestrator.scheduler.aggregator
    formatter = AnnotationFormatter()

    async def _collect():
        rows = await store.query(StoreQuery(kind=QueryKind.TAGGED_NODES, tag=settings.tags.checklist_tag))
        report = []
        for row in rows:
            node = await store.get_node(row["id"], include_children=True)
            if node is not None:
                report.append((node, await aggregator.count(node)))
        return report

    report = asyncio.run(_collect())
    if not report:
        typer.echo("No checklists found")
        return

    stale = 0
    for node, result in report:
        # Fresh exactly when recompute would leave the text untouched
        fresh = formatter.apply_result(node.content, result) == node.content
        stale += 0 if fresh else 1
        marker = "✅" if fresh else "⚠️ "
        typer.echo(f"{marker} {node.id}: {result.checked}/{result.total}  {formatter.strip(node.content)}")

    typer.echo(f"\n📋 {len(report)} checklist(s), {stale} stale")


if __name__ == "__main__":
    app()
