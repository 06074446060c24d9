"""CLI interface for vmscan."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from vmscan.core.inventory import NoVmsFoundError, VmInventory
from vmscan.models.vm_record import VmRecord
from vmscan.output import ClickSink, OutputConfig
from vmscan.render.table import render_table
from vmscan.render.tree import render_tree
from vmscan.settings import Settings
from vmscan.utils import format_size

log = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _scan(ctx: click.Context, root: str | None, jobs: int | None) -> tuple[Path, list[VmRecord]]:
    """Resolve the scan root and build the record set, exiting if it is empty."""
    settings: Settings = ctx.obj["settings"]
    scan_root = settings.scan_root(root)
    inventory = VmInventory(os_labels=settings.os_labels(), jobs=jobs or settings.jobs())

    def on_progress(vmx_path: Path, status: str) -> None:
        if status == "error":
            click.echo(f"  {click.style('✗', fg='red')} {vmx_path} — error during analysis", err=True)

    try:
        records = inventory.scan(scan_root, on_progress=on_progress)
    except NoVmsFoundError as exc:
        ctx.obj["err_sink"].emit(str(exc), "error")
        sys.exit(1)
    return scan_root, records


root_argument = click.argument("root", required=False, type=click.Path(file_okay=False))
jobs_option = click.option("--jobs", "-j", type=click.IntRange(min=1), default=None,
                           help="Analyze VMs on N worker threads")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def main(ctx: click.Context, verbose: int, no_color: bool) -> None:
    """vmscan — inventory of VMware Workstation VMs, their clones and snapshots."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", Settings())
    ctx.obj["sink"] = ClickSink(OutputConfig(color=not no_color))
    ctx.obj["err_sink"] = ClickSink(OutputConfig(color=not no_color, err=True))


# ── table ────────────────────────────────────────────────────────────────

@main.command()
@root_argument
@jobs_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def table(ctx: click.Context, root: str | None, jobs: int | None, as_json: bool) -> None:
    """List every VM found under ROOT as a table."""
    _, records = _scan(ctx, root, jobs)
    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return
    render_table(records, ctx.obj["sink"])


# ── tree ─────────────────────────────────────────────────────────────────

@main.command()
@root_argument
@jobs_option
@click.pass_context
def tree(ctx: click.Context, root: str | None, jobs: int | None) -> None:
    """Show standalone VMs with their clones nested underneath."""
    _, records = _scan(ctx, root, jobs)
    render_tree(records, ctx.obj["sink"])


# ── report ───────────────────────────────────────────────────────────────

@main.command()
@root_argument
@jobs_option
@click.pass_context
def report(ctx: click.Context, root: str | None, jobs: int | None) -> None:
    """Full report: table, hierarchy and totals."""
    scan_root, records = _scan(ctx, root, jobs)
    sink = ctx.obj["sink"]

    sink.emit("")
    sink.emit(f"VM inventory of {scan_root}", "header")
    sink.emit(f"{len(records)} virtual machines found")
    sink.emit("")
    render_table(records, sink)
    sink.emit("")
    render_tree(records, sink)

    clones = sum(1 for r in records if r.is_clone)
    snapshots = sum(r.snapshot_count for r in records)
    total = sum(r.size_bytes for r in records)
    sink.emit("")
    sink.emit(
        f"Total: {len(records)} VMs ({clones} clones), {snapshots} snapshots, {format_size(total)}",
        "header",
    )


# ── os-labels ────────────────────────────────────────────────────────────

@main.command("os-labels")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def os_labels(ctx: click.Context, as_json: bool) -> None:
    """Show the guestOS code → label table in effect."""
    labels = ctx.obj["settings"].os_labels()
    if as_json:
        click.echo(json.dumps(labels, indent=2, sort_keys=True))
        return
    width = max(len(code) for code in labels)
    for code in sorted(labels):
        click.echo(f"  {code:{width}s}  {labels[code]}")


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Settings management commands."""


@config.command("path")
@click.pass_context
def config_path(ctx: click.Context) -> None:
    """Print the settings file location."""
    click.echo(str(ctx.obj["settings"].path))


@config.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    """Print a setting (dot-notation KEY, e.g. scan.root)."""
    value = ctx.obj["settings"].get(key)
    if value is None:
        click.echo(f"Setting '{key}' is not set.", err=True)
        sys.exit(1)
    click.echo(json.dumps(value) if not isinstance(value, str) else value)


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Store a setting.  VALUE is parsed as JSON when possible."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    ctx.obj["settings"].set(key, parsed)
    log.info("Set %s = %r", key, parsed)
