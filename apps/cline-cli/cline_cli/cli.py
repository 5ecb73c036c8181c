"""Hinter Cline CLI commands."""

import json
import logging
from pathlib import Path

import typer
from cline_core import (
    GroupError,
    HinterError,
    Layout,
    PeerError,
    add_peer,
    add_to_group,
    compute_groups,
    create_group,
    delete_peer,
    list_peer_aliases,
    load_peer_config,
    remove_from_group,
    rename_peer,
    resolve_data_root,
    set_public_key,
)
from cline_sync import CollisionPolicy, ReportSync, SyncAction, create_draft
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Initialize
app = typer.Typer(help="Hinter Cline - Resolve report drafts into per-peer outgoing folders")
peer_app = typer.Typer(help="Manage the peer roster")
group_app = typer.Typer(help="Manage peer groups")
draft_app = typer.Typer(help="Author report drafts")
console = Console(soft_wrap=True)

# Configure logging (default to WARNING, can be lowered to INFO in debug mode)
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M",
)
logger = logging.getLogger(__name__)


def _fail(e: Exception, code: int) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    return typer.Exit(code)


def get_data_root(ctx: typer.Context) -> Path:
    """Data root chosen by the top-level callback; entries/ and peers/ are created if missing."""
    root = ctx.obj if isinstance(ctx.obj, Path) else resolve_data_root()
    try:
        Layout(root).ensure()
    except OSError as e:
        raise _fail(e, 2) from e
    return root


@app.callback()
def main(
    ctx: typer.Context,
    data_path: str | None = typer.Option(
        None,
        "--data-path",
        help="hinter-core data directory (default: $HINTER_CORE_DATA_PATH or ./hinter-core-data)",
    ),
):
    """Hinter Cline - Resolve report drafts into per-peer outgoing folders."""
    ctx.obj = resolve_data_root(data_path)


@app.command()
def sync(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be done without doing it"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when two drafts target the same peer and path"
    ),
    debug: bool = typer.Option(False, "--debug", help="Log every write and deletion"),
):
    """Sync report drafts to every peer's outgoing folder."""
    # Adjust logging level based on debug flag
    if debug:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger("cline_sync").setLevel(logging.INFO)
    else:
        logging.getLogger().setLevel(logging.WARNING)
        logging.getLogger("cline_sync").setLevel(logging.WARNING)

    root = get_data_root(ctx)
    policy = CollisionPolicy.ERROR if strict else CollisionPolicy.LAST_WINS
    try:
        summary = ReportSync(root, policy=policy).sync(dry_run=dry_run)
    except HinterError as e:
        raise _fail(e, 2) from e
    except OSError as e:
        logger.exception("Sync failed")
        raise _fail(e, 2) from e

    if summary.no_peers:
        console.print("No peers configured.")
        return

    if dry_run:
        console.rule("[dim]Planned changes (dry run)")
        if summary.items:
            table = Table(show_header=True, header_style="bold")
            table.add_column("Action")
            table.add_column("Peer")
            table.add_column("File")
            table.add_column("Source")
            # Deletions first, as they happen
            items = sorted(summary.items, key=lambda it: it.action != SyncAction.DELETE)
            for it in items:
                table.add_row(it.action.value, it.peer, escape(it.path), escape(it.detail))
            console.print(table)
        else:
            console.print("[dim]No changes.[/dim]")
        console.print(
            f"Dry run. Would sync {summary.written} reports and remove "
            f"{summary.removed} obsolete reports."
        )
        return

    console.print(
        f"Finished. Synced {summary.written} reports and removed "
        f"{summary.removed} obsolete reports."
    )
    if debug:
        console.print(f"[dim]Pruned {summary.pruned} empty directories.[/dim]")


# ---------- drafts ----------
@draft_app.command("new")
def draft_new(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Report title (also the file name)"),
    to: list[str] | None = typer.Option(
        None, "--to", help="Recipient: peer alias or group:<name> (repeatable)"
    ),
    except_: list[str] | None = typer.Option(
        None, "--except", help="Excluded recipient: peer alias or group:<name> (repeatable)"
    ),
):
    """Create a report draft under entries/."""
    root = get_data_root(ctx)
    try:
        path = create_draft(root, title, list(to or []), list(except_ or []))
    except HinterError as e:
        raise _fail(e, 1) from e
    console.print(f"[green][OK][/green] Draft created at: {escape(str(path))}")


# ---------- peers ----------
@peer_app.command("list")
def peer_list(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List peers with their public keys and groups."""
    root = get_data_root(ctx)
    try:
        rows = []
        for alias in list_peer_aliases(root):
            cfg = load_peer_config(root, alias)
            rows.append({"alias": alias, "publicKey": cfg.public_key, "groups": cfg.groups})
    except HinterError as e:
        raise _fail(e, 2) from e

    if json_out:
        print(json.dumps({"peers": rows}, indent=2))
        return
    if not rows:
        console.print("No peers configured.")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Alias", style="cyan")
    table.add_column("Public key")
    table.add_column("Groups")
    for row in rows:
        table.add_row(row["alias"], row["publicKey"], ", ".join(row["groups"]) or "-")
    console.print(table)


@peer_app.command("add")
def peer_add(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Peer alias (lowercase letters, digits, hyphens)"),
    public_key: str = typer.Argument(..., help="64 hex characters"),
):
    """Add a peer to the roster."""
    root = get_data_root(ctx)
    try:
        add_peer(root, alias, public_key)
    except PeerError as e:
        raise _fail(e, 1) from e
    console.print(f"[green][OK][/green] Peer '{alias}' added successfully.")


@peer_app.command("rename")
def peer_rename(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Current alias"),
    new_alias: str = typer.Argument(..., help="New alias"),
):
    """Rename a peer (its directory moves; group memberships are kept)."""
    root = get_data_root(ctx)
    try:
        rename_peer(root, alias, new_alias)
    except PeerError as e:
        raise _fail(e, 1) from e
    console.print(f"[green][OK][/green] Peer alias updated from '{alias}' to '{new_alias}'.")


@peer_app.command("set-key")
def peer_set_key(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Peer alias"),
    public_key: str = typer.Argument(..., help="64 hex characters"),
):
    """Replace a peer's public key."""
    root = get_data_root(ctx)
    try:
        set_public_key(root, alias, public_key)
    except PeerError as e:
        raise _fail(e, 1) from e
    console.print(f"[green][OK][/green] Public key for '{alias}' updated.")


@peer_app.command("remove")
def peer_remove(
    ctx: typer.Context,
    alias: str = typer.Argument(..., help="Peer alias"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a peer directory, including its outgoing folder."""
    root = get_data_root(ctx)
    if not yes and not typer.confirm(f"Are you sure you want to delete peer '{alias}'?"):
        console.print("Deletion cancelled.")
        raise typer.Exit(1)
    try:
        delete_peer(root, alias)
    except PeerError as e:
        raise _fail(e, 1) from e
    console.print(f"[green][OK][/green] Peer '{alias}' deleted successfully.")


# ---------- groups ----------
@group_app.command("list")
def group_list(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List groups and their members (including the built-in 'all')."""
    root = get_data_root(ctx)
    try:
        groups = compute_groups(root)
    except HinterError as e:
        raise _fail(e, 2) from e

    if json_out:
        print(json.dumps({"groups": groups}, indent=2))
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Group", style="cyan")
    table.add_column("Members")
    for name, members in groups.items():
        table.add_row(name, ", ".join(members) or "-")
    console.print(table)


@group_app.command("create")
def group_create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Group name"),
    peers: list[str] = typer.Argument(..., help="Initial members"),
):
    """Create a group with at least one member."""
    root = get_data_root(ctx)
    try:
        added = create_group(root, name, peers)
    except (GroupError, PeerError) as e:
        raise _fail(e, 1) from e
    for alias in added:
        console.print(f"Added '{alias}' to group '{name}'.")


@group_app.command("add")
def group_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Group name"),
    peers: list[str] = typer.Argument(..., help="Peers to add"),
):
    """Add peers to a group."""
    root = get_data_root(ctx)
    try:
        added = add_to_group(root, name, peers)
    except (GroupError, PeerError) as e:
        raise _fail(e, 1) from e
    for alias in added:
        console.print(f"Added '{alias}' to group '{name}'.")
    if not added:
        console.print("[dim]No changes.[/dim]")


@group_app.command("remove")
def group_remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Group name"),
    peers: list[str] = typer.Argument(..., help="Peers to remove"),
):
    """Remove peers from a group (a group with no members disappears)."""
    root = get_data_root(ctx)
    try:
        removed = remove_from_group(root, name, peers)
    except (GroupError, PeerError) as e:
        raise _fail(e, 1) from e
    for alias in removed:
        console.print(f"Removed '{alias}' from group '{name}'.")
    if not removed:
        console.print("[dim]No changes.[/dim]")


@app.command()
def menu(ctx: typer.Context):
    """Open the interactive menu."""
    from cline_cli.shell import run_menu

    run_menu(get_data_root(ctx))


app.add_typer(draft_app, name="draft")
app.add_typer(peer_app, name="peer")
app.add_typer(group_app, name="group")

if __name__ == "__main__":
    app()
