"""Interactive menu for hinter-cline.

Usage:
  hinter-cline menu

A numbered menu over the same operations the subcommands expose: create a
report draft, sync reports, add/manage peers, add/manage groups. Selections
accept list numbers or names (Tab completes names).

Design notes:
  - All prompting goes through a ``Prompter`` so the flows can be driven by a
    scripted prompter in tests.
  - The menu never exits on a failed action; errors are printed and the loop
    continues.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Protocol, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import FuzzyCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.markup import escape

from cline_core.config import ALL_GROUP, Layout
from cline_core.errors import GroupError, HinterError, PeerError
from cline_core.groups import add_to_group, compute_groups, create_group, remove_from_group
from cline_core.peers import (
    add_peer,
    delete_peer,
    is_valid_public_key,
    is_valid_slug,
    list_peer_aliases,
    rename_peer,
    set_public_key,
)
from cline_sync import ReportSync, available_recipients, create_draft

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)

MENU = """
Hinter Cline
------------------------------
1. Create a report draft
2. Sync reports
3. Add a peer
4. Manage a peer
5. Add a group
6. Manage a group
7. Exit
------------------------------"""


class SelectionError(ValueError):
    """The user typed something that is not in the list."""


class Prompter(Protocol):
    def ask(self, message: str, choices: Sequence[str] | None = None) -> str: ...


class SessionPrompter:
    """prompt_toolkit-backed prompter with name completion for list selections."""

    def __init__(self, session: PromptSession | None = None):
        self.session = session or PromptSession(history=InMemoryHistory())

    def ask(self, message: str, choices: Sequence[str] | None = None) -> str:
        completer = None
        if choices:
            completer = FuzzyCompleter(WordCompleter(list(choices), WORD=True), WORD=True)
        return self.session.prompt(message, completer=completer)


# ---------- small utils ----------
def display_list(items: Sequence[str]) -> None:
    """Print items as ``[n] item`` in rows of four."""
    out = ""
    for i, item in enumerate(items, start=1):
        out += f"[{i}]".ljust(5) + item.ljust(20)
        if i % 4 == 0:
            out += "\n"
    console.print(out, markup=False)


def select_from_list(
    prompter: Prompter,
    items: Sequence[str],
    message: str,
    *,
    allow_multiple: bool = True,
) -> list[str]:
    """Show ``items`` and return the user's picks (by number or by name)."""
    if not items:
        return []
    display_list(items)
    if allow_multiple:
        prompt = f"{message}\nEnter numbers or names separated by commas (e.g. 3,5,6): "
    else:
        prompt = f"{message}\nEnter a number: "

    answer = prompter.ask(prompt, choices=items).strip()
    if not answer:
        return []
    tokens = [t for t in re.split(r"[,\s]+", answer) if t]
    if not allow_multiple and len(tokens) > 1:
        raise SelectionError("Multiple selections are not allowed for this prompt.")

    selected: list[str] = []
    for token in tokens:
        if token in items:
            pick = token
        else:
            try:
                index = int(token) - 1
            except ValueError:
                index = -1
            if index < 0 or index >= len(items):
                raise SelectionError(
                    f"Invalid selection: '{token}'. Please enter numbers from the list."
                )
            pick = items[index]
        if pick not in selected:
            selected.append(pick)
    return selected


def _say(message: str) -> None:
    console.print(escape(message))


# ---------- menu actions ----------
def create_draft_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Create a report draft ---[/bold]")
    title = prompter.ask("Enter report title: ").strip()
    if not title:
        _say("Title cannot be empty.")
        return

    recipients = available_recipients(root)
    try:
        to = select_from_list(prompter, recipients, 'Select recipients for "to" list.')
        except_ = select_from_list(prompter, recipients, 'Select recipients for "except" list.')
        path = create_draft(root, title, to, except_)
    except (SelectionError, HinterError) as e:
        _say(str(e))
        return
    _say(f"Draft created at: {path}")


def sync_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Sync reports ---[/bold]")
    try:
        summary = ReportSync(root).sync()
    except (HinterError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return
    if summary.no_peers:
        _say("No peers configured.")
        return
    _say(
        f"Finished. Synced {summary.written} reports and removed "
        f"{summary.removed} obsolete reports."
    )


def add_peer_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Add a peer ---[/bold]")
    alias = prompter.ask("Enter peer alias (e.g., alice-work): ").strip()
    if not is_valid_slug(alias):
        _say("Invalid alias format. Use lowercase letters, numbers, and single hyphens.")
        return
    if alias in list_peer_aliases(root):
        _say("Error: A peer with this alias already exists.")
        return
    public_key = prompter.ask("Enter peer public key (64 hex characters): ").strip()
    if not is_valid_public_key(public_key):
        _say("Invalid public key format.")
        return
    try:
        add_peer(root, alias, public_key)
    except PeerError as e:
        _say(f"Error: {e}")
        return
    _say(f"Peer '{alias}' added successfully.")


def manage_peer_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Manage a peer ---[/bold]")
    peers = list_peer_aliases(root)
    if not peers:
        _say("No peers to manage.")
        return
    try:
        picked = select_from_list(prompter, peers, "Choose a peer to manage.", allow_multiple=False)
    except SelectionError as e:
        _say(str(e))
        return
    if not picked:
        _say("No peer selected.")
        return

    alias = picked[0]
    choice = prompter.ask(
        f"What do you want to do with '{alias}'? "
        "(1. Change Alias, 2. Change Public Key, 3. Delete Peer, 4. Go Back): "
    ).strip()
    try:
        if choice == "1":
            new_alias = prompter.ask(f"Enter new alias for '{alias}': ").strip()
            rename_peer(root, alias, new_alias)
            _say(f"Peer alias updated from '{alias}' to '{new_alias}'.")
        elif choice == "2":
            new_key = prompter.ask(f"Enter new public key for '{alias}': ").strip()
            set_public_key(root, alias, new_key)
            _say(f"Public key for '{alias}' updated.")
        elif choice == "3":
            confirm = prompter.ask(
                f"Are you sure you want to delete peer '{alias}'? (y/[n]): "
            ).strip()
            if confirm.lower() == "y":
                delete_peer(root, alias)
                _say(f"Peer '{alias}' deleted successfully.")
            else:
                _say("Deletion cancelled.")
        elif choice == "4":
            return
        else:
            _say("Invalid choice.")
    except PeerError as e:
        _say(f"Error: {e}")


def add_group_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Add a group ---[/bold]")
    name = prompter.ask("Enter new group name: ").strip()
    if name == ALL_GROUP:
        _say(f'The group name "{ALL_GROUP}" is reserved.')
        return
    if not is_valid_slug(name):
        _say("Invalid group name format.")
        return
    if name in compute_groups(root):
        _say("Error: A group with this name already exists.")
        return
    peers = list_peer_aliases(root)
    if not peers:
        _say("No peers exist to add to a group.")
        return
    try:
        members = select_from_list(prompter, peers, "Select peers to add.")
        if not members:
            _say("No peers selected.")
            return
        create_group(root, name, members)
    except (SelectionError, GroupError) as e:
        _say(str(e))
        return
    for alias in members:
        _say(f"Added '{alias}' to group '{name}'.")


def manage_group_flow(root: Path, prompter: Prompter) -> None:
    console.print("\n[bold]--- Manage a group ---[/bold]")
    groups = {g: m for g, m in compute_groups(root).items() if g != ALL_GROUP}
    if not groups:
        _say("No groups to manage.")
        return
    try:
        picked = select_from_list(
            prompter, list(groups), "Choose a group to manage.", allow_multiple=False
        )
        if not picked:
            _say("No group selected.")
            return
        name = picked[0]
        members = groups[name]

        _say(f"\nMembers of '{name}':")
        to_remove = select_from_list(
            prompter, members, "Select members to REMOVE (press Enter to skip)."
        )
        for alias in remove_from_group(root, name, to_remove):
            _say(f"Removed '{alias}' from group '{name}'.")

        non_members = [p for p in list_peer_aliases(root) if p not in members]
        if non_members:
            _say("\nPeers not in this group:")
            to_add = select_from_list(
                prompter, non_members, "Select peers to ADD (press Enter to skip)."
            )
            for alias in add_to_group(root, name, to_add):
                _say(f"Added '{alias}' to group '{name}'.")
    except (SelectionError, GroupError) as e:
        _say(str(e))


ACTIONS: dict[str, Callable[[Path, Prompter], None]] = {
    "1": create_draft_flow,
    "2": sync_flow,
    "3": add_peer_flow,
    "4": manage_peer_flow,
    "5": add_group_flow,
    "6": manage_group_flow,
}


# ---------- interactive entrypoint ----------
def run_menu(root: Path, prompter: Prompter | None = None) -> None:
    """Loop over the main menu until the user exits (7, EOF or Ctrl-C)."""
    prompter = prompter or SessionPrompter()
    Layout(root).ensure()

    while True:
        console.print(MENU, markup=False)
        try:
            choice = prompter.ask("Choose an option: ").strip()
            if choice == "7":
                _say("Exiting.")
                return
            action = ACTIONS.get(choice)
            if action is None:
                _say("Invalid option.")
            else:
                try:
                    action(root, prompter)
                except (HinterError, OSError) as e:
                    logger.debug("Menu action failed", exc_info=True)
                    console.print(f"[red]Error:[/red] {escape(str(e))}")
            prompter.ask("\nPress Enter to continue...")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return
