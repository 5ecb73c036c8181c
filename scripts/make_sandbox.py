#!/usr/bin/env python3
"""
Create/clean a manual sandbox data root under ./sandbox using the real CLI
(python -m cline_cli ...). This is *separate* from pytest, useful for manual
poking and demos.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SANDBOX = ROOT / "sandbox"
DATA = SANDBOX / "hinter-core-data"

KEYS = {
    "alice": "a" * 64,
    "bob": "b" * 64,
    "carol": "c" * 64,
}


def run(args: list[str], check: bool = True, input: str | None = None):
    env = os.environ.copy()
    env["HINTER_CORE_DATA_PATH"] = str(DATA)
    print(f"-> {' '.join(args)}")
    proc = subprocess.run(args, cwd=ROOT, env=env, text=True, input=input, capture_output=True)
    if check and proc.returncode != 0:
        print(proc.stdout)
        print(proc.stderr, file=sys.stderr)
        raise SystemExit(proc.returncode)
    return proc


def cline(*args: str, check: bool = True):
    return run([sys.executable, "-m", "cline_cli", *args], check=check)


def build():
    SANDBOX.mkdir(exist_ok=True)

    # 3 peers, one group
    for alias, key in KEYS.items():
        cline("peer", "add", alias, key)
    cline("group", "create", "friends", "alice", "bob")

    # A draft to the group, minus bob; a draft to everybody
    cline("draft", "new", "Weekly notes", "--to", "group:friends", "--except", "bob")
    cline("draft", "new", "Announcement", "--to", "group:all")

    # A draft that fans a directory out to carol
    photos = SANDBOX / "photos"
    (photos / "2024").mkdir(parents=True, exist_ok=True)
    (photos / "2024" / "beach.txt").write_text("sand\n", encoding="utf-8")
    (photos / "cover.txt").write_text("cover\n", encoding="utf-8")
    (DATA / "entries" / "photos.md").write_text(
        "\n".join(
            [
                "---",
                'to: ["carol"]',
                "except: []",
                f"sourcePath: {json.dumps(str(photos))}",
                'destinationPath: "albums/summer"',
                "---",
                "",
            ]
        ),
        encoding="utf-8",
    )

    print(cline("sync").stdout)

    out = DATA / "peers"
    assert (out / "alice" / "outgoing" / "Weekly notes.md").exists(), "alice should get the notes"
    assert not (out / "bob" / "outgoing" / "Weekly notes.md").exists(), "bob is excluded"
    assert (out / "carol" / "outgoing" / "albums" / "summer" / "2024" / "beach.txt").exists()
    for alias in KEYS:
        assert (out / alias / "outgoing" / "Announcement.md").exists()

    print(cline("group", "list").stdout)
    print("\n[OK] Sandbox built at ./sandbox")


def clean():
    if SANDBOX.exists():
        shutil.rmtree(SANDBOX)
    print("[OK] Sandbox cleaned")


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else "build"
    if cmd == "build":
        build()
    elif cmd == "clean":
        clean()
    else:
        print("Usage: python scripts/make_sandbox.py [build|clean]")
        sys.exit(2)
