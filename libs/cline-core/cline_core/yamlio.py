"""YAML front matter parsing for report drafts."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from cline_core.errors import DraftError
from cline_core.models import DraftHeader, ReportDraft

# Safe loader: drafts are user-edited, plain data only.
yaml = YAML(typ="safe")

# Header content must be non-empty; CRLF tolerated.
FM_RE = re.compile(r"^---\r?\n(.+?)\r?\n---", re.DOTALL)

REQUIRED_FIELDS = ("to", "except")


@dataclass
class Extracted:
    """Result of splitting a document into front matter and body."""

    frontmatter: Any
    body: str
    error: Exception | None = None

    @property
    def status(self) -> Literal["ok", "absent", "error"]:
        if self.error is not None:
            return "error"
        if self.frontmatter is None:
            return "absent"
        return "ok"


def extract_frontmatter(text: str) -> Extracted:
    """
    Split ``text`` into (front_matter, body).

    No header block: front matter is None and the body is the text unchanged.
    Header parsed: body is the remainder after the closing delimiter, trimmed.
    Header unparseable: front matter is None, body unchanged, error set.
    """
    m = FM_RE.match(text)
    if not m:
        return Extracted(None, text)

    try:
        front_matter = yaml.load(m.group(1))
    except YAMLError as e:
        return Extracted(None, text, e)

    return Extracted(front_matter, text[m.end() :].strip())


def _describe_validation(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{loc}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_report_draft(path: Path, text: str) -> ReportDraft:
    """Validate a draft's front matter; ``header`` is None for headerless drafts."""
    extracted = extract_frontmatter(text)
    if extracted.status == "error":
        raise DraftError(f"Error parsing YAML for report draft {path}: {extracted.error}")
    if extracted.status == "absent":
        return ReportDraft(path=path, header=None, body=extracted.body)

    fm = extracted.frontmatter
    if not isinstance(fm, dict) or not all(isinstance(fm.get(k), list) for k in REQUIRED_FIELDS):
        raise DraftError(f"Report draft {path} is missing required fields (to, except).")
    try:
        header = DraftHeader.model_validate(fm)
    except ValidationError as e:
        raise DraftError(
            f"Report draft {path} has invalid front matter: {_describe_validation(e)}"
        ) from e
    return ReportDraft(path=path, header=header, body=extracted.body)


def load_report_draft(path: Path) -> ReportDraft:
    """Read and parse a draft file (UTF-8)."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DraftError(f"Error reading report draft {path}: {e}") from e
    return parse_report_draft(path, text)


def render_draft(title: str, to: list[str], except_: list[str]) -> str:
    """Render the text of a new report draft."""

    def _flow(items: list[str]) -> str:
        return json.dumps(list(items), separators=(",", ":"), ensure_ascii=False)

    return (
        "---\n"
        f"to: {_flow(to)}\n"
        f"except: {_flow(except_)}\n"
        'sourcePath: ""\n'
        'destinationPath: ""\n'
        "---\n"
        "\n"
        f"# {title}\n"
        "\n"
    )
