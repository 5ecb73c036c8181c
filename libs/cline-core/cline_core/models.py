"""Core data models for hinter-cline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cline_core.config import NAMESPACE


class NamespaceSettings(BaseModel):
    """Our section inside a peer config (``hinter-cline`` key)."""

    model_config = ConfigDict(extra="allow")

    groups: list[str] = Field(default_factory=list)


class PeerConfig(BaseModel):
    """A peer's ``hinter.config.json``. Unknown keys are kept on round-trip."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    public_key: str = Field(alias="publicKey")
    settings: NamespaceSettings | None = Field(default=None, alias=NAMESPACE)

    @property
    def groups(self) -> list[str]:
        return list(self.settings.groups) if self.settings else []

    def set_groups(self, groups: list[str]) -> None:
        if self.settings is None:
            self.settings = NamespaceSettings()
        self.settings.groups = list(groups)

    def to_json_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json")
        if data.get(NAMESPACE) is None:
            data.pop(NAMESPACE, None)
        return data


class DraftHeader(BaseModel):
    """Validated frontmatter of a report draft."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    to: list[str]
    except_: list[str] = Field(alias="except")
    source_path: str | None = Field(default=None, alias="sourcePath")
    destination_path: str | None = Field(default=None, alias="destinationPath")


@dataclass
class ReportDraft:
    """A ``.md`` file under ``entries/``. ``header`` is None when it has no frontmatter."""

    path: Path
    header: DraftHeader | None
    body: str


@dataclass(frozen=True)
class InlineSource:
    """Draft body written verbatim to the destination."""

    data: str
    kind: Literal["inline"] = "inline"


@dataclass(frozen=True)
class FileSource:
    """File copied byte-for-byte to the destination."""

    path: Path
    kind: Literal["file"] = "file"


ContentSource = Union[InlineSource, FileSource]
