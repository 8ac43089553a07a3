"""Remote issue models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .card import ISSUE_CLOSED, ISSUE_OPEN


class RemoteIssueRecord(BaseModel):
    """Local rendering of a GitHub issue. GitHub stays the source of truth."""

    number: int
    title: str = ""
    body: str | None = None
    labels: list[str] = Field(default_factory=list)
    state: str = ISSUE_OPEN
    html_url: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.state == ISSUE_CLOSED

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RemoteIssueRecord:
        """Build from a REST API issue payload."""
        labels = []
        for label in data.get("labels", []):
            # Labels come back as objects, but the API also accepts bare names
            labels.append(label["name"] if isinstance(label, dict) else str(label))
        return cls(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            labels=labels,
            state=data.get("state", ISSUE_OPEN),
            html_url=data.get("html_url"),
        )


class IssueSet(BaseModel):
    """Open and closed issues fetched for a board load."""

    open: list[RemoteIssueRecord] = Field(default_factory=list)
    closed: list[RemoteIssueRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.open) + len(self.closed)
