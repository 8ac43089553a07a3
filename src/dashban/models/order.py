"""Persisted board layout models."""

from __future__ import annotations

from pydantic import BaseModel, Field, RootModel


class ColumnOrder(RootModel[dict[str, list[str]]]):
    """Saved card identities per column, serialised as a bare JSON object.

    Entries may be stale (card gone) and live cards may be missing (new);
    the reconciler resolves both.
    """

    root: dict[str, list[str]] = Field(default_factory=dict)

    # Issue numbers written by hand or older versions may be bare numbers
    model_config = {"coerce_numbers_to_str": True}

    @property
    def columns(self) -> dict[str, list[str]]:
        return self.root

    def get(self, column_id: str) -> list[str]:
        return self.root.get(column_id, [])

    def __contains__(self, column_id: object) -> bool:
        return column_id in self.root


class CollapseStates(RootModel[dict[str, bool]]):
    """Collapsed flag per column."""

    root: dict[str, bool] = Field(default_factory=dict)

    def is_collapsed(self, column_id: str) -> bool:
        return self.root.get(column_id, False)


class RepoContext(BaseModel):
    """Repository the board is showing. Scopes every persisted key."""

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    @property
    def key_suffix(self) -> str:
        return f"{self.owner}_{self.repo}"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, value: str) -> RepoContext:
        """Parse ``owner/repo``."""
        owner, sep, repo = value.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected owner/repo, got: {value!r}")
        return cls(owner=owner, repo=repo)

    def __str__(self) -> str:
        return self.full_name
