"""Configuration models for dashban.yml."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator


def _validate_identifier(value: str, name: str = "ID") -> str:
    """Validate an identifier is lowercase alphanumeric with underscores."""
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if not value[0].isalpha():
        raise ValueError(f"{name} must start with a letter")
    if not all(c.isalnum() or c == "_" for c in value):
        raise ValueError(f"{name} must be alphanumeric with underscores only")
    if value != value.lower():
        raise ValueError(f"{name} must be lowercase")
    return value


def _validate_label(value: str, name: str = "Label") -> str:
    """Labels are matched case-insensitively, so store them lowercase."""
    value = value.strip()
    if not value:
        raise ValueError(f"{name} cannot be empty")
    if value != value.lower():
        raise ValueError(f"{name} '{value}' must be lowercase")
    return value


def _validate_color(v: str) -> str:
    """Validate a 6-digit hex color without leading '#', as the labels API expects."""
    v = v.lstrip("#")
    if len(v) != 6 or not all(c in "0123456789abcdefABCDEF" for c in v):
        raise ValueError(f"Invalid label color: {v!r}")
    return v.upper()


class ColumnConfig(BaseModel):
    """Configuration for a single board column."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    label: str | None = Field(
        default=None,
        description="Status label representing this column (None = no status label)",
    )
    label_alias: list[str] = Field(
        default_factory=list,
        description="Other label spellings that also place an issue here",
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate column ID is lowercase with underscores only."""
        return _validate_identifier(v, "Column ID")

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _validate_label(v, "Status label")

    @field_validator("label_alias")
    @classmethod
    def validate_aliases(cls, v: list[str]) -> list[str]:
        return [_validate_label(alias, "Label alias") for alias in v]

    @property
    def status_labels(self) -> list[str]:
        """Canonical label plus aliases."""
        labels = [self.label] if self.label else []
        return labels + self.label_alias


class LabelConfig(BaseModel):
    """A label the repository is expected to have."""

    name: str = Field(..., min_length=1)
    description: str = ""
    color: str = "6B7280"

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _validate_color(v)


class BoardConfig(BaseModel):
    """Board columns and the status label vocabulary."""

    columns: list[ColumnConfig] = Field(..., min_length=2, max_length=8)
    baseline_column: str = "backlog"
    done_column: str = "done"
    archive_label: str = "archive"

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: list[ColumnConfig]) -> list[ColumnConfig]:
        """Validate column constraints."""
        ids = [col.id for col in v]

        # Check unique IDs
        if len(ids) != len(set(ids)):
            raise ValueError("Column IDs must be unique")

        # A label may only ever mean one column
        all_labels: list[str] = []
        for col in v:
            all_labels.extend(col.status_labels)
        if len(all_labels) != len(set(all_labels)):
            raise ValueError("Duplicate status label found across columns")

        return v

    @model_validator(mode="after")
    def validate_special_columns(self) -> BoardConfig:
        ids = self.column_ids
        if self.baseline_column not in ids:
            raise ValueError(f"baseline_column '{self.baseline_column}' is not a column")
        if self.done_column not in ids:
            raise ValueError(f"done_column '{self.done_column}' is not a column")
        archive = self.archive_label.lower()
        for col in self.columns:
            if archive in col.status_labels:
                raise ValueError(f"'{archive}' is reserved for archiving, not a status label")
        return self

    @property
    def column_ids(self) -> list[str]:
        return [col.id for col in self.columns]

    def get_column(self, column_id: str) -> ColumnConfig | None:
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    def is_valid_column(self, column_id: str) -> bool:
        return column_id in self.column_ids

    @classmethod
    def default(cls) -> BoardConfig:
        """Backlog, todo, in progress, review and done."""
        return cls(
            columns=[
                ColumnConfig(id="backlog", title="Backlog"),
                ColumnConfig(id="todo", title="To Do"),
                ColumnConfig(
                    id="inprogress",
                    title="In Progress",
                    label="in progress",
                    label_alias=["inprogress"],
                ),
                ColumnConfig(id="review", title="Review", label="review", label_alias=["in review"]),
                ColumnConfig(id="done", title="Done", label="done", label_alias=["completed"]),
            ]
        )


def default_required_labels() -> list[LabelConfig]:
    """The label set the board relies on."""
    return [
        LabelConfig(name="todo", description="Issues planned to be worked on", color="6366F1"),
        LabelConfig(name="in progress", description="Issues currently being worked on", color="3B82F6"),
        LabelConfig(name="review", description="Issues ready for review", color="8B5CF6"),
        LabelConfig(name="done", description="Completed issues", color="10B981"),
        LabelConfig(name="archive", description="Archived issues (hidden from board)", color="6B7280"),
        LabelConfig(name="high", description="High priority issues", color="EF4444"),
        LabelConfig(name="medium", description="Medium priority issues", color="F59E0B"),
        LabelConfig(name="low", description="Low priority issues", color="22C55E"),
        LabelConfig(name="frontend", description="Frontend development work", color="6366F1"),
        LabelConfig(name="backend", description="Backend development work", color="3B82F6"),
        LabelConfig(name="design", description="Design and UI/UX work", color="8B5CF6"),
        LabelConfig(name="testing", description="Testing and QA work", color="EF4444"),
        LabelConfig(name="database", description="Database related work", color="10B981"),
        LabelConfig(name="setup", description="Setup, configuration, and infrastructure", color="6B7280"),
        LabelConfig(name="bug", description="Something isn't working correctly", color="EF4444"),
    ]


class RepoConfig(BaseModel):
    """Default repository when nothing has been selected yet."""

    owner: str = "super3"
    repo: str = "dashban"


class DashbanConfig(BaseModel):
    """Root configuration model for dashban.yml."""

    version: int = 1
    repository: RepoConfig = Field(default_factory=RepoConfig)
    board: BoardConfig = Field(default_factory=BoardConfig.default)
    required_labels: list[LabelConfig] = Field(default_factory=default_required_labels)

    @classmethod
    def default(cls) -> DashbanConfig:
        return cls()
