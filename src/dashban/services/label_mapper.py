"""Translation between board columns and GitHub status labels."""

from __future__ import annotations

from ..models.dashban_config import BoardConfig


class LabelStateMapper:
    """Pure column <-> status label mapping.

    At most one status label represents an issue's column. Status labels are
    matched case-insensitively and include each column's aliases, so an
    issue labelled "In Review" lands in review and loses that label when it
    moves elsewhere. No side effects.
    """

    def __init__(self, config: BoardConfig | None = None) -> None:
        self.config = config or BoardConfig.default()
        self._label_to_column: dict[str, str] = {}
        for col in self.config.columns:
            for label in col.status_labels:
                self._label_to_column[label] = col.id

    @property
    def baseline_column(self) -> str:
        return self.config.baseline_column

    @property
    def done_column(self) -> str:
        return self.config.done_column

    @property
    def archive_label(self) -> str:
        return self.config.archive_label

    def column_to_label(self, column: str) -> str | None:
        """Canonical status label for a column, or None when it has none."""
        col = self.config.get_column(column)
        return col.label if col else None

    def labels_to_column(self, labels: list[str]) -> str:
        """Column for an issue's labels, else the baseline column.

        Columns are checked in board order, so an issue carrying several
        status labels lands in the earliest matching column regardless of
        the order its labels come in.
        """
        present = {name.lower() for name in labels}
        for col in self.config.columns:
            if any(label in present for label in col.status_labels):
                return col.id
        return self.baseline_column

    def is_status_label(self, name: str) -> bool:
        return name.lower() in self._label_to_column

    def is_archived(self, labels: list[str]) -> bool:
        archive = self.archive_label.lower()
        return any(name.lower() == archive for name in labels)

    def strip_status_labels(self, labels: list[str]) -> list[str]:
        """Remove every status label, keeping the rest in order."""
        return [name for name in labels if not self.is_status_label(name)]

    def apply_column(self, labels: list[str], column: str) -> list[str]:
        """Full label set for an issue moved to ``column``.

        Every status label is removed before the new one is added. The done
        column adds nothing: on the remote, done is the closed state.
        Unmapped columns also add nothing.
        """
        updated = self.strip_status_labels(labels)
        if column == self.done_column:
            return updated
        label = self.column_to_label(column)
        if label is not None:
            updated.append(label)
        return updated
