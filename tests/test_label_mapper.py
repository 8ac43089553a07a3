"""Tests for LabelStateMapper."""

import pytest

from dashban.models.dashban_config import BoardConfig, ColumnConfig
from dashban.services import LabelStateMapper


@pytest.fixture
def mapper() -> LabelStateMapper:
    return LabelStateMapper()


class TestColumnToLabel:
    @pytest.mark.parametrize(
        ("column", "label"),
        [
            ("backlog", None),
            ("todo", None),
            ("inprogress", "in progress"),
            ("review", "review"),
            ("done", "done"),
            ("icebox", None),
        ],
    )
    def test_canonical_labels(self, mapper: LabelStateMapper, column: str, label: str | None):
        assert mapper.column_to_label(column) == label


class TestLabelsToColumn:
    """Tests for placing an issue from its labels."""

    def test_no_status_label_goes_to_baseline(self, mapper: LabelStateMapper):
        assert mapper.labels_to_column(["bug", "high"]) == "backlog"
        assert mapper.labels_to_column([]) == "backlog"

    @pytest.mark.parametrize(
        ("labels", "column"),
        [
            (["In Progress"], "inprogress"),
            (["inprogress"], "inprogress"),
            (["bug", "In Review"], "review"),
            (["COMPLETED"], "done"),
        ],
    )
    def test_case_insensitive_with_aliases(
        self, mapper: LabelStateMapper, labels: list[str], column: str
    ):
        assert mapper.labels_to_column(labels) == column

    @pytest.mark.parametrize(
        "labels",
        [
            ["review", "in progress"],
            ["in progress", "review"],
            ["Completed", "In Review", "inprogress"],
        ],
    )
    def test_earliest_column_wins_regardless_of_label_order(
        self, mapper: LabelStateMapper, labels: list[str]
    ):
        assert mapper.labels_to_column(labels) == "inprogress"

    def test_review_beats_done(self, mapper: LabelStateMapper):
        assert mapper.labels_to_column(["done", "bug", "review"]) == "review"

    def test_round_trip_for_labelled_columns(self, mapper: LabelStateMapper):
        """A column's own label always maps back to that column."""
        for column in mapper.config.columns:
            label = mapper.column_to_label(column.id)
            if label is not None:
                assert mapper.labels_to_column([label]) == column.id


class TestApplyColumn:
    """Tests for the label set written after a column move."""

    def test_replaces_status_label_keeps_others(self, mapper: LabelStateMapper):
        labels = ["bug", "In Review", "frontend"]
        assert mapper.apply_column(labels, "inprogress") == ["bug", "frontend", "in progress"]

    def test_strips_every_status_label(self, mapper: LabelStateMapper):
        """Stray duplicates from other clients are all removed."""
        labels = ["review", "in progress", "completed", "bug"]
        assert mapper.apply_column(labels, "review") == ["bug", "review"]

    def test_done_adds_no_label(self, mapper: LabelStateMapper):
        assert mapper.apply_column(["bug", "review"], "done") == ["bug"]

    def test_unlabelled_column(self, mapper: LabelStateMapper):
        assert mapper.apply_column(["in progress", "high"], "backlog") == ["high"]

    def test_does_not_mutate_input(self, mapper: LabelStateMapper):
        labels = ["review"]
        mapper.apply_column(labels, "inprogress")
        assert labels == ["review"]

    def test_at_most_one_status_label(self, mapper: LabelStateMapper):
        for column in mapper.config.column_ids:
            result = mapper.apply_column(["review", "in progress", "todo"], column)
            assert sum(mapper.is_status_label(name) for name in result) <= 1


class TestHelpers:
    def test_is_archived(self, mapper: LabelStateMapper):
        assert mapper.is_archived(["bug", "Archive"])
        assert not mapper.is_archived(["bug"])

    def test_custom_config(self):
        config = BoardConfig(
            columns=[
                ColumnConfig(id="backlog", title="Backlog"),
                ColumnConfig(id="todo", title="To Do", label="todo"),
                ColumnConfig(id="done", title="Done"),
            ]
        )
        mapper = LabelStateMapper(config)
        assert mapper.labels_to_column(["Todo"]) == "todo"
        assert mapper.apply_column(["todo"], "done") == []
