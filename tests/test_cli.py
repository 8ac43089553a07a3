"""Tests for the command line interface."""

from unittest.mock import MagicMock

import pytest

from dashban.__main__ import parse_args
from dashban.cli.board import run_move
from dashban.cli.labels import run_labels
from dashban.cli.output import ConsoleNotifier
from dashban.cli.repo import run_repo
from dashban.models import Card, LabelConfig, LiveBoard, RepoContext
from dashban.models.dashban_config import BoardConfig
from dashban.services import BannerLevel, InstallResult, LabelReport, RepoValidation


@pytest.fixture
def service() -> MagicMock:
    service = MagicMock()
    service.config = BoardConfig.default()
    service.board = LiveBoard(service.config.column_ids)
    service.client.is_authenticated = True
    service.repos.current.return_value = RepoContext(owner="octo", repo="board")
    return service


class TestParseArgs:
    def test_default_command(self):
        args = parse_args([])
        assert args.command is None
        assert args.verbose == 0

    def test_move(self):
        args = parse_args(["-vv", "move", "123", "review", "--index", "0"])
        assert args.command == "move"
        assert args.issue == 123
        assert args.column == "review"
        assert args.index == 0
        assert args.verbose == 2

    def test_create_labels(self):
        args = parse_args(["create", "Fix login", "--label", "bug", "--label", "high"])
        assert args.labels == ["bug", "high"]
        assert args.column is None


class TestRunMove:
    def test_unknown_column(self, service: MagicMock, capsys):
        assert run_move(service, 1, "icebox") == 1
        assert "Unknown column" in capsys.readouterr().out
        service.load_board.assert_not_called()

    def test_missing_issue(self, service: MagicMock, capsys):
        assert run_move(service, 1, "review") == 1
        assert "not on the board" in capsys.readouterr().out

    def test_moves_card(self, service: MagicMock):
        card = Card.for_issue(1)
        service.board.append("backlog", card)

        assert run_move(service, 1, "review") == 0

        service.move_card.assert_called_once_with(card, "review", None)


class TestRunLabels:
    def test_reports_missing_without_installing(self, service: MagicMock, capsys):
        service.labels.find_missing.return_value = LabelReport(
            total=2, missing=[LabelConfig(name="review", description="Ready for review")]
        )

        assert run_labels(service) == 0

        assert "review - Ready for review" in capsys.readouterr().out
        service.labels.install_missing.assert_not_called()

    def test_install_failure_exit_code(self, service: MagicMock):
        missing = [LabelConfig(name="review")]
        service.labels.find_missing.return_value = LabelReport(total=1, missing=missing)
        service.labels.install_missing.return_value = InstallResult(
            failed=[("review", "GitHub API error: 422 - already_exists")]
        )

        assert run_labels(service, install=True) == 1


class TestRunRepo:
    def test_switch_invalid_repository(self, service: MagicMock, monkeypatch):
        monkeypatch.setattr(
            "dashban.cli.repo.RepoContextService.validate",
            lambda client, ctx: RepoValidation(valid=False, error="Repository not found or private"),
        )

        assert run_repo(service, "octo/missing") == 1
        service.repos.switch.assert_not_called()

    def test_switch(self, service: MagicMock, monkeypatch):
        monkeypatch.setattr(
            "dashban.cli.repo.RepoContextService.validate",
            lambda client, ctx: RepoValidation(valid=True, access_level="full", can_modify=True),
        )

        assert run_repo(service, "octo/other") == 0
        service.repos.switch.assert_called_once_with(RepoContext(owner="octo", repo="other"))

    def test_bad_target(self, service: MagicMock):
        assert run_repo(service, "not-a-repo") == 1


class TestConsoleNotifier:
    def test_alert_prints_every_line(self, capsys):
        ConsoleNotifier().alert("Failed to close GitHub issue: boom\n\nStill open on GitHub.")
        out = capsys.readouterr().out
        assert "Failed to close GitHub issue: boom" in out
        assert "Still open on GitHub." in out

    def test_banner_show_and_hide(self, capsys):
        notifier = ConsoleNotifier()
        notifier.show_banner(BannerLevel.ERROR, "GitHub API rate limit exceeded", "0/60 requests remaining")
        notifier.hide_banner()
        out = capsys.readouterr().out
        assert "0/60 requests remaining" in out
        assert "back to normal" in out
