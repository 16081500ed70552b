"""Tests for the nama-audio command line entry point."""

import argparse
import asyncio

import pytest

from conftest import RecordingEngine
from nama_audio import main as main_module
from nama_audio.config.container import create_container
from nama_audio.config.settings import (
    CatalogSettings,
    LedgerSettings,
    Settings,
    clear_settings_cache,
)


class LoopingEngine(RecordingEngine):
    """Engine whose audio ends right after every play command."""

    async def play(self, instance_id) -> None:
        await super().play(instance_id)
        asyncio.get_running_loop().call_soon(
            lambda: asyncio.ensure_future(self.complete(instance_id))
        )


class ReplayFailingEngine(LoopingEngine):
    """Engine whose player cannot be restarted after the first loop."""

    async def play(self, instance_id) -> None:
        await super().play(instance_id)
        self.fail_on.add("play")


@pytest.fixture
def media_dir(tmp_path):
    media = tmp_path / "media"
    media.mkdir()
    (media / "NamaJapa_Hare_Rama.mp3").write_bytes(b"")
    (media / "Govinda_Bhajan.mp3").write_bytes(b"")
    return media


@pytest.fixture
def settings(media_dir):
    return Settings(
        _env_file=None,
        environment="test",
        ledger=LedgerSettings(url=":memory:"),
        catalog=CatalogSettings(media_dir=str(media_dir)),
    )


@pytest.fixture
def looping_container(settings, monkeypatch):
    container = create_container(settings)
    monkeypatch.setattr(container, "create_playback_engine", LoopingEngine)
    return container


def play_args(track, **overrides):
    values = {"track": track, "user": "user-1", "account": "acc-1", "no_submit": False}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestParser:
    def test_play_requires_user(self):
        with pytest.raises(SystemExit):
            main_module.build_parser().parse_args(["play", "Hare Rama"])

    def test_play_requires_account_when_submitting(self, capsys):
        with pytest.raises(SystemExit):
            main_module.parse_args(["play", "Hare Rama", "--user", "u1"])

        assert "--account is required" in capsys.readouterr().err

    def test_blank_account_is_rejected(self):
        with pytest.raises(SystemExit):
            main_module.parse_args(["play", "Hare Rama", "--user", "u1", "--account", "  "])

    def test_no_submit_needs_no_account(self):
        args = main_module.parse_args(["play", "Hare Rama", "--user", "u1", "--no-submit"])

        assert args.no_submit is True
        assert args.account is None

    def test_entries_default_limit(self):
        args = main_module.build_parser().parse_args(["entries", "--user", "u1"])

        assert args.command == "entries"
        assert args.limit == 10


class TestCommands:
    @pytest.mark.asyncio
    async def test_list_tracks_groups_by_category(self, settings, capsys):
        container = create_container(settings)

        code = await main_module.list_tracks(container)

        out = capsys.readouterr().out
        assert code == 0
        assert out.index("Nama Japa:") < out.index("Hare Rama") < out.index("Other:")
        assert "[4x Loop, +16]" in out
        assert "[Plays Once, +4]" in out

    @pytest.mark.asyncio
    async def test_play_counts_all_loops_and_submits(self, looping_container, capsys):
        await looping_container.initialize()
        try:
            code = await main_module.play_track(looping_container, play_args("Hare Rama"))
            entries = await looping_container.ledger.get_recent_entries("user-1")
        finally:
            await looping_container.shutdown()

        out = capsys.readouterr().out
        assert code == 0
        assert "Loop 4/4: 16 Namas" in out
        assert "16 Namas submitted!" in out
        assert [e.count for e in entries] == [16]

    @pytest.mark.asyncio
    async def test_play_ends_when_replay_fails(self, settings, monkeypatch, capsys):
        container = create_container(settings)
        monkeypatch.setattr(container, "create_playback_engine", ReplayFailingEngine)
        await container.initialize()
        try:
            code = await asyncio.wait_for(
                main_module.play_track(container, play_args("Hare Rama")), timeout=5
            )
        finally:
            await container.shutdown()

        captured = capsys.readouterr()
        assert code == 0
        assert "Loop 1/4: 4 Namas" in captured.out
        assert "4 Namas submitted!" in captured.out
        assert "Playback stopped" in captured.err

    @pytest.mark.asyncio
    async def test_play_without_submit(self, looping_container, capsys):
        await looping_container.initialize()
        try:
            code = await main_module.play_track(
                looping_container, play_args("Govinda Bhajan", no_submit=True)
            )
            entries = await looping_container.ledger.get_recent_entries("user-1")
        finally:
            await looping_container.shutdown()

        assert code == 0
        assert "4 Namas counted" in capsys.readouterr().out
        assert entries == []

    @pytest.mark.asyncio
    async def test_play_unknown_track(self, looping_container, capsys):
        code = await main_module.play_track(looping_container, play_args("Unknown"))

        assert code == 1
        assert "No track matches" in capsys.readouterr().err

    def test_main_entries_command(self, media_dir, monkeypatch, capsys):
        monkeypatch.setenv("LEDGER__URL", ":memory:")
        monkeypatch.setenv("CATALOG__MEDIA_DIR", str(media_dir))
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        clear_settings_cache()
        try:
            code = main_module.main(["entries", "--user", "nobody"])
        finally:
            clear_settings_cache()

        assert code == 0
        assert "No entries yet." in capsys.readouterr().out
