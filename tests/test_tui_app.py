"""Tests for the Textual host: list navigation, jumps and the fast path."""

from __future__ import annotations

import asyncio

from textual.widgets import Input

from tagsel.engine.buffers import BufferRegistry
from tagsel.engine.config import TagSelectConfig
from tagsel.engine.history import MarkStack
from tagsel.engine.models import Location
from tagsel.engine.probes import create_probe


def _project(tmp_path):
    (tmp_path / "a.py").write_text("def run():\n    pass\n\ndef run_all():\n    run()\n")
    (tmp_path / "b.py").write_text("x = 1\n\ndef run():\n    return x\n")
    (tmp_path / "tags").write_text(
        "run\ta.py\t/^def run():$/;\"\tf\n"
        "run\tb.py\t/^def run():$/;\"\tf\n"
        "run_all\ta.py\t/^def run_all():$/;\"\tf\n"
    )
    return tmp_path / "tags"


def _app(tmp_path, identifier, config=None):
    """Wire the app the way the command line does."""
    from tagsel.tui.app import TagSelectApp

    registry, marks = BufferRegistry(), MarkStack()
    probe = create_probe("auto", _project(tmp_path), registry, marks)
    app = TagSelectApp(
        probe,
        config=config or TagSelectConfig(),
        identifier=identifier,
        registry=registry,
        marks=marks,
    )
    return app, registry, marks


def test_app_disposes_buffers_opened_during_lookup(tmp_path):
    async def _run() -> None:
        app, registry, marks = _app(tmp_path, "run")
        assert app.registry is registry
        assert app.marks is marks

        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            assert app.main_screen.tag_list.session is not None
            # Buffers opened while enumerating are closed again.
            assert len(registry) == 0
            assert len(marks) == 0

            await pilot.press("enter")
            await pilot.pause()

            assert [b.path for b in registry.buffers()] == [(tmp_path / "a.py").resolve()]

    asyncio.run(_run())


def test_multiple_matches_show_list_and_enter_jumps(tmp_path):
    async def _run() -> None:
        app, _, marks = _app(tmp_path, "run")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            screen = app.main_screen
            session = screen.tag_list.session
            assert session is not None
            assert len(session.matches) == 2
            assert screen.list_visible

            await pilot.press("n")
            await pilot.pause()
            assert session.current_line.number == 2

            await pilot.press("enter")
            await pilot.pause()

            b_run = Location((tmp_path / "b.py").resolve(), 3)
            assert screen.source_view.source_location == b_run
            assert screen.source_view.highlighted_line == 3
            assert not screen.list_visible
            assert len(marks) == 0

            await pilot.press("l")
            await pilot.pause()
            await pilot.press("p")
            await pilot.press("enter")
            await pilot.pause()

            assert screen.source_view.source_location == Location(
                (tmp_path / "a.py").resolve(), 1
            )
            assert list(marks) == [b_run]

            await pilot.press("ctrl+o")
            await pilot.pause()

            assert screen.source_view.source_location == b_run
            assert len(marks) == 0

    asyncio.run(_run())


def test_other_window_jump_keeps_list_visible(tmp_path):
    async def _run() -> None:
        app, _, _ = _app(tmp_path, "run")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            screen = app.main_screen
            await pilot.press("o")
            await pilot.pause()

            assert screen.source_view.source_location == Location(
                (tmp_path / "a.py").resolve(), 1
            )
            assert screen.list_visible
            assert not screen.tag_list.session.closed

    asyncio.run(_run())


def test_digit_asks_for_number_and_jumps(tmp_path):
    async def _run() -> None:
        from tagsel.tui.screens.prompt import TagNumberScreen

        app, _, _ = _app(tmp_path, "run")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            await pilot.press("1")
            await pilot.pause()

            assert isinstance(app.screen, TagNumberScreen)
            prompt_input = app.screen.query_one("#prompt-input", Input)
            assert prompt_input.value == "1"

            prompt_input.value = "2"
            await pilot.press("enter")
            await pilot.pause()

            screen = app.main_screen
            assert app.screen is screen
            assert screen.source_view.source_location == Location(
                (tmp_path / "b.py").resolve(), 3
            )
            assert screen.tag_list.session.current_line.number == 2

    asyncio.run(_run())


def test_cancelled_number_prompt_changes_nothing(tmp_path):
    async def _run() -> None:
        app, _, _ = _app(tmp_path, "run")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            await pilot.press("2")
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()

            screen = app.main_screen
            assert app.screen is screen
            assert screen.source_view.source_location is None
            assert screen.tag_list.session.current_line.number == 1
            assert screen.list_visible

    asyncio.run(_run())


def test_single_match_jumps_without_list(tmp_path):
    async def _run() -> None:
        app, _, _ = _app(tmp_path, "run_all")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            screen = app.main_screen
            assert screen.tag_list.session is None
            assert not screen.list_visible
            assert screen.source_view.source_location == Location(
                (tmp_path / "a.py").resolve(), 4
            )
            assert app.finder.namer.live_names == frozenset()

    asyncio.run(_run())


def test_quit_key_closes_session(tmp_path):
    async def _run() -> None:
        app, _, _ = _app(tmp_path, "run")
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.pause()

            session = app.main_screen.tag_list.session
            await pilot.press("q")
            await pilot.pause()

            assert session.closed
            assert app.main_screen.tag_list.session is None
            assert app.finder.namer.live_names == frozenset()

    asyncio.run(_run())
