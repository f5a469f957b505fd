"""Unit tests for the interactive picker, display helpers and keybindings."""

import io
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console

from nvim_keymaps.cli.constants import ExitCodes
from nvim_keymaps.cli.display import build_table, keymaps_to_json, print_keymaps
from nvim_keymaps.cli.interactive import (
    KeymapCompleter,
    create_keybinding_manager,
    run_picker,
)
from nvim_keymaps.exceptions import UnavailableError
from nvim_keymaps.search import SearchIndex
from nvim_keymaps.store import KeymapStore
from nvim_keymaps.utils.keybindings import (
    REFRESH_COMMAND,
    ClearQueryHandler,
    KeybindingManager,
    RefreshHandler,
)
from tests.helpers.builders import build_item
from tests.mocks.editor import StaticTransport


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


def make_session(*answers) -> MagicMock:
    """Prompt session answering prompts in order; exceptions are raised."""
    session = MagicMock()
    session.prompt_async = AsyncMock(side_effect=list(answers))
    return session


@pytest.mark.unit
@pytest.mark.cli
class TestDisplay:
    """Tests for result rendering."""

    def test_table_escapes_markup(self):
        console = make_console()
        item = build_item("[d", rhs="<cmd>lua vim.diagnostic.goto_prev()<CR>", description="[bold]")

        console.print(build_table([item]))

        assert "[d" in output(console)
        assert "[bold]" in output(console)

    def test_limit_notes_hidden_rows(self, sample_keymaps):
        console = make_console()

        print_keymaps(sample_keymaps, console, limit=2)

        assert "3 more" in output(console)

    def test_empty_results(self):
        console = make_console()

        print_keymaps([], console)

        assert "No matching keymaps" in output(console)

    def test_json(self, sample_keymaps):
        data = json.loads(keymaps_to_json(sample_keymaps))

        assert [d["lhs"] for d in data] == [k.lhs for k in sample_keymaps]


@pytest.mark.unit
@pytest.mark.cli
class TestKeymapCompleter:
    """Tests for live completions."""

    def test_completions_follow_ranking(self, sample_keymaps):
        index = SearchIndex.build(sample_keymaps)
        completer = KeymapCompleter(lambda: index, limit=3)

        completions = list(completer.get_completions(Document("definition"), CompleteEvent()))

        assert completions[0].text == "gd"
        assert completions[0].start_position == -len("definition")
        assert len(completions) <= 3

    def test_blank_query_has_no_completions(self, sample_keymaps):
        completer = KeymapCompleter(lambda: SearchIndex.build(sample_keymaps))

        assert list(completer.get_completions(Document("  "), CompleteEvent())) == []


@pytest.mark.unit
@pytest.mark.cli
class TestKeybindings:
    """Tests for picker keybinding handlers."""

    def test_manager_creates_bindings(self):
        manager = create_keybinding_manager()

        kb = manager.create_keybindings()

        assert isinstance(kb, KeyBindings)
        assert len(kb.bindings) == 2
        assert [h.trigger_key for h in manager.handlers] == ["escape", "c-r"]

    def test_each_binding_runs_its_own_handler(self):
        """Test every key dispatches to the handler registered for it."""
        manager = create_keybinding_manager()
        kb = manager.create_keybindings()
        event = MagicMock()
        event.app.current_buffer.text = "find"

        escape, refresh = kb.bindings
        escape.handler(event)
        assert event.app.current_buffer.text == ""
        event.app.exit.assert_not_called()

        refresh.handler(event)
        event.app.exit.assert_called_once_with(result=REFRESH_COMMAND)

    def test_help_lines(self):
        manager = KeybindingManager()
        manager.register_handler(RefreshHandler())

        assert manager.help_lines() == ["c-r      Reload keymaps from Neovim"]

    def test_clear_query(self):
        event = MagicMock()
        event.app.current_buffer.text = "find"

        ClearQueryHandler().handle(event)

        assert event.app.current_buffer.text == ""

    def test_refresh_exits_prompt_with_command(self):
        event = MagicMock()

        RefreshHandler().handle(event)

        event.app.exit.assert_called_once_with(result=REFRESH_COMMAND)


@pytest.mark.unit
@pytest.mark.cli
class TestRunPicker:
    """Tests for the interactive loop."""

    @pytest.mark.asyncio
    async def test_search_then_exit(self, fast_settings, sample_records):
        store = KeymapStore(StaticTransport(sample_records, settings=fast_settings))
        console = make_console()
        session = make_session("telescope", "exit")

        code = await run_picker(store, console, session=session)

        assert code == ExitCodes.SUCCESS
        text = output(console)
        assert "Search 5 keymaps" in text
        assert "<leader>ff" in text
        assert "<leader>fg" in text

    @pytest.mark.asyncio
    async def test_accepted_completion_prints_summary(self, fast_settings, sample_records):
        store = KeymapStore(StaticTransport(sample_records, settings=fast_settings))
        console = make_console()

        await run_picker(store, console, session=make_session("gd", EOFError()))

        assert "Normal: gd → <Lua callback> (Go to definition)" in output(console)

    @pytest.mark.asyncio
    async def test_refresh_command(self, fast_settings, sample_records):
        transport = StaticTransport(sample_records[:2], sample_records, settings=fast_settings)
        store = KeymapStore(transport)
        console = make_console()

        await run_picker(store, console, session=make_session(REFRESH_COMMAND, "q"))

        assert "Reloaded 5 keymaps" in output(console)
        assert transport.calls == 2

    @pytest.mark.asyncio
    async def test_help_command(self, fast_settings, sample_records):
        store = KeymapStore(StaticTransport(sample_records, settings=fast_settings))
        console = make_console()

        await run_picker(store, console, session=make_session("?", "q"))

        assert "Clear the query" in output(console)

    @pytest.mark.asyncio
    async def test_ctrl_c(self, fast_settings, sample_records):
        store = KeymapStore(StaticTransport(sample_records, settings=fast_settings))
        console = make_console()

        code = await run_picker(store, console, session=make_session(KeyboardInterrupt()))

        assert code == ExitCodes.INTERRUPTED

    @pytest.mark.asyncio
    async def test_unavailable_never_prompts(self, fast_settings):
        store = KeymapStore(StaticTransport(UnavailableError("gone"), settings=fast_settings))
        console = make_console()
        session = make_session("exit")

        code = await run_picker(store, console, session=session)

        assert code == ExitCodes.UNAVAILABLE
        assert "Neovim not accessible" in output(console)
        session.prompt_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_keymaps(self, fast_settings):
        store = KeymapStore(StaticTransport([], settings=fast_settings))
        console = make_console()

        code = await run_picker(store, console, session=make_session("exit"))

        assert code == ExitCodes.NO_KEYMAPS
