"""Unit tests for nvim_keymaps.store module."""

import asyncio

import pytest

from nvim_keymaps.exceptions import DecodeError, TransportError, UnavailableError
from nvim_keymaps.store import KeymapStore, StoreState
from nvim_keymaps.transports.clipboard import ClipboardRelay
from tests.helpers.builders import build_record
from tests.mocks.editor import FakeClipboard, FakeEditorHost, StaticTransport


def forty_records():
    return [build_record(f"<leader>{i:02d}", desc=f"Action {i}") for i in range(40)]


@pytest.mark.unit
@pytest.mark.store
class TestStoreLifecycle:
    """Tests for state transitions and the single in-flight fetch."""

    @pytest.mark.asyncio
    async def test_initial_state(self, fast_settings):
        store = KeymapStore(StaticTransport(settings=fast_settings))

        assert store.state is StoreState.UNINITIALIZED
        assert store.index.search("") == []

    @pytest.mark.asyncio
    async def test_first_read_triggers_fetch(self, fast_settings, sample_records):
        transport = StaticTransport(sample_records, settings=fast_settings)
        store = KeymapStore(transport)

        keymaps = await store.get_keymaps()

        assert len(keymaps) == 5
        assert store.state is StoreState.READY
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self, fast_settings, sample_records):
        gate = asyncio.Event()
        transport = StaticTransport(sample_records, settings=fast_settings, gate=gate)
        store = KeymapStore(transport)

        pending = asyncio.gather(
            store.get_keymaps(),
            store.search_keymaps("find"),
            store.is_external_editor_available(),
            store.ensure_keymaps_loaded(),
        )
        await asyncio.sleep(0)
        assert store.state is StoreState.INITIALIZING
        gate.set()
        keymaps, found, available, loaded = await pending

        assert transport.calls == 1
        assert len(keymaps) == 5
        assert found[0].lhs == "<leader>ff"
        assert available is True
        assert loaded is True

    @pytest.mark.asyncio
    async def test_later_reads_use_cache(self, fast_settings, sample_records):
        transport = StaticTransport(sample_records, settings=fast_settings)
        store = KeymapStore(transport)

        await store.get_keymaps()
        await store.search_keymaps("grep")
        await store.ensure_keymaps_loaded()

        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_keymaps_are_canonical(self, fast_settings, sample_records, sample_keymaps):
        store = KeymapStore(StaticTransport(sample_records, settings=fast_settings))

        assert await store.get_keymaps() == sample_keymaps

    @pytest.mark.asyncio
    async def test_description_policy_from_settings(self, fast_settings):
        settings = fast_settings.model_copy(update={"require_description": False})
        transport = StaticTransport([build_record("gd", desc="")], settings=settings)

        keymaps = await KeymapStore(transport).get_keymaps()

        assert [k.lhs for k in keymaps] == ["gd"]


@pytest.mark.unit
@pytest.mark.store
class TestStoreFailures:
    """Tests for errors becoming booleans and empty sets."""

    @pytest.mark.asyncio
    async def test_unavailable_is_terminal(self, fast_settings):
        """Test an unreachable Neovim is reported without a retry delay."""
        settings = fast_settings.model_copy(update={"readiness_grace": 30.0})
        transport = StaticTransport(UnavailableError("nvim not found"), settings=settings)
        store = KeymapStore(transport)

        loaded = await asyncio.wait_for(store.ensure_keymaps_loaded(), timeout=2.0)

        assert loaded is False
        assert store.state is StoreState.UNAVAILABLE
        assert await store.is_external_editor_available() is False
        assert await store.get_keymaps() == []
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_transport_error_leaves_store_ready(self, fast_settings):
        transport = StaticTransport(TransportError("no payload"), settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.get_keymaps() == []
        assert store.state is StoreState.READY
        assert isinstance(store.last_error, TransportError)
        assert await store.is_external_editor_available() is True

    @pytest.mark.asyncio
    async def test_decode_error_is_not_raised(self, fast_settings):
        transport = StaticTransport(DecodeError("bad json"), settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.search_keymaps("anything") == []
        assert await store.ensure_keymaps_loaded() is False

    @pytest.mark.asyncio
    async def test_unexpected_error_is_not_raised(self, fast_settings):
        transport = StaticTransport(RuntimeError("boom"), settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.get_keymaps() == []
        assert store.state is StoreState.READY


@pytest.mark.unit
@pytest.mark.store
class TestEnsureKeymapsLoaded:
    """Tests for the readiness retry."""

    @pytest.mark.asyncio
    async def test_empty_first_fetch_is_retried_once(self, fast_settings, sample_records):
        transport = StaticTransport([], sample_records, settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.ensure_keymaps_loaded() is True
        assert transport.calls == 2
        assert len(await store.get_keymaps()) == 5

    @pytest.mark.asyncio
    async def test_still_empty_after_retry(self, fast_settings):
        transport = StaticTransport([], settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.ensure_keymaps_loaded() is False
        assert transport.calls == 2
        assert store.state is StoreState.READY

    @pytest.mark.asyncio
    async def test_transport_error_then_success(self, fast_settings, sample_records):
        transport = StaticTransport(
            TransportError("slow start"), sample_records, settings=fast_settings
        )
        store = KeymapStore(transport)

        assert await store.ensure_keymaps_loaded() is True
        assert store.last_error is None


@pytest.mark.unit
@pytest.mark.store
class TestRefreshKeymaps:
    """Tests for explicit refresh."""

    @pytest.mark.asyncio
    async def test_refresh_to_empty_does_not_restore(self, fast_settings):
        """Test an empty refresh replaces the previous keymaps."""
        transport = StaticTransport(forty_records(), [], settings=fast_settings)
        store = KeymapStore(transport)
        assert len(await store.get_keymaps()) == 40

        assert await store.refresh_keymaps() is False
        assert await store.get_keymaps() == []
        assert await store.search_keymaps("action") == []

    @pytest.mark.asyncio
    async def test_refresh_picks_up_new_keymaps(self, fast_settings, sample_records):
        transport = StaticTransport(sample_records[:1], sample_records, settings=fast_settings)
        store = KeymapStore(transport)
        assert len(await store.get_keymaps()) == 1

        assert await store.refresh_keymaps() is True
        assert len(await store.get_keymaps()) == 5

    @pytest.mark.asyncio
    async def test_refresh_recovers_from_unavailable(self, fast_settings, sample_records):
        transport = StaticTransport(
            UnavailableError("not running"), sample_records, settings=fast_settings
        )
        store = KeymapStore(transport)
        assert await store.ensure_keymaps_loaded() is False

        assert await store.refresh_keymaps() is True
        assert store.state is StoreState.READY
        assert await store.is_external_editor_available() is True

    @pytest.mark.asyncio
    async def test_refresh_before_first_read(self, fast_settings, sample_records):
        transport = StaticTransport(sample_records, settings=fast_settings)
        store = KeymapStore(transport)

        assert await store.refresh_keymaps() is True
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_search_uses_new_index_after_refresh(self, fast_settings):
        first = [build_record("gd", desc="Go to definition")]
        second = [build_record("gr", desc="Find references")]
        store = KeymapStore(StaticTransport(first, second, settings=fast_settings))
        assert (await store.search_keymaps("definition"))[0].lhs == "gd"

        await store.refresh_keymaps()

        assert [k.lhs for k in await store.search_keymaps("references")] == ["gr"]


@pytest.mark.unit
@pytest.mark.store
class TestStoreWithClipboardRelay:
    """Tests for the store driving a real relay against a fake editor."""

    @pytest.mark.asyncio
    async def test_end_to_end(self, fast_settings, sample_records):
        clipboard = FakeClipboard("before")
        host = FakeEditorHost(sample_records, clipboard=clipboard)
        store = KeymapStore(ClipboardRelay(host, clipboard, fast_settings))

        assert await store.ensure_keymaps_loaded() is True
        assert (await store.search_keymaps("definition"))[0].lhs == "gd"
        assert clipboard.text == "before"

    @pytest.mark.asyncio
    async def test_unreachable_editor(self, fast_settings):
        clipboard = FakeClipboard("before")
        host = FakeEditorHost(clipboard=clipboard, available=False)
        store = KeymapStore(ClipboardRelay(host, clipboard, fast_settings))

        assert await store.ensure_keymaps_loaded() is False
        assert store.state is StoreState.UNAVAILABLE
        assert clipboard.writes == []
