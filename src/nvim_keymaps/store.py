"""Keymap store: cache, fetch lifecycle and query entry points.

The store owns the canonical keymap list and its search index. At most one
fetch is in flight; concurrent callers await the same task. Errors from the
fetch pipeline are logged and turned into boolean results, never raised from
read operations.
"""

import asyncio
import logging
from collections.abc import Sequence
from enum import Enum

from nvim_keymaps.config.schema import KeymapsSettings
from nvim_keymaps.exceptions import TransportError, UnavailableError
from nvim_keymaps.models import KeymapItem
from nvim_keymaps.normalizer import normalize
from nvim_keymaps.search import SearchIndex
from nvim_keymaps.transports.base import TransportStrategy

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    """Lifecycle states of the keymap store."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class KeymapStore:
    """Cached, searchable view of the keymaps defined in Neovim.

    A fetch that reaches Neovim but yields nothing (or fails in transit)
    leaves the store READY with an empty list, which ensure_keymaps_loaded()
    retries once. A fetch that cannot reach Neovim at all leaves it
    UNAVAILABLE until refresh_keymaps() is called.

    Attributes:
        transport: Transport used for every fetch
        settings: Store settings (grace delay, description policy)

    Example:
        >>> store = KeymapStore(create_transport(settings), settings)
        >>> if await store.ensure_keymaps_loaded():
        ...     results = await store.search_keymaps("find")
    """

    def __init__(self, transport: TransportStrategy, settings: KeymapsSettings | None = None):
        """Initialize the store without fetching.

        Args:
            transport: Transport used to reach Neovim
            settings: Settings (defaults to the transport's settings)
        """
        self.transport = transport
        self.settings = settings or transport.settings
        self.state = StoreState.UNINITIALIZED
        self.last_error: Exception | None = None

        self._keymaps: tuple[KeymapItem, ...] = ()
        self._index = SearchIndex.degraded(())
        self._available = False
        self._fetch_task: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        """Begin the initial fetch if it has not started yet."""
        if self.state is StoreState.UNINITIALIZED:
            await self._start_fetch()

    async def wait_for_initialization(self) -> None:
        """Wait for the current or most recent fetch to finish."""
        await self.start()
        task = self._fetch_task
        if task is not None:
            await asyncio.shield(task)

    async def _start_fetch(self) -> asyncio.Task[None]:
        async with self._lock:
            if self._fetch_task is None or self._fetch_task.done():
                self.state = StoreState.INITIALIZING
                self._fetch_task = asyncio.create_task(self._fetch())
            return self._fetch_task

    async def _run_fetch(self) -> None:
        task = await self._start_fetch()
        await asyncio.shield(task)

    async def _fetch(self) -> None:
        """Run one fetch cycle and replace the cache wholesale."""
        try:
            records = await self.transport.fetch_records()
        except UnavailableError as e:
            logger.error(f"Neovim not accessible via {self.transport.name}: {e}")
            self._replace((), available=False, error=e)
            self.state = StoreState.UNAVAILABLE
            return
        except TransportError as e:
            logger.error(f"Failed to load keymaps via {self.transport.name}: {e}")
            self._replace((), available=True, error=e)
            self.state = StoreState.READY
            return
        except Exception as e:
            logger.exception(f"Unexpected error loading keymaps via {self.transport.name}")
            self._replace((), available=True, error=e)
            self.state = StoreState.READY
            return

        keymaps = normalize(records, require_description=self.settings.require_description)
        self._replace(keymaps, available=True, error=None)
        self.state = StoreState.READY
        logger.info(f"Loaded {len(keymaps)} keymaps via {self.transport.name}")

    def _replace(
        self, keymaps: Sequence[KeymapItem], available: bool, error: Exception | None
    ) -> None:
        self._keymaps = tuple(keymaps)
        self._index = SearchIndex.build(self._keymaps)
        self._available = available
        self.last_error = error

    async def get_keymaps(self) -> list[KeymapItem]:
        """Return all keymaps in canonical order, after any pending fetch."""
        await self.wait_for_initialization()
        return list(self._keymaps)

    async def search_keymaps(self, query: str) -> list[KeymapItem]:
        """Return keymaps matching a query, after any pending fetch.

        Args:
            query: Free-text query; blank returns everything

        Returns:
            Ranked (or, when the index is degraded, filtered) keymaps
        """
        await self.wait_for_initialization()
        return self._index.search(query)

    async def is_external_editor_available(self) -> bool:
        """Return True if the last fetch could reach Neovim."""
        await self.wait_for_initialization()
        return self._available

    async def ensure_keymaps_loaded(self) -> bool:
        """Make sure keymaps are loaded, retrying once if the cache is empty.

        Neovim may still be starting up when the first fetch runs, so an
        empty result is retried after the readiness grace delay. An
        unreachable Neovim is not retried.

        Returns:
            True if the cache holds at least one keymap
        """
        await self.wait_for_initialization()

        if self.state is StoreState.UNAVAILABLE:
            return False
        if self._keymaps:
            return True

        logger.debug(
            f"No keymaps loaded yet, retrying in {self.settings.readiness_grace:.2f}s"
        )
        await asyncio.sleep(self.settings.readiness_grace)
        await self._run_fetch()
        return bool(self._keymaps)

    async def refresh_keymaps(self) -> bool:
        """Discard the cache and fetch again unconditionally.

        The previous keymaps are not restored if the new fetch comes back
        empty.

        Returns:
            True if the new fetch produced at least one keymap
        """
        task = self._fetch_task
        if task is not None and not task.done():
            await asyncio.shield(task)

        self._replace((), available=self._available, error=None)
        await self._run_fetch()
        return bool(self._keymaps)

    @property
    def index(self) -> SearchIndex:
        """Search index over the current keymaps."""
        return self._index
