"""
Reference ActionDispatcher backed by a CandidateCatalog.

Handles the intents produced by a DiscoverEngine:
- fetch-more: loads the next catalog page on a worker thread and appends
  the ids through the attached sink (normally engine.append_candidates)
- reset-remote-state: rolls new random discover params
- record-as-liked / record-as-seen: keeps the wishlist and seen list
- push-back: nothing to persist

The dispatcher never holds its own lock while calling the sink, so the
engine lock and the dispatcher lock are never taken in opposite orders.
"""

import random
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from config.constants import DEFAULT_DISCOVER_PARAMS_CONFIG, DEFAULT_REPLENISHMENT_CONFIG
from core.logging import LoggerMixin
from discover.models import CandidateId, Intent, IntentKind
from services.catalog import CandidateCatalog


CandidateSink = Callable[[Sequence[CandidateId]], object]


@dataclass(frozen=True)
class DiscoverParams:
    """Pagination and filter cursor for the random discover feed."""
    year: Optional[int] = None
    sort_by: str = DEFAULT_DISCOVER_PARAMS_CONFIG.DEFAULT_SORT
    page: int = DEFAULT_DISCOVER_PARAMS_CONFIG.FIRST_PAGE

    def next_page(self) -> "DiscoverParams":
        return replace(self, page=self.page + 1)

    def to_dict(self) -> Dict[str, object]:
        return {"year": self.year, "sort_by": self.sort_by, "page": self.page}


class CatalogDispatcher(LoggerMixin):
    """
    Serves discover intents from an in-memory catalog.

    Args:
        catalog: Source of candidates
        page_size: Candidates per fetch
        max_workers: Worker threads for fetches
        seed: Seed for random params (None = nondeterministic)
    """

    def __init__(
        self,
        catalog: CandidateCatalog,
        page_size: int = DEFAULT_REPLENISHMENT_CONFIG.PAGE_SIZE,
        max_workers: int = 2,
        seed: Optional[int] = None,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.catalog = catalog
        self.page_size = page_size
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="discover-fetch"
        )
        self._futures: List[Future] = []
        self._sink: Optional[CandidateSink] = None

        # Bumped on every reset; fetches from an older epoch are dropped
        self._epoch = 0
        self._in_flight = False
        self._params = self._random_params()

        self._wishlist: List[CandidateId] = []
        self._seenlist: List[CandidateId] = []

    def attach(self, sink: CandidateSink) -> None:
        """Set the callable that receives fetched ids."""
        self._sink = sink

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def params(self) -> DiscoverParams:
        with self._lock:
            return self._params

    @property
    def wishlist(self) -> Tuple[CandidateId, ...]:
        with self._lock:
            return tuple(self._wishlist)

    @property
    def seenlist(self) -> Tuple[CandidateId, ...]:
        with self._lock:
            return tuple(self._seenlist)

    @property
    def fetch_in_flight(self) -> bool:
        with self._lock:
            return self._in_flight

    # =========================================================================
    # Intents
    # =========================================================================

    def dispatch(self, intent: Intent) -> None:
        kind = intent.kind
        if kind is IntentKind.FETCH_MORE:
            self._request_fetch()
        elif kind is IntentKind.RESET_REMOTE_STATE:
            self._reset_params()
        elif kind is IntentKind.RECORD_AS_LIKED:
            self._record(intent.candidate_id, liked=True)
        elif kind is IntentKind.RECORD_AS_SEEN:
            self._record(intent.candidate_id, liked=False)
        elif kind is IntentKind.PUSH_BACK:
            self.logger.debug("Candidate pushed back", candidate_id=intent.candidate_id)
        else:
            raise ValueError(f"Unsupported intent kind: {kind!r}")

    def _record(self, candidate_id: CandidateId, liked: bool) -> None:
        with self._lock:
            target, other = (
                (self._wishlist, self._seenlist) if liked else (self._seenlist, self._wishlist)
            )
            if candidate_id in other:
                other.remove(candidate_id)
            if candidate_id not in target:
                target.append(candidate_id)
        self.logger.info(
            "Decision persisted",
            candidate_id=candidate_id,
            list="wishlist" if liked else "seenlist",
        )

    def _reset_params(self) -> None:
        with self._lock:
            self._epoch += 1
            # A fetch from the previous epoch is stale; allow a fresh one
            self._in_flight = False
            self._params = self._random_params()
            params = self._params
        self.logger.info("Discover params reset", **params.to_dict())

    def _random_params(self, avoid_year: Optional[int] = None) -> DiscoverParams:
        years = self.catalog.years()
        others = [y for y in years if y != avoid_year]
        if others:
            years = others
        return DiscoverParams(
            year=self._rng.choice(years) if years else None,
            sort_by=self._rng.choice(DEFAULT_DISCOVER_PARAMS_CONFIG.SORT_OPTIONS),
            page=DEFAULT_DISCOVER_PARAMS_CONFIG.FIRST_PAGE,
        )

    # =========================================================================
    # Fetching
    # =========================================================================

    def _request_fetch(self) -> None:
        with self._lock:
            if self._in_flight:
                self.logger.debug("Fetch already in flight, request coalesced")
                return
            epoch = self._epoch
            params = self._params
            self._futures = [f for f in self._futures if not f.done()]
            self._futures.append(self._executor.submit(self._fetch, epoch, params))
            self._in_flight = True

    def _fetch(self, epoch: int, params: DiscoverParams) -> None:
        try:
            ids, next_params = self._load_page(params)
        except Exception:
            self.logger.exception("Catalog fetch failed", **params.to_dict())
            with self._lock:
                if epoch == self._epoch:
                    self._in_flight = False
            return

        with self._lock:
            if epoch != self._epoch:
                self.logger.info("Stale fetch dropped", fetched=len(ids), epoch=epoch)
                return
            self._params = next_params
            self._in_flight = False
            sink = self._sink

        self.logger.info("Candidates fetched", fetched=len(ids), **params.to_dict())
        if sink is not None and ids:
            sink(ids)

    def _load_page(self, params: DiscoverParams) -> Tuple[List[CandidateId], DiscoverParams]:
        """Fetch one page; an exhausted cursor rolls new params and retries once."""
        decided = self._decided_ids()
        ids, served = self._first_undecided_page(params, decided)
        if ids:
            return ids, served.next_page()

        with self._lock:
            rolled = self._random_params(avoid_year=params.year)
        self.logger.debug("Discover params exhausted, rolling new ones", **rolled.to_dict())
        ids, served = self._first_undecided_page(rolled, decided)
        return ids, served.next_page()

    def _first_undecided_page(
        self, params: DiscoverParams, decided: set
    ) -> Tuple[List[CandidateId], DiscoverParams]:
        """Walk forward from params.page past windows holding only decided ids."""
        total = self.catalog.count(params.year)
        while (params.page - 1) * self.page_size < total:
            ids = self.catalog.page(
                params.year, params.sort_by, params.page, self.page_size, exclude=decided
            )
            if ids:
                return ids, params
            params = params.next_page()
        return [], params

    def _decided_ids(self) -> set:
        with self._lock:
            return set(self._wishlist) | set(self._seenlist)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for in-flight fetches to finish.

        Returns:
            True if every fetch completed within the timeout.
        """
        with self._lock:
            pending = list(self._futures)
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
