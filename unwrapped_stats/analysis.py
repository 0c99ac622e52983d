"""Listening analysis: ingest, aggregate, rank, estimate and cache"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from pydantic import ValidationError

from unwrapped_stats.aggregator import Aggregator, ProgressCallback, SERVICE_LAUNCH_YEAR
from unwrapped_stats.config import Settings, settings as default_settings
from unwrapped_stats.estimator import AlbumPurchaseAlternative, Currency, MonetaryEstimator
from unwrapped_stats.ingest import Buffer, FailedBuffer, IngestResult, ingest_buffers, read_files
from unwrapped_stats.models.listen import ListenRecord
from unwrapped_stats.models.report import ReportFigures, SummaryStats
from unwrapped_stats.models.snapshot import SummarySnapshot
from unwrapped_stats.models.stats import ListeningSummary
from unwrapped_stats.pricing import SubscriptionCost
from unwrapped_stats.ranking import (
    Podium, RankedAlbum, RankedArtist, YearlySeries,
    podium, top_albums, top_artists, yearly_series
)
from unwrapped_stats.report import artist_export, build_figures, render_text, subscription_range, summary_stats
from unwrapped_stats.services.storage import SnapshotStore

logger = logging.getLogger(__name__)

class NoDataError(RuntimeError):
    """Raised when results are requested before processing or resuming"""

class ListeningAnalysis:
    """
    Engine facade over one set of streaming history exports.

    Owns a single Aggregator and the summary it produced, or the summary
    restored from a cached snapshot. The snapshot store is optional and
    always passed in explicitly.
    """

    def __init__(self, config: Settings = default_settings, store: Optional[SnapshotStore] = None,
                 currency: Optional[Currency] = None):
        self.config = config
        self.store = store
        self.aggregator = Aggregator(progress_interval=config.PROGRESS_INTERVAL)
        self.records: List[ListenRecord] = []
        self.errors: List[FailedBuffer] = []
        self.summary: Optional[ListeningSummary] = None
        self.podium: Optional[Podium] = None
        self.computed_at: Optional[datetime] = None

        if currency is None:
            currency = store.load_currency(config.DEFAULT_CURRENCY) if store else config.DEFAULT_CURRENCY
        self.estimator = MonetaryEstimator(Currency(currency))

    # --- Loading ---

    def load_buffers(self, buffers: Iterable[Buffer]) -> int:
        """Replace the loaded records with those of the given buffers; returns the record count"""
        return self._use(ingest_buffers(buffers))

    def load_files(self, paths: Sequence[str]) -> int:
        return self._use(read_files(paths))

    def _use(self, result: IngestResult) -> int:
        self.records = result.records
        self.errors = result.errors
        logger.info(f"Processing {len(self.records)} tracks")
        return len(self.records)

    # --- Processing ---

    def process(self, on_progress: Optional[ProgressCallback] = None,
                today: Optional[date] = None) -> ListeningSummary:
        """Rebuild every statistic from the loaded records"""
        summary = self.aggregator.process(self.records, on_progress=on_progress, today=today)
        self.summary = summary
        self.podium = podium(summary)
        self.computed_at = datetime.now()
        return summary

    def snapshot(self) -> SummarySnapshot:
        summary = self._require_summary()
        return SummarySnapshot.from_summary(summary, self.podium)

    def save(self) -> bool:
        """Persist the current summary; False without a store or on failure"""
        if self.store is None:
            logger.warning("No snapshot store attached; nothing saved")
            return False
        try:
            snapshot = self.snapshot()
        except ValidationError as e:
            logger.error(f"Failed to build snapshot: {e}")
            return False
        return self.store.save(snapshot)

    def resume(self, today: Optional[date] = None) -> bool:
        """Load the cached summary instead of processing records; False when nothing is stored"""
        if self.store is None:
            return False
        snapshot = self.store.load()
        if snapshot is None:
            return False

        summary = snapshot.to_summary()
        if summary.earliest_year is None:
            summary.earliest_year = SERVICE_LAUNCH_YEAR
        if summary.latest_year is None:
            summary.latest_year = (today or date.today()).year

        self.records = []
        self.errors = []
        self.summary = summary
        self.podium = podium(summary)
        self.computed_at = snapshot.timestamp
        return True

    def has_cache(self) -> bool:
        return self.store is not None and self.store.exists()

    def clear_cache(self) -> bool:
        if self.store is None:
            return True
        return self.store.clear()

    def set_currency(self, currency: Currency) -> None:
        self.estimator = MonetaryEstimator(Currency(currency))
        if self.store is not None:
            self.store.save_currency(self.estimator.currency)

    # --- Results ---

    def _require_summary(self) -> ListeningSummary:
        if self.summary is None:
            raise NoDataError("No data processed. Call process() or resume() first.")
        return self.summary

    def top_artists(self, n: Optional[int] = None) -> List[RankedArtist]:
        if n is None:
            n = self.config.TOP_ARTISTS_LIMIT
        return top_artists(self._require_summary(), n, self.estimator)

    def top_albums(self, n: Optional[int] = None) -> List[RankedAlbum]:
        if n is None:
            n = self.store.load_albums_limit(self.config.ALBUMS_LIMIT) if self.store else self.config.ALBUMS_LIMIT
        return top_albums(self._require_summary(), n, self.estimator)

    def yearly_series(self, n: Optional[int] = None) -> YearlySeries:
        if n is None:
            n = self.config.TOP_ARTISTS_LIMIT
        return yearly_series(self._require_summary(), n)

    def subscription_cost(self, start_year: Optional[int] = None, end_year: Optional[int] = None,
                          today: Optional[date] = None) -> SubscriptionCost:
        """Subscription cost in the current currency; defaults to the years seen in the data"""
        default_start, default_end = subscription_range(self._require_summary(), today)
        return self.estimator.subscription_cost(
            default_start if start_year is None else start_year,
            default_end if end_year is None else end_year,
            today=today
        )

    def album_purchase_alternative(self, threshold: Optional[int] = None) -> AlbumPurchaseAlternative:
        if threshold is None:
            threshold = self.config.ALBUM_PURCHASE_THRESHOLD
        return self.estimator.album_purchase_alternative(self._require_summary(), threshold)

    def summary_stats(self, today: Optional[date] = None) -> SummaryStats:
        return summary_stats(self._require_summary(), self.podium, self.estimator, today=today)

    def figures(self, today: Optional[date] = None) -> ReportFigures:
        return build_figures(self._require_summary(), self.podium, self.estimator, today=today)

    def report_text(self, today: Optional[date] = None) -> str:
        return render_text(self.figures(today=today))

    def artist_export(self) -> str:
        return artist_export(self._require_summary())
