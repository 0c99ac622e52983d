"""Single-pass reduction of listen records into artist and album statistics"""
import logging
from datetime import date
from typing import Callable, Optional, Sequence

from unwrapped_stats.models.listen import ListenRecord
from unwrapped_stats.models.stats import AlbumStat, ArtistStat, ListeningSummary

logger = logging.getLogger(__name__)

# Used as the earliest year when no record carries a parseable timestamp
SERVICE_LAUNCH_YEAR = 2009
DEFAULT_PROGRESS_INTERVAL = 1000

ProgressCallback = Callable[[int, int], None]

class AggregationInProgressError(RuntimeError):
    """Raised when process() is called again before the running pass has finished"""

class Aggregator:
    """
    Builds a ListeningSummary from a record sequence in one left-to-right pass.

    Each instance owns the collections it builds; every call to process()
    starts from empty collections. A pass cannot be re-entered.
    """

    def __init__(self, progress_interval: int = DEFAULT_PROGRESS_INTERVAL):
        if progress_interval <= 0:
            raise ValueError("progress_interval must be positive")
        self.progress_interval = progress_interval
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def process(self, records: Sequence[ListenRecord],
                on_progress: Optional[ProgressCallback] = None,
                today: Optional[date] = None) -> ListeningSummary:
        """
        Aggregate records into artist and album statistics.

        Args:
            records: Listen records in input order
            on_progress: Optional callback receiving (processed, total) every
                progress_interval records and once on completion
            today: Date used for the latest-year fallback (defaults to today)

        Raises:
            AggregationInProgressError: If a pass is already running on this instance
        """
        if self._running:
            raise AggregationInProgressError("An aggregation pass is already running")

        self._running = True
        try:
            return self._reduce(records, on_progress, today or date.today())
        finally:
            self._running = False

    def _reduce(self, records: Sequence[ListenRecord],
                on_progress: Optional[ProgressCallback], today: date) -> ListeningSummary:
        summary = ListeningSummary()
        artists = summary.artists
        albums = summary.albums
        total = len(records)
        earliest = latest = None

        for index, record in enumerate(records):
            year = record.year
            if year is not None:
                if earliest is None or year < earliest:
                    earliest = year
                if latest is None or year > latest:
                    latest = year

            artist_name = record.artist_name
            if artist_name is None or artist_name == "":
                summary.blank_tracks += 1
            else:
                artist = artists.get(artist_name)
                if artist is None:
                    artist = artists[artist_name] = ArtistStat(name=artist_name)
                artist.add_play(year)

                album_name = record.album_name
                if album_name:
                    key = (album_name, artist_name)
                    album = albums.get(key)
                    if album is None:
                        album = albums[key] = AlbumStat(album_name=album_name, artist_name=artist_name)
                    album.add_play(record.track_name)

            if on_progress and index % self.progress_interval == 0:
                self._report(on_progress, index, total)

        if on_progress:
            self._report(on_progress, total, total)

        summary.total_tracks = total
        summary.earliest_year = earliest if earliest is not None else SERVICE_LAUNCH_YEAR
        summary.latest_year = latest if latest is not None else today.year

        logger.info(
            f"Aggregated {total} records: {len(artists)} artists, {len(albums)} albums, "
            f"{summary.blank_tracks} without artist, years {summary.earliest_year}-{summary.latest_year}"
        )
        return summary

    def _report(self, on_progress: ProgressCallback, processed: int, total: int) -> None:
        try:
            on_progress(processed, total)
        except Exception as e:
            logger.warning(f"Progress callback failed at {processed}/{total}: {e}")
