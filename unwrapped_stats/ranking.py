"""Top-N rankings and yearly rollups over a listening summary"""
from dataclasses import dataclass, field
from typing import List, Optional

from unwrapped_stats.estimator import MonetaryEstimator
from unwrapped_stats.models.stats import ListeningSummary, REAL_ALBUM_MIN_TRACKS

@dataclass
class RankedArtist:
    name: str
    plays: int
    label_estimate: float
    artist_estimate: float

@dataclass
class RankedAlbum:
    album_name: str
    artist_name: str
    plays: int
    track_count: int
    total_track_plays: int
    label_estimate: float
    artist_estimate: float
    purchase_multiple: Optional[float] = None

@dataclass
class ArtistRank:
    name: str = ""
    plays: int = 0

@dataclass
class Podium:
    """Most, second most and third most played artists; empty ranks have no name and 0 plays"""
    first: ArtistRank = field(default_factory=ArtistRank)
    second: ArtistRank = field(default_factory=ArtistRank)
    third: ArtistRank = field(default_factory=ArtistRank)

    def ranks(self) -> List[ArtistRank]:
        return [self.first, self.second, self.third]

@dataclass
class ArtistSeries:
    label: str
    counts: List[int]

@dataclass
class YearlySeries:
    """Plays per year for each top artist, zero-filled over the whole year range"""
    years: List[int]
    datasets: List[ArtistSeries]

def top_artists(summary: ListeningSummary, n: int = 10,
                estimator: Optional[MonetaryEstimator] = None) -> List[RankedArtist]:
    """Artists by play count, descending; equal counts keep first-seen order"""
    estimator = estimator or MonetaryEstimator()
    ranked = sorted(summary.artists.values(), key=lambda artist: artist.plays, reverse=True)

    result = []
    for artist in ranked[:max(n, 0)]:
        estimate = estimator.stream_estimate(artist.plays)
        result.append(RankedArtist(
            name=artist.name,
            plays=artist.plays,
            label_estimate=estimate.label,
            artist_estimate=estimate.artist
        ))
    return result

def top_albums(summary: ListeningSummary, n: int = 10,
               estimator: Optional[MonetaryEstimator] = None,
               min_tracks: int = REAL_ALBUM_MIN_TRACKS) -> List[RankedAlbum]:
    """
    Real albums (at least `min_tracks` distinct tracks) by estimated album
    plays, descending; equal estimates keep first-seen order. Payout
    estimates and the purchase multiple are based on the total track plays.
    """
    estimator = estimator or MonetaryEstimator()
    albums = [album for album in summary.albums.values() if album.is_real_album(min_tracks)]
    albums.sort(key=lambda album: album.album_plays, reverse=True)

    result = []
    for album in albums[:max(n, 0)]:
        estimate = estimator.stream_estimate(album.plays)
        result.append(RankedAlbum(
            album_name=album.album_name,
            artist_name=album.artist_name,
            plays=album.album_plays,
            track_count=album.track_count,
            total_track_plays=album.plays,
            label_estimate=estimate.label,
            artist_estimate=estimate.artist,
            purchase_multiple=estimator.purchase_multiple(album.plays)
        ))
    return result

def podium(summary: ListeningSummary) -> Podium:
    """
    Find the three most played artists with three exclusion scans. Each scan
    takes the first artist whose count beats everything before it, skipping
    artists already placed.
    """
    artists = list(summary.artists.values())
    claimed: List[int] = []
    ranks = []

    for _ in range(3):
        best = ArtistRank()
        best_index = -1
        for index, artist in enumerate(artists):
            if index in claimed:
                continue
            if artist.plays > best.plays:
                best = ArtistRank(name=artist.name, plays=artist.plays)
                best_index = index
        if best_index >= 0:
            claimed.append(best_index)
        ranks.append(best)

    return Podium(first=ranks[0], second=ranks[1], third=ranks[2])

def yearly_series(summary: ListeningSummary, n: int = 10) -> YearlySeries:
    """Per-year play counts of the top `n` artists over [earliest_year, latest_year]"""
    if summary.earliest_year is None or summary.latest_year is None:
        years: List[int] = []
    else:
        years = list(range(summary.earliest_year, summary.latest_year + 1))

    datasets = []
    for ranked in top_artists(summary, n):
        yearly = summary.artists[ranked.name].yearly
        datasets.append(ArtistSeries(label=ranked.name, counts=[yearly.get(year, 0) for year in years]))
    return YearlySeries(years=years, datasets=datasets)
