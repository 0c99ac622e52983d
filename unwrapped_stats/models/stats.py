"""Domain models for aggregated listening statistics"""
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

# Albums with fewer distinct tracks are treated as singles or EPs
REAL_ALBUM_MIN_TRACKS = 8

AlbumKey = Tuple[str, str]

def album_play_estimate(track_plays: int, track_count: int) -> int:
    """Estimate whole-album plays, rounding halves up; a zero track count counts as one track"""
    return math.floor(track_plays / (track_count or 1) + 0.5)

@dataclass
class ArtistStat:
    """Play count and per-year breakdown for one artist"""
    name: str
    plays: int = 0
    yearly: Dict[int, int] = field(default_factory=dict)

    def add_play(self, year: Optional[int]) -> None:
        self.plays += 1
        if year is not None:
            self.yearly[year] = self.yearly.get(year, 0) + 1

@dataclass
class AlbumStat:
    """Track plays on one album, keyed by (album name, artist name)"""
    album_name: str
    artist_name: str
    plays: int = 0
    tracks: Set[str] = field(default_factory=set)
    track_count: int = 0

    @property
    def key(self) -> AlbumKey:
        return (self.album_name, self.artist_name)

    @property
    def album_plays(self) -> int:
        return album_play_estimate(self.plays, self.track_count)

    def add_play(self, track_name: Optional[str]) -> None:
        self.plays += 1
        if track_name:
            self.tracks.add(track_name)
            self.track_count = len(self.tracks)

    def is_real_album(self, min_tracks: int = REAL_ALBUM_MIN_TRACKS) -> bool:
        return self.track_count >= min_tracks

@dataclass
class ListeningSummary:
    """Result of one aggregation pass, or of restoring a cached snapshot"""
    artists: Dict[str, ArtistStat] = field(default_factory=dict)
    albums: Dict[AlbumKey, AlbumStat] = field(default_factory=dict)
    blank_tracks: int = 0
    total_tracks: int = 0
    earliest_year: Optional[int] = None
    latest_year: Optional[int] = None

    @property
    def valid_listens(self) -> int:
        """Listens attributed to an artist"""
        return self.total_tracks - self.blank_tracks

    @property
    def artist_count(self) -> int:
        return len(self.artists)
