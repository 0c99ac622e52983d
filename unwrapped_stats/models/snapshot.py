"""SummarySnapshot model definition"""
import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from unwrapped_stats.models.stats import AlbumStat, ArtistStat, ListeningSummary

SNAPSHOT_VERSION = 2

class ArtistEntry(BaseModel):
    """Cached statistics for one artist"""
    name: str = Field(description="Artist name")
    plays: int = Field(ge=0, description="Total plays")
    yearly: Dict[int, int] = Field(default_factory=dict, description="Plays per calendar year")

class AlbumEntry(BaseModel):
    """Cached statistics for one album"""
    album_name: str = Field(description="Album name")
    artist_name: str = Field(description="Album artist name")
    plays: int = Field(ge=0, description="Total track plays")
    track_count: int = Field(ge=0, description="Distinct tracks seen")

class SummarySnapshot(BaseModel):
    """
    Reduced result of a processing pass, enough to redisplay every figure
    without the raw records.

    Version 1 snapshots carried artist statistics only; they load with no albums.
    Raw records are never rebuilt: total_tracks only restores the count.
    """
    version: int = SNAPSHOT_VERSION
    artists: List[ArtistEntry] = []
    albums: List[AlbumEntry] = []
    blank_tracks: int = Field(0, ge=0)
    total_tracks: int = Field(0, ge=0)
    earliest_year: Optional[int] = None
    latest_year: Optional[int] = None
    most_played_artist: str = ""
    most_played_artist_count: int = 0
    second_most_played_artist: str = ""
    second_most_played_artist_count: int = 0
    third_most_played_artist: str = ""
    third_most_played_artist_count: int = 0
    timestamp: datetime.datetime = Field(default_factory=lambda: datetime.datetime.now(datetime.UTC))

    @classmethod
    def from_summary(cls, summary: ListeningSummary, top_three=None) -> 'SummarySnapshot':
        """Build a snapshot from a summary and its podium (a ranking.Podium)"""
        ranks = {}
        if top_three is not None:
            ranks = {
                'most_played_artist': top_three.first.name,
                'most_played_artist_count': top_three.first.plays,
                'second_most_played_artist': top_three.second.name,
                'second_most_played_artist_count': top_three.second.plays,
                'third_most_played_artist': top_three.third.name,
                'third_most_played_artist_count': top_three.third.plays,
            }
        return cls(
            artists=[
                ArtistEntry(name=artist.name, plays=artist.plays, yearly=dict(artist.yearly))
                for artist in summary.artists.values()
            ],
            albums=[
                AlbumEntry(
                    album_name=album.album_name,
                    artist_name=album.artist_name,
                    plays=album.plays,
                    track_count=album.track_count
                ) for album in summary.albums.values()
            ],
            blank_tracks=summary.blank_tracks,
            total_tracks=summary.total_tracks,
            earliest_year=summary.earliest_year,
            latest_year=summary.latest_year,
            **ranks
        )

    def to_summary(self) -> ListeningSummary:
        """Restore the summary in the original first-seen order"""
        summary = ListeningSummary(
            blank_tracks=self.blank_tracks,
            total_tracks=self.total_tracks,
            earliest_year=self.earliest_year,
            latest_year=self.latest_year
        )
        for entry in self.artists:
            summary.artists[entry.name] = ArtistStat(name=entry.name, plays=entry.plays, yearly=dict(entry.yearly))
        for entry in self.albums:
            album = AlbumStat(
                album_name=entry.album_name,
                artist_name=entry.artist_name,
                plays=entry.plays,
                track_count=entry.track_count
            )
            summary.albums[album.key] = album
        return summary
