"""Listening record read from a streaming history export"""
import logging
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Account-data exports (StreamingHistory*.json) use these keys instead
LEGACY_KEYS = {
    'ts': 'endTime',
    'master_metadata_album_artist_name': 'artistName',
    'master_metadata_track_name': 'trackName',
    'ms_played': 'msPlayed',
}

# Text fields the aggregator keys on; non-string values count as absent
TEXT_FIELDS = (
    'ts',
    'master_metadata_album_artist_name',
    'master_metadata_album_album_name',
    'master_metadata_track_name',
)

def parse_year(ts: Optional[str]) -> Optional[int]:
    """Return the calendar year of a timestamp string, or None if it does not parse"""
    if not ts or not isinstance(ts, str):
        return None
    try:
        return datetime.fromisoformat(ts.replace('Z', '+00:00')).year
    except ValueError:
        pass
    try:
        return datetime.strptime(ts, "%Y-%m-%d %H:%M").year
    except ValueError:
        return None

@dataclass(frozen=True)
class ListenRecord:
    """
    One playback event. Every field is optional: None means the key was absent,
    which is kept distinct from an empty string or a zero.
    """
    ts: Optional[str] = None
    platform: Optional[str] = None
    ms_played: Optional[int] = None
    conn_country: Optional[str] = None
    ip_addr: Optional[str] = None
    master_metadata_track_name: Optional[str] = None
    master_metadata_album_artist_name: Optional[str] = None
    master_metadata_album_album_name: Optional[str] = None
    spotify_track_uri: Optional[str] = None
    episode_name: Optional[str] = None
    episode_show_name: Optional[str] = None
    spotify_episode_uri: Optional[str] = None
    audiobook_title: Optional[str] = None
    audiobook_uri: Optional[str] = None
    audiobook_chapter_uri: Optional[str] = None
    audiobook_chapter_title: Optional[str] = None
    reason_start: Optional[str] = None
    reason_end: Optional[str] = None
    shuffle: Optional[bool] = None
    skipped: Optional[bool] = None
    offline: Optional[bool] = None
    offline_timestamp: Optional[Any] = None
    incognito_mode: Optional[bool] = None

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> 'ListenRecord':
        """Build a record from a decoded JSON object, ignoring unknown keys"""
        values = {f.name: entry[f.name] for f in fields(cls) if f.name in entry}
        for name, legacy in LEGACY_KEYS.items():
            if name not in values and legacy in entry:
                values[name] = entry[legacy]
        for name in TEXT_FIELDS:
            value = values.get(name)
            if value is not None and not isinstance(value, str):
                logger.debug(f"Ignoring non-text {name}: {value!r}")
                values[name] = None
        return cls(**values)

    @property
    def artist_name(self) -> Optional[str]:
        return self.master_metadata_album_artist_name

    @property
    def album_name(self) -> Optional[str]:
        return self.master_metadata_album_album_name

    @property
    def track_name(self) -> Optional[str]:
        return self.master_metadata_track_name

    @property
    def year(self) -> Optional[int]:
        return parse_year(self.ts)
