"""Reading streaming history exports into listen records"""
import glob
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union

from unwrapped_stats.models.listen import ListenRecord

logger = logging.getLogger(__name__)

# Field wrapping the record list in object-shaped exports
TRACKS_FIELD = 'tracks'

EXPORT_PATTERNS = [
    "Streaming_History_Audio_*.json",
    "StreamingHistory*.json",
    os.path.join("Spotify Extended Streaming History", "Streaming_History_Audio_*.json"),
]

Buffer = Union[str, Tuple[str, str]]

class IngestError(ValueError):
    """Raised when a single buffer cannot be read as a record list"""

@dataclass
class FailedBuffer:
    """A buffer that contributed no records"""
    source: str
    message: str

@dataclass
class IngestResult:
    """Records from all readable buffers, plus the buffers that failed"""
    records: List[ListenRecord] = field(default_factory=list)
    errors: List[FailedBuffer] = field(default_factory=list)

    @property
    def buffers_failed(self) -> int:
        return len(self.errors)

def parse_buffer(text: str, source: str = "<buffer>") -> List[ListenRecord]:
    """
    Parse one export buffer.

    Accepts either a bare JSON array of records or an object holding the
    array under "tracks". Array elements that are not objects are dropped.

    Raises:
        IngestError: If the text is not JSON or has neither shape
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise IngestError(f"{source} is not valid JSON: {e}") from e

    entries = data.get(TRACKS_FIELD) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise IngestError(f"{source} holds neither a record list nor a '{TRACKS_FIELD}' object")

    records = [ListenRecord.from_dict(entry) for entry in entries if isinstance(entry, dict)]
    dropped = len(entries) - len(records)
    if dropped:
        logger.warning(f"{source}: dropped {dropped} entries that are not JSON objects")
    return records

def ingest_buffers(buffers: Iterable[Buffer]) -> IngestResult:
    """Concatenate the records of every buffer in order, skipping buffers that fail"""
    result = IngestResult()
    for index, buffer in enumerate(buffers):
        source, text = buffer if isinstance(buffer, tuple) else (f"buffer {index}", buffer)
        try:
            records = parse_buffer(text, source)
        except IngestError as e:
            logger.error(f"Skipping {source}: {e}")
            result.errors.append(FailedBuffer(source=source, message=str(e)))
            continue
        logger.debug(f"{source}: {len(records)} records")
        result.records.extend(records)

    logger.info(f"Ingested {len(result.records)} records, {result.buffers_failed} buffers skipped")
    return result

def discover_files(input_dir: str) -> List[str]:
    """Find streaming history export files under a directory"""
    files = []
    for pattern in EXPORT_PATTERNS:
        files.extend(glob.glob(os.path.join(input_dir, pattern)))

    if not files:
        # Fallback for exports unpacked into deeper subdirectories
        files = glob.glob(os.path.join(input_dir, "**", "Streaming_History_Audio_*.json"), recursive=True)

    return sorted(set(files))

def read_files(paths: Sequence[str]) -> IngestResult:
    """Read export files as buffers; unreadable files are reported like malformed ones"""
    buffers = []
    unreadable = []
    for path in paths:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                buffers.append((path, f.read()))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            unreadable.append(FailedBuffer(source=path, message=str(e)))

    result = ingest_buffers(buffers)
    result.errors = unreadable + result.errors
    return result
