"""Entry point for listening statistics generation"""
import logging
import os
import sys
import traceback

from unwrapped_stats.analysis import ListeningAnalysis
from unwrapped_stats.config import settings
from unwrapped_stats.db import Database
from unwrapped_stats.ingest import discover_files
from unwrapped_stats.services.storage import SnapshotStore
from unwrapped_stats.utils.json_encoder import json_dumps

logging.basicConfig(level=settings.LOG_LEVEL, format='%(message)s')
logger = logging.getLogger(__name__)

def log_progress(processed: int, total: int) -> None:
    percent = (processed / total) * 100 if total else 100.0
    logger.info(f"Processing: {processed}/{total} ({percent:.1f}%)")

def run() -> None:
    """Process all export files in INPUT_DIR, or redisplay the cached snapshot when there are none."""
    db = Database(settings.DATABASE_URL)
    try:
        db.init()
        store = SnapshotStore(db)
        analysis = ListeningAnalysis(settings, store=store)

        # Log config
        logger.info("Using configuration:")
        logger.info(json_dumps(settings.model_dump(), indent=2))

        files = discover_files(settings.INPUT_DIR) if os.path.isdir(settings.INPUT_DIR) else []
        if files:
            analysis.load_files(files)
            for failed in analysis.errors:
                logger.warning(f"Skipped {failed.source}: {failed.message}")
            analysis.process(on_progress=log_progress)
            if not analysis.save():
                logger.warning("Snapshot could not be saved; results are not cached")
        elif analysis.resume():
            logger.info("No input files found, using cached snapshot")
        else:
            raise FileNotFoundError(f"No input files found in {settings.INPUT_DIR} and no cached snapshot")

        logger.info(analysis.report_text())

        os.makedirs(settings.OUTPUT_DIR, exist_ok=True)
        results = {
            'computed_at': analysis.computed_at,
            'summary': analysis.summary_stats(),
            'figures': analysis.figures(),
            'top_artists': analysis.top_artists(),
            'top_albums': analysis.top_albums(),
            'yearly_series': analysis.yearly_series(),
            'album_purchase_alternative': analysis.album_purchase_alternative(),
        }
        with open(os.path.join(settings.OUTPUT_DIR, "results.json"), 'w', encoding='utf-8') as f:
            f.write(json_dumps(results, indent=2, ensure_ascii=False))
        with open(os.path.join(settings.OUTPUT_DIR, "artistData.txt"), 'w', encoding='utf-8') as f:
            f.write(analysis.artist_export())

        logger.info(f"Results written to {settings.OUTPUT_DIR}")

    except Exception as e:
        logger.error(f"Error during statistics generation: {e}")
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.dispose()

if __name__ == "__main__":
    run()
