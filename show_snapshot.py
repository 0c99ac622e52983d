from unwrapped_stats.analysis import ListeningAnalysis
from unwrapped_stats.config import settings
from unwrapped_stats.db import Database
from unwrapped_stats.services.storage import SnapshotStore
from unwrapped_stats.utils.json_encoder import json_dumps

# Initialize database
db = Database(settings.DATABASE_URL)
db.init()

# Restore the cached snapshot
analysis = ListeningAnalysis(settings, store=SnapshotStore(db))

if analysis.resume():
    print(analysis.report_text())
    print(json_dumps(analysis.summary_stats(), indent=2, ensure_ascii=False))
else:
    print("No stored data.")

db.dispose()
