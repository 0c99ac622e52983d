"""SQLAlchemy database models for the local cache"""
import datetime

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)

class StorageSlot(Base):
    """
    One persisted value under a fixed key.
    Holds the serialized summary snapshot and the display preferences.
    """
    __tablename__ = 'storage_slots'

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
