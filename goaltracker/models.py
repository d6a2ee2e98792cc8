from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime, String, Text
from datetime import datetime
Base = declarative_base()


class KVEntry(Base):
    __tablename__ = "kv_entries"
    key = Column(String, primary_key=True)                 # e.g. "goals_habits"
    value = Column(Text, nullable=False)                   # full JSON snapshot of one collection
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
