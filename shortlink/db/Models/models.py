from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    username = Column(String, primary_key=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow)


class URLMapping(Base):
    __tablename__ = "url_mappings"

    # 6 lowercase hex characters
    code = Column(String(6), primary_key=True, index=True)
    target_url = Column(String, nullable=False)
    # No cascading delete; users are never removed
    owner_username = Column(String, ForeignKey("users.username"), index=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow)
