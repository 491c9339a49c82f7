from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from shortener_app.database.connection import Base


class URL(Base):
    """
    One long/short mapping.

    short_code is the uniqueness key: the unique constraint is what makes
    concurrent inserts of the same code fail for all but one writer.
    long_url has no uniqueness, the same destination may have many codes.
    Rows are never updated or deleted.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Note: unique=True automatically creates an index in SQLAlchemy
    short_code = Column(String(8), unique=True, nullable=False, index=True)
    long_url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
