from sqlalchemy import BigInteger, Column, DateTime, Float, Index, Integer, Text, func, text

from catalog.db.types import TagArray
from .base import Base


class Game(Base):
    __tablename__ = 'games'
    # SQLite only autoincrements INTEGER PRIMARY KEY columns
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    title = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    runtime = Column(Integer, nullable=False)
    genres = Column(TagArray(), nullable=False)
    description = Column(TagArray(), nullable=False, default=list)
    size = Column(Float, nullable=False, default=0.0)
    price = Column(Float, nullable=False, default=0.0)
    version = Column(Integer, nullable=False, default=1, server_default=text("1"))

    __table_args__ = (
        Index('idx_games_year', 'year'),
        Index('idx_games_runtime', 'runtime'),
    )
