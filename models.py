"""
資料表模型

- Game / Player：永久保存的遊戲紀錄（每場遊戲的最終分數）
- RoundSession：進行中回合，每個遊戲最多一列，reset 時刪除
"""
from datetime import datetime, timezone
import enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Enum as SQLEnum,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base


PLAYER_NAME_MAX_LENGTH = 100


def utcnow():
    return datetime.now(timezone.utc)


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    difficulty = Column(SQLEnum(Difficulty), nullable=False)
    played_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    players = relationship(
        "Player",
        back_populates="game",
        order_by="Player.id",
        cascade="all, delete-orphan",
    )
    round_session = relationship(
        "RoundSession",
        back_populates="game",
        uselist=False,
        cascade="all, delete-orphan",
    )


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("game_id", "name", name="uq_players_game_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    name = Column(String(PLAYER_NAME_MAX_LENGTH), nullable=False)
    score = Column(Integer, default=0, nullable=False)

    game = relationship("Game", back_populates="players")


class RoundSession(Base):
    __tablename__ = "round_sessions"

    game_id = Column(Integer, ForeignKey("games.id"), primary_key=True)
    # Round.to_dict() 的內容
    state = Column(JSON, nullable=False)
    # 樂觀鎖版本號：UPDATE ... WHERE version = 讀到的版本，對不上就 StaleDataError
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    game = relationship("Game", back_populates="round_session")

    __mapper_args__ = {"version_id_col": version}
