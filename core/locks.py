"""
並發控制工具

兩層保護，確保同一個遊戲的猜測不會互相覆蓋：

1. 悲觀鎖：SELECT ... FOR UPDATE（PostgreSQL / MySQL）
   第二個請求會在讀取時等待，直到第一個 transaction commit
2. 樂觀鎖：RoundSession.version（所有資料庫，包含 SQLite）
   SQLite 會忽略 FOR UPDATE，且 pysqlite 直到第一個寫入才開始 transaction，
   兩個請求可能讀到同一個版本；後寫入的 UPDATE 會因版本號不符而失敗
   （StaleDataError -> ConcurrentRoundUpdate），不會靜默覆蓋
"""
from sqlalchemy.orm import Session, Query

from models import Game, RoundSession


def with_round_session_lock(game_id: int, db: Session) -> Query:
    """
    鎖定一個遊戲的進行中回合（行級鎖）

    使用場景：
    - 讀取回合、套用猜測、寫回
    - 重新開始回合

    範例：
        row = with_round_session_lock(game_id, db).first()
        if not row:
            raise InvalidState(...)
        row.state = round_.to_dict()
        db.commit()

    注意：
        - nowait=False 表示如果鎖被佔用，會等待
        - 必須在 transaction 內使用（commit 或 rollback 才會釋放）
        - SQLite 下此鎖不生效，由 RoundSession.version 擋下並發寫入
    """
    return db.query(RoundSession).filter(
        RoundSession.game_id == game_id
    ).with_for_update(nowait=False)


def with_game_lock(game_id: int, db: Session) -> Query:
    """鎖定一個 Game（寫入分數時使用）"""
    return db.query(Game).filter(
        Game.id == game_id
    ).with_for_update(nowait=False)
