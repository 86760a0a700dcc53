"""
回合儲存服務：每個遊戲的進行中回合

取代原本的 per-client session：完整的 Round（秘密數字、玩家、輪到誰、是否結束）
以 game id 為 key 保存在請求之間。只負責讀、寫、清除，不含遊戲規則。
"""
from typing import Optional
import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models import RoundSession
from core.locks import with_round_session_lock
from core.round_engine import Round
from core.exceptions import ConcurrentRoundUpdate

logger = logging.getLogger(__name__)


def load_round(db: Session, game_id: int, for_update: bool = False) -> Optional[Round]:
    """
    讀取遊戲的進行中回合

    參數：
        db: SQLAlchemy Session
        game_id: 遊戲 ID
        for_update: 鎖定該列直到 transaction 結束

    返回：
        Round，若遊戲沒有進行中的回合則為 None
    """
    if for_update:
        row = with_round_session_lock(game_id, db).first()
    else:
        row = db.query(RoundSession).filter(RoundSession.game_id == game_id).first()

    if not row:
        return None
    return Round.from_dict(row.state)


def save_round(db: Session, game_id: int, round_: Round) -> RoundSession:
    """
    寫入（新增或覆蓋）回合

    注意：
        - 只 flush 不 commit（讓外層 transaction 處理）
        - 更新時比對讀取時的版本號；期間被其他請求寫過就拋出異常

    異常：
        ConcurrentRoundUpdate: 回合已被其他請求更新
    """
    row = db.query(RoundSession).filter(RoundSession.game_id == game_id).first()
    if row:
        row.state = round_.to_dict()
    else:
        row = RoundSession(game_id=game_id, state=round_.to_dict())
        db.add(row)

    try:
        db.flush()
    except StaleDataError:
        logger.warning(f"Stale round write rejected for game {game_id}")
        raise ConcurrentRoundUpdate(game_id)
    return row


def clear_round(db: Session, game_id: int) -> bool:
    """
    清除回合

    返回：
        True 如果有回合被刪除，False 如果本來就沒有
    """
    deleted = db.query(RoundSession).filter(RoundSession.game_id == game_id).delete()
    db.flush()
    if deleted:
        logger.info(f"Cleared round session for game {game_id}")
    return bool(deleted)
