"""
結果服務：遊戲紀錄與最終分數（永久保存）
"""
from typing import Iterable, List
import logging

from sqlalchemy.orm import Session, selectinload

from models import Game, Player, Difficulty, utcnow
from core.locks import with_game_lock
from core.exceptions import GameNotFound

logger = logging.getLogger(__name__)


def create_game(db: Session, difficulty: Difficulty, player_names: Iterable[str]) -> Game:
    """
    建立新遊戲與玩家（分數 0）

    只 flush 不 commit（讓外層 transaction 處理）
    """
    game = Game(difficulty=difficulty, played_at=utcnow())
    for name in player_names:
        game.players.append(Player(name=name, score=0))

    db.add(game)
    db.flush()  # 取得 game.id
    return game


def save_scores(db: Session, game_id: int, players) -> None:
    """
    把每位玩家的分數寫回遊戲紀錄

    以（玩家名稱, 遊戲）upsert：已存在就更新，不存在就新增

    參數：
        db: SQLAlchemy Session
        game_id: 遊戲 ID
        players: PlayerState 列表（name, score）

    異常：
        GameNotFound: 遊戲不存在
    """
    game = with_game_lock(game_id, db).first()
    if not game:
        raise GameNotFound(game_id)

    existing = {
        p.name: p
        for p in db.query(Player).filter(Player.game_id == game_id).all()
    }

    for state in players:
        record = existing.get(state.name)
        if record:
            record.score = state.score
        else:
            db.add(Player(game_id=game_id, name=state.name, score=state.score))

    db.flush()
    logger.info(f"Saved scores for game {game_id}")


def list_games(db: Session) -> List[Game]:
    """所有遊戲與玩家，新的在前"""
    return (
        db.query(Game)
        .options(selectinload(Game.players))
        .order_by(Game.played_at.desc(), Game.id.desc())
        .all()
    )


def get_game(db: Session, game_id: int) -> Game:
    game = db.query(Game).filter(Game.id == game_id).first()
    if not game:
        raise GameNotFound(game_id)
    return game
