"""
Game Manager：管理一場遊戲及其進行中回合的生命週期

職責：
1. 開始遊戲（驗證玩家、建立紀錄、保存回合）
2. 在 per-game 鎖保護下套用猜測
3. 有人猜中時寫入最終分數
4. 重新開始 / 重置回合
5. 查詢遊戲紀錄

原則：
- 遊戲規則只在 RoundEngine，儲存只在 services
- 這裡只負責在 transaction 內依序呼叫它們
"""
from sqlalchemy.orm import Session
from typing import List, Tuple
import logging

from models import Game, Difficulty
from core.round_engine import RoundEngine, Round, GuessOutcome
from core.exceptions import InvalidState
from services import round_store, results_service
from database import transactional

logger = logging.getLogger(__name__)


class GameManager:
    """Game 生命週期管理器"""

    @staticmethod
    @transactional
    def start_game(
        db: Session,
        difficulty: Difficulty,
        player_names: List[str],
        engine: RoundEngine
    ) -> Tuple[Game, Round]:
        """
        開始新遊戲

        流程：
        1. 建立回合（驗證玩家名稱與難度）
        2. 建立 Game 與 Players（分數 0）
        3. 保存進行中回合

        異常：
            InvalidConfiguration: 有效玩家少於 2 人、名稱重複、難度不存在
        """
        # 1. 先驗證，再碰資料庫
        round_ = engine.create_round(difficulty, player_names)

        # 2. 永久紀錄
        game = results_service.create_game(
            db, round_.difficulty, [p.name for p in round_.players]
        )

        # 3. 進行中回合
        round_store.save_round(db, game.id, round_)

        logger.info(
            f"Started game {game.id} ({round_.difficulty.value}) "
            f"with players {[p.name for p in round_.players]}"
        )
        return game, round_

    @staticmethod
    @transactional
    def submit_guess(
        db: Session,
        game_id: int,
        guess: int,
        engine: RoundEngine
    ) -> Tuple[GuessOutcome, Round]:
        """
        由目前輪到的玩家提交猜測

        並發安全：
        - PostgreSQL：回合列被 FOR UPDATE 鎖到 commit，第二個請求等待後讀到新狀態
        - SQLite：寫回時比對版本號，被搶先寫入就拋出 ConcurrentRoundUpdate 並 rollback

        異常：
            InvalidState: 遊戲沒有進行中的回合
            RoundAlreadyOver: 回合已結束
            ConcurrentRoundUpdate: 同一回合被另一個請求搶先更新
        """
        # 1. 讀取並鎖定
        round_ = round_store.load_round(db, game_id, for_update=True)
        if round_ is None:
            raise InvalidState(f"Game {game_id} has no active round")

        # 2. 套用猜測並寫回
        outcome = engine.submit_guess(round_, guess)
        round_store.save_round(db, game_id, round_)

        logger.info(
            f"Game {game_id}: {outcome.player_name} guessed {guess} -> {outcome.kind.value}"
        )

        # 3. 只有猜中才寫入分數
        if outcome.is_correct:
            results_service.save_scores(db, game_id, round_.players)

        return outcome, round_

    @staticmethod
    @transactional
    def restart_game(db: Session, game_id: int, engine: RoundEngine) -> Round:
        """
        同樣的玩家與難度再玩一輪（保留分數）

        異常：
            InvalidState: 沒有可以重新開始的回合
            ConcurrentRoundUpdate: 同一回合被另一個請求搶先更新
        """
        round_ = round_store.load_round(db, game_id, for_update=True)
        if round_ is None:
            logger.warning(f"Restart requested for game {game_id} without a round")

        round_ = engine.restart_round(round_)
        round_store.save_round(db, game_id, round_)

        logger.info(f"Restarted round for game {game_id}")
        return round_

    @staticmethod
    @transactional
    def reset_game(db: Session, game_id: int) -> bool:
        """
        丟棄進行中回合（冪等）

        遊戲紀錄與已保存的分數不受影響
        """
        return round_store.clear_round(db, game_id)

    @staticmethod
    def get_round(db: Session, game_id: int) -> Round:
        """
        異常：
            InvalidState: 遊戲沒有進行中的回合
        """
        round_ = round_store.load_round(db, game_id)
        if round_ is None:
            raise InvalidState(f"Game {game_id} has no active round")
        return round_

    @staticmethod
    def get_game(db: Session, game_id: int) -> Game:
        return results_service.get_game(db, game_id)

    @staticmethod
    def list_games(db: Session) -> List[Game]:
        return results_service.list_games(db)
