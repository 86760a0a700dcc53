"""
Game API Endpoints

職責：
1. 登記玩家、開始遊戲
2. 提交猜測、重新開始、重置回合
3. 查詢回合狀態與已保存的遊戲紀錄

遊戲規則在 RoundEngine，流程在 GameManager；這裡只負責 HTTP 與 Manager 之間的轉換
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from database import get_db
from dependencies import get_engine
from schemas import (
    GameCreate,
    GuessSubmit,
    GuessResponse,
    RoundStateResponse,
    PlayerStateResponse,
    GameResponse,
    StatusResponse
)
from core.game_manager import GameManager
from core.round_engine import RoundEngine, Round, GuessOutcome
from core.exceptions import (
    InvalidConfiguration,
    RoundAlreadyOver,
    InvalidState,
    ConcurrentRoundUpdate,
    GameNotFound
)
from services.message_service import describe_outcome

router = APIRouter(prefix="/api/games", tags=["games"])
logger = logging.getLogger(__name__)


def _round_state(game_id: int, round_: Round, engine: RoundEngine) -> dict:
    """回合的顯示資料；回合進行中不透露秘密數字"""
    return dict(
        game_id=game_id,
        difficulty=round_.difficulty,
        range_max=engine.upper_bound(round_.difficulty),
        status=round_.status,
        current_player=None if round_.is_over else round_.current_player.name,
        remaining_attempts=engine.remaining_attempts(round_),
        max_attempts=round_.max_attempts_per_player,
        is_over=round_.is_over,
        winner=round_.winner,
        secret_number=round_.secret_number if round_.is_over else None,
        players=[
            PlayerStateResponse(name=p.name, score=p.score, attempts_used=p.attempts_used)
            for p in round_.players
        ],
    )


def _guess_response(game_id: int, outcome: GuessOutcome, round_: Round, engine: RoundEngine) -> GuessResponse:
    return GuessResponse(
        **_round_state(game_id, round_, engine),
        outcome=outcome.kind,
        guessed_by=outcome.player_name,
        message=describe_outcome(outcome, round_),
    )


@router.post("", response_model=RoundStateResponse, status_code=201)
def start_game(
    game_data: GameCreate,
    db: Session = Depends(get_db),
    engine: RoundEngine = Depends(get_engine)
):
    """
    開始遊戲

    前置條件：
    - 至少 2 個非空白、不重複的玩家名稱

    返回：
        初始回合狀態（輪到第一位玩家）
    """
    try:
        game, round_ = GameManager.start_game(
            db, game_data.difficulty, game_data.player_names, engine
        )
        return RoundStateResponse(**_round_state(game.id, round_, engine))

    except InvalidConfiguration as e:
        logger.warning(f"Rejected game creation: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start game: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("", response_model=List[GameResponse])
def list_games(db: Session = Depends(get_db)):
    """所有已保存的遊戲與玩家分數，新的在前"""
    try:
        return GameManager.list_games(db)
    except Exception as e:
        logger.error(f"Failed to list games: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: int, db: Session = Depends(get_db)):
    try:
        return GameManager.get_game(db, game_id)
    except GameNotFound:
        raise HTTPException(status_code=404, detail="Game not found")
    except Exception as e:
        logger.error(f"Failed to get game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/{game_id}/state", response_model=RoundStateResponse)
def get_round_state(
    game_id: int,
    db: Session = Depends(get_db),
    engine: RoundEngine = Depends(get_engine)
):
    """
    取得目前回合狀態

    返回：
        - current_player: 輪到誰（回合結束後為 None）
        - remaining_attempts: 該玩家剩餘次數
        - is_over / winner
    """
    try:
        round_ = GameManager.get_round(db, game_id)
        return RoundStateResponse(**_round_state(game_id, round_, engine))

    except InvalidState as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to get round state: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/guess", response_model=GuessResponse)
def submit_guess(
    game_id: int,
    guess_data: GuessSubmit,
    db: Session = Depends(get_db),
    engine: RoundEngine = Depends(get_engine)
):
    """
    由目前輪到的玩家提交猜測

    流程：
    1. GameManager 鎖定回合並套用猜測
    2. 猜中時保存分數
    3. 返回結果與更新後的回合狀態

    錯誤：
        409: 沒有進行中的回合、回合已結束、或被並發請求搶先更新
    """
    try:
        outcome, round_ = GameManager.submit_guess(db, game_id, guess_data.guess, engine)
        return _guess_response(game_id, outcome, round_, engine)

    except (RoundAlreadyOver, InvalidState, ConcurrentRoundUpdate) as e:
        logger.warning(f"Rejected guess for game {game_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to submit guess: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/{game_id}/restart", response_model=RoundStateResponse)
def restart_game(
    game_id: int,
    db: Session = Depends(get_db),
    engine: RoundEngine = Depends(get_engine)
):
    """
    同樣的玩家與難度再玩一輪

    保留分數、清除次數、重新抽秘密數字
    """
    try:
        round_ = GameManager.restart_game(db, game_id, engine)
        return RoundStateResponse(**_round_state(game_id, round_, engine))

    except (InvalidState, ConcurrentRoundUpdate) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to restart game: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/{game_id}/session", response_model=StatusResponse)
def reset_game(game_id: int, db: Session = Depends(get_db)):
    """丟棄進行中回合；已保存的分數保留"""
    try:
        GameManager.reset_game(db, game_id)
        return StatusResponse(status="ok")

    except Exception as e:
        logger.error(f"Failed to reset game: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal error")
