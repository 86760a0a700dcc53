"""
Request / Response schemas
"""
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints

from models import Difficulty, PLAYER_NAME_MAX_LENGTH
from core.round_engine import OutcomeKind, RoundStatus

# 去除空白後才檢查長度；空白、重複、人數不足交給 normalize_player_names（400）
PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=PLAYER_NAME_MAX_LENGTH)]


# ============ Requests ============

class GameCreate(BaseModel):
    difficulty: Difficulty = Difficulty.MEDIUM
    player_names: List[PlayerName]


class GuessSubmit(BaseModel):
    # "12" 可接受；"abc" / 12.5 在進入 engine 前就回 422
    guess: int


# ============ Responses ============

class PlayerStateResponse(BaseModel):
    name: str
    score: int
    attempts_used: int


class RoundStateResponse(BaseModel):
    game_id: int
    difficulty: Difficulty
    range_max: int
    status: RoundStatus
    current_player: Optional[str]
    remaining_attempts: int
    max_attempts: int
    is_over: bool
    winner: Optional[str] = None
    # 回合結束後才公開
    secret_number: Optional[int] = None
    players: List[PlayerStateResponse]


class GuessResponse(RoundStateResponse):
    outcome: OutcomeKind
    guessed_by: str
    message: str


class PlayerRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    score: int


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    difficulty: Difficulty
    played_at: datetime
    players: List[PlayerRecordResponse]


class StatusResponse(BaseModel):
    status: str
