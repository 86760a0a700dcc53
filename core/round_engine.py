"""
Round Engine：猜數字回合的狀態機

職責：
1. 難度對應秘密數字範圍
2. 抽出秘密數字
3. 計算次數、輪替玩家
4. 判定猜中 / 無人獲勝

狀態機（每個 Round）：
    ACTIVE --miss, attempts remain--> ACTIVE
    ACTIVE --correct guess---------> WON
    ACTIVE --everyone exhausted----> EXHAUSTED
    WON / EXHAUSTED --restart------> ACTIVE   （新秘密數字、清除次數、保留分數）

純計算邏輯，不碰資料庫與 HTTP。
Round 的保存由 services/round_store.py 負責
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import enum
import logging
import random

from models import Difficulty
from core.exceptions import InvalidConfiguration, RoundAlreadyOver, InvalidState
from services.naming_service import normalize_player_names

logger = logging.getLogger(__name__)


class OutcomeKind(str, enum.Enum):
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    CORRECT = "correct"
    NO_WINNER = "no_winner"


class RoundStatus(str, enum.Enum):
    ACTIVE = "active"
    WON = "won"
    EXHAUSTED = "exhausted"


@dataclass
class EngineConfig:
    ranges: Dict[Difficulty, int] = field(default_factory=lambda: {
        Difficulty.EASY: 50,
        Difficulty.MEDIUM: 100,
        Difficulty.HARD: 200,
    })
    max_attempts_per_player: int = 5
    correct_guess_reward: int = 10

    @classmethod
    def from_settings(cls, settings) -> "EngineConfig":
        return cls(
            ranges={
                Difficulty.EASY: settings.easy_max,
                Difficulty.MEDIUM: settings.medium_max,
                Difficulty.HARD: settings.hard_max,
            },
            max_attempts_per_player=settings.max_attempts,
            correct_guess_reward=settings.correct_guess_reward,
        )


@dataclass
class PlayerState:
    name: str
    score: int = 0
    attempts_used: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "attempts_used": self.attempts_used}

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerState":
        return cls(
            name=data["name"],
            score=int(data.get("score", 0)),
            attempts_used=int(data.get("attempts_used", 0)),
        )


@dataclass
class Round:
    difficulty: Difficulty
    secret_number: int
    players: List[PlayerState]
    max_attempts_per_player: int
    current_player_index: int = 0
    is_over: bool = False
    winner: Optional[str] = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def status(self) -> RoundStatus:
        if not self.is_over:
            return RoundStatus.ACTIVE
        return RoundStatus.WON if self.winner is not None else RoundStatus.EXHAUSTED

    def to_dict(self) -> dict:
        """可轉成 JSON 的快照，由 round_store 保存"""
        return {
            "difficulty": self.difficulty.value,
            "secret_number": self.secret_number,
            "players": [p.to_dict() for p in self.players],
            "max_attempts_per_player": self.max_attempts_per_player,
            "current_player_index": self.current_player_index,
            "is_over": self.is_over,
            "winner": self.winner,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Round":
        return cls(
            difficulty=Difficulty(data["difficulty"]),
            secret_number=int(data["secret_number"]),
            players=[PlayerState.from_dict(p) for p in data["players"]],
            max_attempts_per_player=int(data["max_attempts_per_player"]),
            current_player_index=int(data.get("current_player_index", 0)),
            is_over=bool(data.get("is_over", False)),
            winner=data.get("winner"),
        )


@dataclass
class GuessOutcome:
    kind: OutcomeKind
    player_name: str
    guess: int

    @property
    def is_correct(self) -> bool:
        return self.kind == OutcomeKind.CORRECT


class RoundEngine:
    """猜數字回合狀態機"""

    def __init__(self, config: Optional[EngineConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()

        if self.config.max_attempts_per_player < 1:
            raise InvalidConfiguration(
                f"max_attempts_per_player must be >= 1, got {self.config.max_attempts_per_player}"
            )

    def upper_bound(self, difficulty: Difficulty) -> int:
        try:
            bound = self.config.ranges[Difficulty(difficulty)]
        except (KeyError, ValueError):
            raise InvalidConfiguration(f"Unknown difficulty: {difficulty!r}")

        if bound < 1:
            raise InvalidConfiguration(f"Upper bound for {difficulty} must be >= 1, got {bound}")
        return bound

    def draw_secret(self, difficulty: Difficulty) -> int:
        """在閉區間 [1, upper_bound] 內均勻抽取"""
        return self.rng.randint(1, self.upper_bound(difficulty))

    def create_round(self, difficulty: Difficulty, player_names: List[str]) -> Round:
        """
        建立回合

        異常：
            InvalidConfiguration: 有效玩家少於 2 人、名稱重複、難度不存在
        """
        names = normalize_player_names(player_names)
        secret = self.draw_secret(difficulty)
        difficulty = Difficulty(difficulty)

        round_ = Round(
            difficulty=difficulty,
            secret_number=secret,
            players=[PlayerState(name=name) for name in names],
            max_attempts_per_player=self.config.max_attempts_per_player,
        )
        logger.debug(f"Created round ({difficulty.value}, {len(names)} players, secret={secret})")
        return round_

    def submit_guess(self, round_: Round, guess: int) -> GuessOutcome:
        """
        套用目前玩家的一次猜測

        流程：
        1. 目前玩家 = players[current_player_index]
        2. attempts_used += 1
        3. 與秘密數字比較（猜中 -> 加分、回合結束）
        4. 沒猜中就輪到下一位還有次數的玩家；
           沒有人還有次數 -> NO_WINNER、回合結束

        異常：
            RoundAlreadyOver: 回合已結束
        """
        if round_.is_over:
            raise RoundAlreadyOver("The round is over, restart or reset to keep playing")

        player = round_.current_player
        player.attempts_used += 1

        if guess == round_.secret_number:
            player.score += self.config.correct_guess_reward
            round_.is_over = True
            round_.winner = player.name
            return GuessOutcome(OutcomeKind.CORRECT, player.name, guess)

        kind = OutcomeKind.TOO_LOW if guess < round_.secret_number else OutcomeKind.TOO_HIGH

        next_index = self._next_player_index(round_)
        if next_index is None:
            round_.is_over = True
            return GuessOutcome(OutcomeKind.NO_WINNER, player.name, guess)

        round_.current_player_index = next_index
        return GuessOutcome(kind, player.name, guess)

    def restart_round(self, round_: Optional[Round]) -> Round:
        """
        同樣的玩家與難度再玩一輪

        保留分數；次數、輪次、秘密數字重置

        異常：
            InvalidState: 沒有可以重新開始的回合
        """
        if round_ is None:
            raise InvalidState("No round to restart")

        for player in round_.players:
            player.attempts_used = 0

        round_.secret_number = self.draw_secret(round_.difficulty)
        round_.current_player_index = 0
        round_.is_over = False
        round_.winner = None
        return round_

    @staticmethod
    def remaining_attempts(round_: Round) -> int:
        if round_.is_over:
            return 0
        return max(round_.max_attempts_per_player - round_.current_player.attempts_used, 0)

    @staticmethod
    def _next_player_index(round_: Round) -> Optional[int]:
        # 從目前玩家的下一位開始循環，目前玩家最後才檢查
        count = len(round_.players)
        for step in range(1, count + 1):
            index = (round_.current_player_index + step) % count
            if round_.players[index].attempts_used < round_.max_attempts_per_player:
                return index
        return None
