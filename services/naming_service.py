"""
命名服務：整理玩家名稱

純計算邏輯，不涉及狀態轉換
"""
from typing import Iterable, List

from core.exceptions import InvalidConfiguration

MIN_PLAYERS = 2


def normalize_player_names(player_names: Iterable[str]) -> List[str]:
    """
    整理報名表單輸入的玩家名稱

    規則：
    - 去除前後空白
    - 先丟掉空白名稱再計算人數
    - 至少要剩 2 個名稱
    - 同一回合內名稱不可重複（去除空白後比較）

    參數：
        player_names: 原始名稱，依輪流順序

    返回：
        去除空白後的名稱，保持輸入順序

    異常：
        InvalidConfiguration: 有效名稱少於 2 個，或名稱重複

    範例：
        ["  Alice ", "", "Bob"] -> ["Alice", "Bob"]
    """
    names = [(name or "").strip() for name in player_names]
    names = [name for name in names if name]

    if len(names) < MIN_PLAYERS:
        raise InvalidConfiguration(
            f"At least {MIN_PLAYERS} players are required, got {len(names)}"
        )

    seen = set()
    for name in names:
        if name in seen:
            raise InvalidConfiguration(f"Duplicate player name: {name}")
        seen.add(name)

    return names
