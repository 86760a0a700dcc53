"""
自定義異常類別

集中管理所有遊戲規則異常，方便 API 層統一處理
"""


class NumberGuessException(Exception):
    """所有遊戲異常的基類"""
    pass


# ============ 設定相關異常 ============

class InvalidConfiguration(NumberGuessException):
    """無法建立回合（有效玩家少於 2 人、名稱重複、難度不存在）"""
    pass


# ============ Round 相關異常 ============

class RoundAlreadyOver(NumberGuessException):
    """回合已結束仍提交猜測"""
    pass


class InvalidState(NumberGuessException):
    """操作需要一個不存在的回合（例如 reset 之後 restart）"""
    pass


class ConcurrentRoundUpdate(NumberGuessException):
    """同一回合被另一個請求搶先更新（版本號不符），本次寫入被拒絕"""
    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Round of game {game_id} was updated by another request, retry")


# ============ Game 相關異常 ============

class GameNotFound(NumberGuessException):
    """遊戲紀錄不存在"""
    def __init__(self, game_id):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")
