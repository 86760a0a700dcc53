from functools import lru_cache

from config import get_settings
from core.round_engine import RoundEngine, EngineConfig


@lru_cache()
def get_engine() -> RoundEngine:
    """FastAPI dependency：依設定建立 RoundEngine（測試時可覆寫）"""
    return RoundEngine(EngineConfig.from_settings(get_settings()))
