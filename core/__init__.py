"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- RoundEngine：猜數字回合狀態機（純計算）
- GameManager：管理 Game 的生命週期，在 transaction 內呼叫 RoundEngine
- Locks：並發控制工具
- Exceptions：遊戲規則異常
"""
