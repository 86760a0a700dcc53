"""
服務層

這個 package 包含儲存與顯示輔助，不負責狀態轉換：
- round_store：每個遊戲的進行中回合
- results_service：遊戲紀錄與最終分數
- naming_service：玩家名稱整理
- message_service：猜測結果回饋文字
"""
