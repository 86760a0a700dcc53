"""
訊息服務：每次猜測後顯示的回饋文字

只用於顯示：遊戲流程一律由 OutcomeKind 決定，不比對這些字串
"""
from core.round_engine import GuessOutcome, OutcomeKind, Round


def describe_outcome(outcome: GuessOutcome, round_: Round) -> str:
    """
    根據猜測結果產生回饋文字

    範例：
        TOO_LOW   -> "Too low!"
        CORRECT   -> "Congratulations Alice, you found 42!"
        NO_WINNER -> "Unfortunately, no one wins. The number was 42."
    """
    if outcome.kind == OutcomeKind.TOO_LOW:
        return "Too low!"
    elif outcome.kind == OutcomeKind.TOO_HIGH:
        return "Too high!"
    elif outcome.kind == OutcomeKind.CORRECT:
        return f"Congratulations {outcome.player_name}, you found {round_.secret_number}!"
    else:  # no winner
        return f"Unfortunately, no one wins. The number was {round_.secret_number}."
