"""
Testing that two requests guessing in the same game cannot overwrite each other.

Uses a file-backed SQLite database: FOR UPDATE is a no-op there, so the
round version column is what serializes the writes.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database import Base
from models import Difficulty, RoundSession
from core.game_manager import GameManager
from core.exceptions import ConcurrentRoundUpdate
from services import round_store


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'number_guess.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def game_id(session_factory, make_engine):
    db = session_factory()
    try:
        game, _ = GameManager.start_game(db, Difficulty.MEDIUM, ["Alice", "Bob"], make_engine(42))
        return game.id
    finally:
        db.close()


def test_stale_round_write_is_rejected(session_factory, game_id, make_engine):
    engine = make_engine(42)
    first, second = session_factory(), session_factory()
    try:
        # both requests read the same round before either writes
        round_a = round_store.load_round(first, game_id, for_update=True)
        round_b = round_store.load_round(second, game_id, for_update=True)

        assert engine.submit_guess(round_a, 10).player_name == "Alice"
        round_store.save_round(first, game_id, round_a)
        first.commit()

        assert engine.submit_guess(round_b, 20).player_name == "Alice"
        with pytest.raises(ConcurrentRoundUpdate):
            round_store.save_round(second, game_id, round_b)
        second.rollback()

        stored = round_store.load_round(second, game_id)
        assert [p.attempts_used for p in stored.players] == [1, 0]
        assert stored.current_player_index == 1
    finally:
        first.close()
        second.close()


def test_retry_after_conflict_uses_fresh_state(session_factory, game_id, make_engine):
    engine = make_engine(42)
    first, second = session_factory(), session_factory()
    try:
        round_a = round_store.load_round(first, game_id, for_update=True)
        round_b = round_store.load_round(second, game_id, for_update=True)

        engine.submit_guess(round_a, 10)
        round_store.save_round(first, game_id, round_a)
        first.commit()

        engine.submit_guess(round_b, 20)
        with pytest.raises(ConcurrentRoundUpdate):
            round_store.save_round(second, game_id, round_b)
        second.rollback()

        outcome, round_ = GameManager.submit_guess(second, game_id, 20, engine)

        assert outcome.player_name == "Bob"
        assert [p.attempts_used for p in round_.players] == [1, 1]
        assert round_.current_player_index == 0
    finally:
        first.close()
        second.close()


def test_sequential_guesses_bump_the_version(session_factory, game_id, make_engine):
    engine = make_engine(42)
    db = session_factory()
    try:
        GameManager.submit_guess(db, game_id, 10, engine)
        GameManager.submit_guess(db, game_id, 20, engine)

        assert db.query(RoundSession).filter(RoundSession.game_id == game_id).one().version == 3
    finally:
        db.close()
