"""
Testing the HTTP endpoints (secret fixed at 42 by the client fixture).
"""
from core.game_manager import GameManager
from core.exceptions import ConcurrentRoundUpdate


def start(client, names=("Alice", "Bob"), difficulty="medium"):
    response = client.post("/api/games", json={"difficulty": difficulty, "player_names": list(names)})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_start_game(client):
    state = start(client)

    assert state["difficulty"] == "medium"
    assert state["range_max"] == 100
    assert state["current_player"] == "Alice"
    assert state["remaining_attempts"] == 5
    assert state["max_attempts"] == 5
    assert state["is_over"] is False
    assert state["status"] == "active"
    assert state["secret_number"] is None
    assert [p["name"] for p in state["players"]] == ["Alice", "Bob"]


def test_start_game_needs_two_players(client):
    response = client.post("/api/games", json={"difficulty": "easy", "player_names": ["", "  ", "Alice"]})

    assert response.status_code == 400
    assert "2 players" in response.json()["detail"]


def test_start_game_unknown_difficulty(client):
    response = client.post("/api/games", json={"difficulty": "nightmare", "player_names": ["A", "B"]})

    assert response.status_code == 422


def test_guess_flow_until_win(client):
    game_id = start(client)["game_id"]

    response = client.post(f"/api/games/{game_id}/guess", json={"guess": 50})
    body = response.json()
    assert response.status_code == 200
    assert body["outcome"] == "too_high"
    assert body["message"] == "Too high!"
    assert body["guessed_by"] == "Alice"
    assert body["current_player"] == "Bob"

    body = client.post(f"/api/games/{game_id}/guess", json={"guess": "42"}).json()
    assert body["outcome"] == "correct"
    assert body["winner"] == "Bob"
    assert body["is_over"] is True
    assert body["status"] == "won"
    assert body["current_player"] is None
    assert body["secret_number"] == 42
    assert body["message"] == "Congratulations Bob, you found 42!"

    game = client.get(f"/api/games/{game_id}").json()
    assert {p["name"]: p["score"] for p in game["players"]} == {"Alice": 0, "Bob": 10}


def test_guess_after_round_over(client):
    game_id = start(client)["game_id"]
    client.post(f"/api/games/{game_id}/guess", json={"guess": 42})

    response = client.post(f"/api/games/{game_id}/guess", json={"guess": 1})

    assert response.status_code == 409


def test_non_numeric_guess_rejected(client):
    game_id = start(client)["game_id"]

    response = client.post(f"/api/games/{game_id}/guess", json={"guess": "abc"})

    assert response.status_code == 422
    assert client.get(f"/api/games/{game_id}/state").json()["players"][0]["attempts_used"] == 0


def test_state_restart_and_reset(client):
    game_id = start(client)["game_id"]
    client.post(f"/api/games/{game_id}/guess", json={"guess": 42})

    state = client.get(f"/api/games/{game_id}/state").json()
    assert state["is_over"] is True
    assert state["remaining_attempts"] == 0

    restarted = client.post(f"/api/games/{game_id}/restart").json()
    assert restarted["is_over"] is False
    assert restarted["current_player"] == "Alice"
    assert [p["score"] for p in restarted["players"]] == [10, 0]
    assert [p["attempts_used"] for p in restarted["players"]] == [0, 0]

    assert client.delete(f"/api/games/{game_id}/session").json() == {"status": "ok"}
    assert client.get(f"/api/games/{game_id}/state").status_code == 409
    assert client.post(f"/api/games/{game_id}/restart").status_code == 409
    assert client.post(f"/api/games/{game_id}/guess", json={"guess": 1}).status_code == 409


def test_list_games(client):
    start(client, names=("Alice", "Bob"))
    start(client, names=("Carol", "Dave"), difficulty="hard")

    games = client.get("/api/games").json()

    assert len(games) == 2
    assert [p["name"] for p in games[0]["players"]] == ["Carol", "Dave"]
    assert games[0]["difficulty"] == "hard"


def test_get_missing_game(client):
    assert client.get("/api/games/999").status_code == 404


def test_start_game_with_no_players(client):
    response = client.post("/api/games", json={"difficulty": "easy", "player_names": []})

    assert response.status_code == 400
    assert "got 0" in response.json()["detail"]


def test_player_name_length_limit(client):
    too_long = client.post("/api/games", json={"player_names": ["A" * 101, "Bob"]})
    assert too_long.status_code == 422

    # surrounding spaces do not count towards the limit
    state = start(client, names=("  " + "A" * 100 + "  ", "Bob"))
    assert state["players"][0]["name"] == "A" * 100


def test_conflicting_guess_returns_409(client, monkeypatch):
    game_id = start(client)["game_id"]

    def conflict(db, game_id, guess, engine):
        raise ConcurrentRoundUpdate(game_id)

    monkeypatch.setattr(GameManager, "submit_guess", staticmethod(conflict))

    response = client.post(f"/api/games/{game_id}/guess", json={"guess": 10})

    assert response.status_code == 409
    assert "another request" in response.json()["detail"]
