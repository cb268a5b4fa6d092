"""Unit tests for src/db/memory_repository.py"""

from dataclasses import replace
from threading import Thread

import pytest

from src.core.exceptions import DuplicateGameError, WriteConflictError
from src.core.models import GameModel
from src.db.memory_repository import InMemoryGameRepository
from src.db.repository import Expected

STARTING_LAYOUT = ".b.b.b.b/b.b.b.b./.b.b.b.b/......../......../r.r.r.r./.r.r.r.r/r.r.r.r."


@pytest.fixture
def repo() -> InMemoryGameRepository:
    return InMemoryGameRepository()


@pytest.fixture
def game() -> GameModel:
    return GameModel(
        game_id="lunch-break",
        board=STARTING_LAYOUT,
        turn="red",
        status="active",
        players={"red": "player_red", "black": "player_black"},
    )


def test_create_and_get(repo: InMemoryGameRepository, game: GameModel) -> None:
    assert repo.create_game(game) == game
    assert repo.get_game(game.game_id) == game
    assert repo.get_game("unknown") is None


def test_duplicate_id(repo: InMemoryGameRepository, game: GameModel) -> None:
    repo.create_game(game)
    with pytest.raises(DuplicateGameError):
        repo.create_game(game)


def test_returned_records_are_copies(
    repo: InMemoryGameRepository, game: GameModel
) -> None:
    """Mutating what the repository hands out does not change the stored record."""
    repo.create_game(game)
    fetched = repo.get_game(game.game_id)
    assert fetched is not None
    fetched.moves.append("52-43")
    fetched.players["black"] = "impostor"

    stored = repo.get_game(game.game_id)
    assert stored is not None
    assert stored.moves == []
    assert stored.players["black"] == "player_black"


def test_update_bumps_revision(repo: InMemoryGameRepository, game: GameModel) -> None:
    stored = repo.create_game(game)
    updated = repo.update_game(
        game.game_id, replace(stored, turn="black"), Expected.of(stored)
    )
    assert updated is not None
    assert updated.revision == 1
    assert updated.turn == "black"


def test_stale_update_is_rejected(
    repo: InMemoryGameRepository, game: GameModel
) -> None:
    stored = repo.create_game(game)
    repo.update_game(game.game_id, replace(stored, turn="black"), Expected.of(stored))
    with pytest.raises(WriteConflictError):
        repo.update_game(
            game.game_id, replace(stored, status="forfeited"), Expected.of(stored)
        )


def test_update_unknown_game(repo: InMemoryGameRepository, game: GameModel) -> None:
    assert repo.update_game(game.game_id, game, Expected.of(game)) is None


def test_racing_writers_single_winner(
    repo: InMemoryGameRepository, game: GameModel
) -> None:
    """Many writers holding the same snapshot: exactly one update goes through."""
    stored = repo.create_game(game)
    expected = Expected.of(stored)
    outcomes: list[str] = []

    def _write(index: int) -> None:
        try:
            repo.update_game(
                game.game_id, replace(stored, moves=[f"writer-{index}"]), expected
            )
            outcomes.append("ok")
        except WriteConflictError:
            outcomes.append("conflict")

    threads = [Thread(target=_write, args=(index,)) for index in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    final = repo.get_game(game.game_id)
    assert final is not None
    assert final.revision == 1


def test_delete_and_clear(repo: InMemoryGameRepository, game: GameModel) -> None:
    repo.create_game(game)
    assert repo.delete_game(game.game_id) == game
    assert repo.delete_game(game.game_id) is None

    repo.create_game(game)
    repo.clear()
    assert repo.get_game(game.game_id) is None


def test_deleted_record_is_detached(
    repo: InMemoryGameRepository, game: GameModel
) -> None:
    """The record handed back by delete_game is no longer tied to anything stored under that ID."""
    repo.create_game(game)
    deleted = repo.delete_game(game.game_id)
    assert deleted is not None

    repo.create_game(game)
    deleted.moves.append("52-43")
    deleted.players["black"] = "impostor"

    stored = repo.get_game(game.game_id)
    assert stored == game
