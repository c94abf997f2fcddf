import pytest

from wordwar.engine import InvalidTimerConfiguration, ManualScheduler
from wordwar.services.game_service import GameService


@pytest.fixture()
def service():
    return GameService(ManualScheduler())


@pytest.fixture()
def events(service):
    received = []
    service.add_listener(lambda event, payload: received.append((event, payload)))
    return received


def finished(events):
    return [payload for event, payload in events if event == "game_finished"]


def test_new_game_hides_answer(service):
    game_id = service.create_game("crane", "u1")
    state = service.get_game_state(game_id)
    assert state.answer is None
    assert state.word_length == 5
    assert state.current_round == 0
    assert state.letter_status == {}
    assert state.timer is None


def test_winning_guess(service, events):
    game_id = service.create_game("CRANE", "u1", reward_score=100, reward_money=50)
    service.make_guess(game_id, "trace", "u1")
    state = service.make_guess(game_id, "crane", "u1")

    assert state.won and state.game_over
    assert state.end_reason == "solved"
    assert state.answer == "CRANE"
    assert state.guesses == ["TRACE", "CRANE"]
    assert state.guess_results[0][0] == ("T", "absent")
    assert state.letter_status["C"] == "correct"

    [summary] = finished(events)
    assert summary["attempts"] == 2
    assert summary["reward_score"] == 100
    assert summary["reward_money"] == 50


def test_running_out_of_attempts(service, events):
    game_id = service.create_game("CRANE", "u1", max_attempts=2, reward_score=100)
    service.make_guess(game_id, "TRACE")
    state = service.make_guess(game_id, "SLATE")

    assert state.game_over and not state.won
    assert state.end_reason == "attempts"
    [summary] = finished(events)
    assert summary["reward_score"] == 0


@pytest.mark.parametrize("guess,error", [
    ("CRANES", "Guess must be exactly 5 letters"),
    ("CR4NE", "Guess must contain only letters"),
    ("", "Guess must be a valid string"),
    (None, "Guess must be a valid string"),
])
def test_invalid_guesses(service, guess, error):
    game_id = service.create_game("CRANE", "u1")
    assert service.is_valid_guess(game_id, guess, "u1") == (False, error)
    assert service.make_guess(game_id, guess, "u1") is None


def test_guess_from_other_player_rejected(service):
    game_id = service.create_game("CRANE", "u1")
    assert service.is_valid_guess(game_id, "TRACE", "u2") == (False, "This game belongs to another player")
    assert service.is_valid_guess("missing", "TRACE") == (False, "Game not found")


def test_no_guesses_after_game_over(service):
    game_id = service.create_game("CRANE", "u1")
    service.make_guess(game_id, "CRANE")
    assert service.is_valid_guess(game_id, "TRACE") == (False, "Game is already over")


def test_timer_expiry_ends_game(service, events):
    game_id = service.create_game("CRANE", "u1", time_limit=3)
    service.scheduler.advance(3)

    state = service.get_game_state(game_id)
    assert state.game_over and not state.won
    assert state.end_reason == "timeout"
    assert state.timer["remaining"] == 0

    ticks = [payload for event, payload in events if event == "timer_tick"]
    assert [tick["timer"]["remaining"] for tick in ticks] == [2, 1, 0]
    assert len(finished(events)) == 1

    service.scheduler.advance(5)
    assert len(finished(events)) == 1


def test_win_stops_timer(service, events):
    game_id = service.create_game("CRANE", "u1", time_limit=30)
    service.scheduler.advance(4)
    service.make_guess(game_id, "CRANE")
    service.scheduler.advance(60)

    state = service.get_game_state(game_id)
    assert state.timer["remaining"] == 26
    assert state.timer["status"] == "stopped"
    assert [summary["reason"] for summary in finished(events)] == ["solved"]


def test_abandon_counts_as_loss(service, events):
    game_id = service.create_game("CRANE", "u1")
    assert service.abandon_game(game_id, "u2") is False
    assert service.abandon_game(game_id, "u1") is True
    assert service.abandon_game(game_id, "u1") is False
    assert [summary["reason"] for summary in finished(events)] == ["abandoned"]


def test_find_active_game(service):
    game_id = service.create_game("CRANE", "u1")
    assert service.find_active_game("u1", "daily") == game_id
    assert service.find_active_game("u1", "room") is None
    service.make_guess(game_id, "CRANE")
    assert service.find_active_game("u1", "daily") is None


def test_cleanup_and_delete(service):
    done = service.create_game("CRANE", "u1")
    running = service.create_game("CRANE", "u2", time_limit=10)
    service.make_guess(done, "CRANE")
    service.games[done]["finished_at"] -= 1000

    assert service.cleanup_finished_games(600) == 1
    assert service.get_game_state(done) is None

    assert service.delete_game(running) is True
    assert service.scheduler.active_jobs == 0
    assert service.delete_game(running) is False


def test_failing_listener_does_not_break_game(service):
    def broken(event, payload):
        raise RuntimeError("boom")

    service.add_listener(broken)
    game_id = service.create_game("CRANE", "u1")
    assert service.make_guess(game_id, "CRANE").won


def test_invalid_creation_arguments(service):
    with pytest.raises(ValueError):
        service.create_game("CRANE", "u1", mode="practice")
    with pytest.raises(ValueError):
        service.create_game("CR4NE", "u1")
    with pytest.raises(InvalidTimerConfiguration):
        service.create_game("CRANE", "u1", time_limit=0)


def test_find_or_create_game_resumes(service):
    game_id, created = service.find_or_create_game("CRANE", "u1", mode="daily", time_limit=30)
    assert created
    assert service.find_or_create_game("CRANE", "u1", mode="daily", time_limit=30) == (game_id, False)
    assert service.scheduler.active_jobs == 1

    service.make_guess(game_id, "CRANE")
    other_id, created = service.find_or_create_game("CRANE", "u1", mode="daily")
    assert created and other_id != game_id
