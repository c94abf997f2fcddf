import jwt
import pytest

from wordwar.config import TestingConfig
from wordwar.services import (
    get_admin_service, get_auth_service, get_daily_service, get_room_service
)
from wordwar.services.outcome_service import OutcomeRecorder
from wordwar.utils.helpers import today_str


@pytest.fixture()
def auth(game_service):
    return get_auth_service()


@pytest.fixture()
def daily(game_service):
    return get_daily_service()


@pytest.fixture()
def rooms(game_service):
    return get_room_service()


@pytest.fixture()
def admin(game_service):
    return get_admin_service()


def make_user(auth, username):
    result = auth.register_user(username, 'secret123')
    assert result['success'], result
    return result['user_id']


# Accounts

def test_register_and_login(auth):
    result = auth.register_user('Alice', 'secret123')
    assert result['success']
    assert result['user']['money'] == 100
    assert result['user']['level'] == 1
    assert result['user']['achievements'] == []

    login = auth.login_user('ALICE', 'secret123')
    assert login['success']
    assert login['user']['username'] == 'Alice'
    assert login['user']['is_online'] is True

    verified = auth.verify_token(login['token'])
    assert verified['success']
    assert verified['user']['id'] == result['user_id']


@pytest.mark.parametrize("username,password,error", [
    ('', 'secret123', 'Username and password are required'),
    ('ab', 'secret123', 'Username must be at least 3 characters long'),
    ('alice', '123', 'Password must be at least 6 characters long'),
])
def test_register_validation(auth, username, password, error):
    assert auth.register_user(username, password) == {'success': False, 'error': error}


def test_usernames_are_case_insensitive(auth):
    make_user(auth, 'Alice')
    assert auth.register_user('alice', 'other-password')['error'] == 'Username already taken'


def test_bad_credentials(auth):
    make_user(auth, 'alice')
    assert auth.login_user('alice', 'wrong-password')['error'] == 'Invalid username or password'
    assert auth.login_user('nobody', 'secret123')['error'] == 'Invalid username or password'
    assert auth.verify_token('not-a-token')['error'] == 'Invalid token'


def test_record_game_result_updates_stats(auth):
    user_id = make_user(auth, 'alice')
    assert auth.record_game_result(user_id, True, score_delta=600, money_delta=50)
    assert auth.record_game_result(user_id, False)

    user = auth.get_user_by_id(user_id)
    assert user['stats'] == {'score': 600, 'wins': 1, 'losses': 1, 'total_games': 2}
    assert user['money'] == 150
    assert user['level'] == 2
    assert user['achievements'] == ['first_win', 'daily_1', 'score_500']


def test_logout_and_delete(auth):
    user_id = make_user(auth, 'alice')
    auth.login_user('alice', 'secret123')
    assert auth.logout_user(user_id)['success']
    assert auth.get_user_by_id(user_id)['is_online'] is False

    assert auth.delete_account(user_id)['success']
    assert auth.get_user_by_id(user_id) is None
    assert auth.delete_account(user_id)['error'] == 'User not found'
    assert auth.get_user_by_id('not-an-object-id') is None


# Daily word

def test_daily_word_defaults(daily):
    result = daily.set_daily_word('crane', reward_money='', reward_score='abc', attempts=None)
    assert result['success']
    assert result['daily'] == {
        'date': today_str(), 'word_length': 5,
        'reward_money': 50, 'reward_score': 100, 'attempts': 6
    }
    word = daily.get_daily_word()
    assert word.word == 'CRANE'


def test_stale_daily_word_is_ignored(daily):
    daily.set_daily_word('crane', date='2000-01-01')
    assert daily.get_daily_word() is None


def test_invalid_daily_word(daily):
    assert not daily.set_daily_word('cr ne')['success']


def test_daily_results(daily):
    assert daily.record_daily_result('u1', 'alice', False, 6)
    assert daily.record_daily_result('u2', 'bob', True, 4)
    assert daily.record_daily_result('u3', 'cara', True, 2)
    assert not daily.record_daily_result('u1', 'alice', True, 1)

    assert daily.has_played_today('u1')
    assert not daily.has_played_today('u4')
    assert [row['username'] for row in daily.get_daily_results()] == ['cara', 'bob', 'alice']


# Rooms

def test_room_lifecycle(auth, rooms, game_service):
    host = make_user(auth, 'host')
    alice = make_user(auth, 'alice')
    bob = make_user(auth, 'bob')

    created = rooms.create_room(host, 'host', 'plant', max_attempts=4, time_limit=60)
    assert created['success']
    room_id = created['room']['id']
    assert len(room_id) == 6
    assert created['room']['word'] is None

    assert rooms.join_room(room_id, host, 'host')['error'] == 'The host cannot play their own word'
    assert rooms.join_room(room_id, alice, 'alice')['success']
    assert rooms.join_room(room_id, alice, 'alice')['error'] == 'Already in this room'
    assert rooms.join_room(room_id.lower(), bob, 'bob')['success']

    assert rooms.start_room(room_id, alice)['error'] == 'Only the host can start the round'
    started = rooms.start_room(room_id, host)
    assert started['success']
    assert started['room']['status'] == 'playing'
    assert rooms.join_room(room_id, make_user(auth, 'late'), 'late')['error'] == 'Round already started'

    games = started['games']
    game_service.make_guess(games[bob], 'PLANT')
    room = rooms.get_room(room_id)
    assert room['winner_name'] == 'bob'
    assert room['status'] == 'playing'

    game_service.make_guess(games[alice], 'PLANT')
    room = rooms.get_room(room_id)
    assert room['status'] == 'finished'
    assert room['winner_name'] == 'bob'
    assert room['word'] == 'PLANT'

    # Only the first solver earns the room reward
    assert auth.get_user_by_id(bob)['stats']['score'] == 50
    assert auth.get_user_by_id(bob)['money'] == 120
    assert auth.get_user_by_id(alice)['stats'] == {'score': 0, 'wins': 1, 'losses': 0, 'total_games': 1}


def test_leaving_running_room_forfeits(auth, rooms, game_service):
    host = make_user(auth, 'host')
    alice = make_user(auth, 'alice')
    room_id = rooms.create_room(host, 'host', 'plant')['room']['id']
    rooms.join_room(room_id, alice, 'alice')
    games = rooms.start_room(room_id, host)['games']

    assert rooms.leave_room(room_id, alice)['success']
    assert game_service.get_game_state(games[alice]).end_reason == 'abandoned'
    assert rooms.get_room(room_id)['status'] == 'finished'
    assert auth.get_user_by_id(alice)['stats']['losses'] == 1


def test_room_validation(rooms):
    assert not rooms.create_room('h', 'host', '12345')['success']
    assert rooms.create_room('h', 'host', 'plant', time_limit=-5)['error'] == \
        'Time limit must be a positive number of seconds'
    assert rooms.join_room('NOPE42', 'u1', 'alice')['error'] == 'Room not found'
    room_id = rooms.create_room('h', 'host', 'plant')['room']['id']
    assert rooms.start_room(room_id, 'h')['error'] == 'At least one player is required'
    assert rooms.leave_room(room_id, 'u1')['error'] == 'Not in this room'


def test_open_rooms_listing(rooms):
    first = rooms.create_room('h1', 'host1', 'plant')['room']['id']
    second = rooms.create_room('h2', 'host2', 'crane')['room']['id']
    rooms.join_room(second, 'u1', 'alice')
    rooms.start_room(second, 'h2')
    assert [room['id'] for room in rooms.list_open_rooms()] == [first]


# Admin console

def test_admin_login(admin):
    assert admin.login('wrong')['error'] == 'Invalid admin password'
    token = admin.login(TestingConfig.ADMIN_PASSWORD)['token']
    assert admin.verify_admin_token(token)['success']
    assert not admin.verify_admin_token(None)['success']

    player_token = jwt.encode({'user_id': 'x'}, TestingConfig.JWT_SECRET, algorithm='HS256')
    assert admin.verify_admin_token(player_token)['error'] == 'Admin access required'


def test_adjust_currency_clamps_at_zero(auth, admin):
    user_id = make_user(auth, 'alice')
    assert admin.adjust_currency(user_id, 'money', -500) == {'success': True, 'field': 'money', 'value': 0}
    assert admin.adjust_currency(user_id, 'score', '750')['value'] == 750
    assert auth.get_user_by_id(user_id)['level'] == 2

    assert not admin.adjust_currency(user_id, 'wins', 5)['success']
    assert admin.adjust_currency(user_id, 'money', 'lots')['error'] == 'Delta must be an integer'
    assert admin.adjust_currency('bad-id', 'money', 5)['error'] == 'User not found'


def test_user_list_and_analytics(auth, admin, daily, rooms):
    alice = make_user(auth, 'alice')
    bob = make_user(auth, 'bob')
    auth.record_game_result(alice, True, score_delta=100)
    auth.record_game_result(bob, True, score_delta=900)
    auth.record_game_result(bob, False)
    auth.login_user('bob', 'secret123')
    daily.record_daily_result(alice, 'alice', True, 3)
    rooms.create_room(alice, 'alice', 'plant')

    users = admin.list_users()
    assert [user['username'] for user in users] == ['bob', 'alice']
    assert users[0]['level'] == 2

    assert admin.load_analytics() == {
        'total_users': 2,
        'total_games': 3,
        'total_rooms': 1,
        'total_daily_plays': 1,
        'total_score': 1000,
        'online_count': 1,
        'most_active': 'bob',
        'most_active_games': 2
    }


def test_outcome_recorder_ignores_unknown_mode(auth):
    recorder = OutcomeRecorder(auth)
    assert recorder.record({'game_id': 'g', 'mode': 'practice', 'user_id': 'u', 'won': True}) is None


def test_second_daily_game_is_not_paid_twice(auth, daily, game_service):
    alice = make_user(auth, 'alice')
    options = dict(mode='daily', username='alice', daily_date=today_str(), reward_score=100, reward_money=50)
    first = game_service.create_game('crane', alice, **options)
    second = game_service.create_game('crane', alice, **options)

    game_service.make_guess(first, 'CRANE')
    game_service.make_guess(second, 'CRANE')

    user = auth.get_user_by_id(alice)
    assert user['stats'] == {'score': 100, 'wins': 1, 'losses': 0, 'total_games': 1}
    assert user['money'] == 150
    assert len(daily.get_daily_results()) == 1


def test_concurrent_room_start_creates_games_once(auth, rooms, game_service, monkeypatch):
    host = make_user(auth, 'host')
    alice = make_user(auth, 'alice')
    room_id = rooms.create_room(host, 'host', 'plant', time_limit=60)['room']['id']
    rooms.join_room(room_id, alice, 'alice')
    waiting = rooms.rooms_collection.find_one({'_id': room_id})

    assert rooms.start_room(room_id, host)['success']
    games_before = set(game_service.games)

    # A second request that read the room while it was still waiting
    monkeypatch.setattr(rooms.rooms_collection, 'find_one', lambda *args, **kwargs: dict(waiting))
    assert rooms.start_room(room_id, host) == {'success': False, 'error': 'Round already started'}
    assert set(game_service.games) == games_before
    assert game_service.scheduler.active_jobs == 1


def test_adjust_currency_keeps_concurrent_increments(auth, admin, monkeypatch):
    user_id = make_user(auth, 'alice')
    collection = admin.users_collection
    real_find_one = collection.find_one
    reads = []

    def find_one_then_reward(*args, **kwargs):
        found = real_find_one(*args, **kwargs)
        if not reads:
            auth.record_game_result(user_id, True, score_delta=0, money_delta=30)
        reads.append(found)
        return found

    monkeypatch.setattr(collection, 'find_one', find_one_then_reward)
    assert admin.adjust_currency(user_id, 'money', 5)['value'] == 135
    assert len(reads) == 2


def test_adjust_currency_on_user_deleted_mid_update(auth, admin, monkeypatch):
    user_id = make_user(auth, 'alice')
    collection = admin.users_collection
    real_find_one = collection.find_one
    reads = []

    def find_one_then_delete(*args, **kwargs):
        found = real_find_one(*args, **kwargs)
        if not reads:
            auth.delete_account(user_id)
        reads.append(found)
        return found

    monkeypatch.setattr(collection, 'find_one', find_one_then_delete)
    assert admin.adjust_currency(user_id, 'money', 5) == {'success': False, 'error': 'User not found'}
