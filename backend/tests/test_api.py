import json

from conftest import SequenceCodes


def test_index_reports_room_count(client, runtime):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['rooms'] == 0
    runtime.registry.create_room('Alice', 'a')
    assert client.get('/').get_json()['rooms'] == 1


def test_room_state(client, runtime):
    runtime.registry.code_factory = SequenceCodes('AB3K9')
    runtime.registry.create_room('Alice', 'a')
    runtime.registry.join_room('AB3K9', 'Bob', 'b')
    res = client.get('/api/rooms/ab3k9/state')
    assert res.status_code == 200
    assert res.get_json() == {
        'hostId': 'a',
        'isStarted': False,
        'players': [
            {'id': 'a', 'nickname': 'Alice', 'score': 0},
            {'id': 'b', 'nickname': 'Bob', 'score': 0},
        ],
    }


def test_room_state_unknown_and_invalid(client):
    res = client.get('/api/rooms/ZZZZZ/state')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'room_not_found'
    res = client.get('/api/rooms/AB/state')
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_room_code'


def test_check_questions_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['check-questions'])
    assert result.exit_code == 0
    assert '6 questions OK' in result.output
    assert 'Flags: 2' in result.output


def test_check_questions_command_rejects_bad_bank(flask_app, tmp_path):
    path = tmp_path / 'bank.json'
    path.write_text(json.dumps([{'question': 'Q?', 'options': ['a'], 'correctIndex': 0}]), encoding='utf-8')
    result = flask_app.test_cli_runner().invoke(args=['check-questions', '--path', str(path)])
    assert result.exit_code != 0
    assert 'needs 2-4 options' in result.output
