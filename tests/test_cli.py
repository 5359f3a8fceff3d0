from click.testing import CliRunner

from mathsprint.client.cli import cli
from mathsprint.client.stores import LocalScoreStore


def test_leaderboard_from_local_file(tmp_path):
    path = tmp_path / 'lb.json'
    store = LocalScoreStore(path)
    store.save('Ana', 44)
    store.save('Ben', 61)
    result = CliRunner().invoke(cli, ['leaderboard', '--local', str(path)])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert 'Ben' in lines[0] and '61' in lines[0]
    assert 'Ana' in lines[1]


def test_empty_leaderboard(tmp_path):
    result = CliRunner().invoke(cli, ['leaderboard', '--local', str(tmp_path / 'none.json')])
    assert result.exit_code == 0
    assert 'No scores yet' in result.output


def test_best_score_from_local_file(tmp_path):
    path = tmp_path / 'lb.json'
    LocalScoreStore(path).save('Ana', 44)
    result = CliRunner().invoke(cli, ['best-score', 'Ana', 'ramp', '--local', str(path)])
    assert result.exit_code == 0
    assert result.output.strip() == '44'


def test_play_rejects_blank_name(tmp_path):
    result = CliRunner().invoke(cli, ['play', '--name', '   ', '--local', str(tmp_path / 'lb.json')])
    assert result.exit_code == 2
    assert 'Please enter your name!' in result.output


def test_leaderboard_with_malformed_local_file(tmp_path):
    path = tmp_path / 'lb.json'
    path.write_text('[{"name": "a", "score": 1}]')
    result = CliRunner().invoke(cli, ['leaderboard', '--local', str(path)])
    assert result.exit_code == 1
    assert 'malformed entry' in result.output
