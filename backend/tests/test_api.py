from conftest import make_game, make_submission, make_vote


def _tables():
    gamequeue = [
        make_game('T1', 'Tara', lie_index='0', revealed='1', revealed_at='7/16/2025'),
        make_game('T2', 'Tom', lie_index='1', revealed='0'),
    ]
    votes = [
        make_vote('V1', 'Vic', 'T1', '1', '7/16/2025 06:00:00'),
        make_vote('V1', 'Vic', 'T1', '2', '7/16/2025 09:00:00'),
        make_vote('V2', 'Val', 'T1', '3', '7/16/2025 06:30:00'),
        make_vote('V1', 'Vic', 'T2', '2', '7/16/2025 06:00:00'),
    ]
    submissions = [make_submission('T1', 'Tara'), make_submission('T2', 'Tom')]
    return dict(submissions=submissions, gamequeue=gamequeue, votes=votes)


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_get_data_returns_leaderboard_and_raw(client, set_tables):
    set_tables(**_tables())
    res = client.get('/api/getData')
    assert res.status_code == 200
    data = res.get_json()

    board = data['leaderboard']
    assert [p['id'] for p in board] == ['V1', 'V2']
    vic = board[0]
    assert vic['totalGuesses'] == 1
    assert vic['correctGuesses'] == 1
    assert vic['accuracy'] == 100
    assert vic['recentActivity'] == "correctly guessed Tara's lie"
    assert vic['detailsBreakdown'][0]['guess'] == 'Statement 1'
    assert board[1]['correctGuesses'] == 0

    raw = data['raw']
    assert len(raw['submissions']) == 2
    assert len(raw['gamequeue']) == 2
    # every vote on the revealed game, none on the unrevealed one
    assert len(raw['votes']) == 3
    assert all(v['Vote for who'] == 'T1' for v in raw['votes'])


def test_get_data_lenient_policy_override(client, set_tables):
    set_tables(**_tables())
    data = client.get('/api/getData?policy=lenient').get_json()
    players = {p['id']: p for p in data['leaderboard']}
    # T2 vote now counts; submitters are ranked too
    assert players['V1']['totalGuesses'] == 2
    assert players['V1']['correctGuesses'] == 2
    assert {'T1', 'T2', 'V1', 'V2'} <= set(players)


def test_get_data_bad_policy(client, set_tables):
    set_tables(**_tables())
    res = client.get('/api/getData?policy=sometimes')
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_get_data_no_revealed_games(client, set_tables):
    set_tables(
        gamequeue=[make_game('T1', 'Tara', revealed='0')],
        votes=[make_vote('V1', 'Vic', 'T1', '1', '7/16/2025 06:00:00')],
    )
    data = client.get('/api/getData').get_json()
    assert data['leaderboard'] == []
    assert data['raw']['votes'] == []


def test_get_data_fetch_failure(client, set_tables):
    source = set_tables(error='sheet unavailable')
    res = client.get('/api/getData')
    assert res.status_code == 500
    data = res.get_json()
    assert data == {'error': 'Failed to fetch data'}
    assert source.calls == 1


def test_each_request_fetches_fresh_tables(client, set_tables):
    source = set_tables(**_tables())
    first = client.get('/api/getData').get_json()
    second = client.get('/api/getData').get_json()
    assert first == second
    assert source.calls == 2


def test_stats(client, set_tables):
    set_tables(**_tables())
    res = client.get('/api/stats')
    assert res.status_code == 200
    stats = res.get_json()
    assert stats['totalGames'] == 2
    assert stats['revealedGames'] == 1
    assert stats['pendingGames'] == 1
    assert stats['playerBreakdown']['T1']['name'] == 'Tara'


def test_stats_fetch_failure(client, set_tables):
    set_tables(error='boom')
    res = client.get('/api/stats')
    assert res.status_code == 500


def test_leaderboard_cli(flask_app, set_tables):
    set_tables(**_tables())
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['leaderboard'])
    assert result.exit_code == 0
    assert '"leaderboard"' in result.output
    assert '"V1"' in result.output


def test_leaderboard_cli_fetch_failure(flask_app, set_tables):
    set_tables(error='boom')
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['leaderboard'])
    assert result.exit_code != 0
    assert 'Failed to fetch data' in result.output
