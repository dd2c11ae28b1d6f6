from flask import Blueprint, current_app, jsonify, request

from liedetector.models import RevelationPolicy
from liedetector.services.scoring import (
    CutoffRule,
    build_payload,
    compute_leaderboard,
    game_statistics,
)
from liedetector.services.sheets import SheetFetchError

leaderboard = Blueprint('leaderboard', __name__)


def _sheet_source():
    return current_app.extensions['sheet_source']


def compute_payload(policy=None) -> dict:
    """Fetch all three tables and build the leaderboard response body.

    Raises SheetFetchError if any table cannot be read.
    """
    policy = RevelationPolicy.parse(policy or current_app.config.get('REVELATION_POLICY', 'strict'))
    tables = _sheet_source().fetch_tables()
    current_app.logger.debug(f"[stats] {game_statistics(tables.gamequeue)}")
    result = compute_leaderboard(
        tables.submissions,
        tables.gamequeue,
        tables.votes,
        policy=policy,
        cutoff_rule=CutoffRule.from_config(current_app.config),
        logger=current_app.logger,
    )
    return build_payload(result, tables.submissions, tables.gamequeue)


@leaderboard.route('/getData', methods=['GET'])
def get_data():
    """
    Returns the ranked leaderboard plus the raw tables, votes limited to
    revealed games.
    """
    policy = request.args.get('policy')
    if policy:
        try:
            policy = RevelationPolicy.parse(policy)
        except ValueError as exc:
            return jsonify({'error': str(exc)}), 400
    try:
        payload = compute_payload(policy)
    except SheetFetchError as exc:
        current_app.logger.error(f"Error fetching sheets: {exc}")
        return jsonify({'error': 'Failed to fetch data'}), 500
    return jsonify(payload), 200


@leaderboard.route('/stats', methods=['GET'])
def get_stats():
    """
    Returns per-player game counts from the game queue.
    """
    try:
        gamequeue = _sheet_source().fetch_tables().gamequeue
    except SheetFetchError as exc:
        current_app.logger.error(f"Error fetching sheets: {exc}")
        return jsonify({'error': 'Failed to fetch data'}), 500
    return jsonify(game_statistics(gamequeue)), 200
