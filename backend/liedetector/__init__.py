import json
import logging

import click
from flask import Flask
from flask_cors import CORS

from config import Config


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    if not flask_app.debug and not flask_app.testing:
        flask_app.logger.setLevel(logging.INFO)

    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS') or '*')

    # Table source used by the routes; tests swap in a fake
    from liedetector.services.sheets import SheetsClient
    flask_app.extensions.setdefault('sheet_source', SheetsClient.from_config(flask_app.config))

    # Import and register blueprints here
    from liedetector.main import main
    from liedetector.api.leaderboard import leaderboard
    flask_app.register_blueprint(main)
    flask_app.register_blueprint(leaderboard, url_prefix='/api')

    @click.command('leaderboard')
    @click.option('--policy', type=click.Choice(['strict', 'lenient']), default=None,
                  help='Override REVELATION_POLICY for this run.')
    def leaderboard_command(policy):
        """Fetches the sheets and prints the leaderboard payload as JSON."""
        from liedetector.api.leaderboard import compute_payload
        from liedetector.services.sheets import SheetFetchError
        with flask_app.app_context():
            try:
                payload = compute_payload(policy)
            except SheetFetchError as exc:
                raise click.ClickException(f'Failed to fetch data: {exc}')
            click.echo(json.dumps(payload, indent=2))

    flask_app.cli.add_command(leaderboard_command)

    return flask_app
