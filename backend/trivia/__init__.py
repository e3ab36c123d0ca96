import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

socketio = SocketIO(async_mode=None)


def get_runtime(flask_app):
    return flask_app.extensions['trivia']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    log_level = flask_app.config.get('LOG_LEVEL', 'INFO')
    flask_app.logger.setLevel(log_level)
    logging.getLogger('trivia').setLevel(log_level)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room services live for the lifetime of the process, one set per app
    from trivia.questions import load_question_bank
    from trivia.services.rooms import ConnectionDirectory, GameSession, RoomRegistry, TriviaRuntime

    bank = load_question_bank(flask_app.config.get('QUESTION_BANK_PATH'))
    registry = RoomRegistry(
        bank,
        code_length=flask_app.config.get('ROOM_CODE_LENGTH', 5),
        alphabet=flask_app.config.get('ROOM_CODE_ALPHABET', 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'),
        max_code_attempts=flask_app.config.get('ROOM_CODE_MAX_ATTEMPTS', 50),
        default_nickname=flask_app.config.get('DEFAULT_NICKNAME', 'Affe'),
        max_nickname_length=flask_app.config.get('MAX_NICKNAME_LENGTH', 24),
    )
    session = GameSession(registry, points=flask_app.config.get('CORRECT_ANSWER_POINTS', 100))
    flask_app.extensions['trivia'] = TriviaRuntime(registry, session, ConnectionDirectory())
    flask_app.logger.info(f"[startup] questions={len(bank)} categories={bank.categories}")

    from trivia.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from trivia.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('check-questions')
    @click.option('--path', default=None, help='Question bank JSON file (defaults to QUESTION_BANK_PATH).')
    def check_questions_command(path):
        """Load and validate the question bank, then print a summary."""
        from trivia.questions import QuestionBankError
        try:
            checked = load_question_bank(path or flask_app.config.get('QUESTION_BANK_PATH'))
        except (OSError, QuestionBankError) as exc:
            raise click.ClickException(str(exc))
        click.echo(f'{len(checked)} questions OK')
        for category in checked.categories:
            count = sum(1 for q in checked if q.category == category)
            click.echo(f'  {category}: {count}')

    flask_app.cli.add_command(check_questions_command)

    return flask_app
