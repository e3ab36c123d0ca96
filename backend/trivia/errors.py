"""Error kinds raised by the room registry and the game state machine.

Two families exist. ``TriviaError`` subclasses are user-facing: they are
returned to the requester of a create/join as a structured error value.
``IgnoredAction`` subclasses mark requests that are dropped without a reply,
since they usually come from stale client state rather than misuse.
"""


class TriviaError(Exception):
    code = 'trivia_error'
    message = 'Something went wrong.'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class RoomNotFound(TriviaError):
    code = 'room_not_found'
    message = 'Room not found.'


class GameAlreadyStarted(TriviaError):
    code = 'game_already_started'
    message = 'The game in this room is already running.'
    finished_message = 'The game in this room has already finished.'


class InvalidRoomCode(TriviaError):
    code = 'invalid_room_code'
    message = 'Room code is missing or has the wrong length.'


class RoomCodesExhausted(TriviaError):
    code = 'room_codes_exhausted'
    message = 'Could not allocate a free room code, please try again.'


class IgnoredAction(Exception):
    """A request that is dropped silently (logged at debug level only)."""


class Unauthorized(IgnoredAction):
    pass


class DuplicateAnswer(IgnoredAction):
    pass


class WrongPhase(IgnoredAction):
    pass


class UnknownPlayer(IgnoredAction):
    pass


class MalformedRequest(IgnoredAction):
    pass
