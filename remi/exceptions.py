class RemiError(Exception):
    pass


class MatchValidationError(RemiError, ValueError):
    pass


class MatchFinishedError(MatchValidationError):
    pass


class NoActiveMatchError(RemiError):
    pass


class StorageError(RemiError):
    pass


class StateParseError(RemiError):
    pass
