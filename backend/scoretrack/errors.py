"""
Error taxonomy for the record and template stores.

Every store operation raises one of these (or lets pydantic validation
errors through at the boundary). The routes translate them into HTTP
responses with a descriptive ``detail`` message.
"""


class ScoreTrackError(Exception):
    """Base class for all store errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ScoreTrackError):
    """A referenced test, subject entry or template does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int):
        super().__init__("{} {} not found".format(entity, entity_id))
        self.entity = entity
        self.entity_id = entity_id


class DuplicateName(ScoreTrackError):
    """A template with the same name already exists."""

    status_code = 409

    def __init__(self, name: str):
        super().__init__("Template name '{}' already exists".format(name))
        self.name = name


class StorageError(ScoreTrackError):
    """Underlying database I/O or constraint failure."""

    status_code = 500


class LockContention(ScoreTrackError):
    """The store lock could not be acquired in time."""

    status_code = 503

    def __init__(self, timeout: float):
        super().__init__("Store is busy: lock not acquired within {}s".format(timeout))
        self.timeout = timeout
