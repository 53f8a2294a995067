"""Error taxonomy shared by the record store, services and API."""


class CattleKeeperError(Exception):
    """Base class for domain errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CattleKeeperError):
    """Required input is missing or invalid."""

    status_code = 400


class NotFoundError(CattleKeeperError):
    """The targeted record does not exist."""

    status_code = 404


class NoOpError(CattleKeeperError):
    """An update request carries no effective field changes."""

    status_code = 400


class StorageError(CattleKeeperError):
    """The durable backend is unreachable or a write failed."""

    status_code = 500


class UnauthorizedError(CattleKeeperError):
    """The API key header is missing."""

    status_code = 401


class ForbiddenError(CattleKeeperError):
    """The API key header does not match."""

    status_code = 403
