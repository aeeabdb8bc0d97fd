"""
Domain exceptions.

Services raise these and the API layer maps each class to one HTTP status
in ``golf_league.main``.
"""


class GolfLeagueError(Exception):
    """Base class for every domain error."""
    status_code = 500


class ValidationError(GolfLeagueError, ValueError):
    """Malformed, missing or out-of-range input."""
    status_code = 400


class ConflictError(GolfLeagueError, ValueError):
    """The request collides with existing state (duplicate member, locked scorecard)."""
    status_code = 409


class NotFoundError(GolfLeagueError, LookupError):
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class AuthorizationError(GolfLeagueError, PermissionError):
    """Role or ownership check failed. Never says why."""
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class AuthenticationError(GolfLeagueError, PermissionError):
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)
