"""Exception hierarchy for Blokit.

Only conditions a caller must react to are exceptions. Empty todo text,
a declined capability and a cancel that lost the race against completion
are reported as return values or log lines instead.
"""

from blokit.utils import exit_codes


class BlokitError(Exception):
    """Base application error carrying a process exit code."""

    exit_code: int = exit_codes.ERROR_GENERAL

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class NotFoundError(BlokitError):
    """A mutation targeted an entity id the store does not hold."""

    exit_code = exit_codes.ERROR_NOT_FOUND

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConfigError(BlokitError):
    """Configuration could not be loaded, validated or saved."""

    exit_code = exit_codes.ERROR_INVALID_ARGS


class MigrationError(BlokitError):
    """A schema migration failed and was rolled back."""
