"""Error hierarchy for roster operations.

Every exception carries a message that can be shown to staff as-is. Views
catch RosterError and report it; the roster is left unchanged.
"""


class RosterError(Exception):
    """Base exception for all roster errors."""

    pass


class MalformedInputError(RosterError):
    """Input could not be turned into anything usable.

    Examples: empty CSV, no valid rows, empty class list.
    """

    pass


class SnapshotError(MalformedInputError):
    """Snapshot document is not valid JSON or not snapshot-shaped."""

    pass


class MissingSelectionError(RosterError):
    """A required choice was not made before acting.

    Examples: committing an import with nothing staged, assigning without an activity.
    """

    pass


class StorageError(RosterError):
    """The persisted key-value store could not be read or written."""

    pass
