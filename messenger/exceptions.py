"""Errors raised by the service layer and reported by the menus."""


class MessengerError(Exception):
    """Base class for failures the menu loop reports and recovers from."""


class UsageError(MessengerError):
    """Command line did not match ``<dbname> <port> <user>``."""


class NotFoundError(MessengerError):
    pass


class PermissionDeniedError(MessengerError):
    """The logged-in user lacks the rights for a chat action."""


class InvalidActionError(MessengerError):
    pass


class ConflictError(MessengerError):
    """A write was rejected by a uniqueness or reference constraint."""
