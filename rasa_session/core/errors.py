"""Custom exception hierarchy for the Rasa session client."""


class RasaSessionError(Exception):
    """Base error type."""


class ConfigError(RasaSessionError):
    pass


class TransportError(RasaSessionError):
    """Raised when the underlying socket connection fails."""
    pass


class ManagerClosed(RasaSessionError):
    """Raised when an operation is issued after shutdown."""
    pass


class ProtocolViolation(RasaSessionError):
    """The caller referenced state the history does not contain.

    This means the consumer is out of sync with the conversation log and is a
    bug, not a recoverable runtime condition.
    """


class MessageNotFound(ProtocolViolation):
    pass


class OptionNotFound(ProtocolViolation):
    pass
