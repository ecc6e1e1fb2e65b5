"""Exception types raised by the session and flash helpers."""


class PreconditionError(ValueError):
    """A session or flash operation ran before its fetch step.

    This is a programming error: the pipeline is wired wrong, so it is never
    caught and turned into a default value.
    """


class ConfigurationError(RuntimeError):
    """Secret material needed for signing is missing or empty."""
