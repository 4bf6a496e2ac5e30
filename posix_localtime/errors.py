class MalformedInputError(ValueError):
    """
    Raised when a clock-of-day, transition rule, or timezone string
    does not match its grammar.
    """


class InvalidConfigurationError(ValueError):
    """
    Raised when a timezone configuration cannot be used for calculation,
    e.g. a transition rule that never parsed successfully.
    """
