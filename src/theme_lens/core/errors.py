class ConfigurationError(Exception):
    """Invalid or unusable configuration."""


class ParseError(Exception):
    """A syntax error positioned in the source it was raised for.

    ``start`` and ``end`` are character offsets, ``end`` exclusive.
    """

    def __init__(self, message: str, start: int, end: int) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end


class JSONParseError(ParseError):
    pass


class LiquidSyntaxError(ParseError):
    pass
