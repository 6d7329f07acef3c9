"""Template expansion exceptions."""


class ExpandError(Exception):
    """Base class for failures that abort an expansion run.

    Each subclass carries the exit code the CLI maps it to, so the
    command handler can report it without inspecting the type.
    """

    exit_code = 1


class FileReadError(ExpandError):
    """Raised when a value file, the template file or stdin cannot be read."""

    def __init__(self, path: str, reason: object):
        self.path = path
        self.reason = reason
        super().__init__(f"error reading file '{path}': {reason}")


class ParseError(ExpandError):
    """Raised when a value file is not a YAML mapping."""

    exit_code = 2

    def __init__(self, path: str, reason: object):
        self.path = path
        self.reason = reason
        super().__init__(f"error parsing yaml file '{path}': {reason}")


class MalformedPairError(ExpandError):
    """Raised when an inline value lacks the key=value separator."""

    exit_code = 2

    def __init__(self, pair: str):
        self.pair = pair
        super().__init__(f"Unexpected value '{pair}', expected key=value")


class KeyNotFoundError(ExpandError):
    """Raised when a token references a key missing from the lookup table."""

    exit_code = 2

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key not found: '{key}'")


class OutputWriteError(ExpandError):
    """Raised when the expanded output cannot be written."""

    def __init__(self, reason: object):
        self.reason = reason
        super().__init__(f"error writing to stdout: {reason}")
