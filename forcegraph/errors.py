from typing import Optional


class GraphLoadError(Exception):
    """Base class for every error raised while loading a graph description."""


class GraphFileError(GraphLoadError, OSError):
    """The graph description file is missing or unreadable."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read graph file {path!r}: {reason}")


class GraphParseError(GraphLoadError, ValueError):
    """A line of the graph description could not be parsed."""

    kind = "Parse error"

    def __init__(self, message: str, line: str = "", line_number: Optional[int] = None):
        self.message = message
        self.line = line
        self.line_number = line_number
        super().__init__(self._format())

    def _format(self) -> str:
        where = f" on line {self.line_number}" if self.line_number is not None else ""
        return f"{self.kind}{where}: {self.message} ({self.line.strip()!r})"

    def at(self, line: str, line_number: int) -> "GraphParseError":
        """Attach the offending line once the caller knows where it came from."""
        self.line = line
        self.line_number = line_number
        self.args = (self._format(),)
        return self


class MalformedNodeLine(GraphParseError):
    kind = "Malformed node line"


class MalformedEdgeLine(GraphParseError):
    kind = "Malformed edge line"


class UnknownNodeReference(GraphParseError):
    kind = "Unknown node reference"


class InvalidColorFormat(GraphParseError):
    kind = "Invalid color"
