"""Exception classes for desplegable.

Malformed markers and empty disclosure bodies are not errors: block rules
decline by returning False. Only conditions that make the parse itself
unsound are raised.
"""

from __future__ import annotations


class DesplegableError(Exception):
    """Base exception for all desplegable errors."""

    pass


class ParseError(DesplegableError):
    """Error during block tokenization.

    Raised when the parser reaches a state it cannot continue from.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class NestingDepthError(ParseError):
    """Block nesting went past the configured maximum.

    Raised by the shared tokenizer instead of recursing further, so that
    adversarial input (lists inside lists inside disclosures...) fails
    deterministically rather than exhausting the interpreter stack.
    """

    def __init__(
        self,
        lineno: int,
        depth: int,
        limit: int,
        source_file: str | None = None,
    ) -> None:
        """Initialize nesting error.

        Args:
            lineno: Offending line (1-indexed)
            depth: Nesting level reached at that line
            limit: Configured maximum nesting level
            source_file: Path to source file (optional)
        """
        self.depth = depth
        self.limit = limit
        super().__init__(
            f"block nesting depth {depth} reached limit of {limit}",
            lineno=lineno,
            source_file=source_file,
        )


class RenderError(DesplegableError):
    """Error during HTML rendering.

    Raised when the renderer meets a token type it has no rule for.
    """

    pass


class PluginError(DesplegableError):
    """Error in plugin lookup or installation."""

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")
