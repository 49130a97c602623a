"""ContextVar-based parse configuration for desplegable.

Config is set once per Markdown instance and read by the tokenizer and the
renderer for the duration of a call.

Usage:
    # In the Markdown class
    md = Markdown(max_nesting=20)
    html = md("+++ Title\\nbody\\n+++")  # Sets config internally via ContextVar

    # Or use the context manager directly
    with parse_config_context(ParseConfig(max_nesting=20)):
        tokens = tokenizer.parse(source)

Thread Safety:
    ContextVars are thread-local, so separate documents parsed on
    separate threads never see each other's configuration.

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

DEFAULT_MAX_NESTING = 100


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        max_nesting: Maximum block nesting level. Reaching it raises
            NestingDepthError instead of recursing further.
        breaks: Render soft line breaks as ``<br />``

    """

    max_nesting: int = DEFAULT_MAX_NESTING
    breaks: bool = False

    def __post_init__(self) -> None:
        if self.max_nesting < 1:
            raise ValueError(f"max_nesting must be positive, got {self.max_nesting}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Unknown keys are silently ignored.

        Example:
            >>> ParseConfig.from_dict({"max_nesting": 8, "theme": "dark"}).max_nesting
            8

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "desplegable_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the active parse configuration for this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the module-level default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig(max_nesting=4)):
        ...     get_parse_config().max_nesting
        4

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "DEFAULT_MAX_NESTING",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
