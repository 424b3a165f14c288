"""ContextVar-based parse configuration for tessera.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is read by the lexer-facing frontmatter scan and by every parser mixin
in the current context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Through the public API
    doc = parse(source, config=ParseConfig(max_errors=100))

    # Direct parser usage
    from tessera.config import set_parse_config, reset_parse_config, ParseConfig

    set_parse_config(ParseConfig(max_nesting_depth=32))
    try:
        doc = Parser(source).parse()
    finally:
        reset_parse_config()

    # Or use the context manager
    with parse_config_context(ParseConfig(json_frontmatter_tag="meta")):
        doc = Parser(source).parse()

"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator

DEFAULT_MAX_ERRORS = 4096
DEFAULT_MAX_NESTING_DEPTH = 64
DEFAULT_JSON_FRONTMATTER_TAG = "hnmd"


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Attributes:
        max_errors: Maximum number of errors stored on a Document. Further
            errors are still detected and counted, just not kept.
        max_nesting_depth: Maximum number of nested open elements, and
            maximum height of an inline emphasis/link subtree. Constructs
            beyond the limit are kept as literal text.
        json_frontmatter_tag: Fence label that marks a leading code fence
            as JSON frontmatter.

    """

    max_errors: int = DEFAULT_MAX_ERRORS
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    json_frontmatter_tag: str = DEFAULT_JSON_FRONTMATTER_TAG

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "max_errors": 10,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.max_errors
            10

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local).

    Returns:
        The active ParseConfig for this thread/context.

    """
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ParseConfig to use within the context.

    Yields:
        None

    Example:
        >>> with parse_config_context(ParseConfig(max_errors=1)):
        ...     doc = Parser("<a><b>").parse()
        >>> len(doc.errors)
        1

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "DEFAULT_JSON_FRONTMATTER_TAG",
    "DEFAULT_MAX_ERRORS",
    "DEFAULT_MAX_NESTING_DEPTH",
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]
