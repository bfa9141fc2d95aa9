from __future__ import annotations

from typing import Callable, Optional, Protocol, Tuple

from http_service.config.errors import ConfigError
from http_service.config.models import AppConfig

# Maps a variable name to its raw value, or None when the variable is unset.
Lookup = Callable[[str], Optional[str]]


class ConfigLoader(Protocol):
    """
    Resolves the effective runtime configuration in a single pass.

    Implementations read every field once, never stop at the first invalid
    value, and report all failures together.
    """

    def load(self) -> AppConfig:
        """Return the configuration, raising ConfigError if any field was invalid."""

    def load_with_errors(self) -> Tuple[AppConfig, Optional[ConfigError]]:
        """Return the configuration together with the aggregated error, if any."""
