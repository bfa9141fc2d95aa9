from __future__ import annotations

from typing import Iterable, Sequence


class FieldError(ValueError):
    """A single configuration field that could not be resolved."""

    def __init__(self, key: str, raw: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.raw = raw


class MissingFieldError(FieldError):
    def __init__(self, key: str) -> None:
        super().__init__(key, "", f"invalid configuration: env={key} missing required key")


class FieldParseError(FieldError):
    def __init__(self, key: str, raw: str, expected: str, reason: str) -> None:
        super().__init__(
            key,
            raw,
            f"invalid configuration: env={key} got={raw!r} expected={expected} err={reason}",
        )
        self.expected = expected


class ConstraintError(FieldError):
    def __init__(self, key: str, raw: str, rule: str) -> None:
        super().__init__(key, raw, f"invalid configuration: env={key} got={raw!r} {rule}")
        self.rule = rule


class InvalidKeyError(FieldError):
    def __init__(self) -> None:
        super().__init__("", "", "invalid configuration: empty environment variable name requested")


class ConfigError(ValueError):
    """
    Every field failure from one load pass, joined into a single error.

    The message lists each individual failure on its own line in the order
    they were recorded.
    """

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors: Sequence[FieldError] = tuple(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    @property
    def keys(self) -> Sequence[str]:
        return tuple(e.key for e in self.errors)

    def __len__(self) -> int:
        return len(self.errors)
