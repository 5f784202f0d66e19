from __future__ import annotations


class EngineError(Exception):
    """Base class for errors raised by the season engine."""


class UnresolvablePathError(EngineError, LookupError):
    def __init__(self, keys: list[str], reason: str) -> None:
        super().__init__(f"Cannot resolve /{'/'.join(keys)}: {reason}")
        self.keys = list(keys)
        self.reason = reason


class StateValidationError(EngineError, ValueError):
    def __init__(self, problems: list[str]) -> None:
        super().__init__("Invalid game state: " + "; ".join(problems))
        self.problems = list(problems)


class BundleFormatError(EngineError, ValueError):
    pass
