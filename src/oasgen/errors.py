"""Exceptions raised while turning model types into an OpenAPI document.

Every error here is a programmer error in the caller's models or
registry. They are raised immediately and never recovered from.
"""

from typing import Any


class OasError(Exception):
    """Base class for all oasgen errors."""


class UnsupportedTypeError(OasError, TypeError):
    """A type cannot be described as a schema (or not in this position)."""

    def __init__(self, type_: Any, reason: str = "unsupported type"):
        super().__init__(f"{reason}: {type_!r}")
        self.type_ = type_
        self.reason = reason


class NotAnAggregateError(OasError, TypeError):
    """Parameter or header extraction was given something other than a model."""

    def __init__(self, type_: Any):
        super().__init__(f"expected a model class or instance, got {type_!r}")
        self.type_ = type_


class TargetLoadError(OasError):
    """A ``module:attr`` target could not be imported or resolved."""
