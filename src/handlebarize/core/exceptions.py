from __future__ import annotations

from typing import Any, Dict, Mapping


class HandlebarizeError(Exception):
    """Base exception for handlebarize."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class MalformedConditionError(HandlebarizeError, ValueError):
    """Raised when a condition attribute is empty or cannot be parsed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        HandlebarizeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class UnresolvedMarkerError(HandlebarizeError, KeyError):
    """Raised when a marker token has no bound path during substitution."""

    def __init__(self, token: str, *, context: Mapping[str, Any] | None = None) -> None:
        ctx = dict(context or {})
        ctx.setdefault("token", token)
        HandlebarizeError.__init__(self, f"Marker token has no bound path: {token}", context=ctx)
        self.token = token

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise.
        return HandlebarizeError.__str__(self)


class UnbalancedPseudoTagsError(HandlebarizeError):
    """Raised when structural pseudo-tags remain after rewriting.

    The artifact being compiled cannot be turned into a balanced template; the
    driver reports it and moves on to the next artifact.
    """

    def __init__(
        self,
        message: str,
        *,
        remaining: Mapping[str, int] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if remaining:
            ctx["remaining"] = dict(remaining)
        super().__init__(message, context=ctx)
        self.remaining = dict(remaining or {})


class MarkerCollisionError(HandlebarizeError):
    """Raised when two different data paths normalize to the same marker token."""

    def __init__(self, token: str, existing_path: str, new_path: str) -> None:
        super().__init__(
            f"Marker token {token!r} already bound to {existing_path!r}; cannot bind {new_path!r}",
            context={"token": token, "existing_path": existing_path, "new_path": new_path},
        )
        self.token = token
        self.existing_path = existing_path
        self.new_path = new_path


class ComponentLoadError(HandlebarizeError, ImportError):
    """Raised when a component module cannot be imported."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        HandlebarizeError.__init__(self, message, context=context)
        ImportError.__init__(self, message)


class ConfigError(HandlebarizeError, ValueError):
    """Raised when configuration files or overrides are invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        HandlebarizeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "HandlebarizeError",
    "MalformedConditionError",
    "UnresolvedMarkerError",
    "UnbalancedPseudoTagsError",
    "MarkerCollisionError",
    "ComponentLoadError",
    "ConfigError",
]
