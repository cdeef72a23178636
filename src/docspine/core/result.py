"""
Result envelope for expected success/failure outcomes.

Operations whose failure is a normal, caller-handled outcome return a
``Result[T]`` instead of raising: ``Ok[T]`` on success, ``Err[T]`` carrying
the error otherwise. doc-spine uses it for rejected transitions and for an
empty undo history, so a caller cannot mistake either for a silent success.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Pattern-matchable:** ``match result: case Ok(v): ... case Err(e): ...``
    - **Escape hatch:** ``unwrap()`` raises the carried error when wanted

Examples:
    >>> from docspine.core.result import Ok, Err
    >>> Ok(5).unwrap()
    5
    >>> Err(ValueError("empty")).unwrap_or("fallback")
    'fallback'

    >>> match entity.approve():
    ...     case Ok(outcome):
    ...         print(outcome.transition.effect)
    ...     case Err(error):
    ...         print(f"rejected: {error}")

Tags:
    result-pattern, error-handling, doc-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> ok = Ok(42)
        >>> ok.is_ok(), ok.unwrap()
        (True, 42)
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def unwrap_err(self) -> Exception:
        """Raise, since there is no error in an Ok."""
        raise ValueError(f"Called unwrap_err on {self!r}")

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    Examples:
        >>> err = Err(ValueError("nothing to restore"))
        >>> err.is_err()
        True
        >>> err.unwrap_or("fallback")
        'fallback'
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def unwrap_err(self) -> Exception:
        """Get the carried error."""
        return self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]


__all__ = [
    "Ok",
    "Err",
    "Result",
]
