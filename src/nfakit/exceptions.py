"""Exception hierarchy for nfakit.

Every error raised by the package derives from ``NfaError``, which carries an
optional context dictionary with structured details about the failure.

Rejecting an input value is not an error: ``Automaton.step`` reports it by
returning ``False``. Exceptions are reserved for caller mistakes (referencing
a state that was never created, composing an automaton with itself) and for
configuration or serialization problems.

Example:
    ```python
    from nfakit.exceptions import NfaError, UnknownStateError

    try:
        automaton.mark_state(State(42), "ACCEPT")
    except UnknownStateError as e:
        logger.error(f"Error: {e}")
        logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class NfaError(Exception):
    """Base exception for all nfakit errors.

    Attributes:
        context: Dictionary containing contextual information about the error.
        details: Alias for context.

    Example:
        ```python
        error = NfaError(
            "Operation failed",
            context={"operation": "add", "num_states": 3}
        )
        str(error)
        # 'Operation failed'
        error.context
        # {'operation': 'add', 'num_states': 3}
        ```
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(NfaError):
    """Raised when an argument or definition fails validation.

    Example:
        ```python
        raise ValidationError(
            "Use EPSILON for epsilon transitions, not None",
            context={"source": 0, "target": 1}
        )
        ```
    """

    pass


class ConfigurationError(NfaError):
    """Raised when an automaton definition cannot be loaded or built.

    Covers unreadable or unsupported files, schema violations, unknown store
    kinds and unresolvable environment variables.
    """

    pass


class NotFoundError(NfaError):
    """Raised when a requested item is not found."""

    pass


class UnknownStateError(NotFoundError):
    """Raised when a state id that was never created is referenced.

    Attributes:
        state_id: The offending id.
        num_states: Number of states the automaton actually has.
    """

    def __init__(self, state_id: int, num_states: int):
        super().__init__(
            f"Unknown state #{state_id} (automaton has {num_states} states)",
            context={"state_id": state_id, "num_states": num_states},
        )
        self.state_id = state_id
        self.num_states = num_states


class OperationError(NfaError):
    """Raised when an operation cannot be carried out."""

    pass


class CompositionError(OperationError):
    """Raised when an automaton cannot be composed into another.

    Composing an automaton with itself is not supported: the states being
    copied would grow while they are copied.
    """

    pass


class SerializationError(NfaError):
    """Raised when serialization or deserialization fails.

    Example:
        ```python
        raise SerializationError(
            "Callable predicates cannot be dumped",
            context={"store": "callable", "predicate": "is_digit"}
        )
        ```
    """

    pass
