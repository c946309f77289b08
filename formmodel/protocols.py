"""
Structural contracts between a form model and an external validator.

A validator only needs to read field values, fetch rule descriptors and
hand back per-field outcomes. FormModel satisfies all three protocols;
any other object with the same methods works with the same validator.
"""

from typing import Any, Dict, Iterable, Protocol, Sequence, Tuple, runtime_checkable


@runtime_checkable
class FieldOutcome(Protocol):
    """Verdict of an external validator for one field."""

    @property
    def is_valid(self) -> bool: ...

    @property
    def error_messages(self) -> Sequence[str]: ...


@runtime_checkable
class DataSet(Protocol):
    """Read access to the fields a validator checks."""

    def has_attribute(self, attribute: str) -> bool: ...

    def get_attribute_value(self, attribute: str) -> Any: ...

    def attribute_names(self) -> Tuple[str, ...]: ...


@runtime_checkable
class RulesProvider(Protocol):
    """Supplies opaque rule descriptors, per field."""

    def get_rules(self) -> Dict[str, list]: ...


@runtime_checkable
class PostValidationHook(Protocol):
    """Receives the outcome of a complete validation pass."""

    def process_validation_result(self, results: Iterable[Tuple[str, FieldOutcome]]) -> None: ...

    def is_validated(self) -> bool: ...


__all__ = ["FieldOutcome", "DataSet", "RulesProvider", "PostValidationHook"]
