"""
Validation outcome types for formmodel.

An external validator reports one outcome per field: Valid(), or
Invalid(*messages) carrying the ordered error messages. A ResultSet
collects those outcomes in the order the validator produced them and is
handed to FormModel.process_validation_result().

Example:
    from formmodel import ResultSet, Valid, Invalid

    results = ResultSet()
    results.add_result('name', Invalid('Value cannot be blank.'))
    results.add_result('price', Valid())

    form.process_validation_result(results)
    assert form.first_error('name') == 'Value cannot be blank.'
"""

from typing import Any, Dict, Iterable, Iterator, Mapping, Sequence, Tuple, Union

from .protocols import FieldOutcome


class Valid:
    """Outcome of a field that passed every rule."""
    __slots__ = ()

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def error_messages(self) -> Tuple[str, ...]:
        return ()

    def __repr__(self) -> str:
        return "Valid()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Valid)

    def __hash__(self) -> int:
        return hash('Valid')


class Invalid:
    """Outcome of a field that failed, with its messages in order."""
    __slots__ = ('messages',)

    def __init__(self, *messages: str):
        object.__setattr__(self, 'messages', tuple(messages))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def error_messages(self) -> Tuple[str, ...]:
        return self.messages

    def __repr__(self) -> str:
        return f"Invalid({', '.join(repr(m) for m in self.messages)})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Invalid) and self.messages == other.messages

    def __hash__(self) -> int:
        return hash(('Invalid', self.messages))


def merge_outcomes(first: FieldOutcome, second: FieldOutcome) -> FieldOutcome:
    """Combine two outcomes reported for the same field."""
    if first.is_valid and second.is_valid:
        return first
    return Invalid(*first.error_messages, *second.error_messages)


class ResultSet:
    """Ordered collection of per-field outcomes from one validation pass."""
    __slots__ = ('_results',)

    def __init__(self, results: Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None] = None):
        self._results: Dict[str, FieldOutcome] = {}
        if results is not None:
            for field, outcome in iter_outcomes(results):
                self.add_result(field, outcome)

    @classmethod
    def from_errors(cls, errors: Mapping[str, Sequence[str]]) -> 'ResultSet':
        """Build a result set from a mapping of field name to messages.

        Fields with an empty message list are recorded as Valid().
        """
        return cls(
            (field, Invalid(*messages) if messages else Valid())
            for field, messages in errors.items()
        )

    def add_result(self, field: str, outcome: FieldOutcome) -> None:
        """Record the outcome of a field, merging with an earlier one."""
        if not isinstance(outcome, FieldOutcome):
            raise TypeError(
                f"Expected an outcome with is_valid and error_messages, got {type(outcome).__name__}"
            )
        existing = self._results.get(field)
        if existing is not None:
            outcome = merge_outcomes(existing, outcome)
        self._results[field] = outcome

    def get_result(self, field: str) -> FieldOutcome:
        """Return the outcome of a field. Raises KeyError if none was recorded."""
        return self._results[field]

    @property
    def is_valid(self) -> bool:
        """True when every recorded outcome is valid."""
        return all(outcome.is_valid for outcome in self._results.values())

    def __iter__(self) -> Iterator[Tuple[str, FieldOutcome]]:
        return iter(self._results.items())

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, field: object) -> bool:
        return field in self._results

    def __repr__(self) -> str:
        items = ', '.join(f"{field!r}: {outcome!r}" for field, outcome in self._results.items())
        return f"ResultSet({{{items}}})"


def iter_outcomes(
    results: Union[ResultSet, Mapping[str, Any], Iterable[Tuple[str, Any]]],
) -> Iterator[Tuple[str, Any]]:
    """Iterate (field, outcome) pairs of any supported result container."""
    if isinstance(results, Mapping):
        return iter(results.items())
    return iter(results)


__all__ = ["Valid", "Invalid", "ResultSet", "merge_outcomes", "iter_outcomes"]
