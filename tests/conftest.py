"""
Shared fixtures: a small external validator built on pydantic.

formmodel implements no rules itself. This validator plays the part of the
external engine: it reads form.get_rules(), checks each value with pydantic
TypeAdapters (or plain callables returning an error message or None), and
reports back through form.process_validation_result().
"""

import inspect
import os
import sys
from typing import Any, List

import pytest
from pydantic import TypeAdapter, ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from formmodel import Invalid, ResultSet, Valid


class PydanticValidator:
    """Validates a form's rules with pydantic and feeds the outcome back."""

    def __init__(self) -> None:
        self.calls = 0

    def _check(self, rule: Any, value: Any) -> List[str]:
        if inspect.isfunction(rule):
            message = rule(value)
            return [message] if message else []
        try:
            TypeAdapter(rule).validate_python(value)
        except ValidationError as exc:
            return [err['msg'] for err in exc.errors()]
        return []

    def validate(self, form) -> ResultSet:
        self.calls += 1
        results = ResultSet()
        for attribute, rules in form.get_rules().items():
            value = form.get_attribute_value(attribute)
            messages: List[str] = []
            for rule in rules:
                messages.extend(self._check(rule, value))
            results.add_result(attribute, Invalid(*messages) if messages else Valid())
        form.process_validation_result(results)
        return results


@pytest.fixture
def validator() -> PydanticValidator:
    return PydanticValidator()
