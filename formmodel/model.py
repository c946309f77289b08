"""
FormModel implementation for formmodel.

A FormModel binds untrusted input (request payloads, parsed CLI options...)
to the public fields of a concrete form class, and collects the error
messages an external validator reports for them.

- Fields are discovered once per class from its annotations
- load() / set_attribute_value() silently ignore unknown keys
- get_attribute_value() raises UnknownAttributeError for unknown keys
- process_validation_result() replaces the error store wholesale

Example:
    from formmodel import FormModel, Field, ResultSet, Invalid, Valid

    class ProductForm(FormModel):
        name: str = ''
        price: str = '0.00000'
        description: str = ''

    form = ProductForm()
    form.load({'name': 'Mac Pro', 'price': '10000', 'type': 'ignored'})
    assert form.name == 'Mac Pro'

    form.process_validation_result(ResultSet({'name': Valid(), 'price': Invalid('Too expensive.')}))
    assert form.is_validated()
    assert form.first_errors() == {'price': 'Too expensive.'}
"""

import logging
from typing import Any, ClassVar, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from .config import ConfigDict, get_config_value
from .errors import UnknownAttributeError
from .fields import FieldInfo, collect_fields
from .protocols import FieldOutcome
from .result import ResultSet, iter_outcomes

logger = logging.getLogger(__name__)

Outcomes = Union[ResultSet, Mapping[str, FieldOutcome], Iterable[Tuple[str, FieldOutcome]]]


class _FormModelMeta(type):
    """Metaclass for FormModel that builds the field registry at class creation."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> type:
        cls = super().__new__(mcs, name, bases, namespace)

        if not any(isinstance(base, _FormModelMeta) for base in bases):
            # FormModel itself declares no public fields
            cls.model_config = None
            cls.model_fields = {}
            cls.__form_field_names__ = ()
            cls.__form_attributes__ = frozenset()
            return cls

        include_inherited = get_config_value(cls.model_config, 'include_inherited', True)
        fields = collect_fields(cls, FormModel, include_inherited)
        for field_name in fields:
            if hasattr(FormModel, field_name):
                raise TypeError(
                    f"Field '{field_name}' of {name} shadows a FormModel attribute"
                )

        cls.model_fields = fields
        cls.__form_field_names__ = tuple(fields)
        cls.__form_attributes__ = frozenset(fields)
        return cls


class FormModel(metaclass=_FormModelMeta):
    """Base class for forms: attribute binding plus per-field error store.

    Declare fields as annotated class attributes. Public annotations not
    wrapped in ClassVar or Final become accessible attributes; everything
    else (private names, class constants, methods) is invisible to load()
    and to validators.

    Subclasses overriding __init__ must call super().__init__().

    Example:
        from typing import ClassVar
        from formmodel import FormModel, Field

        class LoginForm(FormModel):
            login: str = Field(default='', rules=[Required()])
            password: str = ''
            remember_me: bool = False
            max_attempts: ClassVar[int] = 3

        form = LoginForm()
        form.load(request_data)
        validator.validate(form)
        if form.has_errors():
            return render(errors=form.first_errors())
    """

    # Set by metaclass
    model_config: ClassVar[Optional[ConfigDict]] = None
    model_fields: ClassVar[Dict[str, FieldInfo]]
    __form_field_names__: ClassVar[Tuple[str, ...]]

    # Instance attributes
    __form_attributes__: FrozenSet[str]
    __form_errors__: Dict[str, List[str]]
    __form_validated__: bool

    def __init__(self) -> None:
        cls = type(self)
        self.__form_attributes__ = cls.__form_attributes__
        self.__form_errors__ = {}
        self.__form_validated__ = False
        for field_name, field_info in cls.model_fields.items():
            setattr(self, field_name, field_info.get_default())

    # --- Attributes ---

    def has_attribute(self, attribute: str) -> bool:
        """Whether `attribute` is an accessible field of this form."""
        return attribute in self.__form_attributes__

    def attribute_names(self) -> Tuple[str, ...]:
        """Accessible field names, in declaration order."""
        return self.__form_field_names__

    def get_attribute_value(self, attribute: str) -> Any:
        """Return the current value of a field.

        Raises:
            UnknownAttributeError: If `attribute` is not an accessible field.
        """
        if attribute not in self.__form_attributes__:
            raise UnknownAttributeError(attribute)
        return getattr(self, attribute)

    def get_attribute_values(self) -> Dict[str, Any]:
        """Snapshot of every field's current value."""
        return {name: getattr(self, name) for name in self.__form_field_names__}

    def set_attribute_value(self, attribute: str, value: Any) -> None:
        """Overwrite a field. Unknown attributes are ignored."""
        if attribute in self.__form_attributes__:
            setattr(self, attribute, value)
        else:
            logger.debug("Ignoring unknown attribute %r on %s", attribute, type(self).__name__)

    def load(self, data: Mapping[str, Any]) -> None:
        """Populate the form with input data, typically a parsed request body.

        Keys that are not fields are dropped; fields missing from `data`
        keep their current value.

        Example:
            form = LoginForm()
            form.load(request.form)
        """
        for name, value in data.items():
            self.set_attribute_value(name, value)

    def get_rules(self) -> Dict[str, list]:
        """Return the validation rules for attributes.

        Rules are opaque to the form; an external validator interprets them.
        By default, rules declared with Field(rules=[...]) and the extra
        metadata of Annotated fields are returned. Fields without rules are
        omitted. Child classes may override this method to declare
        different rules:

            def get_rules(self):
                return {
                    'login': [Required(), HasLength(min=4, max=40)],
                    'email': [Required(), Email()],
                }
        """
        return {
            name: list(field_info.rules)
            for name, field_info in type(self).model_fields.items()
            if field_info.rules
        }

    # --- Errors ---

    def add_error(self, attribute: str, error: str) -> None:
        """Add an error message for an attribute.

        The attribute does not have to be a field, which allows errors about
        several fields at once or about the form as a whole.
        """
        self.__form_errors__.setdefault(attribute, []).append(error)

    def _add_errors(self, items: Mapping[str, Iterable[str]]) -> None:
        for attribute, errors in items.items():
            if isinstance(errors, str):
                # A bare message, not a sequence of one-character messages
                errors = (errors,)
            for error in errors:
                self.add_error(attribute, error)

    def _clear_errors(self, attribute: Optional[str] = None) -> None:
        if attribute is None:
            self.__form_errors__.clear()
        else:
            self.__form_errors__.pop(attribute, None)

    def error(self, attribute: str) -> List[str]:
        """Errors of one attribute; empty list if there are none."""
        return list(self.__form_errors__.get(attribute, ()))

    def errors(self) -> Dict[str, List[str]]:
        """Errors of all attributes, e.g.::

            {
                'username': [
                    'Username is required.',
                    'Username must contain only word characters.',
                ],
                'email': ['Email address is invalid.'],
            }
        """
        if get_config_value(type(self).model_config, 'errors_snapshot', True):
            return {attribute: list(errors) for attribute, errors in self.__form_errors__.items()}
        return self.__form_errors__

    def first_error(self, attribute: str) -> str:
        """First error of an attribute; empty string if there is none."""
        errors = self.__form_errors__.get(attribute)
        if not errors:
            return ''
        return errors[0]

    def first_errors(self) -> Dict[str, str]:
        """First error of every attribute that has one."""
        return {attribute: errors[0] for attribute, errors in self.__form_errors__.items() if errors}

    def has_errors(self, attribute: Optional[str] = None) -> bool:
        """Whether there is any error, or any error for `attribute`."""
        if attribute is None:
            return bool(self.__form_errors__)
        return attribute in self.__form_errors__

    # --- Validation hook ---

    def process_validation_result(self, results: Outcomes) -> None:
        """Replace the error store with the outcome of a validation pass.

        Errors added before this call are discarded. Called by the external
        validator once all rules of all fields were evaluated; fields that
        are absent from `results` end up with no errors.

        Args:
            results: A ResultSet, a mapping of field name to outcome, or an
                iterable of (field name, outcome) pairs. An outcome is any
                object with `is_valid` and `error_messages`. Outcomes of
                names that are not fields are dropped.
        """
        self._clear_errors()
        invalid = 0
        for attribute, outcome in iter_outcomes(results):
            if attribute not in self.__form_attributes__:
                logger.warning(
                    "Dropping validation outcome for unknown attribute %r on %s",
                    attribute, type(self).__name__,
                )
                continue
            if not outcome.is_valid:
                invalid += 1
                self._add_errors({attribute: outcome.error_messages})
        self.__form_validated__ = True
        logger.debug("%s validated: %d invalid field(s)", type(self).__name__, invalid)

    def is_validated(self) -> bool:
        """Whether process_validation_result() has run at least once."""
        return self.__form_validated__

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in self.__form_field_names__]
        return f"{type(self).__name__}({', '.join(parts)})"


__all__ = ["FormModel"]
