"""
Field declarations and field discovery for formmodel.

Provides the Field() function for attaching defaults, documentation and
rule descriptors to form fields, and the registry helpers that decide which
names of a form class are accessible from the outside.

A field is accessible when it is annotated on the form class, is public
(no leading underscore) and is instance-scoped (not wrapped in ClassVar
or Final).

Example:
    from typing import Annotated, ClassVar
    from formmodel import FormModel, Field

    class ProductForm(FormModel):
        name: str = Field(default='', rules=[Required()])
        price: Annotated[str, Field(default='0.00'), Number()]
        description: str = ''
        currency: ClassVar[str] = 'EUR'   # static, not a field
        _type: str = 'simple'             # private, not a field
"""

import copy
import inspect
import logging
from typing import (
    Annotated, Any, Callable, ClassVar, Dict, Final, FrozenSet, List, Optional, Sequence, Tuple,
    get_args, get_origin, get_type_hints,
)

logger = logging.getLogger(__name__)

_MISSING = object()  # Sentinel for unset defaults

# Class attributes of FormModel that are never fields, even when annotated
RESERVED_NAMES = frozenset({'model_config', 'model_fields'})

# Leading text of unresolved string annotations that declare class constants
_STATIC_PREFIXES = tuple(
    prefix + name
    for prefix in ('', 'typing.', 't.')
    for name in ('ClassVar', 'Final')
)


class FieldInfo:
    """Stores the declaration of one form field.

    This is the object returned by Field() and can be used either as the
    class-level default or inside Annotated metadata.
    """
    __slots__ = ('default', 'default_factory', 'title', 'description', 'rules', 'annotation')

    def __init__(
        self,
        default: Any = _MISSING,
        *,
        default_factory: Optional[Callable[[], Any]] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        rules: Optional[Sequence[Any]] = None,
        annotation: Any = None,
    ):
        if default is not _MISSING and default_factory is not None:
            raise ValueError('Cannot specify both default and default_factory')
        self.default = default
        self.default_factory = default_factory
        self.title = title
        self.description = description
        self.rules = tuple(rules) if rules else ()
        self.annotation = annotation

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not None

    def get_default(self) -> Any:
        """Return a fresh initial value for the field.

        Mutable defaults are deep-copied so instances never share them.
        Fields declared without a default start as None.
        """
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is _MISSING:
            return None
        if isinstance(self.default, (list, dict, set)):
            return copy.deepcopy(self.default)
        return self.default

    def __repr__(self) -> str:
        parts = []
        if self.default is not _MISSING:
            parts.append(f"default={self.default!r}")
        if self.default_factory is not None:
            parts.append(f"default_factory={self.default_factory!r}")
        if self.title is not None:
            parts.append(f"title={self.title!r}")
        if self.rules:
            parts.append(f"rules={list(self.rules)!r}")
        return f"FieldInfo({', '.join(parts)})"


def Field(
    default: Any = _MISSING,
    *,
    default_factory: Optional[Callable[[], Any]] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    rules: Optional[Sequence[Any]] = None,
) -> Any:
    """Declare a form field with a default, documentation and rules.

    Rule descriptors are opaque to formmodel: they are handed back by
    FormModel.get_rules() for an external validator to interpret.

    Example:
        class LoginForm(FormModel):
            login: str = Field(default='', rules=[Required(), HasLength(min=4)])
            tags: list = Field(default_factory=list)
    """
    return FieldInfo(
        default,
        default_factory=default_factory,
        title=title,
        description=description,
        rules=rules,
    )


def _is_static(annotation: Any) -> bool:
    """Check if an annotation declares a static (class-level) member.

    Both ClassVar and Final members are class constants, never fields.
    """
    if annotation is ClassVar or annotation is Final:
        return True
    if get_origin(annotation) in (ClassVar, Final):
        return True
    if get_origin(annotation) is Annotated:
        return _is_static(get_args(annotation)[0])
    if isinstance(annotation, str):
        # Unresolved string annotation, e.g. under `from __future__ import annotations`
        return annotation.startswith(_STATIC_PREFIXES)
    return False


def _split_annotated(annotation: Any) -> Tuple[Optional[FieldInfo], List[Any]]:
    """Separate FieldInfo from the other metadata of an Annotated type."""
    if get_origin(annotation) is not Annotated:
        return None, []
    field_info = None
    extras: List[Any] = []
    for item in get_args(annotation)[1:]:
        if isinstance(item, FieldInfo):
            field_info = item
        else:
            extras.append(item)
    return field_info, extras


def _owner_classes(cls: type, base: Optional[type], include_inherited: bool) -> List[type]:
    """Classes whose annotations contribute fields, most basic first."""
    if not include_inherited:
        return [cls]
    excluded = set(base.__mro__) if base is not None else {object}
    return [klass for klass in reversed(cls.__mro__) if klass not in excluded]


def collect_fields(
    cls: type,
    base: Optional[type] = None,
    include_inherited: bool = True,
) -> Dict[str, FieldInfo]:
    """Build the field declarations of a form class, in declaration order.

    Args:
        cls: The concrete form class.
        base: The abstract base whose own members (and its ancestors') are
            never fields.
        include_inherited: Also collect fields annotated on parent classes
            between cls and base.

    Returns:
        Mapping of field name to a FieldInfo carrying the resolved default,
        the rule descriptors and the annotation.
    """
    try:
        hints = get_type_hints(cls, include_extras=True)
    except Exception:
        # Forward references that cannot be resolved yet: fall back to the raw annotations
        hints = {}

    fields: Dict[str, FieldInfo] = {}
    for klass in _owner_classes(cls, base, include_inherited):
        for name, raw in inspect.get_annotations(klass).items():
            if name.startswith('_') or name in RESERVED_NAMES:
                continue
            annotation = hints.get(name, raw)
            if _is_static(annotation):
                fields.pop(name, None)
                continue
            fields[name] = _build_field_info(cls, name, annotation)

    logger.debug("Collected %d field(s) for %s: %s", len(fields), cls.__name__, list(fields))
    return fields


def _build_field_info(cls: type, name: str, annotation: Any) -> FieldInfo:
    declared, extras = _split_annotated(annotation)
    class_value = getattr(cls, name, _MISSING)
    if isinstance(class_value, FieldInfo):
        declared, class_value = class_value, _MISSING

    default = _MISSING
    default_factory = None
    title = description = None
    rules: List[Any] = []
    if declared is not None:
        default = declared.default
        default_factory = declared.default_factory
        title = declared.title
        description = declared.description
        rules.extend(declared.rules)
    if default is _MISSING and default_factory is None:
        default = class_value
    rules.extend(extras)

    return FieldInfo(
        default,
        default_factory=default_factory,
        title=title,
        description=description,
        rules=rules,
        annotation=annotation,
    )


def collect_attributes(cls: type, base: Optional[type] = None, include_inherited: bool = True) -> FrozenSet[str]:
    """Return the set of accessible field names of a form class."""
    return frozenset(collect_fields(cls, base, include_inherited))


__all__ = ["Field", "FieldInfo", "collect_fields", "collect_attributes"]
