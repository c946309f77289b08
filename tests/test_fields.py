"""
Tests for field declarations and field discovery.
"""

import os
import sys
from typing import Annotated, ClassVar, Final, List

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from formmodel import (
    ConfigDict, Field, FieldInfo, FormModel,
    collect_attributes, collect_fields, get_config_value, CONFIG_DEFAULTS,
)


# ============================================================
# Test: Field discovery
# ============================================================

class TestFieldDiscovery:
    """Only public, instance-scoped annotated members are fields."""

    def test_public_annotated_members(self):
        class M(FormModel):
            a: int = 0
            b: str

        assert collect_attributes(M, FormModel) == frozenset({'a', 'b'})
        assert M().has_attribute('a')
        assert M().has_attribute('b')

    def test_private_members_excluded(self):
        class M(FormModel):
            a: int = 0
            _hidden: int = 1
            __mangled: int = 2

        assert M.__form_attributes__ == frozenset({'a'})

    def test_classvar_excluded(self):
        class M(FormModel):
            a: int = 0
            counter: ClassVar[int] = 0
            bare: ClassVar = 'x'

        assert collect_attributes(M, FormModel) == frozenset({'a'})

    def test_final_excluded(self):
        class M(FormModel):
            name: str = ''
            LIMIT: Final = 3
            MAX_ITEMS: Final[int] = 10
            CURRENCY: 'Final[str]' = 'EUR'

        form = M()
        assert form.attribute_names() == ('name',)
        assert not form.has_attribute('LIMIT')

        form.load({'LIMIT': 99, 'MAX_ITEMS': 0})
        assert form.LIMIT == 3
        assert form.MAX_ITEMS == 10
        assert repr(form) == "M(name='')"

    def test_unresolvable_final_string_annotation(self):
        class M(FormModel):
            a: int = 0
            LIMIT: 'Final[UndefinedType]' = None  # noqa: F821

        assert M().attribute_names() == ('a',)

    def test_unannotated_members_excluded(self):
        class M(FormModel):
            a: int = 0
            plain = 'not annotated'

            def method(self):
                return self.a

            @property
            def computed(self):
                return self.a * 2

        form = M()
        assert not form.has_attribute('plain')
        assert not form.has_attribute('method')
        assert not form.has_attribute('computed')

    def test_base_declares_no_fields(self):
        assert FormModel.__form_attributes__ == frozenset()
        assert collect_attributes(FormModel, FormModel) == frozenset()
        assert FormModel().attribute_names() == ()

    def test_inherited_fields(self):
        class Base(FormModel):
            a: int = 0

        class Child(Base):
            b: int = 1

        assert Child().attribute_names() == ('a', 'b')
        assert Base().attribute_names() == ('a',)

    def test_mixin_fields(self):
        class TimestampMixin:
            created_at: str = ''

        class M(TimestampMixin, FormModel):
            a: int = 0

        assert M().has_attribute('created_at')

    def test_own_fields_only(self):
        class Base(FormModel):
            a: int = 0

        class Child(Base):
            model_config = ConfigDict(include_inherited=False)
            b: int = 1

        form = Child()
        assert form.attribute_names() == ('b',)
        assert not form.has_attribute('a')

    def test_config_is_inherited(self):
        class Base(FormModel):
            model_config = ConfigDict(include_inherited=False)
            a: int = 0

        class Child(Base):
            b: int = 1

        assert Child.model_config == {'include_inherited': False}
        assert Child().attribute_names() == ('b',)

    def test_subclass_can_make_field_static(self):
        class Base(FormModel):
            a: int = 0
            b: int = 0

        class Child(Base):
            b: ClassVar[int] = 5

        assert Child().attribute_names() == ('a',)

    def test_string_annotations(self):
        class M(FormModel):
            a: 'int' = 0
            counter: 'ClassVar[int]' = 0

        assert M().attribute_names() == ('a',)

    def test_unresolvable_string_annotations(self):
        class M(FormModel):
            a: 'UndefinedType' = None  # noqa: F821
            counter: 'ClassVar[UndefinedType]' = None  # noqa: F821

        assert M().attribute_names() == ('a',)

    def test_registry_is_per_class(self):
        class M(FormModel):
            a: int = 0

        first, second = M(), M()
        assert first.__form_attributes__ is second.__form_attributes__
        assert isinstance(first.__form_attributes__, frozenset)

    def test_field_shadowing_form_method_rejected(self):
        with pytest.raises(TypeError, match="'load'"):
            class M(FormModel):
                load: str = ''


# ============================================================
# Test: Field declarations
# ============================================================

class TestFieldDeclarations:
    """Test defaults and metadata declared with Field()."""

    def test_field_as_default(self):
        class M(FormModel):
            a: str = Field(default='x', title='A', description='The a field')

        form = M()
        assert form.a == 'x'
        info = M.model_fields['a']
        assert info.title == 'A'
        assert info.description == 'The a field'
        assert info.annotation is str

    def test_field_in_annotated(self):
        class M(FormModel):
            a: Annotated[str, Field(default='x')]

        assert M().a == 'x'

    def test_class_default_with_annotated_field(self):
        class M(FormModel):
            a: Annotated[str, Field(rules=['r'])] = 'x'

        assert M().a == 'x'
        assert M().get_rules() == {'a': ['r']}

    def test_no_default_starts_as_none(self):
        class M(FormModel):
            a: str

        form = M()
        assert form.a is None
        assert form.get_attribute_value('a') is None
        assert not M.model_fields['a'].has_default

    def test_default_factory(self):
        class M(FormModel):
            tags: List[str] = Field(default_factory=list)

        first, second = M(), M()
        first.tags.append('x')
        assert second.tags == []

    def test_mutable_default_is_copied(self):
        class M(FormModel):
            tags: list = ['a']
            options: dict = {'k': [1]}

        first, second = M(), M()
        first.tags.append('b')
        first.options['k'].append(2)
        assert second.tags == ['a']
        assert second.options == {'k': [1]}

    def test_default_and_factory_conflict(self):
        with pytest.raises(ValueError, match='both default and default_factory'):
            Field(default=1, default_factory=int)

    def test_rules_from_field_and_annotated(self):
        class M(FormModel):
            a: Annotated[int, 'positive'] = Field(default=1, rules=['required'])
            b: int = 0

        assert M().get_rules() == {'a': ['required', 'positive']}

    def test_field_info_repr(self):
        info = FieldInfo('x', rules=['required'])
        assert repr(info) == "FieldInfo(default='x', rules=['required'])"
        assert repr(FieldInfo()) == "FieldInfo()"

    def test_collect_fields_returns_declarations(self):
        class M(FormModel):
            a: int = 1
            b: Annotated[str, Field(default_factory=str)]

        fields = collect_fields(M, FormModel)
        assert list(fields) == ['a', 'b']
        assert fields['a'].get_default() == 1
        assert fields['b'].get_default() == ''


# ============================================================
# Test: Configuration
# ============================================================

class TestConfig:
    def test_defaults(self):
        assert get_config_value(None, 'include_inherited') is True
        assert get_config_value(None, 'errors_snapshot') is True
        assert get_config_value(None, 'unknown', 'fallback') == 'fallback'

    def test_override(self):
        config = ConfigDict(errors_snapshot=False)
        assert get_config_value(config, 'errors_snapshot') is False
        assert get_config_value(config, 'include_inherited') is CONFIG_DEFAULTS['include_inherited']
