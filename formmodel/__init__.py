"""
formmodel - Form models binding untrusted input to validated fields

A form model discovers the public fields of a class, populates them from
an untyped mapping (a parsed request body, CLI options...), and collects
the per-field error messages reported by an external validator.

Example:
    from formmodel import FormModel, Field, ResultSet, Invalid, Valid

    class ProductForm(FormModel):
        name: str = Field(default='', rules=[Required()])
        price: str = '0.00000'
        description: str = ''

    form = ProductForm()
    form.load({'name': '', 'price': '10000'})

    # An external validator evaluates form.get_rules() and reports back
    form.process_validation_result(ResultSet({
        'name': Invalid('Value cannot be blank.'),
        'price': Valid(),
    }))
    assert form.first_errors() == {'name': 'Value cannot be blank.'}
"""

__version__ = "0.1.0"

# --- Errors ---
from .errors import FormModelError, UnknownAttributeError

# --- Configuration ---
from .config import ConfigDict, CONFIG_DEFAULTS, get_config_value

# --- Fields ---
from .fields import Field, FieldInfo, collect_attributes, collect_fields

# --- Validator contracts ---
from .protocols import DataSet, FieldOutcome, PostValidationHook, RulesProvider

# --- Validation outcomes ---
from .result import Invalid, ResultSet, Valid

# --- FormModel ---
from .model import FormModel


__all__ = [
    # Errors
    "FormModelError", "UnknownAttributeError",

    # Configuration
    "ConfigDict", "CONFIG_DEFAULTS", "get_config_value",

    # Fields
    "Field", "FieldInfo", "collect_attributes", "collect_fields",

    # Validator contracts
    "DataSet", "FieldOutcome", "PostValidationHook", "RulesProvider",

    # Validation outcomes
    "Valid", "Invalid", "ResultSet",

    # FormModel
    "FormModel",
]
