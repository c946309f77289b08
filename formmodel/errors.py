"""
Exceptions raised by formmodel.

Validation failures are not exceptions: they are collected as messages on
the form. Only programmer errors, such as reading a field the form does not
declare, abort an operation.
"""


class FormModelError(Exception):
    """Base class for all formmodel errors."""


class UnknownAttributeError(FormModelError, AttributeError):
    """Raised when reading an attribute that is not an accessible form field.

    Attributes:
        attribute: The offending attribute name.
    """

    def __init__(self, attribute: str):
        self.attribute = attribute
        super().__init__(f"Property {attribute} is undefined.")

    def __reduce__(self):
        return (type(self), (self.attribute,))


__all__ = ["FormModelError", "UnknownAttributeError"]
