"""Exceptions raised while loading schemas and generating bindings."""

from typing import List, Optional


class BindingGeneratorError(Exception):
    """
    Base exception for binding generation failures.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class SchemaLoadError(BindingGeneratorError):
    """Raised when an XSD document cannot be read or a reference cannot be resolved."""


class StructuralError(BindingGeneratorError):
    """
    Raised when the type graph cannot be turned into bindings.

    Structural errors abort the generation pass.
    """


class ChoiceResolutionError(StructuralError):
    """
    Raised when the alternatives of a choice property share no common ancestor.

    Attributes:
        alternatives: Qualified names of the alternative types
    """

    def __init__(self, alternatives: List[str], context: Optional[str] = None) -> None:
        self.alternatives = alternatives
        super().__init__(f"No common base type for choice alternatives: {', '.join(alternatives)}", context=context)


class MissingContentModelError(StructuralError):
    """Raised when a choice property's type has no content model to enumerate alternatives from."""


class RedefinitionConflictError(StructuralError):
    """
    Raised when two definitions in a same-named redefinition chain declare a
    property with the same name but different types.
    """

    def __init__(self, type_name: str, property_name: str, first_type: str, second_type: str) -> None:
        self.type_name = type_name
        self.property_name = property_name
        super().__init__(
            f"Property '{property_name}' is declared as both {first_type} and {second_type}",
            context=type_name)
