"""Shared state of one binding generation pass."""

from typing import Dict, Optional

from xmlbindgen.eligibility import GenerationEligibility
from xmlbindgen.emission import EmissionRegistry
from xmlbindgen.properties import PropertyClassifier
from xmlbindgen.schemamodel import TypeSystem
from xmlbindgen.typemapper import JavaNaming, TypeMapper


class BindingContext:
    """
    Naming, classification and the unit registry of one pass, handed to every emitter.

    Created at the start of a pass; its registry is closed at the end.
    """

    def __init__(self, type_system: TypeSystem, output_dir: str, package_map: Optional[Dict[str, str]] = None) -> None:
        self.type_system = type_system
        self.output_dir = output_dir
        self.naming = JavaNaming(type_system, package_map)
        self.eligibility = GenerationEligibility(self.naming)
        self.mapper = TypeMapper(self.naming, self.eligibility)
        self.classifier = PropertyClassifier(self.naming, self.eligibility, self.mapper)
        self.registry = EmissionRegistry(output_dir)

    def package(self, namespace: str) -> str:
        """Java package of a namespace."""
        return self.naming.package(namespace)
