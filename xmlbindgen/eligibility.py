"""Decides which schema types get generated units of their own."""

from typing import Dict, Optional

from xmlbindgen.constants import PROPERTY_SUFFIXES, XLINK_NAMESPACE
from xmlbindgen.schemamodel import ContentKind, QName, TypeNode
from xmlbindgen.typemapper import JavaNaming


class GenerationEligibility:
    """
    Classifies types as eligible (own structural, implementation and codec
    units) or not. Results depend only on the type graph, so they are cached.
    """

    def __init__(self, naming: JavaNaming) -> None:
        self.naming = naming
        self._cache: Dict[int, bool] = {}

    def generated(self, t: TypeNode) -> bool:
        """True if the type gets its own generated units."""
        key = id(t)
        if key not in self._cache:
            self._cache[key] = self._classify(t)
        return self._cache[key]

    def _classify(self, t: TypeNode) -> bool:
        # global attributes never get units; their values are plain properties
        if t.is_attribute_type or t.is_builtin:
            return False
        if t.namespace == XLINK_NAMESPACE:
            return False
        is_document = t.is_document
        if is_document:
            if t.content_type is None:
                return False
            t = t.content_type
        short_name = self.naming.short_name(t)
        if short_name.endswith(PROPERTY_SUFFIXES):
            if not t.is_simple_type and t.content_kind in (ContentKind.SIMPLE, ContentKind.MIXED):
                return True
            if t.is_ur_type:
                return True
            counterpart = QName(t.namespace, short_name + 'PropertyType')
            if self.naming.type_system.find_type(counterpart) is None:
                return False
        if is_document:
            return True
        if t.is_simple_type and not t.has_string_enum_values():
            return False
        if t.is_ur_type or t.is_anonymous:
            return False
        return True

    def nearest_eligible(self, t: Optional[TypeNode]) -> Optional[TypeNode]:
        """The type itself or its nearest eligible ancestor."""
        while t is not None and not self.generated(t):
            t = t.base_type
        return t
