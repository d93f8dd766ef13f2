# pylint: disable=line-too-long

"""
Java naming and type mapping for schema types.

`JavaNaming` decides package and class names; `TypeMapper` resolves a schema
type to the `TypeRef` used in generated signatures.
"""

import re
from typing import TYPE_CHECKING, Dict, NamedTuple, Optional, Tuple
from urllib.parse import urlparse

from xmlbindgen.common import camel, java_identifier, pascal
from xmlbindgen.constants import (IMPL_SUBPACKAGE, JAVA_BOXED, JAVA_DATETIME, JAVA_KEYWORDS, JAVA_OBJECT,
                                  JAVA_PRIMITIVES, TIME_POSITION_TYPE, TYPE_OVERRIDES, XSD_TO_JAVA)
from xmlbindgen.schemamodel import PropertyNode, QName, TypeNode, TypeSystem, Variety

if TYPE_CHECKING:
    from xmlbindgen.eligibility import GenerationEligibility
    from xmlbindgen.emission import NamespaceEmissionUnit


class TypeRef(NamedTuple):
    """
    Reference to a Java type.

    ``name`` is the simple name, dotted for nested types (``Outer.Inner``).
    ``parameters`` holds generic type arguments.
    """
    package: str
    name: str
    is_array: bool = False
    parameters: Tuple['TypeRef', ...] = ()

    @classmethod
    def parse(cls, qualified: str) -> 'TypeRef':
        """Builds a reference from a plain qualified class name such as ``java.math.BigDecimal`` or ``byte[]``."""
        is_array = qualified.endswith('[]')
        if is_array:
            qualified = qualified[:-2]
        if '.' not in qualified:
            return cls('', qualified, is_array)
        package, name = qualified.rsplit('.', 1)
        return cls(package, name, is_array)

    @property
    def qualified_name(self) -> str:
        """Package qualified name without array or generic decoration."""
        return f'{self.package}.{self.name}' if self.package else self.name

    @property
    def import_name(self) -> Optional[str]:
        """Name to import, or None for primitives and java.lang classes."""
        if not self.package or self.package == 'java.lang':
            return None
        return f'{self.package}.{self.name.split(".")[0]}'

    @property
    def simple_name(self) -> str:
        """Simple name as written after importing the outermost class."""
        return self.name

    @property
    def is_primitive(self) -> bool:
        """True for Java primitive types (not arrays of them)."""
        return not self.package and not self.is_array and self.name in JAVA_PRIMITIVES

    @property
    def is_string(self) -> bool:
        """True for java.lang.String."""
        return self.package == 'java.lang' and self.name == 'String' and not self.is_array

    @property
    def is_object(self) -> bool:
        """True for the untyped java.lang.Object reference."""
        return self.qualified_name == JAVA_OBJECT and not self.is_array

    def array_of(self) -> 'TypeRef':
        """Array of this type."""
        return self._replace(is_array=True)

    def element_type(self) -> 'TypeRef':
        """The component type of an array reference."""
        return self._replace(is_array=False)

    def with_parameters(self, *parameters: 'TypeRef') -> 'TypeRef':
        """Generic instantiation of this type."""
        return self._replace(parameters=tuple(parameters))

    def boxed(self) -> 'TypeRef':
        """Wrapper class for primitives, usable as a generic argument."""
        if self.is_primitive:
            return TypeRef('java.lang', JAVA_BOXED[self.name])
        return self

    def impl(self) -> 'TypeRef':
        """Implementation class of a generated interface."""
        return TypeRef(f'{self.package}.{IMPL_SUBPACKAGE}', '.'.join(part + 'Impl' for part in self.name.split('.')))


DATETIME_REF = TypeRef.parse(JAVA_DATETIME)
OBJECT_REF = TypeRef.parse(JAVA_OBJECT)
STRING_REF = TypeRef('java.lang', 'String')


def namespace_to_package(namespace: str) -> str:
    """Convert an XML namespace URI to a Java package name."""
    if not namespace:
        return 'generated'
    parsed = urlparse(namespace)
    segments = []
    if parsed.scheme == 'urn':
        segments = [s for s in parsed.path.split(':') if s]
    else:
        if parsed.hostname:
            segments = [s for s in reversed(parsed.hostname.split('.')) if s != 'www']
        segments.extend(s for s in parsed.path.split('/') if s)
    package = []
    for segment in segments:
        if segment[0].isdigit():
            segment = 'v' + segment.replace('.', '')
        segment = re.sub(r'[^a-zA-Z0-9_]', '_', segment.lower())
        if segment in JAVA_KEYWORDS:
            segment += '_'
        package.append(segment)
    return '.'.join(package) if package else 'generated'


class JavaNaming:
    """Package, class and property names of generated Java code."""

    def __init__(self, type_system: TypeSystem, package_map: Optional[Dict[str, str]] = None) -> None:
        self.type_system = type_system
        self.package_map = dict(package_map or {})

    def package(self, namespace: str) -> str:
        """Java package for a target namespace."""
        if namespace not in self.package_map:
            self.package_map[namespace] = namespace_to_package(namespace)
        return self.package_map[namespace]

    def type_short_name(self, local: str) -> str:
        """Class name of a global type: PascalCase with the 'Type' suffix removed."""
        name = pascal(local)
        if name.endswith('Type') and len(name) > 4:
            name = name[:-4]
        return java_identifier(name)

    def short_name(self, t: TypeNode) -> str:
        """Simple class name of the type, without enclosing class for nested types."""
        if t.is_document or t.is_attribute_type:
            name = java_identifier(pascal(t.local_name))
            if t.is_document and self.is_colliding_document(t):
                name += 'Element'
            return name
        if t.is_anonymous:
            return java_identifier(pascal(t.local_name))
        return self.type_short_name(t.local_name)

    def is_colliding_document(self, t: TypeNode) -> bool:
        """True if a global type of the same namespace claims the document's class name."""
        if not t.is_document:
            return False
        name = java_identifier(pascal(t.local_name))
        return any(g.namespace == t.namespace and self.type_short_name(g.local_name) == name
                   for g in self.type_system.global_types.values())

    def full_name(self, t: TypeNode) -> TypeRef:
        """Reference to the generated interface or enumeration of a type."""
        names = [self.short_name(t)]
        outer = t.outer_type if t.is_anonymous else None
        while outer is not None:
            names.insert(0, self.short_name(outer))
            outer = outer.outer_type if outer.is_anonymous else None
        return TypeRef(self.package(t.namespace), '.'.join(names))

    def impl_name(self, t: TypeNode) -> TypeRef:
        """Reference to the generated implementation class of a type."""
        return self.full_name(t).impl()

    def property_name(self, prop: PropertyNode) -> str:
        """PascalCase Java property name used in accessor names."""
        return java_identifier(pascal(prop.name.local)).rstrip('_') or '_'

    def variable_name(self, prop_name: str, repeated: bool = False) -> str:
        """Field or parameter name for a property: lowerCamel, never a keyword."""
        name = camel(prop_name)
        # value-choice suffixes such as 'valueAsString' collapse to the value name
        name = re.sub(r'As[A-Z].*$', '', name) or name
        if repeated:
            name += 'List'
        if name in JAVA_KEYWORDS:
            name += '_'
        return name

    def json_name(self, prop_name: str, repeated: bool) -> str:
        """Member name in JSON documents for a PascalCase property name."""
        name = camel(prop_name)
        if repeated and name != 'quality':
            if name.endswith('y'):
                name = name[:-1] + 'ies'
            elif not name.endswith('s'):
                name += 's'
        return name


class TypeMapper:
    """Resolves schema types to Java type references."""

    def __init__(self, naming: JavaNaming, eligibility: 'GenerationEligibility') -> None:
        self.naming = naming
        self.eligibility = eligibility

    def map_type(self, t: TypeNode, unit: Optional['NamespaceEmissionUnit'] = None) -> TypeRef:
        """
        Maps a schema type to a Java type reference.

        The reference is recorded in the unit's used types when a unit is given.
        """
        ref = self._resolve(t)
        override = TYPE_OVERRIDES.get(ref.qualified_name)
        if override is not None:
            ref = TypeRef.parse(override)._replace(is_array=ref.is_array)
        if unit is not None:
            unit.add_used_type(ref)
        return ref

    def _resolve(self, t: TypeNode) -> TypeRef:
        if t.is_simple_type:
            if t.is_builtin:
                return TypeRef.parse(XSD_TO_JAVA.get(t.local_name, JAVA_OBJECT))
            if t.has_string_enum_values() and self.eligibility.generated(t):
                return self.naming.full_name(t)
            if t.variety == Variety.LIST and t.list_item_type is not None:
                return self._resolve(t.list_item_type).array_of()
            if t.local_name == TIME_POSITION_TYPE:
                return DATETIME_REF
            if t.base_type is not None:
                return self._resolve(t.base_type)
            return OBJECT_REF
        if t.is_attribute_type:
            return self._resolve(t.content_type) if t.content_type is not None else OBJECT_REF
        if not self.eligibility.generated(t):
            return OBJECT_REF
        return self.naming.full_name(t)

    def map_value_type(self, t: TypeNode, unit: Optional['NamespaceEmissionUnit'] = None) -> TypeRef:
        """Maps the simple value of a simple type or a simple content type."""
        value_type = t.value_type()
        if value_type is None:
            return self.map_type(t.builtin_ancestor() or t, unit)
        return self.map_type(value_type, unit)

    def common_base(self, types) -> Optional[TypeNode]:
        """
        Nearest type every given type derives from (pairwise least common ancestor).

        Returns None when the types share no ancestor.
        """
        result: Optional[TypeNode] = None
        for t in types:
            if result is None:
                result = t
                continue
            candidate: Optional[TypeNode] = result
            while candidate is not None and not t.is_derived_from(candidate):
                candidate = candidate.base_type
            if candidate is None:
                return None
            result = candidate
        return result
