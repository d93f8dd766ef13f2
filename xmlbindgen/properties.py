# pylint: disable=line-too-long, too-many-instance-attributes

"""
Property classification.

Every property of an eligible type is described by a :class:`PropertyInfo`
before any emitter writes code for it. Descriptions are derived on demand and
never stored on the schema graph.
"""

from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional

from xmlbindgen.constants import JAVA_LIST, XLINK_ATTRS, XLINK_NAMESPACE
from xmlbindgen.eligibility import GenerationEligibility
from xmlbindgen.errors import ChoiceResolutionError, MissingContentModelError, RedefinitionConflictError
from xmlbindgen.schemamodel import ContentKind, ParticleKind, PropertyNode, TypeNode, Variety
from xmlbindgen.typemapper import OBJECT_REF, JavaNaming, TypeMapper, TypeRef


class PropertyShape(Enum):
    """Emission shape of a property."""
    SCALAR = 'scalar'
    OPTIONAL_SCALAR = 'optional'
    REPEATED = 'repeated'
    CHOICE = 'choice'
    WRAPPER = 'wrapper'


class ChoiceOverride(NamedTuple):
    """Metadata a choice alternative borrows from its parent property while being emitted."""
    name: str
    min_occurs: int
    max_occurs: Optional[int]
    complex_wrapper: bool
    has_name: bool


class ChoiceOverrides:
    """
    Side table from choice alternative to the parent metadata it is emitted with.

    Alternatives are shared by every property using the same choice type, so
    the table is built for one emission call and dropped afterwards.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, ChoiceOverride] = {}

    def put(self, alternative: PropertyNode, override: ChoiceOverride):
        """Registers the override of one alternative."""
        self._entries[id(alternative)] = override

    def get(self, alternative: PropertyNode) -> Optional[ChoiceOverride]:
        """Override of an alternative, if any."""
        return self._entries.get(id(alternative))

    def __len__(self) -> int:
        return len(self._entries)


class PropertyInfo:
    """Derived emission metadata of one property."""

    def __init__(self, prop: PropertyNode) -> None:
        self.prop = prop
        self.name = ''
        self.var = ''
        self.json_name = ''
        self.min_occurs = prop.min_occurs
        self.max_occurs = prop.max_occurs
        self.is_wrapper = False
        self.is_complex_wrapper = False
        self.has_name = False
        self.is_choice = False
        self.value_node: TypeNode = prop.type
        self.value_type: TypeRef = OBJECT_REF
        self.alternatives: List[PropertyNode] = []

    @property
    def is_attribute(self) -> bool:
        """True for attribute properties."""
        return self.prop.is_attribute

    @property
    def is_repeated(self) -> bool:
        """More than one occurrence allowed."""
        return self.max_occurs is None or self.max_occurs > 1

    @property
    def is_optional(self) -> bool:
        """Zero or one occurrence."""
        return self.min_occurs == 0 and not self.is_repeated

    @property
    def shape(self) -> PropertyShape:
        """Primary emission shape."""
        if self.is_choice:
            return PropertyShape.CHOICE
        if self.is_complex_wrapper:
            return PropertyShape.WRAPPER
        if self.is_repeated:
            return PropertyShape.REPEATED
        if self.is_optional:
            return PropertyShape.OPTIONAL_SCALAR
        return PropertyShape.SCALAR

    @property
    def list_type(self) -> TypeRef:
        """java.util.List of the value type."""
        return TypeRef.parse(JAVA_LIST).with_parameters(self.value_type.boxed())

    @property
    def is_inline(self) -> bool:
        """True when the value is text: attributes and simple-typed elements."""
        return self.is_attribute or self.value_node.is_simple_type

    def __repr__(self) -> str:
        return f'PropertyInfo({self.name}, {self.shape.value}, {self.value_type.qualified_name})'


class PropertyClassifier:
    """Derives emission shapes, value types and property views for eligible types."""

    def __init__(self, naming: JavaNaming, eligibility: GenerationEligibility, mapper: TypeMapper) -> None:
        self.naming = naming
        self.eligibility = eligibility
        self.mapper = mapper

    @staticmethod
    def is_choice(t: TypeNode) -> bool:
        """Content particle is a choice, or a sequence holding exactly one choice."""
        particle = t.content_model
        if particle is None:
            return False
        if particle.kind == ParticleKind.CHOICE:
            return True
        return (particle.kind == ParticleKind.SEQUENCE and len(particle.children) == 1
                and particle.children[0].kind == ParticleKind.CHOICE)

    def is_wrapper(self, prop: PropertyNode) -> bool:
        """Lower-case property whose type wraps a single value."""
        local = prop.name.local
        if not local or not local[0].islower():
            return False
        t = prop.type
        return (len(t.element_properties()) == 1 or self.is_choice(t)
                or t.content_kind in (ContentKind.SIMPLE, ContentKind.MIXED) or t.is_simple_type)

    @staticmethod
    def has_name(t: TypeNode) -> bool:
        """The type declares a 'name' attribute."""
        return t.find_attribute('name') is not None

    @staticmethod
    def has_href(t: TypeNode) -> bool:
        """The type declares an 'href' attribute."""
        return t.find_attribute('href') is not None

    @staticmethod
    def is_link_extended(t: TypeNode) -> bool:
        """The type carries link attributes, which the wrapper base class already provides."""
        return any(p.name.namespace == XLINK_NAMESPACE for p in t.attribute_properties())

    def is_complex_wrapper(self, prop: PropertyNode, overrides: Optional[ChoiceOverrides] = None) -> bool:
        """Wrapper whose value travels with name/href metadata."""
        override = overrides.get(prop) if overrides is not None else None
        if override is not None and override.complex_wrapper:
            return True
        if not self.is_wrapper(prop) or prop.is_attribute:
            return False
        t = prop.type
        return bool(t.element_properties()) or self.has_name(t) or self.has_href(t)

    def choice_alternatives(self, t: TypeNode) -> List[PropertyNode]:
        """Element alternatives of a choice type."""
        if t.content_model is None:
            raise MissingContentModelError("Choice type has no content model", context=str(t))
        alternatives = t.element_properties()
        if not alternatives:
            raise MissingContentModelError("Choice type has no element alternatives", context=str(t))
        return alternatives

    def choice_base(self, alternatives: List[PropertyNode], context: str = '') -> TypeNode:
        """Least common ancestor of the alternatives' types."""
        lca = self.mapper.common_base([alt.type for alt in alternatives])
        if lca is None:
            raise ChoiceResolutionError([str(alt.type) for alt in alternatives], context=context)
        return lca

    def describe(self, prop: PropertyNode, unit=None, overrides: Optional[ChoiceOverrides] = None) -> PropertyInfo:
        """Classifies a property and resolves its Java value type, recording type references in the unit."""
        info = PropertyInfo(prop)
        override = overrides.get(prop) if overrides is not None else None
        info.name = override.name if override is not None else self.naming.property_name(prop)
        if override is not None:
            info.min_occurs = override.min_occurs
            info.max_occurs = override.max_occurs
        info.is_wrapper = self.is_wrapper(prop)
        info.is_complex_wrapper = self.is_complex_wrapper(prop, overrides)
        info.has_name = override.has_name if override is not None else (info.is_wrapper and self.has_name(prop.type))
        info.var = self.naming.variable_name(info.name, info.is_repeated)
        info.json_name = self.naming.json_name(info.name, info.is_repeated)

        t = prop.type
        if override is None and not prop.is_attribute and not t.is_simple_type and self.is_choice(t):
            info.is_choice = True
            info.alternatives = self.choice_alternatives(t)
            lca = self.choice_base(info.alternatives, context=f'{prop.container}.{prop.name.local}')
            info.value_node = lca
            accessor = self.eligibility.nearest_eligible(lca) if not lca.is_simple_type else lca
            info.value_type = self.mapper.map_type(accessor, unit) if accessor is not None else OBJECT_REF
        elif override is None and info.is_wrapper and not t.is_simple_type and len(t.element_properties()) == 1:
            info.value_node = t.element_properties()[0].type
            info.value_type = self.mapper.map_type(info.value_node, unit)
        elif not t.is_simple_type and t.content_kind == ContentKind.SIMPLE and not self.eligibility.generated(t):
            info.value_node = t
            info.value_type = self.mapper.map_value_type(t, unit)
        else:
            info.value_type = self.mapper.map_type(t, unit)
        return info

    def alternative_overrides(self, info: PropertyInfo) -> ChoiceOverrides:
        """Builds the side table lending the parent's name and occurrence to every alternative."""
        overrides = ChoiceOverrides()
        for alt in info.alternatives:
            overrides.put(alt, ChoiceOverride(info.name, info.min_occurs, info.max_occurs,
                                              info.is_complex_wrapper, info.has_name))
        return overrides

    def model_base(self, t: TypeNode) -> Optional[TypeNode]:
        """
        Base of the generated class: the nearest eligible complex ancestor.

        Document types extend their content type. Earlier definitions of a
        redefined type are never a base.
        """
        if t.is_document:
            content = t.content_type
            if content is None or content.is_simple_type:
                return None
            return self.eligibility.nearest_eligible(content)
        base = t.base_type
        while base is not None and not base.is_ur_type and not base.is_simple_type:
            if self.eligibility.generated(base) and base.name != t.name:
                return base
            base = base.base_type
        return None

    @staticmethod
    def structure_of(t: TypeNode) -> TypeNode:
        """Type declaring the properties of a generated class: the anonymous content of a document, else the type."""
        if t.is_document and t.content_type is not None and t.content_type.is_anonymous:
            return t.content_type
        return t

    def own_properties(self, t: TypeNode) -> List[PropertyNode]:
        """
        Properties a generated class declares itself: its own plus those of the
        ancestors between it and its generated base.
        """
        stop = self.model_base(t)
        if t.is_document:
            if self.structure_of(t) is t:
                return []
            t = self.structure_of(t)
        chain = [t]
        base = t.base_type
        while base is not None and base is not stop and not base.is_ur_type and not base.is_simple_type:
            chain.append(base)
            base = base.base_type
        merged: List[PropertyNode] = []
        for level in reversed(chain):
            for prop in level.properties:
                index = next((i for i, p in enumerate(merged) if p.name == prop.name and p.is_attribute == prop.is_attribute), None)
                if index is None:
                    merged.append(prop)
                    continue
                existing = merged[index]
                first, second = existing.container, prop.container
                same_named = (first is not None and second is not None and first is not second
                              and first.name is not None and first.name == second.name)
                if same_named and existing.type is not prop.type:
                    raise RedefinitionConflictError(str(t.name), prop.name.local, str(existing.type), str(prop.type))
                if not same_named:
                    merged[index] = prop
        if self.is_link_extended(t):
            merged = [p for p in merged if not (p.is_attribute and p.name.local in XLINK_ATTRS)]
        return merged

    def describe_all(self, t: TypeNode, unit=None) -> List[PropertyInfo]:
        """Descriptions of a type's own properties, in declaration order."""
        return [self.describe(p, unit) for p in self.own_properties(t)]

    def has_value_accessor(self, t: TypeNode) -> bool:
        """Atomic or list simple content whose value is not already carried by the generated base."""
        source = self.structure_of(t)
        if source.is_simple_type or source.content_kind != ContentKind.SIMPLE or source.variety not in (Variety.ATOMIC, Variety.LIST):
            return False
        base = self.model_base(t)
        return base is None or base.content_kind != ContentKind.SIMPLE

    def nested_types(self, t: TypeNode) -> Iterator[TypeNode]:
        """Anonymous types declared inside a type that get nested classes."""
        for anon in self.structure_of(t).anonymous_types:
            candidate = anon
            elements = anon.element_properties()
            if elements:
                candidate = elements[0].type
                if not candidate.is_anonymous:
                    continue
            if candidate.is_simple_type:
                continue
            if self._is_pass_through(candidate):
                yield from self.nested_types(candidate)
            else:
                yield candidate

    @staticmethod
    def _is_pass_through(t: TypeNode) -> bool:
        elements = t.element_properties()
        return len(elements) == 1 and elements[0].type.is_anonymous and not t.attribute_properties()
