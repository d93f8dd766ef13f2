"""
In-memory model of a compiled XML Schema type system.

The model is what the binding generator reads: global, document and attribute
types, each with its base type, content kind, particle tree and properties.
It is built once (by :mod:`xmlbindgen.xsdtotypes` or programmatically) and
treated as read-only by the emitters.
"""

# pylint: disable=too-many-instance-attributes, too-many-arguments, line-too-long

import weakref
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional

from xmlbindgen.constants import JAVA_STRING, XSD_BUILTIN_BASES, XSD_NAMESPACE, XSD_TO_JAVA


class QName(NamedTuple):
    """Qualified XML name."""
    namespace: str
    local: str

    def __str__(self) -> str:
        return f'{{{self.namespace}}}{self.local}' if self.namespace else self.local


class ContentKind(Enum):
    """Content type of a schema type."""
    EMPTY = 'empty'
    SIMPLE = 'simple'
    ELEMENT = 'element'
    MIXED = 'mixed'


class Variety(Enum):
    """Simple type variety. Complex types with simple content report the variety of their value."""
    NONE = 'none'
    ATOMIC = 'atomic'
    LIST = 'list'
    UNION = 'union'


class ParticleKind(Enum):
    """Kind of a content model particle."""
    SEQUENCE = 'sequence'
    CHOICE = 'choice'
    ALL = 'all'
    ELEMENT = 'element'
    WILDCARD = 'wildcard'


class Particle:
    """A node of a content model. Element particles carry the element name."""

    def __init__(self, kind: ParticleKind, min_occurs: int = 1, max_occurs: Optional[int] = 1,
                 children: Optional[List['Particle']] = None, name: Optional[QName] = None) -> None:
        self.kind = kind
        self.min_occurs = min_occurs
        self.max_occurs = max_occurs
        self.children: List['Particle'] = children or []
        self.name = name

    def __repr__(self) -> str:
        if self.kind == ParticleKind.ELEMENT:
            return f'Particle(element {self.name})'
        return f'Particle({self.kind.value}, {self.children!r})'


class PropertyNode:
    """An attribute or element property of a schema type."""

    def __init__(self, name: QName, type_node: 'TypeNode', is_attribute: bool = False,
                 min_occurs: int = 1, max_occurs: Optional[int] = 1,
                 default: Optional[str] = None, read_only: bool = False,
                 nillable: bool = False) -> None:
        self.name = name
        self.type = type_node
        self.is_attribute = is_attribute
        self.min_occurs = min_occurs
        self.max_occurs = max_occurs
        self.default = default
        self.read_only = read_only
        self.nillable = nillable
        self._container: Optional[weakref.ref] = None

    @property
    def container(self) -> Optional['TypeNode']:
        """The type declaring this property."""
        return self._container() if self._container is not None else None

    @container.setter
    def container(self, value: Optional['TypeNode']) -> None:
        self._container = weakref.ref(value) if value is not None else None

    @property
    def is_repeated(self) -> bool:
        """True when more than one occurrence is allowed."""
        return self.max_occurs is None or self.max_occurs > 1

    def __repr__(self) -> str:
        kind = 'attribute' if self.is_attribute else 'element'
        return f'PropertyNode({kind} {self.name}: {self.type})'


class TypeNode:
    """
    A schema type: global, anonymous, builtin, or the document type of a global element.

    Document types have no name of their own; they are identified by their
    document element and expose the element's type as ``content_type``.
    """

    def __init__(self, name: Optional[QName] = None, base_type: Optional['TypeNode'] = None,
                 derivation: Optional[str] = None, is_simple_type: bool = False,
                 content_kind: ContentKind = ContentKind.EMPTY, variety: Variety = Variety.NONE,
                 is_abstract: bool = False) -> None:
        self.name = name
        self.base_type = base_type
        self.derivation = derivation
        self.is_simple_type = is_simple_type
        self.content_kind = content_kind
        self.variety = variety
        self.is_abstract = is_abstract
        self.content_model: Optional[Particle] = None
        self.properties: List[PropertyNode] = []
        self.anonymous_types: List['TypeNode'] = []
        self.enumeration_values: List[str] = []
        self.list_item_type: Optional['TypeNode'] = None
        self.union_members: List['TypeNode'] = []
        self.is_builtin = False
        self.is_ur_type = False
        self.is_document = False
        self.is_attribute_type = False
        self.document_element: Optional[QName] = None
        self.content_type: Optional['TypeNode'] = None
        self.substitution_group: Optional[QName] = None
        self.container_field: Optional[PropertyNode] = None
        self.outer_type: Optional['TypeNode'] = None
        self._type_system: Optional[weakref.ref] = None

    @property
    def type_system(self) -> Optional['TypeSystem']:
        """The type system this type was registered with."""
        return self._type_system() if self._type_system is not None else None

    @property
    def is_anonymous(self) -> bool:
        """True for types declared inline in an element or attribute."""
        return self.name is None and not self.is_document and not self.is_attribute_type

    @property
    def namespace(self) -> str:
        """Target namespace the type belongs to."""
        if self.name is not None:
            return self.name.namespace
        if self.document_element is not None:
            return self.document_element.namespace
        if self.outer_type is not None:
            return self.outer_type.namespace
        if self.container_field is not None:
            return self.container_field.name.namespace
        return ''

    @property
    def local_name(self) -> str:
        """Local name of the schema component: type name, element name, or containing field name."""
        if self.name is not None:
            return self.name.local
        if self.document_element is not None:
            return self.document_element.local
        if self.container_field is not None:
            return self.container_field.name.local
        return ''

    def add_property(self, prop: PropertyNode) -> PropertyNode:
        """Appends an own property and sets its container."""
        prop.container = self
        self.properties.append(prop)
        return prop

    def add_anonymous_type(self, anon: 'TypeNode', field: PropertyNode) -> 'TypeNode':
        """Registers an anonymous type declared by one of this type's fields."""
        anon.outer_type = self
        anon.container_field = field
        anon._type_system = self._type_system  # pylint: disable=protected-access
        self.anonymous_types.append(anon)
        return anon

    def ancestors(self) -> Iterator['TypeNode']:
        """Yields the base type chain, nearest first."""
        t = self.base_type
        while t is not None:
            yield t
            t = t.base_type

    def is_derived_from(self, other: 'TypeNode') -> bool:
        """True if other is this type or one of its ancestors."""
        return self is other or any(a is other for a in self.ancestors())

    def builtin_ancestor(self) -> Optional['TypeNode']:
        """Nearest builtin type in the base chain, this type included."""
        t: Optional[TypeNode] = self
        while t is not None and not t.is_builtin:
            t = t.base_type
        return t

    def all_properties(self) -> List[PropertyNode]:
        """Own and inherited properties, base first. A restated property replaces the inherited one in place."""
        props: List[PropertyNode] = list(self.base_type.all_properties()) if self.base_type is not None else []
        for prop in self.properties:
            for i, inherited in enumerate(props):
                if inherited.name == prop.name and inherited.is_attribute == prop.is_attribute:
                    props[i] = prop
                    break
            else:
                props.append(prop)
        return props

    def element_properties(self) -> List[PropertyNode]:
        """All element properties including inherited ones."""
        return [p for p in self.all_properties() if not p.is_attribute]

    def attribute_properties(self) -> List[PropertyNode]:
        """All attribute properties including inherited ones."""
        return [p for p in self.all_properties() if p.is_attribute]

    def find_attribute(self, local: str) -> Optional[PropertyNode]:
        """Looks up an attribute property by local name."""
        return next((p for p in self.attribute_properties() if p.name.local == local), None)

    def effective_enumeration_values(self) -> List[str]:
        """Enumeration values declared here or inherited by restriction."""
        t: Optional[TypeNode] = self
        while t is not None and not t.is_builtin:
            if t.enumeration_values:
                return t.enumeration_values
            if t.derivation != 'restriction':
                break
            t = t.base_type
        return []

    def has_string_enum_values(self) -> bool:
        """True for string-derived simple types restricted to a set of values."""
        if not self.is_simple_type or self.variety != Variety.ATOMIC:
            return False
        builtin = self.builtin_ancestor()
        if builtin is None or XSD_TO_JAVA.get(builtin.local_name) != JAVA_STRING:
            return False
        return bool(self.effective_enumeration_values())

    def value_type(self) -> Optional['TypeNode']:
        """For simple types and simple content, the simple type holding the value."""
        t: Optional[TypeNode] = self
        while t is not None and not t.is_simple_type:
            t = t.base_type
        return t

    def __repr__(self) -> str:
        if self.is_document:
            return f'TypeNode(document {self.document_element})'
        if self.is_anonymous:
            return f'TypeNode(anonymous in {self.local_name})'
        return f'TypeNode({self.name})'


class TypeSystem:
    """
    A set of schema types across one or more namespaces, plus the XML Schema builtins.

    Global types, document types and attribute types are kept in declaration order.
    """

    def __init__(self) -> None:
        self.global_types: Dict[QName, TypeNode] = {}
        self.document_types: Dict[QName, TypeNode] = {}
        self.attribute_types: Dict[QName, TypeNode] = {}
        self.builtins: Dict[QName, TypeNode] = {}
        self._create_builtins()

    def _attach(self, t: TypeNode) -> TypeNode:
        t._type_system = weakref.ref(self)  # pylint: disable=protected-access
        for anon in t.anonymous_types:
            self._attach(anon)
        return t

    def _create_builtins(self) -> None:
        any_type = TypeNode(QName(XSD_NAMESPACE, 'anyType'), content_kind=ContentKind.MIXED)
        any_type.is_builtin = True
        any_type.is_ur_type = True
        any_type.content_model = Particle(ParticleKind.SEQUENCE, children=[Particle(ParticleKind.WILDCARD, 0, None)])
        self.builtins[any_type.name] = self._attach(any_type)
        for local in XSD_BUILTIN_BASES:
            self._builtin(local)
        for local, item in (('NMTOKENS', 'NMTOKEN'), ('IDREFS', 'IDREF'), ('ENTITIES', 'ENTITY')):
            t = self.builtins[QName(XSD_NAMESPACE, local)]
            t.variety = Variety.LIST
            t.list_item_type = self.builtins[QName(XSD_NAMESPACE, item)]

    def _builtin(self, local: str) -> TypeNode:
        name = QName(XSD_NAMESPACE, local)
        if name in self.builtins:
            return self.builtins[name]
        base = self._builtin(XSD_BUILTIN_BASES[local]) if local in XSD_BUILTIN_BASES else None
        t = TypeNode(name, base_type=base, derivation='restriction', is_simple_type=True,
                     content_kind=ContentKind.SIMPLE, variety=Variety.ATOMIC)
        t.is_builtin = True
        t.is_ur_type = local == 'anySimpleType'
        self.builtins[name] = self._attach(t)
        return t

    def builtin(self, local: str) -> TypeNode:
        """Returns the builtin XML Schema type with the given local name."""
        return self.builtins[QName(XSD_NAMESPACE, local)]

    def add_global_type(self, t: TypeNode) -> TypeNode:
        """Registers a named global type. A later type of the same name shadows the earlier one."""
        assert t.name is not None
        self.global_types[t.name] = self._attach(t)
        return t

    def add_document_type(self, element: QName, content_type: Optional[TypeNode], is_abstract: bool = False,
                          substitution_group: Optional[QName] = None) -> TypeNode:
        """Creates and registers the document type of a global element."""
        doc = TypeNode(is_abstract=is_abstract, content_kind=ContentKind.ELEMENT)
        doc.is_document = True
        doc.document_element = element
        doc.content_type = content_type
        doc.substitution_group = substitution_group
        doc.content_model = Particle(ParticleKind.ELEMENT, name=element)
        if content_type is not None and content_type.is_anonymous and content_type.outer_type is None:
            content_type.outer_type = doc
            content_type.container_field = PropertyNode(element, content_type)
        self.document_types[element] = self._attach(doc)
        if content_type is not None:
            self._attach(content_type)
        return doc

    def add_attribute_type(self, attribute: QName, value_type: Optional[TypeNode]) -> TypeNode:
        """Creates and registers the type wrapping a global attribute."""
        attr = TypeNode(content_kind=ContentKind.SIMPLE)
        attr.is_attribute_type = True
        attr.document_element = attribute
        attr.content_type = value_type
        self.attribute_types[attribute] = self._attach(attr)
        return attr

    def find_type(self, name: QName) -> Optional[TypeNode]:
        """Looks up a global or builtin type."""
        return self.global_types.get(name) or self.builtins.get(name)

    def find_document_type(self, element: QName) -> Optional[TypeNode]:
        """Looks up the document type of a global element."""
        return self.document_types.get(element)

    def substitution_group_members(self, head: QName) -> List[TypeNode]:
        """Document types transitively substitutable for the head element, in declaration order."""
        members: List[TypeNode] = []
        heads = {head}
        changed = True
        while changed:
            changed = False
            for element, doc in self.document_types.items():
                if doc.substitution_group in heads and element not in heads:
                    heads.add(element)
                    changed = True
        for element, doc in self.document_types.items():
            if element != head and element in heads:
                members.append(doc)
        return members

    def all_types(self) -> Iterator[TypeNode]:
        """Global, document and attribute types in that order."""
        yield from self.global_types.values()
        yield from self.document_types.values()
        yield from self.attribute_types.values()

    def namespaces(self) -> List[str]:
        """Target namespaces of all non-builtin types, in first-seen order."""
        seen: Dict[str, None] = {}
        for t in self.all_types():
            seen.setdefault(t.namespace, None)
        return list(seen)
