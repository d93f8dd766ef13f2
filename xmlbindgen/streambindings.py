# pylint: disable=line-too-long

"""
Shared machinery of the XML and JSON codec emitters.

Each namespace gets one codec class. Operations of a derived type call the
operations of its generated base explicitly, through the codec of the base's
namespace, so no codec relies on dispatch into another generated unit.
Foreign codecs are fields of the class, created in its constructor from the
factories passed in.
"""

import logging
from typing import Dict, List, Optional, Set

from xmlbindgen.common import pascal, process_template
from xmlbindgen.constants import BIND_SUBPACKAGE, FACTORY_NAME, JAVA_HASH_MAP, JAVA_MAP
from xmlbindgen.context import BindingContext
from xmlbindgen.emission import INDENT, ArtifactKind, JavaEmissionUnit
from xmlbindgen.properties import PropertyInfo
from xmlbindgen.schemamodel import ContentKind, PropertyNode, TypeNode
from xmlbindgen.typemapper import TypeRef

logger = logging.getLogger(__name__)

# element operation shapes
SIMPLE = 'simple'
DISPATCH = 'dispatch'
ANONYMOUS = 'anonymous'
DELEGATE = 'delegate'


class CodeBlock:
    """Lines of Java code at a given indentation level."""

    def __init__(self, level: int = 1) -> None:
        self.lines: List[str] = []
        self.level = level

    def line(self, text: str = ''):
        """Appends one line at the current level."""
        self.lines.append(INDENT * self.level + text)

    def indent(self):
        """Increases the indentation level."""
        self.level += 1

    def outdent(self):
        """Decreases the indentation level."""
        self.level -= 1

    def open(self):
        """Opens a braced block."""
        self.line('{')
        self.indent()

    def close(self):
        """Closes a braced block."""
        self.outdent()
        self.line('}')

    def extend(self, other: 'CodeBlock'):
        """Appends the lines of another block."""
        self.lines.extend(other.lines)

    def doc(self, text: str):
        """Javadoc comment."""
        self.line('/**')
        self.line(f' * {text}')
        self.line(' */')

    def render(self) -> str:
        """The block's text."""
        return ''.join(line + '\n' for line in self.lines)


class CodecEmitter:
    """Base of the per-namespace streaming codec emitters."""

    kind = ArtifactKind.XML_CODEC
    class_name = ''
    base_class = ''
    runtime_classes: List[str] = []

    def __init__(self, context: BindingContext) -> None:
        self.context = context
        self.naming = context.naming
        self.classifier = context.classifier
        self.eligibility = context.eligibility
        self.mapper = context.mapper
        self.type_system = context.type_system
        self._emitted: Dict[str, Set[int]] = {}

    # ------------------------------------------------------------- the unit

    def codec_ref(self, namespace: str) -> TypeRef:
        """The codec class of a namespace."""
        return TypeRef(f'{self.context.package(namespace)}.{BIND_SUBPACKAGE}', self.class_name)

    def factory_ref(self, namespace: str) -> TypeRef:
        """The factory interface of a namespace."""
        return TypeRef(self.context.package(namespace), FACTORY_NAME)

    def codec_unit(self, namespace: str) -> JavaEmissionUnit:
        """The persistent codec unit of a namespace."""
        ref = self.codec_ref(namespace)

        def create() -> JavaEmissionUnit:
            unit = JavaEmissionUnit(namespace, self.kind, self.context.output_dir, ref.package, ref.name,
                                    self._opening)
            # the local factory owns the simple name 'Factory'
            unit.use(self.factory_ref(namespace))
            for runtime_class in self.runtime_classes:
                unit.use(TypeRef.parse(runtime_class))
            return unit

        return self.context.registry.unit(namespace, self.kind, create)

    def bindings_var(self, unit: JavaEmissionUnit, t: Optional[TypeNode]) -> str:
        """Codec instance owning the operations of a type: this one, or the field of a foreign namespace codec."""
        if t is None or t.namespace == unit.namespace:
            return 'this'
        return f'{unit.dependency_alias(t.namespace)}Bindings'

    def constructor_namespaces(self, namespace: str, stack: Optional[List[str]] = None) -> List[str]:
        """
        Foreign namespaces whose factories the codec constructor of a namespace takes:
        its direct dependencies in alias order, then what their constructors need.
        """
        unit = self.context.registry.get(namespace, self.kind)
        if unit is None:
            return []
        stack = (stack or []) + [namespace]
        result = list(unit.dependencies)
        for dependency in unit.dependencies:
            if dependency in stack:
                continue
            for needed in self.constructor_namespaces(dependency, stack):
                if needed != namespace and needed not in result:
                    result.append(needed)
        return result

    def _opening(self, unit: JavaEmissionUnit) -> str:
        namespaces = self.constructor_namespaces(unit.namespace)
        params: Dict[str, str] = {unit.namespace: 'factory'}
        extra = len(unit.dependencies)
        for namespace in namespaces:
            if namespace in unit.dependencies:
                params[namespace] = f'{unit.dependencies[namespace]}Factory'
            else:
                extra += 1
                params[namespace] = f'ns{extra}Factory'
        parameters = [f'{unit.use(self.factory_ref(unit.namespace))} factory']
        parameters.extend(f'{unit.use(self.factory_ref(ns))} {params[ns]}' for ns in namespaces)
        arguments = ['factory'] + [params[ns] for ns in namespaces]
        fields = []
        lookups = []
        # codecs of mutually dependent namespaces share one instance per namespace URI
        for namespace, alias in unit.dependencies.items():
            codec = unit.use(self.codec_ref(namespace))
            args = [params[namespace]] + [params[ns] for ns in self.constructor_namespaces(namespace)]
            fields.append((codec, f'{alias}Bindings'))
            lookups.append((codec, f'{alias}Bindings', ', '.join(args)))
        return process_template('javatemplates/bindings.java.jinja', class_name=self.class_name,
                                base_class=unit.use(TypeRef.parse(self.base_class)), namespace=unit.namespace,
                                fields=fields, factory_type=unit.use(self.factory_ref(unit.namespace)),
                                parameters=parameters, arguments=arguments, lookups=lookups,
                                registry_type=unit.use(TypeRef.parse(JAVA_MAP)),
                                registry_impl=unit.use(TypeRef.parse(JAVA_HASH_MAP)))

    # ------------------------------------------------------- classification

    def codec_name(self, t: TypeNode) -> str:
        """Name part of a type's or element's operations: the schema local name."""
        return t.local_name

    def element_mode(self, doc: TypeNode) -> Optional[str]:
        """How the operations of a global element read and write it, None if it has none."""
        content = doc.content_type
        if content is None or not self.eligibility.generated(doc):
            return None
        if content.is_simple_type:
            return SIMPLE
        if doc.is_abstract or content.is_abstract:
            return DISPATCH
        if content.is_anonymous:
            return ANONYMOUS
        if self.eligibility.generated(content):
            return DELEGATE
        return None

    def has_type_ops(self, t: Optional[TypeNode]) -> bool:
        """True for global complex types whose codec operations exist."""
        return (t is not None and not t.is_simple_type and not t.is_document and not t.is_anonymous
                and self.eligibility.generated(t))

    def has_text(self, t: TypeNode) -> bool:
        """Text value carried by the type itself."""
        t = self.classifier.structure_of(t)
        return t.is_simple_type or t.content_kind == ContentKind.SIMPLE

    def global_element(self, prop: PropertyNode) -> Optional[TypeNode]:
        """Document type of the global element an element property refers to."""
        if prop.is_attribute:
            return None
        doc = self.type_system.find_document_type(prop.name)
        if doc is None or doc.content_type is not prop.type:
            return None
        return doc

    def is_text_type(self, t: TypeNode) -> bool:
        """Values of the type are read and written as plain text."""
        return t.is_simple_type or (t.content_kind == ContentKind.SIMPLE and not self.eligibility.generated(t))

    def text_type_ref(self, t: TypeNode) -> TypeRef:
        """Java type of the text value of a text typed element."""
        return self.mapper.map_type(t) if t.is_simple_type else self.mapper.map_value_type(t)

    def is_text(self, info: PropertyInfo) -> bool:
        """The property value is character data."""
        return info.is_attribute or self.is_text_type(info.prop.type)

    def wrapped_element(self, info: PropertyInfo) -> Optional[PropertyNode]:
        """Single child element of a wrapper property."""
        if not info.is_wrapper or info.is_choice:
            return None
        elements = info.prop.type.element_properties()
        return elements[0] if len(elements) == 1 else None

    def substitution_members(self, doc: TypeNode) -> List[TypeNode]:
        """Concrete members of a substitution group with codec operations, most derived first."""
        members = []
        seen = set()
        for member in self.type_system.substitution_group_members(doc.document_element):
            if member.is_abstract or self.element_mode(member) not in (DELEGATE, ANONYMOUS):
                continue
            bean = self.bean_type(member)
            if bean in seen:
                continue
            seen.add(bean)
            members.append(member)
        return sorted(members, key=lambda m: -len(list(self.bean_node(m).ancestors())))

    def bean_node(self, doc: TypeNode) -> TypeNode:
        """Type whose model class an element is read into."""
        content = doc.content_type
        if content is None or content.is_anonymous:
            return doc
        return self.eligibility.nearest_eligible(content) or content

    def bean_type(self, t: TypeNode) -> TypeRef:
        """Model interface an element or a type is read into."""
        if t.is_document:
            content = t.content_type
            if content is not None and content.is_simple_type:
                return self.mapper.map_type(content).boxed()
            return self.naming.full_name(self.bean_node(t))
        return self.mapper.map_type(t)

    def base_of(self, t: TypeNode) -> Optional[TypeNode]:
        """Generated base whose operations a type delegates to."""
        base = self.classifier.model_base(t)
        if base is not None and base.is_document:
            return None
        return base

    def value_owner(self, t: TypeNode) -> Optional[TypeNode]:
        """The type or generated ancestor declaring the value accessor of a simple content type."""
        node: Optional[TypeNode] = t
        while node is not None:
            if self.classifier.has_value_accessor(node):
                return node
            node = self.base_of(node)
        return None

    def new_bean(self, unit: JavaEmissionUnit, t: TypeNode) -> str:
        """Expression creating a new model object of a type."""
        if self.naming.is_colliding_document(t):
            return f'new {unit.use(self.naming.impl_name(t))}()'
        return f'factory.new{self.naming.short_name(t)}()'

    def element_names(self, prop: PropertyNode) -> List[str]:
        """Local names an element property matches on the stream."""
        doc = self.global_element(prop)
        if doc is not None and self.element_mode(doc) == DISPATCH:
            names = [m.local_name for m in self.substitution_members(doc)]
            if names:
                return names
        return [prop.name.local]

    # ------------------------------------------------------- conversions

    def text_conversion(self, unit: JavaEmissionUnit, ref: TypeRef, node: Optional[TypeNode], source: str) -> str:
        """Expression converting a string to a Java value of the given type."""
        if node is not None and node.has_string_enum_values() and self.eligibility.generated(node):
            return f'{unit.use(ref)}.fromString({source})'
        if ref.is_array:
            return f'get{pascal(ref.element_type().name)}ArrayFromString({source})'
        if ref.is_string:
            return f'trimStringValue({source})'
        if ref.is_object:
            return source
        return f'get{pascal(ref.name)}FromString({source})'

    def text_value(self, ref: TypeRef, expr: str) -> str:
        """Expression rendering a Java value as text."""
        if ref.is_string:
            return expr
        return f'getStringValue({expr})'

    def text_node(self, info: PropertyInfo) -> Optional[TypeNode]:
        """Simple type holding the text of a property value."""
        node = info.value_node
        if node is None or node.is_simple_type:
            return node
        return node.value_type()

    def value_text_ref(self, t: TypeNode) -> TypeRef:
        """Java type of the text value of a simple content type."""
        return self.mapper.map_value_type(self.classifier.structure_of(t))

    # ------------------------------------------------------------ emission

    def emit(self, t: TypeNode):
        """Adds the operations of an eligible type or element to its namespace codec."""
        if t.is_simple_type or not self.eligibility.generated(t):
            return
        unit = self.codec_unit(t.namespace)
        emitted = self._emitted.setdefault(t.namespace, set())
        if id(t) in emitted:
            return
        emitted.add(id(t))
        if t.is_document:
            mode = self.element_mode(t)
            if mode is None:
                logger.debug("No codec operations for element %s", t.document_element)
                return
            if mode == ANONYMOUS:
                self.emit_type_operations(unit, t)
            self.emit_element_operations(unit, t, mode)
        elif not t.is_anonymous:
            self.emit_type_operations(unit, t)

    def emit_type_operations(self, unit: JavaEmissionUnit, t: TypeNode):
        """Read and write operations of a complex type."""
        raise NotImplementedError

    def emit_element_operations(self, unit: JavaEmissionUnit, doc: TypeNode, mode: str):
        """Read and write operations of a global element."""
        raise NotImplementedError
