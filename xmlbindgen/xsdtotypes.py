# pylint: disable=line-too-long, too-many-locals, too-many-branches, too-many-statements, too-many-instance-attributes

"""Loads XSD documents into a :class:`~xmlbindgen.schemamodel.TypeSystem`."""

import logging
import os
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Set, Tuple
from urllib.parse import urlparse

from xmlbindgen.constants import XSD_NAMESPACE
from xmlbindgen.errors import SchemaLoadError
from xmlbindgen.schemamodel import (ContentKind, Particle, ParticleKind, PropertyNode, QName, TypeNode,
                                    TypeSystem, Variety)

logger = logging.getLogger(__name__)


def xs(tag: str) -> str:
    """Clark notation for an element of the XML Schema namespace."""
    return f'{{{XSD_NAMESPACE}}}{tag}'


MODEL_GROUPS = (xs('sequence'), xs('choice'), xs('all'), xs('group'))


class SchemaDocument:
    """A parsed XSD document with its namespace context."""

    def __init__(self, path: str, root: ET.Element, prefixes: Dict[str, str], target_namespace: str) -> None:
        self.path = path
        self.root = root
        self.prefixes = prefixes
        self.target_namespace = target_namespace
        self.element_qualified = root.get('elementFormDefault') == 'qualified'
        self.attribute_qualified = root.get('attributeFormDefault') == 'qualified'

    def qname(self, value: str) -> QName:
        """Resolves a prefixed name against the document's namespace declarations."""
        if ':' in value:
            prefix, local = value.split(':', 1)
        else:
            prefix, local = '', value
        if prefix not in self.prefixes:
            if prefix:
                raise SchemaLoadError(f"Undeclared namespace prefix '{prefix}'", context=self.path)
            return QName('', local)
        return QName(self.prefixes[prefix], local)


class XSDToTypes:
    """Builds a type system from XSD files, following imports, includes and redefinitions."""

    def __init__(self) -> None:
        self.type_system = TypeSystem()
        self._loaded: Set[Tuple[str, str]] = set()
        self._complex_types: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._simple_types: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._elements: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._attributes: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._groups: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._attribute_groups: Dict[QName, Tuple[ET.Element, SchemaDocument]] = {}
        self._redefinitions: List[Tuple[ET.Element, SchemaDocument]] = []
        self._redefined: Dict[QName, TypeNode] = {}
        self._defs: Dict[int, Tuple[ET.Element, SchemaDocument]] = {}
        self._filled: Set[int] = set()
        self._filling: Set[int] = set()

    def read_document(self, path: str, chameleon_namespace: Optional[str] = None) -> Optional[SchemaDocument]:
        """Parses one XSD file. Returns None when the file was already loaded."""
        path = os.path.abspath(path)
        key = (path, chameleon_namespace or '')
        if key in self._loaded:
            return None
        self._loaded.add(key)
        prefixes: Dict[str, str] = {}
        try:
            for _, (prefix, uri) in ET.iterparse(path, events=('start-ns',)):
                prefixes.setdefault(prefix, uri)
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise SchemaLoadError(f"Invalid XML in schema: {e}", context=path, cause=e) from e
        except OSError as e:
            raise SchemaLoadError(f"Cannot read schema: {e}", context=path, cause=e) from e
        if root.tag != xs('schema'):
            raise SchemaLoadError("Document root is not xs:schema", context=path)
        target_namespace = root.get('targetNamespace') or chameleon_namespace or ''
        if chameleon_namespace and not root.get('targetNamespace'):
            # chameleon include: unprefixed references resolve to the including namespace
            prefixes = dict(prefixes)
            prefixes.setdefault('', chameleon_namespace)
        logger.debug("Loaded schema %s (namespace %s)", path, target_namespace)
        return SchemaDocument(path, root, prefixes, target_namespace)

    def load(self, path: str, chameleon_namespace: Optional[str] = None):
        """Collects the global declarations of a schema file and of everything it includes or imports."""
        doc = self.read_document(path, chameleon_namespace)
        if doc is None:
            return
        for child in doc.root:
            if child.tag in (xs('include'), xs('import'), xs('redefine')):
                location = child.get('schemaLocation')
                if not location:
                    continue
                if urlparse(location).scheme in ('http', 'https'):
                    logger.warning("Skipping remote schema location %s referenced from %s", location, doc.path)
                    continue
                target = os.path.join(os.path.dirname(doc.path), location)
                if child.tag == xs('import'):
                    self.load(target)
                else:
                    self.load(target, doc.target_namespace)
                if child.tag == xs('redefine'):
                    for redefined in child:
                        if redefined.tag == xs('complexType'):
                            self._redefinitions.append((redefined, doc))
                        else:
                            self._register(redefined, doc)
            else:
                self._register(child, doc)

    def _register(self, child: ET.Element, doc: SchemaDocument):
        name = child.get('name')
        if not name:
            return
        qname = QName(doc.target_namespace, name)
        table = {
            xs('complexType'): self._complex_types,
            xs('simpleType'): self._simple_types,
            xs('element'): self._elements,
            xs('attribute'): self._attributes,
            xs('group'): self._groups,
            xs('attributeGroup'): self._attribute_groups,
        }.get(child.tag)
        if table is not None:
            table[qname] = (child, doc)

    def build(self) -> TypeSystem:
        """Creates the types for every collected declaration."""
        ts = self.type_system
        for qname, (node, doc) in self._simple_types.items():
            t = TypeNode(qname, is_simple_type=True, content_kind=ContentKind.SIMPLE)
            self._defs[id(t)] = (node, doc)
            ts.add_global_type(t)
        for qname, (node, doc) in self._complex_types.items():
            t = TypeNode(qname)
            self._defs[id(t)] = (node, doc)
            ts.add_global_type(t)
        for node, doc in self._redefinitions:
            qname = QName(doc.target_namespace, node.get('name', ''))
            original = ts.global_types.get(qname)
            if original is None:
                raise SchemaLoadError(f"Redefinition of unknown type {qname}", context=doc.path)
            t = TypeNode(qname)
            self._defs[id(t)] = (node, doc)
            self._redefined[qname] = original
            ts.add_global_type(t)
        for qname, (node, doc) in self._elements.items():
            self._build_document(qname, node, doc)
        for qname, (node, doc) in self._attributes.items():
            value_type = self._attribute_value_type(node, doc, None, None)
            ts.add_attribute_type(qname, value_type)
        for qname in list(self._redefined):
            self._ensure_filled(self._redefined[qname])
        for t in list(ts.global_types.values()):
            self._ensure_filled(t)
        return ts

    def _build_document(self, qname: QName, node: ET.Element, doc: SchemaDocument) -> TypeNode:
        existing = self.type_system.find_document_type(qname)
        if existing is not None:
            return existing
        head = doc.qname(node.get('substitutionGroup', '').split()[0]) if node.get('substitutionGroup') else None
        content: Optional[TypeNode]
        if node.get('type'):
            content = self.resolve_type(node.get('type', ''), doc)
        elif node.find(xs('complexType')) is not None or node.find(xs('simpleType')) is not None:
            content = None
        elif head is not None:
            head_decl = self._elements.get(head)
            if head_decl is None:
                raise SchemaLoadError(f"Unknown substitution group head {head}", context=doc.path)
            content = self._build_document(head, *head_decl).content_type
        else:
            content = self.type_system.builtin('anyType')
        document = self.type_system.add_document_type(qname, content, node.get('abstract') == 'true', head)
        if content is None:
            anon_node = node.find(xs('complexType'))
            if anon_node is None:
                anon_node = node.find(xs('simpleType'))
            anon = self._new_anonymous(anon_node)
            anon.outer_type = document
            anon.container_field = PropertyNode(qname, anon)
            anon._type_system = document._type_system  # pylint: disable=protected-access
            document.content_type = anon
            self._fill(anon, anon_node, doc)
        return document

    def _new_anonymous(self, node: ET.Element) -> TypeNode:
        if node.tag == xs('simpleType'):
            return TypeNode(is_simple_type=True, content_kind=ContentKind.SIMPLE)
        return TypeNode()

    def resolve_type(self, value: str, doc: SchemaDocument, redefining: Optional[TypeNode] = None) -> TypeNode:
        """Resolves a type reference. Inside a redefinition, the type's own name refers to the original."""
        qname = doc.qname(value)
        if redefining is not None and qname == redefining.name and qname in self._redefined:
            return self._redefined[qname]
        t = self.type_system.find_type(qname)
        if t is None:
            raise SchemaLoadError(f"Unknown type {qname}", context=doc.path)
        return t

    def _ensure_filled(self, t: TypeNode):
        if id(t) in self._filled or t.is_builtin or id(t) not in self._defs:
            return
        node, doc = self._defs[id(t)]
        self._fill(t, node, doc)

    def _fill(self, t: TypeNode, node: ET.Element, doc: SchemaDocument):
        if id(t) in self._filled:
            return
        if id(t) in self._filling:
            raise SchemaLoadError(f"Circular type derivation involving {t}", context=doc.path)
        self._filling.add(id(t))
        if node.tag == xs('simpleType'):
            self._fill_simple(t, node, doc)
        else:
            self._fill_complex(t, node, doc)
        self._filling.discard(id(t))
        self._filled.add(id(t))

    def _inline_type(self, owner: TypeNode, node: ET.Element, doc: SchemaDocument, field: Optional[PropertyNode]) -> Optional[TypeNode]:
        anon_node = node.find(xs('complexType'))
        if anon_node is None:
            anon_node = node.find(xs('simpleType'))
        if anon_node is None:
            return None
        anon = self._new_anonymous(anon_node)
        if field is None:
            field = PropertyNode(QName(doc.target_namespace, owner.local_name), anon)
        owner.add_anonymous_type(anon, field)
        self._fill(anon, anon_node, doc)
        return anon

    def _fill_simple(self, t: TypeNode, node: ET.Element, doc: SchemaDocument):
        t.is_simple_type = True
        t.content_kind = ContentKind.SIMPLE
        restriction = node.find(xs('restriction'))
        list_node = node.find(xs('list'))
        union = node.find(xs('union'))
        if restriction is not None:
            t.derivation = 'restriction'
            if restriction.get('base'):
                base = self.resolve_type(restriction.get('base', ''), doc)
            else:
                base = self._inline_type(t, restriction, doc, None) or self.type_system.builtin('anySimpleType')
            self._ensure_filled(base)
            t.base_type = base
            t.variety = base.variety if base.variety != Variety.NONE else Variety.ATOMIC
            t.list_item_type = base.list_item_type
            t.union_members = list(base.union_members)
            t.enumeration_values = [e.get('value', '') for e in restriction.findall(xs('enumeration'))]
        elif list_node is not None:
            t.derivation = 'restriction'
            t.base_type = self.type_system.builtin('anySimpleType')
            t.variety = Variety.LIST
            if list_node.get('itemType'):
                t.list_item_type = self.resolve_type(list_node.get('itemType', ''), doc)
            else:
                t.list_item_type = self._inline_type(t, list_node, doc, None)
        elif union is not None:
            t.derivation = 'restriction'
            t.base_type = self.type_system.builtin('anySimpleType')
            t.variety = Variety.UNION
            t.union_members = [self.resolve_type(m, doc) for m in union.get('memberTypes', '').split()]
            for inline in union.findall(xs('simpleType')):
                anon = TypeNode(is_simple_type=True, content_kind=ContentKind.SIMPLE)
                t.add_anonymous_type(anon, PropertyNode(QName(doc.target_namespace, t.local_name), anon))
                self._fill(anon, inline, doc)
                t.union_members.append(anon)
        else:
            raise SchemaLoadError(f"Simple type {t} has no restriction, list or union", context=doc.path)

    def _fill_complex(self, t: TypeNode, node: ET.Element, doc: SchemaDocument):
        t.is_simple_type = False
        t.is_abstract = node.get('abstract') == 'true'
        mixed = node.get('mixed') == 'true'
        redefining = t if t.name in self._redefined else None
        simple_content = node.find(xs('simpleContent'))
        complex_content = node.find(xs('complexContent'))
        derivation_node = node
        own_particle: Optional[Particle] = None
        if simple_content is not None or complex_content is not None:
            content = simple_content if simple_content is not None else complex_content
            assert content is not None
            derivation_node = content.find(xs('extension'))
            t.derivation = 'extension'
            if derivation_node is None:
                derivation_node = content.find(xs('restriction'))
                t.derivation = 'restriction'
            if derivation_node is None:
                raise SchemaLoadError(f"Derived content of {t} has no extension or restriction", context=doc.path)
            base = self.resolve_type(derivation_node.get('base', ''), doc, redefining)
            if complex_content is not None and complex_content.get('mixed') == 'true':
                mixed = True
        else:
            base = self.type_system.builtin('anyType')
            t.derivation = 'restriction'
        self._ensure_filled(base)
        t.base_type = base

        declarations: Dict[QName, PropertyNode] = {}
        for child in derivation_node:
            if child.tag in MODEL_GROUPS:
                own_particle = self._particle(t, child, doc, declarations)
        self._collect_attributes(t, derivation_node, doc)
        if simple_content is not None and t.derivation == 'restriction':
            t.enumeration_values = [e.get('value', '') for e in derivation_node.findall(xs('enumeration'))]

        for prop in self._flatten(own_particle, declarations):
            t.add_property(prop)

        if t.derivation == 'extension' and base.content_model is not None and not base.is_ur_type and own_particle is not None:
            t.content_model = Particle(ParticleKind.SEQUENCE, children=[base.content_model, own_particle])
        elif own_particle is not None:
            t.content_model = own_particle
        elif t.derivation == 'extension' and not base.is_ur_type:
            t.content_model = base.content_model

        if simple_content is not None or (base.content_kind == ContentKind.SIMPLE and own_particle is None and not base.is_ur_type):
            t.content_kind = ContentKind.SIMPLE
            value_type = t.value_type()
            t.variety = value_type.variety if value_type is not None else Variety.ATOMIC
        elif mixed:
            t.content_kind = ContentKind.MIXED
        elif t.element_properties() or (t.content_model is not None and self._has_elements(t.content_model)):
            t.content_kind = ContentKind.ELEMENT
        else:
            t.content_kind = ContentKind.EMPTY

    def _has_elements(self, particle: Particle) -> bool:
        if particle.kind in (ParticleKind.ELEMENT, ParticleKind.WILDCARD):
            return True
        return any(self._has_elements(c) for c in particle.children)

    def _occurs(self, node: ET.Element) -> Tuple[int, Optional[int]]:
        min_occurs = int(node.get('minOccurs', '1'))
        max_value = node.get('maxOccurs', '1')
        max_occurs = None if max_value == 'unbounded' else int(max_value)
        return min_occurs, max_occurs

    def _particle(self, owner: TypeNode, node: ET.Element, doc: SchemaDocument,
                  declarations: Dict[QName, PropertyNode]) -> Optional[Particle]:
        min_occurs, max_occurs = self._occurs(node)
        tag = node.tag
        if tag == xs('element'):
            return self._element_particle(owner, node, doc, declarations, min_occurs, max_occurs)
        if tag == xs('any'):
            return Particle(ParticleKind.WILDCARD, min_occurs, max_occurs)
        if tag == xs('group'):
            ref = doc.qname(node.get('ref', ''))
            if ref not in self._groups:
                raise SchemaLoadError(f"Unknown model group {ref}", context=doc.path)
            group_node, group_doc = self._groups[ref]
            inner = next((c for c in group_node if c.tag in MODEL_GROUPS), None)
            if inner is None:
                return None
            particle = self._particle(owner, inner, group_doc, declarations)
            if particle is not None:
                particle.min_occurs *= min_occurs
                particle.max_occurs = None if particle.max_occurs is None or max_occurs is None else particle.max_occurs * max_occurs
            return particle
        kind = {xs('sequence'): ParticleKind.SEQUENCE, xs('choice'): ParticleKind.CHOICE, xs('all'): ParticleKind.ALL}.get(tag)
        if kind is None:
            return None
        children = []
        for child in node:
            particle = self._particle(owner, child, doc, declarations)
            if particle is not None:
                children.append(particle)
        return Particle(kind, min_occurs, max_occurs, children)

    def _element_particle(self, owner: TypeNode, node: ET.Element, doc: SchemaDocument,
                          declarations: Dict[QName, PropertyNode], min_occurs: int, max_occurs: Optional[int]) -> Particle:
        if node.get('ref'):
            name = doc.qname(node.get('ref', ''))
            if name not in self._elements:
                raise SchemaLoadError(f"Unknown element {name}", context=doc.path)
            element_node, element_doc = self._elements[name]
            document = self._build_document(name, element_node, element_doc)
            element_type = document.content_type or self.type_system.builtin('anyType')
            decl = PropertyNode(name, element_type, default=element_node.get('default') or element_node.get('fixed'),
                                read_only=element_node.get('fixed') is not None,
                                nillable=element_node.get('nillable') == 'true')
        else:
            qualified = node.get('form', 'qualified' if doc.element_qualified else 'unqualified') == 'qualified'
            name = QName(doc.target_namespace if qualified else '', node.get('name', ''))
            decl = PropertyNode(name, self.type_system.builtin('anyType'),
                                default=node.get('default') or node.get('fixed'),
                                read_only=node.get('fixed') is not None,
                                nillable=node.get('nillable') == 'true')
            if node.get('type'):
                decl.type = self.resolve_type(node.get('type', ''), doc)
            else:
                anon = self._inline_type(owner, node, doc, decl)
                if anon is not None:
                    decl.type = anon
        declarations.setdefault(name, decl)
        return Particle(ParticleKind.ELEMENT, min_occurs, max_occurs, name=name)

    def _flatten(self, particle: Optional[Particle], declarations: Dict[QName, PropertyNode]) -> List[PropertyNode]:
        """Turns a particle tree into element properties with combined occurrence bounds."""
        props: Dict[QName, PropertyNode] = {}

        def walk(p: Particle, min_factor: int, max_factor: Optional[int]):
            min_occurs = p.min_occurs * min_factor
            max_occurs = None if p.max_occurs is None or max_factor is None else p.max_occurs * max_factor
            if p.kind == ParticleKind.ELEMENT:
                assert p.name is not None
                decl = declarations[p.name]
                if p.name in props:
                    existing = props[p.name]
                    existing.min_occurs += min_occurs
                    existing.max_occurs = None if existing.max_occurs is None or max_occurs is None else existing.max_occurs + max_occurs
                else:
                    props[p.name] = PropertyNode(p.name, decl.type, False, min_occurs, max_occurs,
                                                 decl.default, decl.read_only, decl.nillable)
            elif p.kind in (ParticleKind.SEQUENCE, ParticleKind.ALL):
                for child in p.children:
                    walk(child, min_occurs, max_occurs)
            elif p.kind == ParticleKind.CHOICE:
                child_min = min_occurs if len(p.children) == 1 else 0
                for child in p.children:
                    walk(child, child_min, max_occurs)

        if particle is not None:
            walk(particle, 1, 1)
        for prop in props.values():
            decl = declarations[prop.name]
            if decl.type.container_field is decl:
                decl.type.container_field = prop
        return list(props.values())

    def _collect_attributes(self, owner: TypeNode, node: ET.Element, doc: SchemaDocument, seen: Optional[Set[QName]] = None):
        if seen is None:
            seen = set()
        for child in node:
            if child.tag == xs('attribute'):
                if child.get('use') == 'prohibited':
                    continue
                prop = self._attribute(owner, child, doc)
                if prop.name not in {p.name for p in owner.properties if p.is_attribute}:
                    owner.add_property(prop)
            elif child.tag == xs('attributeGroup'):
                ref = doc.qname(child.get('ref', ''))
                if ref in seen:
                    continue
                seen.add(ref)
                if ref not in self._attribute_groups:
                    raise SchemaLoadError(f"Unknown attribute group {ref}", context=doc.path)
                group_node, group_doc = self._attribute_groups[ref]
                self._collect_attributes(owner, group_node, group_doc, seen)

    def _attribute(self, owner: TypeNode, node: ET.Element, doc: SchemaDocument) -> PropertyNode:
        required = node.get('use') == 'required'
        if node.get('ref'):
            name = doc.qname(node.get('ref', ''))
            if name not in self._attributes:
                raise SchemaLoadError(f"Unknown attribute {name}", context=doc.path)
            decl_node, decl_doc = self._attributes[name]
            attribute_type = self.type_system.attribute_types.get(name)
            value_type = attribute_type.content_type if attribute_type is not None else None
            if value_type is None:
                value_type = self._attribute_value_type(decl_node, decl_doc, None, None)
            source = decl_node
        else:
            qualified = node.get('form', 'qualified' if doc.attribute_qualified else 'unqualified') == 'qualified'
            name = QName(doc.target_namespace if qualified else '', node.get('name', ''))
            value_type = None
            source = node
        prop = PropertyNode(name, self.type_system.builtin('anySimpleType'), True, 1 if required else 0, 1,
                            node.get('default') or node.get('fixed') or source.get('default') or source.get('fixed'),
                            read_only=(node.get('fixed') or source.get('fixed')) is not None)
        prop.type = value_type or self._attribute_value_type(node, doc, owner, prop)
        return prop

    def _attribute_value_type(self, node: ET.Element, doc: SchemaDocument, owner: Optional[TypeNode],
                              field: Optional[PropertyNode]) -> TypeNode:
        if node.get('type'):
            return self.resolve_type(node.get('type', ''), doc)
        inline = node.find(xs('simpleType'))
        if inline is not None:
            anon = TypeNode(is_simple_type=True, content_kind=ContentKind.SIMPLE)
            if owner is not None and field is not None:
                owner.add_anonymous_type(anon, field)
            self._fill(anon, inline, doc)
            return anon
        return self.type_system.builtin('anySimpleType')


def load_xsd(xsd_paths) -> TypeSystem:
    """
    Load one or more XSD files into a type system.

    Params:
    xsd_paths: str | List[str] - Paths of the XSD files. Imported and included files are followed.
    """
    if isinstance(xsd_paths, str):
        xsd_paths = [xsd_paths]
    loader = XSDToTypes()
    for path in xsd_paths:
        if not os.path.exists(path):
            raise FileNotFoundError(f"XSD file not found at {path}")
        loader.load(path)
    return loader.build()
