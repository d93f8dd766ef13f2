# pylint: disable=line-too-long, too-many-arguments

""" Generates the per-namespace XML stream codec (StAX reader/writer bindings) """

import logging
import re
from typing import Callable, List, Optional, Tuple

from xmlbindgen.common import java_string_literal
from xmlbindgen.constants import OGC_PROPERTY, OGC_PROPERTY_IMPL, XML_BINDINGS_BASE, XML_BINDINGS_NAME
from xmlbindgen.emission import ArtifactKind, JavaEmissionUnit
from xmlbindgen.properties import PropertyInfo
from xmlbindgen.schemamodel import PropertyNode, QName, TypeNode
from xmlbindgen.streambindings import ANONYMOUS, DELEGATE, DISPATCH, SIMPLE, CodecEmitter, CodeBlock
from xmlbindgen.typemapper import TypeRef

logger = logging.getLogger(__name__)

OGC_PROPERTY_REF = TypeRef.parse(OGC_PROPERTY)
OGC_PROPERTY_IMPL_REF = TypeRef.parse(OGC_PROPERTY_IMPL)

THROWS = 'throws XMLStreamException'
INVALID_ELEMENT = 'throw new XMLStreamException(ERROR_INVALID_ELT + reader.getName() + errorLocationString(reader));'
UNSUPPORTED_TYPE = 'throw new XMLStreamException(ERROR_UNSUPPORTED_TYPE + bean.getClass().getCanonicalName());'


class XmlCodecEmitter(CodecEmitter):
    """
    Adds StAX read and write operations for eligible types and global elements
    to the XMLStreamBindings class of their namespace.

    Every read operation starts on the START_ELEMENT of the element it reads
    and returns positioned on its END_ELEMENT.
    """

    kind = ArtifactKind.XML_CODEC
    class_name = XML_BINDINGS_NAME
    base_class = XML_BINDINGS_BASE
    runtime_classes = [
        'java.util.Map',
        'javax.xml.stream.XMLStreamConstants',
        'javax.xml.stream.XMLStreamException',
        'javax.xml.stream.XMLStreamReader',
        'javax.xml.stream.XMLStreamWriter',
    ]

    # ------------------------------------------------------------ helpers

    def name_args(self, unit: JavaEmissionUnit, name: QName) -> str:
        """Namespace and local name arguments of a StAX writer call."""
        local = java_string_literal(name.local)
        if not name.namespace:
            return local
        if name.namespace == unit.namespace:
            return f'NS_URI, {local}'
        return f'{java_string_literal(name.namespace)}, {local}'

    def holder_var(self, info: PropertyInfo) -> str:
        """Local variable holding the value wrapper of a property."""
        return self.naming.variable_name(info.name) + 'Prop'

    def type_read_expr(self, unit: JavaEmissionUnit, t: TypeNode) -> Optional[str]:
        """Call reading an element of a concrete generated type, None when the type has no reader."""
        if not self.has_type_ops(t) or t.is_abstract:
            return None
        return f'{self.bindings_var(unit, t)}.read{self.codec_name(t)}(reader)'

    def element_read_expr(self, unit: JavaEmissionUnit, prop: PropertyNode) -> Optional[str]:
        """Expression reading the value of one element occurrence, None when the value is skipped."""
        doc = self.global_element(prop)
        if doc is not None:
            if self.element_mode(doc) is None:
                return None
            return f'{self.bindings_var(unit, doc)}.read{self.codec_name(doc)}(reader)'
        t = prop.type
        if self.is_text_type(t):
            node = t if t.is_simple_type else t.value_type()
            return self.text_conversion(unit, self.text_type_ref(t), node, 'reader.getElementText()')
        return self.type_read_expr(unit, t)

    def element_value_ref(self, prop: PropertyNode) -> Optional[TypeRef]:
        """Java type of the value an element occurrence is written from, None when it is not written."""
        doc = self.global_element(prop)
        if doc is not None:
            return self.bean_type(doc) if self.element_mode(doc) is not None else None
        t = prop.type
        if self.is_text_type(t):
            return self.text_type_ref(t)
        if self.has_type_ops(t) and not t.is_abstract:
            return self.mapper.map_type(t)
        return None

    def _base_call(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, suffix: str, args: str) -> bool:
        base = self.base_of(t)
        if base is None:
            return False
        block.line(f'{self.bindings_var(unit, base)}.{suffix.format(self.codec_name(base))}({args});')
        return True

    # ------------------------------------------------------- type operations

    def emit_type_operations(self, unit: JavaEmissionUnit, t: TypeNode):
        name = self.codec_name(t)
        bean = unit.use(self.naming.full_name(t))
        infos = self.classifier.describe_all(t)
        attributes = [i for i in infos if i.is_attribute]
        elements = [i for i in infos if not i.is_attribute]
        block = CodeBlock()
        if not t.is_document and not t.is_abstract:
            self._read_type(block, unit, t, name, bean)
        self._read_attributes(block, unit, t, name, bean, attributes)
        self._read_elements(block, unit, t, name, bean, elements)
        if not t.is_document:
            self._write_type(block, unit, t, name, bean)
        self._write_attributes(block, unit, t, name, bean, attributes)
        self._write_elements(block, unit, t, name, bean, elements)
        unit.write(block.render())
        logger.debug("Added XML codec operations for %s", t)

    def _read_type(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str):
        block.line()
        block.line()
        block.doc(f'Read method for {name} complex type')
        block.line(f'public {bean} read{name}(XMLStreamReader reader) {THROWS}')
        block.open()
        block.line(f'{bean} bean = {self.new_bean(unit, t)};')
        block.line()
        block.line('Map<String, String> attrMap = collectAttributes(reader);')
        block.line(f'this.read{name}Attributes(attrMap, bean);')
        block.line()
        self._read_content(block, unit, t, name)
        block.line()
        block.line('return bean;')
        block.close()

    def _read_content(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str):
        if not self.has_text(t):
            block.line('reader.nextTag();')
            block.line(f'this.read{name}Elements(reader, bean);')
            return
        owner = self.value_owner(t)
        if owner is None:
            block.line('reader.getElementText();')
            return
        ref = self.value_text_ref(owner)
        node = self.classifier.structure_of(owner).value_type()
        block.line('String val = reader.getElementText();')
        block.line('if (val != null)')
        block.indent()
        block.line(f'bean.setValue({self.text_conversion(unit, ref, node, "val")});')
        block.outdent()

    def _read_attributes(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                         attributes: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Reads attributes of {name} complex type')
        block.line(f'public void read{name}Attributes(Map<String, String> attrMap, {bean} bean) {THROWS}')
        block.open()
        if not self._base_call(block, unit, t, 'read{}Attributes', 'attrMap, bean'):
            if self.classifier.is_link_extended(self.classifier.structure_of(t)):
                block.line('readPropertyAttributes(attrMap, bean);')
        if attributes:
            block.line()
            block.line('String val;')
        for info in attributes:
            block.line()
            block.line(f'// {info.prop.name.local}')
            block.line(f'val = attrMap.get({java_string_literal(info.prop.name.local)});')
            block.line('if (val != null)')
            block.indent()
            block.line(f'bean.set{info.name}({self.text_conversion(unit, info.value_type, self.text_node(info), "val")});')
            block.outdent()
        block.close()

    def _read_elements(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                       elements: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Reads elements of {name} complex type')
        block.line(f'public void read{name}Elements(XMLStreamReader reader, {bean} bean) {THROWS}')
        block.open()
        self._base_call(block, unit, t, 'read{}Elements', 'reader, bean')
        body = CodeBlock(block.level)
        for info in elements:
            body.line()
            body.line(f'// {info.prop.name.local}')
            self._read_element_property(body, unit, info)
        if elements:
            block.line()
            block.line('boolean found;')
            if re.search(r'\bval\b', body.render()):
                block.line('String val;')
            block.extend(body)
        block.close()

    def _read_element_property(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo):
        check = ' || '.join(f'checkElementName(reader, {java_string_literal(n)})' for n in self.element_names(info.prop))
        if info.is_repeated:
            block.line('do')
            block.open()
        block.line(f'found = {check};')
        block.line('if (found)')
        block.open()
        self._read_occurrence(block, unit, info)
        block.line()
        block.line('reader.nextTag();')
        block.close()
        if info.is_repeated:
            block.close()
            block.line('while (found);')

    def _read_occurrence(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo):
        setter = f'bean.add{info.name}' if info.is_repeated else f'bean.set{info.name}'
        if info.is_complex_wrapper or info.has_name:
            boxed = info.value_type.boxed()
            var = self.holder_var(info)
            holder = unit.use(OGC_PROPERTY_REF.with_parameters(boxed))
            if info.is_repeated:
                block.line(f'{holder} {var} = new {unit.use(OGC_PROPERTY_IMPL_REF.with_parameters(boxed))}();')
            else:
                block.line(f'{holder} {var} = bean.get{info.name}Property();')
            block.line(f'readPropertyAttributes(reader, {var});')
            block.line()
            self._read_wrapped_value(block, unit, info, lambda expr: f'{var}.setValue({expr});')
            if info.is_repeated:
                block.line(f'bean.get{info.name}List().add({var});')
        elif info.is_choice:
            self._read_wrapped_value(block, unit, info, lambda expr: f'{setter}({expr});')
        elif self.is_text(info):
            block.line('val = reader.getElementText();')
            block.line('if (val != null)')
            block.indent()
            block.line(f'{setter}({self.text_conversion(unit, info.value_type, self.text_node(info), "val")});')
            block.outdent()
        else:
            expr = self.element_read_expr(unit, info.prop)
            block.line(f'{setter}({expr});' if expr is not None else 'skipElementAndAllChildren(reader);')

    def _read_wrapped_value(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo,
                            assign: Callable[[str], str]):
        if info.is_choice:
            self._read_child(block, lambda: self._read_choice(block, unit, info, assign))
            return
        inner = self.wrapped_element(info)
        if inner is not None:
            expr = self.element_read_expr(unit, inner)
            self._read_child(block, lambda: block.line(assign(expr) if expr is not None else 'skipElementAndAllChildren(reader);'))
            return
        t = info.prop.type
        if self.is_text_type(t):
            block.line('val = reader.getElementText();')
            block.line('if (val != null)')
            block.indent()
            block.line(assign(self.text_conversion(unit, info.value_type, self.text_node(info), 'val')))
            block.outdent()
            return
        expr = self.type_read_expr(unit, t)
        block.line(assign(expr) if expr is not None else 'skipElementAndAllChildren(reader);')

    @staticmethod
    def _read_child(block: CodeBlock, read: Callable[[], None]):
        block.line('reader.nextTag();')
        block.line('if (reader.getEventType() == XMLStreamConstants.START_ELEMENT)')
        block.open()
        read()
        block.line('reader.nextTag();')
        block.close()

    def _read_choice(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, assign: Callable[[str], str]):
        branches: List[Tuple[List[str], str]] = []
        for alt in info.alternatives:
            expr = self.element_read_expr(unit, alt)
            if expr is not None:
                branches.append((self.element_names(alt), expr))
        if not branches:
            block.line('skipElementAndAllChildren(reader);')
            return
        block.line('String localName = reader.getName().getLocalPart();')
        for i, (names, expr) in enumerate(branches):
            cond = ' || '.join(f'localName.equals({java_string_literal(n)})' for n in names)
            block.line(f'{"if" if i == 0 else "else if"} ({cond})')
            block.indent()
            block.line(assign(expr))
            block.outdent()
        block.line('else')
        block.indent()
        block.line(INVALID_ELEMENT)
        block.outdent()

    def _write_type(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str):
        block.line()
        block.line()
        block.doc(f'Write method for {name} complex type')
        block.line(f'public void write{name}(XMLStreamWriter writer, {bean} bean) {THROWS}')
        block.open()
        block.line(f'this.write{name}Attributes(writer, bean);')
        self._write_content(block, t, name)
        block.close()

    def _write_content(self, block: CodeBlock, t: TypeNode, name: str):
        if not self.has_text(t):
            block.line(f'this.write{name}Elements(writer, bean);')
            return
        owner = self.value_owner(t)
        if owner is None:
            return
        ref = self.value_text_ref(owner)
        if not ref.is_primitive:
            block.line('if (bean.getValue() != null)')
            block.indent()
        block.line(f'writer.writeCharacters({self.text_value(ref, "bean.getValue()")});')
        if not ref.is_primitive:
            block.outdent()

    def _write_attributes(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                          attributes: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Writes attributes of {name} complex type')
        block.line(f'public void write{name}Attributes(XMLStreamWriter writer, {bean} bean) {THROWS}')
        block.open()
        if not self._base_call(block, unit, t, 'write{}Attributes', 'writer, bean'):
            if self.classifier.is_link_extended(self.classifier.structure_of(t)):
                block.line('writePropertyAttributes(writer, bean);')
        for info in attributes:
            block.line()
            block.line(f'// {info.prop.name.local}')
            write = f'writer.writeAttribute({self.name_args(unit, info.prop.name)}, {self.text_value(info.value_type, f"bean.get{info.name}()")});'
            if info.is_optional:
                block.line(f'if (bean.isSet{info.name}())')
                block.indent()
                block.line(write)
                block.outdent()
            else:
                block.line(write)
        block.close()

    def _write_elements(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                        elements: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Writes elements of {name} complex type')
        block.line(f'public void write{name}Elements(XMLStreamWriter writer, {bean} bean) {THROWS}')
        block.open()
        self._base_call(block, unit, t, 'write{}Elements', 'writer, bean')
        if any(info.is_repeated for info in elements):
            block.line()
            block.line('int numItems;')
        for info in elements:
            block.line()
            block.line(f'// {info.prop.name.local}')
            self._write_element_property(block, unit, info)
        block.close()

    def _write_element_property(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo):
        holder = info.is_complex_wrapper or info.has_name
        holder_type = unit.use(OGC_PROPERTY_REF.with_parameters(info.value_type.boxed())) if holder else ''
        if info.is_repeated:
            block.line(f'numItems = bean.get{info.name}List().size();')
            block.line('for (int i = 0; i < numItems; i++)')
            block.open()
            if holder:
                block.line(f'{holder_type} item = bean.get{info.name}List().getProperty(i);')
                self._write_holder(block, unit, info, 'item')
            else:
                self._write_value(block, unit, info, f'bean.get{info.name}List().get(i)')
            block.close()
            return
        if info.is_optional:
            block.line(f'if (bean.isSet{info.name}())')
            block.open()
        if holder:
            var = self.holder_var(info)
            block.line(f'{holder_type} {var} = bean.get{info.name}Property();')
            self._write_holder(block, unit, info, var)
        else:
            self._write_value(block, unit, info, f'bean.get{info.name}()')
        if info.is_optional:
            block.close()

    def _write_holder(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, var: str):
        block.line(f'writer.writeStartElement({self.name_args(unit, info.prop.name)});')
        block.line(f'writePropertyAttributes(writer, {var});')
        content = CodeBlock(block.level + 1)
        self._write_wrapped_value(content, unit, info, f'{var}.getValue()')
        if content.lines:
            block.line(f'if ({var}.hasValue() && !{var}.hasHref())')
            block.open()
            block.extend(content)
            block.close()
        block.line('writer.writeEndElement();')

    def _write_wrapped_value(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, value: str):
        if info.is_choice:
            self._write_choice(block, unit, info, value)
            return
        inner = self.wrapped_element(info)
        if inner is not None:
            self._write_element(block, unit, inner, info.value_type, value)
            return
        t = info.prop.type
        if self.is_text_type(t):
            block.line(f'writer.writeCharacters({self.text_value(info.value_type, value)});')
        elif self.has_type_ops(t) and not t.is_abstract:
            block.line(f'{self.bindings_var(unit, t)}.write{self.codec_name(t)}(writer, {value});')

    def _write_value(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, value: str):
        if info.is_choice:
            block.line(f'writer.writeStartElement({self.name_args(unit, info.prop.name)});')
            self._write_choice(block, unit, info, value)
            block.line('writer.writeEndElement();')
        elif self.is_text(info):
            block.line(f'writer.writeStartElement({self.name_args(unit, info.prop.name)});')
            block.line(f'writer.writeCharacters({self.text_value(info.value_type, value)});')
            block.line('writer.writeEndElement();')
        else:
            self._write_element(block, unit, info.prop, info.value_type, value)

    def _write_element(self, block: CodeBlock, unit: JavaEmissionUnit, prop: PropertyNode, value_ref: TypeRef, value: str):
        """Writes one occurrence of an element from a value of the given Java type."""
        doc = self.global_element(prop)
        if doc is not None:
            if self.element_mode(doc) is not None:
                block.line(f'{self.bindings_var(unit, doc)}.write{self.codec_name(doc)}(writer, {value});')
            return
        t = prop.type
        if self.is_text_type(t):
            block.line(f'writer.writeStartElement({self.name_args(unit, prop.name)});')
            block.line(f'writer.writeCharacters({self.text_value(value_ref, value)});')
            block.line('writer.writeEndElement();')
        elif self.has_type_ops(t) and not t.is_abstract:
            block.line(f'writer.writeStartElement({self.name_args(unit, prop.name)});')
            block.line(f'{self.bindings_var(unit, t)}.write{self.codec_name(t)}(writer, {value});')
            block.line('writer.writeEndElement();')

    def _write_choice(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, value: str):
        branches: List[Tuple[PropertyNode, TypeRef]] = []
        seen = set()
        ordered = sorted(info.alternatives, key=lambda alt: -len(list(alt.type.ancestors())))
        for alt in ordered:
            ref = self.element_value_ref(alt)
            if ref is None or ref.is_object or ref.boxed() in seen:
                continue
            seen.add(ref.boxed())
            branches.append((alt, ref.boxed()))
        for i, (alt, ref) in enumerate(branches):
            java_type = unit.use(ref)
            block.line(f'{"if" if i == 0 else "else if"} ({value} instanceof {java_type})')
            block.open()
            self._write_element(block, unit, alt, ref, f'({java_type}){value}')
            block.close()

    # ---------------------------------------------------- element operations

    def emit_element_operations(self, unit: JavaEmissionUnit, doc: TypeNode, mode: str):
        name = self.codec_name(doc)
        bean = unit.use(self.bean_type(doc))
        block = CodeBlock()
        block.line()
        block.line()
        block.doc(f'Read method for {name} element')
        block.line(f'public {bean} read{name}(XMLStreamReader reader) {THROWS}')
        block.open()
        if mode == DISPATCH:
            self._read_dispatch(block, unit, doc)
        else:
            block.line(f'boolean found = checkElementName(reader, {java_string_literal(name)});')
            block.line('if (!found)')
            block.indent()
            block.line(INVALID_ELEMENT)
            block.outdent()
            block.line()
            self._read_element_body(block, unit, doc, mode, name, bean)
        block.close()

        block.line()
        block.line()
        block.doc(f'Write method for {name} element')
        block.line(f'public void write{name}(XMLStreamWriter writer, {bean} bean) {THROWS}')
        block.open()
        if mode == DISPATCH:
            self._write_dispatch(block, unit, doc)
        else:
            block.line(f'writer.writeStartElement(NS_URI, {java_string_literal(name)});')
            block.line('this.writeNamespaces(writer);')
            block.line()
            self._write_element_body(block, unit, doc, mode, name)
            block.line()
            block.line('writer.writeEndElement();')
        block.close()
        unit.write(block.render())
        logger.debug("Added XML codec operations for element %s", doc.document_element)

    def _read_element_body(self, block: CodeBlock, unit: JavaEmissionUnit, doc: TypeNode, mode: str, name: str, bean: str):
        content = doc.content_type
        if mode == SIMPLE:
            block.line('String val = reader.getElementText();')
            block.line('if (val != null)')
            block.indent()
            block.line(f'return {self.text_conversion(unit, self.mapper.map_type(content), content, "val")};')
            block.outdent()
            block.line('else')
            block.indent()
            block.line('return null;')
            block.outdent()
        elif mode == DELEGATE:
            block.line(f'return {self.bindings_var(unit, content)}.read{self.codec_name(content)}(reader);')
        elif mode == ANONYMOUS:
            block.line(f'{bean} bean = {self.new_bean(unit, doc)};')
            block.line()
            block.line('Map<String, String> attrMap = collectAttributes(reader);')
            block.line(f'this.read{name}Attributes(attrMap, bean);')
            block.line()
            self._read_content(block, unit, doc, name)
            block.line()
            block.line('return bean;')

    def _write_element_body(self, block: CodeBlock, unit: JavaEmissionUnit, doc: TypeNode, mode: str, name: str):
        content = doc.content_type
        if mode == SIMPLE:
            block.line(f'writer.writeCharacters({self.text_value(self.mapper.map_type(content).boxed(), "bean")});')
        elif mode == DELEGATE:
            block.line(f'{self.bindings_var(unit, content)}.write{self.codec_name(content)}(writer, bean);')
        elif mode == ANONYMOUS:
            block.line(f'this.write{name}Attributes(writer, bean);')
            self._write_content(block, doc, name)

    def _read_dispatch(self, block: CodeBlock, unit: JavaEmissionUnit, doc: TypeNode):
        members = self.substitution_members(doc)
        if members:
            block.line('String localName = reader.getName().getLocalPart();')
            block.line()
        for i, member in enumerate(members):
            block.line(f'{"if" if i == 0 else "else if"} (localName.equals({java_string_literal(member.local_name)}))')
            block.indent()
            block.line(f'return {self.bindings_var(unit, member)}.read{self.codec_name(member)}(reader);')
            block.outdent()
        if members:
            block.line()
        block.line(INVALID_ELEMENT)

    def _write_dispatch(self, block: CodeBlock, unit: JavaEmissionUnit, doc: TypeNode):
        members = self.substitution_members(doc)
        for i, member in enumerate(members):
            member_type = unit.use(self.bean_type(member))
            block.line(f'{"if" if i == 0 else "else if"} (bean instanceof {member_type})')
            block.indent()
            block.line(f'{self.bindings_var(unit, member)}.write{self.codec_name(member)}(writer, ({member_type})bean);')
            block.outdent()
        if members:
            block.line('else')
            block.indent()
            block.line(UNSUPPORTED_TYPE)
            block.outdent()
        else:
            block.line(UNSUPPORTED_TYPE)
