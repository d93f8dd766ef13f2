# pylint: disable=line-too-long, too-many-arguments

"""
Generates the per-namespace JSON stream codec over Gson's JsonReader/JsonWriter.

Objects carry their type's short name in a leading 'type' member. Members of
wrapped values share the object of their wrapper, after its link members.
"""

import logging
from typing import Callable, List, Optional, Tuple

from xmlbindgen.common import java_string_literal, pascal, plural
from xmlbindgen.constants import (JAVA_BOXED, JSON_BINDINGS_BASE, JSON_BINDINGS_NAME, JSON_TYPE_DISCRIMINATOR,
                                  OGC_PROPERTY, OGC_PROPERTY_IMPL)
from xmlbindgen.emission import ArtifactKind, JavaEmissionUnit
from xmlbindgen.properties import PropertyInfo
from xmlbindgen.schemamodel import PropertyNode, TypeNode
from xmlbindgen.streambindings import ANONYMOUS, DELEGATE, DISPATCH, SIMPLE, CodecEmitter, CodeBlock
from xmlbindgen.typemapper import TypeRef

logger = logging.getLogger(__name__)

OGC_PROPERTY_REF = TypeRef.parse(OGC_PROPERTY)
OGC_PROPERTY_IMPL_REF = TypeRef.parse(OGC_PROPERTY_IMPL)

THROWS = 'throws IOException'
UNSUPPORTED_TYPE = 'throw new IOException(ERROR_UNSUPPORTED_TYPE + type);'
UNSUPPORTED_CLASS = 'throw new IOException(ERROR_UNSUPPORTED_TYPE + bean.getClass().getCanonicalName());'

JSON_READERS = {
    'boolean': 'reader.nextBoolean()',
    'int': 'reader.nextInt()',
    'long': 'reader.nextLong()',
    'double': 'reader.nextDouble()',
    'float': '(float)reader.nextDouble()',
    'short': '(short)reader.nextInt()',
    'byte': '(byte)reader.nextInt()',
}
UNBOXED = {boxed: primitive for primitive, boxed in JAVA_BOXED.items()}


class JsonCodecEmitter(CodecEmitter):
    """Adds JSON read and write operations for eligible types and global elements to the namespace codec."""

    kind = ArtifactKind.JSON_CODEC
    class_name = JSON_BINDINGS_NAME
    base_class = JSON_BINDINGS_BASE
    runtime_classes = [
        'java.io.IOException',
        'com.google.gson.stream.JsonReader',
        'com.google.gson.stream.JsonWriter',
    ]

    # ------------------------------------------------------------ values

    @staticmethod
    def primitive_name(ref: TypeRef) -> Optional[str]:
        """Primitive behind a primitive or boxed reference."""
        if ref.is_array:
            return None
        if ref.is_primitive:
            return ref.name
        if ref.package == 'java.lang':
            return UNBOXED.get(ref.name)
        return None

    def is_json_array(self, ref: TypeRef) -> bool:
        """Array values other than binary data travel as JSON arrays."""
        return ref.is_array and ref.name != 'byte'

    def value_read_expr(self, unit: JavaEmissionUnit, ref: TypeRef, node: Optional[TypeNode]) -> str:
        """Expression reading a scalar or array value of the given Java type."""
        primitive = self.primitive_name(ref)
        if primitive in JSON_READERS:
            return JSON_READERS[primitive]
        if self.is_json_array(ref):
            return f'read{pascal(ref.name)}Array(reader)'
        if ref.is_string:
            return 'reader.nextString()'
        return self.text_conversion(unit, ref, node, 'reader.nextString()')

    def value_write_lines(self, ref: TypeRef, expr: str, member: Optional[str] = None) -> List[str]:
        """Statements writing a scalar or array value, preceded by its member name when given."""
        prefix = f'writer.name({java_string_literal(member)})' if member is not None else 'writer'
        if self.is_json_array(ref):
            lines = [prefix + ';'] if member is not None else []
            return lines + [f'writeArrayValue(writer, {expr});']
        if self.primitive_name(ref) is not None or ref.is_string or ref.package == 'java.math':
            return [f'{prefix}.value({expr});']
        return [f'{prefix}.value(getStringValue({expr}));']

    def holder_var(self, info: PropertyInfo) -> str:
        """Local variable holding the value wrapper of a property."""
        return self.naming.variable_name(info.name) + 'Prop'

    def discriminator(self, ref: TypeRef) -> str:
        """Value of the 'type' member of objects of a model class."""
        return ref.name.split('.')[-1]

    # ------------------------------------------------------- classification

    def object_read(self, unit: JavaEmissionUnit, prop: PropertyNode) -> Optional[str]:
        """Call reading an element occurrence as a whole JSON object, None when the value is skipped."""
        doc = self.global_element(prop)
        if doc is not None:
            if self.element_mode(doc) is None:
                return None
            return f'{self.bindings_var(unit, doc)}.read{self.codec_name(doc)}(reader)'
        t = prop.type
        if self.is_text_type(t):
            node = t if t.is_simple_type else t.value_type()
            return self.value_read_expr(unit, self.text_type_ref(t), node)
        if self.has_type_ops(t) and not t.is_abstract:
            return f'{self.bindings_var(unit, t)}.read{self.codec_name(t)}(reader)'
        return None

    def accepted_types(self, prop: PropertyNode) -> List[str]:
        """'type' member values an element occurrence is read from as an object."""
        doc = self.global_element(prop)
        if doc is not None:
            mode = self.element_mode(doc)
            if mode in (None, SIMPLE):
                return []
            if mode == DISPATCH:
                return [self.discriminator(self.bean_type(m)) for m in self.substitution_members(doc)]
            return [self.discriminator(self.bean_type(doc))]
        t = prop.type
        if self.has_type_ops(t) and not t.is_abstract:
            return [self.discriminator(self.naming.full_name(t))]
        return []

    def content_read(self, unit: JavaEmissionUnit, prop: PropertyNode) -> Optional[str]:
        """Call reading the remaining members of an object whose type member was already consumed."""
        if not self.accepted_types(prop):
            return None
        doc = self.global_element(prop)
        if doc is not None:
            return f'{self.bindings_var(unit, doc)}.read{self.codec_name(doc)}Content(reader, type)'
        t = prop.type
        return f'{self.bindings_var(unit, t)}.read{self.codec_name(t)}Content(reader)'

    def content_write_ref(self, prop: PropertyNode) -> Optional[TypeRef]:
        """Model class an element occurrence's object members are written from, None when not written."""
        doc = self.global_element(prop)
        if doc is not None:
            return self.bean_type(doc) if self.element_mode(doc) not in (None, SIMPLE) else None
        t = prop.type
        if self.has_type_ops(t) and not t.is_abstract:
            return self.mapper.map_type(t)
        return None

    def content_write_call(self, unit: JavaEmissionUnit, prop: PropertyNode, value: str) -> str:
        """Statement writing the members of an element occurrence into the current object."""
        doc = self.global_element(prop)
        if doc is not None:
            return f'{self.bindings_var(unit, doc)}.write{self.codec_name(doc)}Content(writer, {value});'
        t = prop.type
        return f'{self.bindings_var(unit, t)}.write{self.codec_name(t)}Content(writer, {value});'

    def is_text_holder(self, info: PropertyInfo) -> bool:
        """A wrapper whose value is plain text."""
        return not info.is_choice and self.wrapped_element(info) is None and self.is_text_type(info.prop.type)

    def is_readable(self, info: PropertyInfo) -> bool:
        """The property has a JSON representation this codec reads and writes."""
        if info.is_choice:
            return any(self.accepted_types(alt) for alt in info.alternatives)
        if info.is_complex_wrapper or info.has_name:
            inner = self.wrapped_element(info)
            if inner is not None:
                return bool(self.accepted_types(inner))
            return self.is_text_holder(info) or bool(self.accepted_types(info.prop))
        if self.is_text(info):
            return True
        return self.content_write_ref(info.prop) is not None or self._is_simple_element(info.prop)

    def _is_simple_element(self, prop: PropertyNode) -> bool:
        doc = self.global_element(prop)
        return doc is not None and self.element_mode(doc) == SIMPLE

    def choice_alternatives(self, info: PropertyInfo) -> List[Tuple[PropertyNode, TypeRef]]:
        """Writable alternatives of a choice with their model class, most derived first, one per class."""
        result = []
        seen = set()
        for alt in sorted(info.alternatives, key=lambda a: -len(list(a.type.ancestors()))):
            ref = self.content_write_ref(alt)
            if ref is None or ref in seen:
                continue
            seen.add(ref)
            result.append((alt, ref))
        return result

    def _base_call(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, suffix: str, args: str,
                   condition: bool = False) -> bool:
        base = self.base_of(t)
        if base is None:
            return False
        call = f'{self.bindings_var(unit, base)}.{suffix.format(self.codec_name(base))}({args})'
        if condition:
            block.line(f'if ({call})')
            block.indent()
            block.line('return true;')
            block.outdent()
        else:
            block.line(call + ';')
        return True

    # ------------------------------------------------------- type operations

    def emit_type_operations(self, unit: JavaEmissionUnit, t: TypeNode):
        name = self.codec_name(t)
        bean = unit.use(self.naming.full_name(t))
        infos = [i for i in self.classifier.describe_all(t) if i.is_attribute or self.is_readable(i)]
        attributes = [i for i in infos if i.is_attribute]
        elements = [i for i in infos if not i.is_attribute]
        value_ref = self.value_text_ref(t) if self.classifier.has_value_accessor(t) else None
        block = CodeBlock()
        concrete = not t.is_document and not t.is_abstract
        if concrete:
            self._read_type(block, unit, t, name, bean)
        self._read_attributes(block, unit, t, name, bean, attributes)
        self._read_elements(block, unit, t, name, bean, elements, value_ref)
        if concrete:
            self._write_type(block, unit, t, name, bean)
        self._write_attributes(block, unit, t, name, bean, attributes)
        self._write_elements(block, unit, t, name, bean, elements, value_ref)
        unit.write(block.render())
        logger.debug("Added JSON codec operations for %s", t)

    def _read_type(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str):
        block.line()
        block.line()
        block.doc(f'Read method for {name} complex type')
        block.line(f'public {bean} read{name}(JsonReader reader) {THROWS}')
        block.open()
        block.line('reader.beginObject();')
        block.line('readObjectType(reader);')
        block.line(f'{bean} bean = this.read{name}Content(reader);')
        block.line('reader.endObject();')
        block.line('return bean;')
        block.close()

        block.line()
        block.line()
        block.doc(f'Reads the members of a {name} object following its type member')
        block.line(f'public {bean} read{name}Content(JsonReader reader) {THROWS}')
        block.open()
        block.line(f'{bean} bean = {self.new_bean(unit, t)};')
        self._read_members(block, name)
        block.line('return bean;')
        block.close()

    @staticmethod
    def _read_members(block: CodeBlock, name: str):
        block.line()
        block.line('while (reader.hasNext())')
        block.open()
        block.line('String name = reader.nextName();')
        block.line(f'if (!this.read{name}Attributes(name, reader, bean) && !this.read{name}Elements(name, reader, bean))')
        block.indent()
        block.line('reader.skipValue();')
        block.outdent()
        block.close()
        block.line()

    def _member_chain(self, block: CodeBlock, members: List[Tuple[str, Callable[[], None]]]):
        for i, (member, read) in enumerate(members):
            block.line(f'{"if" if i == 0 else "else if"} ({java_string_literal(member)}.equals(name))')
            block.open()
            read()
            block.close()
        if members:
            block.line('else')
            block.indent()
            block.line('return false;')
            block.outdent()
            block.line()
            block.line('return true;')
        else:
            block.line('return false;')

    def _read_attributes(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                         attributes: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Reads attributes of {name} complex type')
        block.line(f'public boolean read{name}Attributes(String name, JsonReader reader, {bean} bean) {THROWS}')
        block.open()
        if not self._base_call(block, unit, t, 'read{}Attributes', 'name, reader, bean', condition=True):
            if self.classifier.is_link_extended(self.classifier.structure_of(t)):
                block.line('if (readPropertyAttribute(name, reader, bean))')
                block.indent()
                block.line('return true;')
                block.outdent()
        block.line()
        members = []
        for info in attributes:
            statement = f'bean.set{info.name}({self.value_read_expr(unit, info.value_type, self.text_node(info))});'
            members.append((info.json_name, lambda s=statement: block.line(s)))
        self._member_chain(block, members)
        block.close()

    def _read_elements(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                       elements: List[PropertyInfo], value_ref: Optional[TypeRef]):
        block.line()
        block.line()
        block.doc(f'Reads elements of {name} complex type')
        block.line(f'public boolean read{name}Elements(String name, JsonReader reader, {bean} bean) {THROWS}')
        block.open()
        self._base_call(block, unit, t, 'read{}Elements', 'name, reader, bean', condition=True)
        block.line()
        members = [(info.json_name, lambda i=info: self._read_property(block, unit, i)) for info in elements]
        if value_ref is not None:
            node = self.classifier.structure_of(t).value_type()
            statement = f'bean.setValue({self.value_read_expr(unit, value_ref, node)});'
            members.append(('value', lambda: block.line(statement)))
        self._member_chain(block, members)
        block.close()

    def _read_property(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo):
        if info.is_repeated:
            block.line('reader.beginArray();')
            block.line('while (reader.hasNext())')
            block.open()
            self._read_occurrence(block, unit, info)
            block.close()
            block.line('reader.endArray();')
        else:
            self._read_occurrence(block, unit, info)

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
            if self.is_text_holder(info):
                block.line(f'{var}.setValue({self.value_read_expr(unit, info.value_type, self.text_node(info))});')
            else:
                block.line('reader.beginObject();')
                block.line(f'String type = readPropertyAttributes(reader, {var});')
                block.line('if (type != null)')
                block.open()
                self._read_content(block, unit, info, lambda expr: f'{var}.setValue({expr});')
                block.close()
                block.line('reader.endObject();')
            if info.is_repeated:
                block.line(f'bean.get{info.name}List().add({var});')
        elif info.is_choice:
            block.line('reader.beginObject();')
            block.line('String type = readObjectType(reader);')
            self._read_content(block, unit, info, lambda expr: f'{setter}({expr});')
            block.line('reader.endObject();')
        elif self.is_text(info):
            block.line(f'{setter}({self.value_read_expr(unit, info.value_type, self.text_node(info))});')
        else:
            expr = self.object_read(unit, info.prop)
            block.line(f'{setter}({expr});' if expr is not None else 'reader.skipValue();')

    def _read_content(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, assign: Callable[[str], str]):
        """Reads the value members of an object whose type member was consumed into the local 'type'."""
        if info.is_choice:
            branches = [(self.accepted_types(alt), alt) for alt in info.alternatives]
            branches = [(accepted, self.content_read(unit, alt)) for accepted, alt in branches if accepted]
            for i, (accepted, expr) in enumerate(branches):
                cond = ' || '.join(f'{java_string_literal(a)}.equals(type)' for a in accepted)
                block.line(f'{"if" if i == 0 else "else if"} ({cond})')
                block.indent()
                block.line(assign(expr))
                block.outdent()
            if branches:
                block.line('else')
                block.indent()
            block.line(UNSUPPORTED_TYPE)
            if branches:
                block.outdent()
            return
        inner = self.wrapped_element(info)
        content = self.content_read(unit, inner if inner is not None else info.prop)
        if content is None:
            block.line(UNSUPPORTED_TYPE)
        else:
            block.line(assign(content))

    def _write_type(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str):
        block.line()
        block.line()
        block.doc(f'Write method for {name} complex type')
        block.line(f'public void write{name}(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        block.line('writer.beginObject();')
        block.line(f'this.write{name}Content(writer, bean);')
        block.line('writer.endObject();')
        block.close()

        block.line()
        block.line()
        block.doc(f'Writes the members of a {name} object, starting with its type member')
        block.line(f'public void write{name}Content(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        self._write_members(block, t, name)
        block.close()

    def _write_members(self, block: CodeBlock, t: TypeNode, name: str):
        short = self.discriminator(self.naming.full_name(t))
        block.line(f'writer.name({java_string_literal(JSON_TYPE_DISCRIMINATOR)}).value({java_string_literal(short)});')
        block.line(f'this.write{name}Attributes(writer, bean);')
        block.line(f'this.write{name}Elements(writer, bean);')

    def _write_attributes(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                          attributes: List[PropertyInfo]):
        block.line()
        block.line()
        block.doc(f'Writes attributes of {name} complex type')
        block.line(f'public void write{name}Attributes(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        if not self._base_call(block, unit, t, 'write{}Attributes', 'writer, bean'):
            if self.classifier.is_link_extended(self.classifier.structure_of(t)):
                block.line('writePropertyAttributes(writer, bean);')
        for info in attributes:
            block.line()
            block.line(f'// {info.prop.name.local}')
            lines = self.value_write_lines(info.value_type, f'bean.get{info.name}()', info.json_name)
            self._guarded(block, info, lines)
        block.close()

    @staticmethod
    def _guarded(block: CodeBlock, info: PropertyInfo, lines: List[str]):
        if info.is_optional:
            block.line(f'if (bean.isSet{info.name}())')
            block.open()
        for line in lines:
            block.line(line)
        if info.is_optional:
            block.close()

    def _write_elements(self, block: CodeBlock, unit: JavaEmissionUnit, t: TypeNode, name: str, bean: str,
                        elements: List[PropertyInfo], value_ref: Optional[TypeRef]):
        block.line()
        block.line()
        block.doc(f'Writes elements of {name} complex type')
        block.line(f'public void write{name}Elements(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        self._base_call(block, unit, t, 'write{}Elements', 'writer, bean')
        for info in elements:
            block.line()
            block.line(f'// {info.prop.name.local}')
            self._write_property(block, unit, info)
        if value_ref is not None:
            block.line()
            block.line('// value')
            for line in self.value_write_lines(value_ref, 'bean.getValue()', 'value'):
                block.line(line)
        block.close()

    def _write_property(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo):
        holder = info.is_complex_wrapper or info.has_name
        holder_type = unit.use(OGC_PROPERTY_REF.with_parameters(info.value_type.boxed())) if holder else ''
        member = java_string_literal(info.json_name)
        if info.is_repeated:
            block.line(f'writer.name({member}).beginArray();')
            block.line(f'for (int i = 0; i < bean.getNum{plural(info.name)}(); i++)')
            block.open()
            if holder:
                block.line(f'{holder_type} item = bean.get{info.name}List().getProperty(i);')
                self._write_holder(block, unit, info, 'item')
            else:
                self._write_occurrence(block, unit, info, f'bean.get{info.name}List().get(i)')
            block.close()
            block.line('writer.endArray();')
            return
        if info.is_optional:
            block.line(f'if (bean.isSet{info.name}())')
            block.open()
        block.line(f'writer.name({member});')
        if holder:
            var = self.holder_var(info)
            block.line(f'{holder_type} {var} = bean.get{info.name}Property();')
            self._write_holder(block, unit, info, var)
        else:
            self._write_occurrence(block, unit, info, f'bean.get{info.name}()')
        if info.is_optional:
            block.close()

    def _write_holder(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, var: str):
        if self.is_text_holder(info):
            for line in self.value_write_lines(info.value_type, f'{var}.getValue()'):
                block.line(line)
            return
        block.line('writer.beginObject();')
        block.line(f'writePropertyAttributes(writer, {var});')
        block.line(f'if ({var}.hasValue() && !{var}.hasHref())')
        block.open()
        self._write_content(block, unit, info, f'{var}.getValue()')
        block.close()
        block.line('writer.endObject();')

    def _write_occurrence(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, value: str):
        if info.is_choice:
            block.line('writer.beginObject();')
            self._write_content(block, unit, info, value)
            block.line('writer.endObject();')
        elif self.is_text(info):
            for line in self.value_write_lines(info.value_type, value):
                block.line(line)
        else:
            doc = self.global_element(info.prop)
            owner = doc if doc is not None else info.prop.type
            block.line(f'{self.bindings_var(unit, owner)}.write{self.codec_name(owner)}(writer, {value});')

    def _write_content(self, block: CodeBlock, unit: JavaEmissionUnit, info: PropertyInfo, value: str):
        """Writes the value members of an object: type member first."""
        if info.is_choice:
            branches = self.choice_alternatives(info)
            for i, (alt, ref) in enumerate(branches):
                java_type = unit.use(ref)
                block.line(f'{"if" if i == 0 else "else if"} ({value} instanceof {java_type})')
                block.indent()
                block.line(self.content_write_call(unit, alt, f'({java_type}){value}'))
                block.outdent()
            return
        inner = self.wrapped_element(info)
        block.line(self.content_write_call(unit, inner if inner is not None else info.prop, value))

    # ---------------------------------------------------- element operations

    def emit_element_operations(self, unit: JavaEmissionUnit, doc: TypeNode, mode: str):
        name = self.codec_name(doc)
        bean = unit.use(self.bean_type(doc))
        block = CodeBlock()
        if mode == SIMPLE:
            self._simple_element(block, unit, doc, name, bean)
            unit.write(block.render())
            return

        block.line()
        block.line()
        block.doc(f'Read method for {name} element')
        block.line(f'public {bean} read{name}(JsonReader reader) {THROWS}')
        block.open()
        block.line('reader.beginObject();')
        block.line('String type = readObjectType(reader);')
        block.line(f'{bean} bean = this.read{name}Content(reader, type);')
        block.line('reader.endObject();')
        block.line('return bean;')
        block.close()

        block.line()
        block.line()
        block.doc(f'Reads the members of a {name} element object following its type member')
        block.line(f'public {bean} read{name}Content(JsonReader reader, String type) {THROWS}')
        block.open()
        if mode == DISPATCH:
            members = self.substitution_members(doc)
            for i, member in enumerate(members):
                accepted = java_string_literal(self.discriminator(self.bean_type(member)))
                block.line(f'{"if" if i == 0 else "else if"} ({accepted}.equals(type))')
                block.indent()
                block.line(f'return {self.bindings_var(unit, member)}.read{self.codec_name(member)}Content(reader, type);')
                block.outdent()
            if members:
                block.line()
            block.line(UNSUPPORTED_TYPE)
        elif mode == DELEGATE:
            content = doc.content_type
            block.line(f'return {self.bindings_var(unit, content)}.read{self.codec_name(content)}Content(reader);')
        elif mode == ANONYMOUS:
            block.line(f'{bean} bean = {self.new_bean(unit, doc)};')
            self._read_members(block, name)
            block.line('return bean;')
        block.close()

        block.line()
        block.line()
        block.doc(f'Write method for {name} element')
        block.line(f'public void write{name}(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        block.line('writer.beginObject();')
        block.line(f'this.write{name}Content(writer, bean);')
        block.line('writer.endObject();')
        block.close()

        block.line()
        block.line()
        block.doc(f'Writes the members of a {name} element object, starting with its type member')
        block.line(f'public void write{name}Content(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        if mode == DISPATCH:
            members = self.substitution_members(doc)
            for i, member in enumerate(members):
                member_type = unit.use(self.bean_type(member))
                block.line(f'{"if" if i == 0 else "else if"} (bean instanceof {member_type})')
                block.indent()
                block.line(f'{self.bindings_var(unit, member)}.write{self.codec_name(member)}Content(writer, ({member_type})bean);')
                block.outdent()
            if members:
                block.line('else')
                block.indent()
            block.line(UNSUPPORTED_CLASS)
            if members:
                block.outdent()
        elif mode == DELEGATE:
            content = doc.content_type
            block.line(f'{self.bindings_var(unit, content)}.write{self.codec_name(content)}Content(writer, bean);')
        elif mode == ANONYMOUS:
            self._write_members(block, doc, name)
        block.close()
        unit.write(block.render())
        logger.debug("Added JSON codec operations for element %s", doc.document_element)

    def _simple_element(self, block: CodeBlock, unit: JavaEmissionUnit, doc: TypeNode, name: str, bean: str):
        content = doc.content_type
        ref = self.mapper.map_type(content)
        block.line()
        block.line()
        block.doc(f'Read method for {name} element')
        block.line(f'public {bean} read{name}(JsonReader reader) {THROWS}')
        block.open()
        block.line(f'return {self.value_read_expr(unit, ref, content)};')
        block.close()

        block.line()
        block.line()
        block.doc(f'Write method for {name} element')
        block.line(f'public void write{name}(JsonWriter writer, {bean} bean) {THROWS}')
        block.open()
        for line in self.value_write_lines(ref.boxed(), 'bean'):
            block.line(line)
        block.close()
