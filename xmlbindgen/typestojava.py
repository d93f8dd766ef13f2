# pylint: disable=too-many-arguments, too-many-locals, too-many-branches, too-many-statements, line-too-long

""" Generates Java interfaces, implementation classes and enumerations for schema types """

import logging
from typing import List, Optional

from xmlbindgen.common import enum_constant_name, java_string_literal, plural, process_template
from xmlbindgen.constants import OGC_PROPERTY, OGC_PROPERTY_IMPL, OGC_PROPERTY_LIST, JAVA_ARRAY_LIST
from xmlbindgen.context import BindingContext
from xmlbindgen.emission import INDENT, ArtifactKind, JavaEmissionUnit
from xmlbindgen.properties import ChoiceOverrides, PropertyInfo
from xmlbindgen.schemamodel import TypeNode
from xmlbindgen.typemapper import OBJECT_REF, TypeRef

logger = logging.getLogger(__name__)

OGC_PROPERTY_REF = TypeRef.parse(OGC_PROPERTY)
OGC_PROPERTY_IMPL_REF = TypeRef.parse(OGC_PROPERTY_IMPL)
OGC_PROPERTY_LIST_REF = TypeRef.parse(OGC_PROPERTY_LIST)
ARRAY_LIST_REF = TypeRef.parse(JAVA_ARRAY_LIST)


def java_default_literal(value_type: TypeRef, text: str) -> Optional[str]:
    """Java literal for a declared default of a primitive type, or None when it cannot be expressed."""
    text = text.strip()
    name = value_type.name
    if name == 'boolean':
        return 'true' if text in ('true', '1') else 'false'
    if name in ('double', 'float'):
        special = {'INF': 'POSITIVE_INFINITY', '-INF': 'NEGATIVE_INFINITY', 'NaN': 'NaN'}
        if text in special:
            return f"{'Double' if name == 'double' else 'Float'}.{special[text]}"
        try:
            float(text)
        except ValueError:
            return None
        if not any(c in text for c in '.eE'):
            text += '.0'
        return text + ('f' if name == 'float' else '')
    try:
        int(text)
    except ValueError:
        return None
    if name == 'long':
        return text + 'L'
    if name in ('short', 'byte'):
        return f'({name}){text}'
    return text


class ModelEmitter:
    """Emits the structural interface and the implementation class of eligible types."""

    def __init__(self, context: BindingContext) -> None:
        self.context = context
        self.naming = context.naming
        self.classifier = context.classifier
        self.mapper = context.mapper

    def emit(self, t: TypeNode) -> List[JavaEmissionUnit]:
        """Builds the model units of a type. Units are returned unwritten."""
        if t.is_simple_type:
            return [self.emit_enum(t)] if t.has_string_enum_values() else []
        if t.is_document and (t.is_abstract or t.content_type is None or t.content_type.is_simple_type):
            return []
        return [self.emit_interface(t), self.emit_impl(t)]

    def _doc_comment(self, t: TypeNode, ind: str) -> str:
        if t.is_document:
            what = f"XML element {t.local_name}(@{t.namespace})"
            kind = 'This is a global element declaration.'
        else:
            what = f"XML type {t.local_name}(@{t.namespace})"
            kind = 'This is a string enumeration.' if t.is_simple_type else 'This is a complex type.'
        return f"{ind}/**\n{ind} * POJO class for {what}.\n{ind} *\n{ind} * {kind}\n{ind} */\n"

    # ----------------------------------------------------------------- enums

    def emit_enum(self, t: TypeNode) -> JavaEmissionUnit:
        """String enumeration with text lookup."""
        ref = self.naming.full_name(t)
        values = t.effective_enumeration_values()
        constants = []
        used = set()
        for value in values:
            name = enum_constant_name(value)
            while name in used:
                name += '_'
            used.add(name)
            constants.append((name, java_string_literal(value)))
        doc = self._doc_comment(t, '')

        def opening(_unit: JavaEmissionUnit) -> str:
            return process_template('javatemplates/enum.java.jinja', doc=doc, class_name=ref.name, constants=constants)

        return JavaEmissionUnit(t.namespace, ArtifactKind.MODEL, self.context.output_dir, ref.package, ref.name, opening)

    # ------------------------------------------------------------ interfaces

    def _interface_base(self, unit: JavaEmissionUnit, t: TypeNode) -> Optional[str]:
        base = self.classifier.model_base(t)
        if base is not None:
            return unit.use(self.mapper.map_type(base, unit))
        if self.classifier.is_link_extended(self.classifier.structure_of(t)):
            return unit.use(OGC_PROPERTY_REF.with_parameters(OBJECT_REF))
        return None

    def _interface_declaration(self, unit: JavaEmissionUnit, t: TypeNode, name: str, ind: str) -> str:
        base = self._interface_base(unit, t)
        extends = f" extends {base}" if base else ''
        return f"{self._doc_comment(t, ind)}{ind}public interface {name}{extends}\n{ind}{{\n"

    def emit_interface(self, t: TypeNode) -> JavaEmissionUnit:
        """Structural interface: accessors for every own property."""
        ref = self.naming.full_name(t)

        def opening(unit: JavaEmissionUnit) -> str:
            return self._interface_declaration(unit, t, ref.name, '')

        unit = JavaEmissionUnit(t.namespace, ArtifactKind.MODEL, self.context.output_dir, ref.package, ref.name, opening)
        self._write_interface_members(unit, t, INDENT)
        return unit

    def _write_interface_members(self, unit: JavaEmissionUnit, t: TypeNode, ind: str):
        for info in self.classifier.describe_all(t, unit):
            self._write_getter_decls(unit, info, ind)
            if info.is_choice:
                for alt_info in self._distinct_alternatives(unit, info):
                    self._write_setter_decls(unit, alt_info, ind)
            else:
                self._write_setter_decls(unit, info, ind)
        if self.classifier.has_value_accessor(t):
            value = unit.use(self.mapper.map_value_type(t, unit))
            unit.write(f"{ind}\n{ind}\n{ind}/**\n{ind} * Gets the inline value\n{ind} */\n{ind}public {value} getValue();\n")
            unit.write(f"{ind}\n{ind}\n{ind}/**\n{ind} * Sets the inline value\n{ind} */\n{ind}public void setValue({value} value);\n")
        for nested in self.classifier.nested_types(t):
            name = self.naming.short_name(nested)
            unit.write(f"{ind}\n{ind}\n")
            unit.write(self._interface_declaration(unit, nested, name, ind))
            self._write_interface_members(unit, nested, ind + INDENT)
            unit.write(f"{ind}}}\n")

    def _decl(self, unit: JavaEmissionUnit, ind: str, doc: str, signature: str):
        unit.write(f"{ind}\n{ind}\n{ind}/**\n{ind} * {doc}\n{ind} */\n{ind}public {signature};\n")

    def _write_getter_decls(self, unit: JavaEmissionUnit, info: PropertyInfo, ind: str):
        value = unit.use(info.value_type)
        name = info.name
        if info.is_repeated:
            if info.is_complex_wrapper or info.has_name:
                list_type = unit.use(OGC_PROPERTY_LIST_REF.with_parameters(info.value_type.boxed()))
            else:
                list_type = unit.use(info.list_type)
            self._decl(unit, ind, f"Gets the list of {info.var[:-4]} properties", f"{list_type} get{name}List()")
            self._decl(unit, ind, f"Returns number of {info.var[:-4]} properties", f"int getNum{plural(name)}()")
            if info.has_name:
                self._decl(unit, ind, f"Gets the {info.var[:-4]} property with the given name", f"{value} get{name}(String name)")
        else:
            self._decl(unit, ind, f"Gets the {info.var} property", f"{value} get{name}()")
            if info.is_complex_wrapper:
                holder = unit.use(OGC_PROPERTY_REF.with_parameters(info.value_type.boxed()))
                self._decl(unit, ind, f"Gets extra info (name, xlink, etc.) carried by the {info.var} property", f"{holder} get{name}Property()")
            if info.is_optional:
                self._decl(unit, ind, f"Checks if {info.var} is set", f"boolean isSet{name}()")

    def _write_setter_decls(self, unit: JavaEmissionUnit, info: PropertyInfo, ind: str):
        value = unit.use(info.value_type)
        name = info.name
        param = self.naming.variable_name(name)
        if info.is_repeated:
            self._decl(unit, ind, f"Adds a new {param} property", f"void add{name}({value} {param})")
            if info.has_name:
                self._decl(unit, ind, f"Adds a new {param} property with the given name", f"void add{name}(String name, {value} {param})")
        else:
            self._decl(unit, ind, f"Sets the {param} property", f"void set{name}({value} {param})")
            if info.has_name:
                self._decl(unit, ind, f"Sets the {param} property with the given name", f"void set{name}(String name, {value} {param})")
            if info.is_optional and info.value_type.is_primitive:
                self._decl(unit, ind, f"Unsets the {param} property", f"void unSet{name}()")

    # ------------------------------------------------------- implementations

    def _impl_declaration(self, unit: JavaEmissionUnit, t: TypeNode, name: str, iface: str, ind: str, nested: bool) -> str:
        base = self.classifier.model_base(t)
        if base is not None:
            extends = f" extends {unit.use(self.naming.impl_name(base))}"
        elif self.classifier.is_link_extended(self.classifier.structure_of(t)):
            extends = f" extends {unit.use(OGC_PROPERTY_IMPL_REF.with_parameters(OBJECT_REF))}"
        else:
            extends = ''
        modifiers = 'public static' if nested else 'public'
        if t.is_abstract:
            modifiers += ' abstract'
        return (f"{self._doc_comment(t, ind)}{ind}{modifiers} class {name}{extends} implements {iface}\n{ind}{{\n"
                f"{ind}{INDENT}static final long serialVersionUID = 1L;\n")

    def emit_impl(self, t: TypeNode) -> JavaEmissionUnit:
        """Implementation class: backing fields and accessor bodies."""
        ref = self.naming.impl_name(t)
        iface = self.naming.full_name(t)

        def opening(unit: JavaEmissionUnit) -> str:
            return self._impl_declaration(unit, t, ref.name, unit.use(iface), '', False)

        unit = JavaEmissionUnit(t.namespace, ArtifactKind.MODEL, self.context.output_dir, ref.package, ref.name, opening)
        self._write_impl_members(unit, t, ref.name, unit.use(iface), INDENT)
        return unit

    def _write_impl_members(self, unit: JavaEmissionUnit, t: TypeNode, class_name: str, iface: str, ind: str):
        infos = self.classifier.describe_all(t, unit)
        value_type = self.mapper.map_value_type(t, unit) if self.classifier.has_value_accessor(t) else None
        for info in infos:
            unit.write(self._field(unit, info, ind))
        if value_type is not None:
            unit.write(f"{ind}protected {unit.use(value_type)} value;\n")
        unit.write(f"{ind}\n{ind}\n{ind}public {class_name}()\n{ind}{{\n{ind}}}\n")
        for info in infos:
            self._write_getters(unit, info, ind)
            if info.is_choice:
                for alt_info in self._distinct_alternatives(unit, info):
                    self._write_setters(unit, alt_info, info, ind)
            else:
                self._write_setters(unit, info, info, ind)
        if value_type is not None:
            value = unit.use(value_type)
            self._method(unit, ind, f"{value} getValue()", ["return value;"])
            self._method(unit, ind, f"void setValue({value} value)", ["this.value = value;"])
        for nested in self.classifier.nested_types(t):
            short = self.naming.short_name(nested)
            nested_iface = f"{iface}.{short}"
            unit.write(f"{ind}\n{ind}\n")
            unit.write(self._impl_declaration(unit, nested, short + 'Impl', nested_iface, ind, True))
            self._write_impl_members(unit, nested, short + 'Impl', nested_iface, ind + INDENT)
            unit.write(f"{ind}}}\n")

    def _storage_type(self, unit: JavaEmissionUnit, info: PropertyInfo) -> str:
        boxed = info.value_type.boxed()
        if info.is_complex_wrapper or info.has_name:
            if info.is_repeated:
                return unit.use(OGC_PROPERTY_LIST_REF.with_parameters(boxed))
            return unit.use(OGC_PROPERTY_REF.with_parameters(boxed))
        if info.is_repeated:
            return unit.use(info.list_type)
        if info.is_optional:
            return unit.use(boxed)
        return unit.use(info.value_type)

    def _field(self, unit: JavaEmissionUnit, info: PropertyInfo, ind: str) -> str:
        storage = self._storage_type(unit, info)
        boxed = info.value_type.boxed()
        init = None
        if info.is_complex_wrapper or info.has_name:
            if info.is_repeated:
                init = f"new {storage}()"
            elif not info.is_optional:
                init = f"new {unit.use(OGC_PROPERTY_IMPL_REF.with_parameters(boxed))}()"
        elif info.is_repeated:
            init = f"new {unit.use(ARRAY_LIST_REF.with_parameters(boxed))}()"
        elif not info.is_optional:
            default = info.prop.default
            if info.value_type.is_primitive and default is not None:
                init = java_default_literal(info.value_type, default)
            elif info.value_type.is_string:
                init = java_string_literal(default if default is not None else '')
            elif default is not None and info.value_node.has_string_enum_values() and not info.value_type.is_object:
                init = f"{unit.use(info.value_type)}.fromString({java_string_literal(default)})"
        suffix = f" = {init}" if init is not None else ''
        return f"{ind}protected {storage} {info.var}{suffix};\n"

    def _method(self, unit: JavaEmissionUnit, ind: str, signature: str, body: List[str]):
        lines = ''.join(f"{ind}{INDENT}{line}\n" for line in body)
        unit.write(f"{ind}\n{ind}\n{ind}@Override\n{ind}public {signature}\n{ind}{{\n{lines}{ind}}}\n")

    def _write_getters(self, unit: JavaEmissionUnit, info: PropertyInfo, ind: str):
        name = info.name
        var = info.var
        value = unit.use(info.value_type)
        complex_storage = info.is_complex_wrapper or info.has_name
        if info.is_repeated:
            self._method(unit, ind, f"{self._storage_type(unit, info)} get{name}List()", [f"return {var};"])
            self._method(unit, ind, f"int getNum{plural(name)}()", [f"if ({var} == null)", f"{INDENT}return 0;", f"return {var}.size();"])
            if info.has_name:
                self._method(unit, ind, f"{value} get{name}(String name)", [f"if ({var} == null)", f"{INDENT}return null;", f"return {var}.get(name);"])
            return
        if complex_storage:
            holder = unit.use(OGC_PROPERTY_REF.with_parameters(info.value_type.boxed()))
            holder_impl = unit.use(OGC_PROPERTY_IMPL_REF.with_parameters(info.value_type.boxed()))
            if info.is_optional:
                self._method(unit, ind, f"{value} get{name}()", [f"if ({var} == null)", f"{INDENT}return null;", f"return {var}.getValue();"])
            else:
                self._method(unit, ind, f"{value} get{name}()", [f"return {var}.getValue();"])
            self._method(unit, ind, f"{holder} get{name}Property()", [f"if ({var} == null)", f"{INDENT}{var} = new {holder_impl}();", f"return {var};"])
            if info.is_optional:
                self._method(unit, ind, f"boolean isSet{name}()", [f"return ({var} != null && ({var}.hasValue() || {var}.hasHref()));"])
        else:
            self._method(unit, ind, f"{value} get{name}()", [f"return {var};"])
            if info.is_optional:
                self._method(unit, ind, f"boolean isSet{name}()", [f"return ({var} != null);"])

    def _distinct_alternatives(self, unit: JavaEmissionUnit, info: PropertyInfo) -> List[PropertyInfo]:
        """Alternatives of a choice described with the parent's metadata, one per distinct Java value type."""
        overrides: ChoiceOverrides = self.classifier.alternative_overrides(info)
        result = []
        seen = set()
        for alt in info.alternatives:
            alt_info = self.classifier.describe(alt, unit, overrides)
            if alt_info.value_type in seen:
                continue
            seen.add(alt_info.value_type)
            result.append(alt_info)
        return result

    def _write_setters(self, unit: JavaEmissionUnit, info: PropertyInfo, storage: PropertyInfo, ind: str):
        name = info.name
        var = storage.var
        value = unit.use(info.value_type)
        param = self.naming.variable_name(name)
        if param == var:
            param = param + 'Value'
        complex_storage = storage.is_complex_wrapper or storage.has_name
        if info.is_repeated:
            self._method(unit, ind, f"void add{name}({value} {param})", [f"this.{var}.add({param});"])
            if info.has_name:
                self._method(unit, ind, f"void add{name}(String name, {value} {param})", [f"this.{var}.add(name, {param});"])
            return
        if complex_storage:
            holder_impl = unit.use(OGC_PROPERTY_IMPL_REF.with_parameters(storage.value_type.boxed()))
            create = [f"if (this.{var} == null)", f"{INDENT}this.{var} = new {holder_impl}();"]
            self._method(unit, ind, f"void set{name}({value} {param})", create + [f"this.{var}.setValue({param});"])
            if info.has_name:
                self._method(unit, ind, f"void set{name}(String name, {value} {param})",
                             create + [f"this.{var}.setValue({param});", f"this.{var}.setName(name);"])
        else:
            self._method(unit, ind, f"void set{name}({value} {param})", [f"this.{var} = {param};"])
        if info.is_optional and info.value_type.is_primitive:
            self._method(unit, ind, f"void unSet{name}()", [f"this.{var} = null;"])
