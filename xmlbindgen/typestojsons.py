# pylint: disable=line-too-long

""" Generates one JSON Schema document per namespace from the eligible complex types """

import logging
from typing import Any, Dict, List, Optional

from xmlbindgen.constants import (ASSOCIATION_GROUP_DEF, ENCODED_VALUES_DEF, JSON_INTEGER_TYPES, JSON_NUMBER_TYPES,
                                  JSON_SCHEMA_DRAFT, JSON_STRING_FORMATS, JSON_STRING_TYPES, JSON_TYPE_DISCRIMINATOR,
                                  UNIT_REFERENCE_DEF)
from xmlbindgen.context import BindingContext
from xmlbindgen.emission import ArtifactKind, JsonSchemaEmissionUnit
from xmlbindgen.properties import PropertyInfo
from xmlbindgen.schemamodel import ContentKind, TypeNode, Variety

logger = logging.getLogger(__name__)

DEF_REF_PREFIX = '#/definitions/'

JsonNode = Dict[str, Any]


def simple_schema(json_type: str, json_format: Optional[str] = None) -> JsonNode:
    """A schema node with a type and an optional format."""
    node: JsonNode = {'type': json_type}
    if json_format:
        node['format'] = json_format
    return node


def pair_schema(items: JsonNode) -> JsonNode:
    """A two item array."""
    return {'type': 'array', 'minItems': 2, 'maxItems': 2, 'items': items}


def time_position_schema() -> JsonNode:
    """A date-time string or a numeric time."""
    return {'oneOf': [simple_schema('string', 'date-time'), simple_schema('number')]}


BASIC_TYPE_SCHEMAS = {
    'TokenPair': lambda: pair_schema(simple_schema('string')),
    'IntegerPair': lambda: pair_schema(simple_schema('integer')),
    'RealPair': lambda: pair_schema(simple_schema('number')),
    'TimePair': lambda: pair_schema(time_position_schema()),
    'TimePosition': time_position_schema,
    'NilValue': lambda: {
        'type': 'object',
        'properties': {
            'reason': simple_schema('string', 'uri'),
            'value': {'oneOf': [simple_schema('string'), simple_schema('number')]},
        },
        'required': ['reason', 'value'],
    },
    'ByteOrderType': lambda: {'type': 'string', 'enum': ['bigEndian', 'littleEndian']},
    'ByteEncodingType': lambda: {'type': 'string', 'enum': ['base64', 'raw']},
    'EncodedValuesPropertyType': lambda: {'$ref': DEF_REF_PREFIX + ENCODED_VALUES_DEF},
    'Reference': lambda: {'$ref': DEF_REF_PREFIX + ASSOCIATION_GROUP_DEF},
    'UnitReference': lambda: {'$ref': DEF_REF_PREFIX + UNIT_REFERENCE_DEF},
    'anyType': lambda: {'type': 'object', 'additionalProperties': True},
}


def basic_definitions() -> Dict[str, JsonNode]:
    """Definitions every namespace document carries."""
    return {
        ENCODED_VALUES_DEF: {'type': 'array'},
        ASSOCIATION_GROUP_DEF: {
            'type': 'object',
            'properties': {
                'name': simple_schema('string'),
                'href': simple_schema('string', 'uri'),
                'role': simple_schema('string', 'uri'),
                'arcrole': simple_schema('string', 'uri'),
                'title': simple_schema('string'),
            },
        },
        UNIT_REFERENCE_DEF: {
            'type': 'object',
            'allOf': [
                {'$ref': DEF_REF_PREFIX + ASSOCIATION_GROUP_DEF},
                {'properties': {'code': simple_schema('string')}},
            ],
            'oneOf': [{'required': ['code']}, {'required': ['href']}],
        },
    }


def json_type_for_builtin(local_name: str) -> str:
    """JSON type of a builtin XML Schema type. Unknown names pass through unchanged."""
    if local_name in JSON_INTEGER_TYPES:
        return 'integer'
    if local_name in JSON_NUMBER_TYPES:
        return 'number'
    if local_name in JSON_STRING_TYPES:
        return 'string'
    return local_name


class JsonSchemaEmitter:
    """Adds the definition of each eligible complex type to its namespace's JSON Schema document."""

    def __init__(self, context: BindingContext) -> None:
        self.context = context
        self.naming = context.naming
        self.classifier = context.classifier
        self.eligibility = context.eligibility
        self.type_system = context.type_system

    def schema_unit(self, namespace: str) -> JsonSchemaEmissionUnit:
        """The persistent JSON Schema unit of a namespace."""
        def create() -> JsonSchemaEmissionUnit:
            unit = JsonSchemaEmissionUnit(namespace, self.context.output_dir, self.context.package(namespace), JSON_SCHEMA_DRAFT)
            unit.closing = lambda u: u.definitions.update(basic_definitions())
            return unit
        return self.context.registry.unit(namespace, ArtifactKind.JSON_SCHEMA, create)

    def has_definition(self, t: TypeNode) -> bool:
        """Only named complex types whose local name ends in 'Type' get definitions."""
        if t.is_document or t.is_simple_type or t.is_anonymous or t.is_builtin:
            return False
        local = t.local_name
        return local.endswith('Type') and local != 'EncodedValuesPropertyType'

    def definition_ref(self, t: TypeNode, unit: JsonSchemaEmissionUnit) -> JsonNode:
        """Reference to the definition of a type, qualified with the document of its namespace when foreign."""
        name = self.naming.short_name(t)
        if t.namespace == unit.namespace:
            return {'$ref': DEF_REF_PREFIX + name}
        unit.dependency_alias(t.namespace)
        return {'$ref': f'{self.context.package(t.namespace)}.schema.json{DEF_REF_PREFIX}{name}'}

    def emit(self, t: TypeNode):
        """Writes the definition of one type into its namespace document."""
        if not self.has_definition(t):
            return
        unit = self.schema_unit(t.namespace)
        name = self.naming.short_name(t)
        if not t.is_abstract:
            unit.top_level.append(name)

        properties: JsonNode = {}
        required: List[str] = []
        if not t.is_abstract:
            properties[JSON_TYPE_DISCRIMINATOR] = {'const': name}
            required.append(JSON_TYPE_DISCRIMINATOR)
        infos = self.classifier.describe_all(t)
        for info in [i for i in infos if i.is_attribute] + [i for i in infos if not i.is_attribute]:
            properties[info.json_name] = self.property_schema(info, unit)
            if info.min_occurs > 0:
                required.append(info.json_name)
        if self.classifier.has_value_accessor(t):
            value_type = t.value_type()
            properties['value'] = self.simple_type_schema(value_type) if value_type is not None else {}

        body: JsonNode = {'properties': properties}
        if required:
            body['required'] = required

        definition: JsonNode = {'type': 'object'}
        base = self.classifier.model_base(t)
        if base is not None and self.has_definition(base):
            definition['allOf'] = [self.definition_ref(base, unit), body]
        else:
            definition.update(body)
        unit.definitions[name] = definition
        logger.debug("Added JSON Schema definition %s to %s", name, unit.path)

    def property_schema(self, info: PropertyInfo, unit: JsonSchemaEmissionUnit) -> JsonNode:
        """Schema of one property; repeated properties are wrapped in an array."""
        if info.is_complex_wrapper or info.has_name or info.is_choice:
            content = self.complex_property_content(info, unit)
            if info.has_name:
                content = {'allOf': [{'$ref': DEF_REF_PREFIX + ASSOCIATION_GROUP_DEF}, content]}
        else:
            content = self.type_schema(info.prop.type, unit)
        if info.is_repeated:
            return {'type': 'array', 'items': content}
        return content

    def complex_property_content(self, info: PropertyInfo, unit: JsonSchemaEmissionUnit) -> JsonNode:
        """Choice alternatives, substitution group members, or a reference to the wrapped value type."""
        t = info.prop.type
        if self.classifier.is_choice(t):
            refs = []
            for alt in t.element_properties():
                ref = self.value_ref(alt.type, unit)
                if ref not in refs:
                    refs.append(ref)
            return {'oneOf': refs}
        elements = t.element_properties()
        if len(elements) == 1:
            members = [m for m in self.substitution_members(elements[0].name) if not m.is_abstract]
            if members:
                refs = []
                for member in members:
                    ref = self.value_ref(member.content_type, unit)
                    if ref not in refs:
                        refs.append(ref)
                return {'oneOf': refs}
        return self.value_ref(info.value_node, unit)

    def substitution_members(self, element) -> List[TypeNode]:
        """Substitution group members of a global element, empty for local elements."""
        if self.type_system.find_document_type(element) is None:
            return []
        return self.type_system.substitution_group_members(element)

    def value_ref(self, t: Optional[TypeNode], unit: JsonSchemaEmissionUnit) -> JsonNode:
        """Reference to the definition of the nearest ancestor that has one."""
        if t is not None and t.is_simple_type:
            return self.type_schema(t, unit)
        while t is not None and not (self.eligibility.generated(t) and self.has_definition(t)):
            t = t.base_type
        if t is None or t.is_ur_type:
            return {'type': 'object'}
        return self.definition_ref(t, unit)

    def type_schema(self, t: TypeNode, unit: JsonSchemaEmissionUnit) -> JsonNode:
        """Schema of a property value type."""
        if t.is_anonymous and not t.is_simple_type:
            return {'type': 'object'}
        if t.is_attribute_type:
            return self.type_schema(t.content_type, unit) if t.content_type is not None else {}
        basic = BASIC_TYPE_SCHEMAS.get(t.local_name)
        if basic is not None and not t.is_anonymous:
            return basic()
        if t.is_simple_type:
            return self.simple_type_schema(t)
        if self.eligibility.generated(t) and self.has_definition(t):
            return self.definition_ref(t, unit)
        if t.content_kind == ContentKind.SIMPLE and t.value_type() is not None:
            return self.simple_type_schema(t.value_type())
        return {'type': 'object'}

    def simple_type_schema(self, t: TypeNode) -> JsonNode:
        """Schema of a simple type: enumerations, lists and primitives classified by their builtin ancestor."""
        if t.has_string_enum_values():
            return {'type': 'string', 'enum': list(t.effective_enumeration_values())}
        basic = BASIC_TYPE_SCHEMAS.get(t.local_name)
        if basic is not None and not t.is_anonymous and not t.is_builtin:
            return basic()
        if t.variety == Variety.LIST and t.list_item_type is not None:
            return {'type': 'array', 'items': self.simple_type_schema(t.list_item_type)}
        builtin = t.builtin_ancestor()
        local = builtin.local_name if builtin is not None else t.local_name
        json_type = json_type_for_builtin(local)
        return simple_schema(json_type, JSON_STRING_FORMATS.get(local) if json_type == 'string' else None)
