"""Constants for the xmlbindgen package.

Namespace URIs, the names of the Java runtime classes the generated code is
compiled against, and the fixed mapping tables shared by the emitters.
"""

from typing import Dict, List, Set

XSD_NAMESPACE = 'http://www.w3.org/2001/XMLSchema'
XLINK_NAMESPACE = 'http://www.w3.org/1999/xlink'
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'

# Java runtime the generated code links against
RUNTIME_PACKAGE = 'net.opengis'
OGC_PROPERTY = f'{RUNTIME_PACKAGE}.OgcProperty'
OGC_PROPERTY_IMPL = f'{RUNTIME_PACKAGE}.OgcPropertyImpl'
OGC_PROPERTY_LIST = f'{RUNTIME_PACKAGE}.OgcPropertyList'
XML_BINDINGS_BASE = f'{RUNTIME_PACKAGE}.AbstractXMLStreamBindings'
JSON_BINDINGS_BASE = f'{RUNTIME_PACKAGE}.AbstractJSONStreamBindings'

JAVA_OBJECT = 'java.lang.Object'
JAVA_STRING = 'java.lang.String'
JAVA_LIST = 'java.util.List'
JAVA_ARRAY_LIST = 'java.util.ArrayList'
JAVA_MAP = 'java.util.Map'
JAVA_HASH_MAP = 'java.util.HashMap'
JAVA_DATETIME = 'java.time.OffsetDateTime'

FACTORY_NAME = 'Factory'
DEFAULT_FACTORY_NAME = 'DefaultFactory'
XML_BINDINGS_NAME = 'XMLStreamBindings'
JSON_BINDINGS_NAME = 'JSONStreamBindings'
IMPL_SUBPACKAGE = 'impl'
BIND_SUBPACKAGE = 'bind'

# reference wrapper naming
PROPERTY_SUFFIXES = ('Property', 'PropertyByValue')
TIME_POSITION_TYPE = 'TimePosition'

# legacy type names redirected to their canonical counterpart
TYPE_OVERRIDES: Dict[str, str] = {
    'net.opengis.swe.v20.Reference': 'net.opengis.gml.v32.Reference',
}

# link attributes inherited from the wrapper base class
XLINK_ATTRS: List[str] = ['type', 'href', 'role', 'arcrole', 'title', 'show', 'actuate', 'nilReason']

JAVA_KEYWORDS: Set[str] = {
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char', 'class', 'const',
    'continue', 'default', 'do', 'double', 'else', 'enum', 'extends', 'final', 'finally', 'float',
    'for', 'goto', 'if', 'implements', 'import', 'instanceof', 'int', 'interface', 'long', 'native',
    'new', 'package', 'private', 'protected', 'public', 'return', 'short', 'static', 'strictfp',
    'super', 'switch', 'synchronized', 'this', 'throw', 'throws', 'transient', 'try', 'void', 'volatile',
    'while', 'true', 'false', 'null', 'record', 'var',
}

JAVA_PRIMITIVES: Set[str] = {'boolean', 'byte', 'short', 'int', 'long', 'float', 'double', 'char'}

JAVA_BOXED: Dict[str, str] = {
    'boolean': 'Boolean',
    'byte': 'Byte',
    'short': 'Short',
    'int': 'Integer',
    'long': 'Long',
    'float': 'Float',
    'double': 'Double',
    'char': 'Character',
}

# builtin XML Schema type -> Java type
XSD_TO_JAVA: Dict[str, str] = {
    'anyType': JAVA_OBJECT,
    'anySimpleType': JAVA_OBJECT,
    'boolean': 'boolean',
    'float': 'float',
    'double': 'double',
    'decimal': 'java.math.BigDecimal',
    'integer': 'java.math.BigInteger',
    'nonPositiveInteger': 'java.math.BigInteger',
    'negativeInteger': 'java.math.BigInteger',
    'nonNegativeInteger': 'java.math.BigInteger',
    'positiveInteger': 'java.math.BigInteger',
    'unsignedLong': 'java.math.BigInteger',
    'long': 'long',
    'int': 'int',
    'short': 'short',
    'byte': 'byte',
    'unsignedInt': 'long',
    'unsignedShort': 'int',
    'unsignedByte': 'short',
    'dateTime': JAVA_DATETIME,
    'dateTimeStamp': JAVA_DATETIME,
    'date': JAVA_DATETIME,
    'time': JAVA_DATETIME,
    'gYear': JAVA_DATETIME,
    'gYearMonth': JAVA_DATETIME,
    'gMonth': JAVA_DATETIME,
    'gMonthDay': JAVA_DATETIME,
    'gDay': JAVA_DATETIME,
    'duration': 'java.time.Duration',
    'yearMonthDuration': 'java.time.Duration',
    'dayTimeDuration': 'java.time.Duration',
    'base64Binary': 'byte[]',
    'hexBinary': 'byte[]',
    'QName': 'javax.xml.namespace.QName',
    'NOTATION': 'javax.xml.namespace.QName',
    'string': JAVA_STRING,
    'normalizedString': JAVA_STRING,
    'token': JAVA_STRING,
    'language': JAVA_STRING,
    'Name': JAVA_STRING,
    'NCName': JAVA_STRING,
    'NMTOKEN': JAVA_STRING,
    'NMTOKENS': JAVA_STRING,
    'ID': JAVA_STRING,
    'IDREF': JAVA_STRING,
    'IDREFS': JAVA_STRING,
    'ENTITY': JAVA_STRING,
    'ENTITIES': JAVA_STRING,
    'anyURI': JAVA_STRING,
}

# builtin derivation hierarchy used when building the builtin type system
XSD_BUILTIN_BASES: Dict[str, str] = {
    'anySimpleType': 'anyType',
    'string': 'anySimpleType',
    'boolean': 'anySimpleType',
    'float': 'anySimpleType',
    'double': 'anySimpleType',
    'decimal': 'anySimpleType',
    'duration': 'anySimpleType',
    'dateTime': 'anySimpleType',
    'time': 'anySimpleType',
    'date': 'anySimpleType',
    'gYearMonth': 'anySimpleType',
    'gYear': 'anySimpleType',
    'gMonthDay': 'anySimpleType',
    'gDay': 'anySimpleType',
    'gMonth': 'anySimpleType',
    'hexBinary': 'anySimpleType',
    'base64Binary': 'anySimpleType',
    'anyURI': 'anySimpleType',
    'QName': 'anySimpleType',
    'NOTATION': 'anySimpleType',
    'normalizedString': 'string',
    'token': 'normalizedString',
    'language': 'token',
    'NMTOKEN': 'token',
    'NMTOKENS': 'anySimpleType',
    'Name': 'token',
    'NCName': 'Name',
    'ID': 'NCName',
    'IDREF': 'NCName',
    'IDREFS': 'anySimpleType',
    'ENTITY': 'NCName',
    'ENTITIES': 'anySimpleType',
    'integer': 'decimal',
    'nonPositiveInteger': 'integer',
    'negativeInteger': 'nonPositiveInteger',
    'long': 'integer',
    'int': 'long',
    'short': 'int',
    'byte': 'short',
    'nonNegativeInteger': 'integer',
    'unsignedLong': 'nonNegativeInteger',
    'unsignedInt': 'unsignedLong',
    'unsignedShort': 'unsignedInt',
    'unsignedByte': 'unsignedShort',
    'positiveInteger': 'nonNegativeInteger',
    'dateTimeStamp': 'dateTime',
    'yearMonthDuration': 'duration',
    'dayTimeDuration': 'duration',
}

# JSON Schema classification of primitive leaf types
JSON_INTEGER_TYPES: Set[str] = {
    'byte', 'short', 'int', 'long', 'unsignedByte', 'unsignedShort', 'unsignedInt', 'unsignedLong',
    'integer', 'positiveInteger', 'nonPositiveInteger', 'negativeInteger', 'nonNegativeInteger',
}
JSON_NUMBER_TYPES: Set[str] = {'float', 'double', 'decimal', 'anySimpleType'}
JSON_STRING_TYPES: Set[str] = {
    'string', 'ID', 'NCName', 'Name', 'token', 'normalizedString', 'anyURI', 'dateTime', 'date', 'time',
}
JSON_STRING_FORMATS: Dict[str, str] = {
    'dateTime': 'date-time',
    'date': 'date',
    'time': 'time',
    'anyURI': 'uri',
}

JSON_SCHEMA_DRAFT = 'http://json-schema.org/draft-07/schema#'
JSON_TYPE_DISCRIMINATOR = 'type'
ENCODED_VALUES_DEF = 'EncodedValues'
ASSOCIATION_GROUP_DEF = 'AssociationAttributeGroup'
UNIT_REFERENCE_DEF = 'UnitReference'
