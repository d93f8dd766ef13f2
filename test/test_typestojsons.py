"""Test the JSON Schema emitter of xmlbindgen."""

import json
import os
import shutil
import sys
import tempfile
import unittest

from jsonschema import Draft7Validator

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind
from xmlbindgen.typestojsons import json_type_for_builtin
from xmlbindgen.xsdtojava import generate_bindings
from xmlbindgen.xsdtotypes import load_xsd

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
GML = 'http://www.example.org/gml'
SWE = 'http://www.example.org/swe'
PACKAGES = {GML: 'org.example.gml', SWE: 'org.example.swe'}


class TestJsonSchemaEmitter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "jsons")
        if os.path.exists(cls.output_dir):
            shutil.rmtree(cls.output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        cls.result = generate_bindings(ts, cls.output_dir, PACKAGES, [ArtifactKind.JSON_SCHEMA])

    def load(self, package):
        with open(os.path.join(self.output_dir, f'{package}.schema.json'), 'r', encoding='utf-8') as f:
            return json.load(f)

    def test_documents_are_valid_schemas(self):
        self.assertTrue(self.result)
        for package in PACKAGES.values():
            schema = self.load(package)
            Draft7Validator.check_schema(schema)
            self.assertEqual(list(schema), ['$schema', '$id', 'definitions', 'oneOf'])
            self.assertEqual(schema['$id'], f'{package}.schema.json')
            for name in ('EncodedValues', 'AssociationAttributeGroup', 'UnitReference'):
                self.assertIn(name, schema['definitions'])

    def test_derived_definition(self):
        point = self.load('org.example.gml')['definitions']['Point']
        self.assertEqual(point['type'], 'object')
        self.assertEqual(point['allOf'][0], {'$ref': '#/definitions/AbstractGeometry'})
        body = point['allOf'][1]
        self.assertEqual(body['properties']['type'], {'const': 'Point'})
        self.assertEqual(body['properties']['srsName'], {'type': 'string'})
        self.assertEqual(body['properties']['pos'], {'type': 'array', 'items': {'type': 'number'}})
        self.assertEqual(body['required'], ['type', 'srsName'])

    def test_abstract_definition(self):
        schema = self.load('org.example.gml')
        geometry = schema['definitions']['AbstractGeometry']
        self.assertNotIn('type', geometry['properties'])
        self.assertNotIn({'$ref': '#/definitions/AbstractGeometry'}, schema['oneOf'])
        self.assertIn({'$ref': '#/definitions/Point'}, schema['oneOf'])

    def test_substitution_group_and_enum(self):
        feature = self.load('org.example.gml')['definitions']['Feature']
        self.assertEqual(feature['properties']['location'],
                         {'oneOf': [{'$ref': '#/definitions/Point'}, {'$ref': '#/definitions/LineString'}]})
        self.assertEqual(feature['properties']['status'], {'type': 'string', 'enum': ['active', 'retired']})
        self.assertEqual(feature['required'], ['type', 'name', 'location'])

    def test_choice_and_foreign_references(self):
        threshold = self.load('org.example.swe')['definitions']['Threshold']
        self.assertEqual(threshold['properties']['limit'],
                         {'oneOf': [{'$ref': '#/definitions/Quantity'}, {'$ref': '#/definitions/Category'}]})
        self.assertEqual(threshold['properties']['area']['oneOf'][0],
                         {'$ref': 'org.example.gml.schema.json#/definitions/Point'})
        self.assertEqual(threshold['properties']['identifier'], {'$ref': '#/definitions/Code'})

    def test_documents_and_property_types_have_no_definition(self):
        definitions = self.load('org.example.gml')['definitions']
        self.assertNotIn('GeometryProperty', definitions)
        self.assertNotIn('Envelope', definitions)
        self.assertNotIn('Status', definitions)

    def test_builtin_json_types(self):
        self.assertEqual(json_type_for_builtin('int'), 'integer')
        self.assertEqual(json_type_for_builtin('double'), 'number')
        self.assertEqual(json_type_for_builtin('anyURI'), 'string')
        self.assertEqual(json_type_for_builtin('QName'), 'QName')


if __name__ == '__main__':
    unittest.main()
