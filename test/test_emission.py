"""Test the xmlbindgen.emission module."""

import json
import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind, EmissionRegistry, JavaEmissionUnit, JsonSchemaEmissionUnit
from xmlbindgen.typemapper import TypeRef

NS = 'urn:test'


class TestJavaEmissionUnit(unittest.TestCase):

    def setUp(self):
        self.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "emission")
        if os.path.exists(self.output_dir):
            shutil.rmtree(self.output_dir, ignore_errors=True)

    def test_header_is_derived_from_body(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.MODEL, self.output_dir, 'org.example', 'Sample',
                                lambda u: 'public class Sample\n{\n')
        unit.write(f"    protected {unit.use(TypeRef.parse('java.math.BigDecimal'))} amount;\n")
        unit.write(f"    protected {unit.use(TypeRef.parse('java.lang.String'))} name;\n")
        unit.write(f"    protected {unit.use(TypeRef('org.example', 'Other'))} other;\n")
        text = unit.render()
        self.assertTrue(text.startswith('package org.example;\n'))
        self.assertIn('import java.math.BigDecimal;\n', text)
        self.assertNotIn('import java.lang.String;', text)
        self.assertNotIn('import org.example.Other;', text)
        self.assertIn('protected BigDecimal amount;', text)
        self.assertTrue(text.endswith('}\n'))
        # the header precedes the buffered body
        self.assertLess(text.index('import java.math.BigDecimal;'), text.index('public class Sample'))

    def test_generic_parameters_are_imported(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.MODEL, self.output_dir, 'org.example', 'Sample')
        ref = TypeRef.parse('java.util.List').with_parameters(TypeRef('org.example.types', 'Point'))
        self.assertEqual(unit.use(ref), 'List<Point>')
        self.assertEqual(unit.imports(), ['java.util.List', 'org.example.types.Point'])

    def test_name_clash_uses_qualified_name(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.FACTORY, self.output_dir, 'org.example', 'Factory')
        self.assertEqual(unit.use(TypeRef('org.example.other', 'Factory')), 'org.example.other.Factory')
        self.assertEqual(unit.use(TypeRef('org.example.a', 'Point')), 'Point')
        self.assertEqual(unit.use(TypeRef('org.example.b', 'Point')), 'org.example.b.Point')
        self.assertEqual(unit.imports(), ['org.example.a.Point'])

    def test_nested_and_array_references(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.MODEL, self.output_dir, 'org.example', 'Sample')
        self.assertEqual(unit.use(TypeRef('org.example.a', 'Record.Field')), 'Record.Field')
        self.assertEqual(unit.use(TypeRef('', 'double', True)), 'double[]')
        self.assertEqual(unit.imports(), ['org.example.a.Record'])

    def test_dependency_aliases(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.XML_CODEC, self.output_dir, 'org.example.bind', 'XMLStreamBindings')
        self.assertEqual(unit.dependency_alias('urn:a'), 'ns1')
        self.assertEqual(unit.dependency_alias('urn:b'), 'ns2')
        self.assertEqual(unit.dependency_alias('urn:a'), 'ns1')
        self.assertEqual(list(unit.dependencies), ['urn:a', 'urn:b'])

    def test_close_writes_once(self):
        unit = JavaEmissionUnit(NS, ArtifactKind.MODEL, self.output_dir, 'org.example', 'Sample')
        unit.close()
        path = os.path.join(self.output_dir, 'org', 'example', 'Sample.java')
        self.assertEqual(unit.path, path)
        self.assertTrue(os.path.exists(path))
        os.remove(path)
        unit.close()
        self.assertFalse(os.path.exists(path))


class TestJsonSchemaEmissionUnit(unittest.TestCase):

    def test_document(self):
        output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "emission-json")
        unit = JsonSchemaEmissionUnit(NS, output_dir, 'org.example', 'http://json-schema.org/draft-07/schema#')
        unit.definitions['Point'] = {'type': 'object'}
        unit.top_level.append('Point')
        unit.closing = lambda u: u.definitions.update({'Extra': {'type': 'string'}})
        doc = unit.document()
        self.assertEqual(list(doc), ['$schema', '$id', 'definitions', 'oneOf'])
        self.assertEqual(doc['$id'], 'org.example.schema.json')
        self.assertEqual(doc['oneOf'], [{'$ref': '#/definitions/Point'}])
        self.assertIn('Extra', doc['definitions'])
        unit.close()
        with open(os.path.join(output_dir, 'org.example.schema.json'), 'r', encoding='utf-8') as f:
            self.assertEqual(json.load(f)['definitions']['Point'], {'type': 'object'})


class TestEmissionRegistry(unittest.TestCase):

    def setUp(self):
        self.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "registry")
        if os.path.exists(self.output_dir):
            shutil.rmtree(self.output_dir, ignore_errors=True)
        os.makedirs(self.output_dir, exist_ok=True)

    def test_units_are_created_once(self):
        registry = EmissionRegistry(self.output_dir)
        created = []

        def create():
            unit = JavaEmissionUnit(NS, ArtifactKind.FACTORY, self.output_dir, 'org.example', 'Factory')
            created.append(unit)
            return unit

        first = registry.unit(NS, ArtifactKind.FACTORY, create)
        second = registry.unit(NS, ArtifactKind.FACTORY, create)
        self.assertIs(first, second)
        self.assertEqual(len(created), 1)
        self.assertIs(registry.get(NS, ArtifactKind.FACTORY), first)
        self.assertIsNone(registry.get(NS, ArtifactKind.JSON_CODEC))
        self.assertEqual(registry.namespaces(), [NS])

    def test_failing_unit_does_not_stop_the_others(self):
        blocker = os.path.join(self.output_dir, 'blocker')
        with open(blocker, 'w', encoding='utf-8') as f:
            f.write('not a directory')
        registry = EmissionRegistry(self.output_dir)
        broken = registry.unit('urn:a', ArtifactKind.FACTORY,
                               lambda: JavaEmissionUnit('urn:a', ArtifactKind.FACTORY, blocker, 'org.a', 'Factory'))
        good = registry.unit('urn:b', ArtifactKind.FACTORY,
                             lambda: JavaEmissionUnit('urn:b', ArtifactKind.FACTORY, self.output_dir, 'org.b', 'Factory'))
        self.assertFalse(registry.close_all())
        self.assertTrue(broken.closed)
        self.assertTrue(os.path.exists(good.path))
        self.assertEqual(registry.namespaces(), [])


if __name__ == '__main__':
    unittest.main()
