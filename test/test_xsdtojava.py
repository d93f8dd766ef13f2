"""Test the xmlbindgen.xsdtojava generation pass."""

import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind
from xmlbindgen.xsdtojava import convert_xsd_to_java

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
PACKAGES = {'http://www.example.org/gml': 'org.example.gml', 'http://www.example.org/swe': 'org.example.swe'}


class TestXsdToJava(unittest.TestCase):

    def output_dir(self, name):
        path = os.path.join(tempfile.gettempdir(), "xmlbindgen", name)
        if os.path.exists(path):
            shutil.rmtree(path, ignore_errors=True)
        return path

    def test_convert_swe(self):
        output_dir = self.output_dir("x2j-swe")
        self.assertTrue(convert_xsd_to_java(os.path.join(XSD_DIR, 'swe.xsd'), output_dir, PACKAGES))
        expected = [
            ('org', 'example', 'gml', 'Point.java'),
            ('org', 'example', 'gml', 'Status.java'),
            ('org', 'example', 'gml', 'Factory.java'),
            ('org', 'example', 'gml', 'impl', 'PointImpl.java'),
            ('org', 'example', 'gml', 'impl', 'DefaultFactory.java'),
            ('org', 'example', 'gml', 'bind', 'XMLStreamBindings.java'),
            ('org', 'example', 'gml', 'bind', 'JSONStreamBindings.java'),
            ('org', 'example', 'swe', 'Threshold.java'),
            ('org', 'example', 'swe', 'impl', 'ThresholdImpl.java'),
            ('org.example.gml.schema.json',),
            ('org.example.swe.schema.json',),
        ]
        for parts in expected:
            self.assertTrue(os.path.exists(os.path.join(output_dir, *parts)), os.path.join(*parts))
        # property types and list types get no units
        self.assertFalse(os.path.exists(os.path.join(output_dir, 'org', 'example', 'gml', 'GeometryProperty.java')))
        self.assertFalse(os.path.exists(os.path.join(output_dir, 'org', 'example', 'gml', 'DoubleList.java')))
        self.assertFalse(os.path.exists(os.path.join(output_dir, 'org', 'w3')))

    def test_convert_redefine(self):
        output_dir = self.output_dir("x2j-redefine")
        self.assertTrue(convert_xsd_to_java([os.path.join(XSD_DIR, 'redefine.xsd')], output_dir))
        with open(os.path.join(output_dir, 'org', 'example', 'points', 'impl', 'PointImpl.java'), 'r', encoding='utf-8') as f:
            impl = f.read()
        self.assertIn('protected double x;', impl)
        self.assertIn('protected double y;', impl)
        self.assertIn('public class PointImpl implements Point\n', impl)

    def test_selected_artifacts(self):
        output_dir = self.output_dir("x2j-selected")
        self.assertTrue(convert_xsd_to_java(os.path.join(XSD_DIR, 'swe.xsd'), output_dir, PACKAGES,
                                            [ArtifactKind.JSON_SCHEMA]))
        self.assertEqual(sorted(os.listdir(output_dir)), ['org.example.gml.schema.json', 'org.example.swe.schema.json'])

    def test_unwritable_output(self):
        base = self.output_dir("x2j-blocked")
        os.makedirs(base, exist_ok=True)
        blocker = os.path.join(base, 'out')
        with open(blocker, 'w', encoding='utf-8') as f:
            f.write('not a directory')
        self.assertFalse(convert_xsd_to_java(os.path.join(XSD_DIR, 'swe.xsd'), blocker, PACKAGES))


if __name__ == '__main__':
    unittest.main()
