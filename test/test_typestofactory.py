"""Test the factory emitter of xmlbindgen."""

import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.context import BindingContext
from xmlbindgen.emission import ArtifactKind
from xmlbindgen.schemamodel import QName
from xmlbindgen.typestofactory import FactoryEmitter
from xmlbindgen.xsdtojava import generate_bindings
from xmlbindgen.xsdtotypes import load_xsd

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
GML = 'http://www.example.org/gml'
SWE = 'http://www.example.org/swe'
PACKAGES = {GML: 'org.example.gml', SWE: 'org.example.swe'}


class TestFactoryEmitter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "factory")
        if os.path.exists(cls.output_dir):
            shutil.rmtree(cls.output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        cls.result = generate_bindings(ts, cls.output_dir, PACKAGES, [ArtifactKind.FACTORY, ArtifactKind.FACTORY_IMPL])

    def read(self, *parts):
        with open(os.path.join(self.output_dir, *parts), 'r', encoding='utf-8') as f:
            return f.read()

    def test_result(self):
        self.assertTrue(self.result)
        self.assertFalse(os.path.exists(os.path.join(self.output_dir, 'org', 'example', 'gml', 'Point.java')))

    def test_factory_interface(self):
        factory = self.read('org', 'example', 'gml', 'Factory.java')
        self.assertIn('public interface Factory\n', factory)
        self.assertIn('public Point newPoint();', factory)
        self.assertIn('public LineString newLineString();', factory)
        self.assertIn('public Feature newFeature();', factory)
        self.assertIn('public Envelope newEnvelope();', factory)
        # abstract, enumerated, simple content and colliding element types are not constructible
        for name in ('newAbstractGeometry', 'newStatus', 'newLabel', 'newFeatureElement', 'newPointElement'):
            self.assertNotIn(name, factory)

    def test_default_factory(self):
        impl = self.read('org', 'example', 'gml', 'impl', 'DefaultFactory.java')
        self.assertIn('public class DefaultFactory implements Factory\n', impl)
        self.assertIn('import org.example.gml.Factory;', impl)
        self.assertIn('return new PointImpl();', impl)
        self.assertNotIn('ns1Factory', impl)

    def test_foreign_factory_dependency(self):
        impl = self.read('org', 'example', 'swe', 'impl', 'DefaultFactory.java')
        self.assertIn('protected org.example.gml.Factory ns1Factory;', impl)
        self.assertIn('ns1Factory = new org.example.gml.impl.DefaultFactory();', impl)
        self.assertIn('return new ThresholdImpl();', impl)

    def test_constructible(self):
        ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        emitter = FactoryEmitter(BindingContext(ts, self.output_dir, PACKAGES))
        self.assertTrue(emitter.is_constructible(ts.find_type(QName(GML, 'PointType'))))
        self.assertTrue(emitter.is_constructible(ts.find_document_type(QName(GML, 'Envelope'))))
        self.assertFalse(emitter.is_constructible(ts.find_type(QName(GML, 'AbstractGeometryType'))))
        self.assertFalse(emitter.is_constructible(ts.find_document_type(QName(GML, 'Point'))))
        self.assertFalse(emitter.is_constructible(ts.find_type(QName(GML, 'GeometryPropertyType'))))
        self.assertEqual(emitter.referenced_namespaces(ts.find_type(QName(SWE, 'ThresholdType'))), [GML])
        self.assertEqual(emitter.referenced_namespaces(ts.find_type(QName(GML, 'PointType'))), [])


if __name__ == '__main__':
    unittest.main()
