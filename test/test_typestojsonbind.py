"""Test the JSON stream codec emitter of xmlbindgen."""

import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind
from xmlbindgen.typemapper import TypeRef
from xmlbindgen.xsdtojava import generate_bindings
from xmlbindgen.xsdtotypes import load_xsd

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
GML = 'http://www.example.org/gml'
SWE = 'http://www.example.org/swe'
PACKAGES = {GML: 'org.example.gml', SWE: 'org.example.swe'}


class TestJsonCodecEmitter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "jsonbind")
        if os.path.exists(cls.output_dir):
            shutil.rmtree(cls.output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        cls.result = generate_bindings(ts, cls.output_dir, PACKAGES, [ArtifactKind.JSON_CODEC])
        cls.gml = cls.read('gml')
        cls.swe = cls.read('swe')

    @classmethod
    def read(cls, prefix):
        path = os.path.join(cls.output_dir, 'org', 'example', prefix, 'bind', 'JSONStreamBindings.java')
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def test_class(self):
        self.assertTrue(self.result)
        self.assertIn('public class JSONStreamBindings extends AbstractJSONStreamBindings\n', self.gml)
        self.assertIn('import com.google.gson.stream.JsonReader;', self.gml)
        self.assertIn('public JSONStreamBindings(Factory factory, org.example.gml.Factory ns1Factory)', self.swe)
        self.assertIn('this(factory, ns1Factory, new HashMap<String, AbstractJSONStreamBindings>());', self.swe)
        self.assertIn('ns1Bindings = new org.example.gml.bind.JSONStreamBindings(ns1Factory, bindings);', self.swe)

    def test_type_operations(self):
        self.assertIn('public Point readPointType(JsonReader reader) throws IOException', self.gml)
        self.assertIn('readObjectType(reader);', self.gml)
        self.assertIn('public Point readPointTypeContent(JsonReader reader) throws IOException', self.gml)
        self.assertIn('writer.name("type").value("Point");', self.gml)
        self.assertIn('if ("srsName".equals(name))', self.gml)
        self.assertIn('bean.addPos(reader.nextDouble());', self.gml)
        self.assertIn('writer.name("pos").beginArray();', self.gml)
        self.assertIn('for (int i = 0; i < bean.getNumPos(); i++)', self.gml)
        self.assertIn('if (this.readAbstractGeometryTypeAttributes(name, reader, bean))', self.gml)

    def test_element_operations(self):
        self.assertIn('public Envelope readEnvelopeContent(JsonReader reader, String type) throws IOException', self.gml)
        self.assertIn('bean.setLowerCorner(readDoubleArray(reader));', self.gml)
        self.assertIn('public String readLabel(JsonReader reader) throws IOException', self.gml)
        self.assertIn('return reader.nextString();', self.gml)
        self.assertIn('return this.readPointTypeContent(reader);', self.gml)

    def test_dispatch(self):
        self.assertIn('if ("Point".equals(type))', self.gml)
        self.assertIn('return this.readPointContent(reader, type);', self.gml)
        self.assertIn('throw new IOException(ERROR_UNSUPPORTED_TYPE + type);', self.gml)
        self.assertIn('this.writePointContent(writer, (Point)bean);', self.gml)

    def test_wrapper_property(self):
        self.assertIn('String type = readPropertyAttributes(reader, locationProp);', self.gml)
        self.assertIn('locationProp.setValue(this.readAbstractGeometryContent(reader, type));', self.gml)
        self.assertIn('bean.setStatus(Status.fromString(reader.nextString()));', self.gml)

    def test_choice(self):
        self.assertIn('String type = readPropertyAttributes(reader, limitProp);', self.swe)
        self.assertIn('if ("Quantity".equals(type))', self.swe)
        self.assertIn('limitProp.setValue(this.readQuantityContent(reader, type));', self.swe)
        self.assertIn('this.writeQuantityContent(writer, (Quantity)limitProp.getValue());', self.swe)

    def test_value_lines(self):
        from xmlbindgen.context import BindingContext
        from xmlbindgen.typestojsonbind import JsonCodecEmitter
        emitter = JsonCodecEmitter(BindingContext(load_xsd(os.path.join(XSD_DIR, 'base.xsd')), self.output_dir))
        self.assertEqual(emitter.value_write_lines(TypeRef('', 'double'), 'v', 'x'), ['writer.name("x").value(v);'])
        self.assertEqual(emitter.value_write_lines(TypeRef('', 'double', True), 'v', 'x'),
                         ['writer.name("x");', 'writeArrayValue(writer, v);'])
        self.assertEqual(emitter.value_write_lines(TypeRef('java.time', 'OffsetDateTime'), 'v'),
                         ['writer.value(getStringValue(v));'])
        self.assertEqual(JsonCodecEmitter.primitive_name(TypeRef('java.lang', 'Integer')), 'int')
        self.assertIsNone(JsonCodecEmitter.primitive_name(TypeRef('java.lang', 'String')))


class TestMutuallyDependentJsonCodecs(unittest.TestCase):

    def test_codecs_share_instances(self):
        output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "jsonbind-cycle")
        if os.path.exists(output_dir):
            shutil.rmtree(output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'cycle_a.xsd'))
        packages = {'http://www.example.org/cyclea': 'org.example.cyclea',
                    'http://www.example.org/cycleb': 'org.example.cycleb'}
        self.assertTrue(generate_bindings(ts, output_dir, packages, [ArtifactKind.JSON_CODEC]))
        path = os.path.join(output_dir, 'org', 'example', 'cyclea', 'bind', 'JSONStreamBindings.java')
        with open(path, 'r', encoding='utf-8') as f:
            codec = f.read()
        foreign = 'org.example.cycleb.bind.JSONStreamBindings'
        self.assertIn('this(factory, ns1Factory, new HashMap<String, AbstractJSONStreamBindings>());', codec)
        self.assertIn('bindings.put(NS_URI, this);', codec)
        self.assertIn(f'ns1Bindings = ({foreign})bindings.get({foreign}.NS_URI);', codec)
        self.assertIn(f'ns1Bindings = new {foreign}(ns1Factory, factory, bindings);', codec)


if __name__ == '__main__':
    unittest.main()
