"""Test the XML stream codec emitter of xmlbindgen."""

import os
import shutil
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind
from xmlbindgen.xsdtojava import generate_bindings
from xmlbindgen.xsdtotypes import load_xsd

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
GML = 'http://www.example.org/gml'
SWE = 'http://www.example.org/swe'
PACKAGES = {GML: 'org.example.gml', SWE: 'org.example.swe'}


class TestXmlCodecEmitter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "xmlbind")
        if os.path.exists(cls.output_dir):
            shutil.rmtree(cls.output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        cls.result = generate_bindings(ts, cls.output_dir, PACKAGES, [ArtifactKind.XML_CODEC])
        cls.gml = cls.read('gml')
        cls.swe = cls.read('swe')

    @classmethod
    def read(cls, prefix):
        path = os.path.join(cls.output_dir, 'org', 'example', prefix, 'bind', 'XMLStreamBindings.java')
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def test_class(self):
        self.assertTrue(self.result)
        self.assertTrue(self.gml.startswith('package org.example.gml.bind;\n'))
        self.assertIn('public class XMLStreamBindings extends AbstractXMLStreamBindings\n', self.gml)
        self.assertIn('public final static String NS_URI = "http://www.example.org/gml";', self.gml)
        self.assertIn('import org.example.gml.Factory;', self.gml)
        self.assertIn('import javax.xml.stream.XMLStreamReader;', self.gml)
        self.assertIn('public XMLStreamBindings(Factory factory)\n', self.gml)

    def test_substitution_group_dispatch(self):
        self.assertIn('public AbstractGeometry readAbstractGeometry(XMLStreamReader reader) throws XMLStreamException', self.gml)
        self.assertIn('if (localName.equals("Point"))', self.gml)
        self.assertIn('else if (localName.equals("LineString"))', self.gml)
        self.assertIn('return this.readPoint(reader);', self.gml)
        self.assertIn('this.writePoint(writer, (Point)bean);', self.gml)
        # abstract types have no reader of their own
        self.assertNotIn('public AbstractGeometry readAbstractGeometryType(', self.gml)
        self.assertIn('public void readAbstractGeometryTypeAttributes(Map<String, String> attrMap, AbstractGeometry bean)', self.gml)

    def test_derived_type(self):
        self.assertIn('public Point readPointType(XMLStreamReader reader) throws XMLStreamException', self.gml)
        self.assertIn('Point bean = factory.newPoint();', self.gml)
        self.assertIn('this.readAbstractGeometryTypeAttributes(attrMap, bean);', self.gml)
        self.assertIn('this.readAbstractGeometryTypeElements(reader, bean);', self.gml)
        self.assertIn('found = checkElementName(reader, "pos");', self.gml)
        self.assertIn('bean.addPos(getDoubleFromString(val));', self.gml)
        self.assertIn('while (found);', self.gml)
        self.assertIn('writer.writeAttribute("srsName", bean.getSrsName());', self.gml)

    def test_elements(self):
        self.assertIn('public Envelope readEnvelope(XMLStreamReader reader) throws XMLStreamException', self.gml)
        self.assertIn('Envelope bean = factory.newEnvelope();', self.gml)
        self.assertIn('bean.setLowerCorner(getDoubleArrayFromString(val));', self.gml)
        self.assertIn('public String readLabel(XMLStreamReader reader) throws XMLStreamException', self.gml)
        self.assertIn('return trimStringValue(val);', self.gml)
        self.assertIn('public Feature readFeature(XMLStreamReader reader) throws XMLStreamException', self.gml)
        self.assertIn('return this.readFeatureType(reader);', self.gml)
        self.assertIn('writer.writeStartElement(NS_URI, "Envelope");', self.gml)

    def test_wrapper_property(self):
        self.assertIn('OgcProperty<AbstractGeometry> locationProp = bean.getLocationProperty();', self.gml)
        self.assertIn('readPropertyAttributes(reader, locationProp);', self.gml)
        self.assertIn('locationProp.setValue(this.readAbstractGeometry(reader));', self.gml)
        self.assertIn('writer.writeStartElement(NS_URI, "location");', self.gml)
        self.assertIn('if (locationProp.hasValue() && !locationProp.hasHref())', self.gml)
        self.assertIn('this.writeAbstractGeometry(writer, locationProp.getValue());', self.gml)

    def test_enum_property(self):
        self.assertIn('bean.setStatus(Status.fromString(val));', self.gml)
        self.assertIn('if (bean.isSetStatus())', self.gml)
        self.assertIn('getStringValue(bean.getStatus())', self.gml)

    def test_foreign_namespace(self):
        self.assertIn('public XMLStreamBindings(Factory factory, org.example.gml.Factory ns1Factory)\n', self.swe)
        self.assertIn('this(factory, ns1Factory, new HashMap<String, AbstractXMLStreamBindings>());', self.swe)
        self.assertIn('ns1Bindings = (org.example.gml.bind.XMLStreamBindings)'
                      'bindings.get(org.example.gml.bind.XMLStreamBindings.NS_URI);', self.swe)
        self.assertIn('ns1Bindings = new org.example.gml.bind.XMLStreamBindings(ns1Factory, bindings);', self.swe)
        self.assertIn('ns1Bindings.readAbstractGeometry(reader)', self.swe)

    def test_shared_codec_registry(self):
        self.assertIn('public XMLStreamBindings(Factory factory, Map<String, AbstractXMLStreamBindings> bindings)\n',
                      self.gml)
        self.assertIn('bindings.put(NS_URI, this);', self.gml)
        self.assertIn('import java.util.HashMap;', self.gml)

    def test_choice(self):
        self.assertIn('OgcProperty<AbstractDataComponent> limitProp = bean.getLimitProperty();', self.swe)
        self.assertIn('if (localName.equals("Quantity"))', self.swe)
        self.assertIn('limitProp.setValue(this.readQuantity(reader));', self.swe)
        self.assertIn('limitProp.setValue(this.readCategory(reader));', self.swe)
        self.assertIn('this.writeQuantity(writer, (Quantity)limitProp.getValue());', self.swe)

    def test_simple_content(self):
        self.assertIn('bean.setIdentifier(this.readCodeType(reader));', self.swe)
        self.assertIn('bean.setValue(trimStringValue(val));', self.swe)

    def test_repeated_wrapper(self):
        self.assertIn('OgcProperty<AbstractDataComponent> fieldProp = new OgcPropertyImpl<AbstractDataComponent>();', self.swe)
        self.assertIn('fieldProp.setValue(this.readAbstractDataComponent(reader));', self.swe)
        self.assertIn('bean.getFieldList().add(fieldProp);', self.swe)
        self.assertIn('OgcProperty<AbstractDataComponent> item = bean.getFieldList().getProperty(i);', self.swe)


class TestMutuallyDependentCodecs(unittest.TestCase):

    def test_codecs_share_instances(self):
        output_dir = os.path.join(tempfile.gettempdir(), "xmlbindgen", "xmlbind-cycle")
        if os.path.exists(output_dir):
            shutil.rmtree(output_dir, ignore_errors=True)
        ts = load_xsd(os.path.join(XSD_DIR, 'cycle_a.xsd'))
        packages = {'http://www.example.org/cyclea': 'org.example.cyclea',
                    'http://www.example.org/cycleb': 'org.example.cycleb'}
        self.assertTrue(generate_bindings(ts, output_dir, packages, [ArtifactKind.XML_CODEC]))
        codecs = {}
        for prefix in ('cyclea', 'cycleb'):
            path = os.path.join(output_dir, 'org', 'example', prefix, 'bind', 'XMLStreamBindings.java')
            with open(path, 'r', encoding='utf-8') as f:
                codecs[prefix] = f.read()
        for prefix, other in (('cyclea', 'cycleb'), ('cycleb', 'cyclea')):
            codec = codecs[prefix]
            foreign = f'org.example.{other}.bind.XMLStreamBindings'
            self.assertIn(f'public XMLStreamBindings(Factory factory, org.example.{other}.Factory ns1Factory)\n', codec)
            self.assertIn('bindings.put(NS_URI, this);', codec)
            self.assertIn(f'ns1Bindings = ({foreign})bindings.get({foreign}.NS_URI);', codec)
            self.assertIn('if (ns1Bindings == null)', codec)
            self.assertIn(f'ns1Bindings = new {foreign}(ns1Factory, factory, bindings);', codec)
            # the foreign codec is never built unconditionally
            self.assertNotIn(f'ns1Bindings = new {foreign}(ns1Factory, factory);', codec)
        self.assertIn('ns1Bindings.readBType(reader)', codecs['cyclea'])
        self.assertIn('ns1Bindings.readAType(reader)', codecs['cycleb'])


if __name__ == '__main__':
    unittest.main()
