"""Test the xmlbindgen.properties module."""

import os
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.context import BindingContext
from xmlbindgen.errors import ChoiceResolutionError, MissingContentModelError, RedefinitionConflictError
from xmlbindgen.properties import PropertyShape
from xmlbindgen.schemamodel import ContentKind, Particle, ParticleKind, PropertyNode, QName, TypeNode, TypeSystem
from xmlbindgen.typemapper import TypeRef
from xmlbindgen.xsdtotypes import load_xsd

XSD_DIR = os.path.join(os.path.dirname(__file__), 'xsd')
GML = 'http://www.example.org/gml'
SWE = 'http://www.example.org/swe'
PACKAGES = {GML: 'org.example.gml', SWE: 'org.example.swe'}


class TestPropertyClassifier(unittest.TestCase):

    def setUp(self):
        self.ts = load_xsd(os.path.join(XSD_DIR, 'swe.xsd'))
        self.context = BindingContext(self.ts, tempfile.gettempdir(), PACKAGES)
        self.classifier = self.context.classifier

    def infos(self, namespace, local):
        t = self.ts.find_type(QName(namespace, local))
        return {info.prop.name.local: info for info in self.classifier.describe_all(t)}

    def test_scalar_and_repeated(self):
        infos = self.infos(GML, 'PointType')
        self.assertEqual(list(infos), ['srsName', 'pos'])
        srs_name = infos['srsName']
        self.assertEqual(srs_name.shape, PropertyShape.SCALAR)
        self.assertTrue(srs_name.value_type.is_string)
        self.assertEqual(srs_name.name, 'SrsName')
        pos = infos['pos']
        self.assertEqual(pos.shape, PropertyShape.REPEATED)
        self.assertEqual(pos.value_type, TypeRef('', 'double'))
        self.assertEqual(pos.var, 'posList')
        self.assertEqual(pos.json_name, 'pos')
        self.assertEqual(pos.list_type.parameters, (TypeRef('java.lang', 'Double'),))

    def test_optional_and_wrapper(self):
        infos = self.infos(GML, 'FeatureType')
        self.assertEqual(infos['status'].shape, PropertyShape.OPTIONAL_SCALAR)
        self.assertEqual(infos['status'].value_type, TypeRef('org.example.gml', 'Status'))
        location = infos['location']
        self.assertTrue(location.is_wrapper)
        self.assertTrue(location.is_complex_wrapper)
        self.assertFalse(location.has_name)
        self.assertEqual(location.shape, PropertyShape.WRAPPER)
        self.assertEqual(location.value_type, TypeRef('org.example.gml', 'AbstractGeometry'))
        self.assertIs(location.value_node, self.ts.find_type(QName(GML, 'AbstractGeometryType')))
        # simple typed lower case elements are wrappers without link metadata
        self.assertTrue(infos['name'].is_wrapper)
        self.assertFalse(infos['name'].is_complex_wrapper)

    def test_named_repeated_wrapper(self):
        field = self.infos(SWE, 'DataRecordType')['field']
        self.assertTrue(field.is_complex_wrapper)
        self.assertTrue(field.has_name)
        self.assertTrue(field.is_repeated)
        self.assertEqual(field.value_type, TypeRef('org.example.swe', 'AbstractDataComponent'))
        self.assertEqual(field.json_name, 'fields')

    def test_choice(self):
        limit = self.infos(SWE, 'ThresholdType')['limit']
        self.assertTrue(limit.is_choice)
        self.assertEqual(limit.shape, PropertyShape.CHOICE)
        self.assertEqual([alt.name.local for alt in limit.alternatives], ['Quantity', 'Category'])
        self.assertIs(limit.value_node, self.ts.find_type(QName(SWE, 'AbstractDataComponentType')))
        self.assertEqual(limit.value_type, TypeRef('org.example.swe', 'AbstractDataComponent'))

    def test_choice_alternatives_borrow_parent_metadata(self):
        limit = self.infos(SWE, 'ThresholdType')['limit']
        overrides = self.classifier.alternative_overrides(limit)
        self.assertEqual(len(overrides), 2)
        described = [self.classifier.describe(alt, None, overrides) for alt in limit.alternatives]
        self.assertEqual([d.name for d in described], ['Limit', 'Limit'])
        self.assertEqual([d.value_type.name for d in described], ['Quantity', 'Category'])
        self.assertTrue(all(d.is_complex_wrapper for d in described))
        self.assertTrue(all(not d.is_repeated and not d.is_optional for d in described))
        # the shared alternative declarations are left untouched
        self.assertEqual([alt.name.local for alt in limit.alternatives], ['Quantity', 'Category'])
        self.assertEqual([alt.min_occurs for alt in limit.alternatives], [0, 0])
        plain = self.classifier.describe(limit.alternatives[0])
        self.assertEqual(plain.name, 'Quantity')

    def test_model_base(self):
        point = self.ts.find_type(QName(GML, 'PointType'))
        geometry = self.ts.find_type(QName(GML, 'AbstractGeometryType'))
        self.assertIs(self.classifier.model_base(point), geometry)
        self.assertIsNone(self.classifier.model_base(geometry))
        feature = self.ts.find_document_type(QName(GML, 'Feature'))
        self.assertIs(self.classifier.model_base(feature), self.ts.find_type(QName(GML, 'FeatureType')))
        envelope = self.ts.find_document_type(QName(GML, 'Envelope'))
        self.assertIsNone(self.classifier.model_base(envelope))
        self.assertIs(self.classifier.structure_of(envelope), envelope.content_type)

    def test_base_chain_ends_at_eligible_type(self):
        context = self.context
        for t in self.ts.all_types():
            if not context.eligibility.generated(t):
                continue
            base = self.classifier.model_base(t)
            while base is not None:
                self.assertTrue(context.eligibility.generated(base), f'{t} has ineligible base {base}')
                base = self.classifier.model_base(base)

    def test_value_accessor(self):
        self.assertTrue(self.classifier.has_value_accessor(self.ts.find_type(QName(SWE, 'CodeType'))))
        self.assertFalse(self.classifier.has_value_accessor(self.ts.find_type(QName(GML, 'PointType'))))

    def test_document_properties(self):
        envelope = self.ts.find_document_type(QName(GML, 'Envelope'))
        names = [p.name.local for p in self.classifier.own_properties(envelope)]
        self.assertEqual(names, ['srsName', 'lowerCorner', 'upperCorner'])
        feature = self.ts.find_document_type(QName(GML, 'Feature'))
        self.assertEqual(self.classifier.own_properties(feature), [])

    def test_redefinition_merges_properties(self):
        ts = load_xsd(os.path.join(XSD_DIR, 'redefine.xsd'))
        context = BindingContext(ts, tempfile.gettempdir())
        point = ts.find_type(QName('http://www.example.org/points', 'PointType'))
        self.assertIsNone(context.classifier.model_base(point))
        self.assertEqual([p.name.local for p in context.classifier.own_properties(point)], ['x', 'y'])

    def test_nested_types(self):
        self.assertEqual(list(self.classifier.nested_types(self.ts.find_type(QName(SWE, 'DataRecordType')))), [])


class TestStructuralErrors(unittest.TestCase):

    NS = 'urn:test'

    def setUp(self):
        self.ts = TypeSystem()
        self.context = BindingContext(self.ts, tempfile.gettempdir())

    def named(self, local, base=None):
        return self.ts.add_global_type(TypeNode(QName(self.NS, local), base_type=base, derivation='extension',
                                                content_kind=ContentKind.ELEMENT))

    def test_unrelated_choice_alternatives(self):
        first = self.named('FirstType')
        second = self.named('SecondType')
        choice = TypeNode(content_kind=ContentKind.ELEMENT)
        choice.content_model = Particle(ParticleKind.CHOICE, children=[
            Particle(ParticleKind.ELEMENT, 0, 1, name=QName(self.NS, 'first')),
            Particle(ParticleKind.ELEMENT, 0, 1, name=QName(self.NS, 'second'))])
        choice.add_property(PropertyNode(QName(self.NS, 'first'), first, min_occurs=0))
        choice.add_property(PropertyNode(QName(self.NS, 'second'), second, min_occurs=0))
        owner = self.named('OwnerType')
        prop = owner.add_property(PropertyNode(QName(self.NS, 'member'), choice))
        owner.add_anonymous_type(choice, prop)
        with self.assertRaises(ChoiceResolutionError) as cm:
            self.context.classifier.describe(prop)
        self.assertEqual(len(cm.exception.alternatives), 2)

    def test_choice_without_content_model(self):
        empty = self.named('EmptyType')
        with self.assertRaises(MissingContentModelError):
            self.context.classifier.choice_alternatives(empty)

    def test_conflicting_redefinition(self):
        original = self.named('PointType')
        original.add_property(PropertyNode(QName(self.NS, 'x'), self.ts.builtin('double')))
        redefined = self.named('PointType', original)
        redefined.add_property(PropertyNode(QName(self.NS, 'x'), self.ts.builtin('string')))
        with self.assertRaises(RedefinitionConflictError) as cm:
            self.context.classifier.own_properties(redefined)
        self.assertEqual(cm.exception.property_name, 'x')


if __name__ == '__main__':
    unittest.main()
