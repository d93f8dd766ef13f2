import argparse
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xmlbindgen.emission import ArtifactKind
from xmlbindgen.xmlbindgen import main, parse_namespace_map, selected_artifacts


def get_xsd():
    """Provides the XSD input file path."""
    return os.path.join(os.path.dirname(__file__), 'xsd', 'swe.xsd')


def get_out():
    """Provides the output directory."""
    return os.path.join(tempfile.gettempdir(), 'xmlbindgen', 'cli')


def x2j_args(**kwargs):
    values = dict(command='x2j', version=False, verbose=False, debug=False, xsd=[get_xsd()], out=get_out(),
                  namespace_map=['http://www.example.org/gml=org.example.gml'], no_model=False, no_factory=False,
                  no_jsonschema=False, no_xml=False, no_json=False)
    values.update(kwargs)
    return argparse.Namespace(**values)


class TestMain(unittest.TestCase):

    def setUp(self):
        if os.path.exists(get_out()):
            shutil.rmtree(get_out(), ignore_errors=True)

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=False))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('builtins.print'):
            main()

    @patch('argparse.ArgumentParser.parse_args', return_value=x2j_args())
    def test_main_x2j_command(self, mock_parse_args):
        """Test main function with x2j command."""
        main()
        assert os.path.exists(os.path.join(get_out(), 'org', 'example', 'gml', 'Point.java'))
        assert os.path.exists(os.path.join(get_out(), 'org.example.gml.schema.json'))
        assert os.path.exists(os.path.join(get_out(), 'org', 'example', 'swe', 'bind', 'XMLStreamBindings.java'))

    @patch('argparse.ArgumentParser.parse_args', return_value=x2j_args(no_model=True, no_xml=True, no_json=True))
    def test_main_x2j_switches(self, mock_parse_args):
        """Test main function with artifact kinds switched off."""
        main()
        assert os.path.exists(os.path.join(get_out(), 'org', 'example', 'gml', 'Factory.java'))
        assert not os.path.exists(os.path.join(get_out(), 'org', 'example', 'gml', 'Point.java'))
        assert not os.path.exists(os.path.join(get_out(), 'org', 'example', 'gml', 'bind'))

    @patch('argparse.ArgumentParser.parse_args', return_value=x2j_args(xsd=['missing.xsd']))
    def test_main_x2j_missing_input(self, mock_parse_args):
        """Test main function with an input file that does not exist."""
        with patch('builtins.print'):
            with self.assertRaises(SystemExit) as cm:
                main()
        self.assertEqual(cm.exception.code, 1)


class TestArguments(unittest.TestCase):

    def test_parse_namespace_map(self):
        self.assertEqual(parse_namespace_map(None), {})
        self.assertEqual(parse_namespace_map(['urn:a=org.a', 'http://x.org/q?v=1=org.x']),
                         {'urn:a': 'org.a', 'http://x.org/q?v=1': 'org.x'})
        with self.assertRaises(ValueError):
            parse_namespace_map(['urn:a'])

    def test_selected_artifacts(self):
        self.assertEqual(selected_artifacts(argparse.Namespace()), set(ArtifactKind))
        selected = selected_artifacts(argparse.Namespace(no_factory=True, no_json=True))
        self.assertEqual(selected, {ArtifactKind.MODEL, ArtifactKind.JSON_SCHEMA, ArtifactKind.XML_CODEC})


if __name__ == '__main__':
    unittest.main()
