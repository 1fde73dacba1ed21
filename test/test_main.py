import argparse
import json
import os
import tempfile
import unittest
from unittest.mock import patch
from openapijsons.openapijsons import (
    EXIT_CONVERSION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_OK,
    main,
)

def get_openapi(name):
    """Provides the OpenAPI input file path."""
    return os.path.join(os.path.dirname(__file__), 'openapi', name)

def generate_args(**kwargs):
    args = dict(command='generate', version=False, verbose=False, input=None, out=None, main_schema=None,
                exclude_read_only=False, exclude_write_only=False, json_schema_version='2019-09')
    args.update(kwargs)
    return argparse.Namespace(**args)

class TestMain(unittest.TestCase):

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=False))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('argparse.ArgumentParser.print_help') as mock_help:
            self.assertEqual(EXIT_OK, main())
        mock_help.assert_called_once()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=True))
    def test_main_version(self, mock_parse_args):
        """Test main function with --version."""
        with patch('builtins.print') as mock_print:
            self.assertEqual(EXIT_OK, main())
        self.assertTrue(mock_print.call_args[0][0].startswith('openapijsons '))

    def test_main_generate_command(self):
        """Test main function with generate command."""
        out = tempfile.gettempdir() + '/petstore.draft7.json'
        args = generate_args(input=get_openapi('petstore.yaml'), out=out, main_schema='Pet',
                             exclude_read_only=True, json_schema_version='7')
        with patch('argparse.ArgumentParser.parse_args', return_value=args):
            self.assertEqual(EXIT_OK, main())
        with open(out, 'r', encoding='utf-8') as f:
            result = json.load(f)
        self.assertEqual('http://json-schema.org/draft-07/schema#', result['$schema'])
        self.assertEqual('#/definitions/Pet', result['$ref'])
        self.assertIn('NewPet', result['definitions'])

    def test_main_generate_to_stdout(self):
        """Test main function writing the schema to stdout."""
        args = generate_args(input=get_openapi('simple.json'))
        with patch('argparse.ArgumentParser.parse_args', return_value=args), \
                patch('sys.stdout.write') as mock_write:
            self.assertEqual(EXIT_OK, main())
        written = ''.join(call[0][0] for call in mock_write.call_args_list)
        self.assertIn('"$defs"', written)

    def test_main_structural_error(self):
        """A reference to another document fails the conversion."""
        out = tempfile.gettempdir() + '/external_ref.schema.json'
        if os.path.exists(out):
            os.remove(out)
        args = generate_args(input=get_openapi('external_ref.yaml'), out=out)
        with patch('argparse.ArgumentParser.parse_args', return_value=args):
            self.assertEqual(EXIT_CONVERSION_ERROR, main())
        self.assertFalse(os.path.exists(out))

    def test_main_missing_input(self):
        """An unreadable input is reported as an input error."""
        args = generate_args(input=get_openapi('missing.yaml'))
        with patch('argparse.ArgumentParser.parse_args', return_value=args):
            self.assertEqual(EXIT_INPUT_ERROR, main())

    def test_main_input_not_utf8(self):
        """Input that is not UTF-8 is reported as an input error."""
        source = os.path.join(tempfile.gettempdir(), 'latin1.openapi.yaml')
        with open(source, 'wb') as f:
            f.write('openapi: 3.0.3\ninfo:\n  title: Café\n'.encode('latin-1'))
        args = generate_args(input=source)
        with patch('argparse.ArgumentParser.parse_args', return_value=args):
            self.assertEqual(EXIT_INPUT_ERROR, main())

    def test_main_swagger_input(self):
        """Swagger 2.x input is reported as an input error."""
        args = generate_args(input=get_openapi('swagger.json'))
        with patch('argparse.ArgumentParser.parse_args', return_value=args):
            self.assertEqual(EXIT_INPUT_ERROR, main())


if __name__ == '__main__':
    unittest.main()
