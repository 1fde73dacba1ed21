"""
OpenAPI to JSON Schema converter.

This module converts the schema definitions in `components.schemas` of an
OpenAPI 3.x document into a JSON Schema document for a chosen draft
(draft-04, draft-06, draft-07 or 2019-09). OpenAPI-only keywords such as
`nullable`, `example` or the boolean exclusive bounds are rewritten into
their JSON Schema equivalents; constructs without an equivalent are dropped
with a warning.
"""

# pylint: disable=line-too-long

import logging
import os
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import requests
import simplejson
import yaml

from openapijsons.drafts import JsonSchemaDraft, dialect_for
from openapijsons.messages import JsonPath, Message, MessageListener, StructuralError
from openapijsons.references import map_reference
from openapijsons.values import ABSENT, normalize_value

logger = logging.getLogger(__name__)

JSON_SCHEMA_TYPES = ('object', 'array', 'string', 'integer', 'number', 'boolean', 'null')

# copied without any transformation
VERBATIM_KEYWORDS = (
    'title', 'description', 'multipleOf',
    'maxLength', 'minLength', 'pattern',
    'maxItems', 'minItems', 'uniqueItems',
    'maxProperties', 'minProperties', 'required',
)

COMPOSITION_KEYWORDS = ('allOf', 'anyOf', 'oneOf')

FORMAT_BOUNDS = {
    'int32': (Decimal(-2 ** 31), Decimal(2 ** 31 - 1)),
    'int64': (Decimal(-2 ** 63), Decimal(2 ** 63 - 1)),
    'float': (Decimal('-3.4028234663852886E+38'), Decimal('3.4028234663852886E+38')),
    'double': (Decimal('-1.7976931348623157E+308'), Decimal('1.7976931348623157E+308')),
}

BASE64_PATTERN = r'^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$'


class OpenApiLoadError(Exception):
    """The OpenAPI document could not be read or parsed."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def print_message(message: Message) -> None:
    """Default message listener, writes the message to stderr."""
    print(str(message), file=sys.stderr)


class OpenApiToJsonSchemaConverter:
    """
    Converts OpenAPI 3.x component schemas to a JSON Schema document.

    Attributes:
        include_read_only: Keep schemas marked readOnly.
        include_write_only: Keep schemas marked writeOnly.
        draft: The JSON Schema draft of the output.
        message_listener: Receives the warnings of the conversion.
    """

    def __init__(self,
                 include_read_only: bool = True,
                 include_write_only: bool = True,
                 draft: JsonSchemaDraft = JsonSchemaDraft.V2019_09,
                 message_listener: Optional[MessageListener] = None) -> None:
        self.include_read_only = include_read_only
        self.include_write_only = include_write_only
        self.draft = draft
        self.dialect = dialect_for(draft)
        self.message_listener = message_listener if message_listener is not None else print_message

    def warn(self, path: Optional[JsonPath], message: str) -> None:
        self.message_listener(Message.warning(message, path))

    def convert_components(self, schemas: Optional[Dict[str, Any]], main_schema: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert a `components.schemas` map into a JSON Schema document.

        Args:
            schemas: Component name to OpenAPI schema.
            main_schema: Component the document's root `$ref` points at.

        Returns:
            The JSON Schema document. A component removed by the readOnly/writeOnly
            filter keeps its name, bound to None.

        Raises:
            StructuralError: If any schema cannot be represented.
        """
        path = JsonPath('components', 'schemas')
        if schemas is None:
            schemas = {}
        if not isinstance(schemas, dict):
            raise StructuralError("'schemas' must be an object", path)

        json_schema: Dict[str, Any] = {'$schema': self.draft.uri}
        ref = map_reference(main_schema, self.dialect)
        if ref is not None:
            json_schema['$ref'] = ref
        logger.debug("Converting %d component schemas to JSON Schema draft %s", len(schemas), self.draft.draft_name)
        json_schema[self.dialect.definitions_keyword] = {
            name: self.convert_schema(schema, path.push(name))
            for name, schema in schemas.items()
        }
        return json_schema

    def convert_schema(self, schema: Any, path: JsonPath) -> Optional[Dict[str, Any]]:
        """
        Convert one OpenAPI schema, and everything nested in it, to JSON Schema.

        Returns:
            The JSON Schema, or None if the schema is missing or filtered out.
        """
        if schema is None:
            return None
        if not isinstance(schema, dict):
            raise StructuralError(f"schema must be an object but was {type(schema).__name__}", path)
        if not self.include_read_only and schema.get('readOnly') is True:
            return None
        if not self.include_write_only and schema.get('writeOnly') is True:
            return None

        json_schema: Dict[str, Any] = {}

        ref = map_reference(schema.get('$ref'), self.dialect, path)
        if ref is not None:
            json_schema['$ref'] = ref

        for keyword in VERBATIM_KEYWORDS:
            if schema.get(keyword) is not None:
                json_schema[keyword] = schema[keyword]

        nullable = schema.get('nullable') is True
        if schema.get('type') is not None:
            json_types = self._convert_types(schema['type'], path)
            if nullable and 'null' not in json_types:
                json_types.append('null')
            json_schema['type'] = json_types

        # schema conversions

        not_schema = self.convert_schema(schema.get('not'), path.push('not'))
        if not_schema is not None:
            json_schema['not'] = not_schema

        for keyword in COMPOSITION_KEYWORDS:
            if schema.get(keyword) is not None:
                json_schema[keyword] = self._convert_schema_list(schema[keyword], keyword, path)

        items = schema.get('items')
        if isinstance(items, list):
            self.warn(path, "tuple-style 'items' ignored")
        elif items is not None:
            items_schema = self.convert_schema(items, path)
            if items_schema is not None:
                json_schema['items'] = items_schema

        properties = schema.get('properties')
        if properties is not None:
            if not isinstance(properties, dict):
                raise StructuralError("'properties' must be an object", path)
            json_schema['properties'] = {}
            for name, property_schema in properties.items():
                converted = self.convert_schema(property_schema, path.push(name))
                if converted is not None:
                    json_schema['properties'][name] = converted

        additional_properties = schema.get('additionalProperties')
        if isinstance(additional_properties, bool):
            json_schema['additionalProperties'] = additional_properties
        elif isinstance(additional_properties, dict):
            converted = self.convert_schema(additional_properties, path.push('additionalProperties'))
            if converted is not None:
                json_schema['additionalProperties'] = converted

        # bounds, before the format may fill in defaults

        self._convert_bound(schema, json_schema, 'maximum', 'exclusiveMaximum')
        self._convert_bound(schema, json_schema, 'minimum', 'exclusiveMinimum')

        self.apply_format(schema.get('format'), json_schema, path)

        # draft dependent annotations

        if self.dialect.read_only_write_only:
            for keyword in ('readOnly', 'writeOnly'):
                if schema.get(keyword) is not None:
                    json_schema[keyword] = schema[keyword]
        if self.dialect.deprecated and schema.get('deprecated') is not None:
            json_schema['deprecated'] = schema['deprecated']

        # values

        if 'example' in schema:
            example = normalize_value(schema['example'], path.push('example'), self.message_listener)
            if example is not ABSENT:
                json_schema['examples'] = [example]

        if schema.get('enum') is not None:
            json_schema['enum'] = self._convert_enum(schema['enum'], nullable, path)

        if 'default' in schema:
            default = normalize_value(schema['default'], path.push('default'), self.message_listener)
            if default is not ABSENT:
                json_schema['default'] = default

        # Warnings
        if schema.get('externalDocs') is not None:
            self.warn(path, f"'externalDocs' property ignored: {schema['externalDocs']}")
        if schema.get('xml') is not None:
            self.warn(path, "'xml' property ignored")
        if any(isinstance(key, str) and key.startswith('x-') for key in schema):
            self.warn(path, "'extensions' property ignored")
        if schema.get('discriminator') is not None:
            self.warn(path, "'discriminator' property ignored")

        return json_schema

    def apply_format(self, format_name: Optional[str], json_schema: Dict[str, Any], path: JsonPath) -> None:
        """
        Copy `format` and add the constraints the OpenAPI format implies.

        Unknown formats are copied as annotations and add nothing else.
        """
        if format_name is None:
            return
        json_schema['format'] = format_name

        if format_name in FORMAT_BOUNDS:
            lower, upper = FORMAT_BOUNDS[format_name]
            if 'minimum' not in json_schema and 'exclusiveMinimum' not in json_schema:
                json_schema['minimum'] = lower
            if 'maximum' not in json_schema and 'exclusiveMaximum' not in json_schema:
                json_schema['maximum'] = upper
        elif format_name == 'byte':
            if self.dialect.content_encoding:
                json_schema['contentEncoding'] = 'base64'
            else:
                logger.debug("%s: contentEncoding not available in draft %s", path, self.draft.draft_name)
            json_schema['pattern'] = BASE64_PATTERN

    def _convert_types(self, type_names: Any, path: JsonPath) -> List[str]:
        # OpenAPI 3.1 allows a list of types
        if not isinstance(type_names, list):
            type_names = [type_names]
        if not type_names:
            raise StructuralError("empty 'type' list", path)
        json_types: List[str] = []
        for type_name in type_names:
            if not isinstance(type_name, str) or type_name not in JSON_SCHEMA_TYPES:
                raise StructuralError(f"unknown type '{type_name}'", path)
            if type_name not in json_types:
                json_types.append(type_name)
        return json_types

    def _convert_bound(self, schema: Dict[str, Any], json_schema: Dict[str, Any], keyword: str, exclusive_keyword: str) -> None:
        value = schema.get(keyword)
        exclusive = schema.get(exclusive_keyword)
        if _is_number(exclusive):
            self._convert_numeric_exclusive_bound(value, exclusive, json_schema, keyword, exclusive_keyword)
            return
        if value is None:
            return
        if exclusive is not True:
            json_schema[keyword] = value
        elif self.dialect.separate_exclusive_bounds:
            json_schema[exclusive_keyword] = value
        else:
            json_schema[keyword] = value
            json_schema[exclusive_keyword] = value

    def _convert_numeric_exclusive_bound(self, value: Any, exclusive: Any, json_schema: Dict[str, Any], keyword: str, exclusive_keyword: str) -> None:
        """OpenAPI 3.1 style exclusive bound, a number next to an optional plain bound."""
        if self.dialect.separate_exclusive_bounds:
            if value is not None:
                json_schema[keyword] = value
            json_schema[exclusive_keyword] = exclusive
            return
        # draft-04 holds a single number per side, keep the tighter bound
        is_lower = keyword == 'minimum'
        if _is_number(value) and (value > exclusive if is_lower else value < exclusive):
            json_schema[keyword] = value
        else:
            json_schema[keyword] = exclusive
            json_schema[exclusive_keyword] = exclusive

    def _convert_schema_list(self, schemas: Any, keyword: str, path: JsonPath) -> List[Dict[str, Any]]:
        if not isinstance(schemas, list):
            raise StructuralError(f"'{keyword}' must be a list", path)
        converted = [self.convert_schema(schema, path.push(i)) for i, schema in enumerate(schemas)]
        return [schema for schema in converted if schema is not None]

    def _convert_enum(self, values: Any, nullable: bool, path: JsonPath) -> List[Any]:
        if not isinstance(values, list):
            raise StructuralError("'enum' must be a list", path)
        enum_path = path.push('enum')
        result = []
        for i, value in enumerate(values):
            converted = normalize_value(value, enum_path.push(i), self.message_listener)
            if converted is not ABSENT:
                result.append(converted)
        if nullable and None not in result:
            result.append(None)
        return result

    def convert_openapi(self, openapi_doc: Union[dict, str], main_schema: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert an OpenAPI document to JSON Schema.

        Args:
            openapi_doc: The OpenAPI document as a dictionary or JSON/YAML text.
            main_schema: Component the document's root `$ref` points at.

        Raises:
            ValueError: If the input is not an OpenAPI 3.x document.
            StructuralError: If a schema cannot be represented.
        """
        if isinstance(openapi_doc, str):
            openapi_doc = parse_openapi(openapi_doc)
        if not isinstance(openapi_doc, dict):
            raise TypeError(f"Expected dict or str, got {type(openapi_doc)}")

        openapi_version = str(openapi_doc.get('openapi', ''))
        if not openapi_version.startswith('3.'):
            if 'swagger' in openapi_doc:
                raise ValueError("Swagger 2.x documents are not supported. Please convert to OpenAPI 3.x first.")
            if not openapi_version:
                raise ValueError("Not a valid OpenAPI document: missing 'openapi' version field")
            raise ValueError(f"Unsupported OpenAPI version: {openapi_version}. Only OpenAPI 3.x is supported.")

        components = openapi_doc.get('components') or {}
        if not isinstance(components, dict):
            raise StructuralError("'components' must be an object", JsonPath('components'))
        return self.convert_components(components.get('schemas'), main_schema)


def fetch_content(url: str) -> str:
    """
    Fetch content from a URL, a file path or stdin (`-`).

    Raises:
        OpenApiLoadError: If the content cannot be read.
    """
    parsed_url = urlparse(url)
    try:
        if url == '-':
            return sys.stdin.read()
        if parsed_url.scheme in ['http', 'https']:
            response = requests.get(url, timeout=30)
            response.raise_for_status()
            return response.text
        if parsed_url.scheme == 'file' or len(parsed_url.scheme) <= 1:
            # Handle file URLs, local paths and Windows drive letters
            file_path = parsed_url.path if parsed_url.scheme == 'file' else url
            if os.name == 'nt' and parsed_url.scheme == 'file' and file_path.startswith('/'):
                file_path = file_path[1:]
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
    except (requests.RequestException, OSError, UnicodeDecodeError) as e:
        raise OpenApiLoadError(f"Failed to read OpenAPI spec from {url}: {e}") from e
    raise OpenApiLoadError(f"Unsupported URL scheme: {parsed_url.scheme}")


class DecimalSafeLoader(yaml.SafeLoader):
    """YAML safe loader that reads floats as Decimal."""

    def construct_yaml_decimal(self, node):
        text = self.construct_scalar(node).replace('_', '')
        try:
            return Decimal(text)
        except InvalidOperation:
            # .inf, .nan and sexagesimal notation
            return self.construct_yaml_float(node)


DecimalSafeLoader.add_constructor('tag:yaml.org,2002:float', DecimalSafeLoader.construct_yaml_decimal)


def parse_openapi(content: str) -> dict:
    """
    Parse OpenAPI text as JSON, falling back to YAML.

    Numbers with a fraction or exponent are kept as Decimal in both formats.

    Raises:
        OpenApiLoadError: If the text is neither JSON nor YAML, or not a mapping.
    """
    try:
        openapi_doc = simplejson.loads(content, use_decimal=True)
    except simplejson.JSONDecodeError:
        try:
            openapi_doc = yaml.load(content, Loader=DecimalSafeLoader)
        except yaml.YAMLError as e:
            raise OpenApiLoadError(f"Failed to parse OpenAPI spec as JSON or YAML: {e}") from e
    if not isinstance(openapi_doc, dict):
        raise OpenApiLoadError("Failed to parse OpenAPI spec: document is not an object")
    return openapi_doc


def load_openapi(source: str) -> dict:
    """Read and parse the OpenAPI document at `source`."""
    return parse_openapi(fetch_content(source))


def dump_json_schema(json_schema: Dict[str, Any]) -> str:
    """Serialize a converted document, writing decimals exactly."""
    return simplejson.dumps(json_schema, indent=2, use_decimal=True)


def convert_openapi_to_json_schema(
    input_data: str,
    main_schema: Optional[str] = None,
    json_schema_version: str = '2019-09',
    message_listener: Optional[MessageListener] = None
) -> str:
    """
    Convert an OpenAPI document to JSON Schema.

    Args:
        input_data: The OpenAPI document as JSON or YAML text.
        main_schema: Component the document's root `$ref` points at.
        json_schema_version: Draft name of the output, one of JsonSchemaDraft.names().
        message_listener: Receives the warnings of the conversion.

    Returns:
        The JSON Schema document as a JSON string.
    """
    converter = OpenApiToJsonSchemaConverter(
        draft=JsonSchemaDraft.from_name(json_schema_version),
        message_listener=message_listener)
    return dump_json_schema(converter.convert_openapi(input_data, main_schema))


def convert_openapi_to_json_schema_files(
    openapi_file_path: str,
    json_schema_path: Optional[str] = None,
    main_schema: Optional[str] = None,
    exclude_read_only: bool = False,
    exclude_write_only: bool = False,
    json_schema_version: str = '2019-09',
    message_listener: Optional[MessageListener] = None
) -> None:
    """
    Convert an OpenAPI file to a JSON Schema file.

    Args:
        openapi_file_path: Path or URL of the OpenAPI document, `-` for stdin.
        json_schema_path: Output file; stdout if omitted.
        main_schema: Component the document's root `$ref` points at.
        exclude_read_only: Drop schemas marked readOnly.
        exclude_write_only: Drop schemas marked writeOnly.
        json_schema_version: Draft name of the output, one of JsonSchemaDraft.names().
        message_listener: Receives the warnings of the conversion.

    Raises:
        OpenApiLoadError: If the input cannot be read or parsed.
        StructuralError: If a schema cannot be represented; nothing is written.
    """
    draft = JsonSchemaDraft.from_name(json_schema_version)
    openapi_doc = load_openapi(openapi_file_path)

    converter = OpenApiToJsonSchemaConverter(
        include_read_only=not exclude_read_only,
        include_write_only=not exclude_write_only,
        draft=draft,
        message_listener=message_listener)
    try:
        json_schema = converter.convert_openapi(openapi_doc, main_schema)
    except ValueError as e:
        raise OpenApiLoadError(str(e)) from e

    output = dump_json_schema(json_schema)
    if json_schema_path:
        with open(json_schema_path, 'w', encoding='utf-8') as f:
            f.write(output)
            f.write('\n')
    else:
        sys.stdout.write(output + '\n')
