"""Rewriting of OpenAPI component references into JSON Schema definition references."""

from typing import Optional

from openapijsons.drafts import DraftDialect
from openapijsons.messages import JsonPath, StructuralError

COMPONENT_SCHEMAS_PREFIX = '#/components/schemas/'


def map_reference(ref: Optional[str], dialect: DraftDialect, path: Optional[JsonPath] = None) -> Optional[str]:
    """
    Map `#/components/schemas/<Name>` (or the bare `<Name>`) to the definitions
    pointer of the target draft.

    Raises:
        StructuralError: For any other reference form; other documents and other
            parts of the OpenAPI document cannot be referenced from the output.
    """
    if ref is None:
        return None
    if not isinstance(ref, str):
        raise StructuralError(f"unsupported reference {ref!r}", path)
    if ref and '/' not in ref and '.' not in ref and '#' not in ref:
        return dialect.definitions_prefix + ref
    if ref.startswith(COMPONENT_SCHEMAS_PREFIX) and len(ref) > len(COMPONENT_SCHEMAS_PREFIX):
        return dialect.definitions_prefix + ref[len(COMPONENT_SCHEMAS_PREFIX):]
    raise StructuralError(f"unsupported reference '{ref}'", path)
