"""
JSON Schema drafts and the dialect policy for each of them.

Every draft-dependent decision of the converter is answered by a
`DraftDialect`. Adding a draft means adding an enum member and a dialect
entry; the module refuses to import if the two tables disagree.
"""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Dict, List


@total_ordering
class JsonSchemaDraft(Enum):
    """Supported JSON Schema output drafts, ordered by release."""

    V4 = (4, '4', 'http://json-schema.org/draft-04/schema#')
    V6 = (6, '6', 'http://json-schema.org/draft-06/schema#')
    V7 = (7, '7', 'http://json-schema.org/draft-07/schema#')
    V2019_09 = (201909, '2019-09', 'https://json-schema.org/draft/2019-09/schema')

    def __init__(self, rank: int, draft_name: str, uri: str):
        self.rank = rank
        self.draft_name = draft_name
        self.uri = uri

    def __lt__(self, other):
        if not isinstance(other, JsonSchemaDraft):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def names(cls) -> List[str]:
        """The draft names accepted on the command line."""
        return [draft.draft_name for draft in cls]

    @classmethod
    def from_name(cls, name: str) -> 'JsonSchemaDraft':
        """Look up a draft by its command line name."""
        for draft in cls:
            if draft.draft_name == name:
                return draft
        raise ValueError(f"expected one of {cls.names()} but was '{name}'")


@dataclass(frozen=True)
class DraftDialect:
    """
    What a JSON Schema draft supports and how it spells it.

    Attributes:
        draft: The draft this dialect describes.
        definitions_keyword: Name of the definitions container.
        separate_exclusive_bounds: True when exclusiveMinimum/exclusiveMaximum are
            standalone numbers; False when they pair with minimum/maximum (draft-04).
        read_only_write_only: Whether readOnly/writeOnly are keywords.
        deprecated: Whether deprecated is a keyword.
        content_encoding: Whether contentEncoding is a keyword.
    """
    draft: JsonSchemaDraft
    definitions_keyword: str
    separate_exclusive_bounds: bool
    read_only_write_only: bool
    deprecated: bool
    content_encoding: bool

    @property
    def definitions_prefix(self) -> str:
        """Pointer prefix for references into the definitions container."""
        return f'#/{self.definitions_keyword}/'


_DIALECTS: Dict[JsonSchemaDraft, DraftDialect] = {
    JsonSchemaDraft.V4: DraftDialect(
        draft=JsonSchemaDraft.V4,
        definitions_keyword='definitions',
        separate_exclusive_bounds=False,
        read_only_write_only=False,
        deprecated=False,
        content_encoding=False),
    JsonSchemaDraft.V6: DraftDialect(
        draft=JsonSchemaDraft.V6,
        definitions_keyword='definitions',
        separate_exclusive_bounds=True,
        read_only_write_only=False,
        deprecated=False,
        content_encoding=False),
    JsonSchemaDraft.V7: DraftDialect(
        draft=JsonSchemaDraft.V7,
        definitions_keyword='definitions',
        separate_exclusive_bounds=True,
        read_only_write_only=True,
        deprecated=False,
        content_encoding=True),
    JsonSchemaDraft.V2019_09: DraftDialect(
        draft=JsonSchemaDraft.V2019_09,
        definitions_keyword='$defs',
        separate_exclusive_bounds=True,
        read_only_write_only=True,
        deprecated=True,
        content_encoding=True),
}

_missing = [draft.draft_name for draft in JsonSchemaDraft if draft not in _DIALECTS]
if _missing:
    raise ImportError(f"no dialect defined for JSON Schema draft(s) {_missing}")


def dialect_for(draft: JsonSchemaDraft) -> DraftDialect:
    """Return the dialect policy of the given draft."""
    return _DIALECTS[draft]
