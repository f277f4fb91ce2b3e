"""
Source map generation (revision 3 interchange format)

Builds the position-mapping table that points generated script positions
back at the original component file. map_generate() produces a dense map:
one mapping per script token, every original line shifted by the section
offset, so stepping through generated code always resolves to a nearby
original line.

Encoding follows the source map v3 format:
- mappings: lines separated by ";", segments by ","
- each segment is 1, 4 or 5 Base64 VLQ fields: generated column,
  source index, original line, original column, name index
- generated column is relative to the previous segment on the same line,
  all other fields are relative to the previous segment in the map
- lines and columns are 0-based

Example:
    >>> sourcemap = map_generate("a;", "foo.js", 1)
    >>> sourcemap["mappings"]
    'AACAA,CAAC'
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..models.section import MappingEntry, Position
from .lexer import tokens_scan
from .log import LOG

BASE64_CHARS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/'
BASE64_VALUES = {char: value for value, char in enumerate(BASE64_CHARS)}

VLQ_SHIFT = 5
VLQ_MASK = (1 << VLQ_SHIFT) - 1
VLQ_CONTINUATION = 1 << VLQ_SHIFT


def vlq_encode(value: int) -> str:
    """
    Encode one signed integer as Base64 VLQ

    The sign goes into the lowest bit, then 5-bit groups are emitted
    least significant first with bit 6 marking continuation.

    Example:
        >>> vlq_encode(0), vlq_encode(1), vlq_encode(-1), vlq_encode(16)
        ('A', 'C', 'D', 'gB')
    """
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1

    encoded = []
    while True:
        digit = vlq & VLQ_MASK
        vlq >>= VLQ_SHIFT
        if vlq:
            digit |= VLQ_CONTINUATION
        encoded.append(BASE64_CHARS[digit])
        if not vlq:
            return ''.join(encoded)


def vlq_decode(segment: str) -> List[int]:
    """
    Decode all Base64 VLQ values of one segment

    Raises:
        ValueError: On a character outside the Base64 alphabet or a
                    truncated value
    """
    values = []
    shift = 0
    vlq = 0

    for char in segment:
        if char not in BASE64_VALUES:
            raise ValueError(f"Invalid Base64 VLQ character {char!r}")
        digit = BASE64_VALUES[char]
        vlq |= (digit & VLQ_MASK) << shift
        if digit & VLQ_CONTINUATION:
            shift += VLQ_SHIFT
            continue
        values.append(-(vlq >> 1) if vlq & 1 else vlq >> 1)
        shift = 0
        vlq = 0

    if shift:
        raise ValueError(f"Truncated Base64 VLQ segment {segment!r}")

    return values


class SourceMapGenerator:
    """
    Accumulates mapping entries and serializes them as a v3 source map

    Entries keep their insertion order; callers add them in ascending
    generated position.

    Attributes:
        file: Optional name of the generated file ("file" field)
        entries: Mapping entries in insertion order
        sources: Original source identifiers, in first-seen order
        names: Distinct names, in first-seen order
    """

    def __init__(self, file: Optional[str] = None) -> None:
        self.file = file
        self.entries: List[MappingEntry] = []
        self.sources: List[str] = []
        self.names: List[str] = []
        self._source_ids: Dict[str, int] = {}
        self._name_ids: Dict[str, int] = {}

    def mapping_add(self, entry: MappingEntry) -> None:
        """Add a mapping and register its source and name"""
        if entry.source not in self._source_ids:
            self._source_ids[entry.source] = len(self.sources)
            self.sources.append(entry.source)

        if entry.name is not None and entry.name not in self._name_ids:
            self._name_ids[entry.name] = len(self.names)
            self.names.append(entry.name)

        self.entries.append(entry)

    def mappings_encode(self) -> str:
        """Serialize entries to the "mappings" string"""
        lines: List[str] = []
        segments: List[str] = []
        current_line = 0

        previous_column = 0
        previous_source = 0
        previous_line = 0
        previous_original_column = 0
        previous_name = 0

        for entry in self.entries:
            generated = entry.generated

            # Close finished lines, including empty ones
            while current_line < generated.line:
                lines.append(','.join(segments))
                segments = []
                current_line += 1
                previous_column = 0

            source_id = self._source_ids[entry.source]
            fields = [
                generated.column - previous_column,
                source_id - previous_source,
                entry.original.line - previous_line,
                entry.original.column - previous_original_column,
            ]
            previous_column = generated.column
            previous_source = source_id
            previous_line = entry.original.line
            previous_original_column = entry.original.column

            if entry.name is not None:
                name_id = self._name_ids[entry.name]
                fields.append(name_id - previous_name)
                previous_name = name_id

            segments.append(''.join(vlq_encode(value) for value in fields))

        lines.append(','.join(segments))
        return ';'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible source map

        Returns:
            Dict with version, sources, names and mappings (plus file when set)
        """
        sourcemap: Dict[str, Any] = {
            "version": 3,
            "sources": list(self.sources),
            "names": list(self.names),
            "mappings": self.mappings_encode(),
        }
        if self.file is not None:
            sourcemap["file"] = self.file
        return sourcemap


def mappings_decode(sourcemap: Dict[str, Any]) -> Iterator[MappingEntry]:
    """
    Decode the mappings of a v3 source map back into entries

    Segments with a single field (no original position) are skipped.

    Args:
        sourcemap: Source map dict as produced by SourceMapGenerator.to_dict()

    Yields:
        MappingEntry per mapped segment, in generated order
    """
    sources = sourcemap.get('sources', [])
    names = sourcemap.get('names', [])

    source_id = 0
    original_line = 0
    original_column = 0
    name_id = 0

    for line, text in enumerate(sourcemap.get('mappings', '').split(';')):
        column = 0
        for segment in text.split(','):
            if not segment:
                continue

            fields = vlq_decode(segment)
            column += fields[0]
            if len(fields) < 4:
                continue

            source_id += fields[1]
            original_line += fields[2]
            original_column += fields[3]

            name = None
            if len(fields) > 4:
                name_id += fields[4]
                name = names[name_id]

            yield MappingEntry(
                source=sources[source_id],
                original=Position(original_line, original_column),
                generated=Position(line, column),
                name=name,
            )


def position_find(
    sourcemap: Dict[str, Any], line: int, column: int
) -> Optional[MappingEntry]:
    """
    Find the mapping governing a generated position

    Args:
        sourcemap: v3 source map dict
        line: 0-based generated line
        column: 0-based generated column

    Returns:
        The last mapping on that line at or before column, else the first
        mapping on that line, else None
    """
    candidates: List[Tuple[int, MappingEntry]] = [
        (entry.generated.column, entry)
        for entry in mappings_decode(sourcemap)
        if entry.generated.line == line
    ]
    if not candidates:
        return None

    found = candidates[0][1]
    for entry_column, entry in candidates:
        if entry_column > column:
            break
        found = entry
    return found


def map_generate(content: str, file: str, offset: int) -> Dict[str, Any]:
    """
    Generate a source map for script text extracted from a component

    Args:
        content: Script text of the section
        file: Identifier of the original file (used as the map's source)
        offset: Line shift between generated and original positions

    Returns:
        v3 source map dict with one mapping per script token

    Raises:
        TypeError: If offset is not an integer
        ValueError: If offset is not greater than zero
    """
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise TypeError('Offset parameter must be an integer.')
    if offset <= 0:
        raise ValueError('Offset parameter should be greater than zero.')

    generator = SourceMapGenerator()

    for token in tokens_scan(content):
        generator.mapping_add(MappingEntry(
            source=file,
            original=Position(token.line + offset, token.column),
            generated=Position(token.line, token.column),
            name=token.value if token.named else None,
        ))

    LOG(f"Generated {len(generator.entries)} mappings for {file}", level=3)
    return generator.to_dict()
