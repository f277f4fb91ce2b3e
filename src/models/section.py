"""
Section and source-map data models

Type-safe structures passed between the extractor, the transpile
dispatcher and the source map generator.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Section:
    """
    One tagged region extracted from a single-file component

    Attributes:
        tag: Element name (e.g., "script", "template", "style")
        text: Raw inner text between the opening and closing tag
        attributes: Attributes of the opening tag (entity-decoded values,
                    valueless attributes map to "")
        offset: 0 for a section with a src attribute, otherwise the line
                index of the first character after the opening tag

    Example:
        For source "<script>\\nmodule.exports = {}\\n</script>":
        Section(
            tag="script",
            text="\\nmodule.exports = {}\\n",
            attributes={},
            offset=1
        )
    """
    tag: str
    text: str
    attributes: Dict[str, str] = field(default_factory=dict)
    offset: int = 0

    @property
    def src(self) -> Optional[str]:
        """External file reference, if any"""
        return self.attributes.get('src')

    @property
    def lang(self) -> Optional[str]:
        """Language attribute, if any"""
        return self.attributes.get('lang')

    @property
    def shift(self) -> int:
        """
        Line shift from the section text to the component file

        The offset counts a line terminator sitting right at the content
        start, but that terminator also opens the text's own second line,
        so it must not be counted twice when mapping positions.

        Example:
            "<script>\\nfoo\\n</script>" has offset 1 and shift 0:
            "foo" is line 1 of both the text and the file (0-based).
        """
        if self.offset and self.text.startswith(('\n', '\r\n')):
            return self.offset - 1
        return self.offset


@dataclass
class TranspileResult:
    """
    Output of the transpile dispatcher

    Attributes:
        text: Compilable code for the section
        map: Source map (v3 dict) or None when no map applies
    """
    text: str
    map: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class Position:
    """0-based line/column pair"""
    line: int
    column: int


@dataclass(frozen=True)
class MappingEntry:
    """
    One row of a source map

    Attributes:
        source: Identifier of the original file
        original: Position in the original component file
        generated: Position in the generated code
        name: Original token text, None for structural tokens
    """
    source: str
    original: Position
    generated: Position
    name: Optional[str] = None


@dataclass(frozen=True)
class ScriptToken:
    """
    A token scanned from script text

    Attributes:
        value: Token text as it appears in the source
        line: 0-based line of the token start
        column: 0-based column of the token start
        named: Whether the token carries a name (identifier, keyword,
               literal) rather than being punctuation or an operator
    """
    value: str
    line: int
    column: int
    named: bool
