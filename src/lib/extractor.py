"""
Section extractor for single-file components

Locates tagged sections (<template>, <script>, <style>, ...) in a
component buffer and returns their attributes, raw inner text and line
offset.

The extractor drives the standard library's push parser (HTMLParser):
the whole buffer is fed, then close() flushes it. Open/close events for
tracked tag names update a per-name depth counter:

    CLOSED(0) -> OPEN(1) -> OPEN(2) ... OPEN(1) -> CLOSED(0, emit)

Only the outermost open tag starts a section and only the close tag that
brings the counter back to zero ends it, so a template containing a
literal <template> keeps it as text. Tags that are not tracked are
ignored entirely.

Example:
    >>> sections = extract("<script>\\nmodule.exports = {}\\n</script>", ["script"])
    >>> sections[0].text
    '\\nmodule.exports = {}\\n'
    >>> sections[0].offset
    1
"""

from html.parser import HTMLParser
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.section import Section
from .location import LineIndex
from .log import LOG


def attributes_collect(attrs: List[Tuple[str, Optional[str]]]) -> Dict[str, str]:
    """
    Turn HTMLParser's attribute list into a dict

    Valueless attributes map to "", the first of duplicated names wins.
    """
    attributes: Dict[str, str] = {}
    for name, value in attrs:
        if name not in attributes:
            attributes[name] = '' if value is None else value
    return attributes


class SectionParser(HTMLParser):
    """
    HTMLParser that collects sections for a set of tag names

    One instance parses one buffer; use extract() rather than driving it
    directly.

    Attributes:
        buf: Buffer being parsed
        tags: Tracked tag names (lowercase)
        lines: LineIndex over buf
        depth: Nesting counter per tracked tag name
        pending: Open section per tag name as (attributes, content start)
        sections: Completed sections in order of their closing tags
    """

    def __init__(self, buf: str, tags: Iterable[str]) -> None:
        super().__init__(convert_charrefs=True)
        self.buf = buf
        self.tags = {tag.lower() for tag in tags}
        self.lines = LineIndex(buf)
        self.depth: Dict[str, int] = {}
        self.pending: Dict[str, Tuple[Dict[str, str], int]] = {}
        self.sections: List[Section] = []

    def position_get(self) -> int:
        """Absolute position of the tag currently being handled"""
        line, column = self.getpos()
        return self.lines.index_get(line, column)

    def contentStart_get(self) -> int:
        """Position just after the closing bracket of the current start tag"""
        return self.position_get() + len(self.get_starttag_text() or '')

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag not in self.tags:
            return

        if self.depth.get(tag):
            self.depth[tag] += 1
            LOG(f"Nested <{tag}> at depth {self.depth[tag]}", level=3)
            return

        self.depth[tag] = 1
        self.pending[tag] = (attributes_collect(attrs), self.contentStart_get())

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        # <script src="a.js"/> is a complete section with no content;
        # inside an open section of the same name it is literal content
        if tag not in self.tags or self.depth.get(tag):
            return

        start = self.contentStart_get()
        self.section_emit(tag, attributes_collect(attrs), start, start)

    def handle_endtag(self, tag: str) -> None:
        if tag not in self.tags or not self.depth.get(tag):
            return

        self.depth[tag] -= 1
        if self.depth[tag]:
            return

        attributes, start = self.pending.pop(tag)
        self.section_emit(tag, attributes, start, self.position_get())

    def section_emit(
        self, tag: str, attributes: Dict[str, str], start: int, end: int
    ) -> None:
        """
        Complete a section spanning buf[start:end]

        The offset is 0 for sections referencing an external file, since
        that file starts at its own line 1.
        """
        offset = 0 if 'src' in attributes else self.lines.line_get(start)

        section = Section(
            tag=tag,
            text=self.buf[start:end],
            attributes=attributes,
            offset=offset,
        )
        self.sections.append(section)
        LOG(f"Extracted <{tag}> section, offset {offset}", level=3)

    def parse(self) -> List[Section]:
        """Feed the whole buffer, signal its end and return the sections"""
        self.feed(self.buf)
        self.close()

        for tag in self.pending:
            LOG(f"Warning: <{tag}> is never closed, section dropped", level=2)

        return self.sections


def extract(buf: str, tags: Iterable[str]) -> List[Section]:
    """
    Extract sections from a single-file component

    Args:
        buf: Content of the component file
        tags: Tag names to extract (e.g., ["script", "template", "style"])

    Returns:
        Sections in document order of their closing tags

    Raises:
        TypeError: If buf is not a string, or tags is not a non-empty
                   list/tuple/set of strings
    """
    if not isinstance(buf, str):
        raise TypeError('First argument must be a string.')
    if not isinstance(tags, (list, tuple, set, frozenset)):
        raise TypeError('Second argument must be a list of tag names.')
    if not tags or not all(isinstance(tag, str) for tag in tags):
        raise TypeError('Second argument must contain at least one tag name.')

    return SectionParser(buf, tags).parse()
