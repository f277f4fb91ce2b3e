"""
Source map tests

Tests Base64 VLQ coding, script tokenization and map generation, and
checks generated maps against an independent source map consumer.
"""

import json

import pytest
import sourcemap

from vuegister.lib.lexer import tokens_scan
from vuegister.lib.sourcemap import (
    SourceMapGenerator,
    map_generate,
    mappings_decode,
    position_find,
    vlq_decode,
    vlq_encode,
)
from vuegister.models import MappingEntry, Position


SCRIPT = (
    "var a = 1;\n"
    "foo(a, 'x');\n"
    "\n"
    "module.exports = {};\n"
)


class TestVLQ:
    """Test Base64 VLQ values"""

    @pytest.mark.parametrize("value, encoded", [
        (0, "A"),
        (1, "C"),
        (-1, "D"),
        (2, "E"),
        (15, "e"),
        (16, "gB"),
        (-16, "hB"),
        (1000, "w+B"),
    ])
    def test_known_values(self, value, encoded):
        assert vlq_encode(value) == encoded
        assert vlq_decode(encoded) == [value]

    def test_segment_with_several_values(self):
        assert vlq_decode("AACAA") == [0, 0, 1, 0, 0]
        assert vlq_decode("gBAIC") == [16, 0, 4, 1]

    def test_invalid_character(self):
        with pytest.raises(ValueError):
            vlq_decode("A*")

    def test_truncated_value(self):
        """A continuation bit with nothing after it"""
        with pytest.raises(ValueError):
            vlq_decode("g")


class TestTokenScan:
    """Test script tokenization"""

    def test_values(self):
        values = [t.value for t in tokens_scan("var a = 1;")]
        assert values == ["var", "a", "=", "1", ";"]

    def test_named_tokens(self):
        """Identifiers, keywords and literals carry names"""
        named = {t.value: t.named for t in tokens_scan("var a = 'x';")}
        assert named["var"] is True
        assert named["a"] is True
        assert named["'x'"] is True
        assert named["="] is False
        assert named[";"] is False

    def test_positions(self):
        tokens = list(tokens_scan("a;\n  b;"))
        assert [(t.value, t.line, t.column) for t in tokens] == [
            ("a", 0, 0),
            (";", 0, 1),
            ("b", 1, 2),
            (";", 1, 3),
        ]

    def test_leading_newlines_preserved(self):
        """Input is not stripped, so line numbers match the given text"""
        tokens = list(tokens_scan("\n\nfoo"))
        assert tokens[0].value == "foo"
        assert tokens[0].line == 2

    def test_crlf_positions(self):
        tokens = list(tokens_scan("a;\r\nb;"))
        assert (tokens[2].value, tokens[2].line, tokens[2].column) == ("b", 1, 0)

    def test_comments_skipped(self):
        values = [t.value for t in tokens_scan("// note\na; /* more */")]
        assert values == ["a", ";"]

    def test_non_string_content(self):
        with pytest.raises(TypeError):
            list(tokens_scan(None))


class TestGenerator:
    """Test SourceMapGenerator serialization"""

    def test_empty_map(self):
        smap = SourceMapGenerator().to_dict()
        assert smap == {"version": 3, "sources": [], "names": [], "mappings": ""}

    def test_file_field(self):
        smap = SourceMapGenerator(file="out.js").to_dict()
        assert smap["file"] == "out.js"

    def test_names_and_sources_deduplicated(self):
        generator = SourceMapGenerator()
        for column in (0, 4):
            generator.mapping_add(MappingEntry(
                source="a.vue",
                original=Position(1, column),
                generated=Position(0, column),
                name="x",
            ))

        smap = generator.to_dict()
        assert smap["sources"] == ["a.vue"]
        assert smap["names"] == ["x"]
        assert smap["mappings"] == "AACAA,IAAIA"

    def test_decode_returns_added_entries(self):
        entries = [
            MappingEntry("a.vue", Position(3, 0), Position(0, 0), "foo"),
            MappingEntry("a.vue", Position(3, 3), Position(0, 3), None),
            MappingEntry("a.vue", Position(5, 2), Position(2, 2), "bar"),
        ]
        generator = SourceMapGenerator()
        for entry in entries:
            generator.mapping_add(entry)

        assert list(mappings_decode(generator.to_dict())) == entries


class TestMapGenerate:
    """Test map_generate()"""

    def test_single_statement(self):
        smap = map_generate("a;", "foo.js", 1)
        assert smap["mappings"] == "AACAA,CAAC"
        assert smap["sources"] == ["foo.js"]
        assert smap["names"] == ["a"]
        assert smap["version"] == 3

    def test_empty_leading_lines(self):
        smap = map_generate("\n\na;", "foo.js", 2)
        assert smap["mappings"] == ";;AAIAA,CAAC"

    def test_zero_offset_rejected(self):
        with pytest.raises(ValueError):
            map_generate("a;", "foo.js", 0)

    def test_negative_offset_rejected(self):
        with pytest.raises(ValueError):
            map_generate("a;", "foo.js", -3)

    @pytest.mark.parametrize("offset", ["1", 1.0, None, True])
    def test_non_integer_offset(self, offset):
        with pytest.raises(TypeError):
            map_generate("a;", "foo.js", offset)

    def test_one_mapping_per_token(self):
        smap = map_generate(SCRIPT, "foo.vue", 1)
        assert len(list(mappings_decode(smap))) == len(list(tokens_scan(SCRIPT)))

    @pytest.mark.parametrize("offset", [1, 5, 9])
    def test_lines_shifted_by_offset(self, offset):
        """Every original line is the generated line plus the offset"""
        entries = list(mappings_decode(map_generate(SCRIPT, "foo.vue", offset)))

        assert entries
        for entry in entries:
            assert entry.original.line == entry.generated.line + offset
            assert entry.original.column == entry.generated.column
            assert entry.source == "foo.vue"

    def test_position_find(self):
        smap = map_generate(SCRIPT, "foo.vue", 4)

        entry = position_find(smap, 3, 0)
        assert entry.name == "module"
        assert entry.original == Position(7, 0)

        # Column between tokens resolves to the preceding one
        entry = position_find(smap, 3, 15)
        assert entry.generated == Position(3, 15)
        assert entry.name is None

        assert position_find(smap, 2, 0) is None


class TestConsumer:
    """Test generated maps with the sourcemap package"""

    @pytest.mark.parametrize("offset", [1, 5, 9])
    def test_lookup_matches_offset(self, offset):
        index = sourcemap.loads(json.dumps(map_generate(SCRIPT, "foo.vue", offset)))

        for token in tokens_scan(SCRIPT):
            found = index.lookup(token.line, token.column)
            assert found.src == "foo.vue"
            assert found.src_line == token.line + offset
            assert found.src_col == token.column
            if token.named:
                assert found.name == token.value
