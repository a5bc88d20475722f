"""Tests for the etags and ctags index backends."""

from __future__ import annotations

import pytest

from tagsel.engine.aggregator import MatchAggregator
from tagsel.engine.buffers import BufferRegistry
from tagsel.engine.config import TagSelectConfig
from tagsel.engine.errors import ProbeError, TagIndexError, UnknownBackendError
from tagsel.engine.history import MarkStack
from tagsel.engine.probes import (
    CtagsProbe,
    EtagsProbe,
    complete_identifiers,
    create_probe,
    short_name,
)
from tagsel.engine.probes.ctags import parse_search_pattern, split_address
from tagsel.engine.probes.etags import implicit_tag_name

PARSER_PY = """\
import os


def parse(text):
    return text.split()


class Reader:
    def parse(self, stream):
        return parse(stream.read())
"""

UTIL_PY = """\
def helper():
    pass


def parse(value):
    return value
"""


def _write_project(tmp_path):
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "parser.py").write_text(PARSER_PY)
    (tmp_path / "util.py").write_text(UTIL_PY)


def _etags_file(tmp_path):
    parser_section = (
        "def parse(\x7fparse\x014,12\n"
        "class Reader:\x7fReader\x018,50\n"
        "    def parse(\x7fReader.parse\x019,64\n"
        "    def parse(\x7f9,64\n"
    )
    util_section = (
        "def helper(\x7f1,0\n"
        "def parse(\x7fparse\x015,30\n"
    )
    text = (
        f"\x0c\npkg/parser.py,{len(parser_section)}\n{parser_section}"
        f"\x0c\nutil.py,{len(util_section)}\n{util_section}"
        "\x0c\nother/TAGS,include\n"
    )
    path = tmp_path / "TAGS"
    path.write_text(text)
    return path


def _ctags_file(tmp_path):
    lines = [
        "!_TAG_FILE_FORMAT\t2\t/extended format/",
        "!_TAG_FILE_SORTED\t1\t/0=unsorted, 1=sorted/",
        "Reader\tpkg/parser.py\t/^class Reader:$/;\"\tc",
        "helper\tutil.py\t1;\"\tf",
        "parse\tpkg/parser.py\t/^def parse(text):$/;\"\tf\tline:4",
        "parse\tpkg/parser.py\t/^    def parse(self, stream):$/;\"\tm\tclass:Reader",
        "parse\tutil.py\t/^def parse(value):$/;\"\tf",
    ]
    path = tmp_path / "tags"
    path.write_text("\n".join(lines) + "\n")
    return path


def test_etags_parses_explicit_and_implicit_names(tmp_path) -> None:
    _write_project(tmp_path)
    probe = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), MarkStack())

    names = probe.tag_names()

    assert names == ["parse", "Reader", "Reader.parse", "parse", "helper", "parse"]
    entry = probe.entries()[0]
    assert entry.path == tmp_path / "pkg" / "parser.py"
    assert entry.line == 4
    assert entry.pattern == "def parse("


def test_implicit_tag_name_takes_last_token() -> None:
    assert implicit_tag_name("    def parse(") == "parse"
    assert implicit_tag_name("class Reader:") == "Reader"
    assert implicit_tag_name("int main (") == "main"
    assert implicit_tag_name("  (") is None


def test_etags_probe_enumerates_matches_in_index_order(tmp_path) -> None:
    _write_project(tmp_path)
    registry = BufferRegistry()
    marks = MarkStack()
    probe = EtagsProbe(_etags_file(tmp_path), registry, marks)

    groups = MatchAggregator(probe, marks, registry, TagSelectConfig()).find_all("parse")

    assert [g.path.name for g in groups] == ["parser.py", "util.py"]
    assert [[m.location.line for m in g.matches] for g in groups] == [[4, 9], [5]]
    assert groups[0].matches[1].text == "    def parse(self, stream):"
    assert len(marks) == 0
    assert len(registry) == 0


def test_index_probe_next_past_end_raises(tmp_path) -> None:
    _write_project(tmp_path)
    probe = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), MarkStack())

    with pytest.raises(ProbeError):
        probe.next("helper")
    assert probe.first("helper") is not None
    with pytest.raises(ProbeError):
        probe.next("helper")


def test_index_probe_pushes_residual_marks(tmp_path) -> None:
    _write_project(tmp_path)
    marks = MarkStack()
    probe = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), marks)

    first = probe.first("parse")
    second = probe.next("parse")

    assert first.pushed_mark is False
    assert second.pushed_mark is True
    assert list(marks) == [first.location]


def test_case_fold_matching(tmp_path) -> None:
    _write_project(tmp_path)
    folded = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), MarkStack(), case_fold=True)
    exact = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), MarkStack())

    assert folded.first("READER") is not None
    assert exact.first("READER") is None


def test_missing_index_file_is_a_probe_failure(tmp_path) -> None:
    probe = EtagsProbe(tmp_path / "TAGS", BufferRegistry(), MarkStack())

    with pytest.raises(TagIndexError):
        probe.first("parse")


def test_ctags_parses_patterns_and_line_fields(tmp_path) -> None:
    _write_project(tmp_path)
    probe = CtagsProbe(_ctags_file(tmp_path), BufferRegistry(), MarkStack())

    entries = probe.entries()

    assert [e.name for e in entries] == ["Reader", "helper", "parse", "parse", "parse"]
    assert entries[1].line == 1 and entries[1].pattern is None
    assert entries[2].line == 4
    assert entries[3].pattern == "    def parse(self, stream):"


def test_ctags_probe_locates_lines_by_pattern(tmp_path) -> None:
    _write_project(tmp_path)
    registry = BufferRegistry()
    marks = MarkStack()
    probe = CtagsProbe(_ctags_file(tmp_path), registry, marks)

    groups = MatchAggregator(probe, marks, registry, TagSelectConfig()).find_all("parse")

    assert [[m.location.line for m in g.matches] for g in groups] == [[4, 9], [5]]


def test_ctags_pattern_containing_extension_marker(tmp_path) -> None:
    (tmp_path / "m.c").write_text('int a;\n\nchar *s = "x;";\n')
    (tmp_path / "tags").write_text('s\tm.c\t/^char *s = "x;";$/;"\tv\n')
    probe = CtagsProbe(tmp_path / "tags", BufferRegistry(), MarkStack())

    (entry,) = probe.entries()
    handle = probe.first("s")

    assert entry.pattern == 'char *s = "x;";'
    assert entry.line is None
    assert handle.location.line == 3
    assert split_address('/^a;"b\\/c$/;"\tf') == ('/^a;"b\\/c$/', "\tf")
    assert split_address('12;"\tf') == ("12", "\tf")


def test_parse_search_pattern_unescapes() -> None:
    assert parse_search_pattern("/^a\\/b$/") == "a/b"
    assert parse_search_pattern("?^x?y$?") == "x?y"
    assert parse_search_pattern("42") is None


def test_create_probe_picks_backend(tmp_path) -> None:
    registry, marks = BufferRegistry(), MarkStack()

    assert isinstance(create_probe("auto", tmp_path / "tags", registry, marks), CtagsProbe)
    assert isinstance(create_probe("auto", tmp_path / "TAGS", registry, marks), EtagsProbe)
    assert isinstance(create_probe("ctags", tmp_path / "TAGS", registry, marks), CtagsProbe)
    with pytest.raises(UnknownBackendError):
        create_probe("gtags", tmp_path / "GTAGS", registry, marks)


def test_completion_with_and_without_short_names(tmp_path) -> None:
    _write_project(tmp_path)
    probe = EtagsProbe(_etags_file(tmp_path), BufferRegistry(), MarkStack())

    assert complete_identifiers(probe, "Re") == ["Reader", "Reader.parse"]
    assert complete_identifiers(probe, "pa", short_names=True) == ["parse"]
    assert short_name("ns::Cls::meth") == "meth"
