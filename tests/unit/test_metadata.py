from pathlib import Path

import pytest

from codebit_core import (
    MetadataSyntaxError,
    extract_descriptor,
    find_metadata_block,
    parse_metadata,
    read_metadata,
)
from tests.framework import mk_codebit, write_file


def test_parses_block_inside_comment():
    text = mk_codebit("Shared.cs", "1.4", "https://example.com/raw/Shared.cs", description="Demo")
    meta = parse_metadata(text)
    assert meta == {
        "name": "Shared.cs",
        "description": "Demo",
        "url": "https://example.com/raw/Shared.cs",
        "version": "1.4",
        "keywords": "CodeBit",
    }


def test_scalars_stay_strings():
    meta = parse_metadata("---\nversion: 1.10\ncopyrightYear: 2017\nflag: yes\n...\n")
    assert meta["version"] == "1.10"
    assert meta["copyrightYear"] == "2017"
    assert meta["flag"] == "yes"


def test_text_outside_markers_is_ignored():
    text = "\n".join(
        [
            "# not: metadata",
            "---",
            "version: 2",
            "...",
            "after: ignored",
            "---",
        ]
    )
    assert parse_metadata(text) == {"version": "2"}


def test_no_block_gives_empty_mapping():
    assert parse_metadata("print('hello')\n") == {}
    assert find_metadata_block("no markers here") is None


def test_markers_must_be_whole_lines():
    assert parse_metadata("x = '---'\n// ...\n") == {}


def test_crlf_and_trailing_whitespace_tolerated():
    text = "/*\r\n--- \r\nversion: 3\r\n...\t\r\n*/\r\n"
    assert parse_metadata(text) == {"version": "3"}


def test_unterminated_block_is_syntax_error():
    with pytest.raises(MetadataSyntaxError):
        parse_metadata("---\nversion: 1\n")


def test_malformed_yaml_is_syntax_error():
    with pytest.raises(MetadataSyntaxError):
        parse_metadata("---\nversion: [1, 2\n...\n")


def test_non_mapping_block_is_syntax_error():
    with pytest.raises(MetadataSyntaxError):
        parse_metadata("---\n- a\n- b\n...\n")


def test_nested_value_is_syntax_error():
    with pytest.raises(MetadataSyntaxError):
        parse_metadata("---\nkeywords:\n  - CodeBit\n...\n")


def test_empty_value_is_empty_string():
    assert parse_metadata("---\nname:\n...\n") == {"name": ""}


def test_read_metadata_skips_bom(tmp_path: Path):
    p = tmp_path / "Bom.cs"
    write_file(p, "\ufeff---\nversion: 1\n...\n")
    assert read_metadata(p) == {"version": "1"}


@pytest.mark.parametrize(
    "keywords, expected",
    [
        ("#CodeBit", ["CodeBit"]),
        ("Tools, #CodeBit", ["Tools", "CodeBit"]),
        ("Tools; #codebit ;yaml", ["Tools", "codebit", "yaml"]),
    ],
)
def test_hash_prefixed_keywords_reach_the_extractor(keywords: str, expected: list[str]):
    text = mk_codebit("Shared.cs", "1.4", "https://example.com/raw/Shared.cs", keywords=keywords)

    meta = parse_metadata(text)

    assert meta["keywords"] == keywords
    assert extract_descriptor(meta).keywords == expected


def test_values_are_taken_verbatim_to_end_of_line():
    meta = parse_metadata("---\nurl: https://e.com/a.cs?x=1#frag\nversion: 1.4 #beta\n...\n")
    assert meta == {"url": "https://e.com/a.cs?x=1#frag", "version": "1.4 #beta"}


def test_comment_lines_are_skipped():
    text = "---\n# version: 9\n  # indented comment\nversion: 1\n...\n"
    assert parse_metadata(text) == {"version": "1"}


def test_quoted_values_are_unquoted():
    meta = parse_metadata("---\nname: 'My: File.cs'\ndescription: \"Tab\\there\"\n...\n")
    assert meta == {"name": "My: File.cs", "description": "Tab\there"}


@pytest.mark.parametrize(
    "block",
    [
        "just a line",
        "version: 1\nversion: 2",
        "name: 'unterminated",
        "version:1",
    ],
)
def test_bad_lines_are_syntax_errors(block: str):
    with pytest.raises(MetadataSyntaxError):
        parse_metadata(f"---\n{block}\n...\n")
