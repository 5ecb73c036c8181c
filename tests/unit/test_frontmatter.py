from pathlib import Path

import pytest

from cline_core.errors import DraftError
from cline_core.yamlio import extract_frontmatter, parse_report_draft, render_draft


def test_extract_splits_header_and_trims_body():
    ex = extract_frontmatter('---\nto: ["a"]\nexcept: []\n---\n\n  Hello\n\n')
    assert ex.status == "ok"
    assert ex.frontmatter == {"to": ["a"], "except": []}
    assert ex.body == "Hello"


def test_extract_without_header_keeps_text_verbatim():
    text = "# Just notes\n\nno header here\n"
    ex = extract_frontmatter(text)
    assert ex.status == "absent"
    assert ex.frontmatter is None
    assert ex.body == text


def test_extract_requires_header_at_start():
    text = "intro\n---\nto: []\n---\n"
    assert extract_frontmatter(text).status == "absent"


def test_extract_empty_header_is_not_a_header():
    # "---\n---" has no content between delimiters
    assert extract_frontmatter("---\n---\nbody\n").status == "absent"


def test_extract_tolerates_crlf():
    ex = extract_frontmatter('---\r\nto: ["a"]\r\nexcept: []\r\n---\r\nBody\r\n')
    assert ex.status == "ok"
    assert ex.frontmatter["to"] == ["a"]
    assert ex.body == "Body"


def test_extract_reports_yaml_errors():
    ex = extract_frontmatter("---\nto: [a\n---\nbody\n")
    assert ex.status == "error"
    assert ex.error is not None


def test_parse_draft_maps_camel_case_fields():
    text = '---\nto: ["group:all"]\nexcept: ["bob"]\nsourcePath: "../x"\ndestinationPath: "y"\nextra: 1\n---\nB\n'
    draft = parse_report_draft(Path("entries/r.md"), text)
    assert draft.header.to == ["group:all"]
    assert draft.header.except_ == ["bob"]
    assert draft.header.source_path == "../x"
    assert draft.header.destination_path == "y"
    assert draft.body == "B"


def test_parse_headerless_draft_has_no_header():
    draft = parse_report_draft(Path("entries/n.md"), "plain\n")
    assert draft.header is None


@pytest.mark.parametrize(
    "header",
    [
        'to: ["a"]',
        'except: ["a"]',
        'to: "a"\nexcept: []',
        "- just\n- a list",
    ],
)
def test_parse_missing_required_fields(header):
    with pytest.raises(DraftError, match=r"missing required fields \(to, except\)"):
        parse_report_draft(Path("entries/bad.md"), f"---\n{header}\n---\nbody\n")


def test_parse_yaml_error_names_draft():
    with pytest.raises(DraftError, match="Error parsing YAML for report draft entries/bad.md"):
        parse_report_draft(Path("entries/bad.md"), "---\nto: [a\n---\n")


def test_render_draft_template():
    text = render_draft("Weekly", ["group:friends"], ["bob"])
    assert text == (
        "---\n"
        'to: ["group:friends"]\n'
        'except: ["bob"]\n'
        'sourcePath: ""\n'
        'destinationPath: ""\n'
        "---\n"
        "\n"
        "# Weekly\n"
        "\n"
    )
    draft = parse_report_draft(Path("entries/Weekly.md"), text)
    assert draft.header.to == ["group:friends"]
    assert draft.header.source_path == ""
    assert draft.body == "# Weekly"
