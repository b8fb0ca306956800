import itertools

import pytest

from pipesh.exceptions import ParseError, ParseErrorKind
from pipesh.expand import environ_lookup
from pipesh.parser import (
    RedirectKind,
    StageSpec,
    parse_pipeline,
    parse_stage,
    scan_markers,
    split_pipeline,
)


def test_parse_stage_output_redirection():
    spec = parse_stage("echo hi > out.txt")
    assert spec.argv == ["echo", "hi"]
    assert spec.output_target == "out.txt"
    assert spec.input_target is None
    assert spec.error_target is None


def test_parse_stage_all_redirections():
    spec = parse_stage("sort -r < in.txt 2> err.log > out.txt")
    assert spec == StageSpec(
        argv=["sort", "-r"],
        input_target="in.txt",
        output_target="out.txt",
        error_target="err.log",
    )


def test_parse_stage_marker_order_does_not_matter():
    clauses = ["< in.txt", "> out.txt", "2> err.log"]
    expected = parse_stage("cat " + " ".join(clauses))
    for order in itertools.permutations(clauses):
        assert parse_stage("cat " + " ".join(order)) == expected


def test_parse_stage_without_spaces_around_markers():
    spec = parse_stage("cat<in.txt>out.txt")
    assert spec.argv == ["cat"]
    assert spec.input_target == "in.txt"
    assert spec.output_target == "out.txt"


def test_parse_stage_expands_variables():
    lookup = environ_lookup({"GREETING": "hello", "OUT": "/tmp/x/out"})
    spec = parse_stage("echo $GREETING $MISSING world > $OUT", lookup)
    assert spec.argv == ["echo", "hello", "world"]
    assert spec.output_target == "/tmp/x/out"


def test_parse_stage_target_name_runs_to_blank():
    # "$DIR/out" names the variable "DIR/out", which is unbound.
    lookup = environ_lookup({"DIR": "/tmp/x"})
    with pytest.raises(ParseError) as exc:
        parse_stage("echo hi > $DIR/out", lookup)
    assert exc.value.kind is ParseErrorKind.MISSING_TARGET


def test_parse_stage_unbound_target_is_missing():
    with pytest.raises(ParseError) as exc:
        parse_stage("cat < $NOWHERE", environ_lookup({}))
    assert exc.value.kind is ParseErrorKind.MISSING_TARGET


def test_parse_stage_empty_fails():
    with pytest.raises(ParseError) as exc:
        parse_stage("")
    assert exc.value.kind is ParseErrorKind.EMPTY_COMMAND


def test_parse_stage_only_redirection_fails():
    with pytest.raises(ParseError) as exc:
        parse_stage("> out.txt")
    assert exc.value.kind is ParseErrorKind.EMPTY_COMMAND


def test_parse_stage_variable_expanding_to_nothing_fails():
    with pytest.raises(ParseError):
        parse_stage("$NOTHING", environ_lookup({}))


def test_parse_stage_missing_redirection_target():
    with pytest.raises(ParseError) as exc:
        parse_stage("echo hi >")
    assert exc.value.kind is ParseErrorKind.MISSING_TARGET


def test_parse_stage_error_then_output_marker():
    # "2>>" is an error marker immediately followed by an output marker.
    with pytest.raises(ParseError) as exc:
        parse_stage("cmd 2>> log")
    assert exc.value.kind is ParseErrorKind.MISSING_TARGET


def test_parse_stage_last_marker_of_a_kind_wins():
    spec = parse_stage("echo hi > first > second")
    assert spec.output_target == "second"


def test_parse_stage_is_idempotent():
    text = "grep -n foo < in.txt 2> err > out"
    assert parse_stage(text) == parse_stage(text)


def test_scan_markers_classifies_error_redirection():
    markers = scan_markers("a 2> b > c < d")
    assert [marker.kind for marker in markers] == [
        RedirectKind.ERROR,
        RedirectKind.OUTPUT,
        RedirectKind.INPUT,
    ]
    assert (markers[0].start, markers[0].end) == (2, 4)


def test_split_pipeline_three_stages():
    assert split_pipeline("a | b | c") == (False, ["a", "b", "c"])


def test_split_pipeline_detached():
    assert split_pipeline("sleep 5 &") == (True, ["sleep 5"])
    assert split_pipeline("sleep 5&") == (True, ["sleep 5"])


def test_split_pipeline_empty_line_is_noop():
    assert split_pipeline(" \t ") == (False, [])


def test_split_pipeline_ignores_redirections():
    assert split_pipeline("cat < in | wc > out") == (False, ["cat < in", "wc > out"])


def test_parse_pipeline_builds_stages():
    pipeline = parse_pipeline("printf abc | tr a-z A-Z > out.txt &")
    assert pipeline is not None
    assert pipeline.detached is True
    assert [stage.argv for stage in pipeline.stages] == [["printf", "abc"], ["tr", "a-z", "A-Z"]]
    assert pipeline.stages[1].output_target == "out.txt"


def test_parse_pipeline_empty_line():
    assert parse_pipeline("") is None


def test_parse_pipeline_rejects_empty_stage():
    with pytest.raises(ParseError):
        parse_pipeline("echo hi | | wc")
    with pytest.raises(ParseError):
        parse_pipeline("echo hi |")
    with pytest.raises(ParseError):
        parse_pipeline("&")
