import pytest

from conftest import imp
from depload.matcher import ExportCandidate, NameTruncationMatcher, match_label, truncate_export


@pytest.mark.parametrize("name, truncated", [
    ("Foo_1234", "Foo"),
    ("Foo_0", "Foo"),
    ("Create_File_12", "Create_File"),
    ("__imp_Foo_7", "__imp_Foo"),
])
def test_numeric_suffix_is_truncated(name, truncated):
    assert truncate_export(name) == ExportCandidate(name, truncated, True)


@pytest.mark.parametrize("name", [
    "Foo_12a4",
    "Foo_",
    "Foo",
    "Foo_1_bar",
    "Foo_١٢",  # non-ASCII digits
])
def test_non_numeric_suffix_is_not_a_candidate(name):
    candidate = truncate_export(name)
    assert not candidate.was_truncated
    assert candidate.truncated_name == name


def test_match_label_appends_single_underscore():
    assert match_label(truncate_export("Foo_1234")) == "import -> Foo_"


def test_matching_import_gets_repeatable_comment(host):
    matcher = NameTruncationMatcher(host)
    report = matcher.run(
        exports=[(0x1000, "Foo_1234", True)],
        imports_by_module=[[imp(0x5000, "Foo@4"), imp(0x5004, "Bar")]],
    )
    assert host.comments == {0x5000: ("import -> Foo_", True)}
    assert report.candidates == 1
    assert report.annotated == 1


def test_untruncated_and_private_exports_are_ignored(host):
    matcher = NameTruncationMatcher(host)
    report = matcher.run(
        exports=[(0x1000, "Foo", True), (0x1010, "Bar_12", False), (0x1020, "Baz_1x", True)],
        imports_by_module=[[imp(0x5000, "Foo"), imp(0x5004, "Bar"), imp(0x5008, "Baz")]],
    )
    assert host.comments == {}
    assert report.candidates == 0


def test_unnamed_imports_are_skipped(host):
    NameTruncationMatcher(host).run(
        exports=[(0x1000, "Foo_1", True)],
        imports_by_module=[[imp(0x5000, None, 12), imp(0x5004, "Foo")]],
    )
    assert list(host.comments) == [0x5004]


def test_empty_prefix_does_not_match_everything(host):
    report = NameTruncationMatcher(host).run(
        exports=[(0x1000, "_123", True)],
        imports_by_module=[[imp(0x5000, "Foo"), imp(0x5004, "Bar")]],
    )
    assert host.comments == {}
    assert report.candidates == 0


def test_imports_across_modules(host):
    NameTruncationMatcher(host).run(
        exports=[(0x1000, "Sleep_3", True)],
        imports_by_module=[[imp(0x5000, "Sleep")], [imp(0x6000, "SleepEx")], [imp(0x7000, "Beep")]],
    )
    assert sorted(host.comments) == [0x5000, 0x6000]


def test_last_write_wins_and_is_counted(host):
    report = NameTruncationMatcher(host).run(
        exports=[(0x1000, "Get_1", True), (0x1010, "GetProc_2", True)],
        imports_by_module=[[imp(0x5000, "GetProcAddress")]],
    )
    assert host.comments[0x5000] == ("import -> GetProc_", True)
    assert [text for _, text in host.comment_log] == ["import -> Get_", "import -> GetProc_"]
    assert report.overwritten == 1


def test_defaults_to_host_tables(host):
    host.exports = [(0x1000, "Foo_9", True)]
    host.modules = [("KERNEL32", [imp(0x5000, "Foo")])]
    report = NameTruncationMatcher(host).run()
    assert host.comments == {0x5000: ("import -> Foo_", True)}
    assert report.exports_seen == 1


def test_progress_is_reported(host):
    exports = [(0x1000 + i, f"F{i}_1", True) for i in range(12)]
    NameTruncationMatcher(host, progress_interval=5).run(exports=exports, imports_by_module=[])
    texts = [text for kind, text in host.wait_box if kind == "replace"]
    assert texts == [
        "Mapping imports to exports      0/    12",
        "Mapping imports to exports      5/    12",
        "Mapping imports to exports     10/    12",
    ]


def test_cancel_keeps_applied_comments(host):
    exports = [(0x1000 + i, f"F{i}_1", True) for i in range(10)]
    imports = [[imp(0x5000 + i, f"F{i}") for i in range(10)]]
    host.cancel_after = 1
    report = NameTruncationMatcher(host, progress_interval=5).run(exports=exports, imports_by_module=imports)
    assert report.cancelled
    assert report.exports_seen == 5
    assert sorted(host.comments) == [0x5000 + i for i in range(5)]


def test_candidate_for_filters_exports(host):
    matcher = NameTruncationMatcher(host)
    assert matcher.candidate_for("Foo_1", True) == ExportCandidate("Foo_1", "Foo", True)
    assert matcher.candidate_for("Foo_1", False) is None
    assert matcher.candidate_for("Bar", True) is None
    assert matcher.candidate_for("_9", True) is None
    assert matcher.candidate_for(None, True) is None
