"""Tests for the speaker segmentation helpers."""

import re

import pytest

from config import MARKER_PATTERN
from helper_segment_by_speaker import (
    segment,
    compile_marker_pattern,
    discarded_prefix,
    reconstruct,
    normalize_label,
    normalize_labels,
    apply_label_corrections,
    filter_speakers,
    SEGMENT_COLUMNS,
)


def pairs(df):
    return list(zip(df["speaker"], df["text"]))


def test_segment_basic_example():
    """Two markers give two segments and the prefix is dropped."""
    text = "PREFIX TEXT SPEAKER_A: hello there SPEAKER_B: hi back"
    df = segment(text, MARKER_PATTERN)
    assert pairs(df) == [("SPEAKER_A", " hello there "), ("SPEAKER_B", " hi back")]
    assert discarded_prefix(text, df) == "PREFIX TEXT "


def test_segment_no_match_is_empty():
    """No markers returns an empty table, not an error."""
    df = segment("just some prose with no speakers at all", MARKER_PATTERN)
    assert df.empty
    assert list(df.columns) == SEGMENT_COLUMNS


def test_segment_empty_text():
    df = segment("", MARKER_PATTERN)
    assert df.empty


def test_segment_count_matches_markers(debate_text):
    """One segment per marker, in order of appearance."""
    df = segment(debate_text, MARKER_PATTERN)
    assert list(df["speaker"]) == ["HOLT", "CLINTON", "TRUMP", "CLINTIN"]
    assert list(df["segment_id"]) == [0, 1, 2, 3]


def test_segment_spans_are_contiguous(debate_text):
    """Segments don't overlap and cover everything after the first marker."""
    df = segment(debate_text, MARKER_PATTERN)
    starts = list(df["start"])
    ends = list(df["end"])
    assert starts == sorted(starts)
    assert ends[:-1] == starts[1:]
    assert ends[-1] == len(debate_text)
    for row in df.itertuples(index=False):
        assert debate_text[row.start:row.end] == row.marker + row.text


def test_segment_round_trip(debate_text):
    """Prefix + markers + texts rebuilds the input exactly."""
    df = segment(debate_text, MARKER_PATTERN)
    assert reconstruct(debate_text, df) == debate_text


def test_round_trip_without_markers():
    text = "nobody is speaking here"
    assert reconstruct(text, segment(text, MARKER_PATTERN)) == text


def test_segment_is_case_sensitive():
    """Capitalized words followed by a colon are not speaker changes."""
    text = "CLINTON: Here is the plan: Today: we start. Jobs: many. TRUMP: Wrong."
    df = segment(text, MARKER_PATTERN)
    assert list(df["speaker"]) == ["CLINTON", "TRUMP"]
    assert df["text"].iloc[0] == " Here is the plan: Today: we start. Jobs: many. "


def test_marker_needs_following_whitespace():
    text = "CLINTON: the time was 10:30 and the ratio was AB:CD today"
    df = segment(text, MARKER_PATTERN)
    assert list(df["speaker"]) == ["CLINTON"]


def test_compiled_pattern_accepted():
    pattern = re.compile(r"([A-Z]+):(?=\s)")
    df = segment("A: one B: two", pattern)
    assert pairs(df) == [("A", " one "), ("B", " two")]


def test_pattern_without_group_uses_whole_match():
    """Without a capture group the whole marker is the raw label."""
    df = segment("HOLT: hi CLINTON: hello", r"[A-Z]+:")
    assert list(df["speaker"]) == ["HOLT:", "CLINTON:"]
    assert list(normalize_labels(df)["speaker"]) == ["HOLT", "CLINTON"]


def test_malformed_pattern_raises():
    with pytest.raises(ValueError, match="Invalid marker pattern"):
        segment("HOLT: hi", r"([A-Z]+:")


def test_case_insensitive_compiled_pattern_rejected():
    with pytest.raises(ValueError, match="case-insensitive"):
        compile_marker_pattern(re.compile(r"([A-Z]+):", re.IGNORECASE))


def test_inline_ignorecase_flag_rejected():
    with pytest.raises(ValueError, match="case-insensitive"):
        segment("HOLT: hi", r"(?i)([A-Z]+):")


def test_scoped_ignorecase_group_rejected():
    """A (?i:...) group makes ordinary words look like speaker labels."""
    with pytest.raises(ValueError, match="case-insensitive"):
        segment("We did it. Today: more jobs.", r"((?i:[a-z]+)):\s")


def test_scoped_flag_group_without_ignorecase_allowed():
    df = segment("HOLT: hi CLINTON: hello", r"((?s:[A-Z]+)):(?=\s)")
    assert list(df["speaker"]) == ["HOLT", "CLINTON"]


def test_optional_group_not_matched_uses_whole_marker():
    """An alternation branch without the label group still gets a label."""
    df = segment("CLINTON: hi Q: yes", r"(?:([A-Z]{2,})|Q):(?=\s)")
    assert list(df["speaker"]) == ["CLINTON", "Q:"]
    assert list(normalize_labels(df)["speaker"]) == ["CLINTON", "Q"]


def test_qualified_label_kept_whole():
    text = "HOLT: hi. UNIDENTIFIED MALE: boo. CLINTON: ok."
    df = segment(text, MARKER_PATTERN)
    assert list(df["speaker"]) == ["HOLT", "UNIDENTIFIED MALE", "CLINTON"]
    assert df["text"].iloc[0] == " hi. "
    assert reconstruct(text, df) == text


def test_normalize_label():
    assert normalize_label("  holt: ") == "HOLT"
    assert normalize_label("CLINTON:") == "CLINTON"
    assert normalize_label("TRUMP") == "TRUMP"


def test_normalize_labels_idempotent():
    df = segment("HOLT: hi CLINTON: hello", r"[A-Z]+:")
    once = normalize_labels(df)
    twice = normalize_labels(once)
    assert list(once["speaker"]) == list(twice["speaker"])


def test_normalize_labels_does_not_mutate_input():
    df = segment("HOLT: hi", r"[A-Z]+:")
    normalize_labels(df)
    assert df["speaker"].iloc[0] == "HOLT:"


def test_label_corrections(debate_text):
    """Known misspellings are fixed, other labels pass through."""
    df = segment(debate_text, MARKER_PATTERN)
    fixed = apply_label_corrections(df, {"CLINTIN": "CLINTON"})
    assert list(fixed["speaker"]) == ["HOLT", "CLINTON", "TRUMP", "CLINTON"]
    assert list(df["speaker"])[-1] == "CLINTIN"


def test_label_corrections_empty_table(debate_text):
    df = segment(debate_text, MARKER_PATTERN)
    assert list(apply_label_corrections(df, {})["speaker"]) == list(df["speaker"])


def test_filter_speakers_subset_and_order(debate_text):
    df = segment(debate_text, MARKER_PATTERN)
    filtered = filter_speakers(df, {"HOLT"})
    assert set(filtered["speaker"]) <= set(df["speaker"])
    assert list(filtered["speaker"]) == ["CLINTON", "TRUMP", "CLINTIN"]
    assert list(filtered["segment_id"]) == [1, 2, 3]


def test_filter_speakers_nothing_excluded(debate_text):
    df = segment(debate_text, MARKER_PATTERN)
    assert len(filter_speakers(df, set())) == len(df)
