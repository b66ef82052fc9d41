"""
Split a pre-joined transcript into speaker segments.

Every function here is pure: it takes a string or a segments DataFrame and
returns a new DataFrame, leaving its input untouched. Stage 2
(stage_02_segment.py) chains them as

    segment -> normalize_labels -> apply_label_corrections -> filter_speakers
"""

import re
import pandas as pd
from config import (MARKER_PATTERN, SEGMENT_ID_COLUMN, SPEAKER_COLUMN,
                    TEXT_COLUMN)

SEGMENT_COLUMNS = [SEGMENT_ID_COLUMN, "start", "end", "marker",
                   SPEAKER_COLUMN, TEXT_COLUMN]

# inline flag groups such as (?i:...) or (?ai-m:...)
SCOPED_IGNORECASE_RE = re.compile(r"\(\?[a-zA-Z]*i[a-zA-Z]*(?:-[a-zA-Z]+)?:")


def compile_marker_pattern(marker_pattern=MARKER_PATTERN):
    """
    Compile and validate a speaker-marker pattern.

    Accepts a pattern string or an already compiled pattern. Case-insensitive
    patterns are refused: ordinary capitalized words would start new segments.

    Raises:
        ValueError: If the regex is malformed or matches case-insensitively
    """
    if isinstance(marker_pattern, re.Pattern):
        pattern = marker_pattern
    else:
        try:
            pattern = re.compile(marker_pattern)
        except re.error as e:
            raise ValueError(
                f"Invalid marker pattern {marker_pattern!r}: {e}"
            ) from e

    if pattern.flags & re.IGNORECASE or SCOPED_IGNORECASE_RE.search(pattern.pattern):
        raise ValueError(
            f"Marker pattern {pattern.pattern!r} is case-insensitive; "
            f"speaker markers must be matched case-sensitively"
        )

    return pattern


def segment(text, marker_pattern=MARKER_PATTERN):
    """
    Split `text` into one segment per speaker marker.

    Each match of `marker_pattern` opens a segment labelled with the first
    capture group (or the whole match if the pattern has none). The segment
    text runs from the end of the match up to the next match or the end of
    the text. Anything before the first match belongs to no speaker and is
    dropped.

    Example:
        "PREFIX TEXT SPEAKER_A: hello there SPEAKER_B: hi back"
        -> SPEAKER_A " hello there ", SPEAKER_B " hi back"

    Args:
        text (str): Single pre-joined transcript string
        marker_pattern (str or re.Pattern): Speaker-change pattern

    Returns:
        pd.DataFrame: Columns segment_id, start, end, marker, speaker, text.
            Empty (with the same columns) when nothing matches.
    """
    pattern = compile_marker_pattern(marker_pattern)
    matches = list(pattern.finditer(text))

    rows = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        # an optional group that took no part in the match leaves None
        label = match.group(1) if pattern.groups else None
        if label is None:
            label = match.group(0)
        rows.append({
            SEGMENT_ID_COLUMN: i,
            "start": match.start(),
            "end": end,
            "marker": match.group(0),
            SPEAKER_COLUMN: label,
            TEXT_COLUMN: text[match.end():end],
        })

    return pd.DataFrame(rows, columns=SEGMENT_COLUMNS)


def discarded_prefix(text, segments):
    """Return the leading text that `segment` assigned to no speaker."""
    if len(segments) == 0:
        return text
    return text[:segments["start"].iloc[0]]


def reconstruct(text, segments):
    """Rebuild the source text from its prefix, markers and segment texts."""
    body = "".join(segments["marker"] + segments[TEXT_COLUMN])
    return discarded_prefix(text, segments) + body


def normalize_label(label):
    """Trim whitespace, strip a trailing colon and uppercase."""
    return label.strip().rstrip(":").strip().upper()


def normalize_labels(df):
    """Return a copy of `df` with every speaker label normalized."""
    df = df.copy()
    df[SPEAKER_COLUMN] = df[SPEAKER_COLUMN].map(normalize_label)
    return df


def apply_label_corrections(df, corrections):
    """
    Apply manual corrections for known misspelled speaker labels.

    Labels missing from `corrections` pass through unchanged.
    """
    df = df.copy()
    df[SPEAKER_COLUMN] = df[SPEAKER_COLUMN].replace(corrections)
    return df


def filter_speakers(df, exclude):
    """Drop segments whose speaker is in `exclude`, keeping the order."""
    keep = ~df[SPEAKER_COLUMN].isin(set(exclude))
    return df[keep].copy()
