"""
===============================================================================
FILE: stage_02_segment.py
PROJECT: Debate Transcript Analysis
DATE: October 19, 2026
===============================================================================
PURPOSE:
    Clean scraped transcripts and split them into speaker segments.
    This is Stage 2 of the pipeline.

DESCRIPTION:
    1. Load raw transcripts from Stage 1
    2. Clean each transcript with regexes:
       - Drop transcriber stage directions, e.g. (APPLAUSE), [CROSSTALK]
       - Normalize curly quotes
       - Collapse whitespace
    3. Segment at upper-case speaker markers ("CLINTON: ...")
    4. Normalize labels, fix known misspellings, drop moderators
    5. Concatenate each candidate's segments into one text per debate

INPUT FILES:
    - data/01_raw/raw_transcripts.csv

OUTPUT FILES:
    - data/02_segmented/segments.csv
    - data/02_segmented/speaker_texts.csv

USAGE:
    python code/stage_02_segment.py
===============================================================================
"""

import re
import sys
import pandas as pd
from tqdm import tqdm
from config import (
    RAW_TRANSCRIPTS, SEGMENTS_FILE, SPEAKER_TEXTS, SEGMENTED_DIR,
    DOC_ID_COLUMN, TEXT_COLUMN, SPEAKER_COLUMN,
    MARKER_PATTERN, STAGE_DIRECTION_PATTERN,
    LABEL_CORRECTIONS, EXCLUDED_SPEAKERS
)
from helper_segment_by_speaker import (
    SEGMENT_COLUMNS, compile_marker_pattern, segment, normalize_labels,
    apply_label_corrections, filter_speakers
)
from helper_aggregate_by_speaker import aggregate_by_speaker

STAGE_DIRECTION_RE = re.compile(STAGE_DIRECTION_PATTERN)
WHITESPACE_RE = re.compile(r"\s+")

QUOTE_TRANSLATION = str.maketrans({
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
})


def clean_transcript(text):
    """
    Regex cleanup applied before segmentation.

    Example:
        "HOLT: Good evening. (APPLAUSE)   CLINTON: Thank you."
        -> "HOLT: Good evening. CLINTON: Thank you."
    """
    text = STAGE_DIRECTION_RE.sub(" ", text)
    text = text.translate(QUOTE_TRANSLATION)
    text = WHITESPACE_RE.sub(" ", text)
    return text.strip()


def relabel(df, corrections=LABEL_CORRECTIONS, exclude=EXCLUDED_SPEAKERS):
    """Normalize labels, fix known misspellings, then drop excluded speakers."""
    df = normalize_labels(df)
    df = apply_label_corrections(df, corrections)
    df = filter_speakers(df, exclude)
    return df


def segment_transcript(text, marker_pattern=MARKER_PATTERN,
                       corrections=LABEL_CORRECTIONS,
                       exclude=EXCLUDED_SPEAKERS):
    """Segment one cleaned transcript and relabel the result."""
    return relabel(segment(text, marker_pattern), corrections, exclude)


def segment_documents(df_docs, marker_pattern=MARKER_PATTERN,
                      corrections=LABEL_CORRECTIONS,
                      exclude=EXCLUDED_SPEAKERS):
    """
    Clean and segment every transcript.

    Transcripts where the marker pattern finds nothing are reported and
    left out; they have no recognizable speaker structure.

    Args:
        df_docs: DataFrame with doc_id and text columns
        marker_pattern: Speaker-change regex (string or compiled)
        corrections: Mapping of misspelled label -> correct label
        exclude: Labels to drop (moderators, audience)

    Returns:
        tuple: (segments_df, unmatched_doc_ids)
    """
    # fail before the loop if the pattern is unusable
    pattern = compile_marker_pattern(marker_pattern)

    frames = []
    unmatched = []
    for doc in tqdm(
        df_docs.itertuples(index=False),
        total=len(df_docs),
        desc="Segmenting transcripts",
        file=sys.stdout,
    ):
        doc_id = getattr(doc, DOC_ID_COLUMN)
        text = clean_transcript(getattr(doc, TEXT_COLUMN))

        raw = segment(text, pattern)
        if raw.empty:
            print(f"  Warning: no speaker markers found in {doc_id}, skipping")
            unmatched.append(doc_id)
            continue

        df = relabel(raw, corrections, exclude)
        print(f"  {doc_id}: {len(raw):,} segments, "
              f"{len(df):,} after dropping excluded speakers")

        df.insert(0, DOC_ID_COLUMN, doc_id)
        frames.append(df)

    if not frames:
        return pd.DataFrame(columns=[DOC_ID_COLUMN] + SEGMENT_COLUMNS), unmatched

    return pd.concat(frames, ignore_index=True), unmatched


def main():
    """Execute the complete Stage 2 segmentation pipeline."""
    print("\n" + "="*80)
    print("STAGE 2: SPEAKER SEGMENTATION")
    print("="*80 + "\n")

    if not RAW_TRANSCRIPTS.exists():
        raise FileNotFoundError(
            f"Raw transcripts not found at {RAW_TRANSCRIPTS}\n"
            f"Please run stage_01_scrape.py first."
        )

    SEGMENTED_DIR.mkdir(parents=True, exist_ok=True)

    print("Loading raw transcripts...")
    df_docs = pd.read_csv(RAW_TRANSCRIPTS, keep_default_na=False)
    print(f"  Loaded {len(df_docs):,} transcripts")

    print(f"\nSettings:")
    print(f"  Marker pattern: {MARKER_PATTERN}")
    print(f"  Label corrections: {len(LABEL_CORRECTIONS)}")
    print(f"  Excluded speakers: {', '.join(sorted(EXCLUDED_SPEAKERS))}")
    print()

    df_segments, unmatched = segment_documents(df_docs)
    df_speakers = aggregate_by_speaker(df_segments)

    df_segments.to_csv(SEGMENTS_FILE, index=False)
    print(f"\n  Segments saved to: {SEGMENTS_FILE}")
    df_speakers.to_csv(SPEAKER_TEXTS, index=False)
    print(f"  Speaker texts saved to: {SPEAKER_TEXTS}")

    # Summary statistics
    print("\n" + "="*80)
    print("SUMMARY")
    print("="*80)
    print(f"  Transcripts segmented: {len(df_docs) - len(unmatched):,}")
    if unmatched:
        print(f"  Transcripts without speaker markers: {', '.join(map(str, unmatched))}")
    print(f"  Total segments: {len(df_segments):,}")
    print(f"  Speakers: {', '.join(df_speakers[SPEAKER_COLUMN].unique())}")

    print("\n" + "="*80)
    print("STAGE 2 COMPLETE")
    print("="*80 + "\n")


if __name__ == "__main__":
    main()
