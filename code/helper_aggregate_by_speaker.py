import pandas as pd
from config import (SEGMENTS_FILE, SPEAKER_TEXTS,
                    DOC_ID_COLUMN, SPEAKER_COLUMN, TEXT_COLUMN)

def aggregate_by_speaker(df: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregates a segments DataFrame by `speaker` (within `doc_id` if present):
      - Concatenates `text` in segment order within each speaker
      - Counts the segments that went into each speaker's text
      - Keeps speakers in order of first appearance
    """
    keys = [c for c in [DOC_ID_COLUMN, SPEAKER_COLUMN] if c in df.columns]

    if df.empty:
        return pd.DataFrame(columns=keys + [TEXT_COLUMN, 'n_segments'])

    agg_dict = {
        TEXT_COLUMN: lambda x: ''.join(x),
        'n_segments': 'sum',
    }

    grouped = (
        df
        .assign(n_segments=1)
        .groupby(keys, as_index=False, sort=False)
        .agg(agg_dict)
    )

    return grouped


def speaker_texts(df: pd.DataFrame) -> dict:
    """Map each speaker to their concatenated text, e.g. {"A": "xz", "B": "y"}."""
    grouped = aggregate_by_speaker(df.drop(columns=[DOC_ID_COLUMN], errors='ignore'))
    return dict(zip(grouped[SPEAKER_COLUMN], grouped[TEXT_COLUMN]))


def main():
    if not SEGMENTS_FILE.exists():
        raise FileNotFoundError(
            f"Segments not found at {SEGMENTS_FILE}\n"
            f"Please run stage_02_segment.py first."
        )
    print("Loading segments...")
    df = pd.read_csv(SEGMENTS_FILE, keep_default_na=False)
    print("Aggregating by speaker...")
    df_aggregated = aggregate_by_speaker(df)
    print("Saving aggregated DataFrame...")
    df_aggregated.to_csv(SPEAKER_TEXTS, index=False)

if __name__ == "__main__":
    main()
