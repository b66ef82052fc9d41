"""
===============================================================================
FILE: stage_04_features.py
PROJECT: Debate Transcript Analysis
DATE: October 19, 2026
===============================================================================
PURPOSE:
    Build a document-feature matrix from tokenized speaker texts and derive
    frequency, word-count and dictionary summaries. This is Stage 4 of the
    pipeline.

DESCRIPTION OF STEPS:
    1. Load tokenized speaker texts from Stage 3 (stage_03_tokenize.py)
    2. Fit a CountVectorizer (or TfidfVectorizer) on the token lists to get
       one row per speaker text and one column per feature
    3. Report the most frequent features overall
    4. Count tokens, distinct types and segments per speaker
    5. If a dictionary file exists, count dictionary hits per category

INPUT FILES:
    - data/03_tokens/tokenized_speakers.pkl     (from stage_03_tokenize.py)
    - data/01_raw/dictionary.csv                (optional: category, term)

OUTPUT FILES:
    - data/04_features/dfm.pkl                  (sparse document-feature matrix)
    - data/04_features/word_counts.csv
    - data/04_features/top_features.csv
    - data/04_features/dictionary_scores.csv    (only with a dictionary)

DEPENDENCIES:
    - scikit-learn (CountVectorizer, TfidfVectorizer)
    - numpy, pandas

USAGE:
    $ python code/stage_04_features.py

===============================================================================
"""
import numpy as np
import pandas as pd
from pathlib import Path
from sklearn.feature_extraction.text import CountVectorizer, TfidfVectorizer
from config import (
    TOKENIZED_SPEAKERS, DICTIONARY_FILE, FEATURES_DIR,
    DFM_FILE, WORD_COUNTS, TOP_FEATURES, DICTIONARY_SCORES,
    DOC_ID_COLUMN, SPEAKER_COLUMN, TOKENS_COLUMN,
    DFM_WEIGHTING, MIN_DF, MAX_NGRAM, TOP_N_FEATURES,
    load_pickle, save_pickle, create_sparse_dataframe
)

def identity(x):
    return x


def create_vectorizer(weighting="count", min_df=1, ngram=1):
    """
    Create a vectorizer for already-tokenized documents.

    "count" gives raw term frequencies (a plain document-feature matrix);
    "tfidf" downweights terms every speaker uses.

    Args:
        weighting (str): "count" or "tfidf"
        min_df (int): Minimum document frequency (ignore rarer terms)
        ngram (int): Longest n-gram to include

    Raises:
        ValueError: If weighting is not recognized
    """
    vectorizers = {
        "count": CountVectorizer,
        "tfidf": TfidfVectorizer,
    }
    if weighting not in vectorizers:
        raise ValueError(
            f"Unknown weighting {weighting!r}; expected one of {sorted(vectorizers)}"
        )

    return vectorizers[weighting](
        ngram_range=(1, ngram),
        preprocessor=identity,  # No preprocessing (already tokenized)
        tokenizer=identity,  # No tokenization (already tokenized)
        token_pattern=None,  # Disable regex tokenization
        lowercase=False,
        min_df=min_df,
    )


def document_labels(df):
    """Row labels for the DFM: "doc_id/SPEAKER", or just the speaker."""
    if DOC_ID_COLUMN in df.columns:
        return (df[DOC_ID_COLUMN].astype(str) + "/" + df[SPEAKER_COLUMN]).tolist()
    return df[SPEAKER_COLUMN].tolist()


def build_dfm(tokens, index, weighting="count", min_df=1, ngram=1):
    """
    Build a document-feature matrix.

    Args:
        tokens: List of token lists, one per document
        index: Row labels, one per document

    Returns:
        Sparse DataFrame, documents x features

    Raises:
        ValueError: If no feature survives (every token list empty or
            below min_df)
    """
    vectorizer = create_vectorizer(weighting, min_df, ngram)
    try:
        X = vectorizer.fit_transform(tokens)
    except ValueError as e:
        raise ValueError(
            f"No features left in {len(tokens):,} speaker texts (min_df={min_df}): {e}\n"
            f"Check the tokenization settings used by stage_03_tokenize.py."
        ) from e
    return create_sparse_dataframe(X, index, vectorizer.get_feature_names_out())


def top_features(dfm, n=TOP_N_FEATURES):
    """Features with the highest totals across all documents."""
    X = dfm.sparse.to_coo().tocsr()
    totals = pd.Series(np.asarray(X.sum(axis=0), dtype=float).ravel(),
                       index=dfm.columns)
    totals = totals.sort_values(ascending=False, kind="stable").head(n)
    return totals.rename("frequency").rename_axis("feature").reset_index()


def word_counts(df):
    """
    Tokens, distinct types and segments for each speaker text.
    """
    keys = [c for c in [DOC_ID_COLUMN, SPEAKER_COLUMN] if c in df.columns]
    counts = df[keys].copy()
    counts['tokens'] = df[TOKENS_COLUMN].apply(len)
    counts['types'] = df[TOKENS_COLUMN].apply(lambda t: len(set(t)))
    if 'n_segments' in df.columns:
        counts['segments'] = df['n_segments']
    return counts.reset_index(drop=True)


def load_dictionary(dictionary_path):
    """
    Load a category -> terms dictionary from CSV.

    Terms ending in "*" match any feature starting with the rest of the term.

    Raises:
        FileNotFoundError: If the dictionary file doesn't exist
        ValueError: If required columns are missing
    """
    dictionary_path = Path(dictionary_path)
    if not dictionary_path.exists():
        raise FileNotFoundError(f"Dictionary not found at {dictionary_path}")

    df = pd.read_csv(dictionary_path, keep_default_na=False)
    missing = [c for c in ['category', 'term'] if c not in df.columns]
    if missing:
        raise ValueError(f"Dictionary is missing columns: {missing}")

    df['term'] = df['term'].str.strip().str.lower()
    df = df[df['term'] != '']
    return df.groupby('category', sort=False)['term'].apply(list).to_dict()


def match_dictionary_terms(features, terms):
    """Features matched by a list of dictionary terms (with * wildcards)."""
    exact = {t for t in terms if not t.endswith('*')}
    prefixes = tuple(t[:-1] for t in terms if t.endswith('*'))
    return [f for f in features
            if f in exact or (prefixes and f.startswith(prefixes))]


def dictionary_scores(dfm, dictionary):
    """
    Count dictionary hits per document and category.

    Args:
        dfm: Document-feature matrix from build_dfm
        dictionary: Mapping of category -> list of terms

    Returns:
        DataFrame, documents x categories
    """
    X = dfm.sparse.to_coo().tocsc()
    positions = {feature: i for i, feature in enumerate(dfm.columns)}

    scores = {}
    for category, terms in dictionary.items():
        matched = match_dictionary_terms(dfm.columns, terms)
        if not matched:
            scores[category] = np.zeros(len(dfm.index))
            continue
        columns = [positions[f] for f in matched]
        hits = X[:, columns].sum(axis=1)
        scores[category] = np.asarray(hits, dtype=float).ravel()

    return pd.DataFrame(scores, index=dfm.index)


def main():
    """
    Main execution function for standalone runs.
    """
    print("\n" + "=" * 60)
    print("STAGE 4: DOCUMENT-FEATURE MATRIX")
    print("=" * 60)

    if not Path(TOKENIZED_SPEAKERS).exists():
        raise FileNotFoundError(
            f"Tokenized speakers not found at {TOKENIZED_SPEAKERS}\n"
            f"Please run stage_03_tokenize.py first."
        )

    FEATURES_DIR.mkdir(parents=True, exist_ok=True)

    df = load_pickle(TOKENIZED_SPEAKERS)
    print(f"Loaded {len(df):,} tokenized speaker texts")

    print(f"\n=== Building DFM ({DFM_WEIGHTING}) ===")
    dfm = build_dfm(
        df[TOKENS_COLUMN].tolist(),
        document_labels(df),
        weighting=DFM_WEIGHTING,
        min_df=MIN_DF,
        ngram=MAX_NGRAM,
    )
    print(f"DFM: {dfm.shape[0]:,} documents × {dfm.shape[1]:,} features")
    save_pickle(dfm, DFM_FILE)

    print(f"\n=== Top {TOP_N_FEATURES} Features ===")
    top = top_features(dfm, TOP_N_FEATURES)
    for row in top.itertuples(index=False):
        print(f"  {row.feature:<20} {row.frequency:,.2f}")
    top.to_csv(TOP_FEATURES, index=False)

    print("\n=== Word Counts ===")
    counts = word_counts(df)
    print(counts.to_string(index=False))
    counts.to_csv(WORD_COUNTS, index=False)

    if Path(DICTIONARY_FILE).exists():
        print("\n=== Dictionary Scores ===")
        dictionary = load_dictionary(DICTIONARY_FILE)
        print(f"Loaded {len(dictionary)} categories from {DICTIONARY_FILE}")
        scores = dictionary_scores(dfm, dictionary)
        print(scores.to_string())
        scores.to_csv(DICTIONARY_SCORES, index_label="document")
    else:
        print(f"\nNo dictionary at {DICTIONARY_FILE}, skipping dictionary scores")

    print(f"\n{'=' * 60}")
    print(f"{'STAGE 4 COMPLETE':^60}")
    print(f"{'=' * 60}\n")


if __name__ == "__main__":
    main()
