"""
===============================================================================
FILE: stage_03_tokenize.py
PROJECT: Debate Transcript Analysis
DATE: October 19, 2026
===============================================================================
PURPOSE:
    Tokenize each speaker's debate text using the spaCy NLP pipeline.
    This is Stage 3 of the pipeline.

DESCRIPTION:
    1. Load per-speaker texts from Stage 2 (rebuilt from segments.csv by
       helper_aggregate_by_speaker.py if missing)
    2. Apply spaCy linguistic preprocessing:
       - Tokenization
       - Lemmatization
       - Stopword removal (if enabled in config)
       - Punctuation removal
       - Lowercasing (if enabled in config)
    3. Save token lists for the feature stage

INPUT FILES:
    - data/02_segmented/speaker_texts.csv

OUTPUT FILES:
    - data/03_tokens/tokenized_speakers.pkl

DEPENDENCIES:
    - spacy (with the model named by SPACY_MODEL in config.py)
    - pandas
    - tqdm

USAGE:
    python code/stage_03_tokenize.py
===============================================================================
"""

import sys
import pandas as pd
import spacy
from tqdm import tqdm
from config import (
    SPEAKER_TEXTS, TOKENIZED_SPEAKERS, TOKENS_DIR,
    TEXT_COLUMN, TOKENS_COLUMN, SPEAKER_COLUMN,
    SPACY_MODEL, REMOVE_STOPWORDS, LOWERCASE,
    save_pickle
)
import helper_aggregate_by_speaker as agg_helper


def load_nlp(model_name=SPACY_MODEL):
    """
    Load a spaCy pipeline by name.

    NER and the parser are disabled; only tokenization and lemmas are needed.
    """
    print(f"Loading spaCy model {model_name}...")
    return spacy.load(model_name, disable=["ner", "parser"])


def tokenize_text(text_series, nlp, batch_size=500,
                  remove_stopwords=REMOVE_STOPWORDS, lowercase=LOWERCASE):
    """
    Preprocess text using spaCy linguistic pipeline.

    Performs:
    - Tokenization: split text into words
    - Lowercasing: normalize text (if enabled)
    - Stopword removal: remove common words (if enabled)
    - Punctuation removal: keep only alphabetic tokens
    - Lemmatization: reduce words to base form (when the pipeline has a
      lemmatizer; otherwise the surface form is kept)

    Example:
        "We are building the wall"
        -> ["build", "wall"]

    Args:
        text_series: pandas Series or list of text documents
        nlp: Loaded spaCy pipeline
        batch_size: Number of texts to process simultaneously

    Returns:
        List of lists containing cleaned tokens
    """
    cleaned_texts = []

    for doc in tqdm(
        nlp.pipe(text_series, batch_size=batch_size),
        total=len(text_series),
        desc="Tokenizing text",
        file=sys.stdout,
    ):
        tokens = []
        for token in doc:
            # Skip non-alphabetic tokens (numbers, punctuation)
            if not token.is_alpha:
                continue

            if remove_stopwords and token.is_stop:
                continue

            word = token.lemma_ or token.text

            if lowercase:
                word = word.lower()

            tokens.append(word)

        cleaned_texts.append(tokens)

    return cleaned_texts


def tokenize_speakers(df, nlp):
    """
    Tokenize per-speaker texts.

    Returns:
        Copy of df with a list-valued tokens column and token_count
    """
    df = df.copy()
    tokenized = tokenize_text(df[TEXT_COLUMN].tolist(), nlp)

    df[TOKENS_COLUMN] = tokenized
    df['token_count'] = [len(tokens) for tokens in tokenized]

    print(f"  Tokenization complete: {len(df):,} speaker texts processed")
    if len(df) > 0:
        print(f"  Average tokens per speaker text: {df['token_count'].mean():.1f}")

    return df


def load_speaker_texts():
    """Load Stage 2 speaker texts, rebuilding them from segments if needed."""
    print("Loading speaker texts...")

    if not SPEAKER_TEXTS.exists():
        agg_helper.main()

    df = pd.read_csv(SPEAKER_TEXTS, keep_default_na=False)
    print(f"  Loaded {len(df):,} speaker texts")
    return df


def main():
    """
    Execute the complete tokenization pipeline.
    """
    print("\n" + "="*80)
    print("STAGE 3: TEXT TOKENIZATION")
    print("="*80 + "\n")

    print(f"Settings:")
    print(f"  spaCy model: {SPACY_MODEL}")
    print(f"  Remove stopwords: {REMOVE_STOPWORDS}")
    print(f"  Lowercase: {LOWERCASE}")
    print()

    TOKENS_DIR.mkdir(parents=True, exist_ok=True)

    df = load_speaker_texts()
    nlp = load_nlp(SPACY_MODEL)

    print("Applying tokenization...")
    df_tokens = tokenize_speakers(df, nlp)

    # pickle keeps the token lists as lists
    save_pickle(df_tokens, TOKENIZED_SPEAKERS)

    print("\n" + "="*80)
    print("SUMMARY")
    print("="*80)
    for row in df_tokens.itertuples(index=False):
        print(f"  {getattr(row, SPEAKER_COLUMN)}: {row.token_count:,} tokens")

    print("\n" + "="*80)
    print("STAGE 3 COMPLETE")
    print("="*80 + "\n")


if __name__ == "__main__":
    main()
