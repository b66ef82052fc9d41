"""
===============================================================================
FILE: stage_01_scrape.py
PROJECT: Debate Transcript Analysis
DATE: October 19, 2026
===============================================================================
PURPOSE:
    Download debate transcripts and reduce each page to one plain-text
    string. This is Stage 1 of the pipeline.

DESCRIPTION:
    1. Load the debate manifest (doc_id, url, notes)
    2. Fetch each transcript page with requests
    3. Extract the transcript paragraphs with BeautifulSoup and join them
       into a single string (the segmenter works on one string per debate)
    4. Save one row per debate

INPUT FILES:
    - data/01_raw/debates.csv

OUTPUT FILES:
    - data/01_raw/raw_transcripts.csv

USAGE:
    python code/stage_01_scrape.py
===============================================================================
"""

import sys
import pandas as pd
from pathlib import Path
import requests
import bs4
from tqdm import tqdm
from config import (
    DEBATE_MANIFEST, RAW_TRANSCRIPTS, RAW_DIR,
    DOC_ID_COLUMN, URL_COLUMN, NOTES_COLUMN, TEXT_COLUMN,
    USER_AGENT, REQUEST_TIMEOUT, TRANSCRIPT_SELECTOR
)

MANIFEST_COLUMNS = [DOC_ID_COLUMN, URL_COLUMN, NOTES_COLUMN]


def load_manifest(manifest_path):
    """
    Load the list of debates to scrape.

    Args:
        manifest_path: Path to a CSV with doc_id, url and notes columns

    Returns:
        DataFrame with one row per debate

    Raises:
        FileNotFoundError: If the manifest doesn't exist
        ValueError: If required columns are missing
    """
    print("Loading debate manifest...")
    manifest_path = Path(manifest_path)

    if not manifest_path.exists():
        raise FileNotFoundError(
            f"Debate manifest not found at {manifest_path}\n"
            f"Create it with columns: {', '.join(MANIFEST_COLUMNS)}"
        )

    df = pd.read_csv(manifest_path, keep_default_na=False)

    missing = [c for c in [DOC_ID_COLUMN, URL_COLUMN] if c not in df.columns]
    if missing:
        raise ValueError(f"Debate manifest is missing columns: {missing}")

    # notes are free-form and optional
    if NOTES_COLUMN not in df.columns:
        df[NOTES_COLUMN] = ""

    print(f"  Loaded {len(df):,} debates")
    return df[MANIFEST_COLUMNS]


def html_to_text(html, selector=TRANSCRIPT_SELECTOR):
    """
    Pull the transcript out of a page.

    Every element matching `selector` contributes its text; the pieces are
    joined with single spaces so the whole debate becomes one string.

    Raises:
        ValueError: If nothing on the page matches `selector`
    """
    soup = bs4.BeautifulSoup(html, "html.parser")
    elements = soup.select(selector)

    if not elements:
        raise ValueError(f"No elements matching {selector!r} found in page")

    pieces = [" ".join(el.get_text(" ", strip=True).split()) for el in elements]
    return " ".join(piece for piece in pieces if piece)


def fetch_transcript(url, selector=TRANSCRIPT_SELECTOR, timeout=REQUEST_TIMEOUT):
    """Download a transcript page and return its text as one string."""
    response = requests.get(url, headers=USER_AGENT, timeout=timeout)
    response.raise_for_status()
    return html_to_text(response.text, selector)


def scrape_debates(manifest, selector=TRANSCRIPT_SELECTOR):
    """
    Fetch every debate in the manifest.

    Returns:
        DataFrame with doc_id, url, notes and text columns
    """
    records = []
    for row in tqdm(
        manifest.itertuples(index=False),
        total=len(manifest),
        desc="Scraping transcripts",
        file=sys.stdout,
    ):
        row = row._asdict()
        text = fetch_transcript(row[URL_COLUMN], selector)
        records.append({**row, TEXT_COLUMN: text})
        print(f"  {row[DOC_ID_COLUMN]}: {len(text):,} characters")

    return pd.DataFrame(records, columns=MANIFEST_COLUMNS + [TEXT_COLUMN])


def main():
    """Execute the complete Stage 1 scraping pipeline."""
    print("\n" + "="*80)
    print("STAGE 1: TRANSCRIPT SCRAPING")
    print("="*80 + "\n")

    RAW_DIR.mkdir(parents=True, exist_ok=True)

    manifest = load_manifest(DEBATE_MANIFEST)
    df = scrape_debates(manifest)

    df.to_csv(RAW_TRANSCRIPTS, index=False)
    print(f"\n  Transcripts saved to: {RAW_TRANSCRIPTS}")

    print("\n" + "="*80)
    print("SUMMARY")
    print("="*80)
    print(f"  Debates scraped: {len(df):,}")
    print(f"  Mean length: {df[TEXT_COLUMN].str.len().mean():,.0f} characters")

    print("\n" + "="*80)
    print("STAGE 1 COMPLETE")
    print("="*80 + "\n")


if __name__ == "__main__":
    main()
