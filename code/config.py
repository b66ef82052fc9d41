# config.py
import pandas as pd
from pathlib import Path
import pickle


# ============================================
# BASE PATHS
# ============================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
CODE_DIR = PROJECT_ROOT / "code"

# ============================================
# RAW DATA PATHS
# ============================================
RAW_DIR = DATA_DIR / "01_raw"

# One row per debate: doc_id, url, notes
DEBATE_MANIFEST = RAW_DIR / "debates.csv"

# Scraped transcripts, one pre-joined string per debate
RAW_TRANSCRIPTS = RAW_DIR / "raw_transcripts.csv"

# Optional sentiment/topic dictionary: category, term
DICTIONARY_FILE = RAW_DIR / "dictionary.csv"

# ============================================
# PROCESSED DATA PATHS
# ============================================
SEGMENTED_DIR = DATA_DIR / "02_segmented"
TOKENS_DIR = DATA_DIR / "03_tokens"
FEATURES_DIR = DATA_DIR / "04_features"

SEGMENTS_FILE = SEGMENTED_DIR / "segments.csv"
SPEAKER_TEXTS = SEGMENTED_DIR / "speaker_texts.csv"

TOKENIZED_SPEAKERS = TOKENS_DIR / "tokenized_speakers.pkl"

DFM_FILE = FEATURES_DIR / "dfm.pkl"
WORD_COUNTS = FEATURES_DIR / "word_counts.csv"
TOP_FEATURES = FEATURES_DIR / "top_features.csv"
DICTIONARY_SCORES = FEATURES_DIR / "dictionary_scores.csv"

# ============================================
# DATA COLUMN NAMES
# ============================================
DOC_ID_COLUMN = "doc_id"
URL_COLUMN = "url"
NOTES_COLUMN = "notes"
TEXT_COLUMN = "text"
SPEAKER_COLUMN = "speaker"
SEGMENT_ID_COLUMN = "segment_id"
TOKENS_COLUMN = "tokens"

# ============================================
# SCRAPING PARAMETERS
# ============================================
# use a standard browser agent, transcript sites reject the requests default
USER_AGENT = {"User-Agent": "Mozilla/5.0"}
REQUEST_TIMEOUT = 10

# CSS selector for the transcript body; paragraphs cover most news sites
TRANSCRIPT_SELECTOR = "p"

# ============================================
# SEGMENTATION PARAMETERS
# ============================================
# Words that open a two-word label, e.g. "UNIDENTIFIED MALE:". Other
# upper-case words before a label are ordinary text, not part of it.
LABEL_QUALIFIERS = ["UNIDENTIFIED", "UNKNOWN"]

# All-caps label, colon, then whitespace. Must stay case-sensitive:
# "Mr:" or "Today:" mid-sentence are not speaker changes.
MARKER_PATTERN = (
    r"\b((?:(?:" + "|".join(LABEL_QUALIFIERS) + r") )?"
    r"[A-Z][A-Z_'\-]+):(?=\s)"
)

# Stage directions inserted by transcribers
STAGE_DIRECTION_PATTERN = r"[\(\[]\s*(?:[A-Z][A-Z ,\-']*|[Ii]naudible|[Cc]rosstalk|[Ll]aughter|[Aa]pplause)\s*[\)\]]"

# Known misspellings of speaker labels in the transcripts
LABEL_CORRECTIONS = {
    "CLINTIN": "CLINTON",
    "TRUMPF": "TRUMP",
    "TRUMO": "TRUMP",
}

# Moderators, panelists and audience: everyone who is not a candidate
EXCLUDED_SPEAKERS = {
    "HOLT",
    "RADDATZ",
    "COOPER",
    "WALLACE",
    "QUESTION",
    "AUDIENCE",
    "MODERATOR",
    "UNIDENTIFIED",
    "UNIDENTIFIED MALE",
    "UNIDENTIFIED FEMALE",
    "UNKNOWN",
}

# ============================================
# TEXT CLEANING / TOKENIZATION PARAMETERS
# ============================================
SPACY_MODEL = "en_core_web_sm"

# Remove stopwords?
REMOVE_STOPWORDS = True

# Lowercase text?
LOWERCASE = True

# ============================================
# FEATURE PARAMETERS
# ============================================
# "count" for a raw document-feature matrix, "tfidf" for weighted
DFM_WEIGHTING = "count"
MIN_DF = 1
MAX_NGRAM = 1
TOP_N_FEATURES = 20


def save_pickle(obj, filepath):
    """Save object to pickle file"""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'wb') as f:
        pickle.dump(obj, f)
    print(f"Saved to {filepath}")


def load_pickle(filepath):
    """Load object from pickle file"""
    with open(filepath, 'rb') as f:
        return pickle.load(f)

def create_sparse_dataframe(X, index, feature_names):
    """Create sparse DataFrame from scipy sparse matrix"""
    return pd.DataFrame.sparse.from_spmatrix(
        X,
        index=index,
        columns=feature_names
    )
