"""Shared fixtures for debate transcript tests."""

import pandas as pd
import pytest
import spacy


@pytest.fixture
def debate_text():
    """A short, already cleaned debate excerpt."""
    return (
        "Transcript provided by the network. "
        "HOLT: Good evening from Hofstra University. "
        "CLINTON: Thank you, Lester. Today is my granddaughter's birthday. "
        "TRUMP: Thank you, Lester. Our jobs are fleeing the country. "
        "CLINTIN: Well, let's start with jobs."
    )


@pytest.fixture
def sample_segments():
    """Pre-built segments in the order they were spoken."""
    return pd.DataFrame({
        "segment_id": [0, 1, 2],
        "speaker": ["A", "B", "A"],
        "text": ["x", "y", "z"],
    })


@pytest.fixture
def blank_nlp():
    """spaCy English pipeline without a downloaded model."""
    return spacy.blank("en")
