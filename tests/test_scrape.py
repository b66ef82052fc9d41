"""Tests for Stage 1 transcript scraping (network mocked)."""

from unittest.mock import patch, MagicMock

import pandas as pd
import pytest
import requests

from stage_01_scrape import (
    load_manifest,
    html_to_text,
    fetch_transcript,
    scrape_debates,
)

PAGE = """
<html><body>
  <h1>First Presidential Debate</h1>
  <div class="transcript">
    <p>HOLT: Good evening.</p>
    <p>CLINTON: Thank you,
       Lester.</p>
    <p></p>
    <p>TRUMP: Thank <b>you</b>.</p>
  </div>
</body></html>
"""


def _mock_response(text, status_error=None):
    response = MagicMock()
    response.text = text
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


def test_html_to_text_joins_paragraphs():
    """Paragraphs become one single-spaced string."""
    text = html_to_text(PAGE)
    assert text == "HOLT: Good evening. CLINTON: Thank you, Lester. TRUMP: Thank you ."


def test_html_to_text_custom_selector():
    text = html_to_text(PAGE, "h1")
    assert text == "First Presidential Debate"


def test_html_to_text_no_match():
    with pytest.raises(ValueError, match="No elements matching"):
        html_to_text(PAGE, "article")


def test_fetch_transcript_sends_user_agent():
    with patch("stage_01_scrape.requests.get", return_value=_mock_response(PAGE)) as mock_get:
        text = fetch_transcript("https://example.com/debate")
    assert text.startswith("HOLT: Good evening.")
    _, kwargs = mock_get.call_args
    assert kwargs["headers"] == {"User-Agent": "Mozilla/5.0"}
    assert "timeout" in kwargs


def test_fetch_transcript_http_error():
    """HTTP failures propagate."""
    error = requests.HTTPError("404 Client Error")
    with patch("stage_01_scrape.requests.get", return_value=_mock_response("", error)):
        with pytest.raises(requests.HTTPError):
            fetch_transcript("https://example.com/missing")


def test_load_manifest(tmp_path):
    path = tmp_path / "debates.csv"
    pd.DataFrame({
        "doc_id": ["debate1"],
        "url": ["https://example.com/1"],
        "notes": ["Hofstra"],
    }).to_csv(path, index=False)
    df = load_manifest(path)
    assert list(df.columns) == ["doc_id", "url", "notes"]
    assert df["notes"].iloc[0] == "Hofstra"


def test_load_manifest_notes_optional(tmp_path):
    path = tmp_path / "debates.csv"
    pd.DataFrame({"doc_id": ["d"], "url": ["u"]}).to_csv(path, index=False)
    df = load_manifest(path)
    assert df["notes"].iloc[0] == ""


def test_load_manifest_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_manifest(tmp_path / "nope.csv")


def test_load_manifest_missing_columns(tmp_path):
    path = tmp_path / "debates.csv"
    pd.DataFrame({"doc_id": ["d"]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="url"):
        load_manifest(path)


def test_scrape_debates():
    manifest = pd.DataFrame({
        "doc_id": ["debate1", "debate2"],
        "url": ["https://example.com/1", "https://example.com/2"],
        "notes": ["", "town hall"],
    })
    with patch("stage_01_scrape.fetch_transcript", side_effect=["HOLT: a", "COOPER: b"]):
        df = scrape_debates(manifest)
    assert list(df.columns) == ["doc_id", "url", "notes", "text"]
    assert list(df["text"]) == ["HOLT: a", "COOPER: b"]
    assert df["notes"].iloc[1] == "town hall"
