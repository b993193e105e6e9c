"""Shared fixtures for pageaudit tests."""

from unittest.mock import MagicMock

import pytest


SAMPLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>  Fresh Garden Vegetables
        Delivered Weekly to Your Door  </title>
    <meta name="Description" content="Seasonal vegetables from local farms.">
    <meta name="keywords" content="vegetables, organic , delivery">
    <link rel="canonical" href="https://example.com/garden-box">
    <link rel="alternate" hreflang="en" href="https://example.com/garden-box">
    <link rel="alternate" hreflang="de" href="https://example.com/de/garden-box">
    <link rel="icon" href="/favicon.ico">
    <link rel="stylesheet" href="https://cdn.example.com/site.css">
    <script src="https://cdn.example.com/app.js"></script>
</head>
<body>
    <h1>Fresh Garden Vegetables</h1>
    <h2>How it works</h2>
    <p>Choose your box.</p>
    <h4>Pricing details</h4>
    <p>Fresh vegetables every week.</p>
    <a href="/about">About our farms</a>
    <a href="https://partner.example.org/recipes">click here</a>
    <a href="https://other.example.net/blog" rel="nofollow">Seasonal blog</a>
    <img src="http://example.com/box.png" alt="Vegetable box">
</body>
</html>
"""


@pytest.fixture
def sample_html():
    """A small page exercising most extractors."""
    return SAMPLE_HTML


@pytest.fixture
def sample_record(sample_html):
    """A content record dict as stored by the scraper."""
    return {
        "url": "https://example.com/garden-box",
        "user_id": "user-1",
        "html_content": sample_html,
        "headers": {
            "Content-Type": "text/html; charset=utf-8",
            "Content-Encoding": "gzip",
            "Strict-Transport-Security": "max-age=31536000",
        },
        "metadata": {},
        "favicon": "https://example.com/favicon.ico",
        "text_content": "Fresh vegetables every week.",
    }


def make_response(status_code=200, text="", headers=None):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    response.ok = 200 <= status_code < 400
    return response


@pytest.fixture
def mock_session():
    """A mock requests.Session with head/get attributes."""
    return MagicMock()


@pytest.fixture
def response_factory():
    """Factory fixture for mock responses."""
    return make_response
