"""
Loading and parsing of the reference pitch registry.

The registry is line oriented: a header line followed by one pitch per
line, optionally wrapped in double quotes. A remote or local file can be
configured; the built-in registry is always available as a fallback.
"""

from pathlib import Path
from typing import List, Optional, Tuple
import requests

from util.logging import logger
from .config import CORPUS_FETCH_TIMEOUT_SEC, MIN_CORPUS_TEXT_LENGTH

BUILTIN_CORPUS = """pitch
Uber for dog walking in urban areas
Airbnb for high-end photography studios
SaaS platform for automated tax filing for freelancers
Social network for vintage car collectors
Marketplace for sustainable building materials
AI-powered coding assistant for legacy systems
On-demand drone delivery for medical supplies in rural areas
Blockchain-based voting system for corporate governance
Subscription box for rare succulents and cacti
Direct-to-consumer sustainable furniture brand"""


def _strip_quotes(line: str) -> str:
    if line.startswith('"'):
        line = line[1:]
    if line.endswith('"'):
        line = line[:-1]
    return line.strip()


def parse_corpus(raw: str, min_length: int = MIN_CORPUS_TEXT_LENGTH) -> List[str]:
    """
    Parse registry text into reference pitches.

    Args:
        raw: Registry contents, first line is a header
        min_length: Lines shorter than this after cleanup are dropped

    Returns:
        Cleaned pitches in file order
    """
    lines = raw.splitlines()[1:]
    texts = []
    for line in lines:
        text = _strip_quotes(line.strip())
        if len(text) < min_length:
            continue
        texts.append(text)
    return texts


def fetch_corpus_text(url: str, timeout: float = CORPUS_FETCH_TIMEOUT_SEC) -> str:
    """Fetch registry text over HTTP. Raises requests exceptions on failure."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def load_corpus_text(url: Optional[str] = None, path: Optional[Path] = None) -> Tuple[str, str]:
    """
    Load registry text from the configured source, falling back to the
    built-in registry.

    Returns:
        Tuple of (raw text, origin) where origin is the URL, the file path
        or "builtin"
    """
    if url:
        try:
            raw = fetch_corpus_text(url)
            logger.log_operation("corpus.load", "success", details={"origin": url})
            return raw, url
        except requests.RequestException as e:
            logger.log_operation("corpus.load", "fallback", details={"origin": url, "error": str(e)})

    if path:
        try:
            raw = Path(path).read_text(encoding="utf-8")
            logger.log_operation("corpus.load", "success", details={"origin": str(path)})
            return raw, str(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.log_operation("corpus.load", "fallback", details={"origin": str(path), "error": str(e)})

    return BUILTIN_CORPUS, "builtin"
