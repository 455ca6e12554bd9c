"""
Runtime configuration for the novelty map.
All values come from environment variables with local-first defaults.
"""

import os
from pathlib import Path

# Debug flag (docs endpoints, verbose logging)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Embedding configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "sentence_transformers")  # sentence_transformers|hash
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))

# Corpus source configuration
CORPUS_URL = os.getenv("CORPUS_URL")  # Optional remote CSV, one pitch per line
CORPUS_PATH = os.getenv("CORPUS_PATH")  # Optional local CSV
CORPUS_FETCH_TIMEOUT_SEC = float(os.getenv("CORPUS_FETCH_TIMEOUT_SEC", "10"))
MIN_CORPUS_TEXT_LENGTH = int(os.getenv("MIN_CORPUS_TEXT_LENGTH", "5"))

# Query configuration
MIN_QUERY_LENGTH = int(os.getenv("MIN_QUERY_LENGTH", "15"))

# Scales the averaged half-sums of a unit vector onto the [-100, 100] map.
# Empirical: 384-D MiniLM embeddings average around +-0.05 per component.
PROJECTION_GAIN = float(os.getenv("PROJECTION_GAIN", "400.0"))
MAP_EXTENT = 100.0

# Assessment configuration
ASSESSMENT_PROVIDER = os.getenv("ASSESSMENT_PROVIDER", "rules")  # rules|ollama
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2:latest")
OLLAMA_HOST = os.getenv("OLLAMA_HOST")  # None lets the client use its default

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_embedding_provider(provider: str = None):
    """Get configured embedding provider implementation."""
    provider = (provider or EMBED_PROVIDER).lower()

    if provider == "hash":
        from noveltymap.vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=EMBED_DIM)
    elif provider == "sentence_transformers":
        from noveltymap.vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(EMBED_MODEL_NAME)
    else:
        raise ValueError(f"Unknown EMBED_PROVIDER: {provider}")


def get_assessor(provider: str = None):
    """Get the tiered assessor; the rule table is always the fallback tier."""
    from noveltymap.agents.assessor import RuleBasedAssessor, TieredAssessor

    provider = (provider or ASSESSMENT_PROVIDER).lower()
    primary = None
    if provider == "ollama":
        from noveltymap.agents.ollama_assessor import OllamaAssessor
        primary = OllamaAssessor(OLLAMA_MODEL, host=OLLAMA_HOST)

    return TieredAssessor(primary=primary, fallback=RuleBasedAssessor())


def get_corpus_path():
    """Local corpus file, if one is configured and exists."""
    if CORPUS_PATH and Path(CORPUS_PATH).is_file():
        return Path(CORPUS_PATH)
    return None


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["sentence_transformers", "hash"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if ASSESSMENT_PROVIDER not in ["rules", "ollama"]:
        issues.append(f"Invalid ASSESSMENT_PROVIDER: {ASSESSMENT_PROVIDER}")

    if EMBED_DIM < 2:
        issues.append("EMBED_DIM must be >= 2")

    if MIN_CORPUS_TEXT_LENGTH < 1:
        issues.append("MIN_CORPUS_TEXT_LENGTH must be >= 1")

    if MIN_QUERY_LENGTH < 1:
        issues.append("MIN_QUERY_LENGTH must be >= 1")

    if PROJECTION_GAIN <= 0:
        issues.append("PROJECTION_GAIN must be > 0")

    if CORPUS_PATH and not Path(CORPUS_PATH).is_file():
        issues.append(f"CORPUS_PATH does not exist: {CORPUS_PATH}")

    return issues
