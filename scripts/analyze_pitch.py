#!/usr/bin/env python3
"""
Command-line pitch analysis.

Builds the corpus index, printing progress as it goes, then scores each
pitch given on the command line and prints the results as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from noveltymap.core.config import CORPUS_URL, get_assessor, get_corpus_path, get_embedding_provider
from noveltymap.core.corpus_source import load_corpus_text, parse_corpus
from noveltymap.core.errors import NoveltyMapError
from noveltymap.core.ingestion import build_corpus_index
from noveltymap.core.progress import ProgressStream
from noveltymap.core.query_engine import QueryEngine


async def print_progress(progress: ProgressStream):
    async for event in progress.subscribe():
        print(f"[{event.phase}] {event.percent:3d}% {event.message}", file=sys.stderr)


async def run(args) -> int:
    embedder = get_embedding_provider(args.embed_provider)
    assessor = get_assessor(args.assessment_provider)

    corpus_path = Path(args.corpus_file) if args.corpus_file else get_corpus_path()
    raw, origin = load_corpus_text(args.corpus_url, corpus_path)
    texts = parse_corpus(raw)
    print(f"Loaded {len(texts)} reference pitches from {origin}", file=sys.stderr)

    progress = ProgressStream()
    printer = asyncio.create_task(print_progress(progress))
    await asyncio.sleep(0)  # let the printer subscribe before publishing starts

    try:
        index, report = await build_corpus_index(texts, embedder, progress)
    finally:
        progress.close()
        await printer

    print(f"Indexed {report.indexed} of {report.attempted} pitches ({report.failed} failed)", file=sys.stderr)

    engine = QueryEngine(index, embedder, assessor)
    exit_code = 0
    results = []
    for pitch in args.pitches:
        try:
            result = await engine.query(pitch)
        except NoveltyMapError as e:
            print(f"ERROR: {pitch[:40]!r}: {e}", file=sys.stderr)
            exit_code = 1
            continue
        results.append({"pitch": pitch, **result.to_dict()})

    if args.points:
        print(json.dumps({"corpus": index.points(), "results": results}, indent=2))
    else:
        print(json.dumps(results, indent=2))
    return exit_code


def main():
    parser = argparse.ArgumentParser(
        description="Score startup pitches for novelty against a reference registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "A ride-sharing app for walking dogs in cities"
  %(prog)s --corpus-file registry.csv --points "Marketplace for reclaimed timber"

Environment variables:
- EMBED_PROVIDER=sentence_transformers|hash (hash is lexical, for tests only)
- ASSESSMENT_PROVIDER=rules|ollama
- CORPUS_URL / CORPUS_PATH (default: built-in registry)
        """
    )

    parser.add_argument("pitches", nargs="+", help="Pitch texts to analyze (min 15 chars each)")
    parser.add_argument("--corpus-url", default=CORPUS_URL, help="Fetch the registry from this URL")
    parser.add_argument("--corpus-file", help="Read the registry from this file")
    parser.add_argument("--embed-provider", choices=["sentence_transformers", "hash"],
                        help="Embedding provider (default: EMBED_PROVIDER); "
                             "hash matches words only and gives no semantic similarity")
    parser.add_argument("--assessment-provider", choices=["rules", "ollama"],
                        help="Assessment provider (default: ASSESSMENT_PROVIDER)")
    parser.add_argument("--points", action="store_true",
                        help="Include projected corpus points in the output")

    args = parser.parse_args()
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
