# research-landscape/main.py

import argparse
import logging

from landscape import config
from landscape.corpus import load_corpus_csv, simulate_corpus
from landscape.errors import LandscapeError
from landscape.openalex import fetch_openalex_corpus
from landscape.pipeline import run_pipeline


def load_records(args):
    if args.input:
        print(f"\n📂 Loading corpus from {args.input}...")
        return load_corpus_csv(args.input)
    if args.openalex:
        print(f"\n🔍 Fetching OpenAlex works for '{args.openalex}'...")
        return fetch_openalex_corpus(args.openalex, max_results=args.max_results, mailto=args.mailto)
    print(f"\n🎲 Simulating {args.papers} papers (seed {args.seed})...")
    return simulate_corpus(n_papers=args.papers, seed=args.seed)


def run(args):
    """Main pipeline execution function"""
    print("🚀 Starting research landscape pipeline...")

    try:
        records = load_records(args)
    except LandscapeError as e:
        print(f"❌ Could not load a corpus: {e}")
        return None

    result = run_pipeline(
        records,
        output_dir=args.output_dir,
        min_cooccurrence=args.min_cooccurrence,
        min_degree=args.min_degree,
        top_k_yearly=args.top_k_yearly,
        top_k_decadal=args.top_k_decadal,
        seed=args.seed,
        show=args.show,
    )

    for name, path in result.outputs.items():
        print(f"💾 {name}: {path}")
    if result.skipped:
        print(f"\n⚠️ Skipped: {', '.join(result.skipped)}")
    print("\n✅ Pipeline completed successfully!")
    return result


def build_parser():
    parser = argparse.ArgumentParser(description="Keyword co-occurrence network and thematic map")
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--input', help="CSV with paper_id/year/keyword rows or a Keywords column")
    source.add_argument('--openalex', metavar='QUERY', help="Fetch the corpus from OpenAlex")
    parser.add_argument('--max-results', type=int, default=config.OPENALEX_MAX_RESULTS)
    parser.add_argument('--mailto', help="Contact address for the OpenAlex polite pool")
    parser.add_argument('--papers', type=int, default=config.N_PAPERS, help="Papers to simulate")
    parser.add_argument('--seed', type=int, default=config.RANDOM_SEED)
    parser.add_argument('--min-cooccurrence', type=int, default=config.MIN_COOCCURRENCE)
    parser.add_argument('--min-degree', type=int, default=config.MIN_DEGREE)
    parser.add_argument('--top-k-yearly', type=int, default=config.TOP_K_YEARLY)
    parser.add_argument('--top-k-decadal', type=int, default=config.TOP_K_DECADAL)
    parser.add_argument('--output-dir', default=config.OUTPUT_DIR)
    parser.add_argument('--show', action='store_true', help="Open figures as they are built")
    parser.add_argument('--verbose', action='store_true', help="Debug logging")
    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    run(args)
