"""Example usage of the description matching system with Excel files."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from config.models import ExclusionPolicy, MatchConfig, MatchResult
from core import loader


def create_matcher_config(
    policy: Optional[str] = None,
    worker_threads: int = 1,
    log_significant_terms: int = 10
) -> MatchConfig:
    """
    Create a configuration for description matching.

    Args:
        policy: Exclusion policy name ('none', 'exclude_same_index',
            'exclude_same_id'); None picks the default for the mode
        worker_threads: Threads used for scoring (-1 for CPU count)
        log_significant_terms: Number of top terms to log

    Returns:
        MatchConfig: Matching configuration
    """
    return MatchConfig(
        exclusion_policy=ExclusionPolicy.coerce(policy) if policy else None,
        worker_threads=worker_threads,
        log_significant_terms=log_significant_terms
    )

def match_spreadsheets(
    base_file: Path,
    match_file: Optional[Path] = None,
    output_file: Optional[Path] = None,
    policy: Optional[str] = None
) -> List[MatchResult]:
    """
    Compare two spreadsheets, or find near-duplicates within one.

    Args:
        base_file: Path to base spreadsheet
        match_file: Optional path to spreadsheet to match against
        output_file: Optional path for output file
        policy: Optional exclusion policy name

    Returns:
        List[MatchResult]: Match results
    """
    try:
        # Configure logging
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )

        config = create_matcher_config(policy=policy)

        if match_file is None:
            logging.info(f"Looking for duplicates in: {base_file}")
            results = loader.find_duplicates(base_file, output_file, config)
        else:
            logging.info(f"Comparing {base_file} with {match_file}")
            results = loader.compare_files(base_file, match_file, output_file, config)

        # Log matching statistics
        logging.info("Matching Statistics:")
        logging.info(f"Matched records: {len(results)}")
        if results:
            avg_score = sum(r.similarity for r in results) / len(results)
            logging.info(f"Average similarity: {avg_score:.2f}%")

        return results

    except Exception as e:
        logging.error(f"An error occurred: {e}", exc_info=True)
        raise

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments for the example."""
    parser = argparse.ArgumentParser(
        description='Match spreadsheet records by description similarity'
    )
    parser.add_argument('base_file', type=Path,
                      help='Spreadsheet with the records to match')
    parser.add_argument('match_file', type=Path, nargs='?',
                      help='Spreadsheet to match against; omit to find duplicates in base_file')
    parser.add_argument('-o', '--output', type=Path, dest='output_file',
                      help='Write the results to this .xlsx or .csv file')
    parser.add_argument('--policy', choices=[p.value for p in ExclusionPolicy],
                      help='Which candidates a record may never match')
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> List[MatchResult]:
    args = parse_args(argv)
    return match_spreadsheets(
        base_file=args.base_file,
        match_file=args.match_file,
        output_file=args.output_file,
        policy=args.policy
    )

if __name__ == "__main__":
    # matcher_example.py stories.xlsx [other.xlsx] [-o results.xlsx] [--policy exclude_same_id]
    main()
