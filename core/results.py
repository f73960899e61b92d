"""Formatting of match results for display and export."""

from typing import Dict, Iterable, List
import pandas as pd

from config.models import MatchResult

RESULT_COLUMNS = [
    'source_id',
    'source_description',
    'match_id',
    'match_description',
    'similarity'
]

def format_similarity(value: float) -> str:
    """Render a similarity percentage with exactly two decimals."""
    return f"{round(float(value), 2):.2f}"

def assemble_results(matches: Iterable[MatchResult]) -> List[Dict[str, str]]:
    """
    Flatten match results into display rows.

    Args:
        matches: Match results in source order

    Returns:
        List[Dict[str, str]]: One row per match, keyed by RESULT_COLUMNS
    """
    return [
        {
            'source_id': match.source_id,
            'source_description': match.source_description,
            'match_id': match.match_id,
            'match_description': match.match_description,
            'similarity': format_similarity(match.similarity)
        }
        for match in matches
    ]

def results_to_dataframe(matches: Iterable[MatchResult]) -> pd.DataFrame:
    """Assemble match results into a DataFrame with a fixed column order."""
    return pd.DataFrame(assemble_results(matches), columns=RESULT_COLUMNS)
