"""Reading records from spreadsheets and writing match results back out."""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging
import pandas as pd

from core.matcher import DescriptionMatcher
from core.preprocessor import CellPreprocessor
from core.results import results_to_dataframe
from config.models import ExtractionConfig, MatchConfig, MatchResult, Record

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {'.xlsx', '.xlsm', '.xls'}
CSV_SUFFIXES = {'.csv'}

_cell = CellPreprocessor()

def locate_columns(
    columns: Iterable[Any],
    config: Optional[ExtractionConfig] = None
) -> Tuple[Any, Any]:
    """
    Find the identifier and description columns among sheet headers.

    Args:
        columns: Header values of the sheet
        config: Extraction configuration

    Returns:
        Tuple: The (id, description) header values as they appear in the sheet

    Raises:
        ValueError: If either header cannot be found
    """
    config = config or ExtractionConfig()
    columns = list(columns)

    def find(wanted: str) -> Any:
        for column in columns:
            name = _cell.process(column)
            if name == wanted or (
                config.case_insensitive and name.lower() == wanted.lower()
            ):
                return column
        raise ValueError(
            f"Column '{wanted}' not found; available columns: "
            f"{', '.join(_cell.process(c) for c in columns) or '(none)'}"
        )

    return find(config.id_column), find(config.description_column)

def records_from_dataframe(
    df: pd.DataFrame,
    config: Optional[ExtractionConfig] = None
) -> List[Record]:
    """
    Extract records from a DataFrame, dropping rows missing either field.

    Args:
        df: Sheet contents with a header row
        config: Extraction configuration

    Returns:
        List[Record]: Usable records in row order
    """
    id_column, description_column = locate_columns(df.columns, config)

    records = []
    skipped = 0
    for record_id, description in zip(df[id_column], df[description_column]):
        record_id = _cell.process(record_id)
        description = _cell.process(description)
        if record_id and description:
            records.append(Record(id=record_id, description=description))
        else:
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} rows missing an id or description")

    return records

def records_from_rows(
    rows: Sequence[Union[Dict[str, Any], Sequence[Any]]],
    config: Optional[ExtractionConfig] = None
) -> List[Record]:
    """
    Extract records from row data as handed over by a live workbook range.

    Rows are either dicts keyed by header, or lists of cell values whose
    first row is the header.
    """
    if not rows:
        return []

    if isinstance(rows[0], dict):
        df = pd.DataFrame(list(rows))
    else:
        header, *body = rows
        df = pd.DataFrame([list(row) for row in body], columns=list(header))

    return records_from_dataframe(df, config)

def read_records(
    path: Union[str, Path],
    config: Optional[ExtractionConfig] = None
) -> List[Record]:
    """
    Read records from the first sheet of a workbook or from a CSV file.

    Args:
        path: Spreadsheet file
        config: Extraction configuration

    Returns:
        List[Record]: Usable records in row order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: For unsupported file types or missing headers
    """
    config = config or ExtractionConfig()
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Spreadsheet not found: {path}")

    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=config.sheet_name, dtype=str)
    elif suffix in CSV_SUFFIXES:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        raise ValueError(f"Unsupported spreadsheet type '{suffix}' for {path.name}")

    logger.info(f"Parsed {len(df)} rows from {path.name}")

    try:
        return records_from_dataframe(df, config)
    except ValueError as e:
        raise ValueError(f"{path.name}: {e}") from e

def write_results(
    matches: Iterable[MatchResult],
    path: Union[str, Path]
) -> Path:
    """
    Write match results to an Excel or CSV file.

    Args:
        matches: Match results to write
        path: Output file (.xlsx or .csv)

    Returns:
        Path: The written file
    """
    path = Path(path)
    df = results_to_dataframe(matches)
    suffix = path.suffix.lower()

    if suffix == '.xlsx':
        with pd.ExcelWriter(
            path,
            engine='xlsxwriter',
            engine_kwargs={'options': {'strings_to_urls': False}}
        ) as writer:
            df.to_excel(writer, index=False)
    elif suffix in CSV_SUFFIXES:
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported output type '{suffix}' for {path.name}")

    logger.info(f"Wrote {len(df)} matches to {path}")
    return path

def compare_files(
    file1: Union[str, Path],
    file2: Union[str, Path],
    output_file: Optional[Union[str, Path]] = None,
    config: Optional[MatchConfig] = None,
    extraction: Optional[ExtractionConfig] = None
) -> List[MatchResult]:
    """
    Match every record of one spreadsheet against the records of another.

    Args:
        file1: Spreadsheet with the source records
        file2: Spreadsheet with the candidate records
        output_file: Optional file to write the results to
        config: Matching configuration
        extraction: Column configuration shared by both files

    Returns:
        List[MatchResult]: Best match per source record
    """
    source = read_records(file1, extraction)
    candidates = read_records(file2, extraction)

    if not source or not candidates:
        logger.warning(
            f"Nothing to compare: {len(source)} usable records in "
            f"{Path(file1).name}, {len(candidates)} in {Path(file2).name}"
        )
        return []

    results = DescriptionMatcher(config).match_records(source, candidates)

    if output_file:
        write_results(results, output_file)

    return results

def find_duplicates(
    file: Union[str, Path],
    output_file: Optional[Union[str, Path]] = None,
    config: Optional[MatchConfig] = None,
    extraction: Optional[ExtractionConfig] = None
) -> List[MatchResult]:
    """
    Match the records of one spreadsheet against each other.

    Args:
        file: Spreadsheet with the records
        output_file: Optional file to write the results to
        config: Matching configuration (self-exclusion defaults to row position)
        extraction: Column configuration

    Returns:
        List[MatchResult]: Most similar other record per record
    """
    records = read_records(file, extraction)

    if len(records) < 2:
        logger.warning(
            f"Need at least 2 usable records to compare, "
            f"found {len(records)} in {Path(file).name}"
        )
        return []

    results = DescriptionMatcher(config).match_records(records)

    if output_file:
        write_results(results, output_file)

    return results
