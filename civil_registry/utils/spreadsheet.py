import pandas as pd
from typing import List, Dict, Any, Optional
from datetime import date, datetime
import io
import logging
import re

logger = logging.getLogger(__name__)

# Birth submission fields, in the column order the intake template uses
EXPECTED_COLUMNS = [
    'child_first_name',
    'child_last_name',
    'child_sex',
    'birth_date',
    'birth_place',
    'father_name',
    'father_national_id',
    'mother_name',
    'mother_national_id',
    'hospital_certificate_url',
]

REQUIRED_COLUMNS = [c for c in EXPECTED_COLUMNS if c != 'hospital_certificate_url']

DATE_COLUMNS = {'birth_date'}

# Header spellings seen on hospital registers
COLUMN_ALIASES = {
    'first_name': 'child_first_name',
    'child_name': 'child_first_name',
    'surname': 'child_last_name',
    'last_name': 'child_last_name',
    'sex': 'child_sex',
    'gender': 'child_sex',
    'date_of_birth': 'birth_date',
    'dob': 'birth_date',
    'place_of_birth': 'birth_place',
    'father': 'father_name',
    'fathers_name': 'father_name',
    'father_id': 'father_national_id',
    'mother': 'mother_name',
    'mothers_name': 'mother_name',
    'mother_id': 'mother_national_id',
}


def normalize_header(header: Any) -> str:
    """Lowercase a header and collapse any punctuation or whitespace into underscores."""
    text = str(header).strip().lower().replace("'", "")
    text = re.sub(r'[^a-z0-9]+', '_', text).strip('_')
    return COLUMN_ALIASES.get(text, text)


def clean_value(column: str, value: Any) -> Optional[Any]:
    """Convert one cell into the type the submission schema expects."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None

    if column in DATE_COLUMNS:
        if isinstance(value, (pd.Timestamp, datetime)):
            return value.date()
        if isinstance(value, date):
            return value
        parsed = pd.to_datetime(str(value).strip(), errors='coerce', dayfirst=True)
        return None if pd.isna(parsed) else parsed.date()

    # National IDs typed as numbers come back as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    text = str(value).strip()
    return text or None


def parse_registration_workbook(file_content: bytes) -> List[Dict[str, Any]]:
    """
    Parse every sheet of an Excel workbook into birth submission rows.

    Returns one entry per non-empty row: ``{"sheet", "row", "data"}`` where
    ``row`` is the 1-based spreadsheet row number and ``data`` holds the
    submission fields. Sheets missing a required column are skipped.
    """
    try:
        xls = pd.ExcelFile(io.BytesIO(file_content))
    except Exception as e:
        logger.error(f"Could not open workbook: {e}")
        raise ValueError("File is not a readable Excel workbook") from e

    rows: List[Dict[str, Any]] = []
    for sheet_name in xls.sheet_names:
        logger.info(f"Processing sheet: {sheet_name}")
        df = pd.read_excel(xls, sheet_name=sheet_name, header=0)
        if df.empty:
            logger.warning(f"Sheet {sheet_name} is empty, skipping")
            continue

        df.columns = [normalize_header(c) for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            logger.warning(f"Sheet {sheet_name} is missing columns {', '.join(missing)}, skipping")
            continue

        columns = [c for c in EXPECTED_COLUMNS if c in df.columns]
        df = df[columns].dropna(how='all')

        for index, series in df.iterrows():
            data = {column: clean_value(column, series[column]) for column in columns}
            rows.append({
                "sheet": sheet_name,
                # header occupies row 1
                "row": int(index) + 2,
                "data": data,
            })

        logger.info(f"Sheet {sheet_name}: {len(df)} rows parsed")

    return rows
