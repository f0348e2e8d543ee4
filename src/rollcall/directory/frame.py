"""
In-memory directory backed by a pandas DataFrame.

Used for offline runs against a CSV export of the user directory and as
a test double. Matching follows AD semantics: case-insensitive by
default, exact or prefix ("value*") per attribute.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import logging

import pandas as pd

from rollcall.directory.base import DirectoryFilter, DirectoryRecord, NamePattern
from rollcall.errors import DirectoryQueryError, DirectoryUnavailable

logger = logging.getLogger(__name__)

RECORD_COLUMNS = list(DirectoryRecord.__dataclass_fields__)

# Common export column names -> record field
COLUMN_ALIASES: Dict[str, str] = {
    "samaccountname": "account_name",
    "username": "account_name",
    "givenname": "given_name",
    "first_name": "given_name",
    "sn": "surname",
    "last_name": "surname",
    "email": "mail",
}


class DataFrameDirectory:
    """
    DirectoryClient over a DataFrame of user records.

    Example:
        >>> directory = DataFrameDirectory.from_csv("data/directory_users.csv")
        >>> directory.find_users(DirectoryFilter(NamePattern.exact("Smith"),
        ...                                      NamePattern.starts_with("J")))
    """

    def __init__(self, users: pd.DataFrame, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self.users = self._normalize(users)
        logger.debug(f"DataFrameDirectory loaded with {len(self.users):,} users")

    @classmethod
    def from_csv(cls, path: str | Path, case_sensitive: bool = False) -> "DataFrameDirectory":
        """Load a directory export from CSV."""
        path = Path(path)
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        except FileNotFoundError as e:
            raise DirectoryUnavailable(
                f"Directory export not found: {path} (set ROLLCALL_CSV_PATH to the users CSV)"
            ) from e
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DirectoryUnavailable(f"Directory export {path} is unreadable: {e}") from e
        logger.info(f"Loaded {len(df):,} directory users from {path}")
        return cls(df, case_sensitive=case_sensitive)

    @classmethod
    def from_records(cls, records: List[DirectoryRecord], case_sensitive: bool = False) -> "DataFrameDirectory":
        df = pd.DataFrame([r.to_dict() for r in records], columns=RECORD_COLUMNS)
        return cls(df, case_sensitive=case_sensitive)

    @staticmethod
    def _normalize(users: pd.DataFrame) -> pd.DataFrame:
        df = users.copy()
        renames = {}
        for column in df.columns:
            key = str(column).strip().lower()
            target = COLUMN_ALIASES.get(key, key)
            if target in RECORD_COLUMNS and target not in renames.values():
                renames[column] = target
        df = df.rename(columns=renames)

        missing = {"given_name", "surname"} - set(df.columns)
        if missing:
            raise DirectoryQueryError(f"Directory data is missing columns: {sorted(missing)}")

        for column in RECORD_COLUMNS:
            if column not in df.columns:
                df[column] = ""
        return df[RECORD_COLUMNS].fillna("").astype(str).reset_index(drop=True)

    def _mask(self, column: str, pattern: NamePattern) -> pd.Series:
        values = self.users[column]
        target = pattern.value
        if not self.case_sensitive:
            values = values.str.casefold()
            target = target.casefold()
        if pattern.prefix:
            return values.str.startswith(target)
        return values == target

    def find_users(self, query: DirectoryFilter) -> List[DirectoryRecord]:
        """Return users matching both the surname and given-name patterns."""
        mask = self._mask("surname", query.surname) & self._mask("given_name", query.given_name)
        matches = self.users[mask]
        logger.debug(f"{query} -> {len(matches)} record(s)")
        return [DirectoryRecord(**row) for row in matches.to_dict(orient="records")]

    def __len__(self) -> int:
        return len(self.users)

    def __repr__(self) -> str:
        return f"DataFrameDirectory({len(self):,} users)"
