"""Associated-row query engine for the Page Resolver.

Runs a caller-supplied SQL query whose first column is a page id and whose
next ``n`` columns are carried through to CSV output. The extra values are
recorded per id for the rest of the run; a later query returning the same id
replaces them.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from ..database.database_manager import DatabaseManager
from ..models.data_structures import AssociatedRow
from ..utils.error_handlers import QueryError
from ..utils.validation_utils import decode_int, decode_optional_text


logger = logging.getLogger(__name__)


class AssociatedRowQueryEngine:
    """Executes id-yielding queries and keeps their extra column values.

    Attributes:
        db: Database manager the queries run against.

    Example:
        >>> engine = AssociatedRowQueryEngine(db)
        >>> engine.run_query("SELECT uid, title FROM pages WHERE doktype = 1", 1)
        [12, 15]
        >>> engine.values_for(12)
        ['Home']
    """

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db
        self._rows: Dict[int, AssociatedRow] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def run_query(self, sql: str, n_fields: int = 0) -> List[int]:
        """Run a query and record the extra columns of each row.

        Args:
            sql: Query text. The first column must be the page id, followed by
                exactly ``n_fields`` columns.
            n_fields: Number of extra columns after the id. With 0 the ids are
                returned and nothing is recorded.

        Returns:
            Page ids in row order, duplicates included.

        Raises:
            ValueError: If n_fields is negative.
            QueryError: If the query fails or a row does not match the
                projection. Values recorded for earlier rows of the same call
                are kept.
        """
        if n_fields < 0:
            raise ValueError(f"n_fields must be non-negative, got {n_fields}")

        try:
            rows = self.db.fetch_rows(sql)
        except SQLAlchemyError as e:
            raise QueryError(
                message=f"cannot execute argument query: {e}",
                original_error=e,
            ) from e

        uids: List[int] = []
        for row_number, row in enumerate(rows, start=1):
            uid, values = self._decode_row(row, row_number, n_fields)
            if n_fields > 0:
                self._rows[uid] = AssociatedRow(uid=uid, values=values)
            uids.append(uid)

        logger.info(
            f"Argument query returned {len(uids)} ids"
            + (f" with {n_fields} associated fields" if n_fields else "")
        )
        return uids

    @staticmethod
    def _decode_row(
        row: Sequence[Any], row_number: int, n_fields: int
    ) -> Tuple[int, Tuple[str, ...]]:
        """Split a row into its id and associated values.

        Raises:
            QueryError: If the row width is not n_fields + 1 or the id is not
                an integer.
        """
        expected = n_fields + 1
        if len(row) != expected:
            raise QueryError(
                message=(
                    f"cannot scan query row {row_number}: expected {expected} "
                    f"columns, got {len(row)}"
                ),
                row_number=row_number,
            )
        try:
            uid = decode_int(row[0])
            values = tuple(decode_optional_text(value) for value in row[1:])
        except (TypeError, ValueError, UnicodeDecodeError) as e:
            raise QueryError(
                message=f"cannot scan query row {row_number}: {e}",
                row_number=row_number,
                original_error=e,
            ) from e
        return uid, values

    def values_for(self, uid: int) -> List[str]:
        """Returns the recorded values for ``uid``, or an empty list."""
        row = self._rows.get(uid)
        return list(row.values) if row else []

    def get(self, uid: int) -> Optional[AssociatedRow]:
        return self._rows.get(uid)
