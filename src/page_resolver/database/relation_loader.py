"""
Relation loader for the Page Resolver.

Reads the pages and domains relations through a DatabaseManager, decodes the
driver rows into PageRow / DomainRow values, and builds the HierarchyIndex.
A failure at any point raises LoadError and no index is returned.
"""

import logging
from typing import Any, List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from ..models.data_structures import DomainRow, PageRow
from ..processing.hierarchy_index import HierarchyIndex, build_index
from ..utils.config_loader import DEFAULT_DOMAINS_QUERY, DEFAULT_PAGES_QUERY
from ..utils.error_handlers import LoadError
from ..utils.validation_utils import (
    check_row_width,
    decode_flag,
    decode_int,
    decode_text,
)
from .database_manager import DatabaseManager


logger = logging.getLogger(__name__)


PAGES_RELATION = "pages"
DOMAINS_RELATION = "domains"


def decode_page_rows(rows: Sequence[Sequence[Any]]) -> List[PageRow]:
    """
    Decode raw ``(uid, pid, is_root)`` rows.

    Args:
        rows: Row tuples from the pages query.

    Returns:
        Decoded PageRow list in input order.

    Raises:
        LoadError: If a row has the wrong width or a column cannot be decoded.
    """
    decoded: List[PageRow] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            check_row_width(row, 3)
            decoded.append(
                PageRow(
                    uid=decode_int(row[0]),
                    pid=decode_int(row[1]),
                    is_root=decode_flag(row[2]),
                )
            )
        except (TypeError, ValueError, UnicodeDecodeError) as e:
            raise LoadError(
                message=f"cannot read pages row {row_number}: {e}",
                relation=PAGES_RELATION,
                row_number=row_number,
                original_error=e,
            ) from e
    return decoded


def decode_domain_rows(rows: Sequence[Sequence[Any]]) -> List[DomainRow]:
    """
    Decode raw ``(root_id, domain_name, forced)`` rows, keeping their order.

    Args:
        rows: Row tuples from the domains query, in priority order.

    Returns:
        Decoded DomainRow list in input order.

    Raises:
        LoadError: If a row has the wrong width or a column cannot be decoded.
    """
    decoded: List[DomainRow] = []
    for row_number, row in enumerate(rows, start=1):
        try:
            check_row_width(row, 3)
            decoded.append(
                DomainRow(
                    root_id=decode_int(row[0]),
                    domain_name=decode_text(row[1]),
                    forced=decode_flag(row[2]),
                )
            )
        except (TypeError, ValueError, UnicodeDecodeError) as e:
            raise LoadError(
                message=f"cannot read domains row {row_number}: {e}",
                relation=DOMAINS_RELATION,
                row_number=row_number,
                original_error=e,
            ) from e
    return decoded


def _read_relation(
    db: DatabaseManager, sql: str, relation: str
) -> List[Tuple[Any, ...]]:
    try:
        rows = db.fetch_rows(sql)
    except SQLAlchemyError as e:
        raise LoadError(
            message=f"cannot query {relation}: {e}",
            relation=relation,
            original_error=e,
        ) from e
    logger.info(f"Loaded {len(rows)} {relation} rows")
    return rows


def load_relations(
    db: DatabaseManager,
    pages_query: str = DEFAULT_PAGES_QUERY,
    domains_query: str = DEFAULT_DOMAINS_QUERY,
) -> HierarchyIndex:
    """
    Load both relations and build the hierarchy index.

    Args:
        db: Connected (or connectable) database manager.
        pages_query: SQL yielding ``(uid, pid, is_root)`` rows.
        domains_query: SQL yielding ``(root_id, domain_name, forced)`` rows
            sorted by binding priority.

    Returns:
        HierarchyIndex built from the two relations.

    Raises:
        LoadError: If either query fails or a row cannot be decoded.
        DataSourceConnectionError: If the connection cannot be opened.
    """
    page_rows = decode_page_rows(_read_relation(db, pages_query, PAGES_RELATION))
    domain_rows = decode_domain_rows(
        _read_relation(db, domains_query, DOMAINS_RELATION)
    )
    return build_index(page_rows, domain_rows)
