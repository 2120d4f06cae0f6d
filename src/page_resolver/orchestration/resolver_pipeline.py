"""
Resolver Pipeline Module

Runs one resolver pass end to end: connect, load the page hierarchy, run the
optional argument query, combine the selection, and format the output.
"""

import logging
import time
from typing import Callable, List, Optional

from ..database.database_manager import DatabaseManager
from ..database.relation_loader import load_relations
from ..export.url_formatter import URLFormatter
from ..models.data_structures import OutputMode, ResolveRequest, ResolveResult
from ..processing.associated_rows import AssociatedRowQueryEngine
from ..processing.hierarchy_index import HierarchyIndex
from ..processing.selection import combine_selection
from ..utils.config_loader import Config, ResolverConfig


logger: logging.Logger = logging.getLogger(__name__)


class ResolverPipeline:
    """Coordinates the stages of a resolver run.

    Attributes:
        config: Resolver configuration (queries and output settings).
        db_factory: Builds the DatabaseManager for a DSN. Tests replace it.
    """

    def __init__(
        self,
        config: Optional[ResolverConfig] = None,
        db_factory: Callable[[str], DatabaseManager] = DatabaseManager,
    ) -> None:
        self.config = config or Config.load(use_env=False)
        self.db_factory = db_factory

    def run(self, request: ResolveRequest) -> ResolveResult:
        """Execute the full pipeline for one request.

        Args:
            request: What to select and how to render it.

        Returns:
            ResolveResult with the selected ids and rendered lines.

        Raises:
            DataSourceConnectionError: If the data source is unreachable.
            LoadError: If the pages or domains relation cannot be read.
            QueryError: If the argument query fails.
            CycleError: If resolution hits a cyclic parent chain.
            NoSelectionError: If nothing was selected.
        """
        start = time.time()

        with self.db_factory(request.dsn) as db:
            db.connect()
            index = load_relations(
                db,
                pages_query=self.config.queries["pages"],
                domains_query=self.config.queries["domains"],
            )

            engine = AssociatedRowQueryEngine(db)
            query_ids: Optional[List[int]] = None
            if request.query:
                query_ids = engine.run_query(request.query, request.n_fields)

        result = self.resolve(index, request, query_ids, engine.values_for)
        logger.info(
            f"Resolved {len(result.selected_ids)} ids into {len(result.lines)} "
            f"lines in {time.time() - start:.2f}s"
        )
        return result

    def resolve(
        self,
        index: HierarchyIndex,
        request: ResolveRequest,
        query_ids: Optional[List[int]] = None,
        values_for: Optional[Callable[[int], List[str]]] = None,
    ) -> ResolveResult:
        """Combine and format against an already built index.

        Args:
            index: Loaded hierarchy index.
            request: Selection flags and output mode.
            query_ids: Ids returned by the argument query, None if none ran.
            values_for: Associated value lookup for CSV rows.

        Returns:
            ResolveResult with the selected ids and rendered lines.
        """
        selected = combine_selection(
            index,
            explicit_id=request.explicit_id,
            query_ids=query_ids,
            expand_to_children=request.expand_to_children,
            collapse_to_root=request.collapse_to_root,
        )

        formatter = URLFormatter(
            index,
            url_template=self.config.output["url_template"],
            id_separator=self.config.output["id_separator"],
        )

        if request.output_mode == OutputMode.ID_LIST:
            return ResolveResult(
                selected_ids=selected, lines=[formatter.format_id_list(selected)]
            )

        lines = list(
            formatter.url_lines(
                selected, n_fields=request.n_fields, values_for=values_for
            )
        )
        return ResolveResult(
            selected_ids=selected,
            lines=lines,
            skipped_ids=list(formatter.stats.skipped_ids),
        )
