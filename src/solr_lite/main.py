"""
Command line interface for solr-lite.

Runs a search described by a user facing query string (the same format the
web application puts in its links) and prints a JSON summary of the results.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import __version__
from .config import Config, get_config
from .exceptions import SolrLiteError
from .facet_field import FacetField, RangeFacetField
from .payload import to_number
from .response import Response
from .search_params import SearchParams
from .solr import Solr


def setup_logging(log_level: str) -> None:
    """
    Set up logging configuration.

    Args:
        log_level: The logging level to use.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Set specific loggers to appropriate levels
    logging.getLogger('pysolr').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def parse_facet(value: str) -> FacetField:
    """Parse a ``FIELD[:TITLE]`` facet argument."""
    name, _, title = value.partition(":")
    if not name:
        raise argparse.ArgumentTypeError(f"Invalid facet: {value!r}")
    return FacetField(name=name, title=title or name)


def parse_range_facet(value: str) -> RangeFacetField:
    """Parse a ``FIELD:START:END:GAP`` range facet argument."""
    tokens = value.split(":")
    if len(tokens) != 4:
        raise argparse.ArgumentTypeError(
            f"Range facets must be FIELD:START:END:GAP, got {value!r}"
        )
    name = tokens[0]
    numbers = [to_number(t) for t in tokens[1:]]
    if not name or any(n is None for n in numbers):
        raise argparse.ArgumentTypeError(f"Invalid range facet: {value!r}")
    range_start, range_end, range_gap = numbers
    return RangeFacetField(
        name=name,
        title=name,
        range_start=range_start,
        range_end=range_end,
        range_gap=range_gap,
    )


def create_arg_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="solr-lite - Run a SOLR search from a user query string",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "q=hello"                             # Search for hello
  %(prog)s "q=poems&fq=subjects|school+hygiene"  # Search with a filter
  %(prog)s "q=*" --facet subjects:Subjects       # Request a facet
  %(prog)s "q=*" --range-facet year:1800:2000:10 # Request a range facet
  %(prog)s --validate-config                     # Validate configuration and exit

Environment Variables:
  SOLR_BASE_URL          - SOLR base URL (default: http://localhost:8983/solr)
  SOLR_COLLECTION        - SOLR collection name (required)
  SOLR_DEF_TYPE          - Query parser to use (optional)
  SOLR_FACET_LIMIT       - Number of facet values to request (optional)
  SOLR_BATCH_SIZE        - Ids requested at a time when fetching many (default: 20)
  LOG_LEVEL              - Logging level (default: INFO)
        """
    )

    parser.add_argument(
        "query_string",
        nargs="?",
        default="",
        help="User query string, e.g. 'q=hello&fq=field|value&page=2'"
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to .env file (default: .env in current directory)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--facet",
        dest="facets",
        action="append",
        type=parse_facet,
        default=[],
        metavar="FIELD[:TITLE]",
        help="Facet to request (repeatable)"
    )

    parser.add_argument(
        "--range-facet",
        dest="range_facets",
        action="append",
        type=parse_range_facet,
        default=[],
        metavar="FIELD:START:END:GAP",
        help="Range facet to request (repeatable)"
    )

    parser.add_argument(
        "--group",
        metavar="FIELD",
        help="Group the results by this field"
    )

    parser.add_argument(
        "--group-limit",
        type=int,
        default=1,
        help="Documents per group when grouping (default: 1)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Request relevance explanations from SOLR"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def summarize(response: Response, group_field: Optional[str] = None) -> Dict[str, Any]:
    """Build a JSON friendly summary of a search response."""
    summary: Dict[str, Any] = {
        "status": response.status,
        "num_found": response.num_found,
        "start": response.start,
        "end": response.end,
        "page": response.page,
        "num_pages": response.num_pages,
        "facets": [
            {
                "name": facet.name,
                "title": facet.title,
                "values": [
                    {"text": v.text, "count": v.count} for v in facet.values
                ],
            }
            for facet in response.facets
        ],
        "collation": response.spellcheck().top_collation_query(),
    }

    if group_field:
        summary["groups_found"] = response.groups_found
        summary["groups"] = {
            str(value): response.solr_docs_for_group(group_field, value)
            for value in response.solr_groups(group_field)
        }
    else:
        summary["docs"] = response.solr_docs

    if not response.ok:
        summary["error"] = response.error_msg
    return summary


def run_search(
    config: Config,
    query_string: str,
    facets: List[FacetField],
    group_field: Optional[str] = None,
    group_limit: int = 1,
    debug: bool = False,
) -> Dict[str, Any]:
    """
    Run a search and summarize its results.

    Args:
        config: Configuration to use.
        query_string: User facing query string describing the search.
        facets: Facets to request.
        group_field: Optional field to group the results by.
        group_limit: Documents per group.
        debug: True to request relevance explanations.

    Returns:
        The summary of the response.
    """
    logger = logging.getLogger(__name__)
    params = SearchParams.from_query_string(query_string, facets)
    params.facet_limit = config.solr.facet_limit
    logger.debug(f"Search parameters: {params.to_solr_query_string()}")

    with Solr.from_config(config.solr) as solr:
        if group_field:
            response = solr.search_group(params, group_field, group_limit, debug=debug)
        else:
            response = solr.search(params, debug=debug)

    summary = summarize(response, group_field)
    if debug:
        explainer = response.explainer()
        summary["scores"] = {
            doc_id: explainer.score_for(doc_id) for doc_id in explainer.document_ids()
        }
    return summary


def main_cli(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the command line interface.

    Args:
        argv: Command line arguments, defaults to ``sys.argv[1:]``.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = get_config(args.env_file)

        if args.log_level:
            config.logging.log_level = args.log_level.upper()

        setup_logging(config.logging.log_level)
        logger = logging.getLogger(__name__)

        if args.validate_config:
            logger.info("Configuration validation successful!")
            logger.info(f"SOLR Collection: {config.solr.collection}")
            logger.info(f"SOLR URL: {config.solr.base_url}")
            return 0

        summary = run_search(
            config,
            args.query_string,
            args.facets + args.range_facets,
            group_field=args.group,
            group_limit=args.group_limit,
            debug=args.debug,
        )
        print(json.dumps(summary, indent=2, default=str))
        return 0

    except (SolrLiteError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point for the command-line interface."""
    sys.exit(main_cli())


if __name__ == "__main__":
    main()
