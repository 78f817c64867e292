#!/usr/bin/env python3
"""
cadastre-graph - Parcel adjacency analysis

Loads parcels from a GeoPackage, builds the parcel and owner adjacency
graphs, reports location-scoped average areas and ranks parcel exchange
suggestions between neighbouring owners.

Usage:
    cadastre-graph parcels.gpkg                              # graphs + suggestions
    cadastre-graph parcels.gpkg --municipality Funchal       # + average areas
    cadastre-graph parcels.gpkg --limit 5000 --output report.json
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from loguru import logger

from cadastre_graph.config import settings
from cadastre_graph.errors import CadastreGraphError
from cadastre_graph.models.parcel import Parcel
from cadastre_graph.models.schemas import AnalysisReport, GraphSummary
from cadastre_graph.services.exchange_service import ExchangeSuggestionEngine
from cadastre_graph.services.owner_graph import build_owner_graph
from cadastre_graph.services.parcel_graph import build_parcel_graph
from cadastre_graph.utils.io import load_parcels
from cadastre_graph.utils.logging import log_graph_summary, setup_logger


def run_analysis(
    parcels: Sequence[Parcel],
    district: Optional[str] = None,
    municipality: Optional[str] = None,
    county: Optional[str] = None,
    max_suggestions: Optional[int] = None,
    use_spatial_index: Optional[bool] = None,
) -> AnalysisReport:
    """
    Build both graphs and compute every statistic for one parcel list.

    Average areas are only computed when at least one location filter
    is given.
    """
    parcel_graph = build_parcel_graph(parcels, use_spatial_index=use_spatial_index)
    owner_graph = build_owner_graph(parcels, parcel_graph=parcel_graph)

    summary = GraphSummary(
        parcel_count=parcel_graph.vertex_count(),
        parcel_edge_count=parcel_graph.edge_count(),
        owner_count=owner_graph.owner_vertex_count(),
        owner_edge_count=owner_graph.owner_edge_count(),
    )
    log_graph_summary(summary)

    report = AnalysisReport(summary=summary)

    location_filter: Dict[str, str] = {
        level: value
        for level, value in (("district", district), ("municipality", municipality), ("county", county))
        if value is not None
    }
    if location_filter:
        report.location_filter = location_filter
        report.average_parcel_area = parcel_graph.average_area(district, municipality, county)
        report.average_owner_area = owner_graph.average_area(district, municipality, county)
        logger.info(f"Average parcel area in {location_filter}: {report.average_parcel_area:,.2f}")
        logger.info(f"Average owner area in {location_filter}: {report.average_owner_area:,.2f}")

    if max_suggestions is None:
        max_suggestions = settings.default_max_suggestions
    engine = ExchangeSuggestionEngine(owner_graph)
    suggestions = engine.generate_suggestions(max_suggestions)
    report.suggestions = [s.to_record() for s in suggestions]

    for rank, suggestion in enumerate(suggestions, start=1):
        logger.info(f"  {rank}. {suggestion}")

    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parcel adjacency analysis")
    parser.add_argument("path", type=Path, help="GeoPackage with parcels")
    parser.add_argument("--layer", type=str, help="Layer name")
    parser.add_argument("--limit", type=int, help="Limit number of parcels")
    parser.add_argument("--district", type=str, help="District filter for average areas")
    parser.add_argument("--municipality", type=str, help="Municipality filter for average areas")
    parser.add_argument("--county", type=str, help="County filter for average areas")
    parser.add_argument("--max-suggestions", type=int, default=settings.default_max_suggestions,
                        help="Number of exchange suggestions")
    parser.add_argument("--no-spatial-index", action="store_true", help="Compare every pair of parcels")
    parser.add_argument("--output", type=Path, help="Write the report as JSON")
    parser.add_argument("--log-file", type=str, help="Log file (default: CADASTRE_LOG_FILE)")
    parser.add_argument("--log-level", type=str, help="Log level (default: CADASTRE_LOG_LEVEL)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(log_file=args.log_file, level=args.log_level)

    logger.info("=" * 60)
    logger.info("PARCEL ADJACENCY ANALYSIS")
    logger.info("=" * 60)
    logger.info(f"Input: {args.path}")

    try:
        parcels = load_parcels(args.path, layer=args.layer, limit=args.limit)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except KeyError as e:
        # raised for missing required columns
        logger.error(e.args[0] if e.args else str(e))
        return 1

    try:
        report = run_analysis(
            parcels,
            district=args.district,
            municipality=args.municipality,
            county=args.county,
            max_suggestions=args.max_suggestions,
            use_spatial_index=False if args.no_spatial_index else None,
        )
    except CadastreGraphError as e:
        logger.error(f"{e.kind.value}: {e}")
        return 2

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(report.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved: {args.output}")

    logger.info("=" * 60)
    logger.info("ANALYSIS COMPLETE")
    logger.info("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
