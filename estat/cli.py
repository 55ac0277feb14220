"""
Run the e-Stat pipeline from the command line.
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Sequence

from estat.config import get_pipeline_settings
from estat.logging_utils import EventLog, configure_logging
from estat.schemas.pipeline import RunOutcomeResponse
from estat.schemas.run_options import OUTPUT_FORMATS, RunOptions
from estat.services.pipeline_runner import build_pipeline_runner
from estat.sinks.base import RecordSink
from estat.sinks.jsonl_sink import JsonLinesSink

DEFAULT_OUTPUT_PATH = "data/estat_items.jsonl"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch and normalize e-Stat statistical tables.")
    parser.add_argument("--keyword", dest="searchKeyword", default="", help="Search keyword, e.g. 人口.")
    parser.add_argument("--survey-years", dest="surveyYears", default="", help="Survey years, e.g. 2020 or 201001-202012.")
    parser.add_argument("--stats-field", dest="statsField", default="", help="e-Stat statistics field code.")
    parser.add_argument("--max-items", dest="maxItems", default=10, help="Number of tables to process (1-100).")
    parser.add_argument(
        "--no-metadata",
        dest="includeMetadata",
        action="store_false",
        help="Skip the metadata fetch; labels come from the data payload's own classification list.",
    )
    parser.add_argument(
        "--output-format",
        dest="outputFormat",
        choices=OUTPUT_FORMATS,
        default="structured",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_PATH,
        help=f"JSON-lines output path (default: {DEFAULT_OUTPUT_PATH}).",
    )
    parser.add_argument(
        "--database",
        action="store_true",
        help="Persist items to the dataset store (DATABASE_URL) instead of a file.",
    )
    return parser


def _open_sink(args: argparse.Namespace) -> tuple[RecordSink, str | None]:
    if not args.database:
        return JsonLinesSink(args.output), None

    from db.session import SessionLocal, init_schema
    from estat.sinks.sqlalchemy_sink import SQLAlchemyDatasetSink

    init_schema()
    sink = SQLAlchemyDatasetSink(
        session=SessionLocal(),
        owns_session=True,
        batch_size=get_pipeline_settings().sink_batch_size,
    )
    return sink, sink.run_id


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    options = RunOptions.from_input(
        {
            "searchKeyword": args.searchKeyword,
            "surveyYears": args.surveyYears,
            "statsField": args.statsField,
            "maxItems": args.maxItems,
            "includeMetadata": args.includeMetadata,
            "outputFormat": args.outputFormat,
        }
    )

    sink, run_id = _open_sink(args)
    with sink:
        events = EventLog(run_id=run_id)
        outcome = build_pipeline_runner(sink=sink, events=events).execute(options)

    response = RunOutcomeResponse.from_outcome(outcome, run_id=run_id or "local")
    print(json.dumps(response.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
