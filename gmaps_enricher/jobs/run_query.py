"""CLI job that decodes Google Maps places and enriches them from their websites."""

import argparse
import contextlib
import logging
import sys
from dataclasses import replace
from typing import IO, Iterator, List, Optional

from gmaps_enricher.core.config import REGISTRY_PROVIDERS, Settings, get_settings
from gmaps_enricher.core.fetch import Fetcher
from gmaps_enricher.core.store import RecordStore
from gmaps_enricher.etl.writers import CsvWriter, JsonWriter
from gmaps_enricher.jobs.runner import JobRunner, RunStats, create_seed_jobs, read_seed_file
from gmaps_enricher.vendors.registry import get_registry

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _open_results(path: str) -> Iterator[IO[str]]:
    if path == "stdout":
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8", newline="") as fh:
        yield fh


def run_scraper(
    *,
    input_file: str,
    results_file: str,
    json_output: bool = False,
    settings: Optional[Settings] = None,
) -> RunStats:
    settings = settings or get_settings()

    if input_file == "stdin":
        lines: List[str] = sys.stdin.readlines()
    else:
        lines = read_seed_file(input_file)

    store = RecordStore()
    seed_jobs = create_seed_jobs(
        store,
        lines,
        lang=settings.lang,
        extract_email=settings.extract_emails,
        registry=get_registry(settings),
    )
    logger.info("Running %d seed jobs with concurrency=%d", len(seed_jobs), settings.concurrency)

    with _open_results(results_file) as stream, Fetcher(settings=settings) as fetcher:
        writer = JsonWriter(stream) if json_output else CsvWriter(stream)
        runner = JobRunner(store, fetcher, [writer], concurrency=settings.concurrency)
        return runner.run(seed_jobs)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode Google Maps places and enrich them with contact data")
    parser.add_argument("-c", "--concurrency", type=int, default=settings.concurrency, help="Number of worker threads")
    parser.add_argument("--input", dest="input_file", default="stdin", help="File with one query or place URL per line")
    parser.add_argument("--results", dest="results_file", default="stdout", help="Where to write the results")
    parser.add_argument("--lang", default=settings.lang, help="Google language code (the hl url param)")
    parser.add_argument("--json", dest="json_output", action="store_true", help="Write JSON lines instead of CSV")
    parser.add_argument(
        "--email",
        dest="extract_emails",
        action="store_true",
        default=settings.extract_emails,
        help="Visit websites to extract emails, social links and NIP",
    )
    parser.add_argument(
        "--registry",
        choices=REGISTRY_PROVIDERS,
        default=settings.registry_provider,
        help="Business registry used for NIP lookups",
    )
    parser.add_argument("--debug", action="store_true", help="Render pages with a headless browser")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    settings = get_settings()
    args = build_parser(settings).parse_args()

    run_settings = replace(
        settings,
        concurrency=max(1, args.concurrency),
        lang=args.lang,
        extract_emails=args.extract_emails,
        registry_provider=args.registry,
        use_js_renderer=settings.use_js_renderer or args.debug,
    )
    run_scraper(
        input_file=args.input_file,
        results_file=args.results_file,
        json_output=args.json_output,
        settings=run_settings,
    )


if __name__ == "__main__":
    main()
