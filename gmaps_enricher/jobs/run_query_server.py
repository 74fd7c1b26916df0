"""HTTP entrypoint that triggers enrichment runs."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

from flask import Flask, jsonify, request

from gmaps_enricher.core.config import get_settings
from gmaps_enricher.jobs.run_query import run_scraper

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
_executor = ThreadPoolExecutor(max_workers=2)

TEMPLATE_PLACEHOLDER = "fraza"
DEFAULT_INPUT_FILE = "default_input.txt"
DEFAULT_RESULTS_FILE = "default_results.csv"


def write_seed_file(phrase: str, template_path: str) -> str:
    """Fill the seed template with ``phrase`` and return the new file name.

    The file is created in the working directory, so ``phrase`` must be a bare name.
    """
    if "/" in phrase or "\\" in phrase or Path(phrase).name != phrase:
        raise ValueError(f"phrase must not contain path separators: {phrase!r}")
    template = Path(template_path).read_text(encoding="utf-8")
    output = Path(f"{phrase}_seeds.txt")
    output.write_text(template.replace(TEMPLATE_PLACEHOLDER, phrase), encoding="utf-8")
    return str(output)


# ---------- Routes ----------


@app.get("/status")
def status() -> Any:
    return jsonify({"status": "ok"}), 200


@app.post("/scrape")
def enqueue_scrape() -> Any:
    """
    Queue an enrichment run.
    Optional JSON fields: langCode, email (bool), phrase, inputFile, resultsFile, json (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "invalid JSON body"}), 400

    settings = get_settings()
    phrase = str(payload.get("phrase") or "").strip()
    input_file = str(payload.get("inputFile") or "").strip()
    results_file = str(payload.get("resultsFile") or "").strip()

    if phrase:
        try:
            input_file = write_seed_file(phrase, settings.seed_template_path)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        except OSError as exc:
            logger.error("Failed to build seed file for phrase=%s: %s", phrase, exc)
            return jsonify({"error": "could not create the seed file"}), 500
        results_file = f"{phrase}_results.csv"

    input_file = input_file or DEFAULT_INPUT_FILE
    results_file = results_file or DEFAULT_RESULTS_FILE

    run_settings = replace(
        settings,
        lang=str(payload.get("langCode") or settings.lang),
        extract_emails=bool(payload.get("email", settings.extract_emails)),
    )
    job_args = dict(
        input_file=input_file,
        results_file=results_file,
        json_output=bool(payload.get("json", False)),
        settings=run_settings,
    )

    logger.info("Queueing enrichment run: input=%s results=%s", input_file, results_file)
    _executor.submit(_run_job_safe, job_args)

    return jsonify({"data": {"status": "queued", "inputFile": input_file, "resultsFile": results_file}}), 202


@app.post("/createfile")
def create_file() -> Any:
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    phrase = str(payload.get("phrase") or "").strip()
    if not phrase:
        return jsonify({"error": "phrase is required"}), 400

    try:
        output = write_seed_file(phrase, get_settings().seed_template_path)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except OSError as exc:
        logger.error("Failed to build seed file for phrase=%s: %s", phrase, exc)
        return jsonify({"error": "could not create the seed file"}), 500

    return jsonify({"data": {"file": output}}), 200


# ---------- Internals ----------


def _run_job_safe(job_args: Dict[str, Any]) -> None:
    try:
        run_scraper(**job_args)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Enrichment run failed: %s", exc)


def main() -> None:
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
