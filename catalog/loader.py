"""Load the fragrance catalog once at startup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, NamedTuple

import requests

from catalog.utils import Record

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = "fragrances.json"
CATALOG_TIMEOUT_SECONDS = float(os.environ.get("CATALOG_TIMEOUT_SECONDS", "10"))

HEADERS = {"Accept": "application/json"}
PREFERRED_OBJECT_KEYS = ("fragrances", "records", "items", "data")


class CatalogLoad(NamedTuple):
    records: List[Record]
    ok: bool
    message: str
    source: str


def _coerce_records(document: Any) -> List[Record] | None:
    """Extract the list of record objects from a parsed catalog document.

    Returns ``None`` when the document holds no array of records.
    """

    if isinstance(document, dict):
        for key in PREFERRED_OBJECT_KEYS:
            value = document.get(key)
            if isinstance(value, list):
                document = value
                break

    if not isinstance(document, list):
        logger.warning("Catalog document is not a JSON array (got %s)", type(document).__name__)
        return None

    records: List[Record] = []
    for index, item in enumerate(document):
        if not isinstance(item, dict):
            logger.warning("Skipping catalog entry %d: not an object", index)
            continue
        records.append(item)
    return records


def _fetch_document(url: str) -> Any:
    resp = requests.get(url, headers=HEADERS, timeout=CATALOG_TIMEOUT_SECONDS)
    resp.raise_for_status()
    return resp.json()


def _read_document(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _failed(source: str) -> CatalogLoad:
    display_name = source.rstrip("/").rsplit("/", 1)[-1] or source
    return CatalogLoad(
        records=[],
        ok=False,
        message=f"Could not load {display_name}. Check JSON format and file name.",
        source=source,
    )


def load_catalog(path: str | Path | None = None, url: str | None = None) -> CatalogLoad:
    """Read the catalog from *url* when given, else from the JSON file at *path*.

    With no arguments the source comes from ``CATALOG_URL`` or
    ``CATALOG_PATH`` in the environment, read at call time. Failures never
    raise: the caller gets an empty catalog with ``ok`` set to ``False`` and
    a plain-language message to show instead of results.
    """

    if url is None and path is None:
        url = os.environ.get("CATALOG_URL", "").strip() or None
        path = os.environ.get("CATALOG_PATH", DEFAULT_CATALOG_PATH)
    source = url or str(path)

    try:
        document = _fetch_document(url) if url else _read_document(source)
    except (OSError, ValueError, requests.RequestException):
        logger.exception("Could not load catalog from %s", source)
        return _failed(source)

    records = _coerce_records(document)
    if records is None:
        return _failed(source)

    logger.info("Loaded %d records from %s", len(records), source)
    return CatalogLoad(records=records, ok=True, message=f"Loaded {len(records)} fragrances.", source=source)
