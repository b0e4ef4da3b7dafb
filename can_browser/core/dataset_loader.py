from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import requests

from can_browser.core.dataset import Dataset
from can_browser.core.exceptions import DatasetLoadError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30

_session: Optional[requests.Session] = None


def get_session() -> requests.Session:
    """Shared HTTP session for remote datasets."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"Accept": "application/json"})
    return _session


def is_remote(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


def resolve_local_path(location: str, data_root: Optional[Path] = None) -> Path:
    """
    Resolve a local dataset location.

    With a data root, relative paths are taken from it and the result must
    stay inside it.
    """
    path = Path(location)
    if data_root is None:
        return path

    root = Path(data_root).resolve()
    full_path = (root / path).resolve()
    if full_path != root and root not in full_path.parents:
        raise DatasetLoadError(f"Access denied: {location} is outside the data root")
    return full_path


def _fetch_remote(url: str, timeout: float) -> Any:
    try:
        resp = get_session().get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise DatasetLoadError(f"Failed to load {url}: {e}") from e
    try:
        return resp.json()
    except ValueError as e:
        raise DatasetLoadError(f"Failed to parse {url}: {e}") from e


def _read_local(path: Path) -> Any:
    if not path.is_file():
        raise DatasetLoadError(f"Dataset file not found at {path}.")
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise DatasetLoadError(f"Failed to read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"Failed to parse {path}: {e}") from e


def load_dataset(
        location: str,
        data_root: Optional[Path] = None,
        timeout: float = HTTP_TIMEOUT,
) -> Dataset:
    """
    Fetch and parse one decoded catalog.

    `location` is an http(s) URL or a local path (relative to `data_root` if given).

    Raises:
        DatasetLoadError: if the payload cannot be fetched, decoded, or is not a JSON object
    """
    logger.info("Loading dataset", extra={"location": location})

    if is_remote(location):
        payload = _fetch_remote(location, timeout)
    else:
        payload = _read_local(resolve_local_path(location, data_root))

    if not isinstance(payload, dict):
        raise DatasetLoadError(
            f"Dataset at {location} must be a JSON object, got {type(payload).__name__}"
        )

    dataset = Dataset.from_payload(payload)
    logger.info(
        "Dataset parsed",
        extra={
            "location": location,
            "n_frames": len(dataset.frames),
            "n_malformed": len(dataset.issues),
        },
    )
    return dataset
