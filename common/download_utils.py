#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Handles downloading artifacts over HTTP.

Downloads stream into a sibling "<name>.part" file and are renamed into
place only once complete, so an interrupted transfer never looks like a
finished file.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

module_logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def partial_path_for(destination: Path) -> Path:
    return destination.with_name(destination.name + ".part")


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    timeout: int = 120,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Download `url` to `download_to_path`.

    Args:
        url: Source URL.
        download_to_path: Final file path. Parent directories are created.
        timeout: Connect/read timeout in seconds.
        current_logger: Logger to use. Defaults to the module logger.

    Returns:
        True if the download completed, False otherwise. A failed download
        leaves no file at the final path.
    """
    logger_to_use = current_logger if current_logger else module_logger
    destination = Path(download_to_path)
    partial = partial_path_for(destination)
    logger_to_use.info(f"Downloading {url} -> {destination}")
    response: Optional[requests.Response] = None

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()

        with open(partial, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
        partial.replace(destination)
        logger_to_use.info(f"Downloaded {destination}")
        return True
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        logger_to_use.error(f"HTTP error occurred: {http_err} - Status code: {status_code}")
    except requests.exceptions.ConnectionError as conn_err:
        logger_to_use.error(f"Connection error occurred: {conn_err}")
    except requests.exceptions.Timeout as timeout_err:
        logger_to_use.error(f"Timeout error occurred: {timeout_err}")
    except requests.exceptions.RequestException as req_err:
        logger_to_use.error(f"An unexpected error occurred during download: {req_err}")
    except OSError as io_err:
        logger_to_use.error(f"File I/O error when saving download: {io_err}")
    finally:
        if response is not None:
            response.close()
    return False
