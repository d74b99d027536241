# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/dockprov/logging/log.py

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path

DEFAULT_LOG_DIR = Path.home() / ".dockprov" / "logs"

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


def log_file_for(base_dir: Path, machine: str | None, *, name: str = "dockprov") -> Path:
    """
    ``<base_dir>/dockprov-<machine>-<utc ts>.log``. Characters outside
    ``[A-Za-z0-9_.-]`` in the machine name become ``_``.
    """
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    parts = [name]
    if machine:
        parts.append(_UNSAFE.sub("_", machine).strip("._") or "machine")
    parts.append(ts)
    return base_dir / ("-".join(parts) + ".log")


def init_logging(
    *,
    machine: str | None = None,
    run_id: str | None = None,
    base_dir: Path | None = None,
    name: str = "dockprov",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Set up logging for one provisioning run.

    The file handler takes every remote command and its output (DEBUG);
    the console shows INFO, or DEBUG when *verbose*. *run_id* is generated
    when not given and returned so observers can stamp events with it.
    """
    run_id = run_id or str(uuid.uuid4())
    base_dir = base_dir or DEFAULT_LOG_DIR
    base_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_file_for(base_dir, machine, name=name)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.info(f"=== provisioning {machine or '<unknown>'} ===")
    logger.info(f"run_id={run_id} log_file={log_path}")

    return logger, run_id, log_path
