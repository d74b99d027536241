# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/drivers/models.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Host:
    """
    Represents a server you will SSH into.
    """
    address: str                  # IP or DNS to connect
    username: str                 # SSH username
    port: int = 22
    password: Optional[str] = None
    pkey_path: Optional[Path] = None
