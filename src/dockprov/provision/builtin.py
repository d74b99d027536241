# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from . import clearlinux
from .registry import ProvisionerRegistry


def default_registry() -> ProvisionerRegistry:
    """
    Registry with every provisioner shipped in this package. Call once at
    startup and pass the result to detect_provisioner().
    """
    registry = ProvisionerRegistry()
    clearlinux.register(registry)
    return registry
