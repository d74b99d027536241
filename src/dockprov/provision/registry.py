# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/registry.py

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from dockprov.drivers.interface import Driver
from dockprov.errors import DuplicateProvisionerError, UnknownProvisionerError
from .interface import Provisioner
from .os_release import OsRelease, get_os_release

log = logging.getLogger("dockprov")

# called as factory(driver, **options)
ProvisionerFactory = Callable[..., Provisioner]


class ProvisionerRegistry:
    """
    OS identifier (os-release ID) -> provisioner factory.

    Built once at startup; the first registration of an identifier wins and
    later ones are rejected with DuplicateProvisionerError.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, ProvisionerFactory] = {}

    def register(self, os_id: str, factory: ProvisionerFactory) -> None:
        if os_id in self._factories:
            raise DuplicateProvisionerError(f"provisioner already registered for '{os_id}'")
        self._factories[os_id] = factory
        log.debug(f"registered provisioner for {os_id}")

    def lookup(self, os_id: str) -> Optional[ProvisionerFactory]:
        return self._factories.get(os_id)

    def __contains__(self, os_id: object) -> bool:
        return os_id in self._factories

    def names(self) -> List[str]:
        return sorted(self._factories)

    def for_os(self, os_release: OsRelease) -> ProvisionerFactory:
        for candidate in os_release.candidates():
            factory = self.lookup(candidate)
            if factory is not None:
                return factory
        raise UnknownProvisionerError(
            f"no provisioner for OS '{os_release.pretty_name or os_release.id or 'unknown'}'"
            f" (registered: {', '.join(self.names()) or 'none'})"
        )


def detect_provisioner(
    registry: ProvisionerRegistry,
    driver: Driver,
    **options: Any,
) -> Provisioner:
    """
    Read the host's os-release and build the matching provisioner.
    *options* are passed through to the provisioner factory.
    """
    os_release = get_os_release(driver.runner)
    provisioner = registry.for_os(os_release)(driver, **options)
    log.info(f"detected {os_release.pretty_name or os_release.id}, using provisioner {provisioner}")
    return provisioner
