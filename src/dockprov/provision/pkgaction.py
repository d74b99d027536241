# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/pkgaction.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from dockprov.errors import UnsupportedPackageAction


class PackageAction(Enum):
    INSTALL = "install"
    REMOVE = "remove"
    UPGRADE = "upgrade"
    PURGE = "purge"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageManager:
    """
    Translates a generic package intent into one package manager's command.

    verbs: action -> subcommand. An action missing from the map has no verb
    and is refused with UnsupportedPackageAction, unless legacy_empty_verb is
    set, in which case the command is built with an empty verb the way older
    releases did.
    aliases: logical package name -> distribution package name.
    """
    binary: str
    verbs: Mapping[PackageAction, str]
    aliases: Mapping[str, str] = field(default_factory=dict)
    legacy_empty_verb: bool = False

    def resolve_name(self, name: str) -> str:
        return self.aliases.get(name, name)

    def verb(self, action: PackageAction) -> str:
        verb = self.verbs.get(action)
        if verb:
            return verb
        if self.legacy_empty_verb:
            return ""
        raise UnsupportedPackageAction(
            f"{self.binary} has no verb for package action '{action}'"
        )

    def command(self, action: PackageAction, name: str) -> str:
        # Trailing space kept: callers append flags directly.
        return f"{self.binary} {self.verb(action)} {self.resolve_name(name)} "
