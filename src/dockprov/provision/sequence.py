# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/provision/sequence.py

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence

from dockprov.errors import SequenceStepError
from dockprov.observers.dispatcher import EventBus
from dockprov.observers.events import (
    ProvisionFailed,
    ProvisionSucceeded,
    StageCompleted,
    StageStarted,
    new_ctx,
)
from .models import ProvisionStage, ProvisionState

log = logging.getLogger("dockprov")


class Step(NamedTuple):
    stage: ProvisionStage                              # stage entered on success
    run: Callable[[ProvisionState], ProvisionState]


def _ctx(ctx: Dict[str, Any]) -> Dict[str, Any]:
    # fresh timestamp, same run
    return new_ctx(ctx["machine"], ctx["run_id"])


def run_sequence(
    state: ProvisionState,
    steps: Sequence[Step],
    *,
    provisioner: str,
    bus: Optional[EventBus] = None,
    ctx: Optional[Dict[str, Any]] = None,
) -> ProvisionState:
    """
    Drive *state* through *steps* strictly in order, then into Done.

    A failing step aborts the run: nothing is rolled back and the step's
    exception is re-raised unchanged, with a note naming the stage it was
    entering.
    """
    bus = bus or EventBus()
    ctx = ctx or new_ctx(machine="unknown")

    for step in steps:
        bus.emit(StageStarted(**_ctx(ctx), stage=str(step.stage)))
        log.debug(f"[{provisioner}] {state.stage} -> {step.stage}")
        try:
            nxt = step.run(state)
            if nxt.stage is not step.stage:
                raise SequenceStepError(
                    f"step for {step.stage} left the run in {nxt.stage}"
                )
        except Exception as e:
            e.add_note(f"provisioning aborted at stage {step.stage}")
            bus.emit(ProvisionFailed(**_ctx(ctx), stage=str(step.stage), error=str(e)))
            raise
        state = nxt
        bus.emit(StageCompleted(**_ctx(ctx), stage=str(step.stage)))

    state = state.advance(ProvisionStage.DONE)
    bus.emit(ProvisionSucceeded(**_ctx(ctx), provisioner=provisioner))
    return state
