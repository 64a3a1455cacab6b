# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/bridge.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.exceptions import BridgeValidationError
from ..core.list_utils import duplicates

# Inclusive ranges accepted by the kernel bridge / STP implementation.
PRIORITY_RANGE = (0, 65535)
FORWARD_DELAY_RANGE = (2.0, 30.0)
HELLO_TIME_RANGE = (1.0, 10.0)
MAX_AGE_RANGE = (6.0, 60.0)
PORT_PRIORITY_RANGE = (0, 63)
PORT_PATH_COST_RANGE = (1, 65535)


@dataclass
class BridgePort:
    name: str
    priority: Optional[int] = None  # None: kernel default
    path_cost: Optional[int] = None  # None: kernel default

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"device": self.name}
        if self.priority is not None:
            d["priority"] = self.priority
        if self.path_cost is not None:
            d["path-cost"] = self.path_cost
        return d


@dataclass
class Bridge:
    """Bridge parameters; unset (None) values keep the kernel defaults."""

    stp: Optional[bool] = None
    priority: Optional[int] = None
    ageing_time: Optional[float] = None
    forward_delay: Optional[float] = None
    hello_time: Optional[float] = None
    max_age: Optional[float] = None
    ports: List[BridgePort] = field(default_factory=list)

    def add_port(self, name: str) -> BridgePort:
        port = BridgePort(name=name)
        self.ports.append(port)
        return port

    @property
    def port_names(self) -> List[str]:
        return [p.name for p in self.ports]

    def validate(self) -> None:
        def _check(what: str, value, lo, hi) -> None:
            if value is None:
                return
            if value < lo or (hi is not None and value > hi):
                rng = f"{lo}..{hi}" if hi is not None else f">= {lo}"
                raise BridgeValidationError(
                    msg=f"bridge validation: {what} {value} out of range {rng}",
                    context={"option": what, "value": value},
                )

        _check("priority", self.priority, *PRIORITY_RANGE)
        _check("ageing-time", self.ageing_time, 0.0, None)
        _check("forward-delay", self.forward_delay, *FORWARD_DELAY_RANGE)
        _check("hello-time", self.hello_time, *HELLO_TIME_RANGE)
        _check("max-age", self.max_age, *MAX_AGE_RANGE)

        dups = duplicates(self.port_names)
        if dups:
            raise BridgeValidationError(msg=f"bridge validation: duplicate ports {dups}", context={"ports": dups})

        for port in self.ports:
            _check(f"port {port.name} priority", port.priority, *PORT_PRIORITY_RANGE)
            _check(f"port {port.name} path-cost", port.path_cost, *PORT_PATH_COST_RANGE)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for key, value in (
            ("stp", self.stp),
            ("priority", self.priority),
            ("ageing-time", self.ageing_time),
            ("forward-delay", self.forward_delay),
            ("hello-time", self.hello_time),
            ("max-age", self.max_age),
        ):
            if value is not None:
                d[key] = value
        d["ports"] = [p.to_dict() for p in self.ports]
        return d


__all__ = ["Bridge", "BridgePort"]
