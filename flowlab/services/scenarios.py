"""
Reference scenarios for the engine.

Each scenario builds a tiny flowsheet with its own StreamCounter, runs it
and checks the outcome. Used by ``flowlab demo`` as a smoke check of an
installed engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from flowlab.core.engine import (
    CapacityExceeded,
    FlowLabException,
    Mixer,
    Reactor,
    RecycleError,
    StreamCounter,
    StreamLimit,
)
from flowlab.core.logging import get_logger
from flowlab.core.settings import settings
from flowlab.services.report import balance_error

logger = get_logger(__name__)


@dataclass
class ScenarioResult:
    name: str
    passed: bool
    detail: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "passed": self.passed, "detail": self.detail}


def _close(a: float, b: float) -> bool:
    return abs(a - b) < settings.mass_balance_tolerance


def mixer_one_output(counter: StreamCounter) -> ScenarioResult:
    """Mixer(2): 10 + 5 -> 15."""
    name = "mixer_one_output"
    mixer = Mixer(2)
    s1 = counter.new_stream(10.0)
    s2 = counter.new_stream(5.0)
    s3 = counter.new_stream()

    mixer.add_input(s1)
    mixer.add_input(s2)
    mixer.add_output(s3)
    mixer.update_outputs()

    return ScenarioResult(name, _close(s3.get_mass_flow(), 15.0), str(s3))


def mixer_too_many_outputs(counter: StreamCounter) -> ScenarioResult:
    name = "mixer_too_many_outputs"
    mixer = Mixer(2)
    s1, s2, s3, s4 = (counter.new_stream() for _ in range(4))
    mixer.add_input(s1)
    mixer.add_input(s2)
    mixer.add_output(s3)

    try:
        mixer.add_output(s4)
    except CapacityExceeded as e:
        return ScenarioResult(name, e.limit == StreamLimit.OUTPUT, e.message)
    return ScenarioResult(name, False, "second output was accepted")


def mixer_too_many_inputs(counter: StreamCounter) -> ScenarioResult:
    name = "mixer_too_many_inputs"
    mixer = Mixer(2)
    s1, s2, s3, s4 = (counter.new_stream() for _ in range(4))
    mixer.add_input(s1)
    mixer.add_input(s2)
    mixer.add_output(s3)

    try:
        mixer.add_input(s4)
    except CapacityExceeded as e:
        return ScenarioResult(name, e.limit == StreamLimit.INPUT, e.message)
    return ScenarioResult(name, False, "third input was accepted")


def reactor_double_output_split(counter: StreamCounter) -> ScenarioResult:
    """Reactor(double): 10 -> 5 + 5."""
    name = "reactor_double_output_split"
    reactor = Reactor(is_double_output=True)
    s1 = counter.new_stream(10.0)
    s2 = counter.new_stream()
    s3 = counter.new_stream()

    reactor.add_input(s1)
    reactor.add_output(s2)
    reactor.add_output(s3)
    reactor.update_outputs()

    passed = (
        _close(s2.get_mass_flow(), 5.0)
        and _close(s3.get_mass_flow(), 5.0)
        and _close(balance_error(reactor), 0.0)
    )
    return ScenarioResult(name, passed, f"{s2}; {s3}")


def reactor_too_many_outputs(counter: StreamCounter) -> ScenarioResult:
    name = "reactor_too_many_outputs"
    reactor = Reactor(is_double_output=False)
    s1 = counter.new_stream(10.0)
    s2 = counter.new_stream()
    s3 = counter.new_stream()
    reactor.add_input(s1)
    reactor.add_output(s2)

    try:
        reactor.add_output(s3)
    except CapacityExceeded as e:
        return ScenarioResult(name, e.message == "OUTPUT STREAM LIMIT", e.message)
    return ScenarioResult(name, False, "second output was accepted")


def reactor_too_many_inputs(counter: StreamCounter) -> ScenarioResult:
    name = "reactor_too_many_inputs"
    reactor = Reactor(is_double_output=False)
    s1 = counter.new_stream(10.0)
    s2 = counter.new_stream(5.0)
    reactor.add_input(s1)

    try:
        reactor.add_input(s2)
    except CapacityExceeded as e:
        return ScenarioResult(name, e.message == "INPUT STREAM LIMIT", e.message)
    return ScenarioResult(name, False, "second input was accepted")


def reactor_recycle(counter: StreamCounter) -> ScenarioResult:
    """A solved reactor refuses to update again."""
    name = "reactor_recycle"
    reactor = Reactor(is_double_output=False)
    reactor.add_input(counter.new_stream(10.0))
    reactor.add_output(counter.new_stream())
    reactor.update_outputs()

    try:
        reactor.update_outputs()
    except RecycleError as e:
        return ScenarioResult(name, e.device_type == "Reactor", e.message)
    return ScenarioResult(name, False, "second update was accepted")


def chained_mixer_recycle(counter: StreamCounter) -> ScenarioResult:
    """Mixer -> Reactor, then the mixer is solved again without reset."""
    name = "chained_mixer_recycle"
    mixer = Mixer(2)
    reactor = Reactor(is_double_output=False)
    s1 = counter.new_stream(10.0)
    s2 = counter.new_stream(5.0)
    link = counter.new_stream()
    product = counter.new_stream()

    mixer.add_input(s1)
    mixer.add_input(s2)
    mixer.add_output(link)
    reactor.add_input(link)
    reactor.add_output(product)

    mixer.update_outputs()
    reactor.update_outputs()
    if not _close(product.get_mass_flow(), 15.0):
        return ScenarioResult(name, False, f"unexpected product: {product}")

    try:
        mixer.update_outputs()
    except RecycleError as e:
        return ScenarioResult(name, e.device_type == "Mixer" and e.stream_name == link.name, e.message)
    return ScenarioResult(name, False, "mixer was solved twice")


SCENARIOS: list[Callable[[StreamCounter], ScenarioResult]] = [
    reactor_double_output_split,
    reactor_too_many_outputs,
    reactor_too_many_inputs,
    reactor_recycle,
    mixer_one_output,
    mixer_too_many_outputs,
    mixer_too_many_inputs,
    chained_mixer_recycle,
]


def _default_counter() -> StreamCounter:
    return StreamCounter(prefix=settings.stream_prefix)


def run_all(
    counter_factory: Optional[Callable[[], StreamCounter]] = None,
) -> list[ScenarioResult]:
    """Run every scenario with a fresh counter."""
    if counter_factory is None:
        counter_factory = _default_counter

    results = []
    for scenario in SCENARIOS:
        try:
            result = scenario(counter_factory())
        except FlowLabException as e:
            result = ScenarioResult(scenario.__name__, False, e.message)

        if result.passed:
            logger.info("scenario_passed", scenario=result.name)
        else:
            logger.warning("scenario_failed", scenario=result.name, detail=result.detail)
        results.append(result)

    return results
