"""
Flowsheet service: Сборка и расчёт схемы по описанию.

Выполняет:
1. Создание потоков и аппаратов по FlowsheetSpec
2. Подключение общих потоков к аппаратам
3. Вызов update_outputs в порядке, заданном вызывающим кодом

Порядок расчёта не вычисляется: топологической сортировки нет.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from flowlab.core.engine import Device, FlowLabException, RecycleError, Stream, create_device
from flowlab.core.logging import get_logger
from flowlab.schemas.flowsheet import FlowsheetSpec

logger = get_logger(__name__)


@dataclass
class Flowsheet:
    """Собранная схема: потоки по имени и аппараты по id."""

    streams: dict[str, Stream] = field(default_factory=dict)
    devices: dict[str, Device] = field(default_factory=dict)

    def device(self, device_id: str) -> Device:
        try:
            return self.devices[device_id]
        except KeyError:
            raise KeyError(f"Unknown device: {device_id}") from None


@dataclass
class RunResult:
    """Результат расчёта схемы."""

    success: bool
    streams: dict[str, float] = field(default_factory=dict)  # name -> mass_flow
    calculated: dict[str, bool] = field(default_factory=dict)  # device_id -> flag
    errors: list[dict[str, Any]] = field(default_factory=list)
    execution_time_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "streams": self.streams,
            "calculated": self.calculated,
            "errors": self.errors,
            "execution_time_ms": round(self.execution_time_ms, 2),
        }


def build_flowsheet(spec: FlowsheetSpec) -> Flowsheet:
    """Создать потоки и аппараты; аппараты с одним именем потока делят один объект Stream."""
    flowsheet = Flowsheet()

    for stream_spec in spec.streams:
        flowsheet.streams[stream_spec.name] = Stream(
            name=stream_spec.name, mass_flow=stream_spec.mass_flow
        )

    for device_spec in spec.devices:
        device = create_device(device_spec.type.value, device_spec.params)
        for name in device_spec.inputs:
            device.add_input(flowsheet.streams[name])
        for name in device_spec.outputs:
            device.add_output(flowsheet.streams[name])
        flowsheet.devices[device_spec.id] = device

    logger.debug(
        "flowsheet_built",
        streams=len(flowsheet.streams),
        devices=len(flowsheet.devices),
    )
    return flowsheet


def run_flowsheet(
    flowsheet: Flowsheet,
    order: Optional[Iterable[str]] = None,
    stop_on_error: bool = True,
) -> RunResult:
    """
    Рассчитать аппараты схемы в заданном порядке.

    Args:
        flowsheet: собранная схема
        order: id аппаратов в порядке расчёта (по умолчанию: порядок объявления)
        stop_on_error: пробрасывать ошибку сразу; иначе записать её в результат
            и продолжить. RecycleError пробрасывается всегда.

    Returns:
        RunResult с расходами потоков и флагами аппаратов
    """
    start_time = time.perf_counter()
    result = RunResult(success=False)
    device_ids = list(order) if order is not None else list(flowsheet.devices)

    try:
        for device_id in device_ids:
            device = flowsheet.device(device_id)
            try:
                device.update_outputs()
            except RecycleError as e:
                logger.error("recycle_detected", device=device_id, **e.details)
                raise
            except FlowLabException as e:
                logger.warning(
                    "device_failed", device=device_id, kind=e.kind.value, error=e.message
                )
                if stop_on_error:
                    raise
                result.errors.append({"device": device_id, **e.to_dict()})
                continue

            logger.debug(
                "device_updated",
                device=device_id,
                device_type=device.device_type,
                outputs={s.name: s.mass_flow for s in device.get_outputs()},
            )

        result.success = len(result.errors) == 0
    finally:
        result.streams = {name: s.mass_flow for name, s in flowsheet.streams.items()}
        result.calculated = {
            device_id: d.is_calculated() for device_id, d in flowsheet.devices.items()
        }
        result.execution_time_ms = (time.perf_counter() - start_time) * 1000

    return result


def reset_flowsheet(flowsheet: Flowsheet) -> None:
    """Сбросить флаг "рассчитан" у всех аппаратов для повторного расчёта."""
    for device in flowsheet.devices.values():
        device.set_calculated(False)
    logger.debug("flowsheet_reset", devices=len(flowsheet.devices))


def load_flowsheet(data: dict[str, Any]) -> Flowsheet:
    """Удобная функция: провалидировать словарь и собрать схему."""
    return build_flowsheet(FlowsheetSpec.model_validate(data))
