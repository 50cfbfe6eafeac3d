"""
Devices: Аппараты технологической схемы.

Каждый аппарат реализует _balance() для расчёта выходных потоков по входным.
Базовый класс отвечает за ёмкость входов/выходов, флаг "рассчитан"
и проверку рецикла.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from flowlab.core.exceptions import CapacityExceeded, PreconditionError, RecycleError, StreamLimit

from .stream import Stream

MIXER_OUTPUTS = 1


class Device(ABC):
    """Базовый класс аппарата."""

    device_type: ClassVar[str] = "Device"

    def __init__(self, input_capacity: int = 0, output_capacity: int = 0):
        # 0: без ограничения
        self.input_capacity = input_capacity
        self.output_capacity = output_capacity
        self.inputs: list[Stream] = []
        self.outputs: list[Stream] = []
        self.calculated = False

    def add_input(self, stream: Stream) -> None:
        """Подключить входной поток."""
        if self.input_capacity > 0 and len(self.inputs) >= self.input_capacity:
            raise CapacityExceeded(StreamLimit.INPUT, self.device_type, self.input_capacity)
        self.inputs.append(stream)

    def add_output(self, stream: Stream) -> None:
        """Подключить выходной поток."""
        if self.output_capacity > 0 and len(self.outputs) >= self.output_capacity:
            raise CapacityExceeded(StreamLimit.OUTPUT, self.device_type, self.output_capacity)
        self.outputs.append(stream)

    def get_inputs(self) -> tuple[Stream, ...]:
        return tuple(self.inputs)

    def get_outputs(self) -> tuple[Stream, ...]:
        return tuple(self.outputs)

    @property
    def input_count(self) -> int:
        return len(self.inputs)

    @property
    def output_count(self) -> int:
        return len(self.outputs)

    def is_calculated(self) -> bool:
        return self.calculated

    def set_calculated(self, calculated: bool) -> None:
        """Единственный способ сбросить флаг для повторного расчёта."""
        self.calculated = bool(calculated)

    def check_for_recycle(self) -> None:
        """
        Проверка рецикла.

        Аппарат, уже помеченный как рассчитанный, не может пересчитывать
        свои выходы: это признак цикла в схеме или повторного вызова.
        Смотрит только на собственный флаг, не на происхождение потоков.
        """
        for stream in self.outputs:
            if self.calculated:
                raise RecycleError(self.device_type, stream.name)

    def update_outputs(self) -> None:
        """
        Рассчитать выходные потоки.

        Порядок: проверка рецикла, проверка предусловий и расчёт значений,
        запись в потоки, установка флага. Если что-то падает до записи,
        ни потоки, ни флаг не меняются.
        """
        self.check_for_recycle()
        values = self._balance()
        for stream, value in zip(self.outputs, values):
            stream.set_mass_flow(value)
        self.calculated = True

    @abstractmethod
    def _balance(self) -> list[float]:
        """
        Проверить предусловия и вычислить расход для каждого выхода.

        Returns:
            Список значений в порядке self.outputs. Потоки не изменяются.

        Raises:
            PreconditionError: не хватает входов/выходов
        """
        pass

    @classmethod
    @abstractmethod
    def from_params(cls, params: dict[str, Any]) -> "Device":
        """Создать аппарат из словаря параметров."""
        pass

    def to_dict(self) -> dict[str, Any]:
        return {
            "device_type": self.device_type,
            "inputs": [s.name for s in self.inputs],
            "outputs": [s.name for s in self.outputs],
            "input_capacity": self.input_capacity,
            "output_capacity": self.output_capacity,
            "calculated": self.calculated,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(inputs={[s.name for s in self.inputs]}, "
            f"outputs={[s.name for s in self.outputs]}, calculated={self.calculated})"
        )


class Mixer(Device):
    """
    Смеситель: N входов -> 1 выход.

    Расход выхода = сумма входов / число выходов.
    """

    device_type = "Mixer"

    def __init__(self, inputs_count: int):
        if isinstance(inputs_count, bool) or not isinstance(inputs_count, int):
            raise TypeError(f"inputs_count must be an int, got {inputs_count!r}")
        if inputs_count < 0:
            raise ValueError(f"inputs_count must be >= 0, got {inputs_count}")
        super().__init__(input_capacity=inputs_count, output_capacity=MIXER_OUTPUTS)
        self.inputs_count = inputs_count

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "Mixer":
        if "inputs_count" not in params:
            raise ValueError("Mixer requires 'inputs_count' parameter")
        return cls(inputs_count=params["inputs_count"])

    def _balance(self) -> list[float]:
        if not self.outputs:
            raise PreconditionError("Should set outputs before update", self.device_type)

        total = sum(stream.mass_flow for stream in self.inputs)
        output_mass = total / len(self.outputs)
        return [output_mass] * len(self.outputs)


class Reactor(Device):
    """
    Реактор: 1 вход -> 1 или 2 выхода.

    Вход делится поровну между выходами.
    """

    device_type = "Reactor"

    def __init__(self, is_double_output: bool = False):
        if not isinstance(is_double_output, bool):
            raise TypeError(f"is_double_output must be a bool, got {is_double_output!r}")
        super().__init__(input_capacity=1, output_capacity=2 if is_double_output else 1)
        self.is_double_output = is_double_output

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "Reactor":
        return cls(is_double_output=params.get("is_double_output", False))

    def _balance(self) -> list[float]:
        if not self.inputs:
            raise PreconditionError("No input stream", self.device_type)
        if len(self.outputs) != self.output_capacity:
            raise PreconditionError("Wrong number of outputs", self.device_type)

        input_mass = self.inputs[0].mass_flow
        return [input_mass / self.output_capacity] * self.output_capacity


def create_device(device_type: str, params: dict[str, Any] | None = None) -> Device:
    """Фабрика для создания аппаратов по типу."""
    devices_map: dict[str, type[Device]] = {
        "mixer": Mixer,
        "reactor": Reactor,
    }

    device_class = devices_map.get(device_type.lower())
    if not device_class:
        raise ValueError(f"Unknown device type: {device_type}")

    return device_class.from_params(params or {})
