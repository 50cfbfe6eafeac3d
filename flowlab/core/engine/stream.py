"""
Stream: Технологический поток между аппаратами.

Содержит имя и массовый расход. Поток создаёт вызывающий код,
аппараты только читают и записывают его расход.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class Stream:
    """
    Технологический поток.

    Один и тот же объект может быть выходом одного аппарата
    и входом другого: так задаются связи схемы.
    """

    name: str
    mass_flow: float = 0.0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Stream name must not be empty")
        self.mass_flow = float(self.mass_flow)

    @classmethod
    def from_number(cls, number: int, prefix: str = "s") -> "Stream":
        """Создать поток с именем по порядковому номеру: 1 -> "s1"."""
        return cls(name=f"{prefix}{number}")

    def set_name(self, name: str) -> None:
        self.name = name

    def get_name(self) -> str:
        return self.name

    def set_mass_flow(self, mass_flow: float) -> None:
        # Знак не проверяется: отрицательный расход допустим
        self.mass_flow = float(mass_flow)

    def get_mass_flow(self) -> float:
        return self.mass_flow

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "mass_flow": self.mass_flow,
        }

    def __str__(self) -> str:
        return f"Stream {self.name} flow = {self.mass_flow:g}"


class StreamCounter:
    """
    Генератор имён потоков.

    Заменяет глобальный счётчик: каждый вызывающий код держит свой
    экземпляр, поэтому счётчики разных схем не влияют друг на друга.
    """

    def __init__(self, start: int = 0, prefix: str = "s"):
        self.start = start
        self.prefix = prefix
        self._value = start

    @property
    def value(self) -> int:
        """Последний выданный номер."""
        return self._value

    def next_number(self) -> int:
        self._value += 1
        return self._value

    def new_stream(self, mass_flow: float = 0.0) -> Stream:
        """Создать поток со следующим по порядку именем."""
        stream = Stream.from_number(self.next_number(), prefix=self.prefix)
        stream.set_mass_flow(mass_flow)
        return stream

    def reset(self) -> None:
        self._value = self.start
