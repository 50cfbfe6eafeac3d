"""
Flowsheet description: Описание схемы для загрузки из JSON.

Потоки задаются по имени, аппараты ссылаются на потоки по имени.
Один и тот же поток может быть выходом одного аппарата и входом другого.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, model_validator


class DeviceType(str, Enum):
    """Тип аппарата."""

    MIXER = "mixer"
    REACTOR = "reactor"


class StreamSpec(BaseModel):
    name: str = Field(..., min_length=1, description="Имя потока")
    mass_flow: float = Field(default=0.0, description="Начальный массовый расход")


class MixerParams(BaseModel):
    """Параметры смесителя."""

    model_config = ConfigDict(extra="forbid")

    inputs_count: int = Field(..., ge=0, description="Число входов (0: без ограничения)")


class ReactorParams(BaseModel):
    """Параметры реактора."""

    model_config = ConfigDict(extra="forbid")

    is_double_output: StrictBool = Field(default=False, description="Два выхода вместо одного")


PARAMS_MODELS: dict[DeviceType, type[BaseModel]] = {
    DeviceType.MIXER: MixerParams,
    DeviceType.REACTOR: ReactorParams,
}


class DeviceSpec(BaseModel):
    id: str = Field(..., min_length=1, description="Идентификатор аппарата в схеме")
    type: DeviceType
    params: dict[str, Any] = Field(default_factory=dict)
    inputs: list[str] = Field(default_factory=list, description="Имена входных потоков")
    outputs: list[str] = Field(default_factory=list, description="Имена выходных потоков")

    @model_validator(mode="after")
    def _check_params(self) -> "DeviceSpec":
        raw = dict(self.params)
        if self.type == DeviceType.MIXER and "inputs_count" not in raw:
            # По умолчанию смеситель рассчитан на все перечисленные входы
            raw["inputs_count"] = len(self.inputs)

        try:
            params = PARAMS_MODELS[self.type].model_validate(raw)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValueError(f"Invalid params for device {self.id}: {problems}") from None

        self.params = params.model_dump()
        return self


class FlowsheetSpec(BaseModel):
    """
    Описание схемы.

    Example:
        >>> FlowsheetSpec.model_validate({
        ...     "streams": [{"name": "s1", "mass_flow": 10.0}, {"name": "s2"}],
        ...     "devices": [
        ...         {"id": "r1", "type": "reactor", "inputs": ["s1"], "outputs": ["s2"]},
        ...     ],
        ... })
    """

    streams: list[StreamSpec] = Field(default_factory=list)
    devices: list[DeviceSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "FlowsheetSpec":
        names = [s.name for s in self.streams]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate stream names: {', '.join(duplicates)}")

        ids = [d.id for d in self.devices]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate device ids: {', '.join(duplicates)}")

        known = set(names)
        for device in self.devices:
            for name in device.inputs + device.outputs:
                if name not in known:
                    raise ValueError(f"Device {device.id} references unknown stream: {name}")
        return self
