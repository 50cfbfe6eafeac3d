"""
Tests for flowsheet description and service.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from flowlab.core.engine import CapacityExceeded, Mixer, PreconditionError, Reactor, RecycleError
from flowlab.schemas.flowsheet import DeviceType, FlowsheetSpec
from flowlab.services.flowsheet_service import (
    build_flowsheet,
    load_flowsheet,
    reset_flowsheet,
    run_flowsheet,
)


class TestFlowsheetSpec:
    """Валидация описания схемы."""

    def test_valid_spec(self, flowsheet_data):
        spec = FlowsheetSpec.model_validate(flowsheet_data)
        assert len(spec.streams) == 5
        assert spec.devices[0].type == DeviceType.MIXER

    def test_mixer_inputs_count_defaults_to_inputs(self):
        spec = FlowsheetSpec.model_validate(
            {
                "streams": [{"name": "a"}, {"name": "b"}, {"name": "c"}],
                "devices": [{"id": "m", "type": "mixer", "inputs": ["a", "b"], "outputs": ["c"]}],
            }
        )
        assert spec.devices[0].params["inputs_count"] == 2

    def test_unknown_stream_reference(self, flowsheet_data):
        flowsheet_data["devices"][0]["inputs"].append("s9")
        with pytest.raises(ValidationError, match="unknown stream: s9"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_duplicate_stream_names(self, flowsheet_data):
        flowsheet_data["streams"].append({"name": "s1"})
        with pytest.raises(ValidationError, match="Duplicate stream names"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_duplicate_device_ids(self, flowsheet_data):
        flowsheet_data["devices"][1]["id"] = "mixer-1"
        with pytest.raises(ValidationError, match="Duplicate device ids"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_negative_inputs_count_rejected(self, flowsheet_data):
        flowsheet_data["devices"][0]["params"]["inputs_count"] = -1
        with pytest.raises(ValidationError, match="Invalid params for device mixer-1"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_fractional_inputs_count_rejected(self, flowsheet_data):
        """Дробное число входов не округляется."""
        flowsheet_data["devices"][0]["params"]["inputs_count"] = 1.9
        with pytest.raises(ValidationError, match="inputs_count"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_string_bool_rejected(self, flowsheet_data):
        """Строка "false" не превращается в True."""
        flowsheet_data["devices"][1]["params"]["is_double_output"] = "false"
        with pytest.raises(ValidationError, match="is_double_output"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_unknown_param_rejected(self, flowsheet_data):
        flowsheet_data["devices"][1]["params"]["conversion"] = 0.5
        with pytest.raises(ValidationError, match="conversion"):
            FlowsheetSpec.model_validate(flowsheet_data)

    def test_params_are_normalized(self, flowsheet_data):
        del flowsheet_data["devices"][1]["params"]
        spec = FlowsheetSpec.model_validate(flowsheet_data)
        assert spec.devices[1].params == {"is_double_output": False}

    def test_unknown_device_type(self, flowsheet_data):
        flowsheet_data["devices"][0]["type"] = "splitter"
        with pytest.raises(ValidationError):
            FlowsheetSpec.model_validate(flowsheet_data)


class TestBuildFlowsheet:
    """Сборка схемы."""

    def test_devices_share_streams(self, flowsheet_data):
        flowsheet = load_flowsheet(flowsheet_data)
        mixer = flowsheet.device("mixer-1")
        reactor = flowsheet.device("reactor-1")

        assert isinstance(mixer, Mixer)
        assert isinstance(reactor, Reactor)
        assert mixer.get_outputs()[0] is reactor.get_inputs()[0]
        assert flowsheet.streams["s3"] is mixer.get_outputs()[0]

    def test_over_capacity_description_fails(self, flowsheet_data):
        flowsheet_data["devices"][1]["params"]["is_double_output"] = False
        with pytest.raises(CapacityExceeded):
            build_flowsheet(FlowsheetSpec.model_validate(flowsheet_data))

    def test_unknown_device_id(self, flowsheet_data):
        flowsheet = load_flowsheet(flowsheet_data)
        with pytest.raises(KeyError):
            flowsheet.device("nope")


class TestRunFlowsheet:
    """Расчёт схемы в заданном порядке."""

    def test_declaration_order(self, flowsheet_data):
        flowsheet = load_flowsheet(flowsheet_data)
        result = run_flowsheet(flowsheet)

        assert result.success
        assert result.streams["s3"] == pytest.approx(15.0)
        assert result.streams["s4"] == pytest.approx(7.5)
        assert result.streams["s5"] == pytest.approx(7.5)
        assert result.calculated == {"mixer-1": True, "reactor-1": True}

    def test_caller_order_is_not_sorted(self, flowsheet_data):
        """Реактор раньше смесителя считает по старому значению s3."""
        flowsheet = load_flowsheet(flowsheet_data)
        result = run_flowsheet(flowsheet, order=["reactor-1", "mixer-1"])

        assert result.success
        assert result.streams["s4"] == 0.0
        assert result.streams["s3"] == pytest.approx(15.0)

    def test_second_run_raises_recycle(self, flowsheet_data):
        flowsheet = load_flowsheet(flowsheet_data)
        run_flowsheet(flowsheet)
        with pytest.raises(RecycleError) as exc_info:
            run_flowsheet(flowsheet, stop_on_error=False)
        assert exc_info.value.device_type == "Mixer"

    def test_reset_allows_second_run(self, flowsheet_data):
        flowsheet = load_flowsheet(flowsheet_data)
        run_flowsheet(flowsheet)
        flowsheet.streams["s1"].set_mass_flow(20.0)

        reset_flowsheet(flowsheet)
        assert not any(d.is_calculated() for d in flowsheet.devices.values())
        result = run_flowsheet(flowsheet)
        assert result.streams["s4"] == pytest.approx(12.5)

    def test_precondition_error_propagates(self):
        flowsheet = load_flowsheet(
            {
                "streams": [{"name": "a"}],
                "devices": [{"id": "r", "type": "reactor", "outputs": ["a"]}],
            }
        )
        with pytest.raises(PreconditionError, match="No input stream"):
            run_flowsheet(flowsheet)

    def test_keep_going_records_errors(self):
        flowsheet = load_flowsheet(
            {
                "streams": [{"name": "a", "mass_flow": 4.0}, {"name": "b"}, {"name": "c"}],
                "devices": [
                    {"id": "bad", "type": "reactor", "outputs": ["b"]},
                    {"id": "good", "type": "mixer", "inputs": ["a"], "outputs": ["c"]},
                ],
            }
        )
        result = run_flowsheet(flowsheet, stop_on_error=False)

        assert not result.success
        assert result.errors == [
            {
                "device": "bad",
                "kind": "precondition",
                "message": "No input stream",
                "details": {"device_type": "Reactor"},
            }
        ]
        assert result.streams["c"] == pytest.approx(4.0)
        assert result.calculated == {"bad": False, "good": True}

    def test_result_to_dict(self, flowsheet_data):
        data = run_flowsheet(load_flowsheet(flowsheet_data)).to_dict()
        assert data["success"] is True
        assert set(data) == {"success", "streams", "calculated", "errors", "execution_time_ms"}


class TestSampleFlowsheet:
    """Пример схемы из каталога flowsheets/."""

    def test_sample_runs(self):
        path = Path(__file__).resolve().parents[1] / "flowsheets" / "mixer_reactor.json"
        spec = FlowsheetSpec.model_validate_json(path.read_text(encoding="utf-8"))
        result = run_flowsheet(build_flowsheet(spec))

        assert result.success
        assert result.streams["s4"] + result.streams["s5"] == pytest.approx(15.0)
