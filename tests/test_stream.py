"""
Tests for Stream and StreamCounter.
"""

import pytest

from flowlab.core.engine import Stream, StreamCounter


class TestStream:
    """Тесты для Stream."""

    def test_from_number_builds_name(self):
        """Имя потока строится из порядкового номера."""
        stream = Stream.from_number(7)
        assert stream.get_name() == "s7"
        assert stream.get_mass_flow() == 0.0

    def test_empty_name_rejected(self):
        """Пустое имя при создании запрещено."""
        with pytest.raises(ValueError):
            Stream(name="")

    def test_set_mass_flow_accepts_negative(self):
        """Отрицательный расход не проверяется."""
        stream = Stream(name="s1")
        stream.set_mass_flow(-3.5)
        assert stream.get_mass_flow() == -3.5

    def test_set_name(self):
        stream = Stream(name="s1")
        stream.set_name("feed")
        assert stream.get_name() == "feed"

    def test_str_and_to_dict(self):
        stream = Stream(name="s1", mass_flow=10.0)
        assert str(stream) == "Stream s1 flow = 10"
        assert stream.to_dict() == {"name": "s1", "mass_flow": 10.0}

    def test_streams_compared_by_identity(self):
        """Два потока с одинаковыми данными: разные объекты схемы."""
        assert Stream(name="s1") != Stream(name="s1")


class TestStreamCounter:
    """Тесты для StreamCounter."""

    def test_sequential_names(self, counter):
        names = [counter.new_stream().get_name() for _ in range(3)]
        assert names == ["s1", "s2", "s3"]
        assert counter.value == 3

    def test_new_stream_sets_mass_flow(self, counter):
        assert counter.new_stream(12.5).get_mass_flow() == 12.5

    def test_counters_are_independent(self):
        first = StreamCounter()
        second = StreamCounter()
        first.next_number()
        first.next_number()
        assert second.next_number() == 1

    def test_reset_and_prefix(self):
        counter = StreamCounter(start=10, prefix="f")
        assert counter.new_stream().get_name() == "f11"
        counter.reset()
        assert counter.next_number() == 11
