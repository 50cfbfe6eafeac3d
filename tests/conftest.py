# tests/conftest.py

import sys
from pathlib import Path

import pytest

# Добавляем корень проекта в PYTHONPATH, чтобы импортировался пакет flowlab
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from flowlab.core.engine import StreamCounter  # noqa: E402
from flowlab.core.logging import configure_logging  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging()
    yield


@pytest.fixture
def counter() -> StreamCounter:
    """Свой счётчик потоков на каждый тест: имена s1, s2, ..."""
    return StreamCounter()


@pytest.fixture
def flowsheet_data() -> dict:
    """Смеситель на два входа, его выход питает реактор с двумя выходами."""
    return {
        "streams": [
            {"name": "s1", "mass_flow": 10.0},
            {"name": "s2", "mass_flow": 5.0},
            {"name": "s3"},
            {"name": "s4"},
            {"name": "s5"},
        ],
        "devices": [
            {
                "id": "mixer-1",
                "type": "mixer",
                "params": {"inputs_count": 2},
                "inputs": ["s1", "s2"],
                "outputs": ["s3"],
            },
            {
                "id": "reactor-1",
                "type": "reactor",
                "params": {"is_double_output": True},
                "inputs": ["s3"],
                "outputs": ["s4", "s5"],
            },
        ],
    }
