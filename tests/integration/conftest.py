"""Mark everything under tests/integration/ as ``integration``.

These tests drive whole runs through the month stepper on the packaged
default economy.
"""

from pathlib import Path

import pytest

_HERE = Path(__file__).parent


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if _HERE in Path(item.fspath).parents:
            item.add_marker(pytest.mark.integration)
