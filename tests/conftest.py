import pytest

from tokenbind import set_active


@pytest.fixture(autouse=True)
def _unset_active_container():
    yield
    set_active(None)
