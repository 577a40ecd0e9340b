import pathlib

import pytest


@pytest.fixture
def test_root_dir():
    return pathlib.Path(__file__).parent


@pytest.fixture
def extra_dir(test_root_dir):
    return test_root_dir / '..' / 'extra' / 'ply'
