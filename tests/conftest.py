import httpx
import pytest

from rangetest.dataset import load_dataset
from rangetest.http import build_client
from rangetest.scenarios import build_catalog
from tests.apps.ranges import range_app


TARGET_URL = 'https://rangetest.local/data.txt'


@pytest.fixture(scope='session')
def dataset():
    return load_dataset()


@pytest.fixture(scope='function')
def catalog(dataset):
    return build_catalog(dataset)


@pytest.fixture(scope='function')
def scenario(catalog):
    by_name = {item.name: item for item in catalog}
    return by_name.__getitem__


@pytest.fixture(scope='function')
def range_transport(dataset):
    def factory(**kwargs):
        return httpx.MockTransport(range_app(dataset.data, **kwargs))

    return factory


@pytest.fixture(scope='function')
def client(range_transport):
    with build_client(transport=range_transport()) as client:
        yield client
