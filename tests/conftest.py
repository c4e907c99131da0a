import os

# Set environment variables BEFORE any imports that might use settings
os.environ["ENTITY_PACKAGE"] = "odata_memds.sample"
os.environ["API_PREFIX"] = "/odata"
os.environ["SEED_SAMPLE_DATA"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from odata_memds.api.deps import get_data_source
from odata_memds.main import app
from odata_memds.sample import seed
from odata_memds.services.annotation_ds import AnnotationInMemoryDs


@pytest.fixture(scope="function")
def data_source() -> AnnotationInMemoryDs:
    """Data source over the sample model with fresh, empty stores."""
    return AnnotationInMemoryDs("odata_memds.sample")


@pytest.fixture(scope="function")
def seeded_data_source(data_source: AnnotationInMemoryDs) -> AnnotationInMemoryDs:
    """Data source populated with the sample data set."""
    seed(data_source)
    return data_source


@pytest.fixture(scope="function")
def client(seeded_data_source: AnnotationInMemoryDs):
    """Create a test client with the data source dependency overridden."""
    app.dependency_overrides[get_data_source] = lambda: seeded_data_source

    yield TestClient(app)

    app.dependency_overrides.clear()
