from functools import lru_cache

from odata_memds.core.config import settings
from odata_memds.sample import seed
from odata_memds.services.annotation_ds import AnnotationInMemoryDs

SAMPLE_PACKAGE = "odata_memds.sample"


@lru_cache
def get_data_source() -> AnnotationInMemoryDs:
    """Data source for the configured entity package, created on first use."""
    data_source = AnnotationInMemoryDs(settings.entity_package)
    if settings.seed_sample_data and settings.entity_package == SAMPLE_PACKAGE:
        seed(data_source)
    return data_source
