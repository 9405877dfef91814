import pytest
from datetime import datetime, timezone


@pytest.fixture
def reference_time() -> datetime:
    """Retrieval time used to resolve DDHHMMZ stamps in tests."""
    return datetime(2024, 3, 12, 13, 5, tzinfo=timezone.utc)


@pytest.fixture
def kjfk_series() -> list:
    """Three KJFK reports, oldest first, with visibility and ceiling falling."""
    return [
        "KJFK 121051Z 20012KT 10SM FEW250 14/08 A3001",
        "KJFK 121151Z 20014KT 5SM HZ BKN015 13/09 A2998",
        "KJFK 121251Z 20020G28KT 2SM BR OVC008 12/11 A2990",
    ]
