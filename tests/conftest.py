from __future__ import annotations

from datetime import datetime

import pytest
import pytz


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday; the week started on Sunday 2026-02-01.
    return datetime(2026, 2, 4, 10, 0, 0, tzinfo=pytz.UTC)
