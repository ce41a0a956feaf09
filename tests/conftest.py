from __future__ import annotations

import pytest

from shiftguard.domain.models import Guard, Site
from tests.factories import make_guard, make_site


@pytest.fixture()
def guard() -> Guard:
    return make_guard()


@pytest.fixture()
def site() -> Site:
    return make_site()
