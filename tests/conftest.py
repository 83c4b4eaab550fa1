from __future__ import annotations

import pytest

from core.models import UploadedFile
from tests.helpers import make_upload


@pytest.fixture()
def scenario_uploads() -> list[UploadedFile]:
    return [
        make_upload("root/Site001/Damage/a.jpg"),
        make_upload("root/Site001/Precondition/p1.jpg"),
        make_upload("root/Site001/Precondition/p2.jpg"),
        make_upload("root/Site002/damage/b.jpg"),
    ]


@pytest.fixture()
def scenario_gps() -> dict[str, tuple[float, float]]:
    return {"a.jpg": (10.0, 10.0), "p1.jpg": (10.0, 10.001)}
