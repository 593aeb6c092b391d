from __future__ import annotations

import pytest

from services.manipulation_service import ManipulationService
from services.traversal_service import TraversalService


@pytest.fixture
def service() -> ManipulationService:
    return ManipulationService(TraversalService(max_workers=3))
