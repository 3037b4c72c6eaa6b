import matplotlib

matplotlib.use("Agg")

import pytest

from histvar.config import VarSettings
from histvar.var import HistoricalVarEngine
from pnl_samples import SCENARIO_PNL


@pytest.fixture
def engine():
    return HistoricalVarEngine(VarSettings(min_data_points=5))


@pytest.fixture
def scenario_pnl():
    return list(SCENARIO_PNL)
