import pytest
import os

from labnotes.growth import simulate_plate

@pytest.fixture(scope="session")
def growth_smoke_csv(tmp_path_factory):
    """Write a small simulated plate and return its path."""

    out_dir = tmp_path_factory.mktemp("growth-smoke")
    out_root = os.path.join(str(out_dir), "growth-smoke")
    simulate_plate(num_wells=4, t_max=16, dt=1.0, well_cv=0.2, seed=0,
                   out_root=out_root)
    return f"{out_root}_plate.csv"
