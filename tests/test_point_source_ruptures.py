from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from typer.testing import CliRunner

from seismic_sources.errors import ConfigurationError
from seismic_sources.scripts.point_source_ruptures import app

runner = CliRunner()

SOURCE_AND_SITE = ["34.0", "118.0", "34.0", "118.5"]


def invoke(output_ffp: Path, *options: str):
    """Run the point source rupture table command."""
    return runner.invoke(
        app,
        [*SOURCE_AND_SITE, str(output_ffp), "--magnitude", "6.0", "--rate", "0.01", *options],
    )


def test_point_rupture_table(tmp_path: Path):
    """A point source with one magnitude and depth has a single rupture."""
    output_ffp = tmp_path / "ruptures.csv"
    result = invoke(output_ffp, "--point-type", "point")
    assert result.exit_code == 0, result.output
    ruptures = pd.read_csv(output_ffp)
    assert list(ruptures.columns) == [
        "index",
        "magnitude",
        "rate",
        "rake",
        "dip",
        "z_top",
        "width",
        "r_jb",
        "r_rup",
        "r_x",
    ]
    assert len(ruptures) == 1
    rupture = ruptures.iloc[0]
    assert rupture["rate"] == pytest.approx(0.01)
    assert rupture["z_top"] == 5.0
    assert rupture["r_rup"] == pytest.approx(np.hypot(rupture["r_jb"], 5.0))


def test_finite_rupture_table(tmp_path: Path):
    """Finite sources list footwall and hanging wall reverse ruptures."""
    output_ffp = tmp_path / "ruptures.csv"
    result = invoke(
        output_ffp,
        "--mechanisms",
        "[STRIKE_SLIP:0.5, REVERSE:0.5]",
        "--mag-depth-map",
        "[10.0::[5.0:0.5, 10.0:0.5]]",
    )
    assert result.exit_code == 0, result.output
    ruptures = pd.read_csv(output_ffp)
    assert len(ruptures) == 2 + 2 * 2
    assert list(ruptures["rake"]) == [0.0] * 2 + [90.0] * 4
    assert ruptures["rate"].sum() == pytest.approx(0.01)
    hanging_wall = ruptures.iloc[4]
    footwall = ruptures.iloc[2]
    assert hanging_wall["r_x"] > 0 > footwall["r_x"]


def test_fixed_strike_rupture_table(tmp_path: Path):
    """Fixed strike sources need a strike."""
    output_ffp = tmp_path / "ruptures.csv"
    result = invoke(output_ffp, "--point-type", "fixed_strike")
    assert result.exit_code != 0
    assert isinstance(result.exception, ConfigurationError)
    assert not output_ffp.exists()

    result = invoke(output_ffp, "--point-type", "fixed_strike", "--strike", "30")
    assert result.exit_code == 0, result.output
    assert len(pd.read_csv(output_ffp)) == 1
