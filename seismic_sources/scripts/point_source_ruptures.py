"""Tabulate the ruptures of a point source and their distances to a site."""

from pathlib import Path
from typing import Annotated, Optional

import pandas as pd
import typer

from seismic_sources import log_utils, parse_utils
from seismic_sources.depth_model import DepthModel
from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.point_sources import PointSourceType, point_source
from seismic_sources.rupture_scaling import RuptureScaling

app = typer.Typer()


@app.command(help="Write the ruptures of a point source, with distances to a site, to a CSV.")
@log_utils.log_call(include_result=False)
def point_source_ruptures(
    latitude: Annotated[float, typer.Argument(help="Latitude of the point source.")],
    longitude: Annotated[float, typer.Argument(help="Longitude of the point source.")],
    site_latitude: Annotated[float, typer.Argument(help="Latitude of the site.")],
    site_longitude: Annotated[float, typer.Argument(help="Longitude of the site.")],
    output_ffp: Annotated[
        Path, typer.Argument(help="Output CSV path.", dir_okay=False, writable=True)
    ],
    magnitudes: Annotated[
        list[float],
        typer.Option("--magnitude", help="Magnitude bin (repeat for each bin)."),
    ],
    rates: Annotated[
        list[float],
        typer.Option("--rate", help="Annual rate of each magnitude bin."),
    ],
    mechanisms: Annotated[
        str, typer.Option(help="Focal mechanism weights, e.g. [STRIKE_SLIP:1.0].")
    ] = "[STRIKE_SLIP:1.0]",
    mag_depth_map: Annotated[
        str, typer.Option(help="Magnitude-depth map, e.g. [10.0::[5.0:1.0]].")
    ] = "[10.0::[5.0:1.0]]",
    max_depth: Annotated[
        float, typer.Option(help="Maximum depth of ruptures (km).")
    ] = 14.0,
    point_type: Annotated[
        PointSourceType, typer.Option(help="Point source model.")
    ] = PointSourceType.FINITE,
    rupture_scaling: Annotated[
        RuptureScaling, typer.Option(help="Rupture scaling model.")
    ] = RuptureScaling.NSHM_POINT_WC94_LENGTH,
    strike: Annotated[
        Optional[float],
        typer.Option(help="Strike of the ruptures, required for fixed strike sources."),
    ] = None,
) -> None:
    """Write the ruptures of a point source, with distances to a site, to a CSV.

    Parameters
    ----------
    latitude : float
        Latitude of the point source.
    longitude : float
        Longitude of the point source.
    site_latitude : float
        Latitude of the site.
    site_longitude : float
        Longitude of the site.
    output_ffp : Path
        Output CSV path.
    magnitudes : list[float]
        Magnitude bins.
    rates : list[float]
        Annual rate of each magnitude bin.
    mechanisms : str
        Focal mechanism weights.
    mag_depth_map : str
        Magnitude-depth map.
    max_depth : float
        Maximum depth of ruptures (km).
    point_type : PointSourceType
        Point source model.
    rupture_scaling : RuptureScaling
        Rupture scaling model.
    strike : float | None
        Strike of the ruptures.
    """
    mfd = MagnitudeFrequencyDistribution(magnitudes, rates)
    depth_model = DepthModel.create(
        parse_utils.parse_value_weight_map(mag_depth_map), mfd.magnitudes, max_depth
    )
    source = point_source(
        point_type,
        [latitude, longitude],
        mfd,
        parse_utils.parse_mechanism_weights(mechanisms),
        rupture_scaling,
        depth_model,
        strike=strike,
    )
    site = [site_latitude, site_longitude]
    rows = []
    for index, rupture in enumerate(source):
        distance = rupture.surface.distance_to(site)
        rows.append(
            {
                "index": index,
                "magnitude": rupture.magnitude,
                "rate": rupture.rate,
                "rake": rupture.rake,
                "dip": rupture.surface.dip(),
                "z_top": rupture.surface.depth(),
                "width": rupture.surface.width(),
                "r_jb": distance.r_jb,
                "r_rup": distance.r_rup,
                "r_x": distance.r_x,
            }
        )
    pd.DataFrame(
        rows,
        columns=[
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
        ],
    ).to_csv(output_ffp, index=False)


def main():
    app()


if __name__ == "__main__":
    main()
