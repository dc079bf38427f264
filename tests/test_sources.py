import numpy as np
import pytest

from seismic_sources.depth_model import DepthModel
from seismic_sources.fault_sources import (
    ClusterSourceBuilder,
    FaultSourceBuilder,
    FaultSourceSet,
    InterfaceSourceBuilder,
)
from seismic_sources.focal_mechanism import FocalMechanism
from seismic_sources.mfd import MagnitudeFrequencyDistribution
from seismic_sources.point_sources import PointSourceType, point_source
from seismic_sources.rupture_floating import RuptureFloating
from seismic_sources.rupture_scaling import RuptureScaling
from seismic_sources.sources import Source, SourceType
from seismic_sources.surfaces import RuptureSurface

TRACE = np.array([[0.0, 0.0], [0.09, 0.0]])
MFD = MagnitudeFrequencyDistribution([6.0], [1e-3])


def fault(name: str, trace: np.ndarray = TRACE):
    return (
        FaultSourceBuilder()
        .name(name)
        .id(1)
        .trace(trace)
        .dip(60.0)
        .width(10.0)
        .depth(0.0)
        .rake(90.0)
        .mfd(MFD)
        .surface_spacing(1.0)
        .rupture_scaling(RuptureScaling.NSHM_FAULT_WC94_LENGTH)
        .rupture_floating(RuptureFloating.OFF)
        .rupture_variability(False)
        .build()
    )


def interface():
    return (
        InterfaceSourceBuilder()
        .name("Interface")
        .id(2)
        .trace(TRACE)
        .depth(10.0)
        .dip(20.0)
        .width(50.0)
        .rake(90.0)
        .mfd(MagnitudeFrequencyDistribution([8.0], [1e-4]))
        .surface_spacing(5.0)
        .rupture_scaling(RuptureScaling.CONTRERAS_INTERFACE_2017)
        .rupture_floating(RuptureFloating.OFF)
        .rupture_variability(False)
        .build()
    )


def point(point_type: PointSourceType):
    return point_source(
        point_type,
        [-43.5, 172.6],
        MagnitudeFrequencyDistribution([6.5], [1e-2]),
        {FocalMechanism.REVERSE: 1.0},
        RuptureScaling.NSHM_POINT_WC94_LENGTH,
        DepthModel.create({10.0: {5.0: 1.0}}, [6.5], 14.0),
        strike=45.0,
    )


def cluster():
    fault_set = FaultSourceSet(
        "Cluster", 3, 1.0, [fault("West"), fault("East", TRACE + [0.0, 1.0])]
    )
    return ClusterSourceBuilder().rate(0.002).faults(fault_set).build()


@pytest.mark.parametrize(
    "factory, source_type",
    [
        (lambda: fault("Fault"), SourceType.FAULT),
        (interface, SourceType.INTERFACE),
        (lambda: point(PointSourceType.POINT), SourceType.GRID),
        (lambda: point(PointSourceType.FINITE), SourceType.GRID),
        (lambda: point(PointSourceType.FIXED_STRIKE), SourceType.GRID),
        (cluster, SourceType.CLUSTER),
    ],
)
def test_sources_conform(factory, source_type: SourceType):
    """Every source kind satisfies the common source interface."""
    source = factory()
    assert isinstance(source, Source)
    assert source.type == source_type
    assert len(source) == source.size()
    assert source.mfds()


@pytest.mark.parametrize(
    "factory",
    [
        lambda: fault("Fault"),
        interface,
        lambda: point(PointSourceType.POINT),
        lambda: point(PointSourceType.FINITE),
        lambda: point(PointSourceType.FIXED_STRIKE),
    ],
)
def test_rupture_surfaces_conform(factory):
    """Every rupture surface satisfies the common surface interface."""
    site = np.array([-43.4, 172.7])
    for rupture in factory():
        surface = rupture.surface
        assert isinstance(surface, RuptureSurface)
        distance = surface.distance_to(site)
        assert distance.r_rup > 0.0
        assert distance.r_jb >= 0.0
