"""Seismic Sources

The seismic sources package models earthquake sources for seismic
hazard calculation. Each source deterministically enumerates the
finite set of ruptures it can produce, each with a magnitude, an
annual rate, a rake and a surface from which distances to a site are
computed.

Source Types
------------

- Point sources (`seismic_sources.point_sources`), as simple points,
  as finite ruptures of unknown strike or as rectangles with a fixed
  strike. Collections of point sources share a depth model
  (`seismic_sources.grid_sources`, `seismic_sources.depth_model`).
- Fault and subduction interface sources
  (`seismic_sources.fault_sources`), whose ruptures fill or float
  over a gridded surface.
- Cluster sources (`seismic_sources.fault_sources.ClusterSource`),
  groups of faults that rupture together.

Distances
---------

Every rupture surface (`seismic_sources.surfaces`) computes the
Joyner-Boore distance, the rupture distance and the hanging-wall
distance (r_x) to a site.

Models
------

Rupture dimensions come from scaling relationships
(`seismic_sources.rupture_scaling`), and smaller ruptures are tiled
over fault surfaces by floating models
(`seismic_sources.rupture_floating`)."""
