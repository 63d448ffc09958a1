"""Zone & parcel geometry pipeline.

Converts industrial zone and parcel outlines stored in national Lambert
Conformal Conic coordinates into WGS 84 map features: ordered rings,
area-weighted centroids and render-ready simplified polygons.
"""

__version__ = "0.1.0"
