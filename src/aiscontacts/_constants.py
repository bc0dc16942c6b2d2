"""Internal constants shared across the library."""

KNOTS_TO_MPS = 0.514444444
EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# AIS "not available" values for position report fields
# ------------------------------------------------------------------

SOG_NOT_AVAILABLE = 102.3
COG_NOT_AVAILABLE = 360.0
HEADING_NOT_AVAILABLE = 511

# Threshold to distinguish epoch seconds from milliseconds.
MS_THRESHOLD = 1_000_000_000_000
