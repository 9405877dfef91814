"""
Runtime configuration for metarview.

Values are read once from the environment at import time, each with a default.
"""

import os

# Default operational minima
MIN_CEILING_FT = float(os.getenv("METARVIEW_MIN_CEILING_FT", "1000"))
MIN_VISIBILITY_SM = float(os.getenv("METARVIEW_MIN_VISIBILITY_SM", "3.0"))
MAX_CROSSWIND_KT = float(os.getenv("METARVIEW_MAX_CROSSWIND_KT", "15.0"))

# NOAA TGFTP observation files
NOAA_STATION_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/stations/{icao}.TXT"
NOAA_CYCLE_URL = "https://tgftp.nws.noaa.gov/data/observations/metar/cycles/{hour:02d}Z.TXT"
USER_AGENT = "metarview/0.1 (aviation weather tool)"

# Fetch limits
FETCH_TIMEOUT = float(os.getenv("METARVIEW_FETCH_TIMEOUT", "5"))
HISTORY_MAX_HOURS = int(os.getenv("METARVIEW_HISTORY_MAX_HOURS", "48"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
