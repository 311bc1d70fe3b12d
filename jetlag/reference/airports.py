"""
Static airport reference data.

Metro groupings and coordinates are configuration, not logic: they are
loaded once as read-only mappings and queried through AirportDirectory so
the tables can be swapped or tested independently of the validator.

Coverage is partial. Distances involving an airport without coordinates
fall back to DEFAULT_DISTANCE_MILES, which is deliberately far enough that
any short connection to it is treated as needing a flight.
"""

import math
from types import MappingProxyType
from typing import Mapping

EARTH_RADIUS_MILES = 3959
DEFAULT_DISTANCE_MILES = 5000.0

# Metropolitan airport groups where inter-airport ground transfers are reasonable
METRO_AIRPORT_GROUPS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        # North America
        "NYC": ("JFK", "LGA", "EWR"),
        "LOS_ANGELES": ("LAX", "BUR", "ONT", "SNA", "LGB"),
        "SAN_FRANCISCO": ("SFO", "OAK", "SJC"),
        "WASHINGTON_DC": ("IAD", "DCA", "BWI"),
        "CHICAGO": ("ORD", "MDW"),
        "HOUSTON": ("IAH", "HOU"),
        "DALLAS": ("DFW", "DAL"),
        "SOUTH_FLORIDA": ("MIA", "FLL", "PBI"),
        "DETROIT": ("DTW", "DET"),
        "TORONTO": ("YYZ", "YTZ", "YHM"),
        "MONTREAL": ("YUL", "YMX"),
        # Europe
        "LONDON": ("LHR", "LGW", "STN", "LTN", "LCY", "SEN"),
        "PARIS": ("CDG", "ORY", "BVA"),
        "MILAN": ("MXP", "LIN", "BGY"),
        "ROME": ("FCO", "CIA"),
        "BERLIN": ("BER", "SXF", "TXL"),
        "STOCKHOLM": ("ARN", "BMA", "NYO", "VST"),
        "OSLO": ("OSL", "TRF", "RYG"),
        "BRUSSELS": ("BRU", "CRL"),
        "BARCELONA": ("BCN", "GRO", "REU"),
        "MOSCOW": ("SVO", "DME", "VKO"),
        "ISTANBUL": ("IST", "SAW"),
        "COPENHAGEN_MALMO": ("CPH", "MMX"),
        "BASEL_MULHOUSE": ("BSL", "MLH", "EAP"),
        # Asia-Pacific
        "TOKYO": ("NRT", "HND"),
        "OSAKA": ("KIX", "ITM"),
        "SHANGHAI": ("PVG", "SHA"),
        "BEIJING": ("PEK", "PKX"),
        "BANGKOK": ("BKK", "DMK"),
        "SEOUL": ("ICN", "GMP"),
        "TAIPEI": ("TPE", "TSA"),
        "JAKARTA": ("CGK", "HLP"),
        "MANILA": ("MNL", "CRK"),
        "KUALA_LUMPUR": ("KUL", "SZB"),
        "CHENGDU": ("CTU", "TFU"),
        # Middle East & South Asia
        "DUBAI": ("DXB", "DWC"),
        "TEL_AVIV": ("TLV", "SDV"),
        # South America
        "SAO_PAULO": ("GRU", "CGH", "VCP"),
        "BUENOS_AIRES": ("EZE", "AEP"),
        "RIO_DE_JANEIRO": ("GIG", "SDU"),
        # Africa
        "JOHANNESBURG": ("JNB", "HLA"),
    }
)

# (latitude, longitude) in degrees
AIRPORT_COORDS: Mapping[str, tuple[float, float]] = MappingProxyType(
    {
        # North America
        "JFK": (40.6413, -73.7781),
        "LGA": (40.7769, -73.8740),
        "EWR": (40.6895, -74.1745),
        "BOS": (42.3656, -71.0096),
        "LAX": (33.9416, -118.4085),
        "SFO": (37.6213, -122.3790),
        "OAK": (37.7213, -122.2200),
        "SJC": (37.3639, -121.9289),
        "SEA": (47.4502, -122.3088),
        "ORD": (41.9742, -87.9073),
        "MDW": (41.7868, -87.7522),
        "IAD": (38.9531, -77.4565),
        "DCA": (38.8521, -77.0377),
        "BWI": (39.1774, -76.6684),
        "ATL": (33.6407, -84.4277),
        "DFW": (32.8998, -97.0403),
        "IAH": (29.9902, -95.3368),
        "DEN": (39.8561, -104.6737),
        "MIA": (25.7959, -80.2870),
        "FLL": (26.0742, -80.1506),
        "HNL": (21.3187, -157.9225),
        "YYZ": (43.6777, -79.6248),
        "YVR": (49.1939, -123.1844),
        # Europe
        "LHR": (51.4700, -0.4543),
        "LGW": (51.1537, -0.1821),
        "STN": (51.8860, 0.2389),
        "LTN": (51.8747, -0.3683),
        "LCY": (51.5048, 0.0495),
        "CDG": (49.0097, 2.5479),
        "ORY": (48.7233, 2.3794),
        "FCO": (41.8003, 12.2389),
        "AMS": (52.3105, 4.7683),
        "FRA": (50.0379, 8.5622),
        "MUC": (48.3537, 11.7750),
        "ZRH": (47.4582, 8.5555),
        "MAD": (40.4983, -3.5676),
        "BCN": (41.2974, 2.0833),
        "LIS": (38.7742, -9.1342),
        "DUB": (53.4264, -6.2499),
        "CPH": (55.6180, 12.6508),
        "IST": (41.2753, 28.7519),
        "SAW": (40.8986, 29.3092),
        # Asia-Pacific
        "NRT": (35.7720, 140.3929),
        "HND": (35.5494, 139.7798),
        "ICN": (37.4602, 126.4407),
        "PVG": (31.1443, 121.8083),
        "PEK": (40.0799, 116.6031),
        "HKG": (22.3080, 113.9185),
        "SIN": (1.3644, 103.9915),
        "BKK": (13.6900, 100.7501),
        "TPE": (25.0797, 121.2342),
        "KUL": (2.7456, 101.7072),
        "DEL": (28.5562, 77.1000),
        "BOM": (19.0896, 72.8656),
        "SYD": (-33.9399, 151.1753),
        "MEL": (-37.6690, 144.8410),
        "AKL": (-37.0082, 174.7850),
        "NAN": (-17.7554, 177.4431),
        # Middle East
        "DXB": (25.2532, 55.3657),
        "DOH": (25.2731, 51.6080),
        "AUH": (24.4330, 54.6511),
        # South America
        "GRU": (-23.4356, -46.4731),
        "GIG": (-22.8099, -43.2505),
        "EZE": (-34.8222, -58.5358),
        "SCL": (-33.3930, -70.7858),
        # Africa
        "JNB": (-26.1367, 28.2411),
        "CPT": (-33.9715, 18.6021),
        "CAI": (30.1219, 31.4056),
    }
)


def _index_metro_groups(groups: Mapping[str, tuple[str, ...]]) -> Mapping[str, str]:
    """Invert metro -> airports into airport -> metro."""
    index = {}
    for metro, airports in groups.items():
        for code in airports:
            index[code] = metro
    return MappingProxyType(index)


def haversine_miles(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance in statute miles between two (lat, lon) points."""
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    d_lat = lat2 - lat1
    d_lon = lon2 - lon1

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class AirportDirectory:
    """Read-only lookups over the metro-group and coordinate tables."""

    def __init__(
        self,
        metro_groups: Mapping[str, tuple[str, ...]] = METRO_AIRPORT_GROUPS,
        coordinates: Mapping[str, tuple[float, float]] = AIRPORT_COORDS,
    ):
        self.metro_groups = metro_groups
        self.coordinates = coordinates
        self._metro_index = _index_metro_groups(metro_groups)

    def metro_group(self, airport_code: str) -> str | None:
        return self._metro_index.get(airport_code)

    def same_metro(self, code1: str, code2: str) -> bool:
        """True when both airports belong to the same known metro group."""
        metro = self.metro_group(code1)
        return metro is not None and metro == self.metro_group(code2)

    def is_connected(self, arrival_code: str, departure_code: str) -> bool:
        """Same airport, or reachable by ground transfer within one metro."""
        return arrival_code == departure_code or self.same_metro(arrival_code, departure_code)

    def has_coordinates(self, *codes: str) -> bool:
        return all(code in self.coordinates for code in codes)

    def distance_miles(self, code1: str, code2: str) -> float:
        """Haversine distance, or DEFAULT_DISTANCE_MILES when coordinates are missing."""
        if not self.has_coordinates(code1, code2):
            return DEFAULT_DISTANCE_MILES
        return haversine_miles(self.coordinates[code1], self.coordinates[code2])


DEFAULT_AIRPORTS = AirportDirectory()
