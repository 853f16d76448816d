from __future__ import annotations


# LinkedIn geoUrn codes used as the structured location filter on people search.
# Keys are lower-cased, trimmed location text as typed by users.
GEO_URNS: dict[str, str] = {
    # Countries
    "us": "103644278",
    "usa": "103644278",
    "united states": "103644278",
    "india": "102713980",
    "uk": "101165590",
    "united kingdom": "101165590",
    "canada": "101174742",
    "australia": "101452733",
    "singapore": "102454443",
    "uae": "104305776",
    "dubai": "104305776",
    # Indian cities
    "mumbai": "105214831",
    "bangalore": "105214077",
    "bengaluru": "105214077",
    "delhi": "106156739",
    "new delhi": "106156739",
    "hyderabad": "105193085",
    "chennai": "102713982",
    "pune": "106057199",
    "kolkata": "105193567",
    # US cities
    "new york": "102571732",
    "san francisco": "102277331",
    "los angeles": "102448103",
    "chicago": "103112676",
    "boston": "100293800",
    "seattle": "104116018",
    "austin": "100975049",
    # Other cities
    "london": "102257491",
    "toronto": "100025096",
    "sydney": "104769905",
}


def lookup_geo_urn(location: str | None) -> str | None:
    if not location:
        return None
    return GEO_URNS.get(" ".join(location.lower().split()))
