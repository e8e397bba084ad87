#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route, /table)
#timeouts and transport errors
#parsing response JSON into our internal shape
#It should not contain matching rules or scoring.


from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Tuple

import requests
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Read OSRM base URL from environment
# Example in .env:
# BASE_URL=http://router.project-osrm.org
load_dotenv()
BASE_URL = os.getenv("BASE_URL")

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]


class OSRMError(Exception):
    """Raised when OSRM cannot be reached or returns a non-Ok response."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lon) → OSRM (lon,lat)
    - Return normalized outputs

    """
    def __init__(self, base_url: Optional[str] = None, profile: str = "driving", timeout: int = 5):
        self.base_url = base_url or BASE_URL
        self.timeout = timeout #seconds to wait for OSRM before giving up
        self.profile = profile #mode of transportation (driving, walking, cycling)

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set BASE_URL in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join([f"{lon},{lat}" for lat, lon in coords])

    def _get(self, url: str, params: Dict[str, str]) -> dict:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise OSRMError(f"OSRM request failed: {e}") from e

        if data.get("code") != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")
        return data

    #----------------
    # route service
    #----------------
    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, float]:
        """
        Calls the OSRM /route endpoint and returns distance and duration.

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"
        data = self._get(url, {"overview": "false"})

        try:
            route = data["routes"][0] #OSRM may return alternatives, the first is the best
            return {
                "distance": route["distance"],
                "duration": route["duration"],
            }
        except (KeyError, IndexError, TypeError) as e:
            raise OSRMError(f"OSRM route response is malformed: {e!r}") from e

    #----------------
    # table service (batch routing)
    #----------------
    def compute_table(self, sources: List[LatLon],
                      destinations: List[LatLon]
                      ) -> Dict[str, List[List[Optional[float]]]]:
        """
        Calls the OSRM /table endpoint for a sources x destinations matrix.

        Returns:
            {
                "durations": [[seconds, ...], ...],
                "distances": [[meters, ...], ...],
            }
        Unroutable pairs come back as None.
        """
        if not sources or not destinations:
            return {"durations": [], "distances": []}

        coordinates = self.format_coordinates(sources + destinations)
        params = {
            "sources": ";".join(str(i) for i in range(len(sources))),
            "destinations": ";".join(
                str(i) for i in range(len(sources), len(sources) + len(destinations))
            ),
            "annotations": "duration,distance",
        }

        url = f"{self.base_url}/table/v1/{self.profile}/{coordinates}"
        data = self._get(url, params)

        logger.debug("OSRM table %dx%d fetched", len(sources), len(destinations))
        return {
            "durations": data.get("durations", []),
            "distances": data.get("distances", []),
        }
