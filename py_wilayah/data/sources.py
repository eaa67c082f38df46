"""
Boundary file locations and the HTTP fetch collaborator.

Three feature collections back the explorer: one national province file,
one national regency file, and one district file per province stored in a
folder named after the province code. The code -> folder table is an
immutable mapping handed to ``BoundaryUrls``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests
import structlog

logger = structlog.get_logger()

PROVINCE_FOLDERS: Mapping[str, str] = MappingProxyType(
    {
        "11": "id11_aceh",
        "12": "id12_sumatera_utara",
        "13": "id13_sumatera_barat",
        "14": "id14_riau",
        "15": "id15_jambi",
        "16": "id16_sumatera_selatan",
        "17": "id17_bengkulu",
        "18": "id18_lampung",
        "19": "id19_kepulauan_bangka_belitung",
        "21": "id21_kepulauan_riau",
        "31": "id31_dki_jakarta",
        "32": "id32_jawa_barat",
        "33": "id33_jawa_tengah",
        "34": "id34_daerah_istimewa_yogyakarta",
        "35": "id35_jawa_timur",
        "36": "id36_banten",
        "51": "id51_bali",
        "52": "id52_nusa_tenggara_barat",
        "53": "id53_nusa_tenggara_timur",
        "61": "id61_kalimantan_barat",
        "62": "id62_kalimantan_tengah",
        "63": "id63_kalimantan_selatan",
        "64": "id64_kalimantan_timur",
        "65": "id65_kalimantan_utara",
        "71": "id71_sulawesi_utara",
        "72": "id72_sulawesi_tengah",
        "73": "id73_sulawesi_selatan",
        "74": "id74_sulawesi_tenggara",
        "75": "id75_gorontalo",
        "76": "id76_sulawesi_barat",
        "81": "id81_maluku",
        "82": "id82_maluku_utara",
        "91": "id91_papua_barat",
        "94": "id94_papua",
    }
)


@dataclass(frozen=True)
class BoundaryUrls:
    """Builds the URL of each level's boundary file."""

    base_url: str
    provinces_file: str = "prov 37.geojson"
    regencies_file: str = "kab 37.geojson"
    folders: Mapping[str, str] = field(
        default_factory=lambda: PROVINCE_FOLDERS, compare=False, hash=False
    )

    def _join(self, *parts: str) -> str:
        return "/".join([self.base_url.rstrip("/")] + [p.strip("/") for p in parts])

    def provinces(self) -> str:
        return self._join(self.provinces_file)

    def regencies(self) -> str:
        return self._join(self.regencies_file)

    def districts(self, prov_id) -> Optional[str]:
        """District file of a province, or None when the code has no folder."""
        folder = self.folders.get(str(prov_id))
        if folder is None:
            return None
        return self._join(folder, f"{folder}_district.geojson")


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one fetch: a parsed feature collection or a failure."""

    url: str
    collection: Optional[Dict[str, Any]] = None
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.collection is not None

    @property
    def features(self) -> List[Dict[str, Any]]:
        """Features of the collection; a failure reads as zero features."""
        if not self.ok:
            return []
        features = self.collection.get("features")
        return [f for f in features if isinstance(f, dict)] if isinstance(features, list) else []

    @classmethod
    def failure(cls, url: str, error: str, status: Optional[int] = None) -> "FetchResult":
        return cls(url=url, status=status, error=error)


class Fetcher:
    """
    Fetch collaborator.

    ``fetch`` delivers exactly one FetchResult to ``on_result``, either
    before returning or later. It never raises and never retries.
    """

    def fetch(self, url: str, on_result: Callable[[FetchResult], None]) -> None:
        raise NotImplementedError


class RequestsFetcher(Fetcher):
    """Blocking fetch over HTTP with ``requests``."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def get(self, url: str) -> FetchResult:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Boundary fetch failed", url=url, error=str(e))
            return FetchResult.failure(url, str(e))

        if not response.ok:
            logger.error("Boundary fetch failed", url=url, status=response.status_code)
            return FetchResult.failure(
                url, f"Failed to fetch {url}: {response.status_code}", status=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Boundary file is not valid JSON", url=url, error=str(e))
            return FetchResult.failure(url, f"Invalid JSON: {e}", status=response.status_code)

        if not isinstance(payload, dict):
            return FetchResult.failure(url, "Not a feature collection", status=response.status_code)

        result = FetchResult(url=url, collection=payload, status=response.status_code)
        logger.info("Boundary file loaded", url=url, features=len(result.features))
        return result

    def fetch(self, url: str, on_result: Callable[[FetchResult], None]) -> None:
        on_result(self.get(url))


def fetch_collection(fetcher: Fetcher, url: Optional[str]) -> FetchResult:
    """Run a fetch to completion and return its result."""
    if url is None:
        return FetchResult.failure("", "No boundary file for this region")

    results: List[FetchResult] = []
    fetcher.fetch(url, results.append)
    if not results:
        return FetchResult.failure(url, "Fetcher did not complete synchronously")
    return results[0]
