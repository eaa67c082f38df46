"""FastAPI main application."""

import logging
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.explorer import RegionLayer, point_seed, prepare_level
from ..core.geometry import INDONESIA_BOUNDS, bounding_box
from ..core.navigation import ROOT, SelectionPath
from ..core.sampler import dummy_score, generate_points_inside, score_band
from ..core.units import AdministrativeUnit
from ..data.sources import BoundaryUrls, RequestsFetcher, fetch_collection

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(
    title="Wilayah Explorer API",
    description="Province, regency and district boundaries for drill-down maps",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

urls = BoundaryUrls(
    base_url=settings.boundary_base_url,
    provinces_file=settings.provinces_file,
    regencies_file=settings.regencies_file,
)
fetcher = RequestsFetcher(timeout=settings.fetch_timeout)


# Response models
class RegionCollection(BaseModel):
    """Scored regions of one level, as a GeoJSON FeatureCollection."""

    type: str = "FeatureCollection"
    level: str
    path: List[str] = Field(default_factory=list, description="Selected region names, outermost first")
    bounds: Optional[List[List[float]]] = Field(
        None, description="[[south, west], [north, east]] of the selected region"
    )
    count: int
    features: List[Dict[str, Any]]


class PointResponse(BaseModel):
    id: str
    name: str
    lat: float
    lon: float


class ScoreResponse(BaseModel):
    key: str
    score: int
    band: str


def _collection(layer: RegionLayer) -> RegionCollection:
    leaf = layer.path.leaf
    box = bounding_box(leaf.geometry) if leaf is not None else INDONESIA_BOUNDS
    return RegionCollection(
        level=layer.level.name.lower(),
        path=layer.path.names(),
        bounds=box.to_leaflet_bounds() if box is not None else None,
        count=len(layer),
        features=layer.features,
    )


def _load(path: SelectionPath) -> RegionLayer:
    if path.depth == 0:
        url = urls.provinces()
    elif path.depth == 1:
        url = urls.regencies()
    else:
        url = urls.districts(path.province.id)
    result = fetch_collection(fetcher, url)
    if not result.ok:
        logger.warning("Level unavailable, returning empty layer", url=result.url, error=result.error)
    return prepare_level(path, result.features)


def _province_path(prov_id: str) -> SelectionPath:
    for unit in _load(ROOT).units:
        if unit.id == str(prov_id):
            return ROOT.select(unit)
    raise HTTPException(status_code=404, detail="Province not found")


def _child(layer: RegionLayer, name: str, kind: str) -> AdministrativeUnit:
    unit = layer.index.get(name)
    if unit is None:
        raise HTTPException(status_code=404, detail=f"{kind} not found")
    return unit


@app.on_event("startup")
async def startup_event():
    logger.info("Starting Wilayah Explorer API", boundary_base_url=settings.boundary_base_url)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Wilayah Explorer API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/regions/provinces", response_model=RegionCollection)
def list_provinces():
    """All provinces, scored."""
    return _collection(_load(ROOT))


@app.get("/regions/provinces/{prov_id}/regencies", response_model=RegionCollection)
def list_regencies(prov_id: str):
    """Regencies of a province, joined on ``prov_id``."""
    return _collection(_load(_province_path(prov_id)))


@app.get(
    "/regions/provinces/{prov_id}/regencies/{regency}/districts",
    response_model=RegionCollection,
)
def list_districts(prov_id: str, regency: str):
    """Districts of a regency, dissolved to one MultiPolygon per name."""
    province_path = _province_path(prov_id)
    regency_unit = _child(_load(province_path), regency, "Regency")
    return _collection(_load(province_path.select(regency_unit)))


@app.get(
    "/regions/provinces/{prov_id}/regencies/{regency}/districts/{district}/points",
    response_model=List[PointResponse],
)
def district_points(
    prov_id: str,
    regency: str,
    district: str,
    seed: Optional[str] = Query(None, description="Seed string; defaults to the region path"),
):
    """Synthetic placeholder points inside one district."""
    province_path = _province_path(prov_id)
    regency_path = province_path.select(_child(_load(province_path), regency, "Regency"))
    district_unit = _child(_load(regency_path), district, "District")
    district_path = regency_path.select(district_unit)

    points = generate_points_inside(
        district_unit.geometry,
        seed or point_seed(district_path),
        desired_count_range=settings.points_range,
    )
    return [PointResponse(id=p.id, name=p.name, lat=p.lat, lon=p.lon) for p in points]


@app.get("/scores/{key}", response_model=ScoreResponse)
async def get_score(key: str):
    """Placeholder score for a key such as ``kab:bogor``."""
    score = dummy_score(key)
    return ScoreResponse(key=key, score=score, band=score_band(score))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
