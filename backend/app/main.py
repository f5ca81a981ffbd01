import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from app.api import catalog, estimate, files, parameters, projects, screens
from app.db.seed import seed_reference_data
from app.db.session import get_engine
from app.utils import config

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="University Press Cost Estimator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(parameters.router, prefix="/parameters", tags=["parameters"])
app.include_router(estimate.router, prefix="/estimate", tags=["estimate"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(screens.router, prefix="/screens", tags=["screens"])

# covers uploaded to the local bucket
app.include_router(files.router, prefix="/storage", tags=["storage"])


@app.on_event("startup")
def on_startup():
    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    if config.seed_reference_data():
        try:
            seed_reference_data()
        except Exception as e:
            logger.exception("Failed to seed reference data: %s", e)


@app.get("/")
def root(request: Request):
    accept = request.headers.get("accept", "")
    if "text/html" in accept:
        return screens.calculator_page()
    return {"status": "ok", "service": "press-cost-estimator"}


def run():
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(app, host=config.host(), port=config.port(), log_level=config.log_level().lower())
