# fleet_induction/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fleet_induction.api import depot, optimization, simulation
from fleet_induction.config import settings
from datetime import datetime, timezone
import logging

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fleet Induction Engine",
    description="Nightly induction planning: scores each train for service, standby or IBL",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(optimization.router, prefix="/api/optimization", tags=["Optimization"])
app.include_router(simulation.router, prefix="/api/simulation", tags=["Simulation"])
app.include_router(depot.router, prefix="/api/depot", tags=["Depot"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


def run() -> None:
    import uvicorn

    uvicorn.run("fleet_induction.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
