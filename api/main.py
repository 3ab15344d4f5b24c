from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query

import queries
from config import AUTO_REFRESH
from logging_utils import configure_logging
from models import HealthStatus
from process import RefreshScheduler
from store import HierarchicalStore

STORE = HierarchicalStore()
SCHEDULER = RefreshScheduler(STORE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if AUTO_REFRESH:
        SCHEDULER.start()
    yield
    await asyncio.to_thread(SCHEDULER.stop, 5)


app = FastAPI(title="COVID-19 Rollup API", version="1.0.0", lifespan=lifespan)


@app.get("/health")
def health() -> dict:
    last = STORE.last_date
    status = HealthStatus(
        last_date=last.isoformat() if last else None,
        loaded_days=len(STORE),
        refresh_in_progress=SCHEDULER.running,
        last_refresh=SCHEDULER.last_status,
    )
    return status.model_dump(mode="json")


@app.get("/summary")
def summary(date: str | None = Query(default=None)) -> dict:
    return queries.summary(STORE, date)


@app.get("/summary/countries")
def summary_countries(date: str | None = Query(default=None)) -> dict:
    return queries.summary_countries(STORE, date)


@app.get("/summary/countries/{start}")
@app.get("/summary/countries/{start}/{end}")
def summary_countries_series(start: str, end: str | None = None):
    return queries.summary_series(STORE, start, end, with_countries=True)


@app.get("/summary/{start}")
@app.get("/summary/{start}/{end}")
def summary_series(start: str, end: str | None = None):
    return queries.summary_series(STORE, start, end)


@app.get("/country/{country}")
def country(country: str, date: str | None = Query(default=None)) -> dict:
    return queries.country(STORE, country, date)


# State routes go first so "/country/X/state/Y" is not read as a date range.
@app.get("/country/{country}/state/{state}")
def country_state(country: str, state: str, date: str | None = Query(default=None)) -> dict:
    return queries.subregion(STORE, country, state, date)


@app.get("/country/{country}/state/{state}/{start}")
@app.get("/country/{country}/state/{state}/{start}/{end}")
def country_state_series(country: str, state: str, start: str, end: str | None = None):
    return queries.subregion_series(STORE, country, state, start, end)


@app.get("/country/{country}/{start}")
@app.get("/country/{country}/{start}/{end}")
def country_series(country: str, start: str, end: str | None = None):
    return queries.country_series(STORE, country, start, end)


def main() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
