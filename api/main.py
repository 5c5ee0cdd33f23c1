from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import CampaignOption, DashboardFiltersModel, MetaCampaignsResponse, MetaListResponse
from core.aggregation import (
    aggregate_age_groups_by_gender,
    aggregate_devices,
    aggregate_regions,
    aggregates_to_frame,
    sort_by_revenue,
)
from core.data import campaign_options, distinct_values, load_dashboard_data, prepare_context
from core.filters import DashboardFilters, normalize_filters
from core.metrics_demographic import compute_demographics
from core.metrics_device import compute_devices
from core.metrics_region import compute_regions
from core.timeseries import reduce_weekly


app = FastAPI(title="Marketing Breakdown API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/campaigns")
def meta_campaigns():
    try:
        data_ctx = load_dashboard_data()
        options = [CampaignOption(**o) for o in campaign_options(data_ctx)]
        return _json(MetaCampaignsResponse(campaigns=options).model_dump())
    except Exception as exc:
        logger.exception("meta_campaigns failed")
        return _error(exc)


@app.get("/meta/devices")
def meta_devices():
    try:
        ctx = prepare_context({}, load_dashboard_data())
        return _json(MetaListResponse(values=distinct_values(ctx["device_segments"], "device")).model_dump())
    except Exception as exc:
        logger.exception("meta_devices failed")
        return _error(exc)


@app.get("/meta/regions")
def meta_regions():
    try:
        ctx = prepare_context({}, load_dashboard_data())
        return _json(MetaListResponse(values=distinct_values(ctx["regional_segments"], "region")).model_dump())
    except Exception as exc:
        logger.exception("meta_regions failed")
        return _error(exc)


@app.post("/demographics")
def demographics(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, load_dashboard_data())
        return _json(compute_demographics(f, ctx))
    except Exception as exc:
        logger.exception("demographics failed")
        return _error(exc)


@app.post("/devices")
def devices(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, load_dashboard_data())
        return _json(compute_devices(f, ctx))
    except Exception as exc:
        logger.exception("devices failed")
        return _error(exc)


@app.post("/regions")
def regions(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, load_dashboard_data())
        return _json(compute_regions(f, ctx))
    except Exception as exc:
        logger.exception("regions failed")
        return _error(exc)


def _demographic_export(ctx: dict) -> pd.DataFrame:
    frames = []
    for gender, groups in aggregate_age_groups_by_gender(ctx["demographic_segments"]).items():
        table = aggregates_to_frame(sort_by_revenue(groups))
        if not table.empty:
            table.insert(0, "gender", gender)
            frames.append(table)
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


@app.post("/export/{page}")
def export_page(page: str, filters: DashboardFiltersModel):
    f = _filters_from_model(filters)
    ctx = prepare_context(f, load_dashboard_data())

    filename = f"{page}.csv"
    if page == "demographics":
        export_df = _demographic_export(ctx)
    elif page == "devices":
        export_df = aggregates_to_frame(sort_by_revenue(aggregate_devices(ctx["device_segments"])))
    elif page == "regions":
        export_df = aggregates_to_frame(sort_by_revenue(aggregate_regions(ctx["regional_segments"])))
    elif page == "weekly":
        export_df = reduce_weekly(ctx["campaigns"], f.charts.weeks)
    else:
        export_df = pd.DataFrame()

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    run()
