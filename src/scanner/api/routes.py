"""JSON endpoints over the price engine query API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from scanner.categories import CategoryMapper
from scanner.engine import ALL_EXCHANGES, PriceEngine
from scanner.models import Timeframe

router = APIRouter()


def _engine(request: Request) -> PriceEngine:
    return request.app.state.engine


def _categories(request: Request) -> CategoryMapper | None:
    return request.app.state.categories


@router.get("/data")
async def get_data(
    request: Request,
    exchange: str = Query("coinbase"),
    timeframe: str = Query("15m"),
    market: str = Query("USD"),
) -> JSONResponse:
    """Per-symbol changes over ``timeframe``; ``exchange=all`` merges every exchange."""
    engine = _engine(request)
    try:
        tf = Timeframe.parse(timeframe)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown timeframe {timeframe!r}; expected one of {[t.value for t in Timeframe]}",
        )

    if exchange == ALL_EXCHANGES:
        results = engine.get_all_exchanges_data(tf, market)
    else:
        results = engine.get_timeframe_data(exchange, tf, market)

    mapper = _categories(request)
    data = []
    for item in results:
        row = item.to_dict()
        if mapper is not None and mapper.ready:
            row["categories"] = sorted(mapper.get_categories(item.display_symbol or item.symbol))
        data.append(row)

    return JSONResponse(
        content={
            "exchange": exchange,
            "pairs": len(data),
            "timeframe": tf.value,
            "market": market,
            "history": engine.get_history_info(exchange).to_dict(),
            "data": data,
        }
    )


@router.get("/sparkline")
async def get_sparkline(
    request: Request,
    exchange: str = Query("coinbase"),
    symbol: str = Query(""),
) -> JSONResponse:
    """Up to 30 evenly spaced (ts, price) points for one symbol."""
    points = _engine(request).get_sparkline_data(exchange, symbol)
    return JSONResponse(content=[p.to_dict() for p in points])


@router.get("/status")
async def get_status(request: Request, exchange: str | None = Query(None)) -> JSONResponse:
    """History coverage for one exchange, or a map of every exchange."""
    engine = _engine(request)
    if exchange:
        return JSONResponse(content=engine.get_history_info(exchange).to_dict())
    return JSONResponse(
        content={name: engine.get_history_info(name).to_dict() for name in engine.exchange_ids}
    )


@router.get("/exchanges")
async def get_exchanges(request: Request) -> JSONResponse:
    """Configured exchanges with markets, pair counts and consecutive error counts."""
    return JSONResponse(content=[e.to_dict() for e in _engine(request).get_exchanges()])


@router.get("/categories")
async def get_categories(request: Request) -> JSONResponse:
    """Available category filters; ``ready`` is false until the first load."""
    mapper = _categories(request)
    if mapper is None:
        return JSONResponse(content={"ready": False, "categories": []})
    return JSONResponse(
        content={"ready": mapper.ready, "categories": mapper.get_category_list()}
    )
