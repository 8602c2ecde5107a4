"""FastAPI application: build expression pools and query them over REST."""

import asyncio
import logging
import os
import sys
import threading
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Depends, HTTPException, Header
from fastapi.middleware.cors import CORSMiddleware

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import API_KEY, API_PORT, BUILD_TIMEOUT, LOG_LEVEL, MAX_POOLS
from api.models import DemoInfo, ExpressionOut, OperatorInfo, PoolInfo, PoolRequest
from demos.base import Demo
from demos import get_demo, get_demo_names
from expression_pool import Expression, ExpressionPool, OutOfRangeError, PoolConfigError
from expression_pool.operators import OPERATOR_REGISTRY, get_operator_names
from expression_pool.report import pool_stats

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


async def verify_api_key(x_api_key: str = Header(default="")):
    if API_KEY and x_api_key != API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


class AppState:
    def __init__(self):
        self.pools: dict[str, tuple[str, ExpressionPool]] = {}
        self.build_timeout: float = BUILD_TIMEOUT
        self.max_pools: int = MAX_POOLS
        self.active_builds: int = 0
        self._running: set[threading.Event] = set()
        self._lock = threading.Lock()

    def add(self, demo: str, pool: ExpressionPool) -> str:
        while len(self.pools) >= self.max_pools:
            oldest = next(iter(self.pools))
            logger.info(f"Dropping pool {oldest} (limit {self.max_pools})")
            del self.pools[oldest]
        pool_id = uuid.uuid4().hex[:12]
        self.pools[pool_id] = (demo, pool)
        return pool_id

    def run_build(self, demo: Demo, request: PoolRequest, cancel: threading.Event) -> ExpressionPool:
        """Blocking build, run on a worker thread; returns once built or cancelled."""
        with self._lock:
            self.active_builds += 1
            self._running.add(cancel)
        try:
            return demo.build_pool(
                request.first, request.last,
                max_cache_num=request.max_cache_num,
                quality=request.quality,
                rng=request.seed,
                cancel=cancel,
            )
        finally:
            with self._lock:
                self.active_builds -= 1
                self._running.discard(cancel)

    def cancel_builds(self):
        with self._lock:
            for cancel in self._running:
                cancel.set()

    def lookup(self, pool_id: str) -> tuple[str, ExpressionPool]:
        if pool_id not in self.pools:
            raise HTTPException(status_code=404, detail=f"Pool {pool_id} not found")
        return self.pools[pool_id]


_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Expression Pool API starting up")
    yield
    _state.cancel_builds()
    _state.pools.clear()
    logger.info("Expression Pool API shutting down")


app = FastAPI(title="Expression Pool", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8000", "http://127.0.0.1:8000"],
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


def _expression_out(expr: Expression) -> ExpressionOut:
    return ExpressionOut(**expr.to_dict())


def _pool_info(pool_id: str, demo: str, pool: ExpressionPool) -> PoolInfo:
    return PoolInfo(
        pool_id=pool_id,
        demo=demo,
        first=pool.gen_range.first,
        last=pool.gen_range.last,
        cache_first=pool.cache_range.first,
        cache_last=pool.cache_range.last,
        max_cache_num=pool.max_cache_num,
        quality=pool.quality,
        stats=pool_stats(pool),
        build_info=pool.build_info,
    )


@app.get("/api/demos", response_model=list[DemoInfo])
async def list_demos():
    result = []
    for name in get_demo_names():
        demo = get_demo(name)
        result.append(DemoInfo(
            name=demo.name,
            description=demo.description,
            evaluable=demo.evaluable,
            default_first=demo.default_range[0],
            default_last=demo.default_range[1],
            items=[_expression_out(e) for e in demo.items],
            operators=[op.name for op in demo.operators],
        ))
    return result


@app.get("/api/operators", response_model=list[OperatorInfo])
async def list_operators():
    result = []
    for name in get_operator_names():
        op = OPERATOR_REGISTRY[name]()
        left, right = op.supports_backward
        result.append(OperatorInfo(
            name=name, level=op.level, symbol=op.symbol.strip(),
            backward_left=left, backward_right=right,
        ))
    return result


@app.post("/api/pools", response_model=PoolInfo, dependencies=[Depends(verify_api_key)])
async def create_pool(request: PoolRequest):
    try:
        demo = get_demo(request.demo)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown demo: {request.demo}")

    # Construction may never finish; on timeout the worker is told to stop
    # at its next search step.
    cancel = threading.Event()
    try:
        pool = await asyncio.wait_for(
            asyncio.to_thread(_state.run_build, demo, request, cancel),
            timeout=_state.build_timeout,
        )
    except PoolConfigError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except asyncio.TimeoutError:
        cancel.set()
        logger.warning(f"Pool build for '{request.demo}' exceeded {_state.build_timeout}s")
        raise HTTPException(status_code=504, detail="Pool construction timed out")

    pool_id = _state.add(demo.name, pool)
    logger.info(f"Built pool {pool_id} ({demo.name}, {pool.gen_range})")
    return _pool_info(pool_id, demo.name, pool)


@app.get("/api/pools", response_model=list[PoolInfo])
async def list_pools():
    return [_pool_info(pid, demo, pool) for pid, (demo, pool) in _state.pools.items()]


@app.get("/api/pools/{pool_id}", response_model=PoolInfo)
async def get_pool(pool_id: str):
    demo, pool = _state.lookup(pool_id)
    return _pool_info(pool_id, demo, pool)


@app.delete("/api/pools/{pool_id}", dependencies=[Depends(verify_api_key)])
async def delete_pool(pool_id: str):
    _state.lookup(pool_id)
    del _state.pools[pool_id]
    return {"status": "deleted", "pool_id": pool_id}


@app.get("/api/pools/{pool_id}/values/{value}", response_model=ExpressionOut)
async def get_expression(pool_id: str, value: int):
    _, pool = _state.lookup(pool_id)
    try:
        return _expression_out(pool.get_expression(value))
    except OutOfRangeError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/api/pools/{pool_id}/values/{value}/all", response_model=list[ExpressionOut])
async def get_all_expressions(pool_id: str, value: int):
    _, pool = _state.lookup(pool_id)
    try:
        return [_expression_out(e) for e in pool.get_all_expressions(value)]
    except OutOfRangeError as e:
        raise HTTPException(status_code=422, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    reload = os.getenv("ENV") == "development"
    uvicorn.run("api.main:app", host="127.0.0.1", port=API_PORT, reload=reload)
