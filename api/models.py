"""Pydantic models for API request/response schemas."""

from typing import Optional
from pydantic import BaseModel, Field


class PoolRequest(BaseModel):
    demo: str = Field(default="arithmetic", description="Demonstration configuration name")
    first: Optional[int] = Field(default=None, ge=-10000, le=10000, description="First integer to cover (demo default if unset)")
    last: Optional[int] = Field(default=None, ge=-10000, le=10000, description="Last integer to cover (demo default if unset)")
    max_cache_num: int = Field(default=5, ge=1, le=50, description="Candidates kept per integer")
    quality: float = Field(default=1.0, ge=0.0, le=1.0, description="Forward/backward switch threshold")
    seed: Optional[int] = Field(default=None, description="Random seed for a reproducible build")


class ExpressionOut(BaseModel):
    value: int
    text: str
    mass: int
    operator: str


class PoolInfo(BaseModel):
    pool_id: str
    demo: str
    first: int
    last: int
    cache_first: int
    cache_last: int
    max_cache_num: int
    quality: float
    stats: dict = {}
    build_info: dict = {}


class DemoInfo(BaseModel):
    name: str
    description: str
    evaluable: bool
    default_first: int
    default_last: int
    items: list[ExpressionOut] = []
    operators: list[str] = []


class OperatorInfo(BaseModel):
    name: str
    level: int
    symbol: Optional[str] = None
    backward_left: bool
    backward_right: bool
