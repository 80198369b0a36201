"""
共享状态计数路由模块：
- /mutableState：进程级互斥计数。
- /count、/count/add：worker 本地计数。
- /clone、/clone/add：worker 本地计数 + 全局原子计数。
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ...services.counters import CombinedCounterState, ExclusiveCounter, LocalCounter
from ..dependencies import get_combined_state, get_exclusive_counter, get_local_counter
from ...core.models import ANY_METHOD

router = APIRouter(
    tags=["Shared State"],
    default_response_class=PlainTextResponse,
)

def _render_combined(global_count: int, local_count: int) -> str:
    return f"global_count: {global_count}\nlocal_count: {local_count}"

@router.get("/mutableState")
async def index_mutable_state(counter: ExclusiveCounter = Depends(get_exclusive_counter)):
    """每次请求在锁内加 1，返回新的请求序号。"""
    value = counter.increment()
    return f"Request number: {value}"

@router.api_route("/count", methods=ANY_METHOD)
async def show_count(count: LocalCounter = Depends(get_local_counter)):
    return f"count: {count.get()}"

@router.api_route("/count/add", methods=ANY_METHOD)
async def add_one(count: LocalCounter = Depends(get_local_counter)):
    return f"count: {count.read_and_increment()}"

@router.get("/clone")
async def show_count_clone(state: CombinedCounterState = Depends(get_combined_state)):
    return _render_combined(*state.read())

@router.get("/clone/add")
async def add_one_clone(state: CombinedCounterState = Depends(get_combined_state)):
    """全局计数与本地计数各加 1。"""
    return _render_combined(*state.increment())
