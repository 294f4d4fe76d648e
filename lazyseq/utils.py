"""
Utility functions for building and measuring chains assembled at runtime.

A dynamic chain is described by a PipelineRequest (see ``lazyseq.models``);
``build_chain`` turns it into the same adapter objects the fluent API builds,
``run_terminal`` drives it, and ``process_lazy_operations`` does both while
recording timing and memory.
"""

import gc
import logging
import sys
import time
import tracemalloc
from typing import Any, Dict, List, Optional, Tuple

from lazyseq.control import PullBudget
from lazyseq.core import Sequence
from lazyseq.option import Option
from lazyseq.producers import iterate
from lazyseq.registry import get_function
from lazyseq.models import (
    EngineSettings,
    OperationSpec,
    OperationType,
    OPERATION_FUNCTION_KINDS,
    PipelineRequest,
    TerminalSpec,
    TerminalType,
    TERMINAL_FUNCTION_KINDS,
)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup structured logging for the engine"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger('lazyseq')


# Global performance tracking
_performance_metrics = {
    "operations": [],
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0
}


def _record(performance_info: Dict[str, Any]) -> None:
    _performance_metrics["operations"].append(performance_info)
    _performance_metrics["total_time_ms"] += performance_info["execution_time_ms"]
    _performance_metrics["total_memory_mb"] += performance_info["memory_usage_mb"]
    _performance_metrics["operation_count"] += 1


def measure_performance(operation_name: str, func, *args, **kwargs) -> Tuple[Any, Dict[str, Any]]:
    """
    Call ``func`` while tracking wall time and peak traced memory.

    Returns ``(result, performance_info)``. Failures are recorded too and then
    re-raised unchanged.
    """
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()
        _record({
            "operation": operation_name,
            "execution_time_ms": execution_time_ms,
            "memory_usage_mb": peak / 1024 / 1024,
            "success": False,
            "error": str(e),
            "timestamp": time.time()
        })
        raise
    finally:
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

    execution_time_ms = (time.perf_counter() - start_time) * 1000
    performance_info = {
        "operation": operation_name,
        "execution_time_ms": execution_time_ms,
        "memory_usage_mb": peak / 1024 / 1024,
        "success": True,
        "result_size": len(result) if hasattr(result, "__len__") else None,
        "timestamp": time.time()
    }
    _record(performance_info)
    return result, performance_info


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": [],
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0
    }


# ---------- dynamic chain assembly ----------

def apply_operation(chain: Sequence, op: OperationSpec, settings: EngineSettings) -> Sequence:
    """Apply one OperationSpec to ``chain`` and return the new outermost sequence."""
    op_type = op.type
    fn = get_function(op.function, OPERATION_FUNCTION_KINDS[op_type]) if op_type in OPERATION_FUNCTION_KINDS else None

    if op_type == OperationType.MAP:
        return chain.map(fn)
    elif op_type == OperationType.FILTER:
        return chain.filter(fn)
    elif op_type == OperationType.FILTER_MAP:
        return chain.filter_map(fn)
    elif op_type == OperationType.ENUMERATE:
        return chain.enumerate()
    elif op_type == OperationType.CLONED:
        return chain.cloned()
    elif op_type == OperationType.FLAT_MAP:
        # one element may expand into an arbitrarily long run
        return PullBudget(chain.flat_map(fn), settings.max_pulls)
    elif op_type == OperationType.FLATTEN:
        return PullBudget(chain.flatten(), settings.max_pulls)
    elif op_type == OperationType.CHUNKS:
        return chain.chunks(op.count)
    elif op_type == OperationType.TAKE:
        return chain.take(op.count)
    elif op_type == OperationType.SKIP:
        return chain.skip(op.count)
    elif op_type == OperationType.TAKE_WHILE:
        return chain.take_while(fn)
    elif op_type == OperationType.SKIP_WHILE:
        return chain.skip_while(fn)
    elif op_type == OperationType.STEP_BY:
        return chain.step_by(op.count)
    elif op_type == OperationType.REV:
        return chain.rev()
    elif op_type == OperationType.CYCLE:
        # a cycle that never meets its bound must fail rather than spin forever
        return PullBudget(chain.cycle(), settings.max_pulls)
    elif op_type == OperationType.ZIP:
        return chain.zip(op.other)
    elif op_type == OperationType.CHAIN:
        return chain.chain(op.other)
    raise ValueError(f"Unknown op: {op_type}")


def build_chain(data: List[Any], operations: List[OperationSpec],
                settings: Optional[EngineSettings] = None) -> Sequence:
    """Borrow ``data`` and apply ``operations`` in order. No element is pulled here."""
    settings = settings or EngineSettings()
    chain = iterate(data)
    for op in operations:
        chain = apply_operation(chain, op, settings)
    return chain


def run_terminal(chain: Sequence, terminal: TerminalSpec, settings: Optional[EngineSettings] = None) -> Tuple[Any, bool]:
    """
    Drive ``chain`` with the terminal described by ``terminal``.

    Returns ``(result, truncated)``; ``truncated`` is only ever True for
    ``collect`` when more than ``settings.max_output`` elements were available.
    """
    settings = settings or EngineSettings()
    term = terminal.type
    fn = None
    if term in TERMINAL_FUNCTION_KINDS and terminal.function:
        fn = get_function(terminal.function, TERMINAL_FUNCTION_KINDS[term])

    if term == TerminalType.COLLECT:
        collected = chain.take(settings.max_output + 1).collect()
        if len(collected) > settings.max_output:
            return collected[:settings.max_output], True
        return collected, False
    elif term == TerminalType.FOLD:
        return chain.fold(terminal.seed, fn), False
    elif term == TerminalType.REDUCE:
        return chain.reduce(fn), False
    elif term == TerminalType.SUM:
        return chain.sum(), False
    elif term == TerminalType.PRODUCT:
        return chain.product(), False
    elif term == TerminalType.COUNT:
        return chain.count(), False
    elif term == TerminalType.FIND:
        return chain.find(fn), False
    elif term == TerminalType.POSITION:
        return chain.position(fn), False
    elif term == TerminalType.ANY:
        return chain.any(fn), False
    elif term == TerminalType.ALL:
        return chain.all(fn), False
    elif term == TerminalType.MAX:
        return (chain.max_by_key(fn) if fn else chain.max()), False
    elif term == TerminalType.MIN:
        return (chain.min_by_key(fn) if fn else chain.min()), False
    elif term == TerminalType.NTH:
        return chain.nth(terminal.count), False
    elif term == TerminalType.LAST:
        return chain.last(), False
    elif term == TerminalType.PARTITION:
        return chain.partition(fn), False
    elif term == TerminalType.IS_SORTED:
        return chain.is_sorted(fn), False
    raise ValueError(f"Unknown terminal: {term}")


def to_jsonable(value: Any) -> Any:
    """Make terminal results JSON friendly: Options become {present, value}, tuples become lists."""
    if isinstance(value, Option):
        return {"present": value.present, "value": to_jsonable(value.value)}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    return value


def process_lazy_operations(request: PipelineRequest, settings: Optional[EngineSettings] = None) -> Dict[str, Any]:
    """Build and run a dynamic chain, returning its result with performance info."""
    settings = settings or EngineSettings()
    operations_applied = [op.type.value for op in request.operations]
    label = "->".join(operations_applied + [request.terminal.type.value])

    outcome = {}

    def run():
        chain = build_chain(request.data, request.operations, settings)
        result, outcome["truncated"] = run_terminal(chain, request.terminal, settings)
        return result

    result, perf = measure_performance(label, run)
    truncated = outcome["truncated"]
    logger.info(f"Ran chain {label} over {len(request.data)} elements in {perf['execution_time_ms']:.2f} ms")

    return {
        "result": to_jsonable(result),
        "operations_applied": operations_applied,
        "terminal": request.terminal.type.value,
        "truncated": truncated,
        "performance": {
            "processing_time_ms": perf["execution_time_ms"],
            "memory_usage_mb": perf["memory_usage_mb"],
            "input_size": len(request.data),
            "output_size": len(result) if isinstance(result, list) else None,
            "operation": label
        }
    }
