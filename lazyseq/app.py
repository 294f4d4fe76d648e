"""FastAPI app evaluating lazy chains assembled from JSON specs."""

from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from lazyseq import __version__
from lazyseq.errors import (
    ConfigurationError,
    LazySequenceError,
    PullBudgetExceeded,
    UnknownFunctionError,
)
from lazyseq.models import (
    EngineSettings,
    ErrorResponse,
    OperationsResponse,
    OperationType,
    PerformanceSummary,
    PipelineRequest,
    PipelineResponse,
    StatusResponse,
    TerminalType,
)
from lazyseq.registry import get_registered_functions
from lazyseq.utils import (
    clear_performance_metrics,
    get_performance_summary,
    process_lazy_operations,
    setup_logging,
)

_settings = EngineSettings.from_env()
logger = setup_logging(_settings.log_level)

app = FastAPI(
    title="Lazy Sequence Engine",
    description="Composable lazy adapters and terminal consumers over JSON arrays",
    version=__version__
)


def get_settings() -> EngineSettings:
    return _settings


@app.get("/", response_model=StatusResponse)
async def root():
    """Basic service banner."""
    return StatusResponse(
        ok=True,
        message="Lazy Sequence Engine operational",
        version=__version__
    )


@app.get("/health")
async def health_check(settings: EngineSettings = Depends(get_settings)):
    """Return engine health and active limits."""
    return {
        "healthy": True,
        "max_pulls": settings.max_pulls,
        "max_output": settings.max_output,
        "performance_metrics": get_performance_summary(),
        "timestamp": datetime.now().isoformat()
    }


@app.get("/operations", response_model=OperationsResponse)
async def list_operations():
    """List adapters, terminals and registered functions."""
    return OperationsResponse(
        adapters=[op.value for op in OperationType],
        terminals=[term.value for term in TerminalType],
        functions=get_registered_functions()
    )


@app.post("/pipelines/run", response_model=PipelineResponse)
def run_pipeline(request: PipelineRequest, settings: EngineSettings = Depends(get_settings)):
    """Build the chain, drive it with the requested terminal and return the result."""
    try:
        outcome = process_lazy_operations(request, settings)
    except LazySequenceError:
        raise
    except (TypeError, ValueError, ArithmeticError, AttributeError, LookupError) as e:
        logger.warning(f"Chain evaluation failed: {e}")
        raise HTTPException(
            status_code=400,
            detail=f"Chain evaluation failed: {str(e)}"
        )
    return PipelineResponse(ok=True, **outcome)


@app.get("/metrics", response_model=PerformanceSummary)
async def metrics():
    """Performance summary across evaluated chains."""
    return PerformanceSummary(**get_performance_summary())


@app.delete("/metrics")
async def reset_metrics():
    clear_performance_metrics()
    return {"ok": True, "message": "Performance metrics cleared"}


# Exception handlers for proper error responses
def _error_response(status_code: int, exc: Exception, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=str(exc),
            error_code=error_code,
            timestamp=datetime.now().isoformat()
        ).model_dump()
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return _error_response(400, exc, "CONFIGURATION_ERROR")


@app.exception_handler(UnknownFunctionError)
async def unknown_function_handler(request: Request, exc: UnknownFunctionError):
    return _error_response(400, exc, "UNKNOWN_FUNCTION")


@app.exception_handler(PullBudgetExceeded)
async def pull_budget_handler(request: Request, exc: PullBudgetExceeded):
    return _error_response(422, exc, "PULL_BUDGET_EXCEEDED")


@app.exception_handler(LazySequenceError)
async def lazy_sequence_error_handler(request: Request, exc: LazySequenceError):
    return _error_response(400, exc, "SEQUENCE_ERROR")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
