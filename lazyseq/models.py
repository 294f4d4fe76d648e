"""
Pydantic Models

Specs for chains assembled from runtime configuration, the HTTP payloads
around them, and the engine settings.
"""

import os
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OperationType(str, Enum):
    """Adapters that can be assembled dynamically"""
    MAP = "map"
    FILTER = "filter"
    FILTER_MAP = "filter_map"
    ENUMERATE = "enumerate"
    CLONED = "cloned"
    FLAT_MAP = "flat_map"
    FLATTEN = "flatten"
    CHUNKS = "chunks"
    TAKE = "take"
    SKIP = "skip"
    TAKE_WHILE = "take_while"
    SKIP_WHILE = "skip_while"
    STEP_BY = "step_by"
    REV = "rev"
    CYCLE = "cycle"
    ZIP = "zip"
    CHAIN = "chain"


class TerminalType(str, Enum):
    """Consumers that can finish a dynamic chain"""
    COLLECT = "collect"
    FOLD = "fold"
    REDUCE = "reduce"
    SUM = "sum"
    PRODUCT = "product"
    COUNT = "count"
    FIND = "find"
    POSITION = "position"
    ANY = "any"
    ALL = "all"
    MAX = "max"
    MIN = "min"
    NTH = "nth"
    LAST = "last"
    PARTITION = "partition"
    IS_SORTED = "is_sorted"


# Which registry kind each function-taking operation expects
OPERATION_FUNCTION_KINDS: Dict[OperationType, str] = {
    OperationType.MAP: "unary",
    OperationType.FILTER: "predicate",
    OperationType.FILTER_MAP: "optional",
    OperationType.FLAT_MAP: "expander",
    OperationType.TAKE_WHILE: "predicate",
    OperationType.SKIP_WHILE: "predicate",
}

COUNTED_OPERATIONS = {OperationType.CHUNKS, OperationType.TAKE, OperationType.SKIP, OperationType.STEP_BY}

PAIRED_OPERATIONS = {OperationType.ZIP, OperationType.CHAIN}

BOUNDING_OPERATIONS = {OperationType.TAKE, OperationType.TAKE_WHILE}

TERMINAL_FUNCTION_KINDS: Dict[TerminalType, str] = {
    TerminalType.FOLD: "binary",
    TerminalType.REDUCE: "binary",
    TerminalType.FIND: "predicate",
    TerminalType.POSITION: "predicate",
    TerminalType.ANY: "predicate",
    TerminalType.ALL: "predicate",
    TerminalType.PARTITION: "predicate",
    TerminalType.MAX: "key",
    TerminalType.MIN: "key",
    TerminalType.IS_SORTED: "comparator",
}

# Terminals whose function may be omitted
OPTIONAL_FUNCTION_TERMINALS = {
    TerminalType.ANY, TerminalType.ALL, TerminalType.MAX, TerminalType.MIN, TerminalType.IS_SORTED
}


class OperationSpec(BaseModel):
    """One adapter in a dynamically assembled chain"""
    type: OperationType = Field(..., description="Adapter to apply")
    function: Optional[str] = Field(None, description="Registered function name for function-taking adapters")
    count: Optional[int] = Field(None, description="Count argument for take/skip/chunks/step_by")
    other: Optional[List[Any]] = Field(None, description="Second sequence for zip/chain")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"type": "map", "function": "square"}
        }
    )

    @field_validator('function')
    @classmethod
    def validate_function(cls, v):
        """Validate function name is not blank"""
        if v is not None and not v.strip():
            raise ValueError("Function name cannot be empty")
        return v.strip() if v else v

    @model_validator(mode='after')
    def validate_arguments(self):
        """Check that each operation carries the argument it needs"""
        if self.type in OPERATION_FUNCTION_KINDS and not self.function:
            raise ValueError(f"'{self.type.value}' requires a function")
        if self.type in COUNTED_OPERATIONS and self.count is None:
            raise ValueError(f"'{self.type.value}' requires a count")
        if self.type in PAIRED_OPERATIONS and self.other is None:
            raise ValueError(f"'{self.type.value}' requires another sequence in 'other'")
        return self


class TerminalSpec(BaseModel):
    """The consumer that drives a dynamic chain"""
    type: TerminalType = Field(TerminalType.COLLECT, description="Terminal consumer")
    function: Optional[str] = Field(None, description="Registered function name")
    seed: Optional[Any] = Field(None, description="Initial accumulator for fold")
    count: Optional[int] = Field(None, description="Index for nth", ge=0)

    @model_validator(mode='after')
    def validate_arguments(self):
        """Check that each terminal carries the argument it needs"""
        needs_function = self.type in TERMINAL_FUNCTION_KINDS and self.type not in OPTIONAL_FUNCTION_TERMINALS
        if needs_function and not self.function:
            raise ValueError(f"'{self.type.value}' requires a function")
        if self.type == TerminalType.FOLD and 'seed' not in self.model_fields_set:
            raise ValueError("'fold' requires a seed")
        if self.type == TerminalType.NTH and self.count is None:
            raise ValueError("'nth' requires a count")
        return self


class PipelineRequest(BaseModel):
    """Data plus the chain to run over it"""
    data: List[Any] = Field(..., description="Source elements, borrowed in order")
    operations: List[OperationSpec] = Field(default_factory=list, description="Adapters, outermost last")
    terminal: TerminalSpec = Field(default_factory=TerminalSpec, description="Consumer driving the chain")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": [1, 2, 3, 4],
                "operations": [{"type": "map", "function": "square"}],
                "terminal": {"type": "collect"}
            }
        }
    )

    @model_validator(mode='after')
    def validate_cycle_is_bounded(self):
        """A cycle must be followed by take or take_while, or it never ends"""
        for index, op in enumerate(self.operations):
            if op.type != OperationType.CYCLE:
                continue
            later = {later_op.type for later_op in self.operations[index + 1:]}
            if not later & BOUNDING_OPERATIONS:
                raise ValueError("'cycle' must be followed by 'take' or 'take_while'")
        return self


class PerformanceInfo(BaseModel):
    """Timing and memory of one chain evaluation"""
    processing_time_ms: float = Field(..., description="Wall time in milliseconds", ge=0)
    memory_usage_mb: float = Field(..., description="Peak traced memory in MB", ge=0)
    input_size: int = Field(..., description="Number of source elements", ge=0)
    output_size: Optional[int] = Field(None, description="Number of elements returned, when a collection")
    operation: str = Field(..., description="Operation label")


class PipelineResponse(BaseModel):
    """Result of a dynamic chain"""
    ok: bool = Field(True, description="Request success status")
    result: Any = Field(..., description="Terminal result; absent/present results are {present, value}")
    operations_applied: List[str] = Field(..., description="Adapters applied, in order")
    terminal: str = Field(..., description="Terminal consumer used")
    truncated: bool = Field(False, description="Whether a collected result hit max_output")
    performance: PerformanceInfo


class OperationsResponse(BaseModel):
    """Catalogue of what a dynamic chain may use"""
    adapters: List[str]
    terminals: List[str]
    functions: Dict[str, Dict[str, str]]


class PerformanceSummary(BaseModel):
    total_operations: int = Field(..., ge=0)
    total_time_ms: float = Field(..., ge=0)
    total_memory_mb: float = Field(..., ge=0)
    avg_time_ms: float = Field(..., ge=0)
    avg_memory_mb: float = Field(..., ge=0)


class StatusResponse(BaseModel):
    """System status payload."""
    ok: bool = Field(True, description="System status")
    message: str = Field(..., description="Status message")
    version: Optional[str] = Field(None, description="Application version")
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    ok: bool = Field(False, description="Request success status")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Error details")
    timestamp: str = Field(..., description="Error timestamp in ISO format")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ok": False,
                "error": "step_by() requires n >= 1, got 0",
                "error_code": "CONFIGURATION_ERROR",
                "details": None,
                "timestamp": "2024-01-01T12:00:00Z"
            }
        }
    )


class EngineSettings(BaseModel):
    """Settings for the dynamic chain layer"""
    max_pulls: int = Field(100_000, description="Most elements any cycle, flat_map or flatten stage of a dynamic chain may yield", ge=1)
    max_output: int = Field(10_000, description="Maximum number of collected elements returned", ge=1)
    log_level: str = Field("INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is a standard level name"""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> 'EngineSettings':
        """Read LAZYSEQ_MAX_PULLS, LAZYSEQ_MAX_OUTPUT and LAZYSEQ_LOG_LEVEL"""
        values = {}
        for field_name in ('max_pulls', 'max_output', 'log_level'):
            raw = os.environ.get(f"LAZYSEQ_{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw
        return cls(**values)
