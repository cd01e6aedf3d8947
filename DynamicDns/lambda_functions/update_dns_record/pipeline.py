"""
Runs the lambda's steps in order, stopping at the first one that raises.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from DynamicDns.utils.config_loader import DynDnsConfig

from .errors import InvalidStepError
from .logs import print_log


class PipelineState(Enum):
    """
    Where an invocation is at. Only ever moves forward, and
    SUCCEEDED/FAILED are terminal.
    """
    NOT_STARTED = "NotStarted"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

@dataclass
class InvocationContext:
    """
    Everything one invocation knows. Each step reads what the ones
    before it filled in, and adds its own fields.
    """
    event: Any
    context: Any = None
    config: DynDnsConfig = field(default_factory=DynDnsConfig)
    log: Callable[[dict], None] = print_log
    ec2: Any = None
    route53: Any = None
    ## Filled in by the steps:
    instance_id: Optional[str] = None
    ip_address: Optional[str] = None
    zoneid: Optional[str] = None
    hostname: Optional[str] = None
    rr_ttl: Optional[int] = None
    ## Bookkeeping for run_steps:
    state: PipelineState = PipelineState.NOT_STARTED
    step_index: Optional[int] = None

Step = Callable[[InvocationContext], Optional[InvocationContext]]


def run_steps(steps: list, data: InvocationContext) -> InvocationContext:
    """
    Run each step on the output of the last one.

    The whole list is checked before anything runs, so a bad entry
    means NO step gets called. Whatever a step raises is re-raised
    after marking the context as FAILED.
    """
    for step in steps:
        if not callable(step):
            data.state = PipelineState.FAILED
            raise InvalidStepError(f"Error: Invalid step item: {step!r}")

    for i, step in enumerate(steps):
        data.state = PipelineState.RUNNING
        data.step_index = i
        try:
            result = step(data)
            # Steps mutate the context, so returning it is optional:
            if result is not None and not isinstance(result, InvocationContext):
                raise InvalidStepError(
                    f"Error: Step {getattr(step, '__name__', step)!r} returned {type(result).__name__}, not an InvocationContext."
                )
            data = result or data
        except Exception:
            data.state = PipelineState.FAILED
            raise
    data.state = PipelineState.SUCCEEDED
    return data
