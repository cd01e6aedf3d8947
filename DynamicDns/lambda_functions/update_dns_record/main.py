"""
Lambda code for pointing a Route53 A record at an EC2 instance,
whenever that instance enters the 'running' state.

Which record to update comes from tags on the instance itself. (By
default 'dyndns:zoneid', 'dyndns:hostname', and optionally 'dyndns:rr-ttl').
"""

import os
import json
from functools import cache
from dataclasses import dataclass, asdict
from typing import Any, Callable, Optional

import boto3

from DynamicDns import __version__
from DynamicDns.utils.config_loader import DynDnsConfig, load_config

from .errors import StepFailedError
from .logs import print_log, error_fields
from .pipeline import InvocationContext, run_steps
from .steps import parse_event, get_instance_metadata, update_zone_data

DEFAULT_STEPS = (
    parse_event,
    get_instance_metadata,
    update_zone_data,
)

# frozen=True: This should never be modified (change the lambda's env instead)
@dataclass(frozen=True)
class EnvVars:
    """ Env vars the lambda understands. All of them are optional. """
    # pylint: disable=invalid-name
    CONFIG_FILE: Optional[str] = None
    ZONEID_TAG: Optional[str] = None
    HOSTNAME_TAG: Optional[str] = None
    RR_TTL_TAG: Optional[str] = None
    DEFAULT_TTL: Optional[str] = None
    # pylint: enable=invalid-name

@cache
def get_env_vars() -> EnvVars:
    """ Lazy-load the environment variables """
    return EnvVars(**{
        # DON'T use getenv. We don't want the key to exist if it's missing.
        k: os.environ[k] for k in EnvVars.__annotations__.keys() if k in os.environ
    })

@cache
def get_config() -> DynDnsConfig:
    """ The config file (if any), with the single-option env vars on top. """
    env = get_env_vars()
    overrides = {
        "zoneid_tag": env.ZONEID_TAG,
        "hostname_tag": env.HOSTNAME_TAG,
        "rr_ttl_tag": env.RR_TTL_TAG,
        "default_ttl": env.DEFAULT_TTL,
    }
    return load_config(
        path=env.CONFIG_FILE,
        overrides={k: v for k, v in overrides.items() if v is not None},
    )

## Boto3 Clients:
# ALWAYS use @cache for clients. Even if they're always called, it helps
# them not exist until moto is setup inside of the test suite.
@cache
def get_ec2_client():
    """ Used for looking up the instance's tags and IP """
    return boto3.client('ec2')

@cache
def get_route53_client():
    """ Used for updating the DNS record """
    return boto3.client('route53')

# frozen=True: Overrides are decided by whoever assembles the handler.
@dataclass(frozen=True)
class Overrides:
    """
    Swap out any of the handler's defaults. Anything left as None
    falls back to the default.
    """
    steps: Optional[tuple] = None
    config: Optional[DynDnsConfig] = None
    log: Optional[Callable[[dict], None]] = None
    ec2: Any = None
    route53: Any = None


def handler(event: dict, context: Any, callback: Callable, overrides: Optional[Overrides] = None) -> Any:
    """
    Run the steps on the event, then call 'callback'. With no args on
    success, or with a StepFailedError if anything went wrong.

    The real error only ever goes to the log, never to 'callback'.
    """
    overrides = overrides or Overrides()
    steps = overrides.steps if overrides.steps is not None else DEFAULT_STEPS
    log = overrides.log or print_log
    try:
        # Config and clients can throw too (bad env vars, no region), so build them in here:
        data = InvocationContext(
            event=event,
            context=context,
            config=overrides.config or get_config(),
            log=log,
            ec2=overrides.ec2 or get_ec2_client(),
            route53=overrides.route53 or get_route53_client(),
        )
        run_steps(steps, data)
    except Exception as e: # pylint: disable=broad-exception-caught
        log({"level": "error", "message": f"Step returned error: {e}", **error_fields(e)})
        failure = StepFailedError("Error: Step returned error.")
    else:
        log({"level": "info", "message": "Process finished successfully."})
        failure = None
    # Called outside the except block, so the real cause isn't chained on:
    if failure is not None:
        return callback(failure)
    return callback()


def _raise_on_error(err: Optional[Exception] = None) -> None:
    if err is not None:
        raise err

def lambda_handler(event: dict, context: Any) -> None:
    """
    Main function of the lambda.

    Raises if the update failed, so Lambda marks the invocation as an
    error and EventBridge's retry policy can take over.
    """
    env = get_env_vars()
    print(json.dumps({
        "Version": __version__,
        "Event": event,
        "Context": context,
        "Env": asdict(env),
    }, default=str))
    handler(event, context, callback=_raise_on_error)
