
"""
config_loader.py

Loads the dynamic DNS config from yaml and/or a dict of overrides,
and validates it against the schema in 'config_parser.py'.
"""

from dataclasses import dataclass

from schema import SchemaError

## Using this config for management, so you can have BOTH yaml and Env Vars:
# https://github.com/mkaranasou/pyaml_env
from pyaml_env import parse_config

from .config_parser import dyndns_config_schema

# frozen=True: Config is resolved once per invocation, never modified after.
@dataclass(frozen=True)
class DynDnsConfig:
    """ Which tags to read off the instance, and the fallback TTL. """
    zoneid_tag: str = "dyndns:zoneid"
    hostname_tag: str = "dyndns:hostname"
    rr_ttl_tag: str = "dyndns:rr-ttl"
    default_ttl: int = 300

def _parse_config(path: str) -> dict:
    " Read the raw yaml, without validating it. "
    config = parse_config(path)
    # An empty file is valid, and just means "use the defaults":
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise SchemaError(f"Config file '{path}' must be a mapping, got {type(config).__name__}.")
    return config

def load_config(path: str | None = None, overrides: dict | None = None) -> DynDnsConfig:
    """
    Parser/Loader for the lambda config.

        path: Optional yaml file to start from.
        overrides: Optional dict layered on top of the file (i.e. env vars).
    """
    config = _parse_config(path) if path else {}
    # Add the two dicts together, overrides win:
    config = config | (overrides or {})
    return DynDnsConfig(**dyndns_config_schema().validate(config))
