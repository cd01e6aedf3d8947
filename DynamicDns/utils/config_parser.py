"""
Config Parser

The docs for schema is at: https://github.com/keleshev/schema
"""
from schema import Schema, And, Or, Use, Optional

# Tag keys can't be blank, EC2 won't let you filter on an empty key:
tag_key = And(str, len, error="Tag keys must be non-empty strings.")

def dyndns_config_schema() -> Schema:
    """ Config schema for the dynamic DNS lambda. Every key is optional. """
    return Schema({
        Optional("zoneid_tag", default="dyndns:zoneid"): tag_key,
        Optional("hostname_tag", default="dyndns:hostname"): tag_key,
        Optional("rr_ttl_tag", default="dyndns:rr-ttl"): tag_key,
        Optional("default_ttl", default=300): And(
            Or(
                # bool is a subclass of int, don't let True sneak in as 1:
                And(int, lambda ttl: not isinstance(ttl, bool)),
                # Env vars come in as strings, only cast plain digits:
                And(str, str.isascii, str.isdigit, Use(int)),
            ),
            lambda ttl: ttl >= 0,
            error="default_ttl must be a non-negative integer.",
        ),
    })
