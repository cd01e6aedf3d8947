"""
Structured logging for the lambda.

Every record is printed as a single line of json, so CloudWatch
Logs can filter on the keys.
"""

import json
import traceback


def print_log(record: dict) -> None:
    """ Default log sink. Needs at least 'level' and 'message'. """
    print(json.dumps(record, default=str))

def error_fields(err: BaseException) -> dict:
    """ The 'error' and 'stack' keys for an error-level record. """
    return {
        "error": repr(err),
        "stack": "".join(traceback.format_exception(type(err), err, err.__traceback__)),
    }
