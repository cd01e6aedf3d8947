"""
The three steps of a dynamic DNS update:

    1) parse_event: Make sure it's an EC2 instance that just hit 'running'.
    2) get_instance_metadata: Read the instance's public IP and dyndns tags.
    3) update_zone_data: UPSERT the A record in Route53.

Each takes the InvocationContext, fills in it's fields, and returns it.
"""

import json

import botocore.exceptions

from .errors import (
    InvalidEventError,
    InstanceNotConfiguredError,
    InstanceQueryError,
    DnsUpdateError,
)
from .logs import error_fields
from .pipeline import InvocationContext

# What an EventBridge EC2 state-change event has to look like:
# https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/monitoring-instance-state-changes.html
EVENT_SOURCE = "aws.ec2"
EVENT_VERSION = "0"
EVENT_DETAIL_TYPE = "EC2 Instance State-change Notification"
EVENT_STATE = "running"

AWS_API_ERRORS = (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError)


def _is_running_instance_event(event) -> bool:
    if not isinstance(event, dict):
        return False
    detail = event.get("detail")
    return (
        event.get("source") == EVENT_SOURCE
        and event.get("version") == EVENT_VERSION
        and event.get("detail-type") == EVENT_DETAIL_TYPE
        and isinstance(detail, dict)
        and "instance-id" in detail
        and detail.get("state") == EVENT_STATE
    )

def parse_event(data: InvocationContext) -> InvocationContext:
    """ Pull the instance ID out of the event, or reject it. """
    if not _is_running_instance_event(data.event):
        data.log({
            "level": "error",
            "message": "parse_event() received invalid EC2 Instance State-change Notification.",
            "event": json.dumps(data.event, default=str),
        })
        raise InvalidEventError("Error: Received invalid EC2 Instance State-change Notification.")
    data.instance_id = data.event["detail"]["instance-id"]
    return data


def _parse_ttl(instance_id: str, value: str) -> int:
    # Plain ascii digits only. int() alone would take "+60", " 60 ", "6_0", etc:
    if not (isinstance(value, str) and value.isascii() and value.isdigit()):
        raise InstanceNotConfiguredError(f"Error: Instance {instance_id} has an invalid TTL tag: '{value}'.")
    return int(value)

def get_instance_metadata(data: InvocationContext) -> InvocationContext:
    """
    Look up the instance, but only if it has at least one of the zoneid
    or hostname tags. Fills in ip_address, zoneid, hostname and rr_ttl.
    """
    config = data.config
    data.log({
        "level": "info",
        "message": "get_instance_metadata: Retrieving instance tags and IP address. "
                   f"Instance ID: {data.instance_id}. "
                   f"Zone ID tag: {config.zoneid_tag}. "
                   f"Hostname tag: {config.hostname_tag}.",
    })
    try:
        # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/ec2/client/describe_instances.html
        result = data.ec2.describe_instances(
            Filters=[{
                "Name": "tag-key",
                "Values": [config.zoneid_tag, config.hostname_tag],
            }],
            InstanceIds=[data.instance_id],
        )
    except AWS_API_ERRORS as e:
        data.log({"level": "error", "message": "describe_instances() returned an error.", **error_fields(e)})
        raise InstanceQueryError("Error: Instance metadata query failed.") from e

    # The tag filter drops the instance entirely if it has neither tag:
    if not result.get("Reservations"):
        data.log({"level": "error", "message": "describe_instances() returned nothing."})
        raise InstanceNotConfiguredError(f"Error: Instance {data.instance_id} is not configured for dynamic DNS updates.")
    data.log({
        "level": "info",
        "message": "describe_instances() called successfully.",
        "result": json.dumps(result, default=str),
    })

    # Since you're supplying an ID, there should always be exactly one:
    instance = result["Reservations"][0]["Instances"][0]
    data.ip_address = instance.get("PublicIpAddress")
    data.rr_ttl = config.default_ttl
    for tag in instance.get("Tags", []):
        if tag["Key"] == config.zoneid_tag:
            data.zoneid = tag["Value"]
        if tag["Key"] == config.hostname_tag:
            data.hostname = tag["Value"]
        if tag["Key"] == config.rr_ttl_tag:
            data.rr_ttl = _parse_ttl(data.instance_id, tag["Value"])

    ## The filter matches on EITHER tag, but we need both (and an IP to point at):
    missing = [
        name for name, value in (
            (config.zoneid_tag, data.zoneid),
            (config.hostname_tag, data.hostname),
        ) if not value
    ]
    if missing:
        raise InstanceNotConfiguredError(f"Error: Instance {data.instance_id} is missing tag(s): [{', '.join(missing)}].")
    if not data.ip_address:
        raise InstanceNotConfiguredError(f"Error: Instance {data.instance_id} has no public IP address.")
    return data


def update_zone_data(data: InvocationContext) -> InvocationContext:
    """ Create/update the A record in the instance's hosted zone. """
    data.log({
        "level": "info",
        "message": "update_zone_data: Creating/updating DNS resource record. "
                   f"Hosted Zone ID: {data.zoneid}. "
                   f"Hostname: {data.hostname}. "
                   f"IP Address: {data.ip_address}. "
                   f"Record TTL: {data.rr_ttl}.",
    })
    try:
        # https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/route53/client/change_resource_record_sets.html
        result = data.route53.change_resource_record_sets(
            HostedZoneId=data.zoneid,
            ChangeBatch={
                'Changes': [{
                    'Action': 'UPSERT',
                    'ResourceRecordSet': {
                        'Name': data.hostname,
                        'Type': 'A',
                        'TTL': data.rr_ttl,
                        'ResourceRecords': [{'Value': data.ip_address}],
                    }
                }]
            },
        )
    except AWS_API_ERRORS as e:
        data.log({"level": "error", "message": "change_resource_record_sets() returned an error.", **error_fields(e)})
        raise DnsUpdateError("Error: DNS zone data update failed.") from e
    data.log({
        "level": "info",
        "message": "change_resource_record_sets() completed successfully.",
        "result": json.dumps(result, default=str),
    })
    return data
