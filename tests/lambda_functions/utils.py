
import boto3


def setup_hosted_zone(zone_name: str = "example.com.") -> tuple:
    ## Create a hosted zone for each test:
    # moto: https://docs.getmoto.org/en/latest/docs/services/route53.html
    # boto: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/route53/client/create_hosted_zone.html
    route53_client = boto3.client('route53', region_name="us-west-2")
    hosted_zone = route53_client.create_hosted_zone(
        Name=zone_name,
        CallerReference="test-reference",
        HostedZoneConfig={
            'Comment': 'Test hosted zone',
            'PrivateZone': False
        }
    )
    hosted_zone_id = hosted_zone["HostedZone"]["Id"].split("/")[-1]
    return route53_client, hosted_zone_id

def get_a_records(route53_client, hosted_zone_id: str) -> list:
    """ Every A record in the zone (skips the default NS and SOA) """
    records = route53_client.list_resource_record_sets(HostedZoneId=hosted_zone_id)["ResourceRecordSets"]
    return [record for record in records if record["Type"] == "A"]

def run_instance(tags: dict | None = None) -> tuple:
    ## Launch one instance, optionally tagged:
    # moto: https://docs.getmoto.org/en/latest/docs/services/ec2.html
    # boto: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/ec2/client/run_instances.html
    ec2_client = boto3.client('ec2', region_name="us-west-2")
    # Use one of moto's built-in AMIs:
    image_id = ec2_client.describe_images()["Images"][0]["ImageId"]
    run_kwargs = {}
    if tags:
        run_kwargs["TagSpecifications"] = [{
            "ResourceType": "instance",
            "Tags": [{"Key": k, "Value": v} for k, v in tags.items()],
        }]
    instance = ec2_client.run_instances(
        ImageId=image_id,
        InstanceType="t2.micro",
        MinCount=1,
        MaxCount=1,
        **run_kwargs,
    )["Instances"][0]
    return ec2_client, instance["InstanceId"]

def running_event(instance_id: str) -> dict:
    """ A minimal EC2 Instance State-change Notification """
    return {
        "version": "0",
        "source": "aws.ec2",
        "detail-type": "EC2 Instance State-change Notification",
        "region": "us-west-2",
        "detail": {
            "instance-id": instance_id,
            "state": "running",
        },
    }
