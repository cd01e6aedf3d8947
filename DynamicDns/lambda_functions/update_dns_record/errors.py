"""
Everything the pipeline can fail with.

The messages here are what ends up in the logs. Only StepFailedError
ever makes it back to whoever invoked the lambda.
"""

class DynDnsError(RuntimeError):
    """ Base class for every dynamic DNS failure. """

class InvalidEventError(DynDnsError):
    """ The event isn't an EC2 'running' state-change notification. """

class InstanceNotConfiguredError(DynDnsError):
    """ The instance is missing (or has bad) dynamic DNS tags. """

class InstanceQueryError(DynDnsError):
    """ The EC2 DescribeInstances call failed. """

class DnsUpdateError(DynDnsError):
    """ The Route53 ChangeResourceRecordSets call failed. """

class InvalidStepError(DynDnsError):
    """ Something in the step list isn't callable. """

class StepFailedError(DynDnsError):
    """ Generic error handed back to the caller. The real cause is only logged. """
