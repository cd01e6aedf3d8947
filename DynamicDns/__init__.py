"""
Dynamic DNS for EC2 instances, driven by instance tags.
"""

__version__ = "0.1.0"
