"""AWS identity snapshot provider."""

from iamguard.providers.aws.iam import AwsIamProvider
from iamguard.providers.aws.provider import create_session

__all__ = ["AwsIamProvider", "create_session"]
