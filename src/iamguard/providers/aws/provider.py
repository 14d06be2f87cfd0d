"""AWS session construction and credential verification."""

import boto3
import botocore.exceptions

from ...utils.config import AwsConfig
from ...utils.logger import get_logger
from ..base import AuthenticationError

logger = get_logger(__name__)


def create_session(config: AwsConfig) -> boto3.Session:
    """Create a boto3 session and verify it can reach the account.

    Args:
        config: AWS configuration (profile and region)

    Returns:
        Authenticated boto3 Session

    Raises:
        AuthenticationError: If the profile, credentials or endpoint are unusable
    """
    try:
        logger.debug(f"Creating AWS session for profile {config.profile} in region {config.region}")
        session = boto3.Session(profile_name=config.profile, region_name=config.region)

        # Verify we can access the account
        identity = session.client('sts').get_caller_identity()
    except botocore.exceptions.ProfileNotFound as e:
        raise AuthenticationError(f"AWS profile not found: {config.profile}") from e
    except botocore.exceptions.NoCredentialsError as e:
        raise AuthenticationError("AWS credentials not found") from e
    except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as e:
        raise AuthenticationError(f"AWS authentication error: {e}") from e

    logger.info(f"Authenticated to AWS account {identity['Account']} as {identity['Arn']}")
    return session
