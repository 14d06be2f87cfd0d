"""AWS IAM snapshot provider.

Lists the identity resources of one account through boto3 paginators.
Failures to list a base collection raise :class:`ProviderError`; failures of
per-item lookups are returned as failed :class:`Lookup` values.
"""

import json
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import unquote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...core.snapshot import (
    AccessKey,
    IdentityGroup,
    IdentityUser,
    Lookup,
    ManagedPolicy,
    MfaDevice,
    PasswordPolicy,
    UserAccessKeys,
)
from ...utils.logger import get_logger
from ..base import ProviderError, SnapshotProvider

logger = get_logger(__name__)

AWS_ERRORS = (ClientError, BotoCoreError)


def is_no_such_entity(error: Exception) -> bool:
    """Return True if *error* is IAM's "not found" signal."""
    if not isinstance(error, ClientError):
        return False
    code = error.response.get("Error", {}).get("Code")
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in ("NoSuchEntity", "NoSuchEntityException") or status == 404


def policy_document_text(document: Any) -> str:
    """Return the raw text of a policy version document.

    boto3 already decodes documents into dictionaries; strings are the
    URL-encoded JSON returned by the API.
    """
    if isinstance(document, str):
        return unquote(document)
    return json.dumps(document, sort_keys=True)


class AwsIamProvider(SnapshotProvider):
    """Snapshot provider backed by the AWS IAM API."""

    name = "aws"

    def __init__(self, session: boto3.Session):
        """Initialize the provider with an authenticated session.

        Args:
            session: boto3 Session object
        """
        self.session = session
        # IAM is a global service
        self.iam_client = session.client('iam')

    def _paginate(self, operation: str, result_key: str, **kwargs: Any) -> Iterator[Dict[str, Any]]:
        paginator = self.iam_client.get_paginator(operation)
        for page in paginator.paginate(**kwargs):
            yield from page.get(result_key, [])

    def _list(self, operation: str, result_key: str, **kwargs: Any) -> List[Dict[str, Any]]:
        try:
            return list(self._paginate(operation, result_key, **kwargs))
        except AWS_ERRORS as e:
            raise ProviderError(f"{operation} failed: {e}") from e

    def list_users(self) -> List[IdentityUser]:
        users = []
        for user in self._list('list_users', 'Users'):
            username = user['UserName']
            users.append(IdentityUser(
                name=username,
                create_date=user['CreateDate'],
                password_last_used=user.get('PasswordLastUsed'),
                login_profile=self._get_login_profile(username),
                mfa_devices=self._list_mfa_devices(username),
            ))
        logger.debug(f"Listed {len(users)} IAM users")
        return users

    def _get_login_profile(self, username: str) -> Lookup:
        try:
            response = self.iam_client.get_login_profile(UserName=username)
        except AWS_ERRORS as e:
            if is_no_such_entity(e):
                # No login profile: the user has no console access
                return Lookup.ok(None)
            logger.warning(f"Error getting login profile for user {username}: {e}")
            return Lookup.failed(str(e))
        return Lookup.ok(response.get('LoginProfile', {}).get('CreateDate'))

    def _list_mfa_devices(self, username: str) -> Lookup:
        try:
            devices: Tuple[MfaDevice, ...] = tuple(
                MfaDevice(serial_number=device['SerialNumber'], enable_date=device.get('EnableDate'))
                for device in self._paginate('list_mfa_devices', 'MFADevices', UserName=username)
            )
        except AWS_ERRORS as e:
            logger.warning(f"Error getting MFA devices for user {username}: {e}")
            return Lookup.failed(str(e))
        return Lookup.ok(devices)

    def list_groups(self) -> List[IdentityGroup]:
        groups = []
        for group in self._list('list_groups', 'Groups'):
            groups.append(IdentityGroup(
                id=group['GroupId'],
                name=group['GroupName'],
                create_date=group.get('CreateDate'),
                members=self._count_group_members(group['GroupName']),
            ))
        logger.debug(f"Listed {len(groups)} IAM groups")
        return groups

    def _count_group_members(self, group_name: str) -> Lookup:
        try:
            count = sum(1 for _ in self._paginate('get_group', 'Users', GroupName=group_name))
        except AWS_ERRORS as e:
            logger.warning(f"Error getting group {group_name}: {e}")
            return Lookup.failed(str(e))
        return Lookup.ok(count)

    def list_access_keys(self) -> List[UserAccessKeys]:
        listings = []
        for user in self._list('list_users', 'Users'):
            username = user['UserName']
            try:
                metadata = list(self._paginate('list_access_keys', 'AccessKeyMetadata', UserName=username))
            except AWS_ERRORS as e:
                if is_no_such_entity(e):
                    # Deleted since list_users
                    logger.debug(f"User {username} no longer exists, skipping its access keys")
                    continue
                logger.warning(f"Error listing access keys for user {username}: {e}")
                listings.append(UserAccessKeys(user_name=username, keys=Lookup.failed(str(e))))
                continue

            keys = tuple(
                AccessKey(
                    user_name=key['UserName'],
                    access_key_id=key['AccessKeyId'],
                    status=key['Status'],
                    create_date=key['CreateDate'],
                    last_used=self._get_access_key_last_used(key['AccessKeyId']),
                )
                for key in metadata
            )
            listings.append(UserAccessKeys(user_name=username, keys=Lookup.ok(keys)))
        logger.debug(f"Listed access keys for {len(listings)} users")
        return listings

    def _get_access_key_last_used(self, access_key_id: str) -> Lookup:
        try:
            response = self.iam_client.get_access_key_last_used(AccessKeyId=access_key_id)
        except AWS_ERRORS as e:
            logger.warning(f"Error getting access key last used for key {access_key_id}: {e}")
            return Lookup.failed(str(e))
        # LastUsedDate is absent for keys that were never used
        return Lookup.ok(response.get('AccessKeyLastUsed', {}).get('LastUsedDate'))

    def list_attached_policies(self) -> List[ManagedPolicy]:
        policies = []
        for policy in self._list('list_policies', 'Policies', Scope='Local', OnlyAttached=True):
            policies.append(ManagedPolicy(
                name=policy['PolicyName'],
                arn=policy['Arn'],
                default_version_id=policy['DefaultVersionId'],
                document=self._get_policy_document(policy['Arn'], policy['DefaultVersionId']),
            ))
        logger.debug(f"Listed {len(policies)} attached customer-managed policies")
        return policies

    def _get_policy_document(self, policy_arn: str, version_id: str) -> Lookup:
        try:
            response = self.iam_client.get_policy_version(PolicyArn=policy_arn, VersionId=version_id)
        except AWS_ERRORS as e:
            logger.warning(f"Error getting policy version for policy {policy_arn}: {e}")
            return Lookup.failed(str(e))
        document = response.get('PolicyVersion', {}).get('Document')
        if document is None:
            return Lookup.failed("policy version has no document")
        return Lookup.ok(policy_document_text(document))

    def get_password_policy(self) -> Optional[PasswordPolicy]:
        try:
            response = self.iam_client.get_account_password_policy()
        except AWS_ERRORS as e:
            if is_no_such_entity(e):
                logger.info("Password policy not found")
                return None
            raise ProviderError(f"get_account_password_policy failed: {e}") from e

        policy = response.get('PasswordPolicy', {})
        return PasswordPolicy(
            minimum_password_length=policy.get('MinimumPasswordLength', 0),
            require_symbols=policy.get('RequireSymbols', False),
            require_numbers=policy.get('RequireNumbers', False),
            require_lowercase_characters=policy.get('RequireLowercaseCharacters', False),
            require_uppercase_characters=policy.get('RequireUppercaseCharacters', False),
            allow_users_to_change_password=policy.get('AllowUsersToChangePassword', False),
            max_password_age=policy.get('MaxPasswordAge'),
            password_reuse_prevention=policy.get('PasswordReusePrevention'),
            hard_expiry=policy.get('HardExpiry'),
        )
