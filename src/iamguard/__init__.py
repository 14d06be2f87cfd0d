"""IAMGuard - Point-in-time IAM security auditor for AWS accounts.

A Python-based tool for checking users, groups, access keys, attached
customer-managed policies and the account password policy against a fixed
set of identity best practices.
"""

__version__ = "0.1.0"
__author__ = "IAMGuard Team"
__email__ = "info@iamguard.example.com"
