"""Rule evaluators, one module per resource kind.

Every evaluator is a pure function of its snapshot item, the evaluation time
and the thresholds; none of them performs I/O.
"""

from iamguard.rules.access_keys import evaluate_access_key, evaluate_key_listing
from iamguard.rules.groups import evaluate_group
from iamguard.rules.password_policy import evaluate_password_policy
from iamguard.rules.policies import SOURCE_IP_CONDITION_KEY, evaluate_policy, has_source_ip_restriction
from iamguard.rules.users import evaluate_user

__all__ = [
    "SOURCE_IP_CONDITION_KEY",
    "evaluate_access_key",
    "evaluate_group",
    "evaluate_key_listing",
    "evaluate_password_policy",
    "evaluate_policy",
    "evaluate_user",
    "has_source_ip_restriction",
]
