"""Pure transforms over a tailnet policy document.

Each function returns a new ``PolicyDocument`` and leaves its input alone, so
applying one twice gives the same result as applying it once.
"""

from typing import Sequence

from hostkit.api.models import AccessRule, PolicyDocument, normalize_tag

ADMIN_OWNERS = ("autogroup:admin",)
NONROOT_USERS = ("autogroup:nonroot",)


def grant_rule(
    tag: str,
    grantee: str,
    users: Sequence[str] = NONROOT_USERS,
) -> AccessRule:
    """Rule letting ``grantee`` SSH into devices carrying ``tag``"""
    return AccessRule(
        action="accept",
        src=(grantee,),
        dst=(normalize_tag(tag),),
        users=tuple(users),
    )


def ensure_tag_owner(
    doc: PolicyDocument,
    tag: str,
    owners: Sequence[str] = ADMIN_OWNERS,
) -> PolicyDocument:
    """Add a ``tagOwners`` entry for ``tag`` unless one already exists"""
    tag = normalize_tag(tag)
    data = doc.to_dict()
    tag_owners = data.get("tagOwners") or {}

    # an existing entry wins, whatever it holds
    if tag_owners.get(tag) is None:
        tag_owners[tag] = list(owners)
    data["tagOwners"] = tag_owners

    return PolicyDocument(data)


def ensure_grant(doc: PolicyDocument, rule: AccessRule) -> PolicyDocument:
    """Append ``rule`` to the ``ssh`` list unless an equal rule is present"""
    data = doc.to_dict()
    rules = data.get("ssh") or []

    if rule not in (AccessRule.from_dict(r) for r in rules):
        rules.append(rule.to_dict())
    data["ssh"] = rules

    return PolicyDocument(data)


def apply_access(
    doc: PolicyDocument,
    tag: str,
    grantee: str,
    owners: Sequence[str] = ADMIN_OWNERS,
    users: Sequence[str] = NONROOT_USERS,
) -> PolicyDocument:
    """Tag owner transform followed by the grant transform"""
    doc = ensure_tag_owner(doc, tag, owners)
    return ensure_grant(doc, grant_rule(tag, grantee, users))
