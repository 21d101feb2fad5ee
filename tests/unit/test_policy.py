"""Tests for the pure policy transforms"""

import pytest

from hostkit.access.policy import apply_access, ensure_grant, ensure_tag_owner, grant_rule
from hostkit.api.models import AccessRule, PolicyDocument, normalize_tag


@pytest.fixture
def granted_doc():
    """Policy that already lets a@x.com into tag:net-share"""
    return PolicyDocument.from_dict({
        "tagOwners": {"tag:net-share": ["autogroup:admin"]},
        "ssh": [
            {
                "action": "accept",
                "src": ["a@x.com"],
                "dst": ["tag:net-share"],
                "users": ["autogroup:nonroot"],
            }
        ],
    })


class TestNormalizeTag:
    def test_adds_prefix(self):
        assert normalize_tag("net-share") == "tag:net-share"

    def test_keeps_prefix(self):
        assert normalize_tag("tag:net-share") == "tag:net-share"

    def test_strips_whitespace(self):
        assert normalize_tag("  tag: net-share ") == "tag:net-share"

    @pytest.mark.parametrize("name", ["", "   ", "tag:"])
    def test_rejects_empty(self, name):
        with pytest.raises(ValueError):
            normalize_tag(name)


class TestTagOwners:
    """ensure_tag_owner"""

    def test_fresh_document(self):
        """{} + net-share gets the admin owner group"""
        doc = ensure_tag_owner(PolicyDocument.from_dict({}), "net-share")
        assert doc.to_dict() == {"tagOwners": {"tag:net-share": ["autogroup:admin"]}}

    @pytest.mark.parametrize("owners", [["alice@x.com"], ["group:ops", "bob@x.com"], []])
    def test_existing_owner_wins(self, owners):
        """An existing entry is never modified, whatever it holds"""
        doc = PolicyDocument.from_dict({"tagOwners": {"tag:net-share": owners}})
        result = ensure_tag_owner(doc, "net-share")
        assert result.tag_owners["tag:net-share"] == owners

    def test_null_entry_is_filled(self):
        doc = PolicyDocument.from_dict({"tagOwners": {"tag:net-share": None}})
        result = ensure_tag_owner(doc, "tag:net-share", owners=["group:ops"])
        assert result.tag_owners == {"tag:net-share": ["group:ops"]}

    def test_other_tags_untouched(self):
        doc = PolicyDocument.from_dict({"tagOwners": {"tag:web": ["group:web"]}})
        result = ensure_tag_owner(doc, "net-share")
        assert result.tag_owners == {
            "tag:web": ["group:web"],
            "tag:net-share": ["autogroup:admin"],
        }

    def test_input_not_mutated(self):
        original = {"tagOwners": {}}
        doc = PolicyDocument.from_dict(original)
        ensure_tag_owner(doc, "net-share")
        assert doc.to_dict() == original


class TestGrant:
    """ensure_grant"""

    def test_appends_missing_rule(self):
        doc = ensure_grant(PolicyDocument.from_dict({}), grant_rule("net-share", "a@x.com"))
        assert doc.to_dict()["ssh"] == [
            {
                "action": "accept",
                "src": ["a@x.com"],
                "dst": ["tag:net-share"],
                "users": ["autogroup:nonroot"],
            }
        ]

    def test_existing_rule_not_duplicated(self, granted_doc):
        """Same grantee and tag produces no new entries"""
        result = ensure_grant(granted_doc, grant_rule("net-share", "a@x.com"))
        assert result.ssh_rules == granted_doc.ssh_rules
        assert result == granted_doc

    def test_extra_rule_keys_do_not_break_dedup(self):
        doc = PolicyDocument.from_dict({
            "ssh": [
                {
                    "action": "accept",
                    "src": ["a@x.com"],
                    "dst": ["tag:net-share"],
                    "users": ["autogroup:nonroot"],
                    "checkPeriod": "12h",
                }
            ]
        })
        result = ensure_grant(doc, grant_rule("net-share", "a@x.com"))
        assert result == doc

    def test_superset_rule_is_not_a_match(self):
        """Matching is exact equality, not subset or superset"""
        doc = PolicyDocument.from_dict({
            "ssh": [
                {
                    "action": "accept",
                    "src": ["a@x.com", "b@x.com"],
                    "dst": ["tag:net-share"],
                    "users": ["autogroup:nonroot", "root"],
                }
            ]
        })
        result = ensure_grant(doc, grant_rule("net-share", "a@x.com"))
        assert len(result.ssh_rules) == 2

    def test_rule_order_preserved(self, granted_doc):
        result = ensure_grant(granted_doc, grant_rule("other", "c@x.com"))
        assert [r.dst for r in result.ssh_rules] == [("tag:net-share",), ("tag:other",)]


class TestApplyAccess:
    def test_idempotent(self):
        doc = PolicyDocument.from_dict({"acls": [{"action": "accept", "src": ["*"], "dst": ["*:*"]}]})
        once = apply_access(doc, "net-share", "a@x.com")
        twice = apply_access(once, "net-share", "a@x.com")
        assert once == twice
        assert len(twice.ssh_rules) == 1
        assert list(twice.tag_owners) == ["tag:net-share"]

    def test_unknown_sections_survive(self):
        data = {
            "acls": [{"action": "accept", "src": ["*"], "dst": ["*:*"]}],
            "groups": {"group:ops": ["a@x.com"]},
            "tests": [],
        }
        result = apply_access(PolicyDocument.from_dict(data), "net-share", "a@x.com").to_dict()
        for key, value in data.items():
            assert result[key] == value


class TestAccessRule:
    def test_equality_by_value(self):
        a = AccessRule("accept", ("a@x.com",), ("tag:t",), ("autogroup:nonroot",))
        b = AccessRule.from_dict({
            "action": "accept",
            "src": ["a@x.com"],
            "dst": ["tag:t"],
            "users": ["autogroup:nonroot"],
            "checkPeriod": "1h",
        })
        assert a == b
        assert hash(a) == hash(b)

    def test_extra_keys_round_trip(self):
        data = {
            "action": "check",
            "src": ["a@x.com"],
            "dst": ["tag:t"],
            "users": ["root"],
            "checkPeriod": "1h",
        }
        assert AccessRule.from_dict(data).to_dict() == data
