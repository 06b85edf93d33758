"""Tests for rulesets and branch rules."""

from __future__ import annotations

import pytest

from flexvers.config.models import FlexversConfig
from flexvers.core.rules import BranchRule, Ruleset, resolve_branch_rule
from flexvers.core.version import CommitType
from flexvers.exceptions import UnsupportedBranchPatternError


class TestBranchRule:
    """Tests for BranchRule."""

    def test_compile(self):
        rule = BranchRule.compile("^release/.*$", prerelease=True, allowed_types=[CommitType.PATCH])

        assert rule.matches("release/1.x")
        assert not rule.matches("main")
        assert rule.prerelease is True
        assert rule.allowed_types == frozenset({CommitType.PATCH})

    def test_unanchored_pattern_searches(self):
        """Patterns match anywhere in the branch name unless anchored."""
        assert BranchRule.compile("feature").matches("user/feature-x")

    def test_invalid_pattern_raises(self):
        with pytest.raises(UnsupportedBranchPatternError) as exc_info:
            BranchRule.compile("([unclosed")
        assert exc_info.value.pattern == "([unclosed"


class TestResolveBranchRule:
    """Tests for resolve_branch_rule()."""

    def test_first_match_wins(self):
        first = BranchRule.compile("^main$", prerelease=False)
        second = BranchRule.compile(".*", prerelease=True)
        ruleset = Ruleset(branch_rules=(first, second))

        assert resolve_branch_rule("main", ruleset) is first
        assert resolve_branch_rule("develop", ruleset) is second

    def test_no_match(self):
        ruleset = Ruleset(branch_rules=(BranchRule.compile("^main$"),))

        assert resolve_branch_rule("develop", ruleset) is None


class TestRulesetFromConfig:
    """Tests for Ruleset.from_config()."""

    def test_from_config(self, semver_config: dict):
        ruleset = Ruleset.from_config(FlexversConfig.model_validate(semver_config))

        assert ruleset.default_type is CommitType.PATCH
        assert ruleset.case_sensitive is False
        assert ruleset.type_tokens["MINOR"] == ("feat",)
        assert ruleset.release_tokens == ("release",)
        assert ruleset.prerelease_tokens == ("pre",)
        assert len(ruleset.branch_rules) == 2
        assert ruleset.branch_rules[0].prerelease is True
        assert ruleset.branch_rules[1].allowed_types == frozenset({CommitType.PATCH})
        assert ruleset.excluded_emails == ("noreply.",)

    def test_token_map_order_kept(self):
        config = FlexversConfig.model_validate(
            {"commits": {"map": {"PATCH": ["x"], "MAJOR": ["y"], "MINOR": ["z"]}}}
        )

        assert list(Ruleset.from_config(config).type_tokens) == ["PATCH", "MAJOR", "MINOR"]

    def test_invalid_branch_pattern(self):
        """Invalid patterns fail when the ruleset is built."""
        config = FlexversConfig.model_validate({"branches": [{"name": "*main"}]})

        with pytest.raises(UnsupportedBranchPatternError):
            Ruleset.from_config(config)
