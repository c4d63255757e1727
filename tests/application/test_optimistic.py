"""Tests for the shared optimistic apply/commit/rollback helper."""

import asyncio

from vendordash.application.optimistic import MutationOutcome, apply_optimistically
from vendordash.domain.exceptions import StoreWriteError, ValidationError


def _run(apply, commit):
    state = {"value": "old", "commits": 0}

    def do_apply():
        apply(state)

    def rollback():
        state["value"] = "old"

    async def do_commit():
        state["commits"] += 1
        commit(state)

    outcome = asyncio.run(apply_optimistically(do_apply, rollback, do_commit, description="test"))
    return outcome, state


def _set_new(state):
    state["value"] = "new"


def _reject(state):
    raise ValidationError("nope")


def _ok(state):
    pass


def _fail(state):
    raise StoreWriteError("down")


class TestApplyOptimistically:

    def test_applied_keeps_local_value(self):
        outcome, state = _run(_set_new, _ok)
        assert outcome is MutationOutcome.APPLIED
        assert state["value"] == "new"

    def test_rejected_never_commits(self):
        outcome, state = _run(_reject, _ok)
        assert outcome is MutationOutcome.REJECTED
        assert state["commits"] == 0

    def test_failed_commit_restores_prior_value(self):
        outcome, state = _run(_set_new, _fail)
        assert outcome is MutationOutcome.ROLLED_BACK
        assert state["value"] == "old"

    def test_commit_sees_applied_value(self):
        seen = []
        _run(_set_new, lambda state: seen.append(state["value"]))
        assert seen == ["new"]
