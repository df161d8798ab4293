"""Tests for the gate data model."""

import json

import pytest

from gatekeeper.errors import GateDeclarationError, GateOutcomeError
from gatekeeper.gates.result import (
    CANCEL,
    Cancel,
    EvaluationContext,
    FormRequired,
    GateReference,
    PipelineResult,
    Redirect,
    normalize_outcome,
    resolve_full_path,
)
from gatekeeper.navigation import NavigationTarget


class TestGateReference:
    """Tests for GateReference.from_declaration."""

    def test_string(self):
        assert GateReference.from_declaration("A") == GateReference("A", {})

    def test_mapping(self):
        ref = GateReference.from_declaration({"name": "A", "options": {"n": 1}})
        assert ref.options == {"n": 1}

    def test_mapping_without_options(self):
        assert GateReference.from_declaration({"name": "A"}).options == {}

    def test_passthrough(self):
        ref = GateReference("A")
        assert GateReference.from_declaration(ref) is ref

    @pytest.mark.parametrize("bad", ["", {"name": ""}, {"name": "A", "options": [1]}, None, 3])
    def test_invalid(self, bad):
        with pytest.raises(GateDeclarationError):
            GateReference.from_declaration(bad)


class TestEvaluationContext:
    """Tests for EvaluationContext and full path resolution."""

    def test_adhoc(self):
        ctx = EvaluationContext()
        assert ctx.is_navigation is False
        assert ctx.full_path is None

    def test_mapping_target(self):
        assert EvaluationContext({"fullPath": "/a"}).full_path == "/a"
        assert EvaluationContext({"full_path": "/b"}).full_path == "/b"

    def test_string_target(self):
        assert resolve_full_path("/c?x=1") == "/c?x=1"

    def test_attribute_target(self):
        target = NavigationTarget.from_url("/d?x=1")
        ctx = EvaluationContext(target)
        assert ctx.is_navigation
        assert ctx.full_path == "/d?x=1"

    def test_unresolvable_target(self):
        assert EvaluationContext(object()).full_path is None


class TestOutcomes:
    """Tests for outcome types and normalization."""

    def test_cancel_singleton(self):
        assert Cancel() is CANCEL
        assert repr(CANCEL) == "CANCEL"

    def test_normalize(self):
        assert normalize_outcome(None) is None
        assert normalize_outcome(False) is CANCEL
        assert normalize_outcome("Login") == FormRequired("Login")
        assert normalize_outcome({"path": "/x"}) == Redirect(path="/x")
        redirect = Redirect(name="login")
        assert normalize_outcome(redirect) is redirect

    def test_normalize_string_during_navigation(self):
        """Strings are paths during navigation, form ids otherwise."""
        assert normalize_outcome("/login", navigation=True) == Redirect(path="/login")
        assert normalize_outcome("/login") == FormRequired("/login")

    def test_normalize_rejects_other_values(self):
        with pytest.raises(GateOutcomeError):
            normalize_outcome(True, "A")
        with pytest.raises(GateOutcomeError):
            normalize_outcome(3, "A")

    @pytest.mark.parametrize(
        "key", ["resume_intended", "setRedirectToIntended", "set_redirect_to_intended"]
    )
    def test_redirect_opt_out_keys(self, key):
        assert Redirect.from_dict({"name": "home", key: False}).resume_intended is False

    def test_redirect_default_resumes(self):
        assert Redirect.from_dict({"name": "home"}).resume_intended is True

    def test_with_resume_copies(self):
        original = Redirect(path="/confirm/Terms")
        resumed = original.with_resume("/buy")
        assert original.query == {}
        assert resumed.query == {"redirect": "/buy"}
        assert resumed.resume_path == "/buy"

    def test_location(self):
        assert Redirect(path="/x").location() == "/x"
        assert Redirect(path="/x", query={"redirect": "/a/b"}).location() == "/x?redirect=/a/b"
        assert Redirect(name="login").location() == "login"

    def test_to_dict(self):
        assert CANCEL.to_dict() == {"kind": "cancel"}
        assert FormRequired("F").to_dict() == {"kind": "form", "form_id": "F"}
        assert Redirect(path="/x").to_dict() == {
            "kind": "redirect",
            "location": "/x",
            "path": "/x",
            "resume_intended": True,
        }


class TestPipelineResult:
    """Tests for PipelineResult."""

    def test_cancelled(self):
        result = PipelineResult("A", CANCEL)
        assert result.cancelled
        assert result.redirect is None

    def test_redirect(self):
        redirect = Redirect(path="/x")
        result = PipelineResult("A", redirect)
        assert not result.cancelled
        assert result.redirect is redirect

    def test_to_json(self):
        result = PipelineResult("A", FormRequired("F"))
        assert json.loads(result.to_json()) == {
            "gate": "A",
            "outcome": {"kind": "form", "form_id": "F"},
        }
