"""Tests for the security policy and value sanitizers."""
import logging

import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from safedsl.components import Element
from safedsl.errors import ExecutionError, SecurityError
from safedsl.governance.policy import (
    DEFAULT_POLICY,
    DENIED_METHODS,
    SecurityPolicy,
    has_method_shape,
    is_identifier_suspicious,
    is_method_allowed,
)
from safedsl.governance.values import (
    safe_css_token,
    sanitize_data_key,
    stringify,
    validate_image_src,
    validate_link_href,
    validate_url,
)
from safedsl.runtime.state import RenderNode
from safedsl.syntax.ast import Symbol


class TestDenylist:
    """Capability-escaping names."""

    @pytest.mark.parametrize("name", [
        "eval", "instance_eval", "exec", "system", "spawn", "open", "require",
        "load", "send", "public_send", "instance_variable_get", "const_get", "constantize",
        "binding", "method", "getattr", "globals", "kernel", "process",
    ])
    def test_denied(self, name):
        """Test denylisted names are refused."""
        assert not is_method_allowed(name)

    @pytest.mark.parametrize("name", ["vstack", "text", "font_size", "h1", "list_item"])
    def test_allowed(self, name):
        """Test ordinary DSL names pass."""
        assert is_method_allowed(name)

    def test_denylist_is_frozen(self):
        """Test the denylist is an immutable set."""
        assert isinstance(DENIED_METHODS, frozenset)

    def test_verdict_is_stable(self):
        """Test the same input always gets the same verdict."""
        verdicts = {DEFAULT_POLICY.is_method_allowed("eval") for _ in range(100)}
        assert verdicts == {False}


class TestShape:
    """Method-name shape rule."""

    @pytest.mark.parametrize("name", ["Kernel", "File", "_private", "__send__", "exit!", "valid?", "", "1abc"])
    def test_bad_shapes(self, name):
        """Test names that do not look like DSL methods."""
        assert not has_method_shape(name)
        assert not is_method_allowed(name)

    def test_non_string(self):
        """Test non-string names are refused."""
        assert not is_method_allowed(None)
        assert not is_method_allowed(42)


class TestMetacharacters:
    """Shell metacharacter detection."""

    @pytest.mark.parametrize("text", ["a;b", "`x`", "$(x)", "a|b", "a&&b", "a\nb", "a\x00b"])
    def test_suspicious(self, text):
        """Test shell sequences are flagged."""
        assert is_identifier_suspicious(text)

    @pytest.mark.parametrize("text", ["normal_name", "a&b", "dollar$", "x(y)"])
    def test_not_suspicious(self, text):
        """Test ordinary text passes."""
        assert not is_identifier_suspicious(text)

    def test_non_string_is_suspicious(self):
        """Test non-string input is flagged."""
        assert is_identifier_suspicious(None)


class TestSecurityPolicy:
    """Policy instances with allowlists."""

    def test_allowlist_restricts(self):
        """Test names outside the allowlist are refused."""
        policy = SecurityPolicy(allowed_methods={"text"})
        assert policy.is_method_allowed("text")
        assert not policy.is_method_allowed("vstack")

    def test_allowlist_cannot_override_denylist(self):
        """Test a denied name stays denied even if allowlisted."""
        policy = SecurityPolicy(allowed_methods={"eval"})
        assert not policy.is_method_allowed("eval")

    def test_with_allowlist_keeps_denylist(self):
        """Test with_allowlist returns a narrowed copy."""
        policy = DEFAULT_POLICY.with_allowlist({"text", "system"})
        assert policy.allowed_methods == frozenset({"text", "system"})
        assert not policy.is_method_allowed("system")
        assert DEFAULT_POLICY.allowed_methods is None

    def test_check_method_raises(self):
        """Test check_method raises SecurityError with the method name."""
        with pytest.raises(SecurityError) as exc_info:
            DEFAULT_POLICY.check_method("eval")
        assert exc_info.value.method_name == "eval"
        assert exc_info.value.kind == "security_error"

    def test_check_method_passes(self):
        """Test check_method is silent for allowed names."""
        DEFAULT_POLICY.check_method("text")

    def test_check_identifier(self):
        """Test check_identifier rejects metacharacters."""
        with pytest.raises(SecurityError):
            DEFAULT_POLICY.check_identifier("a|b")
        DEFAULT_POLICY.check_identifier("spacing")

    def test_denial_reasons(self):
        """Test denial reasons distinguish the failed check."""
        policy = SecurityPolicy(allowed_methods={"text"})
        assert "not allowed" in policy.denial_reason("eval")
        assert "not a valid" in policy.denial_reason("Kernel")
        assert "metacharacter" in policy.denial_reason("a|b")
        assert "not an operation" in policy.denial_reason("vstack")

    def test_case_insensitive_denylist(self):
        """Test is_denied ignores case."""
        assert DEFAULT_POLICY.is_denied("EVAL")
        assert DEFAULT_POLICY.is_denied("Kernel")


class TestValueSanitizers:
    """CSS token and URL checks."""

    def test_stringify(self):
        """Test DSL value formatting."""
        assert stringify(True) == "true"
        assert stringify(None) == ""
        assert stringify(4.0) == "4"
        assert stringify(2.5) == "2.5"

    def test_stringify_rejects_structured_values(self):
        """Test elements and render nodes never turn into their repr."""
        with pytest.raises(ExecutionError, match="title must be text, got Element"):
            stringify(Element("span", text="a"), "title")
        with pytest.raises(ExecutionError, match="value must be text, got RenderNode"):
            stringify(RenderNode.text_node("a"))
        assert stringify(Symbol("center")) == "center"

    @pytest.mark.parametrize("value", ["4", 4, "1/2", "[10px]", "blue-500", "sm:p-2"])
    def test_safe_css_token(self, value):
        """Test class fragments that are accepted."""
        assert safe_css_token(value) == stringify(value)

    @pytest.mark.parametrize("value", ["red onclick", "a\"b", "x<y", "", "a;b", "x" * 65])
    def test_unsafe_css_token(self, value):
        """Test class fragments that are refused."""
        with pytest.raises(ExecutionError):
            safe_css_token(value, "bg")

    @pytest.mark.parametrize("url", [
        "javascript:alert(1)",
        "JaVaScRiPt:alert(1)",
        "java\tscript:alert(1)",
        "vbscript:msgbox",
        "data:text/html,<script>",
        "file:///etc/passwd",
        "ftp://example.com",
    ])
    def test_dangerous_urls(self, url, caplog):
        """Test dangerous URLs fall back and are logged."""
        with caplog.at_level(logging.WARNING, logger="safedsl.governance.values"):
            assert validate_link_href(url) == "#"
        assert caplog.records

    @pytest.mark.parametrize("url", ["https://example.com/a?b=1", "/docs", "mailto:a@b.c", "#top"])
    def test_safe_urls(self, url):
        """Test safe URLs pass unchanged."""
        assert validate_link_href(url) == url

    def test_relative_not_allowed(self):
        """Test relative URLs can be refused."""
        assert validate_url("/docs", allow_relative=False, fallback="#") == "#"

    def test_image_placeholder(self):
        """Test image sources fall back to a placeholder."""
        assert validate_image_src("javascript:x") == "/images/placeholder.png"
        assert validate_image_src(None) == "/images/placeholder.png"

    def test_sanitize_data_key(self):
        """Test data-* key normalisation."""
        assert sanitize_data_key("user_id") == "user-id"
        with pytest.raises(ExecutionError):
            sanitize_data_key("__")
