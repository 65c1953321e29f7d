"""Tests for diagnostics collection."""
import pytest

from s3_state_backend.domain.entities.diagnostics import (
    Diagnostics,
    Severity,
    attribute_error,
    attribute_warning,
    path_string,
    sourceless,
)
from s3_state_backend.infra.common import ConfigError


def test_collects_in_order():
    """Test diagnostics keep insertion order and skip None."""
    diags = Diagnostics()
    diags.append(attribute_warning("first", "", "a"))
    diags.append(None)
    diags.extend([attribute_error("second", "", "b"), None])
    
    assert diags.summaries() == ["first", "second"]
    assert len(diags) == 2
    assert diags.has_errors()
    assert [d.summary for d in diags.errors] == ["second"]
    assert [d.summary for d in diags.warnings] == ["first"]


def test_warnings_only_has_no_errors():
    """Test warnings alone do not count as errors."""
    diags = Diagnostics([attribute_warning("w", "detail", "x")])
    
    assert not diags.has_errors()
    diags.raise_for_errors()


def test_raise_for_errors():
    """Test errors convert into ConfigError carrying the diagnostics."""
    diags = Diagnostics([
        attribute_error("Invalid bucket value", "", "bucket"),
        attribute_error("Invalid key value", "", "key"),
    ])
    
    with pytest.raises(ConfigError, match=r"Invalid bucket value \(and 1 more errors\)") as exc_info:
        diags.raise_for_errors()
    
    assert exc_info.value.diagnostics is diags


def test_path_string():
    """Test attribute path rendering."""
    assert path_string(()) == ""
    assert path_string(("bucket",)) == "bucket"
    assert path_string(("assume_role", "policy_arns", 2)) == "assume_role.policy_arns[2]"


def test_str_rendering():
    """Test human readable output."""
    text = str(attribute_error("Invalid key value", "Bad key.", "key"))
    assert text.startswith("Error: Invalid key value")
    assert "on attribute 'key'" in text
    assert text.endswith("Bad key.")
    
    text = str(sourceless(Severity.WARNING, "Heads up"))
    assert text == "Warning: Heads up"
