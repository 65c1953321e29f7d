"""Tests for the configuration schema."""
from s3_state_backend.domain.services.schema import config_schema


def test_required_attributes():
    """Test bucket and key are the only required top-level attributes."""
    schema = config_schema()
    
    assert {name for name, attr in schema.items() if attr.required} == {"bucket", "key"}
    assert schema["region"].optional is True


def test_attribute_types():
    """Test attribute type names."""
    schema = config_schema()
    
    assert schema["bucket"].type == "string"
    assert schema["encrypt"].type == "bool"
    assert schema["max_retries"].type == "number"
    assert schema["shared_credentials_files"].type == "set of string"
    assert schema["assume_role_tags"].type == "map of string"
    assert schema["assume_role"].type == "object"


def test_deprecated_attributes():
    """Test the deprecated attributes are flagged."""
    schema = config_schema()
    
    deprecated = {name for name, attr in schema.items() if attr.deprecated}
    assert deprecated == {
        "shared_credentials_file",
        "role_arn",
        "session_name",
        "external_id",
        "assume_role_duration_seconds",
        "assume_role_policy",
        "assume_role_policy_arns",
        "assume_role_tags",
        "assume_role_transitive_tag_keys",
    }


def test_sensitive_attribute():
    """Test sse_customer_key is marked sensitive."""
    schema = config_schema()
    
    assert schema["sse_customer_key"].sensitive is True
    assert schema["bucket"].sensitive is False


def test_nested_assume_role_schema():
    """Test the nested assume_role attributes."""
    nested = config_schema()["assume_role"].attributes
    
    assert set(nested) == {
        "role_arn",
        "duration",
        "external_id",
        "policy",
        "policy_arns",
        "session_name",
        "tags",
        "transitive_tag_keys",
    }
    assert nested["role_arn"].required is True
    assert nested["duration"].required is False
    assert nested["role_arn"].description == "The role to be assumed."
