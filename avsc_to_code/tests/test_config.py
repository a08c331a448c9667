import pytest

from avsc_to_code.config import CodeGeneratorConfig, LayoutPolicy, OutputMode, parse_namespace_mapping
from avsc_to_code.utils import escape_cs_identifier, namespace_to_path, snake_to_pascal_case


class TestCodeGeneratorConfig:
    def test_defaults(self):
        config = CodeGeneratorConfig()
        assert config.language == "cs"
        assert config.file_extension == "cs"
        assert config.layout == LayoutPolicy.NAMESPACE_DIRECTORIES
        assert config.output.mode == OutputMode.ERROR_IF_EXISTS

    def test_from_dict(self):
        config = CodeGeneratorConfig.from_dict(
            {
                "language": "python",
                "skip_directories": True,
                "namespace_mapping": {"com.example": "example"},
                "output": {"mode": "force", "atomic_write": False},
                "unknown_option": 1,
            }
        )
        assert config.file_extension == "py"
        assert config.layout == LayoutPolicy.FLAT
        assert config.output.mode == OutputMode.FORCE
        assert config.output.validate_before_write
        assert not config.output.atomic_write
        assert not hasattr(config, "unknown_option")

    def test_round_trip(self):
        config = CodeGeneratorConfig(language="python", namespace_mapping={"a": "b"})
        assert CodeGeneratorConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize("key", ["layout", "file_extension"])
    def test_derived_properties_are_not_options(self, key):
        config = CodeGeneratorConfig.from_dict({key: "flat"})
        assert config == CodeGeneratorConfig()

    def test_unsupported_language(self):
        with pytest.raises(ValueError, match="Language not supported"):
            CodeGeneratorConfig.from_dict({"language": "cobol"})

    @pytest.mark.parametrize(
        "namespace,expected",
        [
            ("com.example", "Example.Models"),
            ("com.example.hr", "Example.Models.hr"),
            ("com.example.internal", "Internal"),
            ("com.examples", "com.examples"),
            ("org.other", "org.other"),
            (None, None),
        ],
    )
    def test_map_namespace(self, namespace, expected):
        config = CodeGeneratorConfig(
            namespace_mapping={"com.example": "Example.Models", "com.example.internal": "Internal"}
        )
        assert config.map_namespace(namespace) == expected


class TestNamespaceMapping:
    def test_parse(self):
        assert parse_namespace_mapping("com.example:Example.Models") == ("com.example", "Example.Models")

    @pytest.mark.parametrize("value", ["com.example", "a:b:c", ":b", "a:"])
    def test_malformed(self, value):
        with pytest.raises(ValueError, match="Malformed namespace mapping"):
            parse_namespace_mapping(value)


class TestUtils:
    @pytest.mark.parametrize(
        "text,expected",
        [("zip_code", "ZipCode"), ("firstName", "FirstName"), ("send", "Send"), ("kebab-case", "KebabCase"), ("", "")],
    )
    def test_snake_to_pascal_case(self, text, expected):
        assert snake_to_pascal_case(text) == expected

    def test_escape_cs_identifier(self):
        assert escape_cs_identifier("class") == "@class"
        assert escape_cs_identifier("Class") == "Class"

    def test_namespace_to_path(self):
        assert namespace_to_path("com.example.hr") == "com/example/hr"
        assert namespace_to_path(None) == ""


if __name__ == "__main__":
    pytest.main([__file__])
