"""
Tests for writing generated artifacts to disk.
"""

from pathlib import Path

import pytest

from avsc_to_code.codegen import ArtifactWriter, AtomicWriter, CSharpBackend, GeneratedType, PythonBackend
from avsc_to_code.config import CodeGeneratorConfig, OutputConfig, OutputMode
from avsc_to_code.errors import GeneratedCodeError

VALID_CS = "using System;\n\npublic partial class A\n{\n}\n"


def artifact(relative_path, code=VALID_CS, name="A"):
    return GeneratedType(fullname=name, name=name, namespace=None, relative_path=Path(relative_path), code=code)


class TestArtifactWriter:
    def test_writes_below_output_root(self, tmp_path):
        writer = ArtifactWriter(tmp_path, CodeGeneratorConfig())

        written = writer.write_all([artifact("com/example/A.cs")])

        assert written == [tmp_path / "com" / "example" / "A.cs"]
        assert written[0].read_text() == VALID_CS

    def test_existing_file_fails_before_writing(self, tmp_path):
        (tmp_path / "B.cs").write_text("old")
        writer = ArtifactWriter(tmp_path, CodeGeneratorConfig())

        with pytest.raises(FileExistsError, match="Use --force"):
            writer.write_all([artifact("A.cs"), artifact("B.cs", name="B")])

        assert not (tmp_path / "A.cs").exists()
        assert (tmp_path / "B.cs").read_text() == "old"

    def test_force_overwrites(self, tmp_path):
        (tmp_path / "A.cs").write_text("old")
        config = CodeGeneratorConfig(output=OutputConfig(mode=OutputMode.FORCE))

        ArtifactWriter(tmp_path, config).write_all([artifact("A.cs")])

        assert (tmp_path / "A.cs").read_text() == VALID_CS

    def test_invalid_artifact_writes_nothing(self, tmp_path):
        writer = ArtifactWriter(tmp_path, CodeGeneratorConfig())

        with pytest.raises(GeneratedCodeError, match="unbalanced braces"):
            writer.write_all([artifact("A.cs"), artifact("B.cs", code="using System;\nclass B {", name="B")])

        assert list(tmp_path.iterdir()) == []

    def test_plain_write(self, tmp_path):
        config = CodeGeneratorConfig(output=OutputConfig(atomic_write=False, validate_before_write=False))

        ArtifactWriter(tmp_path, config).write_all([artifact("x/A.cs", code="anything")])

        assert (tmp_path / "x" / "A.cs").read_text() == "anything"

    def test_python_package_markers(self, tmp_path):
        writer = ArtifactWriter(tmp_path, CodeGeneratorConfig(language="python"))

        written = writer.write_all([artifact("com/example/A.py", code="class A:\n    pass\n")])

        for directory in (tmp_path, tmp_path / "com", tmp_path / "com" / "example"):
            assert (directory / "__init__.py").exists()
            assert directory / "__init__.py" in written

    def test_existing_markers_are_kept(self, tmp_path):
        (tmp_path / "__init__.py").write_text("# keep\n")
        config = CodeGeneratorConfig(language="python", skip_directories=True)

        written = ArtifactWriter(tmp_path, config).write_all([artifact("A.py", code="A = 1\n")])

        assert written == [tmp_path / "A.py"]
        assert (tmp_path / "__init__.py").read_text() == "# keep\n"


class TestAtomicWriter:
    def test_no_temporary_files_left(self, tmp_path):
        target = tmp_path / "A.py"

        AtomicWriter(PythonBackend.validate_code).write(target, "A = 1\n")

        assert [p.name for p in tmp_path.iterdir()] == ["A.py"]

    def test_validation_failure_keeps_old_content(self, tmp_path):
        target = tmp_path / "A.py"
        target.write_text("A = 1\n")

        with pytest.raises(GeneratedCodeError, match="not valid"):
            AtomicWriter(PythonBackend.validate_code).write(target, "def broken(:\n")

        assert target.read_text() == "A = 1\n"
        assert [p.name for p in tmp_path.iterdir()] == ["A.py"]

    def test_custom_validator(self, tmp_path):
        seen = []

        AtomicWriter(seen.append).write(tmp_path / "A.cs", "not really C#")

        assert seen == ["not really C#"]
        assert (tmp_path / "A.cs").read_text() == "not really C#"


class TestCSharpValidation:
    @pytest.mark.parametrize(
        "code,message",
        [
            ("using System;\nnamespace X { }\n", "no type definitions"),
            ("using System;\npublic enum E { A\n", "unbalanced braces"),
            ("using System;\npublic class C } {\n", "unbalanced braces"),
            ("public enum E { A }\n", "missing using"),
        ],
    )
    def test_rejected(self, code, message):
        with pytest.raises(GeneratedCodeError, match=message):
            CSharpBackend.validate_code(code)

    def test_braces_in_string_defaults(self):
        code = 'using System;\npublic partial class C\n{\n    public string S { get; set; } = "{\\"}";\n}\n'
        CSharpBackend.validate_code(code)


if __name__ == "__main__":
    pytest.main([__file__])
