#!/usr/bin/env python3
"""
Tests for C# and Python generation from resolved schemas.
"""

import ast
import json
from pathlib import Path

import pytest

from avsc_to_code.codegen import CodeGenerator
from avsc_to_code.config import CodeGeneratorConfig
from avsc_to_code.errors import NamespaceConflictError
from avsc_to_code.pipeline import SchemaPipeline
from avsc_to_code.schema import RecordSchema, SchemaNames, SchemaParser

TEST_DATA = Path(__file__).parent / "test_data"
COMPANY = TEST_DATA / "schemas" / "company"


def generate(language="cs", **options):
    config = CodeGeneratorConfig(language=language, **options)
    return {artifact.fullname: artifact for artifact in SchemaPipeline(config).generate(COMPANY)}


def generate_protocol(language="cs"):
    protocol = SchemaParser().parse_protocol((TEST_DATA / "protocol" / "mail.avpr").read_text())
    generator = CodeGenerator(CodeGeneratorConfig(language=language))
    return {artifact.relative_path.name: artifact for artifact in generator.generate_protocol(protocol)}


class TestCSharp:
    """C# output for the company schemas"""

    def test_one_file_per_type(self):
        artifacts = generate()
        assert {a.relative_path.as_posix() for a in artifacts.values()} == {
            "com/example/Address.cs",
            "com/example/Checksum.cs",
            "com/example/Company.cs",
            "com/example/Person.cs",
            "com/example/Status.cs",
        }

    def test_enum(self):
        code = generate()["com.example.Status"].code
        assert code == (
            "using Newtonsoft.Json;\n"
            "using Newtonsoft.Json.Converters;\n"
            "using System;\n"
            "\n"
            "namespace com.example\n"
            "{\n"
            "    /// <summary>\n"
            "    /// Employment status.\n"
            "    /// </summary>\n"
            "    [JsonConverter(typeof(StringEnumConverter))]\n"
            "    public enum Status\n"
            "    {\n"
            "        ACTIVE,\n"
            "        INACTIVE,\n"
            "    }\n"
            "}\n"
        )

    def test_record_properties(self):
        code = generate()["com.example.Person"].code
        assert "public partial class Person" in code
        assert '[JsonProperty("name")]' in code
        assert "public string Name { get; set; }" in code
        assert "public int Age { get; set; } = 0;" in code
        assert "public Address Address { get; set; }" in code
        assert "public Status Status { get; set; } = Status.ACTIVE;" in code
        assert "public IList<string> Tags { get; set; } = new List<string>();" in code
        assert "public Person Manager { get; set; } = null;" in code
        assert "using System.Collections.Generic;" in code

    def test_collections_and_references(self):
        code = generate()["com.example.Company"].code
        assert "public IList<Person> Employees { get; set; }" in code
        assert "public Address Headquarters { get; set; }" in code
        assert "public IDictionary<string, Address> Offices { get; set; } = new Dictionary<string, Address>();" in code
        assert "public Checksum Checksum { get; set; }" in code

    def test_nullable_value_type(self):
        code = generate()["com.example.Address"].code
        assert '[JsonProperty("zip_code")]' in code
        assert "public string ZipCode { get; set; } = null;" in code

    def test_fixed(self):
        code = generate()["com.example.Checksum"].code
        assert "public const int FixedSize = 16;" in code

    def test_namespace_mapping(self):
        artifacts = generate(namespace_mapping={"com.example": "Example.Models"})
        person = artifacts["com.example.Person"]
        assert person.namespace == "Example.Models"
        assert person.relative_path.as_posix() == "Example/Models/Person.cs"
        assert "namespace Example.Models\n{" in person.code

    def test_skip_directories(self):
        artifacts = generate(skip_directories=True)
        assert artifacts["com.example.Person"].relative_path == Path("Person.cs")

    def test_generation_comment(self):
        config = CodeGeneratorConfig()
        artifacts = SchemaPipeline(config, generation_comment=["Generated by test"]).generate(COMPANY)
        assert all(a.code.startswith("// ----") for a in artifacts)
        assert all("//    Generated by test\n" in a.code for a in artifacts)

    def test_generation_comment_disabled(self):
        config = CodeGeneratorConfig(add_generation_comment=False)
        artifacts = SchemaPipeline(config, generation_comment=["Generated by test"]).generate(COMPANY)
        assert all(a.code.startswith("using ") for a in artifacts)

    def test_protocol_interface(self):
        artifacts = generate_protocol()
        assert set(artifacts) == {"Message.cs", "Bounce.cs", "IMail.cs"}
        interface = artifacts["IMail.cs"].code
        assert "public interface IMail" in interface
        assert "    /// Send a message.\n" in interface
        assert "string Send(Message message);" in interface
        assert "void Ping();" in interface
        assert "public partial class Bounce : Exception" in artifacts["Bounce.cs"].code


class TestCrossNamespace:
    def _names(self, tmp_path, *schemas):
        names = SchemaNames()
        parser = SchemaParser()
        for schema in schemas:
            names.commit(parser.parse(json.dumps(schema), names.view()).defined)
        return names

    def test_qualified_reference(self, tmp_path):
        names = self._names(
            tmp_path,
            {"type": "record", "name": "B", "namespace": "com.b", "fields": []},
            {"type": "record", "name": "A", "namespace": "com.a", "fields": [{"name": "b", "type": "com.b.B"}]},
        )

        cs = {a.name: a for a in CodeGenerator(CodeGeneratorConfig()).generate(names)}
        assert "public com.b.B B { get; set; }" in cs["A"].code

        py = {a.name: a for a in CodeGenerator(CodeGeneratorConfig(language="python")).generate(names)}
        assert "from com.b.B import B\n" in py["A"].code

    def test_mapped_namespaces_collide(self, tmp_path):
        names = SchemaNames()
        names.commit({"a.X": RecordSchema(name="X", namespace="a"), "b.X": RecordSchema(name="X", namespace="b")})
        generator = CodeGenerator(CodeGeneratorConfig(namespace_mapping={"a": "t", "b": "t"}))

        with pytest.raises(NamespaceConflictError, match="both generate"):
            generator.generate(names)

    def test_case_insensitive_collision(self):
        names = SchemaNames()
        names.commit({"Item": RecordSchema(name="Item"), "item": RecordSchema(name="item")})

        with pytest.raises(NamespaceConflictError):
            CodeGenerator(CodeGeneratorConfig()).generate(names)

    def test_unsupported_language(self):
        with pytest.raises(ValueError, match="Language not supported"):
            CodeGenerator(CodeGeneratorConfig(language="cobol"))


class TestPython:
    """Python output for the company schemas"""

    def test_generated_code_is_valid(self):
        for artifact in generate("python").values():
            ast.parse(artifact.code)
            assert artifact.relative_path.suffix == ".py"

    def test_record(self):
        code = generate("python")["com.example.Person"].code
        assert code == (
            "from __future__ import annotations\n"
            "\n"
            "from dataclasses import dataclass, field\n"
            "\n"
            "from dataclasses_json import dataclass_json\n"
            "\n"
            "from com.example.Address import Address\n"
            "from com.example.Status import Status\n"
            "\n"
            "\n"
            "@dataclass_json\n"
            "@dataclass(kw_only=True)\n"
            "class Person:\n"
            '    """A person working for a company."""\n'
            "\n"
            "    name: str\n"
            "    age: int = 0\n"
            "    address: Address\n"
            "    status: Status = Status.ACTIVE\n"
            "    tags: list[str] = field(default_factory=list)\n"
            "    manager: None | Person = None\n"
        )

    def test_enum(self):
        code = generate("python")["com.example.Status"].code
        assert "from enum import Enum\n" in code
        assert "class Status(Enum):" in code
        assert "    ACTIVE = 'ACTIVE'\n" in code

    def test_map_default(self):
        code = generate("python")["com.example.Company"].code
        assert "offices: dict[str, Address] = field(default_factory=dict)" in code
        assert "employees: list[Person]" in code

    def test_flat_layout_uses_relative_imports(self):
        code = generate("python", skip_directories=True)["com.example.Person"].code
        assert "from .Address import Address\n" in code

    def test_self_reference_without_future_annotations(self):
        code = generate("python", use_future_annotations=False)["com.example.Person"].code
        assert "from __future__" not in code
        assert 'manager: None | "Person" = None' in code

    def test_keyword_field_names(self):
        code = generate_protocol("python")["Message.py"].code
        ast.parse(code)
        assert 'from_: str = field(metadata=config(field_name="from"))' in code
        assert "from dataclasses_json import config, dataclass_json\n" in code

    def test_protocol(self):
        artifacts = generate_protocol("python")
        code = artifacts["Mail.py"].code
        ast.parse(code)
        assert "from typing import Protocol\n" in code
        assert "from org.example.mail.Message import Message\n" in code
        assert "class Mail(Protocol):" in code
        assert "    def send(self, message: Message) -> str:" in code
        assert "    def ping(self) -> None:" in code
        assert "class Bounce(Exception):" in artifacts["Bounce.py"].code


if __name__ == "__main__":
    pytest.main([__file__])
