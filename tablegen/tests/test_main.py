from pathlib import Path

import pytest

from tablegen.model_codegen.main import DEFAULT_FILE_PREFIX, generate, main
from tablegen.model_codegen.strategy import CONFIG_FILE_NAME, TemplateStrategy
from tablegen.shared.errors import TemplateCompileError

USER_SOURCE = """
    package models

    // User is an account.
    type User struct {
    	ID   int64
    	Name string `gorm:"column:full_name"`
    }

    func (u User) TableName() string { return "users" }
"""

EXPECTED_USER_OUTPUT = (
    "// Code generated by tablegen. DO NOT EDIT.\n"
    "\n"
    "package models\n"
    "\n"
    "// UserColumns maps the fields of User to their columns.\n"
    "var UserColumns = struct {\n"
    "\tID string\n"
    "\tName string\n"
    "}{\n"
    '\tID: "id",\n'
    '\tName: "full_name",\n'
    "}\n"
    "\n"
    "// PrimaryKey returns the primary key column of User.\n"
    "func (u User) PrimaryKey() string {\n"
    '\treturn "id"\n'
    "}\n"
)


class TestGenerate:
    def test_generates_default_output(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)

        result = generate(tmp_path)

        output = tmp_path / f"{DEFAULT_FILE_PREFIX}0.go"
        assert result.files == [output]
        assert [m.name for m in result.models] == ["User"]
        assert result.context.as_mapping() == {"package": "models"}
        assert output.read_text(encoding="utf-8") == EXPECTED_USER_OUTPUT

    def test_rerun_is_idempotent(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)
        generate(tmp_path)
        first = (tmp_path / f"{DEFAULT_FILE_PREFIX}0.go").read_bytes()

        result = generate(tmp_path)

        assert len(result.models) == 1
        assert (tmp_path / f"{DEFAULT_FILE_PREFIX}0.go").read_bytes() == first

    def test_removes_stale_output(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)
        stale = write_go("nested/gen_7.go", "package nested\n")

        result = generate(tmp_path, file_prefix="gen_")

        assert not stale.exists()
        assert result.files == [tmp_path / "gen_0.go"]

    def test_no_models_writes_nothing(self, tmp_path, write_go):
        write_go("util.go", "package util\n\nfunc Helper() {}\n")

        result = generate(tmp_path)

        assert result.files == []
        assert result.models == []
        assert sorted(p.name for p in tmp_path.iterdir()) == ["util.go"]

    def test_models_across_files_in_walk_order(self, tmp_path, write_go):
        write_go(
            "b.go",
            """
            package b

            type Order struct{ ID int }

            func (Order) TableName() string { return "orders" }
            """,
        )
        write_go(
            "a/a.go",
            """
            package a

            type Item struct{ Sku string `json:"sku"` }

            func (i *Item) TableName() string { return "items" }
            """,
        )

        result = generate(tmp_path)

        assert [m.name for m in result.models] == ["Item", "Order"]
        assert result.context.as_mapping() == {"package": "a"}
        text = (tmp_path / f"{DEFAULT_FILE_PREFIX}0.go").read_text(encoding="utf-8")
        assert text.startswith("// Code generated by tablegen. DO NOT EDIT.\n\npackage a\n")
        assert '\tSku: "sku",\n' in text
        assert text.index("ItemColumns") < text.index("OrderColumns")

    def test_splits_output_by_size(self, tmp_path, write_go):
        write_go(
            "models.go",
            """
            package models

            type A struct{ ID int }
            type B struct{ ID int }
            type C struct{ ID int }

            func (A) TableName() string { return "a" }
            func (B) TableName() string { return "b" }
            func (C) TableName() string { return "c" }
            """,
        )
        strategy = TemplateStrategy(
            header_template="package {{ package }}\n",
            content_template="// {{ name }}\n",
            file_max_size=20,
        )

        result = generate(tmp_path, strategy=strategy)

        # header 15 bytes, each block 5 bytes
        assert [p.name for p in result.files] == [
            f"{DEFAULT_FILE_PREFIX}0.go",
            f"{DEFAULT_FILE_PREFIX}1.go",
            f"{DEFAULT_FILE_PREFIX}2.go",
        ]
        assert result.files[1].read_text() == "package models\n// B\n"

    def test_broken_template_keeps_stale_output(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)
        stale = write_go(f"{DEFAULT_FILE_PREFIX}0.go", "package models\n")
        strategy = TemplateStrategy(content_template="{% for %}")

        with pytest.raises(TemplateCompileError):
            generate(tmp_path, strategy=strategy)

        assert stale.read_text() == "package models\n"

    def test_skips_unparseable_sources(self, tmp_path, write_go, capsys):
        write_go("broken.go", "package broken\n\ntype X struct {\n")
        write_go("models.go", USER_SOURCE)

        result = generate(tmp_path)

        assert [m.name for m in result.models] == ["User"]
        assert result.context.as_mapping() == {"package": "models"}
        assert "WARNING: Skipping broken.go" in capsys.readouterr().err

    def test_uses_config_from_search_dir(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "package_key: pkg\n"
            'header_template: "// {{ pkg }}\\n"\n'
            'content_template: "{{ name }}={{ primary_key.column }}\\n"\n'
        )

        generate(tmp_path)

        output = tmp_path / f"{DEFAULT_FILE_PREFIX}0.go"
        assert output.read_text() == "// models\nUser=id\n"

    def test_missing_search_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            generate(tmp_path / "missing")


class TestMain:
    def test_main_default_flags(self, tmp_path, write_go, capsys):
        write_go("models.go", USER_SOURCE)

        main(["--path", str(tmp_path)])

        out = capsys.readouterr().out
        assert "Generated 1 file(s) from 1 model(s)" in out
        assert (tmp_path / f"{DEFAULT_FILE_PREFIX}0.go").exists()

    def test_main_single_dash_aliases(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)

        main(["-path", str(tmp_path), "-filePrefix", "zz_"])

        assert (tmp_path / "zz_0.go").read_text(encoding="utf-8") == EXPECTED_USER_OUTPUT

    def test_main_file_prefix_long_flag(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)

        main(["--path", str(tmp_path), "--file-prefix", "out_"])

        assert (tmp_path / "out_0.go").exists()

    def test_main_missing_path(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--path", str(tmp_path / "missing")])
        assert str(exc_info.value.code).startswith("Error:")

    def test_main_invalid_config(self, tmp_path, write_go):
        write_go("models.go", USER_SOURCE)
        (tmp_path / CONFIG_FILE_NAME).write_text("file_max_size: 0\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["--path", str(tmp_path)])
        assert "file_max_size" in str(exc_info.value.code)

    def test_main_unreadable_directory(self, tmp_path, write_go, monkeypatch):
        write_go("models.go", USER_SOURCE)

        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", deny)
        with pytest.raises(SystemExit) as exc_info:
            main(["--path", str(tmp_path)])
        assert str(exc_info.value.code).startswith("Error:")
        assert "Failed to read directory" in str(exc_info.value.code)

    def test_main_skips_invalid_utf8_source(self, tmp_path, write_go, capsys):
        (tmp_path / "latin1.go").write_bytes(
            b"package models\n\n// Caf\xe9 model\ntype Cafe struct{ ID int }\n\n"
            b'func (Cafe) TableName() string { return "cafes" }\n'
        )
        write_go("models.go", USER_SOURCE)

        main(["--path", str(tmp_path)])

        captured = capsys.readouterr()
        assert "WARNING: Skipping latin1.go" in captured.err
        assert "Generated 1 file(s) from 1 model(s)" in captured.out
        assert (tmp_path / f"{DEFAULT_FILE_PREFIX}0.go").read_text(
            encoding="utf-8"
        ) == EXPECTED_USER_OUTPUT
