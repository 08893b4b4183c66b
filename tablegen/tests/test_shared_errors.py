from tablegen.shared.errors import (
    ConfigError,
    GenerationError,
    OutputWriteError,
    SourceParseError,
    SourceReadError,
    TemplateCompileError,
    TemplateRenderError,
)


class TestGenerationError:
    def test_init_no_path(self):
        error = GenerationError("test message")
        assert str(error) == "test message"
        assert error.source_path is None

    def test_init_with_path(self):
        error = GenerationError("test message", "models/user.go")
        assert str(error) == "[models/user.go] test message"
        assert error.source_path == "models/user.go"

    def test_subclasses(self):
        assert issubclass(SourceReadError, GenerationError)
        assert issubclass(OutputWriteError, GenerationError)
        assert issubclass(ConfigError, GenerationError)


class TestSourceParseError:
    def test_init_no_line(self):
        error = SourceParseError("syntax error", "user.go")
        assert str(error) == "[user.go] syntax error"
        assert error.line is None

    def test_init_with_line(self):
        error = SourceParseError("syntax error", "user.go", line=3)
        assert str(error) == "[user.go] line 3: syntax error"
        assert error.line == 3


class TestTemplateCompileError:
    def test_init(self):
        error = TemplateCompileError("header", "line 1: unexpected end of template")
        assert str(error) == "Template 'header': line 1: unexpected end of template"
        assert error.template_name == "header"
        assert error.source_path is None


class TestTemplateRenderError:
    def test_init_no_model(self):
        error = TemplateRenderError("header", "'package' is undefined")
        assert str(error) == "Template 'header': 'package' is undefined"
        assert error.model_name is None

    def test_init_with_model(self):
        error = TemplateRenderError("content", "'missing' is undefined", "User")
        assert str(error) == "Template 'content': Model 'User': 'missing' is undefined"
        assert error.template_name == "content"
        assert error.model_name == "User"


class TestConfigError:
    def test_init_with_key_and_path(self):
        error = ConfigError("must not be empty", "tablegen.yaml", key="package_key")
        assert str(error) == "[tablegen.yaml] Key 'package_key': must not be empty"
        assert error.key == "package_key"

    def test_init_no_key(self):
        error = ConfigError("Config root must be a mapping", "tablegen.yaml")
        assert str(error) == "[tablegen.yaml] Config root must be a mapping"
        assert error.key is None
