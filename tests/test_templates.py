"""Tests for the Jinja2 template engine wrapper."""

import pytest

from dbml_codegen.codegen.core.templates import (
    TemplateError,
    create_template_engine,
)


@pytest.fixture
def template_dir(tmp_path):
    (tmp_path / "greeting.j2").write_text("Hello {{ who }}\n", encoding="utf-8")
    (tmp_path / "loop.j2").write_text(
        "{% for x in items %}\n\t{{ x }};\n{% endfor %}\n", encoding="utf-8"
    )
    return tmp_path


class TestTemplateEngine:
    def test_render_from_directory(self, template_dir):
        engine = create_template_engine(template_dir)
        assert engine.render_template("greeting.j2", {"who": "EF"}) == "Hello EF\n"

    def test_block_whitespace_trimmed(self, template_dir):
        engine = create_template_engine(template_dir)
        text = engine.render_template("loop.j2", {"items": ["a", "b"]})
        assert text == "\ta;\n\tb;\n"

    def test_undefined_variable(self, template_dir):
        engine = create_template_engine(template_dir)
        with pytest.raises(TemplateError):
            engine.render_template("greeting.j2", {})

    def test_missing_template(self, template_dir):
        engine = create_template_engine(template_dir)
        with pytest.raises(TemplateError, match="nope.j2"):
            engine.render_template("nope.j2", {})

    def test_no_template_directory(self, tmp_path):
        engine = create_template_engine(tmp_path / "absent")
        with pytest.raises(TemplateError):
            engine.render_template("greeting.j2", {"who": "EF"})
