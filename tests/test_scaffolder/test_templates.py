"""Tests for the Jinja2 renderer (mern_stacker.scaffolder.templates)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from jinja2 import UndefinedError

from mern_stacker.scaffolder.templates import TemplateRenderer, slugify


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer(tmp_path: Path, tree_writer) -> TemplateRenderer:
    tree_writer(
        tmp_path / "tpl",
        {
            "skel/package.json.j2": '{"name": {{ name|json }}}\n',
            "skel/nested/readme.md.j2": "# {{ name }}\n",
            "skel/skip-me.txt.j2": "skipped",
            "skel/plain.txt": "not a template",
            "filters/list.txt.j2": "{{ v|json }} {{ n|slugify }}",
            "broken/missing.txt.j2": "{{ missing }}",
        },
    )
    return TemplateRenderer(tmp_path / "tpl")


class TestSlugify:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("My App", "my-app"),
            ("  spaced  ", "spaced"),
            ("Hello, World!", "hello-world"),
            ("already-slugged", "already-slugged"),
            ("***", ""),
        ],
    )
    def test_slugify(self, value, expected):
        assert slugify(value) == expected


class TestRender:
    def test_filters(self, renderer: TemplateRenderer):
        out = renderer.render("filters/list.txt.j2", {"v": ["a", "é"], "n": "A B"})
        assert out == '["a", "é"] a-b'

    def test_strict_undefined(self, renderer: TemplateRenderer):
        with pytest.raises(UndefinedError):
            renderer.render("broken/missing.txt.j2", {})

    def test_render_file_template(self, renderer: TemplateRenderer):
        out = renderer.render("skel/package.json.j2", {"name": 'a "quoted" name'})
        assert json.loads(out) == {"name": 'a "quoted" name'}


class TestRenderTree:
    async def test_renders_and_strips_suffix(self, renderer: TemplateRenderer, tmp_path: Path):
        out = tmp_path / "out"
        written = await renderer.render_tree(
            "skel", out, {"name": "demo"}, skip_patterns=["skip-me"]
        )

        assert sorted(p.relative_to(out).as_posix() for p in written) == [
            "nested/readme.md",
            "package.json",
        ]
        assert (out / "nested" / "readme.md").read_text() == "# demo\n"
        assert not (out / "plain.txt").exists()

    async def test_missing_prefix(self, renderer: TemplateRenderer, tmp_path: Path):
        assert await renderer.render_tree("nope", tmp_path, {}) == []

    def test_bundled_monorepo_templates(self):
        template_dir = TemplateRenderer().template_dir
        assert (template_dir / "monorepo" / "package.json.j2").is_file()
        assert (template_dir / "monorepo" / "packages" / "shared" / "src" / "index.ts.j2").is_file()
