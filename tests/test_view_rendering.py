"""Unit tests for Jinja2 view resolution and rendering using unittest."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from optionpages.exceptions import ViewNotFoundError
from optionpages.views import VIEW_PATH_ENV, ViewRenderer, view_paths_from_env


class ViewRenderingTests(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tempdir.name)
        (self.root / "primary").mkdir()
        (self.root / "fallback").mkdir()
        self.renderer = ViewRenderer([self.root / "primary", self.root / "fallback"])

    def tearDown(self):
        self.tempdir.cleanup()

    def test_first_search_path_wins(self):
        (self.root / "primary" / "page.html").write_text("primary")
        (self.root / "fallback" / "page.html").write_text("fallback")

        self.assertEqual(self.renderer.render("page.html"), "primary")

    def test_falls_back_to_later_search_path(self):
        (self.root / "fallback" / "page.html").write_text("fallback")

        self.assertEqual(self.renderer.resolve("page.html"), (self.root / "fallback" / "page.html").resolve())

    def test_absolute_path_outside_search_paths(self):
        outside = self.root / "outside.html"
        outside.write_text("Hello {{ name }}")

        self.assertEqual(self.renderer.render(str(outside), {"name": "admin"}), "Hello admin")

    def test_includes_resolve_within_search_path(self):
        (self.root / "primary" / "partials").mkdir()
        (self.root / "primary" / "partials" / "row.html").write_text("<tr>{{ label }}</tr>")
        (self.root / "primary" / "table.html").write_text('<table>{% include "partials/row.html" %}</table>')

        self.assertEqual(self.renderer.render("table.html", {"label": "Key"}), "<table><tr>Key</tr></table>")

    def test_directory_is_not_a_view(self):
        with self.assertRaises(ViewNotFoundError) as ctx:
            self.renderer.resolve("fallback", kind="section")
        self.assertEqual(ctx.exception.details, {"view": "fallback", "kind": "section"})

    def test_missing_view(self):
        self.assertFalse(self.renderer.exists("nowhere.html"))
        with self.assertRaises(ViewNotFoundError) as ctx:
            self.renderer.render("nowhere.html", kind="field")
        self.assertEqual(str(ctx.exception), "Invalid settings field view: nowhere.html")

    def test_search_paths_from_environment(self):
        value = os.pathsep.join([str(self.root / "primary"), "", str(self.root / "fallback")])
        with patch.dict(os.environ, {VIEW_PATH_ENV: value}):
            self.assertEqual(view_paths_from_env(), [str(self.root / "primary"), str(self.root / "fallback")])
            renderer = ViewRenderer()

        self.assertEqual(renderer.search_paths, [self.root / "primary", self.root / "fallback"])

    def test_no_environment_means_no_search_paths(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(ViewRenderer().search_paths, [])


if __name__ == "__main__":
    unittest.main()
