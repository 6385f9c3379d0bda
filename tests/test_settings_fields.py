"""Tests for option group, section and field registration."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import ANY, MagicMock, call

from optionpages.exceptions import ViewNotFoundError
from optionpages.registry import PageHookRegistry
from optionpages.settings import Settings
from optionpages.types import FieldRenderRequest, FieldSpec, SectionContext
from optionpages.views import ViewRenderer


def sanitize_options(value):
    return {key: str(item).strip() for key, item in value.items()}


class TestSettingsRegistration(unittest.TestCase):
    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.view_dir = Path(self.tempdir.name)
        self.host = MagicMock()
        self.host.is_page_slug_registered.return_value = False
        self.host.get_stored_options.return_value = {"api_key": "abc123"}
        self.renderer = ViewRenderer([self.view_dir])

    def tearDown(self):
        self.tempdir.cleanup()

    def _settings(self, settings_config):
        return Settings(
            {"settings": settings_config},
            self.host,
            page_registry=PageHookRegistry(),
            renderer=self.renderer,
        )

    def _field_callback(self, index=0):
        return self.host.register_field.call_args_list[index].args[2]

    def _section_callback(self, index=0):
        return self.host.register_section.call_args_list[index].args[2]

    def test_single_field_registration_order(self):
        settings = self._settings({"grp": {"sections": {"sec1": {"fields": {"f1": {"title": "F1"}}}}}})
        settings.init_settings()

        self.assertEqual(
            self.host.mock_calls,
            [
                call.register_option_group("grp", "grp", None),
                call.register_section("sec1", "", ANY, "grp"),
                call.register_field("f1", "F1", ANY, "grp", "sec1"),
            ],
        )

    def test_sections_follow_declaration_order(self):
        sections = {name: {"title": name.upper()} for name in ("zeta", "alpha", "mid", "beta")}
        settings = self._settings({"grp": {"sections": sections}})
        settings.init_settings()

        registered = [c.args[0] for c in self.host.register_section.call_args_list]
        self.assertEqual(registered, ["zeta", "alpha", "mid", "beta"])

    def test_fields_follow_their_sections(self):
        settings = self._settings(
            {
                "first": {"sections": {"a": {"fields": {"a1": {}, "a2": {}}}, "b": {"fields": {"b1": {}}}}},
                "second": {"sections": {"c": {"fields": {"c1": {}}}}},
            }
        )
        settings.init_settings()

        names = [(name, c_args[0]) for name, c_args, _ in self.host.mock_calls]
        self.assertEqual(
            names,
            [
                ("register_option_group", "first"),
                ("register_section", "a"),
                ("register_field", "a1"),
                ("register_field", "a2"),
                ("register_section", "b"),
                ("register_field", "b1"),
                ("register_option_group", "second"),
                ("register_section", "c"),
                ("register_field", "c1"),
            ],
        )

    def test_sanitize_callback_passed_through(self):
        settings = self._settings({"grp": {"sanitize_callback": sanitize_options}})
        settings.init_settings()

        self.host.register_option_group.assert_called_once_with("grp", "grp", sanitize_options)
        self.host.register_section.assert_not_called()

    def test_no_settings_key_is_a_noop(self):
        settings = Settings({}, self.host, page_registry=PageHookRegistry(), renderer=self.renderer)
        settings.init_settings()

        self.assertEqual(self.host.mock_calls, [])

    def test_section_without_view_renders_nothing(self):
        settings = self._settings({"grp": {"sections": {"sec1": {"title": "Section"}}}})
        settings.init_settings()

        self.assertEqual(self._section_callback()(), "")

    def test_section_view_renders(self):
        (self.view_dir / "section.html").write_text("<p>{{ section.title }} on {{ page }}</p>")
        settings = self._settings({"grp": {"sections": {"sec1": {"title": "General", "view": "section.html"}}}})
        settings.init_settings()

        self.assertEqual(self._section_callback()(), "<p>General on grp</p>")

    def test_section_missing_view_raises(self):
        settings = self._settings({"grp": {"sections": {"sec1": {"view": "gone.html"}}}})
        settings.init_settings()

        with self.assertRaises(ViewNotFoundError) as ctx:
            self._section_callback()()
        self.assertEqual(ctx.exception.kind, "section")

    def test_field_without_view_only_fetches_options(self):
        settings = self._settings({"grp": {"sections": {"sec1": {"fields": {"f1": {"title": "F1"}}}}}})
        settings.init_settings()
        callback = self._field_callback()
        self.host.reset_mock()

        self.assertEqual(callback(), "")
        self.assertEqual(self.host.mock_calls, [call.get_stored_options("grp")])

    def test_field_view_receives_current_options(self):
        (self.view_dir / "field.html").write_text('<input name="{{ setting_name }}[{{ field_name }}]" value="{{ options.api_key }}">')
        settings = self._settings({"grp": {"sections": {"sec1": {"fields": {"api_key": {"view": "field.html"}}}}}})
        settings.init_settings()
        callback = self._field_callback()

        self.assertEqual(callback(), '<input name="grp[api_key]" value="abc123">')

        self.host.get_stored_options.return_value = {"api_key": "rotated"}
        self.assertEqual(callback(), '<input name="grp[api_key]" value="rotated">')
        self.assertEqual(self.host.get_stored_options.call_count, 2)

    def test_field_missing_view_raises_before_fetching_options(self):
        settings = self._settings({"grp": {"sections": {"sec1": {"fields": {"f1": {"view": "missing.tpl"}}}}}})
        settings.init_settings()

        with self.assertRaises(ViewNotFoundError) as ctx:
            self._field_callback()()
        self.assertEqual(ctx.exception.kind, "field")
        self.assertEqual(ctx.exception.view, "missing.tpl")
        self.host.get_stored_options.assert_not_called()

    def test_render_field_returns_result_instead_of_raising(self):
        settings = self._settings({})
        request = FieldRenderRequest("f1", FieldSpec(view="missing.tpl"), "grp", "grp", "sec1")

        result = settings.render_field(request)

        self.assertFalse(result.ok)
        self.assertEqual(result.output, "")
        self.assertEqual(result.error.to_dict()["error"], "view_not_found")
        self.host.get_stored_options.assert_not_called()

    def test_field_view_output_is_escaped(self):
        (self.view_dir / "field.html").write_text("{{ options.api_key }}")
        self.host.get_stored_options.return_value = {"api_key": "<script>"}
        settings = self._settings({"grp": {"sections": {"sec1": {"fields": {"api_key": {"view": "field.html"}}}}}})
        settings.init_settings()

        self.assertEqual(self._field_callback()(), "&lt;script&gt;")

    def test_add_field_uses_supplied_context(self):
        settings = self._settings({})
        context = SectionContext(setting_name="store", page="store_page", section="general")

        settings.add_field(FieldSpec(title="Color"), "color", context)

        self.host.register_field.assert_called_once_with("color", "Color", ANY, "store_page", "general")
        self._field_callback()()
        self.host.get_stored_options.assert_called_once_with("store")


if __name__ == "__main__":
    unittest.main()
