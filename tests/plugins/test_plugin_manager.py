"""Tests for PluginManager — discovery, registration, and application."""

from __future__ import annotations

from pathlib import Path

import pluggy
import pytest

from entityserde.domain.results import PropertySerializationResult
from entityserde.plugins.manager import PluginManager
from entityserde.serializer.converters import PropertyConverter
from tests.conftest import StaticInjector

hookimpl = pluggy.HookimplMarker("entityserde")


class _Tag(PropertyConverter):
    def __init__(self, tag: str) -> None:
        self.tag = tag

    def should_convert(self, entity, prop):
        return prop.name == "name"

    def serialize(self, entity, value, prop, settings):
        return PropertySerializationResult(prop.name, self.tag)


class _FullPlugin:
    @hookimpl
    def register_property_converters(self):
        return [_Tag("full")]

    @hookimpl
    def register_property_injectors(self):
        return [("Person", StaticInjector(("$src", "plugin")))]

    @hookimpl
    def register_property_aliases(self):
        return [("Person", "boss", "manager")]

    @hookimpl
    def register_value_resolvers(self):
        return [lambda entity, prop, value: "resolved"]


class _LaterPlugin:
    @hookimpl
    def register_property_converters(self):
        return [_Tag("later")]


class _BrokenPlugin:
    @hookimpl
    def register_property_converters(self):
        raise RuntimeError("boom")

    @hookimpl
    def register_property_aliases(self):
        return [("Person", "only-two")]

    @hookimpl
    def register_value_resolvers(self):
        return ["not callable"]


class _WrongShapePlugin:
    @hookimpl
    def register_property_injectors(self):
        return "nope"


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "register_property_converters")

    @pytest.mark.parametrize(
        "hook_name",
        [
            "register_property_converters",
            "register_property_injectors",
            "register_property_aliases",
            "register_value_resolvers",
        ],
    )
    def test_all_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_FullPlugin(), name="full")
        assert "full" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_FullPlugin())
        assert "_FullPlugin" in pm.list_plugin_names()

    def test_is_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True


class TestApply:
    def test_all_contributions_registered(self, serializer, people) -> None:
        pm = PluginManager()
        pm.register_plugin(_FullPlugin(), name="full")
        pm.apply(serializer)

        out = serializer.serialize(people.Person(state={"name": "Ann"}))
        assert list(out)[0] == "$src"
        assert out["name"] == "full"
        assert serializer.get_property_aliases(people.Person.meta)["manager"] == "boss"
        prop = people.Person.meta.get_property("name")
        assert serializer.resolve_value(people.Person(), prop, None) == "resolved"

    def test_later_plugin_takes_precedence(self, serializer, people) -> None:
        pm = PluginManager()
        pm.register_plugin(_FullPlugin(), name="full")
        pm.register_plugin(_LaterPlugin(), name="later")
        pm.apply(serializer)
        assert serializer.serialize(people.Person())["name"] == "later"

    def test_broken_plugin_warns_and_skips(
        self, serializer, people, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        pm.register_plugin(_LaterPlugin(), name="later")
        with caplog.at_level("WARNING"):
            pm.apply(serializer)
        assert "Failed to collect register_property_converters" in caplog.text
        assert "Skipping malformed alias" in caplog.text
        assert "Skipping non-callable resolver" in caplog.text
        assert serializer.serialize(people.Person())["name"] == "later"

    def test_non_list_result_warns(self, serializer, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_WrongShapePlugin(), name="wrong")
        with caplog.at_level("WARNING"):
            pm.apply(serializer)
        assert "expected a list" in caplog.text


class TestLocalDiscovery:
    def test_loads_single_file_plugins(self, tmp_path: Path, serializer, people) -> None:
        (tmp_path / "shout.py").write_text(
            "import pluggy\n"
            "from entityserde.domain.results import PropertySerializationResult\n"
            "from entityserde.serializer.converters import PropertyConverter\n"
            "\n"
            "hookimpl = pluggy.HookimplMarker('entityserde')\n"
            "\n"
            "class Shout(PropertyConverter):\n"
            "    def serialize(self, entity, value, prop, settings):\n"
            "        res = super().serialize(entity, value, prop, settings)\n"
            "        return PropertySerializationResult(res.key.upper(), res.value)\n"
            "\n"
            "class ShoutPlugin:\n"
            "    @hookimpl\n"
            "    def register_property_converters(self):\n"
            "        return [Shout()]\n",
            encoding="utf-8",
        )
        (tmp_path / "_private.py").write_text("raise RuntimeError('never loaded')\n")

        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)
        assert "entityserde_local_plugin_shout.ShoutPlugin" in names

        pm.apply(serializer)
        assert list(serializer.serialize(people.Person())) == ["NAME", "MANAGER", "REPORTS"]

    def test_broken_file_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        (tmp_path / "broken.py").write_text("this is not python\n")
        pm = PluginManager()
        with caplog.at_level("WARNING"):
            pm.discover_and_load(local_dir=tmp_path)
        assert "Failed to load local plugin" in caplog.text

    def test_missing_dir_ignored(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path / "absent")
        assert pm.is_loaded
