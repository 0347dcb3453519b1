"""Unit tests for garden.registry (module table + binding resolution)."""

import pytest

from garden.effects import Mode, NoteOpened
from garden.errors import ConflictingBinding, DuplicateModule, RegistryFrozen
from garden.registry import ANY_KEY, Module, ModuleRegistry


def _handler(tag: str):
    def handler(view, key):
        return [NoteOpened(f"{tag}:{key}")]

    return handler


# ---------------------------------------------------------------------------
# Module
# ---------------------------------------------------------------------------


class TestModule:
    def test_modes_derived_from_bindings(self):
        module = Module("m", {(Mode.NORMAL, "a"): _handler("a"), (Mode.SEARCH, "b"): _handler("b")})
        assert module.modes == {Mode.NORMAL, Mode.SEARCH}

    def test_bindings_are_read_only(self):
        module = Module("m", {(Mode.NORMAL, "a"): _handler("a")})
        with pytest.raises(TypeError):
            module.bindings[(Mode.NORMAL, "b")] = _handler("b")


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegister:
    def test_construction_registers_all(self):
        registry = ModuleRegistry([
            Module("one", {(Mode.NORMAL, "a"): _handler("one")}),
            Module("two", {(Mode.NORMAL, "b"): _handler("two")}),
        ])
        assert registry.names() == ["one", "two"]
        assert len(registry) == 2
        assert "one" in registry

    def test_duplicate_name_rejected_at_construction(self):
        first = Module("search", {(Mode.NORMAL, "a"): _handler("first")})
        second = Module("search", {(Mode.NORMAL, "b"): _handler("second")})
        with pytest.raises(DuplicateModule):
            ModuleRegistry([first, second])

    def test_same_module_twice_rejected(self):
        module = Module("search", {(Mode.NORMAL, "/"): _handler("s")})
        registry = ModuleRegistry([module])
        with pytest.raises(DuplicateModule):
            registry.register(module)
        assert len(registry) == 1

    def test_rejected_duplicate_contributes_no_bindings(self):
        registry = ModuleRegistry([Module("m", {(Mode.NORMAL, "a"): _handler("m")})])
        with pytest.raises(DuplicateModule):
            registry.register(Module("m", {(Mode.NORMAL, "z"): _handler("dup")}))
        assert registry.resolve(Mode.NORMAL, "z") is None

    def test_conflicting_key_in_same_mode(self):
        registry = ModuleRegistry([Module("one", {(Mode.NORMAL, "j"): _handler("one")})])
        with pytest.raises(ConflictingBinding) as info:
            registry.register(Module("two", {(Mode.NORMAL, "x"): _handler("two"), (Mode.NORMAL, "j"): _handler("two")}))
        assert info.value.owner == "one"
        assert info.value.key == "j"
        assert "two" not in registry
        assert registry.resolve(Mode.NORMAL, "x") is None

    def test_same_key_in_other_mode_is_fine(self):
        registry = ModuleRegistry([
            Module("one", {(Mode.NORMAL, "j"): _handler("one")}),
            Module("two", {(Mode.SEARCH, "j"): _handler("two")}),
        ])
        assert registry.resolve(Mode.SEARCH, "j")(None, "j") == [NoteOpened("two:j")]

    def test_wildcards_conflict(self):
        with pytest.raises(ConflictingBinding):
            ModuleRegistry([
                Module("one", {(Mode.SEARCH, ANY_KEY): _handler("one")}),
                Module("two", {(Mode.SEARCH, ANY_KEY): _handler("two")}),
            ])

    def test_register_after_freeze_fails(self):
        registry = ModuleRegistry()
        registry.freeze()
        with pytest.raises(RegistryFrozen):
            registry.register(Module("late", {}))
        assert registry.frozen


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestResolve:
    @pytest.fixture()
    def registry(self) -> ModuleRegistry:
        return ModuleRegistry([
            Module("nav", {(Mode.NORMAL, "j"): _handler("nav")}),
            Module("text", {(Mode.SEARCH, "esc"): _handler("esc"), (Mode.SEARCH, ANY_KEY): _handler("any")}),
        ])

    def test_exact_binding(self, registry: ModuleRegistry):
        assert registry.resolve(Mode.NORMAL, "j")(None, "j") == [NoteOpened("nav:j")]

    def test_exact_beats_wildcard(self, registry: ModuleRegistry):
        assert registry.resolve(Mode.SEARCH, "esc")(None, "esc") == [NoteOpened("esc:esc")]

    def test_wildcard_fallback(self, registry: ModuleRegistry):
        assert registry.resolve(Mode.SEARCH, "q")(None, "q") == [NoteOpened("any:q")]

    def test_unbound_is_none(self, registry: ModuleRegistry):
        assert registry.resolve(Mode.NORMAL, "q") is None

    def test_clear(self, registry: ModuleRegistry):
        registry.clear()
        assert len(registry) == 0
        assert registry.resolve(Mode.NORMAL, "j") is None
