import pytest

from vim_fm.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    sequence: KeySequence | None = None,
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("x"),
        action_id=action_id,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    binding = make_binding(binding_id="normal.x")

    registry.register_binding(binding)

    assert registry.get_binding("normal.x") is binding
    assert registry.lookup("normal", "x") == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    binding = make_binding(binding_id="normal.x")
    registry.register_binding(binding)

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.x.duplicate"))


def test_same_keys_in_different_modes_do_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="normal.x"))
    registry.register_binding(make_binding(binding_id="visual.x", mode="visual"))

    assert [b.id for b in registry.lookup("normal", "x")] == ["normal.x"]
    assert [b.id for b in registry.lookup("visual", "x")] == ["visual.x"]


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="normal.x"))


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert registry.get_binding("binding") is second
    assert registry.lookup("normal", "x") == [second]


def test_replace_evicts_binding_holding_the_keys() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="old"))

    fresh = registry.register_binding(make_binding(binding_id="new"), replace=True)

    assert registry.lookup("normal", "x") == [fresh]
    with pytest.raises(KeyError):
        registry.get_binding("old")


def test_keystroke_parses_modifiers() -> None:
    stroke = KeyStroke.parse("ctrl+r")

    assert stroke.key == "r"
    assert stroke.modifiers == ("ctrl",)
    assert stroke.token == "ctrl+r"
    assert KeyStroke.parse("+").token == "+"


def test_load_default_keymaps_registers_every_mode() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    for mode in ("insert", "visual", "visual_line", "visual_block", "command"):
        assert registry.lookup(mode, "ESC"), mode
    assert registry.lookup("normal", "-")
    redo = registry.get_binding("normal.edit.redo.ctrl+r")
    assert redo.sequence.tokens == ("ctrl+r",)


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("core.enter_insert",),
        include_bindings=("normal.core.enter_insert.i",),
    )

    assert registry.get_binding("normal.core.enter_insert.i").action_id == "core.enter_insert"
    assert registry.lookup("normal", "-") == []
    with pytest.raises(KeyError):
        registry.get_action("edit.undo")


def test_load_default_keymaps_exclude_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, exclude_bindings=("normal.navigation.parent.-",))

    assert registry.lookup("normal", "-") == []
    assert registry.lookup("normal", "ENTER")


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="normal.core.enter_insert.i",
        mode="normal",
        sequence=KeySequence.from_strings("a"),
        action_id="core.enter_insert",
    )

    load_default_keymaps(
        registry,
        per_mode_overrides={"normal": (custom_binding,)},
    )

    binding = registry.get_binding("normal.core.enter_insert.i")
    assert binding.sequence.tokens == ("a",)
    assert registry.lookup("normal", "a") == [binding]


def test_per_mode_override_must_match_mode() -> None:
    registry = KeymapRegistry()
    stray = Binding(
        id="insert.stray",
        mode="insert",
        sequence=KeySequence.from_strings("q"),
        action_id="core.enter_insert",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_mode_overrides={"normal": (stray,)})
