from __future__ import annotations

from vim_fm.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    load_default_keymaps,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: tuple[str, ...] = ("x",),
    action_id: str = "core.test",
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_key() -> None:
    binding = make_binding("normal.x")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("x",))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.match.action.id == "core.test"
    assert result.consumed == 1


def test_resolver_misses_other_modes() -> None:
    registry = build_registry([make_binding("normal.x")])
    resolver = KeymapResolver(registry)

    result = resolver.resolve("insert", ("x",))

    assert result.status == "miss"
    assert result.match is None


def test_replacing_binding_takes_over_the_key() -> None:
    low = make_binding("normal.x.low", action_id="core.low")
    registry = build_registry([low])
    registry.register_action(make_action("core.high"))
    high = make_binding("normal.x.high", action_id="core.high", priority=5)
    registry.register_binding(high, replace=True)
    resolver = KeymapResolver(registry)

    result = resolver.resolve("normal", ("x",))

    assert result.match is not None
    assert result.match.binding.id == "normal.x.high"
    assert registry.lookup("normal", "x") == [high]


def test_resolver_sees_bindings_added_later() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("normal", ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("normal.x", action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve("normal", ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id


def test_default_motion_bindings_carry_motion_metadata() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)

    result = resolver.resolve("visual_line", ("j",))

    assert result.match is not None
    assert result.match.action.id == "motion.down"
    assert result.match.action.metadata["motion"] == "j"
