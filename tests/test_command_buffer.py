import pytest

from vim_fm.modes import BufferStatus, CommandBuffer, OperatorPipeline


def feed(buffer: CommandBuffer, keys: str) -> list[BufferStatus]:
    return [buffer.push(key) for key in keys]


def test_dd_completes_and_take_empties_buffer() -> None:
    buffer = CommandBuffer()

    statuses = feed(buffer, "dd")

    assert statuses == [BufferStatus.PENDING, BufferStatus.COMPLETE]
    assert buffer.take() == "dd"
    assert buffer.is_empty


def test_three_non_matching_keys_are_discarded() -> None:
    buffer = CommandBuffer()

    statuses = feed(buffer, "dxz")

    assert statuses[-1] is BufferStatus.DISCARDED
    assert buffer.is_empty


@pytest.mark.parametrize(
    "candidate",
    ["dd", "cc", "yy", "gg", "cw", "dw", "diw", "yiw", "ci(", "da\"", "dfx", "fa", "3j", "2dd", "d$", "dgg"],
)
def test_grammar_accepts(candidate: str) -> None:
    assert CommandBuffer.valid(candidate)


@pytest.mark.parametrize("candidate", ["dx", "gx", "diq", "0j", "abcd"])
def test_grammar_rejects(candidate: str) -> None:
    assert not CommandBuffer.valid(candidate)


def test_single_key_is_always_potentially_valid() -> None:
    assert CommandBuffer.valid("q")


def test_initializers() -> None:
    assert CommandBuffer.is_initializer("d")
    assert CommandBuffer.is_initializer("g")
    assert CommandBuffer.is_initializer("5")
    assert not CommandBuffer.is_initializer("0")
    assert not CommandBuffer.is_initializer("x")


def test_operator_pipeline_splits_parts() -> None:
    pipeline = OperatorPipeline()

    plan = pipeline.parse("2dd")
    assert plan is not None
    assert (plan.count, plan.operator, plan.motion) == (2, "d", "line")
    assert plan.linewise

    plan = pipeline.parse("ciw")
    assert plan is not None
    assert (plan.operator, plan.motion, plan.argument) == ("c", "i", "w")
    assert not plan.linewise

    plan = pipeline.parse("ft")
    assert plan is not None
    assert (plan.operator, plan.motion, plan.argument) == (None, "f", "t")
