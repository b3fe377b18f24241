import pytest

from tokenbind import (
    CircularDependencyError,
    Container,
    DependencyNotFoundError,
    InvalidConstructorError,
    create_token,
    get,
    singleton,
    transient,
)


@pytest.fixture
def tokens():
    return create_token("A"), create_token("B"), create_token("C")


def test_two_node_cycle_reports_full_chain(tokens):
    a, b, _ = tokens
    c = Container()
    built = []

    @singleton(b)
    class AImpl:
        def __init__(self, b):
            built.append(self)

    @singleton(a)
    class BImpl:
        def __init__(self, a):
            built.append(self)

    c.register(a, AImpl)
    c.register(b, BImpl)

    with pytest.raises(CircularDependencyError) as ctx:
        c.resolve(a)
    assert ctx.value.chain == (a, b, a)
    assert str(ctx.value) == "Circular dependency detected: A -> B -> A"

    with pytest.raises(CircularDependencyError) as ctx:
        c.resolve(b)
    assert ctx.value.chain == (b, a, b)

    # nothing was built, so nothing could be cached
    assert built == []


def test_self_dependency_is_a_cycle(tokens):
    a, _, _ = tokens
    c = Container()

    @transient(a)
    class AImpl:
        def __init__(self, a): ...

    c.register(a, AImpl)

    with pytest.raises(CircularDependencyError) as ctx:
        c.resolve(a)
    assert ctx.value.chain == (a, a)


def test_deep_cycle_is_detected(tokens):
    a, b, c_token = tokens
    c = Container()

    @transient(b)
    class AImpl:
        def __init__(self, b): ...

    @transient(c_token)
    class BImpl:
        def __init__(self, c): ...

    @transient(a)
    class CImpl:
        def __init__(self, a): ...

    c.register(a, AImpl)
    c.register(b, BImpl)
    c.register(c_token, CImpl)

    with pytest.raises(CircularDependencyError, match="A -> B -> C -> A"):
        c.resolve(a)


def test_cycle_through_ambient_lookups_is_detected(tokens):
    a, b, _ = tokens
    c = Container()

    @singleton()
    class AImpl:
        def __init__(self):
            self.b = get(b)

    @singleton()
    class BImpl:
        def __init__(self):
            self.a = get(a)

    c.register(a, AImpl)
    c.register(b, BImpl)

    with pytest.raises(CircularDependencyError) as ctx:
        c.resolve(a)
    assert ctx.value.chain == (a, b, a)


def test_diamond_is_not_a_cycle(tokens):
    a, b, c_token = tokens
    shared = create_token("Shared")
    c = Container()

    @singleton()
    class SharedImpl: ...

    @transient(shared)
    class BImpl:
        def __init__(self, s):
            self.s = s

    @transient(shared)
    class CImpl:
        def __init__(self, s):
            self.s = s

    @transient(b, c_token)
    class AImpl:
        def __init__(self, b, c):
            self.b = b
            self.c = c

    c.register(shared, SharedImpl)
    c.register(a, AImpl)
    c.register(b, BImpl)
    c.register(c_token, CImpl)

    obj = c.resolve(a)
    assert obj.b.s is obj.c.s


def test_missing_nested_dependency_reports_the_missing_token(tokens):
    a, b, _ = tokens
    c = Container()

    @transient(b)
    class AImpl:
        def __init__(self, b): ...

    c.register(a, AImpl)

    with pytest.raises(DependencyNotFoundError) as ctx:
        c.resolve(a)
    assert ctx.value.token is b
    assert "B" in str(ctx.value)
    assert "A" not in str(ctx.value)


def test_failed_resolution_does_not_poison_the_path(tokens):
    a, _, _ = tokens
    c = Container()
    attempts = []

    @singleton()
    class Flaky:
        def __init__(self):
            attempts.append(self)
            if len(attempts) == 1:
                raise RuntimeError("not ready")

    c.register(a, Flaky)

    with pytest.raises(InvalidConstructorError, match="not ready"):
        c.resolve(a)

    # a poisoned path would report A as circular here
    assert isinstance(c.resolve(a), Flaky)


def test_cycle_failure_leaves_container_usable(tokens):
    a, b, _ = tokens
    c = Container()

    @singleton(b)
    class AImpl:
        def __init__(self, b):
            self.b = b

    @singleton(a)
    class CyclicB:
        def __init__(self, a): ...

    @singleton()
    class PlainB: ...

    c.register(a, AImpl)
    c.register(b, CyclicB)
    with pytest.raises(CircularDependencyError):
        c.resolve(a)

    c.register(b, PlainB)
    obj = c.resolve(a)
    assert isinstance(obj.b, PlainB)
