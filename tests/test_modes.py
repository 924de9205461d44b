import unittest

import pytest

from lazybind import Container, Mode, injection_key


class Leaf: ...


class Middle:
    def __init__(self, leaf: Leaf):
        self.leaf = leaf


class Top:
    def __init__(self, middle: Middle, label: str):
        self.middle = middle
        self.label = label


class TestResolutionModes(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        self.cont.provide(Leaf)
        self.cont.provide(Middle, Leaf)
        self.cont.provide(Top, Middle, "top")

        self.created = []
        self.resolved = []
        self.cont.on_created.subscribe("created", lambda sender, args: self.created.append(args.identifier))
        self.cont.on_resolved.subscribe("resolved", lambda sender, args: self.resolved.append(args.identifier))

    def test_singleton_returns_same_instance(self):
        a = self.cont.resolve(Leaf)
        b = self.cont.resolve(Leaf, Mode.SINGLETON)

        assert a is b, "SINGLETON should return the cached instance"
        assert self.created == [Leaf]
        assert self.resolved == [Leaf, Leaf]

    def test_unique_returns_new_instance_with_shared_dependencies(self):
        singleton = self.cont.resolve(Middle)
        first = self.cont.resolve(Middle, Mode.UNIQUE)
        second = self.cont.resolve(Middle, Mode.UNIQUE)

        assert first is not singleton
        assert second is not first
        assert first.leaf is singleton.leaf
        assert second.leaf is singleton.leaf

    def test_unique_is_not_cached(self):
        unique = self.cont.resolve(Middle, Mode.UNIQUE)
        singleton = self.cont.resolve(Middle)

        assert singleton is not unique
        assert self.cont.resolve(Middle) is singleton

    def test_unique_only_renews_top_level(self):
        first = self.cont.resolve(Top, Mode.UNIQUE)
        second = self.cont.resolve(Top, Mode.UNIQUE)

        assert first is not second
        assert first.middle is second.middle
        assert first.middle.leaf is second.middle.leaf
        assert first.label == "top"

    def test_deep_unique_renews_every_level(self):
        singleton = self.cont.resolve(Top)
        first = self.cont.resolve(Top, Mode.DEEP_UNIQUE)
        second = self.cont.resolve(Top, Mode.DEEP_UNIQUE)

        assert first is not second
        assert first.middle is not second.middle
        assert first.middle.leaf is not second.middle.leaf
        assert first.middle is not singleton.middle
        assert first.middle.leaf is not singleton.middle.leaf
        assert self.cont.resolve(Top) is singleton

    def test_deep_unique_builds_every_level_each_time(self):
        self.cont.resolve(Top, Mode.DEEP_UNIQUE)
        self.cont.resolve(Top, Mode.DEEP_UNIQUE)

        assert self.created == [Leaf, Middle, Top] * 2

    def test_mode_accepts_string_values(self):
        singleton = self.cont.resolve(Middle, "singleton")

        assert self.cont.inject(Middle) is singleton
        assert self.cont.inject(Middle, "unique") is not singleton
        assert self.cont.inject(Middle, "unique").leaf is singleton.leaf
        assert self.cont.inject(Middle, "deep-unique").leaf is not singleton.leaf

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            self.cont.resolve(Leaf, "transient")


def test_alias_resolves_target_as_singleton_in_unique_mode():
    class Service:
        def __init__(self, leaf: Leaf):
            self.leaf = leaf

    c = Container()
    key = injection_key("service")
    c.provide(Leaf)
    c.provide(Service, Leaf)
    c.define(key, Service)

    cached = c.resolve(Service)
    unique = c.resolve(key, Mode.UNIQUE)
    deep = c.resolve(key, Mode.DEEP_UNIQUE)

    assert c.resolve(key) is cached
    assert unique is cached
    assert deep is not cached
    assert deep.leaf is not cached.leaf


def test_unique_alias_is_not_cached():
    c = Container()
    key = injection_key("leaf")
    c.provide(Leaf)
    c.define(key, Leaf)
    created = []
    c.on_created.subscribe("created", lambda sender, args: created.append(args.identifier))

    c.resolve(key, Mode.UNIQUE)
    c.resolve(Leaf, Mode.UNIQUE)

    assert created == [Leaf, key, Leaf]
    assert c.remove_singleton(key) is False
    assert c.remove_singleton(Leaf) is True


def test_readme_scenario():
    class A:
        def __init__(self, text: str, flag: bool, callback):
            self.text = text
            self.flag = flag
            self.callback = callback

    class DependsOnA:
        def __init__(self, a: A, items: list):
            self.a = a
            self.items = items

    c = Container()
    c.provide(A, "hello world", True, lambda: None)
    c.provide(DependsOnA, A, [1, 2, 3, 42])

    doa1 = c.inject(DependsOnA)
    doa2 = c.inject(DependsOnA, "singleton")
    doa3 = c.inject(DependsOnA, "unique")
    doa4 = c.inject(DependsOnA, "deep-unique")

    assert doa1 is doa2
    assert doa1 is not doa3
    assert doa1 is not doa4
    assert doa1.a is doa3.a
    assert doa1.a is not doa4.a
    assert doa4.items == [1, 2, 3, 42]
