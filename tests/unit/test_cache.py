import gc

from phrasal._internal.cache import IdentityCache


class Key:
    pass


class PartsList(list):
    pass


def test_get_returns_value_for_same_object():
    cache = IdentityCache()
    key = Key()
    cache.set(key, "value")

    assert cache.get(key) == "value"
    assert cache.get(Key()) is None


def test_lookup_is_by_identity_not_equality():
    cache = IdentityCache()
    parts = ["to be even"]
    cache.set(parts, "compiled")

    assert cache.get(["to be even"]) is None
    assert cache.get(parts) == "compiled"


def test_weakly_referenceable_keys_are_evicted():
    cache = IdentityCache()
    key = PartsList(["to be even"])
    cache.set(key, "compiled")
    assert len(cache) == 1

    del key
    gc.collect()

    assert len(cache) == 0


def test_plain_lists_are_pinned():
    cache = IdentityCache()
    cache.set(["to be even"], "compiled")
    gc.collect()

    assert len(cache) == 1
