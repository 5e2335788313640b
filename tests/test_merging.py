"""Test cases for PropConf priority merging."""

from propconf import MergedProperty, PropertyValue, merge


def test_lowest_priority_number_wins():
    """Test that the numerically lowest priority wins regardless of order.

    Given three sources defining the same key with different priorities
    When merging them
    Then the value of the lowest priority number is kept
    """
    merged = merge(
        [
            (10, {"key": "ten"}),
            (1, {"key": "one"}),
            (5, {"key": "five"}),
        ]
    )

    assert merged["key"].raw_value == "one"
    assert merged["key"].priority == 1


def test_equal_priority_last_registered_wins():
    """Test the tie-break between sources sharing the lowest priority.

    Given three sources where two share the lowest priority
    When merging them
    Then the later registered of the two wins
    """
    merged = merge(
        [
            (0, {"key": "first"}),
            (0, {"key": "second"}),
            (100, {"key": "third"}),
        ]
    )

    assert merged["key"] == MergedProperty("key", "second", 0)


def test_negative_priorities_and_empty_sources():
    """Test signed priorities and empty sources.

    Given a negative priority source, an empty source and a default source
    When merging them
    Then the negative priority wins and keys from every source are kept
    """
    merged = merge(
        [
            (10000, {"a": "default", "b": "only-default"}),
            (-5, {"a": "negative"}),
            (0, {}),
        ]
    )

    assert merged["a"].raw_value == "negative"
    assert merged["b"].raw_value == "only-default"
    assert list(merged) == ["a", "b"]


def test_case_insensitive_keys_collide():
    """Test that keys differing only by case collide when case-insensitive.

    Given `Key.One` and `key.one` in sources with equal priority
    When merging case-insensitively
    Then one lower-cased key remains holding the later value
    """
    sources = [
        (100, {"Key.One": "upper"}),
        (100, {"key.one": "lower"}),
    ]

    merged = merge(sources, case_sensitive=False)
    assert list(merged) == ["key.one"]
    assert merged["key.one"].raw_value == "lower"

    merged = merge(sources, case_sensitive=True)
    assert set(merged) == {"Key.One", "key.one"}


def test_case_insensitive_keys_follow_priority():
    """Test that colliding keys still obey priority.

    Given `KEY` registered last but with a worse priority than `key`
    When merging case-insensitively
    Then the better priority value wins
    """
    merged = merge([(1, {"key": "best"}), (2, {"KEY": "worse"})], case_sensitive=False)

    assert merged["key"].raw_value == "best"


def test_resolvable_flag_is_carried():
    """Test that the resolvable flag of a value survives merging."""
    merged = merge([(0, {"literal": PropertyValue("${x}", resolvable=False), "plain": "v"})])

    assert merged["literal"].resolvable is False
    assert merged["plain"].resolvable is True
