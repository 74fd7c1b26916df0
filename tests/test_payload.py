from gmaps_enricher.core.payload import FieldType, get_nth


def test_get_nth_reads_nested_string():
    data = [None, ["a", ["b", "c"]]]
    assert get_nth(data, (1, 1, 1)) == "c"
    assert get_nth(data, (1, 0)) == "a"


def test_get_nth_misses_yield_zero_values():
    data = [None, ["a", 5]]
    assert get_nth(data, (7,)) == ""
    assert get_nth(data, (0, 1)) == ""
    assert get_nth(data, (1, 0, 0)) == ""
    assert get_nth(data, (1, 1)) == ""
    assert get_nth(data, (1, -1)) == ""
    assert get_nth(data, ()) == ""
    assert get_nth(data, (5,), FieldType.STRING_LIST) == []


def test_get_nth_string_list_requires_all_strings():
    data = [["a@x.com", "b@x.com"], ["a@x.com", 3]]
    assert get_nth(data, (0,), FieldType.STRING_LIST) == ["a@x.com", "b@x.com"]
    assert get_nth(data, (1,), FieldType.STRING_LIST) == []


def test_get_nth_string_list_returns_a_copy():
    inner = ["a@x.com"]
    result = get_nth([inner], (0,), FieldType.STRING_LIST)
    result.append("b@x.com")
    assert inner == ["a@x.com"]
