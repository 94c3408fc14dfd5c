import pytest

from nrcli.tags import (
    TagFormatError,
    TagInput,
    TagValue,
    assemble_tag_value,
    assemble_tag_values,
    assemble_tags_input,
    map_entities,
)

TAGS_MESSAGE = "tags must be specified as colon separated key:value pairs"
VALUES_MESSAGE = "tag values must be specified as colon separated key:value pairs"


def _sort_inputs(items):
    return sorted(items, key=lambda item: (item.key, item.values))


def test_assemble_tags_input_rejects_missing_colon():
    with pytest.raises(TagFormatError) as info:
        assemble_tags_input(["one"])
    assert str(info.value) == TAGS_MESSAGE


def test_assemble_tags_input_groups_by_key():
    result = assemble_tags_input(["tag1:value1", "tag1:value2", "tag2:value1"])
    expected = [
        TagInput(key="tag1", values=["value1", "value2"]),
        TagInput(key="tag2", values=["value1"]),
    ]
    assert _sort_inputs(result) == _sort_inputs(expected)


def test_assemble_tags_input_keeps_colons_in_value():
    result = assemble_tags_input(["url:http://example.com"])
    assert result == [TagInput(key="url", values=["http://example.com"])]


def test_assemble_tags_input_empty():
    assert assemble_tags_input([]) == []


@pytest.mark.parametrize("tags", [["one"], ["incomplete:"]])
def test_assemble_tag_values_errors(tags):
    with pytest.raises(TagFormatError) as info:
        assemble_tag_values(tags)
    assert str(info.value) == VALUES_MESSAGE


def test_assemble_tag_values_valid():
    result = assemble_tag_values(["tag1:value1", "tag1:value2", "tag2:value1"])
    assert sorted(result, key=lambda t: (t.key, t.value)) == [
        TagValue(key="tag1", value="value1"),
        TagValue(key="tag1", value="value2"),
        TagValue(key="tag2", value="value1"),
    ]


@pytest.mark.parametrize("text", ["invalidTag", "incompleteTag:"])
def test_assemble_tag_value_errors(text):
    with pytest.raises(TagFormatError) as info:
        assemble_tag_value(text)
    assert str(info.value) == VALUES_MESSAGE


def test_assemble_tag_value_valid():
    assert assemble_tag_value("validKey:validValue") == ("validKey", "validValue")


def test_map_entities_applies_callback_to_each():
    entities = [
        {"name": "a", "guid": "g1", "type": "APPLICATION"},
        {"name": "b", "guid": "g2", "type": "HOST"},
    ]

    def pick(entity, fields):
        return {name: entity[name] for name in fields}

    result = map_entities(entities, ["name", "guid"], pick)
    assert result == [{"name": "a", "guid": "g1"}, {"name": "b", "guid": "g2"}]


def test_map_entities_empty():
    assert map_entities([], ["name"], lambda e, f: {}) == []