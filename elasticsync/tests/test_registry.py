import pytest

from ..core.exceptions import ConfigurationError
from ..models.field_spec import FieldMode, FieldRule
from ..models.search import SearchHit

def test_register_uses_defaults(registry):
    descriptor = registry.register("Place", {"name": "copy", "loc": "geojson"})

    assert descriptor.index == "test-index"
    assert descriptor.collection == "Place"
    assert descriptor.id_field == "_id"
    assert [(r.path, r.mode) for r in descriptor.fields] == [
        ("name", FieldMode.COPY),
        ("loc", FieldMode.GEOPOINT),
    ]
    assert "Place" in registry
    assert len(registry) == 1

def test_register_with_overrides(registry):
    descriptor = registry.register("User", {"name": "copy"}, index="users", collection="users", id_field="uid")

    assert descriptor.index == "users"
    assert descriptor.collection == "users"
    assert descriptor.id_field == "uid"
    assert registry.indexes() == ["users"]

def test_duplicate_registration_is_rejected(registry):
    registry.register("Place", {"name": "copy"})
    with pytest.raises(ConfigurationError):
        registry.register("Place", {"title": "copy"})

@pytest.mark.parametrize("directive", ["custom", "unknown", 42, None, False])
def test_unknown_directives_are_rejected(registry, directive):
    with pytest.raises(ConfigurationError):
        registry.register("Place", {"name": directive})

def test_field_rule_validation():
    with pytest.raises(ConfigurationError):
        FieldRule(path="name", mode=FieldMode.CUSTOM)
    with pytest.raises(ConfigurationError):
        FieldRule(path="name", mode=FieldMode.COPY, transform=lambda r, d: None)
    with pytest.raises(ConfigurationError):
        FieldRule(path="", mode=FieldMode.COPY)

def test_require_unknown_type(registry):
    with pytest.raises(ConfigurationError):
        registry.require("Ghost")
    assert registry.get("Ghost") is None

def test_mapping_properties_for_geopoint(registry):
    place = registry.register("Place", {"loc": "geojson"})
    user = registry.register("User", {"name": "copy"})

    assert place.mapping_properties() == {"location": {"type": "geo_point"}}
    assert user.mapping_properties() == {}

def test_descriptor_for_hit_falls_back_to_single_type_index(registry):
    registry.register("Place", {"name": "copy"}, index="places")
    registry.register("User", {"name": "copy"})
    registry.register("Event", {"name": "copy"})

    assert registry.descriptor_for_hit(SearchHit(index="places", id="1")).type_name == "Place"
    assert registry.descriptor_for_hit(SearchHit(index="test-index", type_name="User", id="2")).type_name == "User"
    # İki tipin paylaştığı index'te tip bilgisi olmadan çözülemez
    assert registry.descriptor_for_hit(SearchHit(index="test-index", id="3")) is None

def test_descriptor_for_hit_rejects_unregistered_type(registry):
    registry.register("Place", {"name": "copy"})

    assert registry.descriptor_for_hit(SearchHit(index="test-index", type_name="Ghost", id="1")) is None
    assert registry.descriptor_for_hit(SearchHit(index="test-index", id="1")).type_name == "Place"
