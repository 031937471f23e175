import pytest

from project_tracker.domain.builders import PersonBuilder, TagBuilder
from project_tracker.domain.exceptions import ElementNotFoundError
from project_tracker.domain.ids import PersonId, ProjectId, TagId
from project_tracker.domain.models import Person, Tag


class TestPerson:
    def test_full_name(self):
        person = PersonBuilder().with_first_name("Ada").with_last_name("Lovelace").build()
        assert person.full_name == "Ada Lovelace"
        assert str(person) == "Ada Lovelace"
        assert repr(person) == f"[Ada Lovelace]-[{person.id}]"

    def test_rename(self):
        person = PersonBuilder().with_first_name("Ada").build()
        person.rename("Grace", "Hopper")
        assert person.full_name == "Grace Hopper"

    def test_requires_person_id(self):
        with pytest.raises(TypeError):
            Person(id=TagId.new())

    def test_equality_includes_names(self):
        person_id = PersonId.new()
        assert Person(id=person_id, first_name="A") == Person(id=person_id, first_name="A")
        assert Person(id=person_id, first_name="A") != Person(id=person_id, first_name="B")


class TestTag:
    @pytest.fixture
    def tag(self):
        return TagBuilder().with_name("backend").build()

    def test_description(self, tag):
        assert tag.description == ""
        tag.set_description("Server side")
        assert tag.has_description()
        tag.clear_description()
        assert not tag.has_description()

    def test_rename(self, tag):
        assert tag.rename("api").name == "api"

    def test_parents(self, tag):
        parent = TagId.new()
        tag.add_parent(parent)
        assert tag.has_parent(parent)
        assert tag.parents == [parent]

    def test_self_parent_is_rejected(self, tag, caplog):
        with caplog.at_level("WARNING"):
            tag.add_parent(tag.id)
        assert not tag.has_parents()
        assert tag.try_add_parent(tag.id) is False
        assert "own parent" in caplog.text

    def test_remove_parent(self, tag):
        parent = TagId.new()
        tag.add_parent(parent).remove_parent(parent)
        assert tag.parents == []

    def test_remove_missing_parent_raises(self, tag):
        with pytest.raises(ElementNotFoundError):
            tag.remove_parent(TagId.new())

    def test_longer_cycles_are_not_detected(self):
        a = TagBuilder().with_name("a").build()
        b = TagBuilder().with_name("b").build()
        a.add_parent(b.id)
        b.add_parent(a.id)
        assert a.has_parent(b.id) and b.has_parent(a.id)

    def test_requires_tag_id(self):
        with pytest.raises(TypeError):
            Tag(id=PersonId.new())

    def test_parent_kind_is_checked(self, tag):
        with pytest.raises(TypeError):
            tag.add_parent(ProjectId.new())
        with pytest.raises(TypeError):
            Tag(id=TagId.new(), parents=[PersonId.new()])
        assert tag.parents == []
