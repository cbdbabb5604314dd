"""
Unit tests for the delimited record mapper (flatrec.mapper).

Record parsing tests check tokens and arity; record mapping tests check
the populated objects and the fail-fast error policy.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from flatrec.config import MapperConfig
from flatrec.converters import default_registry
from flatrec.exceptions import (
    ArityError,
    ConfigurationError,
    EmptyValueError,
    MalformedValueError,
    QuotingError,
    RecordMappingError,
)
from flatrec.mapper import RecordMapper, build_mapper
from flatrec.records import FieldSpec, RawField
from tests.conftest import DATA_LINE, EXPECTED_CONTENT, FIELD_NAMES, HEADER_LINE
from tests.models import Account, Person, PersonModel, Shipment, Tier


def _contents(fields) -> list[str]:
    return [f.raw_content for f in fields]


def _expected_person() -> Person:
    return Person(
        firstName="foo",
        lastName="bar",
        age=30,
        birthDate=dt.date(1990, 12, 12),
        married=True,
    )


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------

class TestParse:
    """parse() with explicit field names."""

    def _mapper(self, **settings) -> RecordMapper:
        return build_mapper(Person, field_names=FIELD_NAMES, **settings)

    def test_record_parsing(self):
        fields = self._mapper().parse(DATA_LINE)
        assert _contents(fields) == EXPECTED_CONTENT
        assert [f.name for f in fields] == list(FIELD_NAMES)

    def test_too_few_fields(self):
        with pytest.raises(ArityError) as excinfo:
            self._mapper().parse("foo,bar,30,1990-12-12")
        assert excinfo.value.expected == 5
        assert excinfo.value.actual == 4

    def test_too_many_fields(self):
        with pytest.raises(ArityError):
            self._mapper().parse(DATA_LINE + ",extra")

    def test_trailing_empty_field_counts(self):
        fields = self._mapper().parse("foo,bar,30,1990-12-12,")
        assert fields[4].raw_content == ""

    def test_trimmed_whitespace(self):
        line = "  foo ,    bar  ,  30  ,     1990-12-12  ,  true         "
        fields = self._mapper(trim_whitespace=True).parse(line)
        assert _contents(fields) == EXPECTED_CONTENT

    @pytest.mark.parametrize("delimiter", ["|", " ", "\t", "###"])
    def test_delimiters(self, delimiter):
        line = delimiter.join(EXPECTED_CONTENT)
        fields = self._mapper(delimiter=delimiter).parse(line)
        assert _contents(fields) == EXPECTED_CONTENT

    @pytest.mark.parametrize("qualifier", ["'", '"'])
    def test_qualifiers(self, qualifier):
        line = ",".join(f"{qualifier}{v}{qualifier}" for v in EXPECTED_CONTENT)
        fields = self._mapper(qualifier=qualifier).parse(line)
        assert _contents(fields) == EXPECTED_CONTENT

    def test_all_fields_must_be_qualified(self):
        with pytest.raises(QuotingError):
            self._mapper(qualifier="'").parse("'foo','bar',30,'1990-12-12','true'")


class TestParseSubset:
    """parse() with a field-index subset."""

    def test_subset_selects_configured_indices(self):
        mapper = build_mapper(
            Person, field_names=["firstName", "married"], field_indices=[0, 4]
        )
        fields = mapper.parse(DATA_LINE)
        assert len(fields) == 2
        assert fields[0] == RawField(index=0, raw_content="foo", name="firstName")
        assert fields[1] == RawField(index=4, raw_content="true", name="married")

    def test_subset_ignores_token_count(self):
        """Extra tokens beyond the subset are neither validated nor converted."""
        mapper = build_mapper(
            Person, field_names=["firstName", "married"], field_indices=[0, 4]
        )
        fields = mapper.parse(DATA_LINE + ",whatever,else")
        assert _contents(fields) == ["foo", "true"]

    def test_subset_index_beyond_line(self):
        mapper = build_mapper(
            Person, field_names=["firstName", "married"], field_indices=[0, 4]
        )
        with pytest.raises(ArityError, match="index 4"):
            mapper.parse("foo,bar,30")

    def test_subset_with_header_names(self):
        mapper = build_mapper(Person, field_indices=[0, 4])
        mapper.read_header(HEADER_LINE)
        assert mapper.field_specs == (FieldSpec(0, "firstName"), FieldSpec(4, "married"))
        assert _contents(mapper.parse(DATA_LINE)) == ["foo", "true"]


# ---------------------------------------------------------------------------
# Field name resolution
# ---------------------------------------------------------------------------

class TestHeader:
    """Convention over configuration: names from a header line."""

    def test_unresolved_mapper_fails_on_use(self):
        mapper = build_mapper(Person)
        assert not mapper.is_resolved
        with pytest.raises(ConfigurationError, match="header"):
            mapper.parse(DATA_LINE)

    def test_read_header_resolves_once(self):
        mapper = build_mapper(Person)
        assert mapper.read_header(HEADER_LINE) == FIELD_NAMES
        # Later header lines are ignored
        assert mapper.read_header("a,b,c") == FIELD_NAMES
        assert mapper.field_names == FIELD_NAMES

    def test_explicit_names_win_over_header(self):
        mapper = build_mapper(Person, field_names=["firstName", "lastName"])
        assert mapper.read_header(HEADER_LINE) == ("firstName", "lastName")

    def test_header_with_unknown_property(self):
        mapper = build_mapper(Person)
        with pytest.raises(ConfigurationError, match="nickname"):
            mapper.read_header("firstName,nickname")
        # A failed resolution leaves the mapper unresolved
        assert not mapper.is_resolved
        mapper.read_header(HEADER_LINE)
        assert mapper.is_resolved

    def test_header_uses_mapper_tokenizer(self):
        mapper = build_mapper(Person, delimiter="|", trim_whitespace=True)
        mapper.read_header(" firstName | age ")
        assert mapper.field_names == ("firstName", "age")


# ---------------------------------------------------------------------------
# Record mapping
# ---------------------------------------------------------------------------

class TestMap:
    """map() / map_line() results."""

    def test_convention_over_configuration(self):
        mapper = build_mapper(Person)
        mapper.read_header(HEADER_LINE)
        assert mapper.map_line(DATA_LINE) == _expected_person()

    def test_trimmed_line_maps_identically(self):
        mapper = build_mapper(Person, trim_whitespace=True)
        mapper.read_header(HEADER_LINE)
        person = mapper.map_line("  foo , bar , 30 , 1990-12-12 , true ")
        assert person == _expected_person()

    def test_subset_leaves_defaults(self):
        mapper = build_mapper(Person, field_indices=[0, 4])
        mapper.read_header(HEADER_LINE)
        person = mapper.map_line(DATA_LINE)
        assert person.firstName == "foo"
        assert person.lastName is None
        assert person.age == 0
        assert person.birthDate is None
        assert person.married is True

    def test_pydantic_target(self):
        mapper = build_mapper(PersonModel, field_names=FIELD_NAMES)
        person = mapper.map_line(DATA_LINE)
        assert isinstance(person, PersonModel)
        assert person.birthDate == dt.date(1990, 12, 12)
        assert person.married is True

    def test_unrecognised_boolean_is_false_not_an_error(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        person = mapper.map_line("foo,bar,30,1990-12-12,maybe")
        assert person.married is False

    def test_empty_string_field(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        person = mapper.map_line(",bar,30,1990-12-12,true")
        assert person.firstName == ""

    def test_map_accepts_raw_fields(self):
        mapper = build_mapper(Person, field_names=["firstName", "age"])
        person = mapper.map([RawField(0, "foo"), RawField(1, "42")])
        assert person == Person(firstName="foo", age=42)

    def test_custom_registry(self):
        registry = default_registry()
        registry.register_enum(Tier)
        mapper = build_mapper(
            Account, field_names=["number", "balance", "tier"], registry=registry
        )
        account = mapper.map_line("123456789012345678901,10.50,GOLD")
        assert account.number == 123456789012345678901
        assert account.balance == Decimal("10.50")
        assert account.tier is Tier.GOLD

    def test_mapper_is_reusable(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        first = mapper.map_line(DATA_LINE)
        second = mapper.map_line("baz,qux,41,1983-02-28,no")
        assert first == _expected_person()
        assert second.firstName == "baz"
        assert second.married is False


class TestMapErrors:
    """Fail-fast mapping errors carry the offending field."""

    def _mapper(self) -> RecordMapper:
        return build_mapper(Person, field_names=FIELD_NAMES)

    def test_malformed_integer(self):
        with pytest.raises(RecordMappingError) as excinfo:
            self._mapper().map_line("foo,bar,thirty,1990-12-12,true")
        err = excinfo.value
        assert err.field_index == 2
        assert err.field_name == "age"
        assert err.raw_content == "thirty"
        assert isinstance(err.__cause__, MalformedValueError)

    def test_empty_date(self):
        with pytest.raises(RecordMappingError) as excinfo:
            self._mapper().map_line("foo,bar,30,,true")
        assert excinfo.value.field_name == "birthDate"
        assert isinstance(excinfo.value.__cause__, EmptyValueError)

    def test_missing_field(self):
        with pytest.raises(RecordMappingError, match="missing"):
            self._mapper().map([RawField(0, "foo")])

    def test_pydantic_validation_failure(self):
        mapper = build_mapper(PersonModel, field_names=FIELD_NAMES)
        with pytest.raises(RecordMappingError, match="PersonModel") as excinfo:
            mapper.map_line("foo,bar,-1,1990-12-12,true")
        assert isinstance(excinfo.value.__cause__, ValidationError)

    def test_padded_integer_needs_trimming(self):
        line = "foo,bar, 30 ,1990-12-12,true"
        with pytest.raises(RecordMappingError) as excinfo:
            self._mapper().map_line(line)
        assert excinfo.value.raw_content == " 30 "
        trimmed = build_mapper(Person, field_names=FIELD_NAMES, trim_whitespace=True)
        assert trimmed.map_line(line).age == 30

    def test_post_init_type_error(self):
        mapper = build_mapper(Shipment, field_names=["sku", "quantity"])
        with pytest.raises(RecordMappingError, match="Shipment") as excinfo:
            mapper.map_line("A-1,-3")
        assert isinstance(excinfo.value.__cause__, TypeError)

    def test_post_init_type_error_is_a_failure_result(self):
        mapper = build_mapper(Shipment, field_names=["sku", "quantity"])
        result = mapper.parse_and_map("A-1,-3", record_number=4)
        assert not result.ok
        assert isinstance(result.error, RecordMappingError)
        assert mapper.parse_and_map("A-1,3").value == Shipment("A-1", 3)

    def test_errors_leave_mapper_usable(self):
        mapper = self._mapper()
        with pytest.raises(RecordMappingError):
            mapper.map_line("foo,bar,x,1990-12-12,true")
        with pytest.raises(ArityError):
            mapper.map_line("foo")
        assert mapper.map_line(DATA_LINE) == _expected_person()


class TestParseAndMap:
    """parse_and_map() reports per-line failures as results."""

    def test_success(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        result = mapper.parse_and_map(DATA_LINE, record_number=2)
        assert result.ok
        assert result.value == _expected_person()
        assert result.record.number == 2
        assert result.unwrap() == _expected_person()

    def test_parsing_failure(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        result = mapper.parse_and_map("foo,bar")
        assert not result.ok
        assert isinstance(result.error, ArityError)
        assert result.value is None
        with pytest.raises(ArityError):
            result.unwrap()

    def test_mapping_failure(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        result = mapper.parse_and_map("foo,bar,x,1990-12-12,true", record_number=7)
        assert isinstance(result.error, RecordMappingError)
        assert result.record.payload == "foo,bar,x,1990-12-12,true"

    def test_configuration_error_propagates(self):
        with pytest.raises(ConfigurationError):
            build_mapper(Person).parse_and_map(DATA_LINE)


class TestBuildMapper:
    """Builder step and eager validation."""

    def test_settings_override_config(self):
        config = MapperConfig(delimiter="|")
        mapper = build_mapper(Person, config=config, trim_whitespace=True)
        assert mapper.config.delimiter == "|"
        assert mapper.config.trim_whitespace is True
        assert config.trim_whitespace is False

    def test_config_is_frozen(self):
        mapper = build_mapper(Person, field_names=FIELD_NAMES)
        with pytest.raises(ValidationError):
            mapper.config.delimiter = "|"

    def test_unknown_configured_field_fails_at_construction(self):
        with pytest.raises(ConfigurationError, match="nickname"):
            build_mapper(Person, field_names=["firstName", "nickname"])

    def test_inconsistent_subset_fails_at_construction(self):
        with pytest.raises(ConfigurationError, match="counts must match"):
            build_mapper(Person, field_names=["firstName"], field_indices=[0, 4])

    def test_required_property_not_mapped(self):
        with pytest.raises(ConfigurationError, match="balance"):
            build_mapper(Account, field_names=["number"])

    def test_unregistered_enum_fails_at_construction(self):
        with pytest.raises(ConfigurationError, match="tier"):
            build_mapper(Account, field_names=["number", "balance", "tier"])

    def test_invalid_setting(self):
        with pytest.raises(ValidationError):
            build_mapper(Person, qualifier="''")
