"""Tests for settings, options and policy validation."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from structmap.config import (
    DEFAULT_MAX_DEPTH,
    RFC3339,
    MapperSettings,
    Option,
    Policy,
    with_allow_private_fields,
    with_case_sensitive,
    with_converter,
    with_deep_copy,
    with_error_handler,
    with_field_name_transform,
    with_ignore_unexported,
    with_max_depth,
    with_max_sequence_capacity,
    with_secondary_tag,
    with_skip_cycle_check,
    with_skip_nil,
    with_tag_name,
    with_time_layout,
    with_zero_fields,
)
from structmap.core.errors import ConfigurationError


class TestSettings:
    def test_defaults(self, settings):
        assert settings.max_depth == DEFAULT_MAX_DEPTH
        assert settings.tag_name is None
        assert settings.ignore_unexported
        assert settings.deep_copy
        assert settings.case_sensitive
        assert settings.time_layout == RFC3339
        assert settings.max_sequence_capacity == 0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STRUCTMAP_MAX_DEPTH", "4")
        monkeypatch.setenv("STRUCTMAP_CASE_SENSITIVE", "false")
        monkeypatch.setenv("STRUCTMAP_TAG_NAME", "mapper")
        settings = MapperSettings()
        assert settings.max_depth == 4
        assert not settings.case_sensitive
        assert settings.tag_name == "mapper"

    def test_validation(self):
        with pytest.raises(ValidationError):
            MapperSettings(max_depth=-1)
        with pytest.raises(ValidationError):
            MapperSettings(max_sequence_capacity=-5)


class TestPolicyBuild:
    def test_defaults_come_from_settings(self, settings):
        policy = Policy.build(settings=settings)
        assert policy.max_depth == DEFAULT_MAX_DEPTH
        assert policy.converters == {}

    def test_settings_are_loaded_when_omitted(self, monkeypatch):
        monkeypatch.setenv("STRUCTMAP_ZERO_FIELDS", "1")
        assert Policy.build().zero_fields

    def test_options_override_settings(self):
        policy = Policy.build(
            with_max_depth(5),
            with_tag_name("mapper"),
            settings=MapperSettings(max_depth=10, tag_name="json"),
        )
        assert policy.max_depth == 5
        assert policy.tag_name == "mapper"

    def test_later_options_win(self):
        policy = Policy.build(with_case_sensitive(False), with_case_sensitive(True))
        assert policy.case_sensitive

    def test_every_option_sets_its_attribute(self):
        def transform(name):
            return name

        def handler(err, src, dst):
            return err

        with pytest.warns(UserWarning):
            private = with_allow_private_fields()
        policy = Policy.build(
            with_max_depth(None),
            with_tag_name("mapper"),
            with_ignore_unexported(False),
            with_deep_copy(False),
            with_zero_fields(),
            with_skip_nil(),
            with_case_sensitive(False),
            with_secondary_tag(),
            with_field_name_transform(transform),
            with_error_handler(handler),
            with_time_layout("%Y"),
            with_max_sequence_capacity(10),
            private,
        )
        assert policy.max_depth is None
        assert policy.tag_name == "mapper"
        assert not policy.ignore_unexported
        assert not policy.deep_copy
        assert policy.zero_fields
        assert policy.skip_nil
        assert not policy.case_sensitive
        assert policy.use_secondary_tag
        assert policy.field_name_transform is transform
        assert policy.error_handler is handler
        assert policy.time_layout == "%Y"
        assert policy.max_sequence_capacity == 10
        assert policy.allow_private_fields

    def test_converters_accumulate(self):
        policy = Policy.build(with_converter(int, str), with_converter(datetime, str))
        assert policy.converter_for(int) is str
        assert policy.converter_for(datetime) is str
        assert policy.converter_for(float) is None

    def test_converters_are_read_only(self):
        policy = Policy.build(with_converter(int, str))
        with pytest.raises(TypeError):
            policy.converters[float] = str

    def test_unknown_attribute(self):
        with pytest.raises(ConfigurationError, match="colour"):
            Policy.build(Option("colour", "blue"))

    def test_allow_private_fields_false_does_not_warn(self, recwarn):
        with_allow_private_fields(False)
        assert len(recwarn) == 0


class TestPolicyValidation:
    @pytest.mark.parametrize(
        "options",
        [
            (with_max_depth(-1),),
            (with_max_sequence_capacity(-1),),
            (with_tag_name("-"),),
            (with_time_layout(""),),
            (with_converter(int, "not callable"),),
            (with_field_name_transform("upper"),),
            (with_error_handler(42),),
            (with_skip_cycle_check(), with_max_depth(None)),
        ],
    )
    def test_invalid_options(self, options):
        with pytest.raises(ConfigurationError):
            Policy.build(*options)

    def test_non_type_converter_key(self):
        with pytest.raises(ConfigurationError):
            Policy(converters={"int": str})

    def test_skip_cycle_check_with_bounded_depth_is_valid(self):
        policy = Policy.build(with_skip_cycle_check(), with_max_depth(8))
        assert policy.skip_cycle_check

    def test_depth_exceeded(self):
        policy = Policy.build(with_max_depth(2))
        assert not policy.depth_exceeded(2)
        assert policy.depth_exceeded(3)
        assert not Policy.build(with_max_depth(None)).depth_exceeded(10_000)

    def test_policy_is_immutable(self):
        policy = Policy.build()
        with pytest.raises(AttributeError):
            policy.max_depth = 1
