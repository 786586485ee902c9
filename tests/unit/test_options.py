"""Tests for trendline options and their resolution."""

import pytest
from pydantic import ValidationError

from trend_overlay.config import DEFAULT_COLOR, ParsingConfig, Settings, StyleConfig
from trend_overlay.data.base import Dataset
from trend_overlay.geometry.resolver import ProjectionMode
from trend_overlay.rendering.options import (
    DASH_PATTERNS,
    LineStyle,
    TrendlineOptions,
    resolve_trendline,
)


class TestTrendlineOptions:
    """Tests for parsing host-shaped option dicts."""

    def test_camel_case_keys(self):
        options = TrendlineOptions.model_validate(
            {"colorMin": "red", "colorMax": "blue", "lineStyle": "dashed", "fillColor": "pink"}
        )

        assert options.color_min == "red"
        assert options.color_max == "blue"
        assert options.line_style is LineStyle.DASHED
        assert options.fill_color == "pink"

    def test_snake_case_keys(self):
        options = TrendlineOptions.model_validate({"color_min": "red", "x_axis_key": "t"})
        assert options.color_min == "red"
        assert options.x_axis_key == "t"

    @pytest.mark.parametrize("key", ["offset", "trendoffset", "trendOffset"])
    def test_offset_aliases(self, key):
        assert TrendlineOptions.model_validate({key: -2}).offset == -2

    @pytest.mark.parametrize("style", ["wavy", "", None, 3, ["dashed"]])
    def test_unknown_line_style_is_solid(self, style):
        options = TrendlineOptions.model_validate({"lineStyle": style})
        assert options.line_style is LineStyle.SOLID

    @pytest.mark.parametrize("fill", [False, ""])
    def test_false_fill_means_none(self, fill):
        assert TrendlineOptions.model_validate({"fillColor": fill}).fill_color is None

    def test_unknown_keys_ignored(self):
        options = TrendlineOptions.model_validate({"somethingElse": 1})
        assert options.line_style is LineStyle.SOLID

    @pytest.mark.parametrize("width", [0, -1])
    def test_width_must_be_positive(self, width):
        with pytest.raises(ValidationError):
            TrendlineOptions.model_validate({"width": width})

    def test_projection_modes(self):
        assert TrendlineOptions().projection_mode is ProjectionMode.BOUNDED
        assert TrendlineOptions(projection=True).projection_mode is ProjectionMode.PROJECTED
        assert (
            TrendlineOptions.model_validate({"projectable-negative-slope": True}).projection_mode
            is ProjectionMode.DIRECTIONAL
        )

    def test_projection_wins_over_directional(self):
        options = TrendlineOptions.model_validate({"projection": True, "projectableNegativeSlope": True})
        assert options.projection_mode is ProjectionMode.PROJECTED

    def test_dash_patterns(self):
        assert DASH_PATTERNS[LineStyle.SOLID] == ()
        assert DASH_PATTERNS[LineStyle.DOTTED] == (2, 2)
        assert DASH_PATTERNS[LineStyle.DASHED] == (8, 3)
        assert DASH_PATTERNS[LineStyle.DASHDOT] == (8, 3, 2, 3)


class TestResolveTrendline:
    """Tests for merging options with dataset and built-in defaults."""

    def test_no_trendline(self, settings):
        assert resolve_trendline(Dataset(data=[1, 2]), settings=settings) is None

    def test_built_in_defaults(self, settings):
        style = resolve_trendline(Dataset(trendline_linear={}), settings=settings)

        assert style.kind == "linear"
        assert style.color_min == DEFAULT_COLOR
        assert style.color_max == DEFAULT_COLOR
        assert style.width == 3
        assert style.line_style is LineStyle.SOLID
        assert style.dash == ()
        assert style.fill_color is None
        assert style.offset == 0
        assert style.mode is ProjectionMode.BOUNDED
        assert (style.x_axis_key, style.y_axis_key) == ("x", "y")
        assert style.label is None

    def test_dataset_style_beats_built_in(self, settings):
        dataset = Dataset(border_color="green", border_width=2, trendline_linear={})

        style = resolve_trendline(dataset, settings=settings)

        assert style.color_min == "green"
        assert style.color_max == "green"
        assert style.width == 2

    def test_trendline_options_beat_dataset(self, settings):
        dataset = Dataset(
            border_color="green",
            border_width=2,
            trendline_linear={"colorMin": "red", "width": 5, "lineStyle": "dotted"},
        )

        style = resolve_trendline(dataset, settings=settings)

        assert style.color_min == "red"
        assert style.color_max == "green"
        assert style.width == 5
        assert style.dash == (2, 2)

    def test_exponential_wins_over_linear(self, settings):
        dataset = Dataset(
            data=[1, 2, 4],
            trendline_linear={"colorMin": "a"},
            trendline_exponential={"colorMin": "b"},
        )

        style = resolve_trendline(dataset, settings=settings)

        assert style.kind == "exponential"
        assert style.color_min == "b"

    def test_exponential(self, settings):
        style = resolve_trendline(Dataset(trendline_exponential={"trendoffset": 1}), settings=settings)
        assert style.kind == "exponential"
        assert style.offset == 1

    def test_axis_key_precedence(self, settings):
        chart_parsing = ParsingConfig(x_axis_key="time", y_axis_key="value")

        from_chart = resolve_trendline(Dataset(trendline_linear={}), chart_parsing, settings)
        from_options = resolve_trendline(
            Dataset(trendline_linear={"xAxisKey": "t"}), chart_parsing, settings
        )

        assert (from_chart.x_axis_key, from_chart.y_axis_key) == ("time", "value")
        assert (from_options.x_axis_key, from_options.y_axis_key) == ("t", "value")

    def test_settings_defaults_are_used(self):
        settings = Settings(style=StyleConfig(default_color="black", default_width=7))

        style = resolve_trendline(Dataset(trendline_linear={}), settings=settings)

        assert style.color_min == "black"
        assert style.width == 7

    def test_malformed_options_raise(self, settings):
        with pytest.raises(ValidationError):
            resolve_trendline(Dataset(trendline_linear={"width": "wide"}), settings=settings)


class TestResolveLabel:
    """Tests for inline label defaults."""

    def test_label_defaults(self, settings):
        dataset = Dataset(border_color="navy", trendline_linear={"label": {}})

        label = resolve_trendline(dataset, settings=settings).label

        assert label.text == "Trendline"
        assert label.display_value
        assert not label.percentage
        assert label.color == "navy"
        assert label.font_size == 12
        assert label.offset == 10
        assert label.font == f"12px {settings.style.font_family}"

    def test_exponential_default_text(self, settings):
        label = resolve_trendline(Dataset(trendline_exponential={"label": {}}), settings=settings).label
        assert label.text == "Exponential Trendline"

    def test_label_overrides(self, settings):
        dataset = Dataset(
            trendline_linear={
                "label": {
                    "text": "Fit",
                    "displayValue": False,
                    "percentage": True,
                    "color": "red",
                    "offset": 4,
                    "font": {"family": "Mono", "size": 9},
                }
            }
        )

        label = resolve_trendline(dataset, settings=settings).label

        assert label.text == "Fit"
        assert not label.display_value
        assert label.percentage
        assert label.color == "red"
        assert label.offset == 4
        assert label.font == "9px Mono"

    def test_empty_text_is_kept(self, settings):
        label = resolve_trendline(Dataset(trendline_linear={"label": {"text": ""}}), settings=settings).label
        assert label.text == ""

    def test_hidden_label(self, settings):
        style = resolve_trendline(Dataset(trendline_linear={"label": {"display": False}}), settings=settings)
        assert style.label is None
