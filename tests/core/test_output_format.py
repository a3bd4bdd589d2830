import pytest

from puml_export.core.output_format import FORMAT_NAMES, OutputFormat


class TestOutputFormatMapping:
    @pytest.mark.parametrize(
        "output_format, text",
        [
            (OutputFormat.ASCII, "txt"),
            (OutputFormat.PNG, "png"),
            (OutputFormat.SVG, "svg"),
        ],
    )
    def test_segment_and_extension(self, output_format, text):
        assert output_format.segment == text
        assert output_format.extension == text
        assert str(output_format) == text

    def test_mapping_is_a_bijection(self):
        segments = {output_format.segment for output_format in OutputFormat}
        assert len(segments) == len(OutputFormat)
        for output_format in OutputFormat:
            assert OutputFormat.parse(output_format.segment) is output_format


class TestOutputFormatParse:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("PNG", OutputFormat.PNG),
            ("png", OutputFormat.PNG),
            ("svg", OutputFormat.SVG),
            ("Svg", OutputFormat.SVG),
            ("ASCII", OutputFormat.ASCII),
            ("ascii", OutputFormat.ASCII),
            ("txt", OutputFormat.ASCII),
            ("TXT", OutputFormat.ASCII),
        ],
    )
    def test_parse_is_case_insensitive(self, name, expected):
        assert OutputFormat.parse(name) is expected

    @pytest.mark.parametrize("name", ["xyz", "", "jpeg", "svgz"])
    def test_unknown_names_are_rejected(self, name):
        with pytest.raises(ValueError, match="Unknown output format"):
            OutputFormat.parse(name)

    def test_format_names_are_all_parseable(self):
        assert set(FORMAT_NAMES) == {"ascii", "txt", "png", "svg"}
        for name in FORMAT_NAMES:
            OutputFormat.parse(name)
