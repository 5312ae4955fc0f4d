"""Tests for the parameter and layer DTOs."""

import pytest

from iclient.common import (
    Bounds,
    FilterParameter,
    OutputSetting,
    ServerColor,
    TopologyValidatorJobsParameter,
    TopologyValidatorRule,
    UGCImage,
)
from iclient.common.enums import ColorSpaceType, OutputType
from iclient.common.layers import UGCSubLayer, parse_sub_layer


class TestServerModel:

    def test_to_server_json_uses_camel_case_and_skips_none(self):
        query_filter = FilterParameter(name="Countries@World", attribute_filter="SMID < 10", order_by="SMID")

        assert query_filter.to_server_json() == {
            "name": "Countries@World",
            "attributeFilter": "SMID < 10",
            "orderBy": "SMID",
        }

    def test_construct_by_server_name(self):
        query_filter = FilterParameter(attributeFilter="SMID < 10")

        assert query_filter.attribute_filter == "SMID < 10"

    def test_unknown_keys_are_ignored(self):
        query_filter = FilterParameter(name="A", unknownKey=1)

        assert not hasattr(query_filter, "unknownKey")
        assert query_filter.to_server_json() == {"name": "A"}


class TestUGCImage:

    SERVER_JSON = {
        "name": "World@Image",
        "ugcLayerType": "IMAGE",
        "brightness": 10,
        "colorSpaceType": "RGB",
        "contrast": 20,
        "displayBandIndexes": [0, 1, 2],
        "transparent": True,
        "transparentColor": {"red": 0, "green": 0, "blue": 0},
        "transparentColorTolerance": 5,
        "bounds": {"leftBottom": {"x": -180, "y": -90}, "rightTop": {"x": 180, "y": 90}},
        "somethingNew": "ignored",
    }

    def test_from_json(self):
        image = UGCImage().from_json(self.SERVER_JSON)

        assert image.name == "World@Image"
        assert image.brightness == 10
        assert image.color_space_type == "RGB"
        assert image.contrast == 20
        assert image.display_band_indexes == [0, 1, 2]
        assert image.transparent is True
        assert image.transparent_color == ServerColor(0, 0, 0)
        assert image.transparent_color_tolerance == 5
        assert image.bounds == Bounds(-180, -90, 180, 90)

    def test_from_json_returns_self(self):
        image = UGCImage()

        assert image.from_json({"brightness": 1}) is image

    def test_from_json_with_empty_object(self):
        image = UGCImage().from_json({})

        assert image.brightness is None
        assert image.transparent_color is None

    def test_to_server_json(self):
        image = UGCImage(
            brightness=10,
            color_space_type=ColorSpaceType.CMYK,
            transparent_color=ServerColor(1, 2, 3),
        )

        assert image.to_server_json() == {
            "brightness": 10,
            "colorSpaceType": "CMYK",
            "transparentColor": {"red": 1, "green": 2, "blue": 3},
        }

    def test_destroy_nulls_every_field(self):
        image = UGCImage().from_json(self.SERVER_JSON)

        image.destroy()

        for name in UGCImage.model_fields:
            assert getattr(image, name) is None

    def test_parse_sub_layer_picks_image(self):
        assert isinstance(parse_sub_layer(self.SERVER_JSON), UGCImage)
        layer = parse_sub_layer({"name": "Countries@World", "ugcLayerType": "VECTOR"})
        assert type(layer) is UGCSubLayer


class TestTopologyValidatorJobsParameter:

    def test_defaults(self):
        params = TopologyValidatorJobsParameter()

        assert params.dataset_name == ""
        assert params.dataset_topology == ""
        assert params.tolerance == ""
        assert params.rule == TopologyValidatorRule.REGIONNOOVERLAP
        assert params.output is None

    def test_to_object_buckets_fields(self):
        params = TopologyValidatorJobsParameter(
            dataset_name="samples_processing_newyorkZone_R",
            dataset_topology="samples_processing_newyorkResidential_R",
            tolerance="1",
            rule=TopologyValidatorRule.REGIONNOOVERLAPWITH,
            output=OutputSetting(dataset_name="result"),
        )

        result = TopologyValidatorJobsParameter.to_object(params, {})

        assert result["input"] == {"datasetName": "samples_processing_newyorkZone_R"}
        assert result["analyst"] == {
            "datasetTopology": "samples_processing_newyorkResidential_R",
            "tolerance": "1",
            "rule": "REGIONNOOVERLAPWITH",
        }
        assert result["output"] == {"type": "UDB", "datasetName": "result", "outputPath": ""}

    def test_to_object_mapping_puts_unknown_keys_in_analyst(self):
        temp_obj = {}

        returned = TopologyValidatorJobsParameter.to_object(
            {"datasetName": "zone", "rule": "LINENOOVERLAP", "mapName": "World"},
            temp_obj,
        )

        assert returned is temp_obj
        assert temp_obj == {
            "input": {"datasetName": "zone"},
            "analyst": {"rule": "LINENOOVERLAP", "mapName": "World"},
        }

    def test_to_object_rejects_non_mapping(self):
        with pytest.raises((TypeError, ValueError)):
            TopologyValidatorJobsParameter.to_object(42, {})

    def test_destroy_destroys_output_once(self):
        destroyed = []

        class CountingOutput(OutputSetting):
            def destroy(self):
                destroyed.append(self)
                super().destroy()

        output = CountingOutput(type=OutputType.PG)
        params = TopologyValidatorJobsParameter(dataset_name="zone", output=output)

        params.destroy()

        assert destroyed == [output]
        assert output.type is None
        for name in TopologyValidatorJobsParameter.model_fields:
            assert getattr(params, name) is None
