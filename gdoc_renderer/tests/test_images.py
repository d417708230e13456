"""Test cases for embedded image geometry and rendering."""

import unittest

from gdoc_renderer.model.document_model import CropProperties
from gdoc_renderer.model.style_model import Dimension
from gdoc_renderer.renderer.html_renderer import render
from gdoc_renderer.renderer.html_writer import ImageReference
from gdoc_renderer.renderer.utils import compute_image_geometry, px, rotation
from gdoc_renderer.tests.doc_builders import body_of, build, image_object, paragraph
from gdoc_renderer.utils.errors import RenderError, UnsupportedElementError, UnsupportedUnitError
from gdoc_renderer.utils.units import dimension_to_px, points_to_px


def _image_document(obj):
    return build(
        paragraph({"inlineObjectElement": {"inlineObjectId": "kix.1"}}),
        inline_objects={"kix.1": obj},
    )


class UnitsTest(unittest.TestCase):
    """Test point to pixel conversion."""

    def test_points_to_px(self):
        """Test conversion factors."""
        self.assertEqual(points_to_px(75.0), 100.0)
        self.assertEqual(dimension_to_px(Dimension(37.5, "PT")), 50.0)
        self.assertEqual(dimension_to_px(Dimension(0.0, "PT")), 0.0)

    def test_missing_magnitude(self):
        """A dimension without magnitude is an error, not a zero size."""
        with self.assertRaises(RenderError) as ctx:
            dimension_to_px(Dimension(None, "PT"))
        self.assertNotIsInstance(ctx.exception, UnsupportedUnitError)

    def test_unknown_unit(self):
        """Only points are supported."""
        for unit in ["MM", None]:
            with self.assertRaises(UnsupportedUnitError):
                dimension_to_px(Dimension(10.0, unit))


class ImageGeometryTest(unittest.TestCase):
    """Test crop geometry."""

    def test_no_crop(self):
        """Without crop the image fills its box."""
        geometry = compute_image_geometry(100.0, 50.0)
        self.assertEqual((geometry.image_width, geometry.image_height), (100.0, 50.0))
        self.assertEqual((geometry.margin_left, geometry.margin_top), (0.0, 0.0))

    def test_horizontal_crop(self):
        """Cropping a quarter on each side doubles the image width."""
        geometry = compute_image_geometry(100.0, 50.0, CropProperties(offset_left=0.25, offset_right=0.25))
        self.assertEqual(geometry.width, 100.0)
        self.assertEqual(geometry.image_width, 200.0)
        self.assertEqual(geometry.margin_left, -50.0)
        self.assertEqual(geometry.image_height, 50.0)

    def test_vertical_crop(self):
        """Test top and bottom offsets."""
        geometry = compute_image_geometry(100.0, 50.0, CropProperties(offset_top=0.5))
        self.assertEqual(geometry.image_height, 100.0)
        self.assertEqual(geometry.margin_top, -50.0)

    def test_crop_hiding_everything(self):
        """Offsets adding up to the whole image are rejected."""
        with self.assertRaises(RenderError):
            compute_image_geometry(100.0, 50.0, CropProperties(offset_left=0.5, offset_right=0.5))

    def test_formatting(self):
        """Test pixel and rotation values."""
        self.assertEqual(px(100), "100.00px")
        self.assertEqual(px(-12.5), "-12.50px")
        self.assertEqual(rotation(0.5), "rotate(0.500rad) translateZ(0px)")


class ImageRenderTest(unittest.TestCase):
    """Test the markup of inline images."""

    def test_uncropped_image(self):
        """Test the wrapper span and image styles."""
        body = body_of(render(_image_document(image_object(75, 37.5))))
        self.assertEqual(
            body,
            '<p><span style="display:inline-block;overflow:hidden;width:100.00px;height:50.00px;">'
            '<img id="kix.1" src="https://lh3.googleusercontent.com/abc" '
            'style="width:100.00px;height:50.00px;margin-left:0.00px;margin-top:0.00px;"></span></p>\n',
        )

    def test_cropped_image(self):
        """Crop offsets scale the image and shift it with negative margins."""
        body = body_of(
            render(_image_document(image_object(75, 37.5, crop={"offsetLeft": 0.25, "offsetRight": 0.25})))
        )
        self.assertIn("width:200.00px;height:50.00px;margin-left:-50.00px;margin-top:0.00px;", body)

    def test_rotation(self):
        """Image and crop angles become transforms."""
        body = body_of(render(_image_document(image_object(75, 37.5, crop={"angle": 0.25}, angle=1.5))))
        self.assertIn(
            'style="display:inline-block;overflow:hidden;width:100.00px;height:50.00px;'
            'transform:rotate(1.500rad) translateZ(0px);"',
            body,
        )
        self.assertIn('style="transform:rotate(0.250rad) translateZ(0px);width:100.00px;', body)

    def test_alt_text(self):
        """The description, or else the title, becomes the alt text."""
        obj = image_object(75, 37.5)
        obj["inlineObjectProperties"]["embeddedObject"]["title"] = "Chart"
        body = body_of(render(_image_document(obj)))
        self.assertIn('<img alt="Chart" id="kix.1"', body)

        obj["inlineObjectProperties"]["embeddedObject"]["description"] = "Sales chart"
        body = body_of(render(_image_document(obj)))
        self.assertIn('<img alt="Sales chart" id="kix.1"', body)

    def test_image_resolver(self):
        """The resolver hook rewrites image sources."""
        calls = []

        def resolver(reference):
            calls.append(reference)
            return "/images/banner.png"

        body = body_of(render(_image_document(image_object(75, 37.5)), image_resolver=resolver))
        self.assertIn('src="/images/banner.png"', body)
        self.assertEqual(
            calls,
            [ImageReference(image_id="kix.1", url="https://lh3.googleusercontent.com/abc", doc_id="doc-1")],
        )

    def test_drawing_is_unsupported(self):
        """Embedded objects that are not images are refused."""
        obj = image_object(75, 37.5)
        del obj["inlineObjectProperties"]["embeddedObject"]["imageProperties"]
        with self.assertRaises(UnsupportedElementError):
            render(_image_document(obj))

    def test_non_point_size(self):
        """Sizes in units other than points are refused."""
        obj = image_object(75, 37.5)
        obj["inlineObjectProperties"]["embeddedObject"]["size"]["width"]["unit"] = "MM"
        with self.assertRaises(UnsupportedUnitError):
            render(_image_document(obj))

    def test_size_without_magnitude(self):
        """An image size missing its magnitude aborts rendering."""
        obj = image_object(75, 37.5)
        del obj["inlineObjectProperties"]["embeddedObject"]["size"]["height"]["magnitude"]
        with self.assertRaises(RenderError):
            render(_image_document(obj))


if __name__ == '__main__':
    unittest.main()
