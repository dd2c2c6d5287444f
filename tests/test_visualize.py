import unittest

import numpy as np

from yolo_canvas.canvas import measure_text, measure_text_block
from yolo_canvas.config import DEFAULT_STYLE
from yolo_canvas.errors import InvalidColorFormatError, InvalidGeometryError
from yolo_canvas.types import Classification, Label, ObjectDetection, Pixel, Rectangle, Segmentation
from yolo_canvas.visualize import (
    _build_mask_overlay,
    _layout_label,
    draw_bounding_boxes,
    draw_classification_labels,
    draw_segmentation,
    format_label,
)

RED = Label("cat", "#FF0000")


def _gray(h: int, w: int, value: int = 50) -> np.ndarray:
    return np.full((h, w, 3), value, dtype=np.uint8)


class TestFormatLabel(unittest.TestCase):
    def test_confidence_suffix_only_when_requested(self) -> None:
        self.assertEqual(format_label("cat", 0.9, True), "cat (90%)")
        self.assertEqual(format_label("cat", 0.9, False), "cat")
        self.assertEqual(format_label("dog", 0.456, True), "dog (46%)")


class TestDrawBoundingBoxes(unittest.TestCase):
    def test_label_layout_sits_above_box(self) -> None:
        det = ObjectDetection(RED, 0.9, Rectangle(10, 10, 50, 50))
        layout = _layout_label(det, True, DEFAULT_STYLE)
        text_w, text_h = measure_text("cat (90%)", DEFAULT_STYLE)

        self.assertEqual(layout.text, "cat (90%)")
        bx, by, bw, bh = layout.background
        self.assertEqual((bx, bw, bh), (10, text_w + 16, text_h * 2))
        # The label background ends exactly where the box begins.
        self.assertEqual(by + bh, 10)
        self.assertEqual(layout.color, (255, 0, 0, 128))

    def test_draws_outline_and_label_in_place(self) -> None:
        image = _gray(200, 200)
        det = ObjectDetection(RED, 0.9, Rectangle(10, 60, 50, 50))
        result = draw_bounding_boxes(image, [det], draw_confidence=True)

        self.assertIsNone(result)
        # Left edge of the box: red at alpha 128 over gray 50.
        self.assertEqual(image[85, 10].tolist(), [153, 25, 25])
        # Box interior and everything right of the label block is untouched.
        self.assertEqual(image[85, 35].tolist(), [50, 50, 50])
        text_w, text_h = measure_text("cat (90%)", DEFAULT_STYLE)
        self.assertEqual(image[40, 10 + text_w + 16 + 2].tolist(), [50, 50, 50])
        # Label background occupies the rows right above the box.
        label_rows = image[60 - 2 * text_h : 58, 10 : 10 + text_w + 16]
        self.assertTrue(np.any(label_rows != 50))

    def test_outline_corners_are_inclusive(self) -> None:
        image = _gray(100, 100)
        draw_bounding_boxes(image, [ObjectDetection(RED, 0.9, Rectangle(10, 10, 50, 50))], draw_confidence=True)

        self.assertEqual(image[10, 10].tolist(), [153, 25, 25])
        self.assertEqual(image[60, 60].tolist(), [153, 25, 25])
        self.assertEqual(image[61, 61].tolist(), [50, 50, 50])
        self.assertEqual(image[35, 35].tolist(), [50, 50, 50])

    def test_empty_label_name_still_draws(self) -> None:
        image = _gray(100, 100)
        det = ObjectDetection(Label("", "#FF0000"), 0.5, Rectangle(10, 50, 20, 20))
        draw_bounding_boxes(image, [det], draw_confidence=False)

        self.assertEqual(image[60, 10].tolist(), [153, 25, 25])
        layout = _layout_label(det, False, DEFAULT_STYLE)
        _, text_h = measure_text("cat", DEFAULT_STYLE)
        self.assertEqual(layout.text, "")
        self.assertEqual(layout.background[2:], (16, text_h * 2))
        # Background still fills the rows above the box.
        self.assertEqual(image[45, 20].tolist(), [153, 25, 25])

    def test_invalid_color_leaves_previous_detections_drawn(self) -> None:
        image = _gray(200, 200)
        good = ObjectDetection(RED, 0.5, Rectangle(10, 60, 30, 30))
        bad = ObjectDetection(Label("dog", "00FF00"), 0.5, Rectangle(100, 60, 30, 30))
        with self.assertRaises(InvalidColorFormatError):
            draw_bounding_boxes(image, [good, bad])
        self.assertEqual(image[75, 10].tolist(), [153, 25, 25])
        self.assertEqual(image[75, 100].tolist(), [50, 50, 50])

    def test_rejects_empty_rectangle(self) -> None:
        with self.assertRaises(InvalidGeometryError):
            draw_bounding_boxes(_gray(50, 50), [ObjectDetection(RED, 0.5, Rectangle(5, 5, 0, 10))])

    def test_rgba_image_keeps_alpha(self) -> None:
        image = np.zeros((100, 100, 4), dtype=np.uint8)
        image[..., 3] = 77
        draw_bounding_boxes(image, [ObjectDetection(RED, 0.5, Rectangle(10, 50, 30, 30))], False)
        self.assertTrue(np.all(image[..., 3] == 77))
        self.assertNotEqual(image[65, 10, 0], 0)


class TestDrawSegmentation(unittest.TestCase):
    def _segmentation(self) -> Segmentation:
        pixels = tuple(Pixel(x, y, 0.9) for y in range(4, 7) for x in range(4, 7))
        return Segmentation(RED, 0.8, Rectangle(5, 5, 10, 10), pixels)

    def test_overlay_marks_segmented_pixels(self) -> None:
        overlay = _build_mask_overlay(self._segmentation())
        self.assertEqual(overlay.shape, (10, 10, 4))
        self.assertEqual(overlay[5, 5].tolist(), [255, 0, 0, 255])
        self.assertEqual(overlay[0, 0].tolist(), [0, 0, 0, 0])
        self.assertEqual(int(np.count_nonzero(overlay[..., 3])), 9)

    def test_mask_is_alpha_blended(self) -> None:
        image = _gray(40, 40, 100)
        draw_segmentation(image, [self._segmentation()], max_workers=2)

        self.assertEqual(image[10, 10].tolist(), [143, 72, 72])
        # Inside the box but outside the mask
        self.assertEqual(image[12, 12].tolist(), [100, 100, 100])

    def test_blending_twice_differs_from_once(self) -> None:
        once = _gray(40, 40, 100)
        draw_segmentation(once, [self._segmentation()])
        twice = once.copy()
        draw_segmentation(twice, [self._segmentation()])

        self.assertEqual(twice[10, 10].tolist(), [174, 52, 52])
        self.assertNotEqual(once[10, 10].tolist(), twice[10, 10].tolist())

    def test_overlapping_instances_composite_in_order(self) -> None:
        blue = Label("dog", "#0000FF")
        pixels = (Pixel(5, 5, 0.9),)
        red_seg = Segmentation(RED, 0.8, Rectangle(5, 5, 10, 10), pixels)
        blue_seg = Segmentation(blue, 0.8, Rectangle(5, 5, 10, 10), pixels)

        image = _gray(40, 40, 100)
        draw_segmentation(image, [red_seg, blue_seg], max_workers=4)
        # red first: (143, 72, 72); then blue on top
        self.assertEqual(image[10, 10].tolist(), [103, 52, 123])

    def test_pixel_outside_rectangle_rejected(self) -> None:
        seg = Segmentation(RED, 0.8, Rectangle(5, 5, 10, 10), (Pixel(10, 0, 0.9),))
        with self.assertRaises(InvalidGeometryError):
            draw_segmentation(_gray(40, 40), [seg])


class TestDrawClassificationLabels(unittest.TestCase):
    def test_background_and_text_block(self) -> None:
        image = _gray(200, 300, 100)
        labels = [Classification("cat", 0.9), Classification("dog", 0.05)]
        draw_classification_labels(image, labels, draw_confidence=True)

        block_w, block_h, _ = measure_text_block(["cat (90%)", "dog (5%)"], DEFAULT_STYLE)
        # black at alpha 60 over gray 100
        self.assertEqual(image[17, 17].tolist(), [76, 76, 76])
        # just right of the background
        self.assertEqual(image[20, 16 + block_w + 16].tolist(), [100, 100, 100])
        # white text inside the block
        self.assertGreater(int(image[16 : 16 + block_h + 16, 16 : 16 + block_w + 16].max()), 200)
        self.assertEqual(image[190, 290].tolist(), [100, 100, 100])

    def test_line_spacing(self) -> None:
        _, one_h, _ = measure_text_block(["cat"], DEFAULT_STYLE)
        _, two_h, advance = measure_text_block(["cat", "dog"], DEFAULT_STYLE)
        self.assertEqual(advance, int(round(one_h * 1.5)))
        self.assertEqual(two_h, one_h + advance)

    def test_empty_input_draws_nothing(self) -> None:
        image = _gray(50, 50)
        draw_classification_labels(image, [])
        self.assertTrue(np.all(image == 50))


if __name__ == "__main__":
    unittest.main()
