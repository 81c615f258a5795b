import pytest

from clipbox.classifier import Outcome, classify, is_image_data_uri, is_noise
from clipbox.models import ClipboardSample

IMAGE_URI = "data:image/png;base64,iVBORw0KGgo="


class TestHelpers:
    @pytest.mark.parametrize(
        "text",
        [
            "36:90: execution error: Can't make some data into the expected type. (-1700)",
            "osascript 输出: Ok(Output { status: ExitStatus(unix_wait_status(256)) })",
        ],
    )
    def test_noise_detected(self, text):
        assert is_noise(text)

    def test_regular_text_is_not_noise(self):
        assert not is_noise("meeting notes for tuesday")

    def test_image_data_uri(self):
        assert is_image_data_uri(IMAGE_URI)
        assert not is_image_data_uri("data:text/plain,hello")
        assert not is_image_data_uri("see data:image/png;base64,AAAA")


class TestClassify:
    def test_empty_sample_ignored(self):
        assert classify(ClipboardSample.empty(), "") == Outcome.IGNORE

    def test_whitespace_text_ignored(self):
        assert classify(ClipboardSample.text("  \n\t"), "") == Outcome.IGNORE

    def test_noise_ignored(self):
        sample = ClipboardSample.text("execution error: clipboard has no PNG")
        assert classify(sample, "") == Outcome.IGNORE

    def test_novel_text(self):
        assert classify(ClipboardSample.text("hello"), "") == Outcome.NOVEL_TEXT

    def test_repeated_text_ignored(self):
        assert classify(ClipboardSample.text("hello"), "hello") == Outcome.IGNORE

    def test_comparison_is_exact(self):
        assert classify(ClipboardSample.text("hello "), "hello") == Outcome.NOVEL_TEXT

    def test_encoded_image_text_passes_through(self):
        assert classify(ClipboardSample.text(IMAGE_URI), "") == Outcome.PASS_THROUGH

    def test_repeated_pass_through_ignored(self):
        assert classify(ClipboardSample.text(IMAGE_URI), IMAGE_URI) == Outcome.IGNORE

    def test_novel_image(self):
        assert classify(ClipboardSample.image(IMAGE_URI), "hello") == Outcome.NOVEL_IMAGE

    def test_repeated_image_ignored(self):
        assert classify(ClipboardSample.image(IMAGE_URI), IMAGE_URI) == Outcome.IGNORE
