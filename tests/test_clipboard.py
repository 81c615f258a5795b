from unittest.mock import patch

import pytest

from clipbox.clipboard import UnsupportedClipboardPort, get_clipboard_port
from clipbox.errors import PortNotFoundError, PortUnavailableError


class TestUnsupportedPort:
    def test_read_raises(self):
        with pytest.raises(PortUnavailableError) as exc:
            UnsupportedClipboardPort("sunos5").read_clipboard()
        assert "sunos5" in str(exc.value)

    def test_write_text_raises(self):
        with pytest.raises(PortUnavailableError):
            UnsupportedClipboardPort("sunos5").write_text("x")

    def test_missing_image_checked_before_platform(self, tmp_path):
        with pytest.raises(PortNotFoundError):
            UnsupportedClipboardPort("sunos5").write_image_from_file(tmp_path / "missing.png")

    def test_existing_image_raises_unavailable(self, png_file):
        with pytest.raises(PortUnavailableError):
            UnsupportedClipboardPort("sunos5").write_image_from_file(png_file)


class TestGetClipboardPort:
    def test_windows(self):
        with patch("clipbox.clipboard_windows.WindowsClipboardPort") as mock_cls:
            port = get_clipboard_port("win32")
        assert port is mock_cls.return_value

    def test_linux(self):
        from clipbox.clipboard_linux import LinuxClipboardPort

        assert isinstance(get_clipboard_port("linux"), LinuxClipboardPort)

    def test_macos(self):
        with patch("clipbox.clipboard_macos.MacClipboardPort") as mock_cls:
            port = get_clipboard_port("darwin")
        assert port is mock_cls.return_value

    def test_unknown_platform(self):
        assert isinstance(get_clipboard_port("sunos5"), UnsupportedClipboardPort)


class TestCanonicalImage:
    def test_default_is_unchanged(self, fake_port):
        uri = "data:image/png;base64,iVBORw0KGgo="
        assert fake_port.canonical_image(uri) == uri
