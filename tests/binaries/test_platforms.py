"""Tests for platform detection and mapping."""
import pytest

from electron_manager.binaries.platforms import (
    MACOS_BUNDLE_EXECUTABLE,
    detect_arch,
    detect_platform,
    get_download_descriptor,
    get_platform_executable,
    is_macos_family,
)
from electron_manager.errors import UnsupportedPlatformError


@pytest.mark.parametrize(
    "system,expected",
    [
        ("linux", "linux"),
        ("darwin", "darwin"),
        ("win32", "win32"),
        ("freebsd13", "freebsd"),
        ("openbsd7", "openbsd"),
    ],
)
def test_detect_platform(system, expected):
    assert detect_platform(system) == expected


@pytest.mark.parametrize(
    "machine,expected",
    [
        ("x86_64", "x64"),
        ("AMD64", "x64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("i686", "ia32"),
        ("armv7l", "armv7l"),
    ],
)
def test_detect_arch(machine, expected):
    assert detect_arch(machine) == expected


@pytest.mark.parametrize(
    "platform_name,expected",
    [
        ("darwin", MACOS_BUNDLE_EXECUTABLE),
        ("mas", MACOS_BUNDLE_EXECUTABLE),
        ("linux", "electron"),
        ("freebsd", "electron"),
        ("openbsd", "electron"),
        ("win32", "electron.exe"),
    ],
)
def test_platform_executable(platform_name, expected):
    assert get_platform_executable(platform_name) == expected


def test_platform_executable_unsupported():
    with pytest.raises(UnsupportedPlatformError, match="not available on platform: sunos"):
        get_platform_executable("sunos")


def test_macos_family():
    assert is_macos_family("darwin")
    assert is_macos_family("mas")
    assert not is_macos_family("linux")


def test_download_descriptor():
    descriptor = get_download_descriptor("28.0.0", "linux", "x64")
    assert descriptor.file_name == "electron-28.0.0-linux-x64.zip"
    assert descriptor.url == (
        "https://github.com/electron/electron/releases/download/"
        "28.0.0/electron-28.0.0-linux-x64.zip"
    )


def test_download_descriptor_custom_host():
    descriptor = get_download_descriptor("v28.0.1", "darwin", "arm64", "https://mirror.example/")
    assert descriptor.url == "https://mirror.example/v28.0.1/electron-v28.0.1-darwin-arm64.zip"
