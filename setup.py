"""Sonos Now Playing setup."""
from pathlib import Path

from setuptools import find_packages, setup

PROJECT_NAME = "Sonos Now Playing"
PROJECT_PACKAGE_NAME = "sonos_nowplaying"
PROJECT_VERSION = "0.3.0"
PROJECT_REQ_PYTHON_VERSION = "3.11"
PROJECT_LICENSE = "Apache License 2.0"

PROJECT_DIR = Path(__file__).parent.resolve()
README_FILE = PROJECT_DIR / "README.md"
REQUIREMENTS_FILE = PROJECT_DIR / "requirements.txt"
REQUIREMENTS_TEST_FILE = PROJECT_DIR / "requirements_test.txt"
PACKAGES = find_packages(exclude=["tests", "tests.*"])

setup(
    name=PROJECT_PACKAGE_NAME,
    version=PROJECT_VERSION,
    license=PROJECT_LICENSE,
    description="Multi-room transport control and now playing aggregation for Sonos speakers",
    long_description=README_FILE.read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=PACKAGES,
    include_package_data=True,
    zip_safe=False,
    install_requires=REQUIREMENTS_FILE.read_text(encoding="utf-8").splitlines(),
    extras_require={"test": REQUIREMENTS_TEST_FILE.read_text(encoding="utf-8").splitlines()},
    python_requires=f">={PROJECT_REQ_PYTHON_VERSION}",
    test_suite="tests",
    entry_points={"console_scripts": ["sonos-nowplaying = sonos_nowplaying.__main__:main"]},
)
