# setup.py
from setuptools import setup, find_packages

setup(
    name="scratch_fetch",
    version="0.1.0",
    description="HTTPS fetch demo, statically compiled and packaged into a FROM scratch image",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"scratch_fetch": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "build": ["pyinstaller>=6.0", "staticx>=0.14"],
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23"],
    },
    entry_points={
        "console_scripts": [
            "scratch-fetch=scratch_fetch.main:main",
            "build-scratch=scratch_fetch.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
