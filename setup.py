from setuptools import setup, find_packages

setup(
    name = "bibcapture",
    version = "0.1.0",
    packages = find_packages(include=["bibcapture", "bibcapture.*"]),
    install_requires=[
        "aiofiles",
        "aiohttp",
        "loguru",
        "pydantic",
        "PyYAML",
        "tqdm",
        "bibtexparser>=1.4,<2",
        "pytest-asyncio==1.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio==1.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bibcapture=bibcapture.cli:cli",
        ],
    },
    python_requires = ">=3.9",
)
