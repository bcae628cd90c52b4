"""
setup.py

Packaging metadata and CLI entry point for audiodiary.

Version: 0.3.0 - Async transcription core (AssemblyAI upload-and-poll,
OpenAI Whisper, Google Speech, Azure Speech, on-device and local mock
providers) behind the audiodiary click group.
"""
from setuptools import setup, find_packages

setup(
    name="audiodiary",
    version="0.3.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "httpx",
        "openai>=1.0",
        "pydantic>=2.0",
        "python-dotenv",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "audiodiary=cli:cli",
        ],
    },
    python_requires=">=3.8",
)
