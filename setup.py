"""
Setup script for manas-adaptive-core.

The adaptive control loop behind the Manas mini-games:

1. Difficulty Controller - trial-by-trial staircase per game session
2. Mastery Tracker - DTT mastery levels and half-life spaced repetition
3. Stage Schedule Generator - personalized, review-aware stage curricula

The 'manas' command is a developer CLI for simulations and stage previews.
"""

from setuptools import find_packages, setup

setup(
    name="manas-adaptive-core",
    version="0.1.0",
    description="Adaptive difficulty, mastery tracking and stage scheduling for cognitive mini-games",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Manas",
    packages=find_packages(include=["manas", "manas.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "manas=manas.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="adaptive-difficulty spaced-repetition mastery cognitive-training",
)
