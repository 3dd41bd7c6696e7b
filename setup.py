"""Setup configuration for metabase-export."""

from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="metabase-export",
    version="1.0.0",
    description="Dump Metabase content to a version-control friendly YAML tree",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["metabase_export", "metabase_export.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.11",
    install_requires=[
        "python-dotenv>=1.0.0",
        "requests>=2.32.0",
        "pyyaml>=6.0.0",
        "ruff>=0.8.0",
    ],
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        "console_scripts": [
            "metabase-export=metabase_export.cli:main",
        ],
    },
)
