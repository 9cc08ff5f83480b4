"""
Setup script for the cognumbers-client package.

The library lives under src/cognumbers; internal modules (_*) are
implementation detail, the package root re-exports the public API.
"""

from setuptools import setup, find_packages

setup(
    name="cognumbers-client",
    version="1.0.0",
    description="Cognumbers client - sealed-choice minimum unique number game on an EVM chain",
    author="Cognumbers Team",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "web3>=7.0.0",
        "eth-account>=0.13.0",
        "hexbytes>=1.0.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "cognumbers=cognumbers.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
