"""
Setup configuration for Series Engine package
Time-series transformations for charting: LTTB downsampling and technical indicators
"""

from setuptools import setup, find_packages


# Read long description from README
def read_long_description():
    try:
        with open("README.md", "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        return "LTTB downsampling and technical indicators for chart data preparation"


# Create package list with proper namespace
def get_packages():
    """
    Map the src/ tree onto the series_engine namespace:
    src/ -> series_engine, src/indicators -> series_engine.indicators, ...
    """
    base_packages = find_packages(where="src", exclude=["*.egg-info", "__pycache__"])
    return ["series_engine"] + [f"series_engine.{pkg}" for pkg in base_packages]


setup(
    name="ml-framework-series-engine",
    version="1.0.0",
    author="ML-Framework Team",
    author_email="dev@ml-framework.dev",
    description="Time-series transformation engine for charting - LTTB downsampling, SMA, EMA, RSI, VWAP",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=get_packages(),
    package_dir={
        "series_engine": "src",
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Investment",
        "Topic :: Scientific/Engineering :: Visualization",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21.0",
        "pandas>=1.3.0",
        "numba>=0.56.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
            "mypy>=0.991",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    zip_safe=False,
    keywords=[
        "trading", "charting", "technical-analysis", "indicators",
        "downsampling", "lttb", "time-series", "numpy", "pandas", "numba",
    ],
)
