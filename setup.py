#!/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name="quake_log_tools",
    version="1.0.0",
    description="Python tools for Quake server log parsing and per-match kill statistics",
    author="GeNe FRAG",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "pandas>=1.0.0",
        "openpyxl>=3.0.0",
        "matplotlib>=3.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "quake-kill-report=quake_log_tools.tools.kill_report:main",
            "quake-means-plot=quake_log_tools.tools.means_plotter:main",
        ],
    },
)
