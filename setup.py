#!/usr/bin/env python3
"""
Pingdom Exporter Setup Configuration
Prometheus exporter for Pingdom check status
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_requirements(path):
    with open(path, "r", encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip() and not line.startswith("#")]


setup(
    name="pingdom-exporter",
    version="1.0.0",
    description="Export Pingdom check status as Prometheus metrics",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=read_requirements("config/requirements.txt"),
    extras_require={
        "test": read_requirements("config/requirements-test.txt"),
    },
    entry_points={
        "console_scripts": [
            "pingdom-exporter=pingdom_exporter.cli:main",
        ],
    },
    keywords="prometheus exporter pingdom uptime monitoring",
)

#setup.py ends here
