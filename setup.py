"""Setup configuration for prmetrics"""

from setuptools import setup, find_packages

setup(
    name="pr-metrics-dashboard",
    version="0.1.0",
    description=(
        "CLI tool for GitHub pull request metrics: merge throughput, cycle "
        "time, contributors, size and weekday distribution."
    ),
    author="PR Metrics Dashboard Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "pr-metrics-dashboard=prmetrics.main:main",
        ],
    },
)
