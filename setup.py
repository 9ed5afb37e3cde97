from setuptools import setup, find_packages

setup(
    name="index-rebalancer",
    version="1.0.0",
    author="Index Rebalancer Team",
    description="Index-weighted portfolio rebalancing calculation engine",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "index_rebalancer": ["py.typed"],
        "rebalancer_config": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML==6.0.2",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "index-rebalancer=index_rebalancer.cli:main",
        ],
    },
    python_requires=">=3.11",
)
