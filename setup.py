from setuptools import setup, find_packages

setup(
    name="recipe-search",
    version="1.0.0",
    packages=find_packages(include=["recipe_search", "recipe_search.*"]),
    install_requires=[
        "pymongo>=4.13",
        "elasticsearch[async]>=8.12,<9",
        "pyyaml>=6.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "tabulate>=0.9.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23"
        ],
    },
    entry_points={
        "console_scripts": [
            "recipe-search=recipe_search.presentation.cli.main:main",
        ],
    },
    python_requires=">=3.10",
)
