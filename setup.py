from setuptools import setup, find_packages

setup(
    name="stein-shrinkage",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "scipy>=1.10.0",
        "matplotlib>=3.7.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "stein-shrinkage=stein_shrinkage.cli:main",
        ],
    },
    author="Votre Nom",
    description="James–Stein shrinkage and ridge regression: reproducible simulations for the report",
    python_requires=">=3.10",
)
